"""
Run the Ad Creative Optimizer application
"""
import uvicorn
from adcreative.core.config import settings

if __name__ == "__main__":
    uvicorn.run(
        "adcreative.main:app",
        host="0.0.0.0",
        port=8201,
        reload=settings.DEBUG,
        log_level="debug" if settings.DEBUG else "info",
    )
