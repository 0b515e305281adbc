"""
API v1 routes
"""
from fastapi import APIRouter

from adcreative.api.v1 import health, optimizer

api_router = APIRouter(prefix="/api/v1")

# Include routers
api_router.include_router(health.router)
api_router.include_router(optimizer.router)
