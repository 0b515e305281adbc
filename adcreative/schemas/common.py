"""
Response envelope shared by all endpoints
"""
from typing import Optional, Generic, TypeVar, Any
from pydantic import BaseModel

T = TypeVar("T")


class DataResponse(BaseModel, Generic[T]):
    """Successful response"""
    success: bool = True
    data: Optional[T] = None


class ErrorResponse(BaseModel):
    """Error response; detail only for validation errors"""
    success: bool = False
    error: str
    detail: Optional[Any] = None
