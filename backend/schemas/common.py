from typing import Generic, List, Optional, TypeVar
from pydantic import BaseModel, ConfigDict

T = TypeVar("T")


# Base configuration for ORM compatibility
class ORMBase(BaseModel):
    model_config = ConfigDict(from_attributes=True)


# Response envelope shared by every endpoint
class ApiResponse(BaseModel, Generic[T]):
    success: bool = True
    message: Optional[str] = None
    data: Optional[T] = None
    error: Optional[str] = None


# Envelope for paginated lists
class PaginatedResponse(BaseModel, Generic[T]):
    success: bool = True
    data: List[T]
    page: int
    limit: int
    total: int
    total_pages: int
