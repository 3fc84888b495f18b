from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from schemas.common import ORMBase


class ReviewCreate(BaseModel):
    product_id: int
    rating: int = Field(ge=1, le=5)
    title: Optional[str] = None
    comment: str
    images: List[str] = []


class ReviewUpdate(BaseModel):
    rating: Optional[int] = Field(None, ge=1, le=5)
    title: Optional[str] = None
    comment: Optional[str] = None
    images: Optional[List[str]] = None


class ReviewOut(ORMBase):
    id: int
    product_id: int
    user_id: int
    user_name: Optional[str] = None
    user_avatar: Optional[str] = None
    rating: int
    title: Optional[str] = None
    comment: Optional[str] = None
    images: List[str] = []
    is_verified: bool
    helpful_count: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# Reviews of one product together with the aggregate rating
class ProductReviews(BaseModel):
    reviews: List[ReviewOut]
    count: int
    avg_rating: float
