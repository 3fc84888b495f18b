# backend/schemas/product.py
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from models.product import MetalType
from schemas.common import ORMBase


# Sized/priced option of a product, e.g. a ring size
class ProductVariant(BaseModel):
    id: Optional[str] = None
    size: Optional[str] = None
    weight: float = Field(0, ge=0)  # in grams
    price: float = Field(..., ge=0)
    stock: int = Field(0, ge=0)
    sku: Optional[str] = None
    is_default: bool = False


# Schema for creating a new product
class ProductCreate(BaseModel):
    name: str = Field(min_length=1)
    description: str
    short_desc: Optional[str] = None
    metal_type: MetalType
    purity: str
    category_id: int
    images: List[str] = []
    thumbnail: Optional[str] = None
    base_price: float = Field(..., gt=0)
    discount_percent: float = Field(0, ge=0, le=100)
    variants: List[ProductVariant] = []
    tags: List[str] = []
    features: List[str] = []
    is_featured: bool = False
    is_new_arrival: bool = False
    is_best_seller: bool = False
    stock: int = Field(0, ge=0)


# Schema for partial product updates
class ProductUpdate(BaseModel):
    """All fields optional; only the ones sent are applied."""
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    short_desc: Optional[str] = None
    metal_type: Optional[MetalType] = None
    purity: Optional[str] = None
    category_id: Optional[int] = None
    images: Optional[List[str]] = None
    thumbnail: Optional[str] = None
    base_price: Optional[float] = Field(None, gt=0)
    discount_percent: Optional[float] = Field(None, ge=0, le=100)
    variants: Optional[List[ProductVariant]] = None
    tags: Optional[List[str]] = None
    features: Optional[List[str]] = None
    is_featured: Optional[bool] = None
    is_new_arrival: Optional[bool] = None
    is_best_seller: Optional[bool] = None
    is_active: Optional[bool] = None
    stock: Optional[int] = Field(None, ge=0)


# Full product representation
class ProductOut(ORMBase):
    id: int
    name: str
    slug: str
    description: Optional[str] = None
    short_desc: Optional[str] = None
    metal_type: Optional[str] = None
    purity: Optional[str] = None
    category_id: Optional[int] = None
    category_name: Optional[str] = None
    images: List[str] = []
    thumbnail: Optional[str] = None
    base_price: float
    discount_price: float
    discount_percent: float
    variants: List[ProductVariant] = []
    tags: List[str] = []
    features: List[str] = []
    is_featured: bool
    is_new_arrival: bool
    is_best_seller: bool
    is_active: bool
    stock: int
    rating: float
    review_count: int
    seller_id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# Compact product card used by the wishlist and dashboard
class ProductSummary(ORMBase):
    id: int
    name: str
    slug: str
    thumbnail: Optional[str] = None
    base_price: float
    discount_price: float
    metal_type: Optional[str] = None
    is_active: bool
    stock: int
