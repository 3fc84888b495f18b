from datetime import datetime
from pydantic import BaseModel, Field, field_validator
from typing import List, Optional

from schemas.common import ORMBase

# Request schema for adding an item to the cart
class CartAddItem(BaseModel):
    product_id: int
    variant_id: Optional[str] = None
    quantity: int = Field(ge=1)

# Request schema for updating cart item quantity; 0 removes the line
class CartUpdateItem(BaseModel):
    quantity: int = Field(ge=0)

# Response schema for a single cart line item
class CartItemOut(ORMBase):
    product_id: int
    product_name: str
    thumbnail: Optional[str] = None
    variant_id: Optional[str] = None
    size: Optional[str] = None
    price: float
    quantity: int
    added_at: Optional[datetime] = None

    @field_validator("variant_id")
    @classmethod
    def _blank_variant(cls, value):
        return value or None

# Response schema for the entire cart
class CartOut(BaseModel):
    user_id: int
    items: List[CartItemOut]
    total: float
    updated_at: Optional[datetime] = None
