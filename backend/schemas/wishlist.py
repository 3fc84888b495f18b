from typing import List
from pydantic import BaseModel

from schemas.product import ProductSummary


class WishlistAdd(BaseModel):
    product_id: int


class WishlistOut(BaseModel):
    products: List[ProductSummary]
