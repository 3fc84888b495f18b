from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime

from models.order import OrderStatus, PaymentMethod
from schemas.common import ORMBase
from schemas.user import Address


# Output schema for an individual order line item
class OrderItemOut(ORMBase):
    product_id: Optional[int] = None
    product_name: str
    thumbnail: Optional[str] = None
    variant_id: Optional[str] = None
    size: Optional[str] = None
    quantity: int
    price: float
    total_price: float


# Input schema for checking out the current cart
class OrderCreatePayload(BaseModel):
    address_id: str
    payment_method: PaymentMethod
    shipping_method: Optional[str] = None
    coupon_code: Optional[str] = None
    notes: Optional[str] = None


# Output schema representing the full order details
class OrderResponse(ORMBase):
    id: int
    order_number: str
    user_id: int
    user_email: str
    user_name: Optional[str] = None
    items: List[OrderItemOut]
    subtotal: float
    tax: float
    discount: float
    coupon_code: Optional[str] = None
    total: float
    status: str
    notes: Optional[str] = None
    cancel_reason: Optional[str] = None

    shipping_address: Address
    shipping_method: Optional[str] = None
    shipping_cost: float
    tracking_id: Optional[str] = None
    carrier: Optional[str] = None

    payment_method: str
    payment_status: str
    transaction_id: Optional[str] = None
    paid_at: Optional[datetime] = None

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class OrderCancel(BaseModel):
    reason: Optional[str] = None


# Schema for updating order status (admin)
class OrderStatusPatch(BaseModel):
    status: OrderStatus
    tracking_id: Optional[str] = None
    carrier: Optional[str] = None
    cancel_reason: Optional[str] = None
