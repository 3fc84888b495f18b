from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel

from schemas.common import ORMBase
from schemas.order import OrderResponse
from schemas.product import ProductOut
from schemas.user import UserResponse


class DashboardOverview(BaseModel):
    total_products: int
    active_products: int
    total_users: int
    total_orders: int
    pending_orders: int
    processing_orders: int
    delivered_orders: int
    total_revenue: float
    today_orders: int
    today_revenue: float


# Revenue and order count for one calendar month
class MonthlyStat(BaseModel):
    year: int
    month: int
    revenue: float
    orders: int


class DashboardStats(BaseModel):
    overview: DashboardOverview
    recent_orders: List[OrderResponse]
    low_stock_products: List[ProductOut]
    monthly_stats: List[MonthlyStat]


class UserDetail(BaseModel):
    user: UserResponse
    orders: List[OrderResponse]


class LogResponse(ORMBase):
    id: int
    user_id: Optional[int] = None
    action: str
    resource: str
    status: str
    ip: Optional[str] = None
    ts: datetime
    meta: Optional[Any] = None
