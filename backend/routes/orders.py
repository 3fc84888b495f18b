# backend/routes/orders.py
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from database import get_db
from utils.tokenJWT import get_current_user
from utils.audit import write_log, client_ip
from utils.helpers import generate_order_number
from utils.pricing import line_total, order_totals, to_money
from models.users import User
from models.product import Product
from models.cart import Cart
from models.order import Order, OrderItem, OrderStatus, PaymentMethod, PaymentStatus, CANCELLABLE_STATUSES
from schemas.common import ApiResponse
from schemas.order import OrderResponse, OrderCreatePayload, OrderCancel
from utils.responses import ok

router = APIRouter(prefix="/orders", tags=["Orders"])
logger = logging.getLogger(__name__)


def _find_address(user: User, address_id: str):
    for address in user.addresses or []:
        if address.get("id") == address_id:
            return dict(address)
    return None


def _adjust_stock(db: Session, order: Order, sign: int) -> None:
    # sign=-1 reserves stock for a new order, sign=+1 gives it back
    for item in order.items:
        if item.product_id is None:
            continue
        product = db.query(Product).filter(Product.id == item.product_id).first()
        if product:
            product.stock = (product.stock or 0) + sign * item.quantity


def _get_own_order(db: Session, order_id: int, user: User) -> Order:
    order = db.query(Order).filter(Order.id == order_id, Order.user_id == user.id).first()
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    return order


# Place an order from the current cart
@router.post("", response_model=ApiResponse[OrderResponse], status_code=status.HTTP_201_CREATED)
def create_order(
    payload: OrderCreatePayload,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    shipping_address = _find_address(current_user, payload.address_id)
    if shipping_address is None:
        raise HTTPException(status_code=400, detail="Invalid address")

    cart = db.query(Cart).filter(Cart.user_id == current_user.id).first()
    if not cart or not cart.items:
        raise HTTPException(status_code=400, detail="Cart is empty")

    subtotal = to_money(cart.total)
    tax, shipping_cost, total = order_totals(subtotal)

    # Cash on delivery needs no payment step before confirmation
    is_cod = payload.payment_method == PaymentMethod.COD

    order = Order(
        order_number=generate_order_number(),
        user_id=current_user.id,
        user_email=current_user.email,
        user_name=current_user.full_name,
        subtotal=subtotal,
        tax=tax,
        discount=0,
        coupon_code=payload.coupon_code,
        total=total,
        status=OrderStatus.CONFIRMED.value if is_cod else OrderStatus.PENDING.value,
        notes=payload.notes,
        shipping_address=shipping_address,
        shipping_method=payload.shipping_method,
        shipping_cost=shipping_cost,
        payment_method=payload.payment_method.value,
        payment_status=PaymentStatus.PENDING.value,
    )
    for it in cart.items:
        order.items.append(OrderItem(
            product_id=it.product_id,
            product_name=it.product_name,
            thumbnail=it.thumbnail,
            variant_id=it.variant_id or None,
            size=it.size,
            quantity=it.quantity,
            price=it.price,
            total_price=line_total(it.price, it.quantity),
        ))
    db.add(order)
    db.commit()
    db.refresh(order)

    # Cart removal and stock reservation are separate commits after the insert
    db.delete(cart)
    db.commit()

    _adjust_stock(db, order, -1)
    db.commit()
    db.refresh(order)

    write_log(
        db,
        user_id=current_user.id,
        action="ORDER_CREATE",
        resource="orders",
        ip=client_ip(request),
        meta={"order_id": order.id, "order_number": order.order_number, "total": float(order.total)},
    )
    return ok(OrderResponse.model_validate(order), "Order placed successfully")


@router.get("", response_model=ApiResponse[List[OrderResponse]])
def list_my_orders(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    orders = (
        db.query(Order)
        .filter(Order.user_id == current_user.id)
        .order_by(Order.created_at.desc(), Order.id.desc())
        .all()
    )
    return ok([OrderResponse.model_validate(o) for o in orders])


@router.get("/{order_id}", response_model=ApiResponse[OrderResponse])
def get_order(order_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    order = _get_own_order(db, order_id, current_user)
    return ok(OrderResponse.model_validate(order))


@router.post("/{order_id}/cancel", response_model=ApiResponse[OrderResponse])
def cancel_order(
    order_id: int,
    request: Request,
    payload: Optional[OrderCancel] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    order = _get_own_order(db, order_id, current_user)

    if order.status not in CANCELLABLE_STATUSES:
        write_log(
            db, user_id=current_user.id, action="ORDER_CANCEL", resource="orders", status="FAIL",
            ip=client_ip(request), meta={"order_id": order.id, "status": order.status},
        )
        raise HTTPException(status_code=400, detail="Order cannot be cancelled")

    order.status = OrderStatus.CANCELLED.value
    order.cancel_reason = payload.reason if payload else None
    _adjust_stock(db, order, +1)
    db.commit()
    db.refresh(order)

    logger.info("Order %s cancelled by user %s", order.order_number, current_user.id)
    write_log(
        db, user_id=current_user.id, action="ORDER_CANCEL", resource="orders",
        ip=client_ip(request), meta={"order_id": order.id},
    )
    return ok(OrderResponse.model_validate(order), "Order cancelled")
