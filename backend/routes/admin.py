# backend/routes/admin.py
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy import func
from sqlalchemy.orm import Session

from database import get_db
from models.users import User
from models.category import Category
from models.product import Product
from models.cart import Cart, CartItem
from models.wishlist import WishlistItem
from models.review import Review
from models.order import Order, OrderItem, OrderStatus, PaymentStatus
from schemas.common import ApiResponse, PaginatedResponse
from schemas.user import UserResponse, AdminUserUpdate
from schemas.product import ProductCreate, ProductUpdate, ProductOut
from schemas.category import CategoryCreate, CategoryUpdate, CategoryOut
from schemas.order import OrderResponse, OrderStatusPatch
from schemas.admin import DashboardOverview, DashboardStats, MonthlyStat, UserDetail
from utils.tokenJWT import admin_required
from utils.audit import write_log, client_ip
from utils.helpers import generate_slug, generate_sku, new_object_id
from utils.pricing import calculate_discount_price, cart_total, to_money
from utils.responses import ok, paginated

router = APIRouter(prefix="/admin", tags=["Admin"])

LOW_STOCK_THRESHOLD = 10
DASHBOARD_LIST_LIMIT = 10
MONTHS_IN_CHART = 6


def _utcnow() -> datetime:
    # Naive UTC, matching what the database hands back for server-side now()
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _months_back(now: datetime, months: int) -> datetime:
    month_index = now.year * 12 + (now.month - 1) - months
    return datetime(month_index // 12, month_index % 12 + 1, 1)


def _sum_total(query) -> float:
    return float(query.with_entities(func.coalesce(func.sum(Order.total), 0)).scalar() or 0)


# ==========================================
#  DASHBOARD
# ==========================================
@router.get("/dashboard", response_model=ApiResponse[DashboardStats])
def dashboard(db: Session = Depends(get_db), current_user: User = Depends(admin_required)):
    orders = db.query(Order)
    today = _utcnow().replace(hour=0, minute=0, second=0, microsecond=0)

    overview = DashboardOverview(
        total_products=db.query(Product).count(),
        active_products=db.query(Product).filter(Product.is_active.is_(True)).count(),
        total_users=db.query(User).count(),
        total_orders=orders.count(),
        pending_orders=orders.filter(Order.status == OrderStatus.PENDING.value).count(),
        processing_orders=orders.filter(Order.status == OrderStatus.PROCESSING.value).count(),
        delivered_orders=orders.filter(Order.status == OrderStatus.DELIVERED.value).count(),
        # Revenue counts only orders that have left the warehouse
        total_revenue=_sum_total(orders.filter(
            Order.status.in_([OrderStatus.SHIPPED.value, OrderStatus.DELIVERED.value])
        )),
        today_orders=orders.filter(Order.created_at >= today).count(),
        today_revenue=_sum_total(orders.filter(Order.created_at >= today)),
    )

    recent_orders = (
        db.query(Order).order_by(Order.created_at.desc(), Order.id.desc()).limit(DASHBOARD_LIST_LIMIT).all()
    )
    low_stock = (
        db.query(Product)
        .filter(Product.stock < LOW_STOCK_THRESHOLD, Product.is_active.is_(True))
        .order_by(Product.stock.asc(), Product.id.asc())
        .limit(DASHBOARD_LIST_LIMIT)
        .all()
    )

    # Monthly revenue chart: only months that have orders appear
    since = _months_back(_utcnow(), MONTHS_IN_CHART - 1)
    buckets = {}
    for created_at, total in db.query(Order.created_at, Order.total).filter(Order.created_at >= since):
        key = (created_at.year, created_at.month)
        revenue, count = buckets.get(key, (0.0, 0))
        buckets[key] = (revenue + float(total or 0), count + 1)
    monthly = [
        MonthlyStat(year=year, month=month, revenue=round(revenue, 2), orders=count)
        for (year, month), (revenue, count) in sorted(buckets.items())
    ]

    return ok(DashboardStats(
        overview=overview,
        recent_orders=[OrderResponse.model_validate(o) for o in recent_orders],
        low_stock_products=[ProductOut.model_validate(p) for p in low_stock],
        monthly_stats=monthly,
    ))


# ==========================================
#  USERS
# ==========================================
@router.get("/users", response_model=PaginatedResponse[UserResponse])
def list_users(
    role: Optional[str] = Query(None, description="Filter by role"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db),
    current_user: User = Depends(admin_required),
):
    query = db.query(User)
    if role:
        query = query.filter(User.role == role.lower())

    total = query.count()
    users = (
        query.order_by(User.created_at.desc(), User.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return paginated([UserResponse.model_validate(u) for u in users], page, limit, total)


@router.get("/users/{user_id}", response_model=ApiResponse[UserDetail])
def get_user(user_id: int, db: Session = Depends(get_db), current_user: User = Depends(admin_required)):
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    orders = (
        db.query(Order)
        .filter(Order.user_id == user.id)
        .order_by(Order.created_at.desc(), Order.id.desc())
        .limit(DASHBOARD_LIST_LIMIT)
        .all()
    )
    return ok(UserDetail(
        user=UserResponse.model_validate(user),
        orders=[OrderResponse.model_validate(o) for o in orders],
    ))


# Change role and/or activation state of an account
@router.put("/users/{user_id}", response_model=ApiResponse[UserResponse])
def update_user(
    user_id: int,
    payload: AdminUserUpdate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(admin_required),
):
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    if payload.role is not None:
        user.role = payload.role.value
    if payload.is_active is not None:
        user.is_active = payload.is_active
        if not payload.is_active:
            # Deactivated accounts cannot refresh their session
            user.refresh_token = None

    db.commit()
    db.refresh(user)

    write_log(
        db, user_id=current_user.id, action="USER_UPDATE", resource="admin", ip=client_ip(request),
        meta={"target_user_id": user.id, "role": user.role, "is_active": user.is_active},
    )
    return ok(UserResponse.model_validate(user), "User updated successfully")


# ==========================================
#  PRODUCTS
# ==========================================
def _get_category(db: Session, category_id: int) -> Category:
    category = db.query(Category).filter(Category.id == category_id).first()
    if not category:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid category")
    return category


def _prepare_variants(variants, product: Product) -> list:
    prepared = []
    for index, variant in enumerate(variants, start=1):
        data = variant.model_dump() if hasattr(variant, "model_dump") else dict(variant)
        if not data.get("id"):
            data["id"] = new_object_id()
        if not data.get("sku"):
            data["sku"] = generate_sku(product.metal_type, product.category_name, product.id * 100 + index)
        prepared.append(data)
    return prepared


@router.get("/products", response_model=PaginatedResponse[ProductOut])
def list_all_products(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db),
    current_user: User = Depends(admin_required),
):
    query = db.query(Product)
    total = query.count()
    products = (
        query.order_by(Product.created_at.desc(), Product.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return paginated([ProductOut.model_validate(p) for p in products], page, limit, total)


@router.post("/products", response_model=ApiResponse[ProductOut], status_code=status.HTTP_201_CREATED)
def create_product(
    payload: ProductCreate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(admin_required),
):
    category = _get_category(db, payload.category_id)

    data = payload.model_dump(exclude={"variants", "metal_type", "base_price"})
    product = Product(
        **data,
        slug=generate_slug(payload.name),
        metal_type=payload.metal_type.value,
        category_name=category.name,
        base_price=to_money(payload.base_price),
        discount_price=calculate_discount_price(payload.base_price, payload.discount_percent),
        variants=[],
        is_active=True,
        rating=0,
        review_count=0,
        seller_id=current_user.id,
    )
    db.add(product)
    db.flush()

    # SKUs embed the product id, so variants are filled in after the insert
    product.variants = _prepare_variants(payload.variants, product)
    db.commit()
    db.refresh(product)

    write_log(db, user_id=current_user.id, action="PRODUCT_CREATE", resource="products",
              ip=client_ip(request), meta={"product_id": product.id, "name": product.name})
    return ok(ProductOut.model_validate(product), "Product created successfully")


@router.put("/products/{product_id}", response_model=ApiResponse[ProductOut])
def update_product(
    product_id: int,
    payload: ProductUpdate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(admin_required),
):
    product = db.query(Product).filter(Product.id == product_id).first()
    if not product:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")

    changes = payload.model_dump(exclude_unset=True, exclude={"variants"})
    # Explicit nulls are treated as "not sent"
    changes = {k: v for k, v in changes.items() if v is not None}

    if "name" in changes:
        product.slug = generate_slug(changes["name"])
    if "metal_type" in changes:
        changes["metal_type"] = changes["metal_type"].value
    if "category_id" in changes:
        product.category_name = _get_category(db, changes["category_id"]).name
    if "base_price" in changes:
        changes["base_price"] = to_money(changes["base_price"])

    for key, value in changes.items():
        setattr(product, key, value)

    if "base_price" in changes or "discount_percent" in changes:
        product.discount_price = calculate_discount_price(product.base_price, product.discount_percent)

    if payload.variants is not None:
        product.variants = _prepare_variants(payload.variants, product)

    db.commit()
    db.refresh(product)

    write_log(db, user_id=current_user.id, action="PRODUCT_UPDATE", resource="products",
              ip=client_ip(request), meta={"product_id": product.id, "fields": sorted(changes)})
    return ok(ProductOut.model_validate(product), "Product updated successfully")


@router.delete("/products/{product_id}", response_model=ApiResponse[None])
def delete_product(
    product_id: int,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(admin_required),
):
    product = db.query(Product).filter(Product.id == product_id).first()
    if not product:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")

    # Drop dependent rows explicitly; SQLite does not enforce ON DELETE by default
    carts = db.query(Cart).join(CartItem).filter(CartItem.product_id == product.id).all()
    for cart in carts:
        for it in [it for it in cart.items if it.product_id == product.id]:
            cart.items.remove(it)
        cart.total = cart_total(cart.items)
    db.query(WishlistItem).filter(WishlistItem.product_id == product.id).delete(synchronize_session=False)
    db.query(Review).filter(Review.product_id == product.id).delete(synchronize_session=False)
    db.query(OrderItem).filter(OrderItem.product_id == product.id).update(
        {OrderItem.product_id: None}, synchronize_session=False
    )
    db.delete(product)
    db.commit()

    write_log(db, user_id=current_user.id, action="PRODUCT_DELETE", resource="products",
              ip=client_ip(request), meta={"product_id": product_id})
    return ok(message="Product deleted successfully")


# ==========================================
#  ORDERS
# ==========================================
@router.get("/orders", response_model=PaginatedResponse[OrderResponse])
def list_all_orders(
    status_filter: Optional[OrderStatus] = Query(None, alias="status"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db),
    current_user: User = Depends(admin_required),
):
    query = db.query(Order)
    if status_filter:
        query = query.filter(Order.status == status_filter.value)

    total = query.count()
    orders = (
        query.order_by(Order.created_at.desc(), Order.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return paginated([OrderResponse.model_validate(o) for o in orders], page, limit, total)


# Any status may be set; delivery also settles the payment
@router.put("/orders/{order_id}/status", response_model=ApiResponse[OrderResponse])
def update_order_status(
    order_id: int,
    payload: OrderStatusPatch,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(admin_required),
):
    order = db.query(Order).filter(Order.id == order_id).first()
    if not order:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Order not found")

    previous = order.status
    order.status = payload.status.value
    if payload.tracking_id:
        order.tracking_id = payload.tracking_id
    if payload.carrier:
        order.carrier = payload.carrier
    if payload.cancel_reason:
        order.cancel_reason = payload.cancel_reason
    if payload.status == OrderStatus.DELIVERED:
        order.payment_status = PaymentStatus.COMPLETED.value
        order.paid_at = datetime.now(timezone.utc)

    db.commit()
    db.refresh(order)

    write_log(db, user_id=current_user.id, action="ORDER_STATUS", resource="orders",
              ip=client_ip(request), meta={"order_id": order.id, "from": previous, "to": order.status})
    return ok(OrderResponse.model_validate(order), "Order status updated")


# ==========================================
#  CATEGORIES
# ==========================================
@router.post("/categories", response_model=ApiResponse[CategoryOut], status_code=status.HTTP_201_CREATED)
def create_category(
    payload: CategoryCreate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(admin_required),
):
    category = Category(**payload.model_dump(), slug=generate_slug(payload.name), is_active=True)
    db.add(category)
    db.commit()
    db.refresh(category)

    write_log(db, user_id=current_user.id, action="CATEGORY_CREATE", resource="categories",
              ip=client_ip(request), meta={"category_id": category.id, "name": category.name})
    return ok(CategoryOut.model_validate(category), "Category created successfully")


@router.put("/categories/{category_id}", response_model=ApiResponse[CategoryOut])
def update_category(
    category_id: int,
    payload: CategoryUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(admin_required),
):
    category = db.query(Category).filter(Category.id == category_id).first()
    if not category:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Category not found")

    changes = {k: v for k, v in payload.model_dump(exclude_unset=True).items() if v is not None}
    for key, value in changes.items():
        setattr(category, key, value)
    if "name" in changes:
        category.slug = generate_slug(changes["name"])

    db.commit()
    db.refresh(category)
    return ok(CategoryOut.model_validate(category), "Category updated successfully")


@router.delete("/categories/{category_id}", response_model=ApiResponse[None])
def delete_category(
    category_id: int,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(admin_required),
):
    category = db.query(Category).filter(Category.id == category_id).first()
    if not category:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Category not found")

    in_use = db.query(Product).filter(Product.category_id == category.id).count()
    if in_use:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Category has {in_use} products. Move or delete them first",
        )

    db.delete(category)
    db.commit()

    write_log(db, user_id=current_user.id, action="CATEGORY_DELETE", resource="categories",
              ip=client_ip(request), meta={"category_id": category_id})
    return ok(message="Category deleted successfully")
