# backend/routes/cart.py
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from database import get_db
from utils.tokenJWT import get_current_user
from utils.audit import write_log, client_ip
from utils.pricing import cart_total, to_money
from models.users import User
from models.product import Product
from models.cart import Cart, CartItem
from schemas.cart import CartAddItem, CartUpdateItem, CartOut, CartItemOut
from schemas.common import ApiResponse
from utils.responses import ok

router = APIRouter(prefix="/cart", tags=["Cart"])


def _get_cart(db: Session, user_id: int) -> Optional[Cart]:
    return db.query(Cart).filter(Cart.user_id == user_id).first()


def _get_or_create_cart(db: Session, user_id: int) -> Cart:
    # Carts are created lazily on the first add
    cart = _get_cart(db, user_id)
    if not cart:
        cart = Cart(user_id=user_id, total=0)
        db.add(cart)
        db.flush()
    return cart


def _recalculate(cart: Cart) -> None:
    cart.total = cart_total(cart.items)


def _cart_to_out(cart: Optional[Cart], user_id: int) -> CartOut:
    if cart is None:
        return CartOut(user_id=user_id, items=[], total=0)
    return CartOut(
        user_id=cart.user_id,
        items=[CartItemOut.model_validate(it) for it in cart.items],
        total=float(cart.total or 0),
        updated_at=cart.updated_at,
    )


def _unit_price_and_size(product: Product, variant_id: Optional[str]):
    # Discounted price wins unless it was never set
    price = product.discount_price if product.discount_price else product.base_price
    size = None
    if variant_id:
        variant = product.find_variant(variant_id)
        if variant is None:
            raise HTTPException(status_code=404, detail="Variant not found")
        price = variant.get("price") or price
        size = variant.get("size")
    return to_money(price), size


@router.get("", response_model=ApiResponse[CartOut])
def get_cart(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    cart = _get_cart(db, current_user.id)
    return ok(_cart_to_out(cart, current_user.id))


@router.post("", response_model=ApiResponse[CartOut])
def add_to_cart(
    payload: CartAddItem,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    product = db.query(Product).filter(Product.id == payload.product_id, Product.is_active.is_(True)).first()
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")

    price, size = _unit_price_and_size(product, payload.variant_id)
    variant_key = payload.variant_id or ""

    cart = _get_or_create_cart(db, current_user.id)
    item = next(
        (it for it in cart.items if it.product_id == product.id and it.variant_id == variant_key),
        None,
    )
    new_quantity = payload.quantity + (item.quantity if item else 0)

    # Validate stock availability
    if new_quantity > (product.stock or 0):
        db.rollback()
        raise HTTPException(status_code=400, detail="Insufficient stock")

    if item:
        item.quantity = new_quantity
    else:
        cart.items.append(CartItem(
            product_id=product.id,
            variant_id=variant_key,
            product_name=product.name,
            thumbnail=product.thumbnail,
            size=size,
            price=price,
            quantity=payload.quantity,
        ))

    _recalculate(cart)
    db.commit()
    db.refresh(cart)

    write_log(
        db,
        user_id=current_user.id,
        action="CART_ADD",
        resource="cart",
        ip=client_ip(request),
        meta={"product_id": product.id, "variant_id": payload.variant_id, "qty": payload.quantity},
    )
    return ok(_cart_to_out(cart, current_user.id), "Item added to cart")


@router.put("/{product_id}", response_model=ApiResponse[CartOut])
def update_cart_item(
    product_id: int,
    payload: CartUpdateItem,
    request: Request,
    variant_id: Optional[str] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    cart = _get_cart(db, current_user.id)
    if not cart:
        raise HTTPException(status_code=404, detail="Cart not found")

    matches = [
        it for it in cart.items
        if it.product_id == product_id and (variant_id is None or it.variant_id == variant_id)
    ]
    if not matches:
        raise HTTPException(status_code=404, detail="Item not found in cart")

    if payload.quantity == 0:
        for it in matches:
            cart.items.remove(it)
    else:
        product = db.query(Product).filter(Product.id == product_id).first()
        if product and payload.quantity > (product.stock or 0):
            raise HTTPException(status_code=400, detail="Insufficient stock")
        for it in matches:
            it.quantity = payload.quantity

    _recalculate(cart)
    db.commit()
    db.refresh(cart)

    write_log(
        db,
        user_id=current_user.id,
        action="CART_UPDATE",
        resource="cart",
        ip=client_ip(request),
        meta={"product_id": product_id, "variant_id": variant_id, "qty": payload.quantity},
    )
    return ok(_cart_to_out(cart, current_user.id), "Cart updated")


@router.delete("/{product_id}", response_model=ApiResponse[CartOut])
def remove_cart_item(
    product_id: int,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    cart = _get_cart(db, current_user.id)
    if not cart:
        raise HTTPException(status_code=404, detail="Cart not found")

    # Removes every line of the product regardless of variant
    for it in [it for it in cart.items if it.product_id == product_id]:
        cart.items.remove(it)

    _recalculate(cart)
    db.commit()
    db.refresh(cart)

    write_log(
        db,
        user_id=current_user.id,
        action="CART_DELETE",
        resource="cart",
        ip=client_ip(request),
        meta={"product_id": product_id},
    )
    return ok(_cart_to_out(cart, current_user.id), "Item removed from cart")


@router.delete("", response_model=ApiResponse[None])
def clear_cart(request: Request, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    cart = _get_cart(db, current_user.id)
    if cart:
        db.delete(cart)
        db.commit()

    write_log(db, user_id=current_user.id, action="CART_CLEAR", resource="cart", ip=client_ip(request))
    return ok(message="Cart cleared")
