from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from database import get_db
from utils.tokenJWT import get_current_user
from utils.responses import ok
from models.users import User
from models.product import Product
from models.wishlist import Wishlist, WishlistItem
from schemas.common import ApiResponse
from schemas.product import ProductSummary
from schemas.wishlist import WishlistAdd, WishlistOut

router = APIRouter(prefix="/wishlist", tags=["Wishlist"])


def _wishlist_out(db: Session, wishlist: Wishlist) -> WishlistOut:
    if wishlist is None or not wishlist.items:
        return WishlistOut(products=[])
    ids = [it.product_id for it in wishlist.items]
    products = db.query(Product).filter(Product.id.in_(ids)).order_by(Product.id.asc()).all()
    return WishlistOut(products=[ProductSummary.model_validate(p) for p in products])


@router.get("", response_model=ApiResponse[WishlistOut])
def get_wishlist(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    wishlist = db.query(Wishlist).filter(Wishlist.user_id == current_user.id).first()
    return ok(_wishlist_out(db, wishlist))


# Add a product; adding one that is already saved is a no-op
@router.post("", response_model=ApiResponse[WishlistOut])
def add_to_wishlist(
    payload: WishlistAdd,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    product = db.query(Product).filter(Product.id == payload.product_id, Product.is_active.is_(True)).first()
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")

    wishlist = db.query(Wishlist).filter(Wishlist.user_id == current_user.id).first()
    if not wishlist:
        wishlist = Wishlist(user_id=current_user.id)
        db.add(wishlist)
        db.flush()

    if not any(it.product_id == product.id for it in wishlist.items):
        wishlist.items.append(WishlistItem(product_id=product.id))

    db.commit()
    db.refresh(wishlist)
    return ok(_wishlist_out(db, wishlist), "Added to wishlist")


@router.delete("/{product_id}", response_model=ApiResponse[WishlistOut])
def remove_from_wishlist(
    product_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    wishlist = db.query(Wishlist).filter(Wishlist.user_id == current_user.id).first()
    if wishlist:
        for it in [it for it in wishlist.items if it.product_id == product_id]:
            wishlist.items.remove(it)
        db.commit()
        db.refresh(wishlist)
    return ok(_wishlist_out(db, wishlist), "Removed from wishlist")


@router.delete("", response_model=ApiResponse[None])
def clear_wishlist(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    wishlist = db.query(Wishlist).filter(Wishlist.user_id == current_user.id).first()
    if wishlist:
        wishlist.items.clear()
        db.commit()
    return ok(message="Wishlist cleared")
