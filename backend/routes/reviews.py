from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy import func
from sqlalchemy.orm import Session

from database import get_db
from utils.tokenJWT import get_current_user
from utils.audit import write_log, client_ip
from utils.responses import ok
from models.users import User, Role
from models.product import Product
from models.order import Order, OrderItem, OrderStatus
from models.review import Review
from schemas.common import ApiResponse
from schemas.review import ReviewCreate, ReviewUpdate, ReviewOut, ProductReviews

router = APIRouter(tags=["Reviews"])


def _refresh_product_rating(db: Session, product_id: int) -> None:
    """Recompute rating and review_count from every review of the product."""
    avg_rating, count = (
        db.query(func.avg(Review.rating), func.count(Review.id))
        .filter(Review.product_id == product_id)
        .one()
    )
    product = db.query(Product).filter(Product.id == product_id).first()
    if product:
        product.rating = float(avg_rating or 0)
        product.review_count = count or 0


def _has_delivered_purchase(db: Session, user_id: int, product_id: int) -> bool:
    return db.query(OrderItem.id).join(Order).filter(
        Order.user_id == user_id,
        Order.status == OrderStatus.DELIVERED.value,
        OrderItem.product_id == product_id,
    ).first() is not None


@router.get("/products/{product_id}/reviews", response_model=ApiResponse[ProductReviews])
def product_reviews(product_id: int, db: Session = Depends(get_db)):
    reviews = (
        db.query(Review)
        .filter(Review.product_id == product_id)
        .order_by(Review.created_at.desc(), Review.id.desc())
        .all()
    )
    count = len(reviews)
    avg_rating = sum(r.rating for r in reviews) / count if count else 0.0
    return ok(ProductReviews(
        reviews=[ReviewOut.model_validate(r) for r in reviews],
        count=count,
        avg_rating=avg_rating,
    ))


@router.post("/reviews", response_model=ApiResponse[ReviewOut], status_code=status.HTTP_201_CREATED)
def create_review(
    payload: ReviewCreate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    product = db.query(Product).filter(Product.id == payload.product_id).first()
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")

    # One review per user and product
    existing = db.query(Review).filter(
        Review.product_id == product.id, Review.user_id == current_user.id
    ).first()
    if existing:
        raise HTTPException(status_code=409, detail="You have already reviewed this product")

    review = Review(
        product_id=product.id,
        user_id=current_user.id,
        user_name=current_user.full_name,
        user_avatar=current_user.avatar,
        rating=payload.rating,
        title=payload.title,
        comment=payload.comment,
        images=payload.images,
        is_verified=_has_delivered_purchase(db, current_user.id, product.id),
    )
    db.add(review)
    db.flush()
    _refresh_product_rating(db, product.id)
    db.commit()
    db.refresh(review)

    write_log(db, user_id=current_user.id, action="REVIEW_CREATE", resource="reviews",
              ip=client_ip(request), meta={"review_id": review.id, "product_id": product.id})
    return ok(ReviewOut.model_validate(review), "Review created")


@router.put("/reviews/{review_id}", response_model=ApiResponse[ReviewOut])
def update_review(
    review_id: int,
    payload: ReviewUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    review = db.query(Review).filter(Review.id == review_id, Review.user_id == current_user.id).first()
    if not review:
        raise HTTPException(status_code=404, detail="Review not found")

    for key, value in payload.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(review, key, value)

    db.flush()
    _refresh_product_rating(db, review.product_id)
    db.commit()
    db.refresh(review)
    return ok(ReviewOut.model_validate(review), "Review updated")


# Authors may delete their own reviews, admins any review
@router.delete("/reviews/{review_id}", response_model=ApiResponse[None])
def delete_review(
    review_id: int,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    query = db.query(Review).filter(Review.id == review_id)
    # Other users' reviews are invisible to non-admins
    if current_user.role != Role.ADMIN.value:
        query = query.filter(Review.user_id == current_user.id)
    review = query.first()
    if not review:
        raise HTTPException(status_code=404, detail="Review not found")

    product_id = review.product_id
    db.delete(review)
    db.flush()
    _refresh_product_rating(db, product_id)
    db.commit()

    write_log(db, user_id=current_user.id, action="REVIEW_DELETE", resource="reviews",
              ip=client_ip(request), meta={"review_id": review_id, "product_id": product_id})
    return ok(message="Review deleted")
