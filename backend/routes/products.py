# backend/routes/products.py
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import String, cast, or_
from sqlalchemy.orm import Session

from database import get_db
from models.product import Product, MetalType
from schemas.common import ApiResponse, PaginatedResponse
from schemas.product import ProductOut
from utils.responses import ok, paginated

router = APIRouter(prefix="/products", tags=["Products"])

HIGHLIGHT_LIMIT = 8
SEARCH_LIMIT = 20

SORT_COLUMNS = {
    "price": Product.base_price,
    "name": Product.name,
    "rating": Product.rating,
    "newest": Product.created_at,
}


# ---- HELPERS ----
def _text_match(term: str, *columns):
    pattern = f"%{term.strip()}%"
    return or_(*[column.ilike(pattern) for column in columns])


def _serialize(products) -> list:
    return [ProductOut.model_validate(p) for p in products]


def _active(db: Session):
    return db.query(Product).filter(Product.is_active.is_(True))


# List products with filtering, sorting and pagination
@router.get("", response_model=PaginatedResponse[ProductOut])
def list_products(
    metal_type: Optional[MetalType] = None,
    category_id: Optional[int] = None,
    min_price: Optional[float] = None,
    max_price: Optional[float] = None,
    purity: Optional[str] = None,
    search: Optional[str] = None,
    is_featured: Optional[bool] = None,
    sort_by: str = "newest",
    sort_order: str = "desc",
    page: int = Query(1, ge=1),
    limit: int = Query(12, ge=1, le=100),
    db: Session = Depends(get_db),
):
    query = _active(db)

    if metal_type:
        query = query.filter(Product.metal_type == metal_type.value)
    if category_id:
        query = query.filter(Product.category_id == category_id)
    # Non-positive bounds mean "no bound"
    if min_price and min_price > 0:
        query = query.filter(Product.base_price >= min_price)
    if max_price and max_price > 0:
        query = query.filter(Product.base_price <= max_price)
    if purity:
        query = query.filter(Product.purity == purity)
    if search and search.strip():
        query = query.filter(_text_match(search, Product.name, Product.description, cast(Product.tags, String)))
    if is_featured is not None:
        query = query.filter(Product.is_featured.is_(is_featured))

    total = query.count()

    # Unrecognised keys fall back to newest first
    column = SORT_COLUMNS.get(sort_by, Product.created_at)
    if sort_order == "asc":
        query = query.order_by(column.asc(), Product.id.asc())
    else:
        query = query.order_by(column.desc(), Product.id.desc())

    products = query.offset((page - 1) * limit).limit(limit).all()
    return paginated(_serialize(products), page, limit, total)


@router.get("/featured", response_model=ApiResponse[List[ProductOut]])
def featured_products(db: Session = Depends(get_db)):
    products = (
        _active(db)
        .filter(Product.is_featured.is_(True))
        .order_by(Product.created_at.desc(), Product.id.desc())
        .limit(HIGHLIGHT_LIMIT)
        .all()
    )
    return ok(_serialize(products))


@router.get("/new-arrivals", response_model=ApiResponse[List[ProductOut]])
def new_arrivals(db: Session = Depends(get_db)):
    products = (
        _active(db)
        .filter(Product.is_new_arrival.is_(True))
        .order_by(Product.created_at.desc(), Product.id.desc())
        .limit(HIGHLIGHT_LIMIT)
        .all()
    )
    return ok(_serialize(products))


@router.get("/best-sellers", response_model=ApiResponse[List[ProductOut]])
def best_sellers(db: Session = Depends(get_db)):
    products = (
        _active(db)
        .filter(Product.is_best_seller.is_(True))
        .order_by(Product.review_count.desc(), Product.id.asc())
        .limit(HIGHLIGHT_LIMIT)
        .all()
    )
    return ok(_serialize(products))


# Free-text search over name, description, tags and category name
@router.get("/search", response_model=ApiResponse[List[ProductOut]])
def search_products(q: str = "", db: Session = Depends(get_db)):
    if not q.strip():
        raise HTTPException(status_code=400, detail="Search query is required")

    products = (
        _active(db)
        .filter(_text_match(q, Product.name, Product.description,
                            cast(Product.tags, String), Product.category_name))
        .order_by(Product.id.asc())
        .limit(SEARCH_LIMIT)
        .all()
    )
    return ok(_serialize(products))


# Numeric identifiers are looked up by id, anything else by slug
@router.get("/{id_or_slug}", response_model=ApiResponse[ProductOut])
def get_product(id_or_slug: str, db: Session = Depends(get_db)):
    query = db.query(Product)
    if id_or_slug.isdigit():
        product = query.filter(Product.id == int(id_or_slug)).first()
    else:
        product = query.filter(Product.slug == id_or_slug).first()

    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return ok(ProductOut.model_validate(product))
