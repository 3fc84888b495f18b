from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from database import get_db
from models.category import Category
from schemas.category import CategoryOut
from schemas.common import ApiResponse
from utils.responses import ok

router = APIRouter(prefix="/categories", tags=["Categories"])


@router.get("", response_model=ApiResponse[List[CategoryOut]])
def list_categories(db: Session = Depends(get_db)):
    categories = (
        db.query(Category)
        .filter(Category.is_active.is_(True))
        .order_by(Category.sort_order.asc(), Category.id.asc())
        .all()
    )
    return ok([CategoryOut.model_validate(c) for c in categories])


@router.get("/{id_or_slug}", response_model=ApiResponse[CategoryOut])
def get_category(id_or_slug: str, db: Session = Depends(get_db)):
    query = db.query(Category)
    if id_or_slug.isdigit():
        category = query.filter(Category.id == int(id_or_slug)).first()
    else:
        category = query.filter(Category.slug == id_or_slug).first()

    if not category:
        raise HTTPException(status_code=404, detail="Category not found")
    return ok(CategoryOut.model_validate(category))
