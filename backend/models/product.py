# backend/models/product.py
import enum
from sqlalchemy import (
    Column, Integer, String, Boolean, Float, Numeric, DateTime, JSON,
    ForeignKey, CheckConstraint, func,
)
from database import Base


class MetalType(str, enum.Enum):
    GOLD = "gold"
    SILVER = "silver"
    PLATINUM = "platinum"
    ROSE_GOLD = "rose_gold"


# Model Product
# A single catalog item. Prices are kept as fixed-point numerics;
# discount_price is always derived from base_price and discount_percent.
# Variants, images, tags and features are stored as JSON documents.
class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, index=True)
    slug = Column(String, nullable=False, index=True)
    description = Column(String, nullable=True)
    short_desc = Column(String, nullable=True)

    metal_type = Column(String, nullable=True, index=True)
    purity = Column(String, nullable=True)

    category_id = Column(Integer, ForeignKey("categories.id"), nullable=True, index=True)
    category_name = Column(String, nullable=True)

    images = Column(JSON, nullable=False, default=list)
    thumbnail = Column(String, nullable=True)

    base_price = Column(Numeric(12, 2), CheckConstraint("base_price >= 0"), nullable=False)
    discount_price = Column(Numeric(12, 2), nullable=False, default=0)
    discount_percent = Column(Float, CheckConstraint("discount_percent <= 100"), nullable=False, default=0)

    # {id, size, weight, price, stock, sku, is_default}
    variants = Column(JSON, nullable=False, default=list)
    tags = Column(JSON, nullable=False, default=list)
    features = Column(JSON, nullable=False, default=list)

    is_featured = Column(Boolean, nullable=False, default=False)
    is_new_arrival = Column(Boolean, nullable=False, default=False)
    is_best_seller = Column(Boolean, nullable=False, default=False)
    is_active = Column(Boolean, nullable=False, default=True, index=True)

    stock = Column(Integer, nullable=False, default=0)

    # Aggregates recomputed from reviews
    rating = Column(Float, nullable=False, default=0)
    review_count = Column(Integer, nullable=False, default=0)

    seller_id = Column(Integer, ForeignKey("users.id"), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def find_variant(self, variant_id):
        for variant in self.variants or []:
            if variant.get("id") == variant_id:
                return variant
        return None
