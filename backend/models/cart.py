# backend/models/cart.py
from sqlalchemy import Column, Integer, ForeignKey, String, DateTime, Numeric, UniqueConstraint, func
from sqlalchemy.orm import relationship
from database import Base

# Represents the user's shopping cart (at most one per user)
class Cart(Base):
    __tablename__ = "carts"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), unique=True, index=True, nullable=False)
    total = Column(Numeric(12, 2), nullable=False, default=0) # Sum of price * quantity over items
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # One-to-many relationship with cart items, kept in insertion order
    items = relationship(
        "CartItem", back_populates="cart", cascade="all, delete-orphan", order_by="CartItem.id"
    )


# A single line of the cart: one product (optionally one variant of it) with a quantity
class CartItem(Base):
    __tablename__ = "cart_items"

    id = Column(Integer, primary_key=True, index=True)
    cart_id = Column(Integer, ForeignKey("carts.id"), index=True, nullable=False)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), index=True, nullable=False)
    variant_id = Column(String, nullable=False, default="") # Empty string when no variant is selected
    product_name = Column(String, nullable=False)
    thumbnail = Column(String, nullable=True)
    size = Column(String, nullable=True)
    price = Column(Numeric(12, 2), nullable=False) # Unit price at the moment of addition
    quantity = Column(Integer, nullable=False, default=1)
    added_at = Column(DateTime(timezone=True), server_default=func.now())

    cart = relationship("Cart", back_populates="items")

    __table_args__ = (
        # A line is keyed by (product, variant) within one cart
        UniqueConstraint("cart_id", "product_id", "variant_id", name="uq_cartitem_cart_product_variant"),
    )
