import logging
import os
import sys

# Add 'backend' folder to Python path when run as a script
sys.path.append(os.path.abspath(os.path.dirname(__file__)))

from sqlalchemy.orm import Session

from config import settings
from database import SessionLocal, init_db
from models.users import User, Role
from models.category import Category
from models.product import Product
from utils.hashing import get_password_hash
from utils.helpers import generate_slug
from utils.pricing import calculate_discount_price

logger = logging.getLogger(__name__)

# name, description, icon
CATEGORIES = [
    ("Rings", "Elegant gold and silver rings for every occasion", "💍"),
    ("Necklaces", "Beautiful necklaces and chains", "📿"),
    ("Earrings", "Stunning earrings collection", "✨"),
    ("Bracelets", "Exquisite bracelets and bangles", "⭕"),
    ("Pendants", "Charming pendants and lockets", "💎"),
    ("Anklets", "Traditional and modern anklets", "🦶"),
]

_IMG = "https://images.unsplash.com/photo-{}?w={}"

SAMPLE_PRODUCTS = [
    {
        "name": "22K Gold Diamond Engagement Ring",
        "category": "Rings",
        "description": "A stunning 22K gold engagement ring featuring a brilliant-cut diamond center stone "
                       "surrounded by smaller accent diamonds. Perfect for your special moment.",
        "short_desc": "Elegant 22K gold diamond ring for engagements",
        "metal_type": "gold", "purity": "22K",
        "photos": ["1605100804763-247f67b3557e", "1602751584552-8ba73aad10e1"],
        "base_price": 125000, "discount_percent": 10,
        "tags": ["engagement", "diamond", "gold", "wedding"],
        "features": ["BIS Hallmarked", "IGI Certified Diamond", "Lifetime Exchange"],
        "is_featured": True, "is_new_arrival": True, "is_best_seller": False,
        "stock": 15, "rating": 4.8, "review_count": 24,
    },
    {
        "name": "Sterling Silver Pearl Necklace",
        "category": "Necklaces",
        "description": "A timeless 925 sterling silver necklace adorned with freshwater pearls. "
                       "This elegant piece adds sophistication to any outfit.",
        "short_desc": "Classic sterling silver pearl necklace",
        "metal_type": "silver", "purity": "925 Sterling",
        "photos": ["1515562141207-7a88fb7ce338", "1599643478518-a784e5dc4c8f"],
        "base_price": 8500, "discount_percent": 15,
        "tags": ["pearl", "silver", "elegant", "classic"],
        "features": ["925 Sterling Silver", "Freshwater Pearls", "Rhodium Plated"],
        "is_featured": True, "is_new_arrival": False, "is_best_seller": True,
        "stock": 30, "rating": 4.6, "review_count": 42,
    },
    {
        "name": "18K Rose Gold Drop Earrings",
        "category": "Earrings",
        "description": "Elegant 18K rose gold drop earrings with delicate filigree work. These lightweight "
                       "earrings are perfect for both everyday wear and special occasions.",
        "short_desc": "Delicate rose gold drop earrings",
        "metal_type": "rose_gold", "purity": "18K",
        "photos": ["1535632066927-ab7c9ab60908", "1617038220319-276d3cfab638"],
        "base_price": 45000, "discount_percent": 0,
        "tags": ["rose gold", "earrings", "elegant", "filigree"],
        "features": ["18K Rose Gold", "Lightweight Design", "Secure Backing"],
        "is_featured": True, "is_new_arrival": True, "is_best_seller": False,
        "stock": 20, "rating": 4.9, "review_count": 18,
    },
    {
        "name": "24K Gold Traditional Bangle Set",
        "category": "Bracelets",
        "description": "A set of 4 exquisite 24K gold bangles with intricate traditional design. "
                       "These bangles showcase masterful craftsmanship and timeless beauty.",
        "short_desc": "Set of 4 traditional gold bangles",
        "metal_type": "gold", "purity": "24K",
        "photos": ["1611591437281-460bfbe1220a", "1573408301185-9146fe634ad0"],
        "base_price": 285000, "discount_percent": 10,
        "tags": ["bangle", "gold", "traditional", "wedding"],
        "features": ["24K Pure Gold", "BIS Hallmarked", "Traditional Design", "Set of 4"],
        "is_featured": True, "is_new_arrival": False, "is_best_seller": True,
        "stock": 8, "rating": 4.7, "review_count": 31,
    },
    {
        "name": "Silver Peacock Pendant",
        "category": "Pendants",
        "description": "A beautifully crafted silver pendant featuring an ornate peacock design with "
                       "enamel detailing. This pendant comes with an 18-inch silver chain.",
        "short_desc": "Ornate silver peacock pendant with chain",
        "metal_type": "silver", "purity": "925 Sterling",
        "photos": ["1599643477877-530eb83abc8e", "1602752250015-52934bc45613"],
        "base_price": 4500, "discount_percent": 15,
        "tags": ["pendant", "silver", "peacock", "enamel"],
        "features": ["925 Sterling Silver", "Enamel Work", "18-inch Chain Included"],
        "is_featured": False, "is_new_arrival": True, "is_best_seller": False,
        "stock": 45, "rating": 4.5, "review_count": 56,
    },
    {
        "name": "22K Gold Traditional Anklet Pair",
        "category": "Anklets",
        "description": "A pair of traditional 22K gold anklets with ghungroo (bells) that create a "
                       "melodious sound. Perfect for festivals and celebrations.",
        "short_desc": "Traditional gold anklets with bells",
        "metal_type": "gold", "purity": "22K",
        "photos": ["1611085583191-a3b181a88401", "1602752250015-52934bc45613"],
        "base_price": 78000, "discount_percent": 10,
        "tags": ["anklet", "gold", "traditional", "ghungroo"],
        "features": ["22K Gold", "BIS Hallmarked", "Melodious Bells", "Pair of 2"],
        "is_featured": True, "is_new_arrival": False, "is_best_seller": False,
        "stock": 25, "rating": 4.6, "review_count": 15,
    },
]


def seed_data(db: Session) -> bool:
    """Create the admin account, categories and sample catalog.

    Does nothing when an admin already exists. Returns True when data was written.
    """
    if db.query(User).filter(User.role == Role.ADMIN.value).first():
        logger.info("Admin user already exists, skipping seed")
        return False

    logger.info("Seeding initial data...")

    admin = User(
        email=settings.ADMIN_EMAIL.strip().lower(),
        password_hash=get_password_hash(settings.ADMIN_PASSWORD),
        first_name="Admin",
        last_name="User",
        role=Role.ADMIN.value,
        addresses=[],
        is_active=True,
    )
    db.add(admin)
    db.flush()
    logger.info("Admin user created: %s", admin.email)

    categories = {}
    for order, (name, description, icon) in enumerate(CATEGORIES, start=1):
        category = Category(
            name=name, slug=generate_slug(name), description=description,
            icon=icon, is_active=True, sort_order=order,
        )
        db.add(category)
        categories[name] = category
    db.flush()
    logger.info("Categories created")

    for sample in SAMPLE_PRODUCTS:
        data = dict(sample)
        category = categories[data.pop("category")]
        photos = data.pop("photos")
        db.add(Product(
            **data,
            slug=generate_slug(data["name"]),
            category_id=category.id,
            category_name=category.name,
            images=[_IMG.format(photo, 800) for photo in photos],
            thumbnail=_IMG.format(photos[0], 400),
            discount_price=calculate_discount_price(data["base_price"], data["discount_percent"]),
            variants=[],
            is_active=True,
            seller_id=admin.id,
        ))
    db.commit()
    logger.info("Sample products created: %d", len(SAMPLE_PRODUCTS))
    return True


if __name__ == "__main__":
    logging.basicConfig(level=settings.LOG_LEVEL)
    init_db()
    session = SessionLocal()
    try:
        seed_data(session)
    finally:
        session.close()
