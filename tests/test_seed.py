from config import settings
from models.category import Category
from models.product import Product
from models.users import User
from populate_db import CATEGORIES, SAMPLE_PRODUCTS, seed_data
from utils.hashing import verify_password


def test_seed_creates_admin_and_catalog(db):
    assert seed_data(db) is True

    admin = db.query(User).filter(User.role == "admin").one()
    assert admin.email == settings.ADMIN_EMAIL.lower()
    assert verify_password(settings.ADMIN_PASSWORD, admin.password_hash)
    assert [c.name for c in db.query(Category).order_by(Category.sort_order)] == [c[0] for c in CATEGORIES]
    assert db.query(Product).count() == len(SAMPLE_PRODUCTS)
    assert all(p.seller_id == admin.id and p.slug for p in db.query(Product))


def test_seed_skips_when_admin_exists(db, admin):
    assert seed_data(db) is False
    assert db.query(Category).count() == 0


def test_health(client):
    response = client.get("/api/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "message": "eJewel API is running"}
