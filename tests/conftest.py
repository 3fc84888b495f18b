from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database import Base, get_db, init_db
from main import app
from models.category import Category
from models.product import Product
from models.users import User, Role
from utils.hashing import get_password_hash
from utils.pricing import calculate_discount_price
from utils.tokenJWT import create_access_token

PASSWORD = "secret123"

HOME_ADDRESS = {
    "id": "addr-home",
    "type": "home",
    "street": "12 MG Road",
    "city": "Mumbai",
    "state": "Maharashtra",
    "country": "India",
    "zip_code": "400001",
    "phone": "9800000000",
    "is_default": True,
}


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    # No context manager: the startup seeder stays out of the test database
    yield TestClient(app)
    app.dependency_overrides.clear()


def make_user(db, email, role=Role.CUSTOMER.value, addresses=None, **fields):
    user = User(
        email=email,
        password_hash=get_password_hash(PASSWORD),
        role=role,
        first_name=fields.pop("first_name", "Asha"),
        last_name=fields.pop("last_name", "Rao"),
        addresses=addresses if addresses is not None else [],
        is_active=fields.pop("is_active", True),
        **fields,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def auth_header(user):
    return {"Authorization": f"Bearer {create_access_token(user)}"}


@pytest.fixture
def customer(db):
    return make_user(db, "asha@example.com", addresses=[dict(HOME_ADDRESS)])


@pytest.fixture
def customer_headers(customer):
    return auth_header(customer)


@pytest.fixture
def admin(db):
    return make_user(db, "admin@ejewel.com", role=Role.ADMIN.value, first_name="Admin", last_name="User")


@pytest.fixture
def admin_headers(admin):
    return auth_header(admin)


@pytest.fixture
def category(db):
    category = Category(name="Rings", slug="rings", description="Rings", is_active=True, sort_order=1)
    db.add(category)
    db.commit()
    db.refresh(category)
    return category


@pytest.fixture
def make_product(db, category):
    def _make(name="22K Gold Ring", base_price=5000, discount_percent=0, stock=10, **fields):
        product = Product(
            name=name,
            slug=fields.pop("slug", name.lower().replace(" ", "-")),
            description=fields.pop("description", f"{name} description"),
            metal_type=fields.pop("metal_type", "gold"),
            purity=fields.pop("purity", "22K"),
            category_id=category.id,
            category_name=category.name,
            base_price=Decimal(str(base_price)),
            discount_percent=discount_percent,
            discount_price=calculate_discount_price(base_price, discount_percent),
            stock=stock,
            is_active=fields.pop("is_active", True),
            **fields,
        )
        db.add(product)
        db.commit()
        db.refresh(product)
        return product

    return _make


@pytest.fixture
def product(make_product):
    return make_product()
