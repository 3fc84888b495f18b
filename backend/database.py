# backend/database.py
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from config import settings


def _normalize_url(url: str) -> str:
    # Hosted Postgres providers still hand out postgres://, SQLAlchemy wants postgresql://
    if url and url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql://", 1)
    return url


def _connect_args(url: str, timeout: int) -> dict:
    if "sqlite" in url:
        # busy timeout in seconds
        return {"check_same_thread": False, "timeout": timeout}
    if url.startswith("postgresql"):
        return {"options": f"-c statement_timeout={timeout * 1000}"}
    return {}


SQLALCHEMY_DATABASE_URL = _normalize_url(settings.DATABASE_URL)

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args=_connect_args(SQLALCHEMY_DATABASE_URL, settings.DB_TIMEOUT_SECONDS),
    pool_pre_ping=True,
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def init_db(bind=None):
    # Import models so every table is registered on Base.metadata
    import models.users, models.category, models.product, models.cart  # noqa: F401
    import models.wishlist, models.order, models.review, models.log  # noqa: F401
    Base.metadata.create_all(bind=bind or engine)
