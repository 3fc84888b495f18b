# backend/main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config import settings
from database import SessionLocal, init_db
from populate_db import seed_data
from utils.responses import register_exception_handlers

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("ejewel")

# Routers
from routes.auth import router as auth_router
from routes.products import router as products_router
from routes.categories import router as categories_router
from routes.cart import router as cart_router
from routes.wishlist import router as wishlist_router
from routes.orders import router as orders_router
from routes.reviews import router as reviews_router
from routes.admin import router as admin_router
from routes.logs import router as logs_router

API_PREFIX = "/api"


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    if settings.SEED_ON_STARTUP:
        db = SessionLocal()
        try:
            seed_data(db)
        finally:
            db.close()
    logger.info("eJewel API started")
    yield
    logger.info("eJewel API stopped")


app = FastAPI(title="eJewel API", version="1.0.0", lifespan=lifespan)

# CORS Configuration
# Local frontend dev servers plus the deployed frontend, when configured
origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:3000",
]
if settings.FRONTEND_URL:
    origins.append(settings.FRONTEND_URL)

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Register routers
for router in (
    auth_router,
    products_router,
    categories_router,
    cart_router,
    wishlist_router,
    orders_router,
    reviews_router,
    admin_router,
    logs_router,
):
    app.include_router(router, prefix=API_PREFIX)


@app.get(f"{API_PREFIX}/health")
def health():
    return {"status": "ok", "message": "eJewel API is running"}
