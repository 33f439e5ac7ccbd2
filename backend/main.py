# backend/main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config import settings
from database import init_db
from utils.errors import register_exception_handlers

# Router imports
from routes.auth import router as auth_router
from routes.users import router as users_router
from routes.stores import router as stores_router
from routes.categories import router as categories_router
from routes.products import router as products_router
from routes.product_images import router as product_images_router
from routes.reviews import router as reviews_router
from routes.carts import router as carts_router
from routes.payments import router as payments_router
from routes.orders import router as orders_router
from routes.logs import router as logs_router

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


# Tables and default roles are created when the server starts
@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info("Database initialised")
    yield


app = FastAPI(title="Catalog Shop API", version="1.0.0", lifespan=lifespan)

# CORS Configuration
origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
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

# Router registration
app.include_router(auth_router)
app.include_router(users_router)
app.include_router(stores_router)
app.include_router(categories_router)
app.include_router(products_router)
app.include_router(product_images_router)
app.include_router(reviews_router)
app.include_router(carts_router)
app.include_router(payments_router)
app.include_router(orders_router)
app.include_router(logs_router)


@app.get("/")
def read_root():
    return {"message": "Catalog Shop API is running"}
