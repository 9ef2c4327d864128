import logging
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import Config
from app.db.database import Database
from app.routers import health, orders, products, stats
from app.exceptions import (
    AppException,
    app_exception_handler,
    generic_exception_handler,
    http_exception_handler,
    request_validation_handler,
)

# Configure logging
logging.basicConfig(
    level=Config.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    db = Database()
    await db.connect()
    await db.create_all()
    app.state.db = db
    logger.info(f"{Config.SERVICE_NAME} {Config.SERVICE_VERSION} started")
    yield
    await db.disconnect()
    logger.info(f"{Config.SERVICE_NAME} stopped")


app = FastAPI(
    title="E-Commerce API",
    version=Config.SERVICE_VERSION,
    description="Product catalog, orders and dashboard statistics",
    lifespan=lifespan
)

# Register exception handlers
app.add_exception_handler(AppException, app_exception_handler)
app.add_exception_handler(RequestValidationError, request_validation_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(Exception, generic_exception_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[Config.FRONTEND_URL],
    allow_credentials=Config.FRONTEND_URL != "*",
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(health.router)
app.include_router(products.router)
app.include_router(orders.router)
app.include_router(stats.router)
