from fastapi import Depends, Request

from app.db.database import Database
from app.services.order_service import OrderService
from app.services.product_service import ProductService
from app.services.stats_service import StatsService


def get_db(request: Request) -> Database:
    """The store handle created at startup (or installed by tests)."""
    return request.app.state.db


def get_product_service(db: Database = Depends(get_db)) -> ProductService:
    return ProductService(db)


def get_order_service(db: Database = Depends(get_db)) -> OrderService:
    return OrderService(db)


def get_stats_service(db: Database = Depends(get_db)) -> StatsService:
    return StatsService(db)
