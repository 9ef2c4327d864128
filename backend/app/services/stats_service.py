from sqlalchemy import func, select

from app.config import Config
from app.db.database import Database
from app.models import Order, Product
from app.schemas.order import OrderSummary
from app.schemas.stats import Counts, StatsSnapshot


class StatsService:
    """Read-only aggregation over products and orders, recomputed per call."""

    def __init__(self, db: Database):
        self.db = db

    async def counts(self) -> Counts:
        async with self.db.session() as session:
            products = await session.scalar(select(func.count()).select_from(Product))
            orders = await session.scalar(select(func.count()).select_from(Order))
        return Counts(products=products or 0, orders=orders or 0)

    async def snapshot(self) -> StatsSnapshot:
        """Counts, total revenue and the most recent orders."""
        recent_stmt = (
            select(Order.order_number, Order.total_amount, Order.status, Order.created_at)
            .order_by(Order.created_at.desc())
            .limit(Config.RECENT_ORDERS)
        )
        async with self.db.session() as session:
            products = await session.scalar(select(func.count()).select_from(Product))
            orders = await session.scalar(select(func.count()).select_from(Order))
            revenue = await session.scalar(select(func.coalesce(func.sum(Order.total_amount), 0)))
            rows = (await session.execute(recent_stmt)).all()

        return StatsSnapshot(
            products=products or 0,
            orders=orders or 0,
            revenue=float(revenue or 0),
            recent_orders=[OrderSummary.model_validate(dict(row._mapping)) for row in rows],
        )
