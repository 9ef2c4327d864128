from pydantic import BaseModel

from app.schemas.common import CamelModel
from app.schemas.order import OrderSummary


class StatsSnapshot(CamelModel):
    products: int
    orders: int
    revenue: float
    recent_orders: list[OrderSummary]


class Counts(BaseModel):
    products: int
    orders: int
