from sqlalchemy import Boolean, Column, DateTime, Integer, Numeric, String, Text

from app.config import Config
from app.db.database import Base, new_id, utcnow


class Product(Base):
    __tablename__ = "products"

    id = Column(String(32), primary_key=True, default=new_id)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    category = Column(String(100), nullable=False, index=True)
    stock = Column(Integer, nullable=False, default=0)
    image_url = Column(String(2048), nullable=False, default=Config.DEFAULT_IMAGE_URL)
    rating = Column(Numeric(3, 2), nullable=False, default=0)
    reviews = Column(Integer, nullable=False, default=0)
    featured = Column(Boolean, nullable=False, default=False, index=True)
    created_at = Column(DateTime, nullable=False, default=utcnow, index=True)
    updated_at = Column(DateTime, nullable=False, default=utcnow)
