"""Product model."""
from sqlalchemy import Boolean, Column, DateTime, Integer, Numeric, String
from sqlalchemy.sql import func

from app.database import Base


class Product(Base):
    """Model for a sellable item. id and created are assigned by the database."""

    __tablename__ = "products"

    id = Column(Integer, primary_key=True)
    name = Column(String(100), nullable=False)
    price = Column(Numeric(6, 2), nullable=False)
    available = Column(Boolean, nullable=True)
    created = Column(DateTime, server_default=func.now())

    def __repr__(self):
        return f"<Product(id={self.id}, name='{self.name}', price={self.price})>"
