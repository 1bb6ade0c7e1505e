"""Product schemas for API requests and responses."""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class ProductRequest(BaseModel):
    """
    Body accepted when creating a product.

    Missing fields fall back to their zero value; values of the wrong JSON
    type are rejected rather than coerced.
    """

    name: str = Field("", description="Product name")
    price: float = Field(0, description="Price with two fractional digits")
    available: bool = Field(False, description="Whether the product is available")

    class Config:
        strict = True
        extra = "ignore"


class ProductResponse(BaseModel):
    """Stored product as returned to clients."""

    id: int
    name: str
    price: float
    available: Optional[bool] = None
    created: Optional[datetime] = None

    class Config:
        from_attributes = True
