"""Pydantic schemas for product and inventory validation."""

from decimal import Decimal

from pydantic import BaseModel, Field

CATEGORY_PATTERN = r"^(normal|exotic)$"


class ProductCreateSchema(BaseModel):
    """Schema for creating or updating a product."""

    name: str = Field(..., min_length=1, max_length=255)
    description: str = Field(default="")
    price: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2)
    product_type: str = Field(..., pattern=CATEGORY_PATTERN)
    stock_quantity: int = Field(default=0, ge=0)
    is_available: bool = Field(default=True)
    image_url: str | None = Field(default=None)


class ProductStockUpdateSchema(BaseModel):
    """Schema for adjusting a product's inventory."""

    stock_quantity: int = Field(..., ge=0)
    is_available: bool | None = Field(default=None)
