"""Pydantic schemas for subscription plan validation."""

from decimal import Decimal

from pydantic import BaseModel, Field, model_validator

from app.schemas.product_schema import CATEGORY_PATTERN


class FixedItemSchema(BaseModel):
    """A product always shipped with the plan."""

    product_id: int = Field(..., gt=0)
    quantity: int = Field(default=1, ge=1)


class CustomizableRuleSchema(BaseModel):
    """Min/max quantity the customer may choose from one category."""

    product_type: str = Field(..., pattern=CATEGORY_PATTERN)
    min_quantity: int = Field(default=0, ge=0)
    max_quantity: int = Field(..., ge=0)

    @model_validator(mode="after")
    def validate_bounds(self) -> "CustomizableRuleSchema":
        if self.min_quantity > self.max_quantity:
            msg = f"min_quantity cannot exceed max_quantity for '{self.product_type}'."
            raise ValueError(msg)
        return self


class PlanCreateSchema(BaseModel):
    """Schema for creating or updating a subscription plan."""

    name: str = Field(..., min_length=1, max_length=255)
    slug: str = Field(..., max_length=255, pattern=r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
    description: str = Field(default="")
    price: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2)
    image_url: str | None = Field(default=None)
    fixed_items: list[FixedItemSchema] = Field(default_factory=list)
    customizable_rules: list[CustomizableRuleSchema] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_plan(self) -> "PlanCreateSchema":
        """Validate cross-field plan constraints."""
        categories = [rule.product_type for rule in self.customizable_rules]
        if len(categories) != len(set(categories)):
            raise ValueError("Only one customizable rule per product type is allowed.")

        product_ids = [item.product_id for item in self.fixed_items]
        if len(product_ids) != len(set(product_ids)):
            raise ValueError("A product can only appear once among the fixed items.")

        return self
