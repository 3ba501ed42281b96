"""Pydantic schemas for quotes and checkout submissions."""

from pydantic import BaseModel, Field, model_validator

from app.schemas.customer_schema import CustomerDetailsSchema


class SelectionItemSchema(BaseModel):
    """One chosen product line."""

    product_id: int = Field(..., gt=0)
    quantity: int = Field(..., ge=1)


class QuoteSchema(BaseModel):
    """A proposed basket to validate and price without persisting."""

    items: list[SelectionItemSchema] = Field(default_factory=list)


class SubscriptionCheckoutSchema(BaseModel):
    """Schema for creating a subscription from a customised basket."""

    plan_id: int = Field(..., gt=0)
    items: list[SelectionItemSchema] = Field(default_factory=list)
    customer_id: int | None = Field(None, gt=0)
    customer: CustomerDetailsSchema | None = Field(None)
    password: str | None = Field(None, max_length=128)
    create_account: bool = Field(default=False)

    @model_validator(mode="after")
    def validate_account(self) -> "SubscriptionCheckoutSchema":
        if self.create_account and self.customer is None:
            raise ValueError("customer details are required to create an account.")
        return self


class OrderCheckoutSchema(BaseModel):
    """Schema for a one-time order."""

    items: list[SelectionItemSchema] = Field(..., min_length=1)
    customer_id: int | None = Field(None, gt=0)
    customer: CustomerDetailsSchema | None = Field(None)
    password: str | None = Field(None, max_length=128)
    create_account: bool = Field(default=False)
    shipping_address: str | None = Field(None, min_length=1)
    delivery_instructions: str | None = Field(None)

    @model_validator(mode="after")
    def validate_account(self) -> "OrderCheckoutSchema":
        if self.create_account and self.customer is None:
            raise ValueError("customer details are required to create an account.")
        return self
