"""Pydantic schemas for subscription and order status changes."""

from pydantic import BaseModel, Field


class SubscriptionStatusUpdateSchema(BaseModel):
    """Schema for updating a subscription's status."""

    status: str = Field(..., pattern=r"^(active|paused|cancelled)$")


class OrderStatusUpdateSchema(BaseModel):
    """Schema for updating an order's fulfilment and payment status."""

    status: str = Field(
        ...,
        pattern=r"^(pending|processing|shipped|delivered|cancelled)$",
    )
    payment_status: str | None = Field(None, pattern=r"^(pending|paid|refunded|failed)$")
