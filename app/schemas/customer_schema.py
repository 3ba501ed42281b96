"""Pydantic schemas for customer validation."""

from pydantic import BaseModel, EmailStr, Field


class CustomerCreateSchema(BaseModel):
    """Schema for registering a new customer account."""

    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)
    phone: str | None = Field(None, max_length=20)
    address: str | None = Field(None)
    delivery_instructions: str | None = Field(None)


class CustomerDetailsSchema(BaseModel):
    """Contact and delivery details entered at checkout."""

    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    phone: str = Field(..., min_length=1, max_length=20)
    address: str = Field(..., min_length=1)
    delivery_instructions: str | None = Field(None)
    password: str | None = Field(None, min_length=6, max_length=128)


class CustomerUpdateSchema(BaseModel):
    """Schema for an administrator editing a user."""

    name: str | None = Field(None, min_length=1, max_length=100)
    phone: str | None = Field(None, max_length=20)
    address: str | None = Field(None)
    delivery_instructions: str | None = Field(None)
    role: str | None = Field(None, pattern=r"^(member|admin)$")


class CustomerLoginSchema(BaseModel):
    """Email and password of an existing account."""

    email: EmailStr
    password: str = Field(..., min_length=1, max_length=128)
