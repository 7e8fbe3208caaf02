"""
Schemas for inventory item endpoints and the item snapshot handed to observers.
"""

from decimal import Decimal
from typing import Optional
from pydantic import ConfigDict, Field, field_validator

from stockroom.core.utils import quantize_money
from stockroom.schemas.base import BaseSchema, TimestampedSchema


class ItemValidationMixin(BaseSchema):
    """Shared validation for item create/update payloads"""

    @field_validator('name', mode='before', check_fields=False)
    @classmethod
    def validate_name(cls, v):
        if v is None:
            raise ValueError('Name must not be null')
        v = str(v).strip()
        if not v:
            raise ValueError('Name must not be empty')
        return v

    @field_validator('price', mode='before', check_fields=False)
    @classmethod
    def validate_price(cls, v):
        if v is None:
            raise ValueError('Price must not be null')
        try:
            price = Decimal(str(v))
        except (ValueError, ArithmeticError):
            raise ValueError(f'Price must be a valid number, got: {v}')
        if not price.is_finite():
            raise ValueError(f'Price must be a valid number, got: {v}')
        if price < 0:
            raise ValueError('Price must not be negative')
        return quantize_money(price)

    @field_validator('category', 'sku', 'description', mode='before', check_fields=False)
    @classmethod
    def blank_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v.strip() if isinstance(v, str) else v


class ItemCreate(ItemValidationMixin):
    name: str
    quantity: int = Field(default=0, ge=0)
    price: Decimal
    category: Optional[str] = Field(default=None, max_length=100)
    sku: Optional[str] = Field(default=None, max_length=50)
    description: Optional[str] = None


class ItemUpdate(ItemValidationMixin):
    """Non-quantity fields only; quantity changes go through the stock subject"""
    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = None
    price: Optional[Decimal] = None
    category: Optional[str] = Field(default=None, max_length=100)
    sku: Optional[str] = Field(default=None, max_length=50)
    description: Optional[str] = None


class ItemRead(TimestampedSchema):
    """Immutable snapshot of an item; observers never receive the live ORM row"""
    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: int
    name: str
    quantity: int
    price: Decimal
    category: Optional[str] = None
    sku: Optional[str] = None
    description: Optional[str] = None


class StockAdjustment(BaseSchema):
    """Signed quantity change: positive restocks, negative consumes"""
    delta: int

    @field_validator('delta')
    @classmethod
    def validate_delta(cls, v):
        if v == 0:
            raise ValueError('Delta must not be zero')
        return v


class StockMovement(BaseSchema):
    """Unsigned quantity for a sale or a received shipment"""
    quantity: int = Field(gt=0)
