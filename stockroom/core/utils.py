"""
Utility functions for the application.
"""
from decimal import Decimal, ROUND_HALF_UP
from typing import Type, TypeVar, List, Any
from pydantic import BaseModel

T = TypeVar('T', bound=BaseModel)

CENTS = Decimal("0.01")


def model_to_schema(db_model: Any, schema_class: Type[T]) -> T:
    """
    Convert a SQLAlchemy model instance to a Pydantic schema instance.

    Args:
        db_model: SQLAlchemy model instance
        schema_class: Pydantic schema class

    Returns:
        Instance of the Pydantic schema
    """
    return schema_class.model_validate(db_model, from_attributes=True)


def models_to_schemas(db_models: List[Any], schema_class: Type[T]) -> List[T]:
    """Convert a list of SQLAlchemy model instances to Pydantic schema instances."""
    return [model_to_schema(model, schema_class) for model in db_models]


def quantize_money(value) -> Decimal:
    """Round a monetary amount to two decimal places (fixed point, half up)."""
    return Decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP)


def format_money(value, symbol: str = "$") -> str:
    return f"{symbol}{quantize_money(value):,.2f}"
