"""
Base schemas with common functionality.
"""
from datetime import datetime
from pydantic import BaseModel, ConfigDict
from typing import Optional


class BaseSchema(BaseModel):
    """Base schema with common functionality for all schemas"""

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True
    )


class TimestampedSchema(BaseSchema):
    """Base schema for models with timestamp fields"""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
