from .base import BaseSchema, TimestampedSchema
from .inventory import ItemCreate, ItemUpdate, ItemRead, StockAdjustment, StockMovement
from .audit import AuditLogRead
