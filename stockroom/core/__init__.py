"""
Core module exports.
"""
from .enums import (
    StockDirection,
    AuditSeverity,
    StockAlertLevel,
    PurchaseOrderStatus,
)

from .exceptions import (
    BaseServiceError,
    ItemServiceError,
    ItemCreationError,
    ItemNotFoundError,
    InsufficientStockError,
    ItemInUseError,
    ValidationError,
    DatabaseError,
    StaleItemError,
)

from .utils import (
    model_to_schema,
    models_to_schemas,
    quantize_money,
)
