from .inventory_item import InventoryItem
from .inventory_audit_log import InventoryAuditLog

# This ensures all models are registered with SQLAlchemy
__all__ = [
    'InventoryItem',
    'InventoryAuditLog',
]
