"""
Shared enums and constants used across the application.
"""

from enum import Enum


class StockDirection(str, Enum):
    """Direction of a single quantity transition"""
    INCREASE = "INCREASE"
    DECREASE = "DECREASE"

    @property
    def action_type(self) -> str:
        # Stored in inventory_audit_logs.action_type
        return f"STOCK_{self.value}"


class AuditSeverity(str, Enum):
    """Severity label attached to every audit record, derived from the new quantity"""
    CRITICAL = "CRITICAL"
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    NORMAL = "NORMAL"

    @classmethod
    def for_quantity(cls, quantity: int, low: int = 5, monitor: int = 10) -> "AuditSeverity":
        if quantity == 0:
            return cls.CRITICAL
        if quantity < low:
            return cls.HIGH
        if quantity < monitor:
            return cls.MEDIUM
        return cls.NORMAL

    @property
    def description(self) -> str:
        return {
            AuditSeverity.CRITICAL: "Out of Stock",
            AuditSeverity.HIGH: "Low Stock",
            AuditSeverity.MEDIUM: "Monitor Closely",
            AuditSeverity.NORMAL: "Normal",
        }[self]


class StockAlertLevel(str, Enum):
    """Classification emitted by the low-stock alert observer (highest priority first)"""
    OUT_OF_STOCK = "OUT_OF_STOCK"
    CRITICAL = "CRITICAL"
    LOW = "LOW"
    REPLENISHED = "REPLENISHED"


class PurchaseOrderStatus(str, Enum):
    """Reorders are only ever suggested; approval happens outside this service"""
    PENDING_APPROVAL = "PENDING_APPROVAL"
