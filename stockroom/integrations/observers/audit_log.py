import logging
from typing import Optional

from stockroom.core.config import Settings
from stockroom.core.enums import AuditSeverity, StockDirection
from stockroom.core.utils import format_money, quantize_money
from stockroom.integrations.base import StockObserver
from stockroom.schemas.inventory import ItemRead
from stockroom.services.audit_log_service import AuditEntry, InventoryAuditLogService

logger = logging.getLogger(__name__)


def build_audit_entry(
    item: ItemRead,
    old_quantity: int,
    new_quantity: int,
    low_threshold: int = 5,
    monitor_threshold: int = 10,
    triggered_by: str = "System",
) -> AuditEntry:
    """Compute the audit record for one transition (no I/O)."""
    change = new_quantity - old_quantity
    direction = StockDirection.INCREASE if change > 0 else StockDirection.DECREASE

    notes: Optional[str] = None
    if new_quantity == 0:
        notes = "ALERT: Item out of stock!"
    elif new_quantity < old_quantity and new_quantity < low_threshold:
        notes = "WARNING: Low stock level - consider reordering"
    elif new_quantity > old_quantity and old_quantity < low_threshold:
        notes = "Stock replenished from low level"

    return AuditEntry(
        action_type=direction.action_type,
        item_id=item.id,
        item_name=item.name,
        previous_quantity=old_quantity,
        new_quantity=new_quantity,
        change_amount=change,
        item_price=item.price,
        value_impact=quantize_money(item.price * abs(change)),
        category=item.category,
        severity=AuditSeverity.for_quantity(new_quantity, low=low_threshold, monitor=monitor_threshold),
        triggered_by=triggered_by,
        notes=notes,
    )


class AuditLogObserver(StockObserver):
    """
    Records every stock change unconditionally.

    Persistence errors are not caught here: the subject logs them exactly as it
    would for any other observer, so a failing audit trail is always visible.
    """

    def __init__(
        self,
        audit_service: InventoryAuditLogService,
        low_threshold: int = 5,
        monitor_threshold: int = 10,
        triggered_by: str = "System",
    ):
        self.audit_service = audit_service
        self.low_threshold = low_threshold
        self.monitor_threshold = monitor_threshold
        self.triggered_by = triggered_by

    @classmethod
    def from_settings(cls, settings: Settings, audit_service: InventoryAuditLogService):
        return cls(
            audit_service=audit_service,
            low_threshold=settings.LOW_STOCK_THRESHOLD,
            monitor_threshold=settings.AUDIT_MONITOR_THRESHOLD,
        )

    async def on_stock_change(self, item: ItemRead, old_quantity: int, new_quantity: int) -> None:
        entry = build_audit_entry(
            item,
            old_quantity,
            new_quantity,
            low_threshold=self.low_threshold,
            monitor_threshold=self.monitor_threshold,
            triggered_by=self.triggered_by,
        )

        logger.info(
            f"AUDIT {entry.action_type}: item {item.id} ({item.name}) "
            f"{old_quantity} -> {new_quantity} ({entry.change_amount:+d}), "
            f"value impact {format_money(entry.value_impact)}, "
            f"severity {entry.severity.value} - {entry.severity.description}"
        )

        await self.audit_service.record(entry)
