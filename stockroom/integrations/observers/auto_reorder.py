import logging
import time
from collections import deque
from datetime import datetime, timezone
from decimal import Decimal
from typing import Deque, Optional, Sequence

from pydantic import BaseModel, Field

from stockroom.core.config import Settings
from stockroom.core.enums import PurchaseOrderStatus
from stockroom.core.utils import format_money, quantize_money
from stockroom.integrations.base import StockObserver
from stockroom.schemas.inventory import ItemRead
from stockroom.services.notification_service import EmailNotificationService

logger = logging.getLogger(__name__)


class PurchaseOrder(BaseModel):
    po_number: str
    item_id: int
    item_name: str
    quantity: int
    unit_price: Decimal
    total_value: Decimal
    status: PurchaseOrderStatus = PurchaseOrderStatus.PENDING_APPROVAL
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class AutoReorderObserver(StockObserver):
    """
    Raises a purchase order when stock falls through the reorder point.

    Only the downward crossing (old >= point > new) triggers a reorder; staying
    below the point does not. The upward crossing is logged for information.
    """

    def __init__(
        self,
        reorder_point: int = 10,
        target_stock: int = 100,
        standard_reorder_quantity: int = 50,
        mailer: Optional[EmailNotificationService] = None,
        purchasing_recipients: Sequence[str] = (),
        history_size: int = 100,
    ):
        self.reorder_point = reorder_point
        self.target_stock = target_stock
        self.standard_reorder_quantity = standard_reorder_quantity
        self.mailer = mailer
        self.purchasing_recipients = list(purchasing_recipients)
        self.recent_orders: Deque[PurchaseOrder] = deque(maxlen=history_size)

    @classmethod
    def from_settings(cls, settings: Settings, mailer: Optional[EmailNotificationService] = None):
        return cls(
            reorder_point=settings.REORDER_POINT,
            target_stock=settings.REORDER_TARGET_STOCK,
            standard_reorder_quantity=settings.STANDARD_REORDER_QUANTITY,
            mailer=mailer,
            purchasing_recipients=settings.PURCHASING_EMAILS,
        )

    def calculate_reorder_quantity(self, current_quantity: int) -> int:
        # Enough to reach the target stock, never less than a standard order
        return max(self.target_stock - current_quantity, self.standard_reorder_quantity)

    async def on_stock_change(self, item: ItemRead, old_quantity: int, new_quantity: int) -> None:
        if old_quantity >= self.reorder_point and new_quantity < self.reorder_point:
            await self.trigger_reorder(item, new_quantity)
        elif old_quantity < self.reorder_point and new_quantity >= self.reorder_point:
            logger.info(
                f"STOCK RESTORED ABOVE REORDER POINT: {item.name} now {new_quantity} units "
                f"(reorder point {self.reorder_point})"
            )

    async def trigger_reorder(self, item: ItemRead, current_quantity: int) -> PurchaseOrder:
        quantity = self.calculate_reorder_quantity(current_quantity)
        order = PurchaseOrder(
            po_number=f"PO-{int(time.time() * 1000)}-{item.id}",
            item_id=item.id,
            item_name=item.name,
            quantity=quantity,
            unit_price=item.price,
            total_value=quantize_money(item.price * quantity),
        )
        self.recent_orders.appendleft(order)

        logger.warning(
            f"AUTO-REORDER TRIGGERED: {order.po_number} for {quantity} units of {item.name} "
            f"(current {current_quantity}, reorder point {self.reorder_point}, "
            f"order value {format_money(order.total_value)})"
        )

        if self.mailer is not None and self.purchasing_recipients:
            await self.mailer.send(
                self.purchasing_recipients,
                f"Auto-Reorder Alert - {item.name}",
                "\n".join([
                    f"Automatic purchase order generated for {quantity} units of {item.name}.",
                    f"PO Number: {order.po_number}",
                    f"Unit Price: {format_money(item.price)}",
                    f"Total Value: {format_money(order.total_value)}",
                    f"Status: {order.status.value}",
                    "Action Required: Review and approve purchase order",
                ]),
            )
        return order
