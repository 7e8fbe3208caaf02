import logging
from collections import deque
from datetime import datetime, timezone
from typing import Deque, Optional, Sequence

from pydantic import BaseModel, Field

from stockroom.core.config import Settings
from stockroom.core.enums import StockAlertLevel
from stockroom.integrations.base import StockObserver
from stockroom.schemas.inventory import ItemRead
from stockroom.services.notification_service import EmailNotificationService

logger = logging.getLogger(__name__)


class StockAlert(BaseModel):
    level: StockAlertLevel
    item_id: int
    item_name: str
    old_quantity: int
    new_quantity: int
    raised_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class LowStockAlertObserver(StockObserver):
    """
    Raises at most one alert per transition, checked in priority order:
    out of stock, critical, low, replenished. Each level fires only when its
    boundary is crossed, not while stock stays on the same side of it.
    """

    def __init__(
        self,
        low_threshold: int = 5,
        critical_threshold: int = 2,
        mailer: Optional[EmailNotificationService] = None,
        urgent_recipients: Sequence[str] = (),
        inventory_recipients: Sequence[str] = (),
        history_size: int = 100,
    ):
        self.low_threshold = low_threshold
        self.critical_threshold = critical_threshold
        self.mailer = mailer
        self.urgent_recipients = list(urgent_recipients)
        self.inventory_recipients = list(inventory_recipients)
        self.recent_alerts: Deque[StockAlert] = deque(maxlen=history_size)

    @classmethod
    def from_settings(cls, settings: Settings, mailer: Optional[EmailNotificationService] = None):
        return cls(
            low_threshold=settings.LOW_STOCK_THRESHOLD,
            critical_threshold=settings.CRITICAL_STOCK_THRESHOLD,
            mailer=mailer,
            urgent_recipients=settings.PURCHASING_EMAILS + settings.MANAGER_EMAILS,
            inventory_recipients=settings.INVENTORY_EMAILS,
        )

    def classify(self, old_quantity: int, new_quantity: int) -> Optional[StockAlertLevel]:
        if new_quantity == 0 and old_quantity > 0:
            return StockAlertLevel.OUT_OF_STOCK
        if old_quantity >= self.critical_threshold and 0 < new_quantity < self.critical_threshold:
            return StockAlertLevel.CRITICAL
        if old_quantity >= self.low_threshold and 0 < new_quantity < self.low_threshold:
            return StockAlertLevel.LOW
        if old_quantity < self.low_threshold and new_quantity >= self.low_threshold:
            return StockAlertLevel.REPLENISHED
        return None

    async def on_stock_change(self, item: ItemRead, old_quantity: int, new_quantity: int) -> None:
        level = self.classify(old_quantity, new_quantity)
        if level is None:
            return

        alert = StockAlert(
            level=level,
            item_id=item.id,
            item_name=item.name,
            old_quantity=old_quantity,
            new_quantity=new_quantity,
        )
        self.recent_alerts.append(alert)

        if level == StockAlertLevel.OUT_OF_STOCK:
            logger.error(f"OUT OF STOCK ALERT: {item.name} (ID: {item.id}) - Immediate action required!")
            await self._notify(
                self.urgent_recipients,
                f"OUT OF STOCK - {item.name}",
                f"Item {item.name} (ID: {item.id}) is out of stock. Urgent restock required.",
            )
        elif level == StockAlertLevel.CRITICAL:
            logger.warning(f"CRITICAL STOCK LEVEL: {item.name} - Only {new_quantity} units left!")
            await self._notify(
                self.inventory_recipients,
                f"CRITICAL STOCK - {item.name} ({new_quantity} units)",
                f"Item {item.name} (ID: {item.id}) is nearly depleted: {new_quantity} units left.",
            )
        elif level == StockAlertLevel.LOW:
            logger.warning(
                f"LOW STOCK ALERT: {item.name} - Quantity: {new_quantity} (Below threshold: {self.low_threshold})"
            )
            await self._notify(
                self.urgent_recipients,
                f"Low stock - {item.name} ({new_quantity} units)",
                f"Item {item.name} (ID: {item.id}) has {new_quantity} units left. Consider restocking soon.",
            )
        else:
            logger.info(f"STOCK REPLENISHED: {item.name} - Increased from {old_quantity} to {new_quantity} units")

    async def _notify(self, recipients: Sequence[str], subject: str, body: str) -> None:
        if self.mailer is None or not recipients:
            return
        await self.mailer.send(recipients, subject, body)
