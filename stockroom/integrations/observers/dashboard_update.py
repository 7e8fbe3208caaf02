import logging
import threading
from decimal import Decimal
from typing import Any, Dict, Iterable, Optional

from stockroom.core.config import Settings
from stockroom.core.utils import format_money, quantize_money
from stockroom.integrations.base import StockObserver
from stockroom.schemas.inventory import ItemRead
from stockroom.services.websockets.manager import ConnectionManager

logger = logging.getLogger(__name__)

STOCK_UPDATES_TOPIC = "stock-updates"


class DashboardStats:
    """
    Running inventory counters shown on the dashboard.

    An item is "low" while 0 < quantity < low_threshold and "out" while
    quantity == 0; the two bands never overlap. Counters move only when an
    item changes band and never drop below zero.
    """

    def __init__(self, low_threshold: int = 5):
        self.low_threshold = low_threshold
        self._lock = threading.Lock()
        self.low_stock_items = 0
        self.out_of_stock_items = 0
        self.total_inventory_value = Decimal("0.00")
        self.updates = 0

    def _is_low(self, quantity: int) -> bool:
        return 0 < quantity < self.low_threshold

    def prime(self, items: Iterable[ItemRead]) -> None:
        """Seed the counters from a full scan of the store."""
        with self._lock:
            self.low_stock_items = 0
            self.out_of_stock_items = 0
            self.total_inventory_value = Decimal("0.00")
            for item in items:
                self.low_stock_items += int(self._is_low(item.quantity))
                self.out_of_stock_items += int(item.quantity == 0)
                self.total_inventory_value += item.price * item.quantity
            self.total_inventory_value = quantize_money(self.total_inventory_value)

    def apply_transition(self, price: Decimal, old_quantity: int, new_quantity: int) -> Decimal:
        """Adjust counters for one transition and return the value delta."""
        value_delta = quantize_money(price * (new_quantity - old_quantity))
        low_delta = int(self._is_low(new_quantity)) - int(self._is_low(old_quantity))
        out_delta = int(new_quantity == 0) - int(old_quantity == 0)

        with self._lock:
            self.low_stock_items = max(0, self.low_stock_items + low_delta)
            self.out_of_stock_items = max(0, self.out_of_stock_items + out_delta)
            self.total_inventory_value += value_delta
            self.updates += 1
        return value_delta

    def snapshot(self) -> Dict[str, Any]:
        with self._lock:
            return {
                "low_stock_items": self.low_stock_items,
                "out_of_stock_items": self.out_of_stock_items,
                "total_inventory_value": str(self.total_inventory_value),
                "updates": self.updates,
            }

    def __str__(self):
        return (
            f"Low Stock: {self.low_stock_items} | Out of Stock: {self.out_of_stock_items} | "
            f"Total Value: {format_money(self.total_inventory_value)}"
        )


class DashboardUpdateObserver(StockObserver):
    """Keeps DashboardStats current and pushes every change to websocket clients."""

    def __init__(self, stats: DashboardStats, broadcaster: Optional[ConnectionManager] = None):
        self.stats = stats
        self.broadcaster = broadcaster

    @classmethod
    def from_settings(cls, settings: Settings, broadcaster: Optional[ConnectionManager] = None):
        return cls(DashboardStats(low_threshold=settings.LOW_STOCK_THRESHOLD), broadcaster=broadcaster)

    async def on_stock_change(self, item: ItemRead, old_quantity: int, new_quantity: int) -> None:
        value_delta = self.stats.apply_transition(item.price, old_quantity, new_quantity)

        logger.debug(f"Inventory value changed by {format_money(value_delta)} ({self.stats})")
        logger.info(f"DASHBOARD UPDATE - {item.name} (Qty: {new_quantity}) | {self.stats}")

        if self.broadcaster is None:
            return

        await self.broadcaster.broadcast({
            "topic": STOCK_UPDATES_TOPIC,
            "item_id": item.id,
            "item_name": item.name,
            "old_quantity": old_quantity,
            "new_quantity": new_quantity,
            "stats": self.stats.snapshot(),
        })
