import asyncio
import inspect
import logging
from collections import Counter
from contextlib import asynccontextmanager
from typing import Dict, List, Optional, Tuple

from stockroom.core.exceptions import InsufficientStockError, ItemNotFoundError, ValidationError
from stockroom.integrations.base import StockObserver
from stockroom.integrations.events import ObserverFailure, StockChangeEvent
from stockroom.schemas.inventory import ItemRead
from stockroom.services.item_repository import ItemRepository

logger = logging.getLogger(__name__)


class StockSubject:
    """
    Owns the observer registry and performs every quantity mutation.

    A mutation is validated, persisted and only then broadcast. Observers run
    sequentially in registration order; an observer that raises is logged and
    skipped, and never undoes the committed change.
    """

    def __init__(self, repository: ItemRepository):
        self.repository = repository
        self._observers: List[StockObserver] = []
        self._item_locks: Dict[int, asyncio.Lock] = {}
        self._lock_users: Counter = Counter()
        self.failure_counts: Counter = Counter()

    @property
    def observers(self) -> Tuple[StockObserver, ...]:
        return tuple(self._observers)

    def register(self, observer: StockObserver) -> None:
        if observer in self._observers:
            return
        self._observers.append(observer)
        logger.info(f"Registered observer: {observer.name}")

    def unregister(self, observer: StockObserver) -> None:
        if observer not in self._observers:
            return
        self._observers.remove(observer)
        logger.info(f"Removed observer: {observer.name}")

    def get_observer(self, name: str) -> Optional[StockObserver]:
        for observer in self._observers:
            if observer.name == name:
                return observer
        return None

    @asynccontextmanager
    async def _item_lock(self, item_id: int):
        # An entry lives only while a caller holds or waits on it
        lock = self._item_locks.setdefault(item_id, asyncio.Lock())
        self._lock_users[item_id] += 1
        try:
            async with lock:
                yield
        finally:
            self._lock_users[item_id] -= 1
            if self._lock_users[item_id] <= 0:
                del self._lock_users[item_id]
                del self._item_locks[item_id]

    async def apply_quantity_delta(self, item_id: int, delta: int) -> ItemRead:
        """
        Apply a signed quantity change to one item and notify every observer.

        Args:
            item_id: Identifier of an existing item
            delta: Positive to restock, negative to consume

        Returns:
            Snapshot of the item after the change

        Raises:
            ItemNotFoundError: If the item does not exist
            InsufficientStockError: If the change would make the quantity negative
            ValidationError: If delta is zero
            DatabaseError: If the store fails to persist the change
        """
        if delta == 0:
            raise ValidationError("Quantity delta must not be zero")

        # Serialised per item so concurrent decrements cannot overdraw stock;
        # notification stays inside the lock so events for one item arrive in order.
        async with self._item_lock(item_id):
            item = await self.repository.find_by_id(item_id)
            if item is None:
                raise ItemNotFoundError(item_id)

            old_quantity = item.quantity
            new_quantity = old_quantity + delta
            if new_quantity < 0:
                raise InsufficientStockError(
                    item_id, item.name, available=old_quantity, requested=-delta
                )

            updated = await self.repository.save(
                item.model_copy(update={"quantity": new_quantity}),
                expected_quantity=old_quantity,
            )

            event = StockChangeEvent(
                item=updated,
                old_quantity=old_quantity,
                new_quantity=updated.quantity,
            )
            await self.notify_all(event)

        return updated

    async def notify_all(self, event: StockChangeEvent) -> List[ObserverFailure]:
        """
        Deliver one event to every registered observer, isolating failures.

        Returns the failures for diagnostics; they are never raised.
        """
        failures: List[ObserverFailure] = []
        logger.info(
            f"Notifying {len(self._observers)} observers about stock change: "
            f"{event.item.name} (ID: {event.item.id}) {event.old_quantity} -> {event.new_quantity}"
        )

        for observer in list(self._observers):
            try:
                result = observer.on_stock_change(event.item, event.old_quantity, event.new_quantity)
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                self.failure_counts[observer.name] += 1
                logger.error(
                    f"Error in observer {observer.name} for item {event.item.id}: {e}",
                    exc_info=True,
                )
                failures.append(ObserverFailure(
                    observer_name=observer.name,
                    item_id=event.item.id,
                    old_quantity=event.old_quantity,
                    new_quantity=event.new_quantity,
                    error_type=type(e).__name__,
                    message=str(e),
                ))
        return failures
