"""
Purpose: Defines the payload broadcast to stock observers.

Contents:
StockChangeEvent (Pydantic Model): one quantity transition for one item. It carries an
immutable snapshot of the item (never the live ORM row), the quantity immediately before
and immediately after a single mutation, and when the mutation was committed.
ObserverFailure (Pydantic Model): what went wrong when one observer handled one event.
"""

from datetime import datetime, timezone
from pydantic import BaseModel, ConfigDict, Field

from stockroom.core.enums import StockDirection
from stockroom.schemas.inventory import ItemRead


class StockChangeEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    item: ItemRead
    old_quantity: int
    new_quantity: int
    occurred_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def change_amount(self) -> int:
        return self.new_quantity - self.old_quantity

    @property
    def direction(self) -> StockDirection:
        return StockDirection.INCREASE if self.change_amount > 0 else StockDirection.DECREASE

    @property
    def is_depleted(self) -> bool:
        return self.new_quantity == 0


class ObserverFailure(BaseModel):
    """Diagnostic record for an observer that raised while handling an event"""
    model_config = ConfigDict(frozen=True)

    observer_name: str
    item_id: int
    old_quantity: int
    new_quantity: int
    error_type: str
    message: str
    failed_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
