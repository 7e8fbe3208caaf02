from abc import ABC, abstractmethod

from stockroom.schemas.inventory import ItemRead


class StockObserver(ABC):
    """A single, independent reaction to a stock transition."""

    @property
    def name(self) -> str:
        """Stable display name used in logs and diagnostics"""
        return type(self).__name__

    @abstractmethod
    async def on_stock_change(self, item: ItemRead, old_quantity: int, new_quantity: int) -> None:
        """React to one committed quantity change"""
        pass

    def __repr__(self):
        return f"<{self.name}>"
