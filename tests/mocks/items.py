from decimal import Decimal

from stockroom.schemas.inventory import ItemRead


def make_item(id: int = 1, name: str = "Widget", quantity: int = 12, price: str = "5.00", **kwargs) -> ItemRead:
    """Build an item snapshot for tests"""
    return ItemRead(id=id, name=name, quantity=quantity, price=Decimal(price), **kwargs)
