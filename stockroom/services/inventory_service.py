"""
Purpose: Facade the rest of the system uses to manage inventory items.

Role: Item CRUD plus the stock workflows. Non-quantity fields are written
directly through the repository; every quantity change goes through the
StockSubject so observers are never bypassed.

Sign convention: a positive delta always increases stock. Sales pass a
negative delta, supplier receipts a positive one.
"""

import logging
from typing import List, Optional

from pydantic import ValidationError as PydanticValidationError

from stockroom.core.exceptions import (
    ItemCreationError,
    ItemInUseError,
    ItemNotFoundError,
    ValidationError,
)
from stockroom.integrations.stock_subject import StockSubject
from stockroom.schemas.inventory import ItemCreate, ItemRead, ItemUpdate
from stockroom.services.item_repository import ItemRepository

logger = logging.getLogger(__name__)


class InventoryService:
    def __init__(self, repository: ItemRepository, subject: StockSubject, low_stock_threshold: int = 10):
        self.repository = repository
        self.subject = subject
        self.low_stock_threshold = low_stock_threshold

    async def create_item(self, data: ItemCreate) -> ItemRead:
        """
        Creates an item.

        Raises:
            ItemCreationError: If the SKU is already taken or the store rejects the row
        """
        if data.sku and await self.repository.sku_exists(data.sku):
            raise ItemCreationError(f"SKU '{data.sku}' already exists")

        item = await self.repository.add(data)
        logger.info(f"Item created: {item.id} - {item.name} (Quantity: {item.quantity})")
        return item

    async def get_item(self, item_id: int) -> Optional[ItemRead]:
        """Returns the item, or None if it does not exist"""
        return await self.repository.find_by_id(item_id)

    async def require_item(self, item_id: int) -> ItemRead:
        item = await self.repository.find_by_id(item_id)
        if item is None:
            raise ItemNotFoundError(item_id)
        return item

    async def update_item(self, item_id: int, data: ItemUpdate) -> ItemRead:
        """
        Updates non-quantity fields.

        Raises:
            ItemNotFoundError: If the item does not exist
            ValidationError: If the new SKU is already taken or the merged item is invalid
        """
        item = await self.require_item(item_id)
        changes = data.model_dump(exclude_unset=True)
        if not changes:
            return item

        if changes.get("sku") and await self.repository.sku_exists(changes["sku"], exclude_id=item_id):
            raise ValidationError(f"SKU '{changes['sku']}' already exists")

        try:
            merged = ItemRead.model_validate({**item.model_dump(), **changes})
        except PydanticValidationError as e:
            raise ValidationError(f"Invalid item update: {e}")

        # Compare-and-set on the current quantity so a concurrent stock change is not overwritten
        updated = await self.repository.save(merged, expected_quantity=item.quantity)
        logger.debug(f"Item updated: {item_id} fields={sorted(changes)}")
        return updated

    async def delete_item(self, item_id: int) -> None:
        """
        Raises:
            ItemNotFoundError: If the item does not exist
            ItemInUseError: If stock history still references the item
        """
        item = await self.require_item(item_id)
        if await self.repository.is_referenced(item_id):
            raise ItemInUseError(f"Item {item.name} (ID: {item_id}) has stock history and cannot be deleted")
        await self.repository.delete(item_id)
        logger.info(f"Item deleted: {item_id} - {item.name}")

    async def list_items(self, low_stock_threshold: Optional[int] = None) -> List[ItemRead]:
        """All items, or only those with quantity <= low_stock_threshold"""
        items = await self.repository.find_all()
        if low_stock_threshold is None:
            return items
        return [item for item in items if item.quantity <= low_stock_threshold]

    async def get_low_stock_items(self, threshold: Optional[int] = None) -> List[ItemRead]:
        """Items at or below the threshold, defaulting to the configured one"""
        if threshold is None:
            threshold = self.low_stock_threshold
        return await self.list_items(low_stock_threshold=threshold)

    async def adjust_stock(self, item_id: int, delta: int) -> ItemRead:
        return await self.subject.apply_quantity_delta(item_id, delta)

    async def record_sale(self, item_id: int, quantity: int) -> ItemRead:
        """Billing workflow: consume stock for a sold line"""
        if quantity <= 0:
            raise ValidationError("Sale quantity must be positive")
        return await self.subject.apply_quantity_delta(item_id, -quantity)

    async def receive_shipment(self, item_id: int, quantity: int) -> ItemRead:
        """Supplier fulfilment workflow: add received units to stock"""
        if quantity <= 0:
            raise ValidationError("Received quantity must be positive")
        item = await self.subject.apply_quantity_delta(item_id, quantity)
        logger.info(f"Inventory updated: added {quantity} units of {item.name} (now {item.quantity})")
        return item
