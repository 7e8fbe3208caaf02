"""
Purpose: Persistence collaborator for inventory items.

Role: Gives the stock subject and the inventory service a small find/save store
and hides whether items live in PostgreSQL or in memory.

Contents:
ItemRepository: abstract store (find_by_id, find_all, add, save, delete, is_referenced, sku_exists).
SqlAlchemyItemRepository: async SQLAlchemy implementation, one session per call.
  save() is a compare-and-set UPDATE when an expected quantity is supplied, so a
  writer in another process can never be silently overwritten.
InMemoryItemRepository: dict-backed store for running the fabric without a database.

Every method returns ItemRead snapshots, never live ORM rows.
"""

import itertools
import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional, Set

from sqlalchemy import delete, exists, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from stockroom.core.exceptions import DatabaseError, ItemCreationError, StaleItemError
from stockroom.core.utils import model_to_schema, models_to_schemas
from stockroom.models.inventory_audit_log import InventoryAuditLog
from stockroom.models.inventory_item import InventoryItem
from stockroom.schemas.inventory import ItemCreate, ItemRead

logger = logging.getLogger(__name__)

SessionFactory = Callable[[], AsyncSession]


class ItemRepository(ABC):

    @abstractmethod
    async def find_by_id(self, item_id: int) -> Optional[ItemRead]:
        """Return the item snapshot, or None."""

    @abstractmethod
    async def find_all(self) -> List[ItemRead]:
        """Return every item ordered by id."""

    @abstractmethod
    async def add(self, data: ItemCreate) -> ItemRead:
        """Persist a new item and return its snapshot."""

    @abstractmethod
    async def save(self, item: ItemRead, expected_quantity: Optional[int] = None) -> ItemRead:
        """Persist an updated item; fail with StaleItemError if the stored
        quantity no longer equals expected_quantity."""

    @abstractmethod
    async def delete(self, item_id: int) -> bool:
        """Delete an item; returns False if it did not exist."""

    @abstractmethod
    async def is_referenced(self, item_id: int) -> bool:
        """True when historical stock records point at the item."""

    @abstractmethod
    async def sku_exists(self, sku: str, exclude_id: Optional[int] = None) -> bool:
        """Check if a SKU is already used by another item."""


class SqlAlchemyItemRepository(ItemRepository):
    def __init__(self, session_factory: SessionFactory):
        self.session_factory = session_factory

    async def find_by_id(self, item_id: int) -> Optional[ItemRead]:
        async with self.session_factory() as session:
            try:
                result = await session.execute(select(InventoryItem).where(InventoryItem.id == item_id))
            except SQLAlchemyError as e:
                raise DatabaseError(f"Failed to load item {item_id}: {e}") from e
            item = result.scalar_one_or_none()
            return model_to_schema(item, ItemRead) if item else None

    async def find_all(self) -> List[ItemRead]:
        async with self.session_factory() as session:
            try:
                result = await session.execute(select(InventoryItem).order_by(InventoryItem.id))
            except SQLAlchemyError as e:
                raise DatabaseError(f"Failed to list items: {e}") from e
            return models_to_schemas(result.scalars().all(), ItemRead)

    async def add(self, data: ItemCreate) -> ItemRead:
        async with self.session_factory() as session:
            item = InventoryItem(**data.model_dump())
            session.add(item)
            try:
                await session.commit()
            except IntegrityError as e:
                await session.rollback()
                raise ItemCreationError(f"Failed to create item: {e.orig}") from e
            except SQLAlchemyError as e:
                await session.rollback()
                raise DatabaseError(f"Failed to create item: {e}") from e
            await session.refresh(item)
            return model_to_schema(item, ItemRead)

    async def save(self, item: ItemRead, expected_quantity: Optional[int] = None) -> ItemRead:
        values = item.model_dump(exclude={"id", "created_at", "updated_at"})
        stmt = update(InventoryItem).where(InventoryItem.id == item.id)
        if expected_quantity is not None:
            stmt = stmt.where(InventoryItem.quantity == expected_quantity)
        stmt = stmt.values(**values).returning(InventoryItem)

        async with self.session_factory() as session:
            try:
                result = await session.execute(stmt)
                saved = result.scalar_one_or_none()
                if saved is None:
                    await session.rollback()
                    raise StaleItemError(
                        f"Item {item.id} was modified or removed concurrently; expected quantity {expected_quantity}"
                    )
                snapshot = model_to_schema(saved, ItemRead)
                await session.commit()
            except SQLAlchemyError as e:
                await session.rollback()
                raise DatabaseError(f"Failed to save item {item.id}: {e}") from e
            return snapshot

    async def delete(self, item_id: int) -> bool:
        async with self.session_factory() as session:
            try:
                result = await session.execute(delete(InventoryItem).where(InventoryItem.id == item_id))
                await session.commit()
            except SQLAlchemyError as e:
                await session.rollback()
                raise DatabaseError(f"Failed to delete item {item_id}: {e}") from e
            return result.rowcount > 0

    async def is_referenced(self, item_id: int) -> bool:
        async with self.session_factory() as session:
            query = select(exists().where(InventoryAuditLog.item_id == item_id))
            try:
                return bool(await session.scalar(query))
            except SQLAlchemyError as e:
                raise DatabaseError(f"Failed to check stock history for item {item_id}: {e}") from e

    async def sku_exists(self, sku: str, exclude_id: Optional[int] = None) -> bool:
        condition = InventoryItem.sku == sku
        if exclude_id is not None:
            condition = condition & (InventoryItem.id != exclude_id)
        async with self.session_factory() as session:
            try:
                return bool(await session.scalar(select(exists().where(condition))))
            except SQLAlchemyError as e:
                raise DatabaseError(f"Failed to check SKU '{sku}': {e}") from e


class InMemoryItemRepository(ItemRepository):
    def __init__(self, items: Optional[List[ItemRead]] = None):
        self._items: Dict[int, ItemRead] = {}
        self._referenced: Set[int] = set()
        self._ids = itertools.count(1)
        for item in items or []:
            self._items[item.id] = item
        if self._items:
            self._ids = itertools.count(max(self._items) + 1)

    def mark_referenced(self, item_id: int) -> None:
        self._referenced.add(item_id)

    async def find_by_id(self, item_id: int) -> Optional[ItemRead]:
        return self._items.get(item_id)

    async def find_all(self) -> List[ItemRead]:
        return [self._items[key] for key in sorted(self._items)]

    async def add(self, data: ItemCreate) -> ItemRead:
        now = datetime.now(timezone.utc)
        item = ItemRead(id=next(self._ids), created_at=now, updated_at=now, **data.model_dump())
        self._items[item.id] = item
        return item

    async def save(self, item: ItemRead, expected_quantity: Optional[int] = None) -> ItemRead:
        current = self._items.get(item.id)
        if current is None or (expected_quantity is not None and current.quantity != expected_quantity):
            raise StaleItemError(
                f"Item {item.id} was modified or removed concurrently; expected quantity {expected_quantity}"
            )
        saved = item.model_copy(update={"updated_at": datetime.now(timezone.utc)})
        self._items[item.id] = saved
        return saved

    async def delete(self, item_id: int) -> bool:
        return self._items.pop(item_id, None) is not None

    async def is_referenced(self, item_id: int) -> bool:
        return item_id in self._referenced

    async def sku_exists(self, sku: str, exclude_id: Optional[int] = None) -> bool:
        return any(item.sku == sku and item.id != exclude_id for item in self._items.values())
