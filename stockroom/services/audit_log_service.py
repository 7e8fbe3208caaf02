# stockroom/services/audit_log_service.py
import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Callable, List, Optional

from pydantic import BaseModel, Field
from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from stockroom.core.enums import AuditSeverity
from stockroom.core.exceptions import DatabaseError
from stockroom.core.utils import model_to_schema, models_to_schemas
from stockroom.models.inventory_audit_log import InventoryAuditLog
from stockroom.schemas.audit import AuditLogRead

logger = logging.getLogger(__name__)


class AuditEntry(BaseModel):
    """One stock change as it will be written to inventory_audit_logs"""
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    action_type: str
    item_id: int
    item_name: str
    previous_quantity: int
    new_quantity: int
    change_amount: int
    item_price: Decimal
    value_impact: Decimal
    category: Optional[str] = None
    severity: AuditSeverity
    triggered_by: str = "System"
    notes: Optional[str] = None


class InventoryAuditLogService:
    """
    Writes and queries the inventory audit trail.

    Each call opens its own session so an audit record is committed on its own,
    independently of the request that caused the stock change.
    """

    def __init__(self, session_factory: Callable[[], AsyncSession]):
        self.session_factory = session_factory

    async def record(self, entry: AuditEntry) -> AuditLogRead:
        """
        Persist one audit record.

        Raises:
            DatabaseError: If the record could not be written
        """
        async with self.session_factory() as session:
            log_entry = InventoryAuditLog(**entry.model_dump(mode="python"))
            log_entry.severity = entry.severity.value
            session.add(log_entry)
            try:
                await session.commit()
            except SQLAlchemyError as e:
                await session.rollback()
                raise DatabaseError(f"Failed to save audit log for item {entry.item_id}: {e}") from e
            await session.refresh(log_entry)

            logger.debug(
                f"Audit record saved: ID={log_entry.id}, Action={entry.action_type} for item {entry.item_name}"
            )
            return model_to_schema(log_entry, AuditLogRead)

    async def _fetch(self, query) -> List[AuditLogRead]:
        async with self.session_factory() as session:
            try:
                result = await session.execute(query)
            except SQLAlchemyError as e:
                raise DatabaseError(f"Failed to query audit logs: {e}") from e
            return models_to_schemas(result.scalars().all(), AuditLogRead)

    async def get_all(self) -> List[AuditLogRead]:
        return await self._fetch(select(InventoryAuditLog).order_by(InventoryAuditLog.timestamp.desc()))

    async def get_recent(self, limit: int = 50) -> List[AuditLogRead]:
        return await self._fetch(
            select(InventoryAuditLog).order_by(InventoryAuditLog.timestamp.desc()).limit(limit)
        )

    async def get_by_item(self, item_id: int) -> List[AuditLogRead]:
        return await self._fetch(
            select(InventoryAuditLog)
            .where(InventoryAuditLog.item_id == item_id)
            .order_by(InventoryAuditLog.timestamp.desc())
        )

    async def get_by_severity(self, severity: AuditSeverity) -> List[AuditLogRead]:
        return await self._fetch(
            select(InventoryAuditLog)
            .where(InventoryAuditLog.severity == AuditSeverity(severity).value)
            .order_by(InventoryAuditLog.timestamp.desc())
        )

    async def get_critical(self) -> List[AuditLogRead]:
        """Out-of-stock events"""
        return await self.get_by_severity(AuditSeverity.CRITICAL)

    async def get_by_action_type(self, action_type: str) -> List[AuditLogRead]:
        return await self._fetch(
            select(InventoryAuditLog)
            .where(InventoryAuditLog.action_type == action_type)
            .order_by(InventoryAuditLog.timestamp.desc())
        )

    async def get_by_date_range(self, start: datetime, end: datetime) -> List[AuditLogRead]:
        return await self._fetch(
            select(InventoryAuditLog)
            .where(InventoryAuditLog.timestamp.between(start, end))
            .order_by(InventoryAuditLog.timestamp.desc())
        )

    async def get_by_id(self, log_id: int) -> Optional[AuditLogRead]:
        async with self.session_factory() as session:
            try:
                log_entry = await session.get(InventoryAuditLog, log_id)
            except SQLAlchemyError as e:
                raise DatabaseError(f"Failed to load audit log {log_id}: {e}") from e
            return model_to_schema(log_entry, AuditLogRead) if log_entry else None

    async def count_by_item(self, item_id: int) -> int:
        async with self.session_factory() as session:
            query = select(func.count()).select_from(InventoryAuditLog).where(InventoryAuditLog.item_id == item_id)
            try:
                return await session.scalar(query) or 0
            except SQLAlchemyError as e:
                raise DatabaseError(f"Failed to count audit logs for item {item_id}: {e}") from e

    async def delete_before(self, cutoff: datetime) -> int:
        """
        Maintenance: remove audit records older than cutoff.

        Raises:
            DatabaseError: If the delete could not be committed
        """
        async with self.session_factory() as session:
            try:
                result = await session.execute(delete(InventoryAuditLog).where(InventoryAuditLog.timestamp < cutoff))
                await session.commit()
            except SQLAlchemyError as e:
                await session.rollback()
                raise DatabaseError(f"Failed to purge audit logs before {cutoff.isoformat()}: {e}") from e
            logger.info(f"Deleted {result.rowcount} audit records older than {cutoff.isoformat()}")
            return result.rowcount
