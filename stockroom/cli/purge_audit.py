# stockroom/cli/purge_audit.py
import asyncio
import logging
from datetime import datetime, timedelta, timezone

import click

from stockroom.core.exceptions import DatabaseError
from stockroom.core.logging_config import configure_logging
from stockroom.database import async_session, engine
from stockroom.services.audit_log_service import InventoryAuditLogService

logger = logging.getLogger(__name__)


async def _purge_audit_logic(audit_service: InventoryAuditLogService, cutoff: datetime) -> int:
    """Core purge logic; returns the number of records removed"""
    logger.info(f"Purging audit records older than {cutoff.isoformat()}")
    return await audit_service.delete_before(cutoff)


@click.command()
@click.option("--days", type=click.IntRange(min=1), default=365, show_default=True,
              help="Keep records from the last DAYS days")
def purge_audit(days):
    """Delete inventory audit records older than the retention window."""
    configure_logging()
    cutoff = datetime.now(timezone.utc) - timedelta(days=days)

    async def _purge():
        try:
            return await _purge_audit_logic(InventoryAuditLogService(async_session), cutoff)
        finally:
            await engine.dispose()

    try:
        deleted = asyncio.run(_purge())
    except DatabaseError as e:
        raise click.ClickException(str(e))

    click.echo(f"Deleted {deleted} audit records older than {cutoff:%Y-%m-%d}")


if __name__ == "__main__":
    purge_audit()
