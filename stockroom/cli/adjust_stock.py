# stockroom/cli/adjust_stock.py
import asyncio
import click

from stockroom.core.config import get_settings
from stockroom.core.exceptions import BaseServiceError, DatabaseError
from stockroom.core.logging_config import configure_logging
from stockroom.database import async_session, engine
from stockroom.integrations.setup import setup_stock_subject
from stockroom.services.audit_log_service import InventoryAuditLogService
from stockroom.services.item_repository import SqlAlchemyItemRepository


@click.command()
@click.argument("item_id", type=int)
@click.argument("delta", type=int)
def adjust_stock(item_id, delta):
    """Apply a signed stock change to ITEM_ID and notify every observer.

    Positive DELTA restocks, negative DELTA consumes. Use `--` before a
    negative value, e.g. `adjust-stock 3 -- -4`.
    """
    configure_logging()

    async def _adjust():
        try:
            subject = await setup_stock_subject(
                SqlAlchemyItemRepository(async_session),
                InventoryAuditLogService(async_session),
                settings=get_settings(),
            )
            return await subject.apply_quantity_delta(item_id, delta)
        finally:
            await engine.dispose()

    try:
        item = asyncio.run(_adjust())
    except (BaseServiceError, DatabaseError) as e:
        raise click.ClickException(str(e))

    click.echo(f"{item.name} (ID: {item.id}) now has {item.quantity} units")


if __name__ == "__main__":
    adjust_stock()
