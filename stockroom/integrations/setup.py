"""
Purpose: Builds the StockSubject and registers the stock observers, called once during
application startup (and by the CLI) before any stock mutation is served.

Contents:
setup_stock_subject: creates the subject over the given repository, instantiates the five
observers from settings and registers them in a fixed order (low-stock alert, email
notification, audit log, dashboard update, auto-reorder). The dashboard counters are primed
from the store so they reflect existing stock rather than starting at zero.
"""

import logging
from typing import Optional

from stockroom.core.config import Settings, get_settings
from stockroom.integrations.observers import (
    AuditLogObserver,
    AutoReorderObserver,
    DashboardUpdateObserver,
    EmailNotificationObserver,
    LowStockAlertObserver,
)
from stockroom.integrations.stock_subject import StockSubject
from stockroom.services.audit_log_service import InventoryAuditLogService
from stockroom.services.item_repository import ItemRepository
from stockroom.services.notification_service import EmailNotificationService
from stockroom.services.websockets.manager import ConnectionManager

logger = logging.getLogger(__name__)


async def setup_stock_subject(
    repository: ItemRepository,
    audit_service: InventoryAuditLogService,
    settings: Optional[Settings] = None,
    mailer: Optional[EmailNotificationService] = None,
    broadcaster: Optional[ConnectionManager] = None,
) -> StockSubject:
    """
    Initialize the stock subject with all observers registered
    """
    settings = settings or get_settings()
    mailer = mailer or EmailNotificationService(settings)

    subject = StockSubject(repository)

    dashboard = DashboardUpdateObserver.from_settings(settings, broadcaster=broadcaster)
    observers = [
        LowStockAlertObserver.from_settings(settings, mailer=mailer),
        EmailNotificationObserver.from_settings(settings, mailer=mailer),
        AuditLogObserver.from_settings(settings, audit_service=audit_service),
        dashboard,
        AutoReorderObserver.from_settings(settings, mailer=mailer),
    ]
    for observer in observers:
        subject.register(observer)

    try:
        dashboard.stats.prime(await repository.find_all())
        logger.info(f"Dashboard counters primed: {dashboard.stats}")
    except Exception as e:
        logger.error(f"Failed to prime dashboard counters, starting from zero: {e}")

    logger.info(f"{len(subject.observers)} observers are now monitoring stock changes")
    return subject
