# tests/integration/test_stock_subject_integration.py
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from stockroom.core.enums import AuditSeverity, StockAlertLevel
from stockroom.integrations.observers import (
    AuditLogObserver,
    AutoReorderObserver,
    DashboardUpdateObserver,
    EmailNotificationObserver,
    LowStockAlertObserver,
)
from stockroom.integrations.setup import setup_stock_subject
from stockroom.services.inventory_service import InventoryService
from stockroom.services.item_repository import InMemoryItemRepository
from tests.mocks.items import make_item


@pytest.fixture
async def mock_system(settings, mock_mailer, mock_audit_service):
    repository = InMemoryItemRepository([
        make_item(id=1, name="Widget", quantity=12, price="5.00", category="Hardware"),
        make_item(id=2, name="Gizmo", quantity=3, price="20.00"),
    ])
    broadcaster = AsyncMock()
    subject = await setup_stock_subject(
        repository,
        mock_audit_service,
        settings=settings,
        mailer=mock_mailer,
        broadcaster=broadcaster,
    )
    return subject, repository, broadcaster


@pytest.mark.asyncio
async def test_observers_registered_in_fixed_order(mock_system):
    subject, _, _ = mock_system
    assert [type(o) for o in subject.observers] == [
        LowStockAlertObserver,
        EmailNotificationObserver,
        AuditLogObserver,
        DashboardUpdateObserver,
        AutoReorderObserver,
    ]


@pytest.mark.asyncio
async def test_dashboard_primed_from_store(mock_system):
    subject, _, _ = mock_system
    stats = subject.get_observer("DashboardUpdateObserver").stats

    assert stats.low_stock_items == 1
    assert stats.out_of_stock_items == 0
    assert stats.total_inventory_value == Decimal("120.00")


@pytest.mark.asyncio
async def test_widget_sale_scenario(mock_system, mock_mailer, mock_audit_service):
    subject, repository, broadcaster = mock_system

    updated = await subject.apply_quantity_delta(1, -4)

    assert updated.quantity == 8
    assert (await repository.find_by_id(1)).quantity == 8

    # Audit: one record, value impact 4 x 5.00, severity from the new quantity
    mock_audit_service.record.assert_awaited_once()
    entry = mock_audit_service.record.await_args.args[0]
    assert entry.change_amount == -4
    assert entry.value_impact == Decimal("20.00")
    assert entry.severity == AuditSeverity.MEDIUM

    # No low-stock alert: 8 is still above the low threshold
    assert len(subject.get_observer("LowStockAlertObserver").recent_alerts) == 0

    # Reorder: 12 -> 8 crosses the reorder point of 10
    orders = subject.get_observer("AutoReorderObserver").recent_orders
    assert len(orders) == 1
    assert orders[0].quantity == 92

    # Only the purchasing email goes out; a change of 4 is not significant
    subjects = [call.args[1] for call in mock_mailer.send.await_args_list]
    assert subjects == ["Auto-Reorder Alert - Widget"]

    broadcaster.broadcast.assert_awaited_once()
    assert subject.failure_counts == {}


@pytest.mark.asyncio
async def test_depletion_fans_out_to_everyone(mock_system, mock_mailer):
    subject, _, _ = mock_system

    await subject.apply_quantity_delta(2, -3)

    alert = subject.get_observer("LowStockAlertObserver").recent_alerts[-1]
    assert alert.level == StockAlertLevel.OUT_OF_STOCK

    stats = subject.get_observer("DashboardUpdateObserver").stats
    assert stats.low_stock_items == 0
    assert stats.out_of_stock_items == 1

    subjects = [call.args[1] for call in mock_mailer.send.await_args_list]
    assert "OUT OF STOCK - Gizmo" in subjects
    assert "URGENT - Gizmo is OUT OF STOCK" in subjects
    # Already below the reorder point before the sale
    assert len(subject.get_observer("AutoReorderObserver").recent_orders) == 0


@pytest.mark.asyncio
async def test_audit_failure_is_isolated(mock_system, mock_audit_service, caplog):
    subject, repository, broadcaster = mock_system
    mock_audit_service.record.side_effect = RuntimeError("audit table locked")

    with caplog.at_level("ERROR"):
        updated = await subject.apply_quantity_delta(1, -4)

    assert updated.quantity == 8
    assert subject.failure_counts["AuditLogObserver"] == 1
    assert "Error in observer AuditLogObserver" in caplog.text
    # Observers after the audit log still ran
    broadcaster.broadcast.assert_awaited_once()
    assert len(subject.get_observer("AutoReorderObserver").recent_orders) == 1


@pytest.mark.asyncio
async def test_restock_through_service(mock_system):
    subject, repository, _ = mock_system
    service = InventoryService(repository, subject)

    await service.record_sale(2, 2)
    item = await service.receive_shipment(2, 60)

    assert item.quantity == 61
    alerts = subject.get_observer("LowStockAlertObserver").recent_alerts
    assert [a.level for a in alerts] == [StockAlertLevel.CRITICAL, StockAlertLevel.REPLENISHED]


@pytest.mark.asyncio
async def test_priming_failure_does_not_block_startup(settings, mock_mailer, mock_audit_service, mocker):
    repository = InMemoryItemRepository()
    mocker.patch.object(repository, "find_all", side_effect=RuntimeError("db offline"))

    subject = await setup_stock_subject(repository, mock_audit_service, settings=settings, mailer=mock_mailer)

    assert len(subject.observers) == 5
    assert subject.get_observer("DashboardUpdateObserver").stats.low_stock_items == 0
