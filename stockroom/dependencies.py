from fastapi import Depends, HTTPException, Request

from stockroom.core.config import get_settings
from stockroom.integrations.observers import AutoReorderObserver, DashboardUpdateObserver, LowStockAlertObserver
from stockroom.integrations.stock_subject import StockSubject
from stockroom.services.audit_log_service import InventoryAuditLogService
from stockroom.services.inventory_service import InventoryService


def get_stock_subject(request: Request) -> StockSubject:
    """Dependency for the process-wide stock subject built at startup."""
    subject = getattr(request.app.state, "stock_subject", None)
    if subject is None:
        raise HTTPException(status_code=503, detail="Stock subject not initialised")
    return subject


def get_inventory_service(subject: StockSubject = Depends(get_stock_subject)) -> InventoryService:
    return InventoryService(
        subject.repository,
        subject,
        low_stock_threshold=get_settings().DEFAULT_LOW_STOCK_LIST_THRESHOLD,
    )


def get_audit_log_service(request: Request) -> InventoryAuditLogService:
    service = getattr(request.app.state, "audit_service", None)
    if service is None:
        raise HTTPException(status_code=503, detail="Audit log service not initialised")
    return service


def get_dashboard_observer(subject: StockSubject = Depends(get_stock_subject)) -> DashboardUpdateObserver:
    observer = subject.get_observer("DashboardUpdateObserver")
    if observer is None:
        raise HTTPException(status_code=503, detail="Dashboard observer not registered")
    return observer


def get_auto_reorder_observer(subject: StockSubject = Depends(get_stock_subject)) -> AutoReorderObserver:
    observer = subject.get_observer("AutoReorderObserver")
    if observer is None:
        raise HTTPException(status_code=503, detail="Auto-reorder observer not registered")
    return observer


def get_low_stock_observer(subject: StockSubject = Depends(get_stock_subject)) -> LowStockAlertObserver:
    observer = subject.get_observer("LowStockAlertObserver")
    if observer is None:
        raise HTTPException(status_code=503, detail="Low-stock observer not registered")
    return observer
