from .low_stock_alert import LowStockAlertObserver, StockAlert
from .email_notification import EmailNotificationObserver
from .audit_log import AuditLogObserver, build_audit_entry
from .dashboard_update import DashboardStats, DashboardUpdateObserver
from .auto_reorder import AutoReorderObserver, PurchaseOrder

__all__ = [
    'LowStockAlertObserver',
    'StockAlert',
    'EmailNotificationObserver',
    'AuditLogObserver',
    'build_audit_entry',
    'DashboardStats',
    'DashboardUpdateObserver',
    'AutoReorderObserver',
    'PurchaseOrder',
]
