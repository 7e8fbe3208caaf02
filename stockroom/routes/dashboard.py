from fastapi import APIRouter, Depends

from stockroom.dependencies import get_dashboard_observer, get_stock_subject
from stockroom.integrations.observers import DashboardUpdateObserver
from stockroom.integrations.stock_subject import StockSubject

router = APIRouter()


@router.get("/stats")
async def dashboard_stats(
    observer: DashboardUpdateObserver = Depends(get_dashboard_observer),
    subject: StockSubject = Depends(get_stock_subject),
):
    """Current dashboard counters plus per-observer failure counts"""
    return {
        **observer.stats.snapshot(),
        "observers": [o.name for o in subject.observers],
        "observer_failures": dict(subject.failure_counts),
    }
