# stockroom/main.py

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.responses import RedirectResponse

from stockroom.core.config import get_settings
from stockroom.core.logging_config import configure_logging
from stockroom.core.security import get_current_username, require_auth
from stockroom.database import async_session
from stockroom.integrations.setup import setup_stock_subject
from stockroom.routes import audit, dashboard, health, inventory
from stockroom.routes import websockets as websocket_router
from stockroom.services.audit_log_service import InventoryAuditLogService
from stockroom.services.item_repository import SqlAlchemyItemRepository
from stockroom.services.notification_service import EmailNotificationService
from stockroom.services.websockets.manager import manager

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    settings = get_settings()

    # Startup: build the stock subject before any request can mutate stock
    repository = SqlAlchemyItemRepository(async_session)
    audit_service = InventoryAuditLogService(async_session)
    app.state.audit_service = audit_service
    app.state.stock_subject = await setup_stock_subject(
        repository,
        audit_service,
        settings=settings,
        mailer=EmailNotificationService(settings),
        broadcaster=manager,
    )
    logger.info(f"Stockroom started ({settings.ENVIRONMENT})")
    yield
    logger.info("Stockroom shutting down")


app = FastAPI(
    title="Stockroom",
    lifespan=lifespan
)


# Add middleware to handle HTTPS behind proxy
@app.middleware("http")
async def proxy_headers_middleware(request: Request, call_next):
    if request.headers.get("x-forwarded-proto") == "https":
        request.scope["scheme"] = "https"
    return await call_next(request)


# Include routers with authentication
app.include_router(inventory.router, prefix="/inventory", tags=["inventory"], dependencies=[require_auth()])
app.include_router(audit.router, prefix="/inventory/audit", tags=["audit"], dependencies=[require_auth()])
app.include_router(dashboard.router, prefix="/dashboard", tags=["dashboard"], dependencies=[require_auth()])
app.include_router(websocket_router.router)  # WebSockets handle auth differently
app.include_router(health.router)  # Health check should be accessible without auth


@app.get("/", dependencies=[Depends(get_current_username)])
async def root():
    return RedirectResponse(url="/inventory/items")
