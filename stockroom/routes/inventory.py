# stockroom/routes/inventory.py
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from stockroom.core.exceptions import (
    DatabaseError,
    InsufficientStockError,
    ItemCreationError,
    ItemInUseError,
    ItemNotFoundError,
    StaleItemError,
    ValidationError,
)
from stockroom.dependencies import get_auto_reorder_observer, get_inventory_service, get_low_stock_observer
from stockroom.integrations.observers import AutoReorderObserver, LowStockAlertObserver, PurchaseOrder, StockAlert
from stockroom.schemas.inventory import ItemCreate, ItemRead, ItemUpdate, StockAdjustment, StockMovement
from stockroom.services.inventory_service import InventoryService

logger = logging.getLogger(__name__)
router = APIRouter()


def _to_http_error(error: Exception) -> HTTPException:
    if isinstance(error, ItemNotFoundError):
        return HTTPException(status_code=404, detail=str(error))
    if isinstance(error, (InsufficientStockError, ItemInUseError, ItemCreationError, StaleItemError)):
        return HTTPException(status_code=409, detail=str(error))
    if isinstance(error, ValidationError):
        return HTTPException(status_code=422, detail=str(error))
    logger.error(f"Inventory operation failed: {error}", exc_info=True)
    return HTTPException(status_code=500, detail="Inventory store unavailable")


@router.get("/items", response_model=List[ItemRead])
async def list_items(
    low_stock_threshold: Optional[int] = Query(default=None, ge=0),
    service: InventoryService = Depends(get_inventory_service),
):
    return await service.list_items(low_stock_threshold=low_stock_threshold)


@router.post("/items", response_model=ItemRead, status_code=status.HTTP_201_CREATED)
async def create_item(data: ItemCreate, service: InventoryService = Depends(get_inventory_service)):
    try:
        return await service.create_item(data)
    except (ItemCreationError, DatabaseError) as e:
        raise _to_http_error(e)


@router.get("/items/low-stock", response_model=List[ItemRead])
async def low_stock_items(
    threshold: Optional[int] = Query(default=None, ge=0),
    service: InventoryService = Depends(get_inventory_service),
):
    """Items at or below the threshold; the configured default applies when omitted"""
    return await service.get_low_stock_items(threshold)


@router.get("/items/{item_id}", response_model=ItemRead)
async def get_item(item_id: int, service: InventoryService = Depends(get_inventory_service)):
    item = await service.get_item(item_id)
    if item is None:
        raise HTTPException(status_code=404, detail="Item not found")
    return item


@router.patch("/items/{item_id}", response_model=ItemRead)
async def update_item(item_id: int, data: ItemUpdate, service: InventoryService = Depends(get_inventory_service)):
    try:
        return await service.update_item(item_id, data)
    except (ItemNotFoundError, ValidationError, DatabaseError) as e:
        raise _to_http_error(e)


@router.delete("/items/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_item(item_id: int, service: InventoryService = Depends(get_inventory_service)):
    try:
        await service.delete_item(item_id)
    except (ItemNotFoundError, ItemInUseError, DatabaseError) as e:
        raise _to_http_error(e)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/items/{item_id}/adjust", response_model=ItemRead)
async def adjust_stock(item_id: int, body: StockAdjustment, service: InventoryService = Depends(get_inventory_service)):
    """Signed adjustment: positive restocks, negative consumes"""
    try:
        return await service.adjust_stock(item_id, body.delta)
    except (ItemNotFoundError, InsufficientStockError, ValidationError, DatabaseError) as e:
        raise _to_http_error(e)


@router.post("/items/{item_id}/sale", response_model=ItemRead)
async def record_sale(item_id: int, body: StockMovement, service: InventoryService = Depends(get_inventory_service)):
    try:
        return await service.record_sale(item_id, body.quantity)
    except (ItemNotFoundError, InsufficientStockError, ValidationError, DatabaseError) as e:
        raise _to_http_error(e)


@router.post("/items/{item_id}/receive", response_model=ItemRead)
async def receive_shipment(item_id: int, body: StockMovement, service: InventoryService = Depends(get_inventory_service)):
    try:
        return await service.receive_shipment(item_id, body.quantity)
    except (ItemNotFoundError, ValidationError, DatabaseError) as e:
        raise _to_http_error(e)


@router.get("/reorders", response_model=List[PurchaseOrder])
async def recent_reorders(observer: AutoReorderObserver = Depends(get_auto_reorder_observer)):
    return list(observer.recent_orders)


@router.get("/alerts", response_model=List[StockAlert])
async def recent_alerts(observer: LowStockAlertObserver = Depends(get_low_stock_observer)):
    return list(reversed(observer.recent_alerts))
