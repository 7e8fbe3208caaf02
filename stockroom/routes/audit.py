from datetime import datetime
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query

from stockroom.core.enums import AuditSeverity
from stockroom.dependencies import get_audit_log_service
from stockroom.schemas.audit import AuditLogRead
from stockroom.services.audit_log_service import InventoryAuditLogService

router = APIRouter()


@router.get("/api/recent", response_model=List[AuditLogRead])
async def recent_audit_logs(
    limit: int = Query(default=50, ge=1, le=500),
    service: InventoryAuditLogService = Depends(get_audit_log_service),
):
    return await service.get_recent(limit)


@router.get("/api/all", response_model=List[AuditLogRead])
async def all_audit_logs(service: InventoryAuditLogService = Depends(get_audit_log_service)):
    return await service.get_all()


@router.get("/api/critical", response_model=List[AuditLogRead])
async def critical_audit_logs(service: InventoryAuditLogService = Depends(get_audit_log_service)):
    return await service.get_critical()


@router.get("/api/item/{item_id}", response_model=List[AuditLogRead])
async def audit_logs_by_item(item_id: int, service: InventoryAuditLogService = Depends(get_audit_log_service)):
    return await service.get_by_item(item_id)


@router.get("/api/severity/{severity}", response_model=List[AuditLogRead])
async def audit_logs_by_severity(
    severity: AuditSeverity,
    service: InventoryAuditLogService = Depends(get_audit_log_service),
):
    return await service.get_by_severity(severity)


@router.get("/api/action/{action_type}", response_model=List[AuditLogRead])
async def audit_logs_by_action(action_type: str, service: InventoryAuditLogService = Depends(get_audit_log_service)):
    return await service.get_by_action_type(action_type.upper())


@router.get("/api/date-range", response_model=List[AuditLogRead])
async def audit_logs_by_date_range(
    start_date: datetime,
    end_date: datetime,
    service: InventoryAuditLogService = Depends(get_audit_log_service),
):
    return await service.get_by_date_range(start_date, end_date)


@router.get("/api/count/item/{item_id}", response_model=int)
async def count_audit_logs_by_item(item_id: int, service: InventoryAuditLogService = Depends(get_audit_log_service)):
    return await service.count_by_item(item_id)


@router.get("/api/log/{log_id}", response_model=AuditLogRead)
async def get_audit_log(log_id: int, service: InventoryAuditLogService = Depends(get_audit_log_service)):
    log_entry = await service.get_by_id(log_id)
    if log_entry is None:
        raise HTTPException(status_code=404, detail="Audit log not found")
    return log_entry
