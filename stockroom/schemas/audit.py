from datetime import datetime
from decimal import Decimal
from typing import Optional

from stockroom.schemas.base import BaseSchema


class AuditLogRead(BaseSchema):
    id: int
    timestamp: datetime
    action_type: str
    item_id: int
    item_name: str
    previous_quantity: int
    new_quantity: int
    change_amount: int
    item_price: Optional[Decimal] = None
    value_impact: Optional[Decimal] = None
    category: Optional[str] = None
    severity: str
    triggered_by: Optional[str] = None
    notes: Optional[str] = None
