# stockroom/models/inventory_audit_log.py
from sqlalchemy import Column, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.sql import func

from stockroom.database import Base


class InventoryAuditLog(Base):
    """
    System of record for inventory quantity changes.

    One row is written for every stock change event, regardless of whether
    any other observer reacted to it.
    """
    __tablename__ = "inventory_audit_logs"

    id = Column(Integer, primary_key=True)
    timestamp = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
    action_type = Column(String(50), nullable=False, index=True)  # 'STOCK_INCREASE', 'STOCK_DECREASE'

    item_id = Column(Integer, ForeignKey("items.id"), nullable=False, index=True)
    item_name = Column(String(255), nullable=False)

    previous_quantity = Column(Integer, nullable=False)
    new_quantity = Column(Integer, nullable=False)
    change_amount = Column(Integer, nullable=False)  # signed

    item_price = Column(Numeric(10, 2), nullable=True)
    value_impact = Column(Numeric(12, 2), nullable=True)
    category = Column(String(100), nullable=True)
    severity = Column(String(20), nullable=False, index=True)  # CRITICAL, HIGH, MEDIUM, NORMAL
    triggered_by = Column(String(100), nullable=True)
    notes = Column(Text, nullable=True)

    def __repr__(self):
        return f"<InventoryAuditLog {self.action_type} item={self.item_id} {self.previous_quantity}->{self.new_quantity}>"
