"""
SQLAlchemy model for a stocked inventory item.

Quantity is only ever changed through the stock subject so that every
transition is broadcast to the registered observers.
"""

from sqlalchemy import CheckConstraint, Column, Integer, Numeric, String, Text, TIMESTAMP, text

from stockroom.database import Base

UTC_NOW = text("timezone('utc', now())")


class InventoryItem(Base):
    __tablename__ = "items"
    __table_args__ = (
        CheckConstraint("quantity >= 0", name="ck_items_quantity_non_negative"),
    )

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False)
    quantity = Column(Integer, nullable=False, default=0)
    price = Column(Numeric(10, 2), nullable=False)
    category = Column(String(100), nullable=True, index=True)
    sku = Column(String(50), unique=True, nullable=True)
    description = Column(Text, nullable=True)

    created_at = Column(TIMESTAMP(timezone=False), server_default=UTC_NOW, nullable=False)
    updated_at = Column(
        TIMESTAMP(timezone=False),
        server_default=UTC_NOW,
        onupdate=UTC_NOW,
        nullable=False
    )

    def __repr__(self):
        return f"<InventoryItem {self.id} {self.name!r} qty={self.quantity}>"
