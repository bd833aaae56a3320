"""
Inventory Model - Stock items held by the clinic.

Independent of the clinical tables.
"""
from sqlalchemy import CheckConstraint, Column, DateTime, Integer, Numeric, String, Text, func

from ..database import Base


class InventoryItem(Base):
    """
    Inventory Model

    Fields:
    - id: Primary key
    - name: Item name
    - description: Item description (optional)
    - quantity: Units in stock, never negative
    - unit_price: Price per unit
    - created_at / updated_at: Timestamps
    """
    __tablename__ = "inventory"
    __table_args__ = (
        CheckConstraint("quantity >= 0", name="quantity_non_negative"),
    )

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(120), nullable=False)
    description = Column(Text, nullable=True)
    quantity = Column(Integer, nullable=False, default=0, server_default="0")
    unit_price = Column(Numeric(10, 2), nullable=False, default=0, server_default="0")
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    def __repr__(self):
        return f"<InventoryItem(id={self.id}, name='{self.name}', quantity={self.quantity})>"
