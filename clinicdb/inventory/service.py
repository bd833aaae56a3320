"""
Inventory Service - Stock items and quantity adjustments.
"""
import logging
from typing import List

from sqlalchemy.orm import Session

from ..database import transaction
from ..exceptions import InsufficientStockError, ResourceNotFoundException
from .models import InventoryItem
from .schemas import InventoryItemCreate

logger = logging.getLogger(__name__)


def get_item(db: Session, item_id: int, for_update: bool = False) -> InventoryItem:
    """
    Get a stock item by ID.

    Raises:
        ResourceNotFoundException: If item not found
    """
    query = db.query(InventoryItem).filter(InventoryItem.id == item_id)
    if for_update:
        query = query.with_for_update().populate_existing()
    item = query.first()
    if not item:
        raise ResourceNotFoundException(f"Inventory item {item_id} not found")
    return item


def create_item(db: Session, item_data: InventoryItemCreate) -> InventoryItem:
    item = InventoryItem(**item_data.model_dump())
    with transaction(db):
        db.add(item)

    db.refresh(item)
    logger.info(f"Inventory item {item.id} '{item.name}' created with {item.quantity} units")
    return item


def adjust_stock(db: Session, item_id: int, delta: int) -> InventoryItem:
    """
    Add (positive delta) or remove (negative delta) units.

    Args:
        db: Database session
        item_id: ID of the item
        delta: Change in quantity

    Returns:
        InventoryItem: The updated item

    Raises:
        InsufficientStockError: If the quantity would drop below zero
    """
    with transaction(db):
        item = get_item(db, item_id, for_update=True)
        new_quantity = item.quantity + delta
        if new_quantity < 0:
            raise InsufficientStockError(
                f"Only {item.quantity} units of '{item.name}' in stock, cannot remove {-delta}"
            )
        item.quantity = new_quantity

    db.refresh(item)
    logger.info(f"Inventory item {item_id} adjusted by {delta}, now {item.quantity}")
    return item


def list_low_stock(db: Session, threshold: int = 10) -> List[InventoryItem]:
    """Items at or below the threshold, lowest first."""
    return (
        db.query(InventoryItem)
        .filter(InventoryItem.quantity <= threshold)
        .order_by(InventoryItem.quantity, InventoryItem.name)
        .all()
    )
