"""
Tests for stock items and quantity adjustments.
"""
from decimal import Decimal

import pytest

from clinicdb.exceptions import InsufficientStockError, ResourceNotFoundException
from clinicdb.inventory.schemas import InventoryItemCreate, InventoryItemResponse
from clinicdb.inventory.service import adjust_stock, create_item, get_item, list_low_stock


def test_create_item(db):
    item = create_item(db, InventoryItemCreate(name="Paracetamol 500mg", quantity=100, unit_price="0.05"))

    response = InventoryItemResponse.model_validate(item)
    assert response.quantity == 100
    assert response.unit_price == Decimal("0.05")


def test_adjust_stock_up_and_down(db):
    item = create_item(db, InventoryItemCreate(name="Bandage", quantity=10))

    assert adjust_stock(db, item.id, 5).quantity == 15
    assert adjust_stock(db, item.id, -15).quantity == 0


def test_stock_cannot_go_negative(db):
    """
    A decrement larger than the stock is refused and leaves the quantity alone.
    """
    item = create_item(db, InventoryItemCreate(name="Gauze", quantity=3))

    with pytest.raises(InsufficientStockError):
        adjust_stock(db, item.id, -4)

    assert get_item(db, item.id).quantity == 3


def test_negative_quantity_rejected_at_input():
    with pytest.raises(ValueError):
        InventoryItemCreate(name="Gloves", quantity=-1)


def test_list_low_stock(db):
    create_item(db, InventoryItemCreate(name="Masks", quantity=500))
    create_item(db, InventoryItemCreate(name="Syringes", quantity=4))
    create_item(db, InventoryItemCreate(name="Alcohol swabs", quantity=10))

    assert [i.name for i in list_low_stock(db)] == ["Syringes", "Alcohol swabs"]
    assert [i.name for i in list_low_stock(db, threshold=5)] == ["Syringes"]


def test_missing_item(db):
    with pytest.raises(ResourceNotFoundException):
        adjust_stock(db, 8, 1)
