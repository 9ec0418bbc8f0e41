"""Tests for stock movements."""

from datetime import date
from decimal import Decimal

import pytest

from woodshop.domain.entities import LineItemInput, MovementType
from woodshop.domain.errors import NotFoundError, ValidationError


def test_inbound_movement_adds_stock(stock_service, material_service, sample_material):
    """Test that an inbound movement raises the stock."""
    movement = stock_service.create_stock_movement(
        material_id=sample_material.id,
        type=MovementType.IN,
        quantity=Decimal("5"),
        unit_price=Decimal("84.99"),
    )

    assert movement.material_name == "MDF 15mm"
    assert movement.date == date(2024, 3, 10)
    assert movement.total_value == Decimal("424.95")
    assert material_service.get_material(sample_material.id).current_stock == Decimal("55")


def test_outbound_movement_subtracts_stock(stock_service, material_service, sample_material):
    """Test that an outbound movement lowers the stock."""
    stock_service.create_stock_movement(
        material_id=sample_material.id, type="out", quantity="12.5"
    )
    assert material_service.get_material(sample_material.id).current_stock == Decimal("37.5")


def test_outbound_movement_clamps_at_zero(stock_service, material_service, sample_material, caplog):
    """Test that stock never drops below zero."""
    stock_service.create_stock_movement(
        material_id=sample_material.id, type=MovementType.OUT, quantity=80
    )

    assert material_service.get_material(sample_material.id).current_stock == Decimal("0")
    assert "clamping at zero" in caplog.text

    stock_service.create_stock_movement(
        material_id=sample_material.id, type=MovementType.OUT, quantity=1
    )
    assert material_service.get_material(sample_material.id).current_stock == Decimal("0")


@pytest.mark.parametrize("quantity", [0, -1])
def test_quantity_must_be_positive(stock_service, sample_material, quantity):
    """Test that movement quantities must be positive."""
    with pytest.raises(ValidationError):
        stock_service.create_stock_movement(
            material_id=sample_material.id, type=MovementType.IN, quantity=quantity
        )


def test_unknown_material(stock_service):
    """Test that movements must reference existing materials."""
    with pytest.raises(NotFoundError):
        stock_service.create_stock_movement(material_id="missing", type="in", quantity=1)
    assert stock_service.list_stock_movements() == []


def test_project_consumption(
    stock_service, project_service, material_service, sample_client, sample_material, sample_product
):
    """Test consuming stock for explicit line items."""
    project = project_service.create_project(
        client_id=sample_client.id, title="Cabinets", budget=Decimal("2000")
    )

    movements = stock_service.apply_project_stock_consumption(
        project.id,
        [LineItemInput(product_id=sample_product.id, quantity=Decimal("6"), unit_price=Decimal("0"))],
    )

    assert len(movements) == 1
    assert movements[0].type == MovementType.OUT
    assert movements[0].quantity == Decimal("3")
    assert movements[0].project_id == project.id
    assert movements[0].project_title == "Cabinets"
    assert material_service.get_material(sample_material.id).current_stock == Decimal("47")
    assert stock_service.list_stock_movements(project_id=project.id) == movements


def test_project_consumption_unknown_project(stock_service):
    """Test consuming stock for a missing project."""
    with pytest.raises(NotFoundError):
        stock_service.apply_project_stock_consumption("missing")


def test_project_consumption_rounds_to_thousandths(
    stock_service, project_service, material_service, sample_client, sample_material, sample_product
):
    """Test that consumed quantities are rounded half up to thousandths."""
    project = project_service.create_project(
        client_id=sample_client.id,
        title="Sample Door",
        budget=Decimal("10"),
        line_items=[
            LineItemInput(product_id=sample_product.id, quantity="0.001", unit_price=Decimal("10"))
        ],
    )

    [movement] = stock_service.list_stock_movements(project_id=project.id)
    assert movement.quantity == Decimal("0.001")
    assert material_service.get_material(sample_material.id).current_stock == Decimal("49.999")

    movements = stock_service.apply_project_stock_consumption(
        project.id,
        [LineItemInput(product_id=sample_product.id, quantity="0.0004", unit_price=Decimal("0"))],
    )
    assert movements == []
    assert material_service.get_material(sample_material.id).current_stock == Decimal("49.999")
