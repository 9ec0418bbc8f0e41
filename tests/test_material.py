"""Tests for material management and price history."""

from datetime import date
from decimal import Decimal

import pytest

from woodshop.domain.entities import PriceEntry
from woodshop.domain.errors import NotFoundError, ValidationError


def test_create_material_starts_price_history(material_service):
    """Test that a new material records its first price dated today."""
    material = material_service.create_material(
        name="Edge Banding", current_price="R$ 2.30", unit="M", supplier="Fita Sul"
    )

    assert material.current_price == Decimal("2.30")
    assert material.current_stock == Decimal("0")
    assert material.price_history == (
        PriceEntry(date=date(2024, 3, 10), price=Decimal("2.30"), supplier="Fita Sul"),
    )


def test_create_material_with_history(material_service):
    """Test creating a material with an explicit price history."""
    material = material_service.create_material(
        name="Glue",
        current_price=Decimal("30"),
        price_history=[
            PriceEntry(date=date(2024, 1, 1), price=Decimal("25")),
            PriceEntry(date=date(2024, 2, 1), price=Decimal("30")),
        ],
    )

    assert [e.price for e in material.price_history] == [Decimal("25"), Decimal("30")]


@pytest.mark.parametrize(
    "field,value",
    [("current_price", -1), ("current_stock", "-0.5"), ("min_stock", -3)],
)
def test_create_material_rejects_negatives(material_service, field, value):
    """Test that negative prices and stock levels are rejected."""
    kwargs = {"name": "Paint", "current_price": 10}
    kwargs[field] = value
    with pytest.raises(ValidationError):
        material_service.create_material(**kwargs)


def test_price_change_appends_history(material_service, sample_material):
    """Test that a new price adds a dated history entry."""
    updated = material_service.update_material(
        sample_material.id, current_price=Decimal("89.90"), supplier="Madeireira Central"
    )

    assert updated.current_price == Decimal("89.90")
    assert len(updated.price_history) == len(sample_material.price_history) + 1
    last = updated.price_history[-1]
    assert last.price == Decimal("89.90")
    assert last.date == date(2024, 3, 10)
    assert last.supplier == "Madeireira Central"


def test_same_price_does_not_append_history(material_service, sample_material):
    """Test that resubmitting the current price leaves the history alone."""
    updated = material_service.update_material(
        sample_material.id, current_price=Decimal("85.5"), name="MDF 15mm White"
    )

    assert updated.name == "MDF 15mm White"
    assert updated.price_history == sample_material.price_history


def test_update_other_fields_keeps_history(material_service, sample_material):
    """Test that non-price updates do not touch the history."""
    updated = material_service.update_material(sample_material.id, current_stock=5)

    assert updated.current_stock == Decimal("5")
    assert updated.price_history == sample_material.price_history
    assert updated.is_low_stock


def test_update_unknown_material(material_service):
    """Test updating a material that does not exist."""
    with pytest.raises(NotFoundError):
        material_service.update_material("missing", current_price=1)


def test_list_low_stock_materials(material_service, sample_material):
    """Test listing materials at or below their minimum."""
    low = material_service.create_material(
        name="Hinge", current_price=Decimal("12.50"), current_stock=10, min_stock=10
    )

    assert [m.id for m in material_service.list_low_stock_materials()] == [low.id]


def test_delete_material(material_service, sample_material):
    """Test deleting a material, and that deleting again is a no-op."""
    material_service.delete_material(sample_material.id)
    material_service.delete_material(sample_material.id)

    assert material_service.get_material(sample_material.id) is None
    assert material_service.list_materials() == []


def test_price_below_a_cent_matches_stored_price(material_service, sample_material):
    """Test that a price equal to the stored one once rounded adds no history entry."""
    updated = material_service.update_material(sample_material.id, current_price="85.504")

    assert updated.current_price == Decimal("85.50")
    assert updated.price_history == sample_material.price_history
    assert material_service.get_material(sample_material.id) == updated


def test_price_is_rounded_half_up_before_comparing(material_service, sample_material):
    """Test that a price rounding to a different cent is recorded rounded."""
    updated = material_service.update_material(sample_material.id, current_price="85.505")

    assert updated.current_price == Decimal("85.51")
    assert [e.price for e in updated.price_history] == [Decimal("85.50"), Decimal("85.51")]
    assert material_service.get_material(sample_material.id) == updated


def test_stock_levels_are_rounded_to_thousandths(material_service):
    """Test that stock levels keep three decimal places."""
    material = material_service.create_material(
        name="Varnish", current_price=40, unit="L", current_stock="2.0004", min_stock="0.0005"
    )

    assert material.current_stock == Decimal("2.000")
    assert material.min_stock == Decimal("0.001")


def test_price_variation_after_price_change(material_service, sample_material):
    """Test the price variation shown once a material has been repriced."""
    assert sample_material.price_variation is None

    up = material_service.update_material(sample_material.id, current_price=Decimal("89.90"))
    assert up.price_variation.percentage == Decimal("5.15")
    assert up.price_variation.is_increase

    down = material_service.update_material(sample_material.id, current_price=Decimal("80.91"))
    assert down.price_variation.percentage == Decimal("-10.00")
    assert not down.price_variation.is_increase


def test_price_variation_from_free_material(material_service):
    """Test that a material that used to cost nothing has a direction but no percentage."""
    material = material_service.create_material(name="Offcuts", current_price=0)
    repriced = material_service.update_material(material.id, current_price=Decimal("3.00"))

    assert repriced.price_variation.percentage is None
    assert repriced.price_variation.is_increase
