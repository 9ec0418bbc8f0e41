"""Tests for transaction recording."""

from datetime import date
from decimal import Decimal

import pytest

from woodshop.domain.entities import TransactionType
from woodshop.domain.errors import NotFoundError, ValidationError


def test_create_transaction_defaults_to_today(transaction_service):
    """Test that the date defaults to the store clock's date."""
    txn = transaction_service.create_transaction(
        type=TransactionType.OUTFLOW, category="Supplies", amount="150.00", description="Sandpaper"
    )

    assert txn.type == TransactionType.OUTFLOW
    assert txn.amount == Decimal("150.00")
    assert txn.date == date(2024, 3, 10)
    assert txn.project_id is None
    assert txn.project_title is None


def test_create_transaction_snapshots_project_title(
    transaction_service, project_service, sample_client
):
    """Test that project transactions copy the project's title."""
    project = project_service.create_project(
        client_id=sample_client.id, title="Desk", budget=Decimal("800")
    )
    txn = transaction_service.create_transaction(
        type="inflow",
        category="Extra",
        amount=100,
        date=date(2024, 3, 1),
        project_id=project.id,
    )
    project_service.update_project(project.id, title="Standing Desk")

    stored = transaction_service.get_transaction(txn.id)
    assert stored.project_title == "Desk"
    assert stored.date == date(2024, 3, 1)


def test_create_transaction_with_given_project_title(
    transaction_service, project_service, sample_client
):
    """Test recording a project transaction under a title other than the current one."""
    project = project_service.create_project(
        client_id=sample_client.id, title="Desk", budget=Decimal("800")
    )
    txn = transaction_service.create_transaction(
        type="inflow", category="Extra", amount="99.995", project_id=project.id, project_title="Old Desk"
    )

    assert txn.project_title == "Old Desk"
    assert txn.amount == Decimal("100.00")


def test_create_transaction_unknown_project(transaction_service):
    """Test that transactions must reference existing projects."""
    with pytest.raises(NotFoundError):
        transaction_service.create_transaction(
            type=TransactionType.INFLOW, category="Extra", amount=1, project_id="missing"
        )


def test_create_transaction_negative_amount(transaction_service):
    """Test that amounts cannot be negative."""
    with pytest.raises(ValidationError):
        transaction_service.create_transaction(
            type=TransactionType.OUTFLOW, category="Supplies", amount="(10.00)"
        )


def test_list_transactions_by_project(transaction_service, project_service, sample_client):
    """Test filtering transactions by project."""
    project = project_service.create_project(
        client_id=sample_client.id, title="Desk", budget=Decimal("800")
    )
    transaction_service.create_transaction(type="outflow", category="Supplies", amount=5)
    txn = transaction_service.create_transaction(
        type="inflow", category="Extra", amount=10, project_id=project.id
    )

    assert [t.id for t in transaction_service.list_transactions(project_id=project.id)] == [txn.id]
    assert len(transaction_service.list_transactions()) == 2


@pytest.mark.parametrize("amount", [Decimal("NaN"), float("inf"), "abc"])
def test_create_transaction_rejects_non_numbers(transaction_service, amount):
    """Test that amounts must be finite numbers."""
    with pytest.raises(ValidationError):
        transaction_service.create_transaction(
            type=TransactionType.OUTFLOW, category="Supplies", amount=amount
        )
