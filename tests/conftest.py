"""Shared pytest fixtures for woodshop tests."""

from datetime import datetime, timedelta, UTC
from decimal import Decimal

import pytest

from woodshop.database.factories import create_memory_database
from woodshop.domain.client import ClientService
from woodshop.domain.dashboard import DashboardService
from woodshop.domain.document import DocumentService
from woodshop.domain.entities import ComponentInput
from woodshop.domain.material import MaterialService
from woodshop.domain.product import ProductService
from woodshop.domain.project import ProjectService
from woodshop.domain.stock import StockService
from woodshop.domain.transaction import TransactionService


class TickingClock:
    """Clock that moves one second forward on every reading."""

    def __init__(self, start: datetime):
        self.current = start

    def __call__(self) -> datetime:
        value = self.current
        self.current += timedelta(seconds=1)
        return value


@pytest.fixture
def clock():
    """A clock starting on 2024-03-10 09:00 UTC."""
    return TickingClock(datetime(2024, 3, 10, 9, 0, tzinfo=UTC))


@pytest.fixture
def memory_db(clock):
    """Create an isolated in-memory store for testing."""
    db = create_memory_database(clock=clock)

    yield db

    db.disconnect()


@pytest.fixture
def client_service(memory_db):
    """Create a ClientService with an in-memory store."""
    return ClientService(memory_db)


@pytest.fixture
def material_service(memory_db):
    """Create a MaterialService with an in-memory store."""
    return MaterialService(memory_db)


@pytest.fixture
def product_service(memory_db):
    """Create a ProductService with an in-memory store."""
    return ProductService(memory_db)


@pytest.fixture
def project_service(memory_db):
    """Create a ProjectService with an in-memory store."""
    return ProjectService(memory_db)


@pytest.fixture
def transaction_service(memory_db):
    """Create a TransactionService with an in-memory store."""
    return TransactionService(memory_db)


@pytest.fixture
def stock_service(memory_db):
    """Create a StockService with an in-memory store."""
    return StockService(memory_db)


@pytest.fixture
def dashboard_service(memory_db):
    """Create a DashboardService with an in-memory store."""
    return DashboardService(memory_db)


@pytest.fixture
def document_service(memory_db):
    """Create a DocumentService with an in-memory store."""
    return DocumentService(memory_db)


@pytest.fixture
def sample_client(client_service):
    """Create a sample individual client."""
    return client_service.create_client(name="Maria Souza", tax_id="987.654.321-00")


@pytest.fixture
def sample_material(material_service):
    """Create a sample panel with 50 on hand and a minimum of 10."""
    return material_service.create_material(
        name="MDF 15mm",
        current_price=Decimal("85.50"),
        current_stock=50,
        min_stock=10,
        category="Panels",
    )


@pytest.fixture
def sample_product(product_service, sample_material):
    """Create a sample product using half a panel per unit."""
    return product_service.create_product(
        name="Cabinet Door",
        components=[ComponentInput(material_id=sample_material.id, quantity=Decimal("0.5"))],
    )


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
