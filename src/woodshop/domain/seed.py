"""Sample data for a freshly started shop."""

import logging
from datetime import date
from decimal import Decimal

from woodshop.database.base import Database
from woodshop.domain.client import ClientService
from woodshop.domain.entities import (
    Address,
    ComponentInput,
    LineItemInput,
    PaymentMethod,
    PaymentTerms,
    PersonType,
    PriceEntry,
    ProjectStatus,
    ProjectType,
)
from woodshop.domain.material import MaterialService
from woodshop.domain.product import ProductService
from woodshop.domain.project import ProjectService

logger = logging.getLogger(__name__)


def seed_sample_data(db: Database) -> None:
    """Load the sample shop: two materials, a cabinet door, one client and a kitchen sale.

    The sale goes through the normal project rules, so seeding also records
    its deposit, consumes stock for its doors and updates the client rollups.
    """
    materials = MaterialService(db)
    products = ProductService(db)
    clients = ClientService(db)
    projects = ProjectService(db)

    with db.atomic():
        mdf = materials.create_material(
            name="MDF 15mm",
            description="MDF board 15mm 2.75x1.83m",
            category="Panels",
            unit="UN",
            current_stock=50,
            min_stock=10,
            current_price=Decimal("85.50"),
            price_history=[
                PriceEntry(date=date(2024, 1, 1), price=Decimal("80.00")),
                PriceEntry(date=date(2024, 2, 1), price=Decimal("85.50")),
            ],
        )
        hinge = materials.create_material(
            name="Hinge 35mm",
            description="35mm concealed hinge",
            category="Hardware",
            unit="UN",
            current_stock=200,
            min_stock=50,
            current_price=Decimal("12.50"),
            price_history=[
                PriceEntry(date=date(2024, 1, 1), price=Decimal("11.00")),
                PriceEntry(date=date(2024, 2, 1), price=Decimal("12.50")),
            ],
        )

        door = products.create_product(
            name="Cabinet Door 40x60cm",
            description="Standard kitchen cabinet door",
            category="Doors",
            unit="UN",
            components=[
                ComponentInput(material_id=mdf.id, quantity=Decimal("0.5")),
                ComponentInput(material_id=hinge.id, quantity=Decimal("2")),
            ],
        )

        client = clients.create_client(
            name="João Silva",
            person_type=PersonType.INDIVIDUAL,
            tax_id="123.456.789-00",
            email="joao@email.com",
            phone="(11) 3333-3333",
            mobile="(11) 99999-9999",
            address=Address(
                country="Brasil",
                state="SP",
                city="São Paulo",
                zip_code="01234-567",
                neighborhood="Centro",
                street_type="Rua",
                street="das Flores, 123",
            ),
        )

        projects.create_project(
            client_id=client.id,
            title="Custom Kitchen",
            description="Complete kitchen in white MDF",
            status=ProjectStatus.IN_PRODUCTION,
            type=ProjectType.SALE,
            budget=Decimal("12000"),
            line_items=[
                LineItemInput(product_id=door.id, quantity=Decimal("10"), unit_price=Decimal("150.00")),
            ],
            start_date=date(2024, 2, 1),
            end_date=date(2024, 3, 15),
            materials_cost=Decimal("8000"),
            labor_cost=Decimal("2000"),
            profit_margin=Decimal("20"),
            payment_terms=PaymentTerms(installments=3, payment_method=PaymentMethod.CREDIT_CARD),
        )

    logger.info("Loaded sample data")
