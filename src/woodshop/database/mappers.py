"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic so that domain code never holds a
live ORM row, only immutable snapshots.
"""

from datetime import datetime, UTC
from typing import Optional

from woodshop.domain import entities as domain
from woodshop.database.models import (
    Client as ORMClient,
    Material as ORMMaterial,
    Product as ORMProduct,
    Project as ORMProject,
    Transaction as ORMTransaction,
    StockMovement as ORMStockMovement,
)


def _utc(value: Optional[datetime]) -> Optional[datetime]:
    """SQLite drops tzinfo on the way out; timestamps are always written in UTC."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def client_to_domain(orm_client: ORMClient) -> domain.Client:
    """Convert SQLAlchemy Client model to domain Client entity."""
    return domain.Client(
        id=orm_client.id,
        name=orm_client.name,
        person_type=domain.PersonType(orm_client.person_type),
        tax_id=orm_client.tax_id,
        email=orm_client.email,
        phone=orm_client.phone,
        mobile=orm_client.mobile,
        address=domain.Address(
            country=orm_client.country,
            state=orm_client.state,
            city=orm_client.city,
            zip_code=orm_client.zip_code,
            neighborhood=orm_client.neighborhood,
            street_type=orm_client.street_type,
            street=orm_client.street,
        ),
        created_at=_utc(orm_client.created_at),
        total_projects=orm_client.total_projects,
        total_value=orm_client.total_value,
    )


def material_to_domain(orm_material: ORMMaterial) -> domain.Material:
    """Convert SQLAlchemy Material model to domain Material entity."""
    return domain.Material(
        id=orm_material.id,
        name=orm_material.name,
        description=orm_material.description,
        category=orm_material.category,
        unit=orm_material.unit,
        current_stock=orm_material.current_stock,
        min_stock=orm_material.min_stock,
        current_price=orm_material.current_price,
        price_history=tuple(
            domain.PriceEntry(date=entry.date, price=entry.price, supplier=entry.supplier)
            for entry in orm_material.price_history
        ),
        created_at=_utc(orm_material.created_at),
    )


def product_to_domain(orm_product: ORMProduct) -> domain.Product:
    """Convert SQLAlchemy Product model to domain Product entity."""
    return domain.Product(
        id=orm_product.id,
        name=orm_product.name,
        description=orm_product.description,
        category=orm_product.category,
        unit=orm_product.unit,
        components=tuple(
            domain.ProductComponent(
                material_id=component.material_id,
                material_name=component.material_name,
                quantity=component.quantity,
                unit=component.unit,
            )
            for component in orm_product.components
        ),
        created_at=_utc(orm_product.created_at),
    )


def project_to_domain(orm_project: ORMProject) -> domain.Project:
    """Convert SQLAlchemy Project model to domain Project entity."""
    payment_terms = None
    if orm_project.installments is not None:
        payment_terms = domain.PaymentTerms(
            installments=orm_project.installments,
            payment_method=domain.PaymentMethod(orm_project.payment_method),
            discount_percentage=orm_project.discount_percentage,
            installment_value=orm_project.installment_value,
            total_with_discount=orm_project.total_with_discount,
        )

    return domain.Project(
        id=orm_project.id,
        number=orm_project.number,
        client_id=orm_project.client_id,
        client_name=orm_project.client_name,
        title=orm_project.title,
        description=orm_project.description,
        status=domain.ProjectStatus(orm_project.status),
        type=domain.ProjectType(orm_project.type),
        line_items=tuple(
            domain.LineItem(
                id=item.id,
                product_id=item.product_id,
                product_name=item.product_name,
                quantity=item.quantity,
                unit_price=item.unit_price,
                total_price=item.total_price,
            )
            for item in orm_project.line_items
        ),
        budget=orm_project.budget,
        start_date=orm_project.start_date,
        end_date=orm_project.end_date,
        created_at=_utc(orm_project.created_at),
        payment_terms=payment_terms,
        materials_cost=orm_project.materials_cost,
        labor_cost=orm_project.labor_cost,
        profit_margin=orm_project.profit_margin,
        completed_at=_utc(orm_project.completed_at),
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    return domain.Transaction(
        id=orm_transaction.id,
        project_id=orm_transaction.project_id,
        project_title=orm_transaction.project_title,
        type=domain.TransactionType(orm_transaction.type),
        category=orm_transaction.category,
        description=orm_transaction.description,
        amount=orm_transaction.amount,
        date=orm_transaction.date,
        created_at=_utc(orm_transaction.created_at),
    )


def stock_movement_to_domain(orm_movement: ORMStockMovement) -> domain.StockMovement:
    """Convert SQLAlchemy StockMovement model to domain StockMovement entity."""
    return domain.StockMovement(
        id=orm_movement.id,
        material_id=orm_movement.material_id,
        material_name=orm_movement.material_name,
        type=domain.MovementType(orm_movement.type),
        quantity=orm_movement.quantity,
        date=orm_movement.date,
        created_at=_utc(orm_movement.created_at),
        unit_price=orm_movement.unit_price,
        total_value=orm_movement.total_value,
        project_id=orm_movement.project_id,
        project_title=orm_movement.project_title,
    )
