"""SQLAlchemy store implementation."""

import logging
import threading
import uuid
from contextlib import contextmanager
from datetime import date, datetime, UTC
from decimal import Decimal
from typing import Any, Callable, Iterator, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from woodshop.database.base import Database
from woodshop.database.models import (
    Base,
    Client,
    LineItem,
    Material,
    PriceHistoryEntry,
    Product,
    ProductComponent,
    Project,
    Sequence,
    StockMovement,
    Transaction,
    create_session_factory,
)
from woodshop.database.mappers import (
    client_to_domain,
    material_to_domain,
    product_to_domain,
    project_to_domain,
    stock_movement_to_domain,
    transaction_to_domain,
)
from woodshop.domain import entities as domain
from woodshop.domain import errors

logger = logging.getLogger(__name__)

PROJECT_NUMBER_SEQUENCE = "project_number"


def _default_id() -> str:
    return uuid.uuid4().hex


def _default_clock() -> datetime:
    return datetime.now(UTC)


class SQLAlchemyDatabase(Database):
    """SQLAlchemy-based implementation of the Database interface."""

    def __init__(
        self,
        database_url: str = "sqlite://",
        id_factory: Optional[Callable[[], str]] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """Initialize SQLAlchemy store.

        Args:
            database_url: SQLAlchemy database URL. The default is a private
                in-memory SQLite database.
            id_factory: Callable returning fresh ids (defaults to uuid4 hex)
            clock: Callable returning the current timestamp (defaults to UTC now)
        """
        self.database_url = database_url
        self.session_factory = create_session_factory(database_url)
        self.id_factory = id_factory or _default_id
        self.clock = clock or _default_clock
        self._session: Optional[Session] = None
        self._lock = threading.RLock()
        self._depth = 0

    def _get_session(self) -> Session:
        """Get current session, creating one if needed."""
        if self._session is None:
            self._session = self.session_factory()
        return self._session

    def connect(self) -> None:
        """Connect to the store."""
        # Connection is lazy, so this is a no-op
        pass

    def disconnect(self) -> None:
        """Disconnect from the store."""
        with self._lock:
            if self._session is not None:
                self._session.close()
                self._session = None

    def initialize_schema(self) -> None:
        """Initialize store schema (create tables)."""
        # Schema is created automatically by create_session_factory
        pass

    def reset(self) -> None:
        """Drop every record and counter, leaving an empty store."""
        with self._lock:
            if self._depth:
                raise RuntimeError("Cannot reset the store inside a unit of work")
            self.disconnect()
            engine = self.session_factory.kw["bind"]
            Base.metadata.drop_all(engine)
            Base.metadata.create_all(engine)
            logger.info("Store reset")

    @contextmanager
    def atomic(self) -> Iterator[Session]:
        """Run a re-entrant unit of work under the store lock."""
        with self._lock:
            session = self._get_session()
            self._depth += 1
            try:
                yield session
            except BaseException:
                self._depth -= 1
                if self._depth == 0:
                    session.rollback()
                    logger.debug("Unit of work rolled back")
                raise
            else:
                self._depth -= 1
                if self._depth == 0:
                    session.commit()

    def new_id(self) -> str:
        """Return a fresh opaque identifier."""
        return self.id_factory()

    def now(self) -> datetime:
        """Return the store clock's current timestamp."""
        return self.clock()

    @staticmethod
    def _apply_changes(row: Any, changes: dict[str, Any]) -> None:
        for key, value in changes.items():
            if key in ("id", "seq") or not hasattr(type(row), key):
                raise ValueError(f"Unknown {type(row).__name__.lower()} field '{key}'")
            setattr(row, key, value)

    # Client operations
    def _client_row(self, session: Session, client_id: str) -> Client:
        client = session.query(Client).filter(Client.id == client_id).first()
        if client is None:
            raise errors.NotFoundError(errors.client_not_found(client_id))
        return client

    def create_client(
        self,
        name: str,
        person_type: domain.PersonType,
        tax_id: Optional[str],
        email: str,
        phone: str,
        mobile: str,
        address: domain.Address,
    ) -> str:
        """Create a client with zeroed rollups. Returns client ID."""
        with self.atomic() as session:
            client = Client(
                id=self.new_id(),
                name=name,
                person_type=person_type.value,
                tax_id=tax_id,
                email=email,
                phone=phone,
                mobile=mobile,
                country=address.country,
                state=address.state,
                city=address.city,
                zip_code=address.zip_code,
                neighborhood=address.neighborhood,
                street_type=address.street_type,
                street=address.street,
                created_at=self.now(),
                total_projects=0,
                total_value=Decimal("0"),
            )
            session.add(client)
            logger.debug("Created client %s", client.id)
            return client.id

    def get_client(self, client_id: str) -> Optional[domain.Client]:
        """Get client by ID."""
        with self.atomic() as session:
            client = session.query(Client).filter(Client.id == client_id).first()
            if client is None:
                return None
            return client_to_domain(client)

    def list_clients(self) -> list[domain.Client]:
        """List all clients in creation order."""
        with self.atomic() as session:
            clients = session.query(Client).order_by(Client.seq).all()
            return [client_to_domain(client) for client in clients]

    def update_client(self, client_id: str, **changes: Any) -> None:
        """Update client columns."""
        with self.atomic() as session:
            client = self._client_row(session, client_id)
            self._apply_changes(client, changes)

    def add_client_rollup(self, client_id: str, projects: int, value: Decimal) -> None:
        """Increment a client's project count and total value."""
        with self.atomic() as session:
            client = self._client_row(session, client_id)
            client.total_projects = (client.total_projects or 0) + projects
            client.total_value = (client.total_value or Decimal("0")) + value

    def delete_client(self, client_id: str) -> bool:
        """Delete a client row only."""
        with self.atomic() as session:
            client = session.query(Client).filter(Client.id == client_id).first()
            if client is None:
                return False
            session.delete(client)
            return True

    # Material operations
    def _material_row(self, session: Session, material_id: str) -> Material:
        material = session.query(Material).filter(Material.id == material_id).first()
        if material is None:
            raise errors.NotFoundError(errors.material_not_found(material_id))
        return material

    def create_material(
        self,
        name: str,
        description: str,
        category: str,
        unit: str,
        current_stock: Decimal,
        min_stock: Decimal,
        current_price: Decimal,
        price_history: list[domain.PriceEntry],
    ) -> str:
        """Create a material. Returns material ID."""
        with self.atomic() as session:
            material = Material(
                id=self.new_id(),
                name=name,
                description=description,
                category=category,
                unit=unit,
                current_stock=current_stock,
                min_stock=min_stock,
                current_price=current_price,
                created_at=self.now(),
            )
            for entry in price_history:
                material.price_history.append(
                    PriceHistoryEntry(date=entry.date, price=entry.price, supplier=entry.supplier)
                )
            session.add(material)
            logger.debug("Created material %s", material.id)
            return material.id

    def get_material(self, material_id: str) -> Optional[domain.Material]:
        """Get material by ID."""
        with self.atomic() as session:
            material = session.query(Material).filter(Material.id == material_id).first()
            if material is None:
                return None
            return material_to_domain(material)

    def list_materials(self) -> list[domain.Material]:
        """List all materials in creation order."""
        with self.atomic() as session:
            materials = session.query(Material).order_by(Material.seq).all()
            return [material_to_domain(material) for material in materials]

    def update_material(self, material_id: str, **changes: Any) -> None:
        """Update material columns."""
        with self.atomic() as session:
            material = self._material_row(session, material_id)
            self._apply_changes(material, changes)

    def append_price_entry(self, material_id: str, entry: domain.PriceEntry) -> None:
        """Append an entry to the end of a material's price history."""
        with self.atomic() as session:
            material = self._material_row(session, material_id)
            material.price_history.append(
                PriceHistoryEntry(date=entry.date, price=entry.price, supplier=entry.supplier)
            )

    def delete_material(self, material_id: str) -> bool:
        """Delete a material and its price history."""
        with self.atomic() as session:
            material = session.query(Material).filter(Material.id == material_id).first()
            if material is None:
                return False
            session.delete(material)
            return True

    # Product operations
    def _product_row(self, session: Session, product_id: str) -> Product:
        product = session.query(Product).filter(Product.id == product_id).first()
        if product is None:
            raise errors.NotFoundError(errors.product_not_found(product_id))
        return product

    @staticmethod
    def _component_rows(components: list[domain.ProductComponent]) -> list[ProductComponent]:
        return [
            ProductComponent(
                material_id=component.material_id,
                material_name=component.material_name,
                quantity=component.quantity,
                unit=component.unit,
            )
            for component in components
        ]

    def create_product(
        self,
        name: str,
        description: str,
        category: str,
        unit: str,
        components: list[domain.ProductComponent],
    ) -> str:
        """Create a product. Returns product ID."""
        with self.atomic() as session:
            product = Product(
                id=self.new_id(),
                name=name,
                description=description,
                category=category,
                unit=unit,
                created_at=self.now(),
            )
            product.components = self._component_rows(components)
            session.add(product)
            logger.debug("Created product %s", product.id)
            return product.id

    def get_product(self, product_id: str) -> Optional[domain.Product]:
        """Get product by ID."""
        with self.atomic() as session:
            product = session.query(Product).filter(Product.id == product_id).first()
            if product is None:
                return None
            return product_to_domain(product)

    def list_products(self) -> list[domain.Product]:
        """List all products in creation order."""
        with self.atomic() as session:
            products = session.query(Product).order_by(Product.seq).all()
            return [product_to_domain(product) for product in products]

    def update_product(self, product_id: str, **changes: Any) -> None:
        """Update product columns."""
        with self.atomic() as session:
            product = self._product_row(session, product_id)
            self._apply_changes(product, changes)

    def replace_product_components(
        self, product_id: str, components: list[domain.ProductComponent]
    ) -> None:
        """Replace the whole bill of materials of a product."""
        with self.atomic() as session:
            product = self._product_row(session, product_id)
            product.components = []
            # Orphans must be gone before re-inserting rows with the same material
            session.flush()
            product.components = self._component_rows(components)

    def delete_product(self, product_id: str) -> bool:
        """Delete a product and its components."""
        with self.atomic() as session:
            product = session.query(Product).filter(Product.id == product_id).first()
            if product is None:
                return False
            session.delete(product)
            return True

    # Project operations
    def _project_row(self, session: Session, project_id: str) -> Project:
        project = session.query(Project).filter(Project.id == project_id).first()
        if project is None:
            raise errors.NotFoundError(errors.project_not_found(project_id))
        return project

    @staticmethod
    def _line_item_rows(line_items: list[domain.LineItem]) -> list[LineItem]:
        return [
            LineItem(
                id=item.id,
                product_id=item.product_id,
                product_name=item.product_name,
                quantity=item.quantity,
                unit_price=item.unit_price,
                total_price=item.total_price,
            )
            for item in line_items
        ]

    @staticmethod
    def _payment_columns(payment_terms: Optional[domain.PaymentTerms]) -> dict[str, Any]:
        if payment_terms is None:
            return {
                "installments": None,
                "payment_method": None,
                "discount_percentage": None,
                "installment_value": None,
                "total_with_discount": None,
            }
        return {
            "installments": payment_terms.installments,
            "payment_method": payment_terms.payment_method.value,
            "discount_percentage": payment_terms.discount_percentage,
            "installment_value": payment_terms.installment_value,
            "total_with_discount": payment_terms.total_with_discount,
        }

    def next_project_number(self) -> int:
        """Advance and return the project number counter."""
        with self.atomic() as session:
            sequence = session.get(Sequence, PROJECT_NUMBER_SEQUENCE)
            if sequence is None:
                sequence = Sequence(name=PROJECT_NUMBER_SEQUENCE, value=0)
                session.add(sequence)
            highest = session.query(func.max(Project.number)).scalar() or 0
            sequence.value = max(sequence.value or 0, highest) + 1
            return sequence.value

    def create_project(
        self,
        number: int,
        client_id: str,
        client_name: str,
        title: str,
        description: str,
        status: domain.ProjectStatus,
        type: domain.ProjectType,
        budget: Decimal,
        line_items: list[domain.LineItem],
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        payment_terms: Optional[domain.PaymentTerms] = None,
        materials_cost: Optional[Decimal] = None,
        labor_cost: Optional[Decimal] = None,
        profit_margin: Optional[Decimal] = None,
    ) -> str:
        """Create a project. Returns project ID."""
        with self.atomic() as session:
            project = Project(
                id=self.new_id(),
                number=number,
                client_id=client_id,
                client_name=client_name,
                title=title,
                description=description,
                status=status.value,
                type=type.value,
                budget=budget,
                start_date=start_date,
                end_date=end_date,
                created_at=self.now(),
                materials_cost=materials_cost,
                labor_cost=labor_cost,
                profit_margin=profit_margin,
                **self._payment_columns(payment_terms),
            )
            project.line_items = self._line_item_rows(line_items)
            session.add(project)
            logger.debug("Created project %s (#%d)", project.id, number)
            return project.id

    def get_project(self, project_id: str) -> Optional[domain.Project]:
        """Get project by ID."""
        with self.atomic() as session:
            project = session.query(Project).filter(Project.id == project_id).first()
            if project is None:
                return None
            return project_to_domain(project)

    def get_project_by_number(self, number: int) -> Optional[domain.Project]:
        """Get project by its sequential number."""
        with self.atomic() as session:
            project = session.query(Project).filter(Project.number == number).first()
            if project is None:
                return None
            return project_to_domain(project)

    def list_projects(self, client_id: Optional[str] = None) -> list[domain.Project]:
        """List projects in creation order, optionally for one client."""
        with self.atomic() as session:
            query = session.query(Project)
            if client_id is not None:
                query = query.filter(Project.client_id == client_id)
            projects = query.order_by(Project.seq).all()
            return [project_to_domain(project) for project in projects]

    def update_project(self, project_id: str, **changes: Any) -> None:
        """Update project columns."""
        with self.atomic() as session:
            project = self._project_row(session, project_id)
            self._apply_changes(project, changes)

    def replace_project_line_items(self, project_id: str, line_items: list[domain.LineItem]) -> None:
        """Replace all line items of a project."""
        with self.atomic() as session:
            project = self._project_row(session, project_id)
            project.line_items = []
            session.flush()
            project.line_items = self._line_item_rows(line_items)

    def set_payment_terms(self, project_id: str, payment_terms: Optional[domain.PaymentTerms]) -> None:
        """Store or clear the payment terms of a project."""
        with self.atomic() as session:
            project = self._project_row(session, project_id)
            self._apply_changes(project, self._payment_columns(payment_terms))

    def delete_project(self, project_id: str) -> bool:
        """Delete a project row and its line items only."""
        with self.atomic() as session:
            project = session.query(Project).filter(Project.id == project_id).first()
            if project is None:
                return False
            session.delete(project)
            return True

    # Transaction operations
    def create_transaction(
        self,
        type: domain.TransactionType,
        category: str,
        description: str,
        amount: Decimal,
        date: date,
        project_id: Optional[str] = None,
        project_title: Optional[str] = None,
    ) -> str:
        """Create a transaction. Returns transaction ID."""
        with self.atomic() as session:
            transaction = Transaction(
                id=self.new_id(),
                project_id=project_id,
                project_title=project_title,
                type=type.value,
                category=category,
                description=description,
                amount=amount,
                date=date,
                created_at=self.now(),
            )
            session.add(transaction)
            logger.debug("Created transaction %s", transaction.id)
            return transaction.id

    def get_transaction(self, transaction_id: str) -> Optional[domain.Transaction]:
        """Get transaction by ID."""
        with self.atomic() as session:
            transaction = session.query(Transaction).filter(Transaction.id == transaction_id).first()
            if transaction is None:
                return None
            return transaction_to_domain(transaction)

    def list_transactions(self, project_id: Optional[str] = None) -> list[domain.Transaction]:
        """List transactions in creation order, optionally for one project."""
        with self.atomic() as session:
            query = session.query(Transaction)
            if project_id is not None:
                query = query.filter(Transaction.project_id == project_id)
            transactions = query.order_by(Transaction.seq).all()
            return [transaction_to_domain(txn) for txn in transactions]

    def delete_project_transactions(self, project_id: str) -> int:
        """Delete every transaction referencing a project."""
        with self.atomic() as session:
            return (
                session.query(Transaction)
                .filter(Transaction.project_id == project_id)
                .delete(synchronize_session="fetch")
            )

    # Stock movement operations
    def create_stock_movement(
        self,
        material_id: str,
        material_name: str,
        type: domain.MovementType,
        quantity: Decimal,
        date: date,
        unit_price: Optional[Decimal] = None,
        total_value: Optional[Decimal] = None,
        project_id: Optional[str] = None,
        project_title: Optional[str] = None,
    ) -> str:
        """Record a stock movement row."""
        with self.atomic() as session:
            movement = StockMovement(
                id=self.new_id(),
                material_id=material_id,
                material_name=material_name,
                type=type.value,
                quantity=quantity,
                unit_price=unit_price,
                total_value=total_value,
                project_id=project_id,
                project_title=project_title,
                date=date,
                created_at=self.now(),
            )
            session.add(movement)
            logger.debug("Created stock movement %s", movement.id)
            return movement.id

    def get_stock_movement(self, movement_id: str) -> Optional[domain.StockMovement]:
        """Get stock movement by ID."""
        with self.atomic() as session:
            movement = session.query(StockMovement).filter(StockMovement.id == movement_id).first()
            if movement is None:
                return None
            return stock_movement_to_domain(movement)

    def list_stock_movements(
        self,
        material_id: Optional[str] = None,
        project_id: Optional[str] = None,
    ) -> list[domain.StockMovement]:
        """List stock movements in creation order with optional filters."""
        with self.atomic() as session:
            query = session.query(StockMovement)
            if material_id is not None:
                query = query.filter(StockMovement.material_id == material_id)
            if project_id is not None:
                query = query.filter(StockMovement.project_id == project_id)
            movements = query.order_by(StockMovement.seq).all()
            return [stock_movement_to_domain(movement) for movement in movements]

    def delete_project_stock_movements(self, project_id: str) -> int:
        """Delete every stock movement referencing a project."""
        with self.atomic() as session:
            return (
                session.query(StockMovement)
                .filter(StockMovement.project_id == project_id)
                .delete(synchronize_session="fetch")
            )
