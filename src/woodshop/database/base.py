"""Abstract store interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from datetime import date, datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Optional, Any

# Entities are only needed for annotations; importing them at runtime would
# load the domain services, which import this module.
if TYPE_CHECKING:
    from woodshop.domain.entities import (
        Address,
        Client,
        LineItem,
        Material,
        MovementType,
        PaymentTerms,
        PriceEntry,
        Product,
        ProductComponent,
        Project,
        ProjectStatus,
        ProjectType,
        PersonType,
        StockMovement,
        Transaction,
        TransactionType,
    )


class Database(ABC):
    """Abstract store for woodshop.

    The store owns the six collections (clients, materials, products, projects,
    transactions and stock movements) and hands out immutable snapshots. It
    assigns ids and creation timestamps; business rules live in the domain
    services, which group primitive writes with :meth:`atomic`.

    ``update_*`` methods raise :class:`~woodshop.domain.errors.NotFoundError`
    for unknown ids. ``delete_*`` methods return False for unknown ids.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the store."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the store."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize store schema (create tables)."""
        pass

    @abstractmethod
    def reset(self) -> None:
        """Drop every record and counter, leaving an empty store."""
        pass

    @abstractmethod
    def atomic(self) -> AbstractContextManager[Any]:
        """Return a re-entrant unit of work.

        Everything written inside the outermost block is committed together
        when it exits, or rolled back if it raises. The block also holds the
        store lock, so other threads never observe a half-applied change.
        """
        pass

    @abstractmethod
    def new_id(self) -> str:
        """Return a fresh opaque identifier."""
        pass

    @abstractmethod
    def now(self) -> datetime:
        """Return the store clock's current timestamp."""
        pass

    def today(self) -> date:
        """Return the store clock's current date."""
        return self.now().date()

    # Client operations
    @abstractmethod
    def create_client(
        self,
        name: str,
        person_type: PersonType,
        tax_id: Optional[str],
        email: str,
        phone: str,
        mobile: str,
        address: Address,
    ) -> str:
        """Create a client with zeroed rollups. Returns client ID."""
        pass

    @abstractmethod
    def get_client(self, client_id: str) -> Optional[Client]:
        """Get client by ID."""
        pass

    @abstractmethod
    def list_clients(self) -> list[Client]:
        """List all clients in creation order."""
        pass

    @abstractmethod
    def update_client(self, client_id: str, **changes: Any) -> None:
        """Update client columns."""
        pass

    @abstractmethod
    def add_client_rollup(self, client_id: str, projects: int, value: Decimal) -> None:
        """Increment a client's project count and total value."""
        pass

    @abstractmethod
    def delete_client(self, client_id: str) -> bool:
        """Delete a client row only. Returns False if it did not exist."""
        pass

    # Material operations
    @abstractmethod
    def create_material(
        self,
        name: str,
        description: str,
        category: str,
        unit: str,
        current_stock: Decimal,
        min_stock: Decimal,
        current_price: Decimal,
        price_history: list[PriceEntry],
    ) -> str:
        """Create a material. Returns material ID."""
        pass

    @abstractmethod
    def get_material(self, material_id: str) -> Optional[Material]:
        """Get material by ID."""
        pass

    @abstractmethod
    def list_materials(self) -> list[Material]:
        """List all materials in creation order."""
        pass

    @abstractmethod
    def update_material(self, material_id: str, **changes: Any) -> None:
        """Update material columns."""
        pass

    @abstractmethod
    def append_price_entry(self, material_id: str, entry: PriceEntry) -> None:
        """Append an entry to the end of a material's price history."""
        pass

    @abstractmethod
    def delete_material(self, material_id: str) -> bool:
        """Delete a material and its price history."""
        pass

    # Product operations
    @abstractmethod
    def create_product(
        self,
        name: str,
        description: str,
        category: str,
        unit: str,
        components: list[ProductComponent],
    ) -> str:
        """Create a product. Returns product ID."""
        pass

    @abstractmethod
    def get_product(self, product_id: str) -> Optional[Product]:
        """Get product by ID."""
        pass

    @abstractmethod
    def list_products(self) -> list[Product]:
        """List all products in creation order."""
        pass

    @abstractmethod
    def update_product(self, product_id: str, **changes: Any) -> None:
        """Update product columns."""
        pass

    @abstractmethod
    def replace_product_components(self, product_id: str, components: list[ProductComponent]) -> None:
        """Replace the whole bill of materials of a product."""
        pass

    @abstractmethod
    def delete_product(self, product_id: str) -> bool:
        """Delete a product and its components."""
        pass

    # Project operations
    @abstractmethod
    def next_project_number(self) -> int:
        """Advance and return the project number counter.

        The result is greater than every number ever handed out, so numbers
        of deleted projects are never reused.
        """
        pass

    @abstractmethod
    def create_project(
        self,
        number: int,
        client_id: str,
        client_name: str,
        title: str,
        description: str,
        status: ProjectStatus,
        type: ProjectType,
        budget: Decimal,
        line_items: list[LineItem],
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        payment_terms: Optional[PaymentTerms] = None,
        materials_cost: Optional[Decimal] = None,
        labor_cost: Optional[Decimal] = None,
        profit_margin: Optional[Decimal] = None,
    ) -> str:
        """Create a project. Returns project ID."""
        pass

    @abstractmethod
    def get_project(self, project_id: str) -> Optional[Project]:
        """Get project by ID."""
        pass

    @abstractmethod
    def get_project_by_number(self, number: int) -> Optional[Project]:
        """Get project by its sequential number."""
        pass

    @abstractmethod
    def list_projects(self, client_id: Optional[str] = None) -> list[Project]:
        """List projects in creation order, optionally for one client."""
        pass

    @abstractmethod
    def update_project(self, project_id: str, **changes: Any) -> None:
        """Update project columns."""
        pass

    @abstractmethod
    def replace_project_line_items(self, project_id: str, line_items: list[LineItem]) -> None:
        """Replace all line items of a project."""
        pass

    @abstractmethod
    def set_payment_terms(self, project_id: str, payment_terms: Optional[PaymentTerms]) -> None:
        """Store or clear the payment terms of a project."""
        pass

    @abstractmethod
    def delete_project(self, project_id: str) -> bool:
        """Delete a project row and its line items only."""
        pass

    # Transaction operations
    @abstractmethod
    def create_transaction(
        self,
        type: TransactionType,
        category: str,
        description: str,
        amount: Decimal,
        date: date,
        project_id: Optional[str] = None,
        project_title: Optional[str] = None,
    ) -> str:
        """Create a transaction. Returns transaction ID."""
        pass

    @abstractmethod
    def get_transaction(self, transaction_id: str) -> Optional[Transaction]:
        """Get transaction by ID."""
        pass

    @abstractmethod
    def list_transactions(self, project_id: Optional[str] = None) -> list[Transaction]:
        """List transactions in creation order, optionally for one project."""
        pass

    @abstractmethod
    def delete_project_transactions(self, project_id: str) -> int:
        """Delete every transaction referencing a project. Returns the count."""
        pass

    # Stock movement operations
    @abstractmethod
    def create_stock_movement(
        self,
        material_id: str,
        material_name: str,
        type: MovementType,
        quantity: Decimal,
        date: date,
        unit_price: Optional[Decimal] = None,
        total_value: Optional[Decimal] = None,
        project_id: Optional[str] = None,
        project_title: Optional[str] = None,
    ) -> str:
        """Record a stock movement row. Does not touch material stock."""
        pass

    @abstractmethod
    def get_stock_movement(self, movement_id: str) -> Optional[StockMovement]:
        """Get stock movement by ID."""
        pass

    @abstractmethod
    def list_stock_movements(
        self,
        material_id: Optional[str] = None,
        project_id: Optional[str] = None,
    ) -> list[StockMovement]:
        """List stock movements in creation order with optional filters."""
        pass

    @abstractmethod
    def delete_project_stock_movements(self, project_id: str) -> int:
        """Delete every stock movement referencing a project. Returns the count."""
        pass
