"""Domain model entities for woodshop.

These are pure data classes representing business concepts, independent of
the storage schema. Records handed out by the store are immutable snapshots;
changing one means calling a service mutation.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import Optional


class PersonType(str, Enum):
    """Legal person type of a client."""

    INDIVIDUAL = "individual"
    COMPANY = "company"


class ProjectStatus(str, Enum):
    """Lifecycle status of a project. Any status may follow any other."""

    QUOTE = "quote"
    APPROVED = "approved"
    IN_PRODUCTION = "in_production"
    COMPLETED = "completed"
    DELIVERED = "delivered"


class ProjectType(str, Enum):
    """Whether a project is just a quote or a confirmed sale."""

    QUOTE = "quote"
    SALE = "sale"


class PaymentMethod(str, Enum):
    """Accepted payment methods."""

    CASH = "cash"
    PIX = "pix"
    CREDIT_CARD = "credit_card"
    DEBIT_CARD = "debit_card"
    BANK_SLIP = "bank_slip"
    BANK_TRANSFER = "bank_transfer"


class TransactionType(str, Enum):
    """Direction of money for a financial transaction."""

    INFLOW = "inflow"
    OUTFLOW = "outflow"


class MovementType(str, Enum):
    """Direction of a stock movement."""

    IN = "in"
    OUT = "out"


@dataclass(frozen=True)
class Address:
    """Postal address of a client."""

    country: str = ""
    state: str = ""
    city: str = ""
    zip_code: str = ""
    neighborhood: str = ""
    street_type: str = ""
    street: str = ""


@dataclass(frozen=True)
class Client:
    """Client domain entity.

    ``tax_id`` holds a CPF for individuals and a CNPJ for companies.
    ``total_projects`` and ``total_value`` are rollups maintained by project
    creation only.
    """

    id: str
    name: str
    person_type: PersonType
    tax_id: Optional[str]
    email: str
    phone: str
    mobile: str
    address: Address
    created_at: datetime
    total_projects: int = 0
    total_value: Decimal = Decimal("0")

    @property
    def tax_id_kind(self) -> str:
        """Name of the tax id variant used by this client."""
        return "CPF" if self.person_type == PersonType.INDIVIDUAL else "CNPJ"


@dataclass(frozen=True)
class PriceEntry:
    """One entry of a material's price history."""

    date: date
    price: Decimal
    supplier: Optional[str] = None


@dataclass(frozen=True)
class PriceVariation:
    """Percent change of a material price against the entry before it."""

    percentage: Optional[Decimal]
    is_increase: bool


@dataclass(frozen=True)
class Material:
    """Material domain entity. ``price_history`` is in chronological order."""

    id: str
    name: str
    description: str
    category: str
    unit: str
    current_stock: Decimal
    min_stock: Decimal
    current_price: Decimal
    price_history: tuple[PriceEntry, ...]
    created_at: datetime

    @property
    def is_low_stock(self) -> bool:
        return self.current_stock <= self.min_stock

    @property
    def price_variation(self) -> Optional[PriceVariation]:
        """Change between the last two price history entries.

        None until the history has two entries. A change away from a previous
        price of zero has no percentage, only a direction.
        """
        if len(self.price_history) < 2:
            return None
        previous = self.price_history[-2].price
        latest = self.price_history[-1].price
        if previous == 0:
            return PriceVariation(percentage=None, is_increase=latest > 0)
        percentage = ((latest - previous) / previous * 100).quantize(
            Decimal("0.01"), rounding=ROUND_HALF_UP
        )
        return PriceVariation(percentage=percentage, is_increase=latest > previous)


@dataclass(frozen=True)
class ProductComponent:
    """Bill-of-materials entry of a product."""

    material_id: str
    material_name: str
    quantity: Decimal
    unit: str


@dataclass(frozen=True)
class Product:
    """Product domain entity."""

    id: str
    name: str
    description: str
    category: str
    unit: str
    components: tuple[ProductComponent, ...]
    created_at: datetime


@dataclass(frozen=True)
class LineItem:
    """Product line of a project."""

    id: str
    product_id: str
    product_name: str
    quantity: Decimal
    unit_price: Decimal
    total_price: Decimal


@dataclass(frozen=True)
class PaymentTerms:
    """Payment conditions embedded in a project."""

    installments: int
    payment_method: PaymentMethod
    discount_percentage: Decimal = Decimal("0")
    installment_value: Optional[Decimal] = None
    total_with_discount: Optional[Decimal] = None


@dataclass(frozen=True)
class Project:
    """Project domain entity (a quote or a sale)."""

    id: str
    number: int
    client_id: str
    client_name: str
    title: str
    description: str
    status: ProjectStatus
    type: ProjectType
    line_items: tuple[LineItem, ...]
    budget: Decimal
    start_date: Optional[date]
    end_date: Optional[date]
    created_at: datetime
    payment_terms: Optional[PaymentTerms] = None
    materials_cost: Optional[Decimal] = None
    labor_cost: Optional[Decimal] = None
    profit_margin: Optional[Decimal] = None
    completed_at: Optional[datetime] = None


@dataclass(frozen=True)
class Transaction:
    """Financial transaction domain entity."""

    id: str
    project_id: Optional[str]
    project_title: Optional[str]
    type: TransactionType
    category: str
    description: str
    amount: Decimal
    date: date
    created_at: datetime


@dataclass(frozen=True)
class StockMovement:
    """Stock movement domain entity."""

    id: str
    material_id: str
    material_name: str
    type: MovementType
    quantity: Decimal
    date: date
    created_at: datetime
    unit_price: Optional[Decimal] = None
    total_value: Optional[Decimal] = None
    project_id: Optional[str] = None
    project_title: Optional[str] = None


@dataclass(frozen=True)
class ComponentInput:
    """Component requested when creating or editing a product.

    Name and unit default to the referenced material's when omitted.
    """

    material_id: str
    quantity: Decimal
    material_name: Optional[str] = None
    unit: Optional[str] = None


@dataclass(frozen=True)
class LineItemInput:
    """Line item requested when creating or editing a project."""

    product_id: str
    quantity: Decimal
    unit_price: Decimal
    product_name: Optional[str] = None


@dataclass(frozen=True)
class ActivityEntry:
    """Entry of the dashboard's recent activity feed."""

    kind: str
    message: str
    created_at: datetime


@dataclass(frozen=True)
class DashboardStats:
    """Aggregate figures shown on the dashboard."""

    total_clients: int
    active_projects: int
    monthly_revenue: Decimal
    pending_payments: Decimal
    low_stock_items: int
    recent_activity: list[ActivityEntry] = field(default_factory=list)
