"""Project domain service.

Creating, updating and deleting projects drives most of the shop's side
effects: deposits and final payments, stock consumption, client rollups and
cascading deletes. Every public method runs as one unit of work, so either all
of its effects land or none do.
"""

import logging
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional, Union

from woodshop.database.base import Database
from woodshop.domain import errors
from woodshop.domain.entities import (
    LineItem,
    LineItemInput,
    PaymentMethod,
    PaymentTerms,
    Project as ProjectEntity,
    ProjectStatus,
    ProjectType,
    TransactionType,
)
from woodshop.domain.stock import StockService
from woodshop.domain.transaction import TransactionService
from woodshop.domain.validation import (
    MONEY,
    QUANTITY,
    choice,
    non_negative,
    optional_non_negative,
    positive,
    required_name,
    to_decimal,
    whole_number,
)
from woodshop.utils.amount_parser import Number, money_round

logger = logging.getLogger(__name__)

# Sales are paid half up front and half on completion
DEPOSIT_RATE = Decimal("0.5")
FINAL_PAYMENT_RATE = Decimal("0.5")

DEPOSIT_CATEGORY = "Deposit"
FINAL_PAYMENT_CATEGORY = "Final Payment"


def compute_payment_terms(budget: Decimal, terms: PaymentTerms) -> PaymentTerms:
    """Return ``terms`` with the discounted total and installment value filled in.

    Raises:
        ValidationError: If installments is not a whole number >= 1 or the
            discount is outside 0..100
    """
    if terms.installments is None:
        raise errors.ValidationError("installments must be at least 1 (got None)")
    installments = whole_number("installments", terms.installments, minimum=1)
    discount = non_negative("discount_percentage", terms.discount_percentage or 0, MONEY)
    if discount > 100:
        raise errors.ValidationError(f"discount_percentage must not exceed 100 (got {discount})")

    total = money_round(budget * (Decimal("100") - discount) / Decimal("100"))
    return PaymentTerms(
        installments=installments,
        payment_method=choice(PaymentMethod, terms.payment_method),
        discount_percentage=discount,
        installment_value=money_round(total / installments),
        total_with_discount=total,
    )


class ProjectService:
    """Service for managing projects and the rules they trigger."""

    def __init__(self, db: Database):
        """Initialize project service.

        Args:
            db: Database instance
        """
        self.db = db
        self.transactions = TransactionService(db)
        self.stock = StockService(db)

    def _build_line_items(self, line_items: Iterable[LineItemInput]) -> list[LineItem]:
        items = []
        for requested in line_items:
            product = self.db.get_product(requested.product_id)
            if product is None:
                raise errors.NotFoundError(errors.product_not_found(requested.product_id))
            quantity = positive("line item quantity", requested.quantity, QUANTITY)
            unit_price = non_negative("unit_price", requested.unit_price, MONEY)
            items.append(
                LineItem(
                    id=self.db.new_id(),
                    product_id=product.id,
                    product_name=requested.product_name or product.name,
                    quantity=quantity,
                    unit_price=unit_price,
                    total_price=money_round(quantity * unit_price),
                )
            )
        return items

    def _require_project(self, project_id: str) -> ProjectEntity:
        project = self.db.get_project(project_id)
        if project is None:
            raise errors.NotFoundError(errors.project_not_found(project_id))
        return project

    def create_project(
        self,
        client_id: str,
        title: str,
        budget: Number,
        type: Union[ProjectType, str] = ProjectType.QUOTE,
        status: Union[ProjectStatus, str] = ProjectStatus.QUOTE,
        description: str = "",
        line_items: Iterable[LineItemInput] = (),
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        payment_terms: Optional[PaymentTerms] = None,
        materials_cost: Optional[Number] = None,
        labor_cost: Optional[Number] = None,
        profit_margin: Optional[Number] = None,
    ) -> ProjectEntity:
        """Create a project and apply its side effects.

        - The project gets the next sequential number and a snapshot of the
          client's name.
        - A sale that is past the quote stage records a deposit of half the
          budget, dated today.
        - Line items consume stock for every component of their products.
        - The client's project count and total value go up.

        Args:
            client_id: Client the project belongs to
            title: Project title
            budget: Total budget
            type: Quote or sale
            status: Initial status
            description: Free text description
            line_items: Products sold with quantity and unit price
            start_date: Planned start
            end_date: Planned delivery
            payment_terms: Installments, method and discount; the derived
                values are computed here
            materials_cost: Optional cost estimate for materials
            labor_cost: Optional cost estimate for labor
            profit_margin: Optional profit margin percentage

        Returns:
            The created project

        Raises:
            NotFoundError: If the client or a product doesn't exist
            ValidationError: If a field is invalid
        """
        title = required_name("Project", title)
        budget = non_negative("budget", budget, MONEY)
        type = choice(ProjectType, type)
        status = choice(ProjectStatus, status)
        materials_cost = optional_non_negative("materials_cost", materials_cost, MONEY)
        labor_cost = optional_non_negative("labor_cost", labor_cost, MONEY)
        if profit_margin is not None:
            profit_margin = to_decimal("profit_margin", profit_margin, MONEY)
        if payment_terms is not None:
            payment_terms = compute_payment_terms(budget, payment_terms)

        with self.db.atomic():
            client = self.db.get_client(client_id)
            if client is None:
                raise errors.NotFoundError(errors.client_not_found(client_id))

            items = self._build_line_items(line_items)
            number = self.db.next_project_number()
            project_id = self.db.create_project(
                number=number,
                client_id=client.id,
                client_name=client.name,
                title=title,
                description=description,
                status=status,
                type=type,
                budget=budget,
                line_items=items,
                start_date=start_date,
                end_date=end_date,
                payment_terms=payment_terms,
                materials_cost=materials_cost,
                labor_cost=labor_cost,
                profit_margin=profit_margin,
            )
            logger.info("Created project #%d '%s' for '%s'", number, title, client.name)

            if type == ProjectType.SALE and status != ProjectStatus.QUOTE:
                deposit = self.transactions.create_transaction(
                    type=TransactionType.INFLOW,
                    category=DEPOSIT_CATEGORY,
                    amount=money_round(budget * DEPOSIT_RATE),
                    description=f"Deposit for project #{number} - {title}",
                    project_id=project_id,
                )
                logger.info("Recorded deposit of %s for project #%d", deposit.amount, number)

            if items:
                self.stock.apply_project_stock_consumption(project_id)

            self.db.add_client_rollup(client.id, projects=1, value=budget)

            return self.db.get_project(project_id)

    def get_project(self, project_id: str) -> Optional[ProjectEntity]:
        """Get project by ID, or None if not found."""
        return self.db.get_project(project_id)

    def get_project_by_number(self, number: int) -> Optional[ProjectEntity]:
        """Get project by its sequential number, or None if not found."""
        return self.db.get_project_by_number(number)

    def list_projects(self, client_id: Optional[str] = None) -> list[ProjectEntity]:
        """List projects in creation order, optionally for one client."""
        return self.db.list_projects(client_id=client_id)

    def update_project(
        self,
        project_id: str,
        title: Optional[str] = None,
        description: Optional[str] = None,
        status: Optional[Union[ProjectStatus, str]] = None,
        type: Optional[Union[ProjectType, str]] = None,
        budget: Optional[Number] = None,
        client_id: Optional[str] = None,
        line_items: Optional[Iterable[LineItemInput]] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        payment_terms: Optional[PaymentTerms] = None,
        clear_payment_terms: bool = False,
        materials_cost: Optional[Number] = None,
        labor_cost: Optional[Number] = None,
        profit_margin: Optional[Number] = None,
    ) -> ProjectEntity:
        """Update project fields. Fields left as None are not changed.

        Moving a project into ``completed`` for the first time records the
        final payment and stamps ``completed_at``. The payment uses the budget
        and title stored before this update. The check runs against the record
        read before anything is written, so re-completing a project that is or
        ever was completed records nothing.

        Editing line items does not consume stock again, and changing the
        budget or client does not touch client rollups. Reassigning the client
        takes a fresh snapshot of the new client's name.

        Args:
            project_id: Project to update
            clear_payment_terms: If True, remove the payment terms
                (payment_terms must be None)

        Raises:
            NotFoundError: If the project, new client or a product doesn't exist
            ValidationError: If a field is invalid
        """
        if clear_payment_terms and payment_terms is not None:
            raise errors.ValidationError("Cannot set both payment_terms and clear_payment_terms")

        with self.db.atomic():
            previous = self._require_project(project_id)

            changes = {}
            if title is not None:
                changes["title"] = required_name("Project", title)
            if description is not None:
                changes["description"] = description
            first_completion = False
            if status is not None:
                status = choice(ProjectStatus, status)
                changes["status"] = status.value
                first_completion = (
                    status == ProjectStatus.COMPLETED
                    and previous.status != ProjectStatus.COMPLETED
                    and previous.completed_at is None
                )
                if first_completion:
                    changes["completed_at"] = self.db.now()
            if type is not None:
                changes["type"] = choice(ProjectType, type).value
            if budget is not None:
                budget = non_negative("budget", budget, MONEY)
                changes["budget"] = budget
            if client_id is not None and client_id != previous.client_id:
                client = self.db.get_client(client_id)
                if client is None:
                    raise errors.NotFoundError(errors.client_not_found(client_id))
                changes["client_id"] = client.id
                changes["client_name"] = client.name
            if start_date is not None:
                changes["start_date"] = start_date
            if end_date is not None:
                changes["end_date"] = end_date
            if materials_cost is not None:
                changes["materials_cost"] = non_negative("materials_cost", materials_cost, MONEY)
            if labor_cost is not None:
                changes["labor_cost"] = non_negative("labor_cost", labor_cost, MONEY)
            if profit_margin is not None:
                changes["profit_margin"] = to_decimal("profit_margin", profit_margin, MONEY)

            if changes:
                self.db.update_project(project_id, **changes)
            if line_items is not None:
                self.db.replace_project_line_items(project_id, self._build_line_items(line_items))

            new_budget = budget if budget is not None else previous.budget
            if clear_payment_terms:
                self.db.set_payment_terms(project_id, None)
            elif payment_terms is not None:
                self.db.set_payment_terms(project_id, compute_payment_terms(new_budget, payment_terms))
            elif previous.payment_terms is not None and budget is not None:
                self.db.set_payment_terms(
                    project_id, compute_payment_terms(new_budget, previous.payment_terms)
                )

            if first_completion:
                payment = self.transactions.create_transaction(
                    type=TransactionType.INFLOW,
                    category=FINAL_PAYMENT_CATEGORY,
                    amount=money_round(previous.budget * FINAL_PAYMENT_RATE),
                    description=f"Final payment - Project #{previous.number}",
                    project_id=project_id,
                    project_title=previous.title,
                )
                logger.info(
                    "Recorded final payment of %s for project #%d", payment.amount, previous.number
                )

            return self.db.get_project(project_id)

    def delete_project(self, project_id: str) -> None:
        """Delete a project with its transactions and stock movements.

        Material stock consumed by the deleted movements is not given back.
        Deleting an unknown project is a no-op.
        """
        with self.db.atomic():
            project = self.db.get_project(project_id)
            if project is None:
                return

            transaction_count = self.db.delete_project_transactions(project_id)
            movement_count = self.db.delete_project_stock_movements(project_id)
            self.db.delete_project(project_id)
            logger.info(
                "Deleted project #%d with %d transaction(s) and %d stock movement(s)",
                project.number,
                transaction_count,
                movement_count,
            )
