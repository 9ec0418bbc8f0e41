"""Stock movement domain service."""

import logging
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional, Protocol, Union

from woodshop.database.base import Database
from woodshop.domain import errors
from woodshop.domain.entities import MovementType, StockMovement as StockMovementEntity
from woodshop.domain.validation import (
    MONEY,
    QUANTITY,
    choice,
    optional_non_negative,
    positive,
    to_decimal,
)
from woodshop.utils.amount_parser import Number, money_round

logger = logging.getLogger(__name__)


class ProductLine(Protocol):
    """Anything with a product reference and a quantity (LineItem, LineItemInput)."""

    product_id: str
    quantity: Decimal


class StockService:
    """Service for stock movements and the material stock they drive."""

    def __init__(self, db: Database):
        """Initialize stock service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_stock_movement(
        self,
        material_id: str,
        type: Union[MovementType, str],
        quantity: Number,
        date: Optional[date] = None,
        unit_price: Optional[Number] = None,
        project_id: Optional[str] = None,
    ) -> StockMovementEntity:
        """Record a stock movement and apply it to the material's stock.

        Inbound movements add ``quantity``, outbound ones subtract it. Stock
        never goes below zero: an outbound movement larger than the stock on
        hand leaves it at zero and the excess is dropped.

        Args:
            material_id: Material being moved
            type: In or out
            quantity: Positive quantity
            date: Movement date, defaults to today
            unit_price: Optional unit price; sets the movement's total value
            project_id: Optional originating project; its title is copied

        Returns:
            The created movement

        Raises:
            NotFoundError: If the material or project doesn't exist
            ValidationError: If the quantity is not positive or the price is negative
        """
        type = choice(MovementType, type)
        quantity = positive("quantity", quantity, QUANTITY)
        unit_price = optional_non_negative("unit_price", unit_price, MONEY)

        with self.db.atomic():
            material = self.db.get_material(material_id)
            if material is None:
                raise errors.NotFoundError(errors.material_not_found(material_id))

            project_title = None
            if project_id is not None:
                project = self.db.get_project(project_id)
                if project is None:
                    raise errors.NotFoundError(errors.project_not_found(project_id))
                project_title = project.title

            movement_id = self.db.create_stock_movement(
                material_id=material.id,
                material_name=material.name,
                type=type,
                quantity=quantity,
                date=date or self.db.today(),
                unit_price=unit_price,
                total_value=money_round(quantity * unit_price) if unit_price is not None else None,
                project_id=project_id,
                project_title=project_title,
            )

            if type == MovementType.IN:
                new_stock = material.current_stock + quantity
            else:
                new_stock = material.current_stock - quantity
            if new_stock < 0:
                logger.warning(
                    "Stock of '%s' would drop to %s; clamping at zero", material.name, new_stock
                )
                new_stock = Decimal("0")
            self.db.update_material(material.id, current_stock=new_stock)

            return self.db.get_stock_movement(movement_id)

    def apply_project_stock_consumption(
        self,
        project_id: str,
        line_items: Optional[Iterable[ProductLine]] = None,
    ) -> list[StockMovementEntity]:
        """Consume the materials needed by a project's line items.

        For every line item and every component of its product an outbound
        movement of ``component.quantity * line_item.quantity`` (rounded to
        thousandths) is recorded, tagged with the project. A need that rounds
        to zero records nothing.

        Args:
            project_id: Project consuming the stock
            line_items: Lines to consume for; defaults to the project's own

        Returns:
            The created movements, in order

        Raises:
            NotFoundError: If the project, a product or a material doesn't exist
        """
        movements = []
        with self.db.atomic():
            project = self.db.get_project(project_id)
            if project is None:
                raise errors.NotFoundError(errors.project_not_found(project_id))

            for line_item in project.line_items if line_items is None else line_items:
                product = self.db.get_product(line_item.product_id)
                if product is None:
                    raise errors.NotFoundError(errors.product_not_found(line_item.product_id))
                line_quantity = to_decimal("quantity", line_item.quantity, QUANTITY)
                for component in product.components:
                    needed = QUANTITY(component.quantity * line_quantity)
                    if needed == 0:
                        logger.debug(
                            "Skipping '%s' for project #%d: rounds to zero",
                            component.material_name,
                            project.number,
                        )
                        continue
                    movements.append(
                        self.create_stock_movement(
                            material_id=component.material_id,
                            type=MovementType.OUT,
                            quantity=needed,
                            project_id=project_id,
                        )
                    )

            logger.info(
                "Project #%d consumed stock in %d movement(s)", project.number, len(movements)
            )
        return movements

    def get_stock_movement(self, movement_id: str) -> Optional[StockMovementEntity]:
        """Get stock movement by ID, or None if not found."""
        return self.db.get_stock_movement(movement_id)

    def list_stock_movements(
        self,
        material_id: Optional[str] = None,
        project_id: Optional[str] = None,
    ) -> list[StockMovementEntity]:
        """List stock movements in creation order with optional filters."""
        return self.db.list_stock_movements(material_id=material_id, project_id=project_id)
