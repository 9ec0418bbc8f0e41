"""Material domain service."""

import logging
from decimal import Decimal
from typing import Iterable, Optional

from woodshop.database.base import Database
from woodshop.domain import errors
from woodshop.domain.entities import Material as MaterialEntity, PriceEntry
from woodshop.domain.validation import MONEY, QUANTITY, non_negative, required_name
from woodshop.utils.amount_parser import Number

logger = logging.getLogger(__name__)


class MaterialService:
    """Service for managing materials and their price history."""

    def __init__(self, db: Database):
        """Initialize material service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_material(
        self,
        name: str,
        current_price: Number,
        unit: str = "UN",
        current_stock: Number = 0,
        min_stock: Number = 0,
        description: str = "",
        category: str = "",
        price_history: Optional[Iterable[PriceEntry]] = None,
        supplier: Optional[str] = None,
    ) -> MaterialEntity:
        """Create a material.

        When no price history is given it starts with a single entry for
        ``current_price`` dated today.

        Args:
            name: Material name
            current_price: Unit price
            unit: Unit of measure (UN, M, M², KG, ...)
            current_stock: Quantity on hand
            min_stock: Quantity at or below which the material counts as low stock
            description: Free text description
            category: Category name
            price_history: Optional earlier prices, oldest first
            supplier: Supplier recorded on the seed price entry

        Returns:
            The created material

        Raises:
            ValidationError: If the name is blank or a numeric field is negative
        """
        name = required_name("Material", name)
        price = non_negative("current_price", current_price, MONEY)
        stock = non_negative("current_stock", current_stock, QUANTITY)
        minimum = non_negative("min_stock", min_stock, QUANTITY)

        history = [
            PriceEntry(date=entry.date, price=non_negative("price", entry.price, MONEY), supplier=entry.supplier)
            for entry in (price_history or [])
        ]
        if not history:
            history = [PriceEntry(date=self.db.today(), price=price, supplier=supplier)]

        with self.db.atomic():
            material_id = self.db.create_material(
                name=name,
                description=description,
                category=category,
                unit=unit,
                current_stock=stock,
                min_stock=minimum,
                current_price=price,
                price_history=history,
            )
            logger.info("Created material '%s' (%s)", name, material_id)
            return self.db.get_material(material_id)

    def get_material(self, material_id: str) -> Optional[MaterialEntity]:
        """Get material by ID, or None if not found."""
        return self.db.get_material(material_id)

    def list_materials(self) -> list[MaterialEntity]:
        """List all materials in creation order."""
        return self.db.list_materials()

    def list_low_stock_materials(self) -> list[MaterialEntity]:
        """List materials whose stock is at or below their minimum."""
        return [material for material in self.db.list_materials() if material.is_low_stock]

    def update_material(
        self,
        material_id: str,
        name: Optional[str] = None,
        description: Optional[str] = None,
        category: Optional[str] = None,
        unit: Optional[str] = None,
        current_stock: Optional[Number] = None,
        min_stock: Optional[Number] = None,
        current_price: Optional[Number] = None,
        supplier: Optional[str] = None,
    ) -> MaterialEntity:
        """Update material fields. Fields left as None are not changed.

        A ``current_price`` different from the stored one appends a new
        price history entry dated today (tagged with ``supplier`` if given).
        Submitting the same price leaves the history alone.

        Raises:
            NotFoundError: If the material doesn't exist
            ValidationError: If a numeric field is negative
        """
        with self.db.atomic():
            material = self.db.get_material(material_id)
            if material is None:
                raise errors.NotFoundError(errors.material_not_found(material_id))

            changes = {}
            if name is not None:
                changes["name"] = required_name("Material", name)
            if description is not None:
                changes["description"] = description
            if category is not None:
                changes["category"] = category
            if unit is not None:
                changes["unit"] = unit
            if current_stock is not None:
                changes["current_stock"] = non_negative("current_stock", current_stock, QUANTITY)
            if min_stock is not None:
                changes["min_stock"] = non_negative("min_stock", min_stock, QUANTITY)

            new_price: Optional[Decimal] = None
            if current_price is not None:
                new_price = non_negative("current_price", current_price, MONEY)
                if new_price != material.current_price:
                    changes["current_price"] = new_price
                else:
                    new_price = None

            if changes:
                self.db.update_material(material_id, **changes)

            if new_price is not None:
                self.db.append_price_entry(
                    material_id, PriceEntry(date=self.db.today(), price=new_price, supplier=supplier)
                )
                logger.info(
                    "Price of '%s' changed from %s to %s",
                    material.name,
                    material.current_price,
                    new_price,
                )

            return self.db.get_material(material_id)

    def delete_material(self, material_id: str) -> None:
        """Delete a material.

        Product components and stock movements keep their name snapshot of the
        deleted material. Deleting an unknown material is a no-op.
        """
        with self.db.atomic():
            if self.db.delete_material(material_id):
                logger.info("Deleted material %s", material_id)
