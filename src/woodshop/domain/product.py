"""Product domain service."""

import logging
from typing import Iterable, Optional

from woodshop.database.base import Database
from woodshop.domain import errors
from woodshop.domain.entities import (
    ComponentInput,
    Product as ProductEntity,
    ProductComponent,
)
from woodshop.domain.validation import QUANTITY, positive, required_name, to_decimal
from woodshop.utils.amount_parser import Number

logger = logging.getLogger(__name__)


class ProductService:
    """Service for managing products and their bills of materials."""

    def __init__(self, db: Database):
        """Initialize product service.

        Args:
            db: Database instance
        """
        self.db = db

    def _resolve_components(self, components: Iterable[ComponentInput]) -> list[ProductComponent]:
        """Validate requested components, merging repeated materials.

        A material listed twice ends up as one component whose quantity is
        the sum of both entries.
        """
        merged: dict[str, ProductComponent] = {}
        for requested in components:
            quantity = positive("component quantity", requested.quantity, QUANTITY)
            existing = merged.get(requested.material_id)
            if existing is not None:
                merged[requested.material_id] = ProductComponent(
                    material_id=existing.material_id,
                    material_name=existing.material_name,
                    quantity=existing.quantity + quantity,
                    unit=existing.unit,
                )
                continue

            material = self.db.get_material(requested.material_id)
            if material is None:
                raise errors.NotFoundError(errors.material_not_found(requested.material_id))
            merged[requested.material_id] = ProductComponent(
                material_id=material.id,
                material_name=requested.material_name or material.name,
                quantity=quantity,
                unit=requested.unit or material.unit,
            )
        return list(merged.values())

    def _require_product(self, product_id: str) -> ProductEntity:
        product = self.db.get_product(product_id)
        if product is None:
            raise errors.NotFoundError(errors.product_not_found(product_id))
        return product

    def create_product(
        self,
        name: str,
        components: Iterable[ComponentInput] = (),
        description: str = "",
        category: str = "",
        unit: str = "UN",
    ) -> ProductEntity:
        """Create a product.

        Args:
            name: Product name
            components: Materials that make up one unit of the product
            description: Free text description
            category: Category name
            unit: Unit of measure

        Returns:
            The created product

        Raises:
            NotFoundError: If a component references an unknown material
            ValidationError: If the name is blank or a quantity is not positive
        """
        name = required_name("Product", name)
        with self.db.atomic():
            product_id = self.db.create_product(
                name=name,
                description=description,
                category=category,
                unit=unit,
                components=self._resolve_components(components),
            )
            logger.info("Created product '%s' (%s)", name, product_id)
            return self.db.get_product(product_id)

    def get_product(self, product_id: str) -> Optional[ProductEntity]:
        """Get product by ID, or None if not found."""
        return self.db.get_product(product_id)

    def list_products(self) -> list[ProductEntity]:
        """List all products in creation order."""
        return self.db.list_products()

    def update_product(
        self,
        product_id: str,
        name: Optional[str] = None,
        description: Optional[str] = None,
        category: Optional[str] = None,
        unit: Optional[str] = None,
        components: Optional[Iterable[ComponentInput]] = None,
    ) -> ProductEntity:
        """Update product fields. ``components``, when given, replaces the whole list.

        Raises:
            NotFoundError: If the product or a component material doesn't exist
            ValidationError: If the name is blank or a quantity is not positive
        """
        with self.db.atomic():
            self._require_product(product_id)

            changes = {}
            if name is not None:
                changes["name"] = required_name("Product", name)
            if description is not None:
                changes["description"] = description
            if category is not None:
                changes["category"] = category
            if unit is not None:
                changes["unit"] = unit

            if changes:
                self.db.update_product(product_id, **changes)
            if components is not None:
                self.db.replace_product_components(product_id, self._resolve_components(components))

            return self.db.get_product(product_id)

    def add_component(self, product_id: str, material_id: str, quantity: Number = 1) -> ProductEntity:
        """Add a material to a product, or increase it if already present.

        Raises:
            NotFoundError: If the product or material doesn't exist
            ValidationError: If the quantity is not positive
        """
        quantity = positive("component quantity", quantity, QUANTITY)
        with self.db.atomic():
            product = self._require_product(product_id)
            components = list(product.components)
            for index, component in enumerate(components):
                if component.material_id == material_id:
                    components[index] = ProductComponent(
                        material_id=component.material_id,
                        material_name=component.material_name,
                        quantity=component.quantity + quantity,
                        unit=component.unit,
                    )
                    break
            else:
                components.extend(
                    self._resolve_components([ComponentInput(material_id=material_id, quantity=quantity)])
                )
            self.db.replace_product_components(product_id, components)
            return self.db.get_product(product_id)

    def set_component_quantity(self, product_id: str, material_id: str, quantity: Number) -> ProductEntity:
        """Set the quantity of an existing component. Zero or less removes it.

        Raises:
            NotFoundError: If the product doesn't exist or has no such component
        """
        quantity = to_decimal("component quantity", quantity, QUANTITY)
        if quantity <= 0:
            return self.remove_component(product_id, material_id)

        with self.db.atomic():
            product = self._require_product(product_id)
            if not any(c.material_id == material_id for c in product.components):
                raise errors.NotFoundError(
                    f"Product {product_id} has no component for material {material_id}"
                )
            components = [
                ProductComponent(
                    material_id=c.material_id,
                    material_name=c.material_name,
                    quantity=quantity if c.material_id == material_id else c.quantity,
                    unit=c.unit,
                )
                for c in product.components
            ]
            self.db.replace_product_components(product_id, components)
            return self.db.get_product(product_id)

    def remove_component(self, product_id: str, material_id: str) -> ProductEntity:
        """Remove a material from a product. Removing an absent one changes nothing.

        Raises:
            NotFoundError: If the product doesn't exist
        """
        with self.db.atomic():
            product = self._require_product(product_id)
            components = [c for c in product.components if c.material_id != material_id]
            if len(components) != len(product.components):
                self.db.replace_product_components(product_id, components)
            return self.db.get_product(product_id)

    def delete_product(self, product_id: str) -> None:
        """Delete a product. Deleting an unknown product is a no-op.

        Projects keep their line items and product name snapshots.
        """
        with self.db.atomic():
            if self.db.delete_product(product_id):
                logger.info("Deleted product %s", product_id)
