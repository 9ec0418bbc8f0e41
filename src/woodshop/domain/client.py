"""Client domain service."""

import logging
import re
from typing import Optional, Union

from woodshop.database.base import Database
from woodshop.domain import errors
from woodshop.domain.entities import Address, Client as ClientEntity, PersonType
from woodshop.domain.project import ProjectService
from woodshop.domain.validation import choice, required_name

logger = logging.getLogger(__name__)

# CPF has 11 digits, CNPJ has 14
TAX_ID_DIGITS = {
    PersonType.INDIVIDUAL: 11,
    PersonType.COMPANY: 14,
}


def _check_tax_id(person_type: PersonType, tax_id: Optional[str]) -> None:
    if not tax_id:
        return
    digits = re.sub(r"\D", "", tax_id)
    expected = TAX_ID_DIGITS[person_type]
    if len(digits) != expected:
        kind = "CPF" if person_type == PersonType.INDIVIDUAL else "CNPJ"
        raise errors.ValidationError(
            f"A {person_type.value} client needs a {kind} with {expected} digits, got '{tax_id}'"
        )


class ClientService:
    """Service for managing clients."""

    def __init__(self, db: Database):
        """Initialize client service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_client(
        self,
        name: str,
        person_type: Union[PersonType, str] = PersonType.INDIVIDUAL,
        tax_id: Optional[str] = None,
        email: str = "",
        phone: str = "",
        mobile: str = "",
        address: Optional[Address] = None,
    ) -> ClientEntity:
        """Create a new client with empty project rollups.

        Args:
            name: Client name
            person_type: Individual or company
            tax_id: CPF for individuals, CNPJ for companies
            email: Contact email
            phone: Landline
            mobile: Mobile phone
            address: Postal address

        Returns:
            The created client

        Raises:
            ValidationError: If the name is blank or the tax id does not match the person type
        """
        name = required_name("Client", name)
        person_type = choice(PersonType, person_type)
        _check_tax_id(person_type, tax_id)

        with self.db.atomic():
            client_id = self.db.create_client(
                name=name,
                person_type=person_type,
                tax_id=tax_id,
                email=email,
                phone=phone,
                mobile=mobile,
                address=address or Address(),
            )
            logger.info("Created client '%s' (%s)", name, client_id)
            return self.db.get_client(client_id)

    def get_client(self, client_id: str) -> Optional[ClientEntity]:
        """Get client by ID, or None if not found."""
        return self.db.get_client(client_id)

    def list_clients(self) -> list[ClientEntity]:
        """List all clients in creation order."""
        return self.db.list_clients()

    def update_client(
        self,
        client_id: str,
        name: Optional[str] = None,
        person_type: Optional[Union[PersonType, str]] = None,
        tax_id: Optional[str] = None,
        email: Optional[str] = None,
        phone: Optional[str] = None,
        mobile: Optional[str] = None,
        address: Optional[Address] = None,
    ) -> ClientEntity:
        """Update client fields. Fields left as None are not changed.

        Project rollups cannot be edited here; they follow project creation.
        Projects keep the client name they were created with.

        Raises:
            NotFoundError: If the client doesn't exist
            ValidationError: If the new values are invalid
        """
        with self.db.atomic():
            client = self.db.get_client(client_id)
            if client is None:
                raise errors.NotFoundError(errors.client_not_found(client_id))

            changes = {}
            if name is not None:
                changes["name"] = required_name("Client", name)
            if person_type is not None:
                changes["person_type"] = choice(PersonType, person_type).value
            if tax_id is not None:
                changes["tax_id"] = tax_id
            if email is not None:
                changes["email"] = email
            if phone is not None:
                changes["phone"] = phone
            if mobile is not None:
                changes["mobile"] = mobile
            if address is not None:
                changes.update(
                    country=address.country,
                    state=address.state,
                    city=address.city,
                    zip_code=address.zip_code,
                    neighborhood=address.neighborhood,
                    street_type=address.street_type,
                    street=address.street,
                )

            _check_tax_id(
                PersonType(changes.get("person_type", client.person_type)),
                changes.get("tax_id", client.tax_id),
            )

            if changes:
                self.db.update_client(client_id, **changes)
            return self.db.get_client(client_id)

    def delete_client(self, client_id: str) -> None:
        """Delete a client together with all of its projects.

        Each project is removed through :meth:`ProjectService.delete_project`,
        so its transactions and stock movements go too. Deleting an unknown
        client is a no-op.
        """
        project_service = ProjectService(self.db)
        with self.db.atomic():
            client = self.db.get_client(client_id)
            if client is None:
                return

            projects = self.db.list_projects(client_id=client_id)
            for project in projects:
                project_service.delete_project(project.id)

            self.db.delete_client(client_id)
            logger.info("Deleted client '%s' and %d project(s)", client.name, len(projects))
