"""Quote and proposal document data."""

import re
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Optional

from woodshop.database.base import Database
from woodshop.domain import errors
from woodshop.domain.entities import LineItem, PaymentMethod, PaymentTerms, ProjectType

VALIDITY_DAYS = 30

PAYMENT_METHOD_LABELS = {
    PaymentMethod.CASH: "Cash",
    PaymentMethod.PIX: "PIX",
    PaymentMethod.CREDIT_CARD: "Credit card",
    PaymentMethod.DEBIT_CARD: "Debit card",
    PaymentMethod.BANK_SLIP: "Bank slip",
    PaymentMethod.BANK_TRANSFER: "Bank transfer",
}


@dataclass(frozen=True)
class CompanyInfo:
    """Issuer details printed in the document header."""

    name: str = "Carnevalli Esquadrias"
    phone: str = "(11) 99999-9999"
    email: str = "contato@carnevalli.com.br"
    website: str = "www.carnevalli.com.br"


@dataclass(frozen=True)
class ProjectDocument:
    """Everything a renderer needs to lay out a quote or proposal."""

    company: CompanyInfo
    title: str
    number: str
    client_name: str
    issue_date: date
    project_title: str
    description: str
    line_items: tuple[LineItem, ...]
    payment_terms: Optional[PaymentTerms]
    total: Decimal
    footer: tuple[str, ...] = field(default_factory=tuple)
    filename: str = ""

    @property
    def payment_method_label(self) -> Optional[str]:
        if self.payment_terms is None:
            return None
        return PAYMENT_METHOD_LABELS[self.payment_terms.payment_method]


class DocumentService:
    """Service that assembles document data for a single project."""

    def __init__(self, db: Database, company: Optional[CompanyInfo] = None):
        """Initialize document service.

        Args:
            db: Database instance
            company: Issuer details, defaults to CompanyInfo()
        """
        self.db = db
        self.company = company or CompanyInfo()

    def build_document(self, project_id: str, issue_date: Optional[date] = None) -> ProjectDocument:
        """Build the document for a project.

        The total is the discounted total when the project has payment terms,
        otherwise its budget.

        Raises:
            NotFoundError: If the project doesn't exist
        """
        project = self.db.get_project(project_id)
        if project is None:
            raise errors.NotFoundError(errors.project_not_found(project_id))

        total = project.budget
        if project.payment_terms is not None and project.payment_terms.total_with_discount:
            total = project.payment_terms.total_with_discount

        number = f"{project.number:04d}"
        client_slug = re.sub(r"\s+", "_", project.client_name or "")
        return ProjectDocument(
            company=self.company,
            title="QUOTE" if project.type == ProjectType.QUOTE else "COMMERCIAL PROPOSAL",
            number=number,
            client_name=project.client_name,
            issue_date=issue_date or self.db.today(),
            project_title=project.title,
            description=project.description,
            line_items=project.line_items,
            payment_terms=project.payment_terms,
            total=total,
            footer=(
                f"This quote is valid for {VALIDITY_DAYS} days.",
                "Thank you for your business!",
            ),
            filename=f"{project.type.value}_{number}_{client_slug}.pdf",
        )
