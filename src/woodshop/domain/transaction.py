"""Transaction domain service."""

import logging
from datetime import date
from typing import Optional, Union

from woodshop.database.base import Database
from woodshop.domain import errors
from woodshop.domain.entities import Transaction as TransactionEntity, TransactionType
from woodshop.domain.validation import MONEY, choice, non_negative
from woodshop.utils.amount_parser import Number

logger = logging.getLogger(__name__)


class TransactionService:
    """Service for recording financial transactions."""

    def __init__(self, db: Database):
        """Initialize transaction service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_transaction(
        self,
        type: Union[TransactionType, str],
        category: str,
        amount: Number,
        description: str = "",
        date: Optional[date] = None,
        project_id: Optional[str] = None,
        project_title: Optional[str] = None,
    ) -> TransactionEntity:
        """Record a transaction.

        Args:
            type: Inflow or outflow
            category: Category label (e.g. "Deposit", "Supplies")
            amount: Non-negative amount; the direction comes from ``type``
            description: Free text description
            date: Transaction date, defaults to today
            project_id: Optional project the transaction belongs to; its
                title is copied onto the transaction
            project_title: Title to record instead of the project's current one

        Returns:
            The created transaction

        Raises:
            NotFoundError: If project_id doesn't exist
            ValidationError: If the amount is negative
        """
        type = choice(TransactionType, type)
        amount = non_negative("amount", amount, MONEY)

        with self.db.atomic():
            if project_id is not None:
                project = self.db.get_project(project_id)
                if project is None:
                    raise errors.NotFoundError(errors.project_not_found(project_id))
                if project_title is None:
                    project_title = project.title
            else:
                project_title = None

            transaction_id = self.db.create_transaction(
                type=type,
                category=category,
                description=description,
                amount=amount,
                date=date or self.db.today(),
                project_id=project_id,
                project_title=project_title,
            )
            logger.debug("Recorded %s of %s (%s)", type.value, amount, category)
            return self.db.get_transaction(transaction_id)

    def get_transaction(self, transaction_id: str) -> Optional[TransactionEntity]:
        """Get transaction by ID, or None if not found."""
        return self.db.get_transaction(transaction_id)

    def list_transactions(self, project_id: Optional[str] = None) -> list[TransactionEntity]:
        """List transactions in creation order, optionally for one project."""
        return self.db.list_transactions(project_id=project_id)
