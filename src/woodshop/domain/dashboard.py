"""Dashboard statistics domain service."""

from datetime import date
from decimal import Decimal
from typing import Optional

from woodshop.database.base import Database
from woodshop.domain.entities import (
    ActivityEntry,
    DashboardStats,
    ProjectStatus,
    TransactionType,
)
from woodshop.domain.project import FINAL_PAYMENT_RATE

ACTIVE_STATUSES = (ProjectStatus.APPROVED, ProjectStatus.IN_PRODUCTION)
BILLABLE_STATUSES = (ProjectStatus.COMPLETED, ProjectStatus.DELIVERED)

RECENT_PER_KIND = 3
RECENT_LIMIT = 5


class DashboardService:
    """Read-only projections over the store for the dashboard."""

    def __init__(self, db: Database):
        """Initialize dashboard service.

        Args:
            db: Database instance
        """
        self.db = db

    def compute_stats(self, today: Optional[date] = None) -> DashboardStats:
        """Compute dashboard figures from the current store state.

        Figures are recomputed on every call; nothing is cached.

        - ``monthly_revenue`` sums inflows whose date falls in the same
          calendar month as ``today``. Only the month is compared, so inflows
          from that month in other years count too.
        - ``pending_payments`` is half the budget of every completed or
          delivered project, whether or not the final payment was recorded.
        - ``recent_activity`` merges the last three projects and the last
          three transactions, newest first, keeping five.

        Args:
            today: Reference date; defaults to the store clock's date
        """
        today = today or self.db.today()
        with self.db.atomic():
            clients = self.db.list_clients()
            projects = self.db.list_projects()
            transactions = self.db.list_transactions()
            materials = self.db.list_materials()

        monthly_revenue = sum(
            (
                txn.amount
                for txn in transactions
                if txn.type == TransactionType.INFLOW and txn.date.month == today.month
            ),
            Decimal("0"),
        )
        pending_payments = sum(
            (p.budget * FINAL_PAYMENT_RATE for p in projects if p.status in BILLABLE_STATUSES),
            Decimal("0"),
        )

        activity = [
            ActivityEntry(
                kind="project",
                message=f"New project #{p.number}: {p.title}",
                created_at=p.created_at,
            )
            for p in projects[-RECENT_PER_KIND:]
        ]
        activity.extend(
            ActivityEntry(
                kind="transaction",
                message=(
                    f"{'Receipt' if txn.type == TransactionType.INFLOW else 'Payment'}: "
                    f"{txn.amount:,.2f}"
                ),
                created_at=txn.created_at,
            )
            for txn in transactions[-RECENT_PER_KIND:]
        )
        activity.sort(key=lambda entry: entry.created_at, reverse=True)

        return DashboardStats(
            total_clients=len(clients),
            active_projects=sum(1 for p in projects if p.status in ACTIVE_STATUSES),
            monthly_revenue=monthly_revenue,
            pending_payments=pending_payments,
            low_stock_items=sum(1 for m in materials if m.is_low_stock),
            recent_activity=activity[:RECENT_LIMIT],
        )
