"""Domain layer for woodshop application."""

from woodshop.domain.transaction import TransactionService
from woodshop.domain.stock import StockService
from woodshop.domain.project import ProjectService
from woodshop.domain.client import ClientService
from woodshop.domain.material import MaterialService
from woodshop.domain.product import ProductService
from woodshop.domain.dashboard import DashboardService
from woodshop.domain.document import DocumentService

__all__ = [
    "TransactionService",
    "StockService",
    "ProjectService",
    "ClientService",
    "MaterialService",
    "ProductService",
    "DashboardService",
    "DocumentService",
]
