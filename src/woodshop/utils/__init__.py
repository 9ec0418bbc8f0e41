"""Utility functions for woodshop."""

from woodshop.utils.date_parser import parse_date
from woodshop.utils.amount_parser import parse_amount, money_round

__all__ = ["parse_date", "parse_amount", "money_round"]
