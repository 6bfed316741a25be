"""Utility functions for bizdocs."""

from bizdocs.utils.date_parser import parse_date, coerce_date, default_valid_until
from bizdocs.utils.amount_parser import parse_amount, coerce_number

__all__ = ["parse_date", "coerce_date", "default_valid_until", "parse_amount", "coerce_number"]
