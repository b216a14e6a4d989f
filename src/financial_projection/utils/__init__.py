# src/financial_projection/utils/__init__.py
"""
Utility Functions Module

Numeric helpers for projections and console formatting of results.
"""

from .financial_utils import (
    apply_growth,
    percentage_of,
    normalize_series,
    discount_factors,
    present_value,
)
from .statement_printer import fmt_currency, print_statements, print_summary

__all__ = [
    'apply_growth',
    'percentage_of',
    'normalize_series',
    'discount_factors',
    'present_value',
    'fmt_currency',
    'print_statements',
    'print_summary',
]
