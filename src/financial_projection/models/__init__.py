# src/financial_projection/models/__init__.py
"""
Financial Models Module
"""

from .financial_model import FinancialModel, InputValidationError, ModelOutput

__all__ = [
    'FinancialModel',
    'InputValidationError',
    'ModelOutput',
]
