# src/financial_projection/financial_statements/__init__.py
"""
Financial Statements Module

This module builds the projected statements year by year without
circularity.
"""

from .balance_sheet import BalanceSheetYear
from .income_statement import IncomeStatementYear
from .cash_flow_statement import CashFlowStatementYear
from .statement_builder import OpeningPosition, StatementBuilder, ThreeStatementModel

__all__ = [
    'BalanceSheetYear',
    'IncomeStatementYear',
    'CashFlowStatementYear',
    'OpeningPosition',
    'StatementBuilder',
    'ThreeStatementModel',
]
