# src/financial_projection/core/__init__.py
"""
Core Projection Components

Input validation, cash flow and valuation calculations, comparable
company multiples and the summary report.
"""

from .diagnostics import Diagnostic, DiagnosticKind
from .input_processor import ValidatedInputs, process_inputs
from .cash_flow import CashFlowCalculator
from .valuation import ValuationEngine, ValuationResult, TerminalValueMethod
from .comps import ComparableCompany, CompsAnalysis, MultipleStats
from .summary import Summary

__all__ = [
    'Diagnostic',
    'DiagnosticKind',
    'ValidatedInputs',
    'process_inputs',
    'CashFlowCalculator',
    'ValuationEngine',
    'ValuationResult',
    'TerminalValueMethod',
    'ComparableCompany',
    'CompsAnalysis',
    'MultipleStats',
    'Summary',
]
