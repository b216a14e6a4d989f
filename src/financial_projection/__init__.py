"""
Financial Projection and Valuation Engine

Validates assumption inputs, builds a linked three-statement projection
and values the firm by discounted cash flow.

Main Components:
- Input Processor (founder / investor schemas)
- Financial Statements (Income Statement, Balance Sheet, Cash Flow Statement)
- Valuation (FCFF, terminal value, enterprise and equity value)
- Comparable Company Analysis
- Summary Output
"""

__version__ = "1.0.0"

from financial_projection.core.input_processor import ValidatedInputs, process_inputs
from financial_projection.financial_statements.statement_builder import (
    ThreeStatementModel,
    generate_three_statement_model,
)
from financial_projection.core.valuation import ValuationResult, generate_dcf_valuation
from financial_projection.core.comps import CompsAnalysis, generate_comps_analysis
from financial_projection.core.summary import Summary, generate_summary_output
from financial_projection.core.diagnostics import Diagnostic, DiagnosticKind
from financial_projection.models.financial_model import (
    FinancialModel,
    InputValidationError,
    ModelOutput,
)

__all__ = [
    # Main model
    'FinancialModel',
    'ModelOutput',
    'InputValidationError',

    # Pipeline stages
    'process_inputs',
    'generate_three_statement_model',
    'generate_dcf_valuation',
    'generate_comps_analysis',
    'generate_summary_output',

    # Results
    'ValidatedInputs',
    'ThreeStatementModel',
    'ValuationResult',
    'CompsAnalysis',
    'Summary',
    'Diagnostic',
    'DiagnosticKind',
]
