# src/financial_projection/models/financial_model.py
"""
Financial Model

Runs the full pipeline for one request:

    raw inputs -> validated inputs -> three-statement model
               -> DCF valuation -> comps (optional) -> summary

In strict mode any validation error rejects the request before modeling.
"""

import logging
import pandas as pd
from typing import Any, Dict, List, Mapping, Optional
from dataclasses import dataclass

from ..config import DEFAULT_MODE, DEFAULT_PROJECTION_YEARS
from ..core.comps import CompsAnalysis, generate_comps_analysis
from ..core.input_processor import ValidatedInputs, process_inputs
from ..core.summary import Summary, generate_summary_output
from ..core.valuation import ValuationResult, generate_dcf_valuation
from ..financial_statements.statement_builder import (
    ThreeStatementModel,
    generate_three_statement_model,
)

logger = logging.getLogger(__name__)


class InputValidationError(ValueError):
    """Raised in strict mode when the inputs fail validation."""

    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__(
            f"Input validation failed with {len(self.errors)} error(s): "
            + "; ".join(self.errors)
        )


@dataclass(frozen=True)
class ModelOutput:
    """Everything produced by one model run."""
    validated_inputs: ValidatedInputs
    statements: ThreeStatementModel
    valuation: ValuationResult
    summary: Summary
    comps: Optional[CompsAnalysis] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'mode': self.validated_inputs.mode,
            'errors': list(self.validated_inputs.errors),
            'financial_model': self.statements.to_dict(),
            'valuation': self.valuation.to_dict(),
            'comps_analysis': self.comps.to_dict() if self.comps is not None else None,
            'summary': self.summary.to_dict(),
        }

    def statements_to_dataframes(self) -> Dict[str, pd.DataFrame]:
        return self.statements.to_dataframes()


class FinancialModel:
    """
    Complete projection and valuation model for one set of inputs.
    """

    def __init__(
        self,
        raw_inputs: Optional[Mapping[str, Any]],
        mode: str = DEFAULT_MODE,
        projection_years: int = DEFAULT_PROJECTION_YEARS,
        strict: bool = True
    ):
        """
        Initialize financial model.

        Args:
            raw_inputs: Mapping with 'assumptions', 'valuation_assumptions',
                'historical_data' and 'comparable_companies' sections
            mode: "founder" or "investor"
            projection_years: Number of years to project
            strict: Raise InputValidationError on any validation error
        """
        self.raw_inputs = raw_inputs or {}
        self.mode = mode
        self.projection_years = projection_years
        self.strict = strict

        self.output: Optional[ModelOutput] = None

    def validate_inputs(self) -> ValidatedInputs:
        """Validate the raw inputs without building anything."""
        return process_inputs(self.raw_inputs, self.mode, self.projection_years)

    def build_model(self) -> ModelOutput:
        """
        Build the complete financial model.

        Returns:
            ModelOutput

        Raises:
            InputValidationError: In strict mode, when validation fails
        """
        validated = self.validate_inputs()

        if validated.errors:
            if self.strict:
                raise InputValidationError(validated.errors)
            logger.warning(
                "Proceeding with %d validation error(s) in lenient mode",
                len(validated.errors),
            )

        statements = generate_three_statement_model(
            validated, validated.mode, validated.projection_years
        )
        valuation = generate_dcf_valuation(statements, validated, validated.mode)

        comps = None
        comparable_companies = None
        if isinstance(self.raw_inputs, Mapping):
            comparable_companies = self.raw_inputs.get("comparable_companies")
        if comparable_companies is not None:
            comps = generate_comps_analysis(comparable_companies, validated.mode)

        summary = generate_summary_output(
            valuation, statements, validated, validated.mode, comps_analysis=comps
        )

        logger.info(
            "Built %d-year %s model: EV=%s",
            statements.projection_years, validated.mode, valuation.enterprise_value,
        )

        self.output = ModelOutput(
            validated_inputs=validated,
            statements=statements,
            valuation=valuation,
            summary=summary,
            comps=comps,
        )
        return self.output
