"""
Summary Output

Condenses the valuation, the projected statements and the assumptions
actually used into a single report record.
"""

import logging
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Dict, Optional, Tuple
from dataclasses import dataclass, field

from ..utils.financial_utils import is_number
from .diagnostics import Diagnostic
from .valuation import TerminalValueMethod

if TYPE_CHECKING:
    from .comps import CompsAnalysis

logger = logging.getLogger(__name__)

# equity_value_per_share_status markers
PER_SHARE_COMPUTED = "computed"
SHARES_NOT_PROVIDED = "shares_outstanding_not_provided"
EQUITY_VALUE_UNAVAILABLE = "equity_value_unavailable"
NON_POSITIVE_SHARE_COUNT = "non_positive_share_count"


@dataclass(frozen=True)
class Summary:
    """Key outputs of a model run."""
    estimated_enterprise_value: Optional[float]
    estimated_equity_value: Optional[float]
    equity_value_per_share: Optional[float]
    equity_value_per_share_status: str
    npv: Optional[float]
    irr: Optional[float]
    key_valuation_multiples: Dict[str, Any]
    core_assumptions: Dict[str, Any]
    key_projected_financials: Dict[str, float]
    comps_summary: Dict[str, Dict[str, float]]
    generation_mode: str
    generated_at: str
    diagnostics: Tuple[Diagnostic, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'estimated_enterprise_value': self.estimated_enterprise_value,
            'estimated_equity_value': self.estimated_equity_value,
            'equity_value_per_share': self.equity_value_per_share,
            'equity_value_per_share_status': self.equity_value_per_share_status,
            'npv': self.npv,
            'irr': self.irr,
            'key_valuation_multiples': self.key_valuation_multiples,
            'core_assumptions': self.core_assumptions,
            'key_projected_financials': self.key_projected_financials,
            'comps_summary': self.comps_summary,
            'generation_mode': self.generation_mode,
            'generated_at': self.generated_at,
            'diagnostics': [d.to_dict() for d in self.diagnostics],
        }


def _equity_value_per_share(equity_value, shares_outstanding) -> Tuple[Optional[float], str]:
    if shares_outstanding is None or not is_number(shares_outstanding):
        return None, SHARES_NOT_PROVIDED
    if equity_value is None:
        return None, EQUITY_VALUE_UNAVAILABLE
    if shares_outstanding <= 0:
        return None, NON_POSITIVE_SHARE_COUNT
    return equity_value / shares_outstanding, PER_SHARE_COMPUTED


def generate_summary_output(
    valuation_result,
    financial_model,
    validated_inputs,
    mode: str,
    comps_analysis: Optional["CompsAnalysis"] = None
) -> Summary:
    """
    Create a structured summary of the model outputs.

    Args:
        valuation_result: ValuationResult
        financial_model: ThreeStatementModel
        validated_inputs: ValidatedInputs
        mode: "founder" or "investor"
        comps_analysis: Optional CompsAnalysis whose summary metrics are
            included

    Returns:
        Summary
    """
    assumptions = validated_inputs.assumptions or {}

    per_share, per_share_status = _equity_value_per_share(
        valuation_result.equity_value,
        assumptions.get("shares_outstanding"),
    )

    # Key valuation multiples
    key_multiples = {}
    method = valuation_result.terminal_value_method
    if method == TerminalValueMethod.EXIT_MULTIPLE.value and valuation_result.exit_multiple is not None:
        key_multiples['dcf_exit_multiple'] = {
            'metric': valuation_result.exit_multiple_metric,
            'value': valuation_result.exit_multiple,
        }
    if comps_analysis is not None:
        for name, stats in comps_analysis.summary_metrics.items():
            key_multiples[f'comps_{name}_median'] = stats.median

    # Core assumptions actually used
    core_assumptions = {
        'wacc': valuation_result.wacc,
        'terminal_value_method': method,
    }
    if method == TerminalValueMethod.PERPETUAL_GROWTH.value:
        core_assumptions['terminal_growth_rate'] = valuation_result.terminal_growth_rate
    elif method == TerminalValueMethod.EXIT_MULTIPLE.value:
        core_assumptions['exit_multiple'] = valuation_result.exit_multiple
        core_assumptions['exit_multiple_metric'] = valuation_result.exit_multiple_metric
    core_assumptions['projection_years'] = financial_model.projection_years

    key_projected_financials = {}
    if financial_model.income_statements:
        first_year = financial_model.income_statements[0]
        last_year = financial_model.income_statements[-1]
        key_projected_financials = {
            'first_year_revenue': first_year.revenue,
            'first_year_ebitda': first_year.ebitda,
            'last_year_revenue': last_year.revenue,
            'last_year_ebitda': last_year.ebitda,
        }

    comps_summary = {}
    diagnostics = (
        list(validated_inputs.diagnostics)
        + list(financial_model.diagnostics)
        + list(valuation_result.diagnostics)
    )
    if comps_analysis is not None:
        comps_summary = {k: v.to_dict() for k, v in comps_analysis.summary_metrics.items()}
        diagnostics.extend(comps_analysis.diagnostics)

    logger.debug("Summary generated with %d diagnostics", len(diagnostics))

    return Summary(
        estimated_enterprise_value=valuation_result.enterprise_value,
        estimated_equity_value=valuation_result.equity_value,
        equity_value_per_share=per_share,
        equity_value_per_share_status=per_share_status,
        npv=valuation_result.npv,
        irr=valuation_result.irr,
        key_valuation_multiples=key_multiples,
        core_assumptions=core_assumptions,
        key_projected_financials=key_projected_financials,
        comps_summary=comps_summary,
        generation_mode=mode,
        generated_at=datetime.now(timezone.utc).isoformat(),
        diagnostics=tuple(diagnostics),
    )
