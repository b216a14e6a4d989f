"""
Comparable Company Analysis

Trading multiples for a peer set and their summary statistics:
- EV / Revenue
- EV / EBITDA
- P / E (market cap / net income)

A multiple is only computed when its numerator is present and its
denominator is present and non-zero; otherwise it is None. Summary
statistics use valid values only.
"""

import logging
import math
import numpy as np
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple
from dataclasses import dataclass, field

from ..utils.financial_utils import is_number
from .diagnostics import Diagnostic, DiagnosticKind, record

logger = logging.getLogger(__name__)

SOURCE = "comps"

# Accepted spellings for each raw field
FIELD_ALIASES = {
    'enterprise_value': ('enterprise_value', 'enterpriseValue'),
    'ltm_revenue': ('ltm_revenue', 'ltmRevenue'),
    'ltm_ebitda': ('ltm_ebitda', 'ltmEbitda'),
    'ltm_net_income': ('ltm_net_income', 'ltmNetIncome'),
    'market_cap': ('market_cap', 'marketCap'),
}

MULTIPLES = ('ev_to_revenue', 'ev_to_ebitda', 'pe_ratio')


def calculate_multiple(numerator: Any, denominator: Any) -> Optional[float]:
    """
    Ratio of two financial values, or None when it is not meaningful.

    Examples:
        >>> calculate_multiple(10_000_000, 2_000_000)
        5.0
        >>> calculate_multiple(10_000_000, 0) is None
        True
    """
    if not is_number(numerator) or not is_number(denominator) or denominator == 0:
        return None
    value = float(numerator) / float(denominator)
    return value if math.isfinite(value) else None


@dataclass(frozen=True)
class ComparableCompany:
    """A peer company with its raw financials and derived multiples."""
    enterprise_value: Optional[float] = None
    ltm_revenue: Optional[float] = None
    ltm_ebitda: Optional[float] = None
    ltm_net_income: Optional[float] = None
    market_cap: Optional[float] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ComparableCompany":
        """
        Build from a raw record. Snake_case and camelCase field names are
        both accepted; unrecognized fields (e.g. company name) are kept
        in extra.
        """
        values = {}
        consumed = set()
        for name, aliases in FIELD_ALIASES.items():
            for alias in aliases:
                if alias in data:
                    consumed.add(alias)
                    if name not in values:
                        values[name] = data[alias]
        extra = {k: v for k, v in data.items() if k not in consumed}
        return cls(extra=extra, **values)

    @property
    def ev_to_revenue(self) -> Optional[float]:
        return calculate_multiple(self.enterprise_value, self.ltm_revenue)

    @property
    def ev_to_ebitda(self) -> Optional[float]:
        return calculate_multiple(self.enterprise_value, self.ltm_ebitda)

    @property
    def pe_ratio(self) -> Optional[float]:
        return calculate_multiple(self.market_cap, self.ltm_net_income)

    def multiples(self) -> Dict[str, Optional[float]]:
        return {name: getattr(self, name) for name in MULTIPLES}

    def to_dict(self) -> Dict[str, Any]:
        result = dict(self.extra)
        result.update({
            'enterprise_value': self.enterprise_value,
            'ltm_revenue': self.ltm_revenue,
            'ltm_ebitda': self.ltm_ebitda,
            'ltm_net_income': self.ltm_net_income,
            'market_cap': self.market_cap,
        })
        result.update(self.multiples())
        return result


@dataclass(frozen=True)
class MultipleStats:
    """Summary statistics of one multiple across the peer set."""
    mean: float
    median: float
    high: float
    low: float
    count: int

    @classmethod
    def from_values(cls, values: Iterable[float]) -> Optional["MultipleStats"]:
        """Statistics over the given values, or None when there are none."""
        arr = np.asarray(list(values), dtype=float)
        if arr.size == 0:
            return None
        return cls(
            mean=float(np.mean(arr)),
            median=float(np.median(arr)),
            high=float(np.max(arr)),
            low=float(np.min(arr)),
            count=int(arr.size),
        )

    def to_dict(self) -> Dict[str, float]:
        return {
            'mean': self.mean,
            'median': self.median,
            'high': self.high,
            'low': self.low,
            'count': self.count,
        }


@dataclass(frozen=True)
class CompsAnalysis:
    """Peer multiples and their summary statistics."""
    summary_metrics: Dict[str, MultipleStats]
    detailed_comps: Tuple[ComparableCompany, ...]
    message: Optional[str] = None
    diagnostics: Tuple[Diagnostic, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        result = {
            'summary_metrics': {k: v.to_dict() for k, v in self.summary_metrics.items()},
            'detailed_comps': [c.to_dict() for c in self.detailed_comps],
            'diagnostics': [d.to_dict() for d in self.diagnostics],
        }
        if self.message:
            result['message'] = self.message
        return result


def summarize_multiple(companies: Iterable[ComparableCompany], multiple: str) -> Optional[MultipleStats]:
    """Summary statistics of one multiple over the companies where it is valid."""
    values = [getattr(c, multiple) for c in companies]
    return MultipleStats.from_values(v for v in values if v is not None)


def generate_comps_analysis(
    comparable_companies: Optional[List[Mapping[str, Any]]],
    mode: str
) -> CompsAnalysis:
    """
    Calculate multiples for each comparable company and summarize them.

    Args:
        comparable_companies: Raw peer records
        mode: "founder" or "investor"; both are computed identically

    Returns:
        CompsAnalysis; empty with an explanatory message when no data
    """
    if not comparable_companies:
        return CompsAnalysis(
            summary_metrics={},
            detailed_comps=(),
            message="No comparable company data provided.",
        )

    diagnostics: List[Diagnostic] = []
    companies = []
    for index, raw in enumerate(comparable_companies):
        if isinstance(raw, ComparableCompany):
            companies.append(raw)
        elif isinstance(raw, Mapping):
            companies.append(ComparableCompany.from_dict(raw))
        else:
            record(
                diagnostics,
                DiagnosticKind.DATA_GAP_WARNING,
                f"Comparable company #{index + 1} is not an object; skipped.",
                SOURCE,
                logger,
            )

    summary_metrics = {}
    for multiple in MULTIPLES:
        stats = summarize_multiple(companies, multiple)
        if stats is not None:
            summary_metrics[multiple] = stats

    # Investor mode is an extension point for stricter peer screening
    logger.debug("Comps analysis (%s): %d companies, %d multiples", mode, len(companies), len(summary_metrics))

    return CompsAnalysis(
        summary_metrics=summary_metrics,
        detailed_comps=tuple(companies),
        diagnostics=tuple(diagnostics),
    )
