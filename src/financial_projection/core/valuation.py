"""
Valuation Engine

Discounted cash flow valuation of the projected firm:
1. FCFF per projection year from the linked statements
2. Terminal value by perpetual growth or exit multiple
3. Enterprise value as the NPV of FCFF with the terminal value added
   to the final year (end-of-year convention)
4. Equity value as enterprise value less net debt of the final year

Problems never raise; they are returned as diagnostics on the result.
"""

import logging
import numpy as np
import pandas as pd
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional, Tuple
from dataclasses import dataclass, field

from ..utils.financial_utils import discount_factors, is_finite_number, is_number, present_value
from .cash_flow import CashFlowCalculator
from .diagnostics import Diagnostic, DiagnosticKind, record

if TYPE_CHECKING:
    from ..financial_statements.income_statement import IncomeStatementYear
    from ..financial_statements.statement_builder import ThreeStatementModel

logger = logging.getLogger(__name__)

SOURCE = "valuation"


class TerminalValueMethod(Enum):
    """Supported terminal value methods."""
    PERPETUAL_GROWTH = "perpetual_growth"
    EXIT_MULTIPLE = "exit_multiple"

    @classmethod
    def parse(cls, value: Any) -> Optional["TerminalValueMethod"]:
        """Resolve a configured method name, or None when unrecognized."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return None


EXIT_METRICS = {
    "EBITDA": lambda is_year: is_year.ebitda,
    "EBIT": lambda is_year: is_year.ebit,
    "Revenue": lambda is_year: is_year.revenue,
    "NetIncome": lambda is_year: is_year.net_income,
}
DEFAULT_EXIT_METRIC = "EBITDA"


def _warn(diagnostics: Optional[List[Diagnostic]], message: str, field_name: Optional[str] = None):
    if diagnostics is None:
        logger.warning("[%s] %s", SOURCE, message)
    else:
        record(diagnostics, DiagnosticKind.COMPUTATION_WARNING, message, SOURCE, logger, field=field_name)


def calculate_terminal_value_perpetual_growth(
    final_year_fcff: float,
    wacc: float,
    terminal_growth_rate: float,
    diagnostics: Optional[List[Diagnostic]] = None
) -> float:
    """
    Terminal value with the Gordon growth model.

    TV = FCFF_n x (1 + g) / (WACC - g)

    The model is undefined when WACC <= g or either rate is not finite;
    the terminal value is then zero and a warning is recorded.

    Args:
        final_year_fcff: FCFF of the last projected year
        wacc: Discount rate
        terminal_growth_rate: Perpetual growth rate
        diagnostics: Optional list receiving the warning

    Returns:
        Terminal value at the end of the final projection year
    """
    if not is_finite_number(wacc) or not is_finite_number(terminal_growth_rate):
        _warn(
            diagnostics,
            f"WACC ({wacc}) and terminal growth rate ({terminal_growth_rate}) must be "
            f"finite; terminal value set to 0.",
            "wacc" if not is_finite_number(wacc) else "terminal_growth_rate",
        )
        return 0.0
    if wacc <= terminal_growth_rate:
        _warn(
            diagnostics,
            f"WACC ({wacc:.2%}) must be greater than the terminal growth rate "
            f"({terminal_growth_rate:.2%}); terminal value set to 0.",
            "terminal_growth_rate",
        )
        return 0.0
    return final_year_fcff * (1 + terminal_growth_rate) / (wacc - terminal_growth_rate)


def calculate_terminal_value_exit_multiple(exit_year_metric: float, exit_multiple: float) -> float:
    """
    Terminal value as a multiple of an exit-year metric.

    TV = metric_n x multiple
    """
    return exit_year_metric * exit_multiple


def calculate_npv(cash_flows: List[float], wacc: float) -> float:
    """
    Net present value with end-of-year discounting.

    NPV = sum(CF_i / (1 + WACC)^(i+1))
    """
    return present_value(cash_flows, wacc)


@dataclass(frozen=True)
class ValuationResult:
    """Results from the DCF valuation."""
    enterprise_value: Optional[float]
    equity_value: Optional[float]
    terminal_value: float
    pv_terminal_value: Optional[float]
    fcffs: Tuple[float, ...]
    discounted_cash_flows: Tuple[float, ...]
    npv: Optional[float]
    irr: Optional[float]
    wacc: Optional[float]
    terminal_value_method: Optional[str]
    terminal_growth_rate: Optional[float]
    exit_multiple: Optional[float]
    exit_multiple_metric: Optional[str]
    net_debt: float
    diagnostics: Tuple[Diagnostic, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'enterprise_value': self.enterprise_value,
            'equity_value': self.equity_value,
            'terminal_value': self.terminal_value,
            'pv_terminal_value': self.pv_terminal_value,
            'fcffs': list(self.fcffs),
            'discounted_cash_flows': list(self.discounted_cash_flows),
            'npv': self.npv,
            'irr': self.irr,
            'wacc': self.wacc,
            'terminal_value_method': self.terminal_value_method,
            'terminal_growth_rate': self.terminal_growth_rate,
            'exit_multiple': self.exit_multiple,
            'exit_multiple_metric': self.exit_multiple_metric,
            'net_debt': self.net_debt,
            'diagnostics': [d.to_dict() for d in self.diagnostics],
        }

    def get_detailed_breakdown(self) -> pd.DataFrame:
        """
        Year-by-year breakdown of the discounting.

        Returns:
            DataFrame with FCFF, terminal value and present value per year
        """
        breakdown_data = []
        for t, fcff in enumerate(self.fcffs):
            discounted = (
                self.discounted_cash_flows[t]
                if t < len(self.discounted_cash_flows) else None
            )
            breakdown_data.append({
                'Year': t + 1,
                'FCFF': fcff,
                'Terminal Value': self.terminal_value if t == len(self.fcffs) - 1 else 0.0,
                'Present Value': discounted,
            })

        return pd.DataFrame(breakdown_data)


class ValuationEngine:
    """
    DCF valuation of a three-statement model.
    """

    def __init__(
        self,
        model: "ThreeStatementModel",
        assumptions: Mapping[str, Any],
        valuation_assumptions: Mapping[str, Any]
    ):
        """
        Initialize valuation engine.

        Args:
            model: Linked three-statement model
            assumptions: Operating assumptions (tax rate)
            valuation_assumptions: wacc, terminal method and its parameters
        """
        self.model = model
        self.assumptions = assumptions or {}
        self.valuation_assumptions = valuation_assumptions or {}
        self.diagnostics: List[Diagnostic] = []

    def _number(self, name: str) -> Optional[float]:
        value = self.valuation_assumptions.get(name)
        return float(value) if is_number(value) else None

    def _exit_metric(self) -> str:
        metric = self.valuation_assumptions.get("exit_multiple_metric") or DEFAULT_EXIT_METRIC
        if metric not in EXIT_METRICS:
            _warn(
                self.diagnostics,
                f"Unknown exit multiple metric {metric!r}; using {DEFAULT_EXIT_METRIC}.",
                "exit_multiple_metric",
            )
            return DEFAULT_EXIT_METRIC
        return metric

    def calculate_terminal_value(
        self,
        fcffs: List[float],
        method: Optional[TerminalValueMethod]
    ) -> Tuple[float, Optional[str]]:
        """
        Terminal value under the configured method.

        Returns:
            Tuple of (terminal_value, exit metric used or None)
        """
        if not fcffs:
            _warn(self.diagnostics, "No projection years; terminal value set to 0.")
            return 0.0, None

        wacc = self._number("wacc")
        growth = self._number("terminal_growth_rate")
        final_year: "IncomeStatementYear" = self.model.income_statements[-1]

        if method is TerminalValueMethod.EXIT_MULTIPLE:
            multiple = self._number("exit_multiple")
            metric = self._exit_metric()
            if multiple is None:
                _warn(self.diagnostics, "Exit multiple not provided; terminal value set to 0.", "exit_multiple")
                return 0.0, metric
            return calculate_terminal_value_exit_multiple(EXIT_METRICS[metric](final_year), multiple), metric

        if method is TerminalValueMethod.PERPETUAL_GROWTH:
            if wacc is None or growth is None:
                _warn(
                    self.diagnostics,
                    "Perpetual growth requires wacc and terminal_growth_rate; terminal value set to 0.",
                    "terminal_growth_rate",
                )
                return 0.0, None
            return calculate_terminal_value_perpetual_growth(fcffs[-1], wacc, growth, self.diagnostics), None

        # Unresolved method: fall back to perpetual growth if its parameters exist
        if wacc is not None and growth is not None:
            _warn(
                self.diagnostics,
                "Terminal value method not specified or invalid; using perpetual growth.",
                "terminal_value_method",
            )
            return calculate_terminal_value_perpetual_growth(fcffs[-1], wacc, growth, self.diagnostics), None

        _warn(
            self.diagnostics,
            "Terminal value method not specified or invalid; terminal value set to 0.",
            "terminal_value_method",
        )
        return 0.0, None

    def calculate_net_debt(self) -> float:
        """
        Net debt of the final projected year.

        Net Debt = (Long-term Debt + Short-term Debt) - Cash
        """
        latest = self.model.final_balance_sheet
        if latest is None:
            latest = self.model.opening_position.as_balance_sheet()
        return latest.net_debt

    def calculate(self) -> ValuationResult:
        """
        Run the DCF valuation.

        Returns:
            ValuationResult
        """
        tax_rate = self.assumptions.get("tax_rate")
        calculator = CashFlowCalculator(float(tax_rate) if is_number(tax_rate) else 0.0)
        fcffs = calculator.fcff_from_statements(self.model)

        raw_method = self.valuation_assumptions.get("terminal_value_method")
        method = TerminalValueMethod.parse(raw_method)
        terminal_value, metric = self.calculate_terminal_value(fcffs, method)

        net_debt = self.calculate_net_debt()
        wacc = self._number("wacc")

        enterprise_value = None
        equity_value = None
        pv_terminal_value = None
        discounted: Tuple[float, ...] = ()

        if wacc is None or not is_finite_number(wacc) or wacc <= -1:
            _warn(
                self.diagnostics,
                "WACC missing or invalid; enterprise value, equity value and NPV are unavailable.",
                "wacc",
            )
        elif fcffs:
            cash_flows = np.asarray(fcffs, dtype=float)
            cash_flows[-1] += terminal_value
            factors = discount_factors(wacc, len(fcffs))

            discounted = tuple(float(v) for v in cash_flows * factors)
            enterprise_value = calculate_npv(list(cash_flows), wacc)
            pv_terminal_value = float(terminal_value * factors[-1])
            equity_value = enterprise_value - net_debt
        else:
            enterprise_value = 0.0
            pv_terminal_value = 0.0
            equity_value = enterprise_value - net_debt

        _warn(
            self.diagnostics,
            "IRR is not computed: no initial investment is modeled and no IRR solver is provided.",
            "irr",
        )

        logger.debug(
            "DCF: method=%s tv=%.2f ev=%s equity=%s",
            method.value if method else raw_method, terminal_value, enterprise_value, equity_value,
        )

        return ValuationResult(
            enterprise_value=enterprise_value,
            equity_value=equity_value,
            terminal_value=terminal_value,
            pv_terminal_value=pv_terminal_value,
            fcffs=tuple(fcffs),
            discounted_cash_flows=discounted,
            # No initial outlay is modeled, so NPV equals enterprise value
            npv=enterprise_value,
            irr=None,
            wacc=wacc,
            terminal_value_method=method.value if method else None,
            terminal_growth_rate=self._number("terminal_growth_rate"),
            exit_multiple=self._number("exit_multiple"),
            exit_multiple_metric=metric,
            net_debt=net_debt,
            diagnostics=tuple(self.diagnostics),
        )


def generate_dcf_valuation(financial_model, validated_inputs, mode: str) -> ValuationResult:
    """
    Generate the DCF valuation for a three-statement model.

    Args:
        financial_model: ThreeStatementModel
        validated_inputs: ValidatedInputs carrying assumptions and
            valuation_assumptions
        mode: "founder" or "investor"

    Returns:
        ValuationResult
    """
    logger.debug("Generating %s DCF valuation", mode)
    engine = ValuationEngine(
        financial_model,
        validated_inputs.assumptions,
        validated_inputs.valuation_assumptions,
    )
    return engine.calculate()
