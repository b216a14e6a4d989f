# src/financial_projection/financial_statements/statement_builder.py
"""
Statement Builder

Orchestrates the construction of all three financial statements in the
correct sequence so that no year depends on itself.

Sequence for year t:
1. Income Statement uses revenue and debt from year t-1
2. Balance Sheet uses the income statement for everything except cash
3. Cash Flow Statement uses the movement between the t-1 and t balances
4. Ending cash from the cash flow statement is written back into the
   balance sheet, which then balances
"""

import logging
import pandas as pd
from typing import Any, Dict, List, Mapping, Optional, Tuple
from dataclasses import dataclass, field, replace

from ..config import (
    BALANCE_TOLERANCE,
    DAYS_IN_YEAR,
    DEFAULT_CAPEX_PERCENT,
    DEFAULT_DEPRECIATION_GROWTH,
    DEFAULT_INTEREST_RATE,
)
from ..core.diagnostics import Diagnostic, DiagnosticKind, record
from ..utils.financial_utils import apply_growth, is_number, normalize_series, percentage_of
from .balance_sheet import BalanceSheetYear
from .cash_flow_statement import CashFlowStatementYear
from .income_statement import IncomeStatementYear

logger = logging.getLogger(__name__)

SOURCE = "statement_builder"

# Working-capital ratios used when none is supplied
DEFAULT_RECEIVABLE_DAYS = 30
DEFAULT_INVENTORY_DAYS = 45
DEFAULT_PAYABLE_DAYS = 30


def _number(value: Any) -> Optional[float]:
    """Numeric value or None; anything non-numeric counts as absent."""
    return float(value) if is_number(value) else None


def _first_number(*values: Any) -> Optional[float]:
    for value in values:
        number = _number(value)
        if number is not None:
            return number
    return None


@dataclass(frozen=True)
class OpeningPosition:
    """
    Resolved prior-year baseline used by projection year 1.

    Each value comes from historical data when present, else the
    matching base assumption, else zero. other_equity absorbs any
    imbalance in the supplied opening balance sheet.
    """
    revenue: Optional[float]
    depreciation: float = 0.0
    cash: float = 0.0
    accounts_receivable: float = 0.0
    inventory: float = 0.0
    ppe_net: float = 0.0
    accounts_payable: float = 0.0
    short_term_debt: float = 0.0
    long_term_debt: float = 0.0
    common_stock: float = 0.0
    retained_earnings: float = 0.0
    other_equity: float = 0.0

    @classmethod
    def resolve(
        cls,
        assumptions: Mapping[str, Any],
        historical_data: Mapping[str, Any]
    ) -> "OpeningPosition":
        """
        Resolve opening balances from historical data and assumptions.

        Historical values take precedence whenever they are present,
        including an explicit zero.
        """
        income = historical_data.get("income_statement") or {}
        balance = historical_data.get("balance_sheet") or {}
        if not isinstance(income, Mapping):
            income = {}
        if not isinstance(balance, Mapping):
            balance = {}

        short_term_debt = _first_number(balance.get("short_term_debt")) or 0.0
        long_term_debt = _number(balance.get("long_term_debt"))
        if long_term_debt is None:
            total_debt = _number(balance.get("total_debt"))
            if total_debt is not None:
                # total_debt already includes the short-term portion
                long_term_debt = total_debt - short_term_debt
            else:
                long_term_debt = _number(assumptions.get("base_debt")) or 0.0

        opening = cls(
            revenue=_first_number(income.get("revenue"), assumptions.get("base_revenue")),
            depreciation=_first_number(
                income.get("depreciation"), assumptions.get("base_depreciation")
            ) or 0.0,
            cash=_first_number(balance.get("cash"), assumptions.get("base_cash")) or 0.0,
            accounts_receivable=_first_number(
                balance.get("accounts_receivable"),
                assumptions.get("base_accounts_receivable"),
            ) or 0.0,
            inventory=_first_number(
                balance.get("inventory"), assumptions.get("base_inventory")
            ) or 0.0,
            ppe_net=_first_number(balance.get("ppe_net"), assumptions.get("base_ppe_net")) or 0.0,
            accounts_payable=_first_number(
                balance.get("accounts_payable"),
                assumptions.get("base_accounts_payable"),
            ) or 0.0,
            short_term_debt=short_term_debt,
            long_term_debt=long_term_debt,
            common_stock=_first_number(
                balance.get("common_stock"), assumptions.get("base_common_stock")
            ) or 0.0,
            retained_earnings=_first_number(
                balance.get("retained_earnings"),
                assumptions.get("base_retained_earnings"),
            ) or 0.0,
        )

        imbalance = opening.as_balance_sheet().balance_sheet_check
        return replace(opening, other_equity=imbalance)

    def as_balance_sheet(self) -> BalanceSheetYear:
        """The opening position as a year-0 balance sheet."""
        return BalanceSheetYear(
            year=0,
            cash=self.cash,
            accounts_receivable=self.accounts_receivable,
            inventory=self.inventory,
            ppe_net=self.ppe_net,
            accounts_payable=self.accounts_payable,
            short_term_debt=self.short_term_debt,
            long_term_debt=self.long_term_debt,
            common_stock=self.common_stock,
            retained_earnings=self.retained_earnings,
            other_equity=self.other_equity,
        )

    def to_dict(self) -> Dict[str, Optional[float]]:
        return {
            'revenue': self.revenue,
            'depreciation': self.depreciation,
            'cash': self.cash,
            'accounts_receivable': self.accounts_receivable,
            'inventory': self.inventory,
            'ppe_net': self.ppe_net,
            'accounts_payable': self.accounts_payable,
            'short_term_debt': self.short_term_debt,
            'long_term_debt': self.long_term_debt,
            'common_stock': self.common_stock,
            'retained_earnings': self.retained_earnings,
            'other_equity': self.other_equity,
        }


@dataclass(frozen=True)
class ThreeStatementModel:
    """Ordered per-year statements plus the opening position."""
    income_statements: Tuple[IncomeStatementYear, ...]
    balance_sheets: Tuple[BalanceSheetYear, ...]
    cash_flow_statements: Tuple[CashFlowStatementYear, ...]
    opening_position: OpeningPosition
    diagnostics: Tuple[Diagnostic, ...] = field(default_factory=tuple)

    @property
    def projection_years(self) -> int:
        return len(self.income_statements)

    @property
    def final_balance_sheet(self) -> Optional[BalanceSheetYear]:
        return self.balance_sheets[-1] if self.balance_sheets else None

    def is_balanced(self, tolerance: float = BALANCE_TOLERANCE) -> bool:
        """True when every projected balance sheet balances."""
        return all(bs.is_balanced(tolerance) for bs in self.balance_sheets)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'income_statement': {'years': [s.to_dict() for s in self.income_statements]},
            'balance_sheet': {'years': [s.to_dict() for s in self.balance_sheets]},
            'cash_flow_statement': {'years': [s.to_dict() for s in self.cash_flow_statements]},
            'opening_position': self.opening_position.to_dict(),
            'diagnostics': [d.to_dict() for d in self.diagnostics],
        }

    def to_dataframes(self) -> Dict[str, pd.DataFrame]:
        """
        Statements as DataFrames with line items as rows and projection
        years as columns.
        """
        frames = {}
        for name, records in (
            ('income_statement', self.income_statements),
            ('balance_sheet', self.balance_sheets),
            ('cash_flow_statement', self.cash_flow_statements),
        ):
            df = pd.DataFrame([r.to_dict() for r in records])
            if not df.empty:
                df = df.set_index('year').T
                df.columns = [f"Year {year}" for year in df.columns]
            frames[name] = df
        return frames


class StatementBuilder:
    """
    Build the three financial statements year by year.

    Each year is built from the finalized records of the previous year
    and that year's assumptions only; records are never mutated once
    appended.
    """

    def __init__(
        self,
        assumptions: Mapping[str, Any],
        opening: OpeningPosition,
        projection_years: int
    ):
        """
        Initialize statement builder.

        Args:
            assumptions: Validated assumptions
            opening: Resolved year-0 baseline
            projection_years: Number of years to project
        """
        self.assumptions = assumptions
        self.opening = opening
        self.projection_years = projection_years

        self.history = {
            'income_statements': [],
            'balance_sheets': [],
            'cash_flow_statements': [],
        }

    def _series(self, name: str) -> Optional[List[Any]]:
        value = self.assumptions.get(name)
        if not isinstance(value, (list, tuple)) or not value:
            return None
        return normalize_series(value, self.projection_years)

    def _rate(self, name: str, year_index: int, default: float = 0.0) -> float:
        series = self._series(name)
        if series is None:
            return default
        value = _number(series[year_index])
        return value if value is not None else default

    def _scalar(self, name: str, default: float) -> float:
        value = _number(self.assumptions.get(name))
        return value if value is not None else default

    def build(self) -> Tuple[List[IncomeStatementYear], List[BalanceSheetYear], List[CashFlowStatementYear]]:
        """Build all projection years in order."""
        prior_bs = self.opening.as_balance_sheet()
        prior_revenue = self.opening.revenue or 0.0
        prior_depreciation = self.opening.depreciation

        for i in range(self.projection_years):
            is_year = self._build_income_statement(i, prior_revenue, prior_depreciation, prior_bs)
            capex = percentage_of(
                is_year.revenue,
                self._rate("capex_as_percentage_of_revenue", i, DEFAULT_CAPEX_PERCENT),
            )
            bs_year = self._build_balance_sheet(i, is_year, capex, prior_bs)
            cfs_year = self._build_cash_flow_statement(i, is_year, capex, bs_year, prior_bs)

            # Link ending cash to the balance sheet
            bs_year = bs_year.with_cash(cfs_year.ending_cash)

            logger.debug(
                "Year %d: revenue=%.2f net_income=%.2f ending_cash=%.2f check=%.6f",
                is_year.year, is_year.revenue, is_year.net_income,
                cfs_year.ending_cash, bs_year.balance_sheet_check,
            )

            self.history['income_statements'].append(is_year)
            self.history['balance_sheets'].append(bs_year)
            self.history['cash_flow_statements'].append(cfs_year)

            prior_bs = bs_year
            prior_revenue = is_year.revenue
            prior_depreciation = is_year.depreciation

        return (
            self.history['income_statements'],
            self.history['balance_sheets'],
            self.history['cash_flow_statements'],
        )

    def _build_income_statement(
        self,
        i: int,
        prior_revenue: float,
        prior_depreciation: float,
        prior_bs: BalanceSheetYear
    ) -> IncomeStatementYear:
        revenue = apply_growth(prior_revenue, self._rate("revenue_growth_rate", i))

        # D&A as a percentage of revenue, else grown from the prior year
        if self._series("depreciation_as_percentage_of_revenue") is not None:
            depreciation = percentage_of(
                revenue, self._rate("depreciation_as_percentage_of_revenue", i)
            )
        else:
            depreciation = apply_growth(
                prior_depreciation,
                self._rate("depreciation_growth_rate", i, DEFAULT_DEPRECIATION_GROWTH),
            )

        interest_expense = percentage_of(
            prior_bs.total_debt,
            self._scalar("interest_rate_on_debt", DEFAULT_INTEREST_RATE),
        )

        return IncomeStatementYear.construct(
            year=i + 1,
            revenue=revenue,
            cogs_percent=self._rate("cogs_as_percentage_of_revenue", i),
            sga_percent=self._rate("sga_as_percentage_of_revenue", i),
            rd_percent=self._rate("rd_as_percentage_of_revenue", i),
            other_opex_percent=self._rate("other_opex_as_percentage_of_revenue", i),
            depreciation=depreciation,
            interest_expense=interest_expense,
            tax_rate=self._scalar("tax_rate", 0.0),
        )

    def _build_balance_sheet(
        self,
        i: int,
        is_year: IncomeStatementYear,
        capex: float,
        prior_bs: BalanceSheetYear
    ) -> BalanceSheetYear:
        receivable_ratio = self._scalar(
            "accounts_receivable_as_percentage_of_sales",
            DEFAULT_RECEIVABLE_DAYS / DAYS_IN_YEAR,
        )
        inventory_ratio = self._scalar(
            "inventory_as_percentage_of_cogs",
            DEFAULT_INVENTORY_DAYS / DAYS_IN_YEAR,
        )
        payable_ratio = self._scalar(
            "accounts_payable_as_percentage_of_cogs",
            DEFAULT_PAYABLE_DAYS / DAYS_IN_YEAR,
        )

        # Cash is a placeholder until the cash flow statement resolves it
        return BalanceSheetYear(
            year=i + 1,
            cash=0.0,
            accounts_receivable=percentage_of(is_year.revenue, receivable_ratio),
            inventory=percentage_of(is_year.cogs, inventory_ratio),
            ppe_net=prior_bs.ppe_net + capex - is_year.depreciation,
            accounts_payable=percentage_of(is_year.cogs, payable_ratio),
            short_term_debt=prior_bs.short_term_debt,
            long_term_debt=prior_bs.long_term_debt,
            common_stock=prior_bs.common_stock,
            retained_earnings=prior_bs.retained_earnings + is_year.net_income,
            other_equity=prior_bs.other_equity,
        )

    def _build_cash_flow_statement(
        self,
        i: int,
        is_year: IncomeStatementYear,
        capex: float,
        bs_year: BalanceSheetYear,
        prior_bs: BalanceSheetYear
    ) -> CashFlowStatementYear:
        return CashFlowStatementYear(
            year=i + 1,
            net_income=is_year.net_income,
            depreciation=is_year.depreciation,
            change_in_accounts_receivable=bs_year.accounts_receivable - prior_bs.accounts_receivable,
            change_in_inventory=bs_year.inventory - prior_bs.inventory,
            change_in_accounts_payable=bs_year.accounts_payable - prior_bs.accounts_payable,
            capital_expenditures=capex,
            beginning_cash=prior_bs.cash,
        )


def generate_three_statement_model(
    validated_inputs,
    mode: str,
    projection_years: Optional[int] = None
) -> ThreeStatementModel:
    """
    Generate the linked three-statement model.

    Args:
        validated_inputs: ValidatedInputs from process_inputs
        mode: "founder" or "investor"; both use the same mechanics
        projection_years: Horizon; defaults to the horizon the inputs
            were normalized to (5 unless overridden)

    Returns:
        ThreeStatementModel with diagnostics for missing baselines and
        opening-balance adjustments
    """
    if projection_years is None:
        projection_years = validated_inputs.projection_years

    diagnostics: List[Diagnostic] = []
    assumptions = validated_inputs.assumptions or {}
    historical_data = validated_inputs.historical_data or {}

    opening = OpeningPosition.resolve(assumptions, historical_data)

    if opening.revenue is None:
        record(
            diagnostics,
            DiagnosticKind.DATA_GAP_WARNING,
            "No historical revenue or base_revenue supplied; projected revenue starts from 0.",
            SOURCE,
            logger,
            field="base_revenue",
        )

    if abs(opening.other_equity) > BALANCE_TOLERANCE * max(1.0, abs(opening.as_balance_sheet().total_assets)):
        record(
            diagnostics,
            DiagnosticKind.COMPUTATION_WARNING,
            f"Opening balance sheet does not balance; carrying "
            f"{opening.other_equity:,.2f} as other equity.",
            SOURCE,
            logger,
            field="other_equity",
        )

    logger.debug("Building %d-year %s model", projection_years, mode)

    builder = StatementBuilder(assumptions, opening, projection_years)
    income_statements, balance_sheets, cash_flow_statements = builder.build()

    return ThreeStatementModel(
        income_statements=tuple(income_statements),
        balance_sheets=tuple(balance_sheets),
        cash_flow_statements=tuple(cash_flow_statements),
        opening_position=opening,
        diagnostics=tuple(diagnostics),
    )
