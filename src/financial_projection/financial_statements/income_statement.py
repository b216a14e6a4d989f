# src/financial_projection/financial_statements/income_statement.py
"""
Income Statement Construction

One projected year of the income statement. Line items are stored as
components; subtotals are derived so a record can never disagree with
itself.

Key principle: interest expense is based on the PREVIOUS year's debt,
so the income statement never depends on the balance sheet it feeds.
"""

import pandas as pd
from typing import Dict
from dataclasses import dataclass


@dataclass(frozen=True)
class IncomeStatementYear:
    """Income statement for a single projection year."""
    year: int
    revenue: float = 0.0
    cogs: float = 0.0
    sga: float = 0.0
    rd: float = 0.0
    other_operating_expenses: float = 0.0
    depreciation: float = 0.0
    interest_expense: float = 0.0
    tax_rate: float = 0.0

    @classmethod
    def construct(
        cls,
        year: int,
        revenue: float,
        cogs_percent: float,
        sga_percent: float,
        rd_percent: float,
        other_opex_percent: float,
        depreciation: float,
        interest_expense: float,
        tax_rate: float
    ) -> "IncomeStatementYear":
        """
        Construct an income statement from revenue and cost ratios.

        Args:
            year: Projection year (1-based)
            revenue: Sales revenue
            cogs_percent: COGS as a fraction of revenue
            sga_percent: SG&A as a fraction of revenue
            rd_percent: R&D as a fraction of revenue
            other_opex_percent: Other operating expenses as a fraction of revenue
            depreciation: Depreciation and amortization
            interest_expense: Interest on the previous year's debt
            tax_rate: Flat corporate tax rate

        Returns:
            Frozen income statement record
        """
        return cls(
            year=year,
            revenue=revenue,
            cogs=revenue * cogs_percent,
            sga=revenue * sga_percent,
            rd=revenue * rd_percent,
            other_operating_expenses=revenue * other_opex_percent,
            depreciation=depreciation,
            interest_expense=interest_expense,
            tax_rate=tax_rate,
        )

    @property
    def gross_profit(self) -> float:
        return self.revenue - self.cogs

    @property
    def operating_expenses(self) -> float:
        return self.sga + self.rd + self.other_operating_expenses

    @property
    def ebitda(self) -> float:
        return self.gross_profit - self.operating_expenses

    @property
    def ebit(self) -> float:
        return self.ebitda - self.depreciation

    @property
    def earnings_before_tax(self) -> float:
        return self.ebit - self.interest_expense

    @property
    def taxes(self) -> float:
        # Tax is only on positive income
        return max(self.earnings_before_tax, 0.0) * self.tax_rate

    @property
    def net_income(self) -> float:
        return self.earnings_before_tax - self.taxes

    def to_dict(self) -> Dict[str, float]:
        """
        Convert income statement to dictionary format.

        Returns:
            Dictionary with all income statement items
        """
        return {
            'year': self.year,

            # Revenues
            'revenue': self.revenue,
            'cogs': self.cogs,
            'gross_profit': self.gross_profit,
            'gross_margin': (
                self.gross_profit / self.revenue
                if self.revenue != 0 else 0.0
            ),

            # Operating Expenses
            'sga': self.sga,
            'rd': self.rd,
            'other_operating_expenses': self.other_operating_expenses,
            'operating_expenses': self.operating_expenses,

            # EBITDA / EBIT
            'ebitda': self.ebitda,
            'depreciation': self.depreciation,
            'ebit': self.ebit,
            'ebit_margin': (
                self.ebit / self.revenue
                if self.revenue != 0 else 0.0
            ),

            # Financial Items
            'interest_expense': self.interest_expense,
            'earnings_before_tax': self.earnings_before_tax,

            # Tax
            'tax_rate': self.tax_rate,
            'taxes': self.taxes,

            # Net Income
            'net_income': self.net_income,
            'net_margin': (
                self.net_income / self.revenue
                if self.revenue != 0 else 0.0
            ),
        }

    def to_dataframe(self) -> pd.DataFrame:
        """Convert income statement to a one-row DataFrame."""
        return pd.DataFrame([self.to_dict()])

