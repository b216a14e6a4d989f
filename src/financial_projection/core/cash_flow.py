"""
Cash Flow Calculations

Free Cash Flow to the Firm (FCFF) derived from the projected
statements.

Key Relationships:
1. NOPLAT = EBIT x (1 - T)
2. FCFF = NOPLAT + Depreciation - CapEx - Increase in NWC
3. Increase in NWC = dAR + dInventory - dAP (positive = cash consumed)
"""

from typing import TYPE_CHECKING, List

if TYPE_CHECKING:
    from ..financial_statements.statement_builder import ThreeStatementModel


class CashFlowCalculator:
    """
    Calculates unlevered free cash flows for firm valuation.

    The tax rate is the flat statutory rate from the assumptions, not
    the effective rate of any single year.
    """

    def __init__(self, tax_rate: float):
        """
        Initialize cash flow calculator.

        Args:
            tax_rate: Corporate tax rate
        """
        self.tax_rate = tax_rate

    def calculate_noplat(self, ebit: float) -> float:
        """
        Calculate Net Operating Profit Less Adjusted Taxes.

        NOPLAT = EBIT x (1 - T)
        """
        return ebit * (1 - self.tax_rate)

    def calculate_fcff(
        self,
        ebit: float,
        depreciation: float,
        increase_in_nwc: float,
        capex: float
    ) -> float:
        """
        Calculate Free Cash Flow to the Firm.

        FCFF = NOPLAT + Depreciation - CapEx - Increase in NWC

        Args:
            ebit: Earnings Before Interest and Taxes
            depreciation: Depreciation expense
            increase_in_nwc: Increase in net working capital (positive = use of cash)
            capex: Capital expenditures; the sign is ignored

        Returns:
            Free Cash Flow to the Firm
        """
        noplat = self.calculate_noplat(ebit)
        return noplat + depreciation - abs(capex) - increase_in_nwc

    def fcff_from_statements(self, model: "ThreeStatementModel") -> List[float]:
        """
        FCFF for every projected year of a three-statement model.

        Args:
            model: Linked three-statement model

        Returns:
            List of FCFF values, one per projection year
        """
        return [
            self.calculate_fcff(
                ebit=is_year.ebit,
                depreciation=is_year.depreciation,
                increase_in_nwc=cfs_year.increase_in_net_working_capital,
                capex=cfs_year.capital_expenditures,
            )
            for is_year, cfs_year in zip(model.income_statements, model.cash_flow_statements)
        ]
