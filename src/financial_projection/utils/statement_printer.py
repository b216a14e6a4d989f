"""
statement_printer.py

Utility functions for printing projected statements, the valuation and
the summary as fixed-width console tables.
"""

import math
from typing import List, Optional, Sequence, Tuple


def fmt_currency(val: Optional[float]) -> str:
    """Format currency value."""
    if val is None or (isinstance(val, float) and math.isnan(val)):
        return "N/A"
    if abs(val) >= 1e9:
        return f"${val/1e9:,.2f}B"
    elif abs(val) >= 1e6:
        return f"${val/1e6:,.1f}M"
    elif abs(val) >= 1e3:
        return f"${val/1e3:,.1f}K"
    else:
        return f"${val:,.0f}"


def fmt_percent(val: Optional[float]) -> str:
    """Format a rate (0.05 -> 5.00%)."""
    if val is None or (isinstance(val, float) and math.isnan(val)):
        return "N/A"
    return f"{val:.2%}"


def fmt_multiple(val: Optional[float]) -> str:
    if val is None:
        return "N/A"
    return f"{val:,.2f}x"


def _print_table(title: str, years: Sequence[int], rows: List[Tuple[str, List[float]]], width: int):
    print(f"\n{'─'*width}")
    print(f"{title:^{width}}")
    print(f"{'─'*width}")
    header = f"{'Item':<32}" + "".join(f"{'Year ' + str(y):>12}" for y in years)
    print(header)
    print(f"{'─'*width}")
    for name, values in rows:
        print(f"{name:<32}" + "".join(f"{fmt_currency(v):>12}" for v in values))


def print_statements(model):
    """Print all three projected statements of a ThreeStatementModel."""
    years = [s.year for s in model.income_statements]
    width = 32 + 12 * max(len(years), 1)

    def row(name, records, attr):
        return (name, [getattr(r, attr) for r in records])

    income = model.income_statements
    _print_table("INCOME STATEMENT", years, [
        row('Revenue', income, 'revenue'),
        row('Cost of Goods Sold', income, 'cogs'),
        row('Gross Profit', income, 'gross_profit'),
        row('SG&A', income, 'sga'),
        row('R&D', income, 'rd'),
        row('Other Operating Expenses', income, 'other_operating_expenses'),
        row('EBITDA', income, 'ebitda'),
        row('Depreciation', income, 'depreciation'),
        row('EBIT', income, 'ebit'),
        row('Interest Expense', income, 'interest_expense'),
        row('Earnings Before Tax', income, 'earnings_before_tax'),
        row('Taxes', income, 'taxes'),
        row('Net Income', income, 'net_income'),
    ], width)

    balance = model.balance_sheets
    _print_table("BALANCE SHEET", years, [
        row('Cash', balance, 'cash'),
        row('Accounts Receivable', balance, 'accounts_receivable'),
        row('Inventory', balance, 'inventory'),
        row('PP&E, net', balance, 'ppe_net'),
        row('Total Assets', balance, 'total_assets'),
        row('Accounts Payable', balance, 'accounts_payable'),
        row('Total Debt', balance, 'total_debt'),
        row('Total Liabilities', balance, 'total_liabilities'),
        row('Common Stock', balance, 'common_stock'),
        row('Retained Earnings', balance, 'retained_earnings'),
        row('Other Equity', balance, 'other_equity'),
        row('Total Equity', balance, 'total_equity'),
        row('Total Liabilities & Equity', balance, 'total_liabilities_and_equity'),
    ], width)
    checks = "".join(
        f"{'✓' if bs.is_balanced() else '✗':>12}" for bs in balance
    )
    print(f"{'Balance Check':<32}{checks}")

    cash_flow = model.cash_flow_statements
    _print_table("CASH FLOW STATEMENT", years, [
        row('Net Income', cash_flow, 'net_income'),
        row('Depreciation', cash_flow, 'depreciation'),
        row('Change in Working Capital', cash_flow, 'change_in_working_capital'),
        row('Cash Flow from Operations', cash_flow, 'cash_flow_from_operations'),
        row('Cash Flow from Investing', cash_flow, 'cash_flow_from_investing'),
        row('Cash Flow from Financing', cash_flow, 'cash_flow_from_financing'),
        row('Net Change in Cash', cash_flow, 'net_change_in_cash'),
        row('Ending Cash', cash_flow, 'ending_cash'),
    ], width)


def print_summary(summary, valuation=None):
    """Print the headline valuation and the assumptions used."""
    print(f"\n{'━'*60}")
    print(f"{'VALUATION SUMMARY':^60}")
    print(f"{'━'*60}")

    if valuation is not None:
        print(f"  {'FCFF':<30} " + ", ".join(fmt_currency(v) for v in valuation.fcffs))
        print(f"  {'Terminal Value':<30} {fmt_currency(valuation.terminal_value):>16}")
        print(f"  {'PV of Terminal Value':<30} {fmt_currency(valuation.pv_terminal_value):>16}")
        print(f"  {'Net Debt':<30} {fmt_currency(valuation.net_debt):>16}")

    print(f"  {'Enterprise Value':<30} {fmt_currency(summary.estimated_enterprise_value):>16}")
    print(f"  {'Equity Value':<30} {fmt_currency(summary.estimated_equity_value):>16}")
    if summary.equity_value_per_share is not None:
        print(f"  {'Equity Value per Share':<30} {summary.equity_value_per_share:>16,.2f}")
    else:
        print(f"  {'Equity Value per Share':<30} {summary.equity_value_per_share_status:>16}")
    print(f"  {'NPV':<30} {fmt_currency(summary.npv):>16}")
    print(f"  {'IRR':<30} {fmt_percent(summary.irr):>16}")

    print(f"\n  Core assumptions")
    for key, value in summary.core_assumptions.items():
        if isinstance(value, float) and key in ('wacc', 'terminal_growth_rate'):
            value = fmt_percent(value)
        print(f"    {key:<28} {value!s:>16}")

    if summary.comps_summary:
        print(f"\n  Comparable companies")
        print(f"    {'Multiple':<16} {'Mean':>8} {'Median':>8} {'High':>8} {'Low':>8} {'N':>4}")
        for name, stats in summary.comps_summary.items():
            print(
                f"    {name:<16} {fmt_multiple(stats['mean']):>8} {fmt_multiple(stats['median']):>8} "
                f"{fmt_multiple(stats['high']):>8} {fmt_multiple(stats['low']):>8} {stats['count']:>4}"
            )

    if summary.diagnostics:
        print(f"\n  Diagnostics")
        for diagnostic in summary.diagnostics:
            print(f"    [{diagnostic.kind.value}] {diagnostic.message}")
