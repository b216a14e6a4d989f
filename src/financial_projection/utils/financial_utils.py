"""
Financial Utilities

Small numeric helpers shared by the input processor, the statement
builder and the valuation engine.
"""

import math
import numpy as np
from typing import Any, List, Sequence, Union


def is_number(value: Any) -> bool:
    """True for ints and floats, excluding booleans."""
    return isinstance(value, (int, float, np.integer, np.floating)) and not isinstance(value, bool)


def is_finite_number(value: Any) -> bool:
    """True for numbers that are neither NaN nor infinite."""
    return is_number(value) and math.isfinite(value)


def apply_growth(previous_value: float, growth_rate: float) -> float:
    """
    Grow a value by one period.

    Formula: value = previous_value * (1 + growth_rate)

    Args:
        previous_value: Value from the previous period
        growth_rate: Growth rate (0.05 for 5%)

    Returns:
        Grown value

    Examples:
        >>> apply_growth(1000000, 0.10)
        1100000.0
    """
    return previous_value * (1 + growth_rate)


def percentage_of(base_value: float, percentage: float) -> float:
    """Value as a percentage of a base (0.20 for 20%)."""
    return base_value * percentage


def normalize_series(values: Sequence[Any], length: int) -> List[Any]:
    """
    Force a series to an exact length.

    Short series are extended by repeating the last element, long
    series are truncated. An empty series is returned unchanged since
    there is nothing to repeat.

    Examples:
        >>> normalize_series([0.1, 0.08], 4)
        [0.1, 0.08, 0.08, 0.08]
        >>> normalize_series([1, 2, 3], 2)
        [1, 2]
    """
    series = list(values)
    if not series:
        return series

    if len(series) < length:
        series.extend([series[-1]] * (length - len(series)))

    return series[:length]


def discount_factors(discount_rate: float, periods: int) -> np.ndarray:
    """
    End-of-period discount factors for periods 1..n.

    Formula: DF_t = 1 / (1 + r)^t
    """
    exponents = np.arange(1, periods + 1)
    return 1.0 / np.power(1 + discount_rate, exponents)


def present_value(
    cash_flows: Union[Sequence[float], np.ndarray],
    discount_rate: float
) -> float:
    """
    Net present value of a cash-flow series received at the end of
    periods 1..n.

    Formula: PV = sum(CF_t / (1 + r)^t)

    Examples:
        >>> present_value([110.0, 121.0], 0.10)
        200.0  # approximately
    """
    flows = np.asarray(cash_flows, dtype=float)
    if flows.size == 0:
        return 0.0
    return float(np.sum(flows * discount_factors(discount_rate, flows.size)))
