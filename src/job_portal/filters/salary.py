"""Salary string parsing for sorting and range filters."""

import logging
import re
from typing import Any

logger = logging.getLogger(__name__)

# First digit group; "," or "." followed by exactly three digits is a
# thousands separator ("50,000", "10.000.000"), anything else ends the token.
_NUMBER_PATTERN = re.compile(r"\d{1,3}(?:[.,]\d{3})+(?!\d)|\d+")

UNKNOWN_SALARY = 0


def parse_salary(value: Any) -> int:
    """
    Extract a comparable number from a free-text salary.

    Examples:
        >>> parse_salary("$50,000 - $70,000")
        50000
        >>> parse_salary("10.000.000 VND")
        10000000
        >>> parse_salary("Negotiable")
        0

    Args:
        value: Salary text as returned by the API. Numbers are accepted as-is.

    Returns:
        First numeric token with separators stripped, or 0 (unknown) when the
        value holds no digits. Never raises.
    """
    if value is None or isinstance(value, bool):
        return UNKNOWN_SALARY

    if isinstance(value, (int, float)):
        try:
            return max(int(value), UNKNOWN_SALARY)
        except (OverflowError, ValueError):
            return UNKNOWN_SALARY

    if not isinstance(value, str):
        logger.debug(f"Unparsable salary value of type {type(value).__name__}")
        return UNKNOWN_SALARY

    match = _NUMBER_PATTERN.search(value)
    if not match:
        return UNKNOWN_SALARY

    digits = match.group(0).replace(",", "").replace(".", "")
    return int(digits)


class SalaryParser:
    """
    Callable wrapper around ``parse_salary`` with an optional unit divisor.

    The saved-jobs screen compares VND salaries in millions, so its range
    facet uses ``SalaryParser(divisor=1_000_000)``.
    """

    def __init__(self, divisor: float = 1):
        if divisor <= 0:
            raise ValueError("divisor must be positive")
        self.divisor = divisor

    def __call__(self, value: Any) -> float:
        amount = parse_salary(value)
        if self.divisor == 1:
            return amount
        return amount / self.divisor

    def is_unknown(self, value: Any) -> bool:
        """True when ``value`` carries no salary figure."""
        return parse_salary(value) == UNKNOWN_SALARY
