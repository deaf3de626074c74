"""Shared helpers for indicator computations."""

from collections.abc import Sequence
from decimal import Decimal

from trendbot.exceptions import InsufficientDataError

#: Precision limit for indicator intermediate results (12 decimal places).
#: Prevents Decimal division from producing arbitrarily long representations.
QUANTIZE = Decimal("0.000000000001")


def require_length(values: Sequence, needed: int, indicator: str) -> None:
    """Fail fast when ``values`` is shorter than an indicator's lookback.

    Raises:
        InsufficientDataError: If fewer than ``needed`` values are supplied.
    """
    if len(values) < needed:
        raise InsufficientDataError(
            f"{indicator} needs {needed} values, got {len(values)}"
        )
