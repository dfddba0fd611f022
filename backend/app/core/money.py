from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Union

MINOR_UNIT_EXPONENT = 2

Amount = Union[int, float, str, Decimal]


def to_minor_units(amount: Amount, exponent: int = MINOR_UNIT_EXPONENT) -> int:
    """Convert a major-unit amount to the provider's integer minor units.

    Floats go through ``str`` first so 10.1 stays 10.1 instead of its binary
    approximation. Halves round up.
    """
    value = amount if isinstance(amount, Decimal) else Decimal(str(amount))
    scaled = value.scaleb(exponent).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return int(scaled)
