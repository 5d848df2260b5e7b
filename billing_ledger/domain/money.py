"""Fixed-point money helpers

All monetary values are ``Decimal`` quantized to cents. Floats never enter
ledger arithmetic.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional, Union

CENTS = Decimal("0.01")
ZERO = Decimal("0.00")

Number = Union[Decimal, int, str]


def to_money(value: Optional[Number]) -> Decimal:
    if value is None:
        return ZERO
    if isinstance(value, float):
        raise TypeError("Monetary values must not be floats")
    return Decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP)


def line_amount(quantity: Number, rate: Number) -> Decimal:
    return to_money(Decimal(quantity) * Decimal(rate))


def money_sum(values: Iterable[Number]) -> Decimal:
    total = ZERO
    for value in values:
        total += to_money(value)
    return to_money(total)
