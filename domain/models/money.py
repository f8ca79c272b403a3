"""
Money helpers shared by every balance-carrying model.

Balances, pots and wagers are held as Decimal cents. Every amount entering
the domain is quantized to two places with banker's rounding.
"""

from decimal import ROUND_HALF_EVEN, Decimal, InvalidOperation

CENT = Decimal("0.01")
ZERO = Decimal("0.00")
MAX_AMOUNT = Decimal("1000000000000.00")


def to_money(value) -> Decimal:
    """
    Convert a number or numeric string to a two-place Decimal.

    Raises:
        ValueError: If the value is not a finite number
    """
    if isinstance(value, float):
        value = repr(value)
    try:
        amount = Decimal(value)
    except (InvalidOperation, TypeError, ValueError) as exc:
        raise ValueError(f"Not a valid amount: {value!r}") from exc
    if not amount.is_finite():
        raise ValueError(f"Amount must be finite, got {value!r}")
    try:
        return amount.quantize(CENT, rounding=ROUND_HALF_EVEN)
    except InvalidOperation as exc:
        raise ValueError(f"Not a valid amount: {value!r}") from exc


def parse_amount(value) -> Decimal:
    """
    Parse a user-entered amount. Like to_money, but also rejects anything
    larger in magnitude than MAX_AMOUNT.
    """
    amount = to_money(value)
    if abs(amount) > MAX_AMOUNT:
        raise ValueError(f"Amount out of range: {value!r}")
    return amount


def round_ratio(numerator: Decimal, denominator: Decimal) -> Decimal:
    """Divide and round the ratio to two places (banker's rounding)."""
    return (numerator / denominator).quantize(CENT, rounding=ROUND_HALF_EVEN)


def format_money(amount: Decimal) -> str:
    """Render an amount as dollars, e.g. -$3.50."""
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.2f}"
