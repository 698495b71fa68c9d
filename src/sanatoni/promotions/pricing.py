"""Money helpers shared by cart totals, coupons and flash sales."""

from decimal import Decimal, ROUND_HALF_UP

ZERO = Decimal("0.00")
HUNDRED = Decimal("100")


def to_decimal(value):
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value or 0))


def round_money(amount, places=2):
    """Round to specified decimal places, halves rounding up."""
    quantize_str = "0." + "0" * places
    return to_decimal(amount).quantize(Decimal(quantize_str), rounding=ROUND_HALF_UP)


def percent_of(amount, percentage):
    return round_money(to_decimal(amount) * to_decimal(percentage) / HUNDRED)


def apply_percentage_discount(amount, percentage):
    amount = to_decimal(amount)
    return round_money(amount - amount * to_decimal(percentage) / HUNDRED)
