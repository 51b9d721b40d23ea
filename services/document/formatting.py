"""Locale-aware money and quantity formatting.

Based on Babel number formatting:
https://babel.pocoo.org/en/latest/numbers.html
"""

from decimal import Decimal, getcontext, localcontext

from babel import Locale
from babel.numbers import format_currency, format_decimal

# Headroom for the fraction digits Babel quantizes to.
_FRACTION_HEADROOM = 8


def load_locale(identifier: str) -> Locale:
    """Parse a locale identifier such as ``en_GB`` or ``en-GB``.

    Raises:
        babel.UnknownLocaleError: If the locale is not known to Babel
        ValueError: If the identifier is malformed
    """
    return Locale.parse(identifier, sep="-" if "-" in identifier else "_")


def _precision_for(value: Decimal) -> int:
    """Context precision large enough to quantize ``value`` without overflow."""
    return max(getcontext().prec, value.adjusted() + 1 + _FRACTION_HEADROOM)


def format_money(amount: Decimal | None, currency: str, locale: Locale) -> str:
    """Format an amount in the given currency; ``None`` formats as zero.

    Example:
        >>> format_money(Decimal("-50"), "GBP", load_locale("en_GB"))
        '-£50.00'
    """
    value = amount if amount is not None else Decimal(0)
    with localcontext() as ctx:
        ctx.prec = _precision_for(value)
        return format_currency(value, currency, locale=locale)


def format_quantity(qty: Decimal, locale: Locale) -> str:
    with localcontext() as ctx:
        ctx.prec = _precision_for(qty)
        return format_decimal(qty, locale=locale)
