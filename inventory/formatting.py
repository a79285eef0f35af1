# inventory/formatting.py
from decimal import Decimal, ROUND_HALF_UP

from inventory.config import settings


def _group_indian(digits: str) -> str:
    # last three digits, then groups of two: 12345678 -> 1,23,45,678
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups + [tail])


def format_currency(amount: float) -> str:
    """Format ``amount`` as en-IN rupees with 0-2 fraction digits, e.g. ``₹1,23,456.5``.

    Halves round away from zero on the decimal value, so ``0.125`` shows as ``₹0.13``.
    """
    places = settings.CURRENCY_MAX_FRACTION_DIGITS
    quantum = Decimal(1).scaleb(-places)
    # str() keeps the shortest repr, so 0.125 is not seen as 0.12499...
    value = Decimal(str(amount)).copy_abs().quantize(quantum, rounding=ROUND_HALF_UP)
    whole, _, frac = f"{value:f}".partition(".")
    frac = frac.rstrip("0")
    out = settings.CURRENCY_SYMBOL + _group_indian(whole)
    if frac:
        out += "." + frac
    if amount < 0 and out != settings.CURRENCY_SYMBOL + "0":
        out = "-" + out
    return out
