from dataclasses import dataclass
from decimal import Decimal, ROUND_FLOOR, getcontext

getcontext().prec = 28

DEFAULT_TIP_PERCENT = Decimal("20")


def _to_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


@dataclass(frozen=True)
class CalculationResult:
    subtotal: Decimal
    simplified_subtotal: Decimal
    tip_percent: Decimal
    base_tip: Decimal
    tentative_total: Decimal
    palindrome_total: Decimal
    palindrome_tip: Decimal
    original_total: Decimal


def simplify_subtotal(subtotal) -> Decimal:
    """Drop the cents from `subtotal`, rounding toward negative infinity."""
    return _to_decimal(subtotal).to_integral_value(rounding=ROUND_FLOOR)


def calculate_base_tip(simplified, tip_percent=DEFAULT_TIP_PERCENT) -> Decimal:
    """Return `tip_percent` percent of the whole-dollar subtotal.

    Not rounded; the palindrome step only looks at whole dollars anyway.
    """
    s = _to_decimal(simplified)
    p = _to_decimal(tip_percent)
    if s < 0 or p < 0:
        raise ValueError("subtotal and tip percent must be non-negative")
    return s * p / Decimal("100")


def generate_palindrome_total(tentative_total) -> Decimal:
    """Return a total whose cents mirror the leading digits of its dollars.

    The dollars are kept as-is; the dollar digits are reversed and the first
    two become the cents. A single digit is padded with a trailing zero,
    so 7 -> 7.70, 48 -> 48.84, 123 -> 123.32.
    """
    t = _to_decimal(tentative_total)
    if t < 0:
        raise ValueError("tentative total must be non-negative")
    dollars = int(t.to_integral_value(rounding=ROUND_FLOOR))
    reversed_digits = str(dollars)[::-1]
    if len(reversed_digits) == 1:
        cents = reversed_digits + "0"
    else:
        cents = reversed_digits[:2]
    return Decimal(f"{dollars}.{cents}")


def calculate_all(subtotal, original_total, tip_percent) -> CalculationResult:
    """Run the full pipeline from subtotal to palindrome tip."""
    s = _to_decimal(subtotal)
    o = _to_decimal(original_total)
    p = _to_decimal(tip_percent)

    simplified = simplify_subtotal(s)
    base_tip = calculate_base_tip(simplified, p)
    tentative_total = o + base_tip
    palindrome_total = generate_palindrome_total(tentative_total)

    return CalculationResult(
        subtotal=s,
        simplified_subtotal=simplified,
        tip_percent=p,
        base_tip=base_tip,
        tentative_total=tentative_total,
        palindrome_total=palindrome_total,
        # may be negative when the palindrome lands below the tentative total
        palindrome_tip=palindrome_total - o,
        original_total=o,
    )
