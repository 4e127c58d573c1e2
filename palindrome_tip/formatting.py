import logging
from decimal import Decimal, ROUND_HALF_UP, localcontext
from typing import Optional, Tuple

from palindrome_tip.core import CalculationResult, _to_decimal, calculate_all
from palindrome_tip.parsing import parse_money_input
from palindrome_tip.validation import ValidationResult, validate_inputs

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


def fmt_money(value) -> str:
    """Render `value` with exactly two decimals, rounding half up."""
    d = _to_decimal(value)
    with localcontext() as ctx:
        # quantize needs room for every integer digit plus the cents
        ctx.prec = max(ctx.prec, d.adjusted() + 3)
        return str(d.quantize(CENT, rounding=ROUND_HALF_UP))


def format_results(palindrome_tip, palindrome_total, original_total, subtotal) -> str:
    """Return the two-line result shown to the user.

    Tip = 7.72 (21.91%)
    + 41.12 = 48.84
    """
    s = _to_decimal(subtotal)
    if s == 0:
        raise ValueError("subtotal must be non-zero to express the tip as a percent")
    tip = _to_decimal(palindrome_tip)
    tip_percent_display = tip / s * Decimal("100")
    return (
        f"Tip = {fmt_money(tip)} ({fmt_money(tip_percent_display)}%)\n"
        f"+ {fmt_money(original_total)} = {fmt_money(palindrome_total)}"
    )


def format_calculation(result: CalculationResult) -> str:
    return format_results(result.palindrome_tip, result.palindrome_total, result.original_total, result.subtotal)


def calculate_inputs(
    subtotal_raw: Optional[str], total_raw: Optional[str], tip_raw: Optional[str]
) -> Tuple[ValidationResult, Optional[CalculationResult]]:
    """Validate raw values and run the pipeline when they pass.

    Returns the validation result and the calculation (None on failure).
    """
    validation = validate_inputs(subtotal_raw, total_raw, tip_raw)
    if not validation.ok:
        logger.info(f"Rejected input: {validation.message}")
        return validation, None

    result = calculate_all(
        parse_money_input(subtotal_raw),
        parse_money_input(total_raw),
        parse_money_input(tip_raw),
    )
    return validation, result


def process_inputs(
    subtotal_raw: Optional[str], total_raw: Optional[str], tip_raw: Optional[str]
) -> Tuple[ValidationResult, Optional[str]]:
    """Validate raw form values and, when they pass, calculate and format.

    Returns the validation result and the formatted text (None on failure).
    """
    validation, result = calculate_inputs(subtotal_raw, total_raw, tip_raw)
    if result is None:
        return validation, None
    return validation, format_calculation(result)
