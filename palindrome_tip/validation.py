from dataclasses import dataclass
from typing import Optional

from palindrome_tip.parsing import parse_money_input

# Form field ids the UI focuses when a rule fails
SUBTOTAL_FIELD = "subtotal-input"
TOTAL_FIELD = "ototal-input"
TIP_FIELD = "tip-input"


@dataclass(frozen=True)
class ValidationResult:
    ok: bool
    message: str = ""
    focus_target: str = ""


VALID = ValidationResult(ok=True)


def _fail(message: str, focus_target: str) -> ValidationResult:
    return ValidationResult(ok=False, message=message, focus_target=focus_target)


def validate_inputs(subtotal_raw: Optional[str], total_raw: Optional[str], tip_raw: Optional[str]) -> ValidationResult:
    """Check the three raw form values in order and report the first failure.

    Order matters: missing values are reported before negative ones, and a
    zero subtotal is reported before a total that is below the subtotal.
    """
    subtotal = parse_money_input(subtotal_raw)
    total = parse_money_input(total_raw)
    tip = parse_money_input(tip_raw)

    if subtotal is None:
        return _fail("Please enter subtotal", SUBTOTAL_FIELD)
    if total is None:
        return _fail("Please enter total", TOTAL_FIELD)
    if tip is None:
        return _fail("Please enter tip %", TIP_FIELD)

    if subtotal < 0:
        return _fail("Subtotal cannot be negative", SUBTOTAL_FIELD)
    if total < 0:
        return _fail("Total cannot be negative", TOTAL_FIELD)
    if tip < 0:
        return _fail("Tip % cannot be negative", TIP_FIELD)

    if subtotal == 0:
        return _fail("Subtotal cannot be zero", SUBTOTAL_FIELD)
    if total < subtotal:
        return _fail("Total should be greater than subtotal", TOTAL_FIELD)

    return VALID
