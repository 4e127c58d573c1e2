from decimal import Decimal
import pytest

from palindrome_tip.core import CalculationResult
from palindrome_tip.formatting import calculate_inputs, fmt_money, format_calculation, format_results, process_inputs
from palindrome_tip.validation import TOTAL_FIELD


def test_format_results_two_lines():
    text = format_results(Decimal("7.72"), Decimal("48.84"), Decimal("41.12"), Decimal("35.23"))
    assert text == "Tip = 7.72 (21.91%)\n+ 41.12 = 48.84"


def test_format_results_pads_to_two_decimals():
    text = format_results(10.56, 65.56, 55, 50)
    assert text.splitlines() == ["Tip = 10.56 (21.12%)", "+ 55.00 = 65.56"]


def test_format_results_negative_tip():
    text = format_results(Decimal("-0.08"), Decimal("19.91"), Decimal("19.99"), Decimal("10"))
    assert text == "Tip = -0.08 (-0.80%)\n+ 19.99 = 19.91"


def test_format_results_zero_subtotal_raises():
    with pytest.raises(ValueError):
        format_results(Decimal("1"), Decimal("1.10"), Decimal("0.10"), Decimal("0"))


@pytest.mark.parametrize(
    "value,expected",
    [
        (Decimal("7"), "7.00"),
        (Decimal("0.125"), "0.13"),
        (2.675, "2.68"),
        ("21.9131", "21.91"),
    ],
)
def test_fmt_money(value, expected):
    assert fmt_money(value) == expected


def test_process_inputs_success():
    validation, text = process_inputs("35.23", "41.12", "20")
    assert validation.ok
    assert text == "Tip = 7.72 (21.91%)\n+ 41.12 = 48.84"


def test_process_inputs_rejects_before_calculating():
    validation, text = process_inputs("35.23", "30", "20")
    assert not validation.ok
    assert validation.message == "Total should be greater than subtotal"
    assert validation.focus_target == TOTAL_FIELD
    assert text is None


def test_fmt_money_large_amounts():
    assert fmt_money(Decimal("1e30")) == "1" + "0" * 30 + ".00"
    assert fmt_money(Decimal("123456789012345678901234567890.125")) == "123456789012345678901234567890.13"


@pytest.mark.parametrize("amount", ["1e25", "1e26", "1e30", "1e308"])
def test_process_inputs_large_amounts(amount):
    validation, text = process_inputs(amount, amount, "20")

    assert validation.ok
    # the palindrome adds exactly the base tip: 20% of the whole-dollar subtotal
    assert text.startswith("Tip = ")
    assert "(20.00%)" in text


def test_calculate_inputs_returns_calculation():
    validation, result = calculate_inputs("35.23", "41.12", "20")

    assert validation.ok
    assert isinstance(result, CalculationResult)
    assert result.palindrome_total == Decimal("48.84")
    assert format_calculation(result) == "Tip = 7.72 (21.91%)\n+ 41.12 = 48.84"


def test_calculate_inputs_rejects():
    validation, result = calculate_inputs("", "41.12", "20")

    assert validation.message == "Please enter subtotal"
    assert result is None
