from decimal import Decimal
import pytest

from palindrome_tip.core import (
    CalculationResult,
    calculate_all,
    calculate_base_tip,
    generate_palindrome_total,
    simplify_subtotal,
)


@pytest.mark.parametrize(
    "subtotal,expected",
    [
        (Decimal("35.23"), Decimal("35")),
        (Decimal("35.00"), Decimal("35")),
        (Decimal("35.99"), Decimal("35")),
        (Decimal("0.99"), Decimal("0")),
        (Decimal("100.50"), Decimal("100")),
    ],
)
def test_simplify_subtotal(subtotal, expected):
    assert simplify_subtotal(subtotal) == expected


@pytest.mark.parametrize(
    "simplified,percent,expected",
    [
        (Decimal("35"), Decimal("20"), Decimal("7.00")),
        (Decimal("50"), Decimal("20"), Decimal("10.00")),
        (Decimal("17"), Decimal("20"), Decimal("3.40")),
        (Decimal("0"), Decimal("20"), Decimal("0.00")),
        (Decimal("1"), Decimal("20"), Decimal("0.20")),
        (Decimal("40"), Decimal("15"), Decimal("6.00")),
    ],
)
def test_calculate_base_tip(simplified, percent, expected):
    assert calculate_base_tip(simplified, percent) == expected


def test_calculate_base_tip_defaults_to_twenty_percent():
    assert calculate_base_tip(35) == Decimal("7")
    assert calculate_base_tip(17) == Decimal("3.4")


@pytest.mark.parametrize(
    "tentative,expected",
    [
        (Decimal("48.12"), Decimal("48.84")),
        (Decimal("7.00"), Decimal("7.70")),
        (Decimal("10.00"), Decimal("10.01")),
        (Decimal("99.00"), Decimal("99.99")),
        (Decimal("100.00"), Decimal("100.00")),
        (Decimal("123.45"), Decimal("123.32")),
        (Decimal("9.50"), Decimal("9.90")),
        # single zero digit pads to 0.00
        (Decimal("0.75"), Decimal("0.00")),
    ],
)
def test_generate_palindrome_total(tentative, expected):
    assert generate_palindrome_total(tentative) == expected


def test_palindrome_total_keeps_whole_dollars():
    for tentative in ("48.12", "48.99", "1234.56", "5"):
        result = generate_palindrome_total(tentative)
        assert int(result) == int(Decimal(tentative))


def test_negative_values_raise():
    with pytest.raises(ValueError):
        generate_palindrome_total(Decimal("-1.50"))
    with pytest.raises(ValueError):
        calculate_base_tip(Decimal("-1"), Decimal("20"))
    with pytest.raises(ValueError):
        calculate_base_tip(Decimal("10"), Decimal("-5"))


def test_calculate_all_end_to_end():
    result = calculate_all(Decimal("35.23"), Decimal("41.12"), Decimal("20"))

    assert isinstance(result, CalculationResult)
    assert result.simplified_subtotal == Decimal("35")
    assert result.base_tip == Decimal("7.00")
    assert result.tentative_total == Decimal("48.12")
    assert result.palindrome_total == Decimal("48.84")
    assert result.palindrome_tip == Decimal("7.72")
    assert result.original_total == Decimal("41.12")


def test_calculate_all_round_subtotal():
    result = calculate_all(Decimal("50.00"), Decimal("55.00"), Decimal("20"))

    assert result.base_tip == Decimal("10.00")
    assert result.palindrome_total == Decimal("65.56")
    assert result.palindrome_tip == Decimal("10.56")


def test_palindrome_tip_can_be_negative():
    # 19.99 -> 19.91 drops eight cents below what is already owed
    result = calculate_all(Decimal("10"), Decimal("19.99"), Decimal("0"))
    assert result.palindrome_total == Decimal("19.91")
    assert result.palindrome_tip == Decimal("-0.08")
    assert result.palindrome_tip == result.palindrome_total - result.original_total


def test_calculate_all_is_idempotent():
    first = calculate_all("35.23", "41.12", "20")
    second = calculate_all("35.23", "41.12", "20")
    assert first == second


def test_accepts_floats_and_strings():
    assert calculate_all(35.23, 41.12, 20).palindrome_total == Decimal("48.84")
    assert calculate_all("35.23", "41.12", "20").palindrome_tip == Decimal("7.72")
