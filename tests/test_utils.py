from __future__ import annotations

import pytest

from brickbook.utils.calculator import Calculator, CalculatorError, evaluate, format_result
from brickbook.utils.i18n import TRANSLATIONS, Translator
from brickbook.utils.text import digits_only, format_date, format_number, format_rupees, matches_query
from brickbook.utils.validators import (
    ValidationError,
    parse_amount,
    parse_iso_date,
    parse_whole_amount,
    require_non_negative,
    require_positive,
    require_text,
)


def test_require_text():
    assert require_text("  Ramu ", "name") == "Ramu"
    with pytest.raises(ValidationError):
        require_text("  ", "name")
    with pytest.raises(ValidationError):
        require_text(None, "name")


def test_number_checks():
    require_positive(1, "amount")
    require_non_negative(0, "amount")
    with pytest.raises(ValidationError):
        require_positive(0, "amount")
    with pytest.raises(ValidationError):
        require_non_negative(-1, "amount")


def test_parse_amount():
    assert parse_amount("250", "amount") == 250.0
    assert parse_amount(12, "amount") == 12.0
    with pytest.raises(ValidationError):
        parse_amount("", "amount")
    with pytest.raises(ValidationError):
        parse_amount("12a", "amount")


def test_parse_iso_date():
    assert parse_iso_date("2024-02-29").day == 29
    for bad in ("2024-2-1", "01/02/2024", "2023-02-29"):
        with pytest.raises(ValidationError):
            parse_iso_date(bad)


def test_format_date():
    assert format_date("2024-03-05") == "5/3/24"
    assert format_date("") == ""


def test_format_numbers():
    assert format_number(1234) == "1,234"
    assert format_number(1234.0) == "1,234"
    assert format_number(1234.5) == "1,234.5"
    assert format_rupees(1500) == "₹1,500"
    assert format_rupees(-1000) == "-₹1,000"
    assert format_rupees(None) == "₹0"


def test_search_matching():
    assert matches_query("", "Ramu", "98480")
    assert matches_query("RAM", "Ramu", "98480")
    assert matches_query("484", "Ramu", "98480")
    assert not matches_query("sita", "Ramu", "98480")
    assert digits_only("+91 98480-12345") == "919848012345"


def test_translator():
    tr = Translator()
    assert tr.language == "te"
    assert tr.t("nav.calculator") == "క్యాల్క్యులేటర్"
    assert tr.toggle() == "en"
    assert tr.t("nav.calculator") == "Calculator"
    assert tr.t("missing.key") == "missing.key"
    with pytest.raises(ValueError):
        tr.set_language("fr")


def test_every_key_has_both_languages():
    for key, texts in TRANSLATIONS.items():
        assert set(texts) == {"en", "te"}, key


@pytest.mark.parametrize(
    "expression,expected",
    [
        ("2+3×4", 14),
        ("10÷4", 2.5),
        ("50%", 0.5),
        ("200×10%", 20),
        ("(1+2)*3", 9),
        ("-5+2", -3),
    ],
)
def test_evaluate(expression, expected):
    assert evaluate(expression) == pytest.approx(expected)


@pytest.mark.parametrize("expression", ["", "1÷0", "2+", "__import__('os')", "2**3"])
def test_evaluate_rejects(expression):
    with pytest.raises(CalculatorError):
        evaluate(expression)


def test_format_result():
    assert format_result(4.0) == "4"
    assert format_result(2.5) == "2.5"


def test_keypad():
    calc = Calculator()
    assert calc.display == "0"
    for key in "12":
        calc.press_digit(key)
    calc.press_operator("+")
    calc.press_operator("×")
    calc.press_digit("3")
    assert calc.display == "12×3"
    assert calc.calculate() == "36"
    calc.press_digit("7")
    assert calc.display == "7"


def test_keypad_percent_then_digit():
    calc = Calculator()
    for key in "50":
        calc.press_digit(key)
    calc.press_operator("%")
    calc.press_operator("+")
    assert calc.display == "50%+"
    calc.backspace()
    calc.press_digit("4")
    assert calc.display == "50%×4"
    assert calc.calculate() == "2"


def test_keypad_error_and_clear():
    calc = Calculator()
    calc.press_digit("1")
    calc.press_operator("÷")
    calc.press_digit("0")
    assert calc.calculate() == "Error"
    calc.clear()
    assert calc.display == "0" and calc.result == ""


@pytest.mark.parametrize("text", ["inf", "-inf", "nan", "Infinity", "1e400"])
def test_parse_amount_rejects_non_finite(text):
    with pytest.raises(ValidationError):
        parse_amount(text, "amount")


def test_parse_whole_amount():
    assert parse_whole_amount("12", "initial debt") == 12
    assert parse_whole_amount("-300", "initial debt") == -300
    assert isinstance(parse_whole_amount("12.0", "initial debt"), int)
    for bad in ("12.7", "nan", "1e400", "abc"):
        with pytest.raises(ValidationError):
            parse_whole_amount(bad, "initial debt")


def test_number_checks_reject_nan():
    with pytest.raises(ValidationError):
        require_positive(float("nan"), "amount")
    with pytest.raises(ValidationError):
        require_non_negative(float("nan"), "amount")
