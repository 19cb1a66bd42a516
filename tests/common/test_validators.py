from decimal import Decimal

import pytest

from src.hr_portal.hr_portal.common.validators import (
    FieldErrors,
    clean_bool,
    clean_decimal,
    clean_id_list,
    clean_int,
    clean_money,
)
from src.hr_portal.hr_portal.core.exceptions import ValidationError


def test_field_errors_keep_first_message():
    errors = FieldErrors()
    errors.add("month", "first")
    errors.add("month", "second")

    assert "month" in errors
    assert errors.as_dict() == {"month": "first"}
    with pytest.raises(ValidationError) as exc:
        errors.raise_if_any("Bad input")
    assert exc.value.message == "Bad input"


def test_clean_int_accepts_integral_values_only():
    errors = FieldErrors()
    assert clean_int(" 7 ", "a", errors) == 7
    assert clean_int(7.0, "b", errors) == 7
    assert clean_int("7.5", "c", errors) is None
    assert clean_int(False, "d", errors) is None
    assert set(errors.as_dict()) == {"c", "d"}


def test_clean_decimal_sign_rules():
    errors = FieldErrors()
    assert clean_decimal("0", "zero", errors) == Decimal("0")
    assert clean_decimal("0", "strict", errors, positive=True) is None
    assert clean_decimal(None, "opt", errors, default=Decimal("0")) == Decimal("0")
    assert clean_decimal("-0.01", "neg", errors) is None
    assert errors.as_dict() == {"strict": "strict must be positive", "neg": "neg cannot be negative"}


def test_clean_bool_and_id_list():
    errors = FieldErrors()
    assert clean_bool("on", "flag", errors, default=False) is True
    assert clean_bool(None, "flag", errors, default=True) is True
    assert clean_id_list([" a ", "b", "a"], "ids", errors) == ["a", "b"]
    assert clean_id_list("a,b", "bad", errors) is None
    assert set(errors.as_dict()) == {"bad"}



def test_clean_money_limits_scale_and_range():
    errors = FieldErrors()
    assert clean_money("12.3", "a", errors) == Decimal("12.30")
    assert clean_money("12.345", "b", errors, label="Bonus") is None
    assert clean_money("10000000000", "c", errors) is None
    assert clean_money(None, "d", errors, default=Decimal("0")) == Decimal("0")
    assert errors.as_dict() == {
        "b": "Bonus cannot have more than 2 decimal places",
        "c": "c cannot exceed 9999999999.99",
    }
