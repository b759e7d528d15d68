"""
Test suite for the error handling decorator and exception classes.
"""

import pytest

from gzplan.utils.error_utils import GZPlanError, InvalidInputError, error_handler


@error_handler
def _divide(a, b):
    return a / b


@error_handler
def _reraise():
    raise InvalidInputError("capital.equipment", "abc", "not a number")


def test_error_handler_passes_results_through():
    assert _divide(6, 3) == 2


def test_error_handler_wraps_unexpected_errors():
    with pytest.raises(GZPlanError) as exc_info:
        _divide(1, 0)

    err = exc_info.value
    assert "_divide" in err.message
    assert err.details["error_type"] == "ZeroDivisionError"
    assert isinstance(err.__cause__, ZeroDivisionError)


def test_error_handler_keeps_project_errors():
    with pytest.raises(InvalidInputError) as exc_info:
        _reraise()

    assert exc_info.value.field == "capital.equipment"


def test_invalid_input_error_to_dict():
    err = InvalidInputError("revenue_streams[0].unit_price", "12x", "not a number")

    assert err.to_dict() == {
        "field": "revenue_streams[0].unit_price",
        "value": "'12x'",
        "reason": "not a number",
    }
    assert err.message == "Invalid input for 'revenue_streams[0].unit_price': not a number"
    assert isinstance(err, GZPlanError)
