"""Tests for the error taxonomy."""
import pytest

from keyenv.exceptions import (
    AuthenticationError,
    KeyEnvConnectionError,
    KeyEnvError,
    KeyEnvTimeoutError,
    NotFoundError,
    RateLimitError,
    ValidationError,
    error_for_status,
)


def test_formats_message_with_status():
    error = KeyEnvError("Something went wrong", status=500)
    assert str(error) == "KeyEnvError(500): Something went wrong"


def test_formats_message_without_status():
    error = KeyEnvError("Something went wrong")
    assert str(error) == "KeyEnvError: Something went wrong"


def test_stores_error_details():
    error = KeyEnvError("Bad request", status=400, code="invalid_input", details={"field": "name"})
    assert error.status == 400
    assert error.code == "invalid_input"
    assert error.details == {"field": "name"}
    assert error.message == "Bad request"


def test_details_default_to_empty_dict():
    assert KeyEnvError("oops").details == {}


@pytest.mark.parametrize(
    "error_class",
    [AuthenticationError, NotFoundError, ValidationError, RateLimitError, KeyEnvConnectionError, KeyEnvTimeoutError],
)
def test_all_errors_share_the_base(error_class):
    error = error_class("failed", status=418, code="teapot")
    assert isinstance(error, KeyEnvError)
    assert error.status == 418
    assert error.code == "teapot"
    assert str(error) == "KeyEnvError(418): failed"


def test_error_for_status():
    assert error_for_status(401) is AuthenticationError
    assert error_for_status(404) is NotFoundError
    assert error_for_status(422) is ValidationError
    assert error_for_status(429) is RateLimitError
    assert error_for_status(409) is KeyEnvError
    assert error_for_status(502) is KeyEnvError
