"""Shared BDD fixtures for the Logistics domain."""

import pytest
from protean.exceptions import ValidationError
from pytest_bdd import then


@pytest.fixture()
def error():
    """Container for the exception a When step captured."""
    return {"exc": None}


@pytest.fixture()
def delivery():
    """Couriers by name plus the order and tracking number under test."""
    return {"couriers": {}, "order_id": None, "tracking_number": None}


@then("the action fails with a validation error")
def action_fails_with_validation_error(error):
    assert isinstance(error["exc"], ValidationError), f"Expected ValidationError, got {error['exc']!r}"
