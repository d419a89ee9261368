"""Shared BDD fixtures and step definitions for the Accounts domain."""

import pytest
from protean.exceptions import ValidationError
from pytest_bdd import then


@pytest.fixture()
def error():
    """Container for the exception a When step captured."""
    return {"exc": None}


@pytest.fixture()
def account():
    """ID of the user under test."""
    return {"user_id": None}


@then("the action fails with a validation error")
def action_fails_with_validation_error(error):
    assert isinstance(error["exc"], ValidationError), f"Expected ValidationError, got {error['exc']!r}"
