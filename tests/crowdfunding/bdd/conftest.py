"""Shared BDD fixtures and step definitions for the Crowdfunding domain."""

import pytest
from crowdfunding.campaign.campaign import Campaign
from crowdfunding.investment.investment import Investment
from protean.exceptions import ValidationError
from protean.utils.globals import current_domain
from pytest_bdd import parsers, then
from shared.access import AccessDenied


@pytest.fixture()
def error():
    """Container for the exception a When step captured."""
    return {"exc": None}


@pytest.fixture()
def funding():
    """IDs of the campaign and investment under test."""
    return {"campaign_id": None, "investment_id": None}


def _campaign(funding):
    return current_domain.repository_for(Campaign).get(funding["campaign_id"])


@then("the action fails with a validation error")
def action_fails_with_validation_error(error):
    assert isinstance(error["exc"], ValidationError), f"Expected ValidationError, got {error['exc']!r}"


@then("the action is denied")
def action_is_denied(error):
    assert isinstance(error["exc"], AccessDenied), f"Expected AccessDenied, got {error['exc']!r}"


@then(parsers.cfparse('the investment status is "{status}"'))
def investment_status_is(funding, status):
    investment = current_domain.repository_for(Investment).get(funding["investment_id"])
    assert investment.status == status


@then(parsers.cfparse("the campaign has raised {amount:f}"))
def campaign_has_raised(funding, amount):
    assert _campaign(funding).current_amount == amount


@then(parsers.cfparse("the campaign has {count:d} investors"))
def campaign_has_investors(funding, count):
    assert _campaign(funding).investors_count == count


@then(parsers.cfparse("the campaign progress is {percentage:f} percent"))
def campaign_progress_is(funding, percentage):
    assert _campaign(funding).progress_percentage == percentage
