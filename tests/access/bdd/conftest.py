"""Shared BDD fixtures and step definitions for the Access domain."""

import pytest
from pytest_bdd import given, parsers, then

COMPANY = "company-001"


@pytest.fixture()
def crossings():
    """Results returned by each registered crossing, in order."""
    return []


@given(parsers.parse('"{name}" entered the facility'))
def _(projector, name):
    projector.register_event(COMPANY, name.lower(), name, "entry")


@then(parsers.parse('"{name}" is on site'))
def _(projector, name):
    assert projector.is_present(COMPANY, name.lower())


@then(parsers.parse('"{name}" is not on site'))
def _(projector, name):
    assert not projector.is_present(COMPANY, name.lower())


@then(parsers.parse("{count:d} people are on site"))
def _(projector, count):
    assert len(projector.currently_present(COMPANY)) == count
