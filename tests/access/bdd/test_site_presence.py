"""BDD tests for registering crossings and the presence list."""

from pytest_bdd import parsers, scenarios, then, when

COMPANY = "company-001"

scenarios("features/site_presence.feature")


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when(parsers.parse('"{name}" enters'))
def _(projector, crossings, name):
    crossings.append(projector.register_event(COMPANY, name.lower(), name, "entry"))


@when(parsers.parse('"{name}" leaves'))
def _(projector, crossings, name):
    crossings.append(projector.register_event(COMPANY, name.lower(), name, "exit"))


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then("the crossing returned the closed record")
def _(crossings):
    assert crossings[-1] is not None


@then("the crossing returned nothing")
def _(crossings):
    assert crossings[-1] is None


@then(parsers.parse('the access history lists "{actions}"'))
def _(projector, actions):
    assert [event.action for event in projector.history(COMPANY)] == actions.split(", ")
