import pytest
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def access_bed():
    from access.domain import access

    bed = DomainFixture(access)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(access_bed):
    with access_bed.domain_context():
        yield

        from protean import current_domain

        # Clear the authorized person directory between tests
        for _, provider in current_domain.providers.items():
            provider._data_reset()


@pytest.fixture()
def store():
    from shared.event_store import InMemoryEventStore

    return InMemoryEventStore("company_id")


@pytest.fixture()
def projector(store):
    from access.presence.projector import PresenceProjector

    return PresenceProjector(store)
