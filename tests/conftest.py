import os
import threading
from pathlib import Path

import pytest
from shared.clock import MonotonicClock


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Select the Protean config overlay before any domain is initialized."""
    os.environ["PROTEAN_ENV"] = session.config.option.env


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = str(Path(item.fspath))

        if "/domain/" in test_path or "/shared/" in test_path or "/pricing/" in test_path:
            item.add_marker(pytest.mark.domain)
        elif "/application/" in test_path:
            item.add_marker(pytest.mark.application)
        elif "/integration/" in test_path:
            item.add_marker(pytest.mark.integration)
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)
        elif "/bdd/" in test_path:
            item.add_marker(pytest.mark.bdd)


class PausingClock(MonotonicClock):
    """Monotonic clock that can hold one caller right after handing it a timestamp."""

    def __init__(self):
        super().__init__()
        self.pause_next = False
        self.stamped = threading.Event()
        self.release = threading.Event()

    def now(self, scope):
        stamp = super().now(scope)
        if self.pause_next:
            self.pause_next = False
            self.stamped.set()
            self.release.wait(timeout=5)
        return stamp


@pytest.fixture()
def pausing_clock():
    clock = PausingClock()
    yield clock
    clock.release.set()
