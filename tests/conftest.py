"""
Pytest configuration and shared fixtures

Fun fact: The name "conftest" comes from pytest's configuration testing
framework. Files named conftest.py are automatically discovered and their
fixtures are available to all tests in the same directory and subdirectories!
"""

import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator

import pytest

from gigflow import GigFlow
from gigflow.kernel.ids import SequentialIdFactory
from gigflow.kernel.policy import WorkflowPolicy
from gigflow.kernel.time import TestTimeProvider
from gigflow.offline.queue import Connectivity
from gigflow.workflow.models import Event

from tests.helpers import RecordingDispatcher, create_business_event, staff_event


@pytest.fixture
def temp_db() -> Iterator[Path]:
    """Provide a temporary database file that's cleaned up after test"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir) / "gigflow.db"


@pytest.fixture
def test_time() -> TestTimeProvider:
    """
    Provide a controllable time provider for deterministic tests

    Default time: 2025-06-14 09:00:00 UTC - a Saturday morning, when most
    markets open their doors.
    """
    return TestTimeProvider(datetime(2025, 6, 14, 9, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def policy() -> WorkflowPolicy:
    return WorkflowPolicy()


@pytest.fixture
def dispatcher() -> RecordingDispatcher:
    """Captures every notification instead of sending it"""
    return RecordingDispatcher()


@pytest.fixture
def connectivity() -> Connectivity:
    return Connectivity(online=True)


@pytest.fixture
def gf(
    temp_db: Path,
    policy: WorkflowPolicy,
    test_time: TestTimeProvider,
    dispatcher: RecordingDispatcher,
    connectivity: Connectivity,
) -> GigFlow:
    """Fully wired engine on a fresh database with deterministic ids"""
    return GigFlow(
        temp_db,
        policy=policy,
        time_provider=test_time,
        dispatcher=dispatcher,
        connectivity=connectivity,
        id_factory=SequentialIdFactory("id"),
    )


@pytest.fixture
def hired_event(gf: GigFlow) -> Event:
    """
    Business event with a connected host and two hired contractors

    Contractors: con-1 (Casey), con-2 (Robin). Host: host-1. Business: biz-1.
    """
    event = create_business_event(gf)
    return staff_event(gf, event.event_id, {"con-1": "Casey", "con-2": "Robin"})
