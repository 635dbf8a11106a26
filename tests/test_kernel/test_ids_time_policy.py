"""
Tests for id generation, the test clock, workflow policy and errors
"""

from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from gigflow.kernel.errors import (
    EventNotFound,
    InvalidOrder,
    NotFound,
    PreconditionFailed,
    ResponseRequired,
    StorageFailure,
    VendorNotFound,
    WorkflowRejection,
)
from gigflow.kernel.ids import SequentialIdFactory, generate_id
from gigflow.kernel.policy import WorkflowPolicy
from gigflow.kernel.time import TestTimeProvider


class TestIds:
    def test_generated_ids_are_unique(self) -> None:
        ids = {generate_id() for _ in range(200)}

        assert len(ids) == 200

    def test_prefix(self) -> None:
        assert generate_id("vendor").startswith("vendor-")

    def test_uuid_shape(self) -> None:
        parts = generate_id().split("-")

        assert [len(p) for p in parts] == [8, 4, 4, 4, 12]
        assert parts[2].startswith("7")

    def test_sequential_factory(self) -> None:
        factory = SequentialIdFactory("evt")

        assert [factory.generate() for _ in range(3)] == ["evt-1", "evt-2", "evt-3"]

    def test_sequential_factory_across_threads(self) -> None:
        factory = SequentialIdFactory("evt")

        with ThreadPoolExecutor(max_workers=8) as pool:
            ids = list(pool.map(lambda _: factory.generate(), range(400)))

        assert sorted(ids, key=lambda i: int(i.split("-")[1])) == [
            f"evt-{n}" for n in range(1, 401)
        ]


class TestTestTimeProvider:
    def test_frozen_until_advanced(self) -> None:
        start = datetime(2025, 6, 14, 9, 0, tzinfo=timezone.utc)
        clock = TestTimeProvider(start)

        assert clock.now() == start
        clock.advance_hours(2)
        clock.advance_minutes(30)
        assert clock.now() == start + timedelta(hours=2, minutes=30)

    def test_set_time(self) -> None:
        clock = TestTimeProvider()
        target = datetime(2025, 12, 31, 23, 59, tzinfo=timezone.utc)

        clock.set_time(target)

        assert clock.now() == target


class TestWorkflowPolicy:
    @pytest.mark.parametrize("count,suspend", [(0, False), (3, False), (4, True), (10, True)])
    def test_default_threshold_is_strict(self, count: int, suspend: bool) -> None:
        assert WorkflowPolicy().should_suspend(count) is suspend

    def test_custom_threshold(self) -> None:
        policy = WorkflowPolicy(one_star_suspension_threshold=0)

        assert policy.should_suspend(1) is True

    def test_policy_is_frozen(self) -> None:
        policy = WorkflowPolicy()

        with pytest.raises(ValidationError):
            policy.one_star_suspension_threshold = 10

    def test_negative_threshold_rejected(self) -> None:
        with pytest.raises(ValidationError):
            WorkflowPolicy(one_star_suspension_threshold=-1)

    def test_unknown_stipend_method_rejected(self) -> None:
        with pytest.raises(ValidationError):
            WorkflowPolicy(default_stipend_release_method="cash")


class TestErrors:
    def test_rejections_share_a_base(self) -> None:
        for error in (
            EventNotFound("evt-1"),
            VendorNotFound("evt-1", "vendor-1"),
            PreconditionFailed("ConnectHost", "host already connected"),
            InvalidOrder("vendor-1", "halfway", "arrival"),
            ResponseRequired("vendor-1"),
        ):
            assert isinstance(error, WorkflowRejection)

    def test_storage_failure_is_not_a_rejection(self) -> None:
        assert not isinstance(StorageFailure("save_event", "disk full"), WorkflowRejection)

    def test_messages(self) -> None:
        assert str(EventNotFound("evt-1")) == "Event evt-1 not found"
        assert isinstance(VendorNotFound("evt-1", "v-1"), NotFound)
        assert str(InvalidOrder("v-1", "end", "halfway")) == "Vendor v-1: end requires halfway first"
        assert str(PreconditionFailed("SendProposal", "proposal already sent")) == (
            "SendProposal rejected: proposal already sent"
        )
