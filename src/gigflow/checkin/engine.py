"""
Vendor Check-In Engine - A vendor's day at the event, from arrival to review

Hosts (or contractors themselves) confirm arrival, the halfway point and
the end of the shift. The host then flags funds as released and leaves a
review. Each step is validated against the stage order on the merged
record and saved together with the rest of the event.

When the device is offline, update_vendor does not touch the event: the
update is queued and later replayed through apply_vendor_update. Online
updates wait behind anything still queued, so a stale patch never lands
on top of a newer one.
"""

from collections.abc import Callable
from datetime import datetime
from decimal import Decimal
from typing import Any

from gigflow.checkin.commands import ReviewSubmission, VendorPatch
from gigflow.checkin.events import (
    FundsReleased,
    StipendReleased,
    VendorAdded,
    VendorReviewSubmitted,
    VendorUpdated,
)
from gigflow.checkin.invariants import review_id_for, validate_stage_order
from gigflow.kernel.bus import EventBus
from gigflow.kernel.errors import (
    InvalidOrder,
    PreconditionFailed,
    ResponseRequired,
    VendorNotFound,
    WorkflowRejection,
)
from gigflow.kernel.events import DomainEvent
from gigflow.kernel.ids import IdFactory, default_id_factory
from gigflow.kernel.locks import EventLockRegistry
from gigflow.kernel.logging import LogOperation, get_logger
from gigflow.kernel.metrics import (
    funds_released_total,
    reviews_submitted_total,
    stipends_released_total,
    track_duration,
    vendor_updates_total,
)
from gigflow.kernel.time import TimeProvider
from gigflow.offline.models import QueuedAction, ReplayError
from gigflow.offline.queue import Connectivity, OfflineActionQueue
from gigflow.workflow.invariants import require_not_terminal, staffed
from gigflow.workflow.models import Event, VendorCheckIn, VendorReview
from gigflow.workflow.repository import EventRepository

logger = get_logger(__name__)

VendorMutation = Callable[[Event, VendorCheckIn, datetime], list[DomainEvent]]

# Confirmation flag → timestamp field stamped when the flag is first set
STAGE_TIMESTAMPS = {
    "arrival_confirmed": "arrival_time",
    "halfway_confirmed": "halfway_time",
    "end_confirmed": "end_time",
}


class VendorCheckInEngine:
    """
    Vendor check-in, funds release and review

    Shares the event locks with WorkflowStateMachine, so check-ins never
    interleave with a contractor re-selection on the same event.
    """

    def __init__(
        self,
        repository: EventRepository,
        bus: EventBus,
        locks: EventLockRegistry,
        time_provider: TimeProvider,
        queue: OfflineActionQueue,
        connectivity: Connectivity,
        id_factory: IdFactory = default_id_factory,
    ) -> None:
        self.repository = repository
        self.bus = bus
        self.locks = locks
        self.time_provider = time_provider
        self.queue = queue
        self.connectivity = connectivity
        self.id_factory = id_factory

    # ------------------------------------------------------------------
    # Check-in
    # ------------------------------------------------------------------

    def update_vendor(
        self,
        event_id: str,
        vendor_id: str,
        patch: VendorPatch | dict[str, Any],
        actor_id: str | None = None,
    ) -> VendorCheckIn | QueuedAction:
        """
        Apply a check-in update now, or queue it while offline

        Online, anything still queued (left by an earlier process or by a
        replay pass stopped on a storage failure) is replayed first. If the
        queue cannot be drained, the update joins the back of it.

        Returns:
            The updated vendor when applied, the queued action otherwise
        """
        if isinstance(patch, dict):
            patch = VendorPatch.model_validate(patch)

        if self.connectivity.is_online:
            if len(self.queue):
                self.drain_queue()
            if not len(self.queue):
                return self.apply_vendor_update(event_id, vendor_id, patch, actor_id)
            logger.warning(
                "Offline queue not drained, queueing update",
                event_id=event_id,
                vendor_id=vendor_id,
                queue_depth=len(self.queue),
            )

        action = QueuedAction(
            action_id=self.id_factory.generate(),
            queued_at=self.time_provider.now(),
            event_id=event_id,
            vendor_id=vendor_id,
            patch=patch.changes(),
            actor_id=actor_id,
        )
        self.queue.enqueue(action)
        vendor_updates_total.labels(outcome="queued").inc()
        return action

    @track_duration("apply_vendor_update")
    def apply_vendor_update(
        self,
        event_id: str,
        vendor_id: str,
        patch: VendorPatch,
        actor_id: str | None = None,
    ) -> VendorCheckIn:
        """
        Merge a patch into the vendor record

        Confirmation flags set without a time are stamped with now. The
        merged record must keep the stage order.

        Raises:
            EventNotFound: If the event doesn't exist
            VendorNotFound: If the vendor is not part of the event
            InvalidOrder: If the merged record skips a stage
        """
        changes = patch.changes()

        def merge(event: Event, vendor: VendorCheckIn, now: datetime) -> list[DomainEvent]:
            merged = vendor.model_validate({**vendor.model_dump(), **changes})
            for flag, stamp in STAGE_TIMESTAMPS.items():
                if getattr(merged, flag) and getattr(merged, stamp) is None:
                    setattr(merged, stamp, now)
            validate_stage_order(merged)

            for field in VendorCheckIn.model_fields:
                setattr(vendor, field, getattr(merged, field))

            return [
                self._fact(
                    VendorUpdated,
                    event,
                    now,
                    actor_id,
                    vendor_id=vendor.vendor_id,
                    changed_fields=sorted(changes),
                )
            ]

        try:
            vendor = self._mutate_vendor("update_vendor", event_id, vendor_id, actor_id, merge)
        except WorkflowRejection:
            vendor_updates_total.labels(outcome="rejected").inc()
            raise
        vendor_updates_total.labels(outcome="applied").inc()
        return vendor

    def replay_action(self, action: QueuedAction) -> VendorCheckIn:
        """Apply one queued action (the OfflineActionQueue callback)"""
        return self.apply_vendor_update(
            action.event_id,
            action.vendor_id,
            VendorPatch.model_validate(action.patch),
            action.actor_id,
        )

    def drain_queue(self) -> list[ReplayError]:
        """Replay the offline queue in order and log what was not applied"""
        errors = self.queue.replay(self.replay_action)
        for error in errors:
            logger.warning(
                "Queued action not applied",
                action_id=error.action_id,
                error_type=error.error_type,
                retained=error.retained,
            )
        return errors

    def add_vendor(
        self,
        event_id: str,
        vendor_name: str,
        contractor_id: str | None = None,
        actor_id: str | None = None,
    ) -> VendorCheckIn:
        """
        Add a vendor by hand (walk-ins, replacements)

        Raises:
            PreconditionFailed: If contractors have not been hired yet
        """
        with LogOperation(logger, "add_vendor", event_id=event_id, actor_id=actor_id):
            with self.locks.hold(event_id):
                event = self.repository.get(event_id)
                require_not_terminal(event, "AddVendor")
                if not staffed(event):
                    raise PreconditionFailed(
                        "AddVendor", "vendors can only be added once contractors are hired"
                    )

                now = self.time_provider.now()
                vendor = VendorCheckIn(
                    vendor_id=f"vendor-{self.id_factory.generate()}",
                    vendor_name=vendor_name,
                    contractor_id=contractor_id,
                )
                event.vendors.append(vendor)
                self.repository.save(event)
                self.bus.publish(
                    self._fact(
                        VendorAdded,
                        event,
                        now,
                        actor_id,
                        vendor_id=vendor.vendor_id,
                        vendor_name=vendor_name,
                        contractor_id=contractor_id,
                    )
                )
        return vendor.model_copy(deep=True)

    # ------------------------------------------------------------------
    # Payout and review
    # ------------------------------------------------------------------

    def release_stipend(
        self, event_id: str, vendor_id: str, actor_id: str | None = None
    ) -> VendorCheckIn:
        """
        Release the halfway stipend (food plus travel) to a vendor

        Confirms the halfway point too when the host has not done so yet.
        The event's stipend_release_method decides who is told to move the
        money; the record only notes that the release happened.

        Raises:
            PreconditionFailed: If the event has no stipend or it was
                already released to this vendor
            InvalidOrder: If arrival was not confirmed
        """

        def release(event: Event, vendor: VendorCheckIn, now: datetime) -> list[DomainEvent]:
            amount = (event.food_stipend or Decimal("0")) + (event.travel_stipend or Decimal("0"))
            if not amount:
                raise PreconditionFailed("ReleaseStipend", "event has no stipend")
            if vendor.stipend_released:
                raise PreconditionFailed("ReleaseStipend", "stipend already released")

            if not vendor.halfway_confirmed:
                vendor.halfway_confirmed = True
                vendor.halfway_time = vendor.halfway_time or now
            vendor.stipend_released = True
            vendor.stipend_released_at = now
            validate_stage_order(vendor)

            return [
                self._fact(
                    StipendReleased,
                    event,
                    now,
                    actor_id,
                    vendor_id=vendor.vendor_id,
                    vendor_name=vendor.vendor_name,
                    contractor_id=vendor.contractor_id,
                    title=event.title,
                    business_id=event.business_recipient(),
                    method=event.stipend_release_method,
                    amount=amount,
                )
            ]

        vendor = self._mutate_vendor("release_stipend", event_id, vendor_id, actor_id, release)
        stipends_released_total.inc()
        return vendor

    def release_funds(
        self, event_id: str, vendor_id: str, actor_id: str | None = None
    ) -> VendorCheckIn:
        """
        Flag a vendor as eligible for payout

        Raises:
            InvalidOrder: If the end of the shift was not confirmed
            PreconditionFailed: If funds were already released
        """

        def release(event: Event, vendor: VendorCheckIn, now: datetime) -> list[DomainEvent]:
            if not vendor.end_confirmed:
                raise InvalidOrder(vendor.vendor_id, "funds_release", "end")
            if vendor.funds_released:
                raise PreconditionFailed("ReleaseFunds", "funds already released")

            vendor.funds_released = True
            vendor.funds_released_at = now
            return [
                self._fact(
                    FundsReleased,
                    event,
                    now,
                    actor_id,
                    vendor_id=vendor.vendor_id,
                    contractor_id=vendor.contractor_id,
                )
            ]

        vendor = self._mutate_vendor("release_funds", event_id, vendor_id, actor_id, release)
        funds_released_total.inc()
        return vendor

    def submit_review(
        self,
        event_id: str,
        vendor_id: str,
        review: ReviewSubmission,
        actor_id: str | None = None,
    ) -> VendorReview:
        """
        Record the host's review of a vendor

        A one-star review must explain itself. Reviews are final.

        Raises:
            ResponseRequired: If rating is 1 and host_response is blank
            InvalidOrder: If funds were not released yet
            PreconditionFailed: If the vendor was already reviewed
        """
        if review.rating == 1 and not (review.host_response or "").strip():
            raise ResponseRequired(vendor_id)

        def record(event: Event, vendor: VendorCheckIn, now: datetime) -> list[DomainEvent]:
            if not vendor.funds_released:
                raise InvalidOrder(vendor.vendor_id, "review", "funds_release")
            if vendor.review is not None:
                raise PreconditionFailed("SubmitReview", "vendor already reviewed")

            vendor.review = VendorReview(
                rating=review.rating,
                comment=review.comment,
                tip=review.tip,
                reviewed_at=now,
                host_response=review.host_response,
            )
            return [
                self._fact(
                    VendorReviewSubmitted,
                    event,
                    now,
                    actor_id,
                    vendor_id=vendor.vendor_id,
                    contractor_id=vendor.contractor_id,
                    review_id=review_id_for(event.event_id, vendor.vendor_id),
                    rating=review.rating,
                    is_rehirable=vendor.review.is_rehirable,
                )
            ]

        vendor = self._mutate_vendor("submit_review", event_id, vendor_id, actor_id, record)
        reviews_submitted_total.labels(rating=str(review.rating)).inc()
        if vendor.review is None:
            raise PreconditionFailed("SubmitReview", "review was not stored")
        return vendor.review

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _mutate_vendor(
        self,
        operation: str,
        event_id: str,
        vendor_id: str,
        actor_id: str | None,
        mutate: VendorMutation,
    ) -> VendorCheckIn:
        """Lock, load, mutate one vendor, save the event, publish"""
        with LogOperation(
            logger, operation, event_id=event_id, vendor_id=vendor_id, actor_id=actor_id
        ):
            with self.locks.hold(event_id):
                event = self.repository.get(event_id)
                vendor = event.find_vendor(vendor_id)
                if vendor is None:
                    raise VendorNotFound(event_id, vendor_id)

                facts = mutate(event, vendor, self.time_provider.now())
                self.repository.save(event)
                self.bus.publish_all(facts)
                return vendor.model_copy(deep=True)

    def _fact(
        self,
        fact_type: type[DomainEvent],
        event: Event,
        now: datetime,
        actor_id: str | None,
        **fields: Any,
    ) -> DomainEvent:
        return fact_type(
            event_id=self.id_factory.generate(),
            stream_id=event.event_id,
            occurred_at=now,
            actor_id=actor_id,
            **fields,
        )
