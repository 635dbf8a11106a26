"""
Suspension Policy - Rating-driven contractor suspension

Every one-star review a contractor receives, on any event, counts once.
When the count goes past the policy threshold (more than 3 by default)
the contractor is suspended and told why. Suspension is sticky: later
reviews, good or bad, neither lift it nor send the notice again.
"""

import threading

from gigflow.checkin.events import VendorReviewSubmitted
from gigflow.kernel.bus import EventBus
from gigflow.kernel.ids import IdFactory, default_id_factory
from gigflow.kernel.logging import get_logger
from gigflow.kernel.metrics import suspensions_total
from gigflow.kernel.policy import WorkflowPolicy
from gigflow.kernel.time import TimeProvider
from gigflow.suspension.contractors import ContractorRatings
from gigflow.suspension.events import ContractorSuspended

logger = get_logger(__name__)


class SuspensionPolicy:
    """
    Counts one-star reviews and suspends repeat offenders

    Tallies span events, so the per-event locks don't cover them; the
    policy serializes its own read-count-decide step.
    """

    def __init__(
        self,
        ratings: ContractorRatings,
        bus: EventBus,
        time_provider: TimeProvider,
        policy: WorkflowPolicy,
        id_factory: IdFactory = default_id_factory,
    ) -> None:
        self.ratings = ratings
        self.bus = bus
        self.time_provider = time_provider
        self.policy = policy
        self.id_factory = id_factory
        self._lock = threading.Lock()

    def subscribe(self) -> None:
        """React to reviews published by the check-in engine"""
        self.bus.subscribe(VendorReviewSubmitted, self.handle_review_submitted)

    def handle_review_submitted(self, event: VendorReviewSubmitted) -> None:
        if event.rating != 1:
            return
        if event.contractor_id is None:
            # Hand-added vendor without a contractor account
            logger.info("One-star review for vendor without contractor", vendor_id=event.vendor_id)
            return
        self.on_one_star_review(event.contractor_id, event.stream_id, event.review_id)

    def on_one_star_review(self, contractor_id: str, event_id: str, review_id: str) -> bool:
        """
        Count a one-star review and suspend if the threshold is passed

        Args:
            contractor_id: Reviewed contractor
            event_id: Event the review belongs to
            review_id: Stable review id; counting the same id twice is a no-op

        Returns:
            Whether the contractor is suspended after this review
        """
        with self._lock:
            now = self.time_provider.now()
            counted = self.ratings.record_one_star(contractor_id, review_id, event_id, now)

            if self.ratings.is_suspended(contractor_id):
                return True

            count = self.ratings.get_one_star_count(contractor_id)
            logger.info(
                "One-star review counted",
                contractor_id=contractor_id,
                review_id=review_id,
                newly_counted=counted,
                one_star_count=count,
            )
            if not self.policy.should_suspend(count):
                return False

            self.ratings.set_suspended(contractor_id, self.policy.suspension_reason, now)
            suspensions_total.inc()

        self.bus.publish(
            ContractorSuspended(
                event_id=self.id_factory.generate(),
                stream_id=event_id,
                occurred_at=now,
                actor_id=self.policy.system_actor_id,
                contractor_id=contractor_id,
                reason=self.policy.suspension_reason,
                one_star_count=count,
                suspended_at=now,
            )
        )
        return True
