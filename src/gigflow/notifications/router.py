"""
Notification Router - Turns published facts into notifications

The router is the only place that knows who must hear about what. It
subscribes to the EventBus and hands each message to the configured
dispatcher. Dispatch failures are logged and counted, never raised: the
mutation that produced the fact is already durable.
"""

from gigflow.checkin.events import StipendReleased
from gigflow.inventory.events import InventoryDiscrepancyReported
from gigflow.kernel.bus import EventBus
from gigflow.kernel.ids import IdFactory, default_id_factory
from gigflow.kernel.logging import get_logger
from gigflow.kernel.metrics import notifications_total
from gigflow.kernel.policy import WorkflowPolicy
from gigflow.kernel.time import TimeProvider
from gigflow.notifications.dispatcher import NotificationDispatcher
from gigflow.notifications.models import (
    AcceptanceMetadata,
    CoordinationMetadata,
    MaterialConfirmationMetadata,
    Notification,
    NotificationMetadata,
    PaymentConfirmationMetadata,
    StipendReleaseMetadata,
)
from gigflow.suspension.events import ContractorSuspended
from gigflow.workflow.events import (
    ContractorsSelected,
    MaterialsReceived,
    MaterialsSent,
    PaymentReceived,
)
from gigflow.workflow.models import ActorRole, StipendReleaseMethod

logger = get_logger(__name__)

SUSPENSION_NOTICE_BODY = (
    "Your account has been suspended due to multiple one-star ratings from hosts. "
    "You will receive an email with more details regarding the issue that occurred."
)


class NotificationRouter:
    """Subscribes to workflow facts and dispatches the matching notices"""

    def __init__(
        self,
        bus: EventBus,
        dispatcher: NotificationDispatcher,
        policy: WorkflowPolicy,
        time_provider: TimeProvider,
        id_factory: IdFactory = default_id_factory,
    ) -> None:
        self.bus = bus
        self.dispatcher = dispatcher
        self.time_provider = time_provider
        self.policy = policy
        self.id_factory = id_factory

    def subscribe(self) -> None:
        self.bus.subscribe(ContractorsSelected, self.on_contractors_selected)
        self.bus.subscribe(MaterialsSent, self.on_materials_sent)
        self.bus.subscribe(PaymentReceived, self.on_payment_received)
        self.bus.subscribe(MaterialsReceived, self.on_materials_received)
        self.bus.subscribe(StipendReleased, self.on_stipend_released)
        self.bus.subscribe(InventoryDiscrepancyReported, self.on_discrepancy_reported)
        self.bus.subscribe(ContractorSuspended, self.on_contractor_suspended)

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------

    def on_contractors_selected(self, fact: ContractorsSelected) -> None:
        sender = fact.actor_id or self.policy.system_actor_id

        for contractor_id in fact.contractor_ids:
            self._send(
                fact.stream_id,
                sender,
                ActorRole.BUSINESS,
                contractor_id,
                ActorRole.CONTRACTOR,
                subject=f"You've been selected for {fact.title}",
                body=(
                    f'Congratulations! You have been selected to work at "{fact.title}". '
                    "The host will be notified and you'll receive further coordination "
                    "details soon."
                ),
                metadata=AcceptanceMetadata(event_title=fact.title),
            )

        if fact.host_id is None:
            logger.info("No host to coordinate with", event_id=fact.stream_id)
            return

        self._send(
            fact.stream_id,
            sender,
            ActorRole.BUSINESS,
            fact.host_id,
            ActorRole.HOST,
            subject=f"Contractors selected for {fact.title}",
            body=(
                f'The contractors have been selected for "{fact.title}". You can now '
                "coordinate with them and prepare for the event. Contractors have been "
                "automatically added to your vendor management system."
            ),
            metadata=CoordinationMetadata(contractor_count=len(fact.contractor_ids)),
        )

    def on_materials_sent(self, fact: MaterialsSent) -> None:
        if fact.host_id is None:
            logger.info("No host to notify about materials", event_id=fact.stream_id)
            return

        body = f'Materials have been sent for "{fact.title}". Tracking number: {fact.tracking_number}.'
        if fact.description:
            body += f" Description: {fact.description}"

        self._send(
            fact.stream_id,
            fact.actor_id or self.policy.system_actor_id,
            ActorRole.BUSINESS,
            fact.host_id,
            ActorRole.HOST,
            subject=f"Materials sent for {fact.title}",
            body=body,
            metadata=CoordinationMetadata(tracking_number=fact.tracking_number),
        )

    def on_payment_received(self, fact: PaymentReceived) -> None:
        if fact.business_id is None:
            return
        self._send(
            fact.stream_id,
            fact.actor_id or self.policy.system_actor_id,
            ActorRole.HOST,
            fact.business_id,
            ActorRole.BUSINESS,
            subject=f"Payment received for {fact.title}",
            body=(
                f'Host has marked payment as received for "{fact.title}". This '
                "confirmation is informational and highlights the receipt."
            ),
            metadata=PaymentConfirmationMetadata(confirmation_number=fact.confirmation_number),
        )

    def on_materials_received(self, fact: MaterialsReceived) -> None:
        if fact.business_id is None:
            return
        self._send(
            fact.stream_id,
            fact.actor_id or self.policy.system_actor_id,
            ActorRole.HOST,
            fact.business_id,
            ActorRole.BUSINESS,
            subject=f"Packages received for {fact.title}",
            body=(
                f'Host has marked packages as received for "{fact.title}". This '
                "confirmation is informational and highlights the receipt."
            ),
            metadata=MaterialConfirmationMetadata(
                materials_description=fact.materials_description
            ),
        )

    def on_stipend_released(self, fact: StipendReleased) -> None:
        """
        Notification and escrow releases ask the business to move the
        money; a prepaid card was handed over on site, so only the
        contractor hears about it.
        """
        sender = fact.actor_id or self.policy.system_actor_id
        metadata = StipendReleaseMetadata(
            method=fact.method, amount=fact.amount, vendor_id=fact.vendor_id
        )

        if fact.method == StipendReleaseMethod.PREPAID_CARDS:
            if fact.contractor_id is None:
                logger.info("Walk-in vendor, no stipend notice", event_id=fact.stream_id)
                return
            self._send(
                fact.stream_id,
                sender,
                ActorRole.HOST,
                fact.contractor_id,
                ActorRole.CONTRACTOR,
                subject=f"Stipend card handed over for {fact.title}",
                body=(
                    f'Your host recorded that a prepaid card for your ${fact.amount} '
                    f'stipend was handed to you at "{fact.title}".'
                ),
                metadata=metadata,
            )
            return

        if fact.business_id is None:
            logger.info("No business to release the stipend", event_id=fact.stream_id)
            return

        if fact.method == StipendReleaseMethod.ESCROW:
            subject = f"Escrow release requested for {fact.title}"
            body = (
                f"{fact.vendor_name} reached the halfway point of \"{fact.title}\". "
                f"An escrow release request of ${fact.amount} has been sent for approval."
            )
        else:
            subject = f"Release halfway stipend for {fact.title}"
            body = (
                f"{fact.vendor_name} reached the halfway point of \"{fact.title}\". "
                f"Please release their ${fact.amount} halfway stipend."
            )

        self._send(
            fact.stream_id,
            sender,
            ActorRole.HOST,
            fact.business_id,
            ActorRole.BUSINESS,
            subject=subject,
            body=body,
            metadata=metadata,
        )

    def on_discrepancy_reported(self, fact: InventoryDiscrepancyReported) -> None:
        self._send(
            fact.stream_id,
            fact.reported_by or self.policy.system_actor_id,
            ActorRole.HOST,
            fact.business_id,
            ActorRole.BUSINESS,
            subject=f"URGENT: Inventory Discrepancy - {fact.title}",
            body=(
                f'Critical inventory issues reported for "{fact.title}". '
                f"{fact.total_discrepancies} item(s) have discrepancies that may require "
                "event cancellation or immediate action. Please review immediately."
            ),
            metadata=CoordinationMetadata(
                urgent=True,
                discrepancy_id=fact.discrepancy_id,
                total_discrepancies=fact.total_discrepancies,
                discrepancy_types=fact.discrepancy_types,
            ),
        )

    def on_contractor_suspended(self, fact: ContractorSuspended) -> None:
        self._send(
            fact.stream_id,
            self.policy.system_actor_id,
            None,
            fact.contractor_id,
            ActorRole.CONTRACTOR,
            subject=self.policy.suspension_notice_subject,
            body=SUSPENSION_NOTICE_BODY,
            metadata=CoordinationMetadata(suspension_reason=fact.reason),
        )

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def _send(
        self,
        event_id: str,
        from_user_id: str,
        from_role: ActorRole | None,
        to_user_id: str,
        to_role: ActorRole,
        subject: str,
        body: str,
        metadata: NotificationMetadata,
    ) -> bool:
        notification = Notification(
            notification_id=self.id_factory.generate(),
            from_user_id=from_user_id,
            from_role=from_role,
            to_user_id=to_user_id,
            to_role=to_role,
            event_id=event_id,
            subject=subject,
            body=body,
            metadata=metadata,
            created_at=self.time_provider.now(),
        )

        try:
            self.dispatcher.send(notification)
        except Exception as e:
            notifications_total.labels(kind=notification.kind, status="failed").inc()
            logger.error(
                "Notification dispatch failed",
                notification_id=notification.notification_id,
                kind=notification.kind,
                event_id=event_id,
                to_user_id=to_user_id,
                error=str(e),
            )
            return False

        notifications_total.labels(kind=notification.kind, status="sent").inc()
        return True
