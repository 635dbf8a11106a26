"""
Workflow State Machine - Drives an event through its lifecycle

Every action follows the same path:
1. Take the event's writer lock
2. Load a copy of the event from the repository
3. Check the guards (invariants.py)
4. Mutate the copy and save it as a whole
5. Publish the resulting facts on the EventBus

A guard failure raises before step 4, so the stored event is untouched.
Side effects (notifications) hang off the published facts and never
reach back into the state machine.
"""

from collections.abc import Callable
from datetime import datetime
from typing import Any

from pydantic import BaseModel

from gigflow.kernel.bus import EventBus
from gigflow.kernel.errors import PreconditionFailed, WorkflowRejection
from gigflow.kernel.events import DomainEvent
from gigflow.kernel.ids import IdFactory, default_id_factory
from gigflow.kernel.locks import EventLockRegistry
from gigflow.kernel.logging import LogOperation, get_logger
from gigflow.kernel.metrics import track_duration, transitions_total
from gigflow.kernel.policy import WorkflowPolicy
from gigflow.kernel.time import TimeProvider
from gigflow.workflow.commands import (
    WORKFLOW_COMMAND_TYPES,
    CancelEvent,
    CompleteEvent,
    ConnectHost,
    CreateEvent,
    MarkMaterialsReceived,
    MarkPaymentReceived,
    PublishEvent,
    SelectBusiness,
    SelectContractors,
    SendMaterials,
    SendProposal,
    SubmitApplication,
)
from gigflow.workflow.events import (
    ApplicationSubmitted,
    BusinessSelected,
    ContractorsSelected,
    EventCancelled,
    EventCompleted,
    EventCreated,
    EventDeleted,
    EventPublished,
    HostConnected,
    MaterialsReceived,
    MaterialsSent,
    PaymentReceived,
    ProposalSent,
)
from gigflow.workflow.invariants import (
    require_not_terminal,
    validate_complete,
    validate_connect_host,
    validate_mark_materials_received,
    validate_mark_payment_received,
    validate_publish,
    validate_select_business,
    validate_select_contractors,
    validate_send_materials,
    validate_send_proposal,
    validate_submit_application,
)
from gigflow.workflow.models import (
    ActorRole,
    ApplicationStatus,
    ContractorApplication,
    Event,
    EventStatus,
    StipendReleaseMethod,
    VendorCheckIn,
)
from gigflow.workflow.repository import EventRepository

logger = get_logger(__name__)

ActionHandler = Callable[[Event, Any, datetime, str | None], list[DomainEvent]]


class WorkflowStateMachine:
    """
    Validates and applies lifecycle actions on events

    All mutations of one event are serialized through the shared
    EventLockRegistry; the vendor check-in engine and the inventory
    detector take the same locks.
    """

    def __init__(
        self,
        repository: EventRepository,
        bus: EventBus,
        locks: EventLockRegistry,
        time_provider: TimeProvider,
        policy: WorkflowPolicy,
        id_factory: IdFactory = default_id_factory,
    ) -> None:
        self.repository = repository
        self.bus = bus
        self.locks = locks
        self.time_provider = time_provider
        self.policy = policy
        self.id_factory = id_factory

        self._handlers: dict[type[BaseModel], ActionHandler] = {
            PublishEvent: self._publish,
            SendProposal: self._send_proposal,
            ConnectHost: self._connect_host,
            SelectBusiness: self._select_business,
            SubmitApplication: self._submit_application,
            SelectContractors: self._select_contractors,
            SendMaterials: self._send_materials,
            MarkPaymentReceived: self._mark_payment_received,
            MarkMaterialsReceived: self._mark_materials_received,
            CompleteEvent: self._complete,
            CancelEvent: self._cancel,
        }

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def create_event(self, command: CreateEvent, actor_id: str | None = None) -> Event:
        """
        Create and store a new event

        Host-created events start with their creator connected as host,
        so contractors can apply as soon as a business is found.

        Args:
            command: CreateEvent command
            actor_id: Who created the event

        Returns:
            The stored event
        """
        now = self.time_provider.now()
        event_id = self.id_factory.generate()

        host_created = command.created_by == ActorRole.HOST
        host_id = command.event_host_id or (actor_id if host_created else None)
        business_id = command.business_owner_id or (
            actor_id if command.created_by == ActorRole.BUSINESS else None
        )

        event = Event(
            event_id=event_id,
            title=command.title,
            description=command.description,
            location=command.location,
            event_date=command.event_date,
            created_at=now,
            created_by=command.created_by,
            business_owner_id=business_id,
            event_host_id=host_id,
            event_host_name=command.event_host_name,
            status=EventStatus.DRAFT if command.as_draft else EventStatus.ACTIVE,
            host_connected=host_created and host_id is not None,
            host_connected_at=now if host_created and host_id is not None else None,
            contractors_needed=command.contractors_needed,
            table_options=command.table_options,
            total_vendor_spaces=sum(
                t.quantity * t.contractors_per_table for t in command.table_options
            ),
            contractor_pay=command.contractor_pay,
            host_supervision_fee=command.host_supervision_fee,
            food_stipend=command.food_stipend,
            travel_stipend=command.travel_stipend,
            stipend_release_method=(
                command.stipend_release_method
                or StipendReleaseMethod(self.policy.default_stipend_release_method)
            ),
        )

        with LogOperation(logger, "create_event", event_id=event_id, created_by=command.created_by.value):
            with self.locks.hold(event_id):
                self.repository.save(event)
                self.bus.publish(
                    self._fact(
                        EventCreated,
                        event,
                        now,
                        actor_id,
                        title=event.title,
                        created_by=event.created_by,
                        status=event.status,
                    )
                )

        transitions_total.labels(action="CreateEvent", status="success").inc()
        return event

    @track_duration("transition")
    def transition(
        self,
        event_id: str,
        action: BaseModel | str,
        payload: dict[str, Any] | None = None,
        actor_id: str | None = None,
    ) -> Event:
        """
        Apply one lifecycle action to an event

        Args:
            event_id: Event to act on
            action: Command instance, or its class name looked up in
                WORKFLOW_COMMAND_TYPES and validated from payload
            payload: Command fields when action is given by name
            actor_id: Who is acting

        Returns:
            The event after the action was applied and saved

        Raises:
            EventNotFound: If the event doesn't exist
            PreconditionFailed: If a guard rejects the action
            StorageFailure: If the event could not be saved
            pydantic.ValidationError: If payload doesn't fit the command
        """
        command = self._resolve(action, payload)
        name = type(command).__name__
        handler = self._handlers[type(command)]

        try:
            with LogOperation(logger, "transition", event_id=event_id, action=name, actor_id=actor_id):
                with self.locks.hold(event_id):
                    event = self.repository.get(event_id)
                    require_not_terminal(event, name)
                    facts = handler(event, command, self.time_provider.now(), actor_id)
                    self.repository.save(event)
                    self.bus.publish_all(facts)
        except WorkflowRejection:
            transitions_total.labels(action=name, status="rejected").inc()
            raise
        except Exception:
            transitions_total.labels(action=name, status="failure").inc()
            raise

        transitions_total.labels(action=name, status="success").inc()
        return event

    def delete_event(self, event_id: str, actor_id: str | None = None) -> None:
        """
        Administrative hard delete

        Raises:
            EventNotFound: If the event doesn't exist
        """
        with LogOperation(logger, "delete_event", event_id=event_id, actor_id=actor_id):
            with self.locks.hold(event_id):
                event = self.repository.get(event_id)
                self.repository.delete(event_id)
                self.bus.publish(
                    self._fact(EventDeleted, event, self.time_provider.now(), actor_id)
                )
        self.locks.discard(event_id)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _resolve(self, action: BaseModel | str, payload: dict[str, Any] | None) -> BaseModel:
        if isinstance(action, str):
            command_type = WORKFLOW_COMMAND_TYPES.get(action)
            if command_type is None:
                raise PreconditionFailed(action, "unknown workflow action")
            return command_type.model_validate(payload or {})

        if type(action) not in self._handlers:
            raise PreconditionFailed(type(action).__name__, "not a workflow action")
        return action

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

    # ------------------------------------------------------------------
    # Action handlers - mutate the loaded copy, return facts to publish
    # ------------------------------------------------------------------

    def _publish(self, event: Event, command: PublishEvent, now: datetime, actor_id: str | None) -> list[DomainEvent]:
        validate_publish(event)
        event.status = EventStatus.ACTIVE
        return [self._fact(EventPublished, event, now, actor_id)]

    def _send_proposal(self, event: Event, command: SendProposal, now: datetime, actor_id: str | None) -> list[DomainEvent]:
        validate_send_proposal(event)
        event.proposal_sent = True
        return [
            self._fact(
                ProposalSent, event, now, actor_id, business_owner_id=event.business_owner_id
            )
        ]

    def _connect_host(self, event: Event, command: ConnectHost, now: datetime, actor_id: str | None) -> list[DomainEvent]:
        validate_connect_host(event)
        event.event_host_id = command.host_id
        if command.host_name is not None:
            event.event_host_name = command.host_name
        event.host_connected = True
        event.host_connected_at = now
        event.status = EventStatus.HOST_CONNECTED
        event.is_public_listing = True
        return [
            self._fact(
                HostConnected, event, now, actor_id, host_id=command.host_id, title=event.title
            )
        ]

    def _select_business(self, event: Event, command: SelectBusiness, now: datetime, actor_id: str | None) -> list[DomainEvent]:
        validate_select_business(event)
        event.selected_by_business_id = command.business_id
        event.business_owner_selected = True
        return [
            self._fact(
                BusinessSelected,
                event,
                now,
                actor_id,
                business_id=command.business_id,
                title=event.title,
            )
        ]

    def _submit_application(self, event: Event, command: SubmitApplication, now: datetime, actor_id: str | None) -> list[DomainEvent]:
        validate_submit_application(event, command.contractor_id)
        application = ContractorApplication(
            application_id=self.id_factory.generate(),
            contractor_id=command.contractor_id,
            contractor_name=command.contractor_name,
            applied_at=now,
            message=command.message,
        )
        event.contractor_applications.append(application)
        return [
            self._fact(
                ApplicationSubmitted,
                event,
                now,
                actor_id,
                application_id=application.application_id,
                contractor_id=command.contractor_id,
            )
        ]

    def _select_contractors(self, event: Event, command: SelectContractors, now: datetime, actor_id: str | None) -> list[DomainEvent]:
        validate_select_contractors(event, command.contractor_ids)
        selected = set(command.contractor_ids)

        for application in event.contractor_applications:
            application.status = (
                ApplicationStatus.ACCEPTED
                if application.contractor_id in selected
                else ApplicationStatus.REJECTED
            )

        # Vendor list is rebuilt from scratch on every selection
        stamp = int(now.timestamp() * 1000)
        applications = {a.contractor_id: a for a in event.contractor_applications}
        names: dict[str, str] = {}
        vendors: list[VendorCheckIn] = []
        for contractor_id in command.contractor_ids:
            application = applications[contractor_id]
            names[contractor_id] = application.contractor_name
            vendors.append(
                VendorCheckIn(
                    vendor_id=f"vendor-{contractor_id}-{stamp}",
                    vendor_name=application.contractor_name,
                    contractor_id=contractor_id,
                )
            )

        event.vendors = vendors
        event.selected_contractors = list(command.contractor_ids)
        event.contractors_hired_at = now
        event.status = EventStatus.CONTRACTORS_HIRED

        return [
            self._fact(
                ContractorsSelected,
                event,
                now,
                actor_id,
                title=event.title,
                contractor_ids=list(command.contractor_ids),
                contractor_names=names,
                host_id=event.event_host_id,
                host_name=event.event_host_name,
            )
        ]

    def _send_materials(self, event: Event, command: SendMaterials, now: datetime, actor_id: str | None) -> list[DomainEvent]:
        validate_send_materials(event)
        event.materials_sent_at = now
        event.tracking_number = command.tracking_number
        event.materials_description = command.description
        event.status = EventStatus.MATERIALS_SENT
        return [
            self._fact(
                MaterialsSent,
                event,
                now,
                actor_id,
                title=event.title,
                tracking_number=command.tracking_number,
                description=command.description,
                host_id=event.event_host_id,
                host_name=event.event_host_name,
            )
        ]

    def _mark_payment_received(self, event: Event, command: MarkPaymentReceived, now: datetime, actor_id: str | None) -> list[DomainEvent]:
        validate_mark_payment_received(event)
        event.payment_received = True
        event.payment_received_at = now
        event.payment_confirmation_number = command.confirmation_number
        return [
            self._fact(
                PaymentReceived,
                event,
                now,
                actor_id,
                title=event.title,
                business_id=event.business_recipient(),
                confirmation_number=command.confirmation_number,
            )
        ]

    def _mark_materials_received(self, event: Event, command: MarkMaterialsReceived, now: datetime, actor_id: str | None) -> list[DomainEvent]:
        validate_mark_materials_received(event)
        event.materials_received = True
        event.materials_received_at = now
        event.status = EventStatus.READY_FOR_EVENT
        return [
            self._fact(
                MaterialsReceived,
                event,
                now,
                actor_id,
                title=event.title,
                business_id=event.business_recipient(),
                materials_description=event.materials_description,
            )
        ]

    def _complete(self, event: Event, command: CompleteEvent, now: datetime, actor_id: str | None) -> list[DomainEvent]:
        validate_complete(event)
        event.status = EventStatus.COMPLETED
        event.completed_at = now
        event.is_public_listing = False
        return [self._fact(EventCompleted, event, now, actor_id)]

    def _cancel(self, event: Event, command: CancelEvent, now: datetime, actor_id: str | None) -> list[DomainEvent]:
        event.status = EventStatus.CANCELLED
        event.cancelled_at = now
        event.cancellation_reason = command.reason
        event.is_public_listing = False
        return [self._fact(EventCancelled, event, now, actor_id, reason=command.reason)]
