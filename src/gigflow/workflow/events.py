"""
Workflow Events - Facts published after an event record changes

Each class is published on the EventBus once the mutated event has been
saved. Subscribers get everything they need to act (recipients, titles)
without loading the record again.
"""

from gigflow.kernel.events import DomainEvent
from gigflow.workflow.models import ActorRole, EventStatus


class EventCreated(DomainEvent):
    title: str
    created_by: ActorRole
    status: EventStatus


class EventPublished(DomainEvent):
    pass


class ProposalSent(DomainEvent):
    business_owner_id: str | None


class HostConnected(DomainEvent):
    host_id: str
    title: str


class BusinessSelected(DomainEvent):
    business_id: str
    title: str


class ApplicationSubmitted(DomainEvent):
    application_id: str
    contractor_id: str


class ContractorsSelected(DomainEvent):
    """Contractors were hired; the vendor list was rebuilt"""

    title: str
    contractor_ids: list[str]
    contractor_names: dict[str, str]
    host_id: str | None
    host_name: str | None


class MaterialsSent(DomainEvent):
    title: str
    tracking_number: str
    description: str | None
    host_id: str | None
    host_name: str | None


class PaymentReceived(DomainEvent):
    title: str
    business_id: str | None
    confirmation_number: str | None


class MaterialsReceived(DomainEvent):
    title: str
    business_id: str | None
    materials_description: str | None


class EventCompleted(DomainEvent):
    pass


class EventCancelled(DomainEvent):
    reason: str


class EventDeleted(DomainEvent):
    pass
