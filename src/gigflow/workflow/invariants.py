"""
Workflow Invariants - Guards each action must pass before it is applied

Guards are pure functions over the current Event. They raise
PreconditionFailed and never touch the record, so a rejected action
leaves the event exactly as it was.

Fun fact: State machines with guarded transitions go back to David
Harel's statecharts (1987) - the same notation UML later adopted.
"""

from gigflow.kernel.errors import PreconditionFailed
from gigflow.workflow.models import STATUS_RANK, ActorRole, Event, EventStatus


def require_not_terminal(event: Event, action: str) -> None:
    """Completed and cancelled events accept no further actions"""
    if event.is_terminal():
        raise PreconditionFailed(action, f"event is {event.status.value}")


def validate_publish(event: Event) -> None:
    if event.status != EventStatus.DRAFT:
        raise PreconditionFailed("PublishEvent", "only draft events can be published")


def validate_send_proposal(event: Event) -> None:
    """
    Only a business-created event still looking for a host can be proposed,
    and only once.
    """
    if event.created_by != ActorRole.BUSINESS:
        raise PreconditionFailed("SendProposal", "event was not created by a business")
    if event.host_connected:
        raise PreconditionFailed("SendProposal", "a host is already connected")
    if event.proposal_sent:
        raise PreconditionFailed("SendProposal", "proposal already sent")


def validate_connect_host(event: Event) -> None:
    """
    A host can take on a business-created event exactly once

    Connecting a second time is rejected rather than overwriting the
    first host.
    """
    if event.created_by != ActorRole.BUSINESS:
        raise PreconditionFailed("ConnectHost", "event was not created by a business")
    if event.host_connected:
        raise PreconditionFailed(
            "ConnectHost", f"host {event.event_host_id} is already connected"
        )


def validate_select_business(event: Event) -> None:
    if event.created_by != ActorRole.HOST:
        raise PreconditionFailed("SelectBusiness", "event was not created by a host")
    if event.business_owner_selected:
        raise PreconditionFailed("SelectBusiness", "a business is already selected")


def validate_submit_application(event: Event, contractor_id: str) -> None:
    if not event.host_connected:
        raise PreconditionFailed("SubmitApplication", "event has no connected host")
    if event.application_for(contractor_id) is not None:
        raise PreconditionFailed(
            "SubmitApplication", f"contractor {contractor_id} already applied"
        )


def validate_select_contractors(event: Event, contractor_ids: list[str]) -> None:
    """
    Every selected contractor must have applied, each exactly once

    Args:
        event: Current event state
        contractor_ids: Contractors the business wants to hire

    Raises:
        PreconditionFailed: If no host is connected, the list is empty or
            has duplicates, or an id has no application
    """
    if not event.host_connected:
        raise PreconditionFailed("SelectContractors", "event has no connected host")
    if not contractor_ids:
        raise PreconditionFailed("SelectContractors", "no contractors selected")
    if len(set(contractor_ids)) != len(contractor_ids):
        raise PreconditionFailed("SelectContractors", "duplicate contractor ids")

    missing = [cid for cid in contractor_ids if event.application_for(cid) is None]
    if missing:
        raise PreconditionFailed(
            "SelectContractors", f"no application from {', '.join(missing)}"
        )


def validate_send_materials(event: Event) -> None:
    # Re-sending while already MATERIALS_SENT updates the tracking details
    if event.status not in (EventStatus.CONTRACTORS_HIRED, EventStatus.MATERIALS_SENT):
        raise PreconditionFailed(
            "SendMaterials", "contractors must be hired before materials ship"
        )


def validate_mark_payment_received(event: Event) -> None:
    if event.payment_received:
        raise PreconditionFailed("MarkPaymentReceived", "payment already confirmed")


def validate_mark_materials_received(event: Event) -> None:
    if event.status != EventStatus.MATERIALS_SENT:
        raise PreconditionFailed("MarkMaterialsReceived", "materials have not been sent")
    if event.materials_received:
        raise PreconditionFailed("MarkMaterialsReceived", "materials already confirmed")


COMPLETABLE_STATUSES = frozenset(
    {
        EventStatus.CONTRACTORS_HIRED,
        EventStatus.MATERIALS_SENT,
        EventStatus.READY_FOR_EVENT,
        EventStatus.FILLED,
    }
)


def validate_complete(event: Event) -> None:
    if event.status not in COMPLETABLE_STATUSES:
        raise PreconditionFailed("CompleteEvent", "contractors have not been hired")


def staffed(event: Event) -> bool:
    """True once the event has reached CONTRACTORS_HIRED or later"""
    return event.status_rank() >= STATUS_RANK[EventStatus.CONTRACTORS_HIRED]
