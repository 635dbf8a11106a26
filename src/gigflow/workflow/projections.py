"""
Workflow Projections - Role-scoped read views over the event collection

These are pure filters over repository snapshots. They never mutate and
never take event locks; a view may be a moment stale, which is fine for
listing screens.

Fun fact: Projections are like "materialized views" in databases, except
ours are recomputed on every read - cheap at gig-event volumes.
"""

from collections.abc import Iterable

from gigflow.workflow.models import (
    ActorRole,
    Event,
    EventStatus,
    EventSummary,
)


def _is_owned_by(event: Event, actor_role: ActorRole, actor_id: str) -> bool:
    if actor_role == ActorRole.BUSINESS:
        return actor_id in (event.business_owner_id, event.selected_by_business_id)
    if actor_role == ActorRole.HOST:
        return event.event_host_id == actor_id
    return any(a.contractor_id == actor_id for a in event.contractor_applications)


def _is_open_to(event: Event, actor_role: ActorRole) -> bool:
    """Events a party may discover without being attached to them yet"""
    if event.status in (EventStatus.DRAFT, EventStatus.CANCELLED, EventStatus.COMPLETED):
        return False
    if actor_role == ActorRole.HOST:
        return (
            event.created_by == ActorRole.BUSINESS
            and event.proposal_sent
            and not event.host_connected
        )
    if actor_role == ActorRole.BUSINESS:
        return event.created_by == ActorRole.HOST and not event.business_owner_selected
    return event.host_connected


def visible_events(
    events: Iterable[Event], actor_role: ActorRole, actor_id: str
) -> list[Event]:
    """
    Events an actor may see

    Rules:
    - Everyone sees events they own or are attached to, drafts included
    - Hosts also see business proposals still waiting for a host
    - Businesses also see host offers still waiting for a business
    - Contractors only ever see events with a connected host

    Args:
        events: Snapshot of the event collection
        actor_role: Role of the viewer
        actor_id: Id of the viewer

    Returns:
        Matching events, oldest first
    """
    visible = []
    for event in events:
        if actor_role == ActorRole.CONTRACTOR and not event.host_connected:
            continue
        if _is_owned_by(event, actor_role, actor_id) or _is_open_to(event, actor_role):
            visible.append(event)
    return sorted(visible, key=lambda e: e.created_at)


def public_listings(events: Iterable[Event]) -> list[Event]:
    """Host-connected events advertised to contractors"""
    return [
        e
        for e in events
        if e.is_public_listing and e.host_connected and e.status == EventStatus.HOST_CONNECTED
    ]


def events_awaiting_host(events: Iterable[Event]) -> list[Event]:
    """Business proposals no host has taken on yet"""
    return [
        e
        for e in events
        if e.created_by == ActorRole.BUSINESS
        and not e.host_connected
        and e.status == EventStatus.ACTIVE
        and e.proposal_sent
    ]


def events_awaiting_contractor_selection(
    events: Iterable[Event], business_id: str
) -> list[Event]:
    """A business's connected events with applications but no selection"""
    return [
        e
        for e in events
        if e.business_owner_id == business_id
        and e.host_connected
        and e.contractor_applications
        and not e.selected_contractors
    ]


def region_of(event: Event) -> str:
    """
    Last comma-separated part of the location ("Pier 4, Austin, TX" → "TX")

    Events without a location fall under "Unknown".
    """
    return event.location.split(",")[-1].strip() or "Unknown"


def events_in_region(events: Iterable[Event], region: str | None = None) -> list[Event]:
    """Events located in one region, or all of them when region is empty"""
    if not region:
        return list(events)
    return [e for e in events if region_of(e) == region]


def available_regions(events: Iterable[Event]) -> list[str]:
    return sorted({region_of(e) for e in events})


def sort_by_date(events: Iterable[Event]) -> list[Event]:
    """
    Soonest event date first, then title

    Dates are ISO strings, so they order as text. Undated events go last.
    """
    return sorted(events, key=lambda e: (e.event_date is None, e.event_date or "", e.title))


def summarize(event: Event) -> EventSummary:
    return EventSummary(
        event_id=event.event_id,
        title=event.title,
        status=event.status,
        created_by=event.created_by,
        host_connected=event.host_connected,
        vendor_count=len(event.vendors),
        open_discrepancies=event.open_discrepancy_count(),
        event_date=event.event_date,
    )
