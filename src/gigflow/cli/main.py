"""
GigFlow CLI

Command-line interface for the gig-event workflow engine.
Provides commands for the event lifecycle, vendor check-in, inventory
counts, the offline queue and contractor standing.

Usage:
    gigflow init --db gigflow.db
    gigflow event create --title "Spring Market" --created-by business --actor biz-1
    gigflow event propose --id <event_id>
    gigflow event connect-host --id <event_id> --host host-1
    gigflow event apply --id <event_id> --contractor con-1 --name Casey
    gigflow event select --id <event_id> --contractors con-1,con-2
    gigflow vendor update --event <event_id> --vendor <vendor_id> --arrival
    gigflow queue replay
"""

import json
from contextlib import contextmanager
from decimal import Decimal
from pathlib import Path
from typing import Iterator, Optional

import typer
from typing_extensions import Annotated

from gigflow.gigflow import GigFlow
from gigflow.kernel.errors import WorkflowRejection
from gigflow.kernel.logging import configure_logging
from gigflow.offline.models import QueuedAction
from gigflow.offline.queue import Connectivity
from gigflow.workflow import projections
from gigflow.workflow.models import Event

# Configure logging to stderr (avoids polluting stdout for JSON output)
configure_logging(json_output=False, log_level="INFO")

app = typer.Typer(
    name="gigflow",
    help="GigFlow - Gig-event workflow engine for businesses, hosts and contractors",
    add_completion=False,
)

# Sub-apps
event_app = typer.Typer(help="Event lifecycle commands")
vendor_app = typer.Typer(help="Vendor check-in, payout and review commands")
inventory_app = typer.Typer(help="Inventory count and discrepancy commands")
queue_app = typer.Typer(help="Offline action queue commands")
contractor_app = typer.Typer(help="Contractor standing commands")

app.add_typer(event_app, name="event")
app.add_typer(vendor_app, name="vendor")
app.add_typer(inventory_app, name="inventory")
app.add_typer(queue_app, name="queue")
app.add_typer(contractor_app, name="contractor")

# Global state
DEFAULT_DB = Path(".gigflow.db")

DbOption = Annotated[
    Optional[Path],
    typer.Option("--db", envvar="GIGFLOW_DB", help="Database path"),
]
JsonOption = Annotated[bool, typer.Option("--json", help="Output as JSON")]


def get_gigflow(db_path: Optional[Path] = None, online: bool = True) -> GigFlow:
    """Get GigFlow instance"""
    db = db_path or DEFAULT_DB
    if not db.exists():
        typer.echo(f"Error: Database not found: {db}", err=True)
        typer.echo(f"Run 'gigflow init --db {db}' to initialize", err=True)
        raise typer.Exit(1)
    return GigFlow(str(db), connectivity=Connectivity(online=online))


@contextmanager
def rejections_exit() -> Iterator[None]:
    """Report a rejected workflow step and exit non-zero"""
    try:
        yield
    except WorkflowRejection as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from e


def echo_event(event: Event, json_output: bool = False) -> None:
    if json_output:
        typer.echo(event.model_dump_json(indent=2))
        return
    typer.echo(f"  {event.event_id}: {event.title} [{event.status.value}]")


# Initialization command


@app.command()
def init(
    db: Annotated[
        Path,
        typer.Option("--db", envvar="GIGFLOW_DB", help="Database path"),
    ] = DEFAULT_DB,
) -> None:
    """Initialize a new GigFlow database"""
    if db.exists():
        typer.echo(f"Error: Database already exists: {db}", err=True)
        raise typer.Exit(1)

    # Create database by initializing GigFlow
    GigFlow(str(db))
    typer.echo(f"✓ Initialized GigFlow database: {db}")


# Event commands


@event_app.command("create")
def event_create(
    title: Annotated[str, typer.Option("--title", help="Event title")],
    created_by: Annotated[
        str, typer.Option("--created-by", help="Creating party (business, host)")
    ],
    actor: Annotated[Optional[str], typer.Option("--actor", help="Creator id")] = None,
    location: Annotated[str, typer.Option("--location", help="Venue")] = "",
    event_date: Annotated[
        Optional[str], typer.Option("--date", help="Event date (YYYY-MM-DD)")
    ] = None,
    contractors_needed: Annotated[
        int, typer.Option("--contractors-needed", help="Number of contractors")
    ] = 0,
    contractor_pay: Annotated[
        str, typer.Option("--contractor-pay", help="Pay per contractor")
    ] = "0",
    food_stipend: Annotated[
        Optional[str], typer.Option("--food-stipend", help="Halfway food stipend")
    ] = None,
    travel_stipend: Annotated[
        Optional[str], typer.Option("--travel-stipend", help="Halfway travel stipend")
    ] = None,
    stipend_method: Annotated[
        Optional[str],
        typer.Option("--stipend-method", help="notification, escrow or prepaid_cards"),
    ] = None,
    draft: Annotated[bool, typer.Option("--draft", help="Create as draft")] = False,
    db: DbOption = None,
) -> None:
    """Create a new event"""
    gf = get_gigflow(db)

    event = gf.create_event(
        title=title,
        created_by=created_by,
        actor_id=actor,
        location=location,
        event_date=event_date,
        contractors_needed=contractors_needed,
        contractor_pay=Decimal(contractor_pay),
        food_stipend=Decimal(food_stipend) if food_stipend else None,
        travel_stipend=Decimal(travel_stipend) if travel_stipend else None,
        stipend_release_method=stipend_method,
        as_draft=draft,
    )

    typer.echo(f"✓ Created event: {event.event_id}")
    typer.echo(f"  Title: {event.title}")
    typer.echo(f"  Status: {event.status.value}")


@event_app.command("list")
def event_list(
    role: Annotated[
        Optional[str],
        typer.Option("--role", help="Only events visible to this role (business, host, contractor)"),
    ] = None,
    actor: Annotated[
        Optional[str], typer.Option("--actor", help="Viewer id (with --role)")
    ] = None,
    region: Annotated[
        Optional[str], typer.Option("--region", help="Only events in this region (e.g. CA)")
    ] = None,
    by_date: Annotated[
        bool, typer.Option("--by-date", help="Sort by event date, then title")
    ] = False,
    db: DbOption = None,
    json_output: JsonOption = False,
) -> None:
    """List events"""
    gf = get_gigflow(db)

    if role:
        if not actor:
            typer.echo("Error: --role requires --actor", err=True)
            raise typer.Exit(1)
        events = gf.visible_events(role, actor)
    else:
        events = gf.list_events()

    events = projections.events_in_region(events, region)
    if by_date:
        events = projections.sort_by_date(events)

    if json_output:
        typer.echo(json.dumps([e.model_dump(mode="json") for e in events], indent=2))
        return

    if not events:
        typer.echo("No events")
        return

    typer.echo(f"Events ({len(events)}):")
    for event in events:
        echo_event(event)


@event_app.command("listings")
def event_listings(
    kind: Annotated[
        str,
        typer.Option("--kind", help="public, awaiting-host or awaiting-selection"),
    ] = "public",
    business: Annotated[
        Optional[str],
        typer.Option("--business", help="Business id (for awaiting-selection)"),
    ] = None,
    db: DbOption = None,
) -> None:
    """Show marketplace listings"""
    gf = get_gigflow(db)

    if kind == "public":
        events = gf.public_listings()
    elif kind == "awaiting-host":
        events = gf.events_awaiting_host()
    elif kind == "awaiting-selection":
        if not business:
            typer.echo("Error: awaiting-selection requires --business", err=True)
            raise typer.Exit(1)
        events = gf.events_awaiting_contractor_selection(business)
    else:
        typer.echo(f"Error: Unknown listing kind: {kind}", err=True)
        raise typer.Exit(1)

    typer.echo(f"Listings ({len(events)}):")
    for event in events:
        echo_event(event)


@event_app.command("show")
def event_show(
    event_id: Annotated[str, typer.Option("--id", help="Event ID")],
    db: DbOption = None,
    json_output: JsonOption = False,
) -> None:
    """Show one event"""
    gf = get_gigflow(db)

    with rejections_exit():
        event = gf.get_event(event_id)

    if json_output:
        echo_event(event, json_output=True)
        return

    typer.echo(f"Event {event.event_id}")
    typer.echo(f"  Title: {event.title}")
    typer.echo(f"  Status: {event.status.value}")
    typer.echo(f"  Created by: {event.created_by.value}")
    typer.echo(f"  Host: {event.event_host_id or '-'}")
    typer.echo(f"  Applications: {len(event.contractor_applications)}")
    typer.echo(f"  Vendors: {len(event.vendors)}")
    for vendor in event.vendors:
        stages = [
            name
            for name, done in (
                ("arrived", vendor.arrival_confirmed),
                ("halfway", vendor.halfway_confirmed),
                ("ended", vendor.end_confirmed),
                ("paid", vendor.funds_released),
                ("reviewed", vendor.review is not None),
            )
            if done
        ]
        typer.echo(f"    {vendor.vendor_id}: {vendor.vendor_name} [{', '.join(stages) or 'pending'}]")
    if event.inventory_discrepancies:
        typer.echo(f"  Open discrepancies: {event.open_discrepancy_count()}")


@event_app.command("publish")
def event_publish(
    event_id: Annotated[str, typer.Option("--id", help="Event ID")],
    db: DbOption = None,
) -> None:
    """Publish a draft event (DRAFT → ACTIVE)"""
    gf = get_gigflow(db)
    with rejections_exit():
        event = gf.publish_event(event_id)
    typer.echo(f"✓ Published event: {event.event_id}")


@event_app.command("propose")
def event_propose(
    event_id: Annotated[str, typer.Option("--id", help="Event ID")],
    actor: Annotated[Optional[str], typer.Option("--actor", help="Business id")] = None,
    db: DbOption = None,
) -> None:
    """Send a business event's proposal to hosts"""
    gf = get_gigflow(db)
    with rejections_exit():
        event = gf.send_proposal(event_id, actor_id=actor)
    typer.echo(f"✓ Proposal sent for: {event.title}")


@event_app.command("connect-host")
def event_connect_host(
    event_id: Annotated[str, typer.Option("--id", help="Event ID")],
    host: Annotated[str, typer.Option("--host", help="Host id")],
    host_name: Annotated[
        Optional[str], typer.Option("--host-name", help="Host display name")
    ] = None,
    db: DbOption = None,
) -> None:
    """Connect a host to a business event"""
    gf = get_gigflow(db)
    with rejections_exit():
        event = gf.connect_host(event_id, host, host_name)
    typer.echo(f"✓ Host {host} connected to: {event.title}")
    typer.echo(f"  Status: {event.status.value}")


@event_app.command("select-business")
def event_select_business(
    event_id: Annotated[str, typer.Option("--id", help="Event ID")],
    business: Annotated[str, typer.Option("--business", help="Business id")],
    db: DbOption = None,
) -> None:
    """Pick the business for a host-created event"""
    gf = get_gigflow(db)
    with rejections_exit():
        event = gf.select_business(event_id, business)
    typer.echo(f"✓ Business {business} selected for: {event.title}")


@event_app.command("apply")
def event_apply(
    event_id: Annotated[str, typer.Option("--id", help="Event ID")],
    contractor: Annotated[str, typer.Option("--contractor", help="Contractor id")],
    name: Annotated[str, typer.Option("--name", help="Contractor name")],
    message: Annotated[
        Optional[str], typer.Option("--message", help="Note to the business")
    ] = None,
    db: DbOption = None,
) -> None:
    """Apply to staff an event"""
    gf = get_gigflow(db)
    with rejections_exit():
        event = gf.submit_application(event_id, contractor, name, message)
    typer.echo(f"✓ Application submitted to: {event.title}")
    typer.echo(f"  Applications: {len(event.contractor_applications)}")


@event_app.command("select")
def event_select(
    event_id: Annotated[str, typer.Option("--id", help="Event ID")],
    contractors: Annotated[
        str, typer.Option("--contractors", help="Contractor ids (comma-separated)")
    ],
    actor: Annotated[Optional[str], typer.Option("--actor", help="Business id")] = None,
    db: DbOption = None,
) -> None:
    """Hire contractors (replaces any previous selection)"""
    gf = get_gigflow(db)
    ids = [c.strip() for c in contractors.split(",") if c.strip()]
    with rejections_exit():
        event = gf.select_contractors(event_id, ids, actor_id=actor)

    typer.echo(f"✓ Hired {len(event.selected_contractors)} contractor(s) for: {event.title}")
    for vendor in event.vendors:
        typer.echo(f"  {vendor.vendor_id}: {vendor.vendor_name}")


@event_app.command("send-materials")
def event_send_materials(
    event_id: Annotated[str, typer.Option("--id", help="Event ID")],
    tracking: Annotated[str, typer.Option("--tracking", help="Tracking number")],
    description: Annotated[
        Optional[str], typer.Option("--description", help="What was shipped")
    ] = None,
    db: DbOption = None,
) -> None:
    """Record shipped materials"""
    gf = get_gigflow(db)
    with rejections_exit():
        event = gf.send_materials(event_id, tracking, description)
    typer.echo(f"✓ Materials sent for: {event.title}")


@event_app.command("payment-received")
def event_payment_received(
    event_id: Annotated[str, typer.Option("--id", help="Event ID")],
    confirmation: Annotated[
        Optional[str], typer.Option("--confirmation", help="Confirmation number")
    ] = None,
    db: DbOption = None,
) -> None:
    """Host confirms the business's payment"""
    gf = get_gigflow(db)
    with rejections_exit():
        event = gf.mark_payment_received(event_id, confirmation)
    typer.echo(f"✓ Payment received for: {event.title}")


@event_app.command("materials-received")
def event_materials_received(
    event_id: Annotated[str, typer.Option("--id", help="Event ID")],
    db: DbOption = None,
) -> None:
    """Host confirms the shipped materials arrived"""
    gf = get_gigflow(db)
    with rejections_exit():
        event = gf.mark_materials_received(event_id)
    typer.echo(f"✓ Materials received for: {event.title}")
    typer.echo(f"  Status: {event.status.value}")


@event_app.command("complete")
def event_complete(
    event_id: Annotated[str, typer.Option("--id", help="Event ID")],
    db: DbOption = None,
) -> None:
    """Mark an event as completed"""
    gf = get_gigflow(db)
    with rejections_exit():
        event = gf.complete_event(event_id)
    typer.echo(f"✓ Completed event: {event.title}")


@event_app.command("cancel")
def event_cancel(
    event_id: Annotated[str, typer.Option("--id", help="Event ID")],
    reason: Annotated[str, typer.Option("--reason", help="Why the event is cancelled")],
    db: DbOption = None,
) -> None:
    """Cancel an event"""
    gf = get_gigflow(db)
    with rejections_exit():
        event = gf.cancel_event(event_id, reason)
    typer.echo(f"✓ Cancelled event: {event.title}")


@event_app.command("delete")
def event_delete(
    event_id: Annotated[str, typer.Option("--id", help="Event ID")],
    yes: Annotated[bool, typer.Option("--yes", help="Confirm deletion")] = False,
    db: DbOption = None,
) -> None:
    """Permanently delete an event (administrative)"""
    if not yes:
        typer.echo("Error: Deleting an event is permanent; pass --yes to confirm", err=True)
        raise typer.Exit(1)

    gf = get_gigflow(db)
    with rejections_exit():
        gf.delete_event(event_id)
    typer.echo(f"✓ Deleted event: {event_id}")


# Vendor commands


@vendor_app.command("add")
def vendor_add(
    event_id: Annotated[str, typer.Option("--event", help="Event ID")],
    name: Annotated[str, typer.Option("--name", help="Vendor name")],
    contractor: Annotated[
        Optional[str], typer.Option("--contractor", help="Contractor id, if any")
    ] = None,
    db: DbOption = None,
) -> None:
    """Add a vendor by hand"""
    gf = get_gigflow(db)
    with rejections_exit():
        vendor = gf.add_vendor(event_id, name, contractor)
    typer.echo(f"✓ Added vendor: {vendor.vendor_id}")


@vendor_app.command("update")
def vendor_update(
    event_id: Annotated[str, typer.Option("--event", help="Event ID")],
    vendor_id: Annotated[str, typer.Option("--vendor", help="Vendor ID")],
    arrival: Annotated[bool, typer.Option("--arrival", help="Confirm arrival")] = False,
    id_verified: Annotated[
        bool, typer.Option("--id-verified", help="ID was checked")
    ] = False,
    halfway: Annotated[bool, typer.Option("--halfway", help="Confirm halfway")] = False,
    end: Annotated[bool, typer.Option("--end", help="Confirm end of shift")] = False,
    notes: Annotated[Optional[str], typer.Option("--notes", help="Host notes")] = None,
    table: Annotated[Optional[str], typer.Option("--table", help="Table label")] = None,
    offline: Annotated[
        bool, typer.Option("--offline", help="Queue the update instead of applying it")
    ] = False,
    db: DbOption = None,
) -> None:
    """Update a vendor's check-in"""
    gf = get_gigflow(db, online=not offline)

    patch: dict[str, object] = {}
    if arrival:
        patch["arrival_confirmed"] = True
    if id_verified:
        patch["id_verified"] = True
    if halfway:
        patch["halfway_confirmed"] = True
    if end:
        patch["end_confirmed"] = True
    if notes is not None:
        patch["notes"] = notes
    if table is not None:
        patch["table_label"] = table

    with rejections_exit():
        result = gf.update_vendor(event_id, vendor_id, patch)

    if isinstance(result, QueuedAction):
        typer.echo(f"✓ Queued update: {result.action_id}")
        typer.echo(f"  Pending actions: {len(gf.queue)}")
        return

    typer.echo(f"✓ Updated vendor: {result.vendor_id}")
    typer.echo(f"  Arrived: {result.arrival_confirmed}")
    typer.echo(f"  Halfway: {result.halfway_confirmed}")
    typer.echo(f"  Ended: {result.end_confirmed}")


@vendor_app.command("release")
def vendor_release(
    event_id: Annotated[str, typer.Option("--event", help="Event ID")],
    vendor_id: Annotated[str, typer.Option("--vendor", help="Vendor ID")],
    db: DbOption = None,
) -> None:
    """Flag a vendor's funds as released"""
    gf = get_gigflow(db)
    with rejections_exit():
        vendor = gf.release_funds(event_id, vendor_id)
    typer.echo(f"✓ Funds released for: {vendor.vendor_name}")


@vendor_app.command("stipend")
def vendor_stipend(
    event_id: Annotated[str, typer.Option("--event", help="Event ID")],
    vendor_id: Annotated[str, typer.Option("--vendor", help="Vendor ID")],
    db: DbOption = None,
) -> None:
    """Release the halfway stipend (confirms halfway too)"""
    gf = get_gigflow(db)
    with rejections_exit():
        vendor = gf.release_stipend(event_id, vendor_id)
    typer.echo(f"✓ Stipend released for: {vendor.vendor_name}")
    typer.echo(f"  Halfway: {vendor.halfway_confirmed}")


@vendor_app.command("review")
def vendor_review(
    event_id: Annotated[str, typer.Option("--event", help="Event ID")],
    vendor_id: Annotated[str, typer.Option("--vendor", help="Vendor ID")],
    rating: Annotated[int, typer.Option("--rating", min=1, max=5, help="Rating 1-5")],
    comment: Annotated[str, typer.Option("--comment", help="Review comment")] = "",
    tip: Annotated[str, typer.Option("--tip", help="Tip amount")] = "0",
    response: Annotated[
        Optional[str],
        typer.Option("--response", help="Host explanation (required for 1 star)"),
    ] = None,
    db: DbOption = None,
) -> None:
    """Review a vendor after funds release"""
    gf = get_gigflow(db)
    with rejections_exit():
        review = gf.submit_review(
            event_id,
            vendor_id,
            rating,
            comment=comment,
            tip=Decimal(tip),
            host_response=response,
        )
    typer.echo(f"✓ Review recorded: {review.rating} star(s)")
    typer.echo(f"  Rehirable: {review.is_rehirable}")


# Inventory commands


@inventory_app.command("add")
def inventory_add(
    event_id: Annotated[str, typer.Option("--event", help="Event ID")],
    name: Annotated[str, typer.Option("--name", help="Item name")],
    expected: Annotated[int, typer.Option("--expected", help="Shipped quantity")],
    db: DbOption = None,
) -> None:
    """Add an expected inventory line"""
    gf = get_gigflow(db)
    with rejections_exit():
        item = gf.add_inventory_item(event_id, name, expected)
    typer.echo(f"✓ Added item: {item.item_id}")


@inventory_app.command("count")
def inventory_count(
    event_id: Annotated[str, typer.Option("--event", help="Event ID")],
    item_id: Annotated[str, typer.Option("--item", help="Item ID")],
    received: Annotated[int, typer.Option("--received", help="Counted quantity")],
    discrepancy_type: Annotated[
        Optional[str],
        typer.Option("--type", help="damaged, missing, lost_package or extra"),
    ] = None,
    explanation: Annotated[
        Optional[str], typer.Option("--explanation", help="What went wrong")
    ] = None,
    db: DbOption = None,
) -> None:
    """Record the counted quantity of an item"""
    gf = get_gigflow(db)
    with rejections_exit():
        item = gf.update_inventory_item(
            event_id, item_id, received, discrepancy_type, explanation
        )
    typer.echo(f"✓ Counted {item.name}: {item.received_quantity}/{item.expected_quantity}")


@inventory_app.command("report")
def inventory_report(
    event_id: Annotated[str, typer.Option("--event", help="Event ID")],
    notes: Annotated[Optional[str], typer.Option("--notes", help="Remarks")] = None,
    reporter: Annotated[
        Optional[str], typer.Option("--reporter", help="Who counted")
    ] = None,
    db: DbOption = None,
) -> None:
    """Report discrepancies from the current count"""
    gf = get_gigflow(db)
    with rejections_exit():
        discrepancy = gf.report_inventory_discrepancy(
            event_id, notes=notes, reported_by=reporter
        )

    if discrepancy is None:
        typer.echo("✓ Inventory matches the shipment")
        return

    typer.echo(f"✓ Reported discrepancy: {discrepancy.discrepancy_id}")
    typer.echo(f"  Items: {discrepancy.total_discrepancies}")
    typer.echo(f"  Business notified: {discrepancy.business_owner_notified}")


@inventory_app.command("resolve")
def inventory_resolve(
    event_id: Annotated[str, typer.Option("--event", help="Event ID")],
    discrepancy_id: Annotated[
        str, typer.Option("--discrepancy", help="Discrepancy ID")
    ],
    notes: Annotated[Optional[str], typer.Option("--notes", help="Resolution")] = None,
    db: DbOption = None,
) -> None:
    """Mark a discrepancy resolved"""
    gf = get_gigflow(db)
    with rejections_exit():
        discrepancy = gf.resolve_inventory_discrepancy(event_id, discrepancy_id, notes)
    typer.echo(f"✓ Resolved discrepancy: {discrepancy.discrepancy_id}")


# Offline queue commands


@queue_app.command("list")
def queue_list(
    db: DbOption = None,
    json_output: JsonOption = False,
) -> None:
    """List queued vendor updates"""
    gf = get_gigflow(db, online=False)
    actions = gf.pending_actions()

    if json_output:
        typer.echo(json.dumps([a.model_dump(mode="json") for a in actions], indent=2))
        return

    if not actions:
        typer.echo("Offline queue is empty")
        return

    typer.echo(f"Queued actions ({len(actions)}):")
    for action in actions:
        typer.echo(
            f"  {action.action_id}: {action.action_type} "
            f"{action.event_id}/{action.vendor_id} {json.dumps(action.patch)}"
        )


@queue_app.command("replay")
def queue_replay(
    db: DbOption = None,
) -> None:
    """Replay queued vendor updates"""
    gf = get_gigflow(db, online=False)
    queued = len(gf.queue)
    errors = gf.replay_offline_actions()

    typer.echo(f"✓ Replayed {queued - len(gf.queue)} of {queued} action(s)")
    for error in errors:
        status = "kept" if error.retained else "dropped"
        typer.echo(f"  {error.action_id} ({status}): {error.error_type} - {error.message}")
    if any(e.retained for e in errors):
        raise typer.Exit(1)


# Contractor commands


@contractor_app.command("show")
def contractor_show(
    contractor_id: Annotated[str, typer.Option("--id", help="Contractor id")],
    db: DbOption = None,
) -> None:
    """Show a contractor's standing"""
    gf = get_gigflow(db)
    profile = gf.contractor_profile(contractor_id)

    typer.echo(f"Contractor {profile.contractor_id}")
    typer.echo(f"  One-star reviews: {profile.one_star_count}")
    typer.echo(f"  Suspended: {profile.is_suspended}")
    if profile.is_suspended:
        typer.echo(f"  Reason: {profile.suspension_reason}")


@contractor_app.command("suspended")
def contractor_suspended(
    db: DbOption = None,
) -> None:
    """List suspended contractors"""
    gf = get_gigflow(db)
    profiles = gf.suspended_contractors()

    if not profiles:
        typer.echo("No suspended contractors")
        return

    typer.echo(f"Suspended contractors ({len(profiles)}):")
    for profile in profiles:
        typer.echo(f"  {profile.contractor_id}: since {profile.suspended_at}")


def main() -> None:
    """Main entry point"""
    app()


if __name__ == "__main__":
    main()
