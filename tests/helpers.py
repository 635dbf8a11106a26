"""
Test Helper Functions - Builders and fakes

Provides reusable builders that walk an event to a given point of its
lifecycle, plus dispatchers that record or fail instead of sending.

Fun fact: The Builder pattern was formalized by the Gang of Four in 1994,
but test data builders were popularized by the growing programmer test
movement in the 2000s - we use them to keep tests readable!
"""

from gigflow import GigFlow
from gigflow.kernel.errors import NotificationError
from gigflow.notifications.models import Notification
from gigflow.workflow.models import DiscrepancyType, Event, InventoryItem


class RecordingDispatcher:
    """Dispatcher that keeps every notification in memory"""

    def __init__(self) -> None:
        self.sent: list[Notification] = []

    def send(self, notification: Notification) -> None:
        self.sent.append(notification)

    def of_kind(self, kind: str) -> list[Notification]:
        return [n for n in self.sent if n.kind == kind]

    def to(self, user_id: str) -> list[Notification]:
        return [n for n in self.sent if n.to_user_id == user_id]

    def with_subject(self, subject: str) -> list[Notification]:
        return [n for n in self.sent if n.subject == subject]


class FailingDispatcher:
    """Dispatcher whose transport is always down"""

    def __init__(self) -> None:
        self.attempts = 0

    def send(self, notification: Notification) -> None:
        self.attempts += 1
        raise NotificationError("push gateway unavailable")


def create_business_event(
    gf: GigFlow,
    title: str = "Spring Market",
    business_id: str = "biz-1",
    **fields,
) -> Event:
    """Business-created event, ACTIVE, no proposal sent yet"""
    return gf.create_event(title, created_by="business", actor_id=business_id, **fields)


def connect_host(gf: GigFlow, event_id: str, host_id: str = "host-1") -> Event:
    """Send the proposal and connect a host"""
    gf.send_proposal(event_id)
    return gf.connect_host(event_id, host_id, host_name="Harbor Hall")


def staff_event(
    gf: GigFlow,
    event_id: str,
    contractors: dict[str, str],
    host_id: str = "host-1",
    business_id: str = "biz-1",
) -> Event:
    """
    Connect a host, collect applications and hire everyone who applied

    Args:
        contractors: contractor_id → contractor_name
    """
    connect_host(gf, event_id, host_id)
    for contractor_id, name in contractors.items():
        gf.submit_application(event_id, contractor_id, name)
    return gf.select_contractors(event_id, list(contractors), actor_id=business_id)


def vendor_for(event: Event, contractor_id: str) -> str:
    """Vendor id of a hired contractor"""
    return next(v.vendor_id for v in event.vendors if v.contractor_id == contractor_id)


def finish_shift(gf: GigFlow, event_id: str, vendor_id: str) -> None:
    """Confirm arrival, halfway and end, one stage at a time"""
    gf.update_vendor(event_id, vendor_id, {"arrival_confirmed": True})
    gf.update_vendor(event_id, vendor_id, {"halfway_confirmed": True})
    gf.update_vendor(event_id, vendor_id, {"end_confirmed": True})


def paid_vendor(gf: GigFlow, event_id: str, vendor_id: str) -> None:
    """Finish the shift and release funds, ready for a review"""
    finish_shift(gf, event_id, vendor_id)
    gf.release_funds(event_id, vendor_id)


def inventory_item(
    item_id: str,
    expected: int,
    received: int,
    discrepancy_type: DiscrepancyType | None = None,
    name: str | None = None,
) -> InventoryItem:
    return InventoryItem(
        item_id=item_id,
        name=name or f"Item {item_id}",
        expected_quantity=expected,
        received_quantity=received,
        discrepancy_type=discrepancy_type,
    )
