"""
Check-in Events - Facts about vendor progress within an event
"""

from decimal import Decimal

from gigflow.kernel.events import DomainEvent
from gigflow.workflow.models import StipendReleaseMethod


class VendorAdded(DomainEvent):
    vendor_id: str
    vendor_name: str
    contractor_id: str | None


class VendorUpdated(DomainEvent):
    vendor_id: str
    changed_fields: list[str]


class FundsReleased(DomainEvent):
    """The vendor is eligible for payout; no money moves here"""

    vendor_id: str
    contractor_id: str | None


class VendorReviewSubmitted(DomainEvent):
    """
    A host reviewed a vendor

    review_id is stable per (event, vendor) since each vendor is reviewed
    at most once, which lets subscribers deduplicate.
    """

    vendor_id: str
    contractor_id: str | None
    review_id: str
    rating: int
    is_rehirable: bool


class StipendReleased(DomainEvent):
    """
    The halfway stipend was released to a vendor

    method decides who has to act: the business for notification and
    escrow releases, nobody else for prepaid cards handed out on site.
    """

    vendor_id: str
    vendor_name: str
    contractor_id: str | None
    title: str
    business_id: str | None
    method: StipendReleaseMethod
    amount: Decimal
