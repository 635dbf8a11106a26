"""
Check-in Invariants - Stage ordering of a vendor's day

arrival → halfway → end → funds released → reviewed

A later stage may only be true while every earlier stage is true. The
check runs on the merged record, so a patch that un-confirms an earlier
stage is rejected just like one that skips ahead. The halfway stipend
hangs off the halfway stage.
"""

from gigflow.kernel.errors import InvalidOrder
from gigflow.workflow.models import VendorCheckIn


def validate_stage_order(vendor: VendorCheckIn) -> None:
    """
    Raises:
        InvalidOrder: Naming the first stage that is ahead of its predecessor
    """
    if vendor.halfway_confirmed and not vendor.arrival_confirmed:
        raise InvalidOrder(vendor.vendor_id, "halfway", "arrival")
    if vendor.stipend_released and not vendor.halfway_confirmed:
        raise InvalidOrder(vendor.vendor_id, "stipend_release", "halfway")
    if vendor.end_confirmed and not vendor.halfway_confirmed:
        raise InvalidOrder(vendor.vendor_id, "end", "halfway")
    if vendor.funds_released and not vendor.end_confirmed:
        raise InvalidOrder(vendor.vendor_id, "funds_release", "end")
    if vendor.review is not None and not vendor.funds_released:
        raise InvalidOrder(vendor.vendor_id, "review", "funds_release")


def review_id_for(event_id: str, vendor_id: str) -> str:
    return f"{event_id}:{vendor_id}"
