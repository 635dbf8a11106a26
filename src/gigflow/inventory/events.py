"""
Inventory Events
"""

from gigflow.kernel.events import DomainEvent
from gigflow.workflow.models import DiscrepancyType


class InventoryItemRecorded(DomainEvent):
    item_id: str
    name: str


class InventoryDiscrepancyReported(DomainEvent):
    """Urgent: the host counted something other than what was shipped"""

    discrepancy_id: str
    title: str
    business_id: str
    total_discrepancies: int
    discrepancy_types: list[DiscrepancyType]
    reported_by: str | None


class InventoryDiscrepancyResolved(DomainEvent):
    discrepancy_id: str
