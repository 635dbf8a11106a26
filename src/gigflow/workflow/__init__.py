"""
Workflow - Event lifecycle from creation to completion

Business ↔ host connection, contractor applications and selection,
materials and payment handoff, completion and cancellation.
"""

from gigflow.workflow.models import (
    ActorRole,
    ApplicationStatus,
    ContractorApplication,
    DiscrepancyType,
    Event,
    EventStatus,
    EventSummary,
    InventoryDiscrepancy,
    InventoryItem,
    StipendReleaseMethod,
    TableOption,
    VendorCheckIn,
    VendorReview,
)
from gigflow.workflow.repository import EventRepository, SQLiteEventRepository
from gigflow.workflow.state_machine import WorkflowStateMachine

__all__ = [
    "ActorRole",
    "ApplicationStatus",
    "ContractorApplication",
    "DiscrepancyType",
    "Event",
    "EventStatus",
    "EventSummary",
    "InventoryDiscrepancy",
    "InventoryItem",
    "StipendReleaseMethod",
    "TableOption",
    "VendorCheckIn",
    "VendorReview",
    "EventRepository",
    "SQLiteEventRepository",
    "WorkflowStateMachine",
]
