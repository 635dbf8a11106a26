"""
Kernel - Shared infrastructure for the workflow engine

Errors, ids, clocks, structured logging, metrics, storage retry, the
in-process event bus and per-event locking. Domain packages build on
these and never on each other's internals.
"""

from gigflow.kernel.bus import EventBus
from gigflow.kernel.errors import (
    DiscrepancyNotFound,
    EventNotFound,
    GigflowError,
    InvalidOrder,
    InventoryItemNotFound,
    NotFound,
    NotificationError,
    PreconditionFailed,
    ResponseRequired,
    StorageFailure,
    VendorNotFound,
    WorkflowRejection,
)
from gigflow.kernel.events import DomainEvent
from gigflow.kernel.ids import IdFactory, generate_id
from gigflow.kernel.locks import EventLockRegistry
from gigflow.kernel.policy import WorkflowPolicy
from gigflow.kernel.time import RealTimeProvider, TestTimeProvider, TimeProvider

__all__ = [
    # IDs
    "IdFactory",
    "generate_id",
    # Time
    "TimeProvider",
    "RealTimeProvider",
    "TestTimeProvider",
    # Bus & locking
    "DomainEvent",
    "EventBus",
    "EventLockRegistry",
    # Config
    "WorkflowPolicy",
    # Errors
    "GigflowError",
    "WorkflowRejection",
    "NotFound",
    "EventNotFound",
    "VendorNotFound",
    "DiscrepancyNotFound",
    "InventoryItemNotFound",
    "PreconditionFailed",
    "InvalidOrder",
    "ResponseRequired",
    "StorageFailure",
    "NotificationError",
]
