"""
Custom exceptions for gigflow

Well-defined error hierarchy lets callers tell a rejected workflow step
(recoverable, state untouched) from a storage outage (retry later).

Fun fact: HTTP status 412 "Precondition Failed" has been part of HTTP since
1997 - our PreconditionFailed plays the same role for event workflows.
"""


class GigflowError(Exception):
    """Base exception for all gigflow errors"""

    pass


class WorkflowRejection(GigflowError):
    """
    Base class for domain-level rejections

    A rejection never mutates state. The offline queue records these
    per action and keeps replaying the rest of the queue.
    """

    pass


class NotFound(WorkflowRejection):
    """Base class for unknown identifiers"""

    pass


class EventNotFound(NotFound):
    """Raised when an event does not exist"""

    def __init__(self, event_id: str) -> None:
        self.event_id = event_id
        super().__init__(f"Event {event_id} not found")


class VendorNotFound(NotFound):
    """Raised when a vendor is not part of the event"""

    def __init__(self, event_id: str, vendor_id: str) -> None:
        self.event_id = event_id
        self.vendor_id = vendor_id
        super().__init__(f"Vendor {vendor_id} not found in event {event_id}")


class DiscrepancyNotFound(NotFound):
    """Raised when an inventory discrepancy does not exist on the event"""

    def __init__(self, event_id: str, discrepancy_id: str) -> None:
        self.event_id = event_id
        self.discrepancy_id = discrepancy_id
        super().__init__(
            f"Inventory discrepancy {discrepancy_id} not found in event {event_id}"
        )


class InventoryItemNotFound(NotFound):
    """Raised when an inventory item does not exist on the event"""

    def __init__(self, event_id: str, item_id: str) -> None:
        self.event_id = event_id
        self.item_id = item_id
        super().__init__(f"Inventory item {item_id} not found in event {event_id}")


class PreconditionFailed(WorkflowRejection):
    """
    Raised when a workflow guard is violated

    Examples: sending a proposal twice, connecting a host to an event
    that already has one, releasing funds that were already released.
    """

    def __init__(self, action: str, reason: str) -> None:
        self.action = action
        self.reason = reason
        super().__init__(f"{action} rejected: {reason}")


class InvalidOrder(WorkflowRejection):
    """Raised when a vendor check-in stage would be skipped"""

    def __init__(self, vendor_id: str, stage: str, requires: str) -> None:
        self.vendor_id = vendor_id
        self.stage = stage
        self.requires = requires
        super().__init__(
            f"Vendor {vendor_id}: {stage} requires {requires} first"
        )


class ResponseRequired(WorkflowRejection):
    """Raised when a one-star review has no host explanation"""

    def __init__(self, vendor_id: str) -> None:
        self.vendor_id = vendor_id
        super().__init__(
            f"Vendor {vendor_id}: a one-star review requires a host response"
        )


class StorageFailure(GigflowError):
    """
    Raised when the persistence layer is unavailable

    Aborts an offline replay pass; unapplied actions stay queued.
    """

    def __init__(self, operation: str, detail: str) -> None:
        self.operation = operation
        self.detail = detail
        super().__init__(f"Storage failure during {operation}: {detail}")


class NotificationError(GigflowError):
    """Raised by a dispatcher when a message could not be handed off"""

    pass
