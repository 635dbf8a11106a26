"""
Suspension Events
"""

from datetime import datetime

from gigflow.kernel.events import DomainEvent


class ContractorSuspended(DomainEvent):
    """
    A contractor crossed the one-star threshold

    stream_id is the event whose review triggered the suspension.
    """

    contractor_id: str
    reason: str
    one_star_count: int
    suspended_at: datetime
