"""
Base DomainEvent model

Domain events are immutable facts published after a mutation has been
persisted. They are the only channel through which notifications,
suspensions and other cross-actor consequences are triggered.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class DomainEvent(BaseModel):
    """
    Base class for facts published on the EventBus

    Concrete events (ContractorsSelected, VendorReviewSubmitted, ...) live
    next to the component that emits them and add their own fields.
    The event_type is the class name unless overridden.
    """

    event_id: str = Field(..., description="Unique id of this fact")

    stream_id: str = Field(
        ...,
        description="Id of the gig event record the fact belongs to",
    )

    occurred_at: datetime = Field(..., description="UTC timestamp of the mutation")

    actor_id: str | None = Field(
        default=None,
        description="Who triggered the mutation (None for system actions)",
    )

    model_config = {"frozen": True}

    @property
    def event_type(self) -> str:
        return type(self).__name__

    def log_context(self) -> dict[str, Any]:
        """Fields that are safe to attach to log lines"""
        return {
            "event_type": self.event_type,
            "event_id": self.event_id,
            "stream_id": self.stream_id,
        }
