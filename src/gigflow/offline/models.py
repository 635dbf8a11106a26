"""
Offline Models - Deferred vendor updates and replay outcomes
"""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field


class QueuedAction(BaseModel):
    """
    A vendor update captured while offline

    The patch is stored in its JSON form and validated again when the
    action is replayed.
    """

    action_id: str
    action_type: Literal["update_vendor"] = "update_vendor"
    queued_at: datetime
    event_id: str
    vendor_id: str
    patch: dict[str, Any] = Field(default_factory=dict)
    actor_id: str | None = None

    model_config = {"frozen": True}


class ReplayError(BaseModel):
    """Why one queued action could not be applied"""

    action_id: str
    event_id: str
    vendor_id: str
    error_type: str
    message: str
    # Storage failures leave the action queued; rejections drop it
    retained: bool = False
