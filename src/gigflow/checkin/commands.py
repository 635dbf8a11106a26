"""
Check-in Commands - Vendor progress updates and host reviews
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from gigflow.workflow.models import CheckInActor


class VendorPatch(BaseModel):
    """
    Partial update of a vendor's check-in record

    Only fields that were explicitly set are applied. Funds release and
    reviews have their own operations and cannot be patched.
    """

    model_config = ConfigDict(extra="forbid")

    arrival_confirmed: bool | None = None
    arrival_time: datetime | None = None
    id_verified: bool | None = None
    halfway_confirmed: bool | None = None
    halfway_time: datetime | None = None
    end_confirmed: bool | None = None
    end_time: datetime | None = None
    notes: str | None = None
    event_photos: list[str] | None = None
    table_label: str | None = None
    checked_in_by: CheckInActor | None = None

    def changes(self) -> dict:
        """Explicitly set fields, JSON-ready for the offline queue"""
        return self.model_dump(mode="json", exclude_unset=True, exclude_none=True)


class ReviewSubmission(BaseModel):
    """Host's review of a vendor whose funds were released"""

    rating: int = Field(..., ge=1, le=5)
    comment: str = ""
    tip: Decimal = Field(default=Decimal("0"), ge=0)
    host_response: str | None = None
