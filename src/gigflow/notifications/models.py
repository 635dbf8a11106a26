"""
Notification Models - Messages handed to the external dispatcher

Metadata is a closed tagged union discriminated by kind, so a dispatcher
can switch on notification.kind and get a typed payload back.
"""

from datetime import datetime
from decimal import Decimal
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field

from gigflow.workflow.models import ActorRole, DiscrepancyType, StipendReleaseMethod


class MaterialConfirmationMetadata(BaseModel):
    kind: Literal["material_confirmation"] = "material_confirmation"
    materials_description: str | None = None


class PaymentConfirmationMetadata(BaseModel):
    kind: Literal["payment_confirmation"] = "payment_confirmation"
    confirmation_number: str | None = None


class AcceptanceMetadata(BaseModel):
    kind: Literal["acceptance"] = "acceptance"
    event_title: str


class StipendReleaseMetadata(BaseModel):
    kind: Literal["stipend_release"] = "stipend_release"
    method: StipendReleaseMethod
    amount: Decimal
    vendor_id: str


class CoordinationMetadata(BaseModel):
    """
    Host/business/contractor coordination, including urgent escalations

    Urgency is a flag, not a separate channel.
    """

    kind: Literal["coordination"] = "coordination"
    urgent: bool = False
    contractor_count: int | None = None
    tracking_number: str | None = None
    discrepancy_id: str | None = None
    total_discrepancies: int | None = None
    discrepancy_types: list[DiscrepancyType] = Field(default_factory=list)
    suspension_reason: str | None = None


NotificationMetadata = Annotated[
    Union[
        MaterialConfirmationMetadata,
        PaymentConfirmationMetadata,
        AcceptanceMetadata,
        StipendReleaseMetadata,
        CoordinationMetadata,
    ],
    Field(discriminator="kind"),
]


class Notification(BaseModel):
    """
    One message from one party to another about an event

    from_role is None for messages the system sends on its own behalf.
    """

    notification_id: str
    from_user_id: str
    from_role: ActorRole | None
    to_user_id: str
    to_role: ActorRole
    event_id: str
    subject: str
    body: str
    metadata: NotificationMetadata
    created_at: datetime

    model_config = {"frozen": True}

    @property
    def kind(self) -> str:
        return self.metadata.kind
