"""
Workflow Commands - Intentions to move an event through its lifecycle

Commands describe what an actor wants to happen. WorkflowStateMachine
checks the guards for the event's current state and either applies the
command as a whole or rejects it without touching the record.
"""

from decimal import Decimal

from pydantic import BaseModel, Field

from gigflow.workflow.models import ActorRole, StipendReleaseMethod, TableOption


# Creation


class CreateEvent(BaseModel):
    """
    Create a new event

    Business-created events look for a host; host-created events offer
    table capacity and look for a business.
    """

    title: str = Field(..., min_length=1, max_length=200)
    created_by: ActorRole
    description: str = ""
    location: str = ""
    event_date: str | None = None
    business_owner_id: str | None = None
    event_host_id: str | None = None
    event_host_name: str | None = None
    contractors_needed: int = Field(default=0, ge=0)
    table_options: list[TableOption] = Field(default_factory=list)
    contractor_pay: Decimal = Field(default=Decimal("0"), ge=0)
    host_supervision_fee: Decimal = Field(default=Decimal("0"), ge=0)
    food_stipend: Decimal | None = Field(default=None, ge=0)
    travel_stipend: Decimal | None = Field(default=None, ge=0)
    stipend_release_method: StipendReleaseMethod | None = None
    as_draft: bool = False


class PublishEvent(BaseModel):
    """Move a draft event to ACTIVE"""


# Business ↔ host connection


class SendProposal(BaseModel):
    """Business proposes its event to hosts"""


class ConnectHost(BaseModel):
    """A host takes on a business-created event"""

    host_id: str = Field(..., min_length=1)
    host_name: str | None = None


class SelectBusiness(BaseModel):
    """A host picks the business for a host-created event"""

    business_id: str = Field(..., min_length=1)


# Staffing


class SubmitApplication(BaseModel):
    """A contractor applies to staff the event"""

    contractor_id: str = Field(..., min_length=1)
    contractor_name: str = Field(..., min_length=1)
    message: str | None = None


class SelectContractors(BaseModel):
    """
    Business picks its contractors

    Replaces the previous selection and rebuilds the vendor list.
    """

    contractor_ids: list[str] = Field(..., min_length=1)


# Fulfillment


class SendMaterials(BaseModel):
    """Business ships materials to the host"""

    tracking_number: str = Field(..., min_length=1)
    description: str | None = None


class MarkPaymentReceived(BaseModel):
    """Host confirms the business's payment arrived"""

    confirmation_number: str | None = None


class MarkMaterialsReceived(BaseModel):
    """Host confirms the shipped materials arrived"""


# Closing


class CompleteEvent(BaseModel):
    """The event took place"""


class CancelEvent(BaseModel):
    """Call the event off"""

    reason: str = Field(..., min_length=1)


# Command type mappings for string-named transitions

WORKFLOW_COMMAND_TYPES: dict[str, type[BaseModel]] = {
    "PublishEvent": PublishEvent,
    "SendProposal": SendProposal,
    "ConnectHost": ConnectHost,
    "SelectBusiness": SelectBusiness,
    "SubmitApplication": SubmitApplication,
    "SelectContractors": SelectContractors,
    "SendMaterials": SendMaterials,
    "MarkPaymentReceived": MarkPaymentReceived,
    "MarkMaterialsReceived": MarkMaterialsReceived,
    "CompleteEvent": CompleteEvent,
    "CancelEvent": CancelEvent,
}
