"""
Workflow Domain Models - The gig event aggregate and its parts

An Event links a Business (contractors and materials), a Host (venue and
table capacity) and the Contractors who staff it. Everything the workflow
engine knows about an engagement lives inside one Event record.

Fun fact: The word "gig" was 1920s jazz slang for a single paid
engagement - which is exactly what one Event record models.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field, computed_field
from sqlmodel import SQLModel


class ActorRole(str, Enum):
    """The three parties of a gig event"""

    BUSINESS = "business"
    HOST = "host"
    CONTRACTOR = "contractor"


class EventStatus(str, Enum):
    """
    Event lifecycle states

    Main path:
    DRAFT → ACTIVE → HOST_CONNECTED → CONTRACTORS_HIRED → MATERIALS_SENT
          → READY_FOR_EVENT → COMPLETED
    CANCELLED is terminal and reachable from any non-terminal state.
    """

    DRAFT = "draft"
    ACTIVE = "active"
    AWAITING_HOST = "awaiting_host"
    HOST_CONNECTED = "host_connected"
    CONTRACTORS_HIRED = "contractors_hired"
    MATERIALS_SENT = "materials_sent"
    READY_FOR_EVENT = "ready_for_event"
    FILLED = "filled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


# Position of each status along the main path (CANCELLED sits outside it)
STATUS_RANK: dict[EventStatus, int] = {
    EventStatus.DRAFT: 0,
    EventStatus.ACTIVE: 1,
    EventStatus.AWAITING_HOST: 2,
    EventStatus.HOST_CONNECTED: 3,
    EventStatus.CONTRACTORS_HIRED: 4,
    EventStatus.MATERIALS_SENT: 5,
    EventStatus.READY_FOR_EVENT: 6,
    EventStatus.FILLED: 7,
    EventStatus.COMPLETED: 8,
    EventStatus.CANCELLED: -1,
}

TERMINAL_STATUSES = frozenset({EventStatus.COMPLETED, EventStatus.CANCELLED})


class ApplicationStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class StipendReleaseMethod(str, Enum):
    NOTIFICATION = "notification"
    ESCROW = "escrow"
    PREPAID_CARDS = "prepaid_cards"


class DiscrepancyType(str, Enum):
    DAMAGED = "damaged"
    MISSING = "missing"
    LOST_PACKAGE = "lost_package"
    EXTRA = "extra"


class CheckInActor(str, Enum):
    """Who recorded a vendor check-in"""

    HOST = "host"
    CONTRACTOR = "contractor"


class TableOption(BaseModel):
    """A table size a host offers, with its capacity"""

    table_id: str
    size: str
    price: Decimal = Field(ge=0)
    quantity: int = Field(ge=0)
    contractors_per_table: int = Field(ge=1)
    available_quantity: int = Field(ge=0)


class ContractorApplication(BaseModel):
    """A contractor's request to staff an event"""

    application_id: str
    contractor_id: str
    contractor_name: str
    status: ApplicationStatus = ApplicationStatus.PENDING
    applied_at: datetime
    message: str | None = None


class VendorReview(BaseModel):
    """
    Host's review of a vendor after funds release

    Immutable once created. is_rehirable is derived from the rating and
    cannot be set by the caller.
    """

    rating: int = Field(ge=1, le=5)
    comment: str = ""
    tip: Decimal = Field(default=Decimal("0"), ge=0)
    reviewed_at: datetime
    host_response: str | None = None

    model_config = {"frozen": True}

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_rehirable(self) -> bool:
        return self.rating >= 2


class VendorCheckIn(BaseModel):
    """
    Attendance and payout progress of one contractor within an event

    Stages must be confirmed in order: arrival → halfway → end →
    funds released → reviewed. The halfway stipend can only be released
    once the halfway point is confirmed.
    """

    vendor_id: str
    vendor_name: str
    contractor_id: str | None = None
    arrival_confirmed: bool = False
    arrival_time: datetime | None = None
    id_verified: bool = False
    halfway_confirmed: bool = False
    halfway_time: datetime | None = None
    stipend_released: bool = False
    stipend_released_at: datetime | None = None
    end_confirmed: bool = False
    end_time: datetime | None = None
    funds_released: bool = False
    funds_released_at: datetime | None = None
    review: VendorReview | None = None
    notes: str | None = None
    event_photos: list[str] = Field(default_factory=list)
    table_label: str | None = None
    checked_in_by: CheckInActor | None = None


class InventoryItem(BaseModel):
    """One line of shipped materials, as counted by the host"""

    item_id: str
    name: str
    expected_quantity: int = Field(ge=0)
    received_quantity: int = Field(ge=0)
    discrepancy_type: DiscrepancyType | None = None
    discrepancy_explanation: str | None = None
    checked_at: datetime | None = None

    def has_discrepancy(self) -> bool:
        return (
            self.discrepancy_type is not None
            and self.received_quantity != self.expected_quantity
        )


class InventoryDiscrepancy(BaseModel):
    """Mismatched items reported together at one inventory check"""

    discrepancy_id: str
    event_id: str
    items: list[InventoryItem]
    total_discrepancies: int
    reported_at: datetime
    reported_by: str | None = None
    business_owner_notified: bool = False
    resolved: bool = False
    resolved_at: datetime | None = None
    notes: str | None = None


class Event(BaseModel):
    """
    One staffing engagement - the aggregate root of the workflow

    Records are only mutated through WorkflowStateMachine,
    VendorCheckInEngine and InventoryDiscrepancyDetector, always on a copy
    that is persisted as a whole.
    """

    event_id: str
    title: str
    description: str = ""
    location: str = ""
    event_date: str | None = None
    created_at: datetime

    # Ownership
    created_by: ActorRole
    business_owner_id: str | None = None
    event_host_id: str | None = None
    event_host_name: str | None = None
    selected_by_business_id: str | None = None

    # Lifecycle
    status: EventStatus = EventStatus.ACTIVE
    proposal_sent: bool = False
    host_connected: bool = False
    host_connected_at: datetime | None = None
    business_owner_selected: bool = False
    is_public_listing: bool = False
    completed_at: datetime | None = None
    cancelled_at: datetime | None = None
    cancellation_reason: str | None = None

    # Capacity
    contractors_needed: int = Field(default=0, ge=0)
    table_options: list[TableOption] = Field(default_factory=list)
    total_vendor_spaces: int = Field(default=0, ge=0)

    # Compensation
    contractor_pay: Decimal = Field(default=Decimal("0"), ge=0)
    host_supervision_fee: Decimal = Field(default=Decimal("0"), ge=0)
    food_stipend: Decimal | None = None
    travel_stipend: Decimal | None = None
    stipend_release_method: StipendReleaseMethod = StipendReleaseMethod.NOTIFICATION

    # Applications / selection
    contractor_applications: list[ContractorApplication] = Field(default_factory=list)
    selected_contractors: list[str] = Field(default_factory=list)
    contractors_hired_at: datetime | None = None

    # Fulfillment
    materials_sent_at: datetime | None = None
    tracking_number: str | None = None
    materials_description: str | None = None
    payment_received: bool = False
    payment_received_at: datetime | None = None
    payment_confirmation_number: str | None = None
    materials_received: bool = False
    materials_received_at: datetime | None = None

    vendors: list[VendorCheckIn] = Field(default_factory=list)

    inventory_items: list[InventoryItem] = Field(default_factory=list)
    inventory_discrepancies: list[InventoryDiscrepancy] = Field(default_factory=list)

    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    def status_rank(self) -> int:
        return STATUS_RANK[self.status]

    def find_vendor(self, vendor_id: str) -> VendorCheckIn | None:
        return next((v for v in self.vendors if v.vendor_id == vendor_id), None)

    def find_discrepancy(self, discrepancy_id: str) -> InventoryDiscrepancy | None:
        return next(
            (d for d in self.inventory_discrepancies if d.discrepancy_id == discrepancy_id),
            None,
        )

    def application_for(self, contractor_id: str) -> ContractorApplication | None:
        return next(
            (a for a in self.contractor_applications if a.contractor_id == contractor_id),
            None,
        )

    def accepted_contractor_ids(self) -> list[str]:
        return [
            a.contractor_id
            for a in self.contractor_applications
            if a.status == ApplicationStatus.ACCEPTED
        ]

    def business_recipient(self) -> str | None:
        """Business that should hear about fulfillment problems"""
        return self.selected_by_business_id or self.business_owner_id

    def open_discrepancy_count(self) -> int:
        return sum(1 for d in self.inventory_discrepancies if not d.resolved)


# Projection models (for read-side queries)


class EventSummary(SQLModel):
    """
    Lightweight event summary for lists and dashboards

    Contains just enough to render a row without loading vendors,
    applications or inventory.
    """

    event_id: str
    title: str
    status: EventStatus
    created_by: ActorRole
    host_connected: bool = False
    vendor_count: int = 0
    open_discrepancies: int = 0
    event_date: str | None = None
