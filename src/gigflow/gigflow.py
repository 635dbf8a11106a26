"""
GigFlow - Main facade class

This is the primary interface to the gig-event workflow engine. It wires
the repository, the event bus, the engines and their subscribers around
one SQLite file and exposes every operation as a plain method.

Example:
    >>> from gigflow import GigFlow
    >>> gf = GigFlow("gigflow.db")
    >>> event = gf.create_event("Spring Market", created_by="business", actor_id="biz-1")
    >>> gf.send_proposal(event.event_id, actor_id="biz-1")
    >>> gf.connect_host(event.event_id, "host-1")
    >>> gf.submit_application(event.event_id, "con-1", "Casey")
    >>> gf.select_contractors(event.event_id, ["con-1"], actor_id="biz-1")
"""

from decimal import Decimal
from pathlib import Path
from typing import Any

from pydantic import BaseModel

from gigflow.checkin.commands import ReviewSubmission, VendorPatch
from gigflow.checkin.engine import VendorCheckInEngine
from gigflow.inventory.detector import InventoryDiscrepancyDetector
from gigflow.kernel.bus import EventBus
from gigflow.kernel.ids import IdFactory, default_id_factory
from gigflow.kernel.locks import EventLockRegistry
from gigflow.kernel.logging import get_logger
from gigflow.kernel.policy import WorkflowPolicy
from gigflow.kernel.time import RealTimeProvider, TimeProvider
from gigflow.notifications.dispatcher import (
    LoggingNotificationDispatcher,
    NotificationDispatcher,
)
from gigflow.notifications.router import NotificationRouter
from gigflow.offline.models import QueuedAction, ReplayError
from gigflow.offline.queue import Connectivity, OfflineActionQueue, SQLiteActionStore
from gigflow.suspension.contractors import ContractorProfile, SQLiteContractorRegistry
from gigflow.suspension.policy import SuspensionPolicy
from gigflow.workflow import projections
from gigflow.workflow.commands import (
    CancelEvent,
    CompleteEvent,
    ConnectHost,
    CreateEvent,
    MarkMaterialsReceived,
    MarkPaymentReceived,
    PublishEvent,
    SelectBusiness,
    SelectContractors,
    SendMaterials,
    SendProposal,
    SubmitApplication,
)
from gigflow.workflow.models import (
    ActorRole,
    DiscrepancyType,
    Event,
    EventSummary,
    InventoryDiscrepancy,
    InventoryItem,
    VendorCheckIn,
    VendorReview,
)
from gigflow.workflow.repository import SQLiteEventRepository
from gigflow.workflow.state_machine import WorkflowStateMachine

logger = get_logger(__name__)


class GigFlow:
    """
    Gig-event workflow facade

    Provides a unified API for:
    - Event lifecycle (proposal, host connection, staffing, fulfillment)
    - Vendor check-in, funds release and reviews
    - Offline queueing and replay of check-ins
    - Inventory counts and discrepancy escalation
    - Role-scoped event listings
    """

    def __init__(
        self,
        sqlite_path: str | Path,
        policy: WorkflowPolicy | None = None,
        time_provider: TimeProvider | None = None,
        dispatcher: NotificationDispatcher | None = None,
        connectivity: Connectivity | None = None,
        id_factory: IdFactory | None = None,
    ) -> None:
        """
        Initialize the engine

        Args:
            sqlite_path: Path to SQLite database
            policy: Workflow policy (uses defaults if None)
            time_provider: Time provider (uses real time if None)
            dispatcher: Notification dispatcher (logs notifications if None)
            connectivity: Online/offline signal (starts online if None)
            id_factory: Id generator (UUIDv7-like if None)
        """
        self.sqlite_path = Path(sqlite_path)
        self.policy = policy or WorkflowPolicy()
        self.time_provider = time_provider or RealTimeProvider()
        self.dispatcher = dispatcher or LoggingNotificationDispatcher()
        self.connectivity = connectivity or Connectivity(online=True)
        self.id_factory = id_factory or default_id_factory

        # Infrastructure
        self.repository = SQLiteEventRepository(self.sqlite_path)
        self.contractors = SQLiteContractorRegistry(self.sqlite_path)
        self.queue = OfflineActionQueue(SQLiteActionStore(self.sqlite_path))
        self.bus = EventBus()
        self.locks = EventLockRegistry()

        # Engines
        self.workflow = WorkflowStateMachine(
            self.repository,
            self.bus,
            self.locks,
            self.time_provider,
            self.policy,
            self.id_factory,
        )
        self.checkin = VendorCheckInEngine(
            self.repository,
            self.bus,
            self.locks,
            self.time_provider,
            self.queue,
            self.connectivity,
            self.id_factory,
        )
        self.inventory = InventoryDiscrepancyDetector(
            self.repository, self.bus, self.locks, self.time_provider, self.id_factory
        )

        # Subscribers
        self.suspension = SuspensionPolicy(
            self.contractors, self.bus, self.time_provider, self.policy, self.id_factory
        )
        self.suspension.subscribe()
        self.router = NotificationRouter(
            self.bus, self.dispatcher, self.policy, self.time_provider, self.id_factory
        )
        self.router.subscribe()

        self.last_replay_errors: list[ReplayError] = []
        self.connectivity.on_online(self.replay_offline_actions)

        # Actions queued by an earlier process go before any new update
        if self.connectivity.is_online and len(self.queue):
            logger.info("Replaying actions left by an earlier session", queued=len(self.queue))
            self.replay_offline_actions()

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def create_event(
        self,
        title: str,
        created_by: ActorRole | str,
        actor_id: str | None = None,
        **fields: Any,
    ) -> Event:
        """
        Create a new event

        Args:
            title: Event title
            created_by: "business" or "host"
            actor_id: Creator; becomes the business owner or host
            **fields: Any other CreateEvent field (location, table_options,
                contractor_pay, as_draft, ...)
        """
        command = CreateEvent(title=title, created_by=created_by, **fields)
        return self.workflow.create_event(command, actor_id)

    def get_event(self, event_id: str) -> Event:
        return self.repository.get(event_id)

    def list_events(self) -> list[Event]:
        return sorted(self.repository.list_all(), key=lambda e: e.created_at)

    def list_summaries(self) -> list[EventSummary]:
        return [projections.summarize(e) for e in self.list_events()]

    def transition(
        self,
        event_id: str,
        action: BaseModel | str,
        payload: dict[str, Any] | None = None,
        actor_id: str | None = None,
    ) -> Event:
        return self.workflow.transition(event_id, action, payload, actor_id)

    def publish_event(self, event_id: str, actor_id: str | None = None) -> Event:
        return self.workflow.transition(event_id, PublishEvent(), actor_id=actor_id)

    def send_proposal(self, event_id: str, actor_id: str | None = None) -> Event:
        return self.workflow.transition(event_id, SendProposal(), actor_id=actor_id)

    def connect_host(
        self, event_id: str, host_id: str, host_name: str | None = None
    ) -> Event:
        return self.workflow.transition(
            event_id, ConnectHost(host_id=host_id, host_name=host_name), actor_id=host_id
        )

    def select_business(
        self, event_id: str, business_id: str, actor_id: str | None = None
    ) -> Event:
        return self.workflow.transition(
            event_id, SelectBusiness(business_id=business_id), actor_id=actor_id
        )

    def submit_application(
        self,
        event_id: str,
        contractor_id: str,
        contractor_name: str,
        message: str | None = None,
    ) -> Event:
        command = SubmitApplication(
            contractor_id=contractor_id, contractor_name=contractor_name, message=message
        )
        return self.workflow.transition(event_id, command, actor_id=contractor_id)

    def select_contractors(
        self, event_id: str, contractor_ids: list[str], actor_id: str | None = None
    ) -> Event:
        return self.workflow.transition(
            event_id, SelectContractors(contractor_ids=contractor_ids), actor_id=actor_id
        )

    def send_materials(
        self,
        event_id: str,
        tracking_number: str,
        description: str | None = None,
        actor_id: str | None = None,
    ) -> Event:
        command = SendMaterials(tracking_number=tracking_number, description=description)
        return self.workflow.transition(event_id, command, actor_id=actor_id)

    def mark_payment_received(
        self,
        event_id: str,
        confirmation_number: str | None = None,
        actor_id: str | None = None,
    ) -> Event:
        command = MarkPaymentReceived(confirmation_number=confirmation_number)
        return self.workflow.transition(event_id, command, actor_id=actor_id)

    def mark_materials_received(self, event_id: str, actor_id: str | None = None) -> Event:
        return self.workflow.transition(event_id, MarkMaterialsReceived(), actor_id=actor_id)

    def complete_event(self, event_id: str, actor_id: str | None = None) -> Event:
        return self.workflow.transition(event_id, CompleteEvent(), actor_id=actor_id)

    def cancel_event(self, event_id: str, reason: str, actor_id: str | None = None) -> Event:
        return self.workflow.transition(event_id, CancelEvent(reason=reason), actor_id=actor_id)

    def delete_event(self, event_id: str, actor_id: str | None = None) -> None:
        self.workflow.delete_event(event_id, actor_id)

    # ------------------------------------------------------------------
    # Vendors
    # ------------------------------------------------------------------

    def update_vendor(
        self,
        event_id: str,
        vendor_id: str,
        patch: VendorPatch | dict[str, Any],
        actor_id: str | None = None,
    ) -> VendorCheckIn | QueuedAction:
        return self.checkin.update_vendor(event_id, vendor_id, patch, actor_id)

    def add_vendor(
        self,
        event_id: str,
        vendor_name: str,
        contractor_id: str | None = None,
        actor_id: str | None = None,
    ) -> VendorCheckIn:
        return self.checkin.add_vendor(event_id, vendor_name, contractor_id, actor_id)

    def release_funds(
        self, event_id: str, vendor_id: str, actor_id: str | None = None
    ) -> VendorCheckIn:
        return self.checkin.release_funds(event_id, vendor_id, actor_id)

    def release_stipend(
        self, event_id: str, vendor_id: str, actor_id: str | None = None
    ) -> VendorCheckIn:
        return self.checkin.release_stipend(event_id, vendor_id, actor_id)

    def submit_review(
        self,
        event_id: str,
        vendor_id: str,
        rating: int,
        comment: str = "",
        tip: Decimal | int | str = Decimal("0"),
        host_response: str | None = None,
        actor_id: str | None = None,
    ) -> VendorReview:
        review = ReviewSubmission(
            rating=rating, comment=comment, tip=tip, host_response=host_response
        )
        return self.checkin.submit_review(event_id, vendor_id, review, actor_id)

    # ------------------------------------------------------------------
    # Connectivity and offline queue
    # ------------------------------------------------------------------

    def go_offline(self) -> None:
        self.connectivity.set_online(False)

    def go_online(self) -> list[ReplayError]:
        """
        Flip to online; queued check-ins are replayed right away

        Returns:
            Errors of the replay pass, empty when already online
        """
        self.last_replay_errors = []
        self.connectivity.set_online(True)
        return self.last_replay_errors

    def replay_offline_actions(self) -> list[ReplayError]:
        errors = self.checkin.drain_queue()
        self.last_replay_errors = errors
        return errors

    def pending_actions(self) -> list[QueuedAction]:
        return self.queue.pending()

    # ------------------------------------------------------------------
    # Contractors
    # ------------------------------------------------------------------

    def contractor_profile(self, contractor_id: str) -> ContractorProfile:
        return self.contractors.get_profile(contractor_id)

    def suspended_contractors(self) -> list[ContractorProfile]:
        return self.contractors.list_suspended()

    # ------------------------------------------------------------------
    # Inventory
    # ------------------------------------------------------------------

    def add_inventory_item(
        self,
        event_id: str,
        name: str,
        expected_quantity: int,
        actor_id: str | None = None,
    ) -> InventoryItem:
        return self.inventory.add_inventory_item(event_id, name, expected_quantity, actor_id)

    def update_inventory_item(
        self,
        event_id: str,
        item_id: str,
        received_quantity: int,
        discrepancy_type: DiscrepancyType | str | None = None,
        discrepancy_explanation: str | None = None,
        actor_id: str | None = None,
    ) -> InventoryItem:
        return self.inventory.update_inventory_item(
            event_id,
            item_id,
            received_quantity,
            DiscrepancyType(discrepancy_type) if discrepancy_type else None,
            discrepancy_explanation,
            actor_id,
        )

    def report_inventory_discrepancy(
        self,
        event_id: str,
        items: list[InventoryItem] | None = None,
        notes: str | None = None,
        reported_by: str | None = None,
    ) -> InventoryDiscrepancy | None:
        """
        Report the event's inventory count

        Args:
            items: The count to report (defaults to the event's current
                inventory items)
        """
        if items is None:
            items = self.repository.get(event_id).inventory_items
        return self.inventory.report(event_id, items, notes, reported_by)

    def resolve_inventory_discrepancy(
        self,
        event_id: str,
        discrepancy_id: str,
        notes: str | None = None,
        actor_id: str | None = None,
    ) -> InventoryDiscrepancy:
        return self.inventory.resolve(event_id, discrepancy_id, notes, actor_id)

    # ------------------------------------------------------------------
    # Listings
    # ------------------------------------------------------------------

    def visible_events(self, actor_role: ActorRole | str, actor_id: str) -> list[Event]:
        return projections.visible_events(
            self.repository.list_all(), ActorRole(actor_role), actor_id
        )

    def public_listings(self) -> list[Event]:
        return projections.public_listings(self.list_events())

    def events_awaiting_host(self) -> list[Event]:
        return projections.events_awaiting_host(self.list_events())

    def events_awaiting_contractor_selection(self, business_id: str) -> list[Event]:
        return projections.events_awaiting_contractor_selection(
            self.list_events(), business_id
        )

    def events_by_date(self, region: str | None = None) -> list[Event]:
        """Events by event date then title, optionally within one region"""
        return projections.sort_by_date(
            projections.events_in_region(self.list_events(), region)
        )

    def available_regions(self) -> list[str]:
        return projections.available_regions(self.repository.list_all())

    def get_policy(self) -> WorkflowPolicy:
        return self.policy
