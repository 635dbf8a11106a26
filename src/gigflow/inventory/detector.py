"""
Inventory Discrepancy Detector - Shipped versus received materials

The host counts the business's materials on arrival. Any line marked
with a discrepancy type whose received count differs from the expected
count is a discrepancy; all such lines from one count are reported
together and escalated to the business as an urgent notice.

Fun fact: Warehouses call this "cycle counting" - reconciling a small
slice of stock at a time instead of shutting down for a full audit.
"""

from collections.abc import Iterable
from datetime import datetime
from typing import Any

from gigflow.inventory.events import (
    InventoryDiscrepancyReported,
    InventoryDiscrepancyResolved,
    InventoryItemRecorded,
)
from gigflow.kernel.bus import EventBus
from gigflow.kernel.errors import DiscrepancyNotFound, InventoryItemNotFound
from gigflow.kernel.events import DomainEvent
from gigflow.kernel.ids import IdFactory, default_id_factory
from gigflow.kernel.locks import EventLockRegistry
from gigflow.kernel.logging import LogOperation, get_logger
from gigflow.kernel.metrics import inventory_discrepancies_total
from gigflow.kernel.time import TimeProvider
from gigflow.workflow.models import (
    DiscrepancyType,
    Event,
    InventoryDiscrepancy,
    InventoryItem,
)
from gigflow.workflow.repository import EventRepository

logger = get_logger(__name__)


def detect(items: Iterable[InventoryItem]) -> list[InventoryItem]:
    """Lines flagged with a discrepancy type whose counts don't match"""
    return [item for item in items if item.has_discrepancy()]


class InventoryDiscrepancyDetector:
    """Records inventory counts and escalates mismatches"""

    def __init__(
        self,
        repository: EventRepository,
        bus: EventBus,
        locks: EventLockRegistry,
        time_provider: TimeProvider,
        id_factory: IdFactory = default_id_factory,
    ) -> None:
        self.repository = repository
        self.bus = bus
        self.locks = locks
        self.time_provider = time_provider
        self.id_factory = id_factory

    detect = staticmethod(detect)

    def report(
        self,
        event_id: str,
        items: list[InventoryItem],
        notes: str | None = None,
        reported_by: str | None = None,
    ) -> InventoryDiscrepancy | None:
        """
        Record an inventory count and report its discrepancies

        Args:
            event_id: Event whose materials were counted
            items: The full count, matching lines included
            notes: Free-text remarks from the host
            reported_by: Who counted

        Returns:
            The new discrepancy, or None when every line matches (in which
            case the event is left untouched)

        Raises:
            EventNotFound: If the event doesn't exist
        """
        mismatched = detect(items)
        if not mismatched:
            logger.info("Inventory count matches shipment", event_id=event_id)
            return None

        with LogOperation(logger, "report_inventory_discrepancy", event_id=event_id, notes=notes):
            with self.locks.hold(event_id):
                event = self.repository.get(event_id)
                now = self.time_provider.now()
                recipient = event.business_recipient()

                discrepancy = InventoryDiscrepancy(
                    discrepancy_id=self.id_factory.generate(),
                    event_id=event_id,
                    items=[item.model_copy(deep=True) for item in mismatched],
                    total_discrepancies=len(mismatched),
                    reported_at=now,
                    reported_by=reported_by,
                    business_owner_notified=recipient is not None,
                    notes=notes,
                )
                event.inventory_discrepancies.append(discrepancy)
                event.inventory_items = [item.model_copy(deep=True) for item in items]
                self.repository.save(event)

                if recipient is not None:
                    self.bus.publish(
                        self._fact(
                            InventoryDiscrepancyReported,
                            event,
                            now,
                            reported_by,
                            discrepancy_id=discrepancy.discrepancy_id,
                            title=event.title,
                            business_id=recipient,
                            total_discrepancies=discrepancy.total_discrepancies,
                            discrepancy_types=_distinct_types(mismatched),
                            reported_by=reported_by,
                        )
                    )
                else:
                    logger.warning(
                        "Inventory discrepancy has no business to notify",
                        event_id=event_id,
                        discrepancy_id=discrepancy.discrepancy_id,
                    )

        inventory_discrepancies_total.labels(notified=str(recipient is not None).lower()).inc()
        return discrepancy

    def resolve(
        self,
        event_id: str,
        discrepancy_id: str,
        notes: str | None = None,
        actor_id: str | None = None,
    ) -> InventoryDiscrepancy:
        """
        Mark a discrepancy resolved

        Raises:
            EventNotFound: If the event doesn't exist
            DiscrepancyNotFound: If the discrepancy is not on the event
        """
        with LogOperation(logger, "resolve_inventory_discrepancy", event_id=event_id, discrepancy_id=discrepancy_id):
            with self.locks.hold(event_id):
                event = self.repository.get(event_id)
                discrepancy = event.find_discrepancy(discrepancy_id)
                if discrepancy is None:
                    raise DiscrepancyNotFound(event_id, discrepancy_id)

                now = self.time_provider.now()
                discrepancy.resolved = True
                discrepancy.resolved_at = now
                if notes is not None:
                    discrepancy.notes = notes
                self.repository.save(event)
                self.bus.publish(
                    self._fact(
                        InventoryDiscrepancyResolved,
                        event,
                        now,
                        actor_id,
                        discrepancy_id=discrepancy_id,
                    )
                )
                return discrepancy.model_copy(deep=True)

    def add_inventory_item(
        self,
        event_id: str,
        name: str,
        expected_quantity: int,
        actor_id: str | None = None,
    ) -> InventoryItem:
        """Add a line to the event's expected materials"""
        with self.locks.hold(event_id):
            event = self.repository.get(event_id)
            now = self.time_provider.now()
            item = InventoryItem(
                item_id=self.id_factory.generate(),
                name=name,
                expected_quantity=expected_quantity,
                received_quantity=0,
            )
            event.inventory_items.append(item)
            self.repository.save(event)
            self.bus.publish(
                self._fact(
                    InventoryItemRecorded, event, now, actor_id, item_id=item.item_id, name=name
                )
            )
        return item.model_copy(deep=True)

    def update_inventory_item(
        self,
        event_id: str,
        item_id: str,
        received_quantity: int,
        discrepancy_type: DiscrepancyType | None = None,
        discrepancy_explanation: str | None = None,
        actor_id: str | None = None,
    ) -> InventoryItem:
        """
        Record the host's count for one line

        Raises:
            InventoryItemNotFound: If the line is not on the event
        """
        with self.locks.hold(event_id):
            event = self.repository.get(event_id)
            item = next((i for i in event.inventory_items if i.item_id == item_id), None)
            if item is None:
                raise InventoryItemNotFound(event_id, item_id)

            now = self.time_provider.now()
            updated = InventoryItem.model_validate(
                {
                    **item.model_dump(),
                    "received_quantity": received_quantity,
                    "discrepancy_type": discrepancy_type,
                    "discrepancy_explanation": discrepancy_explanation,
                    "checked_at": now,
                }
            )
            event.inventory_items = [
                updated if i.item_id == item_id else i for i in event.inventory_items
            ]
            self.repository.save(event)
            self.bus.publish(
                self._fact(
                    InventoryItemRecorded, event, now, actor_id, item_id=item_id, name=updated.name
                )
            )
        return updated.model_copy(deep=True)

    def _fact(
        self,
        fact_type: type[DomainEvent],
        event: Event,
        now: datetime,
        actor_id: str | None,
        **fields: Any,
    ) -> DomainEvent:
        return fact_type(
            event_id=self.id_factory.generate(),
            stream_id=event.event_id,
            occurred_at=now,
            actor_id=actor_id,
            **fields,
        )


def _distinct_types(items: list[InventoryItem]) -> list[DiscrepancyType]:
    seen: list[DiscrepancyType] = []
    for item in items:
        if item.discrepancy_type is not None and item.discrepancy_type not in seen:
            seen.append(item.discrepancy_type)
    return seen
