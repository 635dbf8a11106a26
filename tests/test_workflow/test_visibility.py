"""
Tests for role-scoped event listings
"""

from gigflow import GigFlow
from gigflow.workflow.models import ActorRole, EventStatus
from gigflow.workflow.projections import region_of, summarize

from tests.helpers import connect_host, create_business_event, staff_event


def ids(events) -> list[str]:
    return [e.event_id for e in events]


class TestVisibleEvents:
    def test_business_sees_own_events_including_drafts(self, gf: GigFlow) -> None:
        own = create_business_event(gf)
        draft = create_business_event(gf, title="Autumn Fair", as_draft=True)
        create_business_event(gf, title="Rival Market", business_id="biz-2")

        assert ids(gf.visible_events(ActorRole.BUSINESS, "biz-1")) == [
            own.event_id,
            draft.event_id,
        ]

    def test_business_sees_open_host_offers(self, gf: GigFlow) -> None:
        offer = gf.create_event("Table Day", created_by="host", actor_id="host-7")
        taken = gf.create_event("Craft Night", created_by="host", actor_id="host-7")
        gf.select_business(taken.event_id, "biz-2")

        assert ids(gf.visible_events("business", "biz-1")) == [offer.event_id]
        assert ids(gf.visible_events("business", "biz-2")) == [
            offer.event_id,
            taken.event_id,
        ]

    def test_host_sees_proposals_waiting_for_a_host(self, gf: GigFlow) -> None:
        proposed = create_business_event(gf)
        gf.send_proposal(proposed.event_id)
        create_business_event(gf, title="Unproposed")
        taken = create_business_event(gf, title="Taken")
        connect_host(gf, taken.event_id, "host-2")

        assert ids(gf.visible_events(ActorRole.HOST, "host-1")) == [proposed.event_id]
        assert ids(gf.visible_events(ActorRole.HOST, "host-2")) == [
            proposed.event_id,
            taken.event_id,
        ]

    def test_host_does_not_see_other_hosts_drafts(self, gf: GigFlow) -> None:
        gf.create_event("Private", created_by="host", actor_id="host-7", as_draft=True)

        assert gf.visible_events(ActorRole.HOST, "host-8") == []
        assert len(gf.visible_events(ActorRole.HOST, "host-7")) == 1

    def test_contractor_only_sees_connected_events(self, gf: GigFlow) -> None:
        waiting = create_business_event(gf)
        gf.send_proposal(waiting.event_id)
        connected = create_business_event(gf, title="Connected")
        connect_host(gf, connected.event_id)

        assert ids(gf.visible_events(ActorRole.CONTRACTOR, "con-1")) == [connected.event_id]

    def test_contractor_keeps_seeing_events_they_applied_to(self, gf: GigFlow) -> None:
        event = create_business_event(gf)
        staff_event(gf, event.event_id, {"con-1": "Casey"})
        gf.cancel_event(event.event_id, "rain")

        assert ids(gf.visible_events(ActorRole.CONTRACTOR, "con-1")) == [event.event_id]
        assert gf.visible_events(ActorRole.CONTRACTOR, "con-9") == []

    def test_cancelled_and_completed_are_not_open(self, gf: GigFlow) -> None:
        offer = gf.create_event("Table Day", created_by="host", actor_id="host-7")
        gf.cancel_event(offer.event_id, "venue sold")

        assert gf.visible_events(ActorRole.BUSINESS, "biz-1") == []


class TestListings:
    def test_public_listings(self, gf: GigFlow) -> None:
        listed = create_business_event(gf)
        connect_host(gf, listed.event_id)
        hired = create_business_event(gf, title="Hired")
        staff_event(gf, hired.event_id, {"con-1": "Casey"})
        create_business_event(gf, title="No host")

        assert ids(gf.public_listings()) == [listed.event_id]

    def test_awaiting_host(self, gf: GigFlow) -> None:
        proposed = create_business_event(gf)
        gf.send_proposal(proposed.event_id)
        create_business_event(gf, title="Unproposed")

        assert ids(gf.events_awaiting_host()) == [proposed.event_id]

    def test_awaiting_contractor_selection(self, gf: GigFlow) -> None:
        event = create_business_event(gf)
        connect_host(gf, event.event_id)
        gf.submit_application(event.event_id, "con-1", "Casey")
        staffed = create_business_event(gf, title="Staffed")
        staff_event(gf, staffed.event_id, {"con-2": "Robin"})

        assert ids(gf.events_awaiting_contractor_selection("biz-1")) == [event.event_id]
        assert gf.events_awaiting_contractor_selection("biz-2") == []


class TestSummary:
    def test_summary_counts(self, gf: GigFlow) -> None:
        event = create_business_event(gf, event_date="2025-06-21")
        hired = staff_event(gf, event.event_id, {"con-1": "Casey", "con-2": "Robin"})

        summary = summarize(hired)

        assert summary.event_id == event.event_id
        assert summary.status == EventStatus.CONTRACTORS_HIRED
        assert summary.host_connected is True
        assert summary.vendor_count == 2
        assert summary.open_discrepancies == 0
        assert summary.event_date == "2025-06-21"

    def test_list_summaries_in_creation_order(self, gf: GigFlow, test_time) -> None:
        first = create_business_event(gf, title="First")
        test_time.advance_minutes(5)
        second = create_business_event(gf, title="Second")

        assert [s.event_id for s in gf.list_summaries()] == [first.event_id, second.event_id]


class TestDateAndRegion:
    def test_by_date_then_title(self, gf: GigFlow) -> None:
        late = create_business_event(gf, title="Autumn Fair", event_date="2025-10-04")
        undated = create_business_event(gf, title="Someday Sale")
        soon_b = create_business_event(gf, title="Night Market", event_date="2025-06-21")
        soon_a = create_business_event(gf, title="Craft Day", event_date="2025-06-21")

        assert ids(gf.events_by_date()) == [
            soon_a.event_id,
            soon_b.event_id,
            late.event_id,
            undated.event_id,
        ]

    def test_region_filter(self, gf: GigFlow) -> None:
        austin = create_business_event(gf, location="Pier 4, Austin, TX", event_date="2025-07-01")
        dallas = create_business_event(gf, location="Fair Park, Dallas, TX", event_date="2025-06-01")
        create_business_event(gf, location="Union Square, San Francisco, CA")
        create_business_event(gf)

        assert ids(gf.events_by_date("TX")) == [dallas.event_id, austin.event_id]
        assert len(gf.events_by_date()) == 4
        assert gf.available_regions() == ["CA", "TX", "Unknown"]

    def test_region_of_location_without_commas(self, gf: GigFlow) -> None:
        event = create_business_event(gf, location="Harbor Hall")

        assert region_of(event) == "Harbor Hall"
