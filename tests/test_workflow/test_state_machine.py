"""
Tests for the event lifecycle state machine

Every guard is exercised twice: once on the happy path, once showing that
a rejected action leaves the stored event exactly as it was.
"""

import pytest
from pydantic import ValidationError

from gigflow import GigFlow
from gigflow.kernel.errors import EventNotFound, PreconditionFailed
from gigflow.workflow.commands import ConnectHost, CreateEvent
from gigflow.workflow.models import ApplicationStatus, Event, EventStatus

from tests.helpers import connect_host, create_business_event, staff_event


class TestCreation:
    def test_business_event_starts_active(self, gf: GigFlow, test_time) -> None:
        event = create_business_event(gf)

        assert event.status == EventStatus.ACTIVE
        assert event.proposal_sent is False
        assert event.host_connected is False
        assert event.business_owner_id == "biz-1"
        assert event.created_at == test_time.now()

    def test_draft_event_must_be_published(self, gf: GigFlow) -> None:
        event = create_business_event(gf, as_draft=True)
        assert event.status == EventStatus.DRAFT

        published = gf.publish_event(event.event_id)
        assert published.status == EventStatus.ACTIVE

        with pytest.raises(PreconditionFailed):
            gf.publish_event(event.event_id)

    def test_host_event_starts_with_host_connected(self, gf: GigFlow) -> None:
        event = gf.create_event("Table Day", created_by="host", actor_id="host-7")

        assert event.event_host_id == "host-7"
        assert event.host_connected is True
        assert event.business_owner_id is None

    def test_vendor_spaces_from_table_options(self, gf: GigFlow) -> None:
        event = gf.create_event(
            "Table Day",
            created_by="host",
            actor_id="host-7",
            table_options=[
                {
                    "table_id": "t-6ft",
                    "size": "6ft",
                    "price": "40",
                    "quantity": 3,
                    "contractors_per_table": 2,
                    "available_quantity": 3,
                },
                {
                    "table_id": "t-8ft",
                    "size": "8ft",
                    "price": "55",
                    "quantity": 1,
                    "contractors_per_table": 3,
                    "available_quantity": 1,
                },
            ],
        )
        assert event.total_vendor_spaces == 9

    def test_blank_title_rejected(self) -> None:
        with pytest.raises(ValidationError):
            CreateEvent(title="", created_by="business")

    def test_event_survives_restart(self, gf: GigFlow, temp_db, test_time) -> None:
        event = create_business_event(gf)
        gf.send_proposal(event.event_id)

        reopened = GigFlow(temp_db, time_provider=test_time)
        loaded = reopened.get_event(event.event_id)

        assert loaded.title == "Spring Market"
        assert loaded.proposal_sent is True


class TestProposalAndHost:
    def test_send_proposal_once(self, gf: GigFlow) -> None:
        event = create_business_event(gf)

        updated = gf.send_proposal(event.event_id)
        assert updated.proposal_sent is True

        with pytest.raises(PreconditionFailed):
            gf.send_proposal(event.event_id)

    def test_host_events_cannot_be_proposed(self, gf: GigFlow) -> None:
        event = gf.create_event("Table Day", created_by="host", actor_id="host-7")

        with pytest.raises(PreconditionFailed):
            gf.send_proposal(event.event_id)

    def test_connect_host(self, gf: GigFlow, test_time) -> None:
        event = create_business_event(gf)
        test_time.advance_hours(2)

        connected = connect_host(gf, event.event_id, "host-1")

        assert connected.status == EventStatus.HOST_CONNECTED
        assert connected.event_host_id == "host-1"
        assert connected.event_host_name == "Harbor Hall"
        assert connected.host_connected is True
        assert connected.host_connected_at == test_time.now()
        assert connected.is_public_listing is True

    def test_connect_host_twice_keeps_first_host(self, gf: GigFlow) -> None:
        event = create_business_event(gf)
        connect_host(gf, event.event_id, "host-1")

        with pytest.raises(PreconditionFailed):
            gf.connect_host(event.event_id, "host-2")

        stored = gf.get_event(event.event_id)
        assert stored.event_host_id == "host-1"
        assert stored.event_host_name == "Harbor Hall"

    def test_connect_host_only_for_business_events(self, gf: GigFlow) -> None:
        event = gf.create_event("Table Day", created_by="host", actor_id="host-7")

        with pytest.raises(PreconditionFailed):
            gf.connect_host(event.event_id, "host-8")

    def test_select_business_once(self, gf: GigFlow) -> None:
        event = gf.create_event("Table Day", created_by="host", actor_id="host-7")

        updated = gf.select_business(event.event_id, "biz-9")
        assert updated.selected_by_business_id == "biz-9"
        assert updated.business_owner_selected is True

        with pytest.raises(PreconditionFailed):
            gf.select_business(event.event_id, "biz-10")
        assert gf.get_event(event.event_id).selected_by_business_id == "biz-9"

    def test_select_business_only_for_host_events(self, gf: GigFlow) -> None:
        event = create_business_event(gf)

        with pytest.raises(PreconditionFailed):
            gf.select_business(event.event_id, "biz-9")


class TestApplications:
    def test_apply_requires_connected_host(self, gf: GigFlow) -> None:
        event = create_business_event(gf)

        with pytest.raises(PreconditionFailed):
            gf.submit_application(event.event_id, "con-1", "Casey")
        assert gf.get_event(event.event_id).contractor_applications == []

    def test_application_is_pending(self, gf: GigFlow, test_time) -> None:
        event = create_business_event(gf)
        connect_host(gf, event.event_id)

        updated = gf.submit_application(event.event_id, "con-1", "Casey", "I have my own tent")

        [application] = updated.contractor_applications
        assert application.contractor_id == "con-1"
        assert application.contractor_name == "Casey"
        assert application.status == ApplicationStatus.PENDING
        assert application.applied_at == test_time.now()
        assert application.message == "I have my own tent"

    def test_second_application_rejected(self, gf: GigFlow) -> None:
        event = create_business_event(gf)
        connect_host(gf, event.event_id)
        gf.submit_application(event.event_id, "con-1", "Casey")

        with pytest.raises(PreconditionFailed):
            gf.submit_application(event.event_id, "con-1", "Casey")
        assert len(gf.get_event(event.event_id).contractor_applications) == 1


class TestContractorSelection:
    def test_selection_builds_fresh_vendors(self, hired_event: Event, test_time) -> None:
        assert hired_event.status == EventStatus.CONTRACTORS_HIRED
        assert hired_event.selected_contractors == ["con-1", "con-2"]
        assert hired_event.contractors_hired_at == test_time.now()

        assert len(hired_event.vendors) == 2
        assert {v.vendor_name for v in hired_event.vendors} == {"Casey", "Robin"}
        for vendor in hired_event.vendors:
            assert vendor.arrival_confirmed is False
            assert vendor.halfway_confirmed is False
            assert vendor.end_confirmed is False
            assert vendor.funds_released is False
            assert vendor.review is None

    def test_unselected_applicants_are_rejected(self, gf: GigFlow) -> None:
        event = create_business_event(gf)
        connect_host(gf, event.event_id)
        for contractor_id in ("con-1", "con-2", "con-3"):
            gf.submit_application(event.event_id, contractor_id, contractor_id.upper())

        updated = gf.select_contractors(event.event_id, ["con-3", "con-1"])

        statuses = {a.contractor_id: a.status for a in updated.contractor_applications}
        assert statuses == {
            "con-1": ApplicationStatus.ACCEPTED,
            "con-2": ApplicationStatus.REJECTED,
            "con-3": ApplicationStatus.ACCEPTED,
        }
        assert len(updated.selected_contractors) == len(updated.accepted_contractor_ids())
        assert [v.contractor_id for v in updated.vendors] == ["con-3", "con-1"]

    def test_reselection_replaces_vendors(self, gf: GigFlow, hired_event: Event) -> None:
        event_id = hired_event.event_id
        gf.update_vendor(event_id, hired_event.vendors[1].vendor_id, {"arrival_confirmed": True})

        updated = gf.select_contractors(event_id, ["con-2"])

        [vendor] = updated.vendors
        assert vendor.contractor_id == "con-2"
        assert vendor.arrival_confirmed is False
        assert updated.selected_contractors == ["con-2"]
        assert updated.application_for("con-1").status == ApplicationStatus.REJECTED

    def test_selecting_non_applicant_changes_nothing(self, gf: GigFlow) -> None:
        event = create_business_event(gf)
        connect_host(gf, event.event_id)
        gf.submit_application(event.event_id, "con-1", "Casey")

        with pytest.raises(PreconditionFailed):
            gf.select_contractors(event.event_id, ["con-1", "con-404"])

        stored = gf.get_event(event.event_id)
        assert stored.status == EventStatus.HOST_CONNECTED
        assert stored.vendors == []
        assert stored.selected_contractors == []
        assert stored.contractor_applications[0].status == ApplicationStatus.PENDING

    def test_duplicate_ids_rejected(self, gf: GigFlow) -> None:
        event = create_business_event(gf)
        connect_host(gf, event.event_id)
        gf.submit_application(event.event_id, "con-1", "Casey")

        with pytest.raises(PreconditionFailed):
            gf.select_contractors(event.event_id, ["con-1", "con-1"])

    def test_empty_selection_is_invalid_input(self, gf: GigFlow) -> None:
        event = create_business_event(gf)
        connect_host(gf, event.event_id)

        with pytest.raises(ValidationError):
            gf.select_contractors(event.event_id, [])

    def test_selection_requires_connected_host(self, gf: GigFlow) -> None:
        event = create_business_event(gf)

        with pytest.raises(PreconditionFailed):
            gf.select_contractors(event.event_id, ["con-1"])


class TestFulfillment:
    def test_send_materials_before_hiring_rejected(self, gf: GigFlow) -> None:
        event = create_business_event(gf)
        connect_host(gf, event.event_id)

        with pytest.raises(PreconditionFailed):
            gf.send_materials(event.event_id, "1Z999")
        assert gf.get_event(event.event_id).tracking_number is None

    def test_send_materials(self, gf: GigFlow, hired_event: Event, test_time) -> None:
        updated = gf.send_materials(hired_event.event_id, "1Z999", "2 banners, 1 tent")

        assert updated.status == EventStatus.MATERIALS_SENT
        assert updated.tracking_number == "1Z999"
        assert updated.materials_description == "2 banners, 1 tent"
        assert updated.materials_sent_at == test_time.now()

    def test_resending_materials_updates_tracking(self, gf: GigFlow, hired_event: Event) -> None:
        gf.send_materials(hired_event.event_id, "1Z999")
        updated = gf.send_materials(hired_event.event_id, "1Z000", "replacement box")

        assert updated.status == EventStatus.MATERIALS_SENT
        assert updated.tracking_number == "1Z000"

    def test_materials_received_makes_event_ready(self, gf: GigFlow, hired_event: Event) -> None:
        with pytest.raises(PreconditionFailed):
            gf.mark_materials_received(hired_event.event_id)

        gf.send_materials(hired_event.event_id, "1Z999")
        updated = gf.mark_materials_received(hired_event.event_id)

        assert updated.materials_received is True
        assert updated.status == EventStatus.READY_FOR_EVENT

        with pytest.raises(PreconditionFailed):
            gf.mark_materials_received(hired_event.event_id)

    def test_payment_received_once(self, gf: GigFlow, hired_event: Event, test_time) -> None:
        updated = gf.mark_payment_received(hired_event.event_id, "PAY-42")

        assert updated.payment_received is True
        assert updated.payment_received_at == test_time.now()
        assert updated.payment_confirmation_number == "PAY-42"

        with pytest.raises(PreconditionFailed):
            gf.mark_payment_received(hired_event.event_id)


class TestClosing:
    def test_complete_requires_hired_contractors(self, gf: GigFlow) -> None:
        event = create_business_event(gf)

        with pytest.raises(PreconditionFailed):
            gf.complete_event(event.event_id)

    def test_completed_event_rejects_everything(self, gf: GigFlow, hired_event: Event) -> None:
        completed = gf.complete_event(hired_event.event_id)
        assert completed.status == EventStatus.COMPLETED
        assert completed.is_public_listing is False

        with pytest.raises(PreconditionFailed):
            gf.cancel_event(hired_event.event_id, "too late")
        with pytest.raises(PreconditionFailed):
            gf.send_materials(hired_event.event_id, "1Z999")

    def test_cancel_from_active(self, gf: GigFlow, test_time) -> None:
        event = create_business_event(gf)

        cancelled = gf.cancel_event(event.event_id, "venue flooded")

        assert cancelled.status == EventStatus.CANCELLED
        assert cancelled.cancellation_reason == "venue flooded"
        assert cancelled.cancelled_at == test_time.now()

        with pytest.raises(PreconditionFailed):
            gf.send_proposal(event.event_id)

    def test_delete_event(self, gf: GigFlow) -> None:
        event = create_business_event(gf)

        gf.delete_event(event.event_id)

        with pytest.raises(EventNotFound):
            gf.get_event(event.event_id)
        with pytest.raises(EventNotFound):
            gf.delete_event(event.event_id)


class TestTransitionEntryPoint:
    def test_action_by_name(self, gf: GigFlow) -> None:
        event = create_business_event(gf)

        updated = gf.transition(event.event_id, "ConnectHost", {"host_id": "host-3"})

        assert updated.event_host_id == "host-3"

    def test_action_by_instance(self, gf: GigFlow) -> None:
        event = create_business_event(gf)

        updated = gf.transition(event.event_id, ConnectHost(host_id="host-3"), actor_id="host-3")

        assert updated.status == EventStatus.HOST_CONNECTED

    def test_unknown_action_name(self, gf: GigFlow) -> None:
        event = create_business_event(gf)

        with pytest.raises(PreconditionFailed):
            gf.transition(event.event_id, "TeleportHost")

    def test_bad_payload(self, gf: GigFlow) -> None:
        event = create_business_event(gf)

        with pytest.raises(ValidationError):
            gf.transition(event.event_id, "ConnectHost", {})

    def test_unknown_event(self, gf: GigFlow) -> None:
        with pytest.raises(EventNotFound):
            gf.send_proposal("evt-missing")


class TestSideEffects:
    def test_selection_notifies_contractors_and_host(self, gf: GigFlow, dispatcher) -> None:
        event = create_business_event(gf)
        staff_event(gf, event.event_id, {"con-1": "Casey", "con-2": "Robin"})

        acceptances = dispatcher.of_kind("acceptance")
        assert sorted(n.to_user_id for n in acceptances) == ["con-1", "con-2"]
        assert all(n.subject == "You've been selected for Spring Market" for n in acceptances)
        assert all(n.from_user_id == "biz-1" for n in acceptances)

        [host_notice] = dispatcher.with_subject("Contractors selected for Spring Market")
        assert host_notice.to_user_id == "host-1"
        assert host_notice.kind == "coordination"
        assert host_notice.metadata.contractor_count == 2

    def test_materials_notify_host(self, gf: GigFlow, hired_event: Event, dispatcher) -> None:
        gf.send_materials(hired_event.event_id, "1Z999", "banners")

        [notice] = dispatcher.with_subject("Materials sent for Spring Market")
        assert notice.to_user_id == "host-1"
        assert "1Z999" in notice.body
        assert notice.metadata.tracking_number == "1Z999"

    def test_receipts_notify_business(self, gf: GigFlow, hired_event: Event, dispatcher) -> None:
        gf.send_materials(hired_event.event_id, "1Z999")
        gf.mark_materials_received(hired_event.event_id, actor_id="host-1")
        gf.mark_payment_received(hired_event.event_id, "PAY-1", actor_id="host-1")

        [materials] = dispatcher.of_kind("material_confirmation")
        [payment] = dispatcher.of_kind("payment_confirmation")
        assert materials.to_user_id == "biz-1"
        assert materials.from_user_id == "host-1"
        assert payment.to_user_id == "biz-1"
        assert payment.metadata.confirmation_number == "PAY-1"

    def test_rejected_action_sends_nothing(self, gf: GigFlow, dispatcher) -> None:
        event = create_business_event(gf)
        connect_host(gf, event.event_id)
        before = len(dispatcher.sent)

        with pytest.raises(PreconditionFailed):
            gf.select_contractors(event.event_id, ["con-404"])

        assert len(dispatcher.sent) == before
