"""Tests for request CRUD, listing and action translation"""

import pytest

from procureflow.domain.enums import (
    RequestStatus as S, UserRole as R, ActionType, AuditEventType
)
from procureflow.domain.errors import (
    PermissionDeniedError, InvalidStateError, ValidationError, RequestNotFoundError, ConcurrencyError
)
from tests.conftest import make_actor, BUDGET_PATH


class TestCreate:
    def test_new_request_is_submitted_with_create_entry(self, create_request, requester):
        request = create_request()

        assert request.request_id.startswith("REQ-")
        assert request.status == S.SUBMITTED
        assert request.version == 1
        assert len(request.history) == 1
        entry = request.history[0]
        assert entry.action == ActionType.CREATE
        assert entry.notes == "Request directly submitted"
        assert entry.previous_status is None
        assert entry.new_status == S.SUBMITTED
        assert entry.actor.user_id == requester.user_id
        assert entry.actor.role_at_time == R.REQUESTER

    def test_only_requesters_create(self, create_request):
        with pytest.raises(PermissionDeniedError):
            create_request(actor=make_actor(R.DEAN))

    def test_creation_is_persisted_and_audited(self, create_request, service, audit_repo):
        request = create_request(correlation_id="COR-CREATE")

        stored = service.request_repo.get_request(request.request_id)
        assert stored.title == request.title
        assert stored.created_at.tzinfo is not None

        events = audit_repo.get_events_for_request(request.request_id)
        assert [e.event_type for e in events] == [AuditEventType.CREATE_REQUEST]
        assert events[0].correlation_id == "COR-CREATE"


class TestRead:
    def test_owner_can_view(self, create_request, service, requester):
        request = create_request()
        assert service.get_request(request.request_id, requester).request_id == request.request_id

    def test_other_requester_cannot_view(self, create_request, service, other_requester):
        request = create_request()
        with pytest.raises(PermissionDeniedError):
            service.get_request(request.request_id, other_requester)

    def test_approvers_can_view_any_request(self, create_request, service):
        request = create_request()
        assert service.get_request(request.request_id, make_actor(R.CHAIRMAN))

    def test_missing_request(self, service, requester):
        with pytest.raises(RequestNotFoundError):
            service.get_request("REQ-NOPE", requester)

    def test_describe_adds_progress_and_approvers(self, create_request, service):
        data = service.describe(create_request())
        assert data["progress"] == {"step": 1, "total": 13}
        assert data["required_approvers"] == ["institution_manager"]
        assert data["status"] == "submitted"
        assert data["history"][0]["action"] == "create"


class TestList:
    def test_requesters_see_only_their_own(self, create_request, service, requester, other_requester):
        create_request()
        create_request(actor=other_requester)

        items, total = service.list_requests(requester)
        assert total == 1
        assert items[0].requester.user_id == requester.user_id

    def test_approver_sees_everything(self, create_request, service, other_requester):
        first = create_request()
        second = create_request(actor=other_requester)

        items, total = service.list_requests(make_actor(R.CHAIRMAN))
        assert total == 2
        assert {r.request_id for r in items} == {first.request_id, second.request_id}

    def test_pending_approvals_filters_by_role(self, create_request, walk, service):
        create_request()
        moved = create_request()
        walk(moved.request_id, BUDGET_PATH[:3])

        items, total = service.list_requests(make_actor(R.ACCOUNTANT), pending_approvals=True)
        assert total == 1
        assert items[0].request_id == moved.request_id

        items, total = service.list_requests(make_actor(R.INSTITUTION_MANAGER), pending_approvals=True)
        assert total == 1
        assert items[0].status == S.SUBMITTED

    def test_pending_approvals_with_status_outside_role(self, create_request, service):
        create_request()
        _, total = service.list_requests(
            make_actor(R.INSTITUTION_MANAGER), status=S.DEAN_REVIEW, pending_approvals=True
        )
        assert total == 0

    def test_status_and_college_filters(self, create_request, service):
        create_request(college="College of Arts")
        create_request()
        chairman = make_actor(R.CHAIRMAN)

        _, total = service.list_requests(chairman, college="College of Arts")
        assert total == 1
        _, total = service.list_requests(chairman, status=S.APPROVED)
        assert total == 0

    def test_pagination_keeps_total(self, create_request, service):
        for _ in range(5):
            create_request()
        items, total = service.list_requests(make_actor(R.CHAIRMAN), skip=2, limit=2)
        assert total == 5
        assert len(items) == 2


class TestUpdate:
    def test_owner_edits_submitted_request(self, create_request, service, requester, audit_repo):
        request = create_request()
        updated = service.update_request(
            request.request_id, {"title": "Four oscilloscopes", "cost_estimate": 3600.0}, requester
        )
        assert updated.title == "Four oscilloscopes"
        assert updated.cost_estimate == 3600.0
        assert updated.version == 2
        assert len(updated.history) == 1

        event_types = [e.event_type for e in audit_repo.get_events_for_request(request.request_id)]
        assert AuditEventType.UPDATE_REQUEST in event_types

    def test_owner_edits_while_answering_clarification(self, create_request, walk, service, requester):
        request = create_request()
        walk(request.request_id, BUDGET_PATH[:1])
        service.act(request.request_id, ActionType.CLARIFY, make_actor(R.INSTITUTION_MANAGER))

        updated = service.update_request(request.request_id, {"purpose": "Clarified purpose text"}, requester)
        assert updated.purpose == "Clarified purpose text"
        assert updated.status == S.CLARIFICATION_REQUIRED

    def test_cannot_edit_under_review(self, create_request, walk, service, requester):
        request = create_request()
        walk(request.request_id, BUDGET_PATH[:1])
        with pytest.raises(InvalidStateError):
            service.update_request(request.request_id, {"title": "Changed title"}, requester)

    def test_only_owner_edits(self, create_request, service, other_requester):
        request = create_request()
        with pytest.raises(PermissionDeniedError):
            service.update_request(request.request_id, {"title": "Hijacked"}, other_requester)

    def test_status_cannot_be_edited(self, create_request, service, requester):
        request = create_request()
        with pytest.raises(ValidationError):
            service.update_request(request.request_id, {"status": "approved"}, requester)

    def test_stale_edit_conflicts(self, create_request, service, requester, request_repo, monkeypatch):
        request = create_request()
        stale = request_repo.get_request(request.request_id)
        service.update_request(request.request_id, {"title": "First edit"}, requester)

        monkeypatch.setattr(request_repo, "get_request_or_raise", lambda request_id: stale)
        with pytest.raises(ConcurrencyError):
            service.update_request(request.request_id, {"title": "Second edit"}, requester)


class TestDelete:
    def test_owner_deletes_submitted_request(self, create_request, service, requester):
        request = create_request()
        service.delete_request(request.request_id, requester)
        assert service.request_repo.get_request(request.request_id) is None

    def test_owner_deletes_rejected_request(self, create_request, service, requester):
        request = create_request()
        service.act(request.request_id, ActionType.REJECT, make_actor(R.INSTITUTION_MANAGER))
        service.delete_request(request.request_id, requester)
        assert service.request_repo.get_request(request.request_id) is None

    def test_cannot_delete_under_review(self, create_request, walk, service, requester):
        request = create_request()
        walk(request.request_id, BUDGET_PATH[:1])
        with pytest.raises(InvalidStateError):
            service.delete_request(request.request_id, requester)

    def test_only_owner_deletes(self, create_request, service, other_requester):
        request = create_request()
        with pytest.raises(PermissionDeniedError):
            service.delete_request(request.request_id, other_requester)


class TestAct:
    def test_forward_needs_a_message(self, create_request, walk, service):
        request = create_request()
        walk(request.request_id, BUDGET_PATH[:1])
        with pytest.raises(ValidationError):
            service.act(request.request_id, ActionType.FORWARD, make_actor(R.INSTITUTION_MANAGER), notes="  ")

    def test_create_is_not_an_action(self, create_request, service):
        request = create_request()
        with pytest.raises(ValidationError):
            service.act(request.request_id, ActionType.CREATE, make_actor(R.INSTITUTION_MANAGER))

    def test_audit_events_cover_crud_and_actions(self, create_request, service, requester):
        request = create_request()
        service.act(request.request_id, ActionType.APPROVE, make_actor(R.INSTITUTION_MANAGER))

        events = service.get_audit_events(request.request_id, requester)
        assert {e.event_type for e in events} == {AuditEventType.APPROVE, AuditEventType.CREATE_REQUEST}
