"""Audit Writer - Append-only activity log"""
from typing import Any, Dict, List, Optional

from ..domain.models import AuditEvent, ActorContext, HistoryEntry, PurchaseRequest
from ..domain.enums import AuditEventType
from ..repositories.audit_repo import AuditRepository
from ..utils.idgen import generate_audit_event_id
from ..utils.time import utc_now



class AuditWriter:
    """
    Write audit events (append-only)

    The request history is the authoritative trail of transitions; audit events
    additionally cover CRUD and carry the correlation id of the HTTP call.
    Written after the request document changed, never inside that write.
    """

    def __init__(self, repo: Optional[AuditRepository] = None):
        self.repo = repo if repo is not None else AuditRepository()

    def write_event(
        self,
        request_id: str,
        event_type: AuditEventType,
        actor: ActorContext,
        details: Optional[Dict[str, Any]] = None,
        correlation_id: Optional[str] = None
    ) -> AuditEvent:
        """Write a single audit event"""
        event = AuditEvent(
            audit_event_id=generate_audit_event_id(),
            request_id=request_id,
            event_type=event_type,
            actor=actor.snapshot(),
            details=details or {},
            timestamp=utc_now(),
            correlation_id=correlation_id
        )
        return self.repo.create_event(event)

    def write_create_request(
        self,
        request: PurchaseRequest,
        actor: ActorContext,
        correlation_id: Optional[str] = None
    ) -> AuditEvent:
        """Write request creation event"""
        return self.write_event(
            request_id=request.request_id,
            event_type=AuditEventType.CREATE_REQUEST,
            actor=actor,
            details={
                "title": request.title,
                "college": request.college,
                "department": request.department,
                "cost_estimate": request.cost_estimate,
                "expense_category": request.expense_category,
            },
            correlation_id=correlation_id
        )

    def write_transition(
        self,
        request_id: str,
        entry: HistoryEntry,
        actor: ActorContext,
        correlation_id: Optional[str] = None
    ) -> AuditEvent:
        """Write an approve / reject / clarify / forward event"""
        details: Dict[str, Any] = {
            "history_entry_id": entry.entry_id,
            "previous_status": entry.previous_status.value if entry.previous_status else None,
            "new_status": entry.new_status.value,
        }
        if entry.notes:
            details["notes"] = entry.notes
        if entry.clarification_target:
            details["clarification_target"] = entry.clarification_target.value
        if entry.budget_available is not None:
            details["budget_available"] = entry.budget_available
        if entry.direct_to_chairman is not None:
            details["direct_to_chairman"] = entry.direct_to_chairman

        return self.write_event(
            request_id=request_id,
            event_type=AuditEventType.for_action(entry.action),
            actor=actor,
            details=details,
            correlation_id=correlation_id
        )

    def write_update_request(
        self,
        request_id: str,
        actor: ActorContext,
        changed_fields: List[str],
        correlation_id: Optional[str] = None
    ) -> AuditEvent:
        """Write request edit event"""
        return self.write_event(
            request_id=request_id,
            event_type=AuditEventType.UPDATE_REQUEST,
            actor=actor,
            details={"changed_fields": sorted(changed_fields)},
            correlation_id=correlation_id
        )

    def write_delete_request(
        self,
        request_id: str,
        actor: ActorContext,
        correlation_id: Optional[str] = None
    ) -> AuditEvent:
        """Write request deletion event"""
        return self.write_event(
            request_id=request_id,
            event_type=AuditEventType.DELETE_REQUEST,
            actor=actor,
            correlation_id=correlation_id
        )
