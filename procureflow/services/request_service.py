"""Request Service - Purchase request business logic"""
from typing import Any, Dict, List, Optional, Tuple

from ..domain.models import (
    PurchaseRequest, HistoryEntry, ActorContext, AuditEvent,
    ApproveContext, RejectContext, ClarifyContext, ForwardContext
)
from ..domain.enums import RequestStatus, UserRole, ActionType, ClarificationType
from ..domain.errors import PermissionDeniedError, InvalidStateError, ValidationError, InvalidActionError
from ..repositories.request_repo import RequestRepository
from ..repositories.audit_repo import AuditRepository
from ..engine.authorization_gate import AuthorizationGate
from ..engine.route_resolver import RouteResolver, Context
from ..engine.coordinator import TransitionCoordinator
from ..engine.audit_writer import AuditWriter
from ..engine.progress import progress
from ..utils.idgen import generate_request_id, generate_history_entry_id
from ..utils.time import utc_now
from ..utils.logger import get_logger

logger = get_logger(__name__)


class RequestService:
    """Service for purchase request operations"""

    # Requesters may edit while nobody is reviewing, or while answering a clarification
    EDITABLE_STATUSES = [RequestStatus.SUBMITTED, RequestStatus.CLARIFICATION_REQUIRED]
    DELETABLE_STATUSES = [RequestStatus.SUBMITTED, RequestStatus.REJECTED]
    APPROVAL_ACTIONS = [ActionType.APPROVE, ActionType.REJECT, ActionType.CLARIFY, ActionType.FORWARD]
    EDITABLE_FIELDS = {
        "title", "purpose", "college", "department",
        "cost_estimate", "expense_category", "sop_reference", "attachments"
    }

    def __init__(
        self,
        request_repo: Optional[RequestRepository] = None,
        audit_repo: Optional[AuditRepository] = None,
        gate: Optional[AuthorizationGate] = None,
        resolver: Optional[RouteResolver] = None
    ):
        self.request_repo = request_repo if request_repo is not None else RequestRepository()
        self.audit_repo = audit_repo if audit_repo is not None else AuditRepository()
        self.audit_writer = AuditWriter(self.audit_repo)
        self.gate = gate if gate is not None else AuthorizationGate()
        self.coordinator = TransitionCoordinator(
            repo=self.request_repo,
            gate=self.gate,
            resolver=resolver if resolver is not None else RouteResolver(),
            audit_writer=self.audit_writer
        )

    # =========================================================================
    # CRUD
    # =========================================================================

    def create_request(
        self,
        title: str,
        purpose: str,
        college: str,
        department: str,
        cost_estimate: float,
        expense_category: str,
        sop_reference: Optional[str],
        attachments: List[str],
        actor: ActorContext,
        correlation_id: Optional[str] = None
    ) -> PurchaseRequest:
        """Create a request in SUBMITTED with its CREATE history entry"""
        if actor.role != UserRole.REQUESTER:
            raise PermissionDeniedError(
                "Only requesters can raise purchase requests",
                details={"role": actor.role.value}
            )

        now = utc_now()
        requester = actor.snapshot()
        request = PurchaseRequest(
            request_id=generate_request_id(),
            title=title,
            purpose=purpose,
            college=college,
            department=department,
            cost_estimate=cost_estimate,
            expense_category=expense_category,
            sop_reference=sop_reference,
            attachments=list(attachments),
            requester=requester,
            status=RequestStatus.SUBMITTED,
            history=[
                HistoryEntry(
                    entry_id=generate_history_entry_id(),
                    action=ActionType.CREATE,
                    actor=requester,
                    notes="Request directly submitted",
                    previous_status=None,
                    new_status=RequestStatus.SUBMITTED,
                    timestamp=now
                )
            ],
            created_at=now,
            updated_at=now
        )

        self.request_repo.create_request(request)
        self.audit_writer.write_create_request(request, actor, correlation_id=correlation_id)
        return request

    def get_request(self, request_id: str, actor: ActorContext) -> PurchaseRequest:
        """Get a request the actor may view"""
        request = self.request_repo.get_request_or_raise(request_id)
        self._check_can_view(request, actor)
        return request

    def list_requests(
        self,
        actor: ActorContext,
        status: Optional[RequestStatus] = None,
        college: Optional[str] = None,
        pending_approvals: bool = False,
        skip: int = 0,
        limit: int = 20
    ) -> Tuple[List[PurchaseRequest], int]:
        """
        List requests visible to actor

        Requesters only ever see their own requests. With pending_approvals the
        list is narrowed to statuses the actor's role may currently act on.
        """
        requester_id = actor.user_id if actor.role == UserRole.REQUESTER else None

        statuses: Optional[List[RequestStatus]] = None
        if pending_approvals:
            statuses = self.gate.statuses_for_role(actor.role)
            if status is not None:
                statuses = [s for s in statuses if s == status]
        elif status is not None:
            statuses = [status]

        items = self.request_repo.list_requests(
            requester_id=requester_id,
            statuses=statuses,
            college=college,
            skip=skip,
            limit=limit
        )
        total = self.request_repo.count_requests(
            requester_id=requester_id,
            statuses=statuses,
            college=college
        )
        return items, total

    def update_request(
        self,
        request_id: str,
        updates: Dict[str, Any],
        actor: ActorContext,
        correlation_id: Optional[str] = None
    ) -> PurchaseRequest:
        """Edit descriptive fields; status and history are never touched here"""
        request = self.request_repo.get_request_or_raise(request_id)
        self._check_owner(request, actor)

        unknown = set(updates) - self.EDITABLE_FIELDS
        if unknown:
            raise ValidationError(
                "Only descriptive fields can be edited",
                details={"fields": sorted(unknown)}
            )
        if not updates:
            return request

        if request.status not in self.EDITABLE_STATUSES:
            raise InvalidStateError(
                f"Request cannot be edited while {request.status.value}",
                details={"status": request.status.value}
            )

        updated = self.request_repo.update_details(
            request_id,
            updates,
            expected_version=request.version,
            allowed_statuses=self.EDITABLE_STATUSES
        )
        self.audit_writer.write_update_request(
            request_id, actor, list(updates), correlation_id=correlation_id
        )
        return updated

    def delete_request(
        self,
        request_id: str,
        actor: ActorContext,
        correlation_id: Optional[str] = None
    ) -> None:
        """Delete a request that is not under review"""
        request = self.request_repo.get_request_or_raise(request_id)
        self._check_owner(request, actor)

        if request.status not in self.DELETABLE_STATUSES:
            raise InvalidStateError(
                f"Request cannot be deleted while {request.status.value}",
                details={"status": request.status.value}
            )

        self.request_repo.delete_request(request_id, expected_version=request.version)
        self.audit_writer.write_delete_request(request_id, actor, correlation_id=correlation_id)

    def get_audit_events(self, request_id: str, actor: ActorContext) -> List[AuditEvent]:
        """Activity log of a request, newest first"""
        self.get_request(request_id, actor)
        return self.audit_repo.get_events_for_request(request_id)

    # =========================================================================
    # Approval actions
    # =========================================================================

    def act(
        self,
        request_id: str,
        action: ActionType,
        actor: ActorContext,
        notes: Optional[str] = None,
        budget_available: Optional[bool] = None,
        direct_to_chairman: Optional[bool] = None,
        forwarded_message: Optional[str] = None,
        attachments: Optional[List[str]] = None,
        target: Optional[ClarificationType] = None,
        correlation_id: Optional[str] = None
    ) -> PurchaseRequest:
        """Translate an action body into a typed context and run the coordinator"""
        if action not in self.APPROVAL_ACTIONS:
            raise InvalidActionError(
                f"{action.value} is not an approval action",
                details={"action": action.value, "allowed": [a.value for a in self.APPROVAL_ACTIONS]}
            )

        logger.info(
            f"Applying {action.value} to {request_id}",
            extra={"request_id": request_id, "action": action.value, "actor_id": actor.user_id, "role": actor.role.value}
        )

        return self.coordinator.apply(
            request_id=request_id,
            action=action,
            actor=actor,
            notes=notes,
            attachments=attachments,
            correlation_id=correlation_id,
            context_factory=lambda: self._build_context(
                action, notes, budget_available, direct_to_chairman, forwarded_message, target
            )
        )

    def _build_context(
        self,
        action: ActionType,
        notes: Optional[str],
        budget_available: Optional[bool],
        direct_to_chairman: Optional[bool],
        forwarded_message: Optional[str],
        target: Optional[ClarificationType]
    ) -> Context:
        if action == ActionType.APPROVE:
            return ApproveContext(budget_available=budget_available, direct_to_chairman=direct_to_chairman)

        if action == ActionType.REJECT:
            return RejectContext()

        if action == ActionType.CLARIFY:
            return ClarifyContext(clarification_type=target or ClarificationType.REQUESTER)

        if action == ActionType.FORWARD:
            message = (forwarded_message or notes or "").strip()
            if not message:
                raise ValidationError(
                    "A forward needs a message",
                    details={"field": "forwardedMessage"}
                )
            return ForwardContext(message=message)

        raise InvalidActionError(f"{action.value} is not an approval action", details={"action": action.value})

    # =========================================================================
    # Read helpers
    # =========================================================================

    def describe(self, request: PurchaseRequest) -> Dict[str, Any]:
        """Request as returned by the API, with progress and current approvers"""
        step, total = progress(request.status)
        data = request.model_dump(mode="json")
        data["progress"] = {"step": step, "total": total}
        data["required_approvers"] = sorted(r.value for r in self.gate.required_approvers(request.status))
        return data

    def _check_can_view(self, request: PurchaseRequest, actor: ActorContext) -> None:
        if actor.role == UserRole.REQUESTER and not request.is_owned_by(actor):
            raise PermissionDeniedError(
                "Requesters can only view their own requests",
                details={"request_id": request.request_id}
            )

    def _check_owner(self, request: PurchaseRequest, actor: ActorContext) -> None:
        if not request.is_owned_by(actor):
            raise PermissionDeniedError(
                "Only the requester who raised this request can change it",
                details={"request_id": request.request_id}
            )
