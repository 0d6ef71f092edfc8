"""Transition Coordinator - Apply a routed transition to a request atomically"""
from typing import Callable, List, Optional

from ..domain.models import (
    PurchaseRequest, HistoryEntry, ActorContext,
    ApproveContext, ClarifyContext, ForwardContext
)
from ..domain.enums import ActionType, RequestStatus
from ..domain.errors import ValidationError, TransitionNotFoundError
from ..repositories.request_repo import RequestRepository
from .authorization_gate import AuthorizationGate
from .route_resolver import RouteResolver, Context, empty_context, clarification_target
from .audit_writer import AuditWriter
from ..utils.idgen import generate_history_entry_id
from ..utils.time import not_before
from ..utils.logger import get_logger

logger = get_logger(__name__)


class TransitionCoordinator:
    """
    Orchestrates one approval action

    Algorithm:
    1. Load the request (404 if absent)
    2. Check the actor's role against the current status (403)
    3. Resolve the next status (400 when no rule applies)
    4. Build the history entry
    5. Compare-and-swap: push entry + set status, conditioned on the status
       and version observed in step 1 (409 when the request moved on)
    6. Write the audit event and return the updated request

    A losing concurrent writer gets a ConcurrencyError and must retry from
    step 1; nothing is applied twice.
    """

    def __init__(
        self,
        repo: Optional[RequestRepository] = None,
        gate: Optional[AuthorizationGate] = None,
        resolver: Optional[RouteResolver] = None,
        audit_writer: Optional[AuditWriter] = None
    ):
        self.repo = repo if repo is not None else RequestRepository()
        self.gate = gate if gate is not None else AuthorizationGate()
        self.resolver = resolver if resolver is not None else RouteResolver()
        self.audit_writer = audit_writer

    def apply(
        self,
        request_id: str,
        action: ActionType,
        actor: ActorContext,
        context: Optional[Context] = None,
        notes: Optional[str] = None,
        attachments: Optional[List[str]] = None,
        correlation_id: Optional[str] = None,
        context_factory: Optional[Callable[[], Context]] = None
    ) -> PurchaseRequest:
        """
        Apply action to the request as actor

        context_factory builds the context once the request is loaded and the
        actor authorized, so input problems never mask a 404 or 403.

        Raises:
            RequestNotFoundError: Unknown request
            AuthorizationError: Role may not act on the current status
            ValidationError: Bad action/context or no applicable rule
            ConcurrencyError: The request changed between load and write
        """
        if action == ActionType.CREATE:
            raise ValidationError(
                "Requests are created through the create endpoint, not as a transition",
                details={"action": action.value}
            )

        request = self.repo.get_request_or_raise(request_id)
        current_status = request.status

        self.gate.check(actor.role, current_status, request_id=request_id)

        if context is None:
            context = context_factory() if context_factory is not None else empty_context(action)

        next_status = self.resolver.resolve(current_status, action, actor.role, context)
        if next_status is None:
            raise TransitionNotFoundError(
                f"No applicable rule for {action.value} by {actor.role.value} at {current_status.value}",
                details={
                    "request_id": request_id,
                    "status": current_status.value,
                    "action": action.value,
                    "role": actor.role.value
                }
            )

        entry = self._build_entry(request, action, actor, next_status, context, notes, attachments)

        updated = self.repo.append_transition(
            request_id=request_id,
            entry=entry,
            expected_status=current_status,
            expected_version=request.version,
            # Forwarded attachments travel with the message, not the request
            extra_attachments=attachments if action != ActionType.FORWARD else None
        )

        logger.info(
            f"Request {request_id}: {current_status.value} -> {next_status.value} ({action.value})",
            extra={"request_id": request_id, "actor_id": actor.user_id}
        )

        if self.audit_writer is not None:
            # Transition already committed
            try:
                self.audit_writer.write_transition(
                    request_id=request_id,
                    entry=entry,
                    actor=actor,
                    correlation_id=correlation_id
                )
            except Exception as e:
                logger.error(
                    f"Could not write audit event for {entry.entry_id} on {request_id}: {e}",
                    extra={"request_id": request_id, "actor_id": actor.user_id}
                )

        return updated

    def _build_entry(
        self,
        request: PurchaseRequest,
        action: ActionType,
        actor: ActorContext,
        next_status: RequestStatus,
        context: Context,
        notes: Optional[str],
        attachments: Optional[List[str]]
    ) -> HistoryEntry:
        last = request.last_entry
        fields = {
            "entry_id": generate_history_entry_id(),
            "action": action,
            "actor": actor.snapshot(),
            "notes": notes or None,
            "attachments": list(attachments) if attachments else None,
            "previous_status": request.status,
            "new_status": next_status,
            "timestamp": not_before(last.timestamp if last else None),
        }

        if isinstance(context, ApproveContext):
            fields["budget_available"] = context.budget_available
            fields["direct_to_chairman"] = context.direct_to_chairman
        elif isinstance(context, ClarifyContext):
            # The side state decides who answers, not the requested target
            fields["clarification_target"] = clarification_target(next_status)
        elif isinstance(context, ForwardContext):
            fields["forwarded_message"] = context.message

        return HistoryEntry(**fields)
