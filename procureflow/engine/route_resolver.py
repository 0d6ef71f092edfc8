"""Route Resolver - Determine the next status for an action"""
from typing import Optional, Union

from ..domain.models import (
    ApproveContext, RejectContext, ClarifyContext, ForwardContext
)
from ..domain.enums import RequestStatus, UserRole, ActionType, ClarificationType
from ..domain.errors import ValidationError
from .condition_evaluator import ConditionEvaluator
from .rule_table import RuleTable
from ..utils.logger import get_logger

logger = get_logger(__name__)

Context = Union[ApproveContext, RejectContext, ClarifyContext, ForwardContext]

# Clarification targets and the side state each one opens, per requesting role
_CLARIFICATION_STATES = {
    (UserRole.INSTITUTION_MANAGER, ClarificationType.SOP): RequestStatus.SOP_CLARIFICATION,
    (UserRole.INSTITUTION_MANAGER, ClarificationType.ACCOUNTANT): RequestStatus.BUDGET_CLARIFICATION,
    (UserRole.DEAN, ClarificationType.DEPARTMENT): RequestStatus.DEPARTMENT_CLARIFICATION,
}

_CLARIFICATION_TARGETS = {state: target for (_, target), state in _CLARIFICATION_STATES.items()}
_CLARIFICATION_TARGETS[RequestStatus.CLARIFICATION_REQUIRED] = ClarificationType.REQUESTER


def clarification_target(status: RequestStatus) -> Optional[ClarificationType]:
    """Party a clarification side state is waiting on"""
    return _CLARIFICATION_TARGETS.get(status)


def empty_context(action: ActionType) -> Context:
    """Default context for actions that can be resolved without inputs"""
    if action == ActionType.APPROVE:
        return ApproveContext()
    if action == ActionType.REJECT:
        return RejectContext()
    if action == ActionType.CLARIFY:
        return ClarifyContext()
    raise ValidationError(
        f"Action {action.value} requires a context",
        details={"action": action.value}
    )


class RouteResolver:
    """
    Resolve the next status given current status, action, role and context

    - REJECT always resolves to REJECTED.
    - CLARIFY opens the side state matching (role, clarification type), or the
      generic requester clarification.
    - FORWARD follows a per (status, role) shortcut, else leaves status as is.
    - APPROVE branches on budget context at INSTITUTION_VERIFIED and
      DEAN_REVIEW, then takes the first matching rule table edge.

    Stateless; safe to share between threads.
    """

    def __init__(self, rule_table: Optional[RuleTable] = None):
        self.rule_table = rule_table if rule_table is not None else RuleTable()
        self.condition_evaluator = ConditionEvaluator()

    def resolve(
        self,
        current_status: RequestStatus,
        action: ActionType,
        actor_role: UserRole,
        context: Optional[Context] = None
    ) -> Optional[RequestStatus]:
        """
        Resolve the next status

        Args:
            current_status: Status of the request when it was loaded
            action: Requested action
            actor_role: Role of the acting user
            context: Action specific inputs (must match action)

        Returns:
            Next status, or None when no rule applies

        Raises:
            ValidationError: Unsupported action, mismatched or missing context
        """
        if current_status.is_terminal:
            return None

        if context is None:
            context = empty_context(action)
        elif context.action != action:
            raise ValidationError(
                f"Context for {context.action.value} given with action {action.value}",
                details={"action": action.value, "context_action": context.action.value}
            )

        if action == ActionType.REJECT:
            return RequestStatus.REJECTED

        if action == ActionType.CLARIFY:
            return self._resolve_clarify(actor_role, context)

        if action == ActionType.FORWARD:
            return self._resolve_forward(current_status, actor_role)

        if action == ActionType.APPROVE:
            return self._resolve_approve(current_status, actor_role, context)

        raise ValidationError(
            f"Action {action.value} cannot be routed",
            details={"action": action.value}
        )

    def _resolve_clarify(self, actor_role: UserRole, context: ClarifyContext) -> RequestStatus:
        return _CLARIFICATION_STATES.get(
            (actor_role, context.clarification_type),
            RequestStatus.CLARIFICATION_REQUIRED
        )

    def _resolve_forward(self, current_status: RequestStatus, actor_role: UserRole) -> RequestStatus:
        target = self.rule_table.forward_target(current_status, actor_role)
        if target is None:
            logger.info(
                f"No forward shortcut from {current_status.value} for {actor_role.value}; status unchanged",
                extra={"status": current_status.value, "role": actor_role.value}
            )
            return current_status
        return target

    def _resolve_approve(
        self,
        current_status: RequestStatus,
        actor_role: UserRole,
        context: ApproveContext
    ) -> Optional[RequestStatus]:
        if current_status == RequestStatus.INSTITUTION_VERIFIED and actor_role == UserRole.INSTITUTION_MANAGER:
            if context.budget_available is None:
                raise ValidationError(
                    "Budget availability must be stated when approving a verified request",
                    details={"status": current_status.value, "field": "budget_available"}
                )
            return RequestStatus.VP_APPROVAL if context.budget_available else RequestStatus.DEAN_REVIEW

        if (
            current_status == RequestStatus.DEAN_REVIEW
            and actor_role == UserRole.DEAN
            and context.budget_available is False
        ):
            if context.direct_to_chairman:
                return RequestStatus.CHAIRMAN_APPROVAL
            return RequestStatus.DEPARTMENT_CHECKS

        values = context.model_dump(exclude={"action"})
        for rule in self.rule_table.candidates(current_status, actor_role):
            if rule.condition is None or self.condition_evaluator.evaluate(rule.condition, values):
                logger.debug(
                    f"Resolved transition: {current_status.value} -> {rule.to_status.value}",
                    extra={"from_status": current_status.value, "to_status": rule.to_status.value}
                )
                return rule.to_status

        return None
