"""Authorization Gate - Which roles may act on a request in a given status"""
from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional

from ..domain.enums import RequestStatus, UserRole, DEPARTMENT_ROLES
from ..domain.errors import AuthorizationError
from ..utils.logger import get_logger

logger = get_logger(__name__)

S = RequestStatus
R = UserRole


DEFAULT_APPROVERS: Dict[RequestStatus, FrozenSet[UserRole]] = {
    S.SUBMITTED: frozenset({R.INSTITUTION_MANAGER}),
    S.MANAGER_REVIEW: frozenset({R.INSTITUTION_MANAGER}),
    S.SOP_VERIFICATION: DEPARTMENT_ROLES | {R.SOP_VERIFIER},
    S.BUDGET_CHECK: frozenset({R.ACCOUNTANT}),
    S.INSTITUTION_VERIFIED: frozenset({R.INSTITUTION_MANAGER}),
    S.VP_APPROVAL: frozenset({R.VP}),
    S.HOI_APPROVAL: frozenset({R.HEAD_OF_INSTITUTION}),
    S.DEAN_REVIEW: frozenset({R.DEAN}),
    S.DEPARTMENT_CHECKS: DEPARTMENT_ROLES,
    S.DEAN_VERIFICATION: frozenset({R.DEAN}),
    S.CHIEF_DIRECTOR_APPROVAL: frozenset({R.CHIEF_DIRECTOR}),
    S.CHAIRMAN_APPROVAL: frozenset({R.CHAIRMAN}),
    S.APPROVED: frozenset(),
    S.REJECTED: frozenset(),
    S.CLARIFICATION_REQUIRED: frozenset({R.REQUESTER}),
    S.SOP_CLARIFICATION: DEPARTMENT_ROLES | {R.SOP_VERIFIER},
    S.BUDGET_CLARIFICATION: frozenset({R.ACCOUNTANT}),
    S.DEPARTMENT_CLARIFICATION: DEPARTMENT_ROLES,
}


class AuthorizationGate:
    """
    Static status -> entitled roles mapping

    The gate looks at the current status only. Whether the chosen action makes
    sense for that role is left to the RouteResolver, which refuses unsupported
    combinations.
    """

    def __init__(self, approvers: Optional[Mapping[RequestStatus, Iterable[UserRole]]] = None):
        source = DEFAULT_APPROVERS if approvers is None else approvers
        self._approvers: Dict[RequestStatus, FrozenSet[UserRole]] = {
            status: frozenset(roles) for status, roles in source.items()
        }
        for status in RequestStatus:
            if status.is_terminal:
                # Terminal statuses never admit an actor, whatever the mapping says
                self._approvers[status] = frozenset()
            else:
                self._approvers.setdefault(status, frozenset())

    def required_approvers(self, status: RequestStatus) -> FrozenSet[UserRole]:
        """Roles entitled to act on a request in this status"""
        return self._approvers.get(status, frozenset())

    def is_authorized(self, role: UserRole, status: RequestStatus) -> bool:
        return role in self.required_approvers(status)

    def check(self, role: UserRole, status: RequestStatus, request_id: Optional[str] = None) -> None:
        """
        Raise AuthorizationError unless role may act on status
        """
        if self.is_authorized(role, status):
            return

        logger.info(
            f"Role {role.value} not entitled to act on status {status.value}",
            extra={"request_id": request_id, "role": role.value, "status": status.value}
        )
        raise AuthorizationError(
            "Not authorized to act on this request",
            details={
                "status": status.value,
                "role": role.value,
                "required_roles": sorted(r.value for r in self.required_approvers(status))
            }
        )

    def statuses_for_role(self, role: UserRole) -> List[RequestStatus]:
        """Statuses where role is currently entitled to act (pending approvals view)"""
        return [status for status in RequestStatus if role in self._approvers.get(status, frozenset())]
