"""Rule Table - Declarative approval edges and forward shortcuts"""
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, TYPE_CHECKING

from ..domain.models import TransitionRule, ConditionGroup, Condition
from ..domain.enums import RequestStatus, UserRole, ConditionOperator, DEPARTMENT_ROLES

if TYPE_CHECKING:
    from .authorization_gate import AuthorizationGate


S = RequestStatus
R = UserRole


def when(logic: str = "AND", **fields: object) -> ConditionGroup:
    """Build an equality condition group, e.g. when(budget_available=True)"""
    return ConditionGroup(
        logic=logic,
        conditions=[
            Condition(field=name, operator=ConditionOperator.EQUALS, value=value)
            for name, value in fields.items()
        ]
    )


def edge(
    from_status: RequestStatus,
    to_status: RequestStatus,
    roles: Iterable[UserRole],
    condition: Optional[ConditionGroup] = None,
    description: Optional[str] = None
) -> List[TransitionRule]:
    """Expand one logical edge into a rule per role, keeping role order"""
    return [
        TransitionRule(
            from_status=from_status,
            to_status=to_status,
            required_role=role,
            condition=condition,
            description=description
        )
        for role in roles
    ]


_DEPARTMENTS = sorted(DEPARTMENT_ROLES, key=lambda r: r.value)

# Order matters: for a shared (from_status, required_role) the first rule whose
# condition holds wins, so conditional rules precede the unconditional fallback.
DEFAULT_RULES: Tuple[TransitionRule, ...] = tuple(
    edge(S.SUBMITTED, S.MANAGER_REVIEW, [R.INSTITUTION_MANAGER],
         description="Institution manager picks up the request")
    + edge(S.MANAGER_REVIEW, S.SOP_VERIFICATION, [R.INSTITUTION_MANAGER],
           description="Send for SOP / material check")
    + edge(S.SOP_VERIFICATION, S.BUDGET_CHECK, _DEPARTMENTS + [R.SOP_VERIFIER],
           description="Any department or the SOP verifier clears SOP verification")
    + edge(S.BUDGET_CHECK, S.INSTITUTION_VERIFIED, [R.ACCOUNTANT],
           description="Accountant verifies budget")
    + edge(S.INSTITUTION_VERIFIED, S.VP_APPROVAL, [R.INSTITUTION_MANAGER],
           condition=when(budget_available=True),
           description="Budget available: VP approval")
    + edge(S.INSTITUTION_VERIFIED, S.DEAN_REVIEW, [R.INSTITUTION_MANAGER],
           condition=when(budget_available=False),
           description="Budget not available: dean review")
    + edge(S.VP_APPROVAL, S.HOI_APPROVAL, [R.VP])
    + edge(S.HOI_APPROVAL, S.DEAN_REVIEW, [R.HEAD_OF_INSTITUTION])
    + edge(S.DEAN_REVIEW, S.CHAIRMAN_APPROVAL, [R.DEAN],
           condition=when(budget_available=False, direct_to_chairman=True),
           description="No budget and escalated straight to the chairman")
    + edge(S.DEAN_REVIEW, S.DEPARTMENT_CHECKS, [R.DEAN])
    + edge(S.DEPARTMENT_CHECKS, S.DEAN_VERIFICATION, _DEPARTMENTS,
           description="Any department clears the department checks")
    + edge(S.DEAN_VERIFICATION, S.CHIEF_DIRECTOR_APPROVAL, [R.DEAN])
    + edge(S.CHIEF_DIRECTOR_APPROVAL, S.CHAIRMAN_APPROVAL, [R.CHIEF_DIRECTOR])
    + edge(S.CHAIRMAN_APPROVAL, S.APPROVED, [R.CHAIRMAN], description="Final approval")
    # Clarification responses
    + edge(S.SOP_CLARIFICATION, S.MANAGER_REVIEW, [R.SOP_VERIFIER] + _DEPARTMENTS)
    + edge(S.BUDGET_CLARIFICATION, S.MANAGER_REVIEW, [R.ACCOUNTANT])
    + edge(S.DEPARTMENT_CLARIFICATION, S.DEAN_REVIEW, _DEPARTMENTS)
    + edge(S.CLARIFICATION_REQUIRED, S.MANAGER_REVIEW, [R.REQUESTER],
           description="Requester answers and the request re-enters manager review")
)

DEFAULT_FORWARD_SHORTCUTS: Dict[Tuple[RequestStatus, UserRole], RequestStatus] = {
    (S.MANAGER_REVIEW, R.INSTITUTION_MANAGER): S.VP_APPROVAL,
    (S.INSTITUTION_VERIFIED, R.INSTITUTION_MANAGER): S.VP_APPROVAL,
    (S.VP_APPROVAL, R.VP): S.HOI_APPROVAL,
    (S.HOI_APPROVAL, R.HEAD_OF_INSTITUTION): S.DEAN_REVIEW,
    (S.DEAN_REVIEW, R.DEAN): S.CHIEF_DIRECTOR_APPROVAL,
    (S.DEAN_VERIFICATION, R.DEAN): S.CHIEF_DIRECTOR_APPROVAL,
    (S.CHIEF_DIRECTOR_APPROVAL, R.CHIEF_DIRECTOR): S.CHAIRMAN_APPROVAL,
}


class RuleTable:
    """
    Ordered, immutable set of approval edges plus forward shortcuts

    Pure data: lookups filter the table, condition evaluation belongs to the
    RouteResolver.
    """

    def __init__(
        self,
        rules: Sequence[TransitionRule] = DEFAULT_RULES,
        forward_shortcuts: Optional[Dict[Tuple[RequestStatus, UserRole], RequestStatus]] = None
    ):
        self._rules: Tuple[TransitionRule, ...] = tuple(rules)
        shortcuts = DEFAULT_FORWARD_SHORTCUTS if forward_shortcuts is None else forward_shortcuts
        self._forward_shortcuts = dict(shortcuts)

    @property
    def rules(self) -> Tuple[TransitionRule, ...]:
        return self._rules

    @property
    def forward_shortcuts(self) -> Dict[Tuple[RequestStatus, UserRole], RequestStatus]:
        return dict(self._forward_shortcuts)

    def __len__(self) -> int:
        return len(self._rules)

    def candidates(self, from_status: RequestStatus, role: UserRole) -> List[TransitionRule]:
        """Rules leaving from_status for role, in declaration order"""
        return [
            r for r in self._rules
            if r.from_status == from_status and r.required_role == role
        ]

    def outgoing(self, from_status: RequestStatus) -> List[TransitionRule]:
        return [r for r in self._rules if r.from_status == from_status]

    def forward_target(self, from_status: RequestStatus, role: UserRole) -> Optional[RequestStatus]:
        return self._forward_shortcuts.get((from_status, role))

    def validate(self, gate: "AuthorizationGate") -> List[str]:
        """
        Check the table for structural mistakes

        Returns:
            Human readable issues; empty when the table is sound
        """
        issues: List[str] = []
        seen_fallback: Dict[Tuple[RequestStatus, UserRole], TransitionRule] = {}

        for index, rule in enumerate(self._rules):
            label = f"rule {index + 1} ({rule.from_status.value} -> {rule.to_status.value}, {rule.required_role.value})"

            if rule.from_status.is_terminal:
                issues.append(f"{label}: leaves terminal status {rule.from_status.value}")

            if not gate.is_authorized(rule.required_role, rule.from_status):
                issues.append(
                    f"{label}: role {rule.required_role.value} may not act on {rule.from_status.value}"
                )

            key = (rule.from_status, rule.required_role)
            if key in seen_fallback:
                issues.append(f"{label}: unreachable, shadowed by an earlier unconditional rule")
            elif not rule.is_conditional:
                seen_fallback[key] = rule

        for (from_status, role), target in self._forward_shortcuts.items():
            label = f"forward shortcut ({from_status.value}, {role.value}) -> {target.value}"
            if from_status.is_terminal:
                issues.append(f"{label}: leaves terminal status")
            if not gate.is_authorized(role, from_status):
                issues.append(f"{label}: role {role.value} may not act on {from_status.value}")

        return issues
