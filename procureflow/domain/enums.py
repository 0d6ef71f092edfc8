"""Domain Enumerations - All status, role and action definitions"""
from enum import Enum


class RequestStatus(str, Enum):
    """Stage of a purchase request within the approval pipeline"""
    SUBMITTED = "submitted"
    MANAGER_REVIEW = "manager_review"
    SOP_VERIFICATION = "sop_verification"
    BUDGET_CHECK = "budget_check"
    INSTITUTION_VERIFIED = "institution_verified"
    VP_APPROVAL = "vp_approval"
    HOI_APPROVAL = "hoi_approval"
    DEAN_REVIEW = "dean_review"
    DEPARTMENT_CHECKS = "department_checks"
    DEAN_VERIFICATION = "dean_verification"
    CHIEF_DIRECTOR_APPROVAL = "chief_director_approval"
    CHAIRMAN_APPROVAL = "chairman_approval"
    APPROVED = "approved"
    REJECTED = "rejected"
    # Side states that loop back into the main path
    CLARIFICATION_REQUIRED = "clarification_required"  # Waiting for requester
    SOP_CLARIFICATION = "sop_clarification"
    BUDGET_CLARIFICATION = "budget_clarification"
    DEPARTMENT_CLARIFICATION = "department_clarification"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES


TERMINAL_STATUSES = frozenset({RequestStatus.APPROVED, RequestStatus.REJECTED})


class UserRole(str, Enum):
    """Authority class of an actor"""
    REQUESTER = "requester"
    INSTITUTION_MANAGER = "institution_manager"
    SOP_VERIFIER = "sop_verifier"
    ACCOUNTANT = "accountant"
    VP = "vp"
    HEAD_OF_INSTITUTION = "head_of_institution"
    DEAN = "dean"
    MMA = "mma"
    HR = "hr"
    AUDIT = "audit"
    IT = "it"
    CHIEF_DIRECTOR = "chief_director"
    CHAIRMAN = "chairman"


DEPARTMENT_ROLES = frozenset({UserRole.MMA, UserRole.HR, UserRole.AUDIT, UserRole.IT})


class ActionType(str, Enum):
    """Verb an actor performs on a request"""
    CREATE = "create"
    APPROVE = "approve"
    REJECT = "reject"
    CLARIFY = "clarify"
    FORWARD = "forward"


class ClarificationType(str, Enum):
    """Who is being asked to clarify"""
    SOP = "sop"
    ACCOUNTANT = "accountant"
    DEPARTMENT = "department"
    REQUESTER = "requester"


class ConditionOperator(str, Enum):
    """Operators for condition evaluation"""
    EQUALS = "EQUALS"
    NOT_EQUALS = "NOT_EQUALS"
    GREATER_THAN = "GREATER_THAN"
    LESS_THAN = "LESS_THAN"
    IN = "IN"
    NOT_IN = "NOT_IN"
    IS_EMPTY = "IS_EMPTY"
    IS_NOT_EMPTY = "IS_NOT_EMPTY"


class AuditEventType(str, Enum):
    """Types of audit events"""
    CREATE_REQUEST = "CREATE_REQUEST"
    UPDATE_REQUEST = "UPDATE_REQUEST"
    DELETE_REQUEST = "DELETE_REQUEST"
    APPROVE = "APPROVE"
    REJECT = "REJECT"
    CLARIFY = "CLARIFY"
    FORWARD = "FORWARD"

    @classmethod
    def for_action(cls, action: ActionType) -> "AuditEventType":
        """Map a transition action to its audit event type"""
        return cls(action.value.upper())
