"""Domain Models - Pydantic schemas for all entities"""
from datetime import datetime
from typing import Annotated, Any, Dict, List, Literal, Optional, Union
from pydantic import BaseModel, Field, EmailStr, ConfigDict, field_validator

from .enums import (
    RequestStatus, UserRole, ActionType, ClarificationType,
    ConditionOperator, AuditEventType
)
from ..utils.time import ensure_utc


# ============================================================================
# User & Identity Snapshots
# ============================================================================

class UserSnapshot(BaseModel):
    """Snapshot of user identity at a point in time"""
    model_config = ConfigDict(extra="forbid", frozen=True)

    user_id: str = Field(..., description="User ID asserted by the session layer")
    email: EmailStr = Field(..., description="User email")
    display_name: str = Field(..., description="User display name")
    role_at_time: Optional[UserRole] = Field(None, description="Role when snapshot was taken")


class ActorContext(BaseModel):
    """Current actor context from the bearer token"""
    model_config = ConfigDict(extra="forbid")

    user_id: str = Field(..., description="User ID")
    email: EmailStr = Field(..., description="User email")
    display_name: str = Field(..., description="User display name")
    role: UserRole = Field(..., description="Role asserted by the session layer")

    def snapshot(self) -> UserSnapshot:
        return UserSnapshot(
            user_id=self.user_id,
            email=self.email,
            display_name=self.display_name,
            role_at_time=self.role
        )


# ============================================================================
# Condition & Transition Rules
# ============================================================================

class Condition(BaseModel):
    """Condition on a context field"""
    model_config = ConfigDict(extra="forbid", frozen=True)

    field: str = Field(..., description="Context field to evaluate")
    operator: ConditionOperator = Field(..., description="Comparison operator")
    value: Any = Field(None, description="Value to compare against")


class ConditionGroup(BaseModel):
    """Group of conditions with AND/OR logic"""
    model_config = ConfigDict(extra="forbid", frozen=True)

    logic: str = Field("AND", description="AND or OR")
    conditions: List[Condition] = Field(default_factory=list)


class TransitionRule(BaseModel):
    """One edge of the approval rule table"""
    model_config = ConfigDict(extra="forbid", frozen=True)

    from_status: RequestStatus
    to_status: RequestStatus
    required_role: UserRole
    condition: Optional[ConditionGroup] = Field(None, description="Predicate over the action context")
    description: Optional[str] = None

    @property
    def is_conditional(self) -> bool:
        return self.condition is not None and bool(self.condition.conditions)


# ============================================================================
# Action Contexts
# ============================================================================

class ApproveContext(BaseModel):
    """Decision inputs for an approval"""
    model_config = ConfigDict(extra="forbid", frozen=True)

    action: Literal[ActionType.APPROVE] = ActionType.APPROVE
    budget_available: Optional[bool] = None
    direct_to_chairman: Optional[bool] = None


class RejectContext(BaseModel):
    """Rejections carry no decision inputs"""
    model_config = ConfigDict(extra="forbid", frozen=True)

    action: Literal[ActionType.REJECT] = ActionType.REJECT


class ClarifyContext(BaseModel):
    """Which party is being asked to clarify"""
    model_config = ConfigDict(extra="forbid", frozen=True)

    action: Literal[ActionType.CLARIFY] = ActionType.CLARIFY
    clarification_type: ClarificationType = ClarificationType.REQUESTER


class ForwardContext(BaseModel):
    """Message attached to a forward"""
    model_config = ConfigDict(extra="forbid", frozen=True)

    action: Literal[ActionType.FORWARD] = ActionType.FORWARD
    message: str = Field(..., min_length=1, max_length=5000)


ActionContext = Annotated[
    Union[ApproveContext, RejectContext, ClarifyContext, ForwardContext],
    Field(discriminator="action")
]


# ============================================================================
# Purchase Request Aggregate
# ============================================================================

class HistoryEntry(BaseModel):
    """Audit record of one accepted transition (write-once)"""
    model_config = ConfigDict(extra="forbid", frozen=True)

    entry_id: str
    action: ActionType
    actor: UserSnapshot
    notes: Optional[str] = None
    budget_available: Optional[bool] = None
    direct_to_chairman: Optional[bool] = None
    forwarded_message: Optional[str] = None
    attachments: Optional[List[str]] = None
    previous_status: Optional[RequestStatus] = None
    new_status: RequestStatus
    clarification_target: Optional[ClarificationType] = None
    timestamp: datetime

    @field_validator("timestamp")
    @classmethod
    def _utc_timestamp(cls, v: datetime) -> datetime:
        return ensure_utc(v)


class PurchaseRequest(BaseModel):
    """Purchase/expense request with its ordered approval history"""
    model_config = ConfigDict(extra="forbid")

    request_id: str
    title: str
    purpose: str
    college: str
    department: str
    cost_estimate: float = Field(..., ge=0)
    expense_category: str
    sop_reference: Optional[str] = None
    attachments: List[str] = Field(default_factory=list)
    requester: UserSnapshot
    status: RequestStatus = RequestStatus.SUBMITTED
    history: List[HistoryEntry] = Field(default_factory=list)
    version: int = Field(1, description="Optimistic concurrency counter")
    created_at: datetime
    updated_at: datetime

    @field_validator("created_at", "updated_at")
    @classmethod
    def _utc_timestamps(cls, v: datetime) -> datetime:
        return ensure_utc(v)

    @property
    def last_entry(self) -> Optional[HistoryEntry]:
        return self.history[-1] if self.history else None

    def is_owned_by(self, actor: "ActorContext") -> bool:
        return self.requester.user_id == actor.user_id


# ============================================================================
# Audit
# ============================================================================

class AuditEvent(BaseModel):
    """Audit event (append-only)"""
    model_config = ConfigDict(extra="forbid")

    audit_event_id: str
    request_id: str
    event_type: AuditEventType
    actor: UserSnapshot
    details: Dict[str, Any] = Field(default_factory=dict)
    timestamp: datetime
    correlation_id: Optional[str] = None

    @field_validator("timestamp")
    @classmethod
    def _utc_timestamp(cls, v: datetime) -> datetime:
        return ensure_utc(v)
