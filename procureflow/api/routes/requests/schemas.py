"""
Request Schemas

Request and response models for purchase request endpoints.
Field names are accepted in snake_case or camelCase.
"""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from ....domain.enums import ActionType, ClarificationType


class _Body(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")


# =============================================================================
# CRUD Schemas
# =============================================================================

class CreateRequestBody(_Body):
    """Request to raise a new purchase request"""
    title: str = Field(..., min_length=5, max_length=500)
    purpose: str = Field(..., min_length=10, max_length=5000)
    college: str = Field(..., min_length=1, max_length=200)
    department: str = Field(..., min_length=1, max_length=200)
    cost_estimate: float = Field(..., gt=0)
    expense_category: str = Field(..., min_length=1, max_length=200)
    sop_reference: Optional[str] = Field(None, max_length=200)
    attachments: List[str] = Field(default_factory=list)


class UpdateRequestBody(_Body):
    """Partial edit of descriptive fields"""
    title: Optional[str] = Field(None, min_length=5, max_length=500)
    purpose: Optional[str] = Field(None, min_length=10, max_length=5000)
    college: Optional[str] = Field(None, min_length=1, max_length=200)
    department: Optional[str] = Field(None, min_length=1, max_length=200)
    cost_estimate: Optional[float] = Field(None, gt=0)
    expense_category: Optional[str] = Field(None, min_length=1, max_length=200)
    sop_reference: Optional[str] = Field(None, max_length=200)
    attachments: Optional[List[str]] = None

    def changes(self) -> Dict[str, Any]:
        """Fields the client actually sent, minus nulls"""
        return self.model_dump(exclude_unset=True, exclude_none=True)


class RequestListResponse(BaseModel):
    """Response for request list"""
    items: List[Dict[str, Any]]
    page: int
    page_size: int
    total: int


class AuditEventListResponse(BaseModel):
    """Activity log of a request"""
    items: List[Dict[str, Any]]


# =============================================================================
# Action Schemas
# =============================================================================

class ActionRequest(_Body):
    """Approve / reject / clarify / forward a request"""
    action: ActionType
    notes: Optional[str] = Field(None, max_length=2000)
    budget_available: Optional[bool] = None
    direct_to_chairman: Optional[bool] = None
    forwarded_message: Optional[str] = Field(None, max_length=5000)
    attachments: List[str] = Field(default_factory=list)
    target: Optional[ClarificationType] = Field(
        None,
        description="Clarification target: sop, accountant (or budget), department, requester"
    )

    @field_validator("target", mode="before")
    @classmethod
    def normalize_target(cls, v: Any) -> Any:
        """Older clients send 'budget' for the accountant clarification"""
        if isinstance(v, str):
            v = v.strip().lower()
            if v == "budget":
                return ClarificationType.ACCOUNTANT.value
            if not v:
                return None
        return v
