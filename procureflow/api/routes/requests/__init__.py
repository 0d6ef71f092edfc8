"""
Request Routes Module

- crud.py: Create, list, get, update, delete requests and read their audit log
- actions.py: Approve / reject / clarify / forward

Both routers are mounted under /requests by the API router.
"""

from .schemas import (
    CreateRequestBody, UpdateRequestBody, RequestListResponse,
    AuditEventListResponse, ActionRequest
)
from .crud import router as crud_router
from .actions import router as actions_router

__all__ = [
    "crud_router", "actions_router",
    "CreateRequestBody", "UpdateRequestBody", "RequestListResponse",
    "AuditEventListResponse", "ActionRequest",
]
