"""
Request CRUD Routes

Create, read, list, update and delete purchase requests.
"""

from typing import Any, Dict, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status

from ...deps import get_current_user_dep, get_correlation_id_dep, get_request_service
from ....config.settings import settings
from ....domain.models import ActorContext
from ....domain.enums import RequestStatus
from ....domain.errors import DomainError
from ....services.request_service import RequestService
from ....utils.logger import get_logger
from .schemas import (
    CreateRequestBody, UpdateRequestBody, RequestListResponse, AuditEventListResponse
)

logger = get_logger(__name__)
router = APIRouter()


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_request(
    body: CreateRequestBody,
    actor: ActorContext = Depends(get_current_user_dep),
    correlation_id: str = Depends(get_correlation_id_dep),
    service: RequestService = Depends(get_request_service)
) -> Dict[str, Any]:
    """
    Raise a new purchase request

    Only requesters can create. The request starts in SUBMITTED with a CREATE
    history entry.
    """
    try:
        request = service.create_request(
            title=body.title,
            purpose=body.purpose,
            college=body.college,
            department=body.department,
            cost_estimate=body.cost_estimate,
            expense_category=body.expense_category,
            sop_reference=body.sop_reference,
            attachments=body.attachments,
            actor=actor,
            correlation_id=correlation_id
        )

        logger.info(
            f"Created request: {request.request_id}",
            extra={"request_id": request.request_id, "actor_id": actor.user_id}
        )
        return service.describe(request)

    except DomainError as e:
        raise HTTPException(status_code=e.http_status, detail=e.to_dict())


@router.get("", response_model=RequestListResponse)
async def list_requests(
    status: Optional[RequestStatus] = Query(None, description="Filter by status"),
    college: Optional[str] = Query(None, description="Filter by college"),
    pending_approvals: bool = Query(False, description="Only requests my role can act on now"),
    page: int = Query(1, ge=1),
    page_size: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    actor: ActorContext = Depends(get_current_user_dep),
    correlation_id: str = Depends(get_correlation_id_dep),
    service: RequestService = Depends(get_request_service)
):
    """
    List requests

    Requesters see their own requests only. `pending_approvals=true` narrows
    the list to statuses where the caller's role is an entitled approver.
    """
    try:
        items, total = service.list_requests(
            actor=actor,
            status=status,
            college=college,
            pending_approvals=pending_approvals,
            skip=(page - 1) * page_size,
            limit=page_size
        )
        return RequestListResponse(
            items=[service.describe(r) for r in items],
            page=page,
            page_size=page_size,
            total=total
        )

    except DomainError as e:
        raise HTTPException(status_code=e.http_status, detail=e.to_dict())


@router.get("/{request_id}")
async def get_request(
    request_id: str,
    actor: ActorContext = Depends(get_current_user_dep),
    correlation_id: str = Depends(get_correlation_id_dep),
    service: RequestService = Depends(get_request_service)
) -> Dict[str, Any]:
    """Get a request with its history, progress and current approvers"""
    try:
        return service.describe(service.get_request(request_id, actor))

    except DomainError as e:
        raise HTTPException(status_code=e.http_status, detail=e.to_dict())


@router.put("/{request_id}")
async def update_request(
    request_id: str,
    body: UpdateRequestBody,
    actor: ActorContext = Depends(get_current_user_dep),
    correlation_id: str = Depends(get_correlation_id_dep),
    service: RequestService = Depends(get_request_service)
) -> Dict[str, Any]:
    """
    Edit a request's descriptive fields

    Owner only, and only while SUBMITTED or CLARIFICATION_REQUIRED.
    """
    try:
        request = service.update_request(
            request_id=request_id,
            updates=body.changes(),
            actor=actor,
            correlation_id=correlation_id
        )
        return service.describe(request)

    except DomainError as e:
        raise HTTPException(status_code=e.http_status, detail=e.to_dict())


@router.delete("/{request_id}")
async def delete_request(
    request_id: str,
    actor: ActorContext = Depends(get_current_user_dep),
    correlation_id: str = Depends(get_correlation_id_dep),
    service: RequestService = Depends(get_request_service)
) -> Dict[str, str]:
    """Delete a request (owner only, while SUBMITTED or REJECTED)"""
    try:
        service.delete_request(request_id, actor, correlation_id=correlation_id)
        return {"message": "Request deleted successfully"}

    except DomainError as e:
        raise HTTPException(status_code=e.http_status, detail=e.to_dict())


@router.get("/{request_id}/audit-events", response_model=AuditEventListResponse)
async def list_audit_events(
    request_id: str,
    actor: ActorContext = Depends(get_current_user_dep),
    correlation_id: str = Depends(get_correlation_id_dep),
    service: RequestService = Depends(get_request_service)
):
    """Activity log of a request, newest first"""
    try:
        events = service.get_audit_events(request_id, actor)
        return AuditEventListResponse(items=[e.model_dump(mode="json") for e in events])

    except DomainError as e:
        raise HTTPException(status_code=e.http_status, detail=e.to_dict())
