"""
Request Action Routes

Approval pipeline actions: approve, reject, clarify, forward.
"""

from typing import Any, Dict
from fastapi import APIRouter, Depends, HTTPException

from ...deps import get_current_user_dep, get_correlation_id_dep, get_request_service
from ....domain.models import ActorContext
from ....domain.errors import DomainError
from ....services.request_service import RequestService
from ....utils.logger import get_logger
from .schemas import ActionRequest

logger = get_logger(__name__)
router = APIRouter()


@router.post("/{request_id}/approve")
async def act_on_request(
    request_id: str,
    body: ActionRequest,
    actor: ActorContext = Depends(get_current_user_dep),
    correlation_id: str = Depends(get_correlation_id_dep),
    service: RequestService = Depends(get_request_service)
) -> Dict[str, Any]:
    """
    Apply an approval action to a request.

    The caller's role must be entitled to act on the request's current status.
    Returns the updated request. A 409 means the request moved on since it was
    read; reload and retry.
    """
    try:
        request = service.act(
            request_id=request_id,
            action=body.action,
            actor=actor,
            notes=body.notes,
            budget_available=body.budget_available,
            direct_to_chairman=body.direct_to_chairman,
            forwarded_message=body.forwarded_message,
            attachments=body.attachments,
            target=body.target,
            correlation_id=correlation_id
        )
        return service.describe(request)

    except DomainError as e:
        logger.warning(f"Action {body.action.value} on {request_id} refused: {e.error_code}")
        raise HTTPException(status_code=e.http_status, detail=e.to_dict())
