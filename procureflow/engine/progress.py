"""Progress indicator along the canonical approval path"""
from typing import Tuple

from ..domain.enums import RequestStatus


CANONICAL_PATH: Tuple[RequestStatus, ...] = (
    RequestStatus.SUBMITTED,
    RequestStatus.MANAGER_REVIEW,
    RequestStatus.SOP_VERIFICATION,
    RequestStatus.BUDGET_CHECK,
    RequestStatus.INSTITUTION_VERIFIED,
    RequestStatus.VP_APPROVAL,
    RequestStatus.HOI_APPROVAL,
    RequestStatus.DEAN_REVIEW,
    RequestStatus.DEPARTMENT_CHECKS,
    RequestStatus.DEAN_VERIFICATION,
    RequestStatus.CHIEF_DIRECTOR_APPROVAL,
    RequestStatus.CHAIRMAN_APPROVAL,
    RequestStatus.APPROVED,
)


def progress(status: RequestStatus) -> Tuple[int, int]:
    """
    Position of status along the canonical path as (step, total)

    REJECTED and the clarification side states are not on the path and
    report step 0.
    """
    total = len(CANONICAL_PATH)
    if status not in CANONICAL_PATH:
        return 0, total
    return CANONICAL_PATH.index(status) + 1, total
