"""
Pytest Configuration and Fixtures

Repositories run against mongomock collections; the API client swaps the
request service dependency for one bound to those collections.
"""

import os
import tempfile

# Settings are read once at import time
os.environ.setdefault("JWT_SECRET", "procureflow-test-secret-that-is-long-enough-for-hs256")
os.environ.setdefault("LOGS_PATH", os.path.join(tempfile.gettempdir(), "procureflow-test-logs"))

import mongomock
import pytest
from typing import Callable, Dict, List, Optional, Tuple

from procureflow.domain.models import ActorContext, PurchaseRequest
from procureflow.domain.enums import UserRole, ActionType
from procureflow.repositories.mongo_client import REQUESTS_COLLECTION, AUDIT_EVENTS_COLLECTION
from procureflow.repositories.request_repo import RequestRepository
from procureflow.repositories.audit_repo import AuditRepository
from procureflow.services.request_service import RequestService


def make_actor(role: UserRole, user_id: Optional[str] = None) -> ActorContext:
    """Actor whose id and email derive from the role unless given"""
    user_id = user_id or f"{role.value}-1"
    return ActorContext(
        user_id=user_id,
        email=f"{user_id}@college.edu",
        display_name=role.value.replace("_", " ").title(),
        role=role
    )


# (role, approve kwargs) steps from SUBMITTED along the two main paths
BUDGET_PATH: List[Tuple[UserRole, Dict]] = [
    (UserRole.INSTITUTION_MANAGER, {}),                           # -> manager_review
    (UserRole.INSTITUTION_MANAGER, {}),                           # -> sop_verification
    (UserRole.SOP_VERIFIER, {}),                                  # -> budget_check
    (UserRole.ACCOUNTANT, {}),                                    # -> institution_verified
    (UserRole.INSTITUTION_MANAGER, {"budget_available": True}),   # -> vp_approval
    (UserRole.VP, {}),                                            # -> hoi_approval
    (UserRole.HEAD_OF_INSTITUTION, {}),                           # -> dean_review
    (UserRole.DEAN, {}),                                          # -> department_checks
    (UserRole.MMA, {}),                                           # -> dean_verification
    (UserRole.DEAN, {}),                                          # -> chief_director_approval
    (UserRole.CHIEF_DIRECTOR, {}),                                # -> chairman_approval
    (UserRole.CHAIRMAN, {}),                                      # -> approved
]

NO_BUDGET_PATH: List[Tuple[UserRole, Dict]] = BUDGET_PATH[:4] + [
    (UserRole.INSTITUTION_MANAGER, {"budget_available": False}),  # -> dean_review
] + BUDGET_PATH[7:]


@pytest.fixture
def db():
    """Fresh in-memory database per test"""
    return mongomock.MongoClient()["procureflow_test"]


@pytest.fixture
def request_repo(db) -> RequestRepository:
    return RequestRepository(db[REQUESTS_COLLECTION])


@pytest.fixture
def audit_repo(db) -> AuditRepository:
    return AuditRepository(db[AUDIT_EVENTS_COLLECTION])


@pytest.fixture
def service(request_repo, audit_repo) -> RequestService:
    return RequestService(request_repo=request_repo, audit_repo=audit_repo)


@pytest.fixture
def requester() -> ActorContext:
    return make_actor(UserRole.REQUESTER, "req-alice")


@pytest.fixture
def other_requester() -> ActorContext:
    return make_actor(UserRole.REQUESTER, "req-bob")


@pytest.fixture
def create_request(service, requester) -> Callable[..., PurchaseRequest]:
    """Factory creating a valid request; keyword overrides go to create_request"""
    def _create(**overrides) -> PurchaseRequest:
        fields = dict(
            title="Lab oscilloscopes",
            purpose="Two oscilloscopes for the electronics teaching lab",
            college="College of Engineering",
            department="Electronics",
            cost_estimate=1800.0,
            expense_category="Equipment",
            sop_reference=None,
            attachments=[],
            actor=requester,
        )
        fields.update(overrides)
        return service.create_request(**fields)
    return _create


@pytest.fixture
def walk(service) -> Callable[..., PurchaseRequest]:
    """Approve a request through the given (role, kwargs) steps"""
    def _walk(request_id: str, steps: List[Tuple[UserRole, Dict]]) -> PurchaseRequest:
        request = None
        for role, extra in steps:
            request = service.act(request_id, ActionType.APPROVE, make_actor(role), **extra)
        return request
    return _walk


@pytest.fixture
def app_client(service):
    """TestClient whose request service uses the mongomock collections"""
    from fastapi.testclient import TestClient
    from procureflow.main import app
    from procureflow.api.deps import get_request_service

    app.dependency_overrides[get_request_service] = lambda: service
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers() -> Callable[..., Dict[str, str]]:
    """Bearer header for an actor, signed with the configured secret"""
    from procureflow.utils.jwt import JWTValidator

    def _headers(actor: ActorContext) -> Dict[str, str]:
        token = JWTValidator().issue_token(
            user_id=actor.user_id,
            email=actor.email,
            role=actor.role,
            name=actor.display_name
        )
        return {"Authorization": f"Bearer {token}"}
    return _headers
