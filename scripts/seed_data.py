"""
Seed Data Script - Creates sample purchase requests at different stages
Run: python -m scripts.seed_data
"""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from procureflow.repositories.mongo_client import get_collection, create_indexes, REQUESTS_COLLECTION
from procureflow.services.request_service import RequestService
from procureflow.domain.models import ActorContext
from procureflow.domain.enums import UserRole, ActionType, ClarificationType


def actor(role: UserRole, name: str) -> ActorContext:
    email = f"{role.value.replace('_', '.')}@college.edu"
    return ActorContext(user_id=email, email=email, display_name=name, role=role)


REQUESTER = actor(UserRole.REQUESTER, "Priya Raman")
MANAGER = actor(UserRole.INSTITUTION_MANAGER, "Institution Manager")
SOP = actor(UserRole.SOP_VERIFIER, "SOP Verifier")
ACCOUNTANT = actor(UserRole.ACCOUNTANT, "Accounts Office")
VP = actor(UserRole.VP, "Vice President")
HOI = actor(UserRole.HEAD_OF_INSTITUTION, "Head of Institution")
DEAN = actor(UserRole.DEAN, "Dean")
IT = actor(UserRole.IT, "IT Department")
CHIEF_DIRECTOR = actor(UserRole.CHIEF_DIRECTOR, "Chief Director")
CHAIRMAN = actor(UserRole.CHAIRMAN, "Chairman")


def _create(service: RequestService, title: str, purpose: str, cost: float, category: str):
    return service.create_request(
        title=title,
        purpose=purpose,
        college="College of Engineering",
        department="Computer Science",
        cost_estimate=cost,
        expense_category=category,
        sop_reference=None,
        attachments=[],
        actor=REQUESTER
    )


def seed_requests():
    """Create a handful of requests and walk some of them along the pipeline"""
    if get_collection(REQUESTS_COLLECTION).count_documents({}) > 0:
        print("Database already has data. Skipping seed.")
        return

    service = RequestService()

    fresh = _create(
        service, "Lab oscilloscopes", "Two oscilloscopes for the electronics teaching lab", 1800, "Equipment"
    )
    print(f"✅ {fresh.request_id}: submitted")

    budgeted = _create(
        service, "Conference travel", "Travel and registration for the IEEE conference in March", 2400, "Travel"
    )
    for who, extra in [
        (MANAGER, {}),
        (MANAGER, {}),
        (SOP, {}),
        (ACCOUNTANT, {}),
        (MANAGER, {"budget_available": True}),
        (VP, {}),
    ]:
        budgeted = service.act(budgeted.request_id, ActionType.APPROVE, who, notes="Looks fine", **extra)
    print(f"✅ {budgeted.request_id}: {budgeted.status.value}")

    unbudgeted = _create(
        service, "GPU workstation", "Workstation for the machine learning research group", 9500, "Equipment"
    )
    for who, extra in [
        (MANAGER, {}),
        (MANAGER, {}),
        (IT, {}),
        (ACCOUNTANT, {}),
        (MANAGER, {"budget_available": False}),
        (DEAN, {"budget_available": False}),
        (IT, {}),
        (DEAN, {}),
        (CHIEF_DIRECTOR, {}),
        (CHAIRMAN, {}),
    ]:
        unbudgeted = service.act(unbudgeted.request_id, ActionType.APPROVE, who, **extra)
    print(f"✅ {unbudgeted.request_id}: {unbudgeted.status.value}")

    queried = _create(
        service, "Library subscriptions", "Annual renewal of engineering journal subscriptions", 5200, "Subscriptions"
    )
    queried = service.act(queried.request_id, ActionType.APPROVE, MANAGER)
    queried = service.act(
        queried.request_id, ActionType.CLARIFY, MANAGER,
        notes="Please confirm the renewal quote", target=ClarificationType.ACCOUNTANT
    )
    print(f"✅ {queried.request_id}: {queried.status.value}")

    rejected = _create(
        service, "Office sofa set", "Replacement sofa set for the faculty lounge", 1200, "Furniture"
    )
    rejected = service.act(rejected.request_id, ActionType.REJECT, MANAGER, notes="Not a priority this year")
    print(f"✅ {rejected.request_id}: {rejected.status.value}")


if __name__ == "__main__":
    print("Creating indexes...")
    create_indexes()
    print("Seeding purchase requests...")
    seed_requests()
    print("Done!")
