"""Repository modules - Data access layer"""
from .mongo_client import get_database, get_collection
from .request_repo import RequestRepository
from .audit_repo import AuditRepository

__all__ = [
    "get_database",
    "get_collection",
    "RequestRepository",
    "AuditRepository",
]
