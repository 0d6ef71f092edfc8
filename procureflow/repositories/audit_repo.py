"""Audit Repository - Append-only store of request activity"""
from typing import Any, Dict, Iterable, List, Optional
from pymongo.collection import Collection
from pymongo import DESCENDING

from .mongo_client import get_collection, AUDIT_EVENTS_COLLECTION
from ..domain.models import AuditEvent
from ..domain.enums import AuditEventType
from ..utils.logger import get_logger

logger = get_logger(__name__)


class AuditRepository:
    """
    Audit events are inserted once and never updated

    Reads come back newest first. A request's history array stays the record
    of transitions; this collection adds CRUD events and correlation ids.
    """

    def __init__(self, collection: Optional[Collection] = None):
        self._events: Collection = (
            collection if collection is not None else get_collection(AUDIT_EVENTS_COLLECTION)
        )

    def create_event(self, event: AuditEvent) -> AuditEvent:
        doc = event.model_dump()
        doc["_id"] = event.audit_event_id
        self._events.insert_one(doc)

        logger.info(
            f"Audit {event.event_type.value} on {event.request_id}",
            extra={"request_id": event.request_id, "actor_id": event.actor.user_id}
        )
        return event

    def get_events_for_request(
        self,
        request_id: str,
        event_types: Optional[List[AuditEventType]] = None,
        skip: int = 0,
        limit: int = 100
    ) -> List[AuditEvent]:
        """Events of one request, optionally narrowed to some event types"""
        query: Dict[str, Any] = {"request_id": request_id}
        if event_types:
            query["event_type"] = {"$in": [et.value for et in event_types]}

        cursor = self._events.find(query).sort("timestamp", DESCENDING).skip(skip).limit(limit)
        return self._to_models(cursor)

    def get_events_by_correlation_id(self, correlation_id: str) -> List[AuditEvent]:
        """Everything written while serving one HTTP call"""
        cursor = self._events.find({"correlation_id": correlation_id}).sort("timestamp", DESCENDING)
        return self._to_models(cursor)

    @staticmethod
    def _to_models(docs: Iterable[Dict[str, Any]]) -> List[AuditEvent]:
        events = []
        for doc in docs:
            doc.pop("_id", None)
            events.append(AuditEvent.model_validate(doc))
        return events
