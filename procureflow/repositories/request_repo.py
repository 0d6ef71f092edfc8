"""Request Repository - Data access for purchase request aggregates"""
from typing import Any, Dict, List, Optional
from pymongo.collection import Collection
from pymongo import DESCENDING, ReturnDocument

from .mongo_client import get_collection, REQUESTS_COLLECTION
from ..domain.models import PurchaseRequest, HistoryEntry
from ..domain.enums import RequestStatus
from ..domain.errors import RequestNotFoundError, ConcurrencyError
from ..utils.time import utc_now
from ..utils.logger import get_logger

logger = get_logger(__name__)


class RequestRepository:
    """
    Repository for purchase request aggregates

    The aggregate (descriptive fields + status + history) is one document, so a
    transition is a single conditional update on that document.
    """

    def __init__(self, collection: Optional[Collection] = None):
        self._requests: Collection = collection if collection is not None else get_collection(REQUESTS_COLLECTION)

    # =========================================================================
    # Create / Read
    # =========================================================================

    def create_request(self, request: PurchaseRequest) -> PurchaseRequest:
        """Insert a new request"""
        # Don't use mode="json" - it converts datetime to strings, breaking MongoDB sorting
        doc = request.model_dump()
        doc["_id"] = request.request_id

        self._requests.insert_one(doc)
        logger.info(f"Created request: {request.request_id}", extra={"request_id": request.request_id})
        return request

    def get_request(self, request_id: str) -> Optional[PurchaseRequest]:
        """Get request by ID"""
        doc = self._requests.find_one({"request_id": request_id})
        if doc:
            return self._to_model(doc)
        return None

    def get_request_or_raise(self, request_id: str) -> PurchaseRequest:
        """Get request by ID or raise error"""
        request = self.get_request(request_id)
        if not request:
            raise RequestNotFoundError(
                f"Request {request_id} not found",
                details={"request_id": request_id}
            )
        return request

    # =========================================================================
    # Conditional writes
    # =========================================================================

    def append_transition(
        self,
        request_id: str,
        entry: HistoryEntry,
        expected_status: RequestStatus,
        expected_version: int,
        extra_attachments: Optional[List[str]] = None
    ) -> PurchaseRequest:
        """
        Append a history entry and set status in one compare-and-swap

        The update only matches while the stored status and version still equal
        the values observed at load time. History and status are written by the
        same document update, so neither can land without the other.

        Raises:
            ConcurrencyError: The request moved on since it was loaded
            RequestNotFoundError: The request does not exist
        """
        update: Dict[str, Any] = {
            "$push": {"history": entry.model_dump()},
            "$set": {
                "status": entry.new_status.value,
                "updated_at": entry.timestamp,
            },
            "$inc": {"version": 1},
        }
        if extra_attachments:
            update["$push"]["attachments"] = {"$each": list(extra_attachments)}

        result = self._requests.find_one_and_update(
            {
                "request_id": request_id,
                "status": expected_status.value,
                "version": expected_version,
            },
            update,
            return_document=ReturnDocument.AFTER
        )

        if result is None:
            self._raise_missed_write(request_id, expected_status, expected_version)

        logger.info(
            f"Request {request_id}: {expected_status.value} -> {entry.new_status.value}",
            extra={
                "request_id": request_id,
                "action": entry.action.value,
                "from_status": expected_status.value,
                "to_status": entry.new_status.value,
                "actor_id": entry.actor.user_id,
            }
        )
        return self._to_model(result)

    def update_details(
        self,
        request_id: str,
        updates: Dict[str, Any],
        expected_version: int,
        allowed_statuses: List[RequestStatus]
    ) -> PurchaseRequest:
        """Update descriptive fields while the request sits in one of allowed_statuses"""
        updates = dict(updates)
        updates["updated_at"] = utc_now()

        result = self._requests.find_one_and_update(
            {
                "request_id": request_id,
                "version": expected_version,
                "status": {"$in": [s.value for s in allowed_statuses]},
            },
            {"$set": updates, "$inc": {"version": 1}},
            return_document=ReturnDocument.AFTER
        )

        if result is None:
            self._raise_missed_write(request_id, None, expected_version)

        logger.info(f"Updated request: {request_id}", extra={"request_id": request_id})
        return self._to_model(result)

    def delete_request(self, request_id: str, expected_version: int) -> None:
        """Delete a request if it has not changed since it was loaded"""
        result = self._requests.delete_one({"request_id": request_id, "version": expected_version})
        if result.deleted_count == 0:
            self._raise_missed_write(request_id, None, expected_version)
        logger.info(f"Deleted request: {request_id}", extra={"request_id": request_id})

    def _raise_missed_write(
        self,
        request_id: str,
        expected_status: Optional[RequestStatus],
        expected_version: int
    ) -> None:
        current = self._requests.find_one({"request_id": request_id}, {"status": 1, "version": 1})
        if current is None:
            raise RequestNotFoundError(
                f"Request {request_id} not found",
                details={"request_id": request_id}
            )

        details: Dict[str, Any] = {
            "request_id": request_id,
            "expected_version": expected_version,
            "current_version": current.get("version"),
            "current_status": current.get("status"),
        }
        if expected_status is not None:
            details["expected_status"] = expected_status.value

        logger.warning(f"Concurrent modification of request {request_id}", extra={"request_id": request_id})
        raise ConcurrencyError(
            f"Request {request_id} was modified. Please refresh and try again.",
            details=details
        )

    # =========================================================================
    # Queries
    # =========================================================================

    def _build_query(
        self,
        requester_id: Optional[str] = None,
        statuses: Optional[List[RequestStatus]] = None,
        college: Optional[str] = None
    ) -> Dict[str, Any]:
        query: Dict[str, Any] = {}
        if requester_id:
            query["requester.user_id"] = requester_id
        if statuses is not None:
            query["status"] = {"$in": [s.value for s in statuses]}
        if college:
            query["college"] = college
        return query

    def list_requests(
        self,
        requester_id: Optional[str] = None,
        statuses: Optional[List[RequestStatus]] = None,
        college: Optional[str] = None,
        skip: int = 0,
        limit: int = 20
    ) -> List[PurchaseRequest]:
        """List requests, newest first"""
        query = self._build_query(requester_id, statuses, college)
        cursor = self._requests.find(query).sort("created_at", DESCENDING).skip(skip).limit(limit)
        return [self._to_model(doc) for doc in cursor]

    def count_requests(
        self,
        requester_id: Optional[str] = None,
        statuses: Optional[List[RequestStatus]] = None,
        college: Optional[str] = None
    ) -> int:
        """Count requests matching the same filters as list_requests"""
        return self._requests.count_documents(self._build_query(requester_id, statuses, college))

    @staticmethod
    def _to_model(doc: Dict[str, Any]) -> PurchaseRequest:
        doc.pop("_id", None)
        return PurchaseRequest.model_validate(doc)
