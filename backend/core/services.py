import logging
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from core.database import (
    APPOINTMENT_COLLECTION,
    SUPPORT_COLLECTION,
    DatabaseManager,
)
from core.models import Created, Deleted, Found, Listed, NotFound, Rejected, Updated
from core.schema import APPOINTMENT_SCHEMA, SUPPORT_SCHEMA, FieldRule, validate
from core.utils import serialize_document, to_object_id, utc_now

logger = logging.getLogger(__name__)


class UnsupportedOperation(Exception):
    """The resource kind does not allow this operation"""


class ResourceService:
    """
    CRUD operations for one resource kind.

    Subclasses only declare the collection, rule table and list ordering.
    Storage problems surface as core.database.StorageError; every other
    outcome is returned as one of the core.models result types.
    """

    resource_name = "Record"
    collection: str = ""
    schema: Tuple[FieldRule, ...] = ()
    sort_field = "createdAt"
    list_limit: Optional[int] = None
    mutable = False

    def __init__(self, db: DatabaseManager):
        self.db = db

    @property
    def field_names(self):
        return [rule.name for rule in self.schema]

    def _present(self, document: Dict[str, Any]) -> Dict[str, Any]:
        return serialize_document(document)

    async def create(self, payload: Mapping[str, Any]) -> Union[Created, Rejected]:
        result = validate(self.schema, payload)
        if not result.ok:
            logger.info(f"{self.resource_name} rejected: {result.errors}")
            return Rejected(result.errors)

        document = dict(result.value)
        now = utc_now()
        document["createdAt"] = now
        if self.mutable:
            document["updatedAt"] = now

        inserted_id = await self.db.insert_document(self.collection, document)
        document["_id"] = inserted_id
        logger.info(f"New {self.resource_name.lower()} saved: {inserted_id}")
        return Created(self._present(document))

    async def list(self) -> Listed:
        documents = await self.db.find_documents(
            self.collection, self.sort_field, direction=-1, limit=self.list_limit
        )
        return Listed([self._present(doc) for doc in documents])

    async def get_by_id(self, record_id: str) -> Union[Found, NotFound]:
        object_id = to_object_id(record_id)
        if object_id is None:
            return NotFound(self.resource_name, record_id)

        document = await self.db.find_document_by_id(self.collection, object_id)
        if not document:
            return NotFound(self.resource_name, record_id)
        return Found(self._present(document))

    async def update(
        self, record_id: str, changes: Mapping[str, Any]
    ) -> Union[Updated, NotFound, Rejected]:
        """Merge `changes` over the stored record and re-validate the whole result"""
        if not self.mutable:
            raise UnsupportedOperation(f"{self.resource_name} records cannot be updated")

        object_id = to_object_id(record_id)
        if object_id is None:
            return NotFound(self.resource_name, record_id)

        existing = await self.db.find_document_by_id(self.collection, object_id)
        if not existing:
            return NotFound(self.resource_name, record_id)

        if not isinstance(changes, Mapping):
            return Rejected(["Request body must be a JSON object"])

        merged = {name: existing[name] for name in self.field_names if name in existing}
        merged.update(changes)

        result = validate(self.schema, merged)
        if not result.ok:
            logger.info(f"{self.resource_name} update rejected: {result.errors}")
            return Rejected(result.errors)

        document = dict(result.value)
        document["createdAt"] = existing.get("createdAt") or utc_now()
        document["updatedAt"] = utc_now()

        # Last write wins; a concurrent delete shows up as no match
        if not await self.db.replace_document(self.collection, object_id, document):
            return NotFound(self.resource_name, record_id)

        document["_id"] = object_id
        logger.info(f"{self.resource_name} updated: {object_id}")
        return Updated(self._present(document))

    async def delete_by_id(self, record_id: str) -> Union[Deleted, NotFound]:
        object_id = to_object_id(record_id)
        if object_id is None:
            return NotFound(self.resource_name, record_id)

        if not await self.db.delete_document(self.collection, object_id):
            return NotFound(self.resource_name, record_id)

        logger.info(f"{self.resource_name} deleted: {object_id}")
        return Deleted(str(object_id))


class SupportService(ResourceService):
    """Support requests are append/delete only"""

    resource_name = "Support request"
    collection = SUPPORT_COLLECTION
    schema = SUPPORT_SCHEMA
    sort_field = "createdAt"
    list_limit = 10
    mutable = False


class AppointmentService(ResourceService):
    resource_name = "Appointment"
    collection = APPOINTMENT_COLLECTION
    schema = APPOINTMENT_SCHEMA
    sort_field = "appointmentDate"
    list_limit = None
    mutable = True
