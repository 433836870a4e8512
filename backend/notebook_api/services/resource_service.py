"""
Notebook API - Resource Service
===============================

What:  CRUD business logic for one document collection, always owner-scoped.
How:   Every method takes the DocumentStore and the authenticated subject id,
       builds its filter with `scoped_filter()`, makes exactly one store call,
       and translates the outcome into a return value or an application error.
Who:   Called by the notes and folders route handlers.

Flow per operation:
    ┌──────────────┐    ┌────────────────┐    ┌──────────────┐    ┌──────────┐
    │ parse id     │───▶│ scoped filter  │───▶│ store call   │───▶│ 404 if   │
    │ (400 if bad) │    │ {id, owner}    │    │ (500 if err) │    │ no match │
    └──────────────┘    └────────────────┘    └──────────────┘    └──────────┘

Error Handling Strategy:
    Identifier parsing happens before the store is touched. Any exception
    raised by the store is logged with its type and wrapped in StoreError,
    whose message names the failed operation and nothing else. NotFoundError
    is raised outside the wrapped block so it is never mistaken for a store
    failure. Nothing is retried.
"""

import logging
import uuid
from typing import Any, Dict, List

from notebook_api.database import DocumentStore
from notebook_api.exceptions import NotFoundError, StoreError
from notebook_api.services.access import parse_document_id, scoped_filter, strip_owner_fields

logger = logging.getLogger(__name__)


class ResourceService:
    """
    Owner-scoped operations on a single collection.

    Args:
        collection:  Store collection name ("notes", "folders")
        resource:    Singular resource name used in messages ("note", "folder")

    Stateless apart from those two names; one module-level instance per
    collection is shared by all requests.
    """

    def __init__(self, collection: str, resource: str):
        self.collection = collection
        self.resource = resource

    @property
    def label(self) -> str:
        return self.resource.capitalize()

    async def create(
        self,
        store: DocumentStore,
        subject_id: str,
        body: Dict[str, Any],
    ) -> uuid.UUID:
        """
        Insert `body` as a new document owned by `subject_id`.

        Reserved fields in the body are dropped first, so the owner is always
        the verified subject.
        """
        document = scoped_filter(subject_id, strip_owner_fields(body))
        try:
            document_id = await store.insert_one(self.collection, document)
        except Exception as e:
            logger.error("Store error creating %s for %s: %s", self.resource, subject_id, str(e), exc_info=True)
            raise StoreError(
                message=f"Failed to create {self.resource}",
                context={"error_type": type(e).__name__, "collection": self.collection},
            )

        logger.info("Created %s %s for subject %s", self.resource, document_id, subject_id)
        return document_id

    async def list(self, store: DocumentStore, subject_id: str) -> List[Dict[str, Any]]:
        """Every document owned by `subject_id`; empty list when there are none."""
        try:
            return await store.find(self.collection, scoped_filter(subject_id))
        except Exception as e:
            logger.error("Store error listing %s for %s: %s", self.collection, subject_id, str(e), exc_info=True)
            raise StoreError(
                message=f"Failed to fetch {self.collection}",
                context={"error_type": type(e).__name__, "collection": self.collection},
            )

    async def get(self, store: DocumentStore, subject_id: str, raw_id: str) -> Dict[str, Any]:
        """
        Fetch one owned document.

        Raises:
            InvalidIdentifierError: `raw_id` is malformed (→ 400)
            NotFoundError: no document with that id is owned by the subject (→ 404)
            StoreError: the store call failed (→ 500)
        """
        document_id = parse_document_id(raw_id, self.resource)
        try:
            document = await store.find_one(
                self.collection, scoped_filter(subject_id, {"id": document_id})
            )
        except Exception as e:
            logger.error("Store error fetching %s %s: %s", self.resource, document_id, str(e), exc_info=True)
            raise StoreError(
                message=f"Failed to fetch {self.resource}",
                context={"error_type": type(e).__name__, "resource_id": str(document_id)},
            )

        if document is None:
            raise NotFoundError(resource=self.resource, resource_id=str(document_id))
        return document

    async def update(
        self,
        store: DocumentStore,
        subject_id: str,
        raw_id: str,
        body: Dict[str, Any],
    ) -> None:
        """
        Shallow-merge the body's top-level fields into an owned document.

        Omitted fields are left untouched; reserved fields are ignored.
        Same error contract as `get`.
        """
        document_id = parse_document_id(raw_id, self.resource)
        fields = strip_owner_fields(body)
        try:
            matched = await store.update_one(
                self.collection, scoped_filter(subject_id, {"id": document_id}), fields
            )
        except Exception as e:
            logger.error("Store error updating %s %s: %s", self.resource, document_id, str(e), exc_info=True)
            raise StoreError(
                message=f"Failed to update {self.resource}",
                context={"error_type": type(e).__name__, "resource_id": str(document_id)},
            )

        if not matched:
            raise NotFoundError(resource=self.resource, resource_id=str(document_id))
        logger.info("Updated %s %s (%d fields)", self.resource, document_id, len(fields))

    async def delete(self, store: DocumentStore, subject_id: str, raw_id: str) -> None:
        """Delete an owned document. Same error contract as `get`."""
        document_id = parse_document_id(raw_id, self.resource)
        try:
            deleted = await store.delete_one(
                self.collection, scoped_filter(subject_id, {"id": document_id})
            )
        except Exception as e:
            logger.error("Store error deleting %s %s: %s", self.resource, document_id, str(e), exc_info=True)
            raise StoreError(
                message=f"Failed to delete {self.resource}",
                context={"error_type": type(e).__name__, "resource_id": str(document_id)},
            )

        if not deleted:
            raise NotFoundError(resource=self.resource, resource_id=str(document_id))
        logger.info("Deleted %s %s", self.resource, document_id)


# ── Service Instances ─────────────────────────────────────────────────────
note_service = ResourceService(collection="notes", resource="note")
folder_service = ResourceService(collection="folders", resource="folder")
