"""
Member Storage - CRUD over the members collection.

This module is the only place that talks to MongoDB. It validates
caller-supplied fields explicitly before any write, converts raw
documents into typed Member objects and turns driver failures into
the service's tagged errors (MemberValidationError, MemberNotFoundError,
StoreError), so the routes can branch on the failure kind.
"""

import logging
from collections.abc import Mapping
from typing import Any, Optional

from bson import ObjectId
from pydantic import ValidationError
from pymongo import ASCENDING, AsyncMongoClient, ReturnDocument
from pymongo.errors import PyMongoError

from ..core.config import MongoConfig
from ..core.errors import MemberNotFoundError, MemberValidationError, StoreError
from ..core.utils import format_validation_errors
from ..models.schemas import REQUIRED_MEMBER_FIELDS, Member, MemberCreate, MemberUpdate

# Configure logging
logger = logging.getLogger(__name__)


class MemberStore:
    """
    Record store for member documents.

    Every operation touches a single document (or a single query), so
    there is no transaction and no concurrency control: two updates to
    the same id race and the last one wins.

    The store owns the Mongo client when it was built with
    from_settings() and closes it in close(). A store without a
    collection is unavailable: every operation raises StoreError.
    """

    def __init__(
        self,
        collection,
        client: Optional[AsyncMongoClient] = None,
        unavailable_reason: Optional[str] = None
    ):
        """
        Args:
            collection: Async collection holding member documents, or None
            client: Client to close on shutdown, if the store owns one
            unavailable_reason: Why there is no collection, if so
        """
        self.collection = collection
        self._client = client
        self.unavailable_reason = unavailable_reason

    @classmethod
    def from_settings(cls, config: MongoConfig) -> "MemberStore":
        """
        Build a store on a new AsyncMongoClient.

        The driver connects lazily, so this never blocks and never fails
        because the database is down. A connection string the driver
        rejects yields an unavailable store instead of an exception.
        """
        try:
            client = AsyncMongoClient(
                config.uri,
                serverSelectionTimeoutMS=config.server_selection_timeout_ms
            )
            database = client.get_default_database(default=config.database)
        except (ValueError, PyMongoError) as e:
            logger.error(f"Invalid MongoDB configuration: {str(e)}")
            return cls(None, unavailable_reason=f"Banco de dados indisponível: {e}")
        logger.info(f"Member store using {database.name}.{config.collection}")
        return cls(database[config.collection], client=client)

    async def close(self):
        """Close the underlying client, if owned."""
        if self._client is not None:
            await self._client.close()
            self._client = None

    async def ping(self) -> bool:
        """
        Check whether the database answers.

        Returns:
            True if the ping command succeeded, False otherwise
        """
        if self.collection is None:
            return False
        try:
            await self.collection.database.command("ping")
            return True
        except Exception as e:
            logger.warning(f"Database ping failed: {str(e)}")
            return False

    # ============================================================
    # Queries
    # ============================================================

    async def list_members(self) -> list[Member]:
        """
        Return every member sorted by nome, ascending.

        Raises:
            StoreError: the query failed
        """
        try:
            cursor = self._require_collection().find({}).sort("nome", ASCENDING)
            documents = await cursor.to_list(length=None)
        except PyMongoError as e:
            logger.error(f"Error listing members: {str(e)}")
            raise StoreError(str(e)) from e

        return [self._to_member(document) for document in documents]

    # ============================================================
    # Writes
    # ============================================================

    async def create_member(self, fields: Any) -> Member:
        """
        Validate and insert a new member.

        Args:
            fields: Raw request body

        Returns:
            The stored member, including its generated id

        Raises:
            MemberValidationError: a required field is missing or malformed
            StoreError: the insert failed
        """
        data = self._validate(MemberCreate, fields)
        document = data.model_dump(exclude_none=True)

        try:
            result = await self._require_collection().insert_one(document)
        except PyMongoError as e:
            logger.error(f"Error creating member: {str(e)}")
            raise StoreError(str(e)) from e

        document["_id"] = result.inserted_id
        logger.info(f"Member {result.inserted_id} created")
        return self._to_member(document)

    async def update_member(self, member_id: str, fields: Any) -> Member:
        """
        Apply a partial update to an existing member.

        Only the fields present in the request are changed. An empty
        update returns the member unchanged. Never creates a document.

        Raises:
            MemberNotFoundError: no member has this id
            MemberValidationError: a field value is malformed, or a
                required field is set to null or ""
            StoreError: the update failed
        """
        object_id = self._parse_id(member_id)
        data = self._validate(MemberUpdate, fields)
        changes = data.model_dump(exclude_unset=True)

        for name in REQUIRED_MEMBER_FIELDS:
            if name in changes and not changes[name]:
                raise MemberValidationError(
                    f"Member validation failed: {name}: Field required"
                )

        collection = self._require_collection()
        try:
            if changes:
                document = await collection.find_one_and_update(
                    {"_id": object_id},
                    {"$set": changes},
                    return_document=ReturnDocument.AFTER
                )
            else:
                document = await collection.find_one({"_id": object_id})
        except PyMongoError as e:
            logger.error(f"Error updating member {member_id}: {str(e)}")
            raise StoreError(str(e)) from e

        if document is None:
            raise MemberNotFoundError(member_id)

        logger.info(f"Member {member_id} updated ({', '.join(changes) or 'no changes'})")
        return self._to_member(document)

    async def delete_member(self, member_id: str) -> Member:
        """
        Remove a member.

        Returns:
            The member as it was before removal

        Raises:
            MemberNotFoundError: no member has this id
            StoreError: the delete failed
        """
        object_id = self._parse_id(member_id)

        try:
            document = await self._require_collection().find_one_and_delete({"_id": object_id})
        except PyMongoError as e:
            logger.error(f"Error deleting member {member_id}: {str(e)}")
            raise StoreError(str(e)) from e

        if document is None:
            raise MemberNotFoundError(member_id)

        logger.info(f"Member {member_id} deleted")
        return self._to_member(document)

    # ============================================================
    # Helpers
    # ============================================================

    def _require_collection(self):
        if self.collection is None:
            raise StoreError(self.unavailable_reason or "Banco de dados indisponível")
        return self.collection

    def _validate(self, model, fields: Any):
        if not isinstance(fields, Mapping):
            raise MemberValidationError(
                "Member validation failed: body must be a JSON object"
            )
        try:
            return model.model_validate(dict(fields))
        except ValidationError as e:
            raise MemberValidationError(format_validation_errors(e)) from e

    def _parse_id(self, member_id: str) -> ObjectId:
        # A malformed id cannot match any document.
        if not ObjectId.is_valid(member_id):
            raise MemberNotFoundError(member_id)
        return ObjectId(member_id)

    def _to_member(self, document: Mapping[str, Any]) -> Member:
        data = {key: value for key, value in document.items() if key != "_id"}
        data["id"] = str(document["_id"])
        try:
            return Member.model_validate(data)
        except ValidationError as e:
            logger.error(f"Unreadable member document {data['id']}: {str(e)}")
            raise StoreError(format_validation_errors(e)) from e
