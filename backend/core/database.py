import logging
from typing import Any, Dict, List, Optional
from motor.motor_asyncio import AsyncIOMotorClient
from bson import ObjectId

from core import config

logger = logging.getLogger(__name__)

SUPPORT_COLLECTION = "supports"
APPOINTMENT_COLLECTION = "appointments"


class StorageError(Exception):
    """The document store could not be reached or rejected an operation"""


class DatabaseManager:
    def __init__(self, uri: Optional[str] = None, db_name: Optional[str] = None):
        self.uri = uri or config.MONGODB_URI
        self.db_name = db_name or config.MONGODB_DB_NAME
        self.client = None
        self.db = None
        self.connected = False

    async def connect(self):
        """Connect to MongoDB"""
        if self.connected:
            return

        try:
            self.client = AsyncIOMotorClient(
                self.uri, serverSelectionTimeoutMS=config.MONGODB_TIMEOUT_MS
            )
            self.db = self.client[self.db_name]

            # Test connection
            await self.client.admin.command("ping")
            self.connected = True

            await self._create_indexes()

            logger.info(f"[Database] Connected to {self.db_name}")

        except Exception as e:
            logger.error(f"[Database] Connection failed: {e}")
            if self.client:
                self.client.close()
            self.client = None
            self.db = None
            raise StorageError(f"Could not connect to MongoDB: {e}") from e

    async def _create_indexes(self):
        """Create indexes backing the list orderings"""
        try:
            await self.db[SUPPORT_COLLECTION].create_index([("createdAt", -1)])
            await self.db[APPOINTMENT_COLLECTION].create_index([("appointmentDate", -1)])
            await self.db[APPOINTMENT_COLLECTION].create_index("status")

        except Exception as e:
            logger.error(f"[Database] Index creation error: {e}")

    async def ensure_connected(self):
        """Ensure database connection is active"""
        if not self.connected:
            await self.connect()

    async def ping(self) -> bool:
        """True when the server answers a ping; retries the connection if it is down"""
        if not self.connected:
            try:
                await self.connect()
            except StorageError:
                return False

        try:
            await self.db.command("ping")
            return True

        except Exception as e:
            logger.warning(f"[Database] Ping failed: {e}")
            return False

    async def insert_document(self, collection: str, document: Dict[str, Any]) -> ObjectId:
        await self.ensure_connected()

        try:
            result = await self.db[collection].insert_one(document)
            return result.inserted_id

        except Exception as e:
            logger.error(f"[Database] Insert into {collection} error: {e}")
            raise StorageError(f"Insert into {collection} failed: {e}") from e

    async def find_documents(
        self,
        collection: str,
        sort_field: str,
        direction: int = -1,
        limit: Optional[int] = None,
    ) -> List[Dict]:
        """All documents of a collection ordered by one field, optionally capped"""
        await self.ensure_connected()

        try:
            cursor = self.db[collection].find({}).sort(sort_field, direction)
            if limit:
                cursor = cursor.limit(limit)
            return await cursor.to_list(length=limit)

        except Exception as e:
            logger.error(f"[Database] Find in {collection} error: {e}")
            raise StorageError(f"Reading {collection} failed: {e}") from e

    async def find_document_by_id(self, collection: str, document_id: ObjectId) -> Optional[Dict]:
        await self.ensure_connected()

        try:
            return await self.db[collection].find_one({"_id": document_id})

        except Exception as e:
            logger.error(f"[Database] Get {collection} by ID error: {e}")
            raise StorageError(f"Reading {collection} failed: {e}") from e

    async def replace_document(
        self, collection: str, document_id: ObjectId, document: Dict[str, Any]
    ) -> bool:
        """Replace a whole document; False when no document has that id"""
        await self.ensure_connected()

        try:
            result = await self.db[collection].replace_one({"_id": document_id}, document)
            return result.matched_count > 0

        except Exception as e:
            logger.error(f"[Database] Replace in {collection} error: {e}")
            raise StorageError(f"Updating {collection} failed: {e}") from e

    async def delete_document(self, collection: str, document_id: ObjectId) -> bool:
        await self.ensure_connected()

        try:
            result = await self.db[collection].delete_one({"_id": document_id})
            return result.deleted_count > 0

        except Exception as e:
            logger.error(f"[Database] Delete from {collection} error: {e}")
            raise StorageError(f"Deleting from {collection} failed: {e}") from e

    async def close(self):
        """Close database connection"""
        if self.client:
            self.client.close()
            self.connected = False
            logger.info("[Database] Connection closed")


# Shared by the API routers and the startup/shutdown hooks
database = DatabaseManager()
