"""
Generic Repository Base Class
Shared async query helpers for MongoDB collections.
"""
from typing import Generic, TypeVar, Type, Optional, List, Dict, Any
from motor.motor_asyncio import AsyncIOMotorCollection, AsyncIOMotorDatabase
from bson import ObjectId
import datetime as dt

from ..models.base import MongoBaseModel
from ..utils.observability import logger

# Generic type for domain models
T = TypeVar("T", bound=MongoBaseModel)


class BaseRepository(Generic[T]):
    """
    Generic async repository for MongoDB collections.
    Provides type-safe create and query operations for domain models.

    Usage:
        class AlertRepository(BaseRepository[Alert]):
            def __init__(self, database: AsyncIOMotorDatabase):
                super().__init__(database, "alerts", Alert)
    """

    def __init__(
        self,
        database: AsyncIOMotorDatabase,
        collection_name: str,
        model_class: Type[T]
    ):
        """
        Initialize repository with database connection and model type.

        Args:
            database: Motor database instance
            collection_name: MongoDB collection name
            model_class: Pydantic model class for type safety
        """
        self.database = database
        self.collection: AsyncIOMotorCollection = database[collection_name]
        self.model_class = model_class
        self.collection_name = collection_name

    async def create(self, document: T) -> T:
        """
        Insert a new document into the collection.

        The input model is left untouched; a fresh instance carrying the
        generated `_id` and timestamps is returned.

        Args:
            document: Domain model instance to persist

        Returns:
            The created document with `_id` populated

        Raises:
            pymongo.errors.DuplicateKeyError: If unique constraint violated
        """
        now = dt.datetime.now(dt.UTC)

        doc_dict = document.model_dump(by_alias=True, exclude={"id"})
        doc_dict["created_at"] = now
        doc_dict["updated_at"] = now

        result = await self.collection.insert_one(doc_dict)

        logger.bind(document_id=str(result.inserted_id)).debug(
            f"Created document in {self.collection_name}"
        )

        doc_dict["_id"] = result.inserted_id
        return self._to_model(doc_dict)

    async def find_by_id(self, document_id: str) -> Optional[T]:
        """
        Retrieve a document by its MongoDB ObjectId.

        Args:
            document_id: String representation of ObjectId

        Returns:
            Domain model instance or None if not found or not a valid id
        """
        if not ObjectId.is_valid(document_id):
            return None

        doc = await self.collection.find_one({"_id": ObjectId(document_id)})

        if doc is None:
            return None

        return self._to_model(doc)

    async def find_one(self, filter_dict: Dict[str, Any]) -> Optional[T]:
        """
        Retrieve the first document matching the filter.

        Args:
            filter_dict: MongoDB query filter

        Returns:
            Domain model instance or None if not found
        """
        doc = await self.collection.find_one(filter_dict)

        if doc is None:
            return None

        return self._to_model(doc)

    async def find_many(
        self,
        filter_dict: Dict[str, Any],
        limit: int = 100,
        skip: int = 0,
        sort: Optional[List[tuple]] = None
    ) -> List[T]:
        """
        Retrieve multiple documents matching the filter.

        Args:
            filter_dict: MongoDB query filter
            limit: Maximum number of documents to return
            skip: Number of documents to skip (pagination)
            sort: List of (field, direction) tuples for sorting

        Returns:
            List of domain model instances
        """
        cursor = self.collection.find(filter_dict, sort=sort, skip=skip, limit=limit)
        docs = await cursor.to_list(length=limit)

        return [self._to_model(doc) for doc in docs]

    async def count(self, filter_dict: Optional[Dict[str, Any]] = None) -> int:
        """
        Count documents matching the filter.

        Args:
            filter_dict: MongoDB query filter (None for all documents)

        Returns:
            Number of matching documents
        """
        filter_dict = filter_dict or {}
        return await self.collection.count_documents(filter_dict)

    def _to_model(self, doc: Dict[str, Any]) -> T:
        """
        Convert MongoDB document to Pydantic model instance.

        Fields the model does not declare are dropped, so collections
        shared with other writers (the AI pipeline) load cleanly.
        """
        model_fields = self.model_class.model_fields.keys()

        cleaned_doc = {
            k: v for k, v in doc.items()
            if k in model_fields
        }
        if "_id" in doc:
            cleaned_doc["_id"] = str(doc["_id"])

        return self.model_class.model_validate(cleaned_doc)
