"""
MongoDB Connection Management
Singleton Motor client with connection pooling and lifecycle management.
"""
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from typing import Optional
from ..config import settings
from ..utils.observability import logger


async def ensure_indexes(db: AsyncIOMotorDatabase) -> None:
    """
    Create the indexes the alert engine relies on.

    The unique (call_id, type) index on alerts is what makes evaluation
    idempotent: a second insert for the same pair fails with
    DuplicateKeyError instead of creating a duplicate.
    """
    await db.alerts.create_index(
        [("call_id", 1), ("type", 1)],
        unique=True,
        name="idx_alert_call_type_unique"
    )
    await db.alerts.create_index(
        [("company_id", 1), ("created_at", -1)],
        name="idx_alert_company_created"
    )
    await db.alerts.create_index(
        [("company_id", 1), ("is_read", 1)],
        name="idx_alert_company_unread"
    )

    await db.calls.create_index("call_id", unique=True, name="idx_call_id_unique")
    await db.calls.create_index(
        [("company_id", 1), ("analyzed_at", -1)],
        name="idx_call_company_analyzed"
    )

    await db.rule_configurations.create_index(
        "company_id",
        unique=True,
        name="idx_rule_config_company_unique"
    )


class DatabaseManager:
    """
    Singleton MongoDB client manager with async Motor.
    Handles connection lifecycle, pooling, and graceful shutdown.
    """

    _instance: Optional["DatabaseManager"] = None
    _client: Optional[AsyncIOMotorClient] = None
    _database: Optional[AsyncIOMotorDatabase] = None

    def __new__(cls) -> "DatabaseManager":
        """Enforce singleton pattern."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    async def connect(self) -> None:
        """
        Initialize MongoDB connection with configured pool settings.
        Idempotent - safe to call multiple times.
        """
        if self._client is not None:
            logger.debug("Reusing existing MongoDB client")
            return

        logger.bind(
            database=settings.mongodb_database,
            max_pool_size=settings.mongodb_max_pool_size,
            environment=settings.environment
        ).info("Connecting to MongoDB")
        self._client = AsyncIOMotorClient(
            settings.mongodb_uri,
            maxPoolSize=settings.mongodb_max_pool_size,
            minPoolSize=settings.mongodb_min_pool_size,
            serverSelectionTimeoutMS=settings.mongodb_server_selection_timeout_ms,
        )

        self._database = self._client[settings.mongodb_database]

    async def disconnect(self) -> None:
        """
        Close MongoDB connection and cleanup resources.
        Idempotent - safe to call multiple times.
        """
        if self._client is None:
            logger.debug("MongoDB client already disconnected")
            return

        logger.info("Closing MongoDB connection")
        self._client.close()
        self._client = None
        self._database = None

    @property
    def database(self) -> AsyncIOMotorDatabase:
        """
        Get the database instance.
        Raises RuntimeError if not connected.
        """
        if self._database is None:
            raise RuntimeError(
                "Database not connected. Call await db_manager.connect() first."
            )
        return self._database

    @property
    def client(self) -> AsyncIOMotorClient:
        """
        Get the Motor client instance.
        Raises RuntimeError if not connected.
        """
        if self._client is None:
            raise RuntimeError(
                "Database client not connected. Call await db_manager.connect() first."
            )
        return self._client

    async def create_indexes(self) -> None:
        """
        Create all required indexes.
        Should be called during application startup.
        """
        logger.info("Creating MongoDB indexes")
        await ensure_indexes(self.database)
        logger.info("MongoDB indexes created successfully")


# Singleton instance
db_manager = DatabaseManager()


async def get_database() -> AsyncIOMotorDatabase:
    """
    Dependency injection helper for repositories.
    Returns the connected database instance.
    """
    return db_manager.database
