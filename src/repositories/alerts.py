"""
Alert Repository
Alert persistence with storage-level deduplication on (call_id, type).
"""
from typing import Optional
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError
from bson import ObjectId
import datetime as dt

from .base import BaseRepository
from ..models.alert import Alert, AlertFilters, AlertPage, AlertType
from ..utils.observability import logger


class AlertRepository(BaseRepository[Alert]):
    """
    Repository for Alert persistence and dashboard queries.
    Relies on the idx_alert_call_type_unique index for idempotent inserts.
    """

    def __init__(self, database: AsyncIOMotorDatabase):
        """Initialize Alert repository with database connection."""
        super().__init__(database, "alerts", Alert)

    async def exists(self, call_id: str, alert_type: AlertType) -> bool:
        """
        Check whether an alert of this type was already recorded for the call.

        Informational only; insert_if_absent does not depend on it.
        """
        doc = await self.collection.find_one(
            {"call_id": call_id, "type": str(alert_type)},
            projection={"_id": 1}
        )
        return doc is not None

    async def insert_if_absent(self, alert: Alert) -> Optional[Alert]:
        """
        Insert an alert unless one with the same (call_id, type) exists.

        The unique index arbitrates concurrent evaluations of the same call:
        whichever insert loses gets DuplicateKeyError, which is the dedup
        signal rather than an error.

        Args:
            alert: Alert to persist

        Returns:
            The created Alert, or None if it already existed

        Raises:
            pymongo.errors.PyMongoError: On any other storage failure
        """
        try:
            return await self.create(alert)
        except DuplicateKeyError:
            logger.bind(call_id=alert.call_id, type=alert.type).debug(
                f"Alert already exists: {alert.call_id}/{alert.type}"
            )
            return None

    async def list_for_company(
        self,
        company_id: str,
        filters: Optional[AlertFilters] = None
    ) -> AlertPage:
        """
        Paginated alert list for the dashboard, newest first.

        Args:
            company_id: Owning company
            filters: Unread-only, agent, type and pagination options

        Returns:
            AlertPage with the requested slice and the total match count
        """
        filters = filters or AlertFilters()

        filter_dict = {"company_id": company_id}
        if filters.unread_only:
            filter_dict["is_read"] = False
        if filters.agent_id:
            filter_dict["agent_id"] = filters.agent_id
        if filters.type:
            filter_dict["type"] = str(filters.type)

        alerts = await self.find_many(
            filter_dict=filter_dict,
            limit=filters.limit,
            skip=filters.skip,
            sort=[("created_at", -1)]
        )
        total = await self.count(filter_dict)

        return AlertPage(data=alerts, total=total, page=filters.page, limit=filters.limit)

    async def mark_read(self, alert_id: str, company_id: Optional[str] = None) -> bool:
        """
        Flag an alert as read.

        Args:
            alert_id: Alert ObjectId as string
            company_id: When given, the alert must belong to this company

        Returns:
            True if the alert exists (already-read alerts included), False otherwise
        """
        if not ObjectId.is_valid(alert_id):
            return False

        query = {"_id": ObjectId(alert_id)}
        if company_id is not None:
            query["company_id"] = company_id

        result = await self.collection.update_one(
            query,
            {"$set": {"is_read": True, "updated_at": dt.datetime.now(dt.UTC)}}
        )

        if result.matched_count == 0:
            return False

        logger.bind(alert_id=alert_id).info(f"Alert marked as read: {alert_id}")
        return True

    async def count_unread(self, company_id: str, agent_id: Optional[str] = None) -> int:
        """Unread alert count for the dashboard badge."""
        filter_dict = {"company_id": company_id, "is_read": False}
        if agent_id:
            filter_dict["agent_id"] = agent_id
        return await self.count(filter_dict)
