"""
Call Analysis Repository
Reads the scored calls written by the AI analysis pipeline.
"""
from typing import List, Optional
from motor.motor_asyncio import AsyncIOMotorDatabase
import datetime as dt

from .base import BaseRepository
from ..models.call_analysis import CallAnalysisRecord
from ..utils.observability import logger


class CallAnalysisRepository(BaseRepository[CallAnalysisRecord]):
    """
    Repository for CallAnalysisRecord lookups.
    The alert engine only reads; save_analysis exists for the pipeline side.
    """

    def __init__(self, database: AsyncIOMotorDatabase):
        """Initialize Call repository with database connection."""
        super().__init__(database, "calls", CallAnalysisRecord)

    async def get_by_call_id(self, call_id: str) -> Optional[CallAnalysisRecord]:
        """
        Retrieve a call's analysis by its external call id.

        Returns:
            CallAnalysisRecord or None if the call is unknown
        """
        return await self.find_one({"call_id": call_id})

    async def list_for_company(
        self,
        company_id: str,
        since: Optional[dt.datetime] = None,
        limit: int = 1000
    ) -> List[CallAnalysisRecord]:
        """
        Recently analyzed calls of a company, newest first.

        Args:
            company_id: Owning company
            since: Only calls analyzed at or after this time
            limit: Maximum number of calls to return
        """
        filter_dict = {"company_id": company_id}
        if since is not None:
            filter_dict["analyzed_at"] = {"$gte": since}

        return await self.find_many(
            filter_dict=filter_dict,
            limit=limit,
            sort=[("analyzed_at", -1)]
        )

    async def save_analysis(self, record: CallAnalysisRecord) -> CallAnalysisRecord:
        """
        Write (or overwrite, on re-analysis) the pipeline output for a call.

        Args:
            record: Analysis produced by the AI pipeline

        Returns:
            The stored record
        """
        now = dt.datetime.now(dt.UTC)
        doc = record.model_dump(by_alias=True, exclude={"id", "created_at"})
        doc["updated_at"] = now
        if doc.get("analyzed_at") is None:
            doc["analyzed_at"] = now

        await self.collection.update_one(
            {"call_id": record.call_id},
            {"$set": doc, "$setOnInsert": {"created_at": now}},
            upsert=True
        )

        logger.bind(call_id=record.call_id, company_id=record.company_id).debug(
            f"Stored call analysis {record.call_id}"
        )

        return await self.get_by_call_id(record.call_id)
