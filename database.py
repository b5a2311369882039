"""
MongoDB persistence for user schedules.

ScheduleStore wraps a single pymongo collection. It is constructed once at
startup (see main.lifespan) and handed to request handlers; every method maps
to exactly one database operation.
"""
import logging
from typing import Any, Dict, List, Optional

import pymongo
from pymongo import MongoClient, ReturnDocument
from pymongo.collection import Collection

from schemas import UserSchedule

logger = logging.getLogger(__name__)

# Seconds; bounds server selection for health checks only.
PING_TIMEOUT = 2.0


def day_key(day: int) -> str:
    """Storage key for a validated day number."""
    return str(day)


def _to_schedule(doc: Dict[str, Any]) -> UserSchedule:
    """
    Build a UserSchedule from a stored document. A null day list reads as [];
    anything else malformed raises pydantic.ValidationError.
    """
    tasks = doc.get("tasks") or {}
    if isinstance(tasks, dict):
        tasks = {k: [] if v is None else v for k, v in tasks.items()}
    return UserSchedule(name=doc.get("name") or "", tasks=tasks)


class ScheduleStore:
    def __init__(self, collection: Collection, client: Optional[MongoClient] = None):
        self.collection = collection
        self.client = client

    @classmethod
    def connect(cls, database_url: str, database_name: str, collection_name: str = "users") -> "ScheduleStore":
        """Open the client, ping the server and bind the collection."""
        client = MongoClient(database_url)
        client.admin.command("ping")
        logger.info("Connected to MongoDB database %r", database_name)
        return cls(client[database_name][collection_name], client=client)

    def ping(self) -> bool:
        if self.client is None:
            return True
        try:
            with pymongo.timeout(PING_TIMEOUT):
                self.client.admin.command("ping")
            return True
        except Exception:
            logger.warning("MongoDB ping failed", exc_info=True)
            return False

    def close(self) -> None:
        if self.client is not None:
            self.client.close()
            logger.info("MongoDB connection closed")

    def list_schedules(self) -> List[UserSchedule]:
        return [_to_schedule(d) for d in self.collection.find({}, {"_id": 0})]

    def get_schedule(self, name: str) -> Optional[UserSchedule]:
        doc = self.collection.find_one({"name": name}, {"_id": 0})
        return _to_schedule(doc) if doc is not None else None

    def replace_schedule(self, name: str, tasks: Optional[Dict[str, List[str]]] = None) -> UserSchedule:
        """
        Upsert the record for name. A given tasks mapping replaces the stored
        one outright; without it an existing record is left untouched and a new
        one starts with an empty mapping.
        """
        if tasks is not None:
            update = {"$set": {"tasks": tasks}}
        else:
            update = {"$setOnInsert": {"tasks": {}}}
        doc = self.collection.find_one_and_update(
            {"name": name},
            update,
            projection={"_id": 0},
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )
        return _to_schedule(doc)

    def replace_day(self, name: str, day: int, tasks: List[str]) -> List[str]:
        """Set tasks.<day> only and return the stored list after the write."""
        doc = self.collection.find_one_and_update(
            {"name": name},
            {"$set": {f"tasks.{day_key(day)}": tasks}},
            projection={"_id": 0},
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )
        return _to_schedule(doc).day_tasks(day)

    def count(self) -> int:
        return self.collection.count_documents({})

    def insert_many(self, schedules: List[UserSchedule]) -> int:
        result = self.collection.insert_many([s.model_dump() for s in schedules])
        return len(result.inserted_ids)
