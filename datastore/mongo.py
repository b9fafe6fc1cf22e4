"""MongoDB connection bootstrap and collection reset."""

from __future__ import annotations

import logging
from typing import Any, Optional

import pymongo
from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from models.schemas import ResetMode
from settings import Settings

logger = logging.getLogger(__name__)


class StoreSetupError(RuntimeError):
    """Raised when the destination store cannot be prepared for a run."""


class MongoStore:
    """Connected client plus the readings collection it targets."""

    def __init__(self, client: MongoClient, database: str, collection: str) -> None:
        self.client = client
        self.database = database
        self.collection_name = collection

    @property
    def collection(self) -> Collection:
        return self.client[self.database][self.collection_name]

    def close(self) -> None:
        self.client.close()


def connect_store(settings: Settings) -> MongoStore:
    """Connect to MongoDB and confirm the server answers a ping."""
    try:
        client: MongoClient = MongoClient(
            settings.mongo_uri,
            serverSelectionTimeoutMS=settings.server_selection_timeout_ms,
            tz_aware=True,
        )
    except (PyMongoError, ValueError) as exc:
        raise StoreSetupError(f"Could not create MongoDB client: {exc}") from exc

    try:
        client.admin.command("ping")
    except PyMongoError as exc:
        client.close()
        raise StoreSetupError(f"MongoDB did not answer ping: {exc}") from exc

    logger.info(
        "Connected to MongoDB",
        extra={"collection": f"{settings.mongo_db}.{settings.mongo_collection}"},
    )
    return MongoStore(client, settings.mongo_db, settings.mongo_collection)


def reset_collection(collection: Any, mode: ResetMode, timeout: float) -> Optional[int]:
    """Empty ``collection`` before a load.

    Returns the number of deleted documents for a truncate and ``None`` for a
    drop, which does not report one.
    """
    try:
        with pymongo.timeout(timeout):
            if mode is ResetMode.drop:
                collection.drop()
                deleted = None
            else:
                deleted = collection.delete_many({}).deleted_count
    except PyMongoError as exc:
        raise StoreSetupError(f"Could not {mode.value} collection: {exc}") from exc

    logger.info(
        "Reset destination collection",
        extra={"collection": getattr(collection, "name", None), "deleted_count": deleted},
    )
    return deleted
