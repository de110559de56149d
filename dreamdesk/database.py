"""
Database connection and document store setup.

One Motor client is created at startup, wrapped in a DocumentStore and kept
on app.state for the request dependencies; it is closed at shutdown.
"""

import logging

from fastapi import FastAPI
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING

from dreamdesk.config import get_settings
from dreamdesk.services.document_store import DocumentStore
from dreamdesk.services.user_sync import CONTENT_COLLECTIONS, OWNER_FIELD

logger = logging.getLogger(__name__)


async def ensure_indexes(database: AsyncIOMotorDatabase) -> None:
    """Owner + recency index backing the per-user content listings."""
    for collection in CONTENT_COLLECTIONS.values():
        await database[collection].create_index([(OWNER_FIELD, ASCENDING), ("updatedAt", DESCENDING)])


async def connect_to_mongo(app: FastAPI) -> DocumentStore:
    """
    Create the Motor client and the DocumentStore.
    Called once at application startup.
    """
    settings = get_settings()
    client = AsyncIOMotorClient(settings.mongodb_url, tz_aware=True)
    database = client[settings.mongodb_database]
    await ensure_indexes(database)

    store = DocumentStore(database)
    app.state.mongo_client = client
    app.state.document_store = store
    logger.info("MongoDB connection established (database=%s).", settings.mongodb_database)
    return store


async def close_mongo_connection(app: FastAPI) -> None:
    """Close MongoDB connection on application shutdown."""
    client = getattr(app.state, "mongo_client", None)
    if client is not None:
        logger.info("Closing MongoDB connection.")
        client.close()
