"""
Database client configuration and lifecycle.

Provides the pymongo async client setup, database and collection lookups,
and a health check used by services that embed the repositories.
"""

from typing import Optional

from pymongo import AsyncMongoClient
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import PyMongoError

from docdao.core.config import settings
from docdao.core.logging_config import get_logger
from docdao.stores.mongo import MongoCollection

logger = get_logger(__name__)

# Global client instance
# Created lazily on first use and reused; pymongo pools connections itself
_client: Optional[AsyncMongoClient] = None


def get_client() -> AsyncMongoClient:
    """
    Return the shared AsyncMongoClient, creating it on first call.

    Returns:
        Configured AsyncMongoClient instance

    Note:
        Client construction does not open connections; the first
        operation does.
    """
    global _client
    if _client is None:
        _client = AsyncMongoClient(
            settings.mongodb_url,
            serverSelectionTimeoutMS=settings.mongodb_timeout_ms,
            tz_aware=True,
            uuidRepresentation="standard",
        )
        logger.info(
            "MongoDB client created",
            extra={"database": settings.mongodb_database},
        )
    return _client


def get_database(name: Optional[str] = None) -> AsyncDatabase:
    """
    Get a database handle.

    Args:
        name: Database name (defaults to settings.mongodb_database)
    """
    return get_client()[name or settings.mongodb_database]


def get_collection(name: str, database: Optional[str] = None) -> MongoCollection:
    """
    Get a repository-ready collection.

    Args:
        name: Collection name
        database: Database name (defaults to settings.mongodb_database)

    Returns:
        MongoCollection wrapping the pymongo collection

    Example:
        users = UserRepository(get_collection("users"))
    """
    return MongoCollection(get_database(database)[name])


async def close_client() -> None:
    """
    Close the shared client.

    Should be called at application shutdown to cleanly close
    all pooled connections.
    """
    global _client
    if _client is not None:
        await _client.close()
        _client = None
        logger.info("MongoDB client closed")


class DatabaseHealthCheck:
    """
    Database health check utilities.

    Provides methods to verify database connectivity and readiness.
    """

    @staticmethod
    async def check_connection() -> bool:
        """
        Check if the MongoDB server is reachable.

        Returns:
            True if the ping command succeeds, False otherwise
        """
        try:
            await get_database().command("ping")
            return True
        except PyMongoError:
            logger.warning("MongoDB ping failed", exc_info=True)
            return False

    @staticmethod
    def get_database_info() -> dict:
        """
        Get database information for monitoring.

        The connection URL is reduced to its scheme so credentials are
        never reported.
        """
        return {
            "scheme": settings.mongodb_url.split("://", 1)[0],
            "database": settings.mongodb_database,
            "async": True,
        }
