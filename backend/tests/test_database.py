"""
Tests for MongoDB client lifecycle helpers.

Client construction does not connect, so these run without a server;
the health check is exercised with the database handle patched.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from bson.binary import UuidRepresentation
from pymongo.errors import ServerSelectionTimeoutError

from docdao.core import database
from docdao.core.database import (
    DatabaseHealthCheck,
    close_client,
    get_client,
    get_collection,
    get_database,
)
from docdao.stores.mongo import MongoCollection


@pytest.mark.anyio
class TestClientLifecycle:
    """Test suite for client creation and shutdown."""

    async def test_client_is_shared(self):
        """
        Test get_client returns one shared instance until closed.

        Arrange: No client yet
        Act: Get the client twice, close, get again
        Assert: Same instance until close, new one afterwards
        """
        # Act
        first = get_client()
        second = get_client()
        await close_client()
        third = get_client()

        # Assert
        assert first is second
        assert third is not first

        await close_client()

    async def test_client_encodes_uuids_and_decodes_aware_datetimes(self):
        """Test the client is configured to store UUIDs and aware datetimes."""
        try:
            options = get_client().codec_options
            assert options.uuid_representation == UuidRepresentation.STANDARD
            assert options.tz_aware is True
        finally:
            await close_client()

    async def test_database_from_settings(self):
        """Test the default database name comes from settings."""
        try:
            assert get_database().name == "docdao_test"
            assert get_database("other").name == "other"
        finally:
            await close_client()

    async def test_get_collection_wraps_driver(self):
        """Test get_collection returns a MongoCollection for the named collection."""
        try:
            users = get_collection("users")

            assert isinstance(users, MongoCollection)
            assert users.name == "users"
        finally:
            await close_client()

    async def test_close_without_client(self):
        """Test closing when no client exists is a no-op."""
        await close_client()
        await close_client()

        assert database._client is None


@pytest.mark.anyio
class TestDatabaseHealthCheck:
    """Test suite for DatabaseHealthCheck."""

    async def test_check_connection_healthy(self):
        """Test a successful ping reports healthy."""
        db = MagicMock()
        db.command = AsyncMock(return_value={"ok": 1})

        with patch("docdao.core.database.get_database", return_value=db):
            assert await DatabaseHealthCheck.check_connection() is True

        db.command.assert_awaited_once_with("ping")

    async def test_check_connection_unreachable(self):
        """Test a failed ping reports unhealthy instead of raising."""
        db = MagicMock()
        db.command = AsyncMock(side_effect=ServerSelectionTimeoutError("no servers"))

        with patch("docdao.core.database.get_database", return_value=db):
            assert await DatabaseHealthCheck.check_connection() is False

    def test_database_info_hides_credentials(self):
        """Test connection info reports the scheme, never the full URL."""
        info = DatabaseHealthCheck.get_database_info()

        assert info == {"scheme": "mongodb", "database": "docdao_test", "async": True}
