"""
Unit tests for DocumentModel and identity helpers.
"""

from datetime import datetime, timezone

import pytest
from bson import ObjectId
from pydantic import Field

from docdao.models.base import DocumentModel, from_store_id, to_store_id
from docdao.repositories.base import BaseRepository
from docdao.stores.memory import InMemoryCollection
from widgets import Widget


class Event(DocumentModel):
    title: str
    created_at: datetime = Field(alias="createdAt")


class TestIdentityHelpers:
    """Test suite for to_store_id / from_store_id."""

    def test_object_id_strings_converted(self):
        """Test 24-hex strings become ObjectIds."""
        oid = ObjectId()

        assert to_store_id(str(oid)) == oid

    def test_other_identities_verbatim(self):
        """Test non-ObjectId identities pass through unchanged."""
        assert to_store_id("user-42") == "user-42"
        assert to_store_id(42) == 42

    def test_from_store_id(self):
        """Test stored identities come back as strings."""
        oid = ObjectId()

        assert from_store_id(oid) == str(oid)
        assert from_store_id("user-42") == "user-42"
        assert from_store_id(None) is None


class TestDocumentModel:
    """Test suite for DocumentModel conversions."""

    def test_to_document_without_identity(self):
        """
        Test unsaved models omit _id.

        Arrange: Widget with no id
        Act: Convert to a document
        Assert: No id or _id key
        """
        # Arrange
        widget = Widget(name="cog", rank=2)

        # Act
        document = widget.to_document()

        # Assert
        assert document == {"name": "cog", "rank": 2, "color": None, "tags": []}

    def test_to_document_with_identity(self):
        """Test id moves to _id in store form."""
        oid = ObjectId()

        document = Widget(id=str(oid), name="cog").to_document()

        assert document["_id"] == oid
        assert "id" not in document

    def test_from_document(self):
        """Test _id maps back to a string id."""
        oid = ObjectId()

        widget = Widget.from_document({"_id": oid, "name": "cog", "rank": 5})

        assert widget.id == str(oid)
        assert widget.rank == 5

    def test_from_document_ignores_unknown_fields(self):
        """Test extra stored fields do not break model construction."""
        widget = Widget.from_document({"_id": "w1", "name": "cog", "legacy": True})

        assert widget.id == "w1"
        assert not hasattr(widget, "legacy")

    def test_from_partial_document_skips_validation(self):
        """Test projected documents missing required fields still load."""
        widget = Widget.from_partial_document({"_id": "w1", "rank": 3})

        assert widget.id == "w1"
        assert widget.rank == 3
        assert widget.tags == []

    def test_repr(self):
        """Test repr shows the entity type and identity."""
        assert repr(Widget(id="w1", name="cog")) == "Widget(id='w1')"


class TestAliasedFields:
    """Test suite for entities whose fields are stored under an alias."""

    def test_to_document_uses_alias(self):
        """Test aliased fields are written under the alias."""
        when = datetime(2024, 5, 1, tzinfo=timezone.utc)

        document = Event(title="launch", created_at=when).to_document()

        assert document == {"title": "launch", "createdAt": when}

    def test_populate_by_field_name_or_alias(self):
        """Test both the field name and the alias are accepted."""
        when = datetime(2024, 5, 1, tzinfo=timezone.utc)

        assert Event(title="a", created_at=when).created_at == when
        assert Event(title="a", createdAt=when).created_at == when

    def test_document_round_trip(self):
        """Test a stored document loads back into an equal entity."""
        event = Event(id="e1", title="launch", created_at=datetime(2024, 5, 1))

        assert Event.from_document(event.to_document()) == event

    @pytest.mark.anyio
    async def test_repository_round_trip(self):
        """
        Test create then get returns the aliased field unchanged.

        Arrange: Repository of Event over an in-memory collection
        Act: Create an event, then fetch, list and update it
        Assert: created_at survives every path, stored under createdAt
        """
        # Arrange
        collection = InMemoryCollection("events")
        repo = BaseRepository(collection, model_cls=Event)
        when = datetime(2024, 5, 1, tzinfo=timezone.utc)
        later = datetime(2024, 6, 1, tzinfo=timezone.utc)

        # Act
        created = await repo.create(Event(title="launch", created_at=when))
        fetched = await repo.get(created.id)
        records, _ = await repo.get_all(page=1, page_size=10)
        updated = await repo.update(
            created.id, Event(title="launch", created_at=later)
        )

        # Assert
        assert fetched == created
        assert records == [created]
        assert updated.created_at == later
        stored = next(iter(collection.documents.values()))
        assert "createdAt" in stored
        assert "created_at" not in stored
