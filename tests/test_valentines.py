"""Tests for valentine notes and their storage."""

import json

import pytest
from pydantic import ValidationError

from magician_board.models import RarityTier, RecipientType, ScoredRecord, ValentineNote
from magician_board.store import ValentineStore
from magician_board.valentines import (
    ValentineLimitError,
    ValentineNotFoundError,
    check_sender_limit,
    enrich_valentines,
    newest_first,
)


def create_test_note(sender: str = "alice", message: str = "Happy valentines!", **kwargs) -> ValentineNote:
    """Helper to create test notes."""
    return ValentineNote(sender_username=sender, message_text=message, **kwargs)


class TestValentineNote:
    """Tests for the note model."""

    def test_community_note_defaults(self):
        note = create_test_note()

        assert note.recipient_type == RecipientType.COMMUNITY
        assert note.recipient_username is None
        assert note.id is None

    def test_user_note_requires_recipient(self):
        with pytest.raises(ValidationError):
            create_test_note(recipient_type=RecipientType.USER)

    def test_message_is_stripped_and_required(self):
        assert create_test_note(message="  hi  ").message_text == "hi"
        with pytest.raises(ValidationError):
            create_test_note(message="   ")

    def test_message_length_limit(self):
        with pytest.raises(ValidationError):
            create_test_note(message="x" * 501)

    def test_stored_fields_drop_enrichment(self):
        note = create_test_note(sender_score=50.0, sender_role="Artist", rarity_tier=RarityTier.RARE)

        stored = note.stored_fields()

        assert "sender_score" not in stored
        assert "rarity_tier" not in stored
        assert stored["message_text"] == "Happy valentines!"


class TestHelpers:
    """Tests for limit checks, ordering and enrichment."""

    def test_limit_allows_up_to_limit(self):
        existing = [create_test_note() for _ in range(4)]

        check_sender_limit(existing, "alice", limit=5)

    def test_limit_reached(self):
        existing = [create_test_note() for _ in range(5)] + [create_test_note(sender="bob")]

        with pytest.raises(ValentineLimitError) as exc_info:
            check_sender_limit(existing, "alice", limit=5)

        assert exc_info.value.limit == 5
        check_sender_limit(existing, "bob", limit=5)

    def test_newest_first(self):
        notes = [
            create_test_note(message="old", created_at="2025-02-01T10:00:00"),
            create_test_note(message="new", created_at="2025-02-14T10:00:00"),
        ]

        assert [n.message_text for n in newest_first(notes)] == ["new", "old"]

    def test_enrich_attaches_live_data(self):
        scored = [
            ScoredRecord(username="Alice", magician_score=82.3, roles="Curator | Artist"),
            ScoredRecord(username="bob", magician_score=12.0),
        ]
        notes = [create_test_note(sender="alice"), create_test_note(sender="bob"), create_test_note(sender="zed")]

        alice, bob, zed = enrich_valentines(notes, scored)

        assert alice.sender_score == 82.3
        assert alice.sender_role == "Curator"
        assert alice.rarity_tier == RarityTier.LEGENDARY
        assert bob.sender_role is None
        assert bob.rarity_tier == RarityTier.COMMON
        assert zed.sender_score is None
        assert zed == notes[2]

    def test_enrich_keeps_note_role_for_roleless_sender(self):
        scored = [ScoredRecord(username="bob", magician_score=12.0)]
        notes = [create_test_note(sender="bob", sender_role="Collector")]

        (bob,) = enrich_valentines(notes, scored)

        assert bob.sender_role == "Collector"
        assert bob.sender_score == 12.0

    def test_enrich_uses_first_written_role(self):
        scored = [ScoredRecord(username="bob", magician_score=12.0, roles="-Artist")]

        (bob,) = enrich_valentines([create_test_note(sender="bob", sender_role="Old")], scored)

        assert bob.sender_role == ""


class TestValentineStore:
    """Tests for the JSON valentine store."""

    def test_empty_store(self, tmp_path):
        store = ValentineStore(tmp_path / "valentines.json")

        assert store.load_all() == []

    def test_insert_assigns_id(self, tmp_path):
        store = ValentineStore(tmp_path / "valentines.json")

        stored = store.save(create_test_note())

        assert stored.id
        assert [n.id for n in store.load_all()] == [stored.id]

    def test_enrichment_not_persisted(self, tmp_path):
        path = tmp_path / "valentines.json"
        store = ValentineStore(path)

        store.save(create_test_note(sender_score=99.0))

        data = json.loads(path.read_text())
        assert "sender_score" not in data[0]
        assert store.load_all()[0].sender_score is None

    def test_insert_limit(self, tmp_path):
        store = ValentineStore(tmp_path / "valentines.json", limit=2)
        store.save(create_test_note())
        store.save(create_test_note())

        with pytest.raises(ValentineLimitError):
            store.save(create_test_note())

        assert len(store.list_by_sender("alice")) == 2

    def test_update_not_limited(self, tmp_path):
        store = ValentineStore(tmp_path / "valentines.json", limit=1)
        stored = store.save(create_test_note())

        updated = store.save(stored.model_copy(update={"message_text": "Edited"}))

        notes = store.load_all()
        assert len(notes) == 1
        assert notes[0].message_text == "Edited"
        assert updated.id == stored.id

    def test_update_unknown_id(self, tmp_path):
        store = ValentineStore(tmp_path / "valentines.json")

        with pytest.raises(ValentineNotFoundError):
            store.save(create_test_note(id="missing"))

    def test_delete(self, tmp_path):
        store = ValentineStore(tmp_path / "valentines.json")
        keep = store.save(create_test_note(message="keep"))
        drop = store.save(create_test_note(message="drop"))

        store.delete(drop.id)

        assert [n.id for n in store.load_all()] == [keep.id]
        with pytest.raises(ValentineNotFoundError):
            store.delete(drop.id)
