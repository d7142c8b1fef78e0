"""JSON-file stand-ins for the member and valentine data store."""

import json
import logging
import uuid
from datetime import datetime
from pathlib import Path
from typing import Union

from .models import LeaderboardSnapshot, ValentineNote
from .valentines import (
    DEFAULT_VALENTINE_LIMIT,
    ValentineNotFoundError,
    check_sender_limit,
    newest_first,
)

logger = logging.getLogger(__name__)


class SnapshotStore:
    """Reads and writes leaderboard snapshots."""

    def __init__(self, path: Union[str, Path]):
        """
        Initialize snapshot store.

        Args:
            path: JSON file holding the snapshot
        """
        self.path = Path(path)

    def exists(self) -> bool:
        """Check if the snapshot file exists."""
        return self.path.exists()

    def load(self) -> LeaderboardSnapshot:
        """
        Load the snapshot.

        Accepts either a bare list of user records or an object with
        'lastUpdated' and 'users'.

        Raises:
            FileNotFoundError: If the file is missing
            pydantic.ValidationError: If a record is malformed
        """
        if not self.exists():
            raise FileNotFoundError(f"Snapshot not found: {self.path}")

        data = json.loads(self.path.read_text(encoding="utf-8"))
        if isinstance(data, list):
            data = {"users": data}

        snapshot = LeaderboardSnapshot.model_validate(data)
        logger.info("Loaded %d members from %s", len(snapshot.users), self.path)
        return snapshot

    def save(self, snapshot: LeaderboardSnapshot) -> Path:
        """Write the snapshot as indented JSON."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = {
            "lastUpdated": snapshot.last_updated or datetime.now().isoformat(),
            "users": [u.model_dump(mode="json") for u in snapshot.users],
        }
        self.path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        return self.path


class ValentineStore:
    """Persists valentine notes as a JSON list."""

    def __init__(self, path: Union[str, Path], limit: int = DEFAULT_VALENTINE_LIMIT):
        """
        Initialize valentine store.

        Args:
            path: JSON file holding the notes
            limit: Maximum stored notes per sender
        """
        self.path = Path(path)
        self.limit = limit

    def exists(self) -> bool:
        return self.path.exists()

    def load_all(self) -> list[ValentineNote]:
        """All stored notes, newest first (empty if the file is missing)."""
        if not self.exists():
            return []
        data = json.loads(self.path.read_text(encoding="utf-8"))
        return newest_first([ValentineNote.model_validate(item) for item in data])

    def list_by_sender(self, sender_username: str) -> list[ValentineNote]:
        """Notes from one sender, newest first."""
        return [n for n in self.load_all() if n.sender_username == sender_username]

    def save(self, note: ValentineNote) -> ValentineNote:
        """
        Insert a new note or update an existing one.

        Notes without an id are inserted (subject to the per-sender
        limit) and get a generated id. Notes with an id replace the
        stored note with that id.

        Returns:
            The note as stored

        Raises:
            ValentineLimitError: If the sender is at the limit
            ValentineNotFoundError: If the id is unknown
        """
        notes = self.load_all()
        now = datetime.now().isoformat()

        if note.id is None:
            check_sender_limit(notes, note.sender_username, self.limit)
            stored = note.model_copy(update={"id": uuid.uuid4().hex[:12], "updated_at": now})
            notes.append(stored)
            logger.info("Stored valentine %s from %s", stored.id, note.sender_username)
        else:
            index = self._index_of(notes, note.id)
            stored = note.model_copy(update={"updated_at": now})
            notes[index] = stored
            logger.info("Updated valentine %s", note.id)

        self._write(notes)
        return stored

    def delete(self, note_id: str) -> None:
        """Remove a note by id."""
        notes = self.load_all()
        del notes[self._index_of(notes, note_id)]
        self._write(notes)
        logger.info("Deleted valentine %s", note_id)

    def _index_of(self, notes: list[ValentineNote], note_id: str) -> int:
        for i, existing in enumerate(notes):
            if existing.id == note_id:
                return i
        raise ValentineNotFoundError(note_id)

    def _write(self, notes: list[ValentineNote]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = [n.stored_fields() for n in newest_first(notes)]
        self.path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        logger.debug("Wrote %d valentines to %s", len(payload), self.path)

