"""Tests for snapshot loading and saving."""

import json
import tempfile
from pathlib import Path

import pytest
from pydantic import ValidationError

from magician_board.models import ActivityRecord, LeaderboardSnapshot
from magician_board.store import SnapshotStore


def write_json(path: Path, data) -> Path:
    path.write_text(json.dumps(data))
    return path


class TestSnapshotStore:
    """Tests for SnapshotStore."""

    def test_load_object_form(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = write_json(
                Path(tmpdir) / "snapshot.json",
                {
                    "lastUpdated": "2025-02-14T00:00:00",
                    "users": [{"username": "alice", "views_total": 10, "discrod_roles": "Team Lead"}],
                },
            )

            snapshot = SnapshotStore(path).load()

            assert snapshot.last_updated == "2025-02-14T00:00:00"
            assert snapshot.users[0].username == "alice"
            assert snapshot.users[0].roles == "Team Lead"

    def test_load_list_form(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = write_json(
                Path(tmpdir) / "snapshot.json",
                [{"username": "alice"}, {"username": "bob", "posts_count": None}],
            )

            snapshot = SnapshotStore(path).load()

            assert [u.username for u in snapshot.users] == ["alice", "bob"]
            assert snapshot.users[1].posts_count == 0
            assert snapshot.last_updated is None

    def test_null_display_name_loads(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = write_json(
                Path(tmpdir) / "snapshot.json",
                [{"username": "alice", "display_name": "Alice"}, {"username": "bob", "display_name": None, "views_total": 3}],
            )

            snapshot = SnapshotStore(path).load()

            assert snapshot.users[1].display_name == ""
            assert snapshot.users[1].views_total == 3

    def test_joined_date_survives_round_trip(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = write_json(
                Path(tmpdir) / "snapshot.json",
                [{"username": "alice", "discord_mgb_joined_date": "2024-06-01"}],
            )
            store = SnapshotStore(path)

            store.save(store.load())
            reloaded = store.load()

            assert reloaded.users[0].discord_joined_date == "2024-06-01"

    def test_missing_file(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            store = SnapshotStore(Path(tmpdir) / "nope.json")

            assert not store.exists()
            with pytest.raises(FileNotFoundError):
                store.load()

    def test_non_numeric_counts_rejected(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = write_json(Path(tmpdir) / "snapshot.json", [{"username": "x", "views_total": "lots"}])

            with pytest.raises(ValidationError):
                SnapshotStore(path).load()

    def test_save_and_reload(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            store = SnapshotStore(Path(tmpdir) / "nested" / "snapshot.json")
            snapshot = LeaderboardSnapshot(
                last_updated="2025-02-14T00:00:00",
                users=[
                    ActivityRecord(username="alice", views_total=5, roles="Artist", days_in_community=40),
                ],
            )

            store.save(snapshot)
            loaded = store.load()

            assert loaded.last_updated == "2025-02-14T00:00:00"
            assert loaded.users == snapshot.users
