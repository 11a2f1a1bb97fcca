# FILE: tests/test_store.py

import json
import os
import pytest
from datetime import datetime, timezone

from iep_backend.services.errors import StoreUnavailable
from iep_backend.services.store import IEPStore


def test_empty_user_has_no_data(store):
    assert store.get_user("nobody") is None
    assert store.get_goals_by_user_id("nobody") == []
    assert store.get_documents_by_user_id("nobody") == []
    assert store.get_events_by_user_id("nobody") == []
    assert store.get_shared_memories_by_user_id("nobody") == []


def test_user_roundtrip(store):
    store.create_user("u1", "p@example.com", "parent1", advocate_email="a@example.com")
    user = store.get_user("u1")
    assert user.username == "parent1"
    assert user.advocate_email == "a@example.com"
    assert user.role == "parent"


def test_records_are_per_user_and_ordered(store):
    store.create_goal("u1", "First", "d", due_date=datetime(2025, 1, 1, tzinfo=timezone.utc))
    store.create_goal("u1", "Second", "d", status="In Progress", progress=50)
    store.create_goal("u2", "Other", "d")

    goals = store.get_goals_by_user_id("u1")
    assert [g.title for g in goals] == ["First", "Second"]
    assert goals[1].status == "In Progress"
    assert goals[0].due_date == datetime(2025, 1, 1, tzinfo=timezone.utc)


def test_goal_rejects_invalid_status(store):
    with pytest.raises(ValueError):
        store.create_goal("u1", "Bad", "d", status="Paused")


def test_shared_memory_visible_immediately(store):
    memory = store.create_shared_memory("u1", "What services?", "Speech services.")

    assert memory.id
    assert memory.shared_at.tzinfo is not None
    assert store.get_shared_memories_by_user_id("u1") == [memory]


def test_shared_memory_ids_unique(store):
    a = store.create_shared_memory("u1", "Q", "A services")
    b = store.create_shared_memory("u1", "Q", "A services")
    assert a.id != b.id


def test_shared_memory_is_immutable(store):
    memory = store.create_shared_memory("u1", "Q", "A")
    with pytest.raises(Exception):
        memory.answer = "changed"


@pytest.mark.parametrize("question,answer", [("", "A"), ("Q", "")])
def test_shared_memory_requires_text(store, question, answer):
    with pytest.raises(ValueError):
        store.create_shared_memory("u1", question, answer)
    assert store.get_shared_memories_by_user_id("u1") == []


def test_corrupt_file_raises_store_unavailable(store):
    path = store._get_path("u1", "goals")
    path.write_text("{not json")

    with pytest.raises(StoreUnavailable):
        store.get_goals_by_user_id("u1")


def test_failed_write_leaves_no_partial_record(store, monkeypatch):
    store.create_shared_memory("u1", "Q1", "A1")

    def broken_replace(src, dst):
        raise OSError("disk full")

    monkeypatch.setattr(os, "replace", broken_replace)
    with pytest.raises(StoreUnavailable):
        store.create_shared_memory("u1", "Q2", "A2")
    monkeypatch.undo()

    memories = store.get_shared_memories_by_user_id("u1")
    assert [m.question for m in memories] == ["Q1"]
    leftovers = list((store.store_dir / "shared_memories").glob("*.tmp"))
    assert leftovers == []


def test_data_persists_across_instances(tmp_path):
    first = IEPStore(str(tmp_path / "s"))
    first.create_document("u1", "iep.pdf", type="iep")

    second = IEPStore(str(tmp_path / "s"))
    docs = second.get_documents_by_user_id("u1")
    assert [d.filename for d in docs] == ["iep.pdf"]

    with open(second._get_path("u1", "documents")) as f:
        assert json.load(f)[0]["type"] == "iep"
