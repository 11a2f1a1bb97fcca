# FILE: tests/test_context_fetcher.py

import pytest
from datetime import datetime, timedelta

from iep_backend.services.context_fetcher import build_context
from iep_backend.services.errors import DataUnavailable, StoreUnavailable


class UnreachableStore:
    def get_goals_by_user_id(self, user_id):
        raise StoreUnavailable("connection refused")

    def get_documents_by_user_id(self, user_id):
        return []

    def get_events_by_user_id(self, user_id):
        return []


def test_user_without_data_gets_empty_context(store, now):
    context = build_context(store, "u1", now=now)
    assert context.goals == []
    assert context.documents_count == 0
    assert context.upcoming_events == 0
    assert context.total_events == 0


def test_context_counts(store, now):
    store.create_goal("u1", "Reading", "Fluency", status="In Progress", progress=30,
                      due_date=now + timedelta(days=30))
    store.create_document("u1", "iep.pdf")
    store.create_document("u1", "eval.pdf")
    store.create_event("u1", "Past", now - timedelta(days=1))
    store.create_event("u1", "Now", now)
    store.create_event("u1", "Future", now + timedelta(seconds=1))

    context = build_context(store, "u1", now=now)

    assert [g.title for g in context.goals] == ["Reading"]
    assert context.goals[0].progress == 30
    assert context.documents_count == 2
    # Strictly after now
    assert context.upcoming_events == 1
    assert context.total_events == 3


def test_naive_event_dates_treated_as_utc(store, now):
    store.create_event("u1", "Naive future", datetime(2025, 9, 2, 12, 0))
    assert build_context(store, "u1", now=now).upcoming_events == 1


def test_store_failure_raises_data_unavailable(now):
    with pytest.raises(DataUnavailable):
        build_context(UnreachableStore(), "u1", now=now)
