# FILE: iep_backend/services/context_fetcher.py
"""
Build the per-query IEP context from the store
"""
import logging
from typing import Optional
from datetime import datetime, timezone

from iep_backend.models.context import Context, GoalSummary
from iep_backend.services.errors import DataUnavailable, StoreUnavailable

logger = logging.getLogger(__name__)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def build_context(store, user_id: str, now: Optional[datetime] = None) -> Context:
    """
    Assemble goals, document count and event counts for a user.

    A user with no data gets an empty context. Any store failure raises
    DataUnavailable; partial context is never returned.
    """
    now = _as_utc(now or datetime.now(timezone.utc))

    try:
        goals = store.get_goals_by_user_id(user_id)
        documents = store.get_documents_by_user_id(user_id)
        events = store.get_events_by_user_id(user_id)
    except (StoreUnavailable, OSError) as e:
        logger.error(f"Context fetch failed for {user_id}: {e}")
        raise DataUnavailable(f"IEP data unavailable: {e}") from e

    context = Context(
        goals=[
            GoalSummary(
                title=g.title,
                description=g.description,
                status=g.status,
                progress=g.progress,
                due_date=g.due_date
            )
            for g in goals
        ],
        documents_count=len(documents),
        upcoming_events=sum(1 for e in events if _as_utc(e.date) > now),
        total_events=len(events)
    )

    logger.debug(
        f"Context for {user_id}: goals={len(context.goals)} "
        f"documents={context.documents_count} upcoming={context.upcoming_events}"
    )
    return context
