# FILE: iep_backend/services/demo_seed.py
"""
Demo data for local development
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Dict, Any, Optional

from iep_backend.services.store import IEPStore

logger = logging.getLogger(__name__)

DEMO_GOALS = [
    {
        "title": "Reading Comprehension",
        "description": "Answer literal and inferential questions about grade-level text with 80% accuracy.",
        "status": "In Progress",
        "progress": 65,
        "due_in_days": 90,
    },
    {
        "title": "Math Problem Solving",
        "description": "Solve two-step word problems using a visual model in 4 of 5 trials.",
        "status": "Not Started",
        "progress": 0,
        "due_in_days": 150,
    },
    {
        "title": "Social Communication",
        "description": "Initiate peer interaction during unstructured time three times per week.",
        "status": "Completed",
        "progress": 100,
        "due_in_days": -30,
    },
]

DEMO_DOCUMENTS = [
    {"filename": "iep_2025.pdf", "type": "iep", "description": "Annual IEP"},
    {"filename": "progress_q1.pdf", "type": "progress_report", "description": "Quarter 1 progress report"},
]


def seed_demo_data(store: IEPStore, user_id: str, now: Optional[datetime] = None) -> Dict[str, Any]:
    """
    Create a demo parent with goals, documents and events.

    Skips users that already have goals, so it is safe to run on every startup.
    """
    now = now or datetime.now(timezone.utc)

    if store.get_goals_by_user_id(user_id):
        logger.info(f"Demo data already present for {user_id}")
        return {"seeded": False, "user_id": user_id}

    if store.get_user(user_id) is None:
        store.create_user(
            user_id=user_id,
            email="parent@demo.com",
            username="demo_parent",
            role="parent",
            advocate_email="advocate@demo.com"
        )

    for goal in DEMO_GOALS:
        store.create_goal(
            user_id=user_id,
            title=goal["title"],
            description=goal["description"],
            status=goal["status"],
            progress=goal["progress"],
            due_date=now + timedelta(days=goal["due_in_days"])
        )

    for doc in DEMO_DOCUMENTS:
        store.create_document(user_id=user_id, **doc)

    store.create_event(user_id, "Annual IEP Review", now + timedelta(days=14), type="meeting")
    store.create_event(user_id, "Evaluation Consent Deadline", now - timedelta(days=7), type="deadline")

    logger.info(f"Seeded demo data for {user_id}")
    return {
        "seeded": True,
        "user_id": user_id,
        "goals": len(DEMO_GOALS),
        "documents": len(DEMO_DOCUMENTS),
        "events": 2
    }
