# FILE: iep_backend/services/answer_generator.py
"""
Rule-based answer generator for IEP memory queries

Topic detection is a fixed-priority keyword scan over the lower-cased
prompt; each topic maps to one formatter. No randomness, no clock, no I/O.
"""
import logging
from enum import Enum
from typing import Callable, Dict, List, Tuple
from datetime import datetime

from iep_backend.models.context import Context, GoalSummary

logger = logging.getLogger(__name__)

NO_GOALS_MESSAGE = (
    "You don't have any IEP goals recorded yet. You can add goals using the "
    "Goals section to track your child's progress."
)

MAX_LISTED_GOALS = 3


class Topic(str, Enum):
    GOALS = "goals"
    SERVICES = "services"
    DOCUMENTS = "documents"
    MEETINGS = "meetings"
    COMMUNICATION = "communication"
    DEFAULT = "default"


# Checked in order; first match wins
TOPIC_KEYWORDS: List[Tuple[Topic, Tuple[str, ...]]] = [
    (Topic.GOALS, ("goal", "progress")),
    (Topic.SERVICES, ("service", "accommodation")),
    (Topic.DOCUMENTS, ("document", "file")),
    (Topic.MEETINGS, ("meeting", "event")),
    (Topic.COMMUNICATION, ("communication", "message", "contact")),
]


def detect_topic(prompt: str) -> Topic:
    """Classify a prompt into a topic"""
    lowered = prompt.lower()
    for topic, keywords in TOPIC_KEYWORDS:
        if any(kw in lowered for kw in keywords):
            return topic
    return Topic.DEFAULT


def _format_date(value: datetime) -> str:
    return f"{value.month}/{value.day}/{value.year}"


def _next_due_date(goals: List[GoalSummary]) -> str:
    pending = [g.due_date for g in goals if g.due_date and g.status != "Completed"]
    if not pending:
        return "not set"
    return _format_date(min(pending))


def _answer_goals(context: Context) -> str:
    goals = context.goals
    if not goals:
        return NO_GOALS_MESSAGE

    completed = sum(1 for g in goals if g.status == "Completed")
    in_progress = sum(1 for g in goals if g.status == "In Progress")
    listed = "\n".join(
        f"• {g.title} ({g.status} - {g.progress}% complete)"
        for g in goals[:MAX_LISTED_GOALS]
    )

    return (
        f"Your IEP goals: {len(goals)} total, {completed} completed and "
        f"{in_progress} in progress.\n\n"
        f"Your current goals include:\n{listed}\n\n"
        f"The next due date is {_next_due_date(goals)}."
    )


def _answer_services(context: Context) -> str:
    return (
        "Your IEP services and accommodations are detailed in your uploaded documents. "
        f"You currently have {context.documents_count} documents on file. Please review "
        "your IEP document for specific services, accommodations, and modifications "
        "provided to support your child's learning."
    )


def _answer_documents(context: Context) -> str:
    return (
        f"You have {context.documents_count} documents uploaded to your account. These may "
        "include IEP documents, assessments, progress reports on your goals, and meeting "
        "notes. You can view and manage these in the Documents section."
    )


def _answer_meetings(context: Context) -> str:
    return (
        f"You have {context.upcoming_events} upcoming events scheduled "
        f"({context.total_events} total). Regular IEP meetings typically occur annually to "
        "review goals and services, but you can request additional meetings if needed. "
        "Check your Events section for specific meeting dates and details."
    )


def _answer_communication(context: Context) -> str:
    return (
        "You can contact your IEP team, including teachers and related service providers, "
        "through the Messages section. Sharing an answer with your advocate lets them "
        "follow up with you on services, goals, or accommodations."
    )


def _answer_default(context: Context) -> str:
    completed = sum(1 for g in context.goals if g.status == "Completed")
    return (
        f"Based on your current IEP data: You have {len(context.goals)} goals "
        f"({completed} completed), {context.documents_count} documents, and "
        f"{context.upcoming_events} upcoming events. For specific questions about "
        "services, accommodations, or goals, please refer to your IEP document or "
        "contact your school team."
    )


FORMATTERS: Dict[Topic, Callable[[Context], str]] = {
    Topic.GOALS: _answer_goals,
    Topic.SERVICES: _answer_services,
    Topic.DOCUMENTS: _answer_documents,
    Topic.MEETINGS: _answer_meetings,
    Topic.COMMUNICATION: _answer_communication,
    Topic.DEFAULT: _answer_default,
}


def generate_answer(prompt: str, context: Context) -> str:
    """Answer a free-text IEP question from the user's context"""
    topic = detect_topic(prompt)
    logger.debug(f"Prompt topic: {topic.value}")
    return FORMATTERS[topic](context)
