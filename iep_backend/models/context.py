# FILE: iep_backend/models/context.py
"""
IEP data records and the per-query context built from them
"""
from typing import Optional, List, Literal
from datetime import datetime
from pydantic import BaseModel, Field

GoalStatus = Literal["Not Started", "In Progress", "Completed"]


class Goal(BaseModel):
    """Stored IEP goal"""
    id: str
    user_id: str
    student_id: Optional[str] = None
    title: str
    description: str
    status: GoalStatus = "Not Started"
    progress: int = Field(default=0, ge=0, le=100)
    due_date: Optional[datetime] = None
    created_at: datetime


class Document(BaseModel):
    """Stored document metadata (file contents live elsewhere)"""
    id: str
    user_id: str
    filename: str
    type: str = Field(default="other", description="iep, assessment, progress_report, meeting_notes, other")
    description: Optional[str] = None
    uploaded_at: datetime


class Event(BaseModel):
    """Calendar event"""
    id: str
    user_id: str
    title: str
    description: Optional[str] = None
    date: datetime
    type: str = Field(default="meeting", description="meeting, deadline, appointment")
    created_at: datetime


class GoalSummary(BaseModel):
    """Goal fields exposed to the answer generator"""
    title: str
    description: str
    status: GoalStatus
    progress: int = Field(ge=0, le=100)
    due_date: Optional[datetime] = None


class Context(BaseModel):
    """Snapshot of a user's IEP data, built fresh for every query"""
    goals: List[GoalSummary] = Field(default_factory=list)
    documents_count: int = Field(default=0, ge=0)
    upcoming_events: int = Field(default=0, ge=0)
    total_events: int = Field(default=0, ge=0)
