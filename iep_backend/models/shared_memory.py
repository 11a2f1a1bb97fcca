# FILE: iep_backend/models/shared_memory.py
"""
User and shared memory models
"""
from typing import Optional, Literal
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field


class User(BaseModel):
    """Platform user"""
    id: str
    email: str
    username: str
    role: Literal["parent", "advocate", "professional"] = "parent"
    advocate_email: Optional[str] = None
    created_at: datetime


class SharedMemoryCreate(BaseModel):
    """Question/answer pair accepted for sharing"""
    user_id: str = Field(min_length=1)
    question: str = Field(min_length=1)
    answer: str = Field(min_length=1)


class SharedMemory(BaseModel):
    """Persisted question/answer pair visible to the user's advocate"""
    model_config = ConfigDict(frozen=True)

    id: str
    user_id: str
    question: str
    answer: str
    shared_at: datetime

    def to_summary(self) -> dict:
        """Wire shape used in sharing status payloads"""
        return {
            "id": self.id,
            "userId": self.user_id,
            "question": self.question,
            "sharedAt": self.shared_at.isoformat()
        }

    def to_response(self) -> dict:
        """Full wire shape including the answer"""
        return {**self.to_summary(), "answer": self.answer}
