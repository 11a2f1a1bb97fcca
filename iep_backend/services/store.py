# FILE: iep_backend/services/store.py
"""
File-backed IEP data store: users, goals, documents, events, shared memories

One JSON file per (collection, user). Writes go through a temp file and
os.replace so readers never see a half-written collection.
"""
import logging
import hashlib
import json
import os
import tempfile
import uuid
from typing import Any, Dict, List, Optional, Type, TypeVar
from pathlib import Path
from datetime import datetime, timezone

from pydantic import BaseModel, ValidationError

from iep_backend.config import get_settings
from iep_backend.models.context import Goal, Document, Event
from iep_backend.models.shared_memory import User, SharedMemory, SharedMemoryCreate
from iep_backend.services.errors import StoreUnavailable

logger = logging.getLogger(__name__)
settings = get_settings()

RecordT = TypeVar("RecordT", bound=BaseModel)

COLLECTIONS = ("users", "goals", "documents", "events", "shared_memories")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class IEPStore:
    """Persistent per-user IEP data"""

    storage_type = "file"

    def __init__(self, store_dir: Optional[str] = None):
        self.store_dir = Path(store_dir or settings.store_dir)
        for collection in COLLECTIONS:
            (self.store_dir / collection).mkdir(parents=True, exist_ok=True)

    # Users

    def get_user(self, user_id: str) -> Optional[User]:
        """Get user by id"""
        records = self._read(user_id, "users", User)
        return records[0] if records else None

    def create_user(
        self,
        user_id: str,
        email: str,
        username: str,
        role: str = "parent",
        advocate_email: Optional[str] = None
    ) -> User:
        """Create or replace a user record"""
        user = User(
            id=user_id,
            email=email,
            username=username,
            role=role,
            advocate_email=advocate_email,
            created_at=_utcnow()
        )
        self._write(user_id, "users", [user])
        logger.info(f"Created user: {user_id}")
        return user

    # Goals

    def get_goals_by_user_id(self, user_id: str) -> List[Goal]:
        return self._read(user_id, "goals", Goal)

    def create_goal(
        self,
        user_id: str,
        title: str,
        description: str,
        status: str = "Not Started",
        progress: int = 0,
        due_date: Optional[datetime] = None,
        student_id: Optional[str] = None
    ) -> Goal:
        goal = Goal(
            id=str(uuid.uuid4()),
            user_id=user_id,
            student_id=student_id,
            title=title,
            description=description,
            status=status,
            progress=progress,
            due_date=due_date,
            created_at=_utcnow()
        )
        self._append(user_id, "goals", Goal, goal)
        return goal

    # Documents

    def get_documents_by_user_id(self, user_id: str) -> List[Document]:
        return self._read(user_id, "documents", Document)

    def create_document(
        self,
        user_id: str,
        filename: str,
        type: str = "other",
        description: Optional[str] = None
    ) -> Document:
        document = Document(
            id=str(uuid.uuid4()),
            user_id=user_id,
            filename=filename,
            type=type,
            description=description,
            uploaded_at=_utcnow()
        )
        self._append(user_id, "documents", Document, document)
        return document

    # Events

    def get_events_by_user_id(self, user_id: str) -> List[Event]:
        return self._read(user_id, "events", Event)

    def create_event(
        self,
        user_id: str,
        title: str,
        date: datetime,
        type: str = "meeting",
        description: Optional[str] = None
    ) -> Event:
        event = Event(
            id=str(uuid.uuid4()),
            user_id=user_id,
            title=title,
            description=description,
            date=date,
            type=type,
            created_at=_utcnow()
        )
        self._append(user_id, "events", Event, event)
        return event

    # Shared memories

    def get_shared_memories_by_user_id(self, user_id: str) -> List[SharedMemory]:
        """Shared memories for a user, oldest first"""
        return self._read(user_id, "shared_memories", SharedMemory)

    def create_shared_memory(self, user_id: str, question: str, answer: str) -> SharedMemory:
        """Persist a shared question/answer pair (immutable once written)"""
        try:
            data = SharedMemoryCreate(user_id=user_id, question=question, answer=answer)
        except ValidationError as e:
            raise ValueError(f"Invalid shared memory: {e}") from e

        memory = SharedMemory(
            id=str(uuid.uuid4()),
            user_id=data.user_id,
            question=data.question,
            answer=data.answer,
            shared_at=_utcnow()
        )
        self._append(user_id, "shared_memories", SharedMemory, memory)
        logger.info(f"Shared memory stored: {memory.id} for user {user_id}")
        return memory

    # File helpers

    def _get_path(self, user_id: str, collection: str) -> Path:
        """Deterministic per-user file path"""
        key = hashlib.sha256(user_id.encode()).hexdigest()
        return self.store_dir / collection / f"{key}.json"

    def _read(self, user_id: str, collection: str, model: Type[RecordT]) -> List[RecordT]:
        path = self._get_path(user_id, collection)
        if not path.exists():
            return []

        try:
            with open(path, 'r') as f:
                raw = json.load(f)
            return [model.model_validate(item) for item in raw]
        except (OSError, json.JSONDecodeError, ValidationError) as e:
            logger.error(f"Failed to read {collection} for {user_id}: {e}")
            raise StoreUnavailable(f"Cannot read {collection}: {e}") from e

    def _append(self, user_id: str, collection: str, model: Type[RecordT], record: RecordT):
        records = self._read(user_id, collection, model)
        records.append(record)
        self._write(user_id, collection, records)

    def _write(self, user_id: str, collection: str, records: List[BaseModel]):
        path = self._get_path(user_id, collection)
        payload: List[Dict[str, Any]] = [r.model_dump(mode="json") for r in records]

        tmp_name = None
        try:
            with tempfile.NamedTemporaryFile(
                'w', dir=path.parent, suffix=".tmp", delete=False
            ) as tmp:
                tmp_name = tmp.name
                json.dump(payload, tmp, indent=2)
            os.replace(tmp_name, path)
        except OSError as e:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            logger.error(f"Failed to write {collection} for {user_id}: {e}")
            raise StoreUnavailable(f"Cannot write {collection}: {e}") from e

        logger.debug(f"Stored {len(records)} {collection} for {user_id}")


_store: Optional[IEPStore] = None


def get_store() -> IEPStore:
    """Get or create singleton store"""
    global _store
    if _store is None:
        _store = IEPStore()
    return _store
