# FILE: iep_backend/services/correlation.py
"""
Correlation ID utilities
"""
import uuid
from contextvars import ContextVar
from typing import Optional

_current_id: ContextVar[Optional[str]] = ContextVar("correlation_id", default=None)


def generate_correlation_id() -> str:
    """Generate unique correlation ID"""
    return uuid.uuid4().hex[:12]


def set_correlation_id(correlation_id: Optional[str] = None) -> str:
    """Bind a correlation ID to the current request context"""
    correlation_id = correlation_id or generate_correlation_id()
    _current_id.set(correlation_id)
    return correlation_id


def get_correlation_id() -> str:
    """Current correlation ID, creating one when none is bound"""
    correlation_id = _current_id.get()
    if correlation_id is None:
        correlation_id = set_correlation_id()
    return correlation_id
