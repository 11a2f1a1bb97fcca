# FILE: iep_backend/models/__init__.py
"""
Pydantic models for request/response validation
"""
from iep_backend.models.context import *
from iep_backend.models.shared_memory import *
from iep_backend.models.query import *
