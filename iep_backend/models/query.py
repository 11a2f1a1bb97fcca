# FILE: iep_backend/models/query.py
"""
Memory query request and result models
"""
from typing import Annotated, Optional, Any, Dict
from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

from iep_backend.models.shared_memory import SharedMemory


def _coerce_text(value: Any) -> Optional[str]:
    """Numbers become strings; anything else that is not text counts as missing"""
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return None


# Body text fields never fail validation, so missing/odd values reach the
# route's own 400 checks instead of FastAPI's 422
LooseText = Annotated[Optional[str], BeforeValidator(_coerce_text)]


class MemoryQueryRequest(BaseModel):
    """Memory query request; share must be the literal boolean true to share"""
    model_config = ConfigDict(populate_by_name=True)

    user_id: LooseText = Field(default=None, alias="userId")
    prompt: LooseText = None
    share: Any = None


class ValidationTestRequest(BaseModel):
    """Canned validation run request"""
    model_config = ConfigDict(populate_by_name=True)

    test_type: LooseText = Field(default=None, alias="testType")


class ShareMemoryRequest(BaseModel):
    """Explicit share of an already generated answer"""
    model_config = ConfigDict(populate_by_name=True)

    user_id: LooseText = Field(default=None, alias="userId")
    question: LooseText = None
    answer: LooseText = None


class ValidationResult(BaseModel):
    """Output validator verdict"""
    is_valid: bool
    reason: Optional[str] = None

    def to_response(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"isValid": self.is_valid}
        if self.reason is not None:
            payload["reason"] = self.reason
        return payload


class SharingStatus(BaseModel):
    """Outcome of the sharing side channel"""
    requested: bool = False
    successful: bool = False
    duplicate_detected: bool = False
    shared_memory: Optional[SharedMemory] = None

    def to_response(self) -> Dict[str, Any]:
        return {
            "requested": self.requested,
            "successful": self.successful,
            "duplicateDetected": self.duplicate_detected,
            "sharedMemory": self.shared_memory.to_summary() if self.shared_memory else None
        }
