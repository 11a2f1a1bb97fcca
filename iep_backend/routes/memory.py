# FILE: iep_backend/routes/memory.py
"""
Memory endpoints: query, explicit share, list shared
"""
import logging
from datetime import datetime, timezone
from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from iep_backend.models.query import ShareMemoryRequest, LooseText
from iep_backend.services.correlation import set_correlation_id
from iep_backend.services.errors import DataUnavailable, StoreUnavailable, ValidationRejected
from iep_backend.services.memory_pipeline import MemoryQueryPipeline, PipelineStage, get_pipeline
from iep_backend.services.notifier import AdvocateNotifier, get_notifier

logger = logging.getLogger(__name__)
router = APIRouter()


class MemoryQueryBody(BaseModel):
    """Plain memory query (no sharing)"""
    model_config = ConfigDict(populate_by_name=True)

    user_id: LooseText = Field(default=None, alias="userId")
    prompt: LooseText = None


@router.post("/memory-query")
async def memory_query(
    request: MemoryQueryBody,
    pipeline: MemoryQueryPipeline = Depends(get_pipeline)
):
    """Answer an IEP question from the user's stored data"""
    if not request.prompt or not request.prompt.strip():
        return JSONResponse(status_code=400, content={"error": "Prompt is required"})
    if not request.user_id:
        return JSONResponse(status_code=400, content={"error": "userId is required"})

    try:
        answer = pipeline.answer(request.user_id, request.prompt)
    except DataUnavailable as e:
        logger.error(f"Memory query error: {e}")
        return JSONResponse(status_code=500, content={"error": "Failed to query memory"})

    return {"answer": answer}


@router.post("/share-memory")
async def share_memory(
    request: ShareMemoryRequest,
    pipeline: MemoryQueryPipeline = Depends(get_pipeline),
    notifier: AdvocateNotifier = Depends(get_notifier)
):
    """Persist a question/answer pair and email the user's advocate"""
    if not request.question or not request.answer:
        return JSONResponse(status_code=400, content={"error": "Question and answer are required"})
    if not request.user_id:
        return JSONResponse(status_code=400, content={"error": "userId is required"})

    set_correlation_id()
    try:
        user = pipeline.store.get_user(request.user_id)
    except StoreUnavailable as e:
        logger.error(f"Share memory error: {e}")
        return JSONResponse(status_code=500, content={"error": "Failed to share memory"})

    if user is None:
        return JSONResponse(status_code=404, content={"error": "User not found"})
    if not user.advocate_email:
        return JSONResponse(
            status_code=400,
            content={"error": "No advocate email configured for this user"}
        )

    try:
        stage, sharing = pipeline.share_answer(user.id, request.question, request.answer)
    except ValidationRejected as e:
        return JSONResponse(
            status_code=400,
            content={
                "error": "Invalid AI response",
                "reason": e.reason,
                "aiAnswer": e.answer,
                "timestamp": datetime.now(timezone.utc).isoformat()
            }
        )

    if stage == PipelineStage.DUPLICATE_BLOCKED:
        return {
            "success": True,
            "message": "Question already shared recently",
            "duplicateDetected": True,
            "sharedMemory": None,
            "notified": False
        }

    if stage == PipelineStage.SHARE_FAILED:
        return JSONResponse(status_code=500, content={"error": "Failed to share memory"})

    memory = sharing.shared_memory
    notified = notifier.notify_shared_memory(user, memory)

    return {
        "success": True,
        "message": "Memory shared successfully",
        "duplicateDetected": False,
        "sharedMemory": memory.to_response(),
        "notified": notified
    }


@router.get("/shared-memories")
async def list_shared_memories(
    user_id: str = Query(..., alias="userId"),
    pipeline: MemoryQueryPipeline = Depends(get_pipeline)
):
    """Persisted shared memories for a user, oldest first"""
    try:
        memories = pipeline.store.get_shared_memories_by_user_id(user_id)
    except StoreUnavailable as e:
        logger.error(f"Shared memories read error: {e}")
        return JSONResponse(status_code=500, content={"error": "Failed to retrieve shared memories"})

    return {
        "userId": user_id,
        "count": len(memories),
        "sharedMemories": [m.to_response() for m in memories]
    }
