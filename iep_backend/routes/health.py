# FILE: iep_backend/routes/health.py
"""
Health check endpoint
"""
import logging
from fastapi import APIRouter, Depends

from iep_backend import __version__
from iep_backend.config import get_settings
from iep_backend.services.memory_pipeline import MemoryQueryPipeline, get_pipeline

logger = logging.getLogger(__name__)
router = APIRouter()
settings = get_settings()


@router.get("")
async def health_check(pipeline: MemoryQueryPipeline = Depends(get_pipeline)):
    """
    Health check endpoint
    Reports store backend and the size of the duplicate-tracking table
    """
    return {
        "status": "healthy",
        "version": __version__,
        "environment": settings.environment,
        "storageType": pipeline.store.storage_type,
        "duplicateWindowSeconds": pipeline.suppressor.window_seconds,
        "trackedQueries": len(pipeline.suppressor)
    }
