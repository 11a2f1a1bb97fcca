# FILE: iep_backend/services/memory_pipeline.py
"""
Answer-and-share pipeline for IEP memory queries

Received -> ContextBuilt -> Answered -> Validated -> sharing branch -> Responded.
Answering is the critical path; sharing is best-effort and never fails the
request.
"""
import logging
from enum import Enum
from dataclasses import dataclass
from typing import Any, Callable, Optional
from datetime import datetime

from iep_backend.models.context import Context
from iep_backend.models.query import ValidationResult, SharingStatus
from iep_backend.services.answer_generator import generate_answer
from iep_backend.services.context_fetcher import build_context
from iep_backend.services.correlation import get_correlation_id
from iep_backend.services.duplicate_suppressor import DuplicateSuppressor, get_duplicate_suppressor
from iep_backend.services.errors import InputError, ValidationRejected, ShareWriteFailed
from iep_backend.services.output_validator import validate_answer
from iep_backend.services.store import IEPStore, get_store

logger = logging.getLogger(__name__)


class PipelineStage(str, Enum):
    RECEIVED = "received"
    CONTEXT_BUILT = "context_built"
    ANSWERED = "answered"
    VALIDATED = "validated"
    SHARING_SKIPPED = "sharing_skipped"
    DUPLICATE_BLOCKED = "duplicate_blocked"
    SHARED = "shared"
    SHARE_FAILED = "share_failed"
    RESPONDED = "responded"


@dataclass
class PipelineOutcome:
    answer: str
    validation: ValidationResult
    sharing: SharingStatus
    sharing_stage: PipelineStage
    stage: PipelineStage = PipelineStage.RESPONDED


class MemoryQueryPipeline:
    """Runs one memory query to completion"""

    def __init__(
        self,
        store: IEPStore,
        suppressor: DuplicateSuppressor,
        generator: Callable[[str, Context], str] = generate_answer,
        validator: Callable[[str], ValidationResult] = validate_answer
    ):
        self.store = store
        self.suppressor = suppressor
        self.generator = generator
        self.validator = validator

    def answer(self, user_id: Optional[str], prompt: Optional[str], now: Optional[datetime] = None) -> str:
        """Context + generation only (no validation, no sharing)"""
        user_id, prompt = self._require_input(user_id, prompt)
        context = build_context(self.store, user_id, now=now)
        return self.generator(prompt, context)

    def run(
        self,
        user_id: Optional[str],
        prompt: Optional[str],
        share: Any = False,
        now: Optional[datetime] = None
    ) -> PipelineOutcome:
        """
        Answer a prompt and optionally share it.

        Raises:
            InputError: user_id or prompt missing
            DataUnavailable: context could not be read
            ValidationRejected: generated answer failed the output policy
        """
        cid = get_correlation_id()
        user_id, prompt = self._require_input(user_id, prompt)
        logger.info(f"[{cid}] Memory query received: user={user_id} share={share is True}")

        context = build_context(self.store, user_id, now=now)
        logger.debug(f"[{cid}] Stage: {PipelineStage.CONTEXT_BUILT.value}")

        answer = self.generator(prompt, context)
        logger.debug(f"[{cid}] Stage: {PipelineStage.ANSWERED.value}")

        validation = self.validator(answer)
        if not validation.is_valid:
            logger.warning(f"[{cid}] Answer rejected: {validation.reason}")
            raise ValidationRejected(answer, validation.reason or "Invalid AI response")
        logger.debug(f"[{cid}] Stage: {PipelineStage.VALIDATED.value}")

        if share is not True:
            sharing_stage = PipelineStage.SHARING_SKIPPED
            sharing = SharingStatus(requested=False)
        else:
            sharing_stage, sharing = self._share(cid, user_id, prompt, answer)

        logger.info(f"[{cid}] Memory query responded: sharing={sharing_stage.value}")
        return PipelineOutcome(
            answer=answer,
            validation=validation,
            sharing=sharing,
            sharing_stage=sharing_stage
        )

    def share_answer(self, user_id: str, question: str, answer: str):
        """
        Share an already generated answer under the same gates as run().

        Raises:
            ValidationRejected: answer failed the output policy
        Returns:
            (sharing stage, SharingStatus)
        """
        cid = get_correlation_id()
        validation = self.validator(answer)
        if not validation.is_valid:
            logger.warning(f"[{cid}] Shared answer rejected: {validation.reason}")
            raise ValidationRejected(answer, validation.reason or "Invalid AI response")
        return self._share(cid, user_id, question, answer)

    def _share(self, cid: str, user_id: str, question: str, answer: str):
        if self.suppressor.check_and_record(user_id, question):
            logger.info(f"[{cid}] Duplicate share blocked for {user_id}")
            return PipelineStage.DUPLICATE_BLOCKED, SharingStatus(
                requested=True, successful=False, duplicate_detected=True
            )

        try:
            memory = self._persist(user_id, question, answer)
        except ShareWriteFailed as e:
            logger.error(f"[{cid}] Failed to save shared memory: {e}", exc_info=True)
            logger.warning(
                f"[{cid}] Question stays recorded for {self.suppressor.window_seconds:g}s; "
                f"a retry inside the window is reported as a duplicate with no stored row"
            )
            return PipelineStage.SHARE_FAILED, SharingStatus(requested=True, successful=False)

        logger.info(f"[{cid}] Shared memory saved: {memory.id}")
        return PipelineStage.SHARED, SharingStatus(
            requested=True, successful=True, shared_memory=memory
        )

    def _persist(self, user_id: str, question: str, answer: str):
        try:
            return self.store.create_shared_memory(user_id, question, answer)
        except Exception as e:
            raise ShareWriteFailed(str(e)) from e

    @staticmethod
    def _require_input(user_id: Optional[str], prompt: Optional[str]):
        if not user_id or not prompt or not prompt.strip():
            raise InputError("userId and prompt are required")
        return user_id, prompt


_pipeline: Optional[MemoryQueryPipeline] = None


def get_pipeline() -> MemoryQueryPipeline:
    """Get or create the process-wide pipeline"""
    global _pipeline
    if _pipeline is None:
        _pipeline = MemoryQueryPipeline(get_store(), get_duplicate_suppressor())
    return _pipeline
