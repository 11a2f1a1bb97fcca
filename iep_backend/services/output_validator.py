# FILE: iep_backend/services/output_validator.py
"""
Output policy check for generated answers
"""
import logging
from typing import Sequence

from iep_backend.models.query import ValidationResult

logger = logging.getLogger(__name__)

REQUIRED_KEYWORDS = ("services", "goals", "accommodations")


def validate_answer(answer: str, keywords: Sequence[str] = REQUIRED_KEYWORDS) -> ValidationResult:
    """
    Check that an answer stays on topic

    Returns:
        ValidationResult, valid iff the answer mentions at least one keyword
        (case-insensitive)
    """
    if not answer or not answer.strip():
        return ValidationResult(is_valid=False, reason="AI response is empty")

    lowered = answer.lower()
    if any(kw in lowered for kw in keywords):
        return ValidationResult(is_valid=True)

    reason = f"AI response must mention at least one of: {', '.join(keywords)}"
    logger.warning(f"Answer rejected by output policy: {reason}")
    return ValidationResult(is_valid=False, reason=reason)
