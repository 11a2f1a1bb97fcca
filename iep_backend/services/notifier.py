# FILE: iep_backend/services/notifier.py
"""
Advocate email notification via the Resend HTTP API
"""
import logging
import html
import httpx
from typing import Dict, Any, Optional

from iep_backend.config import get_settings
from iep_backend.models.shared_memory import User, SharedMemory

logger = logging.getLogger(__name__)
settings = get_settings()


def render_shared_memory_email(user: User, memory: SharedMemory) -> str:
    """HTML body for a shared question/answer"""
    return f"""
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
  <h2 style="color: #2563eb;">New IEP Question from {html.escape(user.username)}</h2>
  <div style="background-color: #f3f4f6; padding: 16px; border-radius: 8px; margin: 16px 0;">
    <h3 style="color: #374151; margin: 0 0 8px 0;">Question:</h3>
    <p style="margin: 0; color: #6b7280;">{html.escape(memory.question)}</p>
  </div>
  <div style="background-color: #eff6ff; padding: 16px; border-radius: 8px; margin: 16px 0; border-left: 4px solid #2563eb;">
    <h3 style="color: #1d4ed8; margin: 0 0 8px 0;">AI Answer:</h3>
    <p style="margin: 0; color: #1e40af; white-space: pre-wrap;">{html.escape(memory.answer)}</p>
  </div>
  <p style="color: #6b7280; font-size: 14px; margin-top: 24px;">
    This message was sent from My IEP Hero platform. The parent chose to share this
    AI-generated response with you for additional guidance.
  </p>
</div>
"""


class AdvocateNotifier:
    """Sends shared memories to the user's advocate"""

    def __init__(
        self,
        api_key: Optional[str] = None,
        api_url: Optional[str] = None,
        from_address: Optional[str] = None,
        timeout: Optional[float] = None,
        client: Optional[httpx.Client] = None
    ):
        self.api_key = api_key if api_key is not None else settings.resend_api_key
        self.api_url = api_url or settings.resend_api_url
        self.from_address = from_address or settings.resend_from_address
        self.timeout = timeout or settings.notify_timeout
        self.client = client

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    def notify_shared_memory(self, user: User, memory: SharedMemory) -> bool:
        """Email the advocate; failures are logged and reported as False"""
        if not self.enabled:
            logger.info("RESEND_API_KEY not configured; skipping advocate email")
            return False

        if not user.advocate_email:
            logger.info(f"No advocate email for user {user.id}; skipping notification")
            return False

        payload: Dict[str, Any] = {
            "from": self.from_address,
            "to": [user.advocate_email],
            "subject": "New IEP Question from Parent",
            "html": render_shared_memory_email(user, memory)
        }
        headers = {"Authorization": f"Bearer {self.api_key}"}

        try:
            if self.client is not None:
                response = self.client.post(self.api_url, json=payload, headers=headers, timeout=self.timeout)
            else:
                response = httpx.post(self.api_url, json=payload, headers=headers, timeout=self.timeout)
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(f"Failed to send advocate email for {memory.id}: {e}")
            return False

        logger.info(f"Advocate notified of shared memory {memory.id}")
        return True


_notifier: Optional[AdvocateNotifier] = None


def get_notifier() -> AdvocateNotifier:
    global _notifier
    if _notifier is None:
        _notifier = AdvocateNotifier()
    return _notifier
