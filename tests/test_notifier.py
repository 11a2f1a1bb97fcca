# FILE: tests/test_notifier.py

import json
from datetime import datetime, timezone

import httpx
import pytest

from iep_backend.models.shared_memory import User, SharedMemory
from iep_backend.services.notifier import AdvocateNotifier


@pytest.fixture
def user():
    return User(
        id="u1",
        email="p@example.com",
        username="parent1",
        advocate_email="adv@example.com",
        created_at=datetime(2025, 1, 1, tzinfo=timezone.utc)
    )


@pytest.fixture
def memory():
    return SharedMemory(
        id="m1",
        user_id="u1",
        question="What services?",
        answer="Speech services.",
        shared_at=datetime(2025, 1, 2, tzinfo=timezone.utc)
    )


def make_client(status_code=200, calls=None):
    def handler(request):
        if calls is not None:
            calls.append(request)
        return httpx.Response(status_code, json={})

    return httpx.Client(transport=httpx.MockTransport(handler))


def test_payload(user, memory):
    calls = []
    notifier = AdvocateNotifier(api_key="re_key", api_url="https://mail.test/emails",
                                client=make_client(calls=calls))

    assert notifier.notify_shared_memory(user, memory) is True

    request = calls[0]
    assert str(request.url) == "https://mail.test/emails"
    payload = json.loads(request.read())
    assert payload["to"] == ["adv@example.com"]
    assert payload["subject"] == "New IEP Question from Parent"
    assert "Speech services." in payload["html"]


def test_skipped_without_api_key(user, memory):
    calls = []
    notifier = AdvocateNotifier(api_key="", client=make_client(calls=calls))
    assert notifier.enabled is False
    assert notifier.notify_shared_memory(user, memory) is False
    assert calls == []


def test_skipped_without_advocate(user, memory):
    calls = []
    notifier = AdvocateNotifier(api_key="re_key", client=make_client(calls=calls))
    no_advocate = user.model_copy(update={"advocate_email": None})
    assert notifier.notify_shared_memory(no_advocate, memory) is False
    assert calls == []


def test_http_error_is_reported_not_raised(user, memory):
    notifier = AdvocateNotifier(api_key="re_key", client=make_client(status_code=500))
    assert notifier.notify_shared_memory(user, memory) is False
