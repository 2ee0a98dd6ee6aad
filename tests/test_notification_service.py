from __future__ import annotations

import asyncio
import threading
from types import SimpleNamespace

import pytest
from fastapi import HTTPException

from push_daemon.schemas.notification import NotificationRequest
from push_daemon.services.notification import MessagingClient, NotificationService


def _request(token: str = "tok-1") -> NotificationRequest:
    return NotificationRequest(title="Hi", body="There", device_tokens=[token])


def test_send_notification_returns_message_id(firebase: SimpleNamespace) -> None:
    service = NotificationService("creds.json")

    message_id = asyncio.run(service.send_notification(_request()))

    assert message_id == "projects/test-project/messages/1"
    firebase.certificate.assert_called_once_with("creds.json")


def test_each_send_uses_its_own_app(firebase: SimpleNamespace) -> None:
    service = NotificationService("creds.json")

    asyncio.run(service.send_notification(_request()))
    asyncio.run(service.send_notification(_request()))

    names = [call.kwargs["name"] for call in firebase.initialize_app.call_args_list]
    assert len(set(names)) == 2
    deleted = [call.args[0].name for call in firebase.delete_app.call_args_list]
    assert deleted == names


def test_concurrent_sends_are_independent(firebase: SimpleNamespace) -> None:
    service = NotificationService("creds.json")
    sent: dict[str, str] = {}
    lock = threading.Lock()

    def record(message, app):
        with lock:
            sent[message.token] = app.name
        return f"projects/test-project/messages/{message.token}"

    firebase.send.side_effect = record
    tokens = [f"tok-{i}" for i in range(20)]

    async def send_all():
        return await asyncio.gather(
            *(service.send_notification(_request(token)) for token in tokens)
        )

    results = asyncio.run(send_all())

    assert results == [f"projects/test-project/messages/{token}" for token in tokens]
    assert firebase.send.call_count == len(tokens)
    assert set(sent) == set(tokens)
    assert len(set(sent.values())) == len(tokens)
    assert firebase.delete_app.call_count == len(tokens)


def test_send_failure_raises_http_500(firebase: SimpleNamespace) -> None:
    firebase.send.side_effect = ValueError("Invalid registration token")
    service = NotificationService("creds.json")

    with pytest.raises(HTTPException) as exc_info:
        asyncio.run(service.send_notification(_request()))

    assert exc_info.value.status_code == 500
    assert exc_info.value.detail == "Failed to send FCM message"


def test_messaging_client_requires_project_id() -> None:
    with pytest.raises(ValueError):
        MessagingClient(SimpleNamespace(name="app", project_id=None))


def test_notification_request_requires_a_token() -> None:
    with pytest.raises(ValueError):
        NotificationRequest(title="Hi", body="There", device_tokens=[])
