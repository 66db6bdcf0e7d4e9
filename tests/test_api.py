import asyncio
import json
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import AsyncIterator
from unittest.mock import AsyncMock
from uuid import UUID, uuid4

import pytest
from fastapi.testclient import TestClient

from app.api.v1 import emails as emails_api
from app.container import ApplicationContainer
from app.controllers.auth_email.hook_controller import AuthEmailHookController
from app.controllers.emails.feed import EmailInsert
from app.models import TrackedSender

from .conftest import USER_ID, make_account, make_email, make_sender, session_token


def test_health(client: TestClient) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_invalid_session_token(client: TestClient) -> None:
    response = client.get("/v1/senders", headers={"Authorization": "Bearer not-a-jwt"})

    assert response.status_code == 401
    assert response.json()["error"]["message"] == "Invalid session token."


def test_expired_session_token(client: TestClient) -> None:
    response = client.get("/v1/senders", headers={"Authorization": f"Bearer {session_token(expires_in=-60)}"})

    assert response.status_code == 401
    assert response.json()["error"]["message"] == "Session expired."


def test_list_senders(client: TestClient, auth_headers: dict[str, str], sender_repo: AsyncMock) -> None:
    sender = make_sender(label="HR")
    sender_repo.list_by_user.return_value = [sender]

    response = client.get("/v1/senders", headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["data"][0]["email"] == "hr@company.com"
    assert response.json()["data"][0]["label"] == "HR"
    sender_repo.list_by_user.assert_awaited_once_with(USER_ID)


def test_create_sender(client: TestClient, auth_headers: dict[str, str], sender_repo: AsyncMock) -> None:
    sender_repo.get_by_user_and_email.return_value = None

    async def assign_defaults(model: TrackedSender, commit: bool = False) -> None:
        model.id = make_sender().id
        model.created_at = datetime.now(UTC)

    sender_repo.add.side_effect = assign_defaults

    response = client.post("/v1/senders", json={"email": "  hr@company.com ", "label": "  "}, headers=auth_headers)

    assert response.status_code == 201
    assert response.json()["data"]["email"] == "hr@company.com"
    assert response.json()["data"]["label"] is None


def test_create_sender_with_invalid_email(
    client: TestClient, auth_headers: dict[str, str], sender_repo: AsyncMock
) -> None:
    response = client.post("/v1/senders", json={"email": "not-an-email"}, headers=auth_headers)

    assert response.status_code == 422
    assert response.json()["error"]["type"] == "invalid_data"
    assert response.json()["error"]["fields"] == {"email": "Please enter a valid email address"}
    sender_repo.get_by_user_and_email.assert_not_awaited()
    sender_repo.add.assert_not_awaited()


def test_create_duplicate_sender(client: TestClient, auth_headers: dict[str, str], sender_repo: AsyncMock) -> None:
    sender_repo.get_by_user_and_email.return_value = make_sender()

    response = client.post("/v1/senders", json={"email": "hr@company.com"}, headers=auth_headers)

    assert response.status_code == 400
    assert response.json()["error"] == {
        "type": "entity_already_exists",
        "message": "This email is already being tracked",
    }


def test_delete_sender_requires_confirmation(
    client: TestClient, auth_headers: dict[str, str], sender_repo: AsyncMock
) -> None:
    sender = make_sender()
    sender_repo.get_by_user_and_id.return_value = sender

    response = client.delete(f"/v1/senders/{sender.id}", headers=auth_headers)

    assert response.status_code == 400
    assert response.json()["error"]["type"] == "confirmation_required"
    sender_repo.delete.assert_not_awaited()

    response = client.delete(f"/v1/senders/{sender.id}?confirm=true", headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["success"] is True
    sender_repo.delete.assert_awaited_once_with(sender)


def test_list_connections(client: TestClient, auth_headers: dict[str, str], account_repo: AsyncMock) -> None:
    account_repo.list_by_user.return_value = [make_account(expires_at=datetime(2020, 1, 1, tzinfo=UTC))]

    response = client.get("/v1/connections", headers=auth_headers)

    assert response.status_code == 200
    connection = response.json()["data"][0]
    assert connection["provider"] == "gmail"
    assert connection["status"] == "expired"
    assert "access_token" not in connection


def test_disconnect_unknown_account(client: TestClient, auth_headers: dict[str, str], account_repo: AsyncMock) -> None:
    account_repo.get_by_user_and_id.return_value = None

    response = client.delete(f"/v1/connections/{make_account().id}?confirm=true", headers=auth_headers)

    assert response.status_code == 404


def test_list_emails(
    client: TestClient, auth_headers: dict[str, str], sender_repo: AsyncMock, email_repo: AsyncMock
) -> None:
    sender = make_sender()
    sender_repo.get_by_user_and_id.return_value = sender
    email_repo.list_by_sender.return_value = [
        make_email(sender, "Offer letter", datetime(2024, 1, 2, tzinfo=UTC)),
        make_email(sender, "Lunch", datetime(2024, 1, 1, tzinfo=UTC)),
    ]

    response = client.get(f"/v1/senders/{sender.id}/emails?search=offer", headers=auth_headers)

    assert response.status_code == 200
    assert [email["subject"] for email in response.json()["data"]] == ["Offer letter"]


def test_export_emails(
    client: TestClient, auth_headers: dict[str, str], sender_repo: AsyncMock, email_repo: AsyncMock
) -> None:
    sender = make_sender()
    sender_repo.get_by_user_and_id.return_value = sender
    email_repo.list_by_sender.return_value = [make_email(sender, "Offer letter", datetime(2024, 1, 2, tzinfo=UTC))]

    response = client.get(f"/v1/senders/{sender.id}/emails/export", headers=auth_headers)

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert response.headers["content-disposition"].startswith('attachment; filename="hr@company.com-')
    assert response.text.split("\n")[1] == 'hr@company.com,"Offer letter",2024-01-02,00:00:00,""'


def test_dashboard(
    client: TestClient,
    auth_headers: dict[str, str],
    sender_repo: AsyncMock,
    email_repo: AsyncMock,
    account_repo: AsyncMock,
) -> None:
    sender_repo.count_by_user.return_value = 2
    email_repo.count_by_user.return_value = 10
    account_repo.count_by_user.return_value = 1

    response = client.get("/v1/dashboard", headers=auth_headers)

    assert response.json()["data"] == {"sender_count": 2, "email_count": 10, "connected_account_count": 1}


def test_authorize(client: TestClient, auth_headers: dict[str, str]) -> None:
    response = client.post(
        "/v1/oauth/gmail/authorize", json={"redirect_url": "https://app.mailflow.test/dashboard"}, headers=auth_headers
    )

    assert response.status_code == 200
    assert response.json()["url"].startswith("https://accounts.google.com/o/oauth2/v2/auth?client_id=")


def test_authorize_unknown_provider(client: TestClient, auth_headers: dict[str, str]) -> None:
    response = client.post("/v1/oauth/yahoo/authorize", headers=auth_headers)

    assert response.status_code == 422


def test_oauth_callback_denied(client: TestClient, account_repo: AsyncMock) -> None:
    response = client.get("/v1/oauth/gmail/callback?error=access_denied", follow_redirects=False)

    assert response.status_code == 302
    assert response.headers["location"] == (
        "https://app.mailflow.test/dashboard/connections?error=Google%20authorization%20was%20denied"
    )
    account_repo.add.assert_not_awaited()


def test_auth_email_hook(client: TestClient, container: ApplicationContainer) -> None:
    hook_controller = AsyncMock(spec=AuthEmailHookController)
    hook_controller.handle.return_value = True
    container.controllers.auth_email_hook_controller.override(hook_controller)

    response = client.post(
        "/hooks/auth-email",
        json={
            "user": {"email": "new@user.test"},
            "email_data": {
                "token": "123456",
                "token_hash": "hash-1",
                "redirect_to": "https://app.mailflow.test/dashboard",
                "email_action_type": "signup",
            },
        },
    )

    assert response.status_code == 200
    assert response.json() == {}
    request = hook_controller.handle.await_args.args[0]
    assert (request.email, request.email_action_type, request.token_hash) == ("new@user.test", "signup", "hash-1")


def test_auth_email_hook_always_answers_ok(client: TestClient, container: ApplicationContainer) -> None:
    hook_controller = AsyncMock(spec=AuthEmailHookController)
    hook_controller.handle.side_effect = RuntimeError("boom")
    container.controllers.auth_email_hook_controller.override(hook_controller)

    malformed = client.post("/hooks/auth-email", content=b"not json", headers={"content-type": "application/json"})
    failing = client.post(
        "/hooks/auth-email",
        json={"user": {"email": "a@b.test"}, "email_data": {"token_hash": "h", "email_action_type": "login"}},
    )

    assert (malformed.status_code, malformed.json()) == (200, {})
    assert (failing.status_code, failing.json()) == (200, {})
    hook_controller.handle.assert_awaited_once()


class ScriptedQueue:
    """Feed queue that stalls once, then hands out the scripted inserts."""

    def __init__(self, items: list[EmailInsert | None]) -> None:
        self._items = items
        self._stalled = False

    async def get(self) -> EmailInsert | None:
        if not self._stalled:
            self._stalled = True
            await asyncio.sleep(1)
        return self._items.pop(0)


class StubFeed:
    def __init__(self, items: list[EmailInsert | None]) -> None:
        self.items = items
        self.subscribed: list[UUID] = []
        self.active = 0

    @asynccontextmanager
    async def subscribe(self, user_id: UUID) -> AsyncIterator[ScriptedQueue]:
        self.subscribed.append(user_id)
        self.active += 1
        try:
            yield ScriptedQueue(self.items)
        finally:
            self.active -= 1


def test_email_stream(
    client: TestClient,
    container: ApplicationContainer,
    auth_headers: dict[str, str],
    email_repo: AsyncMock,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    sender = make_sender()
    email = make_email(sender, "Offer letter", datetime(2024, 1, 2, 9, 0, tzinfo=UTC), "Welcome aboard")
    gone = uuid4()
    email_repo.get_by_user_and_id.side_effect = lambda user_id, email_id: email if email_id == email.id else None
    feed = StubFeed(
        [
            EmailInsert(id=gone, sender_mail_id=sender.id),
            EmailInsert(id=email.id, sender_mail_id=sender.id),
            None,
        ]
    )
    container.controllers.email_insert_feed.override(feed)
    monkeypatch.setattr(emails_api, "KEEP_ALIVE_SECONDS", 0.05)

    response = client.get("/v1/emails/stream", headers=auth_headers)

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/event-stream")
    keep_alive, event, trailing = response.text.split("\n\n")
    assert keep_alive == ": keep-alive"
    assert trailing == ""
    name, data = event.split("\n")
    assert name == "event: insert"
    row = json.loads(data.removeprefix("data: "))
    assert row["id"] == str(email.id)
    assert row["subject"] == "Offer letter"
    assert row["content"] == "Welcome aboard"
    assert feed.subscribed == [USER_ID]
    assert feed.active == 0
