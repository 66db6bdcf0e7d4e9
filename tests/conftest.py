import os

os.environ["MAILFLOW_ENV"] = "test"

from datetime import UTC, datetime, timedelta  # noqa: E402
from typing import Any, Iterator  # noqa: E402
from unittest.mock import AsyncMock  # noqa: E402
from uuid import UUID, uuid4  # noqa: E402

import jwt  # noqa: E402
import pytest  # noqa: E402
from fastapi import FastAPI  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from app.container import ApplicationContainer, get_wire_container  # noqa: E402
from app.create_app import create_app  # noqa: E402
from app.models import AccountProvider, ConnectedAccount, TrackedEmail, TrackedSender  # noqa: E402
from app.repos import ConnectedAccountRepo, TrackedEmailRepo, TrackedSenderRepo  # noqa: E402
from settings import settings  # noqa: E402

USER_ID = UUID("9f1c2d3e-4b5a-4c6d-8e7f-0a1b2c3d4e5f")
OTHER_USER_ID = UUID("1a2b3c4d-5e6f-4a7b-8c9d-0e1f2a3b4c5d")


def session_token(user_id: UUID = USER_ID, expires_in: int = 3600, **claims: Any) -> str:
    payload = {
        "sub": str(user_id),
        "aud": settings.auth.jwt_audience,
        "exp": datetime.now(UTC) + timedelta(seconds=expires_in),
        "email": "owner@mailflow.test",
        **claims,
    }
    return jwt.encode(payload, settings.auth.jwt_secret, algorithm="HS256")


def make_sender(email: str = "hr@company.com", label: str | None = None, user_id: UUID = USER_ID) -> TrackedSender:
    return TrackedSender(id=uuid4(), user_id=user_id, email=email, label=label, created_at=datetime.now(UTC))


def make_account(
    email: str = "me@gmail.com",
    provider: AccountProvider = AccountProvider.gmail,
    expires_at: datetime | None = None,
    user_id: UUID = USER_ID,
) -> ConnectedAccount:
    return ConnectedAccount(
        id=uuid4(),
        user_id=user_id,
        provider=provider,
        email=email,
        access_token="encrypted-access",
        refresh_token=None,
        expires_at=expires_at,
        created_at=datetime.now(UTC),
    )


def make_email(
    sender: TrackedSender, subject: str, received_at: datetime, content: str | None = None
) -> TrackedEmail:
    return TrackedEmail(
        id=uuid4(),
        sender_mail_id=sender.id,
        sender_email=sender.email,
        subject=subject,
        content=content,
        received_at=received_at,
    )


@pytest.fixture
def sender_repo() -> AsyncMock:
    return AsyncMock(spec=TrackedSenderRepo)


@pytest.fixture
def email_repo() -> AsyncMock:
    return AsyncMock(spec=TrackedEmailRepo)


@pytest.fixture
def account_repo() -> AsyncMock:
    return AsyncMock(spec=ConnectedAccountRepo)


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return create_app()


@pytest.fixture
def container(sender_repo: AsyncMock, email_repo: AsyncMock, account_repo: AsyncMock) -> Iterator[ApplicationContainer]:
    container = get_wire_container()
    container.repos.tracked_sender.override(sender_repo)
    container.repos.tracked_email.override(email_repo)
    container.repos.connected_account.override(account_repo)
    yield container
    container.unwire()


@pytest.fixture
def client(app: FastAPI, container: ApplicationContainer) -> TestClient:
    return TestClient(app)


@pytest.fixture
def auth_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {session_token()}"}
