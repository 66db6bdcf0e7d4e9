from typing import Any
from unittest.mock import AsyncMock

import pytest
from sqlalchemy.exc import IntegrityError

from app.controllers.senders.sender_controller import DUPLICATE_SENDER_MESSAGE, SenderController
from app.exceptions import ConfirmationRequiredError, EntityAlreadyExistError, EntityNotFoundError
from app.models import TrackedSender

from .conftest import USER_ID, make_sender


@pytest.fixture
def controller(sender_repo: AsyncMock) -> SenderController:
    async def apply(model: TrackedSender, values: dict[str, Any], commit: bool = False) -> TrackedSender:
        for key, value in values.items():
            setattr(model, key, value)
        return model

    sender_repo.update.side_effect = apply
    return SenderController(tracked_sender_repo=sender_repo)


async def test_add_edit_and_remove_sender(controller: SenderController, sender_repo: AsyncMock) -> None:
    sender_repo.get_by_user_and_email.return_value = None

    sender = await controller.create_sender(USER_ID, "hr@company.com", None)

    assert sender.email == "hr@company.com"
    assert sender.label is None
    assert sender.user_id == USER_ID
    sender_repo.add.assert_awaited_once_with(sender)

    sender_repo.get_by_user_and_id.return_value = sender
    updated = await controller.update_sender(USER_ID, sender.id, "hr@company.com", "Team")
    assert updated.label == "Team"

    with pytest.raises(ConfirmationRequiredError) as error:
        await controller.delete_sender(USER_ID, sender.id, confirm=False)
    assert error.value.message == (
        "Remove hr@company.com from tracked senders? This will also delete all associated emails."
    )
    assert error.value.extra == {"action": "delete_sender", "user": str(USER_ID)}
    sender_repo.delete.assert_not_awaited()

    await controller.delete_sender(USER_ID, sender.id, confirm=True)
    sender_repo.delete.assert_awaited_once_with(sender)


async def test_add_duplicate_sender(controller: SenderController, sender_repo: AsyncMock) -> None:
    sender_repo.get_by_user_and_email.return_value = make_sender()

    with pytest.raises(EntityAlreadyExistError, match=DUPLICATE_SENDER_MESSAGE):
        await controller.create_sender(USER_ID, "hr@company.com", "HR")
    sender_repo.add.assert_not_awaited()


async def test_add_sender_losing_insert_race(controller: SenderController, sender_repo: AsyncMock) -> None:
    sender_repo.get_by_user_and_email.return_value = None
    sender_repo.add.side_effect = IntegrityError("INSERT", {}, Exception("duplicate key"))

    with pytest.raises(EntityAlreadyExistError, match=DUPLICATE_SENDER_MESSAGE):
        await controller.create_sender(USER_ID, "hr@company.com", None)
    sender_repo.rollback.assert_awaited_once()


async def test_empty_label_is_stored_as_none(controller: SenderController, sender_repo: AsyncMock) -> None:
    sender_repo.get_by_user_and_email.return_value = None

    sender = await controller.create_sender(USER_ID, "hr@company.com", "")

    assert sender.label is None


async def test_rename_to_tracked_address(controller: SenderController, sender_repo: AsyncMock) -> None:
    sender = make_sender("hr@company.com")
    sender_repo.get_by_user_and_id.return_value = sender
    sender_repo.get_by_user_and_email.return_value = make_sender("ceo@company.com")

    with pytest.raises(EntityAlreadyExistError):
        await controller.update_sender(USER_ID, sender.id, "ceo@company.com", None)
    assert sender.email == "hr@company.com"


async def test_edit_unknown_sender(controller: SenderController, sender_repo: AsyncMock) -> None:
    sender_repo.get_by_user_and_id.return_value = None

    with pytest.raises(EntityNotFoundError, match="Sender not found"):
        await controller.update_sender(USER_ID, make_sender().id, "hr@company.com", None)
