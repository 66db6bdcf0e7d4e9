import base64
import json

import pytest

from app.controllers.oauth.state import OAuthState, decode_state, encode_state
from app.exceptions import InvalidOAuthStateError


def _b64(value: object) -> str:
    return base64.b64encode(json.dumps(value).encode()).decode()


def test_state_round_trip() -> None:
    state = OAuthState(user_id="9f1c2d3e-4b5a-4c6d-8e7f-0a1b2c3d4e5f", redirect_url="https://app.mailflow.test/x")

    assert decode_state(encode_state(state)) == state


def test_state_is_base64_json() -> None:
    encoded = encode_state(OAuthState(user_id="abc"))

    assert json.loads(base64.b64decode(encoded)) == {"user_id": "abc", "redirect_url": None}


@pytest.mark.parametrize(
    "value",
    [
        "%%%not-base64%%%",
        base64.b64encode(b"not json").decode(),
        _b64([1, 2, 3]),
        _b64({"redirect_url": "https://app.mailflow.test"}),
        _b64({"user_id": ""}),
        _b64({"user_id": "abc", "redirect_url": 5}),
    ],
)
def test_malformed_state_is_rejected(value: str) -> None:
    with pytest.raises(InvalidOAuthStateError):
        decode_state(value)
