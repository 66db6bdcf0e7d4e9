"""
Opaque OAuth ``state`` carried through the provider redirect.

The value is standard base64 over compact JSON so the callback can recover who
started the flow and where the browser should land afterwards. Nothing is
persisted server-side.
"""

import base64
import binascii
import json
from dataclasses import dataclass

from app.exceptions import InvalidOAuthStateError


@dataclass(frozen=True)
class OAuthState:
    user_id: str
    redirect_url: str | None = None


def encode_state(state: OAuthState) -> str:
    payload = json.dumps({"user_id": state.user_id, "redirect_url": state.redirect_url}, separators=(",", ":"))
    return base64.b64encode(payload.encode("utf-8")).decode("ascii")


def decode_state(value: str) -> OAuthState:
    try:
        payload = json.loads(base64.b64decode(value.encode("ascii"), validate=True).decode("utf-8"))
    except (binascii.Error, UnicodeError, ValueError) as e:
        raise InvalidOAuthStateError("Malformed OAuth state") from e

    if not isinstance(payload, dict):
        raise InvalidOAuthStateError("Malformed OAuth state")

    user_id = payload.get("user_id")
    redirect_url = payload.get("redirect_url")
    if not isinstance(user_id, str) or not user_id:
        raise InvalidOAuthStateError("OAuth state has no user")
    if redirect_url is not None and not isinstance(redirect_url, str):
        raise InvalidOAuthStateError("OAuth state has an invalid redirect URL")

    return OAuthState(user_id=user_id, redirect_url=redirect_url)
