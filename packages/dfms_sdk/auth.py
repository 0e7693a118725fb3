"""Login, logout and bearer token storage for the DFMS client."""

from __future__ import annotations

import base64
import json
import logging
import os
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

from packages.dfms_shared.envelope import ApiEnvelope
from packages.dfms_shared.errors import codes
from packages.dfms_shared.http import ApiRequestError

from . import endpoints

if TYPE_CHECKING:
    from .client import DfmsClient

logger = logging.getLogger(__name__)

USER_NOT_FOUND_MESSAGE = "user does not exist"
INVALID_CREDENTIALS_MESSAGE = "account does not exist or password is incorrect"
LOGIN_FAILED_MESSAGE = "login failed, please try again later"

# The login endpoint expects the complete user record; only the credentials
# are read server-side.
_USER_RECORD_FIELDS = (
    "id",
    "email",
    "roleId",
    "role",
    "status",
    "lastLogin",
    "createDate",
    "updateDate",
    "createdBy",
    "updatedBy",
)

_CODE_MESSAGES = {
    codes.USER_NOT_FOUND: USER_NOT_FOUND_MESSAGE,
    codes.INVALID_CREDENTIALS: INVALID_CREDENTIALS_MESSAGE,
}


class TokenStore(Protocol):
    """Key-value storage for bearer tokens."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


class InMemoryTokenStore:
    """Process-local token storage."""

    def __init__(self) -> None:
        self._values: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value

    def remove(self, key: str) -> None:
        self._values.pop(key, None)


class FileTokenStore:
    """Token storage in a JSON file readable only by its owner."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path).expanduser()

    def get(self, key: str) -> str | None:
        value = self._read().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        values = self._read()
        values[key] = value
        self._write(values)

    def remove(self, key: str) -> None:
        values = self._read()
        if values.pop(key, None) is not None:
            self._write(values)

    def _read(self) -> dict[str, object]:
        if not self.path.exists():
            return {}
        try:
            payload = json.loads(self.path.read_text(encoding="utf-8"))
        except ValueError:
            logger.warning("ignoring unreadable token file %s", self.path)
            return {}
        return payload if isinstance(payload, dict) else {}

    def _write(self, values: dict[str, object]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            json.dump(values, handle, sort_keys=True)
        os.chmod(self.path, 0o600)


@dataclass(eq=False)
class LoginError(Exception):
    """Login was rejected; ``message`` is user-facing."""

    message: str
    code: int | float | None = None

    def __str__(self) -> str:
        return self.message

    @classmethod
    def from_envelope(cls, envelope: ApiEnvelope) -> LoginError:
        """Map a failed login envelope to its user-facing message."""
        message = _CODE_MESSAGES.get(envelope.code)
        if message is None:
            failed = not envelope.success and envelope.message
            message = envelope.message if failed else LOGIN_FAILED_MESSAGE
        return cls(message=message, code=envelope.code)


def login(client: DfmsClient, username: str, password: str) -> str:
    """Authenticate, store the returned token on ``client`` and return it.

    Raises:
        LoginError: the backend rejected the credentials or returned no token.
    """
    body: dict[str, object] = {"username": username, "password": password}
    body.update({name: None for name in _USER_RECORD_FIELDS})
    try:
        envelope = client.post(endpoints.USER_LOGIN, json=body)
    except ApiRequestError as exc:
        raise LoginError.from_envelope(exc.envelope) from exc

    if not envelope.success or not envelope.data:
        raise LoginError.from_envelope(envelope)

    token = str(envelope.data)
    client.set_token(token)
    logger.info("logged in as %s", username)
    return token


def logout(client: DfmsClient) -> None:
    """Forget the stored token; the backend keeps no session to close."""
    client.clear_token()


def get_user_info(client: DfmsClient, username: str) -> ApiEnvelope:
    """Return the profile of ``username``."""
    return client.get(endpoints.user_info(username))


def is_token_valid(token: str | None, *, now: datetime | None = None) -> bool:
    """Return ``True`` when a JWT's ``exp`` claim lies in the future.

    The signature is not verified; this only avoids sending a token the
    backend is certain to reject.
    """
    if not token:
        return False
    try:
        segment = token.split(".")[1]
        padded = segment + "=" * (-len(segment) % 4)
        payload = json.loads(base64.urlsafe_b64decode(padded))
    except (IndexError, ValueError):
        return False
    expires = payload.get("exp") if isinstance(payload, dict) else None
    if isinstance(expires, bool) or not isinstance(expires, (int, float)):
        return False
    current = (now or datetime.now(UTC)).timestamp()
    return expires > current
