"""In-memory mock backend for running the DFMS client without a server.

``MockRepository`` holds resource state keyed by API path. A list value is a
collection (REST CRUD by ``id``); any other value is a single document
(``GET`` returns it, ``PUT``/``PATCH`` merge into it). ``MockBackend`` is an
``httpx.MockTransport`` handler that serves that state in canonical envelopes.
"""

from __future__ import annotations

import copy
import json
import logging
import time
import uuid
from collections.abc import Callable, Mapping
from typing import Any

import httpx

from packages.dfms_shared.errors import codes, messages

logger = logging.getLogger(__name__)

SIMULATED_ERROR_MESSAGE = "simulated API error"
NOT_FOUND_STATUS = 404
METHOD_NOT_ALLOWED_STATUS = 405


class MockRepository:
    """Explicit in-memory store; values are deep-copied on the way in and out."""

    def __init__(self, fixtures: Mapping[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = copy.deepcopy(dict(fixtures or {}))

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def keys(self) -> list[str]:
        return sorted(self._data)

    def get(self, key: str, default: Any = None) -> Any:
        """Return a copy of the value stored under ``key``."""
        return copy.deepcopy(self._data.get(key, default))

    def set(self, key: str, value: Any) -> None:
        """Replace the value stored under ``key``."""
        self._data[key] = copy.deepcopy(value)

    def is_collection(self, key: str) -> bool:
        return isinstance(self._data.get(key), list)

    def list(self, collection: str) -> list[Any]:
        """Return a copy of every item in ``collection``."""
        return copy.deepcopy(self._items(collection))

    def find(self, collection: str, item_id: str) -> dict[str, Any] | None:
        """Return a copy of the item whose ``id`` matches, if any."""
        index = self._index_of(collection, item_id)
        if index is None:
            return None
        return copy.deepcopy(self._items(collection)[index])

    def insert(self, collection: str, item: Mapping[str, Any]) -> dict[str, Any]:
        """Append ``item``, assigning an ``id`` when it has none."""
        record = copy.deepcopy(dict(item))
        record.setdefault("id", uuid.uuid4().hex)
        self._data.setdefault(collection, []).append(record)
        return copy.deepcopy(record)

    def update(
        self, collection: str, item_id: str, changes: Mapping[str, Any]
    ) -> dict[str, Any] | None:
        """Merge ``changes`` into one item; the ``id`` is never rewritten."""
        index = self._index_of(collection, item_id)
        if index is None:
            return None
        record = self._items(collection)[index]
        record.update({k: copy.deepcopy(v) for k, v in changes.items() if k != "id"})
        return copy.deepcopy(record)

    def delete(self, collection: str, item_id: str) -> bool:
        """Remove one item; return ``False`` when it was not present."""
        index = self._index_of(collection, item_id)
        if index is None:
            return False
        del self._items(collection)[index]
        return True

    def _items(self, collection: str) -> list[Any]:
        items = self._data.get(collection)
        if not isinstance(items, list):
            raise KeyError(f"{collection} is not a collection")
        return items

    def _index_of(self, collection: str, item_id: str) -> int | None:
        for index, item in enumerate(self._items(collection)):
            if isinstance(item, Mapping) and str(item.get("id")) == str(item_id):
                return index
        return None


def mock_response(data: Any, *, error: bool = False, error_status: int = 500) -> httpx.Response:
    """Return a canonical success response, or a simulated failure."""
    if error:
        return httpx.Response(
            error_status,
            json={
                "code": error_status,
                "message": SIMULATED_ERROR_MESSAGE,
                "data": None,
                "success": False,
            },
        )
    return httpx.Response(
        200,
        json={
            "code": codes.SUCCESS,
            "message": messages.DEFAULT_SUCCESS,
            "data": data,
            "success": True,
        },
    )


def _not_found(message: str, status: int = NOT_FOUND_STATUS) -> httpx.Response:
    return httpx.Response(
        status,
        json={"code": status, "message": message, "data": None, "success": False},
    )


class MockBackend:
    """``httpx.MockTransport`` handler serving a ``MockRepository`` over REST."""

    def __init__(
        self,
        repository: MockRepository | None = None,
        *,
        delay_seconds: float = 0.0,
        fail_with: int | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.repository = MockRepository() if repository is None else repository
        self.delay_seconds = delay_seconds
        self.fail_with = fail_with
        self._sleep = sleep

    def transport(self) -> httpx.MockTransport:
        """Return a transport that routes every request through this backend."""
        return httpx.MockTransport(self)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        if self.delay_seconds > 0:
            self._sleep(self.delay_seconds)
        if self.fail_with is not None:
            return mock_response(None, error=True, error_status=self.fail_with)

        path = request.url.path.rstrip("/")
        method = request.method.upper()
        logger.debug("mock %s %s", method, path)

        if path in self.repository:
            return self._handle_resource(method, path, request)
        parent, _, item_id = path.rpartition("/")
        if item_id and self.repository.is_collection(parent):
            return self._handle_item(method, parent, item_id, request)
        return _not_found(f"resource not found: {path}")

    def _handle_resource(self, method: str, path: str, request: httpx.Request) -> httpx.Response:
        if self.repository.is_collection(path):
            if method == "GET":
                return mock_response(self.repository.list(path))
            if method == "POST":
                return mock_response(self.repository.insert(path, _json_body(request)))
        else:
            if method == "GET":
                return mock_response(self.repository.get(path))
            if method in ("PUT", "PATCH"):
                current = self.repository.get(path)
                body = _json_body(request)
                updated = {**current, **body} if isinstance(current, Mapping) else body
                self.repository.set(path, updated)
                return mock_response(updated)
        return _not_found(f"method not allowed: {method} {path}", METHOD_NOT_ALLOWED_STATUS)

    def _handle_item(
        self, method: str, collection: str, item_id: str, request: httpx.Request
    ) -> httpx.Response:
        if method == "GET":
            item = self.repository.find(collection, item_id)
        elif method in ("PUT", "PATCH"):
            item = self.repository.update(collection, item_id, _json_body(request))
        elif method == "DELETE":
            item = self.repository.delete(collection, item_id) or None
        else:
            return _not_found(
                f"method not allowed: {method} {collection}/{item_id}",
                METHOD_NOT_ALLOWED_STATUS,
            )
        if item is None:
            return _not_found(f"resource not found: {collection}/{item_id}")
        return mock_response(item)


def _json_body(request: httpx.Request) -> dict[str, Any]:
    if not request.content:
        return {}
    payload = json.loads(request.content)
    return payload if isinstance(payload, dict) else {"value": payload}
