"""Canonical response envelope returned for every API exchange."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from packages.dfms_shared.errors import codes

from .raw import MISSING


@dataclass(frozen=True)
class ApiEnvelope:
    """Normalized ``{code, message, data, success}`` response.

    ``success`` is derived from ``code`` and cannot be set independently.
    ``original_data`` keeps the raw upstream payload when normalization had to
    guess or fabricate fields. ``extra`` holds sibling fields a canonical
    backend body carried beyond the envelope keys.
    """

    code: int | float
    message: str
    data: Any = None
    original_data: Any = field(default=MISSING, repr=False)
    extra: Mapping[str, Any] = field(default_factory=dict, repr=False)

    def __post_init__(self) -> None:
        if isinstance(self.code, bool) or not isinstance(self.code, (int, float)):
            raise TypeError(f"envelope code must be a number, got {self.code!r}")
        if not isinstance(self.message, str):
            raise TypeError(f"envelope message must be a string, got {self.message!r}")

    @property
    def success(self) -> bool:
        """Return ``True`` when ``code`` equals the success code."""
        return self.code == codes.SUCCESS

    @property
    def has_original_data(self) -> bool:
        """Return ``True`` when the raw upstream payload was retained."""
        return self.original_data is not MISSING

    def to_dict(self, *, include_extra: bool = False) -> dict[str, Any]:
        """Return the wire shape, ``originalData`` only when retained."""
        output: dict[str, Any] = dict(self.extra) if include_extra else {}
        output.update(
            {
                "code": self.code,
                "message": self.message,
                "data": self.data,
                "success": self.success,
            }
        )
        if self.has_original_data:
            output["originalData"] = self.original_data
        return output
