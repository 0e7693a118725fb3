"""Query and pagination models shared by the DFMS resource APIs.

Field names are snake_case in Python and serialize to the camelCase names
the backend expects (``pageSize``, ``sortBy``, ``sortOrder``).
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Generic, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PaginationParams(_CamelModel):
    """Page selection sent as query parameters."""

    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=10, gt=0)
    sort_by: str | None = None
    sort_order: Literal["asc", "desc"] | None = None


class QueryParams(PaginationParams):
    """Pagination plus free-form search and filter parameters."""

    model_config = ConfigDict(extra="allow")

    search: str | None = None


class PaginatedData(_CamelModel, Generic[T]):
    """Paginated payload returned inside an envelope ``data`` field."""

    items: list[T] = Field(default_factory=list)
    total: int = 0
    page: int = 1
    page_size: int = 10
    total_pages: int = 0


def to_query(params: PaginationParams | Mapping[str, Any] | None) -> dict[str, Any] | None:
    """Return wire query parameters, dropping unset values."""
    if params is None:
        return None
    if isinstance(params, BaseModel):
        return params.model_dump(by_alias=True, exclude_none=True)
    return {key: value for key, value in params.items() if value is not None}
