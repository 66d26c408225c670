"""Workspace Schemas: collection, request and response-history payloads.

Invariants:
    - Titles: 1-200 chars, stripped, non-empty
    - Reorder indices are non-negative (out-of-range values are clamped by the engine)
"""

from pydantic import BaseModel, Field, field_validator

from reqdeck.core.domain_types import HttpMethod, ResponseStatus


def _strip_title(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("title cannot be empty or whitespace")
    return v


class CollectionCreate(BaseModel):
    """New collection; title defaults to "New collection <n>"."""
    title: str | None = Field(None, max_length=200)


class RequestCreate(BaseModel):
    """New request; title defaults to "New request <n>"."""
    title: str | None = Field(None, max_length=200)
    method: HttpMethod = HttpMethod.GET


class TitleUpdate(BaseModel):
    title: str = Field(min_length=1, max_length=200)

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        return _strip_title(v)


class UrlUpdate(BaseModel):
    url: str = Field(max_length=8192)


class MethodUpdate(BaseModel):
    method: HttpMethod


class MoveItem(BaseModel):
    """Sidebar reorder: splice from_index to to_index."""
    from_index: int = Field(ge=0)
    to_index: int = Field(ge=0)


class ResponseCreate(BaseModel):
    """A response to record in the request's history."""
    data: str
    status: ResponseStatus = ResponseStatus.SUCCESS
