#!/usr/bin/env python
"""
Pydantic DTOs for the song library.

Wire models use camelCase aliases (``groupName``, ``releaseDate``); Python code
uses snake_case attributes. Request models validate what the HTTP boundary
accepts, the remaining models carry data between repository, service and routes.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

# Date format returned by the external detail service
DETAIL_DATE_FORMAT = "%d.%m.%Y"

# Paging bounds; (MAX_PAGE - 1) * MAX_LIMIT must fit a signed 64-bit offset
MAX_PAGE = 1_000_000
MAX_LIMIT = 1_000


class SongDTO(BaseModel):
    """A song with its group name and assembled lyrics text."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: str
    group_name: str = Field(alias="groupName")
    release_date: Optional[date] = Field(default=None, alias="releaseDate")
    link: str = ""
    lyrics: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class LyricsVerseDTO(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    verse_number: int = Field(ge=1, alias="verseNumber")
    verse: str

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


class SongDetail(BaseModel):
    """Enrichment payload returned by the external ``/info`` endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    release_date: date = Field(alias="releaseDate")
    text: str = ""
    link: str = ""

    @field_validator("release_date", mode="before")
    @classmethod
    def _parse_release_date(cls, value):
        if isinstance(value, str):
            return datetime.strptime(value.strip(), DETAIL_DATE_FORMAT).date()
        return value

    @field_validator("text", "link", mode="before")
    @classmethod
    def _none_as_empty(cls, value):
        return "" if value is None else value


class SongFilter(BaseModel):
    """Search predicates plus pagination; empty/zero values mean "no constraint"."""

    title: str = ""
    group: str = ""
    link: str = ""
    text: str = ""
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    limit: int = Field(default=0, ge=0)
    offset: int = Field(default=0, ge=0)


class SongCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    group: str = Field(min_length=1, max_length=255)
    title: str = Field(min_length=1, max_length=255)


class SongUpdate(BaseModel):
    """Partial update payload.

    A field counts as supplied only when it appears in the request with a
    non-null value; omitted and ``null`` fields are left unchanged.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(min_length=1)
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    release_date: Optional[date] = Field(default=None, alias="releaseDate")
    group_name: Optional[str] = Field(default=None, alias="groupName", min_length=1, max_length=255)
    link: Optional[str] = Field(default=None, max_length=500)
    # Not stripped: blank lines are verses.
    lyrics: Optional[str] = None

    @field_validator("id", "title", "group_name", "link", mode="before")
    @classmethod
    def _strip(cls, value):
        return value.strip() if isinstance(value, str) else value

    def supplied(self) -> Dict[str, Any]:
        """Return the supplied, non-null fields (``id`` excluded)."""
        return {
            name: getattr(self, name)
            for name in self.model_fields_set
            if name != "id" and getattr(self, name) is not None
        }

    def row_values(self) -> Dict[str, Any]:
        """Supplied fields that live on the song row itself."""
        values = self.supplied()
        values.pop("group_name", None)
        values.pop("lyrics", None)
        return values


class SongQueryParams(BaseModel):
    """Query string of ``GET /songs``."""

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    title: str = ""
    group: str = ""
    link: str = ""
    text: str = ""
    start_date: Optional[date] = Field(default=None, alias="startDate")
    end_date: Optional[date] = Field(default=None, alias="endDate")
    page: Optional[int] = Field(default=None, ge=1, le=MAX_PAGE)
    limit: Optional[int] = Field(default=None, ge=1, le=MAX_LIMIT)

    @field_validator("start_date", "end_date", "page", "limit", mode="before")
    @classmethod
    def _blank_as_missing(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @model_validator(mode="after")
    def _check_pairs(self):
        if (self.start_date is None) != (self.end_date is None):
            raise ValueError("either both startDate and endDate should be provided, or neither of them")
        if self.start_date is not None and self.start_date > self.end_date:
            raise ValueError("startDate cannot be after endDate")
        if (self.page is None) != (self.limit is None):
            raise ValueError("either both page and limit should be provided, or neither of them")
        return self

    def to_filter(self) -> SongFilter:
        limit = self.limit or 0
        offset = (self.page - 1) * limit if self.page else 0
        return SongFilter(
            title=self.title,
            group=self.group,
            link=self.link,
            text=self.text,
            start_date=self.start_date,
            end_date=self.end_date,
            limit=limit,
            offset=offset,
        )


class LyricsPageParams(BaseModel):
    """Query string of ``GET /songs/lyrics/<song_id>``; both fields required."""

    page: int = Field(ge=1, le=MAX_PAGE)
    limit: int = Field(ge=1, le=MAX_LIMIT)


class SuccessResponse(BaseModel):
    message: str
    data: Any = None


class ErrorResponse(BaseModel):
    error: str


__all__ = [
    "DETAIL_DATE_FORMAT",
    "MAX_PAGE",
    "MAX_LIMIT",
    "SongDTO",
    "LyricsVerseDTO",
    "SongDetail",
    "SongFilter",
    "SongCreate",
    "SongUpdate",
    "SongQueryParams",
    "LyricsPageParams",
    "SuccessResponse",
    "ErrorResponse",
]
