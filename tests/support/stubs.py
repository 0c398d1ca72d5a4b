"""Shared test stubs for the external song detail service."""

import json
from datetime import date
from typing import List, Optional, Tuple

import requests

from songlib.domain.catalog import DetailFetchError
from songlib.models.dto import SongDetail


DEFAULT_TEXT = "Ooh baby, don't you know I suffer?\nOoh baby, can you hear me moan?"


class StubDetailClient:
    """In-memory replacement for ``SongDetailClient``."""

    configured = True

    def __init__(
        self,
        release_date: date = date(2006, 7, 16),
        text: str = DEFAULT_TEXT,
        link: str = "https://www.youtube.com/watch?v=Xsp3_a-PMTw",
        error: Optional[Exception] = None,
    ):
        self.release_date = release_date
        self.text = text
        self.link = link
        self.error = error
        self.calls: List[Tuple[str, str]] = []

    def fetch_detail(self, group_name: str, title: str) -> SongDetail:
        self.calls.append((group_name, title))
        if self.error is not None:
            raise self.error
        return SongDetail(release_date=self.release_date, text=self.text, link=self.link)

    def fail_with(self, message: str = "external detail service unavailable"):
        self.error = DetailFetchError(message)
        return self


class FakeResponse:
    def __init__(self, status_code: int = 200, payload=None, body: Optional[str] = None):
        self.status_code = status_code
        self.text = body if body is not None else json.dumps(payload)

    def json(self):
        return json.loads(self.text)


class FakeHttpSession:
    """Records GET calls and replays a canned response or raises an error."""

    def __init__(self, response: Optional[FakeResponse] = None, error: Optional[Exception] = None):
        self.response = response or FakeResponse(
            payload={"releaseDate": "16.07.2006", "text": DEFAULT_TEXT, "link": "https://example.test/x"}
        )
        self.error = error
        self.calls = []

    def get(self, url, params=None, headers=None, timeout=None):
        self.calls.append({"url": url, "params": params, "headers": headers, "timeout": timeout})
        if self.error is not None:
            raise self.error
        return self.response


def connection_error() -> requests.ConnectionError:
    return requests.ConnectionError("connection refused")
