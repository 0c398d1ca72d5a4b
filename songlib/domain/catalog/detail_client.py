import logging
import time
from typing import Optional

import requests

from songlib.models.dto import SongDetail
from songlib.observability.metrics import record_detail_fetch
from songlib.observability.tracing import set_span_outcome, song_span
from .errors import DetailFetchError

logger = logging.getLogger(__name__)


class SongDetailClient:
    def __init__(self, base_url: str, *, timeout: float = 10.0, session: Optional[requests.Session] = None):
        """Client for the external song detail service.

        ``base_url`` is the service root; lookups go to ``{base_url}/info``.
        ``timeout`` bounds each lookup (connect and read).
        """
        self.base_url = (base_url or "").rstrip("/")
        self.timeout = timeout
        self._session = session or requests.Session()

    @property
    def configured(self) -> bool:
        return bool(self.base_url)

    def fetch_detail(self, group_name: str, title: str) -> SongDetail:
        """Return release date, link and lyrics text for a song.

        Any transport error, non-200 status, undecodable body or unparseable
        release date raises ``DetailFetchError``. There is no retry. Error
        messages stay generic; the upstream detail goes to the log only.
        """
        if not self.configured:
            raise DetailFetchError("external detail service URL is not configured")

        with song_span("detail_fetch", group=group_name, title=title) as span:
            started = time.monotonic()

            def _failed(outcome: str, message: str, **attributes) -> DetailFetchError:
                record_detail_fetch(time.monotonic() - started, ok=False)
                set_span_outcome(span, outcome, **attributes)
                return DetailFetchError(message)

            try:
                resp = self._session.get(
                    f"{self.base_url}/info",
                    params={"group": group_name, "song": title},
                    headers={"Accept": "application/json"},
                    timeout=self.timeout,
                )
            except requests.RequestException as exc:
                logger.warning("Detail lookup failed for %s - %s: %s", group_name, title, exc)
                raise _failed(
                    "unreachable", "failed to reach external detail service", error=type(exc).__name__
                ) from exc

            if resp.status_code != 200:
                logger.warning(
                    "Detail lookup for %s - %s returned %s: %s",
                    group_name, title, resp.status_code, (resp.text or "")[:200],
                )
                raise _failed(
                    "bad_status",
                    f"unexpected status code from external detail service: {resp.status_code}",
                    status_code=resp.status_code,
                )

            try:
                detail = SongDetail.model_validate(resp.json())
            except ValueError as exc:
                # JSON decode errors and ValidationError (e.g. bad release date) are both ValueErrors
                logger.warning("Undecodable detail for %s - %s: %s", group_name, title, exc)
                raise _failed("bad_payload", "invalid response from external detail service") from exc

            record_detail_fetch(time.monotonic() - started, ok=True)
            set_span_outcome(span, "ok", status_code=resp.status_code)
        logger.debug("Fetched detail for %s - %s (released %s)", group_name, title, detail.release_date)
        return detail


__all__ = ["SongDetailClient"]
