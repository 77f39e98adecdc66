"""
Raw page sources for character frame data pages.

SupercomboSource fetches https://wiki.supercombo.gg/w/Street_Fighter_6/<Page>/Data
with a shared requests.Session, a polite delay between requests and
exponential-backoff retries. The blocking calls run in the default
executor so several characters can be fetched concurrently.

Every transport problem surfaces as FetchError:

    HTTP 404                       -> NOT_FOUND
    HTTP 429 on the last attempt   -> RATE_LIMITED
    anything else after retries    -> NETWORK_ERROR
"""

import asyncio
import logging
import threading
import time
from typing import Mapping, Optional, Protocol

import requests

from ..config import config
from ..enums import FetchErrorKind
from ..errors import FetchError, UnknownCharacter
from ..roster import ROSTER, Character, get_character

logger = logging.getLogger(__name__)


class PageSource(Protocol):
    """Anything that can return raw page content for a character id."""

    async def fetch(self, character_id: str) -> str:
        ...


# ─── HTTP Source ─────────────────────────────────────────────────────────────

class SupercomboSource:
    """Async-compatible SuperCombo wiki page client."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        delay: Optional[float] = None,
        max_retries: Optional[int] = None,
        session: Optional[requests.Session] = None,
        *,
        backoff: float = 1.0,
        roster: tuple[Character, ...] = ROSTER,
    ):
        self.base_url = (base_url or config.BASE_URL).rstrip("/")
        self.timeout = config.REQUEST_TIMEOUT if timeout is None else timeout
        self.delay = config.REQUEST_DELAY if delay is None else delay
        self.max_retries = max(1, config.MAX_RETRIES if max_retries is None else max_retries)
        self.backoff = backoff
        self._roster = roster
        self._session = session or requests.Session()
        self._session.headers.update({"User-Agent": config.USER_AGENT})
        self._last_request_time = 0.0
        self._rate_lock = threading.Lock()

    def page_url(self, character_id: str) -> str:
        try:
            character = get_character(character_id, self._roster)
        except UnknownCharacter:
            raise FetchError(character_id, FetchErrorKind.NOT_FOUND, "not in roster") from None
        return f"{self.base_url}/{character.page_id}/Data"

    def _rate_limit(self):
        """Enforce minimum delay between requests across executor threads."""
        with self._rate_lock:
            elapsed = time.monotonic() - self._last_request_time
            if elapsed < self.delay:
                time.sleep(self.delay - elapsed)
            self._last_request_time = time.monotonic()

    def _retry_wait(self, attempt: int, response: Optional[requests.Response] = None) -> float:
        if response is not None:
            retry_after = response.headers.get("Retry-After", "")
            if retry_after.isdigit():
                return float(retry_after)
        return self.backoff * (2 ** attempt)

    def _fetch_sync(self, character_id: str) -> str:
        url = self.page_url(character_id)
        last_error: Optional[Exception] = None
        rate_limited = False

        for attempt in range(self.max_retries):
            self._rate_limit()
            response = None
            try:
                response = self._session.get(url, timeout=self.timeout)
                if response.status_code == 404:
                    raise FetchError(character_id, FetchErrorKind.NOT_FOUND, url)
                response.raise_for_status()
                logger.debug(f"[SuperCombo] {character_id}: {len(response.text):,} chars from {url}")
                return response.text
            except requests.RequestException as e:
                last_error = e
                rate_limited = response is not None and response.status_code == 429
                logger.warning(f"[SuperCombo] {character_id} fetch error (attempt {attempt+1}): {e}")
                if attempt < self.max_retries - 1:
                    time.sleep(self._retry_wait(attempt, response if rate_limited else None))

        kind = FetchErrorKind.RATE_LIMITED if rate_limited else FetchErrorKind.NETWORK_ERROR
        raise FetchError(character_id, kind, str(last_error)) from last_error

    async def fetch(self, character_id: str) -> str:
        """Fetch a character's frame data page. Raises FetchError."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._fetch_sync, character_id)

    def close(self) -> None:
        self._session.close()


# ─── Static Source ───────────────────────────────────────────────────────────

class StaticPageSource:
    """Serves pre-fetched page content, e.g. from disk or test fixtures."""

    def __init__(self, pages: Mapping[str, str], base_url: Optional[str] = None):
        self._pages = dict(pages)
        self.base_url = base_url

    async def fetch(self, character_id: str) -> str:
        try:
            return self._pages[character_id]
        except KeyError:
            raise FetchError(character_id, FetchErrorKind.NOT_FOUND, "no static page") from None
