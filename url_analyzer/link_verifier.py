"""
Link Verifier Module

Checks whether a resolved link responds, using a HEAD request with a GET
fallback for servers that refuse HEAD outright.
"""

import threading
from concurrent.futures import ThreadPoolExecutor
from http import HTTPStatus
from typing import Callable, Iterable, List, Optional

import requests
import urllib3

from .config import AnalyzerConfig
from .models import BrokenLinkDetail


# requests lets some urllib3 errors through unwrapped, e.g. LocationParseError
# for a host label longer than 63 characters
TRANSPORT_ERRORS = (requests.RequestException, urllib3.exceptions.HTTPError, ValueError)


def reason_phrase(status_code: int, fallback: str = "") -> str:
    """Standard reason phrase for a status code."""
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return fallback or ""


class LinkVerifier:
    """Classifies links as live or broken."""

    def __init__(
        self,
        session: requests.Session,
        config: Optional[AnalyzerConfig] = None,
        session_factory: Optional[Callable[[], requests.Session]] = None,
    ):
        """
        Initialize the link verifier.

        Args:
            session: HTTP session shared with the page fetch
            config: Timeout, redirect and fallback policy
            session_factory: Builds one session per worker thread for
                parallel checks; the shared session is used when None
        """
        self.session = session
        self.config = config or AnalyzerConfig()
        self.session_factory = session_factory
        self._local = threading.local()

    def _current_session(self) -> requests.Session:
        return getattr(self._local, "session", None) or self.session

    def _request(self, method: str, url: str) -> requests.Response:
        """
        Issue a request, following redirects up to the configured cap.

        When the cap is exceeded the last response received is returned
        instead of an error.
        """
        try:
            return self._current_session().request(
                method,
                url,
                headers=self.config.headers,
                timeout=self.config.timeout,
                allow_redirects=True,
                stream=method == "GET",
            )
        except requests.TooManyRedirects as e:
            if e.response is None:
                raise
            return e.response

    def check(self, url: str) -> Optional[BrokenLinkDetail]:
        """
        Verify a single link.

        Args:
            url: Absolute URL to check

        Returns:
            BrokenLinkDetail when the link is broken, None when it is live
        """
        try:
            response = self._request("HEAD", url)
        except TRANSPORT_ERRORS as head_error:
            if not self.config.head_fallback_to_get:
                return BrokenLinkDetail(url, 0, f"Request failed: {head_error}")

            if self.config.verbose:
                print(f"    ↩️  HEAD failed, retrying with GET: {url}")
            try:
                response = self._request("GET", url)
            except TRANSPORT_ERRORS as e:
                return BrokenLinkDetail(url, 0, f"Request failed: {e}")

        try:
            status_code = response.status_code
            reason = reason_phrase(status_code, response.reason)
        finally:
            response.close()

        if status_code >= 400:
            return BrokenLinkDetail(
                url, status_code, f"HTTP error: {status_code} {reason}".rstrip()
            )
        return None

    def check_all(self, urls: Iterable[str]) -> List[Optional[BrokenLinkDetail]]:
        """
        Verify many links, returning results in the order given.

        Args:
            urls: Absolute URLs to check

        Returns:
            One entry per URL: a BrokenLinkDetail or None
        """
        urls = list(urls)
        if self.config.max_workers <= 1 or len(urls) <= 1:
            return [self.check(url) for url in urls]

        workers = min(self.config.max_workers, len(urls))
        worker_sessions = []
        lock = threading.Lock()

        def open_worker_session():
            session = self.session_factory()
            self._local.session = session
            with lock:
                worker_sessions.append(session)

        initializer = open_worker_session if self.session_factory else None
        try:
            with ThreadPoolExecutor(max_workers=workers, initializer=initializer) as executor:
                # map() yields in submission order regardless of completion order
                results = list(executor.map(self.check, urls))
        finally:
            for session in worker_sessions:
                session.close()
        return results
