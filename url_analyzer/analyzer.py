"""
Page Analyzer Module

Orchestrates fetch, parse and walk for a single page and assembles the
final AnalysisReport. Fetch and parse failures are recorded in the report
instead of being raised.
"""

import time
from typing import Callable, Iterable, List, Optional
from urllib.parse import urlsplit

import requests
from bs4 import BeautifulSoup, ParserRejectedMarkup

from .config import AnalyzerConfig
from .dom_walker import DOMWalker
from .link_verifier import TRANSPORT_ERRORS, LinkVerifier
from .models import AnalysisReport


class FetchError(Exception):
    """The page could not be retrieved."""


class ParseError(Exception):
    """The page body could not be parsed as HTML."""


class PageAnalyzer:
    """Analyzes single pages for structure and link health."""

    def __init__(
        self,
        config: Optional[AnalyzerConfig] = None,
        session_factory: Callable[[], requests.Session] = requests.Session,
    ):
        """
        Initialize the page analyzer.

        Args:
            config: HTTP and verification policy
            session_factory: Builds the HTTP session used by one analysis
        """
        self.config = config or AnalyzerConfig()
        self.session_factory = session_factory

    def _build_session(self) -> requests.Session:
        session = self.session_factory()
        session.headers.update(self.config.headers)
        session.max_redirects = self.config.max_redirects
        return session

    def _fetch_page(self, session: requests.Session, url: str) -> str:
        """
        Fetch the page body.

        Args:
            session: Session for this analysis
            url: URL to fetch

        Returns:
            Decoded response body

        Raises:
            FetchError: On transport failure or an HTTP error status
        """
        if self.config.verbose:
            print(f"  📄 Fetching: {url}")

        try:
            response = session.get(url, timeout=self.config.timeout)
        except requests.TooManyRedirects as e:
            if e.response is None:
                raise FetchError(f"failed to fetch URL: {e}") from e
            # Redirect cap reached; evaluate the last hop
            response = e.response
        except TRANSPORT_ERRORS as e:
            raise FetchError(f"failed to fetch URL: {e}") from e

        if response.status_code >= 400:
            raise FetchError(f"HTTP error: {response.status_code}")

        return response.text

    def _parse(self, body: str) -> BeautifulSoup:
        try:
            # Keep the first of any repeated attribute, e.g. two hrefs
            return BeautifulSoup(
                body, "html.parser", on_duplicate_attribute="ignore"
            )
        except (ParserRejectedMarkup, AssertionError, ValueError) as e:
            raise ParseError(f"Failed to parse HTML: {e}") from e

    def _run(self, session: requests.Session, url: str, report: AnalysisReport) -> None:
        """Fetch, parse and walk the page, populating the report."""
        body = self._fetch_page(session, url)
        soup = self._parse(body)

        base_host = urlsplit(url).netloc
        verifier = (
            LinkVerifier(session, self.config, session_factory=self._build_session)
            if self.config.verify_links
            else None
        )
        walker = DOMWalker(
            report,
            base_host,
            verifier=verifier,
            defer_verification=self.config.parallel,
            verbose=self.config.verbose,
        )
        walker.walk(soup)
        walker.finish()

    def analyze(self, url: str) -> AnalysisReport:
        """
        Analyze a single page.

        Args:
            url: Page URL to analyze

        Returns:
            AnalysisReport; on fetch or parse failure only "error" is set
        """
        start_time = time.time()
        report = AnalysisReport(source_url=url)

        session = self._build_session()
        try:
            self._run(session, url, report)
        except (FetchError, ParseError) as e:
            if self.config.verbose:
                print(f"    ❌ Analysis failed for {url}: {e}")
            report.fail(str(e))
        finally:
            session.close()

        report.processing_time = time.time() - start_time

        if self.config.verbose and report.succeeded:
            print(
                f"    ✅ {report.internal_link_count} internal, "
                f"{report.external_link_count} external, "
                f"{report.broken_link_count} broken links"
            )

        return report

    def analyze_batch(self, urls: Iterable[str]) -> List[AnalysisReport]:
        """
        Analyze several pages independently.

        Args:
            urls: Page URLs in the order reports should be returned

        Returns:
            One report per URL, in input order
        """
        return [self.analyze(url) for url in urls]


def analyze_url(url: str, config: Optional[AnalyzerConfig] = None) -> AnalysisReport:
    """Analyze a single page with the given (or default) configuration."""
    return PageAnalyzer(config).analyze(url)
