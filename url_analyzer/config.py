"""
Configuration Module

Holds the HTTP policy used for the page fetch and for every link check.
A single AnalyzerConfig value is passed into the analyzer explicitly.
"""

from dataclasses import dataclass


DEFAULT_TIMEOUT = 10.0
MAX_REDIRECTS = 5
DEFAULT_USER_AGENT = "Mozilla/5.0 (compatible; URL-Analyzer/1.0)"


@dataclass
class AnalyzerConfig:
    """Policy settings for a page analysis run."""

    timeout: float = DEFAULT_TIMEOUT
    max_redirects: int = MAX_REDIRECTS
    user_agent: str = DEFAULT_USER_AGENT
    head_fallback_to_get: bool = True
    verify_links: bool = True
    max_workers: int = 1
    verbose: bool = False

    def __post_init__(self):
        if self.timeout <= 0:
            raise ValueError(f"timeout must be positive, got {self.timeout}")
        if self.max_redirects < 0:
            raise ValueError(
                f"max_redirects cannot be negative, got {self.max_redirects}"
            )
        if self.max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {self.max_workers}")

    @property
    def headers(self) -> dict:
        """Request headers sent with the page fetch and link checks."""
        return {
            "User-Agent": self.user_agent,
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
        }

    @property
    def parallel(self) -> bool:
        return self.verify_links and self.max_workers > 1
