"""
Report Models

Data structures produced by a page analysis: the report itself, the
per-link broken detail and the detected HTML version.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional


class HTMLVersion(Enum):
    """HTML version derived from the document's doctype."""

    HTML5 = "HTML5"
    HTML401 = "HTML 4.01"
    XHTML = "XHTML"


@dataclass(frozen=True)
class BrokenLinkDetail:
    """A link that failed verification."""

    url: str
    status_code: int = 0
    error_message: str = ""

    def to_dict(self) -> Dict:
        return {
            "url": self.url,
            "statusCode": self.status_code,
            "error": self.error_message,
        }


@dataclass
class AnalysisReport:
    """Structured result of analyzing a single page."""

    source_url: str
    html_version: HTMLVersion = HTMLVersion.HTML5
    page_title: str = ""
    internal_link_count: int = 0
    external_link_count: int = 0
    broken_link_count: int = 0
    has_login_form: bool = False
    heading_counts: Dict[str, int] = field(default_factory=dict)
    broken_links: List[BrokenLinkDetail] = field(default_factory=list)
    error: Optional[str] = None
    processing_time: float = 0.0

    @property
    def succeeded(self) -> bool:
        return self.error is None

    def add_broken_link(self, detail: BrokenLinkDetail) -> None:
        """Record a broken link and keep the counter in step with the details."""
        self.broken_links.append(detail)
        self.broken_link_count += 1

    def fail(self, message: str) -> None:
        """
        Mark the analysis as not completed.

        Everything gathered so far is discarded, so a failed report never
        carries partial counts.

        Args:
            message: Description of the fetch or parse failure
        """
        self.html_version = HTMLVersion.HTML5
        self.page_title = ""
        self.internal_link_count = 0
        self.external_link_count = 0
        self.broken_link_count = 0
        self.has_login_form = False
        self.heading_counts = {}
        self.broken_links = []
        self.error = message

    def to_dict(self) -> Dict:
        """
        Convert the report into its JSON wire shape.

        Returns:
            Dictionary with camelCase keys; "error" is only present when set
        """
        data = {
            "url": self.source_url,
            "htmlVersion": self.html_version.value,
            "pageTitle": self.page_title,
            "internalLinks": self.internal_link_count,
            "externalLinks": self.external_link_count,
            "brokenLinks": self.broken_link_count,
            "hasLoginForm": self.has_login_form,
            "headingCounts": dict(self.heading_counts),
            "brokenLinkDetails": [detail.to_dict() for detail in self.broken_links],
            "processingTime": round(self.processing_time, 3),
        }
        if self.error:
            data["error"] = self.error
        return data

    @classmethod
    def from_dict(cls, data: Dict) -> "AnalysisReport":
        """Rebuild a report from the shape produced by to_dict()."""
        details = [
            BrokenLinkDetail(
                url=item["url"],
                status_code=item.get("statusCode", 0),
                error_message=item.get("error", ""),
            )
            for item in data.get("brokenLinkDetails", [])
        ]
        return cls(
            source_url=data["url"],
            html_version=HTMLVersion(data.get("htmlVersion", HTMLVersion.HTML5.value)),
            page_title=data.get("pageTitle", ""),
            internal_link_count=data.get("internalLinks", 0),
            external_link_count=data.get("externalLinks", 0),
            broken_link_count=data.get("brokenLinks", len(details)),
            has_login_form=data.get("hasLoginForm", False),
            heading_counts=dict(data.get("headingCounts", {})),
            broken_links=details,
            error=data.get("error") or None,
            processing_time=data.get("processingTime", 0.0),
        )
