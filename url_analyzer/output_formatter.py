"""
Output Formatter Module

Formats analysis reports into structured output formats.
Currently supports JSON output plus the row shape used for persistence.
"""

from typing import Dict, List, Optional
from datetime import datetime, timezone

from . import __version__
from .models import AnalysisReport


class OutputFormatter:
    """Formats analysis results into structured output."""

    def _generate_analysis_summary(
        self, reports: List[AnalysisReport], analysis_time: float
    ) -> Dict:
        """
        Generate a summary across all analyzed pages.

        Args:
            reports: Reports for every requested URL
            analysis_time: Total time taken in seconds

        Returns:
            Summary dictionary
        """
        successful = [report for report in reports if report.succeeded]

        heading_totals: Dict[str, int] = {}
        for report in successful:
            for level, count in report.heading_counts.items():
                heading_totals[level] = heading_totals.get(level, 0) + count

        return {
            "pages_requested": len(reports),
            "pages_analyzed": len(successful),
            "pages_failed": len(reports) - len(successful),
            "total_internal_links": sum(r.internal_link_count for r in successful),
            "total_external_links": sum(r.external_link_count for r in successful),
            "total_broken_links": sum(r.broken_link_count for r in successful),
            "pages_with_login_form": sum(1 for r in successful if r.has_login_form),
            "heading_totals": dict(sorted(heading_totals.items())),
            "analysis_time_seconds": round(analysis_time, 2),
        }

    def _generate_metadata(self, run_parameters: Dict) -> Dict:
        """
        Generate metadata including run parameters.

        Args:
            run_parameters: Parameters passed to format_output

        Returns:
            Metadata dictionary
        """
        metadata = {
            "format_version": "1.0",
            "tool_name": "URL Analyzer",
            "tool_version": __version__,
            "generation_timestamp": datetime.now(timezone.utc).isoformat(),
            "run_parameters": {
                "timeout": run_parameters.get("timeout"),
                "max_redirects": run_parameters.get("max_redirects"),
                "verify_links": run_parameters.get("verify_links"),
                "head_fallback_to_get": run_parameters.get("head_fallback_to_get"),
                "max_workers": run_parameters.get("max_workers"),
            },
        }

        # Remove None values from run_parameters
        metadata["run_parameters"] = {
            k: v for k, v in metadata["run_parameters"].items() if v is not None
        }

        return metadata

    def format_output(
        self,
        reports: List[AnalysisReport],
        analysis_time: float,
        **kwargs,
    ) -> Dict:
        """
        Format all analysis results into final output structure.

        Args:
            reports: Reports in the order the URLs were given
            analysis_time: Time taken for the whole run in seconds
            **kwargs: Run parameters (timeout, max_redirects, etc.)

        Returns:
            Complete formatted output dictionary
        """
        return {
            "analysis_summary": self._generate_analysis_summary(reports, analysis_time),
            "pages": [report.to_dict() for report in reports],
            "metadata": self._generate_metadata(kwargs),
        }

    def to_records(self, report: AnalysisReport) -> Optional[Dict]:
        """
        Convert a report into a parent record with two child collections.

        Failed analyses are never persisted, so they produce no record.

        Args:
            report: Completed analysis report

        Returns:
            Record dictionary, or None when the analysis did not complete
        """
        if not report.succeeded:
            return None

        return {
            "url": report.source_url,
            "html_version": report.html_version.value,
            "page_title": report.page_title,
            "internal_links": report.internal_link_count,
            "external_links": report.external_link_count,
            "broken_links": report.broken_link_count,
            "has_login_form": report.has_login_form,
            "heading_counts": [
                {"level": level, "count": count}
                for level, count in sorted(report.heading_counts.items())
            ],
            "broken_link_details": [
                {
                    "url": detail.url,
                    "status_code": detail.status_code,
                    "error": detail.error_message,
                }
                for detail in report.broken_links
            ],
        }
