"""
Integration tests for the URL Analyzer.
"""

import json
from unittest.mock import Mock, patch

import pytest

from url_analyzer.analyzer import PageAnalyzer
from url_analyzer.cli import build_config, main, parse_arguments
from url_analyzer.config import AnalyzerConfig
from url_analyzer.models import AnalysisReport
from url_analyzer.output_formatter import OutputFormatter


HTML401_PAGE = """<!DOCTYPE HTML PUBLIC "-//W3C//DTD HTML 4.01//EN" "http://www.w3.org/TR/html4/strict.dtd">
<html>
    <head><title>Legacy</title></head>
    <body>
        <h1>Legacy page</h1>
        <a href="page2.html">Next</a>
        <a href="https://partner.example.org/">Partner</a>
        <a href="javascript:history.back()">Back</a>
    </body>
</html>
"""


class TestIntegration:
    """Integration test cases."""

    def test_full_pipeline(self):
        """Test analysis followed by output formatting."""
        session = Mock()
        session.headers = {}
        session.get.return_value = Mock(status_code=200, text=HTML401_PAGE)

        def respond(method, url, **kwargs):
            if url == "https://partner.example.org/":
                return Mock(status_code=410, reason="Gone")
            return Mock(status_code=200, reason="OK")

        session.request.side_effect = respond

        analyzer = PageAnalyzer(AnalyzerConfig(), session_factory=lambda: session)
        reports = analyzer.analyze_batch(["http://legacy.example.com/index.html"])

        output = OutputFormatter().format_output(reports, 0.5)
        page = output["pages"][0]

        assert page["htmlVersion"] == "HTML 4.01"
        assert page["pageTitle"] == "Legacy"
        assert page["internalLinks"] == 1
        assert page["externalLinks"] == 1
        assert page["brokenLinks"] == 1
        assert page["brokenLinkDetails"][0]["statusCode"] == 410
        assert page["brokenLinkDetails"][0]["error"] == "HTTP error: 410 Gone"

        checked = [call[0][1] for call in session.request.call_args_list]
        assert checked == [
            "http://legacy.example.com/page2.html",
            "https://partner.example.org/",
        ]

        # The whole output must be serializable
        json.dumps(output)


class TestCLI:
    """Test cases for the command line interface."""

    def test_parse_arguments(self):
        """Test argument parsing and config building."""
        args = parse_arguments(
            [
                "https://example.com",
                "https://example.org",
                "--timeout",
                "5",
                "--workers",
                "3",
                "--no-head-fallback",
            ]
        )
        config = build_config(args)

        assert args.urls == ["https://example.com", "https://example.org"]
        assert config.timeout == 5.0
        assert config.max_workers == 3
        assert config.max_redirects == 5
        assert config.head_fallback_to_get is False
        assert config.verify_links is True

    @patch.object(PageAnalyzer, "analyze_batch")
    def test_main_writes_output(self, mock_analyze_batch, tmp_path):
        """Test that the CLI writes the formatted JSON file."""
        report = AnalysisReport(source_url="https://example.com", page_title="Home")
        mock_analyze_batch.return_value = [report]
        output_file = tmp_path / "out" / "results.json"

        main(["https://example.com", "--output", str(output_file)])

        mock_analyze_batch.assert_called_once_with(["https://example.com"])
        data = json.loads(output_file.read_text(encoding="utf-8"))
        assert data["pages"][0]["pageTitle"] == "Home"
        assert data["analysis_summary"]["pages_analyzed"] == 1

    def test_main_rejects_invalid_config(self, tmp_path, capsys):
        """Test that invalid settings exit with status 1."""
        with pytest.raises(SystemExit) as exc_info:
            main(
                [
                    "https://example.com",
                    "--workers",
                    "0",
                    "--output",
                    str(tmp_path / "results.json"),
                ]
            )

        assert exc_info.value.code == 1
        assert "max_workers" in capsys.readouterr().out

    @patch.object(PageAnalyzer, "analyze_batch")
    def test_main_writes_records(self, mock_analyze_batch, tmp_path):
        """Test that only successful reports are written as records."""
        ok = AnalysisReport(
            source_url="https://example.com",
            page_title="Home",
            heading_counts={"H1": 1},
        )
        failed = AnalysisReport(source_url="https://down.example.com")
        failed.fail("HTTP error: 503")
        mock_analyze_batch.return_value = [ok, failed]
        records_file = tmp_path / "db" / "records.json"

        main(
            [
                "https://example.com",
                "https://down.example.com",
                "--output",
                str(tmp_path / "results.json"),
                "--records",
                str(records_file),
            ]
        )

        records = json.loads(records_file.read_text(encoding="utf-8"))
        assert len(records) == 1
        assert records[0]["url"] == "https://example.com"
        assert records[0]["heading_counts"] == [{"level": "H1", "count": 1}]

    @patch.object(PageAnalyzer, "analyze_batch")
    def test_main_reuses_previous_results(self, mock_analyze_batch, tmp_path):
        """Test that pages from an earlier run are reused and failures re-analyzed."""
        cached = AnalysisReport(source_url="https://example.com", page_title="Cached")
        stale = AnalysisReport(source_url="https://down.example.com")
        stale.fail("failed to fetch URL: timeout")
        previous_file = tmp_path / "previous.json"
        previous_file.write_text(
            json.dumps(OutputFormatter().format_output([cached, stale], 1.0)),
            encoding="utf-8",
        )

        mock_analyze_batch.return_value = [
            AnalysisReport(source_url="https://down.example.com", page_title="Back"),
            AnalysisReport(source_url="https://new.example.com", page_title="New"),
        ]
        output_file = tmp_path / "results.json"

        main(
            [
                "https://down.example.com",
                "https://example.com",
                "https://new.example.com",
                "--output",
                str(output_file),
                "--previous",
                str(previous_file),
            ]
        )

        mock_analyze_batch.assert_called_once_with(
            ["https://down.example.com", "https://new.example.com"]
        )
        pages = json.loads(output_file.read_text(encoding="utf-8"))["pages"]
        assert [page["pageTitle"] for page in pages] == ["Back", "Cached", "New"]
