"""
CLI Module - Command Line Interface for URL Analyzer

Handles command-line argument parsing and runs the page analysis and
output generation process.
"""

import argparse
import json
import sys
import time
from pathlib import Path
from typing import Dict, List, Optional

from .analyzer import PageAnalyzer
from .config import DEFAULT_TIMEOUT, DEFAULT_USER_AGENT, MAX_REDIRECTS, AnalyzerConfig
from .models import AnalysisReport
from .output_formatter import OutputFormatter


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Analyze web pages for structure, links and login forms",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py https://example.com
  python main.py https://example.com https://example.org --output results.json
  python main.py https://example.com --workers 8 --verbose
  python main.py https://example.com --no-verify-links
  python main.py https://example.com --records data/records.json
  python main.py https://example.com https://example.org --previous data/url_analysis.json
        """,
    )

    parser.add_argument("urls", nargs="+", help="One or more page URLs to analyze")

    parser.add_argument(
        "--output",
        "-o",
        help="Output file path (default: data/url_analysis.json)",
        default="data/url_analysis.json",
    )

    parser.add_argument(
        "--timeout",
        type=float,
        default=DEFAULT_TIMEOUT,
        help=f"Request timeout in seconds (default: {DEFAULT_TIMEOUT:g})",
    )

    parser.add_argument(
        "--max-redirects",
        type=int,
        default=MAX_REDIRECTS,
        help=f"Maximum redirects to follow per request (default: {MAX_REDIRECTS})",
    )

    parser.add_argument(
        "--user-agent",
        default=DEFAULT_USER_AGENT,
        help="User-Agent header sent with every request",
    )

    parser.add_argument(
        "--workers",
        type=int,
        default=1,
        help="Number of concurrent link checks per page (default: 1)",
    )

    parser.add_argument(
        "--no-verify-links",
        action="store_true",
        help="Count links without checking whether they are broken",
    )

    parser.add_argument(
        "--no-head-fallback",
        action="store_true",
        help="Do not retry a failed HEAD link check with GET",
    )

    parser.add_argument(
        "--records",
        help="Also write one database-style record per successful page to this file",
    )

    parser.add_argument(
        "--previous",
        help="Earlier output file; pages it analyzed successfully are reused, not fetched",
    )

    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable verbose logging"
    )

    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> AnalyzerConfig:
    """Build the analyzer configuration from parsed arguments."""
    return AnalyzerConfig(
        timeout=args.timeout,
        max_redirects=args.max_redirects,
        user_agent=args.user_agent,
        head_fallback_to_get=not args.no_head_fallback,
        verify_links=not args.no_verify_links,
        max_workers=args.workers,
        verbose=args.verbose,
    )


def load_previous_reports(path: str) -> Dict[str, AnalysisReport]:
    """Load the successful reports of an earlier run, keyed by URL."""
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    reports = {}
    for page in data.get("pages", []):
        report = AnalysisReport.from_dict(page)
        if report.succeeded:
            reports[report.source_url] = report
    return reports


def write_records(
    path: str, reports: List[AnalysisReport], formatter: OutputFormatter
) -> int:
    """Write persistence records for the successful reports; returns how many."""
    records = [formatter.to_records(report) for report in reports]
    records = [record for record in records if record is not None]

    records_path = Path(path)
    records_path.parent.mkdir(parents=True, exist_ok=True)
    with open(records_path, "w", encoding="utf-8") as f:
        f.write(json.dumps(records, indent=2, ensure_ascii=False))
    return len(records)


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for the CLI application."""
    args = parse_arguments(argv)

    output_path = Path(args.output)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    if args.verbose:
        print(f"🚀 Analyzing {len(args.urls)} URL(s)")
        print(f"⏱️  Timeout: {args.timeout:g}s, max redirects: {args.max_redirects}")
        print(f"💾 Output file: {args.output}")
        print("-" * 50)

    start_time = time.time()

    try:
        config = build_config(args)
        analyzer = PageAnalyzer(config)
        output_formatter = OutputFormatter()

        previous = load_previous_reports(args.previous) if args.previous else {}
        pending = [url for url in args.urls if url not in previous]
        if args.verbose and previous:
            print(f"♻️  Reusing {len(args.urls) - len(pending)} report(s) from {args.previous}")

        fresh = iter(analyzer.analyze_batch(pending) if pending else [])
        reports = [
            previous[url] if url in previous else next(fresh) for url in args.urls
        ]

        analysis_time = time.time() - start_time
        output_data = output_formatter.format_output(
            reports,
            analysis_time,
            timeout=config.timeout,
            max_redirects=config.max_redirects,
            verify_links=config.verify_links,
            head_fallback_to_get=config.head_fallback_to_get,
            max_workers=config.max_workers,
        )

        json_output = json.dumps(output_data, indent=2, ensure_ascii=False)
        with open(output_path, "w", encoding="utf-8") as f:
            f.write(json_output)

        if args.records:
            saved = write_records(args.records, reports, output_formatter)
            if args.verbose:
                print(f"🗄️  {saved} record(s) saved to: {args.records}")

        if args.verbose:
            print(f"✅ Results saved to: {args.output}")
            print(f"\n🎉 Analysis completed in {analysis_time:.2f} seconds")

            print(f"\n{'=' * 60}")
            print("📋 URL ANALYSIS SUMMARY")
            print("=" * 60)

            for report in reports:
                print(f"\n🌐 {report.source_url}")
                if not report.succeeded:
                    print(f"   ❌ {report.error}")
                    continue
                print(f"   📄 {report.html_version.value}: {report.page_title or '(no title)'}")
                print(
                    f"   📊 Links: {report.internal_link_count} internal, "
                    f"{report.external_link_count} external, "
                    f"{report.broken_link_count} broken"
                )
                for detail in report.broken_links:
                    print(f"   🔗 {detail.url} ({detail.error_message})")
                if report.has_login_form:
                    print("   🔐 Login form detected")
        else:
            print(f"Analysis complete. Results saved to: {args.output}")

    except KeyboardInterrupt:
        print("\n❌ Analysis interrupted by user")
        sys.exit(1)
    except Exception as e:
        print(f"❌ Error during analysis: {str(e)}")
        if args.verbose:
            import traceback

            traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
