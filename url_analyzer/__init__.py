"""
URL Analyzer Package

A Python tool that fetches a web page and reports its HTML version, title,
heading structure, link counts, broken links and login-form presence.
"""

__version__ = "1.0.0"
__author__ = "Assessment Project"
__description__ = "Single-page HTML structure and link health analyzer"

from .analyzer import PageAnalyzer, analyze_url
from .config import AnalyzerConfig
from .models import AnalysisReport, BrokenLinkDetail, HTMLVersion

__all__ = [
    "AnalysisReport",
    "AnalyzerConfig",
    "BrokenLinkDetail",
    "HTMLVersion",
    "PageAnalyzer",
    "analyze_url",
]
