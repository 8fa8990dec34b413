#!/usr/bin/env python3
"""
URL Analyzer - Main Entry Point

A tool for analyzing a web page's structure: HTML version, title,
headings, internal and external links, broken links and login forms.
"""

from url_analyzer.cli import main


if __name__ == "__main__":
    main()
