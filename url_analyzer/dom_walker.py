"""
DOM Walker Module

Traverses a parsed HTML tree in document order and fills in
an AnalysisReport: title, heading counts, doctype version, login forms
and every anchor's classification and liveness.
"""

from itertools import chain
from typing import List, Optional

from bs4.element import Doctype, NavigableString, PageElement, PreformattedString, Tag

from .link_verifier import LinkVerifier
from .models import AnalysisReport, HTMLVersion
from .resolver import extract_href, resolve_link


HEADING_TAGS = {"h1", "h2", "h3", "h4", "h5", "h6"}


def detect_html_version(doctype: str) -> HTMLVersion:
    """
    Map a doctype string to an HTML version.

    Args:
        doctype: Doctype text, e.g. 'html PUBLIC "-//W3C//DTD HTML 4.01//EN"'

    Returns:
        HTML 4.01 when "4.01" appears, XHTML when "xhtml" appears in any
        case, HTML5 otherwise
    """
    doctype = doctype.lower()
    if "4.01" in doctype:
        return HTMLVersion.HTML401
    if "xhtml" in doctype:
        return HTMLVersion.XHTML
    return HTMLVersion.HTML5


def _is_text_node(node: PageElement) -> bool:
    # Comments, doctypes and CDATA are NavigableStrings too
    return isinstance(node, NavigableString) and not isinstance(
        node, PreformattedString
    )


def is_in_head(tag: Tag) -> bool:
    """Check whether any ancestor of the tag is a <head> element."""
    return any(parent.name == "head" for parent in tag.parents)


def has_password_input(form: Tag) -> bool:
    """Check whether a form contains an <input type="password"> at any depth."""
    for element in form.descendants:
        if isinstance(element, Tag) and element.name == "input":
            input_type = element.get("type")
            if isinstance(input_type, str) and input_type.lower() == "password":
                return True
    return False


class DOMWalker:
    """Pre-order walker that populates a report from an HTML tree."""

    def __init__(
        self,
        report: AnalysisReport,
        base_host: str,
        verifier: Optional[LinkVerifier] = None,
        defer_verification: bool = False,
        verbose: bool = False,
    ):
        """
        Initialize the walker.

        Args:
            report: Report to populate in place
            base_host: Host of the analyzed page
            verifier: Link verifier; links are only counted when None
            defer_verification: Collect links and check them in finish()
                instead of during the walk
            verbose: Enable verbose logging
        """
        self.report = report
        self.base_host = base_host
        self.verifier = verifier
        self.defer_verification = defer_verification
        self.verbose = verbose
        self.pending_links: List[str] = []
        self._title_found = False

    def walk(self, root: PageElement) -> None:
        """
        Visit the root and everything below it in document order.

        Each node is handled before its children, siblings left to right.
        Traversal is iterative, so nesting depth is unbounded.
        """
        for node in chain([root], getattr(root, "descendants", ())):
            if isinstance(node, Doctype):
                self.report.html_version = detect_html_version(str(node))
            elif isinstance(node, Tag):
                self._visit_element(node)

    def _visit_element(self, tag: Tag) -> None:
        name = tag.name.lower()

        if name == "title":
            self._visit_title(tag)
        elif name in HEADING_TAGS:
            level = name.upper()
            self.report.heading_counts[level] = (
                self.report.heading_counts.get(level, 0) + 1
            )
        elif name == "a":
            self._visit_anchor(tag)
        elif name == "form":
            if has_password_input(tag):
                self.report.has_login_form = True

    def _visit_title(self, tag: Tag) -> None:
        # The first title inside <head> is authoritative
        if self._title_found or not is_in_head(tag) or not tag.contents:
            return
        first_child = tag.contents[0]
        if _is_text_node(first_child):
            self.report.page_title = first_child.strip()
            self._title_found = True

    def _visit_anchor(self, tag: Tag) -> None:
        link = resolve_link(extract_href(tag), self.base_host)
        if link is None:
            return

        if link.is_internal:
            self.report.internal_link_count += 1
        else:
            self.report.external_link_count += 1

        if self.verifier is None:
            return
        if self.defer_verification:
            self.pending_links.append(link.url)
            return

        if self.verbose:
            print(f"    🔗 Checking: {link.url}")
        broken = self.verifier.check(link.url)
        if broken is not None:
            self._record_broken(broken)

    def _record_broken(self, broken) -> None:
        if self.verbose:
            print(f"    ❌ Broken link: {broken.url} ({broken.error_message})")
        self.report.add_broken_link(broken)

    def finish(self) -> None:
        """Check deferred links and merge the results in document order."""
        if not self.pending_links:
            return

        if self.verbose:
            print(f"    🔗 Checking {len(self.pending_links)} links in parallel")
        results = self.verifier.check_all(self.pending_links)
        self.pending_links = []

        for broken in results:
            if broken is not None:
                self._record_broken(broken)
