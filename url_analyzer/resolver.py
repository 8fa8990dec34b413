"""
URL Resolver Module

Turns an anchor's raw href into an absolute URL and classifies it as
internal or external relative to the analyzed page's host.
"""

from typing import NamedTuple, Optional
from urllib.parse import urljoin, urlsplit

from bs4 import Tag


SKIPPED_PREFIXES = ("#", "javascript:", "mailto:")


class ResolvedLink(NamedTuple):
    url: str
    is_internal: bool


def extract_href(tag: Tag) -> Optional[str]:
    """Return the anchor's href attribute, or None when it has none."""
    return tag.attrs.get("href")


def _is_same_host(host: str, base_host: str) -> bool:
    return host.lower() == base_host.lower()


def resolve_link(href: Optional[str], base_host: str) -> Optional[ResolvedLink]:
    """
    Resolve an href against the page host.

    Args:
        href: Raw href attribute value
        base_host: Host (netloc) of the page being analyzed

    Returns:
        ResolvedLink, or None when the href is not a navigable resource
        or cannot be parsed
    """
    # Leading whitespace does not hide a skipped prefix, e.g. " javascript:..."
    if not href or href.strip().startswith(SKIPPED_PREFIXES):
        return None

    try:
        reference = urlsplit(href)
        # Accessing the port validates it and raises on garbage like ":abc"
        reference.port
    except ValueError:
        return None

    if reference.scheme:
        absolute_url = href
    else:
        absolute_url = urljoin(f"http://{base_host}", href)

    is_internal = not reference.netloc or _is_same_host(reference.netloc, base_host)
    return ResolvedLink(url=absolute_url, is_internal=is_internal)
