"""
Tests for the URL Resolver module.
"""

from bs4 import BeautifulSoup

from url_analyzer.resolver import ResolvedLink, extract_href, resolve_link


class TestResolveLink:
    """Test cases for resolve_link."""

    def setup_method(self):
        """Set up test fixtures."""
        self.base_host = "example.com"

    def test_relative_path_is_internal(self):
        """Test that a root-relative path resolves against the base host."""
        link = resolve_link("/about", self.base_host)

        assert link == ResolvedLink("http://example.com/about", True)

    def test_path_relative_reference(self):
        """Test that a bare relative path is merged onto the base host."""
        link = resolve_link("contact.html", self.base_host)

        assert link.url == "http://example.com/contact.html"
        assert link.is_internal is True

    def test_absolute_external_url(self):
        """Test that an absolute URL on another host is external and kept as-is."""
        link = resolve_link("https://other.com/x", self.base_host)

        assert link == ResolvedLink("https://other.com/x", False)

    def test_absolute_same_host_is_internal(self):
        """Test that an absolute URL on the page host is internal."""
        link = resolve_link("https://example.com/docs?page=2", self.base_host)

        assert link.url == "https://example.com/docs?page=2"
        assert link.is_internal is True

    def test_host_comparison_ignores_case(self):
        """Test that host matching is case-insensitive."""
        link = resolve_link("https://EXAMPLE.com/x", self.base_host)

        assert link.is_internal is True

    def test_network_path_reference_is_external(self):
        """Test that a scheme-relative URL uses its own host."""
        link = resolve_link("//cdn.other.com/lib.js", self.base_host)

        assert link.url == "http://cdn.other.com/lib.js"
        assert link.is_internal is False

    def test_base_host_with_port(self):
        """Test resolution against a host that carries a port."""
        link = resolve_link("/status", "localhost:8080")

        assert link == ResolvedLink("http://localhost:8080/status", True)

    def test_non_navigable_hrefs_are_skipped(self):
        """Test that fragments, scripts and mail links produce no link."""
        assert resolve_link("#top", self.base_host) is None
        assert resolve_link("javascript:void(0)", self.base_host) is None
        assert resolve_link("mailto:a@b.com", self.base_host) is None

    def test_whitespace_before_skipped_prefix(self):
        """Test that leading whitespace does not turn a skipped href into a link."""
        assert resolve_link(" javascript:void(0)", self.base_host) is None
        assert resolve_link("\tmailto:a@b.com", self.base_host) is None
        assert resolve_link("\n #top", self.base_host) is None

    def test_empty_or_missing_href_is_skipped(self):
        """Test that empty hrefs are ignored."""
        assert resolve_link("", self.base_host) is None
        assert resolve_link(None, self.base_host) is None

    def test_malformed_href_is_skipped(self):
        """Test that unparsable hrefs are silently ignored."""
        assert resolve_link("http://[::1/broken", self.base_host) is None
        assert resolve_link("http://example.com:port/", self.base_host) is None


class TestExtractHref:
    """Test cases for extract_href."""

    def test_first_href_wins(self):
        """Test that only the first href of an anchor is used."""
        soup = BeautifulSoup(
            '<a href="/first" href="/second">x</a>',
            "html.parser",
            on_duplicate_attribute="ignore",
        )

        assert extract_href(soup.a) == "/first"

    def test_anchor_without_href(self):
        """Test that an anchor without href yields None."""
        soup = BeautifulSoup('<a name="section">x</a>', "html.parser")

        assert extract_href(soup.a) is None
