"""Tests for ignore filter compilation."""

import pytest

from subres.errors import ConfigurationError
from subres.filters import IgnoreFilter, compile_filter
from subres.models import ResourceKind, SubResource

ENTRY = "http://a.test/"


def resource(url: str, kind: ResourceKind = ResourceKind.IMAGE) -> SubResource:
    return SubResource(kind=kind, url=url)


class TestOriginFilters:
    """Tests for same-origin and different-origin."""

    def test_same_origin(self):
        """Test that same-origin matches only the entrypoint origin."""
        should_ignore = compile_filter(ENTRY, "same-origin")

        assert should_ignore(resource("http://a.test/x.png"))
        assert not should_ignore(resource("http://b.test/x.png"))

    def test_different_origin(self):
        """Test that different-origin is the inverse of same-origin."""
        should_ignore = compile_filter(ENTRY, "different-origin")

        assert not should_ignore(resource("http://a.test/x.png"))
        assert should_ignore(resource("http://b.test/x.png"))

    def test_port_and_scheme_are_part_of_origin(self):
        """Test that a different port or scheme is a different origin."""
        should_ignore = compile_filter(ENTRY, "same-origin")

        assert should_ignore(resource("http://a.test:80/x.png"))
        assert not should_ignore(resource("http://a.test:8080/x.png"))
        assert not should_ignore(resource("https://a.test/x.png"))

    def test_blob_url_uses_creator_origin(self):
        """Test that a blob: resource created by the page counts as same-origin."""
        should_ignore = compile_filter(ENTRY, "same-origin")

        assert should_ignore(resource("blob:http://a.test/0d2e-11"))
        assert not should_ignore(resource("blob:http://b.test/0d2e-11"))


class TestFieldFilters:
    """Tests for field:regex filters."""

    def test_host(self):
        """Test host matching."""
        should_ignore = compile_filter(ENTRY, r"host:example\.com")

        assert should_ignore(resource("https://example.com/a.js"))
        assert not should_ignore(resource("https://other.com/a.js"))

    def test_empty_regex_matches_any_host(self):
        """Test that host: ignores everything with a non-empty host."""
        should_ignore = compile_filter(ENTRY, "host:")

        assert should_ignore(resource("https://example.com/a.js"))
        assert should_ignore(resource("http://b.test/"))
        assert not should_ignore(resource("data:image/png;base64,AAAA"))

    def test_type(self):
        """Test resource kind matching."""
        should_ignore = compile_filter(ENTRY, "type:image|font")

        assert should_ignore(resource("http://a.test/x.png", ResourceKind.IMAGE))
        assert should_ignore(resource("http://a.test/x.woff2", ResourceKind.FONT))
        assert not should_ignore(resource("http://a.test/x.js", ResourceKind.SCRIPT))

    @pytest.mark.parametrize("spec,url,expected", [
        (r"pathname:\.png$", "http://a.test/img/x.png", True),
        (r"pathname:\.png$", "http://a.test/img/x.png.js", False),
        ("protocol:^https:$", "https://a.test/", True),
        ("protocol:^https:$", "http://a.test/", False),
        ("origin:b\\.test", "http://b.test/x", True),
        ("port:^8080$", "http://a.test:8080/", True),
        ("port:.", "http://a.test:80/", False),
        ("search:v=2", "http://a.test/app.js?v=2", True),
        ("search:.", "http://a.test/app.js", False),
        ("hash:^top$", "http://a.test/#top", True),
        ("hash:#", "http://a.test/#top", False),
    ])
    def test_url_components(self, spec, url, expected):
        """Test matching against each URL component."""
        assert compile_filter(ENTRY, spec)(resource(url)) is expected

    def test_regex_may_contain_colons(self):
        """Test that only the first colon separates the field from the regex."""
        should_ignore = compile_filter(ENTRY, "origin:^https://cdn")

        assert should_ignore(resource("https://cdn.a.test/lib.js"))


class TestParamFilters:
    """Tests for param:name=regex filters."""

    def test_param_value(self):
        """Test matching a query parameter value."""
        should_ignore = compile_filter(ENTRY, "param:utm_source=^news")

        assert should_ignore(resource("http://a.test/p?utm_source=newsletter"))
        assert not should_ignore(resource("http://a.test/p?utm_source=ads"))

    def test_query_alias(self):
        """Test that query: behaves like param:."""
        should_ignore = compile_filter(ENTRY, "query:v=1")

        assert should_ignore(resource("http://a.test/app.js?v=1"))

    def test_absent_param_is_empty_string(self):
        """Test that a missing parameter is matched as an empty string."""
        assert not compile_filter(ENTRY, "param:id")(resource("http://a.test/p"))
        assert compile_filter(ENTRY, "param:id=^$")(resource("http://a.test/p"))

    def test_first_value_wins(self):
        """Test that a repeated parameter is matched on its first value."""
        should_ignore = compile_filter(ENTRY, "param:id=^1$")

        assert should_ignore(resource("http://a.test/p?id=1&id=2"))
        assert not should_ignore(resource("http://a.test/p?id=2&id=1"))


class TestCompileErrors:
    """Tests for rejected specifications."""

    @pytest.mark.parametrize("spec", ["hostname:x", "bogus", "", "Host:x"])
    def test_unknown_field(self, spec):
        """Test that unknown fields fail at compile time."""
        with pytest.raises(ConfigurationError, match="Invalid --ignore filter"):
            compile_filter(ENTRY, spec)

    def test_invalid_regex(self):
        """Test that a malformed regex fails at compile time."""
        with pytest.raises(ConfigurationError, match="Invalid regex"):
            compile_filter(ENTRY, "host:(")

    def test_param_without_name(self):
        """Test that param: needs a parameter name."""
        with pytest.raises(ConfigurationError, match="Missing parameter name"):
            compile_filter(ENTRY, "param:")


class TestIgnoreFilter:
    """Tests for the combined filter."""

    def test_empty(self):
        """Test that no specs ignore nothing."""
        ignore = IgnoreFilter.compile(ENTRY, None)

        assert not ignore
        assert not ignore(resource("http://a.test/x.png"))

    def test_single_string(self):
        """Test that a single spec string is accepted."""
        ignore = IgnoreFilter.compile(ENTRY, "same-origin")

        assert ignore(resource("http://a.test/x.png"))

    def test_or_combination(self):
        """Test that a resource is ignored if any predicate matches."""
        ignore = IgnoreFilter.compile(ENTRY, ["type:font", "different-origin"])

        assert ignore(resource("http://a.test/f.woff", ResourceKind.FONT))
        assert ignore(resource("http://b.test/x.png"))
        assert not ignore(resource("http://a.test/x.png"))

    def test_bad_spec_rejected_before_use(self):
        """Test that one bad spec fails the whole compilation."""
        with pytest.raises(ConfigurationError):
            IgnoreFilter.compile(ENTRY, ["same-origin", "nope:x"])
