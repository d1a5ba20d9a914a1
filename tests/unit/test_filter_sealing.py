"""Unit tests for sealing and concurrent use of the fetch filter."""

import pytest
from concurrent.futures import ThreadPoolExecutor

from scopeguard.filters.default import DefaultFetchFilter, FilterSealedError
from scopeguard.filters.scope import ContextBased, RuleBased
from scopeguard.models.fetch import FetchStatus


class TestSealing:
    """Test cases for the sealed configuration state."""

    def test_new_filter_is_not_sealed(self, fetch_filter):
        """Test filters start configurable."""
        assert not fetch_filter.is_sealed

    def test_seal_blocks_all_mutators(self, fetch_filter, context_in_scope):
        """Test every mutator raises once sealed."""
        fetch_filter.add_scope_rule("example\\.com")
        assert fetch_filter.seal() is fetch_filter
        assert fetch_filter.is_sealed

        with pytest.raises(FilterSealedError):
            fetch_filter.add_scope_rule("other")
        with pytest.raises(FilterSealedError):
            fetch_filter.set_exclude_rules(["/admin/"])
        with pytest.raises(FilterSealedError):
            fetch_filter.add_exclude_rules([])
        with pytest.raises(FilterSealedError):
            fetch_filter.set_domains_always_in_scope(["example.org"])
        with pytest.raises(FilterSealedError):
            fetch_filter.set_scan_context(context_in_scope(True))

        assert fetch_filter.check_filter("https://example.com") == FetchStatus.VALID

    def test_seal_is_idempotent(self, fetch_filter):
        """Test sealing twice is harmless."""
        fetch_filter.seal()
        fetch_filter.seal()
        assert fetch_filter.get_filter_info()["sealed"] is True


class TestRulesSnapshot:
    """Test cases for the published configuration snapshot."""

    def test_strategy_follows_context(self, fetch_filter, context_in_scope):
        """Test the scope strategy switches with the context."""
        assert isinstance(fetch_filter.rules.scope, RuleBased)

        fetch_filter.set_scan_context(context_in_scope(True))
        assert isinstance(fetch_filter.rules.scope, ContextBased)

        fetch_filter.set_scan_context(None)
        assert isinstance(fetch_filter.rules.scope, RuleBased)

    def test_snapshot_is_replaced_not_mutated(self, fetch_filter):
        """Test earlier snapshots are unaffected by later configuration."""
        before = fetch_filter.rules
        fetch_filter.add_scope_rule("example\\.com")
        fetch_filter.set_exclude_rules(["/admin/"])

        assert before.scope.scope_rules.patterns == []
        assert before.exclude_rules.patterns == []
        assert fetch_filter.rules.scope.scope_rules.patterns == ["example\\.com"]


class TestConcurrentChecks:
    """Test cases for concurrent checking of a sealed filter."""

    def test_concurrent_checks_are_consistent(self):
        """Test many threads get the same verdicts as a serial run."""
        fetch_filter = DefaultFetchFilter()
        fetch_filter.add_scope_rule("example\\.com")
        fetch_filter.set_domains_always_in_scope(["static.example.org"])
        fetch_filter.set_exclude_rules(["/admin/"])
        fetch_filter.seal()

        uris = [
            "https://example.com/page",
            "https://example.com/admin/panel",
            "https://static.example.org/app.js",
            "https://other.com/",
            "ftp://example.com/"
        ] * 200

        expected = [fetch_filter.check_filter(uri) for uri in uris]

        with ThreadPoolExecutor(max_workers=8) as executor:
            results = list(executor.map(fetch_filter.check_filter, uris))

        assert results == expected
        assert results[:5] == [
            FetchStatus.VALID,
            FetchStatus.USER_RULES,
            FetchStatus.VALID,
            FetchStatus.OUT_OF_SCOPE,
            FetchStatus.ILLEGAL_PROTOCOL
        ]
