"""Unit tests for fetch filter chaining."""

from scopeguard.filters.base import FetchFilter, FetchFilterChain
from scopeguard.filters.default import DefaultFetchFilter
from scopeguard.models.fetch import DecisionReason, FetchStatus


class LoginPageFilter(FetchFilter):
    """Rejects login pages; used to exercise the base class."""

    def __init__(self):
        self.calls = 0

    def check_filter(self, uri):
        self.calls += 1
        if "/login" in str(uri):
            return FetchStatus.USER_RULES
        return FetchStatus.VALID


class TestFetchFilterChain:
    """Test cases for FetchFilterChain."""

    def _scope_filter(self):
        fetch_filter = DefaultFetchFilter()
        fetch_filter.add_scope_rule("example\\.com")
        return fetch_filter.seal()

    def test_all_filters_pass(self):
        """Test a URI valid for every filter is valid for the chain."""
        chain = FetchFilterChain([self._scope_filter(), LoginPageFilter()])
        assert chain.check_filter("https://example.com/home") == FetchStatus.VALID

    def test_first_rejection_wins(self):
        """Test the chain stops at the first rejecting filter."""
        login_filter = LoginPageFilter()
        chain = FetchFilterChain([self._scope_filter(), login_filter])

        assert chain.check_filter("https://other.com/login") == FetchStatus.OUT_OF_SCOPE
        assert login_filter.calls == 0

        assert chain.check_filter("https://example.com/login") == FetchStatus.USER_RULES
        assert login_filter.calls == 1

    def test_explain_reports_rejecting_filter(self):
        """Test explain returns the rejecting filter's decision."""
        chain = FetchFilterChain([LoginPageFilter(), self._scope_filter()])

        decision = chain.explain("https://example.com/login")
        assert decision.status == FetchStatus.USER_RULES
        assert decision.reason == DecisionReason.FILTER_CHAIN
        assert decision.matched_rule == "LoginPageFilter"

        decision = chain.explain("https://example.com/home")
        assert decision.reason == DecisionReason.IN_SCOPE

    def test_empty_chain_admits(self):
        """Test an empty chain rejects nothing."""
        chain = FetchFilterChain()
        assert chain.check_filter("https://example.com") == FetchStatus.VALID
        assert chain.filters == ()

    def test_is_valid_and_partition(self):
        """Test the helpers inherited from FetchFilter."""
        login_filter = LoginPageFilter()

        assert login_filter.is_valid("https://example.com/")
        admitted, rejected = login_filter.partition(["https://a.test/", "https://a.test/login"])
        assert admitted == ["https://a.test/"]
        assert rejected == [("https://a.test/login", FetchStatus.USER_RULES)]
