"""Unit tests for compiled rule sets and pattern validation."""

import pytest

from scopeguard.filters.default import DefaultFetchFilter
from scopeguard.models.fetch import FetchStatus
from scopeguard.utils.rule_sets import (
    ExcludeRuleSet,
    InvalidPatternError,
    ScopeRuleSet,
    compile_patterns
)


class TestCompilePatterns:
    """Test cases for result-typed pattern compilation."""

    def test_all_valid(self):
        """Test a batch of valid patterns."""
        result = compile_patterns(["a+", "^https://"])

        assert result.ok
        assert [source for source, _ in result.compiled] == ["a+", "^https://"]
        result.raise_for_errors()

    def test_collects_every_error(self):
        """Test all invalid patterns are reported, not just the first."""
        result = compile_patterns(["[bad", "ok", "(unclosed"])

        assert not result.ok
        assert [e.pattern for e in result.errors] == ["[bad", "(unclosed"]
        assert [source for source, _ in result.compiled] == ["ok"]

    def test_raise_for_errors_names_patterns(self):
        """Test the raised error names each offending pattern."""
        result = compile_patterns(["[bad", "(unclosed"])

        with pytest.raises(InvalidPatternError) as exc_info:
            result.raise_for_errors("exclude")

        error = exc_info.value
        assert error.rule_kind == "exclude"
        assert error.pattern == "[bad"
        assert len(error.errors) == 2
        assert "'[bad'" in str(error)
        assert "'(unclosed'" in str(error)

    def test_non_string_pattern(self):
        """Test non-string patterns are reported as errors."""
        result = compile_patterns([42])
        assert not result.ok

    def test_single_string_rejected(self):
        """Test a bare string is not compiled character by character."""
        with pytest.raises(TypeError):
            compile_patterns("abc")

    def test_invalid_pattern_error_is_value_error(self):
        """Test InvalidPatternError can be caught as ValueError."""
        with pytest.raises(ValueError):
            ExcludeRuleSet(["[bad"])


class TestRuleSets:
    """Test cases for ScopeRuleSet and ExcludeRuleSet."""

    def test_search_semantics(self):
        """Test patterns are searched for anywhere in the URI string."""
        rules = ExcludeRuleSet(["/admin/", "logout"])

        assert rules.matches("https://example.com/admin/users")
        assert rules.first_match("https://example.com/logout?x=1") == "logout"
        assert rules.first_match("https://example.com/") is None

    def test_exclude_rules_anchor_only_when_asked(self):
        """Test unanchored exclude patterns match inside the URI and ^ anchors them."""
        rules = ExcludeRuleSet(["subdomain\\.example\\.com.*"])
        assert rules.matches("http://subdomain.example.com/x")
        assert not rules.matches("http://example.com")

        anchored = ExcludeRuleSet(["^https://example\\.com/private"])
        assert anchored.matches("https://example.com/private/a")
        assert not anchored.matches("https://mirror.test/?u=https://example.com/private")

    def test_empty_rule_set_matches_nothing(self):
        """Test an empty rule set."""
        rules = ScopeRuleSet()

        assert rules.is_empty()
        assert len(rules) == 0
        assert not rules.matches("https://example.com")

    def test_scope_rule_set_is_immutable(self):
        """Test adding a pattern returns a new rule set."""
        rules = ScopeRuleSet()
        extended = rules.with_pattern("example")

        assert rules.patterns == []
        assert extended.patterns == ["example"]

    def test_scope_rule_set_ignores_duplicates(self):
        """Test re-adding a known pattern is a no-op."""
        rules = ScopeRuleSet(["a", "b", "a"]).with_pattern("b")
        assert list(rules) == ["a", "b"]

    def test_equality(self):
        """Test rule sets compare by their patterns."""
        assert ExcludeRuleSet(["a"]) == ExcludeRuleSet(["a"])
        assert ExcludeRuleSet(["a"]) != ExcludeRuleSet(["b"])


class TestFilterMutatorErrors:
    """Test cases for configuration-time pattern failures on the filter."""

    def test_invalid_scope_rule_leaves_rules_unchanged(self):
        """Test a failed add_scope_rule does not alter the filter."""
        fetch_filter = DefaultFetchFilter()
        fetch_filter.add_scope_rule("example\\.com")

        with pytest.raises(InvalidPatternError) as exc_info:
            fetch_filter.add_scope_rule("[invalid regex")

        assert exc_info.value.rule_kind == "scope"
        assert fetch_filter.get_filter_info()["scope_patterns"] == ["example\\.com"]
        assert fetch_filter.check_filter("https://example.com") == FetchStatus.VALID

    def test_invalid_exclude_rules_leave_rules_unchanged(self):
        """Test a failed set_exclude_rules keeps the previous exclusions."""
        fetch_filter = DefaultFetchFilter()
        fetch_filter.add_scope_rule("example\\.com")
        fetch_filter.set_exclude_rules(["/admin/"])

        with pytest.raises(InvalidPatternError) as exc_info:
            fetch_filter.set_exclude_rules(["/valid/", "[bad", "*bad"])

        assert [e.pattern for e in exc_info.value.errors] == ["[bad", "*bad"]
        assert fetch_filter.get_filter_info()["exclude_patterns"] == ["/admin/"]
        assert fetch_filter.check_filter("https://example.com/admin/") == FetchStatus.USER_RULES
        assert fetch_filter.check_filter("https://example.com/valid/") == FetchStatus.VALID

    def test_single_string_exclude_rules_rejected(self):
        """Test a bare string is not split into one-character exclude rules."""
        fetch_filter = DefaultFetchFilter()
        fetch_filter.add_scope_rule("example\\.com")

        with pytest.raises(TypeError):
            fetch_filter.set_exclude_rules("/admin/")

        assert fetch_filter.get_filter_info()["exclude_patterns"] == []
        assert fetch_filter.check_filter("https://example.com/a") == FetchStatus.VALID

    def test_single_string_domains_rejected(self):
        """Test a bare string is not split into one-character domains."""
        fetch_filter = DefaultFetchFilter()
        fetch_filter.set_domains_always_in_scope(["example.com"])

        with pytest.raises(TypeError):
            fetch_filter.set_domains_always_in_scope("example.com")

        assert len(fetch_filter.get_filter_info()["domains_always_in_scope"]) == 1
        assert fetch_filter.check_filter("https://e/") == FetchStatus.OUT_OF_SCOPE
        assert fetch_filter.check_filter("https://example.com/") == FetchStatus.VALID
