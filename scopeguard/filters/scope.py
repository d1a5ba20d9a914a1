"""Immutable scope strategies and the rule snapshot read by every check.

How a URI is admitted into scope is decided once, when configuration
changes: either a scan context answers (``ContextBased``) or the scope
regexes and always-in-scope domains do (``RuleBased``). The two strategies
are never combined in one check.
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple, Union

from ..context import ScanContextAdapter
from ..utils.domain_matcher import DomainAlwaysInScopeMatcher
from ..utils.rule_sets import ExcludeRuleSet, ScopeRuleSet


@dataclass(frozen=True)
class ContextBased:
    """Scope is whatever the scan context says it is."""

    context: ScanContextAdapter


@dataclass(frozen=True)
class RuleBased:
    """Scope is the union of the scope regexes and always-in-scope domains."""

    scope_rules: ScopeRuleSet = field(default_factory=ScopeRuleSet)
    domains: Tuple[DomainAlwaysInScopeMatcher, ...] = ()

    def matching_domain(self, host: Optional[str]) -> Optional[DomainAlwaysInScopeMatcher]:
        for matcher in self.domains:
            if matcher.matches(host):
                return matcher
        return None


ScopeStrategy = Union[ContextBased, RuleBased]


@dataclass(frozen=True)
class FilterRules:
    """Complete, immutable configuration snapshot of a fetch filter."""

    scope: ScopeStrategy = field(default_factory=RuleBased)
    exclude_rules: ExcludeRuleSet = field(default_factory=ExcludeRuleSet)


def select_scope_strategy(
    scope_rules: ScopeRuleSet,
    domains: Tuple[DomainAlwaysInScopeMatcher, ...],
    context: Optional[ScanContextAdapter]
) -> ScopeStrategy:
    """Pick the scope strategy: a configured context supersedes the rules."""
    if context is not None:
        return ContextBased(context)
    return RuleBased(scope_rules=scope_rules, domains=tuple(domains))
