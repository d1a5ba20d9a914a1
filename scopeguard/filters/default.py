"""Default fetch filter deciding whether a discovered URI may be fetched.

This module implements the crawler's scope contract. Every URI goes through
the same ordered checks, and a later check can only downgrade the verdict of
an earlier one:

1. Protocol: only http and https URIs are fetchable
2. Scope: a scan context, or else the scope regexes and always-in-scope
   domains, must admit the URI
3. User rules: an exclude regex match removes an admitted URI

Configuration is published as an immutable ``FilterRules`` snapshot, so a
check always sees one consistent configuration. Configure the filter, call
``seal()``, then share it between crawler workers.
"""

import logging
import threading
from typing import Any, Dict, Iterable, Optional, Tuple, Union

from ..context import RegexScanContext, ScanContext, ScanContextAdapter
from ..errors import ScopeguardError
from ..models.fetch import DecisionReason, FetchFilterConfig, FetchStatus, FilterDecision
from ..utils.domain_matcher import DomainAlwaysInScopeMatcher
from ..utils.rule_sets import ExcludeRuleSet, ScopeRuleSet, compile_patterns
from ..utils.uri import URILike, URIView, as_uri_view
from .base import FetchFilter
from .scope import ContextBased, FilterRules, RuleBased, select_scope_strategy


logger = logging.getLogger(__name__)


class FilterSealedError(ScopeguardError):
    """Raised when a sealed fetch filter is reconfigured."""
    pass


_Verdict = Tuple[FetchStatus, DecisionReason, Optional[str]]


class DefaultFetchFilter(FetchFilter):
    """Fetch filter combining protocol, scope/context and user-rule checks.

    Mutators are serialized by a lock and each publishes a new rules
    snapshot; ``check_filter`` reads a single snapshot without locking and is
    safe to call from any number of threads. Once ``seal()`` has been called
    every mutator raises FilterSealedError.
    """

    def __init__(self):
        self._lock = threading.RLock()
        self._sealed = False

        self._scope_rules = ScopeRuleSet()
        self._domains: Tuple[DomainAlwaysInScopeMatcher, ...] = ()
        self._context: Optional[ScanContextAdapter] = None
        self._exclude_rules = ExcludeRuleSet()

        self._rules = FilterRules()

    # Configuration

    def add_scope_rule(self, pattern: str) -> None:
        """Add a regex admitting matching URIs into scope.

        Args:
            pattern: Regular expression searched for in the URI string

        Raises:
            InvalidPatternError: If the pattern does not compile
            FilterSealedError: If the filter is sealed
        """
        with self._lock:
            self._ensure_mutable()
            self._scope_rules = self._scope_rules.with_pattern(pattern)
            self._publish()

    def set_exclude_rules(self, patterns: Iterable[str]) -> None:
        """Replace all exclude regexes. An empty iterable clears them.

        Every invalid pattern is reported in a single InvalidPatternError and
        the current exclude rules are left untouched.

        Raises:
            InvalidPatternError: If any pattern does not compile
            FilterSealedError: If the filter is sealed
            TypeError: If a single string is passed instead of a list
        """
        if isinstance(patterns, str):
            raise TypeError(f"Exclude rules must be a list of patterns, got the string '{patterns}'")
        with self._lock:
            self._ensure_mutable()
            self._exclude_rules = ExcludeRuleSet(list(patterns))
            self._publish()

    add_exclude_rules = set_exclude_rules

    def set_domains_always_in_scope(
        self,
        domains: Iterable[Union[DomainAlwaysInScopeMatcher, str]]
    ) -> None:
        """Replace the always-in-scope domains. An empty iterable clears them.

        Plain strings are treated as exact domains.

        Raises:
            FilterSealedError: If the filter is sealed
            TypeError: If a single string is passed instead of a list
            ValueError: If a domain is empty
        """
        if isinstance(domains, str):
            raise TypeError(f"Always-in-scope domains must be a list, got the string '{domains}'")

        matchers = tuple(
            domain if isinstance(domain, DomainAlwaysInScopeMatcher)
            else DomainAlwaysInScopeMatcher(domain)
            for domain in domains
        )
        with self._lock:
            self._ensure_mutable()
            self._domains = matchers
            self._publish()

    def set_scan_context(
        self,
        context: Optional[Union[ScanContextAdapter, ScanContext]]
    ) -> None:
        """Assign or clear (with None) the scan context.

        While a context is set it alone decides scope admission; scope
        regexes and always-in-scope domains are ignored until it is cleared.

        Raises:
            FilterSealedError: If the filter is sealed
        """
        if context is not None and not isinstance(context, ScanContextAdapter):
            context = ScanContextAdapter(context)
        with self._lock:
            self._ensure_mutable()
            self._context = context
            self._publish()

    def seal(self) -> "DefaultFetchFilter":
        """Freeze the configuration before the filter is shared with workers."""
        with self._lock:
            if not self._sealed:
                self._sealed = True
                logger.info(
                    "Fetch filter sealed: %d scope rules, %d always-in-scope domains, "
                    "%d exclude rules, context=%s",
                    len(self._scope_rules),
                    len(self._domains),
                    len(self._exclude_rules),
                    "yes" if self._context is not None else "no"
                )
        return self

    @property
    def is_sealed(self) -> bool:
        return self._sealed

    @property
    def rules(self) -> FilterRules:
        """The configuration snapshot the next check will use."""
        return self._rules

    def _ensure_mutable(self) -> None:
        if self._sealed:
            raise FilterSealedError(
                "Fetch filter is sealed; its configuration cannot change once checks may run"
            )

    def _publish(self) -> None:
        self._rules = FilterRules(
            scope=select_scope_strategy(self._scope_rules, self._domains, self._context),
            exclude_rules=self._exclude_rules
        )

    # Checking

    def check_filter(self, uri: URILike) -> FetchStatus:
        """Classify a URI discovered during crawling.

        Args:
            uri: URI string or split URI

        Returns:
            The FetchStatus for the URI. Never raises for a URI; only a
            failing scan context can raise.
        """
        status, _, _ = self._evaluate(as_uri_view(uri))
        logger.debug("Fetch filter verdict for %s: %s", uri, status.value)
        return status

    def explain(self, uri: URILike) -> FilterDecision:
        """Classify a URI and report which rule decided the verdict.

        This is useful for debugging scope configuration.
        """
        view = as_uri_view(uri)
        status, reason, matched_rule = self._evaluate(view)
        return FilterDecision(
            uri=view.text,
            status=status,
            reason=reason,
            host=view.host,
            matched_rule=matched_rule
        )

    def _evaluate(self, view: URIView) -> _Verdict:
        rules = self._rules

        if not view.has_allowed_scheme:
            return FetchStatus.ILLEGAL_PROTOCOL, DecisionReason.ILLEGAL_PROTOCOL, None

        scope = rules.scope
        if isinstance(scope, ContextBased):
            # Contexts see the URI string, including URIs with no readable host
            if not scope.context.is_in_context(view.text):
                return FetchStatus.OUT_OF_CONTEXT, DecisionReason.OUT_OF_CONTEXT, scope.context.name
            reason, admitted_by = DecisionReason.IN_CONTEXT, scope.context.name
        elif isinstance(scope, RuleBased):
            if view.error is not None:
                logger.warning("Unable to read host of URI %s: %s", view.text, view.error)
                return FetchStatus.OUT_OF_SCOPE, DecisionReason.UNPARSEABLE, None
            reason, admitted_by = DecisionReason.IN_SCOPE, scope.scope_rules.first_match(view.text)
            if admitted_by is None:
                domain = scope.matching_domain(view.host)
                if domain is None:
                    return FetchStatus.OUT_OF_SCOPE, DecisionReason.NO_SCOPE_MATCH, None
                reason, admitted_by = DecisionReason.ALWAYS_IN_SCOPE, domain.domain
        else:
            raise TypeError(f"Unsupported scope strategy: {scope!r}")

        excluded_by = rules.exclude_rules.first_match(view.text)
        if excluded_by is not None:
            return FetchStatus.USER_RULES, DecisionReason.EXCLUDED, excluded_by

        return FetchStatus.VALID, reason, admitted_by

    def get_filter_info(self) -> Dict[str, Any]:
        """Get information about the configured filter.

        Returns:
            Dictionary with filter configuration details
        """
        with self._lock:
            return {
                "scope_patterns": self._scope_rules.patterns,
                "exclude_patterns": self._exclude_rules.patterns,
                "domains_always_in_scope": [d.to_dict() for d in self._domains],
                "has_context": self._context is not None,
                "context_name": self._context.name if self._context else None,
                "scope_strategy": type(self._rules.scope).__name__,
                "sealed": self._sealed
            }


def create_fetch_filter_from_config(
    config: FetchFilterConfig,
    context: Optional[Union[ScanContextAdapter, ScanContext]] = None,
    seal: bool = True
) -> DefaultFetchFilter:
    """Create a DefaultFetchFilter from a fetch filter configuration.

    All scope and exclude patterns are compiled up front and every invalid
    one is reported together.

    Args:
        config: FetchFilterConfig with scope settings
        context: Scan context to use; defaults to the configured regex context
        seal: Seal the filter before returning it

    Returns:
        Configured DefaultFetchFilter instance

    Raises:
        InvalidPatternError: If any pattern in the configuration is invalid
    """
    scope_result = compile_patterns(config.scope_patterns)
    scope_result.raise_for_errors("scope")

    fetch_filter = DefaultFetchFilter()
    for pattern in config.scope_patterns:
        fetch_filter.add_scope_rule(pattern)

    fetch_filter.set_exclude_rules(config.exclude_patterns)
    fetch_filter.set_domains_always_in_scope(
        DomainAlwaysInScopeMatcher(
            rule.domain,
            is_regex=rule.is_regex,
            enabled=rule.enabled,
            include_subdomains=rule.include_subdomains
        )
        for rule in config.domains_always_in_scope
    )

    if context is None and config.context is not None:
        context = RegexScanContext(
            name=config.context.name,
            include_patterns=config.context.include_patterns,
            exclude_patterns=config.context.exclude_patterns
        )
    fetch_filter.set_scan_context(context)

    if seal:
        fetch_filter.seal()
    return fetch_filter
