"""Always-in-scope domain matching.

A domain marked always-in-scope is admitted regardless of the scope regexes.
Matching is case-insensitive exact host equality by default. Subdomains are
only admitted when ``include_subdomains`` is set explicitly, and a matcher can
also hold a regular expression that must match the whole host.
"""

import re
from typing import Optional

from .rule_sets import compile_patterns


class DomainAlwaysInScopeMatcher:
    """Matches a URI host against one always-in-scope domain."""

    def __init__(
        self,
        domain: str,
        is_regex: bool = False,
        enabled: bool = True,
        include_subdomains: bool = False
    ):
        """Initialize the matcher.

        Args:
            domain: Domain name, or a host regex when ``is_regex`` is True
            is_regex: Treat ``domain`` as a regular expression
            enabled: Disabled matchers never match
            include_subdomains: Also match hosts ending in ``.<domain>``

        Raises:
            ValueError: If the domain is empty or consists only of dots
            InvalidPatternError: If ``is_regex`` is set and the regex is invalid
        """
        if not isinstance(domain, str):
            raise ValueError(f"Always-in-scope domain must be a string, got {domain!r}")

        if is_regex:
            normalized = domain
        else:
            normalized = domain.strip().lower().rstrip(".")
        if not normalized.strip():
            raise ValueError(f"Always-in-scope domain must be a non-empty name, got '{domain}'")

        self._is_regex = is_regex
        self._enabled = enabled
        self._include_subdomains = include_subdomains
        self._pattern = None
        self._domain = normalized

        if is_regex:
            result = compile_patterns([domain], re.IGNORECASE)
            result.raise_for_errors("domain")
            self._pattern = result.compiled[0][1]

    @classmethod
    def from_regex(cls, pattern: str, enabled: bool = True) -> "DomainAlwaysInScopeMatcher":
        return cls(pattern, is_regex=True, enabled=enabled)

    @property
    def domain(self) -> str:
        return self._domain

    @property
    def is_regex(self) -> bool:
        return self._is_regex

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def include_subdomains(self) -> bool:
        return self._include_subdomains

    def matches(self, host: Optional[str]) -> bool:
        """Check whether ``host`` is covered by this always-in-scope domain."""
        if not self._enabled or not host:
            return False

        host = host.lower().rstrip(".")
        if self._pattern is not None:
            return self._pattern.fullmatch(host) is not None

        if host == self._domain:
            return True
        return self._include_subdomains and host.endswith("." + self._domain)

    def to_dict(self) -> dict:
        return {
            "domain": self._domain,
            "is_regex": self._is_regex,
            "enabled": self._enabled,
            "include_subdomains": self._include_subdomains
        }

    def __eq__(self, other):
        if not isinstance(other, DomainAlwaysInScopeMatcher):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __hash__(self):
        return hash(tuple(self.to_dict().items()))

    def __repr__(self) -> str:
        kind = "regex" if self._is_regex else "domain"
        return f"DomainAlwaysInScopeMatcher({kind}={self._domain!r}, enabled={self._enabled})"
