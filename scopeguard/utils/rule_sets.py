"""Compiled regex rule sets for scope inclusion and user exclusion.

Patterns are compiled when they are added, so an invalid regular expression
fails crawl setup instead of surfacing later during a URI check. Rule sets
are immutable values: adding patterns returns a new rule set, which lets the
fetch filter publish configuration changes atomically.
"""

import re
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Tuple

from ..errors import ScopeguardError


@dataclass(frozen=True)
class PatternError:
    """A single pattern that failed to compile."""

    pattern: str
    message: str


class InvalidPatternError(ScopeguardError, ValueError):
    """Raised when one or more supplied patterns are not valid regular expressions.

    Every offending pattern is reported, not only the first one, so that a
    caller can fix its whole configuration in one pass.
    """

    def __init__(self, errors: List[PatternError], rule_kind: str = "regex"):
        self.errors = list(errors)
        self.rule_kind = rule_kind
        self.pattern = self.errors[0].pattern if self.errors else None
        details = "; ".join(f"'{e.pattern}': {e.message}" for e in self.errors)
        super().__init__(f"Invalid {rule_kind} pattern(s): {details}")


@dataclass(frozen=True)
class PatternCompileResult:
    """Outcome of compiling a batch of patterns.

    ``compiled`` keeps ``(source, compiled)`` pairs in input order and
    ``errors`` lists every pattern that could not be compiled.
    """

    compiled: Tuple[Tuple[str, re.Pattern], ...] = ()
    errors: Tuple[PatternError, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.errors

    def raise_for_errors(self, rule_kind: str = "regex") -> None:
        """Raise InvalidPatternError if any pattern failed to compile."""
        if self.errors:
            raise InvalidPatternError(list(self.errors), rule_kind)


def compile_patterns(patterns: Iterable[str], flags: int = 0) -> PatternCompileResult:
    """Compile patterns, collecting invalid ones instead of raising.

    Args:
        patterns: Regular expressions to compile
        flags: ``re`` flags applied to every pattern

    Returns:
        PatternCompileResult with the compiled patterns and any failures

    Raises:
        TypeError: If ``patterns`` is a single string instead of an iterable of them
    """
    if isinstance(patterns, str):
        raise TypeError(f"Expected an iterable of patterns, got the string '{patterns}'")

    compiled = []
    errors = []
    for pattern in patterns:
        if not isinstance(pattern, str):
            errors.append(PatternError(repr(pattern), "pattern must be a string"))
            continue
        try:
            compiled.append((pattern, re.compile(pattern, flags)))
        except re.error as e:
            errors.append(PatternError(pattern, str(e)))
    return PatternCompileResult(compiled=tuple(compiled), errors=tuple(errors))


class _RuleSet:
    """Ordered, immutable collection of patterns matched with ``re.search``.

    A URI string belongs to the set when at least one pattern matches it.
    """

    rule_kind = "regex"

    def __init__(self, patterns: Iterable[str] = ()):
        result = compile_patterns(patterns)
        result.raise_for_errors(self.rule_kind)
        self._rules: Tuple[Tuple[str, re.Pattern], ...] = self._dedupe(result.compiled)

    @classmethod
    def _from_rules(cls, rules):
        rule_set = cls.__new__(cls)
        rule_set._rules = tuple(rules)
        return rule_set

    @staticmethod
    def _dedupe(rules):
        return tuple(rules)

    @property
    def patterns(self) -> List[str]:
        return [source for source, _ in self._rules]

    def first_match(self, text: str) -> Optional[str]:
        """Return the source of the first pattern found in ``text``, or None."""
        for source, pattern in self._rules:
            if pattern.search(text):
                return source
        return None

    def matches(self, text: str) -> bool:
        return self.first_match(text) is not None

    def is_empty(self) -> bool:
        return not self._rules

    def __len__(self) -> int:
        return len(self._rules)

    def __iter__(self) -> Iterator[str]:
        return iter(self.patterns)

    def __eq__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return self.patterns == other.patterns

    def __hash__(self):
        return hash((type(self).__name__, tuple(self.patterns)))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.patterns!r})"


class ScopeRuleSet(_RuleSet):
    """Scope-inclusion patterns. Re-adding a known pattern is a no-op."""

    rule_kind = "scope"

    @staticmethod
    def _dedupe(rules):
        seen = set()
        unique = []
        for source, pattern in rules:
            if source not in seen:
                seen.add(source)
                unique.append((source, pattern))
        return tuple(unique)

    def with_pattern(self, pattern: str) -> "ScopeRuleSet":
        """Return a new rule set with ``pattern`` appended.

        Raises:
            InvalidPatternError: If the pattern does not compile
        """
        result = compile_patterns([pattern])
        result.raise_for_errors(self.rule_kind)
        if pattern in self.patterns:
            return self
        return self._from_rules(self._rules + result.compiled)


class ExcludeRuleSet(_RuleSet):
    """Analyst-specified exclusion patterns ("user rules")."""

    rule_kind = "exclude"
