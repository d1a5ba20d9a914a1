"""Scan context support for the fetch filter.

A scan context is an externally owned scope oracle. The fetch filter only
consumes one capability from it, ``is_in_context(uri) -> bool``, through
``ScanContextAdapter``. ``RegexScanContext`` is a concrete context defined by
include/exclude regexes, for crawls configured from a file.
"""

from typing import Callable, Iterable, Optional, Protocol, Union

from .utils.rule_sets import compile_patterns


class ScanContext(Protocol):
    """Protocol for scope oracles consumed by the fetch filter."""

    def is_in_context(self, uri: str) -> bool:
        ...


class ScanContextAdapter:
    """Read-only wrapper around a scan context.

    The adapter never caches answers: every call re-queries the wrapped
    oracle. Latency and blocking behaviour of the oracle are its own, and any
    exception it raises propagates to the caller unchanged.
    """

    def __init__(self, context: Union[ScanContext, Callable[[str], bool]]):
        """Wrap a context object or a plain ``(uri) -> bool`` callable.

        Raises:
            TypeError: If ``context`` exposes neither capability
        """
        if hasattr(context, "is_in_context"):
            self._check = context.is_in_context
        elif callable(context):
            self._check = context
        else:
            raise TypeError(
                f"Scan context must provide is_in_context(uri) or be callable, got {type(context).__name__}"
            )
        self._context = context

    @property
    def context(self):
        return self._context

    @property
    def name(self) -> Optional[str]:
        name = getattr(self._context, "name", None)
        return name if isinstance(name, str) else None

    def is_in_context(self, uri: str) -> bool:
        return bool(self._check(uri))

    def __repr__(self) -> str:
        return f"ScanContextAdapter({self._context!r})"


class RegexScanContext:
    """Scan context defined by include and exclude regexes.

    A URL is in context when, with its query string removed, it fully
    matches at least one include pattern and no exclude pattern.
    """

    def __init__(
        self,
        name: str = "default",
        include_patterns: Optional[Iterable[str]] = None,
        exclude_patterns: Optional[Iterable[str]] = None
    ):
        """Initialize the context.

        Raises:
            InvalidPatternError: If any include or exclude pattern is invalid
        """
        self.name = name

        include = compile_patterns(include_patterns or [])
        include.raise_for_errors("context include")
        exclude = compile_patterns(exclude_patterns or [])
        exclude.raise_for_errors("context exclude")

        self._include = include.compiled
        self._exclude = exclude.compiled

    @property
    def include_patterns(self):
        return [source for source, _ in self._include]

    @property
    def exclude_patterns(self):
        return [source for source, _ in self._exclude]

    def is_included(self, uri: str) -> bool:
        uri = _strip_query(uri)
        return any(pattern.fullmatch(uri) for _, pattern in self._include)

    def is_excluded(self, uri: str) -> bool:
        uri = _strip_query(uri)
        return any(pattern.fullmatch(uri) for _, pattern in self._exclude)

    def is_in_context(self, uri: str) -> bool:
        if not uri:
            return False
        return self.is_included(uri) and not self.is_excluded(uri)

    def __repr__(self) -> str:
        return f"RegexScanContext(name={self.name!r}, include={len(self._include)}, exclude={len(self._exclude)})"


def _strip_query(uri: str) -> str:
    index = uri.find("?")
    return uri[:index] if index > 0 else uri
