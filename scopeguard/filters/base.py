"""Fetch filter interface and filter chaining.

A crawler may hold several fetch filters. Each one classifies a URI into a
FetchStatus; a chain applies them in order and stops at the first filter
that rejects the URI.
"""

import logging
from abc import ABC, abstractmethod
from typing import Iterable, List, Tuple

from ..models.fetch import DecisionReason, FetchStatus, FilterDecision
from ..utils.uri import URILike, as_uri_view


logger = logging.getLogger(__name__)


class FetchFilter(ABC):
    """Base class for all fetch filters."""

    @abstractmethod
    def check_filter(self, uri: URILike) -> FetchStatus:
        """Classify ``uri``. Must not raise for any URI."""
        pass

    def explain(self, uri: URILike) -> FilterDecision:
        """Return the verdict for ``uri`` with as much detail as the filter has."""
        view = as_uri_view(uri)
        status = self.check_filter(uri)
        return FilterDecision(
            uri=view.text,
            status=status,
            reason=DecisionReason.FILTER_CHAIN,
            host=view.host,
            matched_rule=type(self).__name__
        )

    def is_valid(self, uri: URILike) -> bool:
        return self.check_filter(uri) == FetchStatus.VALID

    def partition(
        self,
        uris: Iterable[URILike]
    ) -> Tuple[List[URILike], List[Tuple[URILike, FetchStatus]]]:
        """Split URIs into admitted ones and rejected ``(uri, status)`` pairs.

        Args:
            uris: URIs to check

        Returns:
            Tuple of (valid_uris, rejected_uris_with_status)
        """
        admitted = []
        rejected = []

        for uri in uris:
            status = self.check_filter(uri)
            if status == FetchStatus.VALID:
                admitted.append(uri)
            else:
                rejected.append((uri, status))

        return admitted, rejected


class FetchFilterChain(FetchFilter):
    """Applies fetch filters in order; the first non-VALID status wins."""

    def __init__(self, filters: Iterable[FetchFilter] = ()):
        self._filters: Tuple[FetchFilter, ...] = tuple(filters)

    @property
    def filters(self) -> Tuple[FetchFilter, ...]:
        return self._filters

    def check_filter(self, uri: URILike) -> FetchStatus:
        return self.explain(uri).status

    def explain(self, uri: URILike) -> FilterDecision:
        decision = None
        for fetch_filter in self._filters:
            decision = fetch_filter.explain(uri)
            if decision.status != FetchStatus.VALID:
                logger.debug(
                    "URI %s rejected by %s: %s",
                    decision.uri, type(fetch_filter).__name__, decision.status.value
                )
                return decision

        if decision is not None:
            return decision

        view = as_uri_view(uri)
        return FilterDecision(
            uri=view.text,
            status=FetchStatus.VALID,
            reason=DecisionReason.FILTER_CHAIN,
            host=view.host
        )
