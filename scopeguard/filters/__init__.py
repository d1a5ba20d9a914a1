"""Fetch filters deciding which discovered URIs the crawler may fetch."""

from .base import FetchFilter, FetchFilterChain
from .default import DefaultFetchFilter, FilterSealedError, create_fetch_filter_from_config
from .scope import ContextBased, FilterRules, RuleBased, ScopeStrategy, select_scope_strategy

__all__ = [
    'FetchFilter',
    'FetchFilterChain',
    'DefaultFetchFilter',
    'FilterSealedError',
    'create_fetch_filter_from_config',
    'ContextBased',
    'FilterRules',
    'RuleBased',
    'ScopeStrategy',
    'select_scope_strategy'
]
