"""Scopeguard: URI admission control for security-testing crawlers.

For every URI discovered during a crawl, the fetch filter decides whether it
may be fetched: it rejects non-HTTP protocols, keeps the crawl inside the
authorized scope or scan context, and honours analyst exclusion rules.
"""

__version__ = "0.1.0"

from .errors import ScopeguardError
from .models.fetch import (
    FetchStatus,
    DecisionReason,
    FilterDecision,
    FetchFilterConfig
)
from .utils.rule_sets import (
    InvalidPatternError,
    PatternCompileResult,
    ScopeRuleSet,
    ExcludeRuleSet,
    compile_patterns
)
from .utils.domain_matcher import DomainAlwaysInScopeMatcher
from .context import ScanContext, ScanContextAdapter, RegexScanContext
from .filters import (
    FetchFilter,
    FetchFilterChain,
    DefaultFetchFilter,
    FilterSealedError,
    create_fetch_filter_from_config
)

__all__ = [
    # Errors
    'ScopeguardError',
    'InvalidPatternError',
    'FilterSealedError',

    # Models
    'FetchStatus',
    'DecisionReason',
    'FilterDecision',
    'FetchFilterConfig',

    # Rules and scope
    'PatternCompileResult',
    'ScopeRuleSet',
    'ExcludeRuleSet',
    'compile_patterns',
    'DomainAlwaysInScopeMatcher',
    'ScanContext',
    'ScanContextAdapter',
    'RegexScanContext',

    # Filters
    'FetchFilter',
    'FetchFilterChain',
    'DefaultFetchFilter',
    'create_fetch_filter_from_config',
]
