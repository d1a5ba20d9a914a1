"""Scope utilities: rule sets, domain matching and URI access."""

from .rule_sets import (
    ExcludeRuleSet,
    InvalidPatternError,
    PatternCompileResult,
    PatternError,
    ScopeRuleSet,
    compile_patterns
)
from .domain_matcher import DomainAlwaysInScopeMatcher
from .uri import ALLOWED_SCHEMES, URILike, URIView, as_uri_view

__all__ = [
    'ExcludeRuleSet',
    'InvalidPatternError',
    'PatternCompileResult',
    'PatternError',
    'ScopeRuleSet',
    'compile_patterns',
    'DomainAlwaysInScopeMatcher',
    'ALLOWED_SCHEMES',
    'URILike',
    'URIView',
    'as_uri_view'
]
