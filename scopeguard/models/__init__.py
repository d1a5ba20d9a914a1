"""Scopeguard data models package."""

from .fetch import (
    FetchStatus,
    DecisionReason,
    FilterDecision,
    DomainRuleConfig,
    ContextConfig,
    FetchFilterConfig
)

__all__ = [
    'FetchStatus',
    'DecisionReason',
    'FilterDecision',
    'DomainRuleConfig',
    'ContextConfig',
    'FetchFilterConfig',
]
