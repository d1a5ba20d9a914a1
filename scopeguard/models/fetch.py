"""Pydantic models for fetch-filter verdicts and configuration.

This module defines the closed set of fetch statuses returned to the
crawler, the explanatory decision record used for debugging scope setups,
and the validated configuration from which a fetch filter is built.
"""

import re
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator


class FetchStatus(str, Enum):
    """Terminal classification of a URI by the fetch filter."""
    VALID = "valid"                         # Fetch it
    OUT_OF_SCOPE = "out_of_scope"           # No scope regex or always-in-scope domain admitted it
    OUT_OF_CONTEXT = "out_of_context"       # The scan context rejected it
    ILLEGAL_PROTOCOL = "illegal_protocol"   # Scheme is not http or https
    USER_RULES = "user_rules"               # Admitted, then removed by an exclude rule


class DecisionReason(str, Enum):
    """Why the fetch filter reached its verdict."""
    ILLEGAL_PROTOCOL = "illegal_protocol"
    UNPARSEABLE = "unparseable"
    OUT_OF_CONTEXT = "out_of_context"
    NO_SCOPE_MATCH = "no_scope_match"
    EXCLUDED = "excluded"
    IN_CONTEXT = "in_context"
    IN_SCOPE = "in_scope"
    ALWAYS_IN_SCOPE = "always_in_scope"
    FILTER_CHAIN = "filter_chain"


class FilterDecision(BaseModel):
    """Detailed outcome of checking one URI."""

    uri: str = Field(description="URI string form that was checked")
    status: FetchStatus = Field(description="Final fetch status")
    reason: DecisionReason = Field(description="Rule that decided the status")
    host: Optional[str] = Field(default=None, description="Host read from the URI")
    matched_rule: Optional[str] = Field(
        default=None,
        description="Pattern, domain or context name that decided the status"
    )

    @property
    def is_valid(self) -> bool:
        return self.status == FetchStatus.VALID


def _validate_patterns(patterns: List[str]) -> List[str]:
    for pattern in patterns:
        try:
            re.compile(pattern)
        except re.error as e:
            raise ValueError(f"Invalid regex pattern '{pattern}': {e}")
    return patterns


class DomainRuleConfig(BaseModel):
    """Configuration of one always-in-scope domain."""

    domain: str = Field(min_length=1, description="Domain name or host regex")
    is_regex: bool = Field(default=False, description="Treat domain as a regex")
    enabled: bool = Field(default=True, description="Whether the rule is active")
    include_subdomains: bool = Field(
        default=False,
        description="Also admit subdomains of an exact domain"
    )

    @model_validator(mode='before')
    @classmethod
    def coerce_plain_domain(cls, data: Any) -> Any:
        """Accept a bare domain string in place of a mapping."""
        if isinstance(data, str):
            return {"domain": data}
        return data

    @model_validator(mode='after')
    def validate_domain_regex(self):
        """Validate the domain regex compiles when is_regex is set."""
        if self.is_regex:
            _validate_patterns([self.domain])
        elif "*" in self.domain:
            raise ValueError(
                f"Wildcards are not supported in domain '{self.domain}'; "
                "use is_regex or include_subdomains"
            )
        elif not self.domain.strip().rstrip("."):
            raise ValueError(f"Domain '{self.domain}' has no host name")
        return self


class ContextConfig(BaseModel):
    """Configuration of a regex-defined scan context."""

    name: str = Field(default="default", description="Context name used in reports")
    include_patterns: List[str] = Field(
        default_factory=list,
        description="Regexes a URL must fully match to be in context"
    )
    exclude_patterns: List[str] = Field(
        default_factory=list,
        description="Regexes that remove a URL from the context"
    )

    @field_validator('include_patterns', 'exclude_patterns')
    @classmethod
    def validate_regex_patterns(cls, v):
        """Validate that regex patterns compile correctly."""
        return _validate_patterns(v)


class FetchFilterConfig(BaseModel):
    """Configuration for the fetch filter of one crawl session."""

    scope_patterns: List[str] = Field(
        default_factory=list,
        description="Regex patterns admitting URIs into scope"
    )

    exclude_patterns: List[str] = Field(
        default_factory=list,
        description="Regex patterns excluding otherwise admitted URIs"
    )

    domains_always_in_scope: List[DomainRuleConfig] = Field(
        default_factory=list,
        description="Domains admitted regardless of scope patterns"
    )

    context: Optional[ContextConfig] = Field(
        default=None,
        description="Scan context; when set it replaces scope patterns and domains"
    )

    @field_validator('scope_patterns', 'exclude_patterns')
    @classmethod
    def validate_regex_patterns(cls, v):
        """Validate that regex patterns compile correctly."""
        return _validate_patterns(v)

    def to_summary(self) -> Dict[str, Any]:
        """Export a summary of the configuration for reporting."""
        return {
            "scope_patterns": len(self.scope_patterns),
            "exclude_patterns": len(self.exclude_patterns),
            "domains_always_in_scope": len(self.domains_always_in_scope),
            "context": self.context.name if self.context else None
        }
