"""Shared test fixtures and configuration for scopeguard tests."""

import pytest
from pathlib import Path
from unittest.mock import Mock
import sys

# Add project root to Python path
sys.path.insert(0, str(Path(__file__).parent.parent))

from scopeguard.filters.default import DefaultFetchFilter
from scopeguard.models.fetch import FetchFilterConfig


@pytest.fixture
def fetch_filter():
    """Unconfigured, unsealed fetch filter."""
    return DefaultFetchFilter()


@pytest.fixture
def context_in_scope():
    """Factory for a mocked scan context answering a fixed value."""
    def _make(in_scope: bool):
        context = Mock()
        context.is_in_context.return_value = in_scope
        return context
    return _make


@pytest.fixture
def sample_filter_config():
    """Sample fetch filter configuration for testing."""
    return FetchFilterConfig(
        scope_patterns=["^https?://example\\.com(/.*)?$"],
        exclude_patterns=[".*/logout.*"],
        domains_always_in_scope=["static.example.org"]
    )


@pytest.fixture
def sample_config_file(tmp_path):
    """Temporary YAML configuration file with environment overrides."""
    content = """
scope_patterns:
  - "^https?://example\\\\.com(/.*)?$"
exclude_patterns:
  - ".*/logout.*"
domains_always_in_scope:
  - static.example.org
  - domain: example.net
    include_subdomains: true
environments:
  staging:
    scope_patterns:
      - "^https?://staging\\\\.example\\\\.com(/.*)?$"
    domains_always_in_scope: []
  contextual:
    context:
      name: app
      include_patterns:
        - "https://app\\\\.example\\\\.com/.*"
"""
    path = tmp_path / "scope.yaml"
    path.write_text(content.strip() + "\n")
    return path
