#!/usr/bin/env python3
"""
Basic fetch filter example for scopeguard.

This example shows how a crawler configures a fetch filter once per crawl
session, seals it, and then lets several workers check discovered URIs.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
import sys

# Add the parent directory to Python path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from scopeguard import (
    DefaultFetchFilter,
    DomainAlwaysInScopeMatcher,
    FetchStatus,
    InvalidPatternError,
    RegexScanContext
)


DISCOVERED = [
    "https://example.com/",
    "https://example.com/account/logout",
    "https://cdn.example.net/app.js",
    "https://tracker.example.org/pixel",
    "mailto:security@example.com",
]


def rule_based_example():
    """Example of scope regexes, always-in-scope domains and exclusions."""
    print("=== Rule-based scope ===")

    fetch_filter = DefaultFetchFilter()
    try:
        fetch_filter.add_scope_rule("^https?://example\\.com/")
        fetch_filter.set_domains_always_in_scope([
            DomainAlwaysInScopeMatcher("example.net", include_subdomains=True)
        ])
        fetch_filter.set_exclude_rules([".*/logout.*"])
    except InvalidPatternError as e:
        print(f"Crawl setup aborted: {e}")
        return
    fetch_filter.seal()

    # Workers share the sealed filter
    with ThreadPoolExecutor(max_workers=4) as executor:
        statuses = list(executor.map(fetch_filter.check_filter, DISCOVERED))

    for uri, status in zip(DISCOVERED, statuses):
        marker = "fetch" if status == FetchStatus.VALID else "skip "
        print(f"{marker} {status.value:<16} {uri}")


def context_example():
    """Example of a scan context replacing the scope rules."""
    print("\n=== Context-based scope ===")

    fetch_filter = DefaultFetchFilter()
    fetch_filter.set_scan_context(RegexScanContext(
        name="example-app",
        include_patterns=["https://example\\.com/.*"]
    ))
    fetch_filter.seal()

    for uri in DISCOVERED:
        decision = fetch_filter.explain(uri)
        print(f"{decision.status.value:<16} {decision.reason.value:<16} {uri}")


def main():
    """Run all examples."""
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    rule_based_example()
    context_example()


if __name__ == "__main__":
    main()
