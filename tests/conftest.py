"""
Pytest configuration and shared fixtures for all shadowgen tests.

The driver and parser are stateless between expansions (each expansion
gets its own ExpansionContext), so one instance is shared by every test.
"""

import sys
import pytest
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))
from shadowgen.compiler.driver import ExpansionDriver


# =============================================================================
# Session-scoped fixtures (shared across all tests)
# =============================================================================

@pytest.fixture(scope="session")
def session_driver():
    """
    Session-scoped driver shared across ALL tests.

    - Parser tables are built once (Lark native caching)
    - Passes are instantiated per expansion, so no state leaks between tests
    """
    return ExpansionDriver()


@pytest.fixture(scope="session")
def session_parser(session_driver):
    """The driver's parser; immutable after construction."""
    return session_driver.parser


# =============================================================================
# Class-scoped fixtures
# =============================================================================

@pytest.fixture(scope="class")
def driver(session_driver):
    return session_driver


@pytest.fixture(scope="class")
def parser(session_parser):
    return session_parser
