"""Expansion driver."""

from .driver import ExpansionDriver, ExpansionResult, strip_marker
