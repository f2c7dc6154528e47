"""Shared utilities: configuration constants and file I/O."""
