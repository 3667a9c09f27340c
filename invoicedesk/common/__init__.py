"""Shared errors, result types and retry policy."""
