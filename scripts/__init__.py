"""Operational scripts for the E2E suite."""
