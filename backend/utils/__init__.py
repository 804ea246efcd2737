"""Shared utilities: JSON parsing and session persistence."""
