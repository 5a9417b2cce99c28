"""Shared error taxonomy and application settings."""
