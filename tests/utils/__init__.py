"""Shared helpers for i18nscan tests."""
