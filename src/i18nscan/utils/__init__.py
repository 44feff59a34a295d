"""Utility modules for i18nscan."""
