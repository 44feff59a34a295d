"""Command-line interface helpers for i18nscan."""
