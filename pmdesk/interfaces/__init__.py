"""Interfaces layer - entry points into pmdesk (CLI)."""
