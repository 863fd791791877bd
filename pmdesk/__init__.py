"""pmdesk - terminal client for a project-management REST service."""

__version__ = "0.1.0"
