"""Domain layer for pmdesk.

Pure data models and validation rules for the entities served by the
project-management API. Nothing in this package performs I/O.
"""
