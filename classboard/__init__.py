"""JSON API and request handlers for subjects, assignments and submitted solutions, stored in SQLite."""

__version__ = "0.1.0"
__all__ = ["__version__"]