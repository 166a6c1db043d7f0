"""Input validation against declared schemas."""

from .validator import Issue, SchemaValidator, format_issues, issues_from, validate

__all__ = ["Issue", "SchemaValidator", "format_issues", "issues_from", "validate"]
