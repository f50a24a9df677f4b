"""Markdown layer error hierarchy."""

from trellis.errors import TrellisError


class MarkdownError(TrellisError):
    """Base for all trellis.markdown errors."""


class MarkdownNotInstalledError(MarkdownError):
    """Raised when MarkdownRenderer is used without patitas installed."""
