"""Security utilities — redirect target validation."""

from trellis.security.urls import assert_safe_redirect, is_safe_url

__all__ = ["assert_safe_redirect", "is_safe_url"]
