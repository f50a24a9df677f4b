"""Redirect target validation.

Redirect routes may only send the client somewhere on the same origin:
an absolute path, never a scheme or a host.
"""

from urllib.parse import urlsplit

from trellis.errors import UnsafeRedirectError

# "/\host" is read as "//host" by browsers
_HOST_PREFIXES = ("//", "/\\")


def is_safe_url(url: str) -> bool:
    """True if *url* is an absolute path on the current origin.

    >>> is_safe_url("/login?next=/home")
    True
    >>> is_safe_url("//evil.example")
    False
    """
    if not isinstance(url, str) or not url.startswith("/"):
        return False
    if url.startswith(_HOST_PREFIXES) or "://" in url:
        return False
    parts = urlsplit(url)
    return not parts.scheme and not parts.netloc


def assert_safe_redirect(url: str) -> None:
    """Raise ``UnsafeRedirectError`` for any target :func:`is_safe_url` rejects."""
    if not is_safe_url(url):
        raise UnsafeRedirectError(url)
