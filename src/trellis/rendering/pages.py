"""Built-in HTML pages for statuses, errors, and redirects.

Rendered through kida with autoescaping on, so paths and error messages
never inject markup.
"""

from __future__ import annotations

from kida import Environment

from trellis.errors import STATUS_MESSAGES

_env = Environment(autoescape=True)

_STATUS_PAGE = _env.from_string(
    "<h1>{{ message }}</h1>\n"
    "<p>Path: {{ pathname }}</p>"
)

_ERROR_PAGE = _env.from_string(
    "<h1>Error</h1>\n"
    "<p>Path: {{ pathname }}</p>\n"
    "<p>{{ message }}</p>"
)

_REDIRECT_PAGE = _env.from_string(
    '<meta http-equiv="refresh" content="0;url={{ to }}">\n'
    '<p>Redirecting to <a href="{{ to }}">{{ to }}</a></p>'
)


def status_message(status: int) -> str:
    return STATUS_MESSAGES.get(status, "Error")


def render_status_page(status: int, pathname: str) -> str:
    """Render the fallback page for an HTTP status."""
    return _STATUS_PAGE.render({"message": status_message(status), "pathname": pathname})


def render_error_page(error: BaseException, pathname: str) -> str:
    """Render the fallback page for an unhandled render error."""
    return _ERROR_PAGE.render({"message": str(error), "pathname": pathname})


def render_redirect_page(to: str) -> str:
    """Render a meta-refresh page pointing at *to*."""
    return _REDIRECT_PAGE.render({"to": to})
