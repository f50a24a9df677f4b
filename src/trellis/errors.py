"""Trellis exception hierarchy.

Shared across the resolver, the rendering core, the renderers, and the
widget resolver so every module raises and catches the same types.
"""

from dataclasses import dataclass

# Reason phrases used by the built-in status pages.
STATUS_MESSAGES: dict[int, str] = {
    401: "Unauthorized",
    403: "Forbidden",
    404: "Not Found",
    500: "Internal Server Error",
}


class TrellisError(Exception):
    """Base for all trellis-specific errors."""


class ConfigurationError(TrellisError):
    """Raised when a route tree, module, or renderer setup is invalid.

    Typically raised while loading a route tree or resolving a module
    export that does not exist.
    """


@dataclass(frozen=True, slots=True)
class HTTPError(TrellisError):
    """A render step requesting a specific HTTP status.

    Raised from page ``get_data()`` or render callbacks.  The renderer
    catches these and dispatches to the matching status page instead of
    treating them as internal errors.
    """

    status: int
    detail: str = ""

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818 — conventional name in web frameworks
    """404 — the requested resource does not exist."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)


class Unauthorized(HTTPError):  # noqa: N818 — conventional name in web frameworks
    """401 — authentication is required."""

    def __init__(self, detail: str = "Unauthorized") -> None:
        super().__init__(status=401, detail=detail)


class Forbidden(HTTPError):  # noqa: N818 — conventional name in web frameworks
    """403 — the caller may not see this resource."""

    def __init__(self, detail: str = "Forbidden") -> None:
        super().__init__(status=403, detail=detail)


class UnsafeRedirectError(TrellisError):
    """Raised when a redirect route points outside the current origin."""

    def __init__(self, target: str) -> None:
        self.target = target
        super().__init__(f"Refusing to redirect to unsafe target {target!r}")


class RenderCancelled(TrellisError):  # noqa: N818
    """Raised when a render is aborted by its cancellation signal.

    Callers map this to "no response", never to a 500.
    """

    def __init__(self, url: str) -> None:
        self.url = url
        super().__init__(f"Render of {url!r} was cancelled")
