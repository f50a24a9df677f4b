"""Frozen result types shared by the rendering core and both renderers."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from trellis.errors import ConfigurationError


@dataclass(frozen=True, slots=True)
class RenderResult:
    """What a render hands back to the HTTP-facing caller.

    ``redirect`` set implies a redirect status and ``content`` of ``None``.
    """

    content: str | None
    status: int = 200
    title: str | None = None
    redirect: str | None = None

    @property
    def is_redirect(self) -> bool:
        return self.redirect is not None


@dataclass(frozen=True, slots=True)
class RouteContent:
    """One route level's rendered content and optional title."""

    content: str
    title: str | None = None


@dataclass(frozen=True, slots=True)
class RedirectConfig:
    """Target of a redirect route, exported by its module as ``redirect``::

        # routes/old-docs.redirect.py
        redirect = RedirectConfig(to="/docs", status=308)
    """

    to: str
    status: int = 301

    @classmethod
    def coerce(cls, value: Any, *, default_status: int = 301) -> RedirectConfig:
        """Accept a ``RedirectConfig`` or a mapping with ``to`` and ``status``."""
        if isinstance(value, RedirectConfig):
            return value
        if isinstance(value, Mapping) and isinstance(value.get("to"), str):
            return cls(to=value["to"], status=int(value.get("status", default_status)))
        msg = f"Redirect export must be a RedirectConfig or a mapping with 'to', got {value!r}"
        raise ConfigurationError(msg)
