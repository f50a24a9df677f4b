"""Component context — the value passed into every render callback.

A fresh ``ComponentContext`` is built per route level (and per widget)
for each render.  It carries the route info, the resolved companion file
contents, whether the level is the innermost one, and the render's
cancellation signal.

Applications enrich it through ``extend_context``::

    def extend_context(ctx: ComponentContext) -> ComponentContext:
        return ctx.extend(user=current_user(), locale="en")

    # In a page callback
    ctx.user.name

Enrichment values live in ``extra`` and are reachable as attributes.
They can add fields but never remove or replace the base ones.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import Any

import anyio

from trellis.http.query import QueryParams
from trellis.routing.route import RouteInfo


@dataclass(frozen=True, slots=True)
class FileContents:
    """Text of a route's or widget's companion files."""

    html: str | None = None
    md: str | None = None
    css: str | None = None


@dataclass(frozen=True, slots=True)
class ComponentContext:
    """Context for one page level or widget within a single render.

    Attributes:
        pathname: Actual request path (``/projects/42``).
        pattern: Matched route pattern (``/projects/:id``).
        params: Decoded URL parameters.
        query: Query string parameters.
        files: Companion file contents for the component being rendered.
        is_leaf: True only for the innermost route of the hierarchy.
        signal: The render's cancellation signal, if any.
        extra: Application enrichment values.
    """

    pathname: str
    pattern: str
    params: Mapping[str, str] = field(default_factory=dict)
    query: QueryParams = field(default_factory=QueryParams)
    files: FileContents = field(default_factory=FileContents)
    is_leaf: bool = False
    signal: anyio.Event | None = None
    extra: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def from_route_info(
        cls,
        route_info: RouteInfo,
        *,
        files: FileContents | None = None,
        is_leaf: bool = False,
        signal: anyio.Event | None = None,
    ) -> ComponentContext:
        return cls(
            pathname=route_info.pathname,
            pattern=route_info.pattern,
            params=route_info.params,
            query=route_info.query,
            files=files or FileContents(),
            is_leaf=is_leaf,
            signal=signal,
        )

    def __getattr__(self, name: str) -> Any:
        # Only reached when normal attribute lookup fails
        extra = object.__getattribute__(self, "extra")
        try:
            return extra[name]
        except KeyError:
            msg = f"ComponentContext has no attribute {name!r}"
            raise AttributeError(msg) from None

    def extend(self, **values: Any) -> ComponentContext:
        """Return a copy with *values* merged into the enrichment."""
        base = {f for f in _BASE_FIELDS if f != "extra"}
        clash = base.intersection(values)
        if clash:
            msg = f"Context enrichment cannot replace base field(s): {', '.join(sorted(clash))}"
            raise ValueError(msg)
        return replace(self, extra={**self.extra, **values})

    @property
    def cancelled(self) -> bool:
        """True once the render's cancellation signal has fired."""
        return self.signal is not None and self.signal.is_set()


_BASE_FIELDS = frozenset(ComponentContext.__dataclass_fields__)
