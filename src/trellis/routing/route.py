"""ResolvedRoute and RouteInfo frozen dataclasses."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from trellis.http.query import QueryParams

if TYPE_CHECKING:
    from trellis.routing.tree import RouteNode


@dataclass(frozen=True, slots=True)
class ResolvedRoute:
    """Result of matching a pathname against the route tree.

    ``pattern`` is the canonical route template (``/projects/:id``), not
    the concrete request path.  ``params`` values are percent-decoded.
    """

    node: RouteNode
    pattern: str
    params: dict[str, str]


@dataclass(frozen=True, slots=True)
class RouteInfo:
    """Per-request view of a matched route, shared across a render."""

    pathname: str
    pattern: str
    params: dict[str, str] = field(default_factory=dict)
    query: QueryParams = field(default_factory=QueryParams)
    url: str = ""
