"""Segment trie with O(path-depth) matching.

The route tree is converted once into an internal trie with dict-based
static children.  Children are tried in order static -> dynamic ->
wildcard, with backtracking: a dynamic branch that dead-ends is undone and
a sibling candidate (possibly at a shallower level) is tried next.

Static segment matching is case-sensitive, per RFC 3986.
"""

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import unquote

from trellis.routing.route import ResolvedRoute
from trellis.routing.tree import RouteNode


def normalize_path(pathname: str) -> str:
    """Strip one trailing slash (except for ``/``) and ensure a leading one."""
    if len(pathname) > 1 and pathname.endswith("/"):
        pathname = pathname[:-1]
    if not pathname.startswith("/"):
        pathname = "/" + pathname
    return pathname


def _split_segments(pathname: str) -> list[str]:
    """Split a normalized pathname. Must not be called with ``/``."""
    return pathname[1:].split("/")


def _safe_decode(segment: str) -> str:
    """Percent-decode *segment*, returning it unchanged on malformed input."""
    try:
        return unquote(segment, errors="strict")
    except UnicodeDecodeError:
        return segment


def _join_pattern(parent: str, segment: str) -> str:
    return f"/{segment}" if parent == "/" else f"{parent}/{segment}"


class _TrieNode:
    """A node in the route trie. Mutable during conversion only."""

    __slots__ = ("dynamic", "error_boundary", "pattern", "route", "static", "wildcard")

    def __init__(self) -> None:
        # Terminal route and its reconstructed pattern ("/projects/:id")
        self.route: RouteNode | None = None
        self.pattern: str | None = None
        # Error boundary module scoped to this prefix
        self.error_boundary: str | None = None
        # Static segment children: "projects" -> node
        self.static: dict[str, _TrieNode] = {}
        # Single-segment parameter child
        self.dynamic: _ParamEdge | None = None
        # Catch-all child, consumes the remaining segments
        self.wildcard: _ParamEdge | None = None


@dataclass(slots=True)
class _ParamEdge:
    """A parameter edge in the trie."""

    param: str
    node: _TrieNode


def _convert(source: RouteNode, pattern: str) -> _TrieNode:
    """Recursively convert a RouteNode into a trie node."""
    node = _TrieNode()

    if source.is_terminal:
        node.route = source
        node.pattern = pattern

    if source.error_boundary:
        node.error_boundary = source.error_boundary

    for segment, child in source.children.items():
        node.static[segment] = _convert(child, _join_pattern(pattern, segment))

    if source.dynamic is not None:
        param = source.dynamic.param
        node.dynamic = _ParamEdge(
            param=param,
            node=_convert(source.dynamic.child, _join_pattern(pattern, f":{param}")),
        )

    if source.wildcard is not None:
        param = source.wildcard.param
        node.wildcard = _ParamEdge(
            param=param,
            node=_convert(source.wildcard.child, _join_pattern(pattern, f":{param}*")),
        )

    return node


class RouteTrie:
    """Trie-based route resolver.

    Usage::

        trie = RouteTrie(tree)
        resolved = trie.match("/projects/42")
        resolved.pattern  # "/projects/:id"
        resolved.params   # {"id": "42"}

    The trie is immutable after construction and safe to share between
    concurrent renders.
    """

    __slots__ = ("_root", "tree")

    def __init__(self, tree: RouteNode) -> None:
        self.tree = tree
        self._root = _convert(tree, "/")

    def match(self, pathname: str) -> ResolvedRoute | None:
        """Match a pathname to a route, or return ``None``."""
        pathname = normalize_path(pathname)

        if pathname == "/":
            if self._root.route is not None:
                return ResolvedRoute(node=self._root.route, pattern="/", params={})
            return None

        return self._walk(self._root, _split_segments(pathname), 0, {})

    def find_error_boundary(self, pathname: str) -> str | None:
        """Return the deepest error boundary along the committed path.

        Follows the same priority as :meth:`match` (static -> dynamic ->
        wildcard) but never backtracks: once a branch is chosen it is
        committed to.  For ambiguous paths this can pick a different
        branch than ``match`` would; that asymmetry is deliberate and
        decides which boundary fires.
        """
        pathname = normalize_path(pathname)
        if pathname == "/":
            return self._root.error_boundary
        return self._walk_for_boundary(
            self._root, _split_segments(pathname), 0, self._root.error_boundary,
        )

    def find_route(self, pattern: str) -> RouteNode | None:
        """Look up the terminal route at an exact canonical pattern.

        Segments starting with ``:`` are matched structurally against the
        dynamic (``:id``) or wildcard (``:rest*``) child; they are never
        decoded.
        """
        if pattern == "/":
            return self._root.route

        node = self._root
        for segment in _split_segments(normalize_path(pattern)):
            edge: _ParamEdge | None
            if segment.startswith(":") and segment.endswith("*"):
                edge = node.wildcard
                child = edge.node if edge is not None else None
            elif segment.startswith(":"):
                edge = node.dynamic
                child = edge.node if edge is not None else None
            else:
                child = node.static.get(segment)
            if child is None:
                return None
            node = child
        return node.route

    @property
    def routes(self) -> list[tuple[str, RouteNode]]:
        """Return ``(pattern, node)`` for every terminal route.

        Useful for introspection and sitemaps.
        """
        result: list[tuple[str, RouteNode]] = []
        self._collect(self._root, result)
        return result

    def _collect(self, node: _TrieNode, result: list[tuple[str, RouteNode]]) -> None:
        if node.route is not None and node.pattern is not None:
            result.append((node.pattern, node.route))
        for child in node.static.values():
            self._collect(child, result)
        if node.dynamic is not None:
            self._collect(node.dynamic.node, result)
        if node.wildcard is not None:
            self._collect(node.wildcard.node, result)

    # -- Matching --

    def _walk(
        self,
        node: _TrieNode,
        segments: list[str],
        index: int,
        params: dict[str, str],
    ) -> ResolvedRoute | None:
        """Recursively match segments against the trie, backtracking on failure."""
        # All segments consumed
        if index == len(segments):
            if node.route is not None:
                return ResolvedRoute(
                    node=node.route, pattern=node.pattern or "/", params=dict(params),
                )
            wildcard = node.wildcard
            if wildcard is not None and wildcard.node.route is not None:
                return ResolvedRoute(
                    node=wildcard.node.route,
                    pattern=wildcard.node.pattern or "/",
                    params={**params, wildcard.param: ""},
                )
            return None

        segment = segments[index]

        # 1. Static child (exact match)
        static_child = node.static.get(segment)
        if static_child is not None:
            result = self._walk(static_child, segments, index + 1, params)
            if result is not None:
                return result

        # 2. Dynamic child (single segment)
        if node.dynamic is not None:
            param = node.dynamic.param
            shadowed = params.get(param)
            params[param] = _safe_decode(segment)
            result = self._walk(node.dynamic.node, segments, index + 1, params)
            if result is not None:
                return result
            # Undo the binding before trying a sibling candidate
            if shadowed is None:
                del params[param]
            else:
                params[param] = shadowed

        # 3. Wildcard (greedy, consumes all remaining segments)
        wildcard = node.wildcard
        if wildcard is not None and wildcard.node.route is not None:
            rest = "/".join(_safe_decode(part) for part in segments[index:])
            return ResolvedRoute(
                node=wildcard.node.route,
                pattern=wildcard.node.pattern or "/",
                params={**params, wildcard.param: rest},
            )

        return None

    def _walk_for_boundary(
        self,
        node: _TrieNode,
        segments: list[str],
        index: int,
        deepest: str | None,
    ) -> str | None:
        if index == len(segments):
            return node.error_boundary or deepest

        segment = segments[index]

        static_child = node.static.get(segment)
        if static_child is not None:
            return self._walk_for_boundary(
                static_child, segments, index + 1, static_child.error_boundary or deepest,
            )

        if node.dynamic is not None:
            child = node.dynamic.node
            return self._walk_for_boundary(
                child, segments, index + 1, child.error_boundary or deepest,
            )

        if node.wildcard is not None:
            return node.wildcard.node.error_boundary or deepest

        return deepest
