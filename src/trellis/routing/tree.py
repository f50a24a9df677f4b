"""Route tree — the serializable manifest consumed by the resolver.

Each node corresponds to a URL segment.  The tree is produced externally
(by whatever discovers routes), is JSON-serializable, and is read-only
once built.  ``RouteTrie`` converts it into its indexed form once.

JSON form::

    {
      "files": {"py": "routes/projects.py", "html": "routes/projects.html"},
      "errorBoundary": "routes/projects.error.py",
      "children": {"new": {...}},
      "dynamic": {"param": "id", "child": {...}},
      "wildcard": {"param": "rest", "child": {...}}
    }
"""

from __future__ import annotations

import json
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from trellis.errors import ConfigurationError

# File kinds a route may declare
FILE_KINDS = ("py", "html", "md", "css")


@dataclass(frozen=True, slots=True)
class RouteFiles:
    """Companion files declared by a route or widget.

    Attributes:
        py: Behavior module exporting ``page`` (a ``PageComponent``).
        html: HTML template.
        md: Markdown content.
        css: Scoped stylesheet.
    """

    py: str | None = None
    html: str | None = None
    md: str | None = None
    css: str | None = None

    def __bool__(self) -> bool:
        return any(getattr(self, kind) for kind in FILE_KINDS)

    def items(self) -> Iterator[tuple[str, str]]:
        """Yield ``(kind, path)`` for every declared file."""
        for kind in FILE_KINDS:
            path = getattr(self, kind)
            if path:
                yield kind, path

    @classmethod
    def from_dict(cls, data: Mapping[str, str]) -> RouteFiles:
        unknown = set(data) - set(FILE_KINDS)
        if unknown:
            msg = f"Unknown route file kind(s): {', '.join(sorted(unknown))}"
            raise ConfigurationError(msg)
        return cls(**{kind: data[kind] for kind in FILE_KINDS if kind in data})

    def to_dict(self) -> dict[str, str]:
        return dict(self.items())


@dataclass(frozen=True, slots=True)
class ParamEdge:
    """A parameter edge: the child node bound to a named parameter."""

    param: str
    child: RouteNode


@dataclass(frozen=True, slots=True)
class RouteNode:
    """A single node in the route tree.

    A node is terminal (matchable) iff it declares files or a redirect.
    Nodes exclusively own their children; the tree is acyclic by
    construction.
    """

    files: RouteFiles | None = None
    redirect: str | None = None
    error_boundary: str | None = None
    children: dict[str, RouteNode] = field(default_factory=dict)
    dynamic: ParamEdge | None = None
    wildcard: ParamEdge | None = None

    @property
    def is_terminal(self) -> bool:
        return bool(self.files) or bool(self.redirect)

    @property
    def is_redirect(self) -> bool:
        return bool(self.redirect)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> RouteNode:
        """Build a node (recursively) from its JSON-compatible form."""
        if not isinstance(data, Mapping):
            msg = f"Route node must be an object, got {type(data).__name__}"
            raise ConfigurationError(msg)

        files = data.get("files")
        children = data.get("children") or {}
        return cls(
            files=RouteFiles.from_dict(files) if files else None,
            redirect=data.get("redirect"),
            error_boundary=data.get("errorBoundary"),
            children={segment: cls.from_dict(child) for segment, child in children.items()},
            dynamic=_edge_from_dict(data.get("dynamic"), "dynamic"),
            wildcard=_edge_from_dict(data.get("wildcard"), "wildcard"),
        )

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON-compatible form of this node."""
        out: dict[str, Any] = {}
        if self.files:
            out["files"] = self.files.to_dict()
        if self.redirect:
            out["redirect"] = self.redirect
        if self.error_boundary:
            out["errorBoundary"] = self.error_boundary
        if self.children:
            out["children"] = {segment: child.to_dict() for segment, child in self.children.items()}
        if self.dynamic is not None:
            out["dynamic"] = {"param": self.dynamic.param, "child": self.dynamic.child.to_dict()}
        if self.wildcard is not None:
            out["wildcard"] = {"param": self.wildcard.param, "child": self.wildcard.child.to_dict()}
        return out


def _edge_from_dict(data: Mapping[str, Any] | None, kind: str) -> ParamEdge | None:
    if data is None:
        return None
    try:
        param = data["param"]
        child = data["child"]
    except (KeyError, TypeError):
        msg = f"{kind} edge requires 'param' and 'child'"
        raise ConfigurationError(msg) from None
    if not param:
        msg = f"{kind} edge has an empty parameter name"
        raise ConfigurationError(msg)
    return ParamEdge(param=param, child=RouteNode.from_dict(child))


def load_route_tree(source: str | Path | Mapping[str, Any]) -> RouteNode:
    """Load a route tree from a JSON file, a JSON string, or a mapping.

    Usage::

        tree = load_route_tree("routes.manifest.json")
        tree = load_route_tree({"children": {"about": {"files": {"md": "about.md"}}}})
    """
    if isinstance(source, Mapping):
        return RouteNode.from_dict(source)
    if isinstance(source, Path) or not source.lstrip().startswith("{"):
        text = Path(source).read_text(encoding="utf-8")
    else:
        text = source
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        msg = f"Route tree is not valid JSON: {exc}"
        raise ConfigurationError(msg) from exc
    return RouteNode.from_dict(data)


def tree_from_patterns(routes: Mapping[str, RouteNode]) -> RouteNode:
    """Build a route tree from canonical patterns.

    Segments starting with ``:`` become dynamic edges, ``:name*`` wildcard
    edges, anything else static children.  Each value supplies the files,
    redirect, and error boundary of the node at that pattern::

        tree = tree_from_patterns({
            "/": RouteNode(files=RouteFiles(html="index.html")),
            "/projects/:id": RouteNode(files=RouteFiles(py="project.py")),
            "/docs/:rest*": RouteNode(files=RouteFiles(md="docs.md")),
        })

    Raises ``ConfigurationError`` when two patterns disagree on the
    parameter name of the same dynamic or wildcard position.
    """
    root: dict[str, Any] = {}
    for pattern, node in routes.items():
        target = root
        for segment in _split_pattern(pattern):
            target = _descend(target, segment, pattern)
        own = node.to_dict()
        for key in ("files", "redirect", "errorBoundary"):
            if key in own:
                target[key] = own[key]
    return RouteNode.from_dict(root)


def _split_pattern(pattern: str) -> list[str]:
    return [part for part in pattern.strip("/").split("/") if part]


def _descend(node: dict[str, Any], segment: str, pattern: str) -> dict[str, Any]:
    if segment.startswith(":"):
        kind = "wildcard" if segment.endswith("*") else "dynamic"
        param = segment[1:].removesuffix("*")
        edge = node.setdefault(kind, {"param": param, "child": {}})
        if edge["param"] != param:
            msg = (
                f"Pattern {pattern!r} names {kind} parameter {param!r}, "
                f"but this position is already bound to {edge['param']!r}"
            )
            raise ConfigurationError(msg)
        return edge["child"]
    return node.setdefault("children", {}).setdefault(segment, {})
