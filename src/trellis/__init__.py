"""Trellis — route trie and hierarchical HTML/Markdown server-side rendering.

Resolves URL paths against a route tree and renders them by composing
nested layouts, each level filling its parent's slot, with embedded
widgets expanded server-side.

Basic usage::

    from trellis import RenderingCore, SsrHtmlRenderer, load_route_tree

    core = RenderingCore(load_route_tree("routes.manifest.json"))
    renderer = SsrHtmlRenderer(core)

    result = await renderer.render("/projects/42")
    result.status, result.title, result.content

Markdown rendering of ``<mark-down>`` blocks (``pip install trellis-render[markdown]``)::

    from trellis.markdown import MarkdownRenderer
    renderer = SsrHtmlRenderer(core, markdown_renderer=MarkdownRenderer())
"""

__version__ = "0.1.0"
__all__ = [
    "BreadcrumbWidget",
    "ComponentContext",
    "ConfigurationError",
    "Forbidden",
    "HTTPError",
    "NotFound",
    "PageComponent",
    "RedirectConfig",
    "RenderCancelled",
    "RenderConfig",
    "RenderResult",
    "RenderingCore",
    "RouteFiles",
    "RouteInfo",
    "RouteNode",
    "RouteTrie",
    "SsrHtmlRenderer",
    "SsrMarkdownRenderer",
    "TrellisError",
    "Unauthorized",
    "WidgetComponent",
    "WidgetRegistry",
    "load_route_tree",
    "tree_from_patterns",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import trellis`` fast while providing a clean top-level API.
    """
    if name == "RenderingCore":
        from trellis.rendering.core import RenderingCore

        return RenderingCore

    if name == "SsrHtmlRenderer":
        from trellis.rendering.html import SsrHtmlRenderer

        return SsrHtmlRenderer

    if name == "SsrMarkdownRenderer":
        from trellis.rendering.markdown import SsrMarkdownRenderer

        return SsrMarkdownRenderer

    if name in ("RedirectConfig", "RenderResult"):
        from trellis.rendering import types as _types

        return getattr(_types, name)

    if name == "RenderConfig":
        from trellis.config import RenderConfig

        return RenderConfig

    if name == "ComponentContext":
        from trellis.context import ComponentContext

        return ComponentContext

    if name in ("PageComponent", "WidgetComponent"):
        from trellis import components as _components

        return getattr(_components, name)

    if name in ("BreadcrumbWidget", "WidgetRegistry"):
        from trellis import widgets as _widgets

        return getattr(_widgets, name)

    if name in ("RouteFiles", "RouteNode", "load_route_tree", "tree_from_patterns"):
        from trellis.routing import tree as _tree

        return getattr(_tree, name)

    if name == "RouteTrie":
        from trellis.routing.trie import RouteTrie

        return RouteTrie

    if name == "RouteInfo":
        from trellis.routing.route import RouteInfo

        return RouteInfo

    if name in (
        "ConfigurationError",
        "Forbidden",
        "HTTPError",
        "NotFound",
        "RenderCancelled",
        "TrellisError",
        "Unauthorized",
    ):
        from trellis import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
