"""Rendering — the hierarchical SSR pipeline and its HTML and Markdown adapters."""

from trellis.rendering.base import HierarchicalRenderer
from trellis.rendering.core import PASSTHROUGH_ROOT, RenderingCore
from trellis.rendering.html import SsrHtmlRenderer
from trellis.rendering.markdown import SsrMarkdownRenderer
from trellis.rendering.types import RedirectConfig, RenderResult, RouteContent

__all__ = [
    "PASSTHROUGH_ROOT",
    "HierarchicalRenderer",
    "RedirectConfig",
    "RenderResult",
    "RenderingCore",
    "RouteContent",
    "SsrHtmlRenderer",
    "SsrMarkdownRenderer",
]
