"""SSR HTML renderer.

Produces complete HTML strings without a DOM.  Per route level:

1. The page's ``render_html`` output is taken as-is.
2. ``<mark-down>`` blocks are rendered server-side with the injected
   Markdown renderer; fenced ``router-slot`` and ``widget:name`` blocks in
   the result become slot and widget tags.
3. ``<widget-name>`` tags are resolved through the widget registry and
   rewritten as ``<widget-name ... data-ssr="{data}">rendered</widget-name>``.
"""

from __future__ import annotations

import dataclasses
import functools
import html
import json
import logging
import re
from typing import Any

import anyio

from trellis._internal.invoke import invoke
from trellis.components.base import HTML_SLOT, escape
from trellis.components.page import PageComponent
from trellis.context import ComponentContext
from trellis.markdown.fenced import process_fenced_slots, process_fenced_widgets
from trellis.markdown.renderer import MarkdownRendererProtocol
from trellis.rendering import pages
from trellis.rendering.base import HierarchicalRenderer
from trellis.rendering.core import RenderingCore
from trellis.routing.route import RouteInfo
from trellis.widgets.errors import UnknownWidgetError, WidgetParamsError
from trellis.widgets.parser import SSR_ATTR, ParsedWidgetBlock, parse_widget_tags
from trellis.widgets.registry import WidgetRegistry
from trellis.widgets.resolve import resolve_widgets_recursively

logger = logging.getLogger("trellis.render")

_SLOT_RE = re.compile(r"<router-slot\b[^>]*>.*?</router-slot>", re.IGNORECASE | re.DOTALL)
_MARKDOWN_RE = re.compile(r"<mark-down>(.*?)</mark-down>", re.DOTALL)


class SsrHtmlRenderer(HierarchicalRenderer):
    """Render URLs to HTML.

    Usage::

        renderer = SsrHtmlRenderer(
            core,
            widgets=WidgetRegistry([BreadcrumbWidget()]),
            markdown_renderer=MarkdownRenderer(),
        )
        result = await renderer.render("/projects/42")

    Args:
        core: Shared rendering core.
        widgets: Registry for ``<widget-*>`` tags.  Without one, tags are
            left for the client.
        markdown_renderer: Anything with ``render(source) -> str``.  Without
            one, ``<mark-down>`` blocks are left for the client.
    """

    label = "SSR HTML"
    slot_placeholder = HTML_SLOT

    def __init__(
        self,
        core: RenderingCore,
        *,
        widgets: WidgetRegistry | None = None,
        markdown_renderer: MarkdownRendererProtocol | None = None,
    ) -> None:
        super().__init__(core, widgets=widgets)
        self.markdown_renderer = markdown_renderer

    # -- Slots --

    def inject_slot(self, parent: str, child: str) -> str:
        # Function replacement keeps backslashes in child content literal
        return _SLOT_RE.sub(lambda _: child, parent, count=1)

    def strip_slots(self, content: str) -> str:
        return _SLOT_RE.sub("", content).strip()

    # -- Content --

    def render_content(
        self, page: PageComponent, data: Any, params: dict[str, Any], context: ComponentContext,
    ) -> str:
        return page.render_html(data, params, context)

    async def post_process(
        self, content: str, route_info: RouteInfo, signal: anyio.Event | None = None,
    ) -> str:
        content = self.expand_markdown(content)
        if self.widgets is None:
            return content
        return await resolve_widgets_recursively(
            content,
            route_info,
            parse=parse_widget_tags,
            resolve_one=functools.partial(self._resolve_widget, signal=signal),
            max_depth=self.core.config.widget_max_depth,
        )

    def expand_markdown(self, content: str) -> str:
        """Render ``<mark-down>`` blocks to HTML. Unchanged without a renderer."""
        renderer = self.markdown_renderer
        if renderer is None or not self.core.config.expand_markdown:
            return content
        if "<mark-down>" not in content:
            return content

        def _expand(match: re.Match[str]) -> str:
            rendered = renderer.render(html.unescape(match.group(1)))
            rendered = process_fenced_slots(rendered, html.unescape)
            return process_fenced_widgets(rendered, html.unescape)

        return _MARKDOWN_RE.sub(_expand, content)

    async def _resolve_widget(
        self,
        block: ParsedWidgetBlock,
        route_info: RouteInfo,
        *,
        signal: anyio.Event | None = None,
    ) -> str:
        name = block.widget_name
        widget = self.widgets.get(name) if self.widgets is not None else None
        if widget is None:
            logger.warning("[%s] Unknown widget %r on %s", self.label, name, route_info.pathname)
            return _widget_error(name, UnknownWidgetError(name))

        params = block.params or {}
        try:
            problem = widget.validate_params(params)
            if problem:
                raise WidgetParamsError(name, problem)
            context = await self.core.build_widget_context(
                route_info, self.widgets.files_for(name), signal=signal,
            )
            data = await invoke(widget.get_data, params, context)
            rendered = self.expand_markdown(widget.render_html(data, params, context))
            ssr = escape(json.dumps(data, default=_json_default))
        except Exception as exc:
            logger.warning(
                "[%s] Widget %r failed on %s", self.label, name, route_info.pathname, exc_info=True,
            )
            return widget.render_error(exc)

        tag = f"widget-{name}"
        attrs = f" {block.attrs}" if block.attrs else ""
        return f'<{tag}{attrs} {SSR_ATTR}="{ssr}">{rendered}</{tag}>'

    # -- Terminal pages --

    def render_redirect(self, to: str) -> str:
        return pages.render_redirect_page(to)

    def render_status_page(self, status: int, pathname: str) -> str:
        return pages.render_status_page(status, pathname)

    def render_error_page(self, error: BaseException, pathname: str) -> str:
        return pages.render_error_page(error, pathname)


def _widget_error(name: str, error: BaseException) -> str:
    return f'<div class="c-error" data-component="{escape(name)}">Error: {escape(str(error))}</div>'


def _json_default(value: Any) -> Any:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    return str(value)
