"""SSR Markdown renderer.

Produces Markdown for text clients, LLMs, and ``curl``.  The slot
placeholder is an empty fenced block::

    ```router-slot
    ```

Fenced ``widget:name`` blocks are resolved through the widget registry and
replaced with each widget's Markdown.  A failing widget becomes a quoted
error line; the rest of the page is unaffected.
"""

from __future__ import annotations

import functools
import logging
import re
from typing import Any

import anyio

from trellis._internal.invoke import invoke
from trellis.components.base import MARKDOWN_SLOT
from trellis.components.page import PageComponent
from trellis.context import ComponentContext
from trellis.markdown.links import rewrite_md_links
from trellis.rendering.base import HierarchicalRenderer
from trellis.rendering.pages import status_message
from trellis.routing.route import RouteInfo
from trellis.widgets.errors import WidgetParamsError
from trellis.widgets.parser import ParsedWidgetBlock, parse_widget_blocks
from trellis.widgets.resolve import resolve_widgets_recursively

logger = logging.getLogger("trellis.render")

_SLOT_RE = re.compile(r"```router-slot[ \t]*\n[ \t]*```")


class SsrMarkdownRenderer(HierarchicalRenderer):
    """Render URLs to Markdown.

    Usage::

        renderer = SsrMarkdownRenderer(core, widgets=registry)
        result = await renderer.render("/docs/intro")
    """

    label = "SSR Markdown"
    slot_placeholder = MARKDOWN_SLOT

    def inject_slot(self, parent: str, child: str) -> str:
        return _SLOT_RE.sub(lambda _: child, parent, count=1)

    def strip_slots(self, content: str) -> str:
        return _SLOT_RE.sub("", content).strip()

    def render_content(
        self, page: PageComponent, data: Any, params: dict[str, Any], context: ComponentContext,
    ) -> str:
        return page.render_markdown(data, params, context)

    async def post_process(
        self, content: str, route_info: RouteInfo, signal: anyio.Event | None = None,
    ) -> str:
        if self.widgets is not None:
            content = await resolve_widgets_recursively(
                content,
                route_info,
                parse=parse_widget_blocks,
                resolve_one=functools.partial(self._resolve_widget, signal=signal),
                max_depth=self.core.config.widget_max_depth,
            )
        base = self.core.config.markdown_base_path
        if base:
            content = rewrite_md_links(content, base)
        return content

    async def _resolve_widget(
        self,
        block: ParsedWidgetBlock,
        route_info: RouteInfo,
        *,
        signal: anyio.Event | None = None,
    ) -> str:
        name = block.widget_name
        if block.parse_error or block.params is None:
            return f"> **Error** (`{name}`): {block.parse_error}"

        widget = self.widgets.get(name) if self.widgets is not None else None
        if widget is None:
            logger.warning("[%s] Unknown widget %r on %s", self.label, name, route_info.pathname)
            return f"> **Error**: Unknown widget `{name}`"

        params = block.params
        try:
            problem = widget.validate_params(params)
            if problem:
                raise WidgetParamsError(name, problem)
            context = await self.core.build_widget_context(
                route_info, self.widgets.files_for(name), signal=signal,
            )
            data = await invoke(widget.get_data, params, context)
            return widget.render_markdown(data, params, context)
        except Exception as exc:
            logger.warning(
                "[%s] Widget %r failed on %s", self.label, name, route_info.pathname, exc_info=True,
            )
            return widget.render_markdown_error(exc)

    def render_redirect(self, to: str) -> str:
        return f"Redirect to: {to}"

    def render_status_page(self, status: int, pathname: str) -> str:
        return f"# {status_message(status)}\n\nPath: `{pathname}`"

    def render_error_page(self, error: BaseException, pathname: str) -> str:
        return f"# Error\n\nPath: `{pathname}`\n\n{error}"
