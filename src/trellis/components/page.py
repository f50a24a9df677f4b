"""Page component — params come from the URL, context carries file content.

Default implementations follow the file fallback table:

- ``render_html``: html file -> md file in ``<mark-down>`` -> bare slot
- ``render_markdown``: md file -> fenced ``router-slot`` block
- ``get_data``: no data
- ``get_title``: no title

A route module exports its page as ``page``::

    # routes/projects/[id].py
    from trellis import NotFound, PageComponent

    class ProjectPage(PageComponent):
        async def get_data(self, params, context):
            project = await store.get(params["id"])
            if project is None:
                raise NotFound(f"No project {params['id']}")
            return project

        def get_title(self, data, params, context):
            return data.name

    page = ProjectPage()
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from trellis.components.base import HTML_SLOT, MARKDOWN_SLOT, Component, escape

if TYPE_CHECKING:
    from trellis.context import ComponentContext


class PageComponent(Component):
    """A route level: a page or a layout wrapping its child routes."""

    name = "page"

    def render_html(self, data: Any, params: dict[str, Any], context: ComponentContext) -> str:
        files = context.files
        style = f"<style>{files.css}</style>\n" if files.css else ""

        if files.html:
            content = style + files.html
            # An empty <mark-down> in the template is filled with the md file
            if files.md and "<mark-down></mark-down>" in content:
                content = content.replace(
                    "<mark-down></mark-down>", f"<mark-down>{escape(files.md)}</mark-down>", 1,
                )
            return content

        if files.md:
            return f"{style}<mark-down>{escape(files.md)}</mark-down>\n{HTML_SLOT}"

        return HTML_SLOT

    def render_markdown(self, data: Any, params: dict[str, Any], context: ComponentContext) -> str:
        if context.files.md:
            return context.files.md
        return MARKDOWN_SLOT

    def get_title(self, data: Any, params: dict[str, Any], context: ComponentContext) -> str | None:
        return None


DEFAULT_PAGE = PageComponent()
"""Shared instance used for routes without a behavior module."""
