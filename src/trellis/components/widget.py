"""Widget component — an embeddable, independently data-fetching fragment.

Widgets are invoked from page content and resolved by name through a
``WidgetRegistry``:

- Markdown: a fenced block naming the widget with JSON params::

      ```widget:stat-card
      {"metric": "visits"}
      ```

- HTML: a ``<widget-stat-card metric="visits"></widget-stat-card>`` tag.

Default fallback chains (parallel to ``PageComponent``):

- ``render_html``: html file -> md file in ``<mark-down>`` -> base default
- ``render_markdown``: md file -> empty string
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from trellis.components.base import Component, escape

if TYPE_CHECKING:
    from trellis.context import ComponentContext


class WidgetComponent(Component):
    """Base class for widgets. Subclasses set a unique kebab-case ``name``."""

    name = "widget"

    def render_html(self, data: Any, params: dict[str, Any], context: ComponentContext) -> str:
        files = context.files
        style = f"<style>{files.css}</style>\n" if files.css else ""

        if files.html:
            return style + files.html

        if files.md:
            return f"{style}<mark-down>{escape(files.md)}</mark-down>"

        return style + super().render_html(data, params, context)

    def render_markdown(self, data: Any, params: dict[str, Any], context: ComponentContext) -> str:
        return context.files.md or ""
