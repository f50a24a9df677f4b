"""Component base class shared by pages and widgets.

Every renderable unit implements the same small capability set:

- ``get_data(params, context)`` — fetch or compute data (sync or async)
- ``render_markdown(data, params, context)`` — canonical text form
- ``render_html(data, params, context)`` — HTML form

Renderers depend only on these methods, never on concrete classes.
"""

from __future__ import annotations

import html
from typing import TYPE_CHECKING, Any, ClassVar

if TYPE_CHECKING:
    from trellis.context import ComponentContext
    from trellis.routing.tree import RouteFiles

# Slot placeholders a parent leaves for its child route's content
HTML_SLOT = "<router-slot></router-slot>"
MARKDOWN_SLOT = "```router-slot\n```"


def escape(text: str) -> str:
    """Escape text for HTML, including backticks (Markdown fences survive a round trip)."""
    return html.escape(text, quote=True).replace("`", "&#96;")


class Component:
    """Base class for pages and widgets.

    Subclasses set ``name`` and override ``get_data`` and the render
    methods they need.
    """

    name: ClassVar[str] = "component"

    # Companion file paths (html, md, css) resolved before rendering
    files: ClassVar[RouteFiles | None] = None

    def get_data(self, params: dict[str, Any], context: ComponentContext) -> Any:
        """Fetch or compute data. Default: no data."""
        return None

    def render_markdown(self, data: Any, params: dict[str, Any], context: ComponentContext) -> str:
        return ""

    def render_html(self, data: Any, params: dict[str, Any], context: ComponentContext) -> str:
        """Render as HTML.

        Default: the Markdown rendering inside a ``<mark-down>`` block,
        which the HTML renderer expands server-side.
        """
        markdown = self.render_markdown(data, params, context)
        return (
            f'<div class="c-markdown" data-component="{escape(self.name)}">'
            f"<mark-down>{escape(markdown)}</mark-down></div>"
        )

    def validate_params(self, params: dict[str, Any]) -> str | None:
        """Return an error message if *params* are invalid, else ``None``."""
        return None

    def render_error(self, error: BaseException) -> str:
        """Render an error as an inline HTML marker."""
        return (
            f'<div class="c-error" data-component="{escape(self.name)}">'
            f"Error: {escape(str(error))}</div>"
        )

    def render_markdown_error(self, error: BaseException) -> str:
        """Render an error as a quoted Markdown line."""
        return f"> **Error** (`{self.name}`): {error}"
