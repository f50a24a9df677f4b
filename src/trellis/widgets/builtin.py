"""Built-in widgets."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from trellis.components.base import escape
from trellis.components.widget import WidgetComponent

if TYPE_CHECKING:
    from trellis.context import ComponentContext

HTML_SEPARATOR = " › "
MARKDOWN_SEPARATOR = " > "


@dataclass(frozen=True, slots=True)
class Crumb:
    label: str
    href: str


class BreadcrumbWidget(WidgetComponent):
    """Breadcrumb navigation built from the page's pathname.

    Usage in HTML::

        <widget-breadcrumb></widget-breadcrumb>
        <widget-breadcrumb separator=" / "></widget-breadcrumb>

    Usage in Markdown::

        ```widget:breadcrumb
        {}
        ```

    Segments under *base_path* are shown without it; links keep it.
    """

    name = "breadcrumb"

    def __init__(self, base_path: str = "") -> None:
        self.base_path = base_path.rstrip("/")

    def get_data(self, params: dict[str, Any], context: ComponentContext) -> list[Crumb]:
        base = self.base_path
        pathname = context.pathname
        if base and pathname.startswith(base):
            pathname = pathname[len(base):] or "/"

        crumbs = [Crumb(label="Home", href=base + "/")]
        accumulated = base
        for part in (p for p in pathname.split("/") if p):
            accumulated += "/" + part
            crumbs.append(Crumb(label=_label(part), href=accumulated))
        return crumbs

    def render_html(
        self, data: list[Crumb] | None, params: dict[str, Any], context: ComponentContext,
    ) -> str:
        if not data:
            return ""
        separator = params.get("separator", HTML_SEPARATOR)
        items = [
            f'<a href="{escape(crumb.href)}">{escape(crumb.label)}</a>' for crumb in data[:-1]
        ]
        items.append(f'<span aria-current="page">{escape(data[-1].label)}</span>')
        return f'<nav aria-label="Breadcrumb">{escape(str(separator)).join(items)}</nav>'

    def render_markdown(
        self, data: list[Crumb] | None, params: dict[str, Any], context: ComponentContext,
    ) -> str:
        if not data:
            return ""
        separator = params.get("separator", MARKDOWN_SEPARATOR)
        items = [f"[{crumb.label}]({crumb.href})" for crumb in data[:-1]]
        items.append(f"**{data[-1].label}**")
        return str(separator).join(items)


def _label(segment: str) -> str:
    return segment[:1].upper() + segment[1:].replace("-", " ")
