"""Components — pages and widgets share one capability interface."""

from trellis.components.base import HTML_SLOT, MARKDOWN_SLOT, Component
from trellis.components.page import DEFAULT_PAGE, PageComponent
from trellis.components.widget import WidgetComponent

__all__ = [
    "DEFAULT_PAGE",
    "HTML_SLOT",
    "MARKDOWN_SLOT",
    "Component",
    "PageComponent",
    "WidgetComponent",
]
