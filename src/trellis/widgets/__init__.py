"""Widgets — named fragments embedded in page content.

Pages invoke widgets with fenced ``widget:name`` blocks (Markdown) or
``<widget-name>`` tags (HTML).  The SSR renderers find them, resolve each
through a ``WidgetRegistry``, and splice the output back in, repeating
until no unresolved blocks remain.
"""

from trellis.widgets.builtin import BreadcrumbWidget
from trellis.widgets.errors import (
    UnknownWidgetError,
    WidgetError,
    WidgetParamsError,
    WidgetRecursionError,
)
from trellis.widgets.parser import (
    ParsedWidgetBlock,
    parse_attrs,
    parse_widget_blocks,
    parse_widget_tags,
    replace_widget_blocks,
)
from trellis.widgets.registry import WidgetRegistry
from trellis.widgets.resolve import resolve_widgets_recursively

__all__ = [
    "BreadcrumbWidget",
    "ParsedWidgetBlock",
    "UnknownWidgetError",
    "WidgetError",
    "WidgetParamsError",
    "WidgetRecursionError",
    "WidgetRegistry",
    "parse_attrs",
    "parse_widget_blocks",
    "parse_widget_tags",
    "replace_widget_blocks",
    "resolve_widgets_recursively",
]
