"""Widget registry.

The canonical place widgets live.  Both SSR renderers resolve widgets by
name through it.  Pages are not registered here; they live in the route
tree.
"""

from __future__ import annotations

from collections.abc import Iterator

from trellis.components.widget import WidgetComponent
from trellis.errors import ConfigurationError
from trellis.routing.tree import RouteFiles


class WidgetRegistry:
    """Name -> widget lookup, with optional companion file overrides.

    Usage::

        widgets = WidgetRegistry()
        widgets.add(StatCard())
        widgets.add(Hero(), files=RouteFiles(html="widgets/hero.html"))
    """

    __slots__ = ("_files", "_widgets")

    def __init__(self, widgets: list[WidgetComponent] | None = None) -> None:
        self._widgets: dict[str, WidgetComponent] = {}
        self._files: dict[str, RouteFiles] = {}
        for widget in widgets or ():
            self.add(widget)

    def add(self, widget: WidgetComponent, *, files: RouteFiles | None = None) -> None:
        """Register *widget* under its name.

        *files* overrides the companion files the widget class declares.
        """
        if not widget.name or widget.name == WidgetComponent.name:
            msg = f"{type(widget).__name__} must set a unique widget name"
            raise ConfigurationError(msg)
        self._widgets[widget.name] = widget
        if files is not None:
            self._files[widget.name] = files

    def get(self, name: str) -> WidgetComponent | None:
        """Look up a widget by name."""
        return self._widgets.get(name)

    def files_for(self, name: str) -> RouteFiles | None:
        """Companion files for the named widget (override first, then declared)."""
        if name in self._files:
            return self._files[name]
        widget = self._widgets.get(name)
        return widget.files if widget is not None else None

    def __contains__(self, name: object) -> bool:
        return name in self._widgets

    def __iter__(self) -> Iterator[WidgetComponent]:
        return iter(self._widgets.values())

    def __len__(self) -> int:
        return len(self._widgets)
