"""Widget layer error hierarchy."""

from trellis.errors import TrellisError


class WidgetError(TrellisError):
    """Base for all trellis.widgets errors."""


class UnknownWidgetError(WidgetError):
    """Raised when a block names a widget missing from the registry."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unknown widget {name!r}")


class WidgetParamsError(WidgetError):
    """Raised when a block's params are malformed or fail validation."""

    def __init__(self, name: str, detail: str) -> None:
        self.name = name
        self.detail = detail
        super().__init__(f"Invalid params for widget {name!r}: {detail}")


class WidgetRecursionError(WidgetError):
    """Raised when widget output keeps producing widget blocks past the depth cap."""

    def __init__(self, max_depth: int, names: list[str]) -> None:
        self.max_depth = max_depth
        self.names = names
        super().__init__(
            f"Widget expansion exceeded {max_depth} passes; "
            f"still unresolved: {', '.join(names)}"
        )
