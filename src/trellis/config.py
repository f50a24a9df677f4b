"""Renderer configuration.

RenderConfig is a frozen dataclass — immutable after creation, IDE-autocompletable,
no string-key dict lookups.
"""

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, slots=True)
class RenderConfig:
    """Rendering configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = RenderConfig(root_dir="site", widget_max_depth=4)
    """

    # Files
    root_dir: str | Path = "."  # Base directory for the default file reader and module loader
    cache_files: bool = True  # Memoize file reads per absolute path for the core's lifetime

    # Redirects
    redirect_trailing_slash: bool = True  # "/about/" -> 301 "/about"
    default_redirect_status: int = 301

    # Widgets
    widget_max_depth: int = 8  # Passes of nested widget expansion before giving up

    # Links
    markdown_base_path: str = ""  # Prefix applied to absolute links in Markdown output

    # HTML
    expand_markdown: bool = True  # Expand <mark-down> blocks server-side when a renderer is set
