"""Markdown-to-HTML for the HTML renderer's ``<mark-down>`` expansion.

``SsrHtmlRenderer`` takes any object with ``render(source) -> str``.
``MarkdownRenderer`` is the patitas-backed one shipped with trellis;
patitas is an optional dependency (``trellis-render[markdown]``).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

from trellis.markdown.errors import MarkdownNotInstalledError

if TYPE_CHECKING:
    from patitas import Markdown


class MarkdownRendererProtocol(Protocol):
    def render(self, source: str) -> str: ...


class MarkdownRenderer:
    """patitas ``Markdown`` behind the ``render(source)`` interface.

    Args:
        plugins: patitas plugins, all of them when omitted.
        highlight: Syntax-highlight fenced code.  Leave off for pages with
            fenced slots or widgets; highlighted blocks are not converted.
    """

    __slots__ = ("_markdown",)

    def __init__(self, *, plugins: list[str] | None = None, highlight: bool = False) -> None:
        markdown_class = _patitas_markdown()
        self._markdown: Markdown = markdown_class(plugins=plugins or ["all"], highlight=highlight)

    def render(self, source: str) -> str:
        return self._markdown(source) if source else ""


def _patitas_markdown() -> type[Markdown]:
    try:
        from patitas import Markdown
    except ImportError:
        msg = (
            "MarkdownRenderer needs the optional 'patitas' package: "
            "pip install trellis-render[markdown]"
        )
        raise MarkdownNotInstalledError(msg) from None
    return Markdown
