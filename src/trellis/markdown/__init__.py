"""Markdown support for trellis.

- ``MarkdownRenderer`` — default patitas adapter for the HTML renderer's
  ``<mark-down>`` expansion
- ``process_fenced_slots`` / ``process_fenced_widgets`` — convert fenced
  blocks in rendered HTML into slot and widget tags
- ``rewrite_md_links`` — prefix absolute links in Markdown output

Requires ``patitas`` for ``MarkdownRenderer``::

    pip install trellis-render[markdown]
"""

from trellis.markdown.errors import MarkdownError, MarkdownNotInstalledError
from trellis.markdown.fenced import process_fenced_slots, process_fenced_widgets
from trellis.markdown.links import rewrite_md_links
from trellis.markdown.renderer import MarkdownRenderer, MarkdownRendererProtocol

__all__ = [
    "MarkdownError",
    "MarkdownNotInstalledError",
    "MarkdownRenderer",
    "MarkdownRendererProtocol",
    "process_fenced_slots",
    "process_fenced_widgets",
    "rewrite_md_links",
]
