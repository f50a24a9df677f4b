"""Markdown link rewriting.

Rewrites internal absolute links so Markdown served under a prefix stays
navigable: ``[About](/about)`` becomes ``[About](/md/about)``.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

_FENCE = "```"


def rewrite_md_links(markdown: str, base: str, skip_prefixes: Iterable[str] = ()) -> str:
    """Prefix absolute inline and reference links with *base*.

    Lines inside fenced code blocks are left alone, as are links already
    under one of *skip_prefixes* (``/html``, ``/md``, ...).
    """
    base = base.rstrip("/")
    if not base:
        return markdown

    prefix = base + "/"
    skip = [p.strip("/") + "/" for p in (base, *skip_prefixes) if p.strip("/")]
    lookahead = f"(?!{'|'.join(re.escape(s) for s in skip)})" if skip else ""
    inline_re = re.compile(r"\]\(/" + lookahead)
    reference_re = re.compile(r"^(\[[^\]]+\]:\s+)/" + lookahead)

    lines = markdown.split("\n")
    in_code = False
    for index, line in enumerate(lines):
        if line.startswith(_FENCE):
            in_code = not in_code
            continue
        if in_code:
            continue
        line = inline_re.sub(lambda _: "](" + prefix, line)
        lines[index] = reference_re.sub(lambda m: m.group(1) + prefix, line)

    return "\n".join(lines)
