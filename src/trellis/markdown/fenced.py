"""Post-processing of rendered Markdown HTML.

A Markdown renderer turns a fenced ``router-slot`` or ``widget:name`` block
into an ordinary ``<pre><code>`` element.  These helpers convert such
elements into ``<router-slot>`` and ``<widget-name>`` tags that the HTML
renderer understands.  Both accept the class form
(``class="language-router-slot"``) and the data attribute form
(``data-language="router-slot"``).
"""

from __future__ import annotations

import json
import re
from collections.abc import Callable

_FENCED_SLOT_RE = re.compile(
    r'<pre><code (?:data-language|class)="(?:language-)?router-slot">(.*?)</code></pre>',
    re.IGNORECASE | re.DOTALL,
)
_FENCED_WIDGET_RE = re.compile(
    r'<pre><code (?:data-language|class)="(?:language-)?widget:([a-z][a-z0-9-]*)">'
    r"(.*?)</code></pre>",
    re.IGNORECASE | re.DOTALL,
)
_CAMEL_RE = re.compile(r"([A-Z])")


def process_fenced_slots(html: str, unescape: Callable[[str], str]) -> str:
    """Convert fenced ``router-slot`` code blocks into ``<router-slot>`` elements."""
    return _FENCED_SLOT_RE.sub(
        lambda m: f"<router-slot>{unescape(m.group(1).strip())}</router-slot>",
        html,
    )


def process_fenced_widgets(html: str, unescape: Callable[[str], str]) -> str:
    """Convert fenced ``widget:name`` code blocks into widget tags.

    JSON params become attributes: ``{"coinId": "btc"}`` turns into
    ``coin-id="btc"``, which the tag parser reads back as ``coinId``;
    non-string values are JSON-encoded.  Empty or
    malformed params produce a bare tag.
    """

    def _replace(match: re.Match[str]) -> str:
        tag = f"widget-{match.group(1).lower()}"
        decoded = unescape(match.group(2).strip())
        if not decoded:
            return f"<{tag}></{tag}>"
        try:
            params = json.loads(decoded)
        except json.JSONDecodeError:
            return f"<{tag}></{tag}>"
        if not isinstance(params, dict) or not params:
            return f"<{tag}></{tag}>"
        return f"<{tag} {_to_attrs(params)}></{tag}>"

    return _FENCED_WIDGET_RE.sub(_replace, html)


def _to_attrs(params: dict[str, object]) -> str:
    attrs = []
    for key, value in params.items():
        name = _CAMEL_RE.sub(r"-\1", key).lower()
        text = value if isinstance(value, str) else json.dumps(value)
        escaped = text.replace("&", "&amp;").replace('"', "&quot;")
        attrs.append(f'{name}="{escaped}"')
    return " ".join(attrs)
