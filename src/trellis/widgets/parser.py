"""Widget block parsing and replacement.

Two invocation syntaxes are recognised.

Fenced blocks in Markdown::

    ```widget:widget-name
    {"key": "value"}
    ```

Widget tags in HTML::

    <widget-widget-name key="value"></widget-widget-name>

Parsing never raises: malformed JSON params are captured on the block as
``parse_error`` so one bad block cannot abort a render.
"""

from __future__ import annotations

import html
import json
import re
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

# Marks a widget tag whose content was already rendered server-side
SSR_ATTR = "data-ssr"

_FENCED_RE = re.compile(r"```widget:(?P<name>[a-z][a-z0-9-]*)\n(?P<params>.*?)```", re.DOTALL)
_TAG_OPEN_RE = re.compile(r"<widget-(?P<name>[a-z][a-z0-9-]*)(?P<attrs>\s[^>]*)?>", re.IGNORECASE)
_ATTR_RE = re.compile(
    r"""([a-z_][a-z0-9_.:-]*)(?:="([^"]*)"|='([^']*)'|=([^\s>]+))?""",
    re.IGNORECASE,
)
_KEBAB_RE = re.compile(r"-([a-z])")


@dataclass(frozen=True, slots=True)
class ParsedWidgetBlock:
    """A located widget invocation inside rendered content.

    Attributes:
        full_match: The matched text, fences or tags included.
        widget_name: Name from ``widget:{name}`` or ``<widget-{name}>``.
        params: Parsed params, or ``None`` when they could not be parsed.
        parse_error: Why params could not be parsed, if they could not.
        start_index: Offset of the block in the content.
        end_index: Offset just past the block.
        attrs: Raw attribute text of an HTML tag (empty for fenced blocks).
    """

    full_match: str
    widget_name: str
    params: dict[str, Any] | None
    start_index: int
    end_index: int
    parse_error: str | None = None
    attrs: str = ""


def parse_widget_blocks(content: str) -> list[ParsedWidgetBlock]:
    """Parse all fenced widget blocks, in document order."""
    blocks: list[ParsedWidgetBlock] = []

    for match in _FENCED_RE.finditer(content):
        params, error = _parse_json_params(match.group("params").strip())
        blocks.append(
            ParsedWidgetBlock(
                full_match=match.group(0),
                widget_name=match.group("name"),
                params=params,
                parse_error=error,
                start_index=match.start(),
                end_index=match.end(),
            )
        )

    return blocks


def _parse_json_params(raw: str) -> tuple[dict[str, Any] | None, str | None]:
    # Empty params are valid and mean {}
    if not raw:
        return {}, None
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError as exc:
        return None, f"Invalid JSON: {exc}"
    if not isinstance(parsed, dict):
        return None, "Params must be a JSON object"
    return parsed, None


def parse_widget_tags(content: str) -> list[ParsedWidgetBlock]:
    """Parse unresolved ``<widget-*>`` tags, in document order.

    Tags carrying ``data-ssr`` were rendered by an earlier pass and are
    skipped, but tags nested inside them are still found.
    """
    blocks: list[ParsedWidgetBlock] = []
    position = 0

    while True:
        match = _TAG_OPEN_RE.search(content, position)
        if match is None:
            break

        name = match.group("name").lower()
        attrs = (match.group("attrs") or "").strip()

        if _has_attr(attrs, SSR_ATTR):
            position = match.end()
            continue

        close = re.compile(f"</widget-{re.escape(name)}>", re.IGNORECASE).search(
            content, match.end(),
        )
        if close is None:
            position = match.end()
            continue

        end = close.end()
        blocks.append(
            ParsedWidgetBlock(
                full_match=content[match.start():end],
                widget_name=name,
                params=parse_attrs(attrs),
                start_index=match.start(),
                end_index=end,
                attrs=attrs,
            )
        )
        position = end

    return blocks


def parse_attrs(attrs: str) -> dict[str, Any]:
    """Parse an HTML attribute string into widget params.

    Attribute names become camelCase keys (``coin-id`` -> ``coinId``), the
    inverse of the attribute naming used for fenced widget blocks.
    Values are parsed as JSON where possible and kept as strings otherwise;
    bare attributes become ``""``.
    """
    params: dict[str, Any] = {}
    if not attrs:
        return params

    for match in _ATTR_RE.finditer(attrs):
        name = match.group(1).lower()
        if name == SSR_ATTR:
            continue
        key = _KEBAB_RE.sub(lambda m: m.group(1).upper(), name)
        raw = next((g for g in match.groups()[1:] if g is not None), None)
        if raw is None:
            params[key] = ""
            continue
        value = html.unescape(raw)
        try:
            params[key] = json.loads(value)
        except json.JSONDecodeError:
            params[key] = value

    return params


def _has_attr(attrs: str, name: str) -> bool:
    return any(match.group(1).lower() == name for match in _ATTR_RE.finditer(attrs))


def replace_widget_blocks(
    content: str,
    replacements: Iterable[tuple[ParsedWidgetBlock, str]],
) -> str:
    """Splice replacements into *content*, from the last block backward.

    Working from the end means earlier splices never shift the offsets of
    blocks not yet replaced, whatever order the replacements arrive in.
    """
    ordered = sorted(replacements, key=lambda item: item[0].start_index, reverse=True)

    result = content
    for block, replacement in ordered:
        result = result[:block.start_index] + replacement + result[block.end_index:]
    return result
