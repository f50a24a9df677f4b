"""Recursive widget resolution.

Given rendered content, find every widget block, resolve each one, and
splice the results back in.  Widget output may introduce further blocks,
so the process repeats until no blocks remain or the pass cap is reached.

Pipeline per pass::

    1. Parse blocks (format-specific parser)
    2. Resolve every block concurrently (anyio task group)
    3. Replace blocks from the last offset backward
    4. Re-parse the result; stop when nothing is left
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Iterable

import anyio

from trellis.routing.route import RouteInfo
from trellis.widgets.errors import WidgetRecursionError
from trellis.widgets.parser import ParsedWidgetBlock, replace_widget_blocks

logger = logging.getLogger("trellis.widgets")

DEFAULT_MAX_DEPTH = 8

Parse = Callable[[str], list[ParsedWidgetBlock]]
ResolveOne = Callable[[ParsedWidgetBlock, RouteInfo], Awaitable[str]]
Replace = Callable[[str, Iterable[tuple[ParsedWidgetBlock, str]]], str]


async def resolve_widgets_recursively(
    content: str,
    route_info: RouteInfo,
    *,
    parse: Parse,
    resolve_one: ResolveOne,
    replace: Replace = replace_widget_blocks,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> str:
    """Expand widget blocks in *content* until none remain.

    Args:
        content: Rendered page (or layout) content.
        route_info: The page's route info; every widget sees it.
        parse: Finds blocks in content, in document order.
        resolve_one: Produces the replacement for one block.  Expected to
            turn widget failures into inline error fragments itself.
        replace: Splices replacements into content.
        max_depth: Maximum number of passes.

    Raises:
        WidgetRecursionError: Blocks are still present after *max_depth*
            passes (a widget keeps emitting widgets).
    """
    for _ in range(max_depth):
        blocks = parse(content)
        if not blocks:
            return content

        results: list[str] = [""] * len(blocks)

        async def _resolve(index: int, block: ParsedWidgetBlock) -> None:
            results[index] = await resolve_one(block, route_info)

        async with anyio.create_task_group() as tg:
            for index, block in enumerate(blocks):
                tg.start_soon(_resolve, index, block)

        content = replace(content, zip(blocks, results, strict=True))

    remaining = parse(content)
    if remaining:
        names = sorted({block.widget_name for block in remaining})
        logger.error("Widget expansion for %s exceeded %d passes", route_info.pathname, max_depth)
        raise WidgetRecursionError(max_depth, names)
    return content
