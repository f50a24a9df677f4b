"""Hierarchical rendering — the format-agnostic render pipeline.

``render(url)`` matches the URL, then composes the matched route with all
of its ancestors, root first.  Each level renders into its parent's slot
placeholder; placeholders nobody filled are stripped at the end.

Format adapters (HTML, Markdown) supply only the primitives:

- ``slot_placeholder`` / ``inject_slot`` / ``strip_slots``
- ``render_content`` — which component callback produces the format
- ``post_process`` — per-level expansion (widgets, Markdown, links)
- ``render_redirect`` / ``render_status_page`` / ``render_error_page``

Failure handling::

    no match              -> status page 404
    redirect route        -> RenderResult(redirect=..., content=None)
    HTTPError in a level  -> status page for that status
    any other exception   -> error boundary -> error handler -> error page (500)
    signal fired          -> RenderCancelled (never a partial result)
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, ClassVar
from urllib.parse import urlsplit

import anyio

from trellis._internal.invoke import invoke
from trellis.components.page import PageComponent
from trellis.context import ComponentContext
from trellis.errors import HTTPError, RenderCancelled
from trellis.http.query import QueryParams
from trellis.rendering.core import PASSTHROUGH_ROOT, RenderingCore
from trellis.rendering.types import RedirectConfig, RenderResult, RouteContent
from trellis.routing.route import ResolvedRoute, RouteInfo
from trellis.routing.tree import RouteNode
from trellis.security.urls import assert_safe_redirect
from trellis.widgets.registry import WidgetRegistry

logger = logging.getLogger("trellis.render")


class HierarchicalRenderer(ABC):
    """Base class for the SSR renderers.

    Args:
        core: Shared rendering core for the route tree.
        widgets: Registry used to resolve widget blocks, if any.
    """

    label: ClassVar[str] = "renderer"
    slot_placeholder: ClassVar[str] = ""

    def __init__(self, core: RenderingCore, *, widgets: WidgetRegistry | None = None) -> None:
        self.core = core
        self.widgets = widgets

    # -- Entry point --

    async def render(self, url: str, signal: anyio.Event | None = None) -> RenderResult:
        """Render *url*.

        Args:
            url: Path with optional query string (``/projects/42?tab=tasks``).
            signal: Cancellation signal.  Once set, in-flight loads are
                cancelled and ``RenderCancelled`` is raised.

        Raises:
            RenderCancelled: The signal fired before the render finished.
        """
        if signal is None:
            return await self._render(url, None)
        if signal.is_set():
            raise RenderCancelled(url)

        result: RenderResult | None = None
        async with anyio.create_task_group() as tg:

            async def _watch() -> None:
                await signal.wait()
                tg.cancel_scope.cancel()

            tg.start_soon(_watch)
            result = await self._render(url, signal)
            tg.cancel_scope.cancel()

        if result is None or signal.is_set():
            logger.debug("[%s] Render of %s cancelled", self.label, url)
            raise RenderCancelled(url)
        return result

    async def _render(self, url: str, signal: anyio.Event | None) -> RenderResult:
        parts = urlsplit(url)
        pathname = parts.path or "/"

        if self.core.config.redirect_trailing_slash:
            normalized = self.core.normalize_url(pathname)
            if normalized != pathname:
                query = f"?{parts.query}" if parts.query else ""
                return RenderResult(
                    content=None,
                    status=self.core.config.default_redirect_status,
                    redirect=normalized + query,
                )

        pathname = self.core.normalize_url(pathname)
        query = QueryParams(parts.query)

        resolved = self.core.match(url)
        if resolved is None:
            return await self._render_status(404, pathname, query, signal)

        try:
            if resolved.node.is_redirect:
                return await self._resolve_redirect(resolved)

            route_info = self.core.to_route_info(resolved, url)
            page = await self.render_page(route_info, resolved, signal)
            return RenderResult(content=page.content, status=200, title=page.title)
        except HTTPError as exc:
            logger.debug("[%s] %s raised status %d", self.label, pathname, exc.status)
            return await self._render_status(exc.status, pathname, query, signal)
        except Exception as exc:
            logger.exception("[%s] Error rendering %s", self.label, pathname)
            return await self._render_failure(exc, pathname, signal)

    # -- Pages --

    async def render_page(
        self,
        route_info: RouteInfo,
        resolved: ResolvedRoute,
        signal: anyio.Event | None = None,
    ) -> RouteContent:
        """Compose the matched route with its ancestors, root to leaf.

        Levels render sequentially: a child's data fetch never starts
        before its parent has rendered.  The deepest non-empty title wins.
        """
        hierarchy = self.core.build_route_hierarchy(route_info.pattern)

        result: str | None = None
        title: str | None = None
        parent_pattern = ""

        for index, pattern in enumerate(hierarchy):
            node = self.core.route_at(pattern)
            if node is None:
                continue
            # A wildcard route reached again at a shorter pattern renders once
            if node is resolved.node and pattern != resolved.pattern:
                continue

            is_leaf = index == len(hierarchy) - 1
            level = await self.render_route_content(
                route_info, node, is_leaf=is_leaf, signal=signal,
            )

            if level.title:
                title = level.title

            if result is None:
                result = level.content
            else:
                injected = self.inject_slot(result, level.content)
                if injected == result:
                    logger.warning(
                        "[%s] Route %r has no slot for child route %r to render into",
                        self.label, parent_pattern, pattern,
                    )
                result = injected

            parent_pattern = pattern

        return RouteContent(content=self.strip_slots(result or ""), title=title)

    async def render_route_content(
        self,
        route_info: RouteInfo,
        node: RouteNode,
        *,
        is_leaf: bool = False,
        signal: anyio.Event | None = None,
    ) -> RouteContent:
        """Render one route level: load, build context, fetch data, render, post-process."""
        if node is PASSTHROUGH_ROOT:
            return RouteContent(content=self.slot_placeholder)

        page = await self.core.load_page(node)
        context = await self.core.build_component_context(
            route_info, node, signal=signal, is_leaf=is_leaf,
        )
        params = dict(route_info.params)

        data = await invoke(page.get_data, params, context)
        content = self.render_content(page, data, params, context)
        title = await invoke(page.get_title, data, params, context)

        content = await self.post_process(content, route_info, signal)
        return RouteContent(content=content, title=title)

    # -- Terminal cases --

    async def _resolve_redirect(self, resolved: ResolvedRoute) -> RenderResult:
        target = await self.core.load_export(resolved.node.redirect or "", "redirect")
        redirect = RedirectConfig.coerce(
            target, default_status=self.core.config.default_redirect_status,
        )
        assert_safe_redirect(redirect.to)
        return RenderResult(content=None, status=redirect.status, redirect=redirect.to)

    async def _render_status(
        self,
        status: int,
        pathname: str,
        query: QueryParams,
        signal: anyio.Event | None,
    ) -> RenderResult:
        status_page = self.core.get_status_page(status)
        if status_page is not None:
            route_info = RouteInfo(
                pathname=pathname,
                pattern=status_page.pattern,
                params={},
                query=query,
                url=pathname,
            )
            try:
                level = await self.render_route_content(
                    route_info, status_page.node, is_leaf=True, signal=signal,
                )
                return RenderResult(
                    content=self.strip_slots(level.content), status=status, title=level.title,
                )
            except Exception:
                logger.warning(
                    "[%s] Failed to render %d status page for %s",
                    self.label, status, pathname, exc_info=True,
                )
        return RenderResult(content=self.render_status_page(status, pathname), status=status)

    async def _render_failure(
        self,
        error: Exception,
        pathname: str,
        signal: anyio.Event | None,
    ) -> RenderResult:
        # The boundary lookup commits to one branch and never backtracks
        boundary = self.core.trie.find_error_boundary(pathname)
        if boundary:
            result = await self._try_error_module(boundary, pathname, "boundary", signal)
            if result is not None:
                return result

        if self.core.error_handler:
            result = await self._try_error_module(
                self.core.error_handler, pathname, "handler", signal,
            )
            if result is not None:
                return result

        return RenderResult(content=self.render_error_page(error, pathname), status=500)

    async def _try_error_module(
        self,
        module_path: str,
        pathname: str,
        kind: str,
        signal: anyio.Event | None,
    ) -> RenderResult | None:
        try:
            page = await self.core.load_export(module_path, "page")
            context = ComponentContext(pathname=pathname, pattern="", signal=signal)
            data = await invoke(page.get_data, {}, context)
            content = self.render_content(page, data, {}, context)
        except Exception:
            logger.exception(
                "[%s] Error %s %s failed for %s", self.label, kind, module_path, pathname,
            )
            return None
        return RenderResult(content=self.strip_slots(content), status=500)

    # -- Format primitives --

    @abstractmethod
    def inject_slot(self, parent: str, child: str) -> str:
        """Replace the first slot placeholder in *parent* with *child*."""

    @abstractmethod
    def strip_slots(self, content: str) -> str:
        """Remove unfilled slot placeholders and trim the result."""

    @abstractmethod
    def render_content(
        self, page: PageComponent, data: Any, params: dict[str, Any], context: ComponentContext,
    ) -> str:
        """Call the component's render callback for this format."""

    async def post_process(
        self, content: str, route_info: RouteInfo, signal: anyio.Event | None = None,
    ) -> str:
        """Expand one level's rendered content. Default: unchanged."""
        return content

    @abstractmethod
    def render_redirect(self, to: str) -> str:
        """Body for a redirect to *to*, for callers that want one."""

    @abstractmethod
    def render_status_page(self, status: int, pathname: str) -> str: ...

    @abstractmethod
    def render_error_page(self, error: BaseException, pathname: str) -> str: ...
