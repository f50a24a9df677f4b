"""Rendering core — the state shared by every renderer over one route tree.

Holds the resolver, the module and file caches, the context enrichment
callback, and the caller's status pages and error handler.  Renderers
never touch the tree, the caches, or I/O directly; everything goes
through here.

One core per route tree.  Concurrent renders against the same core are
safe: the trie is immutable and the caches are append-only with
at-most-once-in-flight loading per key.
"""

from __future__ import annotations

import importlib.util
import logging
import re
from collections.abc import Mapping
from pathlib import Path
from types import ModuleType
from typing import Any
from urllib.parse import urlsplit

import anyio
import anyio.to_thread

from trellis._internal.invoke import invoke
from trellis._internal.once import OnceCache
from trellis._internal.types import ContextEnricher, FileReader, ModuleLoader
from trellis.components.page import DEFAULT_PAGE, PageComponent
from trellis.config import RenderConfig
from trellis.context import ComponentContext, FileContents
from trellis.errors import ConfigurationError
from trellis.http.query import QueryParams
from trellis.routing.route import ResolvedRoute, RouteInfo
from trellis.routing.tree import RouteFiles, RouteNode, load_route_tree
from trellis.routing.trie import RouteTrie, normalize_path

logger = logging.getLogger("trellis.core")

ROOT_PATTERN = "/"

# Stands in for "/" when the tree has no explicit root; renders a bare slot
PASSTHROUGH_ROOT = RouteNode()

_TEXT_KINDS = ("html", "md", "css")


class RenderingCore:
    """Resolver, caches, and context construction for one route tree.

    Usage::

        core = RenderingCore(
            load_route_tree("routes.manifest.json"),
            module_loaders={"routes/projects.py": load_projects},
            status_pages={404: RouteNode(files=RouteFiles(md="routes/404.md"))},
            config=RenderConfig(root_dir="site"),
        )

    Args:
        tree: Route tree, its JSON/mapping form, or a prebuilt ``RouteTrie``.
        read_file: Async ``path -> text``.  Defaults to reading
            ``config.root_dir / path``.
        module_loaders: Pre-bundled loaders keyed by module path.  Paths
            without a loader are imported from ``config.root_dir``.
        extend_context: Sync or async ``ctx -> ctx`` enrichment; its
            return value is used verbatim.
        status_pages: Route nodes rendered for specific statuses.
        error_handler: Module path of the site-wide error page.
        config: Rendering configuration.
    """

    __slots__ = (
        "_extend_context",
        "_files",
        "_module_loaders",
        "_modules",
        "_read_file",
        "_status_pages",
        "config",
        "error_handler",
        "trie",
    )

    def __init__(
        self,
        tree: RouteNode | RouteTrie | Mapping[str, Any],
        *,
        read_file: FileReader | None = None,
        module_loaders: Mapping[str, ModuleLoader] | None = None,
        extend_context: ContextEnricher | None = None,
        status_pages: Mapping[int, RouteNode] | None = None,
        error_handler: str | None = None,
        config: RenderConfig | None = None,
    ) -> None:
        if isinstance(tree, RouteTrie):
            self.trie = tree
        elif isinstance(tree, RouteNode):
            self.trie = RouteTrie(tree)
        else:
            self.trie = RouteTrie(load_route_tree(tree))

        self.config = config or RenderConfig()
        self.error_handler = error_handler
        self._read_file = read_file or self._read_from_root
        self._module_loaders = dict(module_loaders or {})
        self._extend_context = extend_context
        self._status_pages = dict(status_pages or {})
        self._modules = OnceCache()
        self._files = OnceCache()

    # -- Routing --

    def match(self, url: str) -> ResolvedRoute | None:
        """Match *url*'s pathname.

        ``/`` without an explicit root route resolves to the pass-through
        root, so a tree of only child routes still serves its index.
        """
        pathname = urlsplit(url).path or ROOT_PATTERN
        resolved = self.trie.match(pathname)
        if resolved is not None:
            return resolved
        if normalize_path(pathname) == ROOT_PATTERN:
            return ResolvedRoute(node=PASSTHROUGH_ROOT, pattern=ROOT_PATTERN, params={})
        return None

    def route_at(self, pattern: str) -> RouteNode | None:
        """Terminal route at a canonical pattern, with the pass-through root fallback."""
        node = self.trie.find_route(pattern)
        if node is None and pattern == ROOT_PATTERN:
            return PASSTHROUGH_ROOT
        return node

    def build_route_hierarchy(self, pattern: str) -> list[str]:
        """Ancestor patterns of *pattern*, root first.

        ``/projects/:id/tasks`` -> ``["/", "/projects", "/projects/:id",
        "/projects/:id/tasks"]``.
        """
        hierarchy = [ROOT_PATTERN]
        current = ""
        for segment in (part for part in pattern.split("/") if part):
            current += "/" + segment
            hierarchy.append(current)
        return hierarchy

    def get_status_page(self, status: int) -> ResolvedRoute | None:
        """The caller's page for *status*, matched at pattern ``/{status}``."""
        node = self._status_pages.get(status)
        if node is None:
            return None
        return ResolvedRoute(node=node, pattern=f"/{status}", params={})

    # -- URLs --

    @staticmethod
    def normalize_url(pathname: str) -> str:
        """Remove one trailing slash, except from the root."""
        if len(pathname) > 1 and pathname.endswith("/"):
            return pathname[:-1]
        return pathname

    @staticmethod
    def to_absolute_path(path: str) -> str:
        return path if path.startswith("/") else "/" + path

    def to_route_info(self, resolved: ResolvedRoute, url: str) -> RouteInfo:
        parts = urlsplit(url)
        return RouteInfo(
            pathname=normalize_path(parts.path or ROOT_PATTERN),
            pattern=resolved.pattern,
            params=dict(resolved.params),
            query=QueryParams(parts.query),
            url=url,
        )

    # -- Modules --

    async def load_module(self, path: str) -> Any:
        """Load the module at *path* once for the lifetime of this core."""
        return await self._modules.get(path, lambda: self._load_module(path))

    async def _load_module(self, path: str) -> Any:
        loader = self._module_loaders.get(path)
        if loader is not None:
            return await loader()
        file = Path(self.config.root_dir, path.lstrip("/"))
        return await anyio.to_thread.run_sync(_import_file, file)

    async def load_export(self, path: str, name: str) -> Any:
        """Load *path* and return its export *name*.

        A loader returns a module, a mapping of export names, or the export
        object itself.  A mapping is always read as export names, so a
        mapping-shaped export is wrapped: ``{"redirect": {"to": "/new"}}``.
        """
        module = await self.load_module(path)
        if isinstance(module, Mapping):
            value = module.get(name)
        elif isinstance(module, ModuleType):
            value = getattr(module, name, None)
        else:
            value = module
        if value is None:
            msg = f"Module {path!r} does not export {name!r}"
            if isinstance(module, Mapping):
                msg += f"; a loader returning a mapping must key it by export name ({name!r})"
            raise ConfigurationError(msg)
        return value

    async def load_page(self, node: RouteNode) -> PageComponent:
        """The page component for *node*: its behavior module's ``page``, or the default."""
        if node.files is None or not node.files.py:
            return DEFAULT_PAGE
        page = await self.load_export(node.files.py, "page")
        if not isinstance(page, PageComponent):
            msg = f"'page' in {node.files.py!r} must be a PageComponent, got {type(page).__name__}"
            raise ConfigurationError(msg)
        return page

    # -- Files --

    async def read_file(self, path: str) -> str | None:
        """Read a companion file; ``None`` when it does not exist."""
        if not self.config.cache_files:
            return await self._read(path)
        return await self._files.get(self.to_absolute_path(path), lambda: self._read(path))

    async def _read(self, path: str) -> str | None:
        try:
            return await self._read_file(path)
        except FileNotFoundError:
            logger.warning("Companion file %s not found", path)
            return None

    async def _read_from_root(self, path: str) -> str:
        return await anyio.Path(self.config.root_dir, path.lstrip("/")).read_text(encoding="utf-8")

    async def load_files(self, files: RouteFiles | None) -> FileContents:
        """Fetch every declared html/md/css file concurrently."""
        if not files:
            return FileContents()

        contents: dict[str, str | None] = {}

        async def _load(kind: str, path: str) -> None:
            contents[kind] = await self.read_file(path)

        async with anyio.create_task_group() as tg:
            for kind in _TEXT_KINDS:
                path = getattr(files, kind)
                if path:
                    tg.start_soon(_load, kind, path)

        return FileContents(**contents)

    # -- Contexts --

    async def build_component_context(
        self,
        route_info: RouteInfo,
        route: RouteNode,
        signal: anyio.Event | None = None,
        is_leaf: bool = False,
    ) -> ComponentContext:
        """Resolve *route*'s files and build its (enriched) context."""
        files = await self.load_files(route.files)
        context = ComponentContext.from_route_info(
            route_info, files=files, is_leaf=is_leaf, signal=signal,
        )
        return await self._enrich(context)

    async def build_widget_context(
        self,
        route_info: RouteInfo,
        files: RouteFiles | None,
        signal: anyio.Event | None = None,
    ) -> ComponentContext:
        """Build a widget's context: the page's route info plus the widget's own files."""
        contents = await self.load_files(files)
        context = ComponentContext.from_route_info(route_info, files=contents, signal=signal)
        return await self._enrich(context)

    async def _enrich(self, context: ComponentContext) -> ComponentContext:
        if self._extend_context is None:
            return context
        return await invoke(self._extend_context, context)


def _import_file(file: Path) -> ModuleType:
    """Import a Python file as an anonymous module."""
    if not file.is_file():
        msg = f"Module {str(file)!r} not found"
        raise ConfigurationError(msg)
    module_name = "_trellis_route_" + re.sub(r"\W", "_", str(file))
    spec = importlib.util.spec_from_file_location(module_name, file)
    if spec is None or spec.loader is None:
        msg = f"Cannot import {str(file)!r}"
        raise ConfigurationError(msg)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module
