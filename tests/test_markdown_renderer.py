"""Tests for trellis.rendering.markdown — hierarchical Markdown rendering."""

from typing import Any

import pytest

from trellis.components.page import PageComponent
from trellis.components.widget import WidgetComponent
from trellis.config import RenderConfig
from trellis.context import ComponentContext
from trellis.rendering.core import RenderingCore
from trellis.rendering.markdown import SsrMarkdownRenderer
from trellis.rendering.types import RedirectConfig, RenderResult
from trellis.routing.tree import RouteFiles, RouteNode, tree_from_patterns
from trellis.testing import MemoryFiles
from trellis.widgets.builtin import BreadcrumbWidget
from trellis.widgets.registry import WidgetRegistry


def _md(path: str) -> RouteNode:
    return RouteNode(files=RouteFiles(md=path))


def _exports(**exports: Any):
    async def loader() -> dict[str, Any]:
        return exports

    return loader


class _Good(WidgetComponent):
    name = "good"

    def get_data(self, params: dict[str, Any], context: ComponentContext) -> str:
        return params.get("text", "ok")

    def render_markdown(self, data: Any, params: dict[str, Any], context: ComponentContext) -> str:
        return f"**{data}**"


class _Bad(WidgetComponent):
    name = "bad"

    async def get_data(self, params: dict[str, Any], context: ComponentContext) -> Any:
        raise RuntimeError("kaput")


class _Failing(PageComponent):
    def get_data(self, params: dict[str, Any], context: ComponentContext) -> Any:
        raise RuntimeError("boom")


def _renderer(
    routes: dict[str, RouteNode],
    files: dict[str, str] | None = None,
    *,
    widgets: list[WidgetComponent] | None = None,
    **kwargs: Any,
) -> SsrMarkdownRenderer:
    core = RenderingCore(tree_from_patterns(routes), read_file=MemoryFiles(files).read, **kwargs)
    registry = WidgetRegistry(widgets) if widgets is not None else None
    return SsrMarkdownRenderer(core, widgets=registry)


class TestHierarchy:
    @pytest.mark.anyio
    async def test_layout_slot(self) -> None:
        renderer = _renderer(
            {"/": _md("root.md"), "/a": _md("a.md")},
            {"root.md": "# Site\n\n```router-slot\n```\n\nFooter", "a.md": "Body A"},
        )
        result = await renderer.render("/a")
        assert result == RenderResult(content="# Site\n\nBody A\n\nFooter", status=200)

    @pytest.mark.anyio
    async def test_layout_without_file_passes_through(self) -> None:
        renderer = _renderer(
            {"/docs": RouteNode(files=RouteFiles(py="docs.py")), "/docs/a": _md("a.md")},
            {"a.md": "Body A"},
            module_loaders={"docs.py": _exports(page=PageComponent())},
        )
        result = await renderer.render("/docs/a")
        assert result.content == "Body A"

    @pytest.mark.anyio
    async def test_unfilled_slot_stripped(self) -> None:
        renderer = _renderer({"/": _md("root.md")}, {"root.md": "# Site\n\n```router-slot\n```"})
        result = await renderer.render("/")
        assert result.content == "# Site"


class TestWidgets:
    @pytest.mark.anyio
    async def test_failure_stays_local(self) -> None:
        page = "before\n\n```widget:good\n{}\n```\n\nmiddle\n\n```widget:bad\n```\n\nafter"
        renderer = _renderer({"/p": _md("p.md")}, {"p.md": page}, widgets=[_Good(), _Bad()])
        result = await renderer.render("/p")
        assert result.status == 200
        assert result.content == "before\n\n**ok**\n\nmiddle\n\n> **Error** (`bad`): kaput\n\nafter"

    @pytest.mark.anyio
    async def test_params(self) -> None:
        page = '```widget:good\n{"text": "hello"}\n```'
        renderer = _renderer({"/p": _md("p.md")}, {"p.md": page}, widgets=[_Good()])
        result = await renderer.render("/p")
        assert result.content == "**hello**"

    @pytest.mark.anyio
    async def test_unknown_widget(self) -> None:
        renderer = _renderer({"/p": _md("p.md")}, {"p.md": "```widget:nope\n```"}, widgets=[_Good()])
        result = await renderer.render("/p")
        assert result.content == "> **Error**: Unknown widget `nope`"

    @pytest.mark.anyio
    async def test_malformed_params(self) -> None:
        renderer = _renderer({"/p": _md("p.md")}, {"p.md": "```widget:good\n{oops\n```"}, widgets=[_Good()])
        result = await renderer.render("/p")
        assert result.content is not None
        assert result.content.startswith("> **Error** (`good`): Invalid JSON")

    @pytest.mark.anyio
    async def test_non_object_params(self) -> None:
        renderer = _renderer({"/p": _md("p.md")}, {"p.md": "```widget:good\n[1]\n```"}, widgets=[_Good()])
        result = await renderer.render("/p")
        assert result.content == "> **Error** (`good`): Params must be a JSON object"

    @pytest.mark.anyio
    async def test_breadcrumb(self) -> None:
        renderer = _renderer(
            {"/docs/:slug": _md("doc.md")},
            {"doc.md": "```widget:breadcrumb\n```"},
            widgets=[BreadcrumbWidget()],
        )
        result = await renderer.render("/docs/getting-started")
        assert result.content == "[Home](/) > [Docs](/docs) > **Getting started**"

    @pytest.mark.anyio
    async def test_without_registry_blocks_are_left(self) -> None:
        renderer = _renderer({"/p": _md("p.md")}, {"p.md": "```widget:good\n```"})
        result = await renderer.render("/p")
        assert result.content == "```widget:good\n```"


class TestLinks:
    @pytest.mark.anyio
    async def test_base_path_prefixes_internal_links(self) -> None:
        renderer = _renderer(
            {"/": _md("root.md"), "/a": _md("a.md")},
            {
                "root.md": "[Home](/)\n\n```router-slot\n```",
                "a.md": "[About](/about) and [Site](https://example.com)",
            },
            config=RenderConfig(markdown_base_path="/md"),
        )
        result = await renderer.render("/a")
        assert result.content == "[Home](/md/)\n\n[About](/md/about) and [Site](https://example.com)"

    @pytest.mark.anyio
    async def test_no_base_path(self) -> None:
        renderer = _renderer({"/a": _md("a.md")}, {"a.md": "[About](/about)"})
        result = await renderer.render("/a")
        assert result.content == "[About](/about)"


class TestTerminalPages:
    @pytest.mark.anyio
    async def test_not_found(self) -> None:
        result = await _renderer({"/a": _md("a.md")}, {"a.md": "A"}).render("/missing")
        assert result == RenderResult(content="# Not Found\n\nPath: `/missing`", status=404)

    @pytest.mark.anyio
    async def test_error(self) -> None:
        renderer = _renderer(
            {"/about": RouteNode(files=RouteFiles(py="about.py"))},
            module_loaders={"about.py": _exports(page=_Failing())},
        )
        result = await renderer.render("/about")
        assert result == RenderResult(content="# Error\n\nPath: `/about`\n\nboom", status=500)

    @pytest.mark.anyio
    async def test_redirect(self) -> None:
        renderer = _renderer(
            {"/old": RouteNode(redirect="old.py")},
            module_loaders={"old.py": _exports(redirect=RedirectConfig(to="/new"))},
        )
        result = await renderer.render("/old")
        assert result == RenderResult(content=None, status=301, redirect="/new")
        assert renderer.render_redirect("/new") == "Redirect to: /new"
