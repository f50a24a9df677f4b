"""Tests for trellis.routing.tree — route tree manifest and loaders."""

import json
from pathlib import Path

import pytest

from trellis.errors import ConfigurationError
from trellis.routing.tree import (
    ParamEdge,
    RouteFiles,
    RouteNode,
    load_route_tree,
    tree_from_patterns,
)

_MANIFEST = {
    "files": {"html": "index.html"},
    "errorBoundary": "error.py",
    "children": {
        "about": {"files": {"md": "about.md", "css": "about.css"}},
        "old": {"redirect": "old.redirect.py"},
    },
    "dynamic": {"param": "id", "child": {"files": {"py": "item.py"}}},
    "wildcard": {"param": "rest", "child": {"files": {"md": "rest.md"}}},
}


class TestRouteFiles:
    def test_empty_is_falsy(self) -> None:
        assert not RouteFiles()

    def test_items_in_kind_order(self) -> None:
        files = RouteFiles(css="a.css", py="a.py", md="a.md")
        assert list(files.items()) == [("py", "a.py"), ("md", "a.md"), ("css", "a.css")]

    def test_unknown_kind_rejected(self) -> None:
        with pytest.raises(ConfigurationError, match="ts"):
            RouteFiles.from_dict({"ts": "page.ts"})


class TestRouteNode:
    def test_terminal_with_files(self) -> None:
        assert RouteNode(files=RouteFiles(md="a.md")).is_terminal

    def test_terminal_with_redirect(self) -> None:
        node = RouteNode(redirect="r.py")
        assert node.is_terminal
        assert node.is_redirect

    def test_bare_node_is_not_terminal(self) -> None:
        assert not RouteNode().is_terminal
        assert not RouteNode(files=RouteFiles()).is_terminal

    def test_from_dict(self) -> None:
        node = RouteNode.from_dict(_MANIFEST)
        assert node.files == RouteFiles(html="index.html")
        assert node.error_boundary == "error.py"
        assert node.children["old"].redirect == "old.redirect.py"
        assert node.dynamic == ParamEdge(param="id", child=RouteNode(files=RouteFiles(py="item.py")))
        assert node.wildcard is not None
        assert node.wildcard.param == "rest"

    def test_to_dict_matches_manifest(self) -> None:
        assert RouteNode.from_dict(_MANIFEST).to_dict() == _MANIFEST

    def test_non_object_rejected(self) -> None:
        with pytest.raises(ConfigurationError, match="must be an object"):
            RouteNode.from_dict({"children": {"a": ["not", "a", "node"]}})

    def test_edge_without_param_rejected(self) -> None:
        with pytest.raises(ConfigurationError, match="param"):
            RouteNode.from_dict({"dynamic": {"child": {}}})

    def test_edge_with_empty_param_rejected(self) -> None:
        with pytest.raises(ConfigurationError, match="empty"):
            RouteNode.from_dict({"wildcard": {"param": "", "child": {}}})


class TestLoadRouteTree:
    def test_from_mapping(self) -> None:
        assert load_route_tree(_MANIFEST) == RouteNode.from_dict(_MANIFEST)

    def test_from_json_string(self) -> None:
        assert load_route_tree(json.dumps(_MANIFEST)) == RouteNode.from_dict(_MANIFEST)

    def test_from_file(self, tmp_path: Path) -> None:
        path = tmp_path / "routes.json"
        path.write_text(json.dumps(_MANIFEST), encoding="utf-8")
        assert load_route_tree(path) == RouteNode.from_dict(_MANIFEST)
        assert load_route_tree(str(path)) == RouteNode.from_dict(_MANIFEST)

    def test_invalid_json(self) -> None:
        with pytest.raises(ConfigurationError, match="not valid JSON"):
            load_route_tree("{not json")


class TestTreeFromPatterns:
    def test_builds_nested_structure(self) -> None:
        about = RouteNode(files=RouteFiles(md="about.md"))
        item = RouteNode(files=RouteFiles(py="item.py"), error_boundary="item.error.py")
        tree = tree_from_patterns({"/about": about, "/items/:id": item, "/docs/:rest*": about})

        assert tree.children["about"] == about
        items = tree.children["items"]
        assert not items.is_terminal
        assert items.dynamic is not None
        assert items.dynamic.param == "id"
        assert items.dynamic.child == item
        assert tree.children["docs"].wildcard is not None

    def test_root_pattern(self) -> None:
        tree = tree_from_patterns({"/": RouteNode(files=RouteFiles(html="index.html"))})
        assert tree.files == RouteFiles(html="index.html")

    def test_conflicting_param_names(self) -> None:
        page = RouteNode(files=RouteFiles(md="x.md"))
        with pytest.raises(ConfigurationError, match="already bound"):
            tree_from_patterns({"/items/:id": page, "/items/:slug/edit": page})
