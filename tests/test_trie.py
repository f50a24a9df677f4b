"""Tests for trellis.routing.trie — segment trie matching and error boundaries."""

from trellis.routing.tree import RouteFiles, RouteNode, tree_from_patterns
from trellis.routing.trie import RouteTrie, normalize_path


def _page(name: str, *, boundary: str | None = None) -> RouteNode:
    return RouteNode(files=RouteFiles(md=f"{name}.md"), error_boundary=boundary)


def _trie(*patterns: str) -> RouteTrie:
    return RouteTrie(tree_from_patterns({p: _page(p.strip("/") or "index") for p in patterns}))


class TestNormalizePath:
    def test_strips_one_trailing_slash(self) -> None:
        assert normalize_path("/about/") == "/about"

    def test_root_is_kept(self) -> None:
        assert normalize_path("/") == "/"

    def test_adds_leading_slash(self) -> None:
        assert normalize_path("about") == "/about"


class TestStaticMatching:
    def test_root(self) -> None:
        trie = _trie("/", "/about")
        match = trie.match("/")
        assert match is not None
        assert match.pattern == "/"
        assert match.params == {}

    def test_root_without_definition(self) -> None:
        assert _trie("/about").match("/") is None

    def test_simple_path(self) -> None:
        match = _trie("/about").match("/about")
        assert match is not None
        assert match.pattern == "/about"

    def test_trailing_slash_is_ignored(self) -> None:
        match = _trie("/about").match("/about/")
        assert match is not None
        assert match.pattern == "/about"

    def test_case_sensitive(self) -> None:
        assert _trie("/about").match("/About") is None

    def test_no_match(self) -> None:
        assert _trie("/about").match("/missing") is None

    def test_non_terminal_prefix_does_not_match(self) -> None:
        trie = _trie("/docs/guide")
        assert trie.match("/docs") is None


class TestPriority:
    def test_static_beats_dynamic(self) -> None:
        trie = _trie("/projects/new", "/projects/:id")
        match = trie.match("/projects/new")
        assert match is not None
        assert match.pattern == "/projects/new"
        assert match.params == {}

    def test_dynamic_binds_segment(self) -> None:
        trie = _trie("/projects/new", "/projects/:id")
        match = trie.match("/projects/42")
        assert match is not None
        assert match.pattern == "/projects/:id"
        assert match.params == {"id": "42"}

    def test_dynamic_beats_wildcard(self) -> None:
        trie = _trie("/docs/:slug", "/docs/:rest*")
        match = trie.match("/docs/intro")
        assert match is not None
        assert match.pattern == "/docs/:slug"
        assert match.params == {"slug": "intro"}

    def test_wildcard_is_greedy(self) -> None:
        trie = _trie("/docs/:slug", "/docs/:rest*")
        match = trie.match("/docs/guide/install/linux")
        assert match is not None
        assert match.pattern == "/docs/:rest*"
        assert match.params == {"rest": "guide/install/linux"}

    def test_wildcard_matches_zero_segments(self) -> None:
        match = _trie("/docs/:rest*").match("/docs")
        assert match is not None
        assert match.pattern == "/docs/:rest*"
        assert match.params == {"rest": ""}

    def test_terminal_route_wins_over_empty_wildcard(self) -> None:
        match = _trie("/docs", "/docs/:rest*").match("/docs")
        assert match is not None
        assert match.pattern == "/docs"


class TestBacktracking:
    def test_static_dead_end_falls_back_to_dynamic(self) -> None:
        trie = _trie("/projects/new/settings", "/projects/:id/tasks")
        match = trie.match("/projects/new/tasks")
        assert match is not None
        assert match.pattern == "/projects/:id/tasks"
        assert match.params == {"id": "new"}

    def test_abandoned_dynamic_binding_does_not_leak(self) -> None:
        trie = _trie("/files/:id/edit", "/files/:rest*")
        match = trie.match("/files/42/view")
        assert match is not None
        assert match.pattern == "/files/:rest*"
        assert match.params == {"rest": "42/view"}

    def test_unbinds_across_several_levels(self) -> None:
        trie = _trie("/a/:x/:y/c", "/a/:z*")
        match = trie.match("/a/1/2/d")
        assert match is not None
        assert match.pattern == "/a/:z*"
        assert match.params == {"z": "1/2/d"}

    def test_deep_success_keeps_all_bindings(self) -> None:
        trie = _trie("/a/:x/:y/c", "/a/:z*")
        match = trie.match("/a/1/2/c")
        assert match is not None
        assert match.pattern == "/a/:x/:y/c"
        assert match.params == {"x": "1", "y": "2"}


class TestDecoding:
    def test_dynamic_param_is_decoded(self) -> None:
        match = _trie("/docs/:slug").match("/docs/hello%20world")
        assert match is not None
        assert match.params == {"slug": "hello world"}

    def test_wildcard_segments_are_decoded(self) -> None:
        match = _trie("/files/:path*").match("/files/a%20b/c")
        assert match is not None
        assert match.params == {"path": "a b/c"}

    def test_malformed_encoding_keeps_raw_segment(self) -> None:
        match = _trie("/docs/:slug").match("/docs/%E0%A4%A")
        assert match is not None
        assert match.params == {"slug": "%E0%A4%A"}


class TestIdempotence:
    def test_repeated_match_is_equal(self) -> None:
        trie = _trie("/projects/new", "/projects/:id", "/projects/:id/:rest*")
        first = trie.match("/projects/7/a/b")
        second = trie.match("/projects/7/a/b")
        assert first == second
        assert first is not None
        assert first.params == {"id": "7", "rest": "a/b"}


class TestFindRoute:
    def test_static(self) -> None:
        trie = _trie("/about")
        assert trie.find_route("/about") == _page("about")

    def test_dynamic_is_structural(self) -> None:
        trie = _trie("/projects/:id")
        assert trie.find_route("/projects/:id") is not None
        assert trie.find_route("/projects/:other") is trie.find_route("/projects/:id")

    def test_wildcard(self) -> None:
        trie = _trie("/docs/:rest*")
        assert trie.find_route("/docs/:rest*") is not None
        assert trie.find_route("/docs/:rest") is None

    def test_missing(self) -> None:
        trie = _trie("/about")
        assert trie.find_route("/nope") is None
        assert trie.find_route("/") is None

    def test_same_object_as_match(self) -> None:
        trie = _trie("/projects/:id")
        match = trie.match("/projects/1")
        assert match is not None
        assert trie.find_route("/projects/:id") is match.node


class TestRoutes:
    def test_lists_terminal_routes(self) -> None:
        trie = _trie("/", "/about", "/projects/:id", "/docs/:rest*")
        patterns = sorted(pattern for pattern, _ in trie.routes)
        assert patterns == ["/", "/about", "/docs/:rest*", "/projects/:id"]


class TestFindErrorBoundary:
    def _tree(self) -> RouteTrie:
        return RouteTrie(
            tree_from_patterns({
                "/": RouteNode(files=RouteFiles(html="index.html"), error_boundary="root.error.py"),
                "/projects": _page("projects", boundary="projects.error.py"),
                "/projects/:id": _page("project"),
                "/projects/new": _page("new", boundary="new.error.py"),
                "/projects/:id/tasks": _page("tasks"),
                "/docs/:rest*": _page("docs", boundary="docs.error.py"),
            })
        )

    def test_root(self) -> None:
        assert self._tree().find_error_boundary("/") == "root.error.py"

    def test_deepest_boundary_shadows_ancestors(self) -> None:
        assert self._tree().find_error_boundary("/projects/42") == "projects.error.py"

    def test_falls_back_to_root(self) -> None:
        assert self._tree().find_error_boundary("/unknown") == "root.error.py"

    def test_wildcard_boundary(self) -> None:
        assert self._tree().find_error_boundary("/docs/a/b") == "docs.error.py"

    def test_commits_to_static_branch_without_backtracking(self) -> None:
        trie = self._tree()
        # match backtracks into the dynamic branch...
        match = trie.match("/projects/new/tasks")
        assert match is not None
        assert match.pattern == "/projects/:id/tasks"
        # ...but the boundary lookup stays on the static one it chose
        assert trie.find_error_boundary("/projects/new/tasks") == "new.error.py"

    def test_no_boundaries(self) -> None:
        assert _trie("/about").find_error_boundary("/about") is None
