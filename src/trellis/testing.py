"""Test helpers for trellis renderers.

``MemoryFiles`` stands in for the file reader so route trees can be
rendered without touching disk::

    files = MemoryFiles({"routes/about.md": "# About"})
    core = RenderingCore(tree, read_file=files.read)

    result = await SsrMarkdownRenderer(core).render("/about")
    assert files.reads["routes/about.md"] == 1
"""

from collections import Counter
from collections.abc import Mapping

import anyio


class MemoryFiles:
    """In-memory ``read_file`` that counts reads per path.

    Missing paths raise ``FileNotFoundError`` like a real reader.  With
    *delay* set, every read sleeps first, which lets tests overlap
    concurrent loads or fire a cancellation signal mid-render.
    """

    __slots__ = ("delay", "files", "reads")

    def __init__(self, files: Mapping[str, str] | None = None, *, delay: float = 0.0) -> None:
        self.files: dict[str, str] = {_key(path): text for path, text in (files or {}).items()}
        self.reads: Counter[str] = Counter()
        self.delay = delay

    async def read(self, path: str) -> str:
        key = _key(path)
        self.reads[key] += 1
        if self.delay:
            await anyio.sleep(self.delay)
        try:
            return self.files[key]
        except KeyError:
            raise FileNotFoundError(path) from None

    def __setitem__(self, path: str, text: str) -> None:
        self.files[_key(path)] = text


def _key(path: str) -> str:
    return path.lstrip("/")
