"""Query string of the URL being rendered.

Pages and widgets read it from ``context.query``.  Lookup by key gives the
first value; ``get_list`` gives every value in the order it appeared.
"""

from collections.abc import Iterator, Mapping
from urllib.parse import parse_qsl


class QueryParams(Mapping[str, str]):
    """Immutable, multi-valued view of a query string.

    Usage::

        query = QueryParams("?tab=tasks&tag=a&tag=b")
        query["tab"]            # "tasks"
        query.get_list("tag")   # ["a", "b"]
    """

    __slots__ = ("_pairs", "_raw", "_values")

    def __init__(self, query_string: str = "") -> None:
        self._raw = query_string.removeprefix("?")
        self._pairs = tuple(parse_qsl(self._raw, keep_blank_values=True))
        values: dict[str, list[str]] = {}
        for key, value in self._pairs:
            values.setdefault(key, []).append(value)
        self._values = values

    def __getitem__(self, key: str) -> str:
        return self._values[key][0]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, QueryParams):
            return NotImplemented
        return self._values == other._values

    def __hash__(self) -> int:
        return hash(frozenset((key, tuple(values)) for key, values in self._values.items()))

    def __repr__(self) -> str:
        return f"QueryParams({self._raw!r})"

    @property
    def raw(self) -> str:
        """The query string without its leading ``?``."""
        return self._raw

    def items_all(self) -> tuple[tuple[str, str], ...]:
        """Every ``(key, value)`` pair, repeats included, in URL order."""
        return self._pairs

    def get_list(self, key: str) -> list[str]:
        return list(self._values.get(key, ()))
