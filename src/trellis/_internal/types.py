"""Shared type aliases used across trellis modules."""

from collections.abc import Awaitable, Callable
from typing import Any, TypeAlias

# Zero-argument loader for a pre-bundled module, keyed by module path
ModuleLoader: TypeAlias = Callable[[], Awaitable[Any]]

# Reads a file by its (tree-relative) path and returns its text
FileReader: TypeAlias = Callable[[str], Awaitable[str]]

# Receives the base ComponentContext and returns the context to use
ContextEnricher: TypeAlias = Callable[..., Any]
