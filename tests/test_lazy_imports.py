"""Tests for trellis.__init__ — lazy import registry covers all public names."""

import pytest

import trellis


@pytest.mark.parametrize("name", trellis.__all__)
def test_all_names_resolve(name: str) -> None:
    """Every name in __all__ must resolve via __getattr__ without error."""
    obj = getattr(trellis, name)
    assert obj is not None, f"trellis.{name} resolved to None"


def test_unknown_name_raises_attribute_error() -> None:
    """Accessing an unregistered name raises AttributeError."""
    with pytest.raises(AttributeError, match="no attribute"):
        trellis.__getattr__("ThisDoesNotExist")


def test_version() -> None:
    assert isinstance(trellis.__version__, str)
