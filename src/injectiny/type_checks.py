from __future__ import annotations

import enum
import types
from typing import Any, TypeGuard


def is_runtime_class(candidate: object) -> TypeGuard[type[Any]]:
    """Return true when candidate is a runtime class safe for class-only operations.

    Args:
        candidate: Value being checked for eligibility or runtime type constraints.

    """
    return isinstance(candidate, type) and not isinstance(candidate, types.GenericAlias)


def is_enum_class(candidate: type[Any]) -> bool:
    """Return true when candidate is an ``enum.Enum`` subclass."""
    return issubclass(candidate, enum.Enum)


def has_instance_dict(candidate: type[Any]) -> bool:
    """Return true when instances of candidate carry a ``__dict__``.

    Args:
        candidate: Class whose instance layout is checked.

    """
    return candidate.__dictoffset__ != 0


__all__ = ["has_instance_dict", "is_enum_class", "is_runtime_class"]
