from __future__ import annotations

from typing import Any, Protocol, TypeVar, runtime_checkable

E_contra = TypeVar("E_contra", contravariant=True)


@runtime_checkable
class Injectable(Protocol[E_contra]):
    """Capability of accepting tagged-union values of type ``E``.

    ``@injectable(E)`` realizes this protocol on the decorated class with a
    generated ``inject`` method; no base class is required.
    """

    def inject(self, value: E_contra) -> None:
        """Route ``value`` into the field bound to its variant, if any."""


class InjectFunctionProtocol(Protocol):
    """Protocol for the generated ``inject`` function before it is attached to a class."""

    def __call__(self, instance: Any, value: Any, /) -> None: ...


class BuildInjectFunctionProtocol(Protocol):
    """Protocol for the ``build_inject`` function of a generated dispatch module."""

    def __call__(self, enum_type: Any, /) -> InjectFunctionProtocol: ...
