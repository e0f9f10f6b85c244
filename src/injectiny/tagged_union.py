from __future__ import annotations

import inspect
import re
from dataclasses import dataclass
from typing import Any, ClassVar, Generic, TypeVar, get_args, get_origin

from typing_extensions import Self

T = TypeVar("T")

_STRING_VARIANT_PATTERN = re.compile(r"^\s*(?:[A-Za-z_]\w*\.)*Variant(?:\[(?P<payload>.*)\])?\s*$")


class Variant(Generic[T]):
    """Declare one variant of a ``TaggedUnion`` carrying a payload of type ``T``.

    Only meaningful as a class-body annotation of a ``TaggedUnion`` subclass.
    """


class TaggedUnion:
    """Base class for closed tagged unions used as injection models.

    Every ``Variant[T]`` annotation in the class body becomes a nested,
    frozen dataclass variant that subclasses the union and stores its payload
    in a single ``value`` field. Variants support positional class patterns,
    which is what the generated ``inject`` dispatch matches on.

    Examples:
        .. code-block:: python

            class Model(TaggedUnion):
                Name: Variant[str]
                Age: Variant[int]


            value = Model.Age(25)
            assert isinstance(value, Model)
            match value:
                case Model.Age(age):
                    assert age == 25

    """

    __variants__: ClassVar[tuple[type[Any], ...]] = ()
    __variant_of__: ClassVar[type[Any] | None] = None

    def __new__(cls, *_args: object, **_kwargs: object) -> Self:
        if cls.__dict__.get("__variant_of__") is None:
            msg = (
                f"'{cls.__qualname__}' is a tagged union; construct one of its variants "
                "instead."
            )
            raise TypeError(msg)
        return super().__new__(cls)

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if cls.__dict__.get("__variant_of__") is not None:
            return

        variants: list[type[Any]] = []
        for name, annotation in inspect.get_annotations(cls).items():
            is_variant, payload_type = _variant_payload(annotation)
            if not is_variant:
                continue
            variant = _build_variant(union=cls, name=name, payload_type=payload_type)
            setattr(cls, name, variant)
            variants.append(variant)
        cls.__variants__ = tuple(variants)

    @classmethod
    def variants(cls) -> tuple[type[Any], ...]:
        """Return the variant classes in declaration order."""
        union = cls.__dict__.get("__variant_of__") or cls
        return union.__variants__


def _variant_payload(annotation: Any) -> tuple[bool, Any]:
    if isinstance(annotation, str):
        match = _STRING_VARIANT_PATTERN.match(annotation)
        if match is None:
            return False, None
        return True, match.group("payload") or Any

    if annotation is Variant:
        return True, Any
    if get_origin(annotation) is Variant:
        return True, get_args(annotation)[0]
    return False, None


def _build_variant(*, union: type[Any], name: str, payload_type: Any) -> type[Any]:
    namespace = {
        "__annotations__": {"value": payload_type},
        "__module__": union.__module__,
        "__qualname__": f"{union.__qualname__}.{name}",
        "__variant_of__": union,
    }
    return dataclass(frozen=True, slots=True)(type(name, (union,), namespace))
