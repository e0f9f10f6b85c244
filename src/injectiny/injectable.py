from __future__ import annotations

from collections.abc import Callable
from types import MappingProxyType
from typing import Any, TypeVar

from injectiny.dispatch.manager import DispatchManager, GeneratedDispatch
from injectiny.dispatch.templates.parser import (
    DataHolderDescriptor,
    DataHolderParser,
    read_raw_annotations,
)
from injectiny.exceptions import InjectinyUnsupportedTargetError
from injectiny.injected import InjectedField
from injectiny.tagged_union import TaggedUnion
from injectiny.type_checks import has_instance_dict, is_enum_class, is_runtime_class

C = TypeVar("C", bound=type[Any])

_INJECT_METHOD_NAME = "inject"
_dispatch_manager = DispatchManager()


def injectable(enum_type: type[Any]) -> Callable[[C], C]:
    """Generate an ``inject`` method that routes ``enum_type`` values into fields.

    Fields opt in with ``Annotated[Injected[T], inject(Enum.Member)]``. The
    decorator parses and validates every marker first, then generates and
    compiles a ``match`` based dispatch, installs an ``InjectedField``
    descriptor for every bound field and strips the inject markers from the
    class annotations.

    Args:
        enum_type: Tagged-union class whose variants are injected.

    Returns:
        A class decorator returning the decorated class.

    Raises:
        InjectinyUnsupportedTargetError: If ``enum_type`` or the decorated object
            cannot take part in injection.
        InjectinyMalformedAnnotationError: If a field marker is malformed.
        InjectinyInconsistentEnumReferenceError: If a field names a member of a
            different enum.

    Examples:
        .. code-block:: python

            class Model(TaggedUnion):
                Name: Variant[str]
                Age: Variant[int]


            @injectable(Model)
            class Injectee:
                name: Annotated[Injected[str], inject(Model.Name)]
                age: Annotated[Injected[int], inject(Model.Age)]


            injectee = Injectee()
            injectee.inject(Model.Age(25))
            assert injectee.age == 25

    """
    if not is_runtime_class(enum_type):
        msg = f"@injectable expects the enum type to be a class, got {enum_type!r}."
        raise InjectinyUnsupportedTargetError(msg, target=enum_type)

    def decorator(holder: C) -> C:
        _validate_holder(holder)
        descriptor = DataHolderParser(holder=holder, enum_type=enum_type).parse()
        generated = _dispatch_manager.build_dispatch(descriptor, enum_type)
        _attach_dispatch(
            holder=holder,
            enum_type=enum_type,
            descriptor=descriptor,
            generated=generated,
        )
        return holder

    return decorator


def is_injectable(candidate: object) -> bool:
    """Return True when candidate is (an instance of) an ``@injectable`` class."""
    holder = candidate if is_runtime_class(candidate) else type(candidate)
    return getattr(holder, "__injectable_enum__", None) is not None


def get_dispatch_source(holder: type[Any]) -> str:
    """Return the generated dispatch module source of an ``@injectable`` class."""
    source = holder.__dict__.get("__injectable_source__")
    if source is None:
        msg = f"'{holder.__qualname__}' is not decorated with @injectable."
        raise TypeError(msg)
    return source


def _validate_holder(holder: object) -> None:
    if not is_runtime_class(holder):
        msg = f"@injectable can only be applied to classes, got {holder!r}."
        raise InjectinyUnsupportedTargetError(msg, target=holder)

    if is_enum_class(holder) or issubclass(holder, TaggedUnion):
        msg = f"@injectable cannot be applied to the enum type '{holder.__qualname__}'."
        raise InjectinyUnsupportedTargetError(msg, target=holder)

    if not has_instance_dict(holder):
        msg = (
            f"@injectable requires instances of '{holder.__qualname__}' to carry a "
            "__dict__; remove __slots__ (or slots=True) from the class."
        )
        raise InjectinyUnsupportedTargetError(msg, target=holder)

    if _INJECT_METHOD_NAME in holder.__dict__:
        msg = f"'{holder.__qualname__}' already defines '{_INJECT_METHOD_NAME}'."
        raise InjectinyUnsupportedTargetError(msg, target=holder)

    injectable_bases = [
        base.__qualname__ for base in holder.__mro__[1:] if "__injectable_enum__" in base.__dict__
    ]
    if injectable_bases:
        msg = (
            f"'{holder.__qualname__}' inherits from @injectable class(es) "
            f"{injectable_bases!r}; a generated '{_INJECT_METHOD_NAME}' would not route the "
            "inherited fields. Declare every injected field on one decorated class."
        )
        raise InjectinyUnsupportedTargetError(msg, target=holder)


def _attach_dispatch(
    *,
    holder: type[Any],
    enum_type: type[Any],
    descriptor: DataHolderDescriptor,
    generated: GeneratedDispatch,
) -> None:
    annotations = read_raw_annotations(holder)
    for binding in descriptor.bindings:
        annotations[binding.field_name] = binding.field_type
        setattr(holder, binding.field_name, InjectedField(binding.field_name))
    holder.__annotations__ = annotations

    inject_method = generated.inject
    inject_method.__module__ = holder.__module__  # type: ignore[attr-defined]
    inject_method.__qualname__ = f"{holder.__qualname__}.{_INJECT_METHOD_NAME}"  # type: ignore[attr-defined]
    setattr(holder, _INJECT_METHOD_NAME, inject_method)

    holder.__injectable_enum__ = enum_type
    holder.__injectable_bindings__ = MappingProxyType(
        {binding.field_name: binding.member.path for binding in descriptor.bindings},
    )
    holder.__injectable_source__ = generated.source
