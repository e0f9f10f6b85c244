from __future__ import annotations

import inspect
import keyword
import re
import sys
from dataclasses import dataclass
from typing import Annotated, Any, get_args, get_origin

from injectiny.exceptions import InjectinyMalformedAnnotationError
from injectiny.injected import Injected
from injectiny.markers import extract_inject_markers, strip_inject_annotation
from injectiny.type_checks import is_runtime_class

_PATH_SEPARATOR = "."
_LOCALS_SEGMENT = "<locals>"
_MIN_MEMBER_SEGMENTS = 2
_EXPECTED_MEMBER_FORM = "expected enum member of the form `Enum.Member`"
_MARKER_SOURCE_PATTERN = re.compile(r"\bAnnotated\b|\binject\s*\(")

if sys.version_info >= (3, 14):
    import annotationlib


@dataclass(frozen=True, slots=True)
class EnumMember:
    """Qualified reference to one variant: enclosing enum name, variant name, trailing segments."""

    segments: tuple[str, ...]

    @property
    def enum_name(self) -> str:
        return self.segments[0]

    @property
    def variant_name(self) -> str:
        return self.segments[1]

    @property
    def trailing(self) -> tuple[str, ...]:
        return self.segments[2:]

    @property
    def path(self) -> str:
        return _PATH_SEPARATOR.join(self.segments)

    def has_enum_name(self, enum_path: tuple[str, ...]) -> bool:
        """Return True when the leading segments agree with ``enum_path``.

        Only the overlapping prefix is compared; this is a name check, not
        type resolution.
        """
        return all(
            enum_segment == member_segment
            for enum_segment, member_segment in zip(enum_path, self.segments)
        )

    def relative_to(self, enum_path: tuple[str, ...]) -> tuple[str, ...]:
        """Return the segments naming the variant inside ``enum_path``."""
        return self.segments[len(enum_path) :]

    def __str__(self) -> str:
        return self.path


@dataclass(frozen=True, slots=True)
class FieldBinding:
    """A data-holder field paired with the enum member that populates it."""

    field_name: str
    field_type: Any
    payload_type: Any
    member: EnumMember


@dataclass(frozen=True, slots=True)
class DataHolderDescriptor:
    """Field bindings of one data holder plus its declared enum path."""

    holder_name: str
    enum_path: tuple[str, ...]
    bindings: tuple[FieldBinding, ...]

    @property
    def enum_name(self) -> str:
        return _PATH_SEPARATOR.join(self.enum_path)


def qualified_segments(value: Any) -> tuple[str, ...]:
    """Return the ``__qualname__`` segments of ``value`` without function-local prefixes."""
    segments = tuple(value.__qualname__.split(_PATH_SEPARATOR))
    if _LOCALS_SEGMENT in segments:
        last_locals = len(segments) - 1 - segments[::-1].index(_LOCALS_SEGMENT)
        segments = segments[last_locals + 1 :]
    return segments


def read_raw_annotations(holder: type[Any]) -> dict[str, Any]:
    """Return the holder's own annotations, leaving string annotations unevaluated.

    Deferred annotations that reference names not bound yet (for example the
    holder itself while its decorator runs) come back as strings.
    """
    if sys.version_info >= (3, 14):
        try:
            return dict(inspect.get_annotations(holder))
        except NameError:
            return dict(
                annotationlib.get_annotations(holder, format=annotationlib.Format.STRING),
            )
    return dict(inspect.get_annotations(holder))


def parse_enum_member(argument: Any, *, holder: str, field_name: str) -> EnumMember:
    """Parse one ``inject(...)`` argument into an ``EnumMember``.

    Args:
        argument: Dotted path string or variant class taken from the marker.
        holder: Data holder name used in diagnostics.
        field_name: Field carrying the marker, used in diagnostics.

    Raises:
        InjectinyMalformedAnnotationError: If the argument is not a path with at
            least two identifier segments.

    """
    if is_runtime_class(argument):
        segments = qualified_segments(argument)
    elif isinstance(argument, str):
        segments = tuple(segment.strip() for segment in argument.split(_PATH_SEPARATOR))
    else:
        msg = (
            f"Injectable '{holder}' field '{field_name}': {_EXPECTED_MEMBER_FORM}, "
            f"got {argument!r}."
        )
        raise InjectinyMalformedAnnotationError(msg, holder=holder, field_name=field_name)

    if len(segments) < _MIN_MEMBER_SEGMENTS:
        msg = (
            f"Injectable '{holder}' field '{field_name}': {_EXPECTED_MEMBER_FORM}, "
            f"got '{_PATH_SEPARATOR.join(segments)}'."
        )
        raise InjectinyMalformedAnnotationError(msg, holder=holder, field_name=field_name)

    invalid_segments = [
        segment
        for segment in segments
        if not segment.isidentifier() or keyword.iskeyword(segment)
    ]
    if invalid_segments:
        msg = (
            f"Injectable '{holder}' field '{field_name}': {_EXPECTED_MEMBER_FORM}, "
            f"got invalid segment(s) {invalid_segments!r}."
        )
        raise InjectinyMalformedAnnotationError(msg, holder=holder, field_name=field_name)

    return EnumMember(segments=segments)


class DataHolderParser:
    """Reads a data holder's field annotations into a ``DataHolderDescriptor``.

    Parsing never mutates the class; annotation stripping happens only after
    the generated dispatch was built successfully.
    """

    def __init__(self, *, holder: type[Any], enum_type: type[Any]) -> None:
        self._holder = holder
        self._enum_type = enum_type
        self._holder_name = holder.__qualname__
        self._enum_path = qualified_segments(enum_type)

    def parse(self) -> DataHolderDescriptor:
        """Build the descriptor, failing on the first malformed field."""
        bindings: list[FieldBinding] = []
        for field_name, annotation in self._read_annotations().items():
            markers = extract_inject_markers(annotation)
            if not markers:
                continue
            if len(markers) > 1:
                msg = (
                    f"Injectable '{self._holder_name}' field '{field_name}' declares "
                    f"{len(markers)} inject markers; expected exactly one."
                )
                raise InjectinyMalformedAnnotationError(
                    msg,
                    holder=self._holder_name,
                    field_name=field_name,
                )

            member = parse_enum_member(
                markers[0].member,
                holder=self._holder_name,
                field_name=field_name,
            )
            field_type = strip_inject_annotation(annotation)
            bindings.append(
                FieldBinding(
                    field_name=field_name,
                    field_type=field_type,
                    payload_type=self._payload_type(field_name=field_name, field_type=field_type),
                    member=member,
                ),
            )

        return DataHolderDescriptor(
            holder_name=self._holder_name,
            enum_path=self._enum_path,
            bindings=tuple(bindings),
        )

    def _read_annotations(self) -> dict[str, Any]:
        # Unmarked string annotations that fail to evaluate are not bindings; skip them.
        module = sys.modules.get(self._holder.__module__)
        globalns = dict(vars(module)) if module is not None else {}
        localns: dict[str, Any] = {
            self._enum_type.__name__: self._enum_type,
            self._holder.__name__: self._holder,
            **vars(self._holder),
        }

        annotations: dict[str, Any] = {}
        for field_name, annotation in read_raw_annotations(self._holder).items():
            if not isinstance(annotation, str):
                annotations[field_name] = annotation
                continue
            try:
                annotations[field_name] = eval(annotation, globalns, localns)  # noqa: S307
            except (AttributeError, NameError, SyntaxError, TypeError) as error:
                if _MARKER_SOURCE_PATTERN.search(annotation) is None:
                    continue
                msg = (
                    f"Injectable '{self._holder_name}' field '{field_name}' annotation "
                    f"cannot be evaluated: {error}"
                )
                raise InjectinyMalformedAnnotationError(
                    msg,
                    holder=self._holder_name,
                    field_name=field_name,
                ) from error
        return annotations

    def _payload_type(self, *, field_name: str, field_type: Any) -> Any:
        declared_type = field_type
        if get_origin(declared_type) is Annotated:
            declared_type = get_args(declared_type)[0]

        if declared_type is Injected:
            return Any
        if get_origin(declared_type) is Injected:
            return get_args(declared_type)[0]

        msg = (
            f"Injectable '{self._holder_name}' field '{field_name}' must be declared as "
            f"Injected[T], got {field_type!r}."
        )
        raise InjectinyMalformedAnnotationError(
            msg,
            holder=self._holder_name,
            field_name=field_name,
        )
