from typing import Annotated, Any, NamedTuple, get_args, get_origin

_ANNOTATED_MARKER_MIN_ARGS = 2


class InjectMarker(NamedTuple):
    """Marker that binds a field to one member of the injectable's enum.

    ``member`` is either a dotted path string (``"Model.Name"``) or the
    variant class itself, whose ``__qualname__`` supplies the path.
    """

    member: Any


def inject(member: Any) -> InjectMarker:
    """Mark a data-holder field as populated by one tagged-union variant.

    Use it as ``typing.Annotated`` metadata on an ``Injected[T]`` field of a
    class decorated with ``@injectable``.

    Args:
        member: Dotted ``Enum.Member`` path or the variant class.

    Examples:
        .. code-block:: python

            @injectable(Model)
            class View:
                name: Annotated[Injected[str], inject(Model.Name)]
                age: Annotated[Injected[int], inject("Model.Age")]

    """
    return InjectMarker(member=member)


def is_inject_annotation(annotation: Any) -> bool:
    """Return True when annotation is Annotated[..., InjectMarker(...)]."""
    return bool(extract_inject_markers(annotation))


def extract_inject_markers(annotation: Any) -> tuple[InjectMarker, ...]:
    """Return every inject marker attached to the annotation, in order."""
    if get_origin(annotation) is not Annotated:
        return ()
    annotation_args = get_args(annotation)
    if len(annotation_args) < _ANNOTATED_MARKER_MIN_ARGS:
        return ()
    metadata = annotation_args[1:]
    return tuple(item for item in metadata if isinstance(item, InjectMarker))


def strip_inject_annotation(annotation: Any) -> Any:
    """Strip inject markers while preserving other Annotated metadata."""
    if not is_inject_annotation(annotation):
        return annotation

    annotation_args = get_args(annotation)
    field_type = annotation_args[0]
    metadata = annotation_args[1:]
    filtered_metadata = tuple(item for item in metadata if not isinstance(item, InjectMarker))
    if not filtered_metadata:
        return field_type
    return build_annotated_key((field_type, *filtered_metadata))


def build_annotated_key(params: tuple[object, ...]) -> Any:
    """Return Annotated[...] with a pre-built params tuple (Py 3.10+ compatible)."""
    try:
        return Annotated.__class_getitem__(params)  # type: ignore[attr-defined]
    except AttributeError:
        return Annotated.__getitem__(params)  # type: ignore[attr-defined]
