from __future__ import annotations


class InjectinyError(Exception):
    """Represent a base class for all injectiny-specific failures.

    Catch this type when you want to handle any injectiny error path without
    matching each concrete exception class individually.
    """


class InjectinyMalformedAnnotationError(InjectinyError):
    """Signal an ``inject(...)`` marker that cannot be parsed.

    Raised by ``@injectable`` while reading field annotations, for example when
    the marker argument is not a dotted ``Enum.Member`` path with at least two
    segments, when one field carries more than one marker, or when the bound
    field is not declared as ``Injected[T]``.

    Generation aborts for the whole class on the first malformed field.
    """

    def __init__(self, msg: str, *, holder: str, field_name: str | None = None) -> None:
        super().__init__(msg)
        self.holder = holder
        self.field_name = field_name


class InjectinyUnsupportedTargetError(InjectinyError):
    """Signal ``@injectable`` applied to something that is not a data holder.

    Raised for non-class targets, ``Enum`` and ``TaggedUnion`` subclasses,
    classes whose instances carry no ``__dict__`` and classes that already
    define ``inject``. Also raised when the enum argument itself is not a class.
    """

    def __init__(self, msg: str, *, target: object) -> None:
        super().__init__(msg)
        self.target = target


class InjectinyInconsistentEnumReferenceError(InjectinyError):
    """Signal an injected field bound to a different enum than its class.

    Every ``inject(...)`` marker on a data holder must name a member of the
    enum passed to ``@injectable``. The error is attached to the data holder,
    not to the offending field, because the whole class fails generation.
    """

    def __init__(self, msg: str, *, holder: str, enum_name: str, member: str) -> None:
        super().__init__(msg)
        self.holder = holder
        self.enum_name = enum_name
        self.member = member


class InjectinyNotInjectedError(InjectinyError):
    """Signal a read of an injected slot before any value was injected.

    A missing dependency is a programming error, so reads fail loudly instead
    of returning a default.

    Typical fix is registering the data holder with an ``Orchestrator`` (or
    calling ``inject``) before the field is first used.
    """

    def __init__(self, msg: str, *, field_name: str | None = None) -> None:
        super().__init__(msg)
        self.field_name = field_name


class InjectinyInvalidRegistrationError(InjectinyError):
    """Signal an invalid producer or target passed to ``Orchestrator``.

    Producers must be zero-argument callables and targets must expose an
    ``inject`` method.
    """
