from __future__ import annotations

from typing import Any, Generic, TypeVar, overload

from typing_extensions import Self

from injectiny.exceptions import InjectinyNotInjectedError

T = TypeVar("T")

_EMPTY: Any = object()


class Injected(Generic[T]):
    """Optional-value cell holding one injected payload.

    A cell starts empty (``Injected()``) and becomes populated through
    ``Injected.from_value``. Reading an empty cell raises
    ``InjectinyNotInjectedError``. The cell is not synchronized; callers that
    inject concurrently into one instance must serialize themselves.

    Examples:
        .. code-block:: python

            cell = Injected.from_value(25)
            assert cell.is_injected()
            assert cell.value == 25

    """

    __slots__ = ("_value",)

    def __init__(self) -> None:
        self._value: T = _EMPTY

    @classmethod
    def from_value(cls, value: T) -> Self:
        """Return a populated cell holding ``value``."""
        cell = cls()
        cell._value = value
        return cell

    def is_injected(self) -> bool:
        """Return True when a value has been injected."""
        return self._value is not _EMPTY

    @property
    def value(self) -> T:
        """Return the injected value, failing loudly when the cell is empty."""
        if self._value is _EMPTY:
            msg = "Injected value was read before anything was injected."
            raise InjectinyNotInjectedError(msg)
        return self._value

    @value.setter
    def value(self, value: T) -> None:
        if self._value is _EMPTY:
            msg = "Injected value can only be replaced once it has been injected."
            raise InjectinyNotInjectedError(msg)
        self._value = value

    def __repr__(self) -> str:
        if self._value is _EMPTY:
            return f"{type(self).__name__}(<empty>)"
        return f"{type(self).__name__}({self._value!r})"


class InjectedField:
    """Data descriptor installed by ``@injectable`` for every bound field.

    Instance reads return the payload of the stored ``Injected`` cell, so a
    populated field reads like a plain attribute.

    Writes accept any ``Injected`` cell from any caller: the generated
    ``inject`` method, a dataclass ``__init__`` storing its default, or user
    code presetting a cell (``View(name=Injected.from_value("x"))``). Raw
    payloads are rejected with ``TypeError``. Assigning the descriptor itself
    stores an empty cell.
    """

    __slots__ = ("_name",)

    def __init__(self, name: str) -> None:
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    def __set_name__(self, owner: type[Any], name: str) -> None:
        self._name = name

    @overload
    def __get__(self, instance: None, owner: type[Any] | None = None) -> Self: ...

    @overload
    def __get__(self, instance: object, owner: type[Any] | None = None) -> Any: ...

    def __get__(self, instance: object | None, owner: type[Any] | None = None) -> Any:
        if instance is None:
            return self
        return self.cell(instance).value

    def __set__(self, instance: object, value: Any) -> None:
        if value is self:
            # dataclass __init__ passes the class attribute through as the default
            value = Injected()
        if not isinstance(value, Injected):
            msg = (
                f"Field '{self._name}' of '{type(instance).__qualname__}' only accepts "
                f"Injected cells, got {type(value).__qualname__}. Assign through inject()."
            )
            raise TypeError(msg)
        instance.__dict__[self._name] = value

    def cell(self, instance: object) -> Injected[Any]:
        """Return the cell stored on ``instance``, or raise if nothing was injected."""
        cell = instance.__dict__.get(self._name)
        if cell is None or not cell.is_injected():
            msg = (
                f"Field '{self._name}' of '{type(instance).__qualname__}' was read before "
                "a value was injected."
            )
            raise InjectinyNotInjectedError(msg, field_name=self._name)
        return cell


def injected_slot(instance: object, field_name: str) -> Injected[Any]:
    """Return the populated ``Injected`` cell behind an injected field.

    Raises:
        InjectinyNotInjectedError: If nothing was injected into the field yet.
        AttributeError: If ``field_name`` is not an injected field.

    """
    return _injected_field(instance, field_name).cell(instance)


def is_injected(instance: object, field_name: str) -> bool:
    """Return True when ``field_name`` on ``instance`` holds an injected value."""
    _injected_field(instance, field_name)
    cell = instance.__dict__.get(field_name)
    return cell is not None and cell.is_injected()


def _injected_field(instance: object, field_name: str) -> InjectedField:
    descriptor = getattr(type(instance), field_name, None)
    if not isinstance(descriptor, InjectedField):
        msg = f"'{type(instance).__qualname__}' has no injected field '{field_name}'."
        raise AttributeError(msg)
    return descriptor
