from __future__ import annotations

import keyword
from dataclasses import dataclass

from injectiny.dispatch.templates.parser import DataHolderDescriptor
from injectiny.dispatch.templates.validator import DataHolderValidator

VALUE_ARG_NAME = "value"
PAYLOAD_NAME = "payload"
_FALLBACK_ENUM_ALIAS = "_injectable_enum"
_GENERATED_MODULE_NAMES = frozenset(
    {
        "Any",
        "annotations",
        "build_inject",
        "enum_type",
        "inject",
        "self",
        "_Injected",
        "_MISSING_ENUM",
        VALUE_ARG_NAME,
        PAYLOAD_NAME,
    },
)


@dataclass(frozen=True, slots=True)
class DispatchArm:
    """One ``case <variant>(payload)`` rule assigning into a field."""

    field_name: str
    pattern: str
    member_path: str


@dataclass(frozen=True, slots=True)
class DispatchPlan:
    """Deterministic plan consumed by the renderer."""

    holder_name: str
    enum_name: str
    enum_alias: str
    arms: tuple[DispatchArm, ...]
    value_arg_name: str = VALUE_ARG_NAME
    payload_name: str = PAYLOAD_NAME


class DispatchPlanner:
    """Builds deterministic metadata for dispatch code generation."""

    def __init__(self, *, descriptor: DataHolderDescriptor) -> None:
        self._descriptor = descriptor
        self._validator = DataHolderValidator()

    def build(self) -> DispatchPlan:
        """Validate the descriptor and build the dispatch plan."""
        bindings = self._validator.validate(self._descriptor)
        enum_alias = self._enum_alias()
        arms = tuple(
            DispatchArm(
                field_name=binding.field_name,
                pattern=".".join(
                    (enum_alias, *binding.member.relative_to(self._descriptor.enum_path)),
                ),
                member_path=binding.member.path,
            )
            for binding in bindings
        )
        return DispatchPlan(
            holder_name=self._descriptor.holder_name,
            enum_name=self._descriptor.enum_name,
            enum_alias=enum_alias,
            arms=arms,
        )

    def _enum_alias(self) -> str:
        # The enum is bound as a module global of the generated code under this name.
        name = self._descriptor.enum_path[-1] if self._descriptor.enum_path else ""
        if not name.isidentifier() or keyword.iskeyword(name):
            return _FALLBACK_ENUM_ALIAS
        if name in _GENERATED_MODULE_NAMES:
            return f"_{name}_enum"
        return name
