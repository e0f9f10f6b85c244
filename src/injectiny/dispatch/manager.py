from __future__ import annotations

from dataclasses import dataclass
from typing import Any, cast

from injectiny.dispatch.protocol import BuildInjectFunctionProtocol, InjectFunctionProtocol
from injectiny.dispatch.templates.parser import DataHolderDescriptor, FieldBinding
from injectiny.dispatch.templates.planner import DispatchPlan, DispatchPlanner
from injectiny.dispatch.templates.renderer import DispatchTemplateRenderer
from injectiny.exceptions import InjectinyMalformedAnnotationError
from injectiny.type_checks import is_runtime_class


@dataclass(frozen=True, slots=True)
class GeneratedDispatch:
    """Compiled dispatch for one data holder."""

    inject: InjectFunctionProtocol
    source: str
    plan: DispatchPlan


class DispatchManager:
    """Manager for generated ``inject`` dispatch functions."""

    def __init__(self) -> None:
        self._template_renderer = DispatchTemplateRenderer()

    def build_dispatch(
        self,
        descriptor: DataHolderDescriptor,
        enum_type: type[Any],
    ) -> GeneratedDispatch:
        """Validate the descriptor, generate the dispatch code and compile it.

        Nothing is compiled when validation fails or when a bound member does
        not resolve to a variant class of ``enum_type``.

        Args:
            descriptor: Parsed data holder.
            enum_type: Runtime enum class the generated patterns match against.

        Raises:
            InjectinyInconsistentEnumReferenceError: If a binding names another enum.
            InjectinyMalformedAnnotationError: If a binding names no usable variant.

        """
        plan = DispatchPlanner(descriptor=descriptor).build()
        for binding in descriptor.bindings:
            self._resolve_variant(descriptor=descriptor, binding=binding, enum_type=enum_type)
        code = self._template_renderer.get_dispatch_code(plan=plan)

        namespace: dict[str, Any] = {}
        exec(code, namespace)  # noqa: S102

        build_inject = cast("BuildInjectFunctionProtocol", namespace["build_inject"])
        return GeneratedDispatch(
            inject=build_inject(enum_type),
            source=code,
            plan=plan,
        )

    def _resolve_variant(
        self,
        *,
        descriptor: DataHolderDescriptor,
        binding: FieldBinding,
        enum_type: type[Any],
    ) -> type[Any]:
        # Generated arms are positional class patterns: ``case Enum.Variant(payload)``.
        variant: Any = enum_type
        for segment in binding.member.relative_to(descriptor.enum_path):
            variant = getattr(variant, segment, None)
            if variant is None:
                break

        if is_runtime_class(variant) and getattr(variant, "__match_args__", ()):
            return variant

        msg = (
            f"Injectable '{descriptor.holder_name}' field '{binding.field_name}': "
            f"'{binding.member.path}' does not name a variant of '{descriptor.enum_name}' "
            "usable in a class pattern (a class with a non-empty __match_args__)."
        )
        raise InjectinyMalformedAnnotationError(
            msg,
            holder=descriptor.holder_name,
            field_name=binding.field_name,
        )
