from __future__ import annotations

import logging
from importlib.metadata import PackageNotFoundError, version

from jinja2 import Environment, StrictUndefined, Template

from injectiny.dispatch.templates.parser import DataHolderDescriptor, EnumMember, FieldBinding
from injectiny.dispatch.templates.planner import DispatchPlan, DispatchPlanner
from injectiny.dispatch.templates.templates import (
    BUILD_FUNCTION_TEMPLATE,
    GLOBALS_TEMPLATE,
    IMPORTS_TEMPLATE,
    INJECT_FUNCTION_TEMPLATE,
    MODULE_TEMPLATE,
)

_INDENT = " " * 4
_GENERATOR_SOURCE = (
    "injectiny.dispatch.templates.renderer.DispatchTemplateRenderer.get_dispatch_code"
)
logger = logging.getLogger(__name__)


class DispatchTemplateRenderer:
    """Renderer for generated ``inject`` dispatch code."""

    def __init__(self) -> None:
        self._env = Environment(
            autoescape=False,  # noqa: S701
            trim_blocks=True,
            lstrip_blocks=True,
            undefined=StrictUndefined,
        )
        self._module_template = self._template(MODULE_TEMPLATE)
        self._imports_template = self._template(IMPORTS_TEMPLATE)
        self._globals_template = self._template(GLOBALS_TEMPLATE)
        self._inject_function_template = self._template(INJECT_FUNCTION_TEMPLATE)
        self._build_function_template = self._template(BUILD_FUNCTION_TEMPLATE)

    def get_dispatch_code(self, *, plan: DispatchPlan) -> str:
        """Render the generated dispatch module for a validated plan."""
        self._log_plan_strategy(plan=plan)

        rendered = self._module_template.render(
            module_docstring_block=self._render_module_docstring(plan=plan),
            imports_block=self._imports_template.render().strip(),
            globals_block=self._globals_template.render(enum_alias=plan.enum_alias).strip(),
            inject_function_block=self._render_inject_function(plan=plan),
            build_function_block=self._render_build_function(plan=plan),
        )
        return f"{rendered}\n"

    def _log_plan_strategy(self, *, plan: DispatchPlan) -> None:
        logger.info(
            "Dispatch codegen: holder=%s enum=%s enum_alias=%s arm_count=%d",
            plan.holder_name,
            plan.enum_name,
            plan.enum_alias,
            len(plan.arms),
        )

    def _render_module_docstring(self, *, plan: DispatchPlan) -> str:
        bound_fields = ", ".join(arm.field_name for arm in plan.arms) or "none"
        lines = [
            "Generated injectable dispatch module.",
            "",
            f"Generated by: {_GENERATOR_SOURCE}",
            f"injectiny version used for generation: {self._resolve_injectiny_version()}",
            "",
            "Generation configuration:",
            f"- data holder: {plan.holder_name}",
            f"- enum type: {plan.enum_name}",
            f"- enum alias: {plan.enum_alias}",
            f"- bound field count: {len(plan.arms)}",
            f"- bound fields: {bound_fields}",
            "",
            "Examples:",
            f">>> inject = build_inject({plan.enum_alias})",
            ">>> inject(holder, value)",
        ]
        return self._docstring_block(lines=lines, depth=0)

    def _render_inject_function(self, *, plan: DispatchPlan) -> str:
        body_lines = [f"match {plan.value_arg_name}:"]
        for arm in plan.arms:
            body_lines.extend(
                [
                    f"    case {arm.pattern}({plan.payload_name}):",
                    f"        self.{arm.field_name} = _Injected.from_value({plan.payload_name})",
                ],
            )
        body_lines.extend(
            [
                "    case _:",
                "        pass",
            ],
        )
        return self._inject_function_template.render(
            value_arg_name=plan.value_arg_name,
            enum_alias=plan.enum_alias,
            docstring_block=self._docstring_block(
                lines=self._inject_docstring_lines(plan=plan),
                depth=1,
            ),
            body_block=self._join_lines(self._indent_lines(body_lines, 1)),
        ).strip()

    def _render_build_function(self, *, plan: DispatchPlan) -> str:
        return self._build_function_template.render(
            enum_alias=plan.enum_alias,
            docstring_block=self._docstring_block(
                lines=[
                    f"Bind ``{plan.enum_alias}`` to the runtime enum type and return ``inject``.",
                ],
                depth=1,
            ),
        ).strip()

    def _inject_docstring_lines(self, *, plan: DispatchPlan) -> list[str]:
        bound_variants = ", ".join(
            f"{arm.member_path} -> {arm.field_name}" for arm in plan.arms
        )
        return [
            f"Route a ``{plan.enum_name}`` value into the field bound to its variant.",
            "",
            f"Generated for: {plan.holder_name}",
            f"Bound variants: {bound_variants or 'none'}",
            "Values of unbound variants are ignored.",
        ]

    def _resolve_injectiny_version(self) -> str:
        try:
            return version("injectiny")
        except PackageNotFoundError:
            return "unknown"

    def _docstring_lines(self, lines: list[str]) -> list[str]:
        return ['"""', *lines, '"""']

    def _docstring_block(self, *, lines: list[str], depth: int) -> str:
        return self._join_lines(self._indent_lines(self._docstring_lines(lines), depth))

    def _template(self, text: str) -> Template:
        return self._env.from_string(text)

    def _indent_lines(self, lines: list[str], depth: int) -> list[str]:
        prefix = _INDENT * depth
        return [f"{prefix}{line}" if line else "" for line in lines]

    def _join_lines(self, lines: list[str]) -> str:
        return "\n".join(lines)


def main() -> None:
    descriptor = DataHolderDescriptor(
        holder_name="Injectee",
        enum_path=("Model",),
        bindings=(
            FieldBinding(
                field_name="name",
                field_type="Injected[str]",
                payload_type=str,
                member=EnumMember(segments=("Model", "Name")),
            ),
            FieldBinding(
                field_name="age",
                field_type="Injected[int]",
                payload_type=int,
                member=EnumMember(segments=("Model", "Age")),
            ),
        ),
    )
    plan = DispatchPlanner(descriptor=descriptor).build()
    print(DispatchTemplateRenderer().get_dispatch_code(plan=plan))  # noqa: T201


if __name__ == "__main__":
    main()
