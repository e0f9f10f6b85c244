from __future__ import annotations

import logging
import re
from pathlib import Path

import pytest

from injectiny.dispatch.templates.parser import DataHolderDescriptor, EnumMember, FieldBinding
from injectiny.dispatch.templates.planner import DispatchPlan, DispatchPlanner
from injectiny.dispatch.templates.renderer import DispatchTemplateRenderer, main

_EXPECTED_DIR = Path(__file__).with_name("codegen_expected")


def _plan(*members: tuple[str, str], holder_name: str = "Injectee") -> DispatchPlan:
    descriptor = DataHolderDescriptor(
        holder_name=holder_name,
        enum_path=("Model",),
        bindings=tuple(
            FieldBinding(
                field_name=field_name,
                field_type=None,
                payload_type=None,
                member=EnumMember(segments=("Model", variant_name)),
            )
            for field_name, variant_name in members
        ),
    )
    return DispatchPlanner(descriptor=descriptor).build()


def test_codegen_matches_expected_for_two_bound_fields(
    renderer: DispatchTemplateRenderer,
) -> None:
    generated = renderer.get_dispatch_code(plan=_plan(("name", "Name"), ("age", "Age")))
    expected = _read_expected("injectee_two_fields.txt")

    assert _normalize_dynamic_metadata(generated) == _normalize_dynamic_metadata(expected)


def test_codegen_without_bindings_only_emits_default_arm(
    renderer: DispatchTemplateRenderer,
) -> None:
    generated = renderer.get_dispatch_code(plan=_plan())

    assert "    match value:\n        case _:\n            pass\n" in generated
    assert "Bound variants: none" in generated
    assert "- bound fields: none" in generated
    assert "case Model." not in generated


def test_codegen_emits_arms_in_binding_order(renderer: DispatchTemplateRenderer) -> None:
    generated = renderer.get_dispatch_code(
        plan=_plan(("c", "Third"), ("a", "First"), ("b", "Second")),
    )

    positions = [
        generated.index(f"case Model.{variant_name}(payload):")
        for variant_name in ("Third", "First", "Second")
    ]
    assert positions == sorted(positions)
    assert generated.index("case _:") > positions[-1]


@pytest.mark.parametrize("arm_count", [0, 1, 5])
def test_codegen_output_compiles(renderer: DispatchTemplateRenderer, arm_count: int) -> None:
    members = tuple((f"field_{index}", f"Variant{index}") for index in range(arm_count))

    generated = renderer.get_dispatch_code(plan=_plan(*members))

    compile(generated, "<generated dispatch>", "exec")


def test_codegen_logs_plan_summary(
    renderer: DispatchTemplateRenderer,
    caplog: pytest.LogCaptureFixture,
) -> None:
    with caplog.at_level(logging.INFO, logger="injectiny.dispatch.templates.renderer"):
        renderer.get_dispatch_code(plan=_plan(("name", "Name")))

    assert "Dispatch codegen: holder=Injectee enum=Model enum_alias=Model arm_count=1" in (
        caplog.text
    )


def test_renderer_main_prints_demo_dispatch(capsys: pytest.CaptureFixture[str]) -> None:
    main()

    printed = capsys.readouterr().out
    expected = _read_expected("injectee_two_fields.txt")

    assert _normalize_dynamic_metadata(printed).rstrip() == (
        _normalize_dynamic_metadata(expected).rstrip()
    )


def _read_expected(name: str) -> str:
    return (_EXPECTED_DIR / name).read_text(encoding="utf-8")


def _normalize_dynamic_metadata(code: str) -> str:
    return re.sub(
        r"^injectiny version used for generation: .*$",
        "injectiny version used for generation: <version>",
        code,
        flags=re.MULTILINE,
    )
