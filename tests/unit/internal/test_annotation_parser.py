from __future__ import annotations

from typing import Annotated, Any

import pytest

from injectiny.dispatch.templates.parser import (
    DataHolderParser,
    EnumMember,
    parse_enum_member,
    qualified_segments,
    read_raw_annotations,
)
from injectiny.exceptions import InjectinyMalformedAnnotationError
from injectiny.injected import Injected
from injectiny.markers import inject
from injectiny.tagged_union import TaggedUnion, Variant


class Model(TaggedUnion):
    Name: Variant[str]
    Age: Variant[int]


class Outer:
    class Nested(TaggedUnion):
        Flag: Variant[bool]


class View:
    name: Annotated[Injected[str], inject(Model.Name)]
    age: Annotated[Injected[int], inject("Model.Age")]
    title: str


def test_parse_enum_member_splits_dotted_string() -> None:
    member = parse_enum_member("Model.Name", holder="View", field_name="name")

    assert member == EnumMember(segments=("Model", "Name"))
    assert member.enum_name == "Model"
    assert member.variant_name == "Name"
    assert member.trailing == ()
    assert str(member) == "Model.Name"


def test_parse_enum_member_keeps_trailing_segments() -> None:
    member = parse_enum_member("Model.Group.Name", holder="View", field_name="name")

    assert member.variant_name == "Group"
    assert member.trailing == ("Name",)


def test_parse_enum_member_reads_variant_class_qualname() -> None:
    member = parse_enum_member(Model.Name, holder="View", field_name="name")

    assert member.segments == ("Model", "Name")


def test_parse_enum_member_keeps_nested_enum_path() -> None:
    member = parse_enum_member(Outer.Nested.Flag, holder="View", field_name="flag")

    assert member.segments == ("Outer", "Nested", "Flag")


def test_parse_enum_member_drops_function_local_prefix() -> None:
    class LocalModel(TaggedUnion):
        Item: Variant[int]

    member = parse_enum_member(LocalModel.Item, holder="View", field_name="item")

    assert member.segments == ("LocalModel", "Item")


@pytest.mark.parametrize("argument", ["Foo", "", Model])
def test_parse_enum_member_rejects_single_segment(argument: Any) -> None:
    with pytest.raises(
        InjectinyMalformedAnnotationError,
        match="expected enum member of the form `Enum.Member`",
    ) as exc_info:
        parse_enum_member(argument, holder="View", field_name="name")

    assert exc_info.value.holder == "View"
    assert exc_info.value.field_name == "name"


@pytest.mark.parametrize("argument", ["Model.", "Model.class", "Model.not-a-name", "1Model.Name"])
def test_parse_enum_member_rejects_invalid_segments(argument: str) -> None:
    with pytest.raises(InjectinyMalformedAnnotationError, match="invalid segment"):
        parse_enum_member(argument, holder="View", field_name="name")


def test_parse_enum_member_rejects_non_path_argument() -> None:
    with pytest.raises(InjectinyMalformedAnnotationError, match="got 42"):
        parse_enum_member(42, holder="View", field_name="name")


def test_qualified_segments_strips_locals() -> None:
    def build() -> type:
        class Inner:
            pass

        return Inner

    assert qualified_segments(build()) == ("Inner",)
    assert qualified_segments(Outer.Nested) == ("Outer", "Nested")


def test_data_holder_parser_collects_bindings_in_declaration_order() -> None:
    descriptor = DataHolderParser(holder=View, enum_type=Model).parse()

    assert descriptor.holder_name == "View"
    assert descriptor.enum_path == ("Model",)
    assert descriptor.enum_name == "Model"
    assert [binding.field_name for binding in descriptor.bindings] == ["name", "age"]
    assert [binding.member.path for binding in descriptor.bindings] == [
        "Model.Name",
        "Model.Age",
    ]
    assert [binding.payload_type for binding in descriptor.bindings] == [str, int]
    assert descriptor.bindings[0].field_type == Injected[str]


def test_data_holder_parser_does_not_mutate_class() -> None:
    DataHolderParser(holder=View, enum_type=Model).parse()

    assert "inject" not in View.__dict__
    assert "name" not in View.__dict__


def test_data_holder_parser_preserves_other_annotated_metadata() -> None:
    class Tagged:
        name: Annotated[Injected[str], "label", inject(Model.Name)]

    descriptor = DataHolderParser(holder=Tagged, enum_type=Model).parse()

    assert descriptor.bindings[0].field_type == Annotated[Injected[str], "label"]
    assert descriptor.bindings[0].payload_type is str


def test_data_holder_parser_accepts_bare_injected() -> None:
    class Bare:
        name: Annotated[Injected, inject(Model.Name)]

    descriptor = DataHolderParser(holder=Bare, enum_type=Model).parse()

    assert descriptor.bindings[0].payload_type is Any


def test_data_holder_parser_rejects_multiple_markers_on_one_field() -> None:
    class Twice:
        name: Annotated[Injected[str], inject(Model.Name), inject(Model.Age)]

    with pytest.raises(InjectinyMalformedAnnotationError, match="2 inject markers") as exc_info:
        DataHolderParser(holder=Twice, enum_type=Model).parse()

    assert exc_info.value.field_name == "name"


def test_data_holder_parser_rejects_field_not_declared_as_injected() -> None:
    class Plain:
        name: Annotated[str, inject(Model.Name)]

    with pytest.raises(InjectinyMalformedAnnotationError, match=r"must be declared as Injected\[T\]"):
        DataHolderParser(holder=Plain, enum_type=Model).parse()


def test_data_holder_parser_stops_at_first_malformed_field() -> None:
    class TwoBroken:
        first: Annotated[Injected[str], inject("First")]
        second: Annotated[Injected[str], inject("Second")]

    with pytest.raises(InjectinyMalformedAnnotationError) as exc_info:
        DataHolderParser(holder=TwoBroken, enum_type=Model).parse()

    assert exc_info.value.field_name == "first"


def test_data_holder_parser_wraps_unresolvable_annotations() -> None:
    class Unresolvable:
        name: Annotated[Injected[str], inject(MissingModel.Name)]  # noqa: F821

    with pytest.raises(InjectinyMalformedAnnotationError, match="cannot be evaluated") as exc_info:
        DataHolderParser(holder=Unresolvable, enum_type=Model).parse()

    assert isinstance(exc_info.value.__cause__, NameError)
    assert exc_info.value.field_name == "name"


def test_data_holder_parser_skips_unresolvable_unmarked_annotations() -> None:
    class Node:
        age: Annotated[Injected[int], inject(Model.Age)]
        parent: Node | None = None
        sibling: MissingType | None = None  # noqa: F821

    descriptor = DataHolderParser(holder=Node, enum_type=Model).parse()

    assert [binding.field_name for binding in descriptor.bindings] == ["age"]


def test_data_holder_parser_resolves_function_local_enum() -> None:
    class LocalModel(TaggedUnion):
        Item: Variant[int]

    class Holder:
        item: Annotated[Injected[int], inject(LocalModel.Item)]

    descriptor = DataHolderParser(holder=Holder, enum_type=LocalModel).parse()

    assert descriptor.bindings[0].member.segments == ("LocalModel", "Item")
    assert descriptor.bindings[0].payload_type is int


def test_read_raw_annotations_leaves_strings_unevaluated() -> None:
    class Holder:
        parent: Holder | None

    assert read_raw_annotations(Holder) == {"parent": "Holder | None"}
