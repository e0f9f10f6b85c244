"""Errors: malformed markers and mixed enums fail when the class is defined.

Reading an injected field before anything was injected fails loudly too.
"""

from __future__ import annotations

from typing import Annotated

from injectiny import (
    Injected,
    InjectinyInconsistentEnumReferenceError,
    InjectinyMalformedAnnotationError,
    InjectinyNotInjectedError,
    TaggedUnion,
    Variant,
    inject,
    injectable,
)


class Model(TaggedUnion):
    Name: Variant[str]


class Other(TaggedUnion):
    Count: Variant[int]


@injectable(Model)
class View:
    name: Annotated[Injected[str], inject(Model.Name)]


def main() -> None:
    try:

        @injectable(Model)
        class Broken:
            name: Annotated[Injected[str], inject("Name")]

    except InjectinyMalformedAnnotationError as error:
        print(f"malformed_field={error.field_name}")  # => malformed_field=name

    try:

        @injectable(Model)
        class Mixed:
            name: Annotated[Injected[str], inject(Model.Name)]
            count: Annotated[Injected[int], inject(Other.Count)]

    except InjectinyInconsistentEnumReferenceError as error:
        print(f"inconsistent_member={error.member}")  # => inconsistent_member=Other.Count

    view = View()
    try:
        _ = view.name
    except InjectinyNotInjectedError as error:
        print(f"not_injected={error.field_name}")  # => not_injected=name


if __name__ == "__main__":
    main()
