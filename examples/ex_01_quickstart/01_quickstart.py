"""Quickstart: route tagged-union values into annotated fields.

Declare the values a view can receive as a tagged union, bind fields to its
variants with ``inject(...)`` and let ``@injectable`` generate ``inject``.
"""

from __future__ import annotations

from typing import Annotated

from injectiny import Injected, TaggedUnion, Variant, inject, injectable, is_injected


class Model(TaggedUnion):
    Name: Variant[str]
    Age: Variant[int]
    Theme: Variant[str]


@injectable(Model)
class Injectee:
    name: Annotated[Injected[str], inject(Model.Name)]
    age: Annotated[Injected[int], inject("Model.Age")]


def main() -> None:
    injectee = Injectee()
    print(f"age_injected={is_injected(injectee, 'age')}")  # => age_injected=False

    injectee.inject(Model.Name("Patje"))
    injectee.inject(Model.Age(25))
    print(f"name={injectee.name}")  # => name=Patje
    print(f"age={injectee.age}")  # => age=25

    injectee.inject(Model.Age(26))
    print(f"age_after_reinject={injectee.age}")  # => age_after_reinject=26

    # Theme is not bound on Injectee, so the value is ignored.
    injectee.inject(Model.Theme("dark"))
    print(f"name_after_theme={injectee.name}")  # => name_after_theme=Patje


if __name__ == "__main__":
    main()
