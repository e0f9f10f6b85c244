from textwrap import dedent

MODULE_TEMPLATE = dedent(
    """
    {{ module_docstring_block }}

    {{ imports_block }}

    {{ globals_block }}


    {{ inject_function_block }}


    {{ build_function_block }}
    """,
).strip()

IMPORTS_TEMPLATE = dedent(
    """
    from __future__ import annotations

    from typing import Any

    from injectiny.injected import Injected as _Injected
    """,
).strip()

GLOBALS_TEMPLATE = dedent(
    """
    _MISSING_ENUM: Any = object()

    {{ enum_alias }}: Any = _MISSING_ENUM
    """,
).strip()

INJECT_FUNCTION_TEMPLATE = dedent(
    """
    def inject(self: Any, {{ value_arg_name }}: {{ enum_alias }}) -> None:
    {% if docstring_block %}
    {{ docstring_block }}
    {% endif %}
    {{ body_block }}
    """,
).strip()

BUILD_FUNCTION_TEMPLATE = dedent(
    """
    def build_inject(enum_type: Any) -> Any:
    {% if docstring_block %}
    {{ docstring_block }}
    {% endif %}
        global {{ enum_alias }}
        {{ enum_alias }} = enum_type
        return inject
    """,
).strip()
