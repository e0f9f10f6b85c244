from __future__ import annotations

from injectiny.dispatch.templates.parser import DataHolderDescriptor, FieldBinding
from injectiny.exceptions import InjectinyInconsistentEnumReferenceError


class DataHolderValidator:
    """Checks that every binding of a data holder names its declared enum."""

    def validate(self, descriptor: DataHolderDescriptor) -> tuple[FieldBinding, ...]:
        """Return the bindings unchanged, or raise on the first foreign enum reference.

        Args:
            descriptor: Parsed data holder to check.

        Raises:
            InjectinyInconsistentEnumReferenceError: If a binding's member does not
                belong to ``descriptor.enum_path``.

        """
        for binding in descriptor.bindings:
            member = binding.member
            if member.has_enum_name(descriptor.enum_path) and member.relative_to(
                descriptor.enum_path,
            ):
                continue

            msg = (
                f"Injectable '{descriptor.holder_name}': all injected fields must be from the "
                f"same enum type '{descriptor.enum_name}', but field '{binding.field_name}' "
                f"references '{member.path}'."
            )
            raise InjectinyInconsistentEnumReferenceError(
                msg,
                holder=descriptor.holder_name,
                enum_name=descriptor.enum_name,
                member=member.path,
            )
        return descriptor.bindings
