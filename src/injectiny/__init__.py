from injectiny.dispatch.protocol import Injectable
from injectiny.exceptions import (
    InjectinyError,
    InjectinyInconsistentEnumReferenceError,
    InjectinyInvalidRegistrationError,
    InjectinyMalformedAnnotationError,
    InjectinyNotInjectedError,
    InjectinyUnsupportedTargetError,
)
from injectiny.injectable import get_dispatch_source, injectable, is_injectable
from injectiny.injected import Injected, InjectedField, injected_slot, is_injected
from injectiny.lock_mode import LockMode
from injectiny.markers import inject
from injectiny.orchestrator import Orchestrator
from injectiny.policies import ProducerPolicy
from injectiny.tagged_union import TaggedUnion, Variant

__all__ = [
    "Injectable",
    "Injected",
    "InjectedField",
    "InjectinyError",
    "InjectinyInconsistentEnumReferenceError",
    "InjectinyInvalidRegistrationError",
    "InjectinyMalformedAnnotationError",
    "InjectinyNotInjectedError",
    "InjectinyUnsupportedTargetError",
    "LockMode",
    "Orchestrator",
    "ProducerPolicy",
    "TaggedUnion",
    "Variant",
    "get_dispatch_source",
    "inject",
    "injectable",
    "injected_slot",
    "is_injectable",
    "is_injected",
]
