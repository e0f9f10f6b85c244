from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from contextlib import AbstractContextManager, nullcontext
from typing import Any, Generic, TypeVar

from injectiny.dispatch.protocol import Injectable
from injectiny.exceptions import InjectinyInvalidRegistrationError
from injectiny.lock_mode import LockMode
from injectiny.policies import ProducerPolicy

E = TypeVar("E")
ProducerT = TypeVar("ProducerT", bound=Callable[[], Any])
TargetT = TypeVar("TargetT", bound=Injectable[Any])

logger = logging.getLogger(__name__)


class Orchestrator(Generic[E]):
    """Fan tagged-union values out from producers to injectable targets.

    Producers are zero-argument factories returning an ``E`` value. Each
    registration propagates immediately and synchronously:

    - ``add_producer`` calls the new producer for every registered target;
    - ``add_target`` calls every registered producer for the new target.

    With the default ``ProducerPolicy.REINVOKE`` a producer is called once per
    (producer, target) pairing over the orchestrator's lifetime, so it must
    tolerate being called many times (for example, cloning a shared handle on
    every call). ``ProducerPolicy.CACHE`` calls each producer once and reuses
    the value.

    Examples:
        .. code-block:: python

            orchestrator: Orchestrator[Model] = Orchestrator()
            orchestrator.add_producer(lambda: Model.Name("Patje"))
            view = orchestrator.add_target(View())
            assert view.name == "Patje"

    """

    def __init__(
        self,
        *,
        producer_policy: ProducerPolicy = ProducerPolicy.REINVOKE,
        lock_mode: LockMode = LockMode.NONE,
    ) -> None:
        self._producer_policy = producer_policy
        self._lock: AbstractContextManager[Any] = (
            threading.RLock() if lock_mode is LockMode.THREAD else nullcontext()
        )
        self._producers: list[Callable[[], E]] = []
        self._targets: list[Injectable[E]] = []
        self._cached_values: dict[int, E] = {}

    @property
    def producers(self) -> tuple[Callable[[], E], ...]:
        return tuple(self._producers)

    @property
    def targets(self) -> tuple[Injectable[E], ...]:
        return tuple(self._targets)

    def add_producer(self, producer: ProducerT) -> ProducerT:
        """Register a producer and inject its value into every existing target.

        Usable as a decorator; returns ``producer`` unchanged.

        Raises:
            InjectinyInvalidRegistrationError: If ``producer`` is not callable.

        """
        if not callable(producer):
            msg = f"Producer must be a zero-argument callable, got {producer!r}."
            raise InjectinyInvalidRegistrationError(msg)

        with self._lock:
            self._producers.append(producer)
            index = len(self._producers) - 1
            logger.debug(
                "Registered producer #%d %r; propagating to %d target(s)",
                index,
                producer,
                len(self._targets),
            )
            for target in tuple(self._targets):
                self._propagate(index=index, target=target)
        return producer

    def add_target(self, target: TargetT) -> TargetT:
        """Register a target and inject every registered producer's value into it.

        Raises:
            InjectinyInvalidRegistrationError: If ``target`` has no ``inject`` method.

        """
        if not callable(getattr(target, "inject", None)):
            msg = f"Target must expose an inject() method, got {target!r}."
            raise InjectinyInvalidRegistrationError(msg)

        with self._lock:
            self._targets.append(target)
            logger.debug(
                "Registered target %r; propagating %d producer(s)",
                target,
                len(self._producers),
            )
            for index in range(len(self._producers)):
                self._propagate(index=index, target=target)
        return target

    def refresh(self) -> None:
        """Propagate every producer into every target again.

        Under ``ProducerPolicy.CACHE`` cached values are dropped first, so each
        producer runs exactly once more.
        """
        with self._lock:
            self._cached_values.clear()
            for target in tuple(self._targets):
                for index in range(len(self._producers)):
                    self._propagate(index=index, target=target)

    def _propagate(self, *, index: int, target: Injectable[E]) -> None:
        target.inject(self._produce(index))

    def _produce(self, index: int) -> E:
        if self._producer_policy is not ProducerPolicy.CACHE:
            return self._producers[index]()

        if index not in self._cached_values:
            self._cached_values[index] = self._producers[index]()
        return self._cached_values[index]
