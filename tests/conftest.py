"""Shared pytest fixtures for injectiny tests."""

import pytest

from injectiny.dispatch.templates.renderer import DispatchTemplateRenderer
from injectiny.lock_mode import LockMode
from injectiny.orchestrator import Orchestrator
from injectiny.policies import ProducerPolicy


@pytest.fixture()
def orchestrator() -> Orchestrator:
    """Default orchestrator: producers re-invoked per target, no locking."""
    return Orchestrator()


@pytest.fixture()
def caching_orchestrator() -> Orchestrator:
    """Orchestrator that calls every producer once and reuses its value."""
    return Orchestrator(producer_policy=ProducerPolicy.CACHE)


@pytest.fixture()
def locking_orchestrator() -> Orchestrator:
    """Orchestrator that serializes registrations with a thread lock."""
    return Orchestrator(lock_mode=LockMode.THREAD)


@pytest.fixture()
def renderer() -> DispatchTemplateRenderer:
    """DispatchTemplateRenderer instance."""
    return DispatchTemplateRenderer()
