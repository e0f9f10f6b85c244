from enum import Enum


class ProducerPolicy(str, Enum):
    """Policy for invoking producers registered with an ``Orchestrator``."""

    REINVOKE = "reinvoke"
    """Call the producer once per (producer, target) pairing, on every registration event."""

    CACHE = "cache"
    """Call the producer once, on first need, and reuse its value for every target."""
