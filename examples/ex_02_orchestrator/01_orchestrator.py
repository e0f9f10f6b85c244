"""Orchestrator: register producers once and fan values out to every view.

Registering a target pulls a fresh value from every producer; registering a
producer pushes its value into every existing target. Producers are called
once per (producer, target) pair unless ``ProducerPolicy.CACHE`` is selected.
"""

from __future__ import annotations

from typing import Annotated

from injectiny import (
    Injected,
    Orchestrator,
    ProducerPolicy,
    TaggedUnion,
    Variant,
    inject,
    injectable,
)


class Model(TaggedUnion):
    Counter: Variant[list[int]]
    Title: Variant[str]


@injectable(Model)
class HeaderView:
    title: Annotated[Injected[str], inject(Model.Title)]


@injectable(Model)
class CounterView:
    counter: Annotated[Injected[list[int]], inject(Model.Counter)]
    title: Annotated[Injected[str], inject(Model.Title)]


def main() -> None:
    shared_counter = [0]
    calls = {"title": 0}
    orchestrator: Orchestrator[Model] = Orchestrator()

    @orchestrator.add_producer
    def produce_title() -> Model:
        calls["title"] += 1
        return Model.Title("Dashboard")

    header = orchestrator.add_target(HeaderView())
    print(f"header_title={header.title}")  # => header_title=Dashboard

    counters = orchestrator.add_target(CounterView())
    orchestrator.add_producer(lambda: Model.Counter(shared_counter))
    counters.counter[0] += 1
    print(f"shared_counter={shared_counter[0]}")  # => shared_counter=1
    print(f"counter_title={counters.title}")  # => counter_title=Dashboard
    print(f"title_calls={calls['title']}")  # => title_calls=2

    cached: Orchestrator[Model] = Orchestrator(producer_policy=ProducerPolicy.CACHE)
    cached.add_producer(produce_title)
    cached.add_target(HeaderView())
    cached.add_target(HeaderView())
    print(f"title_calls_with_cache={calls['title']}")  # => title_calls_with_cache=3


if __name__ == "__main__":
    main()
