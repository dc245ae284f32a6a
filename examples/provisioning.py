"""Provisioning steps ordered with the library API.

Each step carries a payload (the command it runs). Steps are registered
first, then their dependencies are added as edges; sorting yields an order
in which every step runs after the steps it needs.
"""

from dataclasses import dataclass

import dagorder as dg


@dataclass(frozen=True)
class Step:
    command: str


graph = dg.Graph[Step]()
graph.register_vertex("network", Step("configure-network"))
graph.register_vertex("disks", Step("mount-disks"))
graph.register_vertex("packages", Step("apt-get install -y nginx"))
graph.register_vertex("service", Step("systemctl start nginx"))

graph.add_edge("packages", "network")
graph.add_edge("service", "packages")
graph.add_edge("service", "disks")


if __name__ == "__main__":
    try:
        result = graph.topological_sort()
    except dg.CycleError as e:
        print(f"Cannot provision: {e}")
        raise SystemExit(1) from e

    for position, (name, step) in enumerate(result.items(), start=1):
        print(f"{position}. {name}: {step.command}")
