"""Loading dependency declarations from TOML files.

A dependency file declares one table per unit under ``[units]``::

    [units.gcc]
    description = "GNU compiler collection"
    depends_on = ["libc"]

    [units.libc]
    data = { version = "2.39" }

Units are loaded in two passes: every declared unit is registered first,
then each ``depends_on`` entry is checked against the declared units and
turned into an edge. A reference to an undeclared unit is reported as
:class:`UnknownDependencyError` before the graph ever sees it.
"""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ._errors import CycleError
from ._graph import Graph

if TYPE_CHECKING:
    from ._graph import SortResult

logger = logging.getLogger(__name__)


class DependencyFileError(Exception):
    """A dependency file could not be read or does not describe a valid graph."""


class UnknownDependencyError(DependencyFileError):
    """A unit depends on a name that no unit declares."""

    def __init__(self, unit: str, dependency: str) -> None:
        self.unit = unit
        self.dependency = dependency
        super().__init__(f"Unit '{unit}' depends on '{dependency}', which is not declared")


class DependencyCycleError(DependencyFileError):
    """The declared units depend on each other in a cycle."""

    def __init__(self, error: CycleError) -> None:
        self.source = error.source
        self.dest = error.dest
        self.cycle = error.cycle or (error.source, error.dest)
        super().__init__(f"Dependency cycle between units: {' -> '.join(self.cycle)}")

    @property
    def units(self) -> tuple[str, ...]:
        """The units on the cycle, each listed once."""
        return tuple(dict.fromkeys(self.cycle))


class UnitSpec(BaseModel):
    """One unit declared in a dependency file."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    description: str | None = None
    depends_on: tuple[str, ...] = ()
    data: dict[str, Any] = Field(default_factory=dict)

    @field_validator("depends_on")
    @classmethod
    def _check_unique(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        duplicates = sorted({dep for dep in value if value.count(dep) > 1})
        if duplicates:
            msg = f"dependencies listed more than once: {', '.join(duplicates)}"
            raise ValueError(msg)
        return value


class DependencyDocument(BaseModel):
    """The contents of a dependency file."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    units: dict[str, UnitSpec] = Field(default_factory=dict)

    def to_graph(self) -> Graph[UnitSpec]:
        """Build the dependency graph of the declared units.

        Raises:
            UnknownDependencyError: If a unit depends on an undeclared name.

        """
        graph = Graph[UnitSpec]()
        for name, unit in self.units.items():
            graph.register_vertex(name, unit)

        for name, unit in self.units.items():
            for dep in unit.depends_on:
                if dep not in graph:
                    raise UnknownDependencyError(name, dep)
                graph.add_edge(name, dep)

        logger.debug(f"Built graph with {len(graph)} units and {len(graph.edges())} edges")
        return graph


def parse_dependency_document(text: str, *, source: str = "<string>") -> DependencyDocument:
    """Parse and validate the TOML text of a dependency file.

    Args:
        text: TOML document.
        source: Name used in error messages.

    Raises:
        DependencyFileError: If the text is not valid TOML or does not match
            the dependency file schema.

    """
    try:
        raw = tomllib.loads(text)
    except tomllib.TOMLDecodeError as e:
        msg = f"Invalid TOML in {source}: {e}"
        raise DependencyFileError(msg) from e

    try:
        return DependencyDocument.model_validate(raw)
    except ValidationError as e:
        msg = f"Invalid dependency file {source}:\n{e}"
        raise DependencyFileError(msg) from e


def load_dependency_file(path: Path) -> Graph[UnitSpec]:
    """Load a dependency file and build its graph.

    Raises:
        DependencyFileError: If the file is missing, malformed, or references
            an undeclared unit (:class:`UnknownDependencyError`).

    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        msg = f"Cannot read dependency file {path}: {e.strerror or e}"
        raise DependencyFileError(msg) from e

    document = parse_dependency_document(text, source=str(path))
    logger.debug(f"Loaded {len(document.units)} units from {path}")
    return document.to_graph()


def resolve_order(graph: Graph[UnitSpec]) -> SortResult[UnitSpec]:
    """Sort the units of ``graph`` so that every unit follows its dependencies.

    Raises:
        DependencyCycleError: If the units depend on each other in a cycle.

    """
    try:
        return graph.topological_sort()
    except CycleError as e:
        raise DependencyCycleError(e) from e
