"""Project graph model.

Immutable values produced by decoding analyzer output:

    ProjectGraph = {identifier: ProjectModel(package_references=[PackageReference, ...])}
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Any


class TargetKind(str, Enum):
    """Kind of build-definition file the analyzer runs against."""

    SOLUTION = "solution"
    PROJECT = "project"


@dataclass(frozen=True)
class ResolvedTarget:
    """Solution or project file selected for a run."""

    path: Path
    kind: TargetKind

    @classmethod
    def from_path(cls, path: Path) -> ResolvedTarget:
        """Classify a path by its suffix."""
        kind = TargetKind.SOLUTION if path.name.lower().endswith(".sln") else TargetKind.PROJECT
        return cls(path=path, kind=kind)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {"path": str(self.path), "kind": self.kind.value}


@dataclass(frozen=True)
class PackageReference:
    """A single package dependency declared by a project."""

    name: str
    version: str | None = None

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Package reference name must not be empty")

    @property
    def is_prerelease(self) -> bool:
        """Whether the version is a pre-release (e.g. 2.0.0-beta)."""
        return self.version is not None and "-" in self.version

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result: dict[str, Any] = {"name": self.name}
        if self.version is not None:
            result["version"] = self.version
        return result


@dataclass(frozen=True)
class ProjectModel:
    """A decoded project and its package references.

    Attributes the model does not name explicitly are kept in ``attributes``
    so newer analyzer fields stay reachable.
    """

    identifier: str
    name: str
    package_references: tuple[PackageReference, ...] = ()
    attributes: Mapping[str, Any] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        # Freeze containers so consumers cannot mutate a decoded project
        object.__setattr__(self, "package_references", tuple(self.package_references))
        object.__setattr__(self, "attributes", MappingProxyType(dict(self.attributes)))

    def get(self, key: str, default: Any = None) -> Any:
        """Read a raw analyzer attribute."""
        return self.attributes.get(key, default)

    @property
    def prerelease_references(self) -> list[PackageReference]:
        """Package references pointing at pre-release versions."""
        return [ref for ref in self.package_references if ref.is_prerelease]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "identifier": self.identifier,
            "name": self.name,
            "packageReferences": [ref.to_dict() for ref in self.package_references],
            "attributes": dict(self.attributes),
        }


# Project identifier -> project. Built once per run, read-only afterwards.
ProjectGraph = Mapping[str, ProjectModel]


@dataclass(frozen=True)
class ValidationViolation:
    """A package reference rejected by policy."""

    project_identifier: str
    reference: PackageReference
    project_name: str = ""

    @property
    def display_name(self) -> str:
        """Project name for reports, falling back to the identifier."""
        return self.project_name or self.project_identifier

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result: dict[str, Any] = {
            "project": self.project_identifier,
            "reference": self.reference.to_dict(),
        }
        if self.project_name:
            result["projectName"] = self.project_name
        return result


def graph_to_dict(graph: ProjectGraph) -> dict[str, Any]:
    """Serialize a project graph keyed by identifier."""
    return {identifier: project.to_dict() for identifier, project in graph.items()}
