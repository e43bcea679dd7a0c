"""Cross-project policy checks over a decoded graph."""

from __future__ import annotations

from .errors import PolicyViolation
from .model import ProjectGraph, ValidationViolation


def find_prerelease_references(graph: ProjectGraph) -> list[ValidationViolation]:
    """Collect every pre-release package reference.

    Ordered by project (graph order), then by declaration order.
    """
    return [
        ValidationViolation(
            project_identifier=identifier, reference=ref, project_name=project.name
        )
        for identifier, project in graph.items()
        for ref in project.prerelease_references
    ]


def check_prerelease_references(
    graph: ProjectGraph, strict: bool
) -> list[ValidationViolation]:
    """Enforce the pre-release policy.

    Args:
        graph: Decoded project graph
        strict: When False the graph is not inspected at all

    Returns:
        Violations found (always empty on return)

    Raises:
        PolicyViolation: If strict and any pre-release reference exists
    """
    if not strict:
        return []

    violations = find_prerelease_references(graph)
    if violations:
        projects = len({v.project_identifier for v in violations})
        raise PolicyViolation(
            f"Aborting due to {len(violations)} pre-release reference(s) "
            f"detected in {projects} project(s).",
            violations,
        )
    return violations
