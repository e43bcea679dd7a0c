"""Project graph errors.

Every failure is fatal for the run that raised it; none are retried.
"""

from __future__ import annotations

from typing import Any

from .model import ValidationViolation


class DotnetGraphError(Exception):
    """Base exception for project graph failures."""

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {"error": str(self), "type": type(self).__name__}


class TargetNotFound(DotnetGraphError):
    """Raised when no usable solution or project file can be located."""


class ProcessFailed(DotnetGraphError):
    """Raised when an external dotnet process exits non-zero."""

    def __init__(self, message: str, exit_code: int | None = None, output: str = ""):
        super().__init__(message)
        self.exit_code = exit_code
        self.output = output

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        if self.exit_code is not None:
            result["exitCode"] = self.exit_code
        if self.output:
            result["output"] = self.output
        return result


class RestoreFailed(ProcessFailed):
    """Raised when package restore before parsing exits non-zero."""


class AnalyzerFailed(ProcessFailed):
    """Raised when the analyzer process exits non-zero."""


class DecodeError(DotnetGraphError):
    """Raised when analyzer output holds no well-formed JSON object."""


class PolicyViolation(DotnetGraphError):
    """Raised when strict mode finds pre-release package references."""

    def __init__(self, message: str, violations: list[ValidationViolation]):
        super().__init__(message)
        self.violations = list(violations)

    def grouped(self) -> dict[str, list[ValidationViolation]]:
        """Violations grouped by project, in reporting order."""
        groups: dict[str, list[ValidationViolation]] = {}
        for violation in self.violations:
            groups.setdefault(violation.project_identifier, []).append(violation)
        return groups

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["violations"] = [v.to_dict() for v in self.violations]
        return result
