"""Settings for a project graph run.

Values come from CLI flags, MCP tool arguments, or environment variables:
- DOTNET_GRAPH_WORKING_DIR, DOTNET_GRAPH_SOLUTION
- DOTNET_GRAPH_CONFIGURATION, DOTNET_GRAPH_PLATFORM
- DOTNET_GRAPH_PRE_RELEASE_CHECK
- DOTNET_EXECUTABLE
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Final

from .graph.analyzer import AnalyzerConfig

logger = logging.getLogger(__name__)

# Allowed verbosity levels
ALLOWED_VERBOSITY: Final[frozenset[str]] = frozenset(
    {"quiet", "minimal", "normal", "detailed", "diagnostic", "q", "m", "n", "d", "diag"}
)

DEFAULT_SCRATCH_SUBDIR: Final[Path] = Path("build") / "tmp" / "dotnet"

ENV_VARS: Final[dict[str, str]] = {
    "working_dir": "DOTNET_GRAPH_WORKING_DIR",
    "solution": "DOTNET_GRAPH_SOLUTION",
    "configuration": "DOTNET_GRAPH_CONFIGURATION",
    "platform": "DOTNET_GRAPH_PLATFORM",
    "pre_release_check": "DOTNET_GRAPH_PRE_RELEASE_CHECK",
    "dotnet_executable": "DOTNET_EXECUTABLE",
}

_TRUE_VALUES: Final[frozenset[str]] = frozenset({"1", "true", "yes", "on"})


@dataclass
class DotnetSettings:
    """Configuration consumed by one orchestration run."""

    working_dir: Path
    solution: str | None = None
    configuration: str = "Debug"
    platform: str | None = None
    pre_release_check: bool = False
    dotnet_executable: str = "dotnet"
    verbosity: str = "minimal"
    restore_before_parse: bool = False
    scratch_dir: Path | None = None

    def __post_init__(self) -> None:
        """Validate values and fill in derived defaults."""
        self.working_dir = Path(self.working_dir)
        if not self.configuration:
            raise ValueError("Configuration must not be empty")
        # Both end up inside a single-quoted literal on the analyzer command line
        for name, value in (("configuration", self.configuration), ("platform", self.platform)):
            if value and "'" in value:
                raise ValueError(f"Invalid {name}: {value}")
        if self.verbosity.lower() not in ALLOWED_VERBOSITY:
            raise ValueError(f"Invalid verbosity: {self.verbosity}")
        if not self.platform:
            self.platform = None
        if self.scratch_dir is None:
            self.scratch_dir = self.working_dir / DEFAULT_SCRATCH_SUBDIR
        else:
            self.scratch_dir = Path(self.scratch_dir)

    @property
    def analyzer_config(self) -> AnalyzerConfig:
        """Build properties handed to the analyzer."""
        return AnalyzerConfig(configuration=self.configuration, platform=self.platform)

    @classmethod
    def from_env(cls, **overrides: Any) -> DotnetSettings:
        """Create settings from environment variables.

        Overrides that are not None take precedence; the working directory
        falls back to the current directory.
        """
        values: dict[str, Any] = {}
        for name, env_var in ENV_VARS.items():
            env_value = os.environ.get(env_var)
            if env_value:
                values[name] = env_value
        if "pre_release_check" in values:
            values["pre_release_check"] = values["pre_release_check"].lower() in _TRUE_VALUES

        values.update({k: v for k, v in overrides.items() if v is not None})
        values.setdefault("working_dir", os.getcwd())
        logger.debug(f"Settings resolved: {values}")
        return cls(**values)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "workingDir": str(self.working_dir),
            "solution": self.solution,
            "configuration": self.configuration,
            "platform": self.platform,
            "preReleaseCheck": self.pre_release_check,
            "dotnetExecutable": self.dotnet_executable,
            "verbosity": self.verbosity,
            "restoreBeforeParse": self.restore_before_parse,
            "scratchDir": str(self.scratch_dir),
        }
