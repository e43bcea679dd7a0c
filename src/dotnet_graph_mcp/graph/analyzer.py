"""Analyzer invocation - runs the embedded .NET project parser.

The analyzer is an opaque external process. The contract is:

    dotnet run -- <target-absolute-path> "{'Platform':'x64','Configuration':'Release'}"

It prints optional log lines followed by one JSON object mapping project
identifiers to attribute objects. Non-zero exit means failure.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Final, Protocol

from .errors import AnalyzerFailed
from .model import ResolvedTarget

logger = logging.getLogger(__name__)

# Parser sources shipped with the package and staged before each run
ANALYZER_RESOURCE_DIR: Final[Path] = Path(__file__).resolve().parent / "parser"
ANALYZER_RESOURCE_SUFFIXES: Final[frozenset[str]] = frozenset({".cs", ".csproj"})


@dataclass(frozen=True)
class AnalyzerConfig:
    """Build properties passed to the analyzer."""

    configuration: str = "Debug"
    platform: str | None = None

    def to_argument(self) -> str:
        """Encode as the single-quoted JSON literal the analyzer expects.

        Platform is omitted when unset.
        """
        platform = f"'Platform':'{self.platform}'," if self.platform else ""
        return f"{{{platform}'Configuration':'{self.configuration}'}}"


@dataclass(frozen=True)
class ProcessOutput:
    """Captured result of an external process."""

    exit_code: int
    stdout: str = ""
    stderr: str = ""

    @property
    def combined(self) -> str:
        """Stdout and stderr joined for diagnostics."""
        return "\n".join(part for part in (self.stdout, self.stderr) if part)


class ProjectAnalyzer(Protocol):
    """Anything that can describe a solution/project as analyzer output."""

    def analyze(self, target: ResolvedTarget, config: AnalyzerConfig) -> ProcessOutput:
        ...


def run_command(command: list[str], cwd: str | Path | None = None) -> ProcessOutput:
    """Run a command to completion and capture its output.

    Blocks until the process exits; there is no timeout.
    """
    # Never use shell=True (security)
    completed = subprocess.run(command, cwd=cwd, capture_output=True)
    return ProcessOutput(
        exit_code=completed.returncode,
        stdout=completed.stdout.decode("utf-8", errors="replace"),
        stderr=completed.stderr.decode("utf-8", errors="replace"),
    )


def list_analyzer_resources(resource_dir: Path = ANALYZER_RESOURCE_DIR) -> list[Path]:
    """Analyzer source files (*.cs, *.csproj) in resource_dir."""
    return sorted(
        path
        for path in resource_dir.iterdir()
        if path.is_file() and path.suffix.lower() in ANALYZER_RESOURCE_SUFFIXES
    )


def stage_analyzer(scratch_dir: Path, resource_dir: Path = ANALYZER_RESOURCE_DIR) -> list[Path]:
    """Copy analyzer sources into scratch_dir.

    The directory is created if missing and reused otherwise: files with
    matching names are overwritten, anything else left by a prior run stays.

    Returns:
        Paths of the staged files
    """
    scratch_dir.mkdir(parents=True, exist_ok=True)
    logger.info(f"  Extracting parser to {scratch_dir}")

    staged = []
    for resource in list_analyzer_resources(resource_dir):
        destination = scratch_dir / resource.name
        shutil.copyfile(resource, destination)
        staged.append(destination)
    return staged


class DotnetAnalyzer:
    """Runs the staged analyzer through ``dotnet run``."""

    def __init__(
        self,
        scratch_dir: str | Path,
        dotnet_executable: str = "dotnet",
        resource_dir: Path = ANALYZER_RESOURCE_DIR,
    ):
        self._scratch_dir = Path(scratch_dir)
        self._dotnet = dotnet_executable
        self._resource_dir = resource_dir

    @property
    def scratch_dir(self) -> Path:
        """Directory the analyzer is staged into and run from."""
        return self._scratch_dir

    def command(self, target: ResolvedTarget, config: AnalyzerConfig) -> list[str]:
        """Command line for one analyzer run."""
        return [
            self._dotnet,
            "run",
            "--",
            str(target.path.absolute()),
            config.to_argument(),
        ]

    def analyze(self, target: ResolvedTarget, config: AnalyzerConfig) -> ProcessOutput:
        stage_analyzer(self._scratch_dir, self._resource_dir)
        cmd = self.command(target, config)
        logger.debug(f"Running analyzer: {' '.join(cmd)}")
        return run_command(cmd, cwd=self._scratch_dir)


def invoke_analyzer(
    analyzer: ProjectAnalyzer, target: ResolvedTarget, config: AnalyzerConfig
) -> str:
    """Run the analyzer and return its standard output.

    Raises:
        AnalyzerFailed: If the analyzer exits non-zero
    """
    result = analyzer.analyze(target, config)
    if result.exit_code != 0:
        raise AnalyzerFailed(
            f"Failed to parse project {target.path} (exit code {result.exit_code})",
            exit_code=result.exit_code,
            output=result.combined,
        )
    return result.stdout
