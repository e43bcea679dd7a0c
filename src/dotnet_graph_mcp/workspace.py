"""Workspace facade - the single entry point for task runners.

Sequence for one run:
    resolve target → [restore] → run analyzer → decode graph → [pre-release check]

Either the whole pipeline succeeds and the graph is exposed, or the first
failing stage raises and nothing from the run is kept.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path
from types import MappingProxyType

from .graph.analyzer import DotnetAnalyzer, ProcessOutput, ProjectAnalyzer, invoke_analyzer, run_command
from .graph.decoder import decode_graph
from .graph.errors import DotnetGraphError, RestoreFailed
from .graph.model import ProjectGraph, ResolvedTarget, ValidationViolation
from .graph.policy import check_prerelease_references, find_prerelease_references
from .graph.target import resolve_target
from .settings import DotnetSettings

logger = logging.getLogger(__name__)

CommandRunner = Callable[[list[str], Path], ProcessOutput]


class DotnetWorkspace:
    """Loads and validates the project graph of one working directory.

    Not safe for concurrent runs against the same working directory: the
    analyzer scratch directory is shared. Callers must serialize runs.

    Usage:
        workspace = DotnetWorkspace(DotnetSettings(working_dir="/src/app"))
        graph = workspace.load()
    """

    def __init__(
        self,
        settings: DotnetSettings,
        analyzer: ProjectAnalyzer | None = None,
        runner: CommandRunner | None = None,
    ):
        """Initialize workspace.

        Args:
            settings: Run configuration
            analyzer: Analyzer implementation (staged ``dotnet run`` if not provided)
            runner: Command runner used for restore
        """
        self._settings = settings
        self._analyzer = analyzer or DotnetAnalyzer(
            settings.scratch_dir, dotnet_executable=settings.dotnet_executable
        )
        self._runner = runner or run_command
        self._target: ResolvedTarget | None = None
        self._graph: ProjectGraph | None = None

    @property
    def settings(self) -> DotnetSettings:
        """Run configuration."""
        return self._settings

    @property
    def target(self) -> ResolvedTarget | None:
        """Target of the last successful run."""
        return self._target

    @property
    def graph(self) -> ProjectGraph | None:
        """Project graph of the last successful run."""
        return self._graph

    @property
    def is_loaded(self) -> bool:
        """Whether a run has completed successfully."""
        return self._graph is not None

    def restore_command(self) -> list[str]:
        """dotnet restore command line for the working directory."""
        cmd = [self._settings.dotnet_executable, "restore"]
        if self._settings.solution:
            cmd.append(self._settings.solution)
        cmd.extend(["--verbosity", self._settings.verbosity])
        return cmd

    def restore(self) -> ProcessOutput:
        """Restore packages before parsing.

        Raises:
            RestoreFailed: If dotnet restore exits non-zero
        """
        logger.info("Start restoring packages")
        result = self._runner(self.restore_command(), self._settings.working_dir)
        if result.exit_code != 0:
            raise RestoreFailed(
                "dotnet restore fails", exit_code=result.exit_code, output=result.combined
            )
        logger.info("Complete restoring packages")
        return result

    def load(self) -> ProjectGraph:
        """Run the full pipeline, replacing any previously loaded graph.

        Returns:
            Read-only project graph

        Raises:
            DotnetGraphError: First failure of any stage
        """
        self._target = None
        self._graph = None
        settings = self._settings

        # No process starts before the target is known
        target = resolve_target(settings.working_dir, settings.solution)

        if settings.restore_before_parse:
            self.restore()

        logger.info("Start parsing project")
        output = invoke_analyzer(self._analyzer, target, settings.analyzer_config)
        graph = MappingProxyType(decode_graph(output))

        if settings.pre_release_check:
            logger.info("Check pre-release references")
            check_prerelease_references(graph, strict=True)

        logger.info(f"Complete parsing project ({len(graph)} projects)")
        self._target = target
        self._graph = graph
        return graph

    def prerelease_violations(self) -> list[ValidationViolation]:
        """Pre-release references in the loaded graph, regardless of strict mode.

        Raises:
            DotnetGraphError: If no graph has been loaded
        """
        if self._graph is None:
            raise DotnetGraphError("Project graph not loaded")
        return find_prerelease_references(self._graph)
