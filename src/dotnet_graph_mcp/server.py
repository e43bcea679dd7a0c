"""MCP Server exposing .NET project graphs to task runners."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any

from mcp.server.fastmcp import FastMCP

from .graph.errors import DotnetGraphError
from .graph.model import graph_to_dict
from .settings import DotnetSettings
from .workspace import DotnetWorkspace

logger = logging.getLogger(__name__)

# Last successfully loaded workspace (single client mode)
_workspace: DotnetWorkspace | None = None
_default_working_dir: str | None = None

# Serializes loads: runs share the analyzer scratch directory
_load_lock: asyncio.Lock | None = None


def get_workspace() -> DotnetWorkspace | None:
    """Workspace of the last successful load, if any."""
    return _workspace


def _get_load_lock() -> asyncio.Lock:
    """Lock guarding pipeline runs, created on first use."""
    global _load_lock
    if _load_lock is None:
        _load_lock = asyncio.Lock()
    return _load_lock


def _error_result(error: Exception) -> dict[str, Any]:
    """Tool result for a failed run."""
    result: dict[str, Any] = {"success": False, "error": str(error)}
    if isinstance(error, DotnetGraphError):
        result["details"] = error.to_dict()
    return result


async def load_workspace(settings: DotnetSettings) -> DotnetWorkspace:
    """Run the pipeline off the event loop and remember the workspace.

    The analyzer process blocks, so the run happens in a worker thread.
    Only one run executes at a time; later calls wait for the lock.
    """
    global _workspace
    workspace = DotnetWorkspace(settings)
    async with _get_load_lock():
        await asyncio.to_thread(workspace.load)
        _workspace = workspace
    return workspace


def create_server(working_dir: str | None = None) -> FastMCP:
    """Create and configure the MCP server.

    Args:
        working_dir: Default working directory when a tool call omits one
    """
    global _default_working_dir
    _default_working_dir = working_dir
    mcp = FastMCP("dotnet-graph-mcp")

    def make_settings(**kwargs: Any) -> DotnetSettings:
        if kwargs.get("working_dir") is None:
            kwargs["working_dir"] = _default_working_dir
        return DotnetSettings.from_env(**kwargs)

    @mcp.tool()
    async def load_project_graph(
        working_dir: str | None = None,
        solution: str | None = None,
        configuration: str = "Debug",
        platform: str | None = None,
        pre_release_check: bool = False,
        restore: bool = False,
    ) -> dict:
        """
        Parse a .NET solution or project and return its project graph.

        Without a solution, the first *.sln (then *proj) file in working_dir
        is used. With pre_release_check, the call fails if any project
        references a pre-release package version (e.g. 2.0.0-beta).

        Args:
            working_dir: Directory containing the solution/project
            solution: Explicit solution or project path, relative to working_dir
            configuration: Build configuration (Debug/Release)
            platform: Optional target platform (e.g. x64)
            pre_release_check: Fail on pre-release package references
            restore: Run dotnet restore before parsing
        """
        try:
            settings = make_settings(
                working_dir=working_dir,
                solution=solution,
                configuration=configuration,
                platform=platform,
                pre_release_check=pre_release_check,
                restore_before_parse=restore,
            )
            workspace = await load_workspace(settings)
            return {
                "success": True,
                "data": {
                    "target": workspace.target.to_dict(),
                    "projects": graph_to_dict(workspace.graph),
                },
            }
        except (DotnetGraphError, ValueError) as e:
            return _error_result(e)

    @mcp.tool()
    async def check_prerelease_references(
        working_dir: str | None = None,
        solution: str | None = None,
        configuration: str = "Debug",
        platform: str | None = None,
    ) -> dict:
        """
        List pre-release package references without failing.

        Args:
            working_dir: Directory containing the solution/project
            solution: Explicit solution or project path, relative to working_dir
            configuration: Build configuration (Debug/Release)
            platform: Optional target platform
        """
        try:
            settings = make_settings(
                working_dir=working_dir,
                solution=solution,
                configuration=configuration,
                platform=platform,
                pre_release_check=False,
            )
            workspace = await load_workspace(settings)
            violations = workspace.prerelease_violations()
            return {
                "success": True,
                "data": {"violations": [v.to_dict() for v in violations]},
            }
        except (DotnetGraphError, ValueError) as e:
            return _error_result(e)

    @mcp.resource("dotnet://projects", mime_type="application/json")
    async def get_projects() -> str:
        """
        Project graph from the last successful load, keyed by project identifier.
        """
        if _workspace is None or _workspace.graph is None:
            return json.dumps({})
        return json.dumps(graph_to_dict(_workspace.graph), indent=2)

    return mcp
