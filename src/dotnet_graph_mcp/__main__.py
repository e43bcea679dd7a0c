"""Entry point for dotnet-graph: one-shot CLI run or MCP server."""

import argparse
import asyncio
import json
import logging
import os
import sys

from .graph.errors import DotnetGraphError, PolicyViolation
from .graph.model import graph_to_dict
from .server import create_server
from .settings import DotnetSettings
from .workspace import DotnetWorkspace

EXIT_FAILURE = 1
EXIT_USAGE = 2


def configure_logging() -> None:
    """Configure logging based on environment."""
    level = os.environ.get("LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="dotnet-graph - Extract and validate .NET project graphs"
    )
    parser.add_argument(
        "--working-dir",
        type=str,
        default=None,
        help="Directory containing the solution/project (default: CWD).",
    )
    parser.add_argument(
        "--solution",
        type=str,
        default=None,
        help="Solution or project file relative to the working directory. "
        "When omitted, the first *.sln, then *proj file is used.",
    )
    parser.add_argument("--configuration", type=str, default=None, help="Build configuration.")
    parser.add_argument("--platform", type=str, default=None, help="Target platform.")
    parser.add_argument(
        "--pre-release-check",
        action="store_true",
        default=None,
        help="Fail when any project references a pre-release package.",
    )
    parser.add_argument(
        "--restore",
        action="store_true",
        default=False,
        help="Run dotnet restore before parsing.",
    )
    parser.add_argument("--dotnet", type=str, default=None, help="dotnet executable.")
    parser.add_argument(
        "--serve",
        action="store_true",
        default=False,
        help="Run as an MCP server on stdio instead of a one-shot run.",
    )
    return parser.parse_args(argv)


def report_error(error: DotnetGraphError) -> None:
    """Print a pipeline failure to stderr."""
    if isinstance(error, PolicyViolation):
        for violations in error.grouped().values():
            name = violations[0].display_name
            print(f"Pre-release references detected in {name}", file=sys.stderr)
            for violation in violations:
                ref = violation.reference
                print(f"    * {ref.name}: {ref.version}", file=sys.stderr)
    print(f"error: {error}", file=sys.stderr)
    output = getattr(error, "output", "")
    if output:
        print(output, file=sys.stderr)


def run_once(settings: DotnetSettings) -> int:
    """Load the graph once and print it as JSON.

    Returns:
        Process exit code
    """
    workspace = DotnetWorkspace(settings)
    try:
        graph = workspace.load()
    except DotnetGraphError as e:
        report_error(e)
        return EXIT_FAILURE

    json.dump(
        {"target": workspace.target.to_dict(), "projects": graph_to_dict(graph)},
        sys.stdout,
        indent=2,
    )
    sys.stdout.write("\n")
    return 0


async def serve(working_dir: str | None) -> None:
    """Run the MCP server until stdin closes."""
    logger = logging.getLogger(__name__)
    logger.info(f"Starting dotnet-graph MCP Server (working dir: {working_dir or os.getcwd()})...")
    mcp = create_server(working_dir)
    try:
        await mcp.run_stdio_async()
    except Exception:
        logger.exception("Server error")
        raise
    finally:
        logger.info("Server stopped")


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    configure_logging()
    args = parse_args(argv)

    if args.serve:
        try:
            asyncio.run(serve(args.working_dir))
        except KeyboardInterrupt:
            pass
        return 0

    try:
        settings = DotnetSettings.from_env(
            working_dir=args.working_dir,
            solution=args.solution,
            configuration=args.configuration,
            platform=args.platform,
            pre_release_check=args.pre_release_check,
            dotnet_executable=args.dotnet,
            restore_before_parse=args.restore or None,
        )
    except ValueError as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_USAGE

    return run_once(settings)


def run() -> None:
    """Console script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    run()
