"""Target resolution - picks the solution or project file to analyze.

Search policy, like the dotnet CLI's own guess:
1. Explicit solution/project path, relative to the working directory
2. First non-empty *.sln in the working directory
3. First non-empty *proj (csproj, fsproj, vbproj, ...) in the working directory

Only immediate children are searched. When several files match a tier the
first one in directory-listing order wins; that order is OS-dependent, so
callers needing determinism should configure the path explicitly.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from .errors import TargetNotFound
from .model import ResolvedTarget

logger = logging.getLogger(__name__)

SOLUTION_SUFFIX = ".sln"
PROJECT_SUFFIX = "proj"

NOT_FOUND_MESSAGE = (
    "Cannot find a valid project file, please setup working_dir / solution correctly"
)


def _candidates(working_dir: Path) -> list[Path]:
    """Non-empty regular files directly inside working_dir, in listing order."""
    try:
        with os.scandir(working_dir) as entries:
            return [
                Path(entry.path)
                for entry in entries
                if entry.is_file() and entry.stat().st_size > 0
            ]
    except OSError as e:
        raise TargetNotFound(f"{NOT_FOUND_MESSAGE} ({working_dir}: {e})") from e


def find_target_file(working_dir: Path) -> Path | None:
    """Guess the build file in working_dir, preferring solutions."""
    files = _candidates(working_dir)
    for suffix in (SOLUTION_SUFFIX, PROJECT_SUFFIX):
        for path in files:
            if path.name.lower().endswith(suffix):
                return path
    return None


def resolve_target(working_dir: str | Path, solution: str | None = None) -> ResolvedTarget:
    """Resolve the solution/project file to operate on.

    Args:
        working_dir: Directory the build runs in
        solution: Optional explicit solution or project path

    Returns:
        Resolved target with an absolute path

    Raises:
        TargetNotFound: If no usable file exists
    """
    working_dir = Path(working_dir)

    if solution:
        target = working_dir / solution
        if not target.is_file():
            raise TargetNotFound(f"{NOT_FOUND_MESSAGE} ({target} does not exist)")
    else:
        target = find_target_file(working_dir)
        if target is None:
            raise TargetNotFound(NOT_FOUND_MESSAGE)
        logger.debug(f"Guessed target file: {target}")

    return ResolvedTarget.from_path(target.absolute())
