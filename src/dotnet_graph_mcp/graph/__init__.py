"""Project graph extraction and validation for .NET solutions.

Pipeline:
- Resolve the solution/project file in the working directory
- Stage and run the embedded analyzer against it
- Decode the analyzer's JSON into immutable project models
- Check cross-project policy (pre-release package references)
"""

from .analyzer import (
    AnalyzerConfig,
    DotnetAnalyzer,
    ProcessOutput,
    ProjectAnalyzer,
    invoke_analyzer,
    run_command,
    stage_analyzer,
)
from .decoder import decode_graph
from .errors import (
    AnalyzerFailed,
    DecodeError,
    DotnetGraphError,
    PolicyViolation,
    ProcessFailed,
    RestoreFailed,
    TargetNotFound,
)
from .model import (
    PackageReference,
    ProjectGraph,
    ProjectModel,
    ResolvedTarget,
    TargetKind,
    ValidationViolation,
    graph_to_dict,
)
from .policy import check_prerelease_references, find_prerelease_references
from .target import resolve_target

__all__ = [
    "AnalyzerConfig",
    "DotnetAnalyzer",
    "ProcessOutput",
    "ProjectAnalyzer",
    "invoke_analyzer",
    "run_command",
    "stage_analyzer",
    "decode_graph",
    "DotnetGraphError",
    "TargetNotFound",
    "RestoreFailed",
    "AnalyzerFailed",
    "DecodeError",
    "PolicyViolation",
    "ProcessFailed",
    "PackageReference",
    "ProjectModel",
    "ProjectGraph",
    "ResolvedTarget",
    "TargetKind",
    "ValidationViolation",
    "graph_to_dict",
    "check_prerelease_references",
    "find_prerelease_references",
    "resolve_target",
]
