"""Pytest fixtures for dotnet-graph-mcp tests."""

import os
import sys

import pytest

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from dotnet_graph_mcp.graph.analyzer import ProcessOutput  # noqa: E402


class FakeAnalyzer:
    """Analyzer stand-in returning canned output."""

    def __init__(self, stdout: str = "{}", exit_code: int = 0, stderr: str = ""):
        self.output = ProcessOutput(exit_code=exit_code, stdout=stdout, stderr=stderr)
        self.calls = []

    def analyze(self, target, config):
        self.calls.append((target, config))
        return self.output


@pytest.fixture
def sample_analyzer_output():
    """Analyzer stdout with a log preamble and two projects."""
    return (
        "Build started...\n"
        "MSBuild located at /usr/share/dotnet/sdk\n"
        '{"/src/App/App.csproj": {"Name": "App", "TargetFramework": "net8.0", '
        '"PackageReferences": [{"Name": "Newtonsoft.Json", "Version": "13.0.3"}, '
        '{"Name": "Serilog", "Version": "4.0.0-dev-02108"}]}, '
        '"/src/App.Tests/App.Tests.csproj": {"Name": "App.Tests", "IsTestProject": "true", '
        '"PackageReferences": [{"Name": "NUnit", "Version": "4.1.0"}, '
        '{"Name": "Moq", "Version": "4.20.0-preview"}]}}'
    )


@pytest.fixture
def fake_analyzer():
    """Factory for FakeAnalyzer instances."""
    return FakeAnalyzer


@pytest.fixture
def solution_dir(tmp_path):
    """Working directory with a solution and two projects."""
    (tmp_path / "App.csproj").write_text("<Project />")
    (tmp_path / "App.sln").write_text("Microsoft Visual Studio Solution File")
    (tmp_path / "App.Tests.csproj").write_text("<Project />")
    return tmp_path
