"""Tests for analyzer output decoding."""

import json

import pytest

from dotnet_graph_mcp.graph.decoder import decode_graph, extract_payload
from dotnet_graph_mcp.graph.errors import DecodeError
from dotnet_graph_mcp.graph.model import PackageReference


class TestDecodeGraph:
    """Tests for decode_graph."""

    def test_skips_preamble(self):
        """Test decoding with a log line before the payload."""
        output = (
            'garbage-log-line\n'
            '{"P1":{"Name":"P1","PackageReferences":[{"Name":"Foo","Version":"1.0.0"}]}}'
        )
        graph = decode_graph(output)

        assert list(graph) == ["P1"]
        project = graph["P1"]
        assert project.identifier == "P1"
        assert project.name == "P1"
        assert project.package_references == (PackageReference("Foo", "1.0.0"),)

    def test_keeps_other_attributes(self, sample_analyzer_output):
        """Test that unmodeled attributes stay available."""
        graph = decode_graph(sample_analyzer_output)
        app = graph["/src/App/App.csproj"]

        assert app.name == "App"
        assert app.get("TargetFramework") == "net8.0"
        assert app.get("Name") == "App"
        assert "PackageReferences" not in app.attributes

    def test_reference_order_preserved(self, sample_analyzer_output):
        """Test that references keep payload order."""
        graph = decode_graph(sample_analyzer_output)
        tests = graph["/src/App.Tests/App.Tests.csproj"]
        assert [r.name for r in tests.package_references] == ["NUnit", "Moq"]

    def test_project_order_preserved(self, sample_analyzer_output):
        """Test that projects keep payload order."""
        graph = decode_graph(sample_analyzer_output)
        assert list(graph) == ["/src/App/App.csproj", "/src/App.Tests/App.Tests.csproj"]

    def test_empty_object(self):
        """Test that an empty payload yields an empty graph."""
        assert decode_graph("{}") == {}

    def test_idempotent(self, sample_analyzer_output):
        """Test that decoding twice yields equal graphs."""
        assert decode_graph(sample_analyzer_output) == decode_graph(sample_analyzer_output)

    def test_missing_version(self):
        """Test references without a version."""
        graph = decode_graph('{"P":{"Name":"P","PackageReferences":[{"Name":"Foo"}]}}')
        assert graph["P"].package_references[0].version is None

    def test_lowercase_keys(self):
        """Test that attribute keys are matched case-insensitively."""
        graph = decode_graph(
            '{"P":{"name":"Lib","packageReferences":[{"name":"Foo","version":"2.0"}]}}'
        )
        assert graph["P"].name == "Lib"
        assert graph["P"].package_references == (PackageReference("Foo", "2.0"),)
        assert "packageReferences" not in graph["P"].attributes

    def test_name_falls_back_to_identifier(self):
        """Test that a nameless project uses its identifier."""
        graph = decode_graph('{"P1":{"PackageReferences":[]}}')
        assert graph["P1"].name == "P1"

    def test_missing_references(self):
        """Test that projects without references decode with none."""
        graph = decode_graph('{"P1":{"Name":"P1"}}')
        assert graph["P1"].package_references == ()

    def test_numeric_version_as_string(self):
        """Test that non-string versions are normalized."""
        graph = decode_graph('{"P":{"PackageReferences":[{"Name":"Foo","Version":3}]}}')
        assert graph["P"].package_references[0].version == "3"


class TestDecodeErrors:
    """Tests for decode failures."""

    def test_no_brace(self):
        """Test output with no JSON object."""
        with pytest.raises(DecodeError):
            decode_graph("Restore failed\nno payload here")

    def test_empty_output(self):
        """Test empty output."""
        with pytest.raises(DecodeError):
            decode_graph("")

    def test_malformed_json(self):
        """Test truncated payload."""
        with pytest.raises(DecodeError) as exc_info:
            decode_graph('log\n{"P1": {"Name": ')
        assert isinstance(exc_info.value.__cause__, json.JSONDecodeError)

    def test_project_not_object(self):
        """Test project entry that is not an object."""
        with pytest.raises(DecodeError):
            decode_graph('{"P1": [1, 2]}')

    def test_references_not_list(self):
        """Test package references that are not a list."""
        with pytest.raises(DecodeError):
            decode_graph('{"P1": {"PackageReferences": "Foo"}}')

    def test_reference_without_name(self):
        """Test package reference with no name."""
        with pytest.raises(DecodeError):
            decode_graph('{"P1": {"PackageReferences": [{"Version": "1.0"}]}}')


class TestExtractPayload:
    """Tests for extract_payload."""

    def test_returns_object(self):
        """Test payload extraction."""
        assert extract_payload('info: x\n{"a": {}}') == {"a": {}}
