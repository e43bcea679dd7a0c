"""Decode analyzer output into a project graph."""

from __future__ import annotations

import json
from typing import Any

from .errors import DecodeError
from .model import PackageReference, ProjectGraph, ProjectModel

NAME_KEY = "Name"
VERSION_KEY = "Version"
PACKAGE_REFERENCES_KEY = "PackageReferences"


def _lookup(attributes: dict[str, Any], key: str) -> tuple[str | None, Any]:
    """Find key in attributes, exact match first, then case-insensitive."""
    if key in attributes:
        return key, attributes[key]
    lowered = key.lower()
    for candidate, value in attributes.items():
        if candidate.lower() == lowered:
            return candidate, value
    return None, None


def extract_payload(output: str) -> dict[str, Any]:
    """Parse the JSON object that follows any log preamble in output.

    Raises:
        DecodeError: If there is no object or it is malformed
    """
    start = output.find("{")
    if start < 0:
        raise DecodeError("Analyzer output contains no JSON object")

    try:
        payload = json.loads(output[start:])
    except json.JSONDecodeError as e:
        raise DecodeError(f"Analyzer output is not valid JSON: {e}") from e

    if not isinstance(payload, dict):
        raise DecodeError("Analyzer payload is not a JSON object")
    return payload


def decode_package_reference(entry: Any) -> PackageReference:
    """Convert one package-reference object."""
    if not isinstance(entry, dict):
        raise DecodeError(f"Package reference is not an object: {entry!r}")
    _, name = _lookup(entry, NAME_KEY)
    _, version = _lookup(entry, VERSION_KEY)
    if not name:
        raise DecodeError(f"Package reference has no name: {entry!r}")
    return PackageReference(
        name=str(name), version=str(version) if version is not None else None
    )


def decode_project(identifier: str, attributes: Any) -> ProjectModel:
    """Convert one project attribute object.

    Package references are modeled; every other attribute is kept raw.
    """
    if not isinstance(attributes, dict):
        raise DecodeError(f"Project {identifier} is not an object")

    references_key, references = _lookup(attributes, PACKAGE_REFERENCES_KEY)
    if references is None:
        references = []
    if not isinstance(references, list):
        raise DecodeError(f"Package references of {identifier} are not a list")

    _, name = _lookup(attributes, NAME_KEY)
    raw = {key: value for key, value in attributes.items() if key != references_key}

    return ProjectModel(
        identifier=identifier,
        name=str(name) if name else identifier,
        package_references=tuple(decode_package_reference(ref) for ref in references),
        attributes=raw,
    )


def decode_graph(output: str) -> ProjectGraph:
    """Decode raw analyzer stdout into a project graph.

    Args:
        output: Analyzer standard output

    Returns:
        Mapping of project identifier to project, in payload order

    Raises:
        DecodeError: If the output holds no well-formed payload
    """
    payload = extract_payload(output)
    return {
        identifier: decode_project(identifier, attributes)
        for identifier, attributes in payload.items()
    }
