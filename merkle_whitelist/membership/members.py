"""Membership list loading (.txt, .json, .yaml/.yml)."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, List

import yaml

from .exceptions import EmptySetError, SerializationError


def _from_document(data: Any, source: str) -> List[str]:
    if isinstance(data, dict):
        data = data.get("members")
    if not isinstance(data, list):
        raise SerializationError(
            f"{source}: expected a list of members or a 'members' key"
        )
    members = []
    for i, item in enumerate(data):
        if not isinstance(item, str):
            raise SerializationError(f"{source}: member {i} must be a string")
        item = item.strip()
        if not item:
            raise SerializationError(f"{source}: member {i} is empty")
        members.append(item)
    return members


def parse_members(text: str, fmt: str = "txt", source: str = "<members>") -> List[str]:
    """
    Parse a membership list.

    Args:
        text: File contents
        fmt: "txt" (one per line, '#' comments), "json" or "yaml"
        source: Name used in error messages

    Returns:
        Members in file order (order defines leaf indices)
    """
    if fmt == "txt":
        members = []
        for line in text.splitlines():
            line = line.split("#", 1)[0].strip()
            if line:
                members.append(line)
    elif fmt == "json":
        try:
            members = _from_document(json.loads(text), source)
        except json.JSONDecodeError as exc:
            raise SerializationError(f"{source}: invalid JSON: {exc}") from exc
    elif fmt == "yaml":
        try:
            members = _from_document(yaml.safe_load(text), source)
        except yaml.YAMLError as exc:
            raise SerializationError(f"{source}: invalid YAML: {exc}") from exc
    else:
        raise SerializationError(f"Unsupported member list format: {fmt!r}")

    if not members:
        raise EmptySetError(f"{source}: membership list is empty")
    return members


def load_members(path: str | Path) -> List[str]:
    """Load a membership list, choosing the format from the file suffix."""
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix == ".json":
        fmt = "json"
    elif suffix in (".yaml", ".yml"):
        fmt = "yaml"
    else:
        fmt = "txt"
    return parse_members(path.read_text(encoding="utf-8"), fmt, source=str(path))
