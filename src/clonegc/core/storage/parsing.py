"""Parsing utilities for `rbd --format json` output."""

import json

from clonegc.core.resources import ParentSnapshot


def _load(stdout: str, what: str) -> object:
    try:
        return json.loads(stdout) if stdout.strip() else None
    except json.JSONDecodeError as e:
        raise RuntimeError(f"Invalid JSON in {what} output: {e}") from e


def parse_image_list(stdout: str) -> list[str]:
    """Parse `rbd ls --format json`.

    Example:
        >>> parse_image_list('["base", "clone-1"]')
        ['base', 'clone-1']
    """
    data = _load(stdout, "rbd ls")
    if data is None:
        return []
    if not isinstance(data, list):
        raise RuntimeError("Expected a JSON list from rbd ls")
    return [str(name) for name in data]


def parse_parent(stdout: str) -> ParentSnapshot | None:
    """Parse the `parent` block of `rbd info --format json`.

    Returns None for images that are not clones.
    """
    data = _load(stdout, "rbd info")
    if not isinstance(data, dict):
        raise RuntimeError("Expected a JSON object from rbd info")

    parent = data.get("parent")
    if not parent:
        return None
    if not isinstance(parent, dict):
        raise RuntimeError(f"Expected a JSON object for parent in rbd info output: {parent!r}")

    image = parent.get("image")
    snapshot = parent.get("snapshot")
    if not image or not snapshot:
        raise RuntimeError(f"Incomplete parent reference in rbd info output: {parent}")
    return ParentSnapshot(volume=str(image), snapshot=str(snapshot))


def parse_snapshot_names(stdout: str) -> list[str]:
    """Parse `rbd snap ls --format json` into bare snapshot names."""
    data = _load(stdout, "rbd snap ls")
    if data is None:
        return []
    if not isinstance(data, list):
        raise RuntimeError("Expected a JSON list from rbd snap ls")

    names: list[str] = []
    for entry in data:
        if not isinstance(entry, dict) or "name" not in entry:
            raise RuntimeError(f"Snapshot entry without a name in rbd snap ls output: {entry!r}")
        names.append(str(entry["name"]))
    return names


def parse_children(stdout: str) -> list[str]:
    """Parse `rbd children --format json` into child image names.

    Newer releases emit objects with `pool`/`image` keys, older ones emit
    `pool/image` strings. The pool part is dropped; children are assumed to
    share the parent's pool.
    """
    data = _load(stdout, "rbd children")
    if data is None:
        return []
    if not isinstance(data, list):
        raise RuntimeError("Expected a JSON list from rbd children")

    children: list[str] = []
    for entry in data:
        if isinstance(entry, dict):
            if "image" not in entry:
                raise RuntimeError(f"Child entry without an image in rbd children: {entry!r}")
            children.append(str(entry["image"]))
        else:
            children.append(str(entry).rsplit("/", 1)[-1])
    return children
