"""Navigation definition loading.

Parses a hand-authored navigation literal into Section/Group/Leaf entries:

    sections:
      - items:
          - label: Overview
            path: /docs/
      - title: Guides
        items:
          - label: OIDC Authentication
            path: /docs/guides/oidc-auth
          - title: Managed Kubernetes
            subItems:
              - label: EKS
                path: /docs/guides/managed-kubernetes/aws-eks

Definitions may be stored as YAML, JSON or TOML.
"""

import json
import tomllib
from pathlib import Path

import yaml

from docnav.core.navigation import Group, Leaf, NavigationEntry, NavigationTree, Section


_SECTION_KEYS = frozenset({"title", "items"})
_LEAF_KEYS = frozenset({"label", "path"})
_GROUP_KEYS = frozenset({"title", "items", "subItems", "generate"})


class NavigationDefinitionError(ValueError):
    """Navigation definition doesn't match the expected schema."""

    def __init__(self, location: str, message: str) -> None:
        self.location = location
        super().__init__(f"{location} {message}")


def load_navigation(path: Path) -> NavigationTree:
    """Load a navigation definition from a file.

    Args:
        path: Path to a .yaml, .yml, .json or .toml file

    Returns:
        Parsed navigation tree

    Raises:
        FileNotFoundError: If the file doesn't exist
        NavigationDefinitionError: If the definition is invalid
    """
    if not path.exists():
        raise FileNotFoundError(f"Navigation definition not found: {path}")

    suffix = path.suffix.lower()
    text = path.read_text(encoding="utf-8")
    try:
        if suffix in (".yaml", ".yml"):
            data = yaml.safe_load(text)
        elif suffix == ".json":
            data = json.loads(text)
        elif suffix == ".toml":
            data = tomllib.loads(text)
        else:
            raise NavigationDefinitionError(str(path), f"has unsupported format {suffix or '(none)'}")
    except (yaml.YAMLError, json.JSONDecodeError, tomllib.TOMLDecodeError) as e:
        raise NavigationDefinitionError(str(path), f"could not be parsed: {e}") from e

    return parse_navigation(data)


def parse_navigation(data: object) -> NavigationTree:
    """Parse a navigation definition literal.

    Args:
        data: Either {"sections": [...]} or a list of sections

    Returns:
        Parsed navigation tree

    Raises:
        NavigationDefinitionError: If the definition is invalid
    """
    if isinstance(data, dict):
        if "sections" not in data:
            raise NavigationDefinitionError("navigation", "must contain a sections list")
        data = data["sections"]

    if not isinstance(data, list):
        raise NavigationDefinitionError("sections", "must be a list")

    return [_parse_section(item, f"sections[{i}]") for i, item in enumerate(data)]


def _parse_section(data: object, location: str) -> Section:
    if not isinstance(data, dict):
        raise NavigationDefinitionError(location, "must be a mapping")
    if "label" in data or "path" in data:
        raise NavigationDefinitionError(location, "looks like a link; place it inside a section's items")
    _check_keys(data, _SECTION_KEYS, location)

    title = data.get("title")
    if title is not None:
        title = _require_text(title, f"{location}.title")

    items = _parse_items(data.get("items", []), f"{location}.items")
    return Section(title=title, items=items)


def _parse_items(data: object, location: str) -> tuple[NavigationEntry, ...]:
    if not isinstance(data, list):
        raise NavigationDefinitionError(location, "must be a list")
    return tuple(_parse_entry(item, f"{location}[{i}]") for i, item in enumerate(data))


def _parse_entry(data: object, location: str) -> NavigationEntry:
    if not isinstance(data, dict):
        raise NavigationDefinitionError(location, "must be a mapping")

    if "path" in data:
        if "items" in data or "subItems" in data:
            raise NavigationDefinitionError(location, "cannot have both a path and items")
        _check_keys(data, _LEAF_KEYS, location)
        label = _require_text(data.get("label"), f"{location}.label")
        path = _require_text(data["path"], f"{location}.path")
        return Leaf(label=label, path=path)

    if "items" in data and "subItems" in data:
        raise NavigationDefinitionError(location, "cannot have both items and subItems")
    if "items" not in data and "subItems" not in data and "generate" not in data:
        raise NavigationDefinitionError(location, "must have a path, items or generate")

    _check_keys(data, _GROUP_KEYS, location)

    title = _require_text(data.get("title"), f"{location}.title")
    key = "subItems" if "subItems" in data else "items"
    items = _parse_items(data.get(key, []), f"{location}.{key}")

    generate_from = data.get("generate")
    if generate_from is not None:
        generate_from = _require_text(generate_from, f"{location}.generate")

    return Group(title=title, items=items, generate_from=generate_from)


def _check_keys(data: dict, allowed: frozenset[str], location: str) -> None:
    unknown = sorted(str(key) for key in data if key not in allowed)
    if unknown:
        raise NavigationDefinitionError(location, f"has unknown key(s) {', '.join(unknown)}")


def _require_text(value: object, location: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise NavigationDefinitionError(location, "must be a non-empty string")
    return value
