"""Front matter parsing.

The collector accepts any object implementing FrontMatterParser. The YAML
implementation here covers the common `---` delimited block.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Protocol

import yaml

_OPENING_RE = re.compile(r"\A---[ \t]*\r?\n")
_FRONT_MATTER_RE = re.compile(r"\A---[ \t]*\r?\n(.*?)^---[ \t]*(?:\r?\n|\Z)", re.DOTALL | re.MULTILINE)
_H1_RE = re.compile(r"^#[ \t]+(.+?)[ \t]*#*[ \t]*$", re.MULTILINE)


@dataclass
class ParsedDocument:
    """Result of parsing a raw document."""

    metadata: dict[str, Any] = field(default_factory=dict)
    body: object = None


class FrontMatterParser(Protocol):
    """Capability for splitting a raw document into metadata and body.

    Implementations raise ValueError when a document is rejected.
    """

    def parse(self, raw: str) -> ParsedDocument: ...


class YamlFrontMatterParser:
    """Parses YAML front matter delimited by `---` lines."""

    def __init__(self, *, extract_title: bool = False) -> None:
        """Initialize parser.

        Args:
            extract_title: Fill a missing `title` from the first H1 heading
        """
        self._extract_title = extract_title

    def parse(self, raw: str) -> ParsedDocument:
        """Split raw text into front matter and body.

        Args:
            raw: Document source text

        Returns:
            ParsedDocument with metadata dict and body text

        Raises:
            ValueError: If the front matter is unterminated, not valid YAML or
                not a mapping
        """
        raw = raw.removeprefix("\ufeff")
        match = _FRONT_MATTER_RE.match(raw)
        if match is None:
            if _OPENING_RE.match(raw):
                raise ValueError("unterminated front matter")
            metadata: dict[str, Any] = {}
            body = raw
        else:
            try:
                loaded = yaml.safe_load(match.group(1))
            except yaml.YAMLError as e:
                raise ValueError(f"invalid front matter: {e}") from e
            if loaded is None:
                loaded = {}
            if not isinstance(loaded, dict):
                raise ValueError("front matter must be a mapping")
            metadata = {str(key): value for key, value in loaded.items()}
            body = raw[match.end() :]

        if self._extract_title and not metadata.get("title"):
            title = extract_h1(body)
            if title is not None:
                metadata["title"] = title

        return ParsedDocument(metadata=metadata, body=body)


def extract_h1(text: str) -> str | None:
    """Return the first level-one ATX heading, if any."""
    match = _H1_RE.search(text)
    if match is None:
        return None
    return match.group(1)
