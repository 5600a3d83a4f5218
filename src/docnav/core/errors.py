"""Error taxonomy for collection and navigation builds.

Collection failures (DuplicatePathError, ParseError) are raised directly.
Navigation failures are accumulated as BrokenLinkError entries and raised
together as a single NavigationValidationError, so one pass reports every
problem to the content author.
"""

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from docnav.core.navigation import RenderableTree


class DocnavError(Exception):
    """Base class for docnav errors."""


class DuplicatePathError(DocnavError):
    """Two source files derive the same URL path."""

    def __init__(self, path: str, first: Path, second: Path) -> None:
        self.path = path
        self.first = first
        self.second = second
        super().__init__(f"{first} and {second} both map to {path}")


class ParseError(DocnavError):
    """A source document could not be read or parsed."""

    def __init__(self, source_path: Path, reason: str) -> None:
        self.source_path = source_path
        self.reason = reason
        super().__init__(f"{source_path}: {reason}")


def format_trail(trail: tuple[str, ...]) -> str:
    """Render a section/group trail for display."""
    return " > ".join(trail) if trail else "(top level)"


class BrokenLinkError(DocnavError):
    """A navigation leaf references a path that is neither collected nor external."""

    def __init__(self, label: str, path: str, trail: tuple[str, ...]) -> None:
        self.label = label
        self.path = path
        self.trail = trail
        super().__init__(f'{format_trail(trail)}: "{label}" -> {path}')

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BrokenLinkError):
            return NotImplemented
        return (self.label, self.path, self.trail) == (other.label, other.path, other.trail)

    def __hash__(self) -> int:
        return hash((self.label, self.path, self.trail))


class DuplicateLinkWarning(UserWarning):
    """The same path is linked from more than one navigation leaf."""

    def __init__(self, path: str, trails: tuple[tuple[str, ...], ...]) -> None:
        self.path = path
        self.trails = trails
        locations = "; ".join(format_trail(trail) for trail in trails)
        super().__init__(f"{path} is linked {len(trails)} times ({locations})")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DuplicateLinkWarning):
            return NotImplemented
        return (self.path, self.trails) == (other.path, other.trails)

    def __hash__(self) -> int:
        return hash((self.path, self.trails))


class NavigationValidationError(DocnavError):
    """Aggregate of every problem found while validating a navigation tree.

    Attributes:
        broken_links: Every broken leaf, in tree order
        duplicate_links: Duplicates, when duplicate links are fatal
        tree: Tree built despite the errors; broken leaves are marked
            unresolved so callers may choose to proceed with it
    """

    def __init__(
        self,
        broken_links: list[BrokenLinkError],
        duplicate_links: list[DuplicateLinkWarning] | None = None,
        tree: "RenderableTree | None" = None,
    ) -> None:
        self.broken_links = broken_links
        self.duplicate_links = duplicate_links or []
        self.tree = tree
        parts: list[str] = []
        if self.broken_links:
            parts.append(f"{len(self.broken_links)} broken link(s)")
        if self.duplicate_links:
            parts.append(f"{len(self.duplicate_links)} duplicate link(s)")
        super().__init__("Navigation is invalid: " + ", ".join(parts))

    def report(self) -> str:
        """Build a report listing every offending entry."""
        lines = [str(self)]
        if self.broken_links:
            lines.append("Broken links:")
            lines.extend(f"  - {error}" for error in self.broken_links)
        if self.duplicate_links:
            lines.append("Duplicate links:")
            lines.extend(f"  - {warning}" for warning in self.duplicate_links)
        return "\n".join(lines)
