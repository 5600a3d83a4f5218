"""Navigation tree model and builder.

The navigation tree is authored by hand: sections contain leaves (links)
and groups, which nest to any depth. The builder validates every leaf
against a Collection and resolves it into a RenderableTree for the
rendering layer. Paths are never derived from titles.
"""

import logging
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass, field
from typing import NotRequired, TypedDict

from docnav.core.collection import Collection, Document
from docnav.core.errors import (
    BrokenLinkError,
    DuplicateLinkWarning,
    NavigationValidationError,
)
from docnav.core.types import Policy, URLPath, normalize_path

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Leaf:
    """Direct link to a page."""

    label: str
    path: str

    def __post_init__(self) -> None:
        if not self.label.strip():
            raise ValueError("Leaf label must be non-empty")
        if not self.path.strip():
            raise ValueError(f'Leaf "{self.label}" must have a path')


@dataclass(frozen=True)
class Group:
    """Titled group of navigation entries.

    When generate_from is set, documents below that path prefix which the
    group doesn't already link are appended after the authored items.
    """

    title: str
    items: tuple["Leaf | Group", ...] = ()
    generate_from: str | None = None

    def __post_init__(self) -> None:
        if not self.title.strip():
            raise ValueError("Group title must be non-empty")
        object.__setattr__(self, "items", tuple(self.items))


NavigationEntry = Leaf | Group


@dataclass(frozen=True)
class Section:
    """Top-level sidebar section."""

    title: str | None = None
    items: tuple[NavigationEntry, ...] = ()

    def __post_init__(self) -> None:
        if self.title is not None and not self.title.strip():
            raise ValueError("Section title must be non-empty when given")
        object.__setattr__(self, "items", tuple(self.items))


NavigationTree = list[Section]


class ResolvedLeafDict(TypedDict):
    """Dictionary representation of a resolved leaf."""

    label: str
    path: str
    title: str
    external: NotRequired[bool]
    resolved: NotRequired[bool]


class ResolvedGroupDict(TypedDict):
    """Dictionary representation of a resolved group."""

    title: str
    items: list["ResolvedLeafDict | ResolvedGroupDict"]


class ResolvedSectionDict(TypedDict):
    """Dictionary representation of a resolved section."""

    title: str | None
    items: list[ResolvedLeafDict | ResolvedGroupDict]


class RenderableTreeDict(TypedDict):
    """Dictionary representation of a renderable tree."""

    sections: list[ResolvedSectionDict]


@dataclass(frozen=True)
class ResolvedLeaf:
    """Leaf with the title of the document it links to."""

    label: str
    path: str
    title: str
    external: bool = False
    resolved: bool = True

    def to_dict(self) -> ResolvedLeafDict:
        """Convert to dictionary for JSON serialization."""
        result: ResolvedLeafDict = {"label": self.label, "path": self.path, "title": self.title}
        if self.external:
            result["external"] = True
        if not self.resolved:
            result["resolved"] = False
        return result


@dataclass(frozen=True)
class ResolvedGroup:
    """Group with resolved items."""

    title: str
    items: tuple["ResolvedLeaf | ResolvedGroup", ...] = ()

    def to_dict(self) -> ResolvedGroupDict:
        """Convert to dictionary for JSON serialization."""
        return {"title": self.title, "items": [item.to_dict() for item in self.items]}


ResolvedEntry = ResolvedLeaf | ResolvedGroup


@dataclass(frozen=True)
class ResolvedSection:
    """Section with resolved items."""

    title: str | None
    items: tuple[ResolvedEntry, ...] = ()

    def to_dict(self) -> ResolvedSectionDict:
        """Convert to dictionary for JSON serialization."""
        return {"title": self.title, "items": [item.to_dict() for item in self.items]}


@dataclass(frozen=True)
class RenderableTree:
    """Validated navigation tree handed to the rendering layer."""

    sections: tuple[ResolvedSection, ...] = ()
    warnings: tuple[DuplicateLinkWarning, ...] = field(default=(), compare=False)

    def leaves(self) -> Iterator[ResolvedLeaf]:
        """Iterate resolved leaves depth first, in render order."""
        for section in self.sections:
            yield from _iter_resolved(section.items)

    def to_dict(self) -> RenderableTreeDict:
        """Convert to dictionary for JSON serialization."""
        return {"sections": [section.to_dict() for section in self.sections]}


def _iter_resolved(items: Iterable[ResolvedEntry]) -> Iterator[ResolvedLeaf]:
    for item in items:
        if isinstance(item, ResolvedGroup):
            yield from _iter_resolved(item.items)
        else:
            yield item


def section_label(section: Section, index: int) -> str:
    """Display name of a section, numbering untitled ones from 1."""
    return section.title if section.title is not None else f"Section {index + 1}"


@dataclass(frozen=True)
class LeafVisit:
    """A leaf together with the titles of its enclosing section and groups."""

    leaf: Leaf
    trail: tuple[str, ...]


def walk(tree: Iterable[Section]) -> Iterator[LeafVisit]:
    """Iterate every authored leaf depth first, preserving order."""
    for index, section in enumerate(tree):
        yield from _walk_items(section.items, (section_label(section, index),))


def _walk_items(items: Iterable[NavigationEntry], trail: tuple[str, ...]) -> Iterator[LeafVisit]:
    for item in items:
        if isinstance(item, Group):
            yield from _walk_items(item.items, (*trail, item.title))
        else:
            yield LeafVisit(leaf=item, trail=trail)


def humanize(segment: str) -> str:
    """Convert a path segment to a title (e.g., "setup-guide" -> "Setup Guide")."""
    return segment.replace("-", " ").replace("_", " ").title()


class NavigationBuilder:
    """Validates authored navigation against a Collection.

    Every leaf must match a collected document or an external path. All
    broken links found in one pass are reported together.
    """

    def __init__(
        self,
        collection: Collection,
        external: Iterable[str] = (),
        *,
        duplicates: Policy = Policy.WARN,
        allow_duplicates: Iterable[str] = (),
    ) -> None:
        """Initialize builder.

        Args:
            collection: Documents that leaves may link to
            external: Paths accepted without lookup (virtual or external routes)
            duplicates: How to report a path linked from more than one leaf
            allow_duplicates: Paths that may intentionally be linked more than once
        """
        self._collection = collection
        self._external = {normalize_path(path) for path in external}
        self._duplicates = duplicates
        self._allow_duplicates = {normalize_path(path) for path in allow_duplicates}

    def build(self, tree: Iterable[Section]) -> RenderableTree:
        """Validate and resolve a navigation tree.

        Args:
            tree: Authored sections in render order

        Returns:
            RenderableTree with the same structure as the input

        Raises:
            NavigationValidationError: If any leaf is broken, or duplicates
                were found and the duplicate policy is ERROR
        """
        expanded = [self._expand_section(section) for section in tree]

        broken: list[BrokenLinkError] = []
        sections = tuple(
            ResolvedSection(
                title=section.title,
                items=self._resolve_items(
                    section.items,
                    (section_label(section, index),),
                    broken.append,
                ),
            )
            for index, section in enumerate(expanded)
        )

        duplicate_links = self.find_duplicates(expanded) if self._duplicates != Policy.IGNORE else []
        fatal_duplicates = duplicate_links if self._duplicates == Policy.ERROR else []
        warnings = () if fatal_duplicates else tuple(duplicate_links)
        for warning in warnings:
            logger.warning(f"Duplicate navigation link: {warning}")

        result = RenderableTree(sections=sections, warnings=warnings)
        if broken or fatal_duplicates:
            raise NavigationValidationError(broken, fatal_duplicates, result)

        logger.info(f"Navigation validated: {sum(1 for _ in result.leaves())} links")
        return result

    def find_duplicates(self, tree: Iterable[Section]) -> list[DuplicateLinkWarning]:
        """Find paths linked from more than one leaf.

        Args:
            tree: Authored sections

        Returns:
            One warning per duplicated path, in order of first occurrence
        """
        occurrences: dict[URLPath, list[tuple[str, ...]]] = {}
        for visit in walk(tree):
            path = normalize_path(visit.leaf.path)
            if path in self._allow_duplicates:
                continue
            occurrences.setdefault(path, []).append(visit.trail)
        return [
            DuplicateLinkWarning(path, tuple(trails))
            for path, trails in occurrences.items()
            if len(trails) > 1
        ]

    def _resolve_items(
        self,
        items: Iterable[NavigationEntry],
        trail: tuple[str, ...],
        report: Callable[[BrokenLinkError], None],
    ) -> tuple[ResolvedEntry, ...]:
        resolved: list[ResolvedEntry] = []
        for item in items:
            if isinstance(item, Group):
                resolved.append(
                    ResolvedGroup(
                        title=item.title,
                        items=self._resolve_items(item.items, (*trail, item.title), report),
                    ),
                )
            else:
                resolved.append(self._resolve_leaf(item, trail, report))
        return tuple(resolved)

    def _resolve_leaf(
        self,
        leaf: Leaf,
        trail: tuple[str, ...],
        report: Callable[[BrokenLinkError], None],
    ) -> ResolvedLeaf:
        if normalize_path(leaf.path) in self._external:
            return ResolvedLeaf(label=leaf.label, path=leaf.path, title=leaf.label, external=True)

        document = self._collection.lookup(leaf.path)
        if document is None:
            report(BrokenLinkError(leaf.label, leaf.path, trail))
            return ResolvedLeaf(label=leaf.label, path=leaf.path, title=leaf.label, resolved=False)

        return ResolvedLeaf(label=leaf.label, path=leaf.path, title=document.title or leaf.label)

    def _expand_section(self, section: Section) -> Section:
        return Section(title=section.title, items=self._expand_items(section.items))

    def _expand_items(self, items: Iterable[NavigationEntry]) -> tuple[NavigationEntry, ...]:
        expanded: list[NavigationEntry] = []
        for item in items:
            if isinstance(item, Group):
                expanded.append(self._expand_group(item))
            else:
                expanded.append(item)
        return tuple(expanded)

    def _expand_group(self, group: Group) -> Group:
        """Expand nested groups and append generated leaves."""
        items = self._expand_items(group.items)
        if group.generate_from is None:
            return Group(title=group.title, items=items)

        linked = {normalize_path(visit.leaf.path) for visit in _walk_items(items, ())}
        generated = [
            Leaf(label=_document_label(document), path=document.path)
            for document in sorted(
                self._collection.children_of(group.generate_from),
                key=_document_sort_key,
            )
            if document.path not in linked
        ]
        logger.debug(f'Generated {len(generated)} links for group "{group.title}"')
        return Group(title=group.title, items=(*items, *generated))


def _document_label(document: Document) -> str:
    if document.title is not None:
        return document.title
    segments = document.path.rstrip("/").split("/")
    return humanize(segments[-1]) if segments[-1] else "Home"


def _document_sort_key(document: Document) -> tuple[bool, int, str]:
    order = document.order
    return (order is None, order if order is not None else 0, document.path)


def build(
    tree: Iterable[Section],
    collection: Collection,
    external: Iterable[str] = (),
    *,
    duplicates: Policy = Policy.WARN,
    allow_duplicates: Iterable[str] = (),
) -> RenderableTree:
    """Validate and resolve a navigation tree.

    Shortcut for NavigationBuilder(...).build(tree).
    """
    builder = NavigationBuilder(
        collection,
        external,
        duplicates=duplicates,
        allow_duplicates=allow_duplicates,
    )
    return builder.build(tree)
