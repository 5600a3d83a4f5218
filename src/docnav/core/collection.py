"""Content collection for a documentation source tree.

Scans a source directory for documents, parses their front matter through
an injected parser and exposes them as an immutable collection keyed by
derived URL path. Each call to collect() produces an independent
Collection; there is no shared registry between builds.
"""

import logging
from collections.abc import Iterable, Iterator, Mapping
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from fnmatch import fnmatch
from pathlib import Path
from types import MappingProxyType

from docnav.core.errors import DuplicatePathError, ParseError
from docnav.core.frontmatter import FrontMatterParser
from docnav.core.types import Policy, URLPath, normalize_path

logger = logging.getLogger(__name__)

DEFAULT_PATTERN = "**/*.md"


@dataclass(frozen=True)
class Document:
    """One ingested content file."""

    path: URLPath
    source_path: Path
    metadata: Mapping[str, object] = field(default_factory=dict, hash=False)
    body: object = field(default=None, hash=False)

    @property
    def title(self) -> str | None:
        """Title declared in metadata, if any."""
        title = self.metadata.get("title")
        if isinstance(title, str) and title.strip():
            return title
        return None

    @property
    def order(self) -> int | None:
        """Explicit ordering value declared in metadata, if any."""
        order = self.metadata.get("order")
        if isinstance(order, int) and not isinstance(order, bool):
            return order
        return None


class Collection:
    """Documents produced by one collector run, queryable by path.

    Iteration order is sorted by path, independent of parse order.
    """

    __slots__ = ("_documents", "_parse_errors", "_path_index", "_source_index")

    def __init__(
        self,
        documents: list[Document],
        parse_errors: list[ParseError] | None = None,
    ) -> None:
        """Initialize collection.

        Args:
            documents: Documents with unique paths
            parse_errors: Failures that were downgraded instead of raised

        Raises:
            ValueError: If two documents share a path
        """
        self._documents = sorted(documents, key=lambda document: document.path)
        self._path_index: dict[str, Document] = {}
        for document in self._documents:
            if document.path in self._path_index:
                raise ValueError(f"Duplicate document path: {document.path}")
            self._path_index[document.path] = document
        self._source_index = {document.source_path: document for document in self._documents}
        self._parse_errors = tuple(parse_errors or ())

    @property
    def parse_errors(self) -> tuple[ParseError, ...]:
        """Parse failures that did not abort the build."""
        return self._parse_errors

    def lookup(self, path: str) -> Document | None:
        """Get document by path.

        Args:
            path: URL path (e.g., "/docs/guide", "docs/guide/")

        Returns:
            Document if found, None otherwise
        """
        return self._path_index.get(normalize_path(path))

    def get_by_source(self, source_path: Path) -> Document | None:
        """Get document by source path relative to the source root."""
        return self._source_index.get(source_path)

    def paths(self) -> list[URLPath]:
        """All document paths in sorted order."""
        return [document.path for document in self._documents]

    def children_of(self, prefix: str) -> list[Document]:
        """Get documents located strictly below a path prefix.

        Args:
            prefix: URL path prefix (e.g., "/docs/guides")

        Returns:
            Matching documents sorted by path
        """
        normalized = normalize_path(prefix)
        base = "/" if normalized == "/" else f"{normalized}/"
        return [
            document
            for document in self._documents
            if document.path != normalized and document.path.startswith(base)
        ]

    def __len__(self) -> int:
        return len(self._documents)

    def __iter__(self) -> Iterator[Document]:
        return iter(self._documents)

    def __contains__(self, path: object) -> bool:
        return isinstance(path, str) and normalize_path(path) in self._path_index


def derive_path(source_path: Path, path_prefix: str = "") -> URLPath:
    """Derive the URL path of a source file.

    Drops the file extension and prepends the prefix. An `index` file maps
    to its directory.

    Args:
        source_path: File path relative to the source root
        path_prefix: URL prefix (e.g., "/docs")

    Returns:
        Normalized URLPath (e.g., "guides/oidc.md" -> "/docs/guides/oidc")
    """
    parts = list(source_path.with_suffix("").parts)
    if parts and parts[-1] == "index":
        parts.pop()
    return normalize_path("/".join([path_prefix, *parts]))


class ContentCollector:
    """Builds a Collection from a source directory.

    When workers > 1, files are parsed in a bounded thread pool. Results are
    assembled in sorted source order, so errors and contents never depend
    on completion order.
    """

    def __init__(
        self,
        source_root: Path,
        parser: FrontMatterParser,
        *,
        pattern: str = DEFAULT_PATTERN,
        exclude: Iterable[str] = (),
        path_prefix: str = "",
        workers: int = 1,
        parse_errors: Policy = Policy.ERROR,
    ) -> None:
        """Initialize collector.

        Args:
            source_root: Root directory containing documents
            parser: Front matter parser capability
            pattern: Glob pattern relative to source_root
            exclude: Patterns for matching files to leave out; a file is
                excluded when its relative path or any of its components
                matches (e.g., "_*" for partials)
            path_prefix: URL prefix prepended to derived paths
            workers: Maximum number of parser threads
            parse_errors: ERROR aborts on the first failure; WARN and IGNORE
                leave failed documents out and record them on the Collection
        """
        self._source_root = source_root
        self._parser = parser
        self._pattern = pattern
        self._exclude = tuple(exclude)
        self._path_prefix = path_prefix
        self._workers = max(1, workers)
        self._parse_errors = parse_errors

    def collect(self) -> Collection:
        """Scan, parse and index every matching document.

        Returns:
            New Collection instance

        Raises:
            FileNotFoundError: If source_root doesn't exist
            DuplicatePathError: If two files derive the same path
            ParseError: If a document fails and the policy is ERROR
        """
        if not self._source_root.is_dir():
            raise FileNotFoundError(f"Source directory not found: {self._source_root}")

        sources = self._discover()
        paths = self._derive_paths(sources)
        logger.info(f"Collecting {len(sources)} documents from {self._source_root}")

        if self._workers > 1 and len(sources) > 1:
            with ThreadPoolExecutor(max_workers=self._workers) as executor:
                results = list(executor.map(self._load, sources, paths))
        else:
            results = [self._load(source, path) for source, path in zip(sources, paths, strict=True)]

        documents: list[Document] = []
        failures: list[ParseError] = []
        for result in results:
            if isinstance(result, Document):
                documents.append(result)
                continue
            if self._parse_errors == Policy.ERROR:
                raise result
            if self._parse_errors == Policy.WARN:
                logger.warning(f"Skipping document: {result}")
            failures.append(result)

        return Collection(documents, failures)

    def _discover(self) -> list[Path]:
        """Find matching files relative to the source root, sorted."""
        sources: list[Path] = []
        for file_path in self._source_root.glob(self._pattern):
            if not file_path.is_file():
                continue
            relative = file_path.relative_to(self._source_root)
            if self._is_excluded(relative):
                logger.info(f"Excluding {relative.as_posix()}")
                continue
            sources.append(relative)
        return sorted(sources)

    def _is_excluded(self, relative: Path) -> bool:
        candidates = (relative.as_posix(), *relative.parts)
        return any(fnmatch(candidate, pattern) for pattern in self._exclude for candidate in candidates)

    def _derive_paths(self, sources: list[Path]) -> list[URLPath]:
        """Derive paths for every source, rejecting collisions."""
        seen: dict[URLPath, Path] = {}
        paths: list[URLPath] = []
        for source in sources:
            path = derive_path(source, self._path_prefix)
            if path in seen:
                raise DuplicatePathError(path, seen[path], source)
            seen[path] = source
            paths.append(path)
        return paths

    def _load(self, source: Path, path: URLPath) -> Document | ParseError:
        """Read and parse one file, returning the failure instead of raising."""
        try:
            raw = (self._source_root / source).read_text(encoding="utf-8")
        except (OSError, ValueError) as e:
            return ParseError(source, str(e))

        # Parsers are injected, so any failure is attributed to the file.
        try:
            parsed = self._parser.parse(raw)
        except Exception as e:
            error = ParseError(source, str(e) or type(e).__name__)
            error.__cause__ = e
            return error

        logger.debug(f"Collected {source} as {path}")
        return Document(
            path=path,
            source_path=source,
            metadata=MappingProxyType(dict(parsed.metadata)),
            body=parsed.body,
        )


def collect(
    source_root: Path,
    pattern: str,
    path_prefix: str,
    parser: FrontMatterParser,
    *,
    exclude: Iterable[str] = (),
    workers: int = 1,
    parse_errors: Policy = Policy.ERROR,
) -> Collection:
    """Collect documents from a source directory.

    Shortcut for ContentCollector(...).collect().
    """
    collector = ContentCollector(
        source_root,
        parser,
        pattern=pattern,
        exclude=exclude,
        path_prefix=path_prefix,
        workers=workers,
        parse_errors=parse_errors,
    )
    return collector.collect()
