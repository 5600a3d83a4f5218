"""Build pipeline.

Runs collection and navigation validation in sequence according to the
configured policies.
"""

import logging
from dataclasses import dataclass, field

from docnav.config import Config
from docnav.core.collection import Collection, ContentCollector
from docnav.core.definition import load_navigation
from docnav.core.errors import BrokenLinkError, NavigationValidationError
from docnav.core.frontmatter import FrontMatterParser, YamlFrontMatterParser
from docnav.core.navigation import NavigationBuilder, RenderableTree
from docnav.core.types import Policy

logger = logging.getLogger(__name__)


@dataclass
class BuildResult:
    """Outputs of one build."""

    collection: Collection
    tree: RenderableTree | None
    broken_links: list[BrokenLinkError] = field(default_factory=list)


def run_build(config: Config, parser: FrontMatterParser | None = None) -> BuildResult:
    """Collect documents and validate the navigation definition.

    Args:
        config: Application configuration
        parser: Front matter parser (default: YAML front matter)

    Returns:
        BuildResult; tree is None when no navigation definition is configured

    Raises:
        FileNotFoundError: If the source directory or definition is missing
        DuplicatePathError: If two documents derive the same path
        ParseError: If a document fails and docs.on_parse_error is "error"
        NavigationValidationError: If navigation is invalid and the
            configured policies make the problem fatal
    """
    if parser is None:
        parser = YamlFrontMatterParser(extract_title=config.docs.extract_title)

    collector = ContentCollector(
        config.docs.source_dir,
        parser,
        pattern=config.docs.pattern,
        exclude=config.docs.exclude,
        path_prefix=config.docs.path_prefix,
        workers=config.docs.workers,
        parse_errors=config.docs.on_parse_error,
    )
    collection = collector.collect()
    logger.info(f"Collected {len(collection)} documents")

    if config.navigation.definition is None:
        return BuildResult(collection=collection, tree=None)

    tree_definition = load_navigation(config.navigation.definition)
    builder = NavigationBuilder(
        collection,
        config.navigation.external,
        duplicates=config.navigation.on_duplicate_link,
        allow_duplicates=config.navigation.allow_duplicates,
    )

    try:
        tree = builder.build(tree_definition)
    except NavigationValidationError as e:
        if config.navigation.on_broken_link == Policy.ERROR or e.duplicate_links or e.tree is None:
            raise
        for error in e.broken_links:
            logger.warning(f"Broken navigation link: {error}")
        return BuildResult(collection=collection, tree=e.tree, broken_links=e.broken_links)

    return BuildResult(collection=collection, tree=tree)
