"""Configuration management for docnav.

Supports TOML configuration format with auto-discovery.
"""

import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path

from docnav.core.collection import DEFAULT_PATTERN
from docnav.core.types import Policy

CONFIG_FILENAME = "docnav.toml"


@dataclass
class DocsConfig:
    """Content collection configuration."""

    source_dir: Path = field(default_factory=lambda: Path("docs"))
    pattern: str = DEFAULT_PATTERN
    exclude: list[str] = field(default_factory=list)
    path_prefix: str = ""
    workers: int = 1
    extract_title: bool = False
    on_parse_error: Policy = Policy.ERROR


@dataclass
class NavigationConfig:
    """Navigation validation configuration."""

    definition: Path | None = None
    external: list[str] = field(default_factory=list)
    allow_duplicates: list[str] = field(default_factory=list)
    on_broken_link: Policy = Policy.ERROR
    on_duplicate_link: Policy = Policy.WARN


@dataclass
class OutputConfig:
    """Build output configuration."""

    dir: Path = field(default_factory=lambda: Path("dist"))


@dataclass
class Config:
    """Application configuration."""

    docs: DocsConfig
    navigation: NavigationConfig
    output: OutputConfig
    config_path: Path | None = None

    @classmethod
    def load(cls, config_path: Path | None = None) -> "Config":
        """Load configuration from file.

        If config_path is provided, loads from that file.
        Otherwise, searches for docnav.toml in current directory and parents.

        Args:
            config_path: Optional explicit path to config file

        Returns:
            Config instance with defaults for missing sections

        Raises:
            FileNotFoundError: If explicit config_path doesn't exist
            ValueError: If configuration is invalid
        """
        if config_path is not None:
            if not config_path.exists():
                raise FileNotFoundError(f"Configuration file not found: {config_path}")
            return cls._load_from_file(config_path)

        discovered_path = cls._discover_config()
        if discovered_path is None:
            return cls._default()

        return cls._load_from_file(discovered_path)

    @classmethod
    def _discover_config(cls) -> Path | None:
        """Search for config file in current directory and parents.

        Returns:
            Path to config file or None if not found
        """
        current = Path.cwd()
        while True:
            candidate = current / CONFIG_FILENAME
            if candidate.exists():
                return candidate
            parent = current.parent
            if parent == current:
                return None
            current = parent

    @classmethod
    def _default(cls) -> "Config":
        """Create config with all defaults."""
        return cls(
            docs=DocsConfig(),
            navigation=NavigationConfig(),
            output=OutputConfig(),
        )

    @classmethod
    def _load_from_file(cls, path: Path) -> "Config":
        """Load configuration from a specific file.

        Args:
            path: Path to TOML configuration file

        Returns:
            Config instance

        Raises:
            ValueError: If configuration is invalid
        """
        with path.open("rb") as f:
            data = tomllib.load(f)

        config_dir = path.parent

        return cls(
            docs=cls._parse_docs(data.get("docs"), config_dir),
            navigation=cls._parse_navigation(data.get("navigation"), config_dir),
            output=cls._parse_output(data.get("output"), config_dir),
            config_path=path,
        )

    @classmethod
    def _parse_docs(cls, data: object, config_dir: Path) -> DocsConfig:
        """Parse docs configuration section.

        Args:
            data: Raw docs section data
            config_dir: Directory containing config file (for relative paths)

        Returns:
            DocsConfig instance
        """
        if data is None:
            return DocsConfig(source_dir=config_dir / "docs")

        if not isinstance(data, dict):
            raise ValueError("docs section must be a dictionary")

        source_dir = data.get("source_dir", "docs")
        if not isinstance(source_dir, str):
            raise ValueError("docs.source_dir must be a string")

        pattern = data.get("pattern", DEFAULT_PATTERN)
        if not isinstance(pattern, str) or not pattern:
            raise ValueError("docs.pattern must be a non-empty string")

        exclude = _parse_string_list(data.get("exclude"), "docs.exclude")

        path_prefix = data.get("path_prefix", "")
        if not isinstance(path_prefix, str):
            raise ValueError("docs.path_prefix must be a string")

        workers = data.get("workers", 1)
        if not isinstance(workers, int) or isinstance(workers, bool) or workers < 1:
            raise ValueError("docs.workers must be a positive integer")

        extract_title = data.get("extract_title", False)
        if not isinstance(extract_title, bool):
            raise ValueError("docs.extract_title must be a boolean")

        on_parse_error = _parse_policy(data.get("on_parse_error"), "docs.on_parse_error", Policy.ERROR)

        return DocsConfig(
            source_dir=config_dir / source_dir,
            pattern=pattern,
            exclude=exclude,
            path_prefix=path_prefix,
            workers=workers,
            extract_title=extract_title,
            on_parse_error=on_parse_error,
        )

    @classmethod
    def _parse_navigation(cls, data: object, config_dir: Path) -> NavigationConfig:
        """Parse navigation configuration section.

        Args:
            data: Raw navigation section data
            config_dir: Directory containing config file (for relative paths)

        Returns:
            NavigationConfig instance
        """
        if data is None:
            return NavigationConfig()

        if not isinstance(data, dict):
            raise ValueError("navigation section must be a dictionary")

        definition = data.get("definition")
        if definition is not None and not isinstance(definition, str):
            raise ValueError("navigation.definition must be a string")

        on_broken_link = _parse_policy(data.get("on_broken_link"), "navigation.on_broken_link", Policy.ERROR)
        if on_broken_link == Policy.IGNORE:
            raise ValueError("navigation.on_broken_link must be 'error' or 'warn'")

        return NavigationConfig(
            definition=config_dir / definition if definition is not None else None,
            external=_parse_string_list(data.get("external"), "navigation.external"),
            allow_duplicates=_parse_string_list(
                data.get("allow_duplicates"),
                "navigation.allow_duplicates",
            ),
            on_broken_link=on_broken_link,
            on_duplicate_link=_parse_policy(
                data.get("on_duplicate_link"),
                "navigation.on_duplicate_link",
                Policy.WARN,
            ),
        )

    @classmethod
    def _parse_output(cls, data: object, config_dir: Path) -> OutputConfig:
        """Parse output configuration section."""
        if data is None:
            return OutputConfig(dir=config_dir / "dist")

        if not isinstance(data, dict):
            raise ValueError("output section must be a dictionary")

        out_dir = data.get("dir", "dist")
        if not isinstance(out_dir, str):
            raise ValueError("output.dir must be a string")

        return OutputConfig(dir=config_dir / out_dir)

    def with_overrides(
        self,
        *,
        source_dir: Path | None = None,
        definition: Path | None = None,
        out_dir: Path | None = None,
        on_broken_link: Policy | None = None,
    ) -> "Config":
        """Create a new Config with CLI overrides applied.

        Only non-None values override the existing config. The original
        Config is not modified.

        Args:
            source_dir: Override docs.source_dir
            definition: Override navigation.definition
            out_dir: Override output.dir
            on_broken_link: Override navigation.on_broken_link

        Returns:
            New Config instance with overrides applied
        """
        docs = self.docs
        if source_dir is not None:
            docs = replace(self.docs, source_dir=source_dir)

        navigation = self.navigation
        if definition is not None or on_broken_link is not None:
            navigation = replace(
                self.navigation,
                definition=definition if definition is not None else self.navigation.definition,
                on_broken_link=(
                    on_broken_link if on_broken_link is not None else self.navigation.on_broken_link
                ),
            )

        output = self.output
        if out_dir is not None:
            output = replace(self.output, dir=out_dir)

        return replace(self, docs=docs, navigation=navigation, output=output)


def _parse_policy(value: object, name: str, default: Policy) -> Policy:
    if value is None:
        return default
    if not isinstance(value, str):
        raise ValueError(f"{name} must be a string")
    try:
        return Policy(value)
    except ValueError:
        choices = ", ".join(f"'{policy.value}'" for policy in Policy)
        raise ValueError(f"{name} must be one of {choices}") from None


def _parse_string_list(value: object, name: str) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError(f"{name} must be a list")
    items: list[str] = []
    for item in value:
        if not isinstance(item, str):
            raise ValueError(f"{name} items must be strings")
        items.append(item)
    return items
