"""Build output for the rendering layer.

Output structure:
    dist/
    ├── collection.json      # Every document: path, source file, metadata
    └── navigation.json      # Resolved sidebar tree
"""

import json
from pathlib import Path
from typing import TypedDict

from docnav.core.collection import Collection
from docnav.core.navigation import RenderableTree, RenderableTreeDict


class DocumentDict(TypedDict):
    """Serialized document entry."""

    path: str
    source: str
    metadata: dict[str, object]


class OutputWriter:
    """Writes collection and navigation JSON files."""

    COLLECTION_FILENAME = "collection.json"
    NAVIGATION_FILENAME = "navigation.json"

    def __init__(self, out_dir: Path) -> None:
        """Initialize writer.

        Args:
            out_dir: Directory for output files (created on demand)
        """
        self._out_dir = out_dir

    @property
    def out_dir(self) -> Path:
        """Output directory."""
        return self._out_dir

    def write_collection(self, collection: Collection) -> Path:
        """Store collection index.

        Args:
            collection: Collected documents

        Returns:
            Path of the written file
        """
        documents: list[DocumentDict] = [
            {
                "path": document.path,
                "source": document.source_path.as_posix(),
                "metadata": dict(document.metadata),
            }
            for document in collection
        ]
        return self._write(self.COLLECTION_FILENAME, documents)

    def write_navigation(self, tree: RenderableTree) -> Path:
        """Store resolved navigation tree.

        Args:
            tree: Renderable navigation tree

        Returns:
            Path of the written file
        """
        navigation: RenderableTreeDict = tree.to_dict()
        return self._write(self.NAVIGATION_FILENAME, navigation)

    def _write(self, filename: str, data: object) -> Path:
        self._out_dir.mkdir(parents=True, exist_ok=True)
        path = self._out_dir / filename
        # Front matter may carry dates and other YAML scalars
        path.write_text(
            json.dumps(data, indent=2, ensure_ascii=False, default=str) + "\n",
            encoding="utf-8",
        )
        return path
