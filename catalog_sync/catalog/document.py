"""
Loading, traversing and saving catalog documents.

Persisted format:
    UTF-8 JSON, 2-space indentation, non-ASCII characters written as-is,
    trailing newline. The document is always read and written whole.

Writes go to a temporary file next to the target, which is then moved
over the target with os.replace(). A failed write leaves the previous
file intact and surfaces as CatalogWriteError.
"""

import json
import os
import stat
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, Iterator

from catalog_sync.catalog.models import GroupNode, PlaylistEntry, parse_node
from catalog_sync.core.exceptions import (
    CatalogParseError,
    CatalogReadError,
    CatalogWriteError,
)
from catalog_sync.core.logger import get_logger

logger = get_logger(__name__)


@dataclass
class CatalogDocument:
    """
    A parsed catalog document.

    Attributes:
        root: Top-level object of the document.
        path: File the document was loaded from, if any.
    """

    root: GroupNode
    path: Path | None = None

    def traverse(self, root_keys: Iterable[str]) -> Iterator[tuple[str, PlaylistEntry]]:
        """
        Lazily yield (dotted_path, entry) for every playlist under root_keys.

        Root keys are visited in the given order; keys missing from the
        document are skipped. Within a root the walk is depth-first in
        document order, so the same document always yields the same
        sequence. A root key that is itself a playlist entry is yielded.

        Example:
            for path, entry in document.traverse(["quarterly", "genres"]):
                print(path, entry.id)   # quarterly.q1 PL123
        """
        for root_key in root_keys:
            node = self.root.children.get(root_key)
            if node is None:
                logger.debug(f"Root key '{root_key}' not present, skipping")
                continue
            if isinstance(node, PlaylistEntry):
                yield root_key, node
            elif isinstance(node, GroupNode):
                yield from node.iter_entries(root_key)

    def to_json(self) -> dict[str, Any]:
        return self.root.to_json()

    def dumps(self) -> str:
        """Serialize the document in its persisted text form."""
        return json.dumps(self.to_json(), indent=2, ensure_ascii=False) + "\n"


def parse_document(text: str, source: Path | None = None) -> CatalogDocument:
    """
    Parse catalog JSON text.

    Raises:
        CatalogParseError: If the text is not valid JSON or the top level
                           is not an object.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise CatalogParseError(
            f"Invalid JSON in {source or 'catalog'}: {e}",
            details={
                "file_path": str(source) if source else None,
                "line": e.lineno,
                "column": e.colno,
            }
        ) from e

    if not isinstance(data, dict):
        raise CatalogParseError(
            f"Catalog must contain a JSON object at the top level: {source or '<text>'}",
            details={"file_path": str(source) if source else None}
        )

    root = GroupNode(
        key="",
        children={key: parse_node(key, value) for key, value in data.items()},
    )
    return CatalogDocument(root=root, path=source)


def load_document(path: Path) -> CatalogDocument:
    """
    Read and parse a catalog document.

    Args:
        path: Catalog file location.

    Returns:
        The parsed document, remembering its path.

    Raises:
        CatalogReadError: File missing, unreadable or not UTF-8.
        CatalogParseError: File content is not a JSON object.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise CatalogReadError(
            f"Catalog file not found: {path}",
            details={"file_path": str(path)}
        ) from e
    except (OSError, UnicodeDecodeError) as e:
        raise CatalogReadError(
            f"Failed to read catalog file {path}: {e}",
            details={"file_path": str(path), "original_error": str(e)}
        ) from e

    return parse_document(text, source=path)


def save_document(document: CatalogDocument, path: Path | None = None) -> Path:
    """
    Write a catalog document, replacing the file atomically.

    Args:
        document: The document to write.
        path: Target file. Defaults to the path the document was loaded from.

    Returns:
        The path written.

    Raises:
        CatalogWriteError: No target path, or the write/replace failed.
    """
    target = path or document.path
    if target is None:
        raise CatalogWriteError("No path to write the catalog to")

    content = document.dumps()
    tmp_name = None
    try:
        fd, tmp_name = tempfile.mkstemp(
            dir=target.parent, prefix=f".{target.name}.", suffix=".tmp"
        )
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as f:
            f.write(content)
        # mkstemp creates the file as 0600; keep the catalog's own mode
        if target.exists():
            os.chmod(tmp_name, stat.S_IMODE(target.stat().st_mode))
        os.replace(tmp_name, target)
    except OSError as e:
        if tmp_name is not None and os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise CatalogWriteError(
            f"Failed to write catalog file {target}: {e}",
            details={"file_path": str(target), "original_error": str(e)}
        ) from e

    return target
