"""
Catalog document model and persistence.

Usage:
    from catalog_sync.catalog import load_document, save_document

    document = load_document(Path("data/playlists.json"))
    for path, entry in document.traverse(["quarterly", "genres"]):
        print(path, len(entry.tracks))
    save_document(document)
"""

from catalog_sync.catalog.document import (
    CatalogDocument,
    load_document,
    parse_document,
    save_document,
)
from catalog_sync.catalog.models import (
    GroupNode,
    Leaf,
    Node,
    PlaylistEntry,
    is_playlist_entry,
    parse_node,
)

__all__ = [
    "CatalogDocument",
    "load_document",
    "parse_document",
    "save_document",
    "GroupNode",
    "Leaf",
    "Node",
    "PlaylistEntry",
    "is_playlist_entry",
    "parse_node",
]
