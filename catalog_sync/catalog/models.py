"""
Data models for catalog documents.

A catalog document is a JSON tree. Every value in it is parsed once into
one of three node types:

    PlaylistEntry - an object with a truthy "id" and a "tracks" array
    GroupNode     - any other object or array; its children are nodes
    Leaf          - a scalar (string, number, boolean, null)

Classification happens at parse time, so traversal never re-inspects raw
fields. Serializing a parsed tree gives back the same JSON value, with the
key order of every object preserved.

Example document:
    {
      "quarterly": {
        "q1": {"id": "PL123", "name": "Q1 2025", "tracks": ["Song A", "Song B"]}
      },
      "genres": {
        "electronic": {
          "house": {"id": "PL456", "tracks": []}
        }
      }
    }
"""

from dataclasses import dataclass, field
from typing import Any, Iterator, Union


@dataclass
class Leaf:
    """A scalar JSON value kept verbatim."""

    value: Any

    def to_json(self) -> Any:
        return self.value


@dataclass
class PlaylistEntry:
    """
    A playlist node: external identifier plus ordered track titles.

    Attributes:
        key: The node's key in its parent (the traversal key, not the label).
        id: External playlist identifier. Never modified by a sync.
        tracks: Ordered track titles. Replaced wholesale on update.
        name: Human-readable label, or None when the node has none.
        fields: All raw fields of the JSON object, in document order.
                id, tracks and name are written back into their original
                positions on serialization; other fields pass through.
    """

    key: str
    id: Any
    tracks: list[str]
    name: str | None = None
    fields: dict[str, Any] = field(default_factory=dict, repr=False)

    def replace_tracks(self, titles: list[str], name: str | None) -> None:
        """
        Replace the track list and re-assert the known label.

        Args:
            titles: New ordered titles. Copied; duplicates are kept.
            name: Label known to the caller. None leaves the entry unnamed.
        """
        self.tracks = list(titles)
        if name is not None:
            self.name = name

    def to_json(self) -> dict[str, Any]:
        data = dict(self.fields)
        data["id"] = self.id
        data["tracks"] = list(self.tracks)
        if self.name is not None:
            data["name"] = self.name
        return data


@dataclass
class GroupNode:
    """
    An object or array whose children are themselves nodes.

    Attributes:
        key: The node's key in its parent ("" for the document root).
        children: Child nodes by key, in document order. Array children
                  are keyed by their index as a string.
        is_array: True when the node came from a JSON array.
    """

    key: str
    children: dict[str, "Node"] = field(default_factory=dict)
    is_array: bool = False

    def to_json(self) -> dict[str, Any] | list[Any]:
        if self.is_array:
            return [child.to_json() for child in self.children.values()]
        return {key: child.to_json() for key, child in self.children.items()}

    def iter_entries(self, path: str) -> Iterator[tuple[str, PlaylistEntry]]:
        """
        Yield (dotted_path, entry) for every playlist below this node.

        Depth-first, children in document order. Playlist entries are
        leaves of the walk: their fields are never descended into.

        Args:
            path: Dotted path of this node.
        """
        for key, child in self.children.items():
            child_path = f"{path}.{key}" if path else key
            if isinstance(child, PlaylistEntry):
                yield child_path, child
            elif isinstance(child, GroupNode):
                yield from child.iter_entries(child_path)


Node = Union[PlaylistEntry, GroupNode, Leaf]


def is_playlist_entry(value: Any) -> bool:
    """
    Check whether a raw JSON value is a playlist entry.

    An object qualifies when its "id" is truthy and its "tracks" is an array.
    An object with an "id" but no "tracks" array is a group.
    """
    return (
        isinstance(value, dict)
        and bool(value.get("id"))
        and isinstance(value.get("tracks"), list)
    )


def parse_node(key: str, value: Any) -> Node:
    """
    Convert a raw JSON value into its tagged node type.

    Args:
        key: The value's key in its parent.
        value: Raw value as returned by json.loads().

    Returns:
        PlaylistEntry, GroupNode or Leaf.
    """
    if is_playlist_entry(value):
        name = value.get("name")
        return PlaylistEntry(
            key=key,
            id=value["id"],
            tracks=list(value["tracks"]),
            name=name if isinstance(name, str) else None,
            fields=dict(value),
        )

    if isinstance(value, dict):
        return GroupNode(
            key=key,
            children={k: parse_node(k, v) for k, v in value.items()},
        )

    if isinstance(value, list):
        return GroupNode(
            key=key,
            children={str(i): parse_node(str(i), v) for i, v in enumerate(value)},
            is_array=True,
        )

    return Leaf(value)
