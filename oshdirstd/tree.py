"""An in-memory tree of a standard's records, mirroring the file system layout."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterator, Optional

from .format import DirStandard, Record


@dataclass(eq=False)
class Node:
    """One path part in the records tree; `value` is set where a record ends."""

    value: Optional[Record] = None
    path_regex: Optional[re.Pattern] = None
    children: dict = field(default_factory=dict, repr=False)
    parent: Optional["Node"] = field(default=None, repr=False)

    def add_or_get_child(self, path_part: str) -> "Node":
        """Return the child for `path_part`, creating it if it does not exist yet."""
        child = self.children.get(path_part)
        if child is None:
            child = Node(parent=self)
            self.children[path_part] = child
        return child

    def ancestors(self) -> Iterator["Node"]:
        """Yield the parent, grand-parent and so on, up to the root."""
        node = self.parent
        while node is not None:
            yield node
            node = node.parent

    def render_part(self, name: str, indent: str, tab: str) -> str:
        child_indent = f"{indent}{tab}"
        children = "\n".join(
            child.render_part(child_name, child_indent, tab)
            for child_name, child in self.children.items()
        )
        return f"{indent}- {name}\n{children}"

    def render(self, name: str) -> str:
        """Render this node and its descendants as an indented list."""
        return self.render_part(name, "", "  ")


def _path_parts(rec: Record) -> list:
    parts = rec.path.split("/")
    if rec.directory:
        parts.pop()
    return parts


def create(std: DirStandard) -> tuple:
    """Build the records tree of a standard.

    Returns the root node and the list of nodes holding a record,
    ordered by path depth. Every such node gets a regex matching
    the whole relative path of that record.
    """
    parts_recs = sorted(
        ((_path_parts(rec), rec) for rec in std.records),
        key=lambda parts_rec: len(parts_rec[0]),
    )
    root = Node()
    rec_nodes = []
    for parts, rec in parts_recs:
        if not parts:
            raise ValueError(f"A record needs to have at least one path part: '{rec.path}'")
        ancestor = root
        for part in parts[:-1]:
            ancestor = ancestor.add_or_get_child(part)
        leaf = ancestor.add_or_get_child(parts[-1])
        leaf.value = rec
        pieces = [rec.regex_str()]
        pieces.extend(anc.value.regex_str() for anc in leaf.ancestors() if anc.value is not None)
        pattern = "^(?:" + "/".join(reversed(pieces)) + ")$"
        try:
            leaf.path_regex = re.compile(pattern)
        except re.error as err:
            raise ValueError(f"Path regex malformed: '{pattern}'") from err
        rec_nodes.append(leaf)
    return root, rec_nodes