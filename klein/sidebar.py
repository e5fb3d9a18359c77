"""File-explorer tree and its flattened, scrollable view."""

from __future__ import annotations

import os
from pathlib import Path
from typing import NamedTuple


class FileNode:
    """One entry in the explorer tree; directories load children lazily."""

    def __init__(
        self,
        path: str | os.PathLike,
        *,
        name: str | None = None,
        is_dir: bool | None = None,
        is_expanded: bool = False,
    ) -> None:
        self.path = Path(path)
        self.name = self.path.name if name is None else name
        self.is_dir = self.path.is_dir() if is_dir is None else is_dir
        self.children: list[FileNode] | None = None
        self.is_expanded = is_expanded

    def expand(self) -> None:
        """Load children on first use and mark the node expanded.

        Raises OSError if the directory cannot be read.
        """
        if self.is_dir and self.children is None:
            with os.scandir(self.path) as it:
                children = [FileNode(entry.path) for entry in it]
            children.sort(key=lambda node: (not node.is_dir, node.name))
            self.children = children
        self.is_expanded = True

    def collapse(self) -> None:
        """Mark the node collapsed; its children stay loaded."""
        self.is_expanded = False

    def refresh(self) -> None:
        """Reload an expanded directory, keeping which children were expanded."""
        if not (self.is_dir and self.is_expanded):
            return
        expanded = {child.path: child.is_expanded for child in self.children or ()}
        new_children = []
        try:
            with os.scandir(self.path) as it:
                entries = list(it)
        except OSError:
            entries = []
        for entry in entries:
            try:
                is_dir = entry.is_dir(follow_symlinks=False)
            except OSError:
                is_dir = False
            path = Path(entry.path)
            node = FileNode(
                path,
                name=entry.name,
                is_dir=is_dir,
                is_expanded=expanded.get(path, False),
            )
            if node.is_expanded:
                node.refresh()
            new_children.append(node)
        new_children.sort(key=lambda node: (not node.is_dir, node.name.lower()))
        self.children = new_children


class FlatEntry(NamedTuple):
    """A visible row of the explorer."""

    path: Path
    depth: int
    is_dir: bool


class Sidebar:
    """The explorer: a tree rooted at the workspace and its visible rows."""

    def __init__(self, root_path: str | os.PathLike) -> None:
        self.root = FileNode(root_path)
        try:
            self.root.expand()
        except OSError:
            pass
        self.selected_index = 0
        self.flat_list: list[FlatEntry] = []
        self.offset = 0
        self.last_height = 20
        self.show_hidden = False
        self.update_flat_list()

    def update_flat_list(self) -> None:
        """Rebuild the visible rows, clamping the selection and scroll."""
        rows: list[FlatEntry] = []
        self._flatten(self.root, 0, rows)
        self.flat_list = rows
        if rows:
            if self.selected_index >= len(rows):
                self.selected_index = len(rows) - 1
            self._adjust_scroll()
        else:
            self.selected_index = 0
            self.offset = 0

    def _flatten(self, node: FileNode, depth: int, rows: list[FlatEntry]) -> None:
        if (
            not self.show_hidden
            and depth > 0
            and node.name.startswith(".")
            and node.name not in (".", "..")
        ):
            return
        rows.append(FlatEntry(node.path, depth, node.is_dir))
        # The root's children are shown even when the root is collapsed.
        if (node.is_expanded or depth == 0) and node.children is not None:
            for child in node.children:
                self._flatten(child, depth + 1, rows)

    def _visible_height(self) -> int:
        return max(self.last_height - 2, 0)

    def _selected_file(self) -> Path | None:
        entry = self.flat_list[self.selected_index]
        return None if entry.is_dir else entry.path

    def _move_to(self, index: int) -> Path | None:
        if not self.flat_list:
            return None
        self.selected_index = index
        self._adjust_scroll()
        return self._selected_file()

    def select_next(self) -> Path | None:
        """Select the next row, wrapping; return it if it is a file."""
        if not self.flat_list:
            return None
        return self._move_to((self.selected_index + 1) % len(self.flat_list))

    def select_previous(self) -> Path | None:
        """Select the previous row, wrapping; return it if it is a file."""
        if not self.flat_list:
            return None
        index = self.selected_index - 1 if self.selected_index > 0 else len(self.flat_list) - 1
        return self._move_to(index)

    def page_down(self) -> Path | None:
        """Move down by one visible page; return the row if it is a file."""
        if not self.flat_list:
            return None
        index = min(self.selected_index + self._visible_height(), len(self.flat_list) - 1)
        return self._move_to(index)

    def page_up(self) -> Path | None:
        """Move up by one visible page; return the row if it is a file."""
        if not self.flat_list:
            return None
        return self._move_to(max(self.selected_index - self._visible_height(), 0))

    def start(self) -> Path | None:
        """Select the first row; return it if it is a file."""
        return self._move_to(0)

    def end(self) -> Path | None:
        """Select the last row; return it if it is a file."""
        return self._move_to(len(self.flat_list) - 1)

    def _adjust_scroll(self) -> None:
        height = self._visible_height()
        if height == 0:
            return
        if self.selected_index >= self.offset + height:
            self.offset = max(self.selected_index - height, 0) + 1
        elif self.selected_index < self.offset:
            self.offset = self.selected_index

    def toggle_selected(self) -> Path | None:
        """Expand or collapse the selected directory, or return the selected file.

        Raises OSError if a directory being expanded cannot be read.
        """
        if not self.flat_list:
            return None
        entry = self.flat_list[self.selected_index]
        if not entry.is_dir:
            return entry.path
        self._toggle_node(self.root, entry.path)
        self.update_flat_list()
        return None

    @classmethod
    def _toggle_node(cls, node: FileNode, target: Path) -> bool:
        if node.path == target:
            if node.is_expanded:
                node.collapse()
            else:
                node.expand()
            return True
        return any(cls._toggle_node(child, target) for child in node.children or ())

    def refresh(self) -> None:
        """Reload the tree from disk and rebuild the visible rows."""
        self.root.refresh()
        self.update_flat_list()