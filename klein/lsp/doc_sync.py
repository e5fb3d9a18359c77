"""Tracking of open documents and their versions for language servers."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


@dataclass
class _DocumentState:
    language_id: str
    version: int


class DocSyncEngine:
    """Tracks which documents are open and their strictly increasing versions.

    It produces the data for didOpen/didChange/didClose notifications but
    sends nothing itself.
    """

    def __init__(self) -> None:
        self._documents: dict[Path, _DocumentState] = {}

    def open_document(self, path: str | os.PathLike, language_id: str) -> tuple[str, int]:
        """Track a document as open; reopening starts it again at version 1."""
        state = _DocumentState(language_id=language_id, version=1)
        self._documents[Path(path)] = state
        return state.language_id, state.version

    def change_document(self, path: str | os.PathLike) -> int | None:
        """Bump a tracked document's version and return it, or None if untracked."""
        state = self._documents.get(Path(path))
        if state is None:
            return None
        state.version += 1
        return state.version

    def is_open(self, path: str | os.PathLike) -> bool:
        """Whether the document is tracked as open."""
        return Path(path) in self._documents

    def version(self, path: str | os.PathLike) -> int | None:
        """Current version of a tracked document."""
        state = self._documents.get(Path(path))
        return None if state is None else state.version

    def language_id(self, path: str | os.PathLike) -> str | None:
        """Language id of a tracked document."""
        state = self._documents.get(Path(path))
        return None if state is None else state.language_id

    def close_document(self, path: str | os.PathLike) -> bool:
        """Stop tracking a document; True if it was tracked."""
        return self._documents.pop(Path(path), None) is not None

    def open_documents(self) -> list[tuple[Path, str]]:
        """All tracked documents as (path, language id) pairs."""
        return [(path, state.language_id) for path, state in self._documents.items()]