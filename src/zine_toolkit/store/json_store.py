"""
Module: store.json_store

Purpose:
    File-backed repository: the in-memory store written to a single JSON
    file after every successful write. Suitable for local editing sessions
    and fixtures; a malformed file falls back to an empty store rather than
    failing to open.

Key Classes:
    - JsonFileRepository: InMemoryRepository persisted to JSON

Dependencies:
    - json, base64 (std)
    - store.memory: InMemoryRepository
"""

from __future__ import annotations

import base64
import itertools
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from zine_toolkit.core.errors import PersistenceError

from .memory import InMemoryRepository

logger = logging.getLogger(__name__)

FILE_VERSION = 1


class JsonFileRepository(InMemoryRepository):
    """
    Repository persisted to a JSON file.

    Previews are stored base64-encoded. Writes go to a sibling temp file
    that then replaces the target, so a crash mid-write leaves the previous
    file intact.

    Attributes:
        path: JSON file location

    Example:
        >>> repo = JsonFileRepository(Path("workspace/zines.json"))
        >>> doc = asyncio.run(repo.insert_document("Summer"))
        >>> Path("workspace/zines.json").exists()
        True
    """

    def __init__(self, path: Path) -> None:
        super().__init__()
        self.path = Path(path)
        self.load_error: Optional[str] = None
        if self.path.exists():
            self._load()

    def _load(self) -> None:
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
            self._documents = _index(data.get("documents", []))
            self._pages = _index(data.get("pages", []))
            for row in self._pages.values():
                if row.get("preview") is not None:
                    row["preview"] = base64.b64decode(row["preview"])
            self._elements = _index(data.get("elements", []))
            self._sequence = itertools.count(int(data.get("sequence", 0)))
            logger.info(
                f"Loaded {len(self._documents)} documents, {len(self._pages)} pages "
                f"from {self.path}"
            )
        except (json.JSONDecodeError, AttributeError, KeyError, TypeError, ValueError) as e:
            self.load_error = f"Store file is corrupted: {e}"
            logger.warning(f"{self.load_error}; starting with an empty store")
            self._documents, self._pages, self._elements = {}, {}, {}
            self._sequence = itertools.count()

    def _commit(self) -> None:
        payload = {
            "version": FILE_VERSION,
            "sequence": self._peek_sequence(),
            "documents": list(self._documents.values()),
            "pages": [_encode_page(row) for row in self._pages.values()],
            "elements": list(self._elements.values()),
        }
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
            tmp_path.replace(self.path)
        except OSError as e:
            raise PersistenceError(f"Failed to write store file {self.path}: {e}") from e

    def _peek_sequence(self) -> int:
        value = next(self._sequence)
        self._sequence = itertools.count(value)
        return value


def _index(rows: list[Dict[str, Any]]) -> Dict[str, Dict[str, Any]]:
    return {str(row["id"]): dict(row) for row in rows}


def _encode_page(row: Dict[str, Any]) -> Dict[str, Any]:
    encoded = dict(row)
    if encoded.get("preview") is not None:
        encoded["preview"] = base64.b64encode(encoded["preview"]).decode("ascii")
    return encoded
