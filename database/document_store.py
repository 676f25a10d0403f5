"""
Whole-document JSON store for the shared configuration and the per-server records.

Documents are only ever read whole and replaced whole. Replacement writes to a
temporary file beside the target and renames it over the original, so a
crashed write never leaves a truncated document behind. Each document has its
own lock; holders of the lock are the only writers of that document.
"""
import asyncio
import copy
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

from errors.exceptions import DatabaseError


logger = logging.getLogger(__name__)


class DocumentStore:
    """
    Loads and atomically replaces named JSON documents under a data directory.

    File I/O runs in a worker thread so the event loop only suspends at
    document reads and writes.
    """

    def __init__(self, data_dir: str = "data", indent: int = 2):
        """
        Initialize the document store.

        Args:
            data_dir: Directory holding the JSON documents
            indent: Indentation used when writing documents
        """
        self.data_dir = Path(data_dir)
        self.indent = indent
        self._locks: Dict[str, asyncio.Lock] = {}

    def path_for(self, name: str) -> Path:
        """Resolve a document name to its file path."""
        path = Path(name)
        if path.is_absolute():
            return path
        return self.data_dir / path

    def lock(self, name: str) -> asyncio.Lock:
        """
        Get the single-writer lock for a document.

        Args:
            name: Document name

        Returns:
            asyncio.Lock: Lock guarding read-modify-write cycles of the document
        """
        key = str(self.path_for(name))
        if key not in self._locks:
            self._locks[key] = asyncio.Lock()
        return self._locks[key]

    async def exists(self, name: str) -> bool:
        return await asyncio.to_thread(self.path_for(name).exists)

    async def load(self, name: str, default: Optional[Any] = None) -> Any:
        """
        Load a full document snapshot.

        Args:
            name: Document name
            default: Value returned (as a copy) when the document does not exist

        Returns:
            The decoded document; callers own the returned object

        Raises:
            DatabaseError: If the document cannot be read or decoded
        """
        try:
            return await asyncio.to_thread(self._read, self.path_for(name), default)
        except (OSError, ValueError) as e:
            logger.error(f"Failed to load document {name}: {e}")
            raise DatabaseError(f"Failed to load document {name}: {e}", operation=f"load:{name}")

    async def replace(self, name: str, data: Any) -> None:
        """
        Atomically replace a document with new content.

        Args:
            name: Document name
            data: JSON-serializable document content

        Raises:
            DatabaseError: If the document cannot be written
        """
        try:
            await asyncio.to_thread(self._write, self.path_for(name), data)
            logger.debug(f"Replaced document {name}")
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Failed to replace document {name}: {e}")
            raise DatabaseError(f"Failed to replace document {name}: {e}", operation=f"replace:{name}")

    def _read(self, path: Path, default: Optional[Any]) -> Any:
        if not path.exists():
            return copy.deepcopy(default) if default is not None else {}
        with open(path, 'r', encoding='utf-8') as f:
            return json.load(f)

    def _write(self, path: Path, data: Any) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        payload = json.dumps(data, indent=self.indent, ensure_ascii=False)
        tmp_path = path.with_suffix(path.suffix + '.tmp')
        try:
            with open(tmp_path, 'w', encoding='utf-8') as f:
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, path)
        except BaseException:
            if tmp_path.exists():
                tmp_path.unlink()
            raise
