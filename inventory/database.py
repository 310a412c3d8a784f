# inventory/database.py
"""File-backed product store.

The whole collection lives in one JSON array on disk. Every read loads the full
file and every write replaces it atomically (temp file + os.replace), so readers
never observe a half-written file.

Mutations go through ``Store.mutate`` which holds the store's lock across the
load -> change -> save cycle. Two concurrent writers therefore never work from the
same base collection.
"""
import asyncio
import json
import logging
import os
import stat
import tempfile
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, TypeVar

from .errors import StorageError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Store:
    def __init__(self, path: str):
        self.path = Path(path)
        self._lock = asyncio.Lock()

    # ---------------------------
    # Blocking helpers (run in a worker thread)
    # ---------------------------
    def _read(self) -> Optional[List[Dict[str, Any]]]:
        """Return the persisted collection, or None if the file does not exist yet."""
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            logger.exception("could not read %s", self.path)
            raise StorageError("Failed to read products") from e

        if not raw.strip():
            return []
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.exception("%s is not valid JSON", self.path)
            raise StorageError("Failed to read products") from e
        if not isinstance(data, list):
            logger.error("%s does not hold a JSON array", self.path)
            raise StorageError("Failed to read products")
        if not all(isinstance(p, dict) for p in data):
            logger.error("%s holds entries that are not product objects", self.path)
            raise StorageError("Failed to read products")
        return data

    def _file_mode(self) -> int:
        """Mode for the next save: keep the current file's, else the umask default."""
        try:
            return stat.S_IMODE(self.path.stat().st_mode)
        except FileNotFoundError:
            umask = os.umask(0)
            os.umask(umask)
            return 0o666 & ~umask

    def _write(self, products: List[Dict[str, Any]]) -> None:
        directory = self.path.parent
        tmp_name = None
        try:
            directory.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w", encoding="utf-8", dir=directory, prefix=f".{self.path.name}.", suffix=".tmp", delete=False
            ) as tmp:
                tmp_name = tmp.name
                json.dump(products, tmp, indent=2, ensure_ascii=False)
                tmp.flush()
                os.fsync(tmp.fileno())
            os.chmod(tmp_name, self._file_mode())
            os.replace(tmp_name, self.path)
        except OSError as e:
            logger.exception("could not write %s", self.path)
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise StorageError("Failed to write products") from e

    # ---------------------------
    # Public API
    # ---------------------------
    async def load(self) -> List[Dict[str, Any]]:
        products = await asyncio.to_thread(self._read)
        if products is not None:
            return products

        # First run. Bootstrap under the lock so an empty file can never
        # overwrite a collection another request is saving right now.
        async with self._lock:
            return await self._load_or_bootstrap()

    async def save(self, products: List[Dict[str, Any]]) -> None:
        async with self._lock:
            await self._save(products)

    async def mutate(self, fn: Callable[[List[Dict[str, Any]]], T]) -> T:
        """Run ``fn`` on the current collection and persist the result.

        ``fn`` changes the list in place and returns whatever the caller needs.
        If it raises, nothing is written.
        """
        async with self._lock:
            products = await self._load_or_bootstrap()
            result = fn(products)
            await self._save(products)
            return result

    async def _load_or_bootstrap(self) -> List[Dict[str, Any]]:
        products = await asyncio.to_thread(self._read)
        if products is None:
            logger.info("initializing empty product store at %s", self.path)
            await asyncio.to_thread(self._write, [])
            products = []
        return products

    async def _save(self, products: List[Dict[str, Any]]) -> None:
        await asyncio.to_thread(self._write, products)
        logger.debug("saved %d products to %s", len(products), self.path)
