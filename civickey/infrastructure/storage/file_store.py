"""JSON-file key-value store with atomic writes (implements IKeyValueStore)."""

from __future__ import annotations

import asyncio
import json
import logging
import os
import tempfile
from pathlib import Path

import aiofiles
import aiofiles.os

logger = logging.getLogger(__name__)


class FileKeyValueStore:
    """All keys live in one JSON object on disk.

    Writes go to a temp file in the same directory and are renamed over
    the target, so a crash never leaves a half-written file. A lock
    serializes read-modify-write cycles within the process.
    """

    def __init__(self, path: str) -> None:
        self.path = Path(path).expanduser().resolve()
        self._lock = asyncio.Lock()

    async def _read(self) -> dict[str, str]:
        if not await aiofiles.os.path.exists(self.path):
            return {}
        async with aiofiles.open(self.path, encoding="utf-8") as f:
            raw = await f.read()
        try:
            data = json.loads(raw) if raw else {}
        except ValueError:
            logger.warning("Local storage file is corrupt, starting empty: %s", self.path)
            return {}
        return {str(k): str(v) for k, v in data.items()} if isinstance(data, dict) else {}

    async def _write(self, data: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True, mode=0o700)
        fd, temp_path = tempfile.mkstemp(dir=self.path.parent, prefix=".tmp_", suffix=".json")
        os.close(fd)
        try:
            async with aiofiles.open(temp_path, "w", encoding="utf-8") as f:
                await f.write(json.dumps(data))
            await aiofiles.os.replace(temp_path, self.path)
        except Exception:
            if os.path.exists(temp_path):
                os.unlink(temp_path)
            raise

    async def get_item(self, key: str) -> str | None:
        async with self._lock:
            return (await self._read()).get(key)

    async def set_item(self, key: str, value: str) -> None:
        async with self._lock:
            data = await self._read()
            data[key] = value
            await self._write(data)

    async def remove_item(self, key: str) -> None:
        await self.multi_remove([key])

    async def multi_remove(self, keys: list[str]) -> None:
        async with self._lock:
            data = await self._read()
            removed = [k for k in keys if data.pop(k, None) is not None]
            if removed:
                await self._write(data)

    async def get_all_keys(self) -> list[str]:
        async with self._lock:
            return list(await self._read())
