"""
Blob storage for uploaded binary assets (voice notes, images).

Files live on local disk under settings.blob_dir and are served back by the
/blobs route, so every stored path has a stable public URL. Uploading to an
existing path overwrites it; there is no versioning or deduplication.

Disk I/O is blocking; we run it in a thread pool to keep the event loop free.
"""

import asyncio
import logging
import mimetypes
from datetime import datetime, timezone
from pathlib import Path, PurePosixPath
from typing import Callable, List, Optional, Sequence, Tuple
from urllib.parse import quote

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[float], None]

# Bytes written per step when a progress callback is given
UPLOAD_CHUNK_SIZE = 256 * 1024

_CONTENT_TYPE_SUFFIX = ".content-type"


class BlobInfo(BaseModel):
    """What the store reports about one stored blob."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: str
    full_path: str
    url: str
    size: int
    content_type: Optional[str] = None
    time_created: datetime
    updated: datetime


def normalize_path(path: str) -> str:
    """
    Normalize a caller-chosen blob path to "a/b/c.ext".
    Absolute paths and ".." segments are rejected so a path never leaves the root.
    """
    if not path or not path.strip("/ "):
        raise ValueError("Blob path must not be empty")
    if path.startswith("/") or "\\" in path:
        raise ValueError(f"Invalid blob path: {path}")
    parts = [p for p in PurePosixPath(path).parts if p not in ("", ".")]
    if any(p == ".." for p in parts):
        raise ValueError(f"Invalid blob path: {path}")
    return "/".join(parts)


class BlobStore:
    """Local-disk blob store returning URLs under {public_base_url}/blobs/."""

    def __init__(self, root: str | Path, public_base_url: str):
        self.root = Path(root)
        self.public_base_url = public_base_url.rstrip("/")

    def _file(self, path: str) -> Path:
        return self.root / normalize_path(path)

    def _type_file(self, file_path: Path) -> Path:
        return file_path.with_name(file_path.name + _CONTENT_TYPE_SUFFIX)

    def get_url(self, path: str) -> str:
        return f"{self.public_base_url}/blobs/{quote(normalize_path(path))}"

    def _write(self, file_path: Path, data: bytes, content_type: Optional[str], on_progress: Optional[ProgressCallback]) -> None:
        file_path.parent.mkdir(parents=True, exist_ok=True)
        if on_progress is None:
            file_path.write_bytes(data)
        else:
            total = len(data)
            with file_path.open("wb") as fh:
                if total == 0:
                    on_progress(100.0)
                for start in range(0, total, UPLOAD_CHUNK_SIZE):
                    chunk = data[start:start + UPLOAD_CHUNK_SIZE]
                    fh.write(chunk)
                    on_progress(min(start + len(chunk), total) / total * 100)
        type_file = self._type_file(file_path)
        if content_type:
            type_file.write_text(content_type, encoding="utf-8")
        elif type_file.exists():
            type_file.unlink()

    async def upload(
        self,
        path: str,
        data: bytes,
        content_type: Optional[str] = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> str:
        """
        Store data at path and return its URL.
        With on_progress, the file is written in chunks and the callback gets
        the transferred percentage (0-100) after each one.
        """
        file_path = self._file(path)
        await asyncio.to_thread(self._write, file_path, data, content_type, on_progress)
        logger.info("Stored blob %s (%d bytes)", normalize_path(path), len(data))
        return self.get_url(path)

    async def upload_many(
        self,
        files: Sequence[Tuple[str, bytes]],
        on_progress: Optional[Callable[[int, float], None]] = None,
    ) -> List[str]:
        """Upload several blobs concurrently; progress is reported per file index."""

        def progress_for(index: int) -> Optional[ProgressCallback]:
            if on_progress is None:
                return None
            return lambda pct: on_progress(index, pct)

        return list(
            await asyncio.gather(
                *(self.upload(path, data, on_progress=progress_for(i)) for i, (path, data) in enumerate(files))
            )
        )

    def _content_type(self, file_path: Path) -> Optional[str]:
        type_file = self._type_file(file_path)
        if type_file.exists():
            return type_file.read_text(encoding="utf-8").strip() or None
        return mimetypes.guess_type(file_path.name)[0]

    def _info(self, file_path: Path) -> BlobInfo:
        stat = file_path.stat()
        rel = file_path.relative_to(self.root).as_posix()
        return BlobInfo(
            name=file_path.name,
            full_path=rel,
            url=self.get_url(rel),
            size=stat.st_size,
            content_type=self._content_type(file_path),
            time_created=datetime.fromtimestamp(stat.st_ctime, tz=timezone.utc),
            updated=datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc),
        )

    async def metadata(self, path: str) -> BlobInfo:
        file_path = self._file(path)
        if not file_path.is_file():
            raise FileNotFoundError(f"Blob not found: {path}")
        return await asyncio.to_thread(self._info, file_path)

    async def read(self, path: str) -> Tuple[bytes, Optional[str]]:
        file_path = self._file(path)
        if not file_path.is_file():
            raise FileNotFoundError(f"Blob not found: {path}")
        data = await asyncio.to_thread(file_path.read_bytes)
        return data, self._content_type(file_path)

    async def delete(self, path: str) -> None:
        file_path = self._file(path)
        if not file_path.is_file():
            raise FileNotFoundError(f"Blob not found: {path}")
        file_path.unlink()
        type_file = self._type_file(file_path)
        if type_file.exists():
            type_file.unlink()
        logger.info("Deleted blob %s", normalize_path(path))

    async def delete_many(self, paths: Sequence[str]) -> None:
        await asyncio.gather(*(self.delete(p) for p in paths))

    def _list(self, prefix: str) -> List[BlobInfo]:
        directory = self.root / normalize_path(prefix)
        if not directory.is_dir():
            return []
        return [
            self._info(p)
            for p in sorted(directory.iterdir())
            if p.is_file() and not p.name.endswith(_CONTENT_TYPE_SUFFIX)
        ]

    async def list(self, prefix: str) -> List[BlobInfo]:
        """List the blobs directly under a directory-like prefix."""
        return await asyncio.to_thread(self._list, prefix)
