import hashlib
import re
import secrets
import time
from collections.abc import Iterator
from dataclasses import dataclass
from datetime import datetime, timezone
from functools import lru_cache
from pathlib import Path, PurePosixPath
from typing import Protocol

from fastapi import HTTPException, UploadFile, status

from sortex.core.config import get_settings
from sortex.core.errors import StorageFailure

ALLOWED_CONTENT_TYPES = {
    "image/jpeg",
    "image/png",
    "image/webp",
    "image/gif",
    "image/heic",
    "image/heif",
}

CHUNK_SIZE = 1024 * 1024

SAFE_SEGMENT = re.compile(r"[A-Za-z0-9_-]{1,128}")
UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9_-]")
SAFE_EXTENSION = re.compile(r"\.[a-z0-9]{1,10}")


@dataclass(slots=True)
class IncomingFile:
    file_name: str
    content_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass(slots=True)
class StoredObject:
    key: str
    modified_at: datetime


class ObjectStore(Protocol):
    def put(self, key: str, data: bytes, content_type: str) -> str: ...

    def delete(self, key: str) -> None: ...

    def list_objects(self) -> Iterator[StoredObject]: ...


class LocalObjectStore:
    """Keeps objects on disk and hands out URLs under ``public_base_url``."""

    def __init__(self, root: str | Path, public_base_url: str) -> None:
        self.root = Path(root)
        self.public_base_url = public_base_url.rstrip("/")

    def _path_for(self, key: str) -> Path:
        relative = PurePosixPath(key)
        if relative.is_absolute() or ".." in relative.parts:
            raise ValueError(f"Invalid object key: {key}")
        return self.root.joinpath(*relative.parts)

    def put(self, key: str, data: bytes, content_type: str) -> str:
        try:
            path = self._path_for(key)
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except (OSError, ValueError) as exc:
            raise StorageFailure(f"Unable to write {key}") from exc
        return f"{self.public_base_url}/{key}"

    def delete(self, key: str) -> None:
        self._path_for(key).unlink(missing_ok=True)

    def list_objects(self) -> Iterator[StoredObject]:
        if not self.root.exists():
            return
        for path in self.root.rglob("*"):
            if not path.is_file():
                continue
            modified_at = datetime.fromtimestamp(path.stat().st_mtime, tz=timezone.utc)
            yield StoredObject(key=path.relative_to(self.root).as_posix(), modified_at=modified_at)


@lru_cache(maxsize=1)
def get_object_store() -> ObjectStore:
    settings = get_settings()
    return LocalObjectStore(settings.upload_dir, settings.public_base_url)


def owner_segment(owner_id: str) -> str:
    """A single path segment for ``owner_id`` that cannot climb or nest directories."""
    if SAFE_SEGMENT.fullmatch(owner_id):
        return owner_id
    slug = UNSAFE_CHARS.sub("_", owner_id).strip("_")[:64] or "owner"
    digest = hashlib.sha256(owner_id.encode("utf-8")).hexdigest()[:12]
    return f"{slug}-{digest}"


def build_object_key(owner_id: str, file_name: str) -> str:
    ext = PurePosixPath(file_name or "").suffix.lower()
    if not SAFE_EXTENSION.fullmatch(ext):
        ext = ""
    timestamp_ms = int(time.time() * 1000)
    return f"{owner_segment(owner_id)}/{timestamp_ms}-{secrets.token_hex(8)}{ext}"


async def read_upload_file(file: UploadFile | None) -> IncomingFile:
    if file is None or not file.filename:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="missing_file")
    content_type = (file.content_type or "").lower()
    if content_type not in ALLOWED_CONTENT_TYPES:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="unsupported_file_type")

    max_bytes = get_settings().max_upload_size_mb * 1024 * 1024
    chunks: list[bytes] = []
    total = 0
    try:
        while True:
            chunk = await file.read(CHUNK_SIZE)
            if not chunk:
                break
            total += len(chunk)
            if total > max_bytes:
                raise HTTPException(status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, detail="file_too_large")
            chunks.append(chunk)
    finally:
        await file.close()

    if total == 0:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="empty_file")
    return IncomingFile(file_name=file.filename, content_type=content_type, data=b"".join(chunks))
