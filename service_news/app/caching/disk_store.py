"""
File-backed disk tier for cached news.

One JSON file per cache key inside a purgeable cache directory:

    ~/.cache/PulseNewsCache/
      headlines_us_p1.json
      breaking_us.json
      article_<id>.json

Each file holds a versioned envelope with the fetch timestamp and the
serialized payload. The directory may be purged by the OS at any time,
so a missing file is an ordinary miss.
"""

import os
import re
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Any, Optional, Union

from pydantic import BaseModel, ValidationError

from shared.config import DEFAULT_CACHE_DIRNAME, default_cache_root
from shared.logging import get_logger

from .base import NewsCacheStore
from .entry import CacheEntry
from .keys import CacheKey, PayloadKind
from ..models.article import Article, article_list_adapter


DISK_CACHE_FORMAT_VERSION = 1
INVALID_KEY_FILENAME = "invalid_key.json"
DIRECTORY_MODE = 0o700

_UNSAFE_CHARS = re.compile(r"[^\w-]", re.ASCII)


class DiskCacheEnvelope(BaseModel):
    """On-disk wrapper around a cached payload."""
    version: int = DISK_CACHE_FORMAT_VERSION
    key: str
    timestamp: datetime
    payload: str


def sanitize_key(canonical: str) -> str:
    """Keep ASCII alphanumerics, '-' and '_'; replace everything else with '_'."""
    return _UNSAFE_CHARS.sub("_", canonical)


class DiskNewsCacheStore(NewsCacheStore):
    """Persistent cache tier backed by one JSON file per key.

    Every failure (missing directory, unreadable file, corrupt JSON,
    schema drift, failed write) degrades to a miss or a no-op and is
    logged; nothing is raised to the caller.
    """

    def __init__(self, directory: Optional[Union[str, Path]] = None):
        self.directory = Path(directory) if directory else default_cache_root() / DEFAULT_CACHE_DIRNAME
        self.logger = get_logger("news.cache.disk")
        self._directory_ready = False

    def get(self, key: CacheKey) -> Optional[CacheEntry[Any]]:
        path = self.file_path_for(key)

        try:
            raw = path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as exc:
            self.logger.debug("Disk cache read failed", key=key.canonical, error=str(exc))
            return None

        try:
            envelope = DiskCacheEnvelope.model_validate_json(raw)
        except ValidationError as exc:
            self.logger.debug("Discarding unreadable disk cache file", key=key.canonical, error=str(exc))
            return None

        if envelope.version != DISK_CACHE_FORMAT_VERSION or envelope.key != key.canonical:
            self.logger.debug(
                "Disk cache file does not match request",
                key=key.canonical,
                stored_key=envelope.key,
                version=envelope.version
            )
            return None

        data = self._decode_payload(key, envelope.payload)
        if data is None:
            return None
        return CacheEntry(data=data, timestamp=envelope.timestamp)

    def set(self, entry: CacheEntry[Any], key: CacheKey) -> None:
        payload = self._encode_payload(key, entry.data)
        if payload is None:
            return

        envelope = DiskCacheEnvelope(key=key.canonical, timestamp=entry.timestamp, payload=payload)
        if not self._ensure_directory():
            return

        destination = self.file_path_for(key)
        content = envelope.model_dump_json().encode("utf-8")
        try:
            try:
                self._write_atomically(destination, content)
            except FileNotFoundError:
                # Directory purged after it was created
                self._directory_ready = False
                if not self._ensure_directory():
                    return
                self.logger.debug("Disk cache directory recreated", directory=str(self.directory))
                self._write_atomically(destination, content)
        except OSError as exc:
            self.logger.warning("Disk cache write failed", key=key.canonical, error=str(exc))

    def remove(self, key: CacheKey) -> None:
        self._unlink(self.file_path_for(key))

    def remove_all(self) -> None:
        try:
            children = list(self.directory.iterdir())
        except OSError:
            return

        for child in children:
            if child.suffix in (".json", ".tmp"):
                self._unlink(child)

    def file_path_for(self, key: CacheKey) -> Path:
        """Path of the file holding ``key``, guaranteed to sit inside the cache directory."""
        candidate = self.directory / f"{sanitize_key(key.canonical)}.json"

        root = self.directory.resolve()
        if candidate.resolve().parent != root:
            self.logger.warning("Cache key resolved outside cache directory", key=key.canonical)
            return self.directory / INVALID_KEY_FILENAME
        return candidate

    def _ensure_directory(self) -> bool:
        if self._directory_ready:
            return True

        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            os.chmod(self.directory, DIRECTORY_MODE)
        except OSError as exc:
            self.logger.warning("Disk cache directory unavailable", directory=str(self.directory), error=str(exc))
            return False

        self._directory_ready = True
        return True

    def _write_atomically(self, destination: Path, content: bytes) -> None:
        """Write to a temp file beside ``destination`` and rename over it."""
        fd, temp_name = tempfile.mkstemp(dir=self.directory, prefix=f".{destination.stem}.", suffix=".tmp")
        temp_path = Path(temp_name)
        try:
            with os.fdopen(fd, "wb") as handle:
                handle.write(content)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(temp_path, destination)
        except OSError:
            self._unlink(temp_path)
            raise

    def _encode_payload(self, key: CacheKey, data: Any) -> Optional[str]:
        if key.payload_kind is PayloadKind.ARTICLE_LIST and isinstance(data, list):
            return article_list_adapter.dump_json(data).decode("utf-8")
        if key.payload_kind is PayloadKind.ARTICLE and isinstance(data, Article):
            return data.model_dump_json()

        self.logger.debug(
            "Payload shape does not match cache key",
            key=key.canonical,
            expected=key.payload_kind.value,
            actual=type(data).__name__
        )
        return None

    def _decode_payload(self, key: CacheKey, payload: str) -> Any:
        try:
            if key.payload_kind is PayloadKind.ARTICLE_LIST:
                return article_list_adapter.validate_json(payload)
            return Article.model_validate_json(payload)
        except ValidationError as exc:
            self.logger.debug("Disk cache payload failed to decode", key=key.canonical, error=str(exc))
            return None

    def _unlink(self, path: Path) -> None:
        try:
            path.unlink()
        except FileNotFoundError:
            pass
        except OSError as exc:
            self.logger.debug("Disk cache delete failed", path=str(path), error=str(exc))
