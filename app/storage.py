# app/storage.py
"""
Image asset lifecycle: accept uploads, name them, write them to the
uploads directory and delete them again on request.

The directory is served verbatim under ``mount_path`` by the web layer,
so a stored file is reachable at ``<base_url><mount_path>/<name>``.
"""

from __future__ import annotations

import logging
import mimetypes
import random
import time
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Iterable, Optional
from urllib.parse import unquote, urlsplit

from .errors import NotFoundError, PayloadTooLargeError, PersistenceError, UnsupportedMediaTypeError


logger = logging.getLogger(__name__)

MAX_IMAGE_BYTES = 5 * 1024 * 1024
MOUNT_PATH = "/uploads"


@dataclass(frozen=True)
class StoredAsset:
    name: str
    url: str


class AssetManager:
    def __init__(
        self,
        directory: Path,
        mount_path: str = MOUNT_PATH,
        max_bytes: int = MAX_IMAGE_BYTES,
        public_hosts: Iterable[str] = (),
    ):
        self.directory = Path(directory)
        self.mount_path = "/" + mount_path.strip("/")
        self.max_bytes = max_bytes
        # Hosts whose ``<mount_path>/<name>`` URLs point at this directory.
        self.public_hosts = {h.lower() for h in public_hosts if h}

    def ensure_directory(self) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)

    def _generate_name(self, original_filename: str) -> str:
        suffix = PurePosixPath(original_filename or "").suffix
        return f"image-{int(time.time() * 1000)}-{random.randint(0, 10**9)}{suffix}"

    def _path_for(self, name: str) -> Optional[Path]:
        """Resolve ``name`` inside the uploads directory, or ``None`` if it escapes it."""
        if not name or name in (".", "..") or "/" in name or "\\" in name:
            return None
        return self.directory / name

    def exists(self, name: str) -> bool:
        path = self._path_for(name)
        return path is not None and path.is_file()

    def check_upload(
        self, original_filename: str, mime_type: Optional[str], size_bytes: Optional[int]
    ) -> str:
        """Reject non-images and oversized payloads; return the effective MIME type.

        ``size_bytes`` may be ``None`` when the size is not known yet.
        """
        ctype = mime_type or mimetypes.guess_type(original_filename or "")[0] or ""
        if not ctype.lower().startswith("image/"):
            raise UnsupportedMediaTypeError("Only image files are allowed!")
        if size_bytes is not None and size_bytes > self.max_bytes:
            raise PayloadTooLargeError(
                f"File too large (max {self.max_bytes // (1024 * 1024)}MB)"
            )
        return ctype

    def store(
        self,
        content: bytes,
        original_filename: str,
        mime_type: Optional[str],
        size_bytes: int,
        base_url: str,
    ) -> StoredAsset:
        """Persist an uploaded image and return its name and public URL.

        Raises
        ------
        UnsupportedMediaTypeError
            If the declared (or, failing that, guessed) type is not ``image/*``.
        PayloadTooLargeError
            If ``size_bytes`` exceeds ``max_bytes``.
        PersistenceError
            If the file cannot be written.
        """
        ctype = self.check_upload(original_filename, mime_type, size_bytes)

        self.ensure_directory()
        name = self._generate_name(original_filename)
        while (self.directory / name).exists():
            name = self._generate_name(original_filename)

        try:
            (self.directory / name).write_bytes(content)
        except OSError as exc:
            logger.error("Error writing upload %s: %s", name, exc)
            raise PersistenceError(f"Could not store {name}") from exc

        logger.info("Stored image %s (%d bytes, %s)", name, size_bytes, ctype)
        url = f"{base_url.rstrip('/')}{self.mount_path}/{name}"
        host = urlsplit(url).netloc.lower()
        if host:
            self.public_hosts.add(host)
        return StoredAsset(name=name, url=url)

    def remove(self, name: str) -> None:
        path = self._path_for(name)
        if path is None or not path.is_file():
            raise NotFoundError("Image not found")
        try:
            path.unlink()
        except FileNotFoundError as exc:
            raise NotFoundError("Image not found") from exc
        except OSError as exc:
            logger.error("Error deleting image %s: %s", name, exc)
            raise PersistenceError(f"Could not delete {name}") from exc
        logger.info("Deleted image %s", name)

    def name_from_reference(self, reference: Optional[str]) -> Optional[str]:
        """Map a listing ``image`` value to a blob name this manager owns.

        Accepts URLs on one of ``public_hosts`` and host-less paths under
        the mount path, as well as bare file names. Anything else (another
        server's ``/uploads/``, for instance) yields ``None``.
        """
        if not reference:
            return None
        parts = urlsplit(reference)
        if parts.netloc and parts.netloc.lower() not in self.public_hosts:
            return None
        path = unquote(parts.path)
        prefix = self.mount_path + "/"
        if path.startswith(prefix):
            name = path[len(prefix):]
        elif "/" not in reference:
            name = reference
        else:
            return None
        return name if self._path_for(name) is not None else None
