# backend/utils/storage.py
"""Object storage for uploaded documentation.

Objects live in a single bucket directory (``STORAGE_DIR/STORAGE_BUCKET``)
addressed by slash-separated keys such as ``docs/sop_document-3-1700000000000.pdf``.
The bucket is mounted read-only by ``main.py`` so every key has a public URL;
short-lived signed URLs are issued for employee documentation photos.
"""
import logging
import shutil
from datetime import datetime, timedelta, timezone
from pathlib import Path, PurePosixPath
from typing import BinaryIO, Iterable, List, Optional
from urllib.parse import urljoin, urlparse

from jose import jwt, JWTError

from config import settings

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Raised when an object cannot be stored, found or removed."""


def bucket_root() -> Path:
    root = Path(settings.STORAGE_DIR) / settings.STORAGE_BUCKET
    root.mkdir(parents=True, exist_ok=True)
    return root


def _resolve(key: str) -> Path:
    key = (key or "").strip().lstrip("/")
    parts = PurePosixPath(key).parts
    if not parts or any(p in ("..", ".") for p in parts):
        raise StorageError(f"Invalid storage path: {key!r}")
    return bucket_root().joinpath(*parts)


def upload_object(key: str, fileobj: BinaryIO, upsert: bool = False) -> None:
    target = _resolve(key)
    if target.exists() and not upsert:
        raise StorageError(f"Object already exists: {key}")
    target.parent.mkdir(parents=True, exist_ok=True)
    try:
        with open(target, "wb") as buffer:
            shutil.copyfileobj(fileobj, buffer)
    except OSError as e:
        target.unlink(missing_ok=True)
        logger.error(f"Storage upload error for {key}: {e}")
        raise StorageError(f"Failed to upload file: {e}") from e
    logger.info("Stored object %s", key)


def object_exists(key: str) -> bool:
    try:
        return _resolve(key).is_file()
    except StorageError:
        return False


def local_path(key: str) -> Path:
    """Filesystem path of an existing object (used for downloads)."""
    target = _resolve(key)
    if not target.is_file():
        raise StorageError(f"Object not found: {key}")
    return target


def remove_objects(keys: Iterable[str]) -> None:
    # Missing keys are skipped, like a bucket delete
    for key in keys:
        target = _resolve(key)
        try:
            target.unlink()
            logger.info("Removed object %s", key)
        except FileNotFoundError:
            continue
        except OSError as e:
            logger.error(f"Storage delete error for {key}: {e}")
            raise StorageError(f"Failed to delete file from storage: {e}") from e


def list_objects(folder: str, search: Optional[str] = None) -> List[str]:
    """Object names directly inside ``folder`` optionally filtered by prefix."""
    directory = _resolve(folder)
    if not directory.is_dir():
        return []
    names = sorted(p.name for p in directory.iterdir() if p.is_file())
    if search:
        names = [n for n in names if n.startswith(search)]
    return names


def public_url(base_url: str, key: str) -> str:
    return urljoin(base_url, f"storage/{settings.STORAGE_BUCKET}/{key.lstrip('/')}")


def key_from_url(file_url: str) -> str:
    """Recover ``folder/name`` from a public URL, or return a bare key unchanged."""
    if not file_url.startswith("http"):
        return file_url.lstrip("/")
    parts = [p for p in urlparse(file_url).path.split("/") if p]
    return "/".join(parts[-2:])


# -----------------------------
# Signed URLs
# -----------------------------
def create_signed_url(base_url: str, key: str, expires_in: Optional[int] = None) -> str:
    seconds = expires_in or settings.SIGNED_URL_EXPIRE_SECONDS
    payload = {
        "path": key,
        "type": "storage",
        "exp": datetime.now(timezone.utc) + timedelta(seconds=seconds),
    }
    token = jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)
    return urljoin(base_url, f"storage/signed/{token}")


def resolve_signed_token(token: str) -> str:
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError as e:
        raise StorageError("Signed URL is invalid or expired") from e
    if payload.get("type") != "storage" or not payload.get("path"):
        raise StorageError("Signed URL is invalid or expired")
    return payload["path"]
