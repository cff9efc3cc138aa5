"""Storage of raw uploaded PDFs."""

from __future__ import annotations

import logging
import random
import re
import time
from dataclasses import dataclass
from pathlib import Path

LOGGER = logging.getLogger(__name__)

_UNSAFE_NAME_RE = re.compile(r"[^A-Za-z0-9._-]+")


@dataclass(slots=True)
class StoredUpload:
    filename: str
    original_name: str
    size: int
    path: Path


def _safe_name(name: str) -> str:
    base = Path(name or "upload.pdf").name
    cleaned = _UNSAFE_NAME_RE.sub("_", base).strip("._")
    return cleaned or "upload.pdf"


def save_upload(upload_dir: Path, original_name: str, data: bytes) -> StoredUpload:
    """Write ``data`` under ``upload_dir`` with a unique, timestamped name."""

    upload_dir.mkdir(parents=True, exist_ok=True)
    unique_suffix = f"{int(time.time() * 1000)}-{random.randint(0, 10**9)}"
    filename = f"{unique_suffix}-{_safe_name(original_name)}"
    path = upload_dir / filename
    path.write_bytes(data)
    LOGGER.info("Stored upload %s (%d bytes)", path, len(data))
    return StoredUpload(
        filename=filename,
        original_name=original_name,
        size=len(data),
        path=path,
    )


__all__ = ["StoredUpload", "save_upload"]
