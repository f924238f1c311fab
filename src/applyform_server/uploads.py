"""Storage for files attached to multipart submissions.

Each upload is written under ``UPLOAD_DIR`` with a random name
``upload_<hex>.<ext>`` and referenced in the stored application as
``/uploads/<name>``.
"""

import logging
import re
import secrets
from pathlib import Path

logger = logging.getLogger(__name__)

URL_PREFIX = "/uploads/"

_NAME_RE = re.compile(r"^upload_[0-9a-f]+(\.[A-Za-z0-9]{1,10})?$")
_EXT_RE = re.compile(r"^[A-Za-z0-9]{1,10}$")


def _extension(filename: str | None) -> str:
    suffix = Path(filename or "").suffix.lstrip(".")
    return suffix.lower() if _EXT_RE.match(suffix) else ""


def save_upload(upload_dir: str | Path, filename: str | None, content: bytes) -> str:
    """Write ``content`` under a fresh random name; return its ``/uploads/`` path."""
    directory = Path(upload_dir)
    directory.mkdir(parents=True, exist_ok=True)

    ext = _extension(filename)
    name = f"upload_{secrets.token_hex(8)}" + (f".{ext}" if ext else "")
    (directory / name).write_bytes(content)
    logger.info("Stored upload %s (%d bytes, original %r)", name, len(content), filename)
    return URL_PREFIX + name


def resolve_upload(upload_dir: str | Path, name: str) -> Path:
    """Return the on-disk path of a stored upload.

    Only names produced by :func:`save_upload` are accepted, which keeps
    lookups inside ``upload_dir``.
    """
    if not _NAME_RE.match(name):
        raise ValueError(f"Upload {name!r} not found")
    path = Path(upload_dir) / name
    if not path.is_file():
        raise ValueError(f"Upload {name!r} not found")
    return path
