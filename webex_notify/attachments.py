"""Attachment checks: size cap, extension allow-list, content types and cards."""

from __future__ import annotations

import json
import mimetypes
from pathlib import Path
from typing import Any, Dict, FrozenSet, Iterable

import structlog
from pydantic import BaseModel, ConfigDict, field_validator

from .errors import AttachmentError

MAX_FILE_SIZE = 100 * 1024 * 1024
DEFAULT_CONTENT_TYPE = "application/octet-stream"

OFFICE_EXTENSIONS: FrozenSet[str] = frozenset(
    {
        ".doc",
        ".docx",
        ".xls",
        ".xlsx",
        ".ppt",
        ".pptx",
        ".pdf",
        ".jpg",
        ".jpeg",
        ".png",
        ".gif",
        ".bmp",
    }
)


def normalise_extensions(values: Iterable[str]) -> FrozenSet[str]:
    """Lower-case *values* and make sure each one starts with a dot."""

    cleaned = set()
    for value in values:
        item = (value or "").strip().lower()
        if not item:
            continue
        cleaned.add(item if item.startswith(".") else f".{item}")
    return frozenset(cleaned)


class AttachmentPolicy(BaseModel):
    """Limits applied to local files before they are uploaded."""

    model_config = ConfigDict(frozen=True)

    max_file_size: int = MAX_FILE_SIZE
    allowed_extensions: FrozenSet[str] | None = None

    @field_validator("max_file_size")
    @classmethod
    def _ensure_positive(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("max_file_size must be greater than zero")
        return value

    @field_validator("allowed_extensions", mode="before")
    @classmethod
    def _normalise(cls, value):
        if value is None:
            return None
        if isinstance(value, str):
            value = value.split(",")
        return normalise_extensions(value)

    def is_allowed(self, path: Path) -> bool:
        if self.allowed_extensions is None:
            return True
        return path.suffix.lower() in self.allowed_extensions


def guess_content_type(path: Path) -> str:
    """Return the MIME type implied by the extension of *path*."""

    return mimetypes.guess_type(path.name)[0] or DEFAULT_CONTENT_TYPE


def check_local_file(path: Path, policy: AttachmentPolicy) -> int:
    """Validate *path* against *policy* and return its size in bytes.

    Only the file's metadata is used; the file itself is not opened.
    """

    log = structlog.get_logger().bind(path=str(path))

    if not policy.is_allowed(path):
        log.warning("attachment_rejected", reason="extension", extension=path.suffix)
        allowed = ", ".join(sorted(policy.allowed_extensions or ()))
        raise AttachmentError(
            f"File type '{path.suffix or path.name}' is not allowed (allowed: {allowed})"
        )

    try:
        stat = path.stat()
    except OSError as exc:
        log.warning("attachment_rejected", reason="missing")
        raise AttachmentError(f"Cannot access file {path}: {exc.strerror or exc}") from exc

    if not path.is_file():
        log.warning("attachment_rejected", reason="not_a_file")
        raise AttachmentError(f"{path} is not a regular file")

    if stat.st_size > policy.max_file_size:
        log.warning("attachment_rejected", reason="too_large", size=stat.st_size)
        raise AttachmentError(
            f"File {path} is {stat.st_size} bytes; the limit is {policy.max_file_size} bytes"
        )

    log.debug("attachment_accepted", size=stat.st_size)
    return stat.st_size


def read_local_file(path: Path) -> bytes:
    """Read the whole attachment; the handle is closed before returning."""

    try:
        with path.open("rb") as fp:
            return fp.read()
    except OSError as exc:
        raise AttachmentError(f"Cannot read file {path}: {exc.strerror or exc}") from exc


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not allowed in JSON")


def load_adaptive_card(path: Path) -> Dict[str, Any]:
    """Load an Adaptive Card definition from a JSON file."""

    try:
        with path.open("r", encoding="utf-8") as fp:
            data = json.load(fp, parse_constant=_reject_constant)
    except OSError as exc:
        raise AttachmentError(f"Cannot read card file {path}: {exc.strerror or exc}") from exc
    except ValueError as exc:
        raise AttachmentError(f"Card file {path} is not valid JSON: {exc}") from exc

    if not isinstance(data, dict):
        raise AttachmentError(f"Card file {path} must contain a JSON object")
    return data
