"""Pydantic-based configuration helpers for the Webex notifier."""

from __future__ import annotations

import os
from functools import lru_cache
from typing import Iterable, List

from pydantic import BaseModel, Field, ValidationError, field_validator

from .attachments import MAX_FILE_SIZE, AttachmentPolicy, normalise_extensions
from .errors import ConfigurationError

DEFAULT_BASE_URL = "https://webexapis.com/v1"


class AppSettings(BaseModel):
    """Settings that can be supplied through the environment."""

    access_token: str | None = Field(None, alias="WEBEX_ACCESS_TOKEN")
    base_url: str = Field(DEFAULT_BASE_URL, alias="WEBEX_API_URL")
    timeout: float | None = Field(None, alias="WEBEX_TIMEOUT")
    max_file_size: int = Field(MAX_FILE_SIZE, alias="WEBEX_MAX_FILE_SIZE")
    allowed_extensions: List[str] = Field(default_factory=list, alias="WEBEX_ALLOWED_EXTENSIONS")

    @field_validator("access_token", "timeout", mode="before")
    @classmethod
    def _blank_is_unset(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("base_url")
    @classmethod
    def _validate_base_url(cls, value: str) -> str:
        value = value.strip().rstrip("/")
        if not value:
            raise ValueError("API base URL must not be empty")
        if not value.lower().startswith(("https://", "http://")):
            raise ValueError("API base URL must start with http:// or https://")
        return value

    @field_validator("allowed_extensions", mode="before")
    @classmethod
    def _split_extensions(cls, value: str | list[str]) -> list[str]:
        if isinstance(value, str):
            value = value.split(",")
        return sorted(normalise_extensions(value))

    @field_validator("timeout")
    @classmethod
    def _ensure_positive_timeout(cls, value: float | None) -> float | None:
        if value is not None and value <= 0:
            raise ValueError("Timeout must be greater than zero")
        return value

    @field_validator("max_file_size")
    @classmethod
    def _ensure_positive_size(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("Maximum file size must be greater than zero")
        return value

    def attachment_policy(self, *, allowed_extensions: Iterable[str] | None = None) -> AttachmentPolicy:
        """Build the policy for local attachments.

        *allowed_extensions* overrides the environment allow-list when given.
        """

        extensions = allowed_extensions if allowed_extensions is not None else self.allowed_extensions
        return AttachmentPolicy(
            max_file_size=self.max_file_size,
            allowed_extensions=list(extensions) or None,
        )


def _format_invalid(fields: Iterable[str]) -> str:
    """Return a human-friendly comma-separated list of env vars."""

    unique: List[str] = []
    for field in fields:
        if field not in unique:
            unique.append(field)
    return ", ".join(unique)


@lru_cache()
def get_settings() -> AppSettings:
    """Fetch and cache settings from environment variables."""

    try:
        return AppSettings.model_validate(os.environ)
    except ValidationError as exc:
        invalid = [str(error["loc"][0]) for error in exc.errors()]
        raise ConfigurationError(
            f"Invalid environment variables: {_format_invalid(invalid)}"
        ) from exc
