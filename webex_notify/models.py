"""Pydantic models for outbound messages and rooms."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Any, Dict, List, Literal, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from .errors import ConfigurationError

ROOM_ID_FIELD = "roomId"
PERSON_EMAIL_FIELD = "toPersonEmail"


class LocalFile(BaseModel):
    """A file on disk that is uploaded as part of a multipart body."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["local_file"] = "local_file"
    path: Path


class RemoteFile(BaseModel):
    """A public URL the API downloads and attaches itself."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["remote_file"] = "remote_file"
    url: str

    @field_validator("url")
    @classmethod
    def validate_url(cls, value: str) -> str:
        trimmed = value.strip()
        if not trimmed:
            raise ValueError("file URL must not be empty")
        return trimmed


class AdaptiveCard(BaseModel):
    """A parsed Adaptive Card definition."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["adaptive_card"] = "adaptive_card"
    content: Dict[str, Any]


Attachment = Annotated[Union[LocalFile, RemoteFile, AdaptiveCard], Field(discriminator="kind")]


class OutboundMessage(BaseModel):
    """One message addressed to either a room or a person."""

    room_id: str | None = None
    to_person_email: str | None = None
    text: str | None = None
    markdown: str | None = None
    attachment: Attachment | None = None

    @field_validator("room_id", "to_person_email", "text", "markdown", mode="before")
    @classmethod
    def blank_is_unset(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @model_validator(mode="after")
    def ensure_single_destination(self):
        if self.room_id is None and self.to_person_email is None:
            raise ValueError("either a room id or a recipient email is required")
        if self.room_id is not None and self.to_person_email is not None:
            raise ValueError("a room id and a recipient email cannot both be given")
        return self

    @property
    def destination(self) -> Tuple[str, str]:
        """Return the API field name and value that address this message."""

        if self.room_id is not None:
            return ROOM_ID_FIELD, self.room_id
        return PERSON_EMAIL_FIELD, self.to_person_email or ""

    @property
    def attachment_kind(self) -> str:
        return self.attachment.kind if self.attachment is not None else "none"

    @classmethod
    def create(cls, **values: Any) -> "OutboundMessage":
        """Validate *values*, reporting problems as :class:`ConfigurationError`."""

        try:
            return cls.model_validate(values)
        except ValidationError as exc:
            problems = "; ".join(_describe_error(error) for error in exc.errors())
            raise ConfigurationError(problems) from exc


def _describe_error(error: Dict[str, Any]) -> str:
    message = str(error.get("msg", "invalid value"))
    # Pydantic prefixes messages raised from validators.
    message = message.removeprefix("Value error, ")
    location = ".".join(str(part) for part in error.get("loc", ()))
    return f"{location}: {message}" if location else message


class Room(BaseModel):
    """A room visible to the access token."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str


class RoomsResponse(BaseModel):
    """Body of ``GET /rooms``; only the fields the lister needs are kept."""

    items: List[Room]
