"""Builders for the body of ``POST /messages``.

A message is sent with one of three encodings, chosen by its attachment:

* a local file goes out as ``multipart/form-data``;
* an Adaptive Card goes out as ``application/json``;
* anything else (plain text, markdown, a remote file URL) is URL-encoded.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Tuple, Union

import requests
import structlog

from .attachments import AttachmentPolicy, check_local_file, guess_content_type, read_local_file
from .models import AdaptiveCard, LocalFile, OutboundMessage, RemoteFile

ADAPTIVE_CARD_CONTENT_TYPE = "application/vnd.microsoft.card.adaptive"
FILE_FIELD = "files"


@dataclass(frozen=True)
class FilePart:
    filename: str
    content: bytes
    content_type: str


@dataclass(frozen=True)
class FormBody:
    fields: List[Tuple[str, str]]
    kind: str = field(default="form", init=False)

    def request_kwargs(self) -> Dict[str, Any]:
        return {"data": list(self.fields)}


@dataclass(frozen=True)
class MultipartBody:
    fields: List[Tuple[str, str]]
    file: FilePart
    kind: str = field(default="multipart", init=False)

    def request_kwargs(self) -> Dict[str, Any]:
        upload = (self.file.filename, self.file.content, self.file.content_type)
        return {"data": list(self.fields), "files": [(FILE_FIELD, upload)]}


@dataclass(frozen=True)
class JsonBody:
    document: Dict[str, Any]
    kind: str = field(default="json", init=False)

    def request_kwargs(self) -> Dict[str, Any]:
        return {"json": self.document}


RequestBody = Union[FormBody, MultipartBody, JsonBody]


def _form_fields(message: OutboundMessage) -> List[Tuple[str, str]]:
    """Return the non-empty text fields of *message*, destination first."""

    fields = [message.destination]
    if message.text:
        fields.append(("text", message.text))
    if message.markdown:
        fields.append(("markdown", message.markdown))
    return fields


def _form_body(message: OutboundMessage, policy: AttachmentPolicy) -> FormBody:
    fields = _form_fields(message)
    if isinstance(message.attachment, RemoteFile):
        fields.append((FILE_FIELD, message.attachment.url))
    return FormBody(fields=fields)


def _multipart_body(message: OutboundMessage, policy: AttachmentPolicy) -> MultipartBody:
    attachment = message.attachment
    if not isinstance(attachment, LocalFile):
        raise TypeError(f"multipart body needs a local file, got {message.attachment_kind}")

    path = attachment.path
    check_local_file(path, policy)
    part = FilePart(
        filename=path.name,
        content=read_local_file(path),
        content_type=guess_content_type(path),
    )
    return MultipartBody(fields=_form_fields(message), file=part)


def _card_body(message: OutboundMessage, policy: AttachmentPolicy) -> JsonBody:
    attachment = message.attachment
    if not isinstance(attachment, AdaptiveCard):
        raise TypeError(f"JSON body needs an adaptive card, got {message.attachment_kind}")

    field_name, value = message.destination
    document: Dict[str, Any] = {
        field_name: value,
        "text": message.text or "",
        "attachments": [
            {
                "contentType": ADAPTIVE_CARD_CONTENT_TYPE,
                "content": attachment.content,
            }
        ],
    }
    if message.markdown:
        document["markdown"] = message.markdown
    return JsonBody(document=document)


_BODY_BUILDERS: Dict[str, Callable[[OutboundMessage, AttachmentPolicy], RequestBody]] = {
    "none": _form_body,
    "remote_file": _form_body,
    "local_file": _multipart_body,
    "adaptive_card": _card_body,
}


def build_body(message: OutboundMessage, policy: AttachmentPolicy | None = None) -> RequestBody:
    """Encode *message* into the body type its attachment calls for.

    Local files are checked against *policy* and read before this returns,
    so an invalid attachment never reaches the network.
    """

    builder = _BODY_BUILDERS[message.attachment_kind]
    return builder(message, policy or AttachmentPolicy())


def build_request(
    message: OutboundMessage,
    *,
    token: str,
    endpoint: str,
    policy: AttachmentPolicy | None = None,
) -> requests.Request:
    """Return the unsent ``POST`` request that delivers *message*."""

    body = build_body(message, policy)
    headers = {"Authorization": f"Bearer {token}"}
    request = requests.Request("POST", endpoint, headers=headers, **body.request_kwargs())

    structlog.get_logger().debug(
        "message_request_built",
        endpoint=endpoint,
        body_kind=body.kind,
        attachment=message.attachment_kind,
    )
    return request
