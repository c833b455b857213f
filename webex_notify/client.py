"""Thin wrapper around a ``requests`` session for the Webex REST API."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

import requests
import structlog
from pydantic import ValidationError

from .attachments import AttachmentPolicy
from .config import DEFAULT_BASE_URL
from .errors import ConfigurationError, ProtocolError, TransportError
from .models import OutboundMessage, Room, RoomsResponse
from .payloads import build_request


@dataclass(frozen=True)
class SendResult:
    """Status and raw body of a ``POST /messages`` call."""

    status_code: int
    body: str

    @property
    def ok(self) -> bool:
        return self.status_code < 400


class WebexClient:
    """Encapsulate Webex API interactions for easier testing."""

    def __init__(
        self,
        *,
        token: str | None = None,
        session: requests.Session | None = None,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float | None = None,
    ) -> None:
        if not token:
            raise ConfigurationError("An access token is required.")

        self._token = token
        self._session = session or requests.Session()
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout

    @property
    def session(self) -> requests.Session:
        """Expose the underlying session for advanced use cases."""

        return self._session

    @property
    def messages_url(self) -> str:
        return f"{self._base_url}/messages"

    @property
    def rooms_url(self) -> str:
        return f"{self._base_url}/rooms"

    def _send(self, request: requests.Request) -> requests.Response:
        try:
            prepared = self._session.prepare_request(request)
            return self._session.send(prepared, timeout=self._timeout)
        except requests.RequestException as exc:
            structlog.get_logger().error(
                "request_failed", method=request.method, url=request.url, error=str(exc)
            )
            raise TransportError(f"{request.method} {request.url} failed: {exc}") from exc

    def send_message(
        self,
        message: OutboundMessage,
        policy: AttachmentPolicy | None = None,
    ) -> SendResult:
        """Post *message* and return the raw response.

        The body is returned verbatim; the caller decides what to print.
        """

        request = build_request(
            message,
            token=self._token,
            endpoint=self.messages_url,
            policy=policy,
        )
        response = self._send(request)

        log = structlog.get_logger().bind(
            status_code=response.status_code,
            attachment=message.attachment_kind,
        )
        if response.ok:
            log.info("message_sent")
        else:
            log.warning("message_rejected")
        return SendResult(status_code=response.status_code, body=response.text)

    def list_rooms(self) -> List[Room]:
        """Fetch the rooms visible to the token, in API order."""

        request = requests.Request(
            "GET",
            self.rooms_url,
            headers={"Authorization": f"Bearer {self._token}"},
        )
        response = self._send(request)

        if not response.ok:
            raise ProtocolError(
                f"Listing rooms failed with HTTP {response.status_code}: {response.text}"
            )

        try:
            rooms = RoomsResponse.model_validate_json(response.content).items
        except ValidationError as exc:
            raise ProtocolError(f"Unexpected rooms response: {exc}") from exc

        structlog.get_logger().info("rooms_listed", count=len(rooms))
        return rooms
