"""Webex notifier package initialisation."""

from .attachments import OFFICE_EXTENSIONS, AttachmentPolicy  # noqa: F401
from .client import SendResult, WebexClient  # noqa: F401
from .config import AppSettings, get_settings  # noqa: F401
from .errors import (  # noqa: F401
    AttachmentError,
    ConfigurationError,
    ProtocolError,
    TransportError,
    WebexNotifyError,
)
from .logging_config import configure_logging  # noqa: F401
from .models import AdaptiveCard, LocalFile, OutboundMessage, RemoteFile, Room  # noqa: F401
from .payloads import build_body, build_request  # noqa: F401
from .rooms import render_rooms_table, sort_rooms  # noqa: F401

__all__ = [
    "AdaptiveCard",
    "AppSettings",
    "AttachmentError",
    "AttachmentPolicy",
    "ConfigurationError",
    "LocalFile",
    "OFFICE_EXTENSIONS",
    "OutboundMessage",
    "ProtocolError",
    "RemoteFile",
    "Room",
    "SendResult",
    "TransportError",
    "WebexClient",
    "WebexNotifyError",
    "build_body",
    "build_request",
    "configure_logging",
    "get_settings",
    "render_rooms_table",
    "sort_rooms",
]
