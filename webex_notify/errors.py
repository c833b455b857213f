"""Error categories raised by the Webex notifier."""

from __future__ import annotations


class WebexNotifyError(Exception):
    """Base class for every fatal failure of a notifier run."""


class ConfigurationError(WebexNotifyError):
    """A required setting or flag is missing or contradicts another one."""


class AttachmentError(WebexNotifyError):
    """A local file or Adaptive Card cannot be attached."""


class TransportError(WebexNotifyError):
    """The HTTP request could not be sent or no response was received."""


class ProtocolError(WebexNotifyError):
    """The API answered with something the notifier cannot interpret."""
