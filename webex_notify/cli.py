"""Command-line entry point: send one message or list rooms."""

from __future__ import annotations

import sys
from pathlib import Path

import click
import structlog
from rich.console import Console

from .attachments import OFFICE_EXTENSIONS, load_adaptive_card
from .client import WebexClient
from .config import AppSettings, get_settings
from .errors import ConfigurationError, WebexNotifyError
from .logging_config import configure_logging
from .models import AdaptiveCard, LocalFile, OutboundMessage, RemoteFile
from .rooms import render_rooms_table


def _build_attachment(file_path: Path | None, file_url: str | None, card_path: Path | None):
    given = [name for name, value in (("-f", file_path), ("-F", file_url), ("-A", card_path)) if value]
    if len(given) > 1:
        raise ConfigurationError(f"Only one attachment can be sent; got {', '.join(given)}")

    if file_path:
        return LocalFile(path=file_path)
    if file_url:
        return RemoteFile(url=file_url)
    if card_path:
        return AdaptiveCard(content=load_adaptive_card(card_path))
    return None


def _make_client(settings: AppSettings, token: str | None) -> WebexClient:
    token = token or settings.access_token
    if not token:
        raise ConfigurationError("An access token is required (-T or WEBEX_ACCESS_TOKEN).")
    return WebexClient(token=token, base_url=settings.base_url, timeout=settings.timeout)


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.option("-T", "--token", help="Webex API access token (or WEBEX_ACCESS_TOKEN).")
@click.option("-R", "--room-id", help="Destination room id.")
@click.option("-r", "--recipient", help="Recipient email address (alternative to a room id).")
@click.option("-t", "--text", help="Message text.")
@click.option("-m", "--markdown", help="Message in markdown.")
@click.option(
    "-f",
    "--file",
    "file_path",
    type=click.Path(path_type=Path, dir_okay=False),
    help="Local file to attach.",
)
@click.option("-F", "--file-url", help="Public file URL to attach.")
@click.option(
    "-A",
    "--card",
    "card_path",
    type=click.Path(path_type=Path, dir_okay=False),
    help="Adaptive Card JSON file to attach.",
)
@click.option("-L", "--list-rooms", is_flag=True, help="List the rooms visible to the token.")
@click.option(
    "-v",
    "--verbose",
    "verbosity",
    type=click.IntRange(0, 2),
    default=0,
    show_default=True,
    help="Verbosity level.",
)
@click.option(
    "--restrict-extensions",
    is_flag=True,
    help="Only allow office documents, images and PDFs as local files.",
)
def main(
    token,
    room_id,
    recipient,
    text,
    markdown,
    file_path,
    file_url,
    card_path,
    list_rooms,
    verbosity,
    restrict_extensions,
):
    """Post a message to Webex, or list rooms with -L."""

    configure_logging(verbosity)
    log = structlog.get_logger()

    try:
        settings = get_settings()
        client = _make_client(settings, token)

        if list_rooms:
            render_rooms_table(client.list_rooms(), Console())
            return

        message = OutboundMessage.create(
            room_id=room_id,
            to_person_email=recipient,
            text=text,
            markdown=markdown,
            attachment=_build_attachment(file_path, file_url, card_path),
        )
        policy = settings.attachment_policy(
            allowed_extensions=OFFICE_EXTENSIONS if restrict_extensions else None
        )
        result = client.send_message(message, policy)
    except WebexNotifyError as exc:
        log.error("run_failed", error_type=type(exc).__name__, error=str(exc))
        raise click.ClickException(str(exc)) from exc

    click.echo(result.body)
    if not result.ok:
        sys.exit(1)


if __name__ == "__main__":
    main()  # pylint: disable=no-value-for-parameter
