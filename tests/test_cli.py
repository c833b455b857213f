"""Tests for the ``notify-by-webex`` command."""

from __future__ import annotations

import json
from urllib.parse import parse_qs

import pytest
import requests
from click.testing import CliRunner

from webex_notify import cli
from webex_notify.client import WebexClient


def make_response(status_code: int = 200, body: bytes = b"{}") -> requests.Response:
    response = requests.Response()
    response.status_code = status_code
    response._content = body
    response.encoding = "utf-8"
    return response


class RecordingSession(requests.Session):
    def __init__(self, response: requests.Response):
        super().__init__()
        self.response = response
        self.sent = []

    def send(self, request, **kwargs):
        self.sent.append(request)
        return self.response


@pytest.fixture
def session(monkeypatch):
    recording = RecordingSession(make_response(200, b'{"id": "M1"}'))

    def client_factory(**kwargs):
        return WebexClient(session=recording, **kwargs)

    monkeypatch.setattr(cli, "WebexClient", client_factory)
    return recording


def invoke(*args: str):
    return CliRunner().invoke(cli.main, list(args))


def test_missing_token_fails(session):
    result = invoke("-R", "R1", "-t", "hi")

    assert result.exit_code == 1
    assert "access token is required" in result.output
    assert session.sent == []


def test_token_can_come_from_environment(session, monkeypatch):
    monkeypatch.setenv("WEBEX_ACCESS_TOKEN", "env-token")

    result = invoke("-R", "R1", "-t", "hi")

    assert result.exit_code == 0
    assert session.sent[0].headers["Authorization"] == "Bearer env-token"


def test_missing_destination_fails_before_sending(session):
    result = invoke("-T", "secret", "-t", "hi")

    assert result.exit_code == 1
    assert "room id or a recipient email" in result.output
    assert session.sent == []


def test_send_prints_raw_response(session):
    result = invoke("-T", "secret", "-R", "R1", "-t", "hi")

    assert result.exit_code == 0
    assert '{"id": "M1"}' in result.output
    (request,) = session.sent
    assert parse_qs(request.body) == {"roomId": ["R1"], "text": ["hi"]}


def test_http_error_prints_body_and_exits_non_zero(session):
    session.response = make_response(404, b'{"message": "Room not found"}')

    result = invoke("-T", "secret", "-r", "someone@example.com", "-m", "*hi*")

    assert result.exit_code == 1
    assert "Room not found" in result.output


def test_oversized_file_is_rejected(session, tmp_path, monkeypatch):
    monkeypatch.setenv("WEBEX_MAX_FILE_SIZE", "4")
    path = tmp_path / "big.pdf"
    path.write_bytes(b"12345")

    result = invoke("-T", "secret", "-R", "R1", "-f", str(path))

    assert result.exit_code == 1
    assert "limit is 4 bytes" in result.output
    assert session.sent == []


def test_restrict_extensions_rejects_scripts(session, tmp_path):
    path = tmp_path / "run.sh"
    path.write_text("echo hi")

    result = invoke("-T", "secret", "-R", "R1", "--restrict-extensions", "-f", str(path))

    assert result.exit_code == 1
    assert "not allowed" in result.output
    assert session.sent == []


def test_local_file_is_uploaded(session, tmp_path):
    path = tmp_path / "photo.png"
    path.write_bytes(b"\x89PNG")

    result = invoke("-T", "secret", "-R", "R1", "-t", "pic", "-f", str(path))

    assert result.exit_code == 0
    (request,) = session.sent
    assert request.headers["Content-Type"].startswith("multipart/form-data")
    assert b'filename="photo.png"' in request.body


def test_adaptive_card_is_sent_as_json(session, tmp_path):
    card = {"type": "AdaptiveCard", "version": "1.2", "body": [{"type": "TextBlock", "text": "Hi"}]}
    path = tmp_path / "card.json"
    path.write_text(json.dumps(card), encoding="utf-8")

    result = invoke("-T", "secret", "-R", "R1", "-t", 'say "hi"', "-A", str(path))

    assert result.exit_code == 0
    (request,) = session.sent
    document = json.loads(request.body)
    assert document["text"] == 'say "hi"'
    assert document["attachments"][0]["content"] == card


def test_conflicting_attachments_are_rejected(session, tmp_path):
    path = tmp_path / "card.json"
    path.write_text("{}", encoding="utf-8")

    result = invoke("-T", "secret", "-R", "R1", "-F", "https://example.com/a.png", "-A", str(path))

    assert result.exit_code == 1
    assert "Only one attachment" in result.output
    assert session.sent == []


def test_list_rooms_prints_sorted_table(session):
    payload = {"items": [{"id": "id-b", "title": "Beta"}, {"id": "id-a", "title": "Alpha"}]}
    session.response = make_response(200, json.dumps(payload).encode())

    result = invoke("-T", "secret", "-L")

    assert result.exit_code == 0
    assert "Title" in result.output
    assert result.output.index("Alpha") < result.output.index("Beta")
    assert session.sent[0].method == "GET"


def test_list_rooms_malformed_json_fails(session):
    session.response = make_response(200, b"not json")

    result = invoke("-T", "secret", "-L", "-v", "2")

    assert result.exit_code == 1
    assert "Unexpected rooms response" in result.output


def test_verbosity_is_bounded(session):
    result = invoke("-T", "secret", "-L", "-v", "5")

    assert result.exit_code == 2
    assert session.sent == []


def test_base_url_without_scheme_is_a_configuration_error(session, monkeypatch):
    monkeypatch.setenv("WEBEX_API_URL", "webexapis.com/v1")

    result = invoke("-T", "secret", "-R", "R1", "-t", "hi")

    assert result.exit_code == 1
    assert "Error:" in result.output
    assert "WEBEX_API_URL" in result.output
    assert session.sent == []


def test_card_with_non_finite_number_is_rejected(session, tmp_path):
    path = tmp_path / "card.json"
    path.write_text('{"type": "AdaptiveCard", "x": NaN}', encoding="utf-8")

    result = invoke("-T", "secret", "-R", "R1", "-A", str(path))

    assert result.exit_code == 1
    assert "Error:" in result.output
    assert "not valid JSON" in result.output
    assert session.sent == []
