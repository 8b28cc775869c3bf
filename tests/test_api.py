import logging
import threading
import time
import uuid
from unittest import mock

import pytest
import requests

from conftest import SKIN_BODY, RecordingCallback, make_response
from mineskin import InvalidUUIDError, MineSkinAPI, ModelType, SkinError


ACCOUNT_ID = uuid.UUID("069a79f4-44e9-4726-a5be-fca90e38aaf5")


def write_png(tmp_path, name="skin.png"):
    path = tmp_path / name
    path.write_bytes(b"\x89PNG\r\n\x1a\n" + b"\x00" * 32)
    return path


# ---------------------------------------------------------------------------
# Successful requests
# ---------------------------------------------------------------------------

def test_generate_from_url_returns_decoded_response(client, session, callback, sleeps):
    session.post.return_value = make_response(200, SKIN_BODY)

    skin = client.generate_from_url(callback, "https://example.com/skin.png")

    assert skin is not None
    assert skin.id == 1234
    assert skin.texture.value == SKIN_BODY["data"]["texture"]["value"]
    assert skin.texture.signature == "c2lnbmF0dXJl"
    assert skin.next_request == 5
    assert callback.errors == []
    assert sleeps == []


def test_url_request_sends_multipart_fields(client, session, callback, sleeps):
    session.post.return_value = make_response(200, SKIN_BODY)

    client.generate_from_url(callback, "https://example.com/skin.png")

    args, kwargs = session.post.call_args
    assert args[0] == "https://api.mineskin.org/generate/url"
    assert kwargs["params"] == {}
    assert kwargs["files"] == {
        "visibility": (None, "1"),
        "url": (None, "https://example.com/skin.png"),
    }
    assert kwargs["timeout"] == (19, 19)


def test_slim_model_adds_model_field(client, session, callback, sleeps):
    session.post.return_value = make_response(200, SKIN_BODY)

    client.generate_from_url(callback, "https://example.com/skin.png", ModelType.SLIM)

    files = session.post.call_args.kwargs["files"]
    assert files["model"] == (None, "slim")


def test_file_upload_sends_png_part(client, session, callback, sleeps, tmp_path):
    path = write_png(tmp_path)
    session.post.return_value = make_response(200, SKIN_BODY)

    skin = client.generate_from_file(callback, path)

    assert skin is not None
    args, kwargs = session.post.call_args
    assert args[0] == "https://api.mineskin.org/generate/upload"
    name, handle, content_type = kwargs["files"]["file"]
    assert name == "skin.png"
    assert content_type == "image/png"
    assert handle.closed
    assert "url" not in kwargs["files"]
    assert kwargs["files"]["visibility"] == (None, "1")


def test_api_key_is_sent_as_query_parameter(client, session, callback, sleeps):
    client.api_key = "secret"
    session.post.return_value = make_response(200, SKIN_BODY)

    client.generate_from_url(callback, "https://example.com/skin.png")

    assert session.post.call_args.kwargs["params"] == {"key": "secret"}


def test_user_agent_header():
    assert MineSkinAPI().session.headers["User-Agent"] == "LibsDisguises"


# ---------------------------------------------------------------------------
# Cooldown
# ---------------------------------------------------------------------------

def test_cooldown_follows_advertised_delay(client, session, callback, sleeps):
    session.post.return_value = make_response(200, SKIN_BODY)

    client.generate_from_url(callback, "https://example.com/a.png")
    assert client.seconds_until_next_request() == 6

    client.generate_from_url(callback, "https://example.com/b.png")
    assert len(sleeps) == 1
    assert 5.5 < sleeps[0] <= 6.0


def test_cooldown_defaults_to_ten_seconds_when_missing(client, session, callback, sleeps):
    body = dict(SKIN_BODY)
    del body["nextRequest"]
    session.post.return_value = make_response(200, body)

    skin = client.generate_from_url(callback, "https://example.com/a.png")

    assert skin.next_request is None
    assert client.seconds_until_next_request() == 11


def test_cooldown_defaults_after_failure(client, session, callback, sleeps):
    session.post.return_value = make_response(429)

    client.generate_from_url(callback, "https://example.com/a.png")

    assert client.seconds_until_next_request() == 11
    assert not client.is_busy()


def test_no_sleep_once_cooldown_elapsed(client, session, callback, sleeps):
    client.state.next_request_at = time.time() - 1
    session.post.return_value = make_response(200, SKIN_BODY)

    client.generate_from_url(callback, "https://example.com/a.png")

    assert sleeps == []


@pytest.mark.parametrize("next_request,expected", [
    ("1e400", 11),
    ("NaN", 11),
    ("-3", 11),
    ("1e12", 301),
])
def test_out_of_range_delay_is_bounded(client, session, callback, sleeps, next_request, expected):
    session.post.return_value = make_response(200, text=f'{{"id": 1, "nextRequest": {next_request}}}')

    skin = client.generate_from_url(callback, "https://example.com/a.png")

    assert skin is not None
    assert client.seconds_until_next_request() == expected

    client.generate_from_url(callback, "https://example.com/b.png")
    assert len(sleeps) == 1
    assert expected - 1 < sleeps[0] <= expected


# ---------------------------------------------------------------------------
# Error mapping
# ---------------------------------------------------------------------------

def test_forbidden_reported_once(client, session, callback, sleeps):
    session.post.return_value = make_response(500, {"code": 403, "error": "msg"})

    skin = client.generate_from_url(callback, "https://example.com/a.png")

    assert skin is None
    assert callback.errors == [(SkinError.FORBIDDEN, (403,))]


@pytest.mark.parametrize("code,kind", [
    (404, SkinError.NOT_FOUND),
    (408, SkinError.SERVER_TIMEOUT),
    (504, SkinError.SERVER_TIMEOUT),
    (599, SkinError.SERVER_TIMEOUT),
])
def test_server_error_codes(client, session, callback, sleeps, code, kind):
    session.post.return_value = make_response(500, {"code": code, "error": "whatever"})

    assert client.generate_from_url(callback, "https://example.com/a.png") is None
    assert callback.errors == [(kind, (code,))]


def test_other_server_error_carries_message(client, session, callback, sleeps):
    session.post.return_value = make_response(500, {"code": 500, "error": "Invalid image dimensions"})

    client.generate_from_url(callback, "https://example.com/a.png")

    assert callback.errors == [(SkinError.IMAGE_ERROR, (500, "Invalid image dimensions"))]
    assert SkinError.IMAGE_ERROR.format(500, "Invalid image dimensions").endswith("Invalid image dimensions")


def test_server_error_without_code_carries_message(client, session, callback, sleeps):
    session.post.return_value = make_response(500, {"error": "Bad image"})

    assert client.generate_from_url(callback, "https://example.com/a.png") is None
    assert callback.errors == [(SkinError.IMAGE_ERROR, (0, "Bad image"))]


def test_unparseable_server_error_is_generic_failure(client, session, callback, sleeps):
    session.post.return_value = make_response(500, text="<html>oops</html>")

    assert client.generate_from_url(callback, "https://example.com/a.png") is None
    assert callback.errors == [(SkinError.FAIL, ())]


def test_bad_request_on_url(client, session, callback, sleeps):
    session.post.return_value = make_response(400)

    client.generate_from_url(callback, "not a url")

    assert callback.errors == [(SkinError.BAD_URL, ())]


def test_bad_request_on_file(client, session, callback, sleeps, tmp_path):
    session.post.return_value = make_response(400)

    client.generate_from_file(callback, write_png(tmp_path))

    assert callback.errors == [(SkinError.BAD_FILE, ())]


def test_too_many_requests(client, session, callback, sleeps, tmp_path):
    session.post.return_value = make_response(429)

    client.generate_from_url(callback, "https://example.com/a.png")
    client.generate_from_file(callback, write_png(tmp_path))

    assert callback.errors == [(SkinError.TOO_FAST, ()), (SkinError.TOO_FAST, ())]


def test_socket_timeout_depends_on_request_type(client, session, callback, sleeps, tmp_path):
    session.post.side_effect = requests.ReadTimeout("read timed out")

    client.generate_from_url(callback, "https://example.com/a.png")
    client.generate_from_file(callback, write_png(tmp_path))

    assert callback.errors == [(SkinError.IMAGE_TIMEOUT, ()), (SkinError.TIMEOUT, ())]


@pytest.mark.parametrize("status", [524, 408, 504, 599])
def test_timeout_statuses(client, session, callback, sleeps, status):
    session.post.return_value = make_response(status)

    client.generate_from_url(callback, "https://example.com/a.png")

    assert callback.errors == [(SkinError.TIMEOUT, ())]


def test_gateway_timeout_with_api_key(client, session, callback, sleeps):
    client.api_key = "secret"
    session.post.return_value = make_response(504)

    client.generate_from_url(callback, "https://example.com/a.png")

    assert callback.errors == [(SkinError.TIMEOUT_API_KEY, ())]


def test_unexpected_failure_is_logged_and_reported(session, callback, sleeps):
    logger = mock.Mock(spec=logging.Logger)
    client = MineSkinAPI(logger=logger)
    client.session = session
    session.post.side_effect = requests.ConnectionError("refused")

    assert client.generate_from_url(callback, "https://example.com/a.png") is None

    assert callback.errors == [(SkinError.FAIL, ())]
    logger.warning.assert_called_once()
    assert logger.warning.call_args.kwargs["exc_info"] is True


def test_unexpected_status_is_generic_failure(client, session, callback, sleeps):
    session.post.return_value = make_response(403)

    client.generate_from_url(callback, "https://example.com/a.png")

    assert callback.errors == [(SkinError.FAIL, ())]


def test_missing_file_is_generic_failure(client, session, callback, sleeps, tmp_path):
    client.generate_from_file(callback, tmp_path / "missing.png")

    session.post.assert_not_called()
    assert callback.errors == [(SkinError.FAIL, ())]


def test_request_from_url_returns_result(client, session, sleeps):
    session.post.return_value = make_response(429)

    result = client.request_from_url("https://example.com/a.png")

    assert not result.ok
    assert result.response is None
    assert result.error is SkinError.TOO_FAST
    assert result.message == SkinError.TOO_FAST.value


def test_generate_without_callback(client, session, sleeps):
    session.post.return_value = make_response(429)

    assert client.generate_from_url(None, "https://example.com/a.png") is None


# ---------------------------------------------------------------------------
# By-UUID generation
# ---------------------------------------------------------------------------

def test_generate_from_uuid(client, session, sleeps):
    session.get.return_value = make_response(200, SKIN_BODY)

    skin = client.generate_from_uuid(ACCOUNT_ID)

    assert skin.id_str == "abc123"
    args, kwargs = session.get.call_args
    assert args[0] == f"https://api.mineskin.org/generate/user/:{ACCOUNT_ID}"
    assert kwargs["params"] == {}
    assert client.seconds_until_next_request() == 6


def test_generate_from_uuid_slim_with_key(client, session, sleeps):
    client.api_key = "secret"
    session.get.return_value = make_response(200, SKIN_BODY)

    client.generate_from_uuid(ACCOUNT_ID, ModelType.SLIM)

    assert session.get.call_args.kwargs["params"] == {"model": "slim", "key": "secret"}


def test_generate_from_uuid_escapes_account_id(client, session, sleeps):
    session.get.return_value = make_response(200, SKIN_BODY)

    client.generate_from_uuid("x/../y?z=1")

    assert session.get.call_args.args[0] == "https://api.mineskin.org/generate/user/:x%2F..%2Fy%3Fz%3D1"


def test_generate_from_uuid_bad_request_raises(client, session, sleeps):
    session.get.return_value = make_response(400, {"error": "invalid uuid"})

    with pytest.raises(InvalidUUIDError):
        client.generate_from_uuid(ACCOUNT_ID)

    assert not client.is_busy()
    assert client.seconds_until_next_request() == 11


@pytest.mark.parametrize("response", [
    make_response(404),
    make_response(429),
    make_response(500, {"code": 500, "error": "boom"}),
    make_response(200, text="not json"),
])
def test_generate_from_uuid_other_failures_return_none(client, session, sleeps, response):
    session.get.return_value = response

    assert client.generate_from_uuid(ACCOUNT_ID) is None


def test_generate_from_uuid_network_error_returns_none(client, session, sleeps):
    session.get.side_effect = requests.ConnectionError("refused")

    assert client.generate_from_uuid(ACCOUNT_ID) is None
    assert not client.is_busy()


# ---------------------------------------------------------------------------
# Concurrency
# ---------------------------------------------------------------------------

def test_is_busy_while_request_in_flight(client, session, callback, sleeps):
    seen = []

    def post(*args, **kwargs):
        seen.append(client.is_busy())
        return make_response(200, SKIN_BODY)

    session.post.side_effect = post

    client.generate_from_url(callback, "https://example.com/a.png")

    assert seen == [True]
    assert not client.is_busy()


def test_single_request_in_flight_under_contention(client, session, sleeps):
    guard = threading.Lock()
    in_flight = 0
    peak = 0
    pause = threading.Event()

    def post(*args, **kwargs):
        nonlocal in_flight, peak
        with guard:
            in_flight += 1
            peak = max(peak, in_flight)
        pause.wait(0.02)
        with guard:
            in_flight -= 1
        return make_response(200, SKIN_BODY)

    session.post.side_effect = post
    callbacks = [RecordingCallback() for _ in range(6)]
    threads = [
        threading.Thread(target=client.generate_from_url, args=(cb, f"https://example.com/{i}.png"))
        for i, cb in enumerate(callbacks)
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=5)

    assert session.post.call_count == 6
    assert peak == 1
    assert all(cb.errors == [] for cb in callbacks)
    # Every call after the first waited out a cooldown
    assert len(sleeps) == 5


# ---------------------------------------------------------------------------
# Debug output
# ---------------------------------------------------------------------------

def test_debug_output(client, session, callback, sleeps, caplog):
    caplog.set_level(logging.INFO, logger="mineskin")
    client.debugging = True
    client.api_key = "secret"
    session.post.return_value = make_response(200, SKIN_BODY)

    client.generate_from_url(callback, "https://example.com/a.png")

    messages = [record.getMessage() for record in caplog.records]
    assert "[MineSkinAPI] Grabbing a skin from url 'https://example.com/a.png'" in messages
    assert "[MineSkinAPI] Using a MineSkin api key!" in messages
    assert "[MineSkinAPI] Received status code: 200" in messages


def test_no_debug_output_by_default(client, session, callback, sleeps, caplog):
    caplog.set_level(logging.INFO, logger="mineskin")
    session.post.return_value = make_response(200, SKIN_BODY)

    client.generate_from_url(callback, "https://example.com/a.png")

    assert not any("[MineSkinAPI]" in record.getMessage() for record in caplog.records)
