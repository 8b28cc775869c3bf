import json
from unittest import mock

import pytest
import requests

from mineskin import MineSkinAPI, SkinCallback
from mineskin import api as api_module


SKIN_BODY = {
    "id": 1234,
    "idStr": "abc123",
    "uuid": "9f1c0b5e2d7a4f63a0b1c2d3e4f5a6b7",
    "name": "",
    "model": "steve",
    "data": {
        "uuid": "0b3a2f1e4d5c4b6a8e9f0a1b2c3d4e5f",
        "texture": {
            "value": "ZXlKMFpYaDBkWEpsY3lJNmUzMTk=",
            "signature": "c2lnbmF0dXJl",
            "url": "https://textures.minecraft.net/texture/abcdef",
            "urls": {"skin": "https://textures.minecraft.net/texture/abcdef"},
        },
    },
    "date": 1577836800,
    "account": 7,
    "server": "test",
    "private": False,
    "views": 1,
    "duplicate": False,
    "nextRequest": 5,
}


def make_response(status_code, body=None, text=None):
    """Build a real requests.Response with the given status and body"""
    response = requests.Response()
    response.status_code = status_code
    if text is None:
        text = json.dumps(body) if body is not None else ""
    response._content = text.encode("utf-8")
    response.encoding = "utf-8"
    response.headers["Content-Type"] = "application/json"
    response.url = "https://api.mineskin.org/test"
    return response


class RecordingCallback(SkinCallback):
    def __init__(self):
        self.errors = []

    def on_error(self, kind, *args):
        self.errors.append((kind, args))


@pytest.fixture
def sleeps(monkeypatch):
    """Capture cooldown sleeps instead of waiting"""
    recorded = []
    monkeypatch.setattr(api_module.time, "sleep", recorded.append)
    return recorded


@pytest.fixture
def session():
    return mock.Mock(spec=requests.Session)


@pytest.fixture
def client(session):
    api = MineSkinAPI()
    api.session = session
    return api


@pytest.fixture
def callback():
    return RecordingCallback()
