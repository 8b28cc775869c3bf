#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Type definitions for MineSkin API responses
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, TypedDict

from config import MAX_NEXT_REQUEST_DELAY_S


def _parse_delay(value) -> Optional[float]:
    """Advertised delay in seconds, capped at MAX_NEXT_REQUEST_DELAY_S.

    Unparseable, negative and non-finite values read as None.
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        delay = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(delay) or delay < 0:
        return None
    return min(delay, MAX_NEXT_REQUEST_DELAY_S)


class ModelType(Enum):
    """Skin model variant"""
    CLASSIC = "steve"  # 4px arms
    SLIM = "slim"      # 3px arms (Alex)


class TextureUrlsPayload(TypedDict, total=False):
    skin: str
    cape: str


class TexturePayload(TypedDict, total=False):
    """Signed texture property as returned by MineSkin"""
    value: str
    signature: str
    url: str
    urls: TextureUrlsPayload


class SkinDataPayload(TypedDict, total=False):
    uuid: str
    texture: TexturePayload


@dataclass
class SkinTexture:
    """Signed texture property usable in a game profile"""
    value: Optional[str] = None
    signature: Optional[str] = None
    url: Optional[str] = None
    skin_url: Optional[str] = None
    cape_url: Optional[str] = None

    @classmethod
    def from_json(cls, payload: Optional[TexturePayload]) -> "SkinTexture":
        payload = payload or {}
        urls = payload.get("urls") or {}
        return cls(
            value=payload.get("value"),
            signature=payload.get("signature"),
            url=payload.get("url"),
            skin_url=urls.get("skin"),
            cape_url=urls.get("cape"),
        )


@dataclass
class SkinData:
    uuid: Optional[str] = None
    texture: SkinTexture = field(default_factory=SkinTexture)

    @classmethod
    def from_json(cls, payload: Optional[SkinDataPayload]) -> "SkinData":
        payload = payload or {}
        return cls(uuid=payload.get("uuid"), texture=SkinTexture.from_json(payload.get("texture")))


@dataclass
class MineSkinResponse:
    """Decoded body of a successful generate call

    `next_request` is the server-advised delay in seconds before the next
    call, or None when the body did not include one.
    """
    id: Optional[int] = None
    id_str: Optional[str] = None
    uuid: Optional[str] = None
    name: Optional[str] = None
    model: Optional[str] = None
    data: SkinData = field(default_factory=SkinData)
    date: Optional[int] = None
    account: Optional[int] = None
    server: Optional[str] = None
    private: Optional[bool] = None
    views: Optional[int] = None
    duplicate: Optional[bool] = None
    next_request: Optional[float] = None
    raw: dict = field(default_factory=dict, repr=False)

    @classmethod
    def from_json(cls, payload: dict) -> "MineSkinResponse":
        """Build a response from a decoded JSON object

        Raises:
            ValueError: If the payload is not a JSON object
        """
        if not isinstance(payload, dict):
            raise ValueError(f"Expected a JSON object, got {type(payload).__name__}")

        return cls(
            id=payload.get("id"),
            id_str=payload.get("idStr"),
            uuid=payload.get("uuid"),
            name=payload.get("name"),
            model=payload.get("model"),
            data=SkinData.from_json(payload.get("data")),
            date=payload.get("date"),
            account=payload.get("account"),
            server=payload.get("server"),
            private=payload.get("private"),
            views=payload.get("views"),
            duplicate=payload.get("duplicate"),
            next_request=_parse_delay(payload.get("nextRequest")),
            raw=payload,
        )

    @property
    def texture(self) -> SkinTexture:
        return self.data.texture
