#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Error kinds and result type for MineSkin requests
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from .types import MineSkinResponse


class SkinError(Enum):
    """Categorized failure reported to callers

    The value is the default English template; `args` passed alongside the
    kind fill its placeholders. Translating is up to the callback.
    """
    FORBIDDEN = "MineSkin returned error code {0}: the server refused to fetch that image"
    NOT_FOUND = "MineSkin returned error code {0}: the image could not be found"
    SERVER_TIMEOUT = "MineSkin returned error code {0}: the server timed out fetching the image"
    IMAGE_ERROR = "MineSkin returned error code {0}: {1}"
    BAD_URL = "MineSkin could not use that url"
    BAD_FILE = "MineSkin could not use that file"
    TOO_FAST = "Requests to MineSkin are being sent too fast, try again shortly"
    IMAGE_TIMEOUT = "Timed out while MineSkin was fetching the image"
    TIMEOUT = "Timed out while contacting MineSkin"
    TIMEOUT_API_KEY = "Timed out while contacting MineSkin, check that your api key is valid"
    FAIL = "Failed to contact MineSkin"

    def format(self, *args) -> str:
        """Render the default message for this kind"""
        try:
            return self.value.format(*args)
        except IndexError:
            return self.value


class InvalidUUIDError(ValueError):
    """MineSkin rejected an account UUID (HTTP 400)"""
    pass


@dataclass
class APIError:
    """Error body MineSkin sends with HTTP 500"""
    code: int
    error: str = ""

    @classmethod
    def from_json(cls, payload: dict) -> "APIError":
        """Decode an error body; a missing code reads as 0

        Raises:
            ValueError: If the body is not an object or its code is not numeric
        """
        if not isinstance(payload, dict):
            raise ValueError(f"Expected a JSON object, got {type(payload).__name__}")
        try:
            code = int(payload.get("code") or 0)
        except (TypeError, ValueError) as e:
            raise ValueError(f"Error body has no usable code: {payload!r}") from e
        return cls(code=code, error=str(payload.get("error") or ""))


@dataclass
class SkinResult:
    """Outcome of a request: a response, or an error kind with its args"""
    response: Optional[MineSkinResponse] = None
    error: Optional[SkinError] = None
    args: tuple = field(default_factory=tuple)

    @classmethod
    def success(cls, response: MineSkinResponse) -> "SkinResult":
        return cls(response=response)

    @classmethod
    def failure(cls, error: SkinError, *args) -> "SkinResult":
        return cls(error=error, args=args)

    @property
    def ok(self) -> bool:
        return self.error is None and self.response is not None

    @property
    def message(self) -> Optional[str]:
        """Default English message for the error, None on success"""
        if self.error is None:
            return None
        return self.error.format(*self.args)
