#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
MineSkin API client
Generates signed skin textures from image urls, uploaded files or account UUIDs
"""

import logging
import time
from contextlib import ExitStack
from pathlib import Path
from typing import Optional, Union
from urllib.parse import quote
from uuid import UUID

import requests

from config import (
    APP_USER_AGENT, DEBUG_PREFIX, DEFAULT_NEXT_REQUEST_DELAY_S,
    MINESKIN_API_BASE, MINESKIN_CONNECT_TIMEOUT_S, MINESKIN_READ_TIMEOUT_S,
    MINESKIN_TIMEOUT_ERROR_CODES, MINESKIN_TIMEOUT_STATUS_CODES,
    MINESKIN_UPLOAD_PATH, MINESKIN_URL_PATH, MINESKIN_USER_PATH,
)
from state.client_state import ClientState
from utils.core.logging import get_logger

from .callback import SkinCallback
from .errors import APIError, InvalidUUIDError, SkinError, SkinResult
from .types import MineSkinResponse, ModelType

log = get_logger()


class MineSkinAPI:
    """Rate limited client for api.mineskin.org

    At most one request is in flight per client. Each call blocks until it
    holds the lock, then sleeps out whatever remains of the cooldown the
    server advertised on the previous response.
    """

    def __init__(self, api_key: Optional[str] = None, debugging: bool = False,
                 logger: Optional[logging.Logger] = None, base_url: str = MINESKIN_API_BASE):
        """Initialize the client

        Args:
            api_key: Optional MineSkin api key, sent as the `key` query parameter
            debugging: Log every step of each request
            logger: Optional logger that receives warnings about failed requests
            base_url: API root, without trailing slash
        """
        self.state = ClientState(api_key=api_key, debugging=debugging)
        self.logger = logger
        self.base_url = base_url.rstrip('/')
        self.timeout = (MINESKIN_CONNECT_TIMEOUT_S, MINESKIN_READ_TIMEOUT_S)
        self.session = requests.Session()
        self.session.headers.update({'User-Agent': APP_USER_AGENT})

    @classmethod
    def from_settings(cls, settings, logger: Optional[logging.Logger] = None) -> "MineSkinAPI":
        """Build a client from a MineSkinSettings instance"""
        return cls(api_key=settings.api_key, debugging=settings.debugging, logger=logger)

    @property
    def api_key(self) -> Optional[str]:
        return self.state.api_key

    @api_key.setter
    def api_key(self, value: Optional[str]):
        self.state.api_key = value or None

    @property
    def debugging(self) -> bool:
        return self.state.debugging

    @debugging.setter
    def debugging(self, value: bool):
        self.state.debugging = bool(value)

    def is_busy(self) -> bool:
        """True while a request is executing"""
        return self.state.is_busy()

    def seconds_until_next_request(self) -> int:
        """Seconds (rounded up) until a new request would be sent without sleeping"""
        return self.state.seconds_until_next_request()

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------

    def generate_from_url(self, callback: Optional[SkinCallback], url: str,
                          model_type: ModelType = ModelType.CLASSIC) -> Optional[MineSkinResponse]:
        """Have MineSkin fetch the image at `url`

        Failures are reported through `callback` and return None.
        """
        return self._report(callback, self.request_from_url(url, model_type))

    def generate_from_file(self, callback: Optional[SkinCallback], path: Union[str, Path],
                           model_type: ModelType = ModelType.CLASSIC) -> Optional[MineSkinResponse]:
        """Upload the PNG at `path`

        Failures are reported through `callback` and return None.
        """
        return self._report(callback, self.request_from_file(path, model_type))

    def request_from_url(self, url: str, model_type: ModelType = ModelType.CLASSIC) -> SkinResult:
        return self._post(MINESKIN_URL_PATH, model_type, skin_url=url)

    def request_from_file(self, path: Union[str, Path], model_type: ModelType = ModelType.CLASSIC) -> SkinResult:
        return self._post(MINESKIN_UPLOAD_PATH, model_type, file_path=Path(path))

    def generate_from_uuid(self, account_id: Union[UUID, str],
                           model_type: ModelType = ModelType.CLASSIC) -> Optional[MineSkinResponse]:
        """Generate a skin from the current skin of a Minecraft account

        Returns:
            The decoded response, or None if the request failed for any
            reason other than a rejected account id

        Raises:
            InvalidUUIDError: If MineSkin answered HTTP 400
        """
        with self.state.lock:
            self._debug(f"Grabbing a skin from account {account_id}")
            self._wait_for_cooldown()

            next_request_in = DEFAULT_NEXT_REQUEST_DELAY_S
            try:
                params = {'model': ModelType.SLIM.value} if model_type == ModelType.SLIM else {}
                response = self.session.get(
                    f"{self.base_url}{MINESKIN_USER_PATH}{quote(str(account_id), safe='')}",
                    params=self._with_key(params),
                    timeout=self.timeout,
                )
                self._debug(f"Received status code: {response.status_code}")

                if response.status_code == 400:
                    raise InvalidUUIDError(f"MineSkin rejected account id {account_id}")

                response.raise_for_status()
                self._debug(f"Received: {response.text}")
                skin = MineSkinResponse.from_json(response.json())
                if skin.next_request is not None:
                    next_request_in = skin.next_request
                return skin
            except InvalidUUIDError:
                raise
            except Exception:
                self._log_failure()
                return None
            finally:
                self.state.schedule_next_request(next_request_in)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    @staticmethod
    def _report(callback: Optional[SkinCallback], result: SkinResult) -> Optional[MineSkinResponse]:
        if not result.ok and callback is not None:
            callback.on_error(result.error, *result.args)
        return result.response

    def _debug(self, message: str):
        if not self.state.debugging:
            return
        log.info(f"{DEBUG_PREFIX} {message}")

    def _log_failure(self):
        (self.logger or log).warning("Failed to access MineSkin.org", exc_info=True)

    def _with_key(self, params: dict) -> dict:
        if self.state.api_key:
            params['key'] = self.state.api_key
        return params

    def _wait_for_cooldown(self):
        """Sleep until the cooldown has elapsed. Call with the lock held."""
        sleep_time = self.state.cooldown_remaining()
        if sleep_time > 0:
            self._debug(f"Sleeping for {sleep_time * 1000:.0f}ms before calling the API due to a recent request")
            time.sleep(sleep_time)

    def _post(self, path: str, model_type: ModelType, skin_url: Optional[str] = None,
              file_path: Optional[Path] = None) -> SkinResult:
        with self.state.lock:
            if file_path is not None:
                self._debug(f"Grabbing a skin from file at {file_path}")
            elif skin_url is not None:
                self._debug(f"Grabbing a skin from url '{skin_url}'")

            if self.state.api_key:
                self._debug("Using a MineSkin api key!")

            self._wait_for_cooldown()

            next_request_in = DEFAULT_NEXT_REQUEST_DELAY_S
            try:
                response = self._send_form(path, model_type, skin_url, file_path)
                result = self._handle_form_response(response, skin_url is not None)
                if result.ok and result.response.next_request is not None:
                    next_request_in = result.response.next_request
                return result
            except requests.Timeout as e:
                self._debug(f"Request timed out: {e}")
                return SkinResult.failure(SkinError.TIMEOUT if skin_url is None else SkinError.IMAGE_TIMEOUT)
            except Exception:
                self._log_failure()
                return SkinResult.failure(SkinError.FAIL)
            finally:
                self.state.schedule_next_request(next_request_in)

    def _send_form(self, path: str, model_type: ModelType, skin_url: Optional[str],
                   file_path: Optional[Path]) -> requests.Response:
        # (None, value) tuples keep plain fields in the multipart body
        fields = {'visibility': (None, '1')}
        with ExitStack() as stack:
            if file_path is not None:
                handle = stack.enter_context(open(file_path, 'rb'))
                fields['file'] = (file_path.name, handle, 'image/png')
            elif skin_url is not None:
                fields['url'] = (None, skin_url)

            if model_type == ModelType.SLIM:
                fields['model'] = (None, ModelType.SLIM.value)

            return self.session.post(
                self.base_url + path,
                params=self._with_key({}),
                files=fields,
                timeout=self.timeout,
            )

    def _handle_form_response(self, response: requests.Response, from_url: bool) -> SkinResult:
        status = response.status_code
        self._debug(f"Received status code: {status}")

        if status == 500:
            self._debug(f"Received error: {response.text}")
            return self._map_api_error(APIError.from_json(response.json()))

        if status == 400:
            return SkinResult.failure(SkinError.BAD_URL if from_url else SkinError.BAD_FILE)

        if status == 429:
            return SkinResult.failure(SkinError.TOO_FAST)

        if status in MINESKIN_TIMEOUT_STATUS_CODES:
            if self.state.api_key and status == 504:
                return SkinResult.failure(SkinError.TIMEOUT_API_KEY)
            return SkinResult.failure(SkinError.TIMEOUT)

        response.raise_for_status()
        self._debug(f"Received: {response.text}")
        return SkinResult.success(MineSkinResponse.from_json(response.json()))

    @staticmethod
    def _map_api_error(error: APIError) -> SkinResult:
        if error.code == 403:
            return SkinResult.failure(SkinError.FORBIDDEN, error.code)
        if error.code == 404:
            return SkinResult.failure(SkinError.NOT_FOUND, error.code)
        if error.code in MINESKIN_TIMEOUT_ERROR_CODES:
            return SkinResult.failure(SkinError.SERVER_TIMEOUT, error.code)
        return SkinResult.failure(SkinError.IMAGE_ERROR, error.code, error.error)
