#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Callback interface used to report failed skin requests
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional

from .errors import SkinError


class SkinCallback(ABC):
    """Receives categorized errors from MineSkinAPI.generate_* calls"""

    @abstractmethod
    def on_error(self, kind: SkinError, *args):
        """Called once when a request fails"""
        pass


class LoggingSkinCallback(SkinCallback):
    """Callback that writes the default message for each error to a logger"""

    def __init__(self, logger: logging.Logger):
        self.logger = logger
        self.last_error: Optional[SkinError] = None

    def on_error(self, kind: SkinError, *args):
        self.last_error = kind
        self.logger.error(f"❌ {kind.format(*args)}")
