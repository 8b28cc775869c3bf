#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Client state for the MineSkin API client
Cooldown timestamp, request lock and mutable settings
"""

# Standard library imports
import math
import threading
import time
from dataclasses import dataclass, field
from typing import Optional

from config import DEFAULT_NEXT_REQUEST_DELAY_S, MAX_NEXT_REQUEST_DELAY_S, NEXT_REQUEST_MARGIN_S


@dataclass
class ClientState:
    """State owned by one MineSkinAPI instance"""
    next_request_at: float = 0.0  # Epoch seconds before which no request may start
    api_key: Optional[str] = None
    debugging: bool = False
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def is_busy(self) -> bool:
        """True while a request holds the lock"""
        return self.lock.locked()

    def seconds_until_next_request(self) -> int:
        """Whole seconds (rounded up) until the next request may start, 0 if none"""
        remaining = self.next_request_at - time.time()
        if remaining <= 0:
            return 0
        return math.ceil(remaining)

    def cooldown_remaining(self) -> float:
        """Seconds left on the cooldown as a float, 0.0 if elapsed"""
        return max(0.0, self.next_request_at - time.time())

    def schedule_next_request(self, delay_s: float):
        """Set the cooldown to `delay_s` plus the safety margin from now.

        Must be called with `lock` held. Non-finite or negative delays fall
        back to the default; large ones are capped.
        """
        if not math.isfinite(delay_s) or delay_s < 0:
            delay_s = DEFAULT_NEXT_REQUEST_DELAY_S
        delay_s = min(delay_s, MAX_NEXT_REQUEST_DELAY_S)
        self.next_request_at = time.time() + delay_s + NEXT_REQUEST_MARGIN_S
