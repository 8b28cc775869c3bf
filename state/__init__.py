#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
State Package
Per-client state for the MineSkin API client
"""

from .client_state import ClientState

__all__ = [
    'ClientState',
]
