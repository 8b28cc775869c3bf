#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
MineSkin API package
Main entry point for skin generation
"""

from .api import MineSkinAPI
from .callback import LoggingSkinCallback, SkinCallback
from .errors import APIError, InvalidUUIDError, SkinError, SkinResult
from .settings import MineSkinSettings, load_settings, save_settings
from .types import MineSkinResponse, ModelType, SkinData, SkinTexture

__all__ = [
    'MineSkinAPI',
    'SkinCallback',
    'LoggingSkinCallback',
    'APIError',
    'InvalidUUIDError',
    'SkinError',
    'SkinResult',
    'MineSkinSettings',
    'load_settings',
    'save_settings',
    'MineSkinResponse',
    'ModelType',
    'SkinData',
    'SkinTexture',
]
