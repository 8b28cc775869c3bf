#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Settings Manager
Loads and saves the MineSkin api key and debug flag in config.ini
"""

import configparser
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from config import API_KEY_ENV_VAR, CONFIG_SECTION, DEFAULT_DEBUGGING, get_config_file_path
from utils.core.logging import get_logger

log = get_logger()


@dataclass
class MineSkinSettings:
    api_key: Optional[str] = None
    debugging: bool = DEFAULT_DEBUGGING


def load_settings(path: Optional[Path] = None) -> MineSkinSettings:
    """Load settings from the [MineSkin] section of config.ini

    The MINESKIN_API_KEY environment variable, when set, overrides the file.
    A missing or unreadable file yields the defaults.
    """
    config_path = Path(path) if path is not None else get_config_file_path()
    settings = MineSkinSettings()

    if config_path.exists():
        try:
            config = configparser.ConfigParser()
            config.read(config_path, encoding='utf-8')
            if CONFIG_SECTION in config:
                section = config[CONFIG_SECTION]
                settings.api_key = section.get('apiKey', fallback='').strip() or None
                settings.debugging = section.getboolean('debugging', fallback=DEFAULT_DEBUGGING)
                log.debug(f"Loaded MineSkin settings from {config_path}")
        except (configparser.Error, ValueError, OSError) as e:
            log.warning(f"Failed to read config file: {e}")
    else:
        log.debug("Config file not found, using defaults")

    env_key = os.environ.get(API_KEY_ENV_VAR, '').strip()
    if env_key:
        settings.api_key = env_key

    return settings


def save_settings(settings: MineSkinSettings, path: Optional[Path] = None) -> bool:
    """Write settings to config.ini, keeping any other sections

    Returns:
        True if the file was written
    """
    config_path = Path(path) if path is not None else get_config_file_path()
    try:
        config = configparser.ConfigParser()
        if config_path.exists():
            config.read(config_path, encoding='utf-8')

        if CONFIG_SECTION not in config:
            config.add_section(CONFIG_SECTION)

        config.set(CONFIG_SECTION, 'apiKey', settings.api_key or '')
        config.set(CONFIG_SECTION, 'debugging', 'true' if settings.debugging else 'false')

        config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(config_path, 'w', encoding='utf-8') as f:
            config.write(f)

        log.debug(f"Saved MineSkin settings to {config_path}")
        return True
    except (configparser.Error, OSError) as e:
        log.warning(f"Failed to save config file: {e}")
        return False
