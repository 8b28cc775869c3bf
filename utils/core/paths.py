#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Path utilities for the MineSkin client
Handles user data directories
"""

import os
from pathlib import Path

APP_DIR_NAME = "MineSkin"


def get_user_data_dir() -> Path:
    """
    Get the user data directory where the application can write files
    (settings, logs).
    """
    if os.name == "nt":  # Windows
        localappdata = os.environ.get("LOCALAPPDATA")
        if localappdata:
            return Path(localappdata) / APP_DIR_NAME
        userprofile = os.environ.get("USERPROFILE")
        if userprofile:
            return Path(userprofile) / "AppData" / "Local" / APP_DIR_NAME
        # Last resort: current directory
        return Path.cwd() / APP_DIR_NAME
    else:  # Linux/macOS
        xdg_data_home = os.environ.get("XDG_DATA_HOME")
        if xdg_data_home:
            return Path(xdg_data_home) / APP_DIR_NAME
        return Path.home() / ".local" / "share" / APP_DIR_NAME


def get_logs_dir() -> Path:
    """
    Get the logs directory path.
    Creates the directory if it doesn't exist.
    """
    logs_dir = get_user_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    return logs_dir
