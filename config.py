#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Global constants for the MineSkin client
All arbitrary values are centralized here for easy tracking and modification
"""

from pathlib import Path

# =============================================================================
# APPLICATION METADATA
# =============================================================================

APP_VERSION = "1.0.0"                    # Application version
APP_USER_AGENT = "LibsDisguises"         # User-Agent header expected by MineSkin


# =============================================================================
# MINESKIN API CONSTANTS
# =============================================================================

MINESKIN_API_BASE = "https://api.mineskin.org"
MINESKIN_URL_PATH = "/generate/url"           # Generate from an image URL
MINESKIN_UPLOAD_PATH = "/generate/upload"     # Generate from an uploaded PNG
MINESKIN_USER_PATH = "/generate/user/:"       # Generate from an account UUID (uuid appended)

# Request timing
MINESKIN_CONNECT_TIMEOUT_S = 19          # Seconds before connect times out
MINESKIN_READ_TIMEOUT_S = 19             # Seconds before read times out

# Cooldown between requests
DEFAULT_NEXT_REQUEST_DELAY_S = 10        # Used when the server does not advertise a delay
NEXT_REQUEST_MARGIN_S = 1                # Added on top of every advertised delay
MAX_NEXT_REQUEST_DELAY_S = 300           # Upper bound on any advertised delay

# Status codes
MINESKIN_TIMEOUT_ERROR_CODES = (408, 504, 599)        # Error codes inside a 500 body
MINESKIN_TIMEOUT_STATUS_CODES = (524, 408, 504, 599)  # HTTP statuses treated as timeouts


# =============================================================================
# LOGGING CONSTANTS
# =============================================================================

LOG_SEPARATOR_WIDTH = 80                 # Width of separator lines in logs (e.g., "=" * 80)
LOG_TIMESTAMP_FORMAT = "%d-%m-%Y_%H-%M-%S"
DEBUG_PREFIX = "[MineSkinAPI]"           # Prefix for debug output


# =============================================================================
# SETTINGS
# =============================================================================

CONFIG_FILE_NAME = "config.ini"
CONFIG_SECTION = "MineSkin"
API_KEY_ENV_VAR = "MINESKIN_API_KEY"

DEFAULT_VERBOSE = False
DEFAULT_DEBUGGING = False


def get_config_file_path() -> Path:
    """Get the path to the config.ini file in the user data directory"""
    from utils.core.paths import get_user_data_dir

    return get_user_data_dir() / CONFIG_FILE_NAME
