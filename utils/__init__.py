#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Utils Package - Utility functions and helpers

- core: Core utilities (logging, paths)
"""

# Logging is imported from utils.core.logging directly; config reaches back into paths
from utils.core.paths import get_user_data_dir, get_logs_dir

__all__ = ['get_user_data_dir', 'get_logs_dir']
