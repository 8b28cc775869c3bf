#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Command line entry point for the MineSkin client
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

# Ensure the project root is in sys.path when run as a script
if not getattr(sys, 'frozen', False):
    _project_root = Path(__file__).parent.absolute()
    if str(_project_root) not in sys.path:
        sys.path.insert(0, str(_project_root))

from config import APP_VERSION, DEFAULT_VERBOSE
from mineskin import InvalidUUIDError, LoggingSkinCallback, MineSkinAPI, ModelType, load_settings
from utils.core.logging import get_logger, log_event, log_section, log_success, setup_logging

log = get_logger()


def setup_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse and return command line arguments"""
    ap = argparse.ArgumentParser(
        description="MineSkin - generate signed Minecraft skin textures"
    )

    # General arguments
    ap.add_argument("--verbose", action="store_true", default=DEFAULT_VERBOSE,
                    help="Enable verbose logging")
    ap.add_argument("--debug", action="store_true", default=False,
                    help="Log every step of the MineSkin request")
    ap.add_argument("--api-key", type=str, default=None,
                    help="MineSkin api key (overrides config.ini and MINESKIN_API_KEY)")
    ap.add_argument("--slim", action="store_true", default=False,
                    help="Use the slim (Alex) arm model")
    ap.add_argument("--version", action="version", version=f"%(prog)s {APP_VERSION}")

    sub = ap.add_subparsers(dest="source", required=True)
    url_cmd = sub.add_parser("url", help="Generate from an image url")
    url_cmd.add_argument("url")
    file_cmd = sub.add_parser("file", help="Generate from a PNG file")
    file_cmd.add_argument("path", type=Path)
    uuid_cmd = sub.add_parser("uuid", help="Generate from a Minecraft account UUID")
    uuid_cmd.add_argument("uuid")

    return ap.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = setup_arguments(argv)
    setup_logging('debug' if args.debug else 'verbose' if args.verbose else 'customer')

    settings = load_settings()
    if args.api_key:
        settings.api_key = args.api_key
    if args.debug:
        settings.debugging = True

    api = MineSkinAPI.from_settings(settings, logger=log)
    model_type = ModelType.SLIM if args.slim else ModelType.CLASSIC
    callback = LoggingSkinCallback(log)

    if args.source == "url":
        skin = api.generate_from_url(callback, args.url, model_type)
    elif args.source == "file":
        skin = api.generate_from_file(callback, args.path, model_type)
    else:
        try:
            skin = api.generate_from_uuid(args.uuid, model_type)
        except InvalidUUIDError:
            log.error(f"❌ MineSkin does not recognise the account {args.uuid}")
            return 1
        if skin is None:
            log.error("❌ Failed to contact MineSkin")

    if skin is None:
        return 1

    log_success(log, "Skin generated")
    log_section(log, "Skin Details", "🎨", {
        "Id": skin.id_str or skin.id,
        "Model": skin.model,
    })
    log_event(log, "Cooldown", "⏳", {"Next request in": f"{api.seconds_until_next_request()}s"})
    print(f"value: {skin.texture.value}")
    print(f"signature: {skin.texture.signature}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
