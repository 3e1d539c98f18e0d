#!/usr/bin/env python
import argparse
import asyncio
import logging
import logging.handlers
import signal
import sys
from pathlib import Path
from typing import List, Optional, Tuple

from ring_to_tv.bridge_app import RingToTvApp
from ring_to_tv.exceptions import BridgeError
from ring_to_tv.utils.config import Config, load_config, load_refresh_token
from ring_to_tv.utils.paths import get_shared_data_path

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s:%(funcName)s:%(lineno)d - %(message)s"

logger = logging.getLogger(__name__)


def configure_logging(config: Optional[Config] = None):
    """Configure root logging, adding a rotating log file when one is configured."""
    level = config.logging.level.upper() if config else "INFO"
    handlers: List[logging.Handler] = [logging.StreamHandler()]

    if config and config.logging.log_file:
        log_path = config.resolve_path(config.logging.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            logging.handlers.RotatingFileHandler(
                log_path,
                maxBytes=config.logging.max_log_size,
                backupCount=config.logging.backup_count,
            )
        )

    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=handlers, force=True)
    logging.getLogger("httpx").setLevel(logging.WARNING)


def parse_camera_pair(value: str) -> Tuple[int, int]:
    """Parse a 'location,camera' index pair such as '0,1'."""
    try:
        location_index, camera_index = (int(part) for part in value.split(","))
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"expected LOCATION,CAMERA indices such as 0,1 - got {value!r}"
        )
    if location_index < 0 or camera_index < 0:
        raise argparse.ArgumentTypeError("indices must not be negative")
    return location_index, camera_index


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ring-to-tv",
        description="Show Ring camera events with snapshots as PiPup popups on an Android TV",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to config.ini (default: shared_data/config.ini)",
    )
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "--test",
        nargs="?",
        const=(0, 0),
        type=parse_camera_pair,
        metavar="LOCATION,CAMERA",
        help="Send one snapshot from the given camera (default 0,0) and exit",
    )
    mode.add_argument(
        "--list",
        action="store_true",
        help="List locations and cameras with their indices and exit",
    )
    return parser


def _install_signal_handlers(app: RingToTvApp):
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, app.request_shutdown)
        except (NotImplementedError, RuntimeError):
            # Windows event loops don't support signal handlers; KeyboardInterrupt still works
            pass


async def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the application."""
    args = build_parser().parse_args(argv)
    config_path = args.config or get_shared_data_path() / "config.ini"

    try:
        config = load_config(config_path)
        configure_logging(config)
        token = load_refresh_token(config)
    except BridgeError as e:
        logger.error(f"Failed to load configuration: {e}")
        return 1

    app = RingToTvApp(config, token)

    try:
        if args.list:
            await app.session.authenticate()
            for line in await app.list_camera_lines():
                print(line)
            return 0

        if args.test is not None:
            location_index, camera_index = args.test
            # The sender ends the process once the test popup has been sent
            delivered = await app.run_test_snapshot(
                location_index, camera_index, exit_after=True
            )
            return 0 if delivered else 1

        _install_signal_handlers(app)
        await app.run()
        return 0
    except BridgeError as e:
        logger.error(f"Startup failed: {e}")
        return 1
    except asyncio.CancelledError:
        logger.info("Application is shutting down.")
        return 0
    finally:
        await app.shutdown()


def main_entry():
    """Entry point for console script."""
    configure_logging()
    try:
        exit_code = asyncio.run(main())
        sys.exit(exit_code)
    except KeyboardInterrupt:
        logger.info("Keyboard interrupt received, shutting down...")
        sys.exit(0)


if __name__ == "__main__":
    main_entry()
