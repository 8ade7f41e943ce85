#!/usr/bin/env python3
"""
Dice SDK Core Library
Shared setup, logging and exit handling for ops/ scripts.
"""

import argparse
import logging
import sys

# Standardized Logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("Dice")


def setup_script(description):
    """
    Standard setup for ALL scripts.
    Returns: parser (argparse.ArgumentParser)

    Usage:
        parser = setup_script("My script description")
        parser.add_argument('--session')
        args = parser.parse_args()
    """
    parser = argparse.ArgumentParser(
        description=description, formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    return parser


def handle_debug(args):
    """Enable debug logging if --debug flag is set (library loggers included)"""
    if hasattr(args, "debug") and args.debug:
        logging.getLogger().setLevel(logging.DEBUG)
        logger.setLevel(logging.DEBUG)
        logger.debug("Debug mode enabled")


def finalize(success=True, message=None):
    """
    Standard exit for all scripts.

    Args:
        success: Whether operation succeeded
        message: Optional custom message
    """
    if success:
        if message:
            logger.info(message)
        sys.exit(0)
    else:
        msg = message or "Operation Failed"
        logger.error(msg)
        sys.exit(1)


def safe_execute(func, *args, **kwargs):
    """
    Wrapper for safe execution with consistent error handling.

    Usage:
        result = safe_execute(run_command, args)
    """
    try:
        return func(*args, **kwargs)
    except KeyboardInterrupt:
        logger.warning("Operation cancelled by user")
        finalize(success=False, message="Cancelled")
    except Exception as e:
        logger.error(f"Error: {e}", exc_info=logger.isEnabledFor(logging.DEBUG))
        finalize(success=False, message=str(e))
