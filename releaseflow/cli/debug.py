import logging
from functools import wraps

import click

from .utils.logging import configure_logging


def add_logging_options(cmd):
    """Decorator adding --verbose and --debug to a command"""

    @click.option(
        "--verbose",
        "-v",
        is_flag=True,
        is_eager=True,
        expose_value=False,
        callback=lambda ctx, param, value: _set_log_level(ctx, logging.INFO, value),
        help="Enable verbose output to stderr",
    )
    @click.option(
        "--debug",
        "-d",
        is_flag=True,
        is_eager=True,
        expose_value=False,
        callback=lambda ctx, param, value: _set_log_level(ctx, logging.DEBUG, value),
        help="Enable debug (extremely verbose) output to stderr",
    )
    @wraps(cmd)
    def wrapper(*args, **kwargs):
        return cmd(*args, **kwargs)

    return wrapper


def _set_log_level(ctx, level: int, enabled: bool):
    """Callback for the verbosity flags"""
    root_ctx = ctx.find_root()
    root_ctx.ensure_object(dict)

    # The most verbose flag given wins, whatever the order
    current = root_ctx.obj.get("LOG_LEVEL", logging.WARNING)
    if enabled:
        current = min(current, level)
    root_ctx.obj["LOG_LEVEL"] = current

    configure_logging(current)
    return current
