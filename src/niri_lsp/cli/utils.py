import json
import logging
import os
import traceback
from typing import Any, NoReturn

import click

DEBUG_ENV_VAR = "NIRI_LSP_DEBUG"
TRUTHY = ("1", "true", "yes")


def configure_logging(debug: bool = False) -> None:
    """Configure logging for all modules.

    Logs always go to stderr; stdout carries the protocol in stdio mode and
    the report in ``check``. Setting NIRI_LSP_DEBUG to 1, true or yes has the
    same effect as ``--debug``.

    Args:
        debug: Whether to enable debug logging
    """
    debug = debug or os.environ.get(DEBUG_ENV_VAR, "").lower() in TRUTHY
    level = logging.DEBUG if debug else logging.WARNING

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Remove any existing handlers to avoid duplicate messages
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(level)
    stream_handler.setFormatter(logging.Formatter("%(levelname)s:%(name)s:%(message)s"))
    root_logger.addHandler(stream_handler)

    for logger_name in logging.root.manager.loggerDict:
        logger = logging.getLogger(logger_name)
        logger.setLevel(level)
        logger.propagate = True

    # pygls logs every message at INFO/DEBUG
    if not debug:
        logging.getLogger("pygls").setLevel(logging.WARNING)


def echo_json(status: str, **fields: Any) -> None:
    """Print a JSON envelope on stdout, keyed by ``status``."""
    click.echo(json.dumps({"status": status, **fields}, indent=2, default=str))


def fail(error: Exception, json_output: bool = False, debug: bool = False) -> NoReturn:
    """Report a command failure, then abort.

    With ``json_output`` the error is an ``{"status": "error"}`` envelope on
    stdout, so scripts can parse it like a normal result. Otherwise a single
    line goes to stderr. ``debug`` adds the traceback either way.

    Raises:
        click.Abort: Always
    """
    if json_output:
        fields = {"error": str(error), "type": type(error).__name__}
        if debug:
            fields["traceback"] = traceback.format_exc()
        echo_json("error", **fields)
    else:
        click.echo(f"Error: {error}", err=True)
        if debug:
            click.echo(traceback.format_exc(), err=True)

    raise click.Abort()
