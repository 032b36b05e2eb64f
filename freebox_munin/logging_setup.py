"""Logging configuration for the Freebox Munin plugin."""

import logging

import colorlog

log = logging.getLogger("freebox-munin")

# munin-node timestamps plugin stderr itself; records carry only level and text
_LOG_FORMAT = "%(log_color)s%(name)s [%(levelname)s]%(reset)s %(message)s"


def _setup_logging(debug: bool = False) -> None:
    # Munin reads values from stdout, so log records always go to stderr
    level = logging.DEBUG if debug else logging.WARNING
    log.setLevel(level)
    log.handlers.clear()

    handler = colorlog.StreamHandler()
    handler.setFormatter(colorlog.ColoredFormatter(
        _LOG_FORMAT,
        log_colors={
            "DEBUG":    "cyan",
            "INFO":     "green",
            "WARNING":  "yellow",
            "ERROR":    "red",
            "CRITICAL": "bold_red",
        },
        # Colour only on a terminal, never in munin-node's log file
        stream=handler.stream,
    ))
    log.addHandler(handler)
