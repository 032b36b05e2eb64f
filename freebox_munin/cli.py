"""
Command-line interface for the Freebox Munin plugin.

Munin runs plugins as ``<plugin> [config|autoconf|suggest]``.  The metric is
taken from the explicit ``metric`` argument, or from the executable name when
installed as a ``freebox_<metric>`` symlink.
"""

import argparse
import logging
import os
import sys

import requests

from freebox_munin.client import FreeboxClient
from freebox_munin.config import (
    DEFAULT_DEBUG,
    DEFAULT_HOST,
    DEFAULT_PASSWORD,
    REQUEST_TIMEOUT,
)
from freebox_munin.describe import render_config
from freebox_munin.errors import FreeboxError, UsageError
from freebox_munin.logging_setup import _setup_logging, log
from freebox_munin.reporters import REPORTERS, render_reports
from freebox_munin.session import base_url, build_session

MODES = ("fetch", "config", "autoconf", "suggest")
_PLUGIN_PREFIX = "freebox_"


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="freebox-munin",
        description="Munin plugin reporting Freebox router telemetry.",
        epilog=(
            "Metrics: " + ", ".join(REPORTERS) + ".\n"
            "The password is read from the FREEBOX_PASSWORD env var "
            "unless --password is given."
        ),
    )
    parser.add_argument(
        "metric", nargs="?",
        help="Metric to report (default: taken from a freebox_<metric> program name)",
    )
    parser.add_argument(
        "mode", nargs="?", default="fetch",
        help="config, autoconf or suggest (default: fetch and print values)",
    )
    parser.add_argument(
        "--host", default=DEFAULT_HOST,
        help=f"Router hostname (default: {DEFAULT_HOST})",
    )
    parser.add_argument(
        "--password", default=DEFAULT_PASSWORD,
        help="Router password (overrides FREEBOX_PASSWORD env var)",
    )
    parser.add_argument(
        "--debug", action="store_true", default=DEFAULT_DEBUG,
        help="Enable verbose debug logging on stderr",
    )
    args = parser.parse_args(argv)

    # "freebox_temp config": the only positional is the mode
    if args.metric in MODES and args.mode == "fetch":
        args.metric, args.mode = None, args.metric
    return args


def metric_from_program(prog: str) -> str | None:
    """Return the metric encoded in a ``freebox_<metric>`` program name."""
    name = os.path.basename(prog)
    if name.startswith(_PLUGIN_PREFIX) and len(name) > len(_PLUGIN_PREFIX):
        return name[len(_PLUGIN_PREFIX):]
    return None


def resolve_metric(metric: str | None, prog: str) -> str:
    """
    Pick the metric from the argument, else from the program name.

    Under a ``freebox_<metric>`` symlink an argument that names no metric is a
    stray argument and the program name wins.
    """
    from_program = metric_from_program(prog)
    if metric not in REPORTERS and from_program in REPORTERS:
        if metric is not None:
            log.debug("Ignoring stray argument %r for %s", metric, from_program)
        metric = from_program
    if metric not in REPORTERS:
        raise UsageError(
            f"Unknown metric {metric!r}; expected one of: {', '.join(REPORTERS)}"
        )
    return metric


def autoconf(host: str, password: str) -> str:
    """Answer Munin's ``autoconf`` probe."""
    if not password:
        return "no (FREEBOX_PASSWORD is not set)"
    session = build_session()
    try:
        session.get(base_url(host) + "/", timeout=REQUEST_TIMEOUT).raise_for_status()
    except requests.RequestException as exc:
        log.debug("autoconf probe failed: %s", exc)
        return f"no (router unreachable at {host})"
    return "yes"


def run(args: argparse.Namespace, prog: str) -> str:
    """Execute one plugin invocation and return its stdout text."""
    if args.mode == "suggest":
        return "".join(f"{name}\n" for name in REPORTERS)
    if args.mode == "autoconf":
        return autoconf(args.host, args.password) + "\n"

    metric = resolve_metric(args.metric, prog)
    # Any argument other than a known mode runs the default fetch
    if args.mode == "config":
        return render_config(metric)

    reporter = REPORTERS[metric]
    client = FreeboxClient(host=args.host, password=args.password)
    page = client.fetch(reporter.page)
    return render_reports(reporter.report(page.text))


def main(argv: list[str] | None = None, prog: str | None = None) -> int:
    """
    Main entry point for the plugin CLI.

    Returns the process exit status: 0 on success, 1 on any fatal error.
    Nothing is written to stdout when an error occurs.
    """
    args = parse_args(argv)
    _setup_logging(debug=args.debug)
    if args.debug:
        logging.getLogger("urllib3").setLevel(logging.DEBUG)

    try:
        output = run(args, prog or sys.argv[0])
    except UsageError as exc:
        print(exc, file=sys.stderr)
        return exc.exit_code
    except FreeboxError as exc:
        log.error("%s", exc)
        return exc.exit_code

    sys.stdout.write(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
