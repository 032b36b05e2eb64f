"""
freebox_munin
=============
Munin plugin collecting telemetry from a Freebox router's web interface.

Package structure
-----------------
freebox_munin/
├── __init__.py       – package init and public API
├── config.py         – configuration constants and env overrides
├── errors.py         – fatal error hierarchy (exit codes)
├── logging_setup.py  – coloured stderr logging
├── session.py        – requests.Session factory
├── client.py         – FreeboxClient: session-aware page fetcher
├── reporters.py      – per-metric reporters and ``key.value`` rendering
├── describe.py       – static Munin graph configuration
├── cli.py            – argparse CLI (``python -m freebox_munin``)
├── auth/             – login, invalid-session detection, cookie file
└── extract/          – anchor / unit / occurrence field extraction

Quick start
-----------
    from freebox_munin import FreeboxClient, REPORTERS, render_reports

    client = FreeboxClient(host="mafreebox.freebox.fr", password="secret")
    reporter = REPORTERS["temp"]
    page = client.fetch(reporter.page)
    print(render_reports(reporter.report(page.text)), end="")
"""

from .client    import FetchedPage, FreeboxClient, SessionState
from .describe  import render_config
from .errors    import AuthenticationError, FreeboxError, TransportError, UsageError
from .extract   import FieldSpec, extract
from .reporters import REPORTERS, MetricReport, render_reports

__all__ = [
    "FreeboxClient",
    "FetchedPage",
    "SessionState",
    "FieldSpec",
    "extract",
    "REPORTERS",
    "MetricReport",
    "render_reports",
    "render_config",
    "FreeboxError",
    "AuthenticationError",
    "TransportError",
    "UsageError",
]
