"""Configuration constants for the Freebox Munin plugin."""

import os
import tempfile
from pathlib import Path

DEFAULT_HOST = os.environ.get("FREEBOX_HOST", "mafreebox.freebox.fr")
# The router account name is fixed; only the password is configurable
DEFAULT_USER = "freebox"
DEFAULT_PASSWORD = os.environ.get("FREEBOX_PASSWORD", "")
DEFAULT_DEBUG = os.environ.get("FREEBOX_DEBUG", "") not in ("", "0")

# Munin exports MUNIN_PLUGSTATE as the per-plugin writable state directory
STATE_DIR = Path(os.environ.get("MUNIN_PLUGSTATE", tempfile.gettempdir()))
COOKIE_FILE = Path(os.environ.get("FREEBOX_COOKIE_FILE", STATE_DIR / "freebox_munin.cookie"))
PAGE_BUFFER = Path(os.environ.get("FREEBOX_PAGE_BUFFER", STATE_DIR / "freebox_munin.page"))

LOGIN_URL = "/login.php"

# Logical page name -> path on the router
PAGES = {
    "conn_status": "/settings.php?page=conn_status",
    "system":      "/settings.php?page=misc_system",
    "adsl_stats":  "/settings.php?page=conn_adsl_stats",
}

REQUEST_TIMEOUT      = 2   # seconds per HTTP request
TRANSPORT_RETRIES    = 0   # a failed request is never retried
MAX_RELOGIN_ATTEMPTS = 3   # re-logins allowed per page fetch

# Embedded both in a rejected login and in any page served without a valid session
BAD_PASS_MARKER = "bad_pass"

# Text of the conn_state element when the line is up
CONNECTED_LABEL = "Connecté"

MUNIN_CATEGORY = "freebox"
