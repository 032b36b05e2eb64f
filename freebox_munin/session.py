"""HTTP session management for the Freebox Munin plugin."""

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .config import TRANSPORT_RETRIES


def build_session(verify_ssl: bool = True) -> requests.Session:
    """Return a requests.Session configured for a single transport attempt."""
    session = requests.Session()
    retry = Retry(total=TRANSPORT_RETRIES, backoff_factor=0)
    adapter = HTTPAdapter(max_retries=retry)
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    session.verify = verify_ssl
    session.headers.update({
        "User-Agent": "freebox-munin/1.0",
        "Connection": "close",
    })
    return session


def base_url(host: str) -> str:
    """Return ``http://<host>`` unless *host* already carries a scheme."""
    if host.startswith(("http://", "https://")):
        return host.rstrip("/")
    return f"http://{host}"


def apply_cookies(session: requests.Session, token: dict[str, str]) -> None:
    """Add the cookies of *token* that *session* does not already carry."""
    for name, value in token.items():
        if name not in session.cookies:
            session.cookies.set(name, value)
