"""Login and invalid-session detection for the Freebox web interface."""

import requests

from ..config import BAD_PASS_MARKER, LOGIN_URL, REQUEST_TIMEOUT
from ..errors import AuthenticationError, TransportError
from ..logging_setup import log
from ..session import apply_cookies, base_url
from .store import Session


def is_session_invalid(text: str) -> bool:
    """
    Return True when a page body carries the bad-password marker.

    The router serves the same marker both for a rejected login and for any
    protected page requested without a valid session.
    """
    return BAD_PASS_MARKER in text


def login(session: requests.Session, host: str, username: str, password: str) -> Session:
    """
    Authenticate against the Freebox admin interface.

    POSTs the form-encoded ``login`` / ``passwd`` fields to the login endpoint
    without following the redirect, so that the session cookie set on the
    302 response is captured.

    Args:
        session: HTTP session used for the request
        host: Router hostname or base URL
        username: Account name (always ``freebox`` on this router)
        password: Account password

    Returns:
        The new :class:`Session`; its cookies are also loaded into *session*

    Raises:
        AuthenticationError: wrong or missing password, or no cookie returned
        TransportError: the router could not be reached
    """
    if not password:
        raise AuthenticationError(
            "No router password configured (set FREEBOX_PASSWORD)"
        )

    url = base_url(host) + LOGIN_URL
    session.cookies.clear()
    log.debug("POST %s (login=%s)", url, username)
    try:
        resp = session.post(
            url,
            data={"login": username, "passwd": password},
            timeout=REQUEST_TIMEOUT,
            allow_redirects=False,
        )
    except requests.RequestException as exc:
        raise TransportError(f"Login request to {url} failed: {exc}") from exc

    location = resp.headers.get("Location", "")
    if is_session_invalid(resp.text) or is_session_invalid(location):
        raise AuthenticationError("Login refused by the router – check the password")

    if resp.status_code >= 400:
        raise TransportError(f"Login request to {url} returned HTTP {resp.status_code}")

    token = {name: value for name, value in resp.cookies.items() if value}
    if not token:
        raise AuthenticationError("Login response did not set a session cookie")

    apply_cookies(session, token)
    log.info(
        "Login successful (HTTP %s). Active cookies: %s",
        resp.status_code, list(token),
    )
    return Session(token=token)
