"""
Session-aware page fetcher for the Freebox web interface.

:class:`FreeboxClient` owns the authentication lifecycle: it reuses the session
cached by a previous plugin run, detects pages served without a valid session,
logs in again and retries.  Every :meth:`FreeboxClient.fetch` either returns a
page fetched under a valid session or raises a :class:`FreeboxError`.
"""

import enum
from dataclasses import dataclass
from pathlib import Path

import requests

from .auth import Session, SessionStore, is_session_invalid, login, save_page
from .config import (
    COOKIE_FILE,
    DEFAULT_USER,
    MAX_RELOGIN_ATTEMPTS,
    PAGE_BUFFER,
    PAGES,
    REQUEST_TIMEOUT,
)
from .errors import AuthenticationError, TransportError
from .logging_setup import log
from .session import apply_cookies, base_url, build_session


class SessionState(enum.Enum):
    NO_SESSION     = "no-session"
    AUTHENTICATING = "authenticating"
    AUTHENTICATED  = "authenticated"


@dataclass(frozen=True)
class FetchedPage:
    """Raw text of one router page and the URL it came from."""

    url: str
    text: str


def decode_page(resp: requests.Response) -> str:
    """
    Return the body of *resp* as text.

    Without a charset in Content-Type, requests falls back to ISO-8859-1;
    the body is tried as UTF-8 first so that "°C" and "Connecté" survive.
    """
    content_type = resp.headers.get("Content-Type", "").lower()
    if "charset=" in content_type:
        return resp.text
    try:
        return resp.content.decode("utf-8")
    except UnicodeDecodeError:
        return resp.content.decode("iso-8859-1")


class FreeboxClient:
    """Fetch router pages, logging in whenever the router asks for it."""

    def __init__(
        self,
        host: str,
        password: str,
        username: str = DEFAULT_USER,
        cookie_file: Path = COOKIE_FILE,
        page_buffer: Path = PAGE_BUFFER,
        session: requests.Session | None = None,
    ) -> None:
        self.host = host
        self.username = username
        self.password = password
        self.base = base_url(host)
        self.store = SessionStore(cookie_file)
        self.page_buffer = Path(page_buffer)
        self.session = session if session is not None else build_session()
        self.state = SessionState.NO_SESSION
        self._cached: Session | None = None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def ensure_authenticated(self, force: bool = False) -> None:
        """
        Make sure a session is available, logging in when needed.

        Logs in when no session is cached on disk or when *force* is set
        because the last fetch came back with the invalid-session marker.
        A successful login overwrites the cookie file.

        Raises:
            AuthenticationError: the router rejected the password
            TransportError: the router could not be reached
        """
        if not force:
            if self._cached is None:
                self._cached = self.store.load()
            if self._cached is not None:
                self._load_cookies(self._cached)
                if self.state is SessionState.NO_SESSION:
                    self._set_state(SessionState.AUTHENTICATED)
                return

        self._set_state(SessionState.AUTHENTICATING)
        try:
            new_session = login(self.session, self.host, self.username, self.password)
        except AuthenticationError:
            self._set_state(SessionState.NO_SESSION)
            raise
        self.store.save(new_session)
        self._cached = new_session
        self._set_state(SessionState.AUTHENTICATED)

    def fetch(self, page: str) -> FetchedPage:
        """
        Fetch *page* (a key of ``PAGES`` or a router path) under a valid session.

        A page carrying the invalid-session marker triggers a fresh login and
        a retry of the same request, at most ``MAX_RELOGIN_ATTEMPTS`` times.

        Raises:
            AuthenticationError: bad password, or the session stays invalid
                after every allowed re-login
            TransportError: timeout, connection or DNS failure, HTTP error status
        """
        url = self.base + PAGES.get(page, page)
        self.ensure_authenticated()

        relogins = 0
        while True:
            text = self._get(url)
            if not is_session_invalid(text):
                return FetchedPage(url=url, text=text)

            if relogins >= MAX_RELOGIN_ATTEMPTS:
                self._set_state(SessionState.NO_SESSION)
                raise AuthenticationError(
                    f"Session still rejected for {url} after {relogins} re-login(s)"
                )
            relogins += 1
            log.warning("Session rejected at %s – re-login (attempt %d)", url, relogins)
            self.ensure_authenticated(force=True)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _get(self, url: str) -> str:
        log.debug("GET %s", url)
        try:
            resp = self.session.get(url, timeout=REQUEST_TIMEOUT, allow_redirects=True)
            resp.raise_for_status()
        except requests.RequestException as exc:
            raise TransportError(f"Router unreachable at {url}: {exc}") from exc

        save_page(self.page_buffer, resp.content)
        log.debug("  ← HTTP %s  %d bytes", resp.status_code, len(resp.content))
        return decode_page(resp)

    def _load_cookies(self, cached: Session) -> None:
        apply_cookies(self.session, cached.token)

    def _set_state(self, state: SessionState) -> None:
        if state is not self.state:
            log.debug("Session state: %s → %s", self.state.value, state.value)
            self.state = state
