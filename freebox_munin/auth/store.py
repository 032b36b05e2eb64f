"""
Persisted plugin state.

Two process-wide files survive between Munin runs:

* the cookie file – the session cookies of the last successful login, stored
  as JSON together with the time they were obtained;
* the page buffer – the raw body of the most recently fetched page, kept for
  troubleshooting scraping problems.

Neither file is locked.  Two plugin runs racing on the cookie file can make
one of them log in again, which is harmless.
"""

import json
import time
from dataclasses import dataclass, field
from pathlib import Path

from ..logging_setup import log


@dataclass
class Session:
    """Session cookies handed out by the router after a successful login."""

    token: dict[str, str]
    acquired_at: float = field(default_factory=time.time)

    def to_json(self) -> str:
        return json.dumps({"token": self.token, "acquired_at": self.acquired_at})

    @classmethod
    def from_json(cls, raw: str) -> "Session":
        data = json.loads(raw)
        token = data["token"]
        if not isinstance(token, dict) or not token:
            raise ValueError("session token must be a non-empty mapping")
        return cls(
            token={str(k): str(v) for k, v in token.items()},
            acquired_at=float(data.get("acquired_at", 0)),
        )


class SessionStore:
    """Read and write the cached :class:`Session` at a fixed path."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def load(self) -> Session | None:
        """
        Return the cached session, or None when there is none.

        A missing, unreadable or corrupt cookie file counts as "no session" so
        the caller simply logs in again.
        """
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as exc:
            log.warning("Cannot read cookie file %s – %s", self.path, exc)
            return None

        try:
            session = Session.from_json(raw)
        except (ValueError, KeyError, TypeError) as exc:
            log.warning("Ignoring corrupt cookie file %s – %s", self.path, exc)
            return None

        log.debug(
            "Loaded session from %s (age %.0fs)",
            self.path, time.time() - session.acquired_at,
        )
        return session

    def save(self, session: Session) -> None:
        """
        Overwrite the cookie file with *session*.

        A failed write is logged; the in-memory session stays usable and the
        next run logs in again.
        """
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(session.to_json(), encoding="utf-8")
        except OSError as exc:
            log.warning("Cannot write cookie file %s – %s", self.path, exc)
            return
        log.debug("Saved session → %s", self.path)


def save_page(path: Path, content: bytes) -> None:
    """Write *content* to the page buffer at *path*, creating parent directories."""
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)
    except OSError as exc:
        log.warning("Cannot write page buffer %s – %s", path, exc)
        return
    log.debug("Saved page buffer → %s (%d bytes)", path, len(content))
