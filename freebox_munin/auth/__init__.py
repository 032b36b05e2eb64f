"""Authentication submodule – login, invalid-session detection, persisted session."""

from freebox_munin.auth.login import is_session_invalid, login
from freebox_munin.auth.store import Session, SessionStore, save_page

__all__ = [
    "login",
    "is_session_invalid",
    "Session",
    "SessionStore",
    "save_page",
]
