"""
Tests for FreeboxClient – cached sessions, re-authentication and fatal errors.
"""

import tempfile
import unittest
from pathlib import Path
from unittest.mock import MagicMock, patch

import requests

from freebox_munin.auth.store import Session, SessionStore
from freebox_munin.client import FreeboxClient, SessionState, decode_page
from freebox_munin.config import MAX_RELOGIN_ATTEMPTS
from freebox_munin.errors import AuthenticationError, TransportError
from freebox_munin.session import build_session

HOST = "mafreebox.freebox.fr"
GOOD_PAGE = "<pre>Fan speed 2236 RPM</pre>"
LOGIN_FORM = '<form action="/login.php"><input name="passwd"></form><!-- bad_pass -->'


def _page(text, status_code=200):
    resp = MagicMock(spec=requests.Response)
    resp.text = text
    resp.content = text.encode("utf-8")
    resp.status_code = status_code
    resp.headers = {"Content-Type": "text/html"}
    if status_code >= 400:
        resp.raise_for_status.side_effect = requests.HTTPError(f"{status_code} Error")
    return resp


def _raw_response(body, content_type="text/html"):
    resp = requests.Response()
    resp.status_code = 200
    resp._content = body
    resp.headers["Content-Type"] = content_type
    resp.encoding = requests.utils.get_encoding_from_headers(resp.headers)
    return resp


def _login_ok(sid="fresh"):
    resp = MagicMock(spec=requests.Response)
    resp.text = ""
    resp.status_code = 302
    resp.headers = {"Location": "/settings.php"}
    resp.cookies = requests.cookies.RequestsCookieJar()
    resp.cookies.set("FBXSID", sid)
    return resp


def _login_refused():
    resp = _login_ok()
    resp.headers = {"Location": "/login.php?bad_pass"}
    resp.cookies = requests.cookies.RequestsCookieJar()
    return resp


class ClientTestCase(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        tmp = Path(self._tmp.name)
        self.cookie_file = tmp / "freebox.cookie"
        self.page_buffer = tmp / "freebox.page"
        self.session = build_session()
        self.client = FreeboxClient(
            host=HOST,
            password="secret",
            cookie_file=self.cookie_file,
            page_buffer=self.page_buffer,
            session=self.session,
        )

    def tearDown(self):
        self._tmp.cleanup()

    def _cache_session(self, sid="cached"):
        SessionStore(self.cookie_file).save(Session(token={"FBXSID": sid}))


class TestFetch(ClientTestCase):
    def test_first_run_logs_in_then_fetches(self):
        with patch.object(self.session, "post", return_value=_login_ok()) as mock_post, \
             patch.object(self.session, "get", return_value=_page(GOOD_PAGE)) as mock_get:
            page = self.client.fetch("system")

        self.assertEqual(page.text, GOOD_PAGE)
        self.assertEqual(page.url, f"http://{HOST}/settings.php?page=misc_system")
        self.assertEqual(mock_post.call_count, 1)
        self.assertEqual(mock_get.call_count, 1)
        self.assertEqual(SessionStore(self.cookie_file).load().token, {"FBXSID": "fresh"})
        self.assertIs(self.client.state, SessionState.AUTHENTICATED)

    def test_cached_session_skips_login(self):
        self._cache_session()
        with patch.object(self.session, "post") as mock_post, \
             patch.object(self.session, "get", return_value=_page(GOOD_PAGE)):
            self.client.fetch("system")

        mock_post.assert_not_called()
        self.assertEqual(self.session.cookies.get("FBXSID"), "cached")

    def test_expired_session_relogs_once_and_retries(self):
        self._cache_session("expired")
        pages = [_page(LOGIN_FORM), _page(GOOD_PAGE)]
        with patch.object(self.session, "post", return_value=_login_ok()) as mock_post, \
             patch.object(self.session, "get", side_effect=pages) as mock_get:
            page = self.client.fetch("system")

        self.assertEqual(page.text, GOOD_PAGE)
        self.assertEqual(mock_post.call_count, 1)
        self.assertEqual(mock_get.call_count, 2)
        urls = [c.args[0] for c in mock_get.call_args_list]
        self.assertEqual(urls[0], urls[1])
        self.assertEqual(SessionStore(self.cookie_file).load().token, {"FBXSID": "fresh"})

    def test_login_then_invalid_page_relogs_once(self):
        pages = [_page(LOGIN_FORM), _page(GOOD_PAGE)]
        with patch.object(self.session, "post", return_value=_login_ok()) as mock_post, \
             patch.object(self.session, "get", side_effect=pages) as mock_get:
            page = self.client.fetch("system")

        self.assertEqual(page.text, GOOD_PAGE)
        self.assertEqual(mock_post.call_count, 2)
        self.assertEqual(mock_get.call_count, 2)
        self.assertIs(self.client.state, SessionState.AUTHENTICATED)

    def test_relogin_result_matches_valid_session_run(self):
        self._cache_session("expired")
        with patch.object(self.session, "post", return_value=_login_ok()), \
             patch.object(self.session, "get",
                          side_effect=[_page(LOGIN_FORM), _page(GOOD_PAGE)]):
            relogged = self.client.fetch("system")

        self._cache_session("valid")
        with patch.object(self.session, "get", return_value=_page(GOOD_PAGE)):
            direct = self.client.fetch("system")

        self.assertEqual(relogged, direct)

    def test_permanently_invalid_session_is_fatal(self):
        with patch.object(self.session, "post", return_value=_login_ok()) as mock_post, \
             patch.object(self.session, "get", return_value=_page(LOGIN_FORM)) as mock_get:
            with self.assertRaises(AuthenticationError):
                self.client.fetch("system")

        # Initial login plus the capped re-logins
        self.assertEqual(mock_post.call_count, 1 + MAX_RELOGIN_ATTEMPTS)
        self.assertEqual(mock_get.call_count, 1 + MAX_RELOGIN_ATTEMPTS)
        self.assertIs(self.client.state, SessionState.NO_SESSION)

    def test_bad_password_is_fatal(self):
        with patch.object(self.session, "post", return_value=_login_refused()), \
             patch.object(self.session, "get") as mock_get:
            with self.assertRaises(AuthenticationError):
                self.client.fetch("system")
        mock_get.assert_not_called()
        self.assertFalse(self.cookie_file.exists())

    def test_bad_password_on_relogin_is_fatal(self):
        self._cache_session("expired")
        with patch.object(self.session, "post", return_value=_login_refused()), \
             patch.object(self.session, "get", return_value=_page(LOGIN_FORM)) as mock_get:
            with self.assertRaises(AuthenticationError):
                self.client.fetch("system")
        self.assertEqual(mock_get.call_count, 1)

    def test_transport_failure_is_fatal(self):
        self._cache_session()
        with patch.object(self.session, "get", side_effect=requests.Timeout("timed out")) as mock_get:
            with self.assertRaises(TransportError):
                self.client.fetch("system")
        self.assertEqual(mock_get.call_count, 1)

    def test_http_error_status_is_fatal(self):
        self._cache_session()
        with patch.object(self.session, "get", return_value=_page("oops", status_code=503)):
            with self.assertRaises(TransportError):
                self.client.fetch("system")

    def test_page_buffer_holds_last_body(self):
        self._cache_session()
        with patch.object(self.session, "get", return_value=_page(GOOD_PAGE)):
            self.client.fetch("system")
        self.assertEqual(self.page_buffer.read_text(encoding="utf-8"), GOOD_PAGE)

    def test_unwritable_page_buffer_still_returns_page(self):
        self._cache_session()
        self.page_buffer.mkdir()
        with patch.object(self.session, "get", return_value=_page(GOOD_PAGE)):
            with self.assertLogs("freebox-munin", level="WARNING"):
                page = self.client.fetch("system")
        self.assertEqual(page.text, GOOD_PAGE)

    def test_utf8_page_without_charset(self):
        self._cache_session()
        body = "Temperature CPUm 57 °C".encode("utf-8")
        with patch.object(self.session, "get", return_value=_raw_response(body)):
            page = self.client.fetch("system")
        self.assertIn("57 °C", page.text)

    def test_raw_path_accepted(self):
        self._cache_session()
        with patch.object(self.session, "get", return_value=_page(GOOD_PAGE)) as mock_get:
            page = self.client.fetch("/settings.php?page=other")
        self.assertEqual(page.url, f"http://{HOST}/settings.php?page=other")
        self.assertEqual(mock_get.call_args.args[0], page.url)


class TestDecodePage(unittest.TestCase):
    def test_utf8_without_charset(self):
        resp = _raw_response("Connecté".encode("utf-8"))
        self.assertEqual(decode_page(resp), "Connecté")

    def test_latin1_without_charset(self):
        resp = _raw_response("Connecté".encode("iso-8859-1"))
        self.assertEqual(decode_page(resp), "Connecté")

    def test_declared_charset_wins(self):
        resp = _raw_response(
            "52 °C".encode("iso-8859-1"),
            content_type="text/html; charset=iso-8859-1",
        )
        self.assertEqual(decode_page(resp), "52 °C")


class TestEnsureAuthenticated(ClientTestCase):
    def test_corrupt_cookie_file_forces_login(self):
        self.cookie_file.write_text("{broken", encoding="utf-8")
        with patch.object(self.session, "post", return_value=_login_ok()) as mock_post:
            self.client.ensure_authenticated()
        self.assertEqual(mock_post.call_count, 1)

    def test_force_logs_in_even_with_cached_session(self):
        self._cache_session()
        with patch.object(self.session, "post", return_value=_login_ok("forced")) as mock_post:
            self.client.ensure_authenticated(force=True)
        self.assertEqual(mock_post.call_count, 1)
        self.assertEqual(SessionStore(self.cookie_file).load().token, {"FBXSID": "forced"})


if __name__ == "__main__":
    unittest.main()
