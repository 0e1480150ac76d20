from starlette.requests import Request

from auth.session import SessionAuth
from auth.session.backends import MemoryBackend
from service.dependencies import build_login_redirect, get_next_path


def make_request(path: str, query: str = "") -> Request:
    return Request({
        "type": "http",
        "method": "GET",
        "scheme": "http",
        "server": ("localhost", 3000),
        "path": path,
        "query_string": query.encode(),
        "headers": [],
    })


def make_session_auth(session_settings, **overrides) -> SessionAuth:
    return SessionAuth(session_settings.model_copy(update=overrides), MemoryBackend())


def test_build_login_redirect_appends_next(session_settings):
    session_auth = make_session_auth(session_settings)

    assert build_login_redirect(session_auth, make_request("/private")) == "/login?redirect=%2Fprivate"


def test_build_login_redirect_custom_param(session_settings):
    session_auth = make_session_auth(session_settings, append_next="next", redirect_to="/login?lang=en")

    location = build_login_redirect(session_auth, make_request("/private", "a=1"))

    assert location == "/login?lang=en&next=%2Fprivate%3Fa%3D1"


def test_build_login_redirect_without_next(session_settings):
    session_auth = make_session_auth(session_settings, append_next=None)

    assert build_login_redirect(session_auth, make_request("/private")) == "/login"


def test_get_next_path(session_settings):
    session_auth = make_session_auth(session_settings)

    assert get_next_path(make_request("/login", "redirect=%2Fprivate"), session_auth) == "/private"
    assert get_next_path(make_request("/login"), session_auth) == "/"
    assert get_next_path(make_request("/login", "redirect=https%3A%2F%2Fevil.example.com"), session_auth) == "/"
    assert get_next_path(make_request("/login", "redirect=%2F%2Fevil.example.com"), session_auth) == "/"
