"""
Tests for rate limit key functions
"""
from starlette.requests import Request

from app.core.rate_limit import get_client_ip, get_session_key


def make_request(headers=None, session=None, client=("10.0.0.5", 5555)) -> Request:
    scope = {
        "type": "http",
        "method": "POST",
        "path": "/api/orders",
        "headers": [(k.lower().encode(), v.encode()) for k, v in (headers or {}).items()],
        "client": client,
    }
    if session is not None:
        scope["session"] = session
    return Request(scope)


class TestClientIp:

    def test_direct_peer(self):
        assert get_client_ip(make_request()) == "10.0.0.5"

    def test_first_forwarded_hop(self):
        request = make_request(headers={"X-Forwarded-For": "203.0.113.7, 10.0.0.1"})
        assert get_client_ip(request) == "203.0.113.7"


class TestSessionKey:

    def test_keyed_by_cart_session(self):
        request = make_request(session={"session_id": "abc"})
        assert get_session_key(request) == "session:abc"

    def test_falls_back_to_ip(self):
        assert get_session_key(make_request(session={})) == "10.0.0.5"
        assert get_session_key(make_request()) == "10.0.0.5"
