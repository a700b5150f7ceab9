import pytest

import auth.guard
from auth.session import AuthState
from conftest import make_session


class StopRendering(Exception):
    pass


class FakeStreamlit:
    def __init__(self):
        self.stopped = False

    def stop(self):
        self.stopped = True
        raise StopRendering


@pytest.fixture
def guard(monkeypatch):
    fake_st = FakeStreamlit()
    visited = []
    monkeypatch.setattr(auth.guard, "st", fake_st)
    monkeypatch.setattr(auth.guard, "navigate", visited.append)
    return fake_st, visited


def test_loading_stops_instead_of_redirecting(guard):
    fake_st, visited = guard

    with pytest.raises(StopRendering):
        auth.guard.require_route(AuthState.pending(), "/lessons")

    assert fake_st.stopped
    assert visited == []


def test_anonymous_visitor_is_sent_to_auth(guard):
    fake_st, visited = guard

    auth.guard.require_route(AuthState(), "/lessons")

    assert not fake_st.stopped
    assert visited == ["/auth"]


def test_signed_in_user_on_allowed_route_stays(guard):
    fake_st, visited = guard
    session = make_session()

    auth.guard.require_route(AuthState(session=session, user=session.user), "/lessons")

    assert not fake_st.stopped
    assert visited == []
