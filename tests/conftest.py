import pytest

from auth.errors import AuthApiError
from auth.models import Profile, Session, User
from auth.supabase_auth import PASSWORD_RECOVERY, SIGNED_OUT, AuthSubscription


class FakeAuth:
    """
    Stands in for SupabaseAuth: records calls, emits events like the real one.
    """

    def __init__(self, session=None, update_error=None, verify_error=None, sign_out_error=None):
        self.session = session
        self.update_error = update_error
        self.verify_error = verify_error
        self.sign_out_error = sign_out_error
        self.listeners = []
        self.calls = []

    def on_auth_state_change(self, callback):
        self.listeners.append(callback)
        return AuthSubscription(self.listeners, callback)

    def emit(self, event, session=None):
        for cb in list(self.listeners):
            cb(event, session)

    def get_session(self):
        self.calls.append("get_session")
        return self.session

    def verify_recovery(self, token_hash):
        self.calls.append(("verify_recovery", token_hash))
        if self.verify_error:
            raise AuthApiError(self.verify_error, status=403)
        self.session = make_session()
        self.emit(PASSWORD_RECOVERY, self.session)
        return self.session

    def update_user(self, password):
        self.calls.append(("update_user", password))
        if self.update_error:
            raise AuthApiError(self.update_error, status=422)

    def sign_out(self):
        self.calls.append("sign_out")
        self.session = None
        self.emit(SIGNED_OUT, None)
        if self.sign_out_error:
            raise AuthApiError(self.sign_out_error, status=500)


def make_user(user_id="u-1", email="jane.doe@example.com"):
    return User(id=user_id, email=email)


def make_session(user=None):
    return Session(
        access_token="access",
        refresh_token="refresh",
        expires_at=4_000_000_000,
        user=user or make_user(),
    )


def make_profile(role="basic_user", tier="free", **kw):
    return Profile(
        id=kw.pop("id", "u-1"),
        role=role,
        subscription_tier=tier,
        email=kw.pop("email", "jane.doe@example.com"),
        **kw,
    )


@pytest.fixture
def fake_auth():
    return FakeAuth()
