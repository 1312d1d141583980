from unittest.mock import MagicMock

from use_cases.auth_state import AuthStateResolver, SignedOut, SignInSucceeded
from use_cases.profile_flow import ProfileForm, submit_profile
from use_cases.profile_gate import ProfileCompletionGate
from use_cases.route_guard import RouteGuard
from use_cases.session_models import anonymous_session
from use_cases.session_store import SessionStore


def make_gate(profile_complete=False):
    store = SessionStore()
    resolver = AuthStateResolver(store)
    attempt = resolver.begin_sign_in()
    resolver.handle(SignInSucceeded(attempt, "u1", profile_complete))
    return store, ProfileCompletionGate(RouteGuard(), resolver)


def valid_form():
    return ProfileForm(display_name=" Asha ", phone="+91 98765 43210", city="Pune ")


def test_submit_profile_saves_and_completes() -> None:
    store, gate = make_gate()
    profiles = MagicMock()
    profiles.save_profile.return_value = True

    result = submit_profile(store.current(), valid_form(), profiles, gate)

    assert result.status == "COMPLETED"
    assert result.reason == "completed"
    profiles.save_profile.assert_called_once_with("u1", "Asha", "+91 98765 43210", "Pune")
    assert store.current().state == "complete"


def test_submit_profile_reports_missing_fields() -> None:
    store, gate = make_gate()
    profiles = MagicMock()

    result = submit_profile(store.current(), ProfileForm(display_name="Asha", phone="  ", city=""), profiles, gate)

    assert result.status == "REJECTED"
    assert result.missing == ("phone", "city")
    profiles.save_profile.assert_not_called()
    assert store.current().state == "incomplete_profile"


def test_submit_profile_when_save_fails_keeps_state() -> None:
    store, gate = make_gate()
    profiles = MagicMock()
    profiles.save_profile.return_value = False

    result = submit_profile(store.current(), valid_form(), profiles, gate)

    assert result.reason == "save_failed"
    assert store.current().state == "incomplete_profile"


def test_submit_profile_twice_is_a_no_op() -> None:
    store, gate = make_gate(profile_complete=True)
    profiles = MagicMock()

    result = submit_profile(store.current(), valid_form(), profiles, gate)

    assert result.status == "COMPLETED"
    assert result.reason == "already_complete"
    profiles.save_profile.assert_not_called()


def test_submit_profile_requires_sign_in() -> None:
    _, gate = make_gate()
    profiles = MagicMock()

    result = submit_profile(anonymous_session(), valid_form(), profiles, gate)

    assert result.reason == "not_authenticated"
    profiles.save_profile.assert_not_called()


def test_submit_profile_after_sign_out_is_rejected() -> None:
    store, gate = make_gate()
    stale_session = store.current()
    gate.resolver.handle(SignedOut())
    profiles = MagicMock()
    profiles.save_profile.return_value = True

    result = submit_profile(stale_session, valid_form(), profiles, gate)

    assert result.reason == "session_changed"
    assert store.current().state == "anonymous"
