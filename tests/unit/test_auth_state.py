"""
Unit tests for AuthStateMachine.
"""
import pytest
from exposure.auth_state import (
    AuthStateMachine,
    AuthState,
    TransitionError,
)


class TestAuthStateEnum:
    """Tests for AuthState enum."""

    def test_all_states_exist(self):
        assert AuthState.UNAUTHENTICATED.value == "unauthenticated"
        assert AuthState.AUTHENTICATING.value == "authenticating"
        assert AuthState.AUTHENTICATED.value == "authenticated"
        assert AuthState.AUTH_FAILED.value == "auth_failed"


class TestTransitions:
    """Tests for the login lifecycle."""

    def test_initial_state(self):
        assert AuthStateMachine().state == AuthState.UNAUTHENTICATED

    def test_successful_login(self):
        sm = AuthStateMachine()
        assert sm.transition('login') == AuthState.AUTHENTICATING
        assert sm.transition('succeed') == AuthState.AUTHENTICATED

    def test_failed_login(self):
        sm = AuthStateMachine()
        sm.transition('login')
        sm.transition('fail')
        assert sm.state == AuthState.AUTH_FAILED

    def test_retry_after_failure(self):
        sm = AuthStateMachine(initial_state=AuthState.AUTH_FAILED)
        assert sm.transition('login') == AuthState.AUTHENTICATING

    def test_relogin_while_authenticated(self):
        sm = AuthStateMachine(initial_state=AuthState.AUTHENTICATED)
        assert sm.transition('login') == AuthState.AUTHENTICATING

    def test_logout_from_any_settled_state(self):
        for state in (AuthState.AUTHENTICATED, AuthState.AUTH_FAILED, AuthState.UNAUTHENTICATED):
            sm = AuthStateMachine(initial_state=state)
            assert sm.transition('logout') == AuthState.UNAUTHENTICATED

    def test_succeed_without_login_is_rejected(self):
        sm = AuthStateMachine()
        with pytest.raises(TransitionError) as exc_info:
            sm.transition('succeed')
        assert exc_info.value.action == 'succeed'
        assert exc_info.value.state == 'unauthenticated'
        assert sm.state == AuthState.UNAUTHENTICATED

    def test_login_while_logging_in_is_rejected(self):
        sm = AuthStateMachine(initial_state=AuthState.AUTHENTICATING)
        with pytest.raises(TransitionError):
            sm.transition('login')
