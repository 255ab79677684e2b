from enum import Enum
from dataclasses import dataclass


class AuthState(str, Enum):
    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATING = "authenticating"
    AUTHENTICATED = "authenticated"
    AUTH_FAILED = "auth_failed"


class TransitionError(Exception):
    def __init__(self, state: str, action: str):
        self.state = state
        self.action = action
        super().__init__(f"No valid transition for action '{action}' from state '{state}'")


@dataclass
class Transition:
    from_state: AuthState
    to_state: AuthState
    action: str


class AuthStateMachine:
    """Login lifecycle of the credential store."""

    TRANSITIONS = [
        Transition(AuthState.UNAUTHENTICATED, AuthState.AUTHENTICATING, "login"),
        Transition(AuthState.AUTH_FAILED, AuthState.AUTHENTICATING, "login"),
        Transition(AuthState.AUTHENTICATED, AuthState.AUTHENTICATING, "login"),
        Transition(AuthState.AUTHENTICATING, AuthState.AUTHENTICATED, "succeed"),
        Transition(AuthState.AUTHENTICATING, AuthState.AUTH_FAILED, "fail"),
        Transition(AuthState.AUTHENTICATED, AuthState.UNAUTHENTICATED, "logout"),
        Transition(AuthState.AUTH_FAILED, AuthState.UNAUTHENTICATED, "logout"),
        Transition(AuthState.UNAUTHENTICATED, AuthState.UNAUTHENTICATED, "logout"),
    ]

    def __init__(self, initial_state: AuthState = AuthState.UNAUTHENTICATED):
        self._state = initial_state

    @property
    def state(self) -> AuthState:
        return self._state

    def transition(self, action: str) -> AuthState:
        for t in self.TRANSITIONS:
            if t.from_state == self._state and t.action == action:
                self._state = t.to_state
                return self._state

        raise TransitionError(self._state.value, action)
