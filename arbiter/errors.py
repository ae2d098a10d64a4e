"""Exceptions raised by the arbitration service and lifecycle machines."""


class ArbiterError(Exception):
    """Base exception for all arbitration errors."""

    pass


class InvalidTransitionError(ArbiterError):
    """Raised when a (state, event) pair has no defined transition."""

    def __init__(self, machine: str, state: object, event: object, message: str | None = None):
        self.machine = machine
        self.state = state
        self.event = event
        super().__init__(
            message or f"{machine}: no transition for state {state!r} on event {event!r}"
        )


class InvalidEventError(InvalidTransitionError):
    """Raised when an event is not part of a machine's vocabulary."""

    def __init__(self, machine: str, state: object, event: object):
        super().__init__(
            machine,
            state,
            event,
            f"{machine}: unknown event {event!r}",
        )


class IncompleteTransitionTableError(ArbiterError):
    """Raised when a transition table does not cover every (state, event) pair."""

    def __init__(self, machine: str, missing: list[tuple[str, str]]):
        self.machine = machine
        self.missing = missing
        pairs = ", ".join(f"({s}, {e})" for s, e in missing)
        super().__init__(f"{machine}: transition table is missing {pairs}")
