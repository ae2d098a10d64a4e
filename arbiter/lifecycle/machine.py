"""Table-driven lifecycle state machine."""

from enum import Enum
from typing import Iterable, TypeVar

from ..errors import (
    IncompleteTransitionTableError,
    InvalidEventError,
    InvalidTransitionError,
)
from ..models import Transition

S = TypeVar("S", bound=Enum)
E = TypeVar("E", bound=Enum)


class LifecycleStateMachine:
    """Total transition table mapping (state, event) to (next state, message).

    The machine holds no current state; callers keep their own and feed it
    back in. Every (state, event) pair of the two vocabularies must have a
    row, so a lookup for known inputs can never fall through. Terminal or
    meaningless combinations are expressed as self-loops carrying a message.

    Example:
        machine = LifecycleStateMachine(
            "document", DocumentStatus, DocumentEvent, DOCUMENT_TRANSITIONS
        )
        state, message = machine.transition(DocumentStatus.DRAFT, "publish")
    """

    def __init__(
        self,
        name: str,
        states: type[S],
        events: type[E],
        transitions: Iterable[Transition],
    ):
        """Build and validate the table.

        Args:
            name: Machine name used in error messages.
            states: Enum of valid states.
            events: Enum of valid events.
            transitions: One Transition per (state, event) pair.

        Raises:
            IncompleteTransitionTableError: If any pair has no row.
        """
        self._name = name
        self._states = states
        self._events = events
        self._table: dict[tuple[Enum, Enum], Transition] = {}

        for row in transitions:
            self._table[(states(row.state), events(row.event))] = row

        missing = [
            (state.value, event.value)
            for state in states
            for event in events
            if (state, event) not in self._table
        ]
        if missing:
            raise IncompleteTransitionTableError(name, missing)

    @property
    def name(self) -> str:
        return self._name

    @property
    def states(self) -> type[Enum]:
        return self._states

    @property
    def events(self) -> type[Enum]:
        return self._events

    @property
    def table(self) -> list[Transition]:
        """All rows, in state then event declaration order."""
        return [
            self._table[(state, event)]
            for state in self._states
            for event in self._events
        ]

    def lookup(self, state: Enum | str, event: Enum | str) -> Transition:
        """Return the table row for (state, event).

        Raises:
            InvalidTransitionError: If the state is not part of this machine.
            InvalidEventError: If the event is not part of this machine.
        """
        try:
            current = self._states(state)
        except (ValueError, TypeError):
            raise InvalidTransitionError(self._name, state, event) from None

        try:
            trigger = self._events(event)
        except (ValueError, TypeError):
            raise InvalidEventError(self._name, state, event) from None

        return self._table[(current, trigger)]

    def transition(self, state: Enum | str, event: Enum | str) -> tuple[Enum, str]:
        """Return (next_state, message) for the given state and event."""
        row = self.lookup(state, event)
        return row.next_state, row.message
