"""Document entity driven by the document lifecycle."""

from ..logging_config import get_logger
from ..models import DocumentEvent, DocumentStatus, Transition
from .tables import DOCUMENT_LIFECYCLE

logger = get_logger(__name__)


class Document:
    """A document moving through draft, review and publication."""

    def __init__(self, doc_id: str, state: DocumentStatus = DocumentStatus.DRAFT):
        self._doc_id = doc_id
        self._state = DocumentStatus(state)
        self._last_message = ""
        self._history: list[Transition] = []

    @property
    def doc_id(self) -> str:
        return self._doc_id

    @property
    def state(self) -> DocumentStatus:
        return self._state

    @property
    def last_message(self) -> str:
        return self._last_message

    @property
    def history(self) -> list[Transition]:
        return list(self._history)

    def apply(self, event: DocumentEvent | str) -> str:
        """Apply an event and return the transition message.

        Raises:
            InvalidEventError: If the event is not a document event.
        """
        row = DOCUMENT_LIFECYCLE.lookup(self._state, event)
        self._state = row.next_state
        self._last_message = row.message
        self._history.append(row)
        logger.info(
            "Document %s: %s -> %s (%s)",
            self._doc_id,
            row.state.value,
            row.next_state.value,
            row.message,
        )
        return row.message

    def publish(self) -> str:
        return self.apply(DocumentEvent.PUBLISH)

    def reject(self) -> str:
        return self.apply(DocumentEvent.REJECT)
