"""State container owning the in-memory document and its persistence."""

import json
import logging
from dataclasses import dataclass, field
from typing import Protocol

from kcal_tracker.domain.document import StateDocument, dump_document, read_document

_logger = logging.getLogger(__name__)


class DocumentStore(Protocol):
    """Key-value blob storage for the serialized state document."""

    def load(self) -> str | None:
        """Return the stored document text, or None on first run."""

    def save(self, text: str) -> None:
        """Store the document text, replacing any previous value."""


@dataclass
class StateService:
    """Owns the state document; saves it after every mutation."""

    store: DocumentStore
    document: StateDocument = field(default_factory=StateDocument.empty)

    def load(self) -> StateDocument:
        """Load the stored document, starting empty when absent or corrupt."""
        try:
            raw_text = self.store.load()
            raw = json.loads(raw_text) if raw_text is not None else None
        except ValueError:
            _logger.warning("Stored document is unreadable; starting empty")
            self.document = StateDocument.empty()
            return self.document
        if raw_text is None:
            self.document = StateDocument.empty()
            return self.document
        self.document = read_document(raw)
        return self.document

    def commit(self) -> None:
        """Persist the whole document."""
        self.store.save(json.dumps(dump_document(self.document)))

    def replace(self, document: StateDocument) -> None:
        """Swap in a new document and persist it."""
        self.document = document
        self.commit()
