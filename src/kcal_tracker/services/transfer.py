"""Import and export of the whole state document."""

import json
import logging
from dataclasses import dataclass

from kcal_tracker.domain.calendar import current_day_key
from kcal_tracker.domain.document import SCHEMA_VERSION, dump_document, parse_import
from kcal_tracker.domain.errors import DocumentShapeError
from kcal_tracker.services.calendar import Clock
from kcal_tracker.services.state import StateService

_logger = logging.getLogger(__name__)


@dataclass
class TransferService:
    """Exports the state document and replaces it from an import."""

    state: StateService
    clock: Clock

    def export_document(self) -> dict[str, object]:
        """Return the full document with a schema version marker."""
        return dump_document(self.state.document, schema_version=SCHEMA_VERSION)

    def export_json(self) -> str:
        return json.dumps(self.export_document(), indent=2)

    def export_filename(self) -> str:
        return f"tracker-export-{current_day_key(self.clock())}.json"

    def import_json(self, text: str) -> None:
        """Parse JSON text and import it; unparseable text is rejected."""
        try:
            raw = json.loads(text)
        except ValueError as exc:
            raise DocumentShapeError("Invalid JSON") from exc
        self.import_document(raw)

    def import_document(self, raw: object) -> None:
        """Replace the whole state; on failure nothing changes."""
        document = parse_import(raw)
        self.state.replace(document)
        _logger.info(
            "Imported document: ingredients=%s recipes=%s days=%s",
            len(document.ingredients),
            len(document.recipes),
            len(document.day_logs),
        )
