"""File-backed storage for the state document."""

import os
import tempfile
from dataclasses import dataclass
from pathlib import Path

from kcal_tracker.services.state import DocumentStore


@dataclass
class JsonFileStore(DocumentStore):
    """Stores the serialized document in a single JSON file."""

    path: Path

    def load(self) -> str | None:
        """Return the file contents, or None when the file does not exist."""
        try:
            return self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None

    def save(self, text: str) -> None:
        """Write atomically via a temporary sibling file."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self.path.name}.", dir=self.path.parent
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(text)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
