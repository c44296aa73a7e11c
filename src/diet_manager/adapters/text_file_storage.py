"""Whole-file text storage for the flat-record repositories."""

import logging
from dataclasses import dataclass
from pathlib import Path

from diet_manager.errors import StorageError

_logger = logging.getLogger(__name__)


@dataclass
class TextFileStorage:
    """Reads and rewrites UTF-8 text files under a data directory."""

    root: Path

    def path_for(self, file_name: str) -> Path:
        """Return the full path of a data file."""
        return self.root / file_name

    def read_text(self, file_name: str) -> str:
        """Return a file's contents, or an empty string if it does not exist."""
        path = self.path_for(file_name)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return ""
        except (OSError, UnicodeDecodeError) as exc:
            _logger.exception("Failed to read data file: path=%s", path)
            raise StorageError(str(path), f"cannot read: {exc}") from exc

    def write_text(self, file_name: str, text: str) -> None:
        """Truncate a file and write the full text."""
        path = self.path_for(file_name)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with path.open("w", encoding="utf-8", newline="\n") as handle:
                handle.write(text)
        except OSError as exc:
            _logger.exception("Failed to write data file: path=%s", path)
            raise StorageError(str(path), f"cannot write: {exc}") from exc
