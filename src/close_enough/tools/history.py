"""
Directory history store for close-enough.

The history is a plain text file with one absolute directory path per line,
kept sorted and free of duplicates. Queries are matched against the last
component of each entry, so ``cle history find proj`` can jump back to
``/home/me/src/project`` from anywhere.
"""

import os
from pathlib import Path
from typing import List, Optional, Union
import logging

from ..errors import FilesystemError
from ..models.config import HistoryConfig
from ..selector import close_enough
from .inputs import split_lines


logger = logging.getLogger(__name__)


class HistoryStore:
    """
    Line-based store of previously visited directories.

    The file is re-read on every operation; mutations rewrite it whole.
    """

    def __init__(self, config: Optional[HistoryConfig] = None):
        self.config = config or HistoryConfig()

    @property
    def path(self) -> Path:
        """Location of the history file."""
        return Path(self.config.path)

    def entries(self) -> List[str]:
        """
        Read all history entries.

        Returns:
            Entries in file order; empty if the file does not exist yet

        Raises:
            FilesystemError: If the file exists but cannot be read
        """
        if not self.path.exists():
            return []

        try:
            with open(self.path, encoding='utf-8', newline='') as f:
                content = f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise FilesystemError(f"failed to read history file '{self.path}': {e}", self.path) from e

        return [line for line in split_lines(content) if line.strip()]

    def add(self, directory: Union[str, Path]) -> str:
        """
        Record a directory in the history.

        Args:
            directory: Directory to record; made absolute before storing

        Returns:
            The entry as stored
        """
        entry = os.path.abspath(os.path.expanduser(str(directory)))
        entries = set(self.entries())
        entries.add(entry)

        if len(entries) > self.config.max_entries:
            entries = self._trim(entries, keep=entry)

        self._write(entries)
        logger.debug(f"Added history entry {entry}")
        return entry

    def remove(self, directory: Union[str, Path]) -> bool:
        """
        Remove a directory from the history.

        Returns:
            True if the entry was present
        """
        entry = os.path.abspath(os.path.expanduser(str(directory)))
        entries = set(self.entries())

        if entry not in entries:
            return False

        entries.discard(entry)
        self._write(entries)
        logger.debug(f"Removed history entry {entry}")
        return True

    def find(self, query: str) -> Optional[str]:
        """
        Find the entry whose last path component best matches ``query``.

        Shortest component wins; on ties the first entry in file order does.

        Returns:
            The full history entry, or None if nothing matched
        """
        entries = self.entries()
        names = [self._last_component(entry) for entry in entries]

        best_name = close_enough(names, query)
        if best_name is None:
            return None

        return entries[names.index(best_name)]

    def prune(self) -> List[str]:
        """
        Drop entries whose directories no longer exist.

        Returns:
            The removed entries
        """
        entries = self.entries()
        missing = [entry for entry in entries if not os.path.isdir(entry)]

        if missing:
            self._write(set(entries) - set(missing))
            logger.info(f"Pruned {len(missing)} missing directories from history")

        return missing

    def _trim(self, entries: set, keep: str) -> set:
        """Shrink ``entries`` to max_entries, dropping missing directories first."""
        existing = {entry for entry in entries if entry == keep or os.path.isdir(entry)}

        overflow = len(existing) - self.config.max_entries
        if overflow > 0:
            droppable = sorted(entry for entry in existing if entry != keep)
            existing -= set(droppable[:overflow])

        logger.debug(f"Trimmed history from {len(entries)} to {len(existing)} entries")
        return existing

    def _write(self, entries) -> None:
        """Write entries sorted and deduplicated, replacing the file."""
        lines = sorted(set(entries))
        temp_path = self.path.with_name(self.path.name + '.tmp')

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            temp_path.write_text(''.join(f"{line}\n" for line in lines), encoding='utf-8')
            os.replace(temp_path, self.path)
        except OSError as e:
            raise FilesystemError(f"failed to write history file '{self.path}': {e}", self.path) from e

    @staticmethod
    def _last_component(entry: str) -> str:
        name = Path(entry).name
        return name if name else entry
