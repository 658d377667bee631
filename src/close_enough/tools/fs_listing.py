"""
Filesystem listing for close-enough.

This module reads directory contents for the resolver and the plain query
mode: immediate listings filtered by entry type, immediate subdirectories,
and a breadth-first walk of a whole subtree for recursive search. Read
failures are never skipped; they surface as FilesystemError.
"""

import os
from collections import deque
from enum import Enum
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Union
import logging

from ..errors import FilesystemError
from ..models.config import ResolverConfig


logger = logging.getLogger(__name__)


class EntryKind(Enum):
    """Which directory entries a listing keeps."""
    FILES = "files"
    DIRECTORIES = "directories"
    ANY = "any"

    def accepts(self, entry: os.DirEntry) -> bool:
        """Check if a directory entry belongs to this kind (symlinks are followed)."""
        if self is EntryKind.FILES:
            return entry.is_file()
        if self is EntryKind.DIRECTORIES:
            return entry.is_dir()
        return True


class DirectoryLister:
    """
    Reads directory listings according to the resolver configuration.

    Listings are read fresh on every call; nothing is cached between
    resolution steps.
    """

    def __init__(self, config: Optional[ResolverConfig] = None):
        """
        Initialize the lister.

        Args:
            config: Resolver settings (sorting, ignore patterns, symlinks, depth)
        """
        self.config = config or ResolverConfig()
        self._stats = {
            'directories_listed': 0,
            'entries_ignored': 0,
            'errors': 0
        }

    def list_directory(self, directory: Union[str, Path], kind: EntryKind = EntryKind.ANY,
                       sort: Optional[bool] = None) -> List[str]:
        """
        List the names of the entries of a directory.

        Args:
            directory: Directory to read
            kind: Entry types to keep
            sort: Sort names; defaults to the configured sort_listings

        Returns:
            Entry names, sorted or in filesystem order

        Raises:
            FilesystemError: If the directory or one of its entries cannot be read
        """
        directory = Path(directory)
        names = []

        try:
            with os.scandir(directory) as entries:
                for entry in entries:
                    if kind.accepts(entry):
                        names.append(entry.name)
        except OSError as e:
            self._stats['errors'] += 1
            reason = e.strerror or str(e)
            raise FilesystemError(f"failed to read contents of '{directory}': {reason}", directory) from e

        self._stats['directories_listed'] += 1

        should_sort = self.config.sort_listings if sort is None else sort
        if should_sort:
            names.sort()

        logger.debug(f"Listed {len(names)} {kind.value} entries in {directory}")
        return names

    def list_subdirectories(self, directory: Union[str, Path], sort: Optional[bool] = None) -> List[Path]:
        """
        List the immediate subdirectories of a directory, minus ignored names.

        Args:
            directory: Directory to read
            sort: Sort by name; defaults to the configured sort_listings

        Returns:
            Full paths of the subdirectories
        """
        directory = Path(directory)
        subdirectories = []

        for name in self.list_directory(directory, EntryKind.DIRECTORIES, sort=sort):
            if self.config.should_ignore(name):
                self._stats['entries_ignored'] += 1
                continue
            subdirectories.append(directory / name)

        return subdirectories

    def walk_subdirectories(self, root: Union[str, Path]) -> Iterator[Path]:
        """
        Walk every directory below ``root`` in breadth-first order.

        Siblings are always visited in name order so that the first acceptable
        directory is the same on every run. Symlinked directories are yielded
        but only descended into when follow_symlinks is set.

        Args:
            root: Directory whose descendants are walked (not yielded itself)

        Yields:
            Paths of descendant directories, nearest first
        """
        queue = deque([(Path(root), 0)])
        max_depth = self.config.max_depth

        while queue:
            current, depth = queue.popleft()
            if max_depth is not None and depth >= max_depth:
                continue

            for subdirectory in self.list_subdirectories(current, sort=True):
                yield subdirectory
                if self.config.follow_symlinks or not subdirectory.is_symlink():
                    queue.append((subdirectory, depth + 1))

    def get_stats(self) -> Dict[str, int]:
        """Get statistics about the listings performed so far."""
        return self._stats.copy()

    def reset_stats(self) -> None:
        """Reset the statistics counters."""
        self._stats = {
            'directories_listed': 0,
            'entries_ignored': 0,
            'errors': 0
        }
