"""
Candidate sources for the plain query mode.

Candidates come from an explicit list, from a directory listing, or from the
lines of standard input, in that order of preference.
"""

import sys
from pathlib import Path
from typing import Iterable, List, Optional, TextIO, Union
import logging

from ..errors import FilesystemError, NoMatchError
from ..selector import close_enough
from .fs_listing import DirectoryLister, EntryKind


logger = logging.getLogger(__name__)


def split_lines(text: str) -> List[str]:
    """
    Split text on newlines only, dropping a carriage return before each one.

    Form feeds, vertical tabs and Unicode line separators stay inside the
    line they belong to. A trailing newline does not produce an empty line.
    """
    lines = text.split('\n')
    if lines[-1] == '':
        lines.pop()
    return [line[:-1] if line.endswith('\r') else line for line in lines]


def read_lines(stream: Optional[TextIO] = None) -> List[str]:
    """
    Read candidate lines from a text stream (stdin by default).

    Raises:
        FilesystemError: If the stream cannot be read or decoded
    """
    stream = stream if stream is not None else sys.stdin
    try:
        return split_lines(stream.read())
    except (OSError, UnicodeDecodeError) as e:
        raise FilesystemError(f"failed to read from stdin: {e}") from e


def fetch_input_lines(inputs: Optional[Iterable[str]] = None,
                      kind: Optional[EntryKind] = None,
                      directory: Optional[Union[str, Path]] = None,
                      stream: Optional[TextIO] = None,
                      lister: Optional[DirectoryLister] = None) -> List[str]:
    """
    Collect the candidate lines for a plain query.

    Args:
        inputs: Explicit candidates; used whenever given
        kind: When set (and no inputs), list ``directory`` keeping this kind
        directory: Directory to list, current directory by default
        stream: Stream read when neither inputs nor kind are given
        lister: Lister used for directory listings

    Returns:
        Candidate lines in source order
    """
    if inputs is not None:
        return list(inputs)

    if kind is not None:
        lister = lister or DirectoryLister()
        return lister.list_directory(directory or Path.cwd(), kind)

    return read_lines(stream)


def sequential_search(queries: List[str], kind: EntryKind = EntryKind.ANY,
                      directory: Optional[Union[str, Path]] = None,
                      lister: Optional[DirectoryLister] = None) -> List[str]:
    """
    Resolve queries one level at a time below ``directory``.

    Each query is matched against the listing of the directory chosen by the
    previous query. Every level but the last lists directories only; the last
    one lists ``kind``.

    Args:
        queries: One query per directory level
        kind: Entry kind for the final level
        directory: Starting directory, current directory by default
        lister: Lister used for the listings

    Returns:
        The selected entry name for every level

    Raises:
        NoMatchError: For the first level whose query matches nothing
    """
    lister = lister or DirectoryLister()
    working_path = Path(directory) if directory is not None else Path.cwd()
    outputs = []

    for i, query in enumerate(queries):
        last_query = i == len(queries) - 1
        strategy = kind if last_query else EntryKind.DIRECTORIES

        result = close_enough(lister.list_directory(working_path, strategy), query)
        if result is None:
            raise NoMatchError(query, working_path)

        logger.debug(f"Level {i + 1}: '{query}' -> {result}")
        outputs.append(result)
        working_path = working_path / result

    return outputs
