"""
Token-driven directory resolution for close-enough.

The resolver starts from a working directory and consumes query tokens in
order. Root tokens replace the working path, ancestor tokens pop or search
its components, recursive tokens search the whole subtree breadth-first, and
runs of plain tokens narrow the tree level by level before the shortest
surviving path is committed. The first token that cannot be applied aborts
the whole resolution.
"""

import os
from pathlib import Path
from typing import Iterable, List, Optional, Union
import logging

from ..errors import MalformedTokenError, NoMatchError
from ..matcher import matches
from ..models.config import AncestorOverflow, ResolverConfig
from ..models.tokens import QueryToken, TokenKind, parse_token
from .fs_listing import DirectoryLister


logger = logging.getLogger(__name__)


class PathResolver:
    """
    Resolves a sequence of query tokens to a directory path.

    Each call to resolve() owns its working path; the resolver itself only
    holds configuration and the directory lister.
    """

    def __init__(self, config: Optional[ResolverConfig] = None, lister: Optional[DirectoryLister] = None):
        """
        Initialize the resolver.

        Args:
            config: Resolver settings
            lister: Directory lister; built from ``config`` when omitted
        """
        self.config = config or ResolverConfig()
        self.lister = lister or DirectoryLister(self.config)

    def resolve(self, tokens: Iterable[Union[str, QueryToken]], start: Optional[Union[str, Path]] = None) -> Path:
        """
        Resolve query tokens to a directory.

        Args:
            tokens: Raw token strings or already parsed QueryTokens
            start: Directory to start from, current directory by default

        Returns:
            The final working path

        Raises:
            NoMatchError: If a token matched no directory
            MalformedTokenError: If an ancestor pop overflows and the
                configured policy is ``error``
            FilesystemError: If a directory cannot be listed
        """
        parsed = [token if isinstance(token, QueryToken) else parse_token(token) for token in tokens]
        working_path = Path(os.path.abspath(start)) if start is not None else Path.cwd()
        cursor = 0

        while cursor < len(parsed):
            token = parsed[cursor]

            if token.kind is TokenKind.PLAIN:
                chain = self._take_chain(parsed, cursor)
                working_path = self._resolve_chain(working_path, chain)
                cursor += len(chain)
                continue

            if token.kind is TokenKind.ROOT:
                working_path = Path(token.value)
            elif token.kind is TokenKind.ANCESTOR_POP:
                working_path = self._pop_ancestors(working_path, token)
            elif token.kind is TokenKind.ANCESTOR_SEARCH:
                working_path = self._search_ancestors(working_path, token.value)
            elif token.kind is TokenKind.RECURSIVE:
                working_path = self._search_descendants(working_path, token.value)

            logger.debug(f"{token.kind.value} '{token.raw}' -> {working_path}")
            cursor += 1

        return working_path

    def _take_chain(self, tokens: List[QueryToken], cursor: int) -> List[QueryToken]:
        """Collect the run of plain tokens starting at ``cursor``."""
        end = cursor
        while end < len(tokens) and tokens[end].is_plain():
            end += 1
        return tokens[cursor:end]

    def _pop_ancestors(self, working_path: Path, token: QueryToken) -> Path:
        """Pop ``token.count`` segments, honouring the overflow policy at the root."""
        path = working_path
        for _ in range(token.count):
            parent = path.parent
            if parent == path:
                if self.config.ancestor_overflow is AncestorOverflow.ERROR:
                    raise MalformedTokenError(
                        token.raw,
                        f"cannot pop {token.count} segments from '{working_path}'"
                    )
                logger.debug(f"Ancestor pop '{token.raw}' stopped at {path}")
                break
            path = parent
        return path

    def _search_ancestors(self, working_path: Path, query: str) -> Path:
        """
        Truncate the working path at the first component matching ``query``.

        Components are tested from the filesystem root downwards.
        """
        parts = working_path.parts
        for i, part in enumerate(parts):
            if matches(part, query):
                return Path(*parts[:i + 1])
        raise NoMatchError(query, working_path)

    def _search_descendants(self, working_path: Path, query: str) -> Path:
        """Find the nearest descendant directory whose name matches ``query``."""
        for directory in self.lister.walk_subdirectories(working_path):
            if matches(directory.name, query):
                return directory
        raise NoMatchError(query, working_path)

    def _resolve_chain(self, working_path: Path, chain: List[QueryToken]) -> Path:
        """
        Narrow the tree one level per plain token and pick the shortest survivor.

        Every path in the working set is replaced by those of its immediate
        subdirectories that match the next token. Ties on total path length
        keep the first path in listing order.
        """
        working_set = [working_path]

        for token in chain:
            working_set = [
                subdirectory
                for path in working_set
                for subdirectory in self.lister.list_subdirectories(path)
                if matches(subdirectory.name, token.value)
            ]
            if not working_set:
                raise NoMatchError(token.value, working_path)
            logger.debug(f"Chain token '{token.raw}' kept {len(working_set)} candidates")

        return min(working_set, key=lambda path: len(str(path)))
