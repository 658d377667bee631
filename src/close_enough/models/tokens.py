"""
Query token models for close-enough.

Each argument given to the directory resolver is parsed exactly once into a
QueryToken whose kind decides how it moves the working path. The resolver
never inspects raw prefixes itself.
"""

from enum import Enum
from pathlib import Path
from typing import Iterable, List, Optional
from pydantic import BaseModel, ConfigDict, Field, model_validator


ROOT_PREFIX = '/'
HOME_PREFIX = '~'
ANCESTOR_PREFIX = '..'
RECURSIVE_PREFIX = '%'


class TokenKind(Enum):
    """Syntactic kinds of resolver tokens."""
    ROOT = "root"
    ANCESTOR_POP = "ancestor_pop"
    ANCESTOR_SEARCH = "ancestor_search"
    RECURSIVE = "recursive"
    PLAIN = "plain"


class QueryToken(BaseModel):
    """
    A single parsed resolver token.

    Attributes:
        kind: How the token moves the working path
        value: Literal path for ROOT, the query text for searches and plain
            tokens, empty for ANCESTOR_POP
        count: Number of segments to pop (ANCESTOR_POP only)
        raw: The token exactly as the user typed it
    """

    model_config = ConfigDict(frozen=True)

    kind: TokenKind = Field(..., description="Token kind")
    value: str = Field("", description="Path or query carried by the token")
    count: Optional[int] = Field(None, ge=0, description="Segments to pop")
    raw: str = Field(..., description="Original token text")

    @model_validator(mode='after')
    def validate_count(self):
        """Only ancestor pops carry a count, and they always do."""
        if self.kind is TokenKind.ANCESTOR_POP and self.count is None:
            raise ValueError("Ancestor pop tokens require a count")
        if self.kind is not TokenKind.ANCESTOR_POP and self.count is not None:
            raise ValueError(f"{self.kind.value} tokens do not take a count")
        return self

    def is_plain(self) -> bool:
        """Check if this token takes part in chained narrowing."""
        return self.kind is TokenKind.PLAIN

    def __str__(self) -> str:
        return self.raw


def parse_token(raw: str) -> QueryToken:
    """
    Parse one resolver argument.

    Precedence: a leading ``/`` (or ``~``) makes a root token and is kept
    verbatim; otherwise trailing slashes are dropped and the ``..`` and ``%``
    prefixes are checked in that order; anything else is plain.

    Args:
        raw: Token text as given on the command line

    Returns:
        The parsed QueryToken
    """
    if raw.startswith(ROOT_PREFIX):
        return QueryToken(kind=TokenKind.ROOT, value=raw, raw=raw)

    if raw == HOME_PREFIX or raw.startswith(HOME_PREFIX + '/'):
        return QueryToken(kind=TokenKind.ROOT, value=str(Path(raw).expanduser()), raw=raw)

    token = raw.rstrip('/')

    if token.startswith(ANCESTOR_PREFIX):
        remainder = token[len(ANCESTOR_PREFIX):]
        if not remainder:
            return QueryToken(kind=TokenKind.ANCESTOR_POP, count=1, raw=raw)
        if remainder.isascii() and remainder.isdigit():
            return QueryToken(kind=TokenKind.ANCESTOR_POP, count=int(remainder), raw=raw)
        return QueryToken(kind=TokenKind.ANCESTOR_SEARCH, value=remainder, raw=raw)

    if token.startswith(RECURSIVE_PREFIX):
        return QueryToken(kind=TokenKind.RECURSIVE, value=token[len(RECURSIVE_PREFIX):], raw=raw)

    return QueryToken(kind=TokenKind.PLAIN, value=token, raw=raw)


def parse_tokens(raw_tokens: Iterable[str]) -> List[QueryToken]:
    """Parse a sequence of resolver arguments, preserving order."""
    return [parse_token(raw) for raw in raw_tokens]
