"""
Shortest-wins selection over candidate strings.
"""

import logging
from typing import Iterable, List, Optional

from .errors import NoMatchError
from .matcher import matches


logger = logging.getLogger(__name__)


def select_shortest(proposed: str, previous: Optional[str]) -> str:
    """Keep ``previous`` unless ``proposed`` is strictly shorter."""
    if previous is None:
        return proposed
    return proposed if len(proposed) < len(previous) else previous


def close_enough(options: Iterable[str], query: str) -> Optional[str]:
    """
    Return the closest match for ``query`` among ``options``.

    Every option is tested with the abbreviation matcher; of those that
    match, the shortest is returned. When several matches share the minimal
    length, the first one encountered wins.

    Args:
        options: Candidate strings, consumed once in order
        query: Abbreviated text to look for

    Returns:
        The selected candidate, or None if nothing matched

    Example:
        >>> close_enough(["one two", "three four", "five six"], "owo")
        'one two'
    """
    shortest_answer = None

    for option in options:
        if matches(option, query):
            shortest_answer = select_shortest(option, shortest_answer)

    logger.debug(f"Closest match for '{query}': {shortest_answer!r}")
    return shortest_answer


def closest_each(options: Iterable[str], queries: Iterable[str]) -> List[str]:
    """
    Resolve several queries against the same set of options.

    Args:
        options: Candidate strings; materialised so each query sees all of them
        queries: Queries to resolve, in order

    Returns:
        One selected candidate per query, in query order

    Raises:
        NoMatchError: For the first query that matched nothing
    """
    candidates = list(options)
    results = []

    for query in queries:
        result = close_enough(candidates, query)
        if result is None:
            raise NoMatchError(query)
        results.append(result)

    return results
