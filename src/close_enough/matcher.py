"""
Abbreviation matcher for close-enough.

A query matches a candidate when its characters appear in the candidate in
order, where each run of consecutive matching characters may begin anywhere
but, once it ends, the search for the next character resumes at the start of
the candidate's next word. Words begin at the start of the candidate, after
any non-alphanumeric character, and at every uppercase letter.

    >>> matches("A very_big-longMatch", "avblm")
    True
    >>> matches("averybiglongmatch", "avblm")
    False
"""


def same_char(a: str, b: str) -> bool:
    """Compare two characters by the first code point of their lowercase forms."""
    return a.lower()[:1] == b.lower()[:1]


def skip_word(candidate: str, pos: int) -> int:
    """
    Advance past the rest of the word that contains ``pos``.

    Stops on the first non-alphanumeric or uppercase character, or at the end
    of the candidate.

    Args:
        candidate: The string being scanned
        pos: Current cursor position within ``candidate``

    Returns:
        Position of the next word boundary
    """
    while pos < len(candidate):
        c = candidate[pos]
        if not c.isalnum() or c.isupper():
            break
        pos += 1
    return pos


def matches(candidate: str, query: str) -> bool:
    """
    Check whether ``query`` is an abbreviation of ``candidate``.

    Args:
        candidate: Text to test, e.g. a directory name or an input line
        query: Abbreviated text typed by the user

    Returns:
        True if every character of the query was consumed by some matching run
    """
    cand_pos = 0
    query_pos = 0

    while query_pos < len(query):
        # Look for the start of the next run
        while cand_pos < len(candidate) and not same_char(query[query_pos], candidate[cand_pos]):
            cand_pos += 1

        if cand_pos >= len(candidate):
            break

        while (query_pos < len(query) and cand_pos < len(candidate)
               and same_char(query[query_pos], candidate[cand_pos])):
            query_pos += 1
            cand_pos += 1

        cand_pos = skip_word(candidate, cand_pos)

    return query_pos == len(query)
