"""
Companion shell scripts for close-enough.

A program cannot change its parent shell's directory, so ``cle cd`` only
prints the resolved path. The scripts here wrap it in shell functions that
perform the ``cd`` and keep the history file up to date.
"""

from typing import Dict, List

from .errors import CloseEnoughError


CE_SCRIPT = """\
# ce: fuzzy cd built on 'cle cd'
# Load it with:  eval "$(cle gen-script ce)"
# This function hides the ce command; run `command ce` for plain queries.
ce() {
    local target
    target="$(cle cd "$@")" || return $?
    builtin cd -- "$target" || return $?
    cle history add "$PWD" 2>/dev/null
    return 0
}
"""

CJ_SCRIPT = """\
# cj: jump to the closest directory in the close-enough history
# Load it with:  eval "$(cle gen-script cj)"
cj() {
    local target
    target="$(cle history find "$1")" || return $?
    builtin cd -- "$target"
}
"""

SCRIPTS: Dict[str, str] = {
    'ce': CE_SCRIPT,
    'cj': CJ_SCRIPT,
}


class ScriptNotFoundError(CloseEnoughError):
    """Raised when asked for a script that does not exist."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Expected script name: No script available named '{name}'")


def available_scripts() -> List[str]:
    """Names of the scripts that can be generated."""
    return sorted(SCRIPTS)


def generate_script(name: str) -> str:
    """
    Get the source of a companion script.

    Raises:
        ScriptNotFoundError: If no script has that name
    """
    try:
        return SCRIPTS[name]
    except KeyError:
        raise ScriptNotFoundError(name) from None
