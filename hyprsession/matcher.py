"""Find the live window corresponding to a saved one.

Addresses and pids are not preserved across restarts, so the lookup relies on
a ranking of heuristics, from the most specific to the least reliable:

1. same initial title
2. same initial class
3. same class
4. live class containing the saved class
5. same pid (reassigned by the OS, last resort)
"""

from collections.abc import Callable, Container, Iterable

from .models import ClientInfo, SessionEntry

__all__ = ["MATCH_RULES", "find_matching_window"]

MatchRule = Callable[[ClientInfo, SessionEntry], bool]


def _same(prop: str) -> MatchRule:
    """Compare `prop` of both windows, never matching an empty saved value."""

    def _match(live: ClientInfo, saved: SessionEntry) -> bool:
        value = saved.get(prop)
        return bool(value) and live.get(prop) == value

    return _match


def _class_contains(live: ClientInfo, saved: SessionEntry) -> bool:
    klass = saved.get("class")
    return bool(klass) and klass in (live.get("class") or "")


MATCH_RULES: tuple[tuple[str, MatchRule], ...] = (
    ("initialTitle", _same("initialTitle")),
    ("initialClass", _same("initialClass")),
    ("class", _same("class")),
    ("class contains", _class_contains),
    ("pid", _same("pid")),
)


def find_matching_window(saved: SessionEntry, windows: Iterable[ClientInfo], exclude: Container[str] = ()) -> ClientInfo | None:
    """Return the best live match for `saved`, or None.

    Args:
        saved: the window from the session file
        windows: the live windows
        exclude: addresses already restored during this pass
    """
    candidates = [win for win in windows if win.get("address") not in exclude]
    for _, rule in MATCH_RULES:
        for win in candidates:
            if rule(win, saved):
                return win
    return None
