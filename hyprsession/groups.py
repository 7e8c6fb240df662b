"""Bookkeeping of window groups during a restore pass.

Saved groups are keyed by their saved member addresses. While restoring,
every window joining a group is recorded under that key, so the first one
creates the group and the next ones are moved into it.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from .models import ClientInfo, Direction

__all__ = ["GroupTracker", "group_key"]


def group_key(members: Iterable[str]) -> str:
    """Identifier of a saved group."""
    return ":".join(members)


@dataclass
class GroupTracker:
    """Live addresses collected per saved group.

    A `None` address stands for a window which was launched and whose
    address isn't known yet.
    """

    groups: dict[str, list[str | None]] = field(default_factory=dict)

    def observe(self, members: Sequence[str], address: str | None) -> bool:
        """Record `address` as part of the saved group `members`.

        Returns:
            False if the group is new (it must be created), True if it already exists
        """
        key = group_key(members)
        if key in self.groups:
            self.groups[key].append(address)
            return True
        self.groups[key] = [address]
        return False

    def is_known(self, members: Sequence[str]) -> bool:
        """Tell if a window of this group was already restored."""
        return group_key(members) in self.groups

    def count(self, members: Sequence[str]) -> int:
        """Number of windows restored for this group."""
        return len(self.groups.get(group_key(members), []))

    def side_of(self, members: Sequence[str], candidate: ClientInfo, windows: Iterable[ClientInfo]) -> Direction:
        """Side of the group's base window, seen from `candidate`.

        The base window is the first one recorded for the group, located in
        the fresh `windows` list. RIGHT when it can't be found.
        """
        base_address = next((addr for addr in self.groups.get(group_key(members), []) if addr), None)
        if base_address is None:
            return Direction.RIGHT
        by_address = {win["address"]: win for win in windows}
        base = by_address.get(base_address)
        if base is None:
            return Direction.RIGHT
        current = by_address.get(candidate["address"], candidate)
        if base["at"][0] >= current["at"][0]:
            return Direction.RIGHT
        return Direction.LEFT
