from typing import Hashable, NamedTuple


class MatchEvent(NamedTuple):
    """One resolved match group: the orb type and how many orbs it held."""
    token: Hashable
    size: int
