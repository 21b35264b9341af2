from dataclasses import dataclass

@dataclass(slots=True)
class TileTypeRegistry:
    """Empty tag component marking the single entity that stores the board's orb types.

    The same entity also has a TileTypes component with the configured and spawnable types.
    """
    pass
