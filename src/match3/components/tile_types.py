from dataclasses import dataclass, field
from typing import Hashable, Iterable, List

@dataclass(slots=True)
class TileTypes:
    """Configured orb types stored on a single entity.

    ``types`` is the ordered list the board samples from at construction.
    ``spawnable`` is the default refill set used by evaluate; it is always a
    non-empty, order-preserving subset of ``types`` unless explicitly emptied.
    """
    types: List[Hashable]
    spawnable: List[Hashable] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.spawnable:
            self.set_spawnable(self.spawnable)
        else:
            self.spawnable = list(self.types)

    def all_types(self) -> List[Hashable]:
        return list(self.types)

    def spawnable_types(self) -> List[Hashable]:
        return list(self.spawnable)

    def set_spawnable(self, type_names: Iterable[Hashable], *, allow_empty: bool = False) -> None:
        filtered: List[Hashable] = []
        for name in type_names:
            if name in self.types and name not in filtered:
                filtered.append(name)
        if not filtered and not allow_empty:
            filtered = list(self.types)
        self.spawnable = filtered

    def enable_type(self, type_name: Hashable) -> None:
        if type_name in self.types and type_name not in self.spawnable:
            self.spawnable.append(type_name)

    def disable_type(self, type_name: Hashable, *, allow_empty: bool = False) -> None:
        self.spawnable = [name for name in self.spawnable if name != type_name]
        if not self.spawnable and not allow_empty:
            self.spawnable = list(self.types)
