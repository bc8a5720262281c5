from collections import deque
from typing import Deque, Hashable, Optional

from exceptions import ConfigurationError


class TabuList:
    """Fixed-capacity FIFO history; the oldest entry is evicted on overflow."""

    def __init__(self, capacity: int):
        if capacity <= 0:
            raise ConfigurationError(f"tabu list capacity must be positive, got {capacity}")
        self.capacity = capacity
        self._items: Deque[Hashable] = deque(maxlen=capacity)

    def push(self, item: Hashable) -> None:
        self._items.append(item) #deque drops the oldest entry when full

    def contains(self, item: Hashable) -> bool:
        return item in self._items

    def __contains__(self, item: Hashable) -> bool:
        return self.contains(item)

    def peek(self) -> Optional[Hashable]: #oldest entry
        return self._items[0] if self._items else None

    def pop(self) -> Hashable:
        return self._items.popleft()

    def clear(self) -> None:
        self._items.clear()

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"TabuList(capacity={self.capacity}, size={len(self._items)})"
