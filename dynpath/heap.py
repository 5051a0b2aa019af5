from typing import List, Optional, Tuple


HeapEntry = Tuple[int, float]


class LazyPriorityQueue:
    """
    Array-backed binary min-heap over (id, key) entries.

    Slot 0 is an unused sentinel, so the children of slot i are 2i and 2i+1.
    There is no decrease-key: callers push a fresh entry when a key improves
    and discard stale entries when they are popped.
    """

    def __init__(self, capacity: int = 16):
        self._capacity = max(1, int(capacity)) + 1
        self._slots: List[Optional[HeapEntry]] = [None] * self._capacity
        self._size = 0

    def __len__(self) -> int:
        return self._size

    @property
    def capacity(self) -> int:
        return self._capacity - 1

    def is_empty(self) -> bool:
        return self._size == 0

    def insert(self, item_id: int, key: float):
        if self._size == self._capacity - 1:
            self._grow()
        self._size += 1
        self._slots[self._size] = (item_id, float(key))
        self._sift_up(self._size)

    def peek(self) -> Optional[HeapEntry]:
        if self._size == 0:
            return None
        return self._slots[1]

    def extract_min(self) -> Optional[HeapEntry]:
        if self._size == 0:
            return None
        top = self._slots[1]
        self._slots[1] = self._slots[self._size]
        self._slots[self._size] = None
        self._size -= 1
        if self._size > 0:
            self._sift_down(1)
        return top

    def _grow(self):
        self._slots.extend([None] * self._capacity)
        self._capacity *= 2

    def _key(self, i: int) -> float:
        return self._slots[i][1]  # type: ignore[index]

    def _swap(self, i: int, j: int):
        self._slots[i], self._slots[j] = self._slots[j], self._slots[i]

    def _sift_up(self, i: int):
        while i > 1 and self._key(i) < self._key(i // 2):
            self._swap(i, i // 2)
            i //= 2

    def _sift_down(self, i: int):
        while True:
            smallest = i
            left, right = 2 * i, 2 * i + 1
            if left <= self._size and self._key(left) < self._key(smallest):
                smallest = left
            if right <= self._size and self._key(right) < self._key(smallest):
                smallest = right
            if smallest == i:
                return
            self._swap(i, smallest)
            i = smallest
