from typing import Iterable, Iterator, Optional, Set


class UnlockMemo:
    """Unlock codes that have already been committed to the live graph."""

    def __init__(self, codes: Optional[Iterable[int]] = None):
        self._codes: Set[int] = set(int(c) for c in codes) if codes else set()

    def add(self, code: int):
        self._codes.add(int(code))

    def __contains__(self, code: object) -> bool:
        return code in self._codes

    def __len__(self) -> int:
        return len(self._codes)

    def __iter__(self) -> Iterator[int]:
        return iter(sorted(self._codes))

    def __repr__(self) -> str:
        return f"UnlockMemo({sorted(self._codes)})"
