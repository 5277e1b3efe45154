from __future__ import annotations

from typing import Callable, Iterable, Iterator, Mapping, Optional

Mutation = Callable[[], object]


class MutationSequence:
    """
    Ordered, immutable list of mutations.

    A position may be empty (None): looking it up yields no operation
    instead of raising, so stepping onto a gap is a no-op.
    """

    __slots__ = ("_mutations",)

    def __init__(self, mutations: Iterable[Optional[Mutation]]) -> None:
        items = tuple(mutations)
        if not items:
            raise ValueError("mutation sequence must have at least one position")
        for i, m in enumerate(items):
            if m is not None and not callable(m):
                raise TypeError(f"mutation at index {i} is not callable: {m!r}")
        self._mutations: tuple[Optional[Mutation], ...] = items

    @classmethod
    def from_mapping(cls, mapping: Mapping[int, Mutation], *, length: int) -> "MutationSequence":
        """
        Build a partial sequence: positions missing from `mapping` are gaps.
        """
        if length < 1:
            raise ValueError("length must be >= 1")
        bad = [k for k in mapping if not 0 <= k < length]
        if bad:
            raise ValueError(f"mapping keys outside [0, {length - 1}]: {sorted(bad)}")
        return cls(mapping.get(i) for i in range(length))

    def __len__(self) -> int:
        return len(self._mutations)

    def __iter__(self) -> Iterator[Optional[Mutation]]:
        return iter(self._mutations)

    @property
    def last_index(self) -> int:
        return len(self._mutations) - 1

    def get(self, index: int) -> Optional[Mutation]:
        if 0 <= index < len(self._mutations):
            return self._mutations[index]
        return None

    def is_defined(self, index: int) -> bool:
        return self.get(index) is not None
