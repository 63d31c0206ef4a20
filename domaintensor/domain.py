"""
Index domains of tensors.

A domain is an immutable set of keys. One-axis tensors are defined over a
:class:`Domain1` (an integer span or an explicit key set), two-axis tensors over
a :class:`Domain2`, the product of a row domain and a column domain.

Two domains are compatible iff they are structurally equal, i.e. hold the same
keys. Tensors combined elementwise must share a compatible domain.
"""

import itertools
import numbers
from abc import ABC, abstractmethod
from typing import Any, FrozenSet, Hashable, Iterable, Iterator, Tuple


class Domain(ABC):
    """
    Base class of all index domains.

    Subclasses implement iteration, size and membership. Domains are immutable
    and hashable so they can be compared cheaply before elementwise operations.
    """

    @abstractmethod
    def __iter__(self) -> Iterator[Any]:
        raise NotImplementedError

    @abstractmethod
    def __len__(self) -> int:
        raise NotImplementedError

    @abstractmethod
    def __contains__(self, key: Any) -> bool:
        raise NotImplementedError

    @property
    def size(self) -> int:
        """
        Number of keys in this domain.

        Returns:
            int: The domain size.
        """
        return len(self)


class Domain1(Domain):
    """
    A domain of single keys, used by one-axis tensors.

    Equality is key-set equality, so ``IntSpanDomain(0, 3)`` equals
    ``SetDomain({0, 1, 2})``.
    """

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Domain1):
            return NotImplemented
        if len(self) != len(other):
            return False
        return all(key in other for key in self)

    def __hash__(self) -> int:
        # Equal key sets always have equal sizes.
        return hash(("Domain1", len(self)))


class IntSpanDomain(Domain1):
    """
    The half-open integer range ``[start, end)``.

    Examples:
        >>> domain = IntSpanDomain(0, 3)
        >>> list(domain)
        [0, 1, 2]
        >>> 3 in domain
        False
    """

    def __init__(self, start: int, end: int):
        """
        Initialize an integer span.

        Args:
            start (int): First key, inclusive.
            end (int): Last key, exclusive.

        Raises:
            ValueError: If ``end`` is smaller than ``start``.
        """
        if end < start:
            raise ValueError(f"Invalid span [{start}, {end})")
        self.start = int(start)
        self.end = int(end)

    def __iter__(self) -> Iterator[int]:
        return iter(range(self.start, self.end))

    def __len__(self) -> int:
        return self.end - self.start

    def __contains__(self, key: Any) -> bool:
        if isinstance(key, bool) or not isinstance(key, numbers.Integral):
            return False
        return self.start <= key < self.end

    def __eq__(self, other: object) -> bool:
        if isinstance(other, IntSpanDomain):
            if len(self) == 0 and len(other) == 0:
                return True
            return self.start == other.start and self.end == other.end
        return super().__eq__(other)

    def __hash__(self) -> int:
        return super().__hash__()

    def __repr__(self) -> str:
        return f"IntSpanDomain({self.start}, {self.end})"


class SetDomain(Domain1):
    """An explicit, finite set of hashable keys."""

    def __init__(self, keys: Iterable[Hashable]):
        self.keys: FrozenSet[Hashable] = frozenset(keys)

    def __iter__(self) -> Iterator[Hashable]:
        return iter(self.keys)

    def __len__(self) -> int:
        return len(self.keys)

    def __contains__(self, key: Any) -> bool:
        try:
            return key in self.keys
        except TypeError:
            # unhashable keys are never members
            return False

    def __eq__(self, other: object) -> bool:
        if isinstance(other, SetDomain):
            return self.keys == other.keys
        return super().__eq__(other)

    def __hash__(self) -> int:
        return super().__hash__()

    def __repr__(self) -> str:
        return f"SetDomain({sorted(self.keys, key=repr)!r})"


class Domain2(Domain):
    """
    The product of a row domain and a column domain, used by two-axis tensors.

    Keys are ``(row, col)`` tuples.

    Examples:
        >>> domain = Domain2(IntSpanDomain(0, 2), IntSpanDomain(0, 3))
        >>> len(domain)
        6
        >>> (1, 2) in domain
        True
        >>> domain.transpose()
        Domain2(IntSpanDomain(0, 3), IntSpanDomain(0, 2))
    """

    def __init__(self, rows: Domain1, cols: Domain1):
        """
        Initialize a product domain.

        Args:
            rows (Domain1): Domain of the first key.
            cols (Domain1): Domain of the second key.
        """
        self.rows = rows
        self.cols = cols

    def transpose(self) -> "Domain2":
        """
        Return the domain with its two axes swapped.

        Returns:
            Domain2: A domain over ``(col, row)`` pairs.
        """
        return Domain2(self.cols, self.rows)

    @property
    def shape(self) -> Tuple[int, int]:
        """
        Sizes of the two axes.

        Returns:
            Tuple[int, int]: ``(len(rows), len(cols))``.
        """
        return len(self.rows), len(self.cols)

    def __iter__(self) -> Iterator[Tuple[Any, Any]]:
        return itertools.product(self.rows, self.cols)

    def __len__(self) -> int:
        return len(self.rows) * len(self.cols)

    def __contains__(self, key: Any) -> bool:
        if not isinstance(key, tuple) or len(key) != 2:
            return False
        return key[0] in self.rows and key[1] in self.cols

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Domain2):
            return NotImplemented
        return self.rows == other.rows and self.cols == other.cols

    def __hash__(self) -> int:
        return hash((self.rows, self.cols))

    def __repr__(self) -> str:
        return f"Domain2({self.rows!r}, {self.cols!r})"
