"""
Read-only and mutable maps from a domain of keys to floats.

A partial map stores values only for its active keys; every other key of its
domain reads as the default value.
"""

import logging
import numbers
from abc import ABC, abstractmethod
from typing import (
    AbstractSet,
    Any,
    Callable,
    Dict,
    Iterable,
    Iterator,
    Optional,
    Tuple,
    Union,
)

import numpy as np

from domaintensor.config import get_config
from domaintensor.domain import Domain
from domaintensor.errors import TensorIndexError

logger = logging.getLogger(__name__)


class PartialMap(ABC):
    """
    A read-only map from the keys of a domain to double values.

    Only the keys of the *active domain* are explicitly stored. Every other
    key of the domain maps to the *default* value.
    """

    # Keep numpy from treating partial maps as sequences in mixed arithmetic.
    __array_ufunc__ = None

    @property
    @abstractmethod
    def domain(self) -> Domain:
        """The set of valid keys."""
        raise NotImplementedError

    @property
    @abstractmethod
    def default(self) -> float:
        """The value of every key outside the active domain."""
        raise NotImplementedError

    @property
    @abstractmethod
    def active_domain(self) -> AbstractSet[Any]:
        """The keys with explicitly stored values."""
        raise NotImplementedError

    @abstractmethod
    def __getitem__(self, key: Any) -> float:
        raise NotImplementedError

    def __len__(self) -> int:
        return len(self.domain)

    def __iter__(self) -> Iterator[Any]:
        return iter(self.domain)

    def __contains__(self, key: Any) -> bool:
        return key in self.domain

    def _check_key(self, key: Any) -> None:
        """
        Fail when a key is outside of this map's domain.

        Args:
            key (Any): The key to validate.

        Raises:
            TensorIndexError: If ``key`` is not in the domain.
        """
        if key not in self.domain:
            raise TensorIndexError(key, self.domain)

    def keys(self) -> Iterator[Any]:
        return iter(self.domain)

    def values(self) -> Iterator[float]:
        """Values of every key of the domain, in domain order."""
        for key in self.domain:
            yield self[key]

    def items(self) -> Iterator[Tuple[Any, float]]:
        """``(key, value)`` pairs for every key of the domain."""
        for key in self.domain:
            yield key, self[key]

    def active_values(self) -> Iterator[float]:
        for key in self.active_domain:
            yield self[key]

    def active_items(self) -> Iterator[Tuple[Any, float]]:
        for key in self.active_domain:
            yield key, self[key]

    def map(self, fn: Callable[[float], float]) -> "PartialMap":
        """
        Lazily apply a function to every value.

        The default is mapped too, so the result stays a valid partial map.

        Args:
            fn (Callable[[float], float]): The function applied to each value.

        Returns:
            PartialMap: A read-only view over the mapped values.
        """
        return MappedPartialMap(self, fn)

    def to_dict(self) -> Dict[Any, float]:
        """Return a plain dict of every key in the domain."""
        return dict(self.items())

    def allclose(
        self,
        other: "PartialMap",
        atol: Optional[float] = None,
        rtol: Optional[float] = None,
    ) -> bool:
        """
        Check whether two partial maps hold the same values on the same domain.

        Args:
            other (PartialMap): The map to compare against.
            atol (Optional[float], optional): Absolute tolerance. Defaults to the configured ``atol``.
            rtol (Optional[float], optional): Relative tolerance. Defaults to the configured ``rtol``.

        Returns:
            bool: True iff both domains are equal and every value is close.
        """
        if self.domain != other.domain:
            return False
        config = get_config()
        atol = config.atol if atol is None else atol
        rtol = config.rtol if rtol is None else rtol
        keys = list(self.domain)
        mine = np.array([self[k] for k in keys], dtype=np.float64)
        theirs = np.array([other[k] for k in keys], dtype=np.float64)
        return bool(np.allclose(mine, theirs, atol=atol, rtol=rtol, equal_nan=True))


class MappedPartialMap(PartialMap):
    """A read-only view applying ``fn`` to every value of an inner map."""

    def __init__(self, inner: PartialMap, fn: Callable[[float], float]):
        self.inner = inner
        self.fn = fn

    @property
    def domain(self) -> Domain:
        return self.inner.domain

    @property
    def default(self) -> float:
        return self.fn(self.inner.default)

    @property
    def active_domain(self) -> AbstractSet[Any]:
        return self.inner.active_domain

    def __getitem__(self, key: Any) -> float:
        return self.fn(self.inner[key])


class MutablePartialMap(PartialMap):
    """
    A partial map whose values can be updated in place.

    Subclasses also make ``default`` a writable property.
    """

    @abstractmethod
    def __setitem__(self, key: Any, value: float) -> None:
        raise NotImplementedError

    def update_keys(
        self,
        keys: Iterable[Any],
        value: Union[float, Iterable[float], Callable[[Any, float], float]],
    ) -> None:
        """
        Update many keys at once.

        New values are all computed before any of them is written, so ``value``
        may safely read from this map (or from a view aliasing it).

        Args:
            keys (Iterable[Any]): Keys to update.
            value (Union[float, Iterable[float], Callable[[Any, float], float]]):
                A constant, a sequence of values matched to ``keys`` in order,
                or a function receiving ``(key, old_value)``.

        Raises:
            TensorIndexError: If any key is outside the domain; nothing is written.
            ValueError: If a value sequence does not match the number of keys.
        """
        keys = list(keys)
        for key in keys:
            self._check_key(key)

        if callable(value):
            updates = [(key, float(value(key, self[key]))) for key in keys]
        elif isinstance(value, numbers.Number):
            updates = [(key, float(value)) for key in keys]
        else:
            values = [float(v) for v in value]
            if len(values) != len(keys):
                raise ValueError(
                    f"Got {len(values)} values for {len(keys)} keys in bulk update"
                )
            updates = list(zip(keys, values))

        for key, new_value in updates:
            self[key] = new_value
