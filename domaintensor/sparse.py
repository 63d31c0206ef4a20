"""
Sparse, dict-backed tensors.

Only active keys are stored; every other key of the domain reads as the
default value. Sparse tensors work over any key type, so they are the storage
family for :class:`~domaintensor.domain.SetDomain` and other non-integer domains.
"""

import copy as _copy
import logging
from collections import defaultdict
from typing import Any, Dict, KeysView, List, Mapping, Optional, Tuple

import numpy as np

from domaintensor.domain import Domain, Domain1, Domain2, IntSpanDomain
from domaintensor.errors import TensorCreateError
from domaintensor.tensor import Tensor, Tensor1, Tensor2

logger = logging.getLogger(__name__)


def _zero_based(domain: Domain) -> bool:
    return isinstance(domain, IntSpanDomain) and domain.start == 0


def create_sparse(domain: Domain, default: float = 0.0) -> Tensor:
    """
    Create an empty sparse tensor over a domain.

    Args:
        domain (Domain): A one- or two-axis domain.
        default (float, optional): The default value. Defaults to 0.0.

    Returns:
        Tensor: A :class:`SparseVector` or :class:`SparseMatrix` for zero-based integer spans, a
        :class:`SparseTensor1` for other one-axis domains, a
        :class:`SparseTensor2` for two-axis domains.

    Raises:
        TensorCreateError: If the domain is of an unknown kind.
    """
    if isinstance(domain, Domain2):
        rows, cols = domain.rows, domain.cols
        if _zero_based(rows) and _zero_based(cols):
            return SparseMatrix(len(rows), len(cols), default)
        return SparseTensor2(domain, default)
    if _zero_based(domain):
        return SparseVector(len(domain), default)
    if isinstance(domain, Domain1):
        return SparseTensor1(domain, default)
    raise TensorCreateError("sparse storage", domain)


class _SparseStorage:
    """Dict storage shared by the sparse tensor classes."""

    _data: Dict[Any, float]

    @property
    def active_domain(self) -> KeysView:
        return self._data.keys()

    @property
    def nnz(self) -> int:
        """Number of explicitly stored values."""
        return len(self._data)

    def create(self, domain: Domain) -> Tensor:
        return create_sparse(domain)

    def copy(self):
        result = _copy.copy(self)
        result._data = dict(self._data)
        return result

    def compact(self) -> None:
        """Drop stored entries equal to the default value."""
        stale = [key for key, value in self._data.items() if value == self.default]
        for key in stale:
            del self._data[key]
        if stale:
            logger.debug(f"Compacted {len(stale)} entries from {type(self).__name__}")


class SparseTensor1(_SparseStorage, Tensor1):
    """
    A vector over any :class:`~domaintensor.domain.Domain1`, storing only its
    active keys.

    Examples:
        >>> counts = SparseTensor1(SetDomain(["a", "b", "c"]), values={"a": 2.0})
        >>> counts["b"]
        0.0
        >>> counts += 1
        >>> counts["b"], counts["a"]
        (1.0, 3.0)
    """

    def __init__(
        self,
        domain: Domain1,
        default: float = 0.0,
        values: Optional[Mapping[Any, float]] = None,
    ):
        """
        Initialize a sparse vector.

        Args:
            domain (Domain1): The key domain.
            default (float, optional): Value of every key not stored. Defaults to 0.0.
            values (Optional[Mapping[Any, float]], optional): Initial active entries.

        Raises:
            TensorIndexError: If an initial key is outside ``domain``.
        """
        super().__init__(default)
        self._domain = domain
        self._data = {}
        if values:
            for key, value in values.items():
                self[key] = value

    @property
    def domain(self) -> Domain1:
        return self._domain

    def __getitem__(self, key: Any) -> float:
        self._check_key(key)
        return self._data.get(key, self.default)

    def __setitem__(self, key: Any, value: float) -> None:
        self._check_key(key)
        self._data[key] = float(value)

    def dot(self, other: Tensor1) -> float:
        if self.default != 0.0 or other.default != 0.0 or other.domain != self.domain:
            return super().dot(other)
        # with zero defaults only keys active in this tensor contribute
        return float(sum(value * other[key] for key, value in self._data.items()))

    def to_numpy(self) -> np.ndarray:
        return np.array([self[key] for key in self.domain], dtype=np.float64)


class SparseVector(SparseTensor1):
    """
    A sparse vector over ``IntSpanDomain(0, size)``.

    Examples:
        >>> v = SparseVector(1000)
        >>> v += 1
        >>> v[3] = 4.0
        >>> v.nnz, stats.sum(v)
        (1, 1003.0)
    """

    def __init__(self, size: int, default: float = 0.0):
        super().__init__(IntSpanDomain(0, size), default)

    def to_numpy(self) -> np.ndarray:
        out = np.full(len(self.domain), self.default, dtype=np.float64)
        for key, value in self._data.items():
            out[key] = value
        return out

    def __repr__(self) -> str:
        return f"SparseVector(size={len(self.domain)}, default={self.default}, nnz={self.nnz})"


class SparseTensor2(_SparseStorage, Tensor2):
    """A matrix over any :class:`~domaintensor.domain.Domain2`, storing only its active pairs."""

    def __init__(
        self,
        domain: Domain2,
        default: float = 0.0,
        values: Optional[Mapping[Tuple[Any, Any], float]] = None,
    ):
        super().__init__(default)
        self._domain = domain
        self._data = {}
        if values:
            for (row, col), value in values.items():
                self.update(row, col, value)

    @property
    def domain(self) -> Domain2:
        return self._domain

    def apply(self, row: Any, col: Any) -> float:
        self._check_key((row, col))
        return self._data.get((row, col), self.default)

    def update(self, row: Any, col: Any, value: float) -> None:
        self._check_key((row, col))
        self._data[(row, col)] = float(value)

    def matmul(self, other: Tensor) -> Tensor:
        if self.default != 0.0 or getattr(other, "default", None) != 0.0:
            return super().matmul(other)
        if isinstance(other, Tensor1) and self.domain.cols == other.domain:
            result = self.create(self.domain.rows)
            for (row, j), value in self._data.items():
                result[row] += value * other[j]
            return result
        if isinstance(other, Tensor2) and self.domain.cols == other.domain.rows:
            by_row: Dict[Any, List[Tuple[Any, float]]] = defaultdict(list)
            for j, col in other.active_domain:
                by_row[j].append((col, other.apply(j, col)))
            result = self.create(Domain2(self.domain.rows, other.domain.cols))
            for (row, j), value in self._data.items():
                for col, other_value in by_row.get(j, ()):
                    result.update(row, col, result.apply(row, col) + value * other_value)
            return result
        # mismatched domains and unsupported operands fail in the generic path
        return super().matmul(other)


class SparseMatrix(SparseTensor2):
    """A sparse matrix over ``IntSpanDomain(0, rows) x IntSpanDomain(0, cols)``."""

    def __init__(self, rows: int, cols: int, default: float = 0.0):
        super().__init__(Domain2(IntSpanDomain(0, rows), IntSpanDomain(0, cols)), default)

    def __repr__(self) -> str:
        rows, cols = self.shape
        return f"SparseMatrix({rows}x{cols}, default={self.default}, nnz={self.nnz})"
