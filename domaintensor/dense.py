"""
Dense, numpy-backed tensors.

Every key of a dense tensor is active, so the default value is tracked but
never observed through indexing. Scalar updates, elementwise updates between
dense operands, inner products and matrix products run as vectorized numpy
operations.
"""

import logging
from typing import Any, Callable, Optional, Sequence, Union

import numpy as np

from domaintensor.config import get_config
from domaintensor.domain import Domain, Domain1, Domain2, IntSpanDomain
from domaintensor.errors import DomainError, TensorCreateError
from domaintensor.partial_map import PartialMap
from domaintensor.tensor import Tensor, Tensor1, Tensor2, TransposedTensor2

logger = logging.getLogger(__name__)


def _is_zero_based_span(domain: Any) -> bool:
    # key-set equality: SetDomain({0, 1}) is stored like IntSpanDomain(0, 2)
    return isinstance(domain, Domain1) and domain == IntSpanDomain(0, len(domain))


def create_dense(domain: Domain) -> Tensor:
    """
    Create a zero-filled dense tensor over a domain.

    Args:
        domain (Domain): A zero-based integer span, or the product of two.

    Returns:
        Tensor: A :class:`DenseVector` or :class:`DenseMatrix`.

    Raises:
        TensorCreateError: If the domain cannot be indexed densely.
    """
    dtype = get_config().dtype
    if _is_zero_based_span(domain):
        return DenseVector(np.zeros(len(domain), dtype=dtype))
    if (
        isinstance(domain, Domain2)
        and _is_zero_based_span(domain.rows)
        and _is_zero_based_span(domain.cols)
    ):
        return DenseMatrix(np.zeros(domain.shape, dtype=dtype))
    raise TensorCreateError("dense storage", domain)


def dense_array(tensor: Any) -> Optional[np.ndarray]:
    """
    Return the numpy array behind a dense tensor, or a transpose view of it.

    Args:
        tensor (Any): Any operand.

    Returns:
        Optional[np.ndarray]: The (possibly transposed) storage, or None when
        ``tensor`` is not densely stored.
    """
    if isinstance(tensor, (DenseVector, DenseMatrix)):
        return tensor.data
    if isinstance(tensor, TransposedTensor2) and isinstance(tensor.inner, DenseMatrix):
        return tensor.inner.data.T
    return None


class DenseVector(Tensor1):
    """
    A vector over ``IntSpanDomain(0, n)`` stored in a 1-D numpy array.

    Examples:
        >>> v = DenseVector([1.0, 2.0, 2.0])
        >>> v.norm(2)
        3.0
        >>> v[1] = 5.0
        >>> v.to_numpy()
        array([1., 5., 2.])
    """

    def __init__(self, data: Union[np.ndarray, Sequence[float]], default: float = 0.0):
        """
        Initialize a dense vector.

        Args:
            data (Union[np.ndarray, Sequence[float]]): The values. Always copied into a new
                array of the configured dtype.
            default (float, optional): The tracked default value. Defaults to 0.0.

        Raises:
            ValueError: If ``data`` is not one-dimensional.
        """
        super().__init__(default)
        self.data = np.array(data, dtype=get_config().dtype)
        if self.data.ndim != 1:
            raise ValueError(f"DenseVector needs 1-D data, got shape {self.data.shape}")
        self._domain = IntSpanDomain(0, self.data.shape[0])

    @property
    def domain(self) -> Domain1:
        return self._domain

    @property
    def active_domain(self) -> IntSpanDomain:
        return self._domain

    def __getitem__(self, key: Any) -> float:
        self._check_key(key)
        return float(self.data[key])

    def __setitem__(self, key: Any, value: float) -> None:
        self._check_key(key)
        self.data[key] = value

    def create(self, domain: Domain) -> Tensor:
        return create_dense(domain)

    def copy(self) -> "DenseVector":
        return DenseVector(self.data, self.default)

    def zero(self) -> None:
        self.default = 0.0
        self.data.fill(0.0)

    def _update_active_scalar(self, fn: Callable[[Any, Any], Any], scalar: float) -> None:
        self.data[...] = fn(self.data, scalar)

    def _combine(self, fn: Callable[[Any, Any], Any], other: PartialMap) -> None:
        other_data = dense_array(other)
        if other_data is None:
            super()._combine(fn, other)
            return
        # copied first: other may view this storage
        new_data = np.array(fn(self.data, other_data))
        self.default = float(fn(self.default, other.default))
        self.data[...] = new_data

    def dot(self, other: Tensor1) -> float:
        other_data = dense_array(other)
        if other_data is None:
            return super().dot(other)
        if other.domain != self.domain:
            raise DomainError(self.domain, other.domain, "Domains do not match")
        return float(np.dot(self.data, other_data))

    def to_numpy(self) -> np.ndarray:
        return self.data.copy()

    def __repr__(self) -> str:
        return f"DenseVector({self.data})"


class DenseMatrix(Tensor2):
    """
    A matrix over ``Domain2(IntSpanDomain(0, r), IntSpanDomain(0, c))`` stored in a
    2-D numpy array.

    Examples:
        >>> m = DenseMatrix([[1.0, 2.0], [3.0, 4.0]])
        >>> m.T[0, 1]
        3.0
        >>> (m @ DenseVector([1.0, 1.0])).value.to_numpy()
        array([3., 7.])
    """

    def __init__(self, data: Union[np.ndarray, Sequence[Sequence[float]]], default: float = 0.0):
        """
        Initialize a dense matrix.

        Args:
            data (Union[np.ndarray, Sequence[Sequence[float]]]): The values, copied.
            default (float, optional): The tracked default value. Defaults to 0.0.

        Raises:
            ValueError: If ``data`` is not two-dimensional.
        """
        super().__init__(default)
        self.data = np.array(data, dtype=get_config().dtype)
        if self.data.ndim != 2:
            raise ValueError(f"DenseMatrix needs 2-D data, got shape {self.data.shape}")
        rows, cols = self.data.shape
        self._domain = Domain2(IntSpanDomain(0, rows), IntSpanDomain(0, cols))

    @property
    def domain(self) -> Domain2:
        return self._domain

    @property
    def active_domain(self) -> Domain2:
        return self._domain

    def apply(self, row: Any, col: Any) -> float:
        self._check_key((row, col))
        return float(self.data[row, col])

    def update(self, row: Any, col: Any, value: float) -> None:
        self._check_key((row, col))
        self.data[row, col] = value

    def create(self, domain: Domain) -> Tensor:
        return create_dense(domain)

    def copy(self) -> "DenseMatrix":
        return DenseMatrix(self.data, self.default)

    def zero(self) -> None:
        self.default = 0.0
        self.data.fill(0.0)

    def _update_active_scalar(self, fn: Callable[[Any, Any], Any], scalar: float) -> None:
        self.data[...] = fn(self.data, scalar)

    def _combine(self, fn: Callable[[Any, Any], Any], other: PartialMap) -> None:
        other_data = dense_array(other)
        if other_data is None:
            super()._combine(fn, other)
            return
        new_data = np.array(fn(self.data, other_data))
        self.default = float(fn(self.default, other.default))
        self.data[...] = new_data

    def matmul(self, other: Tensor) -> Tensor:
        other_data = dense_array(other)
        if other_data is None:
            return super().matmul(other)
        if isinstance(other, Tensor1):
            if self.domain.cols != other.domain:
                raise DomainError(self.domain.cols, other.domain, "Inner domains differ")
            return DenseVector(self.data @ other_data)
        if self.domain.cols != other.domain.rows:
            raise DomainError(self.domain.cols, other.domain.rows, "Inner domains differ")
        return DenseMatrix(self.data @ other_data)

    def to_numpy(self) -> np.ndarray:
        return self.data.copy()

    def __repr__(self) -> str:
        return f"DenseMatrix({self.data.tolist()})"
