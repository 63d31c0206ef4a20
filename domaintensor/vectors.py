"""
Basic vector functions: constructors, elementwise maps, and sums and means of
sequences of vectors.
"""

import logging
from typing import Callable, Sequence

import numpy as np

from domaintensor.config import get_config
from domaintensor.dense import DenseVector
from domaintensor.tensor import Tensor, Tensor1

logger = logging.getLogger(__name__)


def linspace(a: float, b: float, n: int = 100) -> DenseVector:
    """
    Returns ``n`` evenly spaced points between ``a`` and ``b``, both included.

    Args:
        a (float): First point.
        b (float): Last point.
        n (int, optional): Number of points. Defaults to 100.

    Returns:
        DenseVector: The points.

    Example:
        >>> linspace(0, 1, 5).to_numpy()
        array([0.  , 0.25, 0.5 , 0.75, 1.  ])
    """
    return DenseVector(np.linspace(a, b, n))


def ones(n: int) -> DenseVector:
    """A vector of ones of the given size."""
    return DenseVector(np.ones(n, dtype=get_config().dtype))


def zeros(n: int) -> DenseVector:
    """A vector of zeros of the given size."""
    return DenseVector(np.zeros(n, dtype=get_config().dtype))


def _mapped(tensor: Tensor, fn: Callable[[float], float]) -> Tensor:
    result = tensor.copy()
    with np.errstate(divide="ignore", invalid="ignore"):
        result.assign(tensor.map(fn))
    return result


def log(tensor: Tensor) -> Tensor:
    """
    Natural log of each element (and of the default) of a vector or matrix.

    Args:
        tensor (Tensor): The input tensor, left unchanged.

    Returns:
        Tensor: A new tensor of the same storage family.
    """
    return _mapped(tensor, lambda x: float(np.log(x)))


def sqrt(tensor: Tensor) -> Tensor:
    """Square root of each element (and of the default), into a new tensor."""
    return _mapped(tensor, lambda x: float(np.sqrt(x)))


def sum_vectors(vectors: Sequence[Tensor1]) -> Tensor1:
    """
    Returns the sum vector of a bunch of vectors.

    Args:
        vectors (Sequence[Tensor1]): Vectors over the same domain.

    Returns:
        Tensor1: A new vector; the inputs are unchanged.

    Raises:
        ValueError: If ``vectors`` is empty.
        DomainError: If the vectors' domains differ.
    """
    if len(vectors) == 0:
        raise ValueError("sum_vectors() needs at least one vector")
    total = vectors[0].copy()
    for vector in vectors[1:]:
        total += vector
    return total


def mean_vectors(vectors: Sequence[Tensor1]) -> Tensor1:
    """Returns the mean vector of a bunch of vectors."""
    total = sum_vectors(vectors)
    total /= len(vectors)
    return total
