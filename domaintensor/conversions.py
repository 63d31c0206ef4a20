"""
Promotion of plain python and numpy containers to tensors.
"""

from collections.abc import Mapping
from typing import Any

import numpy as np

from domaintensor.dense import DenseMatrix, DenseVector
from domaintensor.domain import SetDomain
from domaintensor.sparse import SparseTensor1
from domaintensor.tensor import Tensor1, Tensor2


def as_tensor1(data: Any) -> Tensor1:
    """
    Promote ``data`` to a one-axis tensor.

    - a :class:`Tensor1` is returned unchanged;
    - a mapping becomes a :class:`SparseTensor1` over ``SetDomain(keys)`` with
      every key active;
    - a numpy array or sequence of numbers (float, int or bool) becomes a
      :class:`DenseVector`.

    Args:
        data (Any): The value to promote.

    Returns:
        Tensor1: The promoted tensor. Containers are copied.

    Raises:
        TypeError: If ``data`` is not numeric or not one-dimensional.

    Example:
        >>> as_tensor1({"x": 1.0, "y": 2.0})["y"]
        2.0
        >>> as_tensor1(np.arange(3)).to_numpy()
        array([0., 1., 2.])
    """
    if isinstance(data, Tensor1):
        return data
    if isinstance(data, Mapping):
        return SparseTensor1(SetDomain(data.keys()), values=data)
    array = np.asarray(data)
    if array.ndim != 1 or array.dtype.kind not in "biuf":
        raise TypeError(
            f"Cannot make a vector from {type(data).__name__} "
            f"with dtype {array.dtype} and shape {array.shape}"
        )
    return DenseVector(array)


def as_tensor2(data: Any) -> Tensor2:
    """
    Promote ``data`` to a two-axis tensor.

    Args:
        data (Any): A :class:`Tensor2`, or a 2-D numpy array or nested sequence of numbers.

    Returns:
        Tensor2: The tensor itself, or a new :class:`DenseMatrix`.

    Raises:
        TypeError: If ``data`` is not numeric or not two-dimensional.
    """
    if isinstance(data, Tensor2):
        return data
    array = np.asarray(data)
    if array.ndim != 2 or array.dtype.kind not in "biuf":
        raise TypeError(
            f"Cannot make a matrix from {type(data).__name__} "
            f"with dtype {array.dtype} and shape {array.shape}"
        )
    return DenseMatrix(array)
