"""
domaintensor
============

Vectors and matrices as mutable partial maps from an index domain to double
values, with lazy operator expressions, domain-checked in-place assignment,
and statistical reductions.

Example
-------
>>> from domaintensor import DenseVector, stats
>>> a = DenseVector([1.0, 2.0, 3.0])
>>> b = DenseVector([3.0, 2.0, 1.0])
>>> a += b
>>> stats.mean(a)
4.0
"""

import logging as _logging

from domaintensor import stats, vectors
from domaintensor.config import TensorConfig, config_context, get_config, set_config
from domaintensor.conversions import as_tensor1, as_tensor2
from domaintensor.dense import DenseMatrix, DenseVector
from domaintensor.domain import Domain, Domain1, Domain2, IntSpanDomain, SetDomain
from domaintensor.errors import DomainError, TensorCreateError, TensorIndexError
from domaintensor.operators import OpKind, TensorOp
from domaintensor.partial_map import MutablePartialMap, PartialMap
from domaintensor.sparse import SparseMatrix, SparseTensor1, SparseTensor2, SparseVector
from domaintensor.tensor import Column, Projection, Tensor, Tensor1, Tensor2

__all__ = [
    "Column",
    "DenseMatrix",
    "DenseVector",
    "Domain",
    "Domain1",
    "Domain2",
    "DomainError",
    "IntSpanDomain",
    "MutablePartialMap",
    "OpKind",
    "PartialMap",
    "Projection",
    "SetDomain",
    "SparseMatrix",
    "SparseTensor1",
    "SparseTensor2",
    "SparseVector",
    "Tensor",
    "Tensor1",
    "Tensor2",
    "TensorConfig",
    "TensorCreateError",
    "TensorIndexError",
    "TensorOp",
    "as_tensor1",
    "as_tensor2",
    "config_context",
    "get_config",
    "set_config",
    "stats",
    "vectors",
]

# Library logging stays silent unless the application configures it.
_logging.getLogger(__name__).addHandler(_logging.NullHandler())
