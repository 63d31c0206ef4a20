"""
Tensors: mutable partial maps with arithmetic.

:class:`Tensor` adds in-place scalar and elementwise updates on top of
:class:`~domaintensor.partial_map.MutablePartialMap`, and its arithmetic
operators build lazy :class:`~domaintensor.operators.TensorOp` expressions.
:class:`Tensor1` and :class:`Tensor2` add the one- and two-axis operations, and
the views in this module (transpose, projections and columns) share storage
with the tensor they wrap.
"""

import logging
from abc import abstractmethod
from typing import AbstractSet, Any, Callable, Dict, Optional, Tuple, Union

import numpy as np

from domaintensor import stats
from domaintensor.domain import Domain, Domain1, Domain2, SetDomain
from domaintensor.errors import DomainError, TensorCreateError, TensorIndexError
from domaintensor.operators import TensorOp, is_scalar
from domaintensor.partial_map import MutablePartialMap, PartialMap

logger = logging.getLogger(__name__)

# Binary kernels shared by scalar and elementwise updates. They accept python
# floats as well as numpy arrays so dense storage can reuse them unchanged.
SCALAR_OPS: Dict[str, Callable[[Any, Any], Any]] = {
    "add": np.add,
    "sub": np.subtract,
    "mul": np.multiply,
    "div": np.true_divide,
    "pow": np.power,
    "rsub": lambda x, s: np.subtract(s, x),
    "rdiv": lambda x, s: np.true_divide(s, x),
    "rpow": lambda x, s: np.power(s, x),
}

ELEMENTWISE_OPS: Dict[str, Callable[[Any, Any], Any]] = {
    "assign": lambda x, y: y,
    "add": np.add,
    "sub": np.subtract,
    "mul": np.multiply,
    "div": np.true_divide,
    "pow": np.power,
}

Operand = Union["Tensor", TensorOp, float, int]


class Tensor(MutablePartialMap):
    """
    A double-valued mutable partial map with support for assignment operators.

    See :class:`Tensor1` and :class:`Tensor2` for tensors defined over a domain
    of one key (e.g. a vector) and of two keys (e.g. a matrix), respectively.

    Arithmetic operators (``+``, ``-``, ``*``, ``/``, ``**``, ``@``) do not compute
    anything: they build a lazy :class:`~domaintensor.operators.TensorOp` whose
    ``value`` is a fresh tensor. Augmented operators (``+=``, ``-=``, ``*=``,
    ``/=``, ``**=``) update this tensor in place:

    - with a number they apply the scalar operation to the default and to every
      active value;
    - with another tensor (or an expression, evaluated first) they combine
      elementwise over the union of both active domains.

    Examples:
        >>> a = DenseVector([1.0, 2.0, 3.0])
        >>> b = DenseVector([1.0, 1.0, 1.0])
        >>> a += b
        >>> a *= 2
        >>> a.to_numpy()
        array([4., 6., 8.])
    """

    def __init__(self, default: float = 0.0):
        """
        Initialize the tensor.

        Args:
            default (float, optional): Value of every key outside the active domain. Defaults to 0.0.
        """
        self._default = float(default)

    @property
    def default(self) -> float:
        """Returns the default value for this tensor."""
        return self._default

    @default.setter
    def default(self, value: float) -> None:
        self._default = float(value)

    @abstractmethod
    def create(self, domain: Domain) -> "Tensor":
        """
        Returns a new, empty tensor of the same storage family for the given domain.

        Args:
            domain (Domain): Domain of the new tensor.

        Returns:
            Tensor: A tensor whose values are all zero.

        Raises:
            TensorCreateError: If the storage family cannot represent ``domain``.
        """
        raise NotImplementedError

    @abstractmethod
    def copy(self) -> "Tensor":
        """Returns a deep copy of this tensor."""
        raise NotImplementedError

    def zero(self) -> None:
        """Set the default and every active value to zero."""
        self.default = 0.0
        self.update_keys(list(self.active_domain), 0.0)

    def ensure_domain(self, other: PartialMap) -> None:
        """
        Requires that this domain and the other map's domain are equal.

        Args:
            other (PartialMap): The other operand.

        Raises:
            DomainError: If the domains differ.
        """
        if self.domain != other.domain:
            raise DomainError(self.domain, other.domain)

    ########### Scalar updates ###########
    def update_scalar(self, op: str, scalar: float) -> None:
        """
        Apply ``value = op(value, scalar)`` to the default and every active value.

        Multiplying or dividing by exactly one returns without touching storage.

        Args:
            op (str): One of the keys of :data:`SCALAR_OPS`.
            scalar (float): The scalar operand.
        """
        scalar = float(scalar)
        if op in ("mul", "div") and scalar == 1.0:
            return
        fn = SCALAR_OPS[op]
        with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
            self.default = float(fn(self.default, scalar))
            self._update_active_scalar(fn, scalar)

    def _update_active_scalar(self, fn: Callable[[Any, Any], Any], scalar: float) -> None:
        self.update_keys(list(self.active_domain), lambda key, x: fn(x, scalar))

    ########### Elementwise updates ###########
    def update_elementwise(self, op: str, other: Union[PartialMap, TensorOp]) -> None:
        """
        Combine this tensor with another partial map of the same domain, in place.

        The default becomes ``op(self.default, other.default)`` and every key in
        the union of both active domains becomes ``op(self[k], other[k])``.
        Expressions are evaluated to a concrete tensor first.

        Args:
            op (str): One of the keys of :data:`ELEMENTWISE_OPS`.
            other (Union[PartialMap, TensorOp]): The right operand.

        Raises:
            DomainError: If the domains differ. Nothing is modified.
        """
        if isinstance(other, TensorOp):
            other = other.value
        self.ensure_domain(other)
        fn = ELEMENTWISE_OPS[op]
        with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
            self._combine(fn, other)

    def _combine(self, fn: Callable[[Any, Any], Any], other: PartialMap) -> None:
        # Read everything first: ``other`` may alias this tensor.
        keys = set(self.active_domain) | set(other.active_domain)
        updates = [(key, float(fn(self[key], other[key]))) for key in keys]
        new_default = float(fn(self.default, other.default))
        self.default = new_default
        for key, value in updates:
            self[key] = value

    def assign(self, other: Operand) -> None:
        """
        Assigns each element of this tensor the corresponding value of ``other``.

        A scalar sets the default and every active value to that scalar.

        Args:
            other (Operand): A tensor of the same domain, an expression, or a number.
        """
        if is_scalar(other):
            self.default = float(other)
            self.update_keys(list(self.active_domain), float(other))
        else:
            self.update_elementwise("assign", other)

    def add_assign(self, other: Union[PartialMap, TensorOp]) -> None:
        """Increments each value by the corresponding value of ``other``."""
        self.update_elementwise("add", other)

    def sub_assign(self, other: Union[PartialMap, TensorOp]) -> None:
        """Decrements each value by the corresponding value of ``other``."""
        self.update_elementwise("sub", other)

    def mul_assign(self, other: Union[PartialMap, TensorOp]) -> None:
        """Multiplies each value by the corresponding value of ``other``."""
        self.update_elementwise("mul", other)

    def div_assign(self, other: Union[PartialMap, TensorOp]) -> None:
        """Divides each value by the corresponding value of ``other``."""
        self.update_elementwise("div", other)

    def _inplace(self, op: str, other: Operand) -> "Tensor":
        if is_scalar(other):
            self.update_scalar(op, other)
        elif isinstance(other, (PartialMap, TensorOp)):
            self.update_elementwise(op, other)
        else:
            return NotImplemented
        return self

    def __iadd__(self, other: Operand) -> "Tensor":
        return self._inplace("add", other)

    def __isub__(self, other: Operand) -> "Tensor":
        return self._inplace("sub", other)

    def __imul__(self, other: Operand) -> "Tensor":
        return self._inplace("mul", other)

    def __itruediv__(self, other: Operand) -> "Tensor":
        return self._inplace("div", other)

    def __ipow__(self, other: Operand) -> "Tensor":
        return self._inplace("pow", other)

    ########### Lazy expressions ###########
    def __add__(self, other: Operand) -> TensorOp:
        return TensorOp.identity(self) + other

    def __radd__(self, other: Operand) -> TensorOp:
        return TensorOp.identity(self) + other

    def __sub__(self, other: Operand) -> TensorOp:
        return TensorOp.identity(self) - other

    def __rsub__(self, other: Operand) -> TensorOp:
        return other - TensorOp.identity(self)

    def __mul__(self, other: Operand) -> TensorOp:
        return TensorOp.identity(self) * other

    def __rmul__(self, other: Operand) -> TensorOp:
        return TensorOp.identity(self) * other

    def __truediv__(self, other: Operand) -> TensorOp:
        return TensorOp.identity(self) / other

    def __rtruediv__(self, other: Operand) -> TensorOp:
        return other / TensorOp.identity(self)

    def __pow__(self, other: Operand) -> TensorOp:
        return TensorOp.identity(self) ** other

    def __rpow__(self, other: Operand) -> TensorOp:
        return other ** TensorOp.identity(self)

    def __matmul__(self, other: Operand) -> TensorOp:
        return TensorOp.identity(self) @ other

    def __neg__(self) -> TensorOp:
        return -TensorOp.identity(self)

    def __eq__(self, other: object) -> bool:
        # Identity semantics; use allclose() to compare values.
        return self is other

    def __hash__(self) -> int:
        # Hash is based on the id of the tensor object
        return id(self)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(domain={self.domain!r}, default={self.default}, "
            f"active={len(self.active_domain)})"
        )


class Tensor1(Tensor):
    """
    A one-axis tensor, defined on single keys of a :class:`Domain1`.

    Supports inner products (``dot``) and norms.
    """

    @property
    @abstractmethod
    def domain(self) -> Domain1:
        raise NotImplementedError

    @property
    def size(self) -> int:
        """Returns the number of elements in the domain of this vector."""
        return len(self.domain)

    def dot(self, other: "Tensor1") -> float:
        r"""
        Returns the inner product of this tensor with another.

        $$
        a \cdot b = \sum_{k} a_k b_k
        $$

        Keys outside both active domains contribute the product of the defaults.

        Args:
            other (Tensor1): A tensor over the same domain.

        Returns:
            float: The inner product.

        Raises:
            DomainError: If the domains do not match.
        """
        if other.domain != self.domain:
            raise DomainError(self.domain, other.domain, "Domains do not match")
        keys = set(self.active_domain) | set(other.active_domain)
        total = 0.0
        for key in keys:
            total += self[key] * other[key]
        remaining = len(self.domain) - len(keys)
        if remaining > 0:
            total += remaining * self.default * other.default
        return total

    def norm(self, p: float = 2) -> float:
        """
        Returns the p-norm of this tensor.

        Args:
            p (float, optional): The order of the norm, ``float("inf")`` for the max norm. Defaults to 2.

        Returns:
            float: The norm.
        """
        return stats.norm(self, p)

    def as_column(self, col_domain: Optional[Domain1] = None, column: Any = 0) -> "Column":
        """
        View this tensor as the single column of a two-axis tensor.

        Args:
            col_domain (Optional[Domain1], optional): Domain of the column key.
                Defaults to a domain holding only ``column``.
            column (Any, optional): The column this tensor occupies. Defaults to 0.

        Returns:
            Column: A view aliasing this tensor.
        """
        if col_domain is None:
            col_domain = SetDomain([column])
        return Column(self, col_domain, column)

    def to_numpy(self) -> np.ndarray:
        """Values in domain order as a 1-D array."""
        return np.array(list(self.values()), dtype=np.float64)


class Tensor2(Tensor):
    """
    A two-axis tensor, defined on ``(row, col)`` pairs of a :class:`Domain2`.

    Values are read with ``t[row, col]`` or :meth:`apply` and written with
    ``t[row, col] = value`` or :meth:`update`.
    """

    @property
    @abstractmethod
    def domain(self) -> Domain2:
        raise NotImplementedError

    @abstractmethod
    def apply(self, row: Any, col: Any) -> float:
        """Gets the value indexed by ``(row, col)``."""
        raise NotImplementedError

    @abstractmethod
    def update(self, row: Any, col: Any, value: float) -> None:
        """Updates the value indexed by ``(row, col)``."""
        raise NotImplementedError

    @staticmethod
    def _split(key: Any) -> Tuple[Any, Any]:
        if not isinstance(key, tuple) or len(key) != 2:
            raise TensorIndexError(key)
        return key

    def __getitem__(self, key: Tuple[Any, Any]) -> float:
        row, col = self._split(key)
        return self.apply(row, col)

    def __setitem__(self, key: Tuple[Any, Any], value: float) -> None:
        row, col = self._split(key)
        self.update(row, col, value)

    def transpose(self) -> "Tensor2":
        """
        Returns a view of this tensor with rows and columns swapped.

        The view aliases this tensor's storage: writes through either one are
        visible in the other.

        Returns:
            Tensor2: The transposed view.
        """
        return TransposedTensor2(self)

    @property
    def T(self) -> "Tensor2":
        """Convenience alias for :meth:`transpose`."""
        return self.transpose()

    @property
    def shape(self) -> Tuple[int, int]:
        return self.domain.shape

    def matmul(self, other: Tensor) -> Tensor:
        r"""
        Matrix-vector or matrix-matrix product.

        $$
        (AB)_{ik} = \sum_{j} A_{ij} B_{jk}
        $$

        The result is created by this tensor's storage family, over the row
        domain (for a vector) or over ``rows x other.cols`` (for a matrix). When
        that family cannot store the result domain, sparse storage is used.

        Args:
            other (Tensor): A :class:`Tensor1` over this tensor's column domain,
                or a :class:`Tensor2` whose row domain is this tensor's column domain.

        Returns:
            Tensor: A new tensor holding the product.

        Raises:
            DomainError: If the inner domains differ.
            TypeError: If ``other`` is neither a one- nor a two-axis tensor.
        """
        rows = list(self.domain.rows)
        inner = list(self.domain.cols)
        if isinstance(other, Tensor1):
            if self.domain.cols != other.domain:
                raise DomainError(self.domain.cols, other.domain, "Inner domains differ")
            result = self._create_result(self.domain.rows)
            for row in rows:
                result[row] = sum(self.apply(row, j) * other[j] for j in inner)
            return result
        if isinstance(other, Tensor2):
            if self.domain.cols != other.domain.rows:
                raise DomainError(
                    self.domain.cols, other.domain.rows, "Inner domains differ"
                )
            result = self._create_result(Domain2(self.domain.rows, other.domain.cols))
            for row in rows:
                for col in other.domain.cols:
                    result.update(
                        row, col, sum(self.apply(row, j) * other.apply(j, col) for j in inner)
                    )
            return result
        raise TypeError(f"Cannot multiply {type(self).__name__} by {type(other).__name__}")

    def _create_result(self, domain: Domain) -> Tensor:
        try:
            return self.create(domain)
        except TensorCreateError:
            from domaintensor.sparse import create_sparse

            logger.debug(
                f"{type(self).__name__} cannot store a product over {domain!r}, "
                "using sparse storage"
            )
            return create_sparse(domain)

    def to_numpy(self) -> np.ndarray:
        """Values as a 2-D array, rows and columns in domain order."""
        rows = list(self.domain.rows)
        cols = list(self.domain.cols)
        out = np.empty((len(rows), len(cols)), dtype=np.float64)
        for i, row in enumerate(rows):
            for j, col in enumerate(cols):
                out[i, j] = self.apply(row, col)
        return out


class TransposedTensor2(Tensor2):
    """A thin adapter swapping the two keys of an inner :class:`Tensor2`."""

    def __init__(self, inner: Tensor2):
        self.inner = inner

    @property
    def domain(self) -> Domain2:
        return self.inner.domain.transpose()

    @property
    def default(self) -> float:
        return self.inner.default

    @default.setter
    def default(self, value: float) -> None:
        self.inner.default = value

    @property
    def active_domain(self) -> AbstractSet[Tuple[Any, Any]]:
        return {(col, row) for row, col in self.inner.active_domain}

    def apply(self, row: Any, col: Any) -> float:
        return self.inner.apply(col, row)

    def update(self, row: Any, col: Any, value: float) -> None:
        self.inner.update(col, row, value)

    def copy(self) -> "Tensor2":
        return self.inner.copy().transpose()

    def create(self, domain: Domain) -> Tensor:
        return self.inner.create(domain)

    def transpose(self) -> Tensor2:
        return self.inner


class Projection(Tensor2):
    """
    A view delegating domain, reads, writes, default and active domain to an
    inner :class:`Tensor2`. Subclasses decide how to copy.
    """

    def __init__(self, inner: Tensor2):
        self.inner = inner

    @property
    def domain(self) -> Domain2:
        return self.inner.domain

    @property
    def default(self) -> float:
        return self.inner.default

    @default.setter
    def default(self, value: float) -> None:
        self.inner.default = value

    @property
    def active_domain(self) -> AbstractSet[Tuple[Any, Any]]:
        return self.inner.active_domain

    def apply(self, row: Any, col: Any) -> float:
        return self.inner.apply(row, col)

    def update(self, row: Any, col: Any, value: float) -> None:
        self.inner.update(row, col, value)

    def create(self, domain: Domain) -> Tensor:
        return self.inner.create(domain)


class Column(Tensor2):
    """
    The given :class:`Tensor1` as a single column of a :class:`Tensor2`.

    Reads and writes at the projected column go to the underlying vector;
    any other column fails with :class:`~domaintensor.errors.TensorIndexError`.
    """

    def __init__(self, tensor: Tensor1, col_domain: Domain1, column: Any):
        """
        Initialize the column view.

        Args:
            tensor (Tensor1): The vector to project.
            col_domain (Domain1): Domain of the column key.
            column (Any): The column the vector occupies.

        Raises:
            TensorIndexError: If ``column`` is not in ``col_domain``.
        """
        if column not in col_domain:
            raise TensorIndexError(column, col_domain)
        self.tensor = tensor
        self.col_domain = col_domain
        self.column = column

    @property
    def domain(self) -> Domain2:
        return Domain2(self.tensor.domain, self.col_domain)

    @property
    def default(self) -> float:
        return self.tensor.default

    @default.setter
    def default(self, value: float) -> None:
        self.tensor.default = value

    @property
    def active_domain(self) -> AbstractSet[Tuple[Any, Any]]:
        return {(key, self.column) for key in self.tensor.active_domain}

    def apply(self, row: Any, col: Any) -> float:
        if col != self.column:
            raise TensorIndexError(col)
        return self.tensor[row]

    def update(self, row: Any, col: Any, value: float) -> None:
        if col != self.column:
            raise TensorIndexError(col)
        self.tensor[row] = value

    def copy(self) -> "Column":
        return Column(self.tensor.copy(), self.col_domain, self.column)

    def create(self, domain: Domain) -> Tensor:
        return self.tensor.create(domain)
