"""
Lazy operator expressions over tensors.

Arithmetic on tensors builds a :class:`TensorOp` tree instead of computing a
result. The tree is a tagged variant: every node carries an :class:`OpKind`, its
operands and, for scalar kinds, the scalar. Reading ``op.value`` evaluates the
tree eagerly into a fresh tensor that never aliases an operand.

Examples:
    >>> a = DenseVector([1.0, 2.0])
    >>> b = DenseVector([3.0, 4.0])
    >>> op = 2 * a + b
    >>> op
    ((DenseVector * 2.0) + DenseVector)
    >>> op.value.to_numpy()
    array([5., 8.])
"""

import logging
import numbers
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from domaintensor.config import get_config
from domaintensor.domain import Domain2
from domaintensor.partial_map import PartialMap

logger = logging.getLogger(__name__)


def is_scalar(value: Any) -> bool:
    """
    Check whether a value is a plain real number.

    Args:
        value (Any): The value to check.

    Returns:
        bool: True for python and numpy real scalars.
    """
    return isinstance(value, numbers.Real)


class OpKind(Enum):
    IDENTITY = "identity"
    NEGATE = "negate"
    TRANSPOSE = "transpose"
    SCALAR_ADD = "scalar_add"
    SCALAR_SUB = "scalar_sub"
    SCALAR_RSUB = "scalar_rsub"
    SCALAR_MUL = "scalar_mul"
    SCALAR_DIV = "scalar_div"
    SCALAR_RDIV = "scalar_rdiv"
    SCALAR_POW = "scalar_pow"
    SCALAR_RPOW = "scalar_rpow"
    ADD = "add"
    SUB = "sub"
    MUL = "mul"
    DIV = "div"
    POW = "pow"
    MATMUL = "matmul"


# Node kind -> name of the in-place kernel on Tensor
SCALAR_KINDS: Dict[OpKind, str] = {
    OpKind.SCALAR_ADD: "add",
    OpKind.SCALAR_SUB: "sub",
    OpKind.SCALAR_RSUB: "rsub",
    OpKind.SCALAR_MUL: "mul",
    OpKind.SCALAR_DIV: "div",
    OpKind.SCALAR_RDIV: "rdiv",
    OpKind.SCALAR_POW: "pow",
    OpKind.SCALAR_RPOW: "rpow",
}

ELEMENTWISE_KINDS: Dict[OpKind, str] = {
    OpKind.ADD: "add",
    OpKind.SUB: "sub",
    OpKind.MUL: "mul",
    OpKind.DIV: "div",
    OpKind.POW: "pow",
}

_SYMBOLS: Dict[str, str] = {
    "add": "+",
    "sub": "-",
    "mul": "*",
    "div": "/",
    "pow": "**",
}


@dataclass(eq=False)
class TensorOp:
    """
    A node of a lazy tensor expression.

    Attributes:
        kind (OpKind): The operation this node performs.
        operands (Tuple[Any, ...]): Child nodes; an ``IDENTITY`` node holds a partial map instead.
        scalar (Optional[float]): The scalar operand of scalar kinds.
    """

    __array_ufunc__ = None

    kind: OpKind
    operands: Tuple[Any, ...]
    scalar: Optional[float] = None

    @staticmethod
    def identity(tensor: PartialMap) -> "TensorOp":
        """
        Wrap a partial map as the leaf of an expression.

        Args:
            tensor (PartialMap): The wrapped map.

        Returns:
            TensorOp: An ``IDENTITY`` node.
        """
        return TensorOp(OpKind.IDENTITY, (tensor,))

    @staticmethod
    def lift(value: Any) -> Optional["TensorOp"]:
        """Return ``value`` as an expression node, or None if it is not one."""
        if isinstance(value, TensorOp):
            return value
        if isinstance(value, PartialMap):
            return TensorOp.identity(value)
        return None

    @property
    def value(self) -> Any:
        """
        Evaluate this expression into a fresh tensor.

        Returns:
            Tensor: The result, never aliasing an operand.

        Raises:
            DomainError: If two operands of an elementwise operation or a
                product have incompatible domains.
        """
        return evaluate(self)

    @property
    def domain(self) -> Any:
        """The domain of the value of this expression, computed without evaluating it."""
        if self.kind is OpKind.IDENTITY:
            return self.operands[0].domain
        if self.kind is OpKind.TRANSPOSE:
            return self.operands[0].domain.transpose()
        if self.kind is OpKind.MATMUL:
            left, right = (operand.domain for operand in self.operands)
            if isinstance(left, Domain2) and isinstance(right, Domain2):
                return Domain2(left.rows, right.cols)
            if isinstance(left, Domain2):
                return left.rows
            return right.cols
        return self.operands[0].domain

    def _binary(self, other: Any, scalar_kind: OpKind, kind: OpKind) -> "TensorOp":
        if is_scalar(other):
            return TensorOp(scalar_kind, (self,), float(other))
        other_op = TensorOp.lift(other)
        if other_op is None:
            return NotImplemented
        return TensorOp(kind, (self, other_op))

    def _reflected(self, other: Any, scalar_kind: OpKind, kind: OpKind) -> "TensorOp":
        if is_scalar(other):
            return TensorOp(scalar_kind, (self,), float(other))
        other_op = TensorOp.lift(other)
        if other_op is None:
            return NotImplemented
        return TensorOp(kind, (other_op, self))

    def __add__(self, other: Any) -> "TensorOp":
        return self._binary(other, OpKind.SCALAR_ADD, OpKind.ADD)

    def __radd__(self, other: Any) -> "TensorOp":
        return self._reflected(other, OpKind.SCALAR_ADD, OpKind.ADD)

    def __sub__(self, other: Any) -> "TensorOp":
        return self._binary(other, OpKind.SCALAR_SUB, OpKind.SUB)

    def __rsub__(self, other: Any) -> "TensorOp":
        return self._reflected(other, OpKind.SCALAR_RSUB, OpKind.SUB)

    def __mul__(self, other: Any) -> "TensorOp":
        return self._binary(other, OpKind.SCALAR_MUL, OpKind.MUL)

    def __rmul__(self, other: Any) -> "TensorOp":
        return self._reflected(other, OpKind.SCALAR_MUL, OpKind.MUL)

    def __truediv__(self, other: Any) -> "TensorOp":
        return self._binary(other, OpKind.SCALAR_DIV, OpKind.DIV)

    def __rtruediv__(self, other: Any) -> "TensorOp":
        return self._reflected(other, OpKind.SCALAR_RDIV, OpKind.DIV)

    def __pow__(self, other: Any) -> "TensorOp":
        return self._binary(other, OpKind.SCALAR_POW, OpKind.POW)

    def __rpow__(self, other: Any) -> "TensorOp":
        return self._reflected(other, OpKind.SCALAR_RPOW, OpKind.POW)

    def __matmul__(self, other: Any) -> "TensorOp":
        other_op = TensorOp.lift(other)
        if other_op is None:
            return NotImplemented
        return TensorOp(OpKind.MATMUL, (self, other_op))

    def __rmatmul__(self, other: Any) -> "TensorOp":
        other_op = TensorOp.lift(other)
        if other_op is None:
            return NotImplemented
        return TensorOp(OpKind.MATMUL, (other_op, self))

    def __neg__(self) -> "TensorOp":
        return TensorOp(OpKind.NEGATE, (self,))

    def transpose(self) -> "TensorOp":
        """Lazily transpose a two-axis expression."""
        return TensorOp(OpKind.TRANSPOSE, (self,))

    @property
    def T(self) -> "TensorOp":
        return self.transpose()

    def __repr__(self) -> str:
        if self.kind is OpKind.IDENTITY:
            operand = self.operands[0]
            return getattr(operand, "name", None) or type(operand).__name__
        if self.kind is OpKind.NEGATE:
            return f"(-{self.operands[0]!r})"
        if self.kind is OpKind.TRANSPOSE:
            return f"{self.operands[0]!r}.T"
        if self.kind is OpKind.MATMUL:
            return f"({self.operands[0]!r} @ {self.operands[1]!r})"
        if self.kind in SCALAR_KINDS:
            name = SCALAR_KINDS[self.kind]
            if name.startswith("r"):
                return f"({self.scalar} {_SYMBOLS[name[1:]]} {self.operands[0]!r})"
            return f"({self.operands[0]!r} {_SYMBOLS[name]} {self.scalar})"
        symbol = _SYMBOLS[ELEMENTWISE_KINDS[self.kind]]
        return f"({self.operands[0]!r} {symbol} {self.operands[1]!r})"


def evaluate(op: TensorOp) -> Any:
    """
    Evaluate an expression tree into a fresh tensor.

    Args:
        op (TensorOp): The root of the expression.

    Returns:
        Tensor: The result. It is always a new tensor, so mutating it never
        affects an operand.
    """
    result, owned = _evaluate(op)
    return result if owned else result.copy()


def _fresh(node: TensorOp) -> Any:
    result, owned = _evaluate(node)
    return result if owned else result.copy()


def _evaluate(op: TensorOp) -> Tuple[Any, bool]:
    """
    Evaluate a node.

    Returns:
        Tuple[Any, bool]: The value and whether it is owned by this evaluation
        (False when it is, or views, an operand's storage).
    """
    if get_config().log_evaluations:
        logger.debug(f"Evaluating {op.kind.value}: {op!r}")

    if op.kind is OpKind.IDENTITY:
        tensor = op.operands[0]
        if not hasattr(tensor, "copy"):
            raise TypeError(
                f"Cannot evaluate a read-only {type(tensor).__name__} as a tensor"
            )
        return tensor, False

    if op.kind is OpKind.NEGATE:
        result = _fresh(op.operands[0])
        result.update_scalar("mul", -1.0)
        return result, True

    if op.kind is OpKind.TRANSPOSE:
        inner, owned = _evaluate(op.operands[0])
        if not hasattr(inner, "transpose"):
            raise TypeError(f"Cannot transpose a {type(inner).__name__}")
        return inner.transpose(), owned

    if op.kind in SCALAR_KINDS:
        result = _fresh(op.operands[0])
        result.update_scalar(SCALAR_KINDS[op.kind], op.scalar)
        return result, True

    if op.kind in ELEMENTWISE_KINDS:
        left = _fresh(op.operands[0])
        right_op = op.operands[1]
        if right_op.kind is OpKind.IDENTITY:
            # Read-only partial maps are fine on the right-hand side.
            right = right_op.operands[0]
        else:
            right, _ = _evaluate(right_op)
        left.update_elementwise(ELEMENTWISE_KINDS[op.kind], right)
        return left, True

    if op.kind is OpKind.MATMUL:
        left, _ = _evaluate(op.operands[0])
        right, _ = _evaluate(op.operands[1])
        return _matmul(left, right), True

    raise ValueError(f"Unknown operation kind {op.kind}")


def _matmul(left: Any, right: Any) -> Any:
    from domaintensor.tensor import Tensor1, Tensor2

    if isinstance(left, Tensor2):
        return left.matmul(right)
    if isinstance(left, Tensor1) and isinstance(right, Tensor2):
        # row vector times matrix
        return right.transpose().matmul(left)
    raise TypeError(
        f"Unsupported operands for @: {type(left).__name__} and {type(right).__name__}"
    )
