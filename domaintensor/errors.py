"""
Exceptions raised by tensor operations.

Every error is fatal to the call that raised it: no operation applies a partial
update before failing.
"""

from typing import Any


class DomainError(ValueError):
    """
    Raised when two operands are combined but their key domains differ.

    Attributes:
        expected (Any): The domain of the tensor being updated (left operand).
        actual (Any): The domain of the other operand.
    """

    def __init__(self, expected: Any, actual: Any, message: str = "Incompatible domains"):
        """
        Initialize the DomainError.

        Args:
            expected (Any): Domain of the left operand.
            actual (Any): Domain of the right operand.
            message (str, optional): Leading message text. Defaults to "Incompatible domains".
        """
        super().__init__(f"{message}: {expected!r} vs {actual!r}")
        self.expected = expected
        self.actual = actual


class TensorIndexError(IndexError):
    """
    Raised when a key is outside of a tensor's domain, or when a column
    projection is accessed at a column other than the one it represents.
    """

    def __init__(self, key: Any, domain: Any = None):
        if domain is None:
            super().__init__(f"Index {key!r} is out of range")
        else:
            super().__init__(f"Index {key!r} is not in domain {domain!r}")
        self.key = key
        self.domain = domain


class TensorCreateError(RuntimeError):
    """Raised when a storage family cannot create a tensor over a given domain."""

    def __init__(self, family: str, domain: Any):
        super().__init__(f"{family} cannot create a tensor over {domain!r}")
        self.family = family
        self.domain = domain
