"""
This module contains the numeric configuration shared by all tensors.
It's optional to change, the defaults match double-precision arithmetic.
"""

import logging
import os
from contextlib import contextmanager
from dataclasses import dataclass, fields, replace
from typing import Iterator

import numpy as np

logger = logging.getLogger(__name__)


@dataclass
class TensorConfig:
    """
    Numeric configuration for tensor storage and comparison.

    Attributes:
        dtype (str): numpy dtype name used by dense storage.
        atol (float): Absolute tolerance used by ``PartialMap.allclose``.
        rtol (float): Relative tolerance used by ``PartialMap.allclose``.
        log_evaluations (bool): Log every ``TensorOp`` evaluation at DEBUG level.
    """

    dtype: str = "float64"
    atol: float = 1e-8
    rtol: float = 1e-5
    log_evaluations: bool = False

    def __post_init__(self):
        if np.dtype(self.dtype).kind != "f":
            raise ValueError(f"Tensor dtype must be a floating point type, got {self.dtype!r}")

    @classmethod
    def from_env(cls) -> "TensorConfig":
        """
        Build a config from ``DOMAINTENSOR_*`` environment variables.

        Unset variables keep their default values.

        Returns:
            TensorConfig: The configuration read from the environment.

        Raises:
            ValueError: If ``DOMAINTENSOR_DTYPE`` is not a floating point dtype.
        """
        kwargs = {}
        if os.getenv("DOMAINTENSOR_DTYPE"):
            kwargs["dtype"] = os.environ["DOMAINTENSOR_DTYPE"]
        if os.getenv("DOMAINTENSOR_ATOL"):
            kwargs["atol"] = float(os.environ["DOMAINTENSOR_ATOL"])
        if os.getenv("DOMAINTENSOR_RTOL"):
            kwargs["rtol"] = float(os.environ["DOMAINTENSOR_RTOL"])
        if os.getenv("DOMAINTENSOR_LOG_EVALUATIONS"):
            kwargs["log_evaluations"] = os.environ[
                "DOMAINTENSOR_LOG_EVALUATIONS"
            ].lower() in ("1", "true", "yes")
        return cls(**kwargs)


_config = TensorConfig.from_env()


def get_config() -> TensorConfig:
    """Return the active configuration."""
    return _config


def set_config(**overrides) -> TensorConfig:
    """
    Replace fields of the active configuration.

    Args:
        **overrides: Field names of :class:`TensorConfig` and their new values.

    Returns:
        TensorConfig: The new active configuration.

    Raises:
        TypeError: If an unknown field name is given.
        ValueError: If ``dtype`` is not a floating point dtype.
    """
    global _config
    known = {f.name for f in fields(TensorConfig)}
    unknown = set(overrides) - known
    if unknown:
        raise TypeError(f"Unknown config fields: {sorted(unknown)}")
    _config = replace(_config, **overrides)
    logger.debug(f"Tensor config updated: {_config}")
    return _config


@contextmanager
def config_context(**overrides) -> Iterator[TensorConfig]:
    """
    Temporarily override configuration fields.

    Examples:
        >>> with config_context(log_evaluations=True):
        ...     (a + b).value
    """
    global _config
    previous = _config
    try:
        yield set_config(**overrides)
    finally:
        _config = previous
