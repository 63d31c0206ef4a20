"""
Statistical reductions over partial maps and plain iterables of numbers.

Reductions over a partial map cover its whole domain: every key outside the
active domain contributes the default value, without being iterated.
"""

import logging
import math
from typing import Iterable, Tuple, Union

import numpy as np

from domaintensor.partial_map import PartialMap

logger = logging.getLogger(__name__)

Values = Union[PartialMap, Iterable[float]]


def _weighted(v: Values) -> Tuple[np.ndarray, np.ndarray]:
    """
    Flatten values into ``(values, multiplicities)`` arrays.

    A partial map yields each active value once, plus its default weighted by
    the number of non-active keys.
    """
    if isinstance(v, PartialMap):
        active = [float(x) for x in v.active_values()]
        weights = [1.0] * len(active)
        remaining = len(v.domain) - len(active)
        if remaining > 0:
            active.append(float(v.default))
            weights.append(float(remaining))
        return np.asarray(active, dtype=np.float64), np.asarray(weights, dtype=np.float64)
    values = np.asarray([float(x) for x in v], dtype=np.float64)
    return values, np.ones_like(values)


def sum(v: Values) -> float:
    """
    Returns the sum of the values.

    Args:
        v (Values): A partial map or an iterable of numbers.

    Returns:
        float: The sum, 0.0 when empty.

    Example:
        >>> sum(SparseVector(4, default=1.0))
        4.0
    """
    values, weights = _weighted(v)
    return float(np.sum(values * weights))


def sumsq(v: Values) -> float:
    """Returns the sum of the squares of the values."""
    values, weights = _weighted(v)
    return float(np.sum(values * values * weights))


def max(v: Values) -> float:
    """
    Returns the largest value.

    Raises:
        ValueError: If there are no values.
    """
    values, _ = _weighted(v)
    if values.size == 0:
        raise ValueError("max() of an empty collection")
    return float(np.max(values))


def _online_mean(values: Iterable[float]) -> Tuple[float, int]:
    n = 0
    mean = 0.0
    for x in values:
        n += 1
        delta = x - mean
        mean += delta / n
    return mean, n


def mean(v: Values) -> float:
    r"""
    Returns the mean of the values.

    Uses Knuth's online algorithm (TAOCP vol. 2) over the explicit values:

    $$
    \mu_n = \mu_{n-1} + \frac{x_n - \mu_{n-1}}{n}
    $$

    For a partial map the mean of the active values is then combined with the
    default weighted by the number of non-active keys.

    Args:
        v (Values): A partial map or an iterable of numbers.

    Returns:
        float: The mean.

    Raises:
        ValueError: If there are no values.
    """
    if isinstance(v, PartialMap):
        size = len(v.domain)
        if size == 0:
            raise ValueError("mean() of an empty domain")
        active_mean, active_count = _online_mean(v.active_values())
        remaining = size - active_count
        if remaining > 0:
            return (active_mean * active_count + v.default * remaining) / size
        return active_mean

    result, n = _online_mean(float(x) for x in v)
    if n == 0:
        raise ValueError("mean() of an empty collection")
    return result


def _online_variance(values: Iterable[float]) -> float:
    n = 0
    mean = 0.0
    m2 = 0.0
    for x in values:
        n += 1
        delta = x - mean
        mean += delta / n
        m2 += delta * (x - mean)
    if n < 2:
        return math.nan
    return m2 / (n - 1)


def variance(v: Values) -> float:
    """
    Returns the sample variance (``n - 1`` denominator) of the values.

    Online algorithm from Knuth vol. 2, see also
    http://en.wikipedia.org/wiki/Algorithms_for_calculating_variance.
    A partial map with non-active keys uses the mean-centred sum of squares
    over its whole domain instead.

    Args:
        v (Values): A partial map or an iterable of numbers.

    Returns:
        float: The variance, NaN for fewer than two values.
    """
    if not isinstance(v, PartialMap):
        return _online_variance(float(x) for x in v)

    size = len(v.domain)
    if len(v.active_domain) == size:
        return _online_variance(v.values())
    if size < 2:
        return math.nan
    m = mean(v)
    return sumsq(v.map(lambda x: x - m)) / (size - 1)


def std(v: Values) -> float:
    """Returns the square root of the variance of the values."""
    return math.sqrt(variance(v))


def norm(v: Values, p: float = 2) -> float:
    r"""
    Returns the p-norm of the values.

    $$
    \|v\|_p = \left(\sum_i |v_i|^p\right)^{1/p}
    $$

    with the special cases ``p = 1`` (sum of absolute values), ``p = 2``
    (euclidean norm) and ``p = inf`` (largest absolute value).

    Args:
        v (Values): A partial map or an iterable of numbers.
        p (float, optional): Order of the norm. Defaults to 2.

    Returns:
        float: The norm, 0.0 when empty.

    Raises:
        ValueError: If ``p`` is not a positive number.
    """
    p = float(p)
    if math.isnan(p) or p <= 0:
        raise ValueError(f"Norm order must be positive, got {p}")

    values, weights = _weighted(v)
    magnitudes = np.abs(values)
    if p == 1:
        return float(np.sum(magnitudes * weights))
    if p == 2:
        return float(np.sqrt(np.sum(magnitudes * magnitudes * weights)))
    if math.isinf(p):
        return float(np.max(magnitudes)) if magnitudes.size else 0.0
    return float(np.sum(np.power(magnitudes, p) * weights) ** (1.0 / p))


__all__ = ["sum", "sumsq", "max", "mean", "variance", "std", "norm"]

