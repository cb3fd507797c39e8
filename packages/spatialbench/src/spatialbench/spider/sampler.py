"""Coordinate sampling in the unit square.

``sample(config, ordinal)`` places the center of row ``ordinal`` in
``[0, 1]^2`` according to the configured distribution. Each quantity is a
PRF draw keyed by ``(config.seed, ordinal, stream)``; the streams used here
are all below ``SAMPLER_STREAM_LIMIT``.
"""

from __future__ import annotations

import math
from collections.abc import Callable

from spatialbench.spider import prf
from spatialbench.spider.config import (
    BitParams,
    DiagonalParams,
    DistributionType,
    NormalParams,
    SpiderConfig,
)

SAMPLER_STREAM_LIMIT = 1 << 16

SIERPINSKI_ITERATIONS = 27
SIERPINSKI_VERTICES: tuple[tuple[float, float], ...] = (
    (0.0, 0.0),
    (1.0, 0.0),
    (0.5, math.sqrt(3.0) / 2.0),
)

_SQRT2 = math.sqrt(2.0)


def _clamp(value: float) -> float:
    return min(max(value, 0.0), 1.0)


def _sample_uniform(config: SpiderConfig, ordinal: int) -> tuple[float, float]:
    return prf.unit(config.seed, ordinal, 0), prf.unit(config.seed, ordinal, 1)


def _gaussian(seed: int, ordinal: int, stream: int, mu: float, sigma: float) -> float:
    # Box-Muller; 1 - u keeps the log argument in (0, 1]
    u1 = 1.0 - prf.unit(seed, ordinal, stream)
    u2 = prf.unit(seed, ordinal, stream + 1)
    return mu + sigma * math.sqrt(-2.0 * math.log(u1)) * math.cos(2.0 * math.pi * u2)


def _sample_normal(config: SpiderConfig, ordinal: int) -> tuple[float, float]:
    params = config.params
    assert isinstance(params, NormalParams)
    x = _gaussian(config.seed, ordinal, 0, params.mu, params.sigma)
    y = _gaussian(config.seed, ordinal, 2, params.mu, params.sigma)
    return _clamp(x), _clamp(y)


def _sample_diagonal(config: SpiderConfig, ordinal: int) -> tuple[float, float]:
    params = config.params
    assert isinstance(params, DiagonalParams)
    position = prf.unit(config.seed, ordinal, 1)
    if prf.unit(config.seed, ordinal, 0) < params.percentage:
        return position, position
    offset = (2.0 * prf.unit(config.seed, ordinal, 2) - 1.0) * params.buffer
    return _clamp(position + offset / _SQRT2), _clamp(position - offset / _SQRT2)


def _sample_bit(config: SpiderConfig, ordinal: int) -> tuple[float, float]:
    params = config.params
    assert isinstance(params, BitParams)
    x = 0.0
    y = 0.0
    cell = 1.0
    for level in range(params.digits):
        cell *= 0.5
        if prf.unit(config.seed, ordinal, 2 * level) < params.probability:
            x += cell
        if prf.unit(config.seed, ordinal, 2 * level + 1) < params.probability:
            y += cell
    return x, y


def _sample_sierpinski(config: SpiderConfig, ordinal: int) -> tuple[float, float]:
    x = 0.0
    y = 0.0
    for step in range(SIERPINSKI_ITERATIONS):
        vertex = min(int(prf.unit(config.seed, ordinal, step) * 3.0), 2)
        vx, vy = SIERPINSKI_VERTICES[vertex]
        x = (x + vx) / 2.0
        y = (y + vy) / 2.0
    return x, y


_SAMPLERS: dict[DistributionType, Callable[[SpiderConfig, int], tuple[float, float]]] = {
    DistributionType.UNIFORM: _sample_uniform,
    DistributionType.NORMAL: _sample_normal,
    DistributionType.DIAGONAL: _sample_diagonal,
    DistributionType.BIT: _sample_bit,
    DistributionType.SIERPINSKI: _sample_sierpinski,
}


def sample(config: SpiderConfig, ordinal: int) -> tuple[float, float]:
    """Return the unit-square center of row ``ordinal``.

    Args:
        config: Validated Spider configuration.
        ordinal: Zero-based row ordinal.

    Returns:
        ``(x, y)`` with both coordinates in ``[0, 1]``.

    Raises:
        ValueError: If the distribution has no sampler (parcel).
    """
    try:
        sampler = _SAMPLERS[config.dist_type]
    except KeyError:
        raise ValueError(f"No sampler for distribution '{config.dist_type.value}'") from None
    return sampler(config, ordinal)


class CoordinateSampler:
    """Sampler bound to one config.

    Example:
        >>> sampler = CoordinateSampler(config)
        >>> x, y = sampler.sample(1234)
    """

    def __init__(self, config: SpiderConfig) -> None:
        self.config = config
        try:
            self._sampler = _SAMPLERS[config.dist_type]
        except KeyError:
            raise ValueError(
                f"No sampler for distribution '{config.dist_type.value}'"
            ) from None

    def sample(self, ordinal: int) -> tuple[float, float]:
        return self._sampler(self.config, ordinal)
