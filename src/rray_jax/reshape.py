"""Reshape and squeeze.

Both keep column-major buffer order. Reshape is the only operation that may
lower rank, and only when the element count is unchanged.
"""

from __future__ import annotations

import logging
import numbers

import jax.numpy as jnp

from .dim_names import reshape_dim_names, squeeze_dim_names
from .errors import AxisOutOfRangeError, CannotSqueezeError, ElementCountMismatchError, InvalidSubscriptError
from .shape import as_shape, shape_size
from .values import Rray, as_rray

logger = logging.getLogger(__name__)


def reshape(x: object, shape: object) -> Rray:
    value = as_rray(x)
    target = as_shape(shape, where="reshape")
    if not target:
        raise ValueError("reshape requires at least one axis")
    if shape_size(value.shape) != shape_size(target):
        raise ElementCountMismatchError(from_shape=value.shape, to_shape=target)
    if value.shape == target:
        return value

    logger.debug("reshape %s -> %s", value.shape, target)
    data = jnp.reshape(value.data, target, order="F")
    return Rray._wrap(data, reshape_dim_names(value.dim_names, value.shape, target))


def _as_axes(axes: object, rank: int) -> tuple[int, ...]:
    if isinstance(axes, numbers.Integral) and not isinstance(axes, bool):
        axes = (axes,)
    out: list[int] = []
    for axis in axes:
        if isinstance(axis, bool) or not isinstance(axis, numbers.Integral):
            raise InvalidSubscriptError(f"Squeeze axes must be integers, not {axis!r}")
        axis = int(axis)
        if not 1 <= axis <= rank:
            raise AxisOutOfRangeError(axis=axis, rank=rank)
        out.append(axis)
    return tuple(sorted(set(out)))


def squeeze(x: object, axes: object = None) -> Rray:
    """Drop axes of extent 1.

    With ``axes=None`` every extent-1 axis goes. Explicit 1-based ``axes``
    must all have extent 1. At least one axis always remains.
    """
    value = as_rray(x)
    shape = value.shape

    if axes is None:
        dropped = [axis for axis, extent in enumerate(shape) if extent == 1]
        if len(dropped) == len(shape):
            dropped = dropped[1:]
    else:
        requested = _as_axes(axes, value.rank)
        bad = tuple(axis for axis in requested if shape[axis - 1] != 1)
        if bad:
            raise CannotSqueezeError(axes=bad, extents=tuple(shape[axis - 1] for axis in bad))
        dropped = [axis - 1 for axis in requested]
        if len(dropped) == len(shape):
            dropped = dropped[1:]

    if not dropped:
        return value

    target = tuple(extent for axis, extent in enumerate(shape) if axis not in set(dropped))
    logger.debug("squeeze %s -> %s", shape, target)
    data = jnp.reshape(value.data, target)
    return Rray._wrap(data, squeeze_dim_names(value.dim_names, dropped))
