"""Broadcasting: recycle axes of extent 1 (and implicit trailing axes) to a target shape.

For example a ``(1, 3)`` value recycles its single row to become ``(2, 3)``;
a ``(5, 2)`` value broadcast to ``(5, 2, 3)`` is first viewed as
``(5, 2, 1)``. ``(2, 1, 4)`` cannot become ``(2, 3, 5)`` because 4 and 5
are not recyclable.

Axes of extent 0 are sticky: once an axis is empty it stays empty no matter
what extent is requested for it.
"""

from __future__ import annotations

import logging

from .dim_names import broadcast_dim_names, extend_dim_names
from .errors import RankDecreaseError
from .index import EMPTY, ENTIRE_AXIS, resolve
from .kernels import expand_layout
from .shape import Shape, as_shape, extend_rank, recycle_zeros, validate_recyclable
from .values import Rray, as_rray

logger = logging.getLogger(__name__)


def dims_match(x: Rray, rank: int) -> Rray:
    """Extend ``x`` with trailing axes of extent 1 up to ``rank`` axes."""
    if x.rank == rank:
        return x
    if x.rank > rank:
        raise RankDecreaseError(from_rank=x.rank, to_rank=rank)

    shape = extend_rank(x.shape, rank)
    names = extend_dim_names(x.dim_names, rank)
    return Rray._wrap(x.data.reshape(shape), names)


def pre_zero_slice(x: Rray, shape: Shape) -> Rray:
    """Empty every axis of ``x`` that is requested at extent 0.

    The layout primitive cannot collapse an axis to zero on its own, so it
    happens here before any shape comparison.
    """
    from .subset import take_region

    if 0 not in shape:
        return x
    specs = [EMPTY if extent == 0 else ENTIRE_AXIS for extent in shape]
    return take_region(x, resolve(specs, x.shape, x.dim_names))


def broadcast(x: object, shape: object) -> Rray:
    """Broadcast ``x`` to ``shape``.

    Raises ``RankDecreaseError`` when ``shape`` has fewer axes than ``x`` and
    ``NonRecyclableShapeError`` when an axis cannot be recycled.
    """
    value = as_rray(x)
    target = as_shape(shape, where="broadcast")

    if value.shape == target:
        logger.debug("broadcast identity for shape %s", target)
        return value

    value = dims_match(value, len(target))
    value = pre_zero_slice(value, target)

    source = value.shape
    target = recycle_zeros(source, target)
    validate_recyclable(source, target)

    logger.debug("broadcast %s -> %s", source, target)
    data = expand_layout(value.data, source, target)
    names = broadcast_dim_names(value.dim_names, source, target)
    return Rray._wrap(data, names)
