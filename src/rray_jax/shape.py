"""Shape algebra: rank extension, common shapes and recyclability.

Shapes are plain ``tuple[int, ...]`` values. Comparisons are always pairwise
and left-aligned; a missing trailing axis behaves like an axis of extent 1.
Axis numbers reported in errors are 1-based.
"""

from __future__ import annotations

import numbers
from typing import Iterable

from .errors import NonRecyclableShapeError, RankDecreaseError

Shape = tuple[int, ...]


def as_shape(dims: Iterable[object], *, where: str = "shape") -> Shape:
    """Normalize an iterable of integer-like extents into a shape tuple."""
    if isinstance(dims, numbers.Integral):
        dims = (dims,)
    shape: list[int] = []
    for dim in dims:
        if hasattr(dim, "item") and not isinstance(dim, numbers.Number):
            dim = dim.item()
        if isinstance(dim, bool):
            raise TypeError(f"{where} extents must be integers, not bool")
        if isinstance(dim, numbers.Integral):
            dim = int(dim)
        elif isinstance(dim, numbers.Real):
            real = float(dim)
            if not real.is_integer():
                raise ValueError(f"{where} extents must be integers")
            dim = int(real)
        else:
            raise TypeError(f"{where} extents must be integers")
        if dim < 0:
            raise ValueError(f"{where} extents must be non-negative")
        shape.append(dim)
    return tuple(shape)


def shape_size(shape: Shape) -> int:
    size = 1
    for dim in shape:
        size *= int(dim)
    return size


def extend_rank(shape: Shape, rank: int) -> Shape:
    """Append extents of 1 on the right until ``shape`` has ``rank`` axes."""
    if rank < len(shape):
        raise RankDecreaseError(from_rank=len(shape), to_rank=rank)
    return tuple(shape) + (1,) * (rank - len(shape))


def common_dims(rank_a: int, rank_b: int) -> int:
    return max(rank_a, rank_b)


def _common_extent(axis: int, a: int, b: int) -> int:
    if a == b:
        return a
    # zero-extent axes are sticky and dominate
    if a == 0 or b == 0:
        return 0
    if a == 1:
        return b
    if b == 1:
        return a
    raise NonRecyclableShapeError(axis=axis + 1, from_extent=a, to_extent=b)


def common_shape(shape_a: Shape, shape_b: Shape) -> Shape:
    """Broadcast shape of two operands; fails on the first non-recyclable axis."""
    rank = common_dims(len(shape_a), len(shape_b))
    a = extend_rank(shape_a, rank)
    b = extend_rank(shape_b, rank)
    return tuple(_common_extent(axis, a_i, b_i) for axis, (a_i, b_i) in enumerate(zip(a, b, strict=True)))


def is_recyclable(from_extent: int, to_extent: int) -> bool:
    return from_extent == to_extent or from_extent == 1 or to_extent == 0 or from_extent == 0


def validate_recyclable(from_shape: Shape, to_shape: Shape) -> None:
    """Check that ``from_shape`` can be broadcast to ``to_shape`` axis by axis."""
    source = extend_rank(from_shape, len(to_shape))
    for axis, (from_i, to_i) in enumerate(zip(source, to_shape, strict=True)):
        if not is_recyclable(from_i, to_i):
            raise NonRecyclableShapeError(axis=axis + 1, from_extent=from_i, to_extent=to_i)


def recycle_zeros(from_shape: Shape, to_shape: Shape) -> Shape:
    """Force 0 into ``to_shape`` wherever ``from_shape`` is already empty."""
    return tuple(0 if from_i == 0 else to_i for from_i, to_i in zip(from_shape, to_shape, strict=True))
