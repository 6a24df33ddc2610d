"""Subsetting engine: subset, slice, yank and extract, with their assignment forms.

- ``subset`` never drops axes and ignores omitted trailing subscripts, so
  ``subset(x, 1)`` equals ``subset(x, 1, None)``.
- ``yank`` addresses elements by column-major position and always returns
  a rank-1 result.
- ``extract`` addresses elements per axis like ``subset`` and flattens the
  region to rank 1 without names.
- ``pick`` is the strict unique-element form of ``yank``/``extract``.

Every ``*_assign`` function reads the target region with the same resolution
as its read counterpart, casts the value to the target element type,
broadcasts it to the region shape and only then builds the new buffer. They
return a new ``Rray``; ``x[...] = value`` commits the result into ``x``
under a ``WriteLease``.
"""

from __future__ import annotations

import logging
import numbers
from collections.abc import Sequence

import jax.numpy as jnp

from .broadcast import broadcast
from .dim_names import empty_dim_names, subset_dim_names
from .errors import AxisOutOfRangeError, InvalidSubscriptError, WriteLeaseError
from .index import EMPTY, ENTIRE_AXIS, Positions, ResolvedIndex, resolve, resolve_yank, validate_explicit, validate_single
from .kernels import cast
from .values import Rray, as_rray

logger = logging.getLogger(__name__)


class WriteLease:
    """Exclusive write access to an ``Rray`` for one read-modify-write sequence.

    Nothing is visible on the target until ``commit``; leaving the block
    without a commit leaves it untouched.
    """

    def __init__(self, target: Rray) -> None:
        self._target = target
        self._active = False

    def __enter__(self) -> "WriteLease":
        if self._target._leased:
            raise WriteLeaseError("Rray is already leased for writing")
        self._target._leased = True
        self._active = True
        return self

    def commit(self, value: Rray) -> None:
        if not self._active:
            raise WriteLeaseError("Cannot commit outside an active write lease")
        self._target._data = value.data
        self._target._dim_names = value.dim_names
        logger.debug("committed write of shape %s", value.shape)

    def __exit__(self, exc_type, exc, tb) -> None:
        self._target._leased = False
        self._active = False


def take_region(x: Rray, resolved: Sequence[ResolvedIndex]) -> Rray:
    data = x.data
    for axis, index in enumerate(resolved):
        if index.is_entire:
            continue
        data = jnp.take(data, index.to_array(), axis=axis)
    names = subset_dim_names(x.dim_names, [index.positions for index in resolved])
    return Rray._wrap(data, names)


def _scatter_region(data: jnp.ndarray, resolved: Sequence[ResolvedIndex], region: jnp.ndarray) -> jnp.ndarray:
    if any(len(index) == 0 for index in resolved):
        return data
    if all(index.is_entire for index in resolved):
        return jnp.reshape(region, data.shape)
    return data.at[jnp.ix_(*(index.to_array() for index in resolved))].set(region)


def _conform(value: object, target: Rray) -> jnp.ndarray:
    incoming = as_rray(value)
    data = cast(incoming.data, target.dtype)
    return broadcast(Rray._wrap(data, incoming.dim_names), target.shape).data


def _validate_axis(axis: object, rank: int) -> int:
    if isinstance(axis, bool) or not isinstance(axis, numbers.Integral):
        raise InvalidSubscriptError(f"`axis` must be a single integer, not {axis!r}")
    axis = int(axis)
    if not 1 <= axis <= rank:
        raise AxisOutOfRangeError(axis=axis, rank=rank)
    return axis


def _front_pad(positions: object, axis: int) -> list[object]:
    return [ENTIRE_AXIS] * (axis - 1) + [positions]


# ------------------------------------------------------------------------------


def subset(x: object, *specs: object) -> Rray:
    """Rank-preserving subset by per-axis subscripts."""
    value = as_rray(x)
    return take_region(value, resolve(specs, value.shape, value.dim_names))


def subset_assign(x: object, *specs: object, value: object) -> Rray:
    target = as_rray(x)
    resolved = resolve(specs, target.shape, target.dim_names)
    region = take_region(target, resolved)
    incoming = _conform(value, region)
    return Rray._wrap(_scatter_region(target.data, resolved, incoming), target.dim_names)


def subset_assign_inplace(x: Rray, specs: Sequence[object], value: object) -> None:
    with WriteLease(x) as lease:
        lease.commit(subset_assign(x, *specs, value=value))


def slice_axis(x: object, positions: object, axis: object) -> Rray:
    """Subset a single 1-based ``axis``; every other axis is kept whole."""
    value = as_rray(x)
    axis = _validate_axis(axis, value.rank)
    return subset(value, *_front_pad(positions, axis))


def slice_axis_assign(x: object, positions: object, axis: object, value: object) -> Rray:
    target = as_rray(x)
    axis = _validate_axis(axis, target.rank)
    return subset_assign(target, *_front_pad(positions, axis), value=value)


# ------------------------------------------------------------------------------


def _yank(x: Rray, i: object, *, single: bool) -> tuple[Rray, ResolvedIndex]:
    resolved = resolve_yank(i, x.shape)
    if single:
        validate_single([resolved])

    flat = jnp.ravel(x.data, order="F")
    if not resolved.is_entire:
        flat = jnp.take(flat, resolved.to_array(), axis=0)

    if x.rank == 1:
        names = subset_dim_names(x.dim_names, [resolved.positions])
    else:
        names = empty_dim_names(1)
    return Rray._wrap(flat, names), resolved


def yank(x: object, i: object = None) -> Rray:
    """Rank-1 selection by column-major position or logical mask.

    Names survive only when ``x`` is already rank 1.
    """
    out, _ = _yank(as_rray(x), i, single=False)
    return out


def _yank_assign(target: Rray, i: object, value: object, *, single: bool) -> Rray:
    selected, resolved = _yank(target, i, single=single)
    incoming = _conform(value, selected)

    flat = jnp.ravel(target.data, order="F")
    if len(resolved) and resolved.is_entire:
        flat = incoming
    elif len(resolved):
        flat = flat.at[resolved.to_array()].set(incoming)
    data = jnp.reshape(flat, target.shape, order="F")
    return Rray._wrap(data, target.dim_names)


def yank_assign(x: object, i: object = None, *, value: object) -> Rray:
    return _yank_assign(as_rray(x), i, value, single=False)


# ------------------------------------------------------------------------------


def _extract(x: Rray, specs: Sequence[object], *, single: bool, ignore_trailing: bool = True) -> tuple[Rray, list[ResolvedIndex], tuple[int, ...]]:
    resolved = resolve(specs, x.shape, x.dim_names, ignore_trailing=ignore_trailing)
    if single:
        validate_explicit(specs, x.rank)
        validate_single(resolved)
    region = take_region(x, resolved)
    flat = jnp.ravel(region.data, order="F")
    return Rray._wrap(flat, empty_dim_names(1)), resolved, region.shape


def extract(x: object, *specs: object) -> Rray:
    """Per-axis selection flattened to rank 1; names are never kept."""
    out, _, _ = _extract(as_rray(x), specs, single=False)
    return out


def _extract_assign(target: Rray, specs: Sequence[object], value: object, *, single: bool, ignore_trailing: bool = True) -> Rray:
    selected, resolved, region_shape = _extract(target, specs, single=single, ignore_trailing=ignore_trailing)
    incoming = _conform(value, selected)
    region = jnp.reshape(incoming, region_shape, order="F")
    return Rray._wrap(_scatter_region(target.data, resolved, region), target.dim_names)


def extract_assign(x: object, *specs: object, value: object) -> Rray:
    return _extract_assign(as_rray(x), specs, value, single=False)


# ------------------------------------------------------------------------------


def pick(x: object, *specs: object) -> Rray:
    """Address exactly one element; the result has shape ``(1,)`` and no names.

    One subscript is a column-major position, several are per-axis positions
    and then every axis needs its own subscript. Omitted subscripts are never
    ignored here.
    """
    value = as_rray(x)
    if not specs:
        raise InvalidSubscriptError("`pick` requires at least one subscript")
    if len(specs) == 1:
        if specs[0] is None:
            raise InvalidSubscriptError("Subscript 1 must not be omitted")
        out, _ = _yank(Rray._wrap(value.data, empty_dim_names(value.rank)), specs[0], single=True)
        return out
    out, _, _ = _extract(value, specs, single=True, ignore_trailing=False)
    return out


def pick_assign(x: object, *specs: object, value: object) -> Rray:
    target = as_rray(x)
    if not specs:
        raise InvalidSubscriptError("`pick` requires at least one subscript")
    if len(specs) == 1:
        if specs[0] is None:
            raise InvalidSubscriptError("Subscript 1 must not be omitted")
        return _yank_assign(target, specs[0], value, single=True)
    return _extract_assign(target, specs, value, single=True, ignore_trailing=False)


# ------------------------------------------------------------------------------


def _as_count(n: object) -> int:
    if isinstance(n, (list, tuple)):
        if len(n) != 1:
            raise InvalidSubscriptError(f"`n` must be size 1, not {len(n)}.")
        n = n[0]
    if isinstance(n, bool) or not isinstance(n, numbers.Integral):
        raise InvalidSubscriptError(f"`n` must be an integer, not {n!r}")
    return int(n)


def _leading_count(n: object, size: int) -> int:
    count = _as_count(n)
    if count < 0:
        return max(size + count, 0)
    return min(count, size)


def head(x: object, n: object = 6) -> Rray:
    """First ``n`` entries along axis 1; negative ``n`` drops the last ``|n|``."""
    value = as_rray(x)
    count = _leading_count(n, value.shape[0])
    spec = Positions(tuple(range(1, count + 1))) if count else EMPTY
    return subset(value, spec)


def tail(x: object, n: object = 6) -> Rray:
    """Last ``n`` entries along axis 1; negative ``n`` drops the first ``|n|``."""
    value = as_rray(x)
    size = value.shape[0]
    count = _leading_count(n, size)
    spec = Positions(tuple(range(size - count + 1, size + 1))) if count else EMPTY
    return subset(value, spec)
