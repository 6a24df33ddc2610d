"""Index resolution: raw per-axis subscripts to zero-based position lists.

Subscripts are 1-based. Each axis spec is one of the closed set of variants
``EntireAxis | Positions | Mask | Names | Empty``; raw Python values are
coerced with ``as_axis_spec``. In a spec list ``None`` marks an omitted
subscript: omitted trailing subscripts are ignored, an omitted interior
subscript is an error.
"""

from __future__ import annotations

import logging
import numbers
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Union

import jax
import jax.numpy as jnp
import numpy as np

from .dim_names import DimNames
from .errors import (
    IndexOutOfBoundsError,
    IndexShapeMismatchError,
    InvalidSubscriptError,
    MissingSubscriptError,
    NonScalarSubscriptError,
    OmittedAxisError,
    TooManyAxesError,
    UnknownNameError,
)
from .shape import Shape, shape_size

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EntireAxis:
    """Select every position along the axis."""


@dataclass(frozen=True)
class Empty:
    """Select nothing; the axis is kept with extent 0."""


@dataclass(frozen=True)
class Positions:
    """1-based positions; all-negative values select everything except them."""

    values: tuple[int, ...]
    shape: tuple[int, ...] | None = None


@dataclass(frozen=True)
class Mask:
    """Logical selector, flattened in column-major order with its original shape."""

    values: tuple[bool, ...]
    shape: tuple[int, ...]


@dataclass(frozen=True)
class Names:
    values: tuple[str, ...]


AxisSpec = Union[EntireAxis, Empty, Positions, Mask, Names]

ENTIRE_AXIS = EntireAxis()
EMPTY = Empty()

_SPEC_TYPES = (EntireAxis, Empty, Positions, Mask, Names)


@dataclass(frozen=True)
class ResolvedIndex:
    """Zero-based positions along one axis of ``extent``.

    ``positions is None`` stands for the entire axis without materializing it.
    """

    extent: int
    positions: tuple[int, ...] | None = None

    @property
    def is_entire(self) -> bool:
        return self.positions is None

    def __len__(self) -> int:
        if self.positions is None:
            return self.extent
        return len(self.positions)

    def as_positions(self) -> tuple[int, ...]:
        if self.positions is None:
            return tuple(range(self.extent))
        return self.positions

    def to_array(self) -> jnp.ndarray:
        return jnp.asarray(self.as_positions(), dtype=jnp.int32)


def _is_bool(value: object) -> bool:
    return isinstance(value, (bool, np.bool_))


def _to_int_position(value: object) -> int:
    if isinstance(value, numbers.Integral):
        return int(value)
    if isinstance(value, numbers.Real):
        real = float(value)
        if real.is_integer():
            return int(real)
    raise InvalidSubscriptError(f"Subscript positions must be integers, not {value!r}")


def _positions_or_empty(values: Sequence[object], shape: tuple[int, ...] | None = None) -> AxisSpec:
    ints = tuple(_to_int_position(value) for value in values)
    if not ints:
        return EMPTY
    return Positions(ints, shape)


def _spec_from_array(arr: np.ndarray) -> AxisSpec:
    if arr.ndim == 0:
        return as_axis_spec(arr.item())

    shape = tuple(int(d) for d in arr.shape)
    flat = np.ravel(arr, order="F")
    kind = arr.dtype.kind
    if kind == "b":
        return Mask(tuple(bool(v) for v in flat), shape)
    if kind in "iuf":
        return _positions_or_empty(flat.tolist(), shape if arr.ndim > 1 else None)
    if kind in "US":
        return Names(tuple(str(v) for v in flat))
    raise InvalidSubscriptError(f"Cannot subset with an array of dtype {arr.dtype}")


def as_axis_spec(raw: object) -> AxisSpec:
    """Coerce one raw subscript into an ``AxisSpec``."""
    if isinstance(raw, _SPEC_TYPES):
        return raw
    if raw is Ellipsis:
        return ENTIRE_AXIS
    if raw is None:
        raise InvalidSubscriptError("An omitted subscript has no axis spec")
    if isinstance(raw, slice):
        if raw.start is None and raw.stop is None and raw.step is None:
            return ENTIRE_AXIS
        raise InvalidSubscriptError("Only the full slice `:` is supported; pass positions instead")

    from .values import Rray

    if isinstance(raw, Rray):
        return _spec_from_array(np.asarray(raw.data))
    if isinstance(raw, (jax.Array, np.ndarray)):
        return _spec_from_array(np.asarray(raw))
    if isinstance(raw, str):
        return Names((raw,))
    if _is_bool(raw):
        return Mask((bool(raw),), (1,))
    if isinstance(raw, numbers.Real):
        return _positions_or_empty([raw])
    if isinstance(raw, range):
        return _positions_or_empty(list(raw))

    if isinstance(raw, (list, tuple)):
        items = list(raw)
        if not items:
            return EMPTY
        if all(isinstance(item, str) for item in items):
            return Names(tuple(items))
        if all(_is_bool(item) for item in items):
            return Mask(tuple(bool(item) for item in items), (len(items),))
        if all(isinstance(item, numbers.Real) and not _is_bool(item) for item in items):
            return _positions_or_empty(items)
        raise InvalidSubscriptError("A subscript list must hold only integers, only logicals, or only names")

    raise InvalidSubscriptError(f"Unsupported subscript type {type(raw).__name__}")


def trim_omitted(raw_specs: Sequence[object], *, ignore_trailing: bool = True) -> list[object]:
    """Drop omitted trailing subscripts; reject omitted interior ones."""
    specs = list(raw_specs)
    if ignore_trailing:
        while specs and specs[-1] is None:
            specs.pop()
    for axis, spec in enumerate(specs):
        if spec is None:
            raise OmittedAxisError(axis=axis + 1)
    return specs


def _check_position_shape(spec: Positions, *, axis: int) -> None:
    if spec.shape is not None and len(spec.shape) > 1:
        raise IndexShapeMismatchError(axis=axis, index_shape=spec.shape, expected=(len(spec.values),))


def _resolve_positions(values: Sequence[int], *, axis: int, extent: int) -> tuple[int, ...]:
    nonzero = [value for value in values if value != 0]
    if not nonzero:
        return ()

    has_positive = any(value > 0 for value in nonzero)
    has_negative = any(value < 0 for value in nonzero)
    if has_positive and has_negative:
        raise InvalidSubscriptError(f"Cannot mix positive and negative subscripts on axis {axis}")

    if has_positive:
        out: list[int] = []
        for value in nonzero:
            if value > extent:
                raise IndexOutOfBoundsError(axis=axis, position=value, extent=extent)
            out.append(value - 1)
        return tuple(out)

    excluded: set[int] = set()
    for value in nonzero:
        if -value > extent:
            raise IndexOutOfBoundsError(axis=axis, position=value, extent=extent)
        excluded.add(-value - 1)
    return tuple(pos for pos in range(extent) if pos not in excluded)


def _resolve_mask(values: Sequence[bool], *, axis: int, extent: int, index_shape: tuple[int, ...]) -> tuple[int, ...] | None:
    if len(values) == 1:
        return None if values[0] else ()
    if len(values) != extent:
        raise IndexShapeMismatchError(axis=axis, index_shape=index_shape, expected=(extent,))
    return tuple(pos for pos, keep in enumerate(values) if keep)


def _resolve_names(names: tuple[str, ...], *, axis: int, labels: tuple[str, ...] | None) -> tuple[int, ...]:
    if labels is None:
        raise UnknownNameError(axis=axis, names=names, reason="the axis has no dimension names")
    lookup: dict[str, int] = {}
    for pos, label in enumerate(labels):
        lookup.setdefault(label, pos)
    unknown = tuple(name for name in names if name not in lookup)
    if unknown:
        raise UnknownNameError(axis=axis, names=unknown)
    return tuple(lookup[name] for name in names)


def resolve_axis(spec: AxisSpec, *, axis: int, extent: int, labels: tuple[str, ...] | None = None) -> ResolvedIndex:
    """Resolve one spec against an axis; ``axis`` is the 1-based axis number."""
    if isinstance(spec, EntireAxis):
        return ResolvedIndex(extent)
    if isinstance(spec, Empty):
        return ResolvedIndex(extent, ())
    if isinstance(spec, Positions):
        _check_position_shape(spec, axis=axis)
        return ResolvedIndex(extent, _resolve_positions(spec.values, axis=axis, extent=extent))
    if isinstance(spec, Mask):
        if len(spec.shape) > 1:
            raise IndexShapeMismatchError(axis=axis, index_shape=spec.shape, expected=(extent,))
        return ResolvedIndex(extent, _resolve_mask(spec.values, axis=axis, extent=extent, index_shape=spec.shape))
    if isinstance(spec, Names):
        return ResolvedIndex(extent, _resolve_names(spec.values, axis=axis, labels=labels))
    raise InvalidSubscriptError(f"Unsupported axis spec {spec!r}")


def resolve(
    raw_specs: Sequence[object],
    shape: Shape,
    dim_names: DimNames | None = None,
    *,
    ignore_trailing: bool = True,
) -> list[ResolvedIndex]:
    """Resolve a partial per-axis subscript list against ``shape``.

    Fewer specs than axes are padded on the right with the entire axis.
    """
    rank = len(shape)
    specs = trim_omitted(raw_specs, ignore_trailing=ignore_trailing)
    if len(specs) > rank:
        raise TooManyAxesError(rank=rank, requested=len(specs))

    names = dim_names if dim_names is not None else (None,) * rank
    axis_specs = [as_axis_spec(spec) for spec in specs]
    axis_specs.extend([ENTIRE_AXIS] * (rank - len(axis_specs)))

    resolved = [
        resolve_axis(spec, axis=axis + 1, extent=extent, labels=names[axis])
        for axis, (spec, extent) in enumerate(zip(axis_specs, shape, strict=True))
    ]
    logger.debug("resolved %d subscript(s) against shape %s -> counts %s", len(specs), shape, [len(r) for r in resolved])
    return resolved


def resolve_yank(raw: object, shape: Shape) -> ResolvedIndex:
    """Resolve a subscript against the column-major flattening of ``shape``."""
    size = shape_size(shape)
    if raw is None:
        return ResolvedIndex(size)

    spec = as_axis_spec(raw)
    if isinstance(spec, Names):
        raise InvalidSubscriptError("Cannot yank with names")
    if isinstance(spec, Mask):
        if len(spec.shape) > 1 and spec.shape != tuple(shape):
            raise IndexShapeMismatchError(axis=1, index_shape=spec.shape, expected=tuple(shape))
        if len(spec.shape) <= 1 and len(spec.values) not in (1, size):
            raise IndexShapeMismatchError(axis=1, index_shape=spec.shape, expected=(size,))
        return ResolvedIndex(size, _resolve_mask(spec.values, axis=1, extent=size, index_shape=spec.shape))

    resolved = resolve_axis(spec, axis=1, extent=size)
    logger.debug("resolved yank subscript against %d element(s) -> %d selected", size, len(resolved))
    return resolved


def validate_single(resolved: Sequence[ResolvedIndex]) -> None:
    """Require every axis to address exactly one position."""
    counts = tuple((axis + 1, len(index)) for axis, index in enumerate(resolved) if len(index) != 1)
    if counts:
        raise NonScalarSubscriptError(counts=counts)


def validate_explicit(raw_specs: Sequence[object], rank: int) -> None:
    """Require a subscript other than the entire axis for each of ``rank`` axes.

    Axes padded on the right count as missing too.
    """
    missing = [axis + 1 for axis, spec in enumerate(raw_specs) if isinstance(as_axis_spec(spec), EntireAxis)]
    missing.extend(range(len(raw_specs) + 1, rank + 1))
    if missing:
        raise MissingSubscriptError(axes=tuple(missing))
