"""Dimension-name propagation.

A ``DimNames`` value holds one entry per axis: ``None`` for an unnamed axis,
or a tuple of labels whose length equals that axis' extent. Every shape
transformation derives its names through one function in this module, using
the same table everywhere:

- axis unchanged: keep its names
- axis resized: drop its names
- axis new: unnamed
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from .errors import DimNamesError
from .shape import Shape

AxisNames = tuple[str, ...] | None
DimNames = tuple[AxisNames, ...]


def empty_dim_names(rank: int) -> DimNames:
    return (None,) * rank


def _as_axis_names(raw: object, *, axis: int, extent: int) -> AxisNames:
    if raw is None:
        return None
    if isinstance(raw, str) or not isinstance(raw, Sequence):
        raise DimNamesError(f"Names for axis {axis} must be a sequence of strings")
    labels = tuple(raw)
    for label in labels:
        if not isinstance(label, str):
            raise DimNamesError(f"Names for axis {axis} must be strings, not {type(label).__name__}")
    if len(labels) != extent:
        raise DimNamesError(f"Axis {axis} has extent {extent} but {len(labels)} names were supplied")
    return labels


def normalize_dim_names(raw: object, shape: Shape) -> DimNames:
    """Validate user supplied names against ``shape``.

    ``raw`` may be ``None``, a sequence with one entry per axis, or a mapping
    from 1-based axis number to that axis' labels.
    """
    rank = len(shape)
    if raw is None:
        return empty_dim_names(rank)

    if isinstance(raw, Mapping):
        entries: list[object] = [None] * rank
        for axis, labels in raw.items():
            if not isinstance(axis, int) or not 1 <= axis <= rank:
                raise DimNamesError(f"Dimension-name axis must be between 1 and {rank}, not {axis!r}")
            entries[axis - 1] = labels
        raw = entries

    if isinstance(raw, str) or not isinstance(raw, Sequence):
        raise DimNamesError("Dimension names must be a sequence with one entry per axis")
    if len(raw) != rank:
        raise DimNamesError(f"Dimension names must have {rank} entries, not {len(raw)}")
    return tuple(
        _as_axis_names(entry, axis=axis + 1, extent=extent)
        for axis, (entry, extent) in enumerate(zip(raw, shape, strict=True))
    )


def has_dim_names(names: DimNames) -> bool:
    return any(entry is not None for entry in names)


def extend_dim_names(names: DimNames, rank: int) -> DimNames:
    return tuple(names) + empty_dim_names(rank - len(names))


def broadcast_dim_names(names: DimNames, from_shape: Shape, to_shape: Shape) -> DimNames:
    """Names after recycling ``from_shape`` into ``to_shape``.

    ``from_shape`` may have fewer axes than ``to_shape``; those trailing axes
    are new and come out unnamed.
    """
    out: list[AxisNames] = []
    for axis, to_extent in enumerate(to_shape):
        if axis >= len(from_shape):
            out.append(None)
        elif from_shape[axis] == to_extent:
            out.append(names[axis])
        else:
            out.append(None)
    return tuple(out)


def subset_dim_names(names: DimNames, positions: Sequence[Sequence[int] | None]) -> DimNames:
    """Names of the region addressed by zero-based per-axis ``positions``.

    ``None`` in ``positions`` means the entire axis was selected.
    """
    out: list[AxisNames] = []
    for entry, selected in zip(names, positions, strict=True):
        if entry is None or selected is None:
            out.append(entry)
        else:
            out.append(tuple(entry[pos] for pos in selected))
    return tuple(out)


def reshape_dim_names(names: DimNames, from_shape: Shape, to_shape: Shape) -> DimNames:
    """Keep names on axis ``i`` only while axes ``0..i`` keep their extents.

    With column-major buffer order that prefix condition is exactly when every
    position along axis ``i`` still addresses the same elements.
    """
    out: list[AxisNames] = []
    prefix_intact = True
    for axis, to_extent in enumerate(to_shape):
        if axis >= len(from_shape):
            prefix_intact = False
            out.append(None)
            continue
        prefix_intact = prefix_intact and from_shape[axis] == to_extent
        out.append(names[axis] if prefix_intact else None)
    return tuple(out)


def squeeze_dim_names(names: DimNames, dropped: Sequence[int]) -> DimNames:
    """Drop the entries of zero-based ``dropped`` axes; survivors keep theirs."""
    removed = set(dropped)
    return tuple(entry for axis, entry in enumerate(names) if axis not in removed)


def common_dim_names(
    names_a: DimNames,
    shape_a: Shape,
    names_b: DimNames,
    shape_b: Shape,
    shape: Shape,
) -> DimNames:
    """Merge operand names for a binary result of ``shape``.

    Per axis the first operand wins when its names are present and its extent
    already equals the result extent; otherwise the second operand is tried
    under the same condition.
    """
    a = broadcast_dim_names(names_a, shape_a, shape)
    b = broadcast_dim_names(names_b, shape_b, shape)
    return tuple(left if left is not None else right for left, right in zip(a, b, strict=True))
