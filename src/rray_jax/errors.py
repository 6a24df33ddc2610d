"""Structured error types for shape, index and cast failures."""

from __future__ import annotations

from dataclasses import dataclass


class RRayError(Exception):
    """Base class for structured rray-jax errors."""


class RRayShapeError(RRayError):
    """Shape/rank/axis compatibility failure."""


class RRayIndexError(RRayError):
    """Subscript resolution failure."""


class RRayTypeError(RRayError):
    """Element type or operand kind compatibility failure."""


class RRayRuntimeError(RRayError):
    """Generic engine failure that is not about shapes, indices or types."""


def _axis_list(axes: tuple[int, ...]) -> str:
    return ", ".join(str(axis) for axis in axes)


@dataclass(frozen=True)
class RankDecreaseError(RRayShapeError):
    from_rank: int
    to_rank: int

    def __str__(self) -> str:
        return f"Cannot decrease dimensions from rank {self.from_rank} to rank {self.to_rank}"


@dataclass(frozen=True)
class NonRecyclableShapeError(RRayShapeError):
    """Two extents on the same axis cannot be recycled to each other."""

    axis: int
    from_extent: int
    to_extent: int

    def __str__(self) -> str:
        return (
            f"Non-recyclable dimensions on axis {self.axis}: "
            f"extent {self.from_extent} vs extent {self.to_extent}"
        )


@dataclass(frozen=True)
class TooManyAxesError(RRayIndexError):
    rank: int
    requested: int

    def __str__(self) -> str:
        return f"The dimensionality of `x` is {self.rank}. Cannot subset into dimension {self.requested}."


@dataclass(frozen=True)
class OmittedAxisError(RRayIndexError):
    axis: int

    def __str__(self) -> str:
        return f"Subscript {self.axis} must not be omitted; use an explicit entire-axis spec"


@dataclass(frozen=True)
class MissingSubscriptError(RRayIndexError):
    """Strict single-element access left these axes without a subscript."""

    axes: tuple[int, ...]

    def __str__(self) -> str:
        noun = "Subscript" if len(self.axes) == 1 else "Subscripts"
        return f"{noun} {_axis_list(self.axes)} must not be missing."


@dataclass(frozen=True)
class IndexOutOfBoundsError(RRayIndexError):
    axis: int
    position: int
    extent: int

    def __str__(self) -> str:
        return f"Position {self.position} on axis {self.axis} is out of bounds for extent {self.extent}"


@dataclass(frozen=True)
class IndexShapeMismatchError(RRayIndexError):
    """A logical or positional index does not fit the axis (or array) it addresses."""

    axis: int
    index_shape: tuple[int, ...]
    expected: tuple[int, ...]

    def __str__(self) -> str:
        return (
            f"Index of shape {self.index_shape} on axis {self.axis} "
            f"must have shape (1,) or {self.expected}"
        )


@dataclass(frozen=True)
class UnknownNameError(RRayIndexError):
    axis: int
    names: tuple[str, ...]
    reason: str = "not found"

    def __str__(self) -> str:
        quoted = ", ".join(repr(name) for name in self.names)
        return f"Cannot subset axis {self.axis} by name ({quoted}): {self.reason}"


@dataclass(frozen=True)
class InvalidSubscriptError(RRayIndexError):
    message: str

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class NonScalarSubscriptError(RRayIndexError):
    """Every offending axis with the number of positions it resolved to."""

    counts: tuple[tuple[int, int], ...]

    def __str__(self) -> str:
        return "\n".join(
            f"Subscript {axis} must result in an index with size 1, not {count}."
            for axis, count in self.counts
        )

    @property
    def axes(self) -> tuple[int, ...]:
        return tuple(axis for axis, _ in self.counts)


@dataclass(frozen=True)
class AxisOutOfRangeError(RRayIndexError):
    axis: int
    rank: int

    def __str__(self) -> str:
        return f"`axis` must be between 1 and {self.rank}, not {self.axis}"


@dataclass(frozen=True)
class ElementCountMismatchError(RRayShapeError):
    from_shape: tuple[int, ...]
    to_shape: tuple[int, ...]

    def __str__(self) -> str:
        return (
            f"Cannot reshape {self.from_shape} into {self.to_shape}: "
            "the total number of elements must not change"
        )


@dataclass(frozen=True)
class CannotSqueezeError(RRayShapeError):
    axes: tuple[int, ...]
    extents: tuple[int, ...]

    def __str__(self) -> str:
        extents = ", ".join(str(extent) for extent in self.extents)
        return f"Cannot squeeze axes {_axis_list(self.axes)} with extents {extents}; only extent 1 can be dropped"


@dataclass(frozen=True)
class DimNamesError(RRayShapeError):
    message: str

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class CastError(RRayTypeError):
    from_dtype: str
    to_dtype: str
    reason: str = "lossy cast"

    def __str__(self) -> str:
        return f"Cannot cast <{self.from_dtype}> to <{self.to_dtype}>: {self.reason}"


@dataclass(frozen=True)
class UnsupportedOperationError(RRayTypeError):
    op: str

    def __str__(self) -> str:
        return f"Unsupported elementwise operation {self.op!r}"


@dataclass(frozen=True)
class WriteLeaseError(RRayRuntimeError):
    message: str

    def __str__(self) -> str:
        return self.message


def classify_error(err: Exception) -> RRayError:
    """Best-effort classification of foreign exceptions into the category classes."""
    if isinstance(err, RRayError):
        return err

    message = str(err)
    lowered = message.lower()

    shape_markers = (
        "shape",
        "rank",
        "axis",
        "broadcast",
        "reshape",
        "size",
        "dimension",
    )
    if any(marker in lowered for marker in shape_markers):
        return RRayShapeError(message)

    index_markers = ("index", "indices", "out of bounds", "subscript")
    if any(marker in lowered for marker in index_markers):
        return RRayIndexError(message)

    if isinstance(err, TypeError) or "dtype" in lowered or "type" in lowered:
        return RRayTypeError(message)

    return RRayRuntimeError(message)
