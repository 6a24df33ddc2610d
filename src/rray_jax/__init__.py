"""rray-jax public API."""

from .arith import binary_op, unary_op
from .broadcast import broadcast, dims_match
from .dim_names import common_dim_names
from .errors import (
    AxisOutOfRangeError,
    CannotSqueezeError,
    CastError,
    DimNamesError,
    ElementCountMismatchError,
    IndexOutOfBoundsError,
    IndexShapeMismatchError,
    InvalidSubscriptError,
    MissingSubscriptError,
    NonRecyclableShapeError,
    NonScalarSubscriptError,
    OmittedAxisError,
    RankDecreaseError,
    RRayError,
    RRayIndexError,
    RRayRuntimeError,
    RRayShapeError,
    RRayTypeError,
    TooManyAxesError,
    UnknownNameError,
    UnsupportedOperationError,
    WriteLeaseError,
    classify_error,
)
from .index import (
    EMPTY,
    ENTIRE_AXIS,
    AxisSpec,
    Empty,
    EntireAxis,
    Mask,
    Names,
    Positions,
    ResolvedIndex,
    as_axis_spec,
    resolve,
    resolve_yank,
)
from .kernels import cast, elementwise_apply, expand_layout, kernel_cache_info
from .reshape import reshape, squeeze
from .shape import common_dims, common_shape, extend_rank, validate_recyclable
from .subset import (
    WriteLease,
    extract,
    extract_assign,
    head,
    pick,
    pick_assign,
    slice_axis,
    slice_axis_assign,
    subset,
    subset_assign,
    tail,
    yank,
    yank_assign,
)
from .values import OperandKind, Rray, ValueInfo, as_rray, value_info

__all__ = [
    "Rray",
    "as_rray",
    "value_info",
    "OperandKind",
    "ValueInfo",
    "extend_rank",
    "common_dims",
    "common_shape",
    "validate_recyclable",
    "broadcast",
    "dims_match",
    "common_dim_names",
    "AxisSpec",
    "EntireAxis",
    "Empty",
    "Positions",
    "Mask",
    "Names",
    "ENTIRE_AXIS",
    "EMPTY",
    "ResolvedIndex",
    "as_axis_spec",
    "resolve",
    "resolve_yank",
    "subset",
    "subset_assign",
    "slice_axis",
    "slice_axis_assign",
    "yank",
    "yank_assign",
    "extract",
    "extract_assign",
    "pick",
    "pick_assign",
    "head",
    "tail",
    "WriteLease",
    "reshape",
    "squeeze",
    "binary_op",
    "unary_op",
    "elementwise_apply",
    "expand_layout",
    "cast",
    "kernel_cache_info",
    "RRayError",
    "RRayShapeError",
    "RRayIndexError",
    "RRayTypeError",
    "RRayRuntimeError",
    "RankDecreaseError",
    "NonRecyclableShapeError",
    "TooManyAxesError",
    "OmittedAxisError",
    "IndexOutOfBoundsError",
    "IndexShapeMismatchError",
    "UnknownNameError",
    "InvalidSubscriptError",
    "NonScalarSubscriptError",
    "MissingSubscriptError",
    "AxisOutOfRangeError",
    "ElementCountMismatchError",
    "CannotSqueezeError",
    "DimNamesError",
    "CastError",
    "UnsupportedOperationError",
    "WriteLeaseError",
    "classify_error",
]
