"""Elementwise arithmetic with broadcasting and name propagation.

Operands are classified into a closed set of kinds and the pair of kinds
selects the handler from one table. At least one operand must be an
``Rray``; native scalars and arrays on either side are wrapped first.
"""

from __future__ import annotations

import logging
from typing import Callable, Final

from .broadcast import broadcast, dims_match
from .dim_names import common_dim_names
from .errors import UnsupportedOperationError
from .kernels import BINARY_OP_SYMBOLS, UNARY_OP_SYMBOLS, elementwise_apply, elementwise_unary
from .shape import common_dims, common_shape
from .values import OperandKind, Rray, as_rray, validate_operand

logger = logging.getLogger(__name__)

_Handler = Callable[[str, object, object], Rray]


def _arith_base(op: str, left: object, right: object) -> Rray:
    x = as_rray(left)
    y = as_rray(right)

    # extend ranks first so names line up axis by axis
    rank = common_dims(x.rank, y.rank)
    x = dims_match(x, rank)
    y = dims_match(y, rank)

    shape = common_shape(x.shape, y.shape)
    names = common_dim_names(x.dim_names, x.shape, y.dim_names, y.shape, shape)

    logger.debug("%s on %s and %s -> %s", op, x.shape, y.shape, shape)
    data = elementwise_apply(op, broadcast(x, shape).data, broadcast(y, shape).data)
    return Rray._wrap(data, names)


def _incompatible(op: str, left: object, right: object) -> Rray:
    raise TypeError(
        f"Incompatible operand types for {op!r}: "
        f"{type(left).__name__} and {type(right).__name__}; at least one must be an Rray"
    )


_DISPATCH: Final[dict[tuple[OperandKind, OperandKind], _Handler]] = {
    (OperandKind.ENGINE_ARRAY, OperandKind.ENGINE_ARRAY): _arith_base,
    (OperandKind.ENGINE_ARRAY, OperandKind.NATIVE_ARRAY): _arith_base,
    (OperandKind.ENGINE_ARRAY, OperandKind.NATIVE_SCALAR): _arith_base,
    (OperandKind.NATIVE_ARRAY, OperandKind.ENGINE_ARRAY): _arith_base,
    (OperandKind.NATIVE_SCALAR, OperandKind.ENGINE_ARRAY): _arith_base,
}


def binary_op(op: str, left: object, right: object) -> Rray:
    if op not in BINARY_OP_SYMBOLS:
        raise UnsupportedOperationError(op)
    kinds = (
        validate_operand(left, where="left operand"),
        validate_operand(right, where="right operand"),
    )
    return _DISPATCH.get(kinds, _incompatible)(op, left, right)


def unary_op(op: str, value: object) -> Rray:
    if op not in UNARY_OP_SYMBOLS:
        raise UnsupportedOperationError(op)
    x = as_rray(value)
    return Rray._wrap(elementwise_unary(op, x.data), x.dim_names)
