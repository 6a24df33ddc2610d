"""Buffer-level collaborators: elementwise kernels, layout expansion and casting.

Nothing in this module knows about dimension names or index specs. Every
function receives raw ``jax.Array`` buffers whose shapes the caller has
already reconciled.
"""

from __future__ import annotations

import os
from functools import lru_cache
from typing import Callable, Final

import jax
from jax import lax
import jax.numpy as jnp

from .errors import CastError, UnsupportedOperationError, classify_error
from .shape import Shape

_USE_JITTED_KERNELS: Final[bool] = os.environ.get("RRAY_JAX_DISABLE_JITTED_KERNELS", "0") != "1"
_KERNEL_CACHE_MAX: Final[int] = max(1, int(os.environ.get("RRAY_JAX_KERNEL_CACHE_MAX", "64")))
_STRICT_CAST: Final[bool] = os.environ.get("RRAY_JAX_STRICT_CAST", "1") != "0"


def _promote_binary_pair(a: jnp.ndarray, b: jnp.ndarray) -> tuple[jnp.ndarray, jnp.ndarray]:
    if a.dtype == b.dtype:
        return a, b
    dtype = jnp.result_type(a, b)
    if a.dtype == dtype:
        return a, lax.convert_element_type(b, dtype)
    if b.dtype == dtype:
        return lax.convert_element_type(a, dtype), b
    return lax.convert_element_type(a, dtype), lax.convert_element_type(b, dtype)


def _lax_add_promoted(a: jnp.ndarray, b: jnp.ndarray) -> jnp.ndarray:
    if a.dtype == b.dtype and jnp.issubdtype(a.dtype, jnp.floating):
        return a + b
    aa, bb = _promote_binary_pair(a, b)
    if aa.dtype == jnp.bool_:
        return lax.add(aa.astype(jnp.int32), bb.astype(jnp.int32))
    return lax.add(aa, bb)


def _lax_sub_promoted(a: jnp.ndarray, b: jnp.ndarray) -> jnp.ndarray:
    aa, bb = _promote_binary_pair(a, b)
    if aa.dtype == jnp.bool_:
        return lax.sub(aa.astype(jnp.int32), bb.astype(jnp.int32))
    return lax.sub(aa, bb)


def _lax_mul_promoted(a: jnp.ndarray, b: jnp.ndarray) -> jnp.ndarray:
    aa, bb = _promote_binary_pair(a, b)
    if aa.dtype == jnp.bool_:
        return lax.mul(aa.astype(jnp.int32), bb.astype(jnp.int32))
    return lax.mul(aa, bb)


def _lax_cmp_promoted(cmp_op: Callable[[jnp.ndarray, jnp.ndarray], jnp.ndarray], a: jnp.ndarray, b: jnp.ndarray) -> jnp.ndarray:
    if a.dtype == b.dtype:
        return cmp_op(a, b)
    aa, bb = _promote_binary_pair(a, b)
    return cmp_op(aa, bb)


_BINARY_OPS: Final[dict[str, Callable[[jnp.ndarray, jnp.ndarray], jnp.ndarray]]] = {
    "+": _lax_add_promoted,
    "-": _lax_sub_promoted,
    "*": _lax_mul_promoted,
    "/": lambda a, b: jnp.true_divide(a, b),
    "**": lambda a, b: jnp.power(a, b),
    "%": lambda a, b: jnp.mod(a, b),
    "//": lambda a, b: jnp.floor_divide(a, b),
    "==": lambda a, b: _lax_cmp_promoted(lax.eq, a, b),
    "!=": lambda a, b: _lax_cmp_promoted(lax.ne, a, b),
    "<": lambda a, b: _lax_cmp_promoted(lax.lt, a, b),
    "<=": lambda a, b: _lax_cmp_promoted(lax.le, a, b),
    ">": lambda a, b: _lax_cmp_promoted(lax.gt, a, b),
    ">=": lambda a, b: _lax_cmp_promoted(lax.ge, a, b),
}

_UNARY_OPS: Final[dict[str, Callable[[jnp.ndarray], jnp.ndarray]]] = {
    "+": lambda x: x,
    "-": lambda x: jnp.negative(x.astype(jnp.int32) if x.dtype == jnp.bool_ else x),
}

BINARY_OP_SYMBOLS: Final[frozenset[str]] = frozenset(_BINARY_OPS)
UNARY_OP_SYMBOLS: Final[frozenset[str]] = frozenset(_UNARY_OPS)


@lru_cache(maxsize=_KERNEL_CACHE_MAX)
def _jitted_binary_kernel(op: str) -> Callable[[jnp.ndarray, jnp.ndarray], jnp.ndarray]:
    return jax.jit(_BINARY_OPS[op])


@lru_cache(maxsize=_KERNEL_CACHE_MAX)
def _jitted_unary_kernel(op: str) -> Callable[[jnp.ndarray], jnp.ndarray]:
    return jax.jit(_UNARY_OPS[op])


def elementwise_apply(op: str, a: jnp.ndarray, b: jnp.ndarray) -> jnp.ndarray:
    """Apply binary ``op`` to two buffers that already share one shape."""
    if op not in _BINARY_OPS:
        raise UnsupportedOperationError(op)
    if a.shape != b.shape:
        raise ValueError(f"elementwise_apply requires equal shapes, got {a.shape} and {b.shape}")
    if _USE_JITTED_KERNELS:
        return _jitted_binary_kernel(op)(a, b)
    return _BINARY_OPS[op](a, b)


def elementwise_unary(op: str, x: jnp.ndarray) -> jnp.ndarray:
    if op not in _UNARY_OPS:
        raise UnsupportedOperationError(op)
    if _USE_JITTED_KERNELS:
        return _jitted_unary_kernel(op)(x)
    return _UNARY_OPS[op](x)


def kernel_cache_info() -> dict[str, object]:
    return {
        "jitted": _USE_JITTED_KERNELS,
        "binary": _jitted_binary_kernel.cache_info()._asdict(),
        "unary": _jitted_unary_kernel.cache_info()._asdict(),
    }


def expand_layout(buffer: jnp.ndarray, from_shape: Shape, to_shape: Shape) -> jnp.ndarray:
    """Repeat ``buffer`` (laid out as ``from_shape``) into ``to_shape``.

    Callers guarantee ``from_shape`` has the rank of ``to_shape`` and passed
    ``validate_recyclable``. JAX layout failures surface as ``RRayError``
    categories through ``classify_error``.
    """
    try:
        source = jnp.reshape(buffer, from_shape)
        if tuple(from_shape) == tuple(to_shape):
            return source
        return jnp.broadcast_to(source, to_shape)
    except (TypeError, ValueError) as err:
        raise classify_error(err) from err


def cast(value: jnp.ndarray, dtype) -> jnp.ndarray:
    """Cast ``value`` to ``dtype``; lossy casts fail with ``CastError``.

    Widening casts always succeed. Narrowing casts succeed only when every
    element survives a round trip, unless ``RRAY_JAX_STRICT_CAST=0``.
    """
    target = jnp.dtype(dtype)
    source = jnp.dtype(value.dtype)
    if source == target:
        return value
    if jnp.promote_types(source, target) == target:
        return value.astype(target)

    try:
        converted = value.astype(target)
    except (TypeError, ValueError) as err:
        raise CastError(from_dtype=source.name, to_dtype=target.name, reason=str(err)) from err

    if not _STRICT_CAST:
        return converted
    if not bool(jnp.array_equal(converted.astype(source), value)):
        raise CastError(from_dtype=source.name, to_dtype=target.name, reason="lossy cast")
    return converted
