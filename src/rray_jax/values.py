"""Runtime value model: the ``Rray`` array value and operand classification."""

from __future__ import annotations

import numbers
from dataclasses import dataclass
from enum import Enum

import jax
import jax.numpy as jnp
import numpy as np

from .dim_names import DimNames, has_dim_names, normalize_dim_names
from .shape import Shape, as_shape, shape_size


def as_jax_array(value: object) -> jnp.ndarray:
    if isinstance(value, Rray):
        return value.data
    if isinstance(value, jax.Array):
        return value
    if isinstance(value, range):
        value = list(value)
    return jnp.asarray(value)


def _as_buffer(value: object) -> jnp.ndarray:
    arr = as_jax_array(value)
    if arr.ndim == 0:
        return jnp.reshape(arr, (1,))
    return arr


class Rray:
    """An array buffer paired with per-axis dimension names.

    The buffer is a ``jax.Array`` of rank >= 1; scalars are promoted to shape
    ``(1,)``. Values are treated as immutable except through ``x[...] = v``,
    which swaps in a complete new buffer under a write lease.
    """

    __slots__ = ("_data", "_dim_names", "_leased")

    def __init__(self, data: object, dim_names: object = None) -> None:
        buffer = _as_buffer(data)
        self._data = buffer
        self._dim_names: DimNames = normalize_dim_names(dim_names, tuple(int(d) for d in buffer.shape))
        self._leased = False

    @classmethod
    def from_values(cls, values: object, shape: object = None, dim_names: object = None) -> "Rray":
        """Fill ``shape`` from ``values`` in column-major order."""
        flat = jnp.ravel(as_jax_array(values))
        if shape is None:
            return cls(flat, dim_names)
        target = as_shape(shape)
        if shape_size(target) != flat.shape[0]:
            raise ValueError(f"{flat.shape[0]} values cannot fill shape {target}")
        return cls(jnp.reshape(flat, target, order="F"), dim_names)

    @classmethod
    def _wrap(cls, data: jnp.ndarray, dim_names: DimNames) -> "Rray":
        # names already validated by the caller
        out = cls.__new__(cls)
        out._data = data
        out._dim_names = dim_names
        out._leased = False
        return out

    @property
    def data(self) -> jnp.ndarray:
        return self._data

    @property
    def shape(self) -> Shape:
        return tuple(int(d) for d in self._data.shape)

    @property
    def rank(self) -> int:
        return self._data.ndim

    @property
    def size(self) -> int:
        return shape_size(self.shape)

    @property
    def dtype(self):
        return self._data.dtype

    @property
    def dim_names(self) -> DimNames:
        return self._dim_names

    def with_dim_names(self, dim_names: object) -> "Rray":
        return Rray(self._data, dim_names)

    def tolist(self) -> list:
        return self._data.tolist()

    def __len__(self) -> int:
        return self.shape[0]

    def __repr__(self) -> str:
        names = f", dim_names={self._dim_names!r}" if has_dim_names(self._dim_names) else ""
        return f"Rray(shape={self.shape}, dtype={self.dtype}{names})\n{self._data}"

    def __iter__(self):
        """Yield the rank-preserving subsets along axis 1, one position at a time."""
        from .subset import subset

        for position in range(1, self.shape[0] + 1):
            yield subset(self, position)

    def __getitem__(self, key: object) -> "Rray":
        from .subset import subset

        return subset(self, *_as_key_tuple(key))

    def __setitem__(self, key: object, value: object) -> None:
        from .subset import subset_assign_inplace

        subset_assign_inplace(self, _as_key_tuple(key), value)

    def __pos__(self) -> "Rray":
        from .arith import unary_op

        return unary_op("+", self)

    def __neg__(self) -> "Rray":
        from .arith import unary_op

        return unary_op("-", self)

    def _binary(self, op: str, other: object, *, reflected: bool = False) -> "Rray":
        from .arith import binary_op

        if reflected:
            return binary_op(op, other, self)
        return binary_op(op, self, other)

    def __add__(self, other):
        return self._binary("+", other)

    def __radd__(self, other):
        return self._binary("+", other, reflected=True)

    def __sub__(self, other):
        return self._binary("-", other)

    def __rsub__(self, other):
        return self._binary("-", other, reflected=True)

    def __mul__(self, other):
        return self._binary("*", other)

    def __rmul__(self, other):
        return self._binary("*", other, reflected=True)

    def __truediv__(self, other):
        return self._binary("/", other)

    def __rtruediv__(self, other):
        return self._binary("/", other, reflected=True)

    def __pow__(self, other):
        return self._binary("**", other)

    def __rpow__(self, other):
        return self._binary("**", other, reflected=True)

    def __mod__(self, other):
        return self._binary("%", other)

    def __rmod__(self, other):
        return self._binary("%", other, reflected=True)

    def __floordiv__(self, other):
        return self._binary("//", other)

    def __rfloordiv__(self, other):
        return self._binary("//", other, reflected=True)

    def __eq__(self, other):  # type: ignore[override]
        return self._binary("==", other)

    def __ne__(self, other):  # type: ignore[override]
        return self._binary("!=", other)

    def __lt__(self, other):
        return self._binary("<", other)

    def __le__(self, other):
        return self._binary("<=", other)

    def __gt__(self, other):
        return self._binary(">", other)

    def __ge__(self, other):
        return self._binary(">=", other)

    __hash__ = None  # type: ignore[assignment]


def _as_key_tuple(key: object) -> tuple[object, ...]:
    if isinstance(key, tuple):
        return key
    return (key,)


class OperandKind(str, Enum):
    NATIVE_SCALAR = "native_scalar"
    NATIVE_ARRAY = "native_array"
    ENGINE_ARRAY = "engine_array"


@dataclass(frozen=True)
class ValueInfo:
    kind: OperandKind
    shape: Shape
    rank: int
    size: int


def kind_of(value: object) -> OperandKind:
    if isinstance(value, Rray):
        return OperandKind.ENGINE_ARRAY
    if isinstance(value, (bool, numbers.Number, np.generic)):
        return OperandKind.NATIVE_SCALAR
    if isinstance(value, (jax.Array, np.ndarray)):
        return OperandKind.NATIVE_SCALAR if value.ndim == 0 else OperandKind.NATIVE_ARRAY
    if isinstance(value, (list, tuple)):
        return OperandKind.NATIVE_ARRAY
    raise TypeError(f"Unsupported operand type {type(value).__name__}")


def validate_operand(value: object, *, where: str = "operand") -> OperandKind:
    try:
        return kind_of(value)
    except TypeError:
        raise TypeError(f"{where} has unsupported type {type(value).__name__}") from None


def shape_of(value: object) -> Shape:
    if isinstance(value, Rray):
        return value.shape
    return tuple(int(d) for d in _as_buffer(value).shape)


def value_info(value: object) -> ValueInfo:
    kind = validate_operand(value)
    shape = shape_of(value)
    return ValueInfo(kind=kind, shape=shape, rank=len(shape), size=shape_size(shape))


def as_rray(value: object) -> Rray:
    """Wrap a native operand; ``Rray`` values pass through unchanged."""
    if isinstance(value, Rray):
        return value
    validate_operand(value)
    return Rray(value)
