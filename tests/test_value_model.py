from __future__ import annotations

import importlib.util
import unittest


JAX_AVAILABLE = importlib.util.find_spec("jax") is not None


@unittest.skipUnless(JAX_AVAILABLE, "jax is required for value-model tests")
class ValueModelTests(unittest.TestCase):
    def test_scalar_is_promoted_to_rank_one(self) -> None:
        from rray_jax import Rray

        x = Rray(5)
        self.assertEqual(x.shape, (1,))
        self.assertEqual(x.rank, 1)
        self.assertEqual(x.size, 1)
        self.assertEqual(x.dim_names, (None,))

    def test_from_values_fills_column_major(self) -> None:
        from rray_jax import Rray

        x = Rray.from_values(range(1, 7), (2, 3))
        self.assertEqual(x.tolist(), [[1, 3, 5], [2, 4, 6]])
        self.assertEqual(len(x), 2)

        with self.assertRaises(ValueError):
            Rray.from_values([1, 2, 3], (2, 2))

    def test_dim_names_are_validated(self) -> None:
        from rray_jax import DimNamesError, Rray

        x = Rray([[1, 2], [3, 4]], dim_names={2: ["a", "b"]})
        self.assertEqual(x.dim_names, (None, ("a", "b")))
        with self.assertRaises(DimNamesError):
            Rray([[1, 2]], dim_names=[["a", "b"], None])

    def test_with_dim_names_returns_new_value(self) -> None:
        from rray_jax import Rray

        x = Rray([1, 2])
        named = x.with_dim_names([["p", "q"]])
        self.assertEqual(named.dim_names, (("p", "q"),))
        self.assertEqual(x.dim_names, (None,))
        self.assertIn("dim_names", repr(named))
        self.assertIn("Rray(shape=(2,)", repr(x))

    def test_value_info_kinds(self) -> None:
        import jax.numpy as jnp
        import numpy as np

        from rray_jax import OperandKind, Rray, value_info

        rray = value_info(Rray([[1, 2, 3]]))
        scalar = value_info(3)
        np_scalar = value_info(np.float32(1.5))
        jax_scalar = value_info(jnp.asarray(3))
        seq = value_info([1, 2])
        matrix = value_info(np.zeros((2, 4)))

        self.assertEqual(rray.kind, OperandKind.ENGINE_ARRAY)
        self.assertEqual(rray.shape, (1, 3))
        self.assertEqual(scalar.kind, OperandKind.NATIVE_SCALAR)
        self.assertEqual(scalar.shape, (1,))
        self.assertEqual(np_scalar.kind, OperandKind.NATIVE_SCALAR)
        self.assertEqual(jax_scalar.kind, OperandKind.NATIVE_SCALAR)
        self.assertEqual(seq.kind, OperandKind.NATIVE_ARRAY)
        self.assertEqual(matrix.kind, OperandKind.NATIVE_ARRAY)
        self.assertEqual(matrix.rank, 2)
        self.assertEqual(matrix.size, 8)

    def test_unsupported_values_are_rejected(self) -> None:
        from rray_jax import as_rray, value_info

        with self.assertRaises(TypeError):
            value_info("abc")
        with self.assertRaises(TypeError):
            as_rray({"a": 1})

    def test_iteration_walks_axis_one(self) -> None:
        from rray_jax import Rray

        v = Rray([1, 2, 3])
        items = list(v)
        self.assertEqual(len(items), 3)
        self.assertEqual([item.tolist() for item in items], [[1], [2], [3]])

        m = Rray([[1, 2], [3, 4]], dim_names=[["r1", "r2"], ["a", "b"]])
        rows = [row for row in m]
        self.assertEqual([row.shape for row in rows], [(1, 2), (1, 2)])
        self.assertEqual(rows[1].tolist(), [[3, 4]])
        self.assertEqual(rows[1].dim_names, (("r2",), ("a", "b")))

    def test_as_rray_passes_rray_through(self) -> None:
        from rray_jax import Rray, as_rray

        x = Rray([1, 2])
        self.assertIs(as_rray(x), x)
        self.assertEqual(as_rray([[1, 2]]).shape, (1, 2))

    def test_rray_is_unhashable(self) -> None:
        from rray_jax import Rray

        with self.assertRaises(TypeError):
            hash(Rray([1]))


if __name__ == "__main__":
    unittest.main()
