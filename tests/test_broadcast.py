from __future__ import annotations

import importlib.util
import unittest


JAX_AVAILABLE = importlib.util.find_spec("jax") is not None


@unittest.skipUnless(JAX_AVAILABLE, "jax is required for broadcast tests")
class BroadcastTests(unittest.TestCase):
    def test_new_trailing_axis_replicates_content(self) -> None:
        from rray_jax import Rray, broadcast

        x = Rray.from_values([1, 2, 3, 4], (2, 2))
        out = broadcast(x, (2, 2, 3))

        self.assertEqual(out.shape, (2, 2, 3))
        self.assertEqual(out.rank, 3)
        self.assertEqual(
            out.tolist(),
            [[[1, 1, 1], [3, 3, 3]], [[2, 2, 2], [4, 4, 4]]],
        )

    def test_extent_one_axis_recycles(self) -> None:
        from rray_jax import Rray, broadcast

        row = Rray([[1, 2, 3]])
        self.assertEqual(broadcast(row, (2, 3)).tolist(), [[1, 2, 3], [1, 2, 3]])

        col = Rray([[1], [2]])
        self.assertEqual(broadcast(col, (2, 3)).tolist(), [[1, 1, 1], [2, 2, 2]])

    def test_identity_returns_same_value(self) -> None:
        from rray_jax import Rray, broadcast

        x = Rray([[1, 2], [3, 4]])
        self.assertIs(broadcast(x, (2, 2)), x)

    def test_scalar_broadcasts_anywhere(self) -> None:
        from rray_jax import Rray, broadcast

        out = broadcast(Rray(7), (2, 3))
        self.assertEqual(out.shape, (2, 3))
        self.assertEqual(out.tolist(), [[7, 7, 7], [7, 7, 7]])

    def test_rank_decrease_fails(self) -> None:
        from rray_jax import RankDecreaseError, Rray, broadcast

        with self.assertRaises(RankDecreaseError):
            broadcast(Rray([[1, 2]]), (2,))

    def test_non_recyclable_axis_fails(self) -> None:
        from rray_jax import NonRecyclableShapeError, Rray, broadcast

        x = Rray.from_values(list(range(8)), (2, 1, 4))
        with self.assertRaises(NonRecyclableShapeError) as ctx:
            broadcast(x, (2, 3, 5))
        self.assertEqual(ctx.exception.axis, 3)

    def test_zero_extent_target_empties_axis(self) -> None:
        from rray_jax import Rray, broadcast

        x = Rray([[1, 2, 3], [4, 5, 6]])
        out = broadcast(x, (0, 3))
        self.assertEqual(out.shape, (0, 3))

    def test_zero_extent_source_is_sticky(self) -> None:
        from rray_jax import Rray, broadcast
        import jax.numpy as jnp

        empty = Rray(jnp.zeros((0, 1)))
        out = broadcast(empty, (5, 4))
        self.assertEqual(out.shape, (0, 4))

    def test_names_follow_unchanged_axes_only(self) -> None:
        from rray_jax import Rray, broadcast

        x = Rray([[1], [2]], dim_names=[["a", "b"], ["only"]])
        out = broadcast(x, (2, 3, 2))
        self.assertEqual(out.dim_names, (("a", "b"), None, None))

    def test_layout_failures_are_categorised(self) -> None:
        import jax.numpy as jnp

        from rray_jax import RRayShapeError, expand_layout

        with self.assertRaises(RRayShapeError):
            expand_layout(jnp.zeros((2, 3)), (2, 3), (4, 3))
        with self.assertRaises(RRayShapeError):
            expand_layout(jnp.zeros((2, 3)), (5, 1), (5, 1))

    def test_dims_match_extends_shape_and_names(self) -> None:
        from rray_jax import RankDecreaseError, Rray, dims_match

        x = Rray([1, 2, 3], dim_names=[["a", "b", "c"]])
        out = dims_match(x, 3)
        self.assertEqual(out.shape, (3, 1, 1))
        self.assertEqual(out.dim_names, (("a", "b", "c"), None, None))

        with self.assertRaises(RankDecreaseError):
            dims_match(out, 2)


if __name__ == "__main__":
    unittest.main()
