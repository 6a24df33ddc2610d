from __future__ import annotations

import importlib.util
import unittest


JAX_AVAILABLE = importlib.util.find_spec("jax") is not None


@unittest.skipUnless(JAX_AVAILABLE, "jax is required for subsetting-engine tests")
class SubsetTests(unittest.TestCase):
    def _cube(self):
        from rray_jax import Rray

        return Rray.from_values(range(1, 9), (2, 2, 2))

    def _matrix(self):
        from rray_jax import Rray

        # [[1, 4], [2, 5], [3, 6]]
        return Rray.from_values([1, 2, 3, 4, 5, 6], (3, 2))

    def test_subset_never_drops_axes(self) -> None:
        from rray_jax import subset

        out = subset(self._cube(), 1)
        self.assertEqual(out.shape, (1, 2, 2))
        self.assertEqual(out.tolist(), [[[1, 5], [3, 7]]])

    def test_trailing_omission_matches_short_form(self) -> None:
        from rray_jax import subset

        x = self._cube()
        self.assertEqual(subset(x, 1, None, None).tolist(), subset(x, 1).tolist())

    def test_getitem_routes_through_subset(self) -> None:
        x = self._cube()
        self.assertEqual(x[1].shape, (1, 2, 2))
        self.assertEqual(x[..., 2].tolist(), [[[3, 7]], [[4, 8]]])
        self.assertEqual(x[:, 1, 2].tolist(), [[[5]], [[6]]])

    def test_empty_selection_keeps_rank(self) -> None:
        from rray_jax import subset

        out = subset(self._matrix(), [])
        self.assertEqual(out.shape, (0, 2))

    def test_subset_by_names_keeps_selected_labels(self) -> None:
        from rray_jax import Rray, subset

        m = Rray([[1, 2, 3], [4, 5, 6]], dim_names=[["r1", "r2"], ["a", "b", "c"]])
        out = subset(m, "r2", ["c", "a"])
        self.assertEqual(out.tolist(), [[6, 4]])
        self.assertEqual(out.dim_names, (("r2",), ("c", "a")))

    def test_slice_axis(self) -> None:
        from rray_jax import AxisOutOfRangeError, InvalidSubscriptError, slice_axis

        m = self._matrix()
        self.assertEqual(slice_axis(m, 2, 2).tolist(), [[4], [5], [6]])
        self.assertEqual(slice_axis(m, [1, 3], 1).tolist(), [[1, 4], [3, 6]])
        with self.assertRaises(AxisOutOfRangeError):
            slice_axis(m, 1, 3)
        with self.assertRaises(InvalidSubscriptError):
            slice_axis(m, 1, [1, 2])

    def test_head_and_tail(self) -> None:
        from rray_jax import Rray, head, tail

        v = Rray.from_values(range(1, 11))
        self.assertEqual(head(v).tolist(), [1, 2, 3, 4, 5, 6])
        self.assertEqual(head(v, -7).tolist(), [1, 2, 3])
        self.assertEqual(tail(v, 2).tolist(), [9, 10])
        self.assertEqual(tail(v, -8).tolist(), [9, 10])
        self.assertEqual(head(v, 0).shape, (0,))
        self.assertEqual(head(v, 20).shape, (10,))
        self.assertEqual(head(self._matrix(), 1).shape, (1, 2))


@unittest.skipUnless(JAX_AVAILABLE, "jax is required for subsetting-engine tests")
class SubsetAssignTests(unittest.TestCase):
    def _matrix(self):
        from rray_jax import Rray

        return Rray.from_values([1, 2, 3, 4, 5, 6], (3, 2))

    def test_value_broadcasts_to_region_before_write(self) -> None:
        from rray_jax import Rray, subset_assign

        m = self._matrix()
        out = subset_assign(m, ..., 1, value=Rray([[9]]))
        self.assertEqual(out.tolist(), [[9, 4], [9, 5], [9, 6]])
        self.assertEqual(m.tolist(), [[1, 4], [2, 5], [3, 6]])

    def test_assign_keeps_shape_and_names(self) -> None:
        from rray_jax import Rray, subset_assign

        m = Rray([[1, 2], [3, 4]], dim_names=[["r1", "r2"], None])
        out = subset_assign(m, "r1", value=0)
        self.assertEqual(out.tolist(), [[0, 0], [3, 4]])
        self.assertEqual(out.shape, m.shape)
        self.assertEqual(out.dim_names, m.dim_names)

    def test_empty_region_is_a_noop(self) -> None:
        from rray_jax import subset_assign

        m = self._matrix()
        self.assertEqual(subset_assign(m, [], value=5).tolist(), m.tolist())

    def test_non_recyclable_value_fails(self) -> None:
        from rray_jax import NonRecyclableShapeError, Rray, subset_assign

        with self.assertRaises(NonRecyclableShapeError):
            subset_assign(self._matrix(), [1, 2], value=Rray([1, 2, 3]))

    def test_lossy_cast_fails(self) -> None:
        from rray_jax import CastError, subset_assign

        m = self._matrix()
        with self.assertRaises(CastError):
            subset_assign(m, 1, value=1.5)
        self.assertEqual(subset_assign(m, 1, value=7.0).tolist(), [[7, 7], [2, 5], [3, 6]])

    def test_setitem_writes_in_place(self) -> None:
        m = self._matrix()
        m[..., 2] = 0
        self.assertEqual(m.tolist(), [[1, 0], [2, 0], [3, 0]])
        m[[1, 3]] = -1
        self.assertEqual(m.tolist(), [[-1, -1], [2, 0], [-1, -1]])

    def test_failed_setitem_leaves_value_untouched(self) -> None:
        from rray_jax import IndexOutOfBoundsError

        m = self._matrix()
        with self.assertRaises(IndexOutOfBoundsError):
            m[4] = 0
        self.assertEqual(m.tolist(), [[1, 4], [2, 5], [3, 6]])
        m[1] = 0
        self.assertEqual(m.tolist(), [[0, 0], [2, 5], [3, 6]])

    def test_write_lease_is_exclusive(self) -> None:
        from rray_jax import WriteLease, WriteLeaseError

        m = self._matrix()
        with WriteLease(m):
            with self.assertRaises(WriteLeaseError):
                m[1] = 0
        m[1] = 0
        self.assertEqual(m.tolist()[0], [0, 0])

    def test_commit_outside_lease_fails(self) -> None:
        from rray_jax import WriteLease, WriteLeaseError

        m = self._matrix()
        lease = WriteLease(m)
        with self.assertRaises(WriteLeaseError):
            lease.commit(m)

    def test_slice_axis_assign(self) -> None:
        from rray_jax import slice_axis_assign

        out = slice_axis_assign(self._matrix(), [1, 3], 1, value=0)
        self.assertEqual(out.tolist(), [[0, 0], [2, 5], [0, 0]])


if __name__ == "__main__":
    unittest.main()
