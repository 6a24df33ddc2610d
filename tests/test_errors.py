from __future__ import annotations

import importlib.util
import unittest


JAX_AVAILABLE = importlib.util.find_spec("jax") is not None


@unittest.skipUnless(JAX_AVAILABLE, "jax is required for error-model tests")
class ErrorModelTests(unittest.TestCase):
    def test_errors_fall_into_categories(self) -> None:
        from rray_jax import errors

        shape_errors = (
            errors.RankDecreaseError,
            errors.NonRecyclableShapeError,
            errors.ElementCountMismatchError,
            errors.CannotSqueezeError,
            errors.DimNamesError,
        )
        index_errors = (
            errors.TooManyAxesError,
            errors.OmittedAxisError,
            errors.IndexOutOfBoundsError,
            errors.IndexShapeMismatchError,
            errors.UnknownNameError,
            errors.InvalidSubscriptError,
            errors.NonScalarSubscriptError,
            errors.MissingSubscriptError,
            errors.AxisOutOfRangeError,
        )
        for cls in shape_errors:
            with self.subTest(cls=cls.__name__):
                self.assertTrue(issubclass(cls, errors.RRayShapeError))
        for cls in index_errors:
            with self.subTest(cls=cls.__name__):
                self.assertTrue(issubclass(cls, errors.RRayIndexError))
        self.assertTrue(issubclass(errors.CastError, errors.RRayTypeError))
        self.assertTrue(issubclass(errors.UnsupportedOperationError, errors.RRayTypeError))
        self.assertTrue(issubclass(errors.WriteLeaseError, errors.RRayRuntimeError))

    def test_messages_name_the_offending_axis(self) -> None:
        from rray_jax import errors

        self.assertEqual(
            str(errors.TooManyAxesError(rank=2, requested=3)),
            "The dimensionality of `x` is 2. Cannot subset into dimension 3.",
        )
        self.assertIn("axis 2", str(errors.IndexOutOfBoundsError(axis=2, position=5, extent=3)))
        self.assertIn("Subscript 2", str(errors.OmittedAxisError(axis=2)))
        self.assertEqual(str(errors.MissingSubscriptError(axes=(1, 3))), "Subscripts 1, 3 must not be missing.")
        self.assertIn("'z'", str(errors.UnknownNameError(axis=1, names=("z",))))
        self.assertIn("<float32> to <int32>", str(errors.CastError(from_dtype="float32", to_dtype="int32")))

    def test_structured_fields_are_frozen(self) -> None:
        from dataclasses import FrozenInstanceError

        from rray_jax import errors

        err = errors.NonRecyclableShapeError(axis=1, from_extent=2, to_extent=3)
        with self.assertRaises(FrozenInstanceError):
            err.axis = 2  # type: ignore[misc]

    def test_classify_foreign_errors(self) -> None:
        from rray_jax import errors

        self.assertIsInstance(errors.classify_error(ValueError("incompatible shapes for broadcasting")), errors.RRayShapeError)
        self.assertIsInstance(errors.classify_error(IndexError("list index out of range")), errors.RRayIndexError)
        self.assertIsInstance(errors.classify_error(TypeError("unsupported operand")), errors.RRayTypeError)
        self.assertIsInstance(errors.classify_error(RuntimeError("boom")), errors.RRayRuntimeError)

        own = errors.OmittedAxisError(axis=1)
        self.assertIs(errors.classify_error(own), own)


if __name__ == "__main__":
    unittest.main()
