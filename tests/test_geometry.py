import math
import unittest

from fixtures import LEFT_BODY_X, lm, make_body
from Geometry import (
    body_scale,
    dist,
    expand_box,
    is_complete_body,
    midpoint,
    mirror_to_canvas,
    mirrored_bounding_box,
    point_in_box,
    shoulder_center_x,
    to_point,
)


class TestGeometry(unittest.TestCase):
    def test_to_point_accepts_objects_dicts_and_sequences(self):
        self.assertEqual(to_point(lm(0.1, 0.2)), (0.1, 0.2))
        self.assertEqual(to_point({"x": 0.3, "y": 0.4}), (0.3, 0.4))
        self.assertEqual(to_point([0.5, 0.6, 0.0]), (0.5, 0.6))
        with self.assertRaises(ValueError):
            to_point("not a landmark")

    def test_dist_and_midpoint(self):
        self.assertAlmostEqual(dist((0.0, 0.0), (0.3, 0.4)), 0.5)
        mx, my = midpoint((0.2, 0.2), (0.4, 0.6))
        self.assertAlmostEqual(mx, 0.3)
        self.assertAlmostEqual(my, 0.4)

    def test_body_scale_uses_larger_of_width_and_torso(self):
        body = make_body()
        torso = math.hypot(0.02, 0.30)
        self.assertAlmostEqual(body_scale(body), torso)

    def test_body_scale_is_floored(self):
        body = make_body(
            left_shoulder=(0.5, 0.5),
            right_shoulder=(0.5, 0.5),
            left_hip=(0.5, 0.5),
        )
        self.assertEqual(body_scale(body, floor=0.1), 0.1)

    def test_mirror_to_canvas(self):
        self.assertEqual(mirror_to_canvas(0.25, 0.5, 1280, 720), (960.0, 360.0))

    def test_mirrored_bounding_box(self):
        body = [lm(0.2, 0.1), lm(0.4, 0.5)]
        box = mirrored_bounding_box(body, 1000, 100)
        self.assertAlmostEqual(box[0], 600.0)
        self.assertAlmostEqual(box[1], 10.0)
        self.assertAlmostEqual(box[2], 800.0)
        self.assertAlmostEqual(box[3], 50.0)
        self.assertIsNone(mirrored_bounding_box([], 1000, 100))

    def test_point_in_box_is_strict(self):
        box = (0.0, 0.0, 10.0, 10.0)
        self.assertTrue(point_in_box(5, 5, box))
        self.assertFalse(point_in_box(10, 5, box))
        self.assertTrue(point_in_box(11, 5, expand_box(box, 2)))

    def test_shoulder_center(self):
        self.assertAlmostEqual(shoulder_center_x(make_body()), LEFT_BODY_X)

    def test_is_complete_body(self):
        self.assertTrue(is_complete_body(make_body()))
        self.assertFalse(is_complete_body(None))
        self.assertFalse(is_complete_body(make_body()[:20]))
        broken = make_body()
        broken[15] = None
        self.assertFalse(is_complete_body(broken))


if __name__ == "__main__":
    unittest.main()
