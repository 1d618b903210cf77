"""
Tests for the recolour engine (nordmap.recolour).
"""
import sys
import unittest
from pathlib import Path

import numpy as np

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from nordmap.core_types import Colour, Palette  # noqa: E402
from nordmap.errors import EmptyCandidateSet, UnknownScheme  # noqa: E402
from nordmap.palette_data import candidate_array, resolve_schemes  # noqa: E402
from nordmap.recolour import (  # noqa: E402
    colour_distance,
    nearest_colour,
    nearest_indices,
    recolour_grid,
    recolour_image,
)

BLACK = Colour(0, 0, 0)
WHITE = Colour(255, 255, 255)


def _grid(rows):
    return np.array(rows, dtype=np.uint8)


class TestDistance(unittest.TestCase):
    def test_l1(self):
        self.assertEqual(colour_distance(BLACK, Colour(100, 100, 100)), 300)
        self.assertEqual(colour_distance(WHITE, Colour(100, 100, 100)), 465)
        self.assertEqual(colour_distance(BLACK, WHITE), 765)
        self.assertEqual(colour_distance(Colour(10, 200, 30), Colour(10, 200, 30)), 0)

    def test_symmetric(self):
        a, b = Colour(12, 250, 7), Colour(200, 3, 99)
        self.assertEqual(colour_distance(a, b), colour_distance(b, a))


class TestNearestColour(unittest.TestCase):
    """Reference scalar scan."""

    def test_black_white_scenario(self):
        self.assertEqual(nearest_colour(Colour(100, 100, 100), [BLACK, WHITE]), BLACK)

    def test_tie_goes_to_first(self):
        cands = [Colour(10, 10, 10), Colour(20, 20, 20)]
        self.assertEqual(nearest_colour(Colour(15, 15, 15), cands), Colour(10, 10, 10))
        self.assertEqual(
            nearest_colour(Colour(15, 15, 15), list(reversed(cands))), Colour(20, 20, 20)
        )

    def test_empty_candidates(self):
        with self.assertRaises(EmptyCandidateSet):
            nearest_colour(BLACK, [])

    def test_accepts_palette(self):
        pal = resolve_schemes(["frost", "aurora"])
        self.assertEqual(nearest_colour(Colour(143, 188, 187), pal), Colour(143, 188, 187))
        self.assertEqual(nearest_colour(Colour(200, 100, 100), pal), Colour(191, 97, 106))

    def test_single_candidate(self):
        self.assertEqual(nearest_colour(WHITE, [Colour(1, 2, 3)]), Colour(1, 2, 3))


class TestNearestIndices(unittest.TestCase):
    def test_duplicate_candidates_pick_lower_index(self):
        pal = _grid([[0, 0, 0], [5, 5, 5], [5, 5, 5]])
        idx = nearest_indices(_grid([[5, 5, 5], [4, 4, 4], [6, 6, 6]]), pal)
        self.assertEqual(idx.tolist(), [1, 1, 1])

    def test_equidistant_pair(self):
        pal = _grid([[10, 10, 10], [20, 20, 20]])
        self.assertEqual(nearest_indices(_grid([[15, 15, 15]]), pal).tolist(), [0])

    def test_no_uint8_wraparound(self):
        pal = _grid([[0, 0, 0], [250, 250, 250]])
        # 255-0 would wrap in uint8 arithmetic
        self.assertEqual(nearest_indices(_grid([[255, 255, 255]]), pal).tolist(), [1])
        self.assertEqual(nearest_indices(_grid([[1, 1, 1]]), pal).tolist(), [0])

    def test_chunking_does_not_change_result(self):
        rng = np.random.RandomState(3)
        pts = rng.randint(0, 256, size=(1000, 3)).astype(np.uint8)
        pal = candidate_array(["frost", "aurora", "polar_night", "snow_storm"])
        a = nearest_indices(pts, pal)
        b = nearest_indices(pts, pal, chunk=7)
        np.testing.assert_array_equal(a, b)

    def test_empty_candidates(self):
        with self.assertRaises(EmptyCandidateSet):
            nearest_indices(_grid([[1, 2, 3]]), np.zeros((0, 3), dtype=np.uint8))


class TestRecolourImage(unittest.TestCase):
    """Vectorised engine over whole grids."""

    def setUp(self):
        rng = np.random.RandomState(1234)
        self.image = rng.randint(0, 256, size=(23, 17, 3)).astype(np.uint8)
        self.palette = resolve_schemes(["frost", "aurora"])

    def test_scenario_black_white(self):
        out = recolour_image(_grid([[[100, 100, 100]]]), [BLACK, WHITE])
        self.assertEqual(out.tolist(), [[[0, 0, 0]]])

    def test_scenario_tie(self):
        pal = _grid([[10, 10, 10], [20, 20, 20]])
        out = recolour_image(_grid([[[15, 15, 15], [16, 16, 16]]]), pal)
        self.assertEqual(out.tolist(), [[[10, 10, 10], [20, 20, 20]]])

    def test_matches_reference_scan(self):
        out = recolour_image(self.image, self.palette)
        cands = list(self.palette.colours)
        h, w, _ = self.image.shape
        for y in range(h):
            for x in range(w):
                expected = nearest_colour(Colour.coerce(self.image[y, x]), cands)
                self.assertEqual(tuple(out[y, x].tolist()), expected.as_tuple())

    def test_dimensions_preserved(self):
        for shape in [(1, 1, 3), (1, 9, 3), (9, 1, 3), (4, 5, 3)]:
            with self.subTest(shape=shape):
                img = np.full(shape, 77, dtype=np.uint8)
                out = recolour_image(img, self.palette)
                self.assertEqual(out.shape, shape)
                self.assertEqual(out.dtype, np.uint8)

    def test_membership(self):
        out = recolour_image(self.image, self.palette)
        allowed = {c.as_tuple() for c in self.palette.colours}
        used = {tuple(px) for px in out.reshape(-1, 3).tolist()}
        self.assertTrue(used <= allowed)

    def test_exact_match_idempotent(self):
        pal = resolve_schemes(["frost", "aurora", "frost"])
        arr = pal.as_array()
        rng = np.random.RandomState(7)
        img = arr[rng.randint(0, arr.shape[0], size=(6, 8))]
        out = recolour_image(img, pal)
        np.testing.assert_array_equal(out, img)

    def test_deterministic_across_strategies(self):
        ref = recolour_image(self.image, self.palette, workers=1, unique=False)
        for workers in (1, 2, 3, 8, 64):
            for unique in (True, False):
                with self.subTest(workers=workers, unique=unique):
                    out = recolour_image(
                        self.image, self.palette, workers=workers, unique=unique
                    )
                    np.testing.assert_array_equal(out, ref)
        np.testing.assert_array_equal(recolour_image(self.image, self.palette), ref)

    def test_input_not_modified(self):
        before = self.image.copy()
        out = recolour_image(self.image, self.palette)
        np.testing.assert_array_equal(self.image, before)
        self.assertFalse(np.shares_memory(out, self.image))

    def test_alpha_channel_ignored(self):
        rgba = np.zeros((2, 2, 4), dtype=np.uint8)
        rgba[..., :3] = 240
        rgba[..., 3] = np.array([[0, 255], [128, 1]], dtype=np.uint8)
        out = recolour_image(rgba, resolve_schemes(["snow_storm", "polar_night"]))
        self.assertEqual(out.shape, (2, 2, 3))
        self.assertTrue(np.all(out == np.array([236, 239, 244], dtype=np.uint8)))

    def test_candidate_forms_agree(self):
        as_palette = recolour_image(self.image, self.palette)
        as_array = recolour_image(self.image, self.palette.as_array())
        as_list = recolour_image(self.image, list(self.palette.colours))
        as_tuples = recolour_image(self.image, [c.as_tuple() for c in self.palette])
        for other in (as_array, as_list, as_tuples):
            np.testing.assert_array_equal(as_palette, other)

    def test_empty_candidates(self):
        with self.assertRaises(EmptyCandidateSet):
            recolour_image(self.image, [])
        with self.assertRaises(EmptyCandidateSet):
            recolour_image(self.image, np.zeros((0, 3), dtype=np.uint8))

    def test_rejects_non_u8_input(self):
        with self.assertRaises(TypeError):
            recolour_image(self.image.astype(np.float32), self.palette)
        with self.assertRaises(TypeError):
            recolour_image(self.image[..., 0], self.palette)

    def test_single_colour_palette(self):
        pal = Palette("mono", (Colour(46, 52, 64),))
        out = recolour_image(self.image, pal)
        self.assertTrue(np.all(out == np.array([46, 52, 64], dtype=np.uint8)))


class TestRecolourGrid(unittest.TestCase):
    def test_uses_scheme_order(self):
        img = _grid([[[0, 0, 0], [255, 255, 255], [200, 100, 100]]])
        out = recolour_grid(img, ["polar_night", "snow_storm", "aurora"])
        self.assertEqual(
            out.tolist(), [[[46, 52, 64], [236, 239, 244], [191, 97, 106]]]
        )

    def test_unknown_scheme(self):
        with self.assertRaises(UnknownScheme):
            recolour_grid(_grid([[[0, 0, 0]]]), ["glacier"])

    def test_no_schemes(self):
        with self.assertRaises(EmptyCandidateSet):
            recolour_grid(_grid([[[0, 0, 0]]]), [])


if __name__ == "__main__":
    unittest.main()
