# Tests for track geometry queries

import pytest
import numpy as np
from arcade_racer.core.math_utils import planar_distance
from arcade_racer.track.geometry import TrackGeometry
from arcade_racer.track.spatial import BruteForceIndex, make_index


class TestSampleTable:

    def test_sample_count(self, geometry):
        assert geometry.sample_points.shape == (320, 3)
        assert geometry.sample_parameters.shape == (320,)

    def test_parameters_sorted_in_range(self, geometry):
        params = geometry.sample_parameters
        assert params[0] == 0.0
        assert np.all(np.diff(params) > 0)
        assert params[-1] < 1.0

    def test_uniform_arc_length_spacing(self, geometry):
        """Samples are evenly spaced along the track, straights included."""
        ts = np.linspace(0.0, 1.0, 320 * 128 + 1)
        pts = geometry.curve.points_at(ts)
        cumulative = np.concatenate([[0.0], np.cumsum(np.linalg.norm(np.diff(pts, axis=0), axis=1))])
        along = np.interp(geometry.sample_parameters, ts, cumulative)
        spacing = np.diff(np.append(along, cumulative[-1]))
        mean = cumulative[-1] / 320
        assert cumulative[-1] == pytest.approx(geometry.length, rel=1e-3)
        assert np.all(np.abs(spacing - mean) < 0.1 * mean)

    def test_chord_within_tolerance(self, geometry):
        pts = geometry.sample_points
        chord = np.linalg.norm(np.roll(pts, -1, axis=0) - pts, axis=1)
        assert np.all(chord <= 2.0 * geometry.tolerance + 1e-12)

    def test_tolerance_bound(self, geometry):
        """Nearest-sample error stays well inside the on-track threshold."""
        assert geometry.tolerance < 0.5
        assert geometry.tolerance < geometry.on_track_threshold

    def test_read_only(self, geometry):
        with pytest.raises(ValueError):
            geometry.sample_points[0, 0] = 1.0
        with pytest.raises(ValueError):
            geometry.sample_parameters[0] = 0.5


class TestOnTrack:

    def test_points_on_samples_are_on_track(self, geometry):
        for p in geometry.sample_points:
            assert geometry.is_on_track(p)

    def test_centerline_is_on_track(self, geometry, rng):
        for t in rng.random(200):
            assert geometry.is_on_track(geometry.curve.point_at(t))

    def test_far_from_samples_is_off_track(self, geometry, rng):
        """Anything at least half a track width from every sample is off."""
        points = np.column_stack([
            rng.uniform(-50, 50, 2000),
            np.zeros(2000),
            rng.uniform(-40, 40, 2000),
        ])
        checked = 0
        for p in points:
            if geometry.nearest_distance(p) >= geometry.half_width:
                assert not geometry.is_on_track(p)
                checked += 1
        assert checked > 100

    def test_infield_is_off_track(self, geometry):
        assert not geometry.is_on_track(np.array([0.0, 0.0, 0.0]))

    def test_height_ignored(self, geometry):
        p = geometry.sample_points[10].copy()
        p[1] = 50.0
        assert geometry.is_on_track(p)

    def test_pathological_input(self, geometry):
        """Non-finite and out-of-world points degrade to off-track."""
        assert not geometry.is_on_track(np.array([np.nan, 0.0, 0.0]))
        assert not geometry.is_on_track(np.array([np.inf, 0.0, 0.0]))
        assert not geometry.is_on_track(np.array([1e9, 0.0, -1e9]))
        assert geometry.closest_parameter(np.array([np.nan, 0.0, np.nan])) == 0.0

    def test_threshold(self, geometry):
        assert geometry.on_track_threshold == pytest.approx(3.75 * 0.55)

    def test_invalid_factor(self, curve):
        with pytest.raises(AssertionError):
            TrackGeometry(curve, on_track_factor=1.5)


class TestClosestParameter:

    def test_exact_sample(self, geometry):
        for i in (0, 57, 160, 319):
            p = geometry.sample_points[i]
            assert geometry.closest_parameter(p) == geometry.sample_parameters[i]

    def test_near_curve_parameter(self, geometry, rng):
        """The returned parameter lands within one sample spacing of the query."""
        curve = geometry.curve
        for t in rng.random(100):
            found = geometry.closest_parameter(curve.point_at(t))
            assert 0.0 <= found < 1.0
            assert planar_distance(curve.point_at(found), curve.point_at(t)) <= 2.0 * geometry.tolerance

    def test_lateral_offset_on_straight(self, geometry):
        i = int(np.argmin(np.abs(geometry.sample_parameters - 0.2434)))
        t = geometry.sample_parameters[i]
        p = geometry.sample_points[i] + geometry.curve.right_at(t) * 1.0
        assert geometry.lateral_offset(p) == pytest.approx(1.0)
        p = geometry.sample_points[i] - geometry.curve.right_at(t) * 1.0
        assert geometry.lateral_offset(p) == pytest.approx(-1.0)

    def test_point_ahead(self, geometry):
        """On a straight, the target is the requested distance away."""
        i = int(np.argmin(np.abs(geometry.sample_parameters - 0.2434)))
        start = geometry.sample_points[i]
        ahead = geometry.point_ahead(start, 10.0)
        assert ahead[0] < start[0]
        step = geometry.length / len(geometry.sample_points)
        assert np.hypot(*(ahead - start)[[0, 2]]) == pytest.approx(10.0, abs=step)

    def test_distance_along_is_signed(self, geometry):
        i = int(np.argmin(np.abs(geometry.sample_parameters - 0.2434)))
        step = geometry.length / len(geometry.sample_points)
        here = geometry.sample_points[i]
        there = geometry.sample_points[i + 10]
        assert geometry.distance_along(here, there) == pytest.approx(10 * step)
        assert geometry.distance_along(there, here) == pytest.approx(-10 * step)
        assert geometry.distance_along(here, here) == 0.0

    def test_distance_along_wraps_at_seam(self, geometry):
        step = geometry.length / len(geometry.sample_points)
        last = geometry.sample_points[-1]
        first = geometry.sample_points[0]
        assert geometry.distance_along(last, first) == pytest.approx(step)
        assert geometry.distance_along(first, last) == pytest.approx(-step)


class TestSpatialIndex:

    def test_kdtree_matches_brute_force(self, curve, rng):
        """Swapping the index does not change any classification."""
        brute = TrackGeometry(curve, index="brute")
        tree = TrackGeometry(curve, index="kdtree")

        points = np.column_stack([
            rng.uniform(-45, 45, 500),
            np.zeros(500),
            rng.uniform(-35, 35, 500),
        ])
        for p in points:
            assert brute.is_on_track(p) == tree.is_on_track(p)
            assert brute.closest_parameter(p) == tree.closest_parameter(p)
            assert brute.nearest_distance(p) == pytest.approx(tree.nearest_distance(p))

    def test_brute_force_query(self):
        index = BruteForceIndex(np.array([[0.0, 0.0], [3.0, 4.0], [10.0, 0.0]]))
        distance, i = index.query(3.0, 3.0)
        assert i == 1
        assert distance == pytest.approx(1.0)

    def test_unknown_index(self):
        with pytest.raises(ValueError):
            make_index("octree", np.zeros((4, 2)))


class TestRibbon:

    def test_edges_one_width_apart(self, geometry):
        left, right = geometry.ribbon(steps=200)
        assert left.shape == (201, 3)
        widths = np.linalg.norm(right - left, axis=1)
        assert np.allclose(widths, geometry.width)

    def test_edges_centered_on_curve(self, geometry):
        left, right = geometry.ribbon(steps=100)
        centers = geometry.curve.points_at(np.arange(101) / 100)
        assert np.allclose((left + right) / 2, centers)

    def test_ribbon_closes(self, geometry):
        left, right = geometry.ribbon(steps=100)
        assert np.allclose(left[0], left[-1])
        assert np.allclose(right[0], right[-1])

    def test_edge_posts_outside_track(self, geometry):
        posts = geometry.edge_posts(count=90, margin=0.7)
        assert posts.shape == (180, 3)
        for post in posts:
            assert not geometry.is_on_track(post)
