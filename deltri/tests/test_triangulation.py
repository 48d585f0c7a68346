"""End-to-end tests of the Triangulation facade."""
import math

import numpy as np
import pytest

from deltri import (CapacityExceededError, DuplicatePointError, Edge, InvalidCapacityError,
                    OutOfRegionError, RegionStateError, Triangle, Triangulation,
                    TriangulationConfig, bounding_square, triangulate)
from deltri.core.conformity import check_triangulation
from deltri.core.diagnostics import matches_reference
from deltri.core.predicates import triangles_signed_areas


def assert_valid(tri):
    ok, msgs = check_triangulation(tri)
    assert ok, msgs


def counts(tri):
    return tri.num_points, tri.num_edges, tri.num_triangles


class TestSetup:

    def test_square_layout(self, square):
        assert counts(square) == (4, 5, 2)
        assert square.points.tolist() == [[-2, -2], [2, -2], [-2, 2], [2, 2]]
        assert square.triangle(0) == Triangle(0, 1, 2, 1, 2, 0)
        assert square.triangle(1) == Triangle(3, 2, 1, 1, 4, 3)
        assert square.edge(1) == Edge(1, 2, 0, 1)
        assert square.edge(0) == Edge(0, 1, 0, None)
        assert square.frame_point_ids == (0, 1, 2, 3)
        assert square.is_setup
        assert_valid(square)

    def test_offset_region(self):
        tri = Triangulation(8)
        tri.setup(10.0, -5.0, 2.0)
        assert tri.points.tolist() == [[9, -6], [11, -6], [9, -4], [11, -4]]

    def test_setup_twice(self, square):
        with pytest.raises(RegionStateError):
            square.setup(0.0, 0.0, 4.0)

    @pytest.mark.parametrize('args', [(0, 0, 0), (0, 0, -1), (0, 0, math.inf), (math.nan, 0, 1)])
    def test_bad_region(self, args):
        tri = Triangulation(8)
        with pytest.raises(ValueError):
            tri.setup(*args)
        assert not tri.is_setup

    def test_insert_before_setup(self):
        tri = Triangulation(8)
        with pytest.raises(RegionStateError):
            tri.insert(0.0, 0.0)

    def test_invalid_capacity(self):
        with pytest.raises(InvalidCapacityError):
            Triangulation(3)


class TestInsert:

    def test_insert_centre(self, square):
        pid = square.insert(0.0, 0.0)
        assert pid == 4
        assert counts(square) == (5, 8, 4)
        # the single flip turns diagonal 1-2 into 4-0
        assert square.edge(1) == Edge(4, 0, 0, 1)
        assert square.triangle(0).vertices == (0, 1, 4)
        assert square.triangle(1).vertices == (4, 2, 0)
        assert square.triangle(2).vertices == (1, 3, 4)
        assert square.triangle(3).vertices == (3, 2, 4)
        assert np.all(triangles_signed_areas(square.points, square.triangle_vertices) > 0)
        assert_valid(square)
        assert square.stats_summary()['insert']['flips'] == 1

    def test_insert_off_centre(self, square):
        square.insert(-0.1, -0.1)
        assert square.edge(1).p0 == 3 and square.edge(1).p1 == 4
        assert [t.vertices for t in square.iter_triangles()] == [
            (4, 1, 3), (3, 2, 4), (2, 0, 4), (0, 1, 4)]
        assert_valid(square)

    def test_out_of_region(self, square):
        with pytest.raises(OutOfRegionError) as exc:
            square.insert(100.0, 100.0)
        assert (exc.value.x, exc.value.y) == (100.0, 100.0)
        assert counts(square) == (4, 5, 2)

    @pytest.mark.parametrize('xy', [(math.nan, 0.0), (0.0, math.inf)])
    def test_non_finite_is_out_of_region(self, square, xy):
        with pytest.raises(OutOfRegionError):
            square.insert(*xy)
        assert counts(square) == (4, 5, 2)
        assert square.find_triangle(*xy) is None

    def test_capacity(self):
        tri = Triangulation(4)
        tri.setup(0.0, 0.0, 4.0)
        with pytest.raises(CapacityExceededError) as exc:
            tri.insert(0.0, 0.0)
        assert exc.value.arena == 'point'
        assert counts(tri) == (4, 5, 2)

    def test_outside_reported_before_full(self):
        tri = Triangulation(4)
        tri.setup(0.0, 0.0, 4.0)
        with pytest.raises(OutOfRegionError):
            tri.insert(50.0, 0.0)

    def test_duplicate_of_corner(self, square):
        with pytest.raises(DuplicatePointError) as exc:
            square.insert(-2.0, -2.0)
        assert exc.value.point_id == 0
        assert counts(square) == (4, 5, 2)

    def test_duplicate_of_inserted_point(self, square):
        pid = square.insert(0.3, 0.7)
        with pytest.raises(DuplicatePointError) as exc:
            square.insert(0.3, 0.7)
        assert exc.value.point_id == pid

    def test_duplicates_allowed_when_configured(self):
        tri = Triangulation(8, TriangulationConfig(reject_duplicates=False))
        tri.setup(0.0, 0.0, 4.0)
        tri.insert(0.5, 0.5)
        tri.insert(0.5, 0.5)
        assert tri.num_points == 6

    def test_boundary_point(self, square):
        square.insert(0.0, -2.0)
        ok, msgs = check_triangulation(square, check_delaunay=False)
        assert ok, msgs

    def test_count_law(self, square, rng):
        pts = rng.uniform(-1.9, 1.9, size=(120, 2))
        for k, (x, y) in enumerate(pts.tolist(), start=1):
            square.insert(x, y)
            assert counts(square) == (4 + k, 5 + 3 * k, 2 + 2 * k)
        assert_valid(square)

    def test_validate_mode(self, rng):
        tri = Triangulation(64, TriangulationConfig(validate=True, debug=True))
        tri.setup(0.0, 0.0, 4.0)
        tri.insert_many(rng.uniform(-1.9, 1.9, size=(60, 2)))
        assert tri.num_points == 64

    def test_grid_points(self):
        # co-circular quadruples everywhere; ties must not break the mesh
        tri = Triangulation(4 + 25)
        tri.setup(0.0, 0.0, 6.0)
        g = np.linspace(-2.0, 2.0, 5)
        xx, yy = np.meshgrid(g, g)
        tri.insert_many(np.column_stack([xx.ravel(), yy.ravel()]))
        assert tri.num_triangles == 2 + 2 * 25
        assert_valid(tri)

    def test_matches_scipy(self, rng):
        tri = Triangulation(54)
        tri.setup(0.0, 0.0, 4.0)
        tri.insert_many(rng.uniform(-1.5, 1.5, size=(50, 2)))
        assert matches_reference(tri)

    def test_find_triangle_is_idempotent(self, square, rng):
        square.insert_many(rng.uniform(-1.9, 1.9, size=(40, 2)))
        before = square.triangles.copy()
        first = square.find_triangle(0.123, -0.456)
        assert first is not None
        assert square.find_triangle(0.123, -0.456) == first
        assert np.array_equal(before, square.triangles)


class TestInsertMany:

    def test_ids_in_order(self, square):
        ids = square.insert_many([(0.1, 0.2), (-0.5, 0.5), (1.0, -1.0)])
        assert ids == [4, 5, 6]

    def test_raises_on_outside(self, square):
        with pytest.raises(OutOfRegionError):
            square.insert_many([(0.1, 0.2), (9.0, 9.0), (0.3, 0.3)])
        assert square.num_points == 5

    def test_skip_outside(self, square):
        ids = square.insert_many([(0.1, 0.2), (9.0, 9.0), (0.1, 0.2), (0.3, 0.3)], skip_outside=True)
        assert ids == [4, 5]
        st = square.stats_summary()['insert']
        assert st['attempts'] == 4
        assert st['fail'] == 2
        assert st['out_of_region'] == 1
        assert st['duplicates'] == 1

    def test_capacity_always_raises(self):
        tri = Triangulation(5)
        tri.setup(0.0, 0.0, 4.0)
        with pytest.raises(CapacityExceededError):
            tri.insert_many([(0.1, 0.1), (0.2, -0.3)], skip_outside=True)
        assert tri.num_points == 5


class TestViewsAndExport:

    def test_views_read_only(self, square):
        for arr in (square.points, square.edges, square.triangles, square.triangle_vertices):
            assert not arr.flags.writeable

    def test_view_dtypes(self, square):
        assert square.points.dtype == np.float64
        assert square.edges.dtype == np.int32
        assert square.triangles.shape == (2, 6)
        assert square.triangle_vertices.shape == (2, 3)
        assert square.edges[0, 3] == -1

    def test_iterators(self, square):
        edges = list(square.iter_edges())
        assert len(edges) == 5
        assert sum(e.is_boundary for e in edges) == 4
        assert len(list(square.iter_triangles())) == 2

    def test_interior_triangles(self, square):
        assert square.interior_triangles().shape == (0, 3)
        square.insert_many([(-0.5, -0.5), (0.5, -0.5), (0.0, 0.5)])
        inner = square.interior_triangles()
        assert [sorted(t) for t in inner.tolist()] == [[4, 5, 6]]

    def test_mesh_arrays(self, square):
        square.insert_many([(-0.5, -0.5), (0.5, -0.5), (0.0, 0.5)])
        pts, tris = square.mesh_arrays()
        assert pts.shape == (7, 2)
        assert pts.flags.writeable
        assert tris.shape == (1, 3)
        assert np.all(triangles_signed_areas(pts, tris) > 0)
        _, cw = square.mesh_arrays(clockwise=True)
        assert cw.tolist() == [[tris[0, 0], tris[0, 2], tris[0, 1]]]
        assert np.all(triangles_signed_areas(pts, cw) < 0)
        _, full = square.mesh_arrays(drop_frame=False)
        assert full.shape == (8, 3)

    def test_repr(self, square):
        assert repr(square) == "Triangulation(points=4/256, edges=5, triangles=2)"


class TestClear:

    def test_clear_and_setup_again(self, square):
        square.insert(0.0, 0.0)
        square.clear()
        assert counts(square) == (0, 0, 0)
        assert not square.is_setup
        with pytest.raises(RegionStateError):
            square.insert(0.0, 0.0)
        square.setup(5.0, 5.0, 2.0)
        assert square.insert(5.0, 5.0) == 4
        assert_valid(square)


class TestStats:

    def test_counters(self, square):
        square.insert(0.0, 0.0)
        with pytest.raises(OutOfRegionError):
            square.insert(10.0, 0.0)
        summary = square.stats_summary()
        assert summary['setup']['success'] == 1
        ins = summary['insert']
        assert (ins['attempts'], ins['success'], ins['fail']) == (2, 1, 1)
        assert ins['walk_steps'] >= 1
        assert ins['time_total'] >= ins['time_max'] >= ins['time_min'] >= 0.0

    def test_reset_stats(self, square):
        square.insert(0.0, 0.0)
        square.reset_stats()
        ins = square.stats_summary()['insert']
        assert ins['attempts'] == 0 and ins['flips'] == 0
        square.reset_stats(drop_ops=True)
        assert square.stats_summary() == {}

    def test_print_stats(self, square, capsys):
        square.insert(0.0, 0.0)
        square.print_stats()
        out = capsys.readouterr().out
        assert 'insert' in out and 'setup' in out


class TestConvenience:

    def test_bounding_square(self):
        assert bounding_square([(0.0, 0.0), (2.0, 1.0)]) == pytest.approx((1.0, 0.5, 2.4))

    def test_bounding_square_single_point(self):
        assert bounding_square([(3.0, 4.0)], margin=0.0) == (3.0, 4.0, 1.0)

    @pytest.mark.parametrize('pts', [np.zeros((0, 2)), [(0.0, math.nan)]])
    def test_bounding_square_rejects(self, pts):
        with pytest.raises(ValueError):
            bounding_square(pts)

    def test_triangulate(self, rng):
        pts = rng.uniform(-1.0, 1.0, size=(40, 2))
        tri = triangulate(pts)
        assert tri.num_points == 44
        assert np.allclose(tri.points[4:], pts)
        assert_valid(tri)

    def test_triangulate_skips_duplicates(self):
        tri = triangulate([(0.0, 0.0), (1.0, 1.0), (0.0, 0.0), (1.0, 0.0)])
        assert tri.num_points == 7
