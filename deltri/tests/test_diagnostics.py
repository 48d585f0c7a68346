import numpy as np
import pytest

from deltri.core.diagnostics import (matches_reference, mesh_summary, reference_triangles,
                                     triangle_set, triangles_min_angles)


def test_min_angles_equilateral_and_right():
    pts = np.array([[0, 0], [1, 0], [0.5, np.sqrt(3) / 2], [0, 1]], dtype=float)
    angles = triangles_min_angles(pts, [[0, 1, 2], [0, 1, 3]])
    assert angles == pytest.approx([60.0, 45.0])


def test_min_angles_empty():
    assert triangles_min_angles(np.zeros((3, 2)), np.zeros((0, 3), dtype=int)).shape == (0,)


def test_summary_of_square(square):
    summary = mesh_summary(square)
    assert summary['points'] == 4
    assert summary['edges'] == 5
    assert summary['triangles'] == 2
    assert summary['interior_triangles'] == 0
    assert summary['capacity'] == (256, 768, 512)
    assert summary['area'] == pytest.approx(16.0)
    assert summary['min_angle_deg'] == pytest.approx(45.0)


def test_area_is_preserved_by_insertion(square, rng):
    square.insert(0.0, 0.0)
    assert mesh_summary(square)['min_angle_deg'] == pytest.approx(45.0)
    square.insert_many(rng.uniform(-1.9, 1.9, size=(30, 2)))
    assert mesh_summary(square)['area'] == pytest.approx(16.0)


def test_triangle_set_ignores_winding():
    assert triangle_set([[0, 1, 2], [3, 2, 1]]) == triangle_set([[2, 1, 0], [1, 2, 3]])


def test_reference_triangles_square_with_centre():
    pts = [(-1, -1), (1, -1), (-1, 1), (1, 1), (0, 0)]
    ref = reference_triangles(pts)
    assert ref.shape == (4, 3)
    assert all(4 in t for t in triangle_set(ref))


def test_matches_reference(square, rng):
    square.insert_many(rng.uniform(-1.5, 1.5, size=(50, 2)))
    assert matches_reference(square)


def test_reference_mismatch_detected():
    class _Fake:
        # Delaunay would use diagonal 1-2; these triangles share 0-3
        points = np.array([[0, 0], [2, 0], [0, 1], [2.5, 1.5]], dtype=float)
        triangle_vertices = np.array([[0, 1, 3], [0, 3, 2]])
    assert not matches_reference(_Fake())
