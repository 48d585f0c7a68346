import numpy as np
import pytest

from deltri.core.storage import MeshStorage
from deltri.core.triangulation import Triangulation


def build_square_storage(max_points=16, size=4.0):
    """Storage holding the two-triangle square that Triangulation.setup() builds."""
    s = MeshStorage(max_points)
    hs = size * 0.5
    t0 = s.allocate_triangle()
    t1 = s.allocate_triangle()
    p0 = s.add_point(-hs, -hs)
    p1 = s.add_point(hs, -hs)
    p2 = s.add_point(-hs, hs)
    p3 = s.add_point(hs, hs)
    e0 = s.add_edge(p0, p1, t0, None)
    e1 = s.add_edge(p1, p2, t0, t1)
    e2 = s.add_edge(p2, p0, t0, None)
    e3 = s.add_edge(p2, p3, None, t1)
    e4 = s.add_edge(p3, p1, None, t1)
    s.set_triangle(t0, p0, p1, p2, e1, e2, e0)
    s.set_triangle(t1, p3, p2, p1, e1, e4, e3)
    return s


@pytest.fixture
def square_storage():
    return build_square_storage()


@pytest.fixture
def square():
    tri = Triangulation(256)
    tri.setup(0.0, 0.0, 4.0)
    return tri


@pytest.fixture
def rng():
    return np.random.default_rng(12345)
