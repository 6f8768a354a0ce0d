import math

import numpy as np
import pytest

from meshcalc.geometry import VertexPositionGeometry
from meshcalc.heat_method import HeatMethod, isolines
from meshcalc.mesh import SurfaceMesh


def octahedron():
    positions = [(1, 0, 0), (-1, 0, 0), (0, 1, 0), (0, -1, 0), (0, 0, 1), (0, 0, -1)]
    faces = [
        [0, 2, 4], [2, 1, 4], [1, 3, 4], [3, 0, 4],
        [2, 0, 5], [1, 2, 5], [3, 1, 5], [0, 3, 5],
    ]
    return VertexPositionGeometry(SurfaceMesh(faces), positions)


@pytest.fixture
def solver():
    return HeatMethod(octahedron())


def source_at(vertex, n=6):
    delta = np.zeros(n)
    delta[vertex] = 1.0
    return delta


def test_flow_matrix_is_mass_plus_scaled_laplace(solver):
    h = solver.geometry.mean_edge_length()
    difference = solver.flow - h * h * solver.laplace - solver.geometry.mass_matrix()
    assert abs(difference).max() < 1e-12


def test_vector_field_is_unit_and_tangent(solver):
    u = solver.geometry.positions[:, 0] + 2 * solver.geometry.positions[:, 1]
    field = solver.compute_vector_field(u)
    assert field.shape == (8, 3)
    assert np.allclose(np.linalg.norm(field, axis=1), 1.0)
    for f in range(8):
        assert np.dot(field[f], solver.geometry.face_normal(f)) == pytest.approx(0.0, abs=1e-12)


def test_vector_field_points_down_the_gradient(solver):
    u = solver.geometry.positions[:, 0]
    field = solver.compute_vector_field(u)
    assert field[:, 0].max() < 0.0
    expected = -np.array([2.0, -1.0, -1.0]) / math.sqrt(6.0)
    np.testing.assert_allclose(field[0], expected, atol=1e-12)


def test_divergence_of_zero_field(solver):
    assert np.allclose(solver.compute_divergence(np.zeros((8, 3))), 0.0)


def test_divergence_sums_to_zero(solver):
    rng = np.random.default_rng(3)
    field = rng.normal(size=(8, 3))
    assert solver.compute_divergence(field).sum() == pytest.approx(0.0, abs=1e-10)


def test_compute_distance_symmetry(solver):
    phi = solver.compute(source_at(0))
    assert phi[0] == pytest.approx(0.0)
    assert phi.min() == pytest.approx(0.0)
    assert np.argmax(phi) == 1
    assert np.allclose(phi[2:], phi[2])
    assert phi[2] > 0
    assert phi[1] > phi[2]


def test_compute_distance_from_pole(solver):
    phi = solver.compute(source_at(4))
    assert phi[4] == pytest.approx(0.0)
    assert np.allclose(phi[:4], phi[0])
    assert phi[5] > phi[0]


def test_compute_rejects_wrong_length(solver):
    with pytest.raises(ValueError):
        solver.compute(np.zeros(5))


def test_divergence_rejects_wrong_shape(solver):
    with pytest.raises(ValueError):
        solver.compute_divergence(np.zeros((8, 2)))


def test_isolines_lie_on_surface(solver):
    phi = solver.compute(source_at(0))
    segments = isolines(solver.geometry, phi)
    assert segments.shape[1:] == (2, 3)
    assert len(segments) > 0
    points = segments.reshape(-1, 3)
    assert np.allclose(np.abs(points).sum(axis=1), 1.0)


def test_isolines_rejects_bad_input(solver):
    with pytest.raises(ValueError):
        isolines(solver.geometry, np.zeros(6))
    with pytest.raises(ValueError):
        isolines(solver.geometry, np.arange(6, dtype=float), count=0)