import math

import numpy as np
import pytest

from meshcalc.forms import (
    DECOperators,
    FormKind,
    form_value_range,
    gaussian,
    interpolate_wachspress_whitney,
    interpolate_whitney,
    point_to_segment_distance,
    random_edge_form,
    random_face_form,
    random_vertex_form,
)
from meshcalc.geometry import VertexPositionGeometry
from meshcalc.mesh import SurfaceMesh


@pytest.fixture
def hexagon():
    positions = [(0.0, 0.0, 0.0)] + [
        (math.cos(k * math.pi / 3), math.sin(k * math.pi / 3), 0.0) for k in range(6)
    ]
    polygons = [[0, k, k % 6 + 1] for k in range(1, 7)]
    return VertexPositionGeometry(SurfaceMesh(polygons), positions)


def test_gaussian_peak_and_width():
    assert gaussian(0.0, 3.0, 0.5) == 3.0
    assert gaussian(0.5, 1.0, 0.5) == pytest.approx(math.exp(-1))


def test_point_to_segment_distance_inside_and_beyond():
    assert point_to_segment_distance((1, 2, 0), (0, 0, 0), (2, 0, 0)) == pytest.approx(2.0)
    assert point_to_segment_distance((5, 0, 0), (0, 0, 0), (2, 0, 0)) == pytest.approx(3.0)
    assert point_to_segment_distance((-3, 0, 0), (0, 0, 0), (2, 0, 0)) == pytest.approx(3.0)


def test_point_to_segment_distance_degenerate_segment():
    assert point_to_segment_distance((0, 4, 0), (0, 0, 0), (0, 0, 0)) == pytest.approx(4.0)


def test_d_squared_is_zero(hexagon):
    ops = DECOperators(hexagon)
    phi = hexagon.positions[:, 0] ** 2 + hexagon.positions[:, 1]
    kind, one_form = ops.exterior_derivative(FormKind.PRIMAL_0_FORM, phi)
    assert kind is FormKind.PRIMAL_1_FORM
    kind, two_form = ops.exterior_derivative(kind, one_form)
    assert kind is FormKind.PRIMAL_2_FORM
    np.testing.assert_allclose(two_form, 0.0, atol=1e-12)


def test_dual_d_squared_is_zero(hexagon):
    ops = DECOperators(hexagon)
    values = np.arange(hexagon.mesh.n_faces(), dtype=float)
    kind, one_form = ops.exterior_derivative(FormKind.DUAL_0_FORM, values)
    assert kind is FormKind.DUAL_1_FORM
    kind, two_form = ops.exterior_derivative(kind, one_form)
    assert kind is FormKind.DUAL_2_FORM
    np.testing.assert_allclose(two_form, 0.0, atol=1e-12)


def test_d_of_two_form_is_identity(hexagon):
    ops = DECOperators(hexagon)
    values = np.linspace(1.0, 2.0, hexagon.mesh.n_faces())
    kind, result = ops.exterior_derivative(FormKind.PRIMAL_2_FORM, values)
    assert kind is FormKind.PRIMAL_2_FORM
    np.testing.assert_allclose(result, values)


@pytest.mark.parametrize(
    "start, middle",
    [
        (FormKind.PRIMAL_0_FORM, FormKind.DUAL_2_FORM),
        (FormKind.PRIMAL_1_FORM, FormKind.DUAL_1_FORM),
        (FormKind.PRIMAL_2_FORM, FormKind.DUAL_0_FORM),
    ],
)
def test_hodge_star_round_trip(hexagon, start, middle):
    ops = DECOperators(hexagon)
    n = {
        FormKind.PRIMAL_0_FORM: hexagon.mesh.n_vertices(),
        FormKind.PRIMAL_1_FORM: hexagon.mesh.n_edges(),
        FormKind.PRIMAL_2_FORM: hexagon.mesh.n_faces(),
    }[start]
    values = np.linspace(-1.0, 3.0, n)
    kind, starred = ops.hodge_star(start, values)
    assert kind is middle
    kind, back = ops.hodge_star(kind, starred)
    assert kind is start
    np.testing.assert_allclose(back, values)


def test_operator_rejects_wrong_length(hexagon):
    ops = DECOperators(hexagon)
    with pytest.raises(ValueError):
        ops.exterior_derivative(FormKind.PRIMAL_0_FORM, np.zeros(hexagon.mesh.n_edges()))
    with pytest.raises(ValueError):
        ops.hodge_star(FormKind.DUAL_1_FORM, np.zeros(3))


def test_random_vertex_form_reproducible_and_scaled(hexagon):
    plain = random_vertex_form(hexagon, np.random.default_rng(7))
    again = random_vertex_form(hexagon, np.random.default_rng(7))
    scaled = random_vertex_form(hexagon, np.random.default_rng(7), scale_by_area=True)
    areas = np.array([hexagon.barycentric_dual_area(v) for v in range(hexagon.mesh.n_vertices())])
    assert plain.shape == (hexagon.mesh.n_vertices(),)
    np.testing.assert_array_equal(plain, again)
    np.testing.assert_allclose(scaled, plain * areas)
    assert np.all(plain > 0)


def test_random_face_form_reproducible_and_scaled(hexagon):
    plain = random_face_form(hexagon, np.random.default_rng(3))
    scaled = random_face_form(hexagon, np.random.default_rng(3), scale_by_area=True)
    areas = np.array([hexagon.face_area(f) for f in range(hexagon.mesh.n_faces())])
    assert plain.shape == (hexagon.mesh.n_faces(),)
    np.testing.assert_allclose(scaled, plain * areas)
    assert np.all(plain > 0)


def test_random_edge_form_reproducible(hexagon):
    first = random_edge_form(hexagon, np.random.default_rng(11))
    second = random_edge_form(hexagon, np.random.default_rng(11))
    assert first.shape == (hexagon.mesh.n_edges(),)
    np.testing.assert_array_equal(first, second)
    assert np.all(np.isfinite(first))


def test_whitney_of_exact_linear_form_is_gradient(hexagon):
    ops = DECOperators(hexagon)
    _, form = ops.exterior_derivative(FormKind.PRIMAL_0_FORM, hexagon.positions[:, 0])
    field = interpolate_whitney(hexagon, form, 1.0)
    assert field.shape == (hexagon.mesh.n_faces(), 3)
    np.testing.assert_allclose(field, np.tile([1.0, 0.0, 0.0], (hexagon.mesh.n_faces(), 1)), atol=1e-12)


def test_whitney_caps_vector_length(hexagon):
    ops = DECOperators(hexagon)
    _, form = ops.exterior_derivative(FormKind.PRIMAL_0_FORM, 100.0 * hexagon.positions[:, 0])
    field = interpolate_whitney(hexagon, form, 0.5)
    expected = np.tile([1.5, 0.0, 0.0], (hexagon.mesh.n_faces(), 1))
    np.testing.assert_allclose(field, expected, atol=1e-9)


def test_whitney_zero_form(hexagon):
    field = interpolate_whitney(hexagon, np.zeros(hexagon.mesh.n_edges()), 1.0)
    np.testing.assert_array_equal(field, 0.0)


def test_wachspress_whitney_boundary_zero_and_capped(hexagon):
    form = np.linspace(-2.0, 2.0, hexagon.mesh.n_edges())
    field = interpolate_wachspress_whitney(hexagon, form, 0.5)
    assert field.shape == (hexagon.mesh.n_vertices(), 3)
    np.testing.assert_array_equal(field[1:], 0.0)
    assert np.all(np.isfinite(field[0]))
    assert np.linalg.norm(field[0]) <= 1.5 + 1e-9


def test_form_value_range_skips_boundary_vertices(hexagon):
    form = np.array([2.0, 50.0, -50.0, 7.0, 7.0, 7.0, 7.0])
    assert form_value_range(hexagon, form, FormKind.PRIMAL_0_FORM) == (2.0, 2.0)


def test_form_value_range_one_form_uses_all_values(hexagon):
    form = np.linspace(-3.0, 4.0, hexagon.mesh.n_edges())
    low, high = form_value_range(hexagon, form, FormKind.PRIMAL_1_FORM)
    assert low == pytest.approx(form.min())
    assert high == pytest.approx(form.max())


def test_form_value_range_near_zero_is_widened(hexagon):
    form = np.full(hexagon.mesh.n_edges(), 1e-9)
    assert form_value_range(hexagon, form, FormKind.DUAL_1_FORM) == (0.0, 1e-5)


def test_form_value_range_dual_two_form_divides_by_area(hexagon):
    area = hexagon.barycentric_dual_area(0)
    form = np.zeros(hexagon.mesh.n_vertices())
    form[0] = 3.0 * area
    low, high = form_value_range(hexagon, form, FormKind.DUAL_2_FORM)
    assert low == pytest.approx(3.0)
    assert high == pytest.approx(3.0)


def test_form_value_range_rejects_wrong_length(hexagon):
    with pytest.raises(ValueError):
        form_value_range(hexagon, np.zeros(2), FormKind.PRIMAL_2_FORM)