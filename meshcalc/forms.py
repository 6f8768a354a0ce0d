"""Discrete differential forms: operators, random samples and visualization helpers."""

from __future__ import annotations

import math
from collections.abc import Sequence
from enum import Enum

import numpy as np
from scipy import sparse

from .dec import (
    exterior_derivative_0_form,
    exterior_derivative_1_form,
    hodge_star_0_form,
    hodge_star_1_form,
    hodge_star_2_form,
    inverse_diagonal,
)
from .dual import circumcenter
from .geometry import VertexPositionGeometry

_RANGE_EPS = 1e-5
_ARROW_CAP = 1.5


class FormKind(Enum):
    """Primal and dual k-forms on a surface mesh."""

    PRIMAL_0_FORM = "Primal 0-form"
    PRIMAL_1_FORM = "Primal 1-form"
    PRIMAL_2_FORM = "Primal 2-form"
    DUAL_0_FORM = "Dual 0-form"
    DUAL_1_FORM = "Dual 1-form"
    DUAL_2_FORM = "Dual 2-form"


def _form_size(geometry: VertexPositionGeometry, kind: FormKind) -> int:
    mesh = geometry.mesh
    if kind in (FormKind.PRIMAL_0_FORM, FormKind.DUAL_2_FORM):
        return mesh.n_vertices()
    if kind in (FormKind.PRIMAL_2_FORM, FormKind.DUAL_0_FORM):
        return mesh.n_faces()
    return mesh.n_edges()


def _as_form(geometry: VertexPositionGeometry, kind: FormKind, form) -> np.ndarray:
    values = np.asarray(form, dtype=float)
    expected = _form_size(geometry, kind)
    if values.shape != (expected,):
        raise ValueError(f"{kind.value} needs {expected} values, got shape {values.shape}")
    return values


class DECOperators:
    """Exterior derivatives and Hodge stars of a mesh, built once."""

    def __init__(self, geometry: VertexPositionGeometry) -> None:
        self.geometry = geometry
        mesh = geometry.mesh
        self.d0 = exterior_derivative_0_form(geometry)
        self.d1 = exterior_derivative_1_form(geometry)
        self.d0t = self.d0.transpose().tocsr()
        self.d1t = self.d1.transpose().tocsr()
        self.h0 = hodge_star_0_form(geometry)
        self.h1 = hodge_star_1_form(geometry)
        self.h2 = hodge_star_2_form(geometry)
        self.h0_inv = inverse_diagonal(self.h0)
        self.h1_inv = inverse_diagonal(self.h1)
        self.h2_inv = inverse_diagonal(self.h2)
        self._d = {
            FormKind.PRIMAL_0_FORM: (self.d0, FormKind.PRIMAL_1_FORM),
            FormKind.PRIMAL_1_FORM: (self.d1, FormKind.PRIMAL_2_FORM),
            FormKind.PRIMAL_2_FORM: (sparse.identity(mesh.n_faces(), format="csr"), FormKind.PRIMAL_2_FORM),
            FormKind.DUAL_0_FORM: (self.d1t, FormKind.DUAL_1_FORM),
            FormKind.DUAL_1_FORM: (self.d0t, FormKind.DUAL_2_FORM),
            FormKind.DUAL_2_FORM: (sparse.identity(mesh.n_vertices(), format="csr"), FormKind.DUAL_2_FORM),
        }
        self._star = {
            FormKind.PRIMAL_0_FORM: (self.h0, FormKind.DUAL_2_FORM),
            FormKind.PRIMAL_1_FORM: (self.h1, FormKind.DUAL_1_FORM),
            FormKind.PRIMAL_2_FORM: (self.h2, FormKind.DUAL_0_FORM),
            FormKind.DUAL_0_FORM: (self.h2_inv, FormKind.PRIMAL_2_FORM),
            FormKind.DUAL_1_FORM: (self.h1_inv, FormKind.PRIMAL_1_FORM),
            FormKind.DUAL_2_FORM: (self.h0_inv, FormKind.PRIMAL_0_FORM),
        }

    def _apply(self, table, kind, form) -> tuple[FormKind, np.ndarray]:
        kind = FormKind(kind)
        values = _as_form(self.geometry, kind, form)
        operator, next_kind = table[kind]
        return next_kind, np.asarray(operator @ values, dtype=float)

    def exterior_derivative(self, kind: FormKind, form) -> tuple[FormKind, np.ndarray]:
        """Apply d; 2-forms are returned unchanged. Gives the new kind and values."""
        return self._apply(self._d, kind, form)

    def hodge_star(self, kind: FormKind, form) -> tuple[FormKind, np.ndarray]:
        """Apply the Hodge star, moving between primal and dual. Gives the new kind and values."""
        return self._apply(self._star, kind, form)


def gaussian(x: float, a: float, b: float) -> float:
    """Gaussian bump of height ``a`` and width ``b``."""
    return a * math.exp(-(x * x) / (b * b))


def _rng(rng) -> np.random.Generator:
    return np.random.default_rng() if rng is None else rng


def _peak_count(rng: np.random.Generator) -> int:
    return max(2, int(rng.integers(0, 10)))


def random_vertex_form(
    geometry: VertexPositionGeometry,
    rng: np.random.Generator | None = None,
    scale_by_area: bool = False,
) -> np.ndarray:
    """Sum of Gaussian bumps centred on random vertices, one value per vertex."""
    rng = _rng(rng)
    mesh = geometry.mesh
    n_peaks = _peak_count(rng)
    centres = [geometry.positions[int(rng.integers(0, mesh.n_vertices()))] for _ in range(n_peaks)]
    form = np.zeros(mesh.n_vertices())
    for v in range(mesh.n_vertices()):
        p = geometry.positions[v]
        total = sum(gaussian(float(np.linalg.norm(c - p)), 1.0, 0.5) for c in centres)
        if scale_by_area:
            total *= geometry.barycentric_dual_area(v)
        form[v] = total
    return form


def random_face_form(
    geometry: VertexPositionGeometry,
    rng: np.random.Generator | None = None,
    scale_by_area: bool = False,
) -> np.ndarray:
    """Sum of Gaussian bumps centred on circumcenters of random faces, one value per face."""
    rng = _rng(rng)
    mesh = geometry.mesh
    n_peaks = _peak_count(rng)
    centres = [circumcenter(geometry, int(rng.integers(0, mesh.n_faces()))) for _ in range(n_peaks)]
    form = np.zeros(mesh.n_faces())
    for f in range(mesh.n_faces()):
        p = circumcenter(geometry, f)
        total = sum(gaussian(float(np.linalg.norm(c - p)), 1.0, 0.5) for c in centres)
        if scale_by_area:
            total *= geometry.face_area(f)
        form[f] = total
    return form


def random_edge_form(geometry: VertexPositionGeometry, rng: np.random.Generator | None = None) -> np.ndarray:
    """Random 1-form from a smooth field with curl-free, divergence-free and harmonic parts."""
    rng = _rng(rng)
    mesh = geometry.mesh
    scalar_potential = random_vertex_form(geometry, rng)
    vector_potential = random_vertex_form(geometry, rng)

    field = np.zeros((mesh.n_faces(), 3))
    for f in range(mesh.n_faces()):
        area = geometry.face_area(f)
        normal = geometry.face_normal(f)
        centre = circumcenter(geometry, f)
        for he in mesh.face_halfedges(f):
            i = mesh.tip(mesh.next(he))
            e = geometry.halfedge_vector(he)
            field[f] += np.cross(normal, e) * scalar_potential[i] / (2 * area)
            field[f] += e * vector_potential[i] / (2 * area)
        u = np.array([-centre[1], 0.0, centre[0]])
        u -= normal * float(np.dot(u, normal))
        field[f] += u

    form = np.zeros(mesh.n_edges())
    for e in range(mesh.n_edges()):
        he = mesh.edge_halfedge(e)
        twin = mesh.twin(he)
        f1 = field[mesh.face(he)] if mesh.is_interior(he) else np.zeros(3)
        f2 = field[mesh.face(twin)] if mesh.is_interior(twin) else np.zeros(3)
        form[e] = float(np.dot(f1 + f2, geometry.halfedge_vector(he))) * 0.5
    return form


def point_to_segment_distance(p: Sequence[float], a: Sequence[float], u: Sequence[float]) -> float:
    """Distance from ``p`` to the segment starting at ``a`` with direction ``u``."""
    p = np.asarray(p, dtype=float)
    a = np.asarray(a, dtype=float)
    u = np.asarray(u, dtype=float)
    length2 = float(np.dot(u, u))
    if length2 == 0.0:
        return float(np.linalg.norm(p - a))
    t = max(0.0, min(1.0, float(np.dot(p - a, u)) / length2))
    return float(np.linalg.norm(p - (a + t * u)))


def _cap(vector: np.ndarray, length_scale: float) -> np.ndarray:
    norm = float(np.linalg.norm(vector * length_scale))
    if norm > length_scale * _ARROW_CAP:
        vector = vector * (length_scale * _ARROW_CAP / norm)
    return vector


def interpolate_whitney(geometry: VertexPositionGeometry, form, length_scale: float) -> np.ndarray:
    """Whitney interpolation of a primal 1-form at each face centre, as (n_faces, 3)."""
    mesh = geometry.mesh
    values = _as_form(geometry, FormKind.PRIMAL_1_FORM, form)
    field = np.zeros((mesh.n_faces(), 3))
    for f in range(mesh.n_faces()):
        hes = list(mesh.face_halfedges(f))
        if len(hes) != 3:
            raise ValueError(f"face {f} is not a triangle")
        pi, pj, pk = (geometry.positions[mesh.tail(he)] for he in hes)
        eij, ejk, eki = pj - pi, pk - pj, pi - pk
        cij, cjk, cki = (
            values[mesh.edge(he)] * (1.0 if mesh.edge_halfedge(mesh.edge(he)) == he else -1.0)
            for he in hes
        )
        area = geometry.face_area(f)
        normal = geometry.face_normal(f)
        total = (eki - ejk) * cij + (eij - eki) * cjk + (ejk - eij) * cki
        field[f] = _cap(np.cross(normal, total) / (6 * area), length_scale)
    return field


def interpolate_wachspress_whitney(geometry: VertexPositionGeometry, form, length_scale: float) -> np.ndarray:
    """Vector per dual face (primal vertex) for a dual 1-form on a planar mesh.

    Boundary vertices get a zero vector.
    """
    mesh = geometry.mesh
    values = _as_form(geometry, FormKind.DUAL_1_FORM, form)
    field = np.zeros((mesh.n_vertices(), 3))
    for v in range(mesh.n_vertices()):
        if mesh.is_boundary_vertex(v):
            continue
        p = geometry.positions[v]
        coefficients: list[np.ndarray] = []
        weights: list[float] = []
        for he in mesh.outgoing_halfedges(v):
            f1 = circumcenter(geometry, mesh.face(mesh.twin(he)))
            f2 = circumcenter(geometry, mesh.face(he))
            u = f2 - f1
            height = point_to_segment_distance(p, f1, u)
            coefficients.append(np.array([u[1], -u[0], 0.0]) / height)
            sign = 1.0 if mesh.edge_halfedge(mesh.edge(he)) == he else -1.0
            weights.append(values[mesh.edge(he)] * sign)
        n = len(coefficients)
        total = np.zeros(3)
        for j in range(n):
            total += coefficients[(j + 1) % n] - weights[j] * coefficients[j - 1]
        field[v] = _cap(total, length_scale)
    return field


def form_value_range(geometry: VertexPositionGeometry, form, kind: FormKind) -> tuple[float, float]:
    """Colour-map range of a form, skipping boundary elements for 0- and 2-forms.

    2-forms are divided by their area. A minimum near zero becomes 0 and a
    maximum near zero becomes 1e-5, so the range is never empty.
    """
    mesh = geometry.mesh
    kind = FormKind(kind)
    values = _as_form(geometry, kind, form)
    selected: list[float] = []
    if kind in (FormKind.PRIMAL_0_FORM, FormKind.DUAL_2_FORM):
        for v in range(mesh.n_vertices()):
            if mesh.is_boundary_vertex(v):
                continue
            val = float(values[v])
            if kind is FormKind.DUAL_2_FORM:
                val /= geometry.barycentric_dual_area(v)
            selected.append(val)
    elif kind in (FormKind.PRIMAL_2_FORM, FormKind.DUAL_0_FORM):
        for f in range(mesh.n_faces()):
            if any(mesh.is_boundary_vertex(v) for v in mesh.face_vertices(f)):
                continue
            val = float(values[f])
            if kind is FormKind.PRIMAL_2_FORM:
                val /= geometry.face_area(f)
            selected.append(val)
    else:
        selected = [float(x) for x in values]

    min_val = min(selected, default=math.inf)
    max_val = max(selected, default=-math.inf)
    if abs(min_val) < _RANGE_EPS:
        min_val = 0.0
    if abs(max_val) < _RANGE_EPS:
        max_val = _RANGE_EPS
    return min_val, max_val