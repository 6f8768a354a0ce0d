"""Geodesic distance by the heat method."""

from __future__ import annotations

import math
from collections.abc import Sequence

import numpy as np
from scipy import sparse
from scipy.sparse import linalg as sparse_linalg

from .geometry import VertexPositionGeometry


def _normalized(vector: np.ndarray) -> np.ndarray:
    with np.errstate(invalid="ignore", divide="ignore"):
        return vector / np.linalg.norm(vector)


def _solve(matrix: sparse.spmatrix, rhs: np.ndarray) -> np.ndarray:
    return np.asarray(sparse_linalg.spsolve(sparse.csc_matrix(matrix), rhs), dtype=float)


class HeatMethod:
    """Heat method solver; builds the Laplace and flow matrices once."""

    def __init__(self, geometry: VertexPositionGeometry) -> None:
        self.geometry = geometry
        self.mesh = geometry.mesh
        self.laplace = geometry.laplace_matrix()
        h = geometry.mean_edge_length()
        self.flow = (geometry.mass_matrix() + (h * h) * self.laplace).tocsr()

    def compute_vector_field(self, u: Sequence[float] | np.ndarray) -> np.ndarray:
        """Per-face unit vectors X = -grad u / |grad u|, as an (n_faces, 3) array."""
        mesh = self.mesh
        geo = self.geometry
        values = np.asarray(u, dtype=float)
        if values.shape != (mesh.n_vertices(),):
            raise ValueError(f"expected {mesh.n_vertices()} vertex values, got shape {values.shape}")
        field = np.zeros((mesh.n_faces(), 3))
        for f in range(mesh.n_faces()):
            normal = geo.face_normal(f)
            gradient = np.zeros(3)
            for he in mesh.face_halfedges(f):
                reversed_edge = -geo.halfedge_vector(he)
                gradient += values[mesh.tip(mesh.next(he))] * np.cross(normal, reversed_edge)
            field[f] = _normalized(gradient)
        return field

    def compute_divergence(self, field: Sequence[Sequence[float]] | np.ndarray) -> np.ndarray:
        """Integrated divergence per vertex of a per-face vector field."""
        mesh = self.mesh
        geo = self.geometry
        vectors = np.asarray(field, dtype=float)
        if vectors.shape != (mesh.n_faces(), 3):
            raise ValueError(f"expected field of shape ({mesh.n_faces()}, 3), got {vectors.shape}")
        divergence = np.zeros(mesh.n_vertices())
        positions = geo.positions
        for v in range(mesh.n_vertices()):
            total = 0.0
            for f in mesh.adjacent_faces(v):
                e1 = mesh.face_halfedge(f)
                if mesh.tip(e1) != v and mesh.tail(e1) != v:
                    e1 = mesh.next(e1)
                if mesh.tip(e1) == v:
                    e1 = mesh.next(e1)
                e2 = mesh.next(mesh.next(e1))
                out1 = positions[mesh.tip(e1)] - positions[v]
                out2 = positions[mesh.tail(e2)] - positions[v]
                x = vectors[f]
                total += geo.halfedge_cotan_weight(e1) * float(np.dot(out1, x))
                total += geo.halfedge_cotan_weight(e2) * float(np.dot(out2, x))
            divergence[v] = total
        return divergence

    def compute(self, delta: Sequence[float] | np.ndarray) -> np.ndarray:
        """Geodesic distance from the heat sources in ``delta``, shifted so the minimum is zero."""
        sources = np.asarray(delta, dtype=float)
        if sources.shape != (self.mesh.n_vertices(),):
            raise ValueError(
                f"expected {self.mesh.n_vertices()} source values, got shape {sources.shape}"
            )
        u = _solve(self.flow, sources)
        field = self.compute_vector_field(u)
        divergence = -self.compute_divergence(field)
        phi = _solve(self.laplace, divergence)
        return phi - phi.min()


def isolines(
    geometry: VertexPositionGeometry,
    distances: Sequence[float] | np.ndarray,
    count: int = 20,
) -> np.ndarray:
    """Line segments of evenly spaced level sets, as a (k, 2, 3) array of endpoints."""
    mesh = geometry.mesh
    values = np.asarray(distances, dtype=float)
    if values.shape != (mesh.n_vertices(),):
        raise ValueError(f"expected {mesh.n_vertices()} distances, got shape {values.shape}")
    if count <= 0:
        raise ValueError("count must be positive")
    max_value = max(0.0, float(values.max()))
    if max_value == 0.0:
        raise ValueError("distances have no positive maximum")
    spacing = max_value / count
    segments: list[tuple[np.ndarray, np.ndarray]] = []
    for f in range(mesh.n_faces()):
        points = []
        for he in mesh.face_halfedges(f):
            vs = values[mesh.tail(he)]
            vd = values[mesh.tip(he)]
            region1 = math.floor(vs / spacing)
            region2 = math.floor(vd / spacing)
            if region1 != region2:
                level = max(region1, region2) * spacing
                t = (level - vs) / (vd - vs)
                ps = geometry.positions[mesh.tail(he)]
                pd = geometry.positions[mesh.tip(he)]
                points.append(ps + t * (pd - ps))
        if len(points) == 2:
            segments.append((points[0], points[1]))
    return np.array(segments, dtype=float).reshape(-1, 2, 3)