"""Discrete exterior calculus operators on a surface mesh."""

from __future__ import annotations

import numpy as np
from scipy import sparse

from .geometry import VertexPositionGeometry


def hodge_star_0_form(geometry: VertexPositionGeometry) -> sparse.csr_matrix:
    """Diagonal Hodge star on primal 0-forms: barycentric dual vertex areas."""
    n = geometry.mesh.n_vertices()
    return sparse.diags([geometry.barycentric_dual_area(v) for v in range(n)], format="csr")


def hodge_star_1_form(geometry: VertexPositionGeometry) -> sparse.csr_matrix:
    """Diagonal Hodge star on primal 1-forms: cotan weight of each edge."""
    n = geometry.mesh.n_edges()
    return sparse.diags([geometry.edge_cotan_weight(e) for e in range(n)], format="csr")


def hodge_star_2_form(geometry: VertexPositionGeometry) -> sparse.csr_matrix:
    """Diagonal Hodge star on primal 2-forms: inverse face areas."""
    n = geometry.mesh.n_faces()
    return sparse.diags([1.0 / geometry.face_area(f) for f in range(n)], format="csr")


def exterior_derivative_0_form(geometry: VertexPositionGeometry) -> sparse.csr_matrix:
    """Signed edge-vertex incidence matrix: -1 at an edge's first vertex, +1 at its second."""
    mesh = geometry.mesh
    rows: list[int] = []
    cols: list[int] = []
    values: list[float] = []
    for e in range(mesh.n_edges()):
        first, second = mesh.edge_vertices(e)
        rows += [e, e]
        cols += [first, second]
        values += [-1.0, 1.0]
    shape = (mesh.n_edges(), mesh.n_vertices())
    return sparse.coo_matrix((values, (rows, cols)), shape=shape).tocsr()


def exterior_derivative_1_form(geometry: VertexPositionGeometry) -> sparse.csr_matrix:
    """Signed face-edge incidence matrix, +1 where the face traverses an edge along its direction."""
    mesh = geometry.mesh
    rows: list[int] = []
    cols: list[int] = []
    values: list[float] = []
    for f in range(mesh.n_faces()):
        for he in mesh.face_halfedges(f):
            e = mesh.edge(he)
            first, _ = mesh.edge_vertices(e)
            rows.append(f)
            cols.append(e)
            values.append(1.0 if mesh.tail(he) == first else -1.0)
    shape = (mesh.n_faces(), mesh.n_edges())
    return sparse.coo_matrix((values, (rows, cols)), shape=shape).tocsr()


def inverse_diagonal(matrix) -> sparse.csr_matrix:
    """Invert a square diagonal matrix by taking the reciprocal of its diagonal."""
    rows, cols = matrix.shape
    if rows != cols:
        raise ValueError(f"expected a square matrix, got shape {matrix.shape}")
    diagonal = np.asarray(matrix.diagonal())
    if np.any(diagonal == 0):
        raise ZeroDivisionError("diagonal matrix has a zero entry")
    return sparse.diags(1.0 / diagonal, format="csr")