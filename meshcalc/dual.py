"""Dual (circumcentric) mesh of a triangle mesh."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from .geometry import VertexPositionGeometry
from .mesh import SurfaceMesh

_PLANAR_TOLERANCE = 1e-8


@dataclass(frozen=True)
class DualMesh:
    """A dual mesh and the maps from primal boundary elements to its vertices.

    Dual vertex ``f`` sits at the circumcenter of primal face ``f``. Each exterior
    primal halfedge gets an extra dual vertex at its midpoint
    (``halfedge_vertex``), and each primal boundary vertex gets one at its own
    position (``boundary_vertex``). Dual face ``v`` corresponds to primal vertex ``v``.
    """

    mesh: SurfaceMesh
    geometry: VertexPositionGeometry
    halfedge_vertex: dict[int, int]
    boundary_vertex: dict[int, int]


def midpoint(geometry: VertexPositionGeometry, he: int) -> np.ndarray:
    """Midpoint of a halfedge."""
    mesh = geometry.mesh
    return (geometry.positions[mesh.tail(he)] + geometry.positions[mesh.tip(he)]) / 2


def circumcenter(geometry: VertexPositionGeometry, f: int) -> np.ndarray:
    """Circumcenter of a triangular face."""
    mesh = geometry.mesh
    corners = mesh.face_vertices(f)
    if len(corners) != 3:
        raise ValueError(f"face {f} is not a triangle")
    a, b, c = (geometry.positions[v] for v in corners)
    ac = c - a
    ab = b - a
    w = np.cross(ab, ac)
    w2 = float(np.dot(w, w))
    if w2 == 0.0:
        raise ValueError(f"face {f} is degenerate")
    u = np.cross(w, ab) * float(np.dot(ac, ac))
    v = np.cross(ac, w) * float(np.dot(ab, ab))
    return a + (u + v) / (2.0 * w2)


def build_dual_mesh(geometry: VertexPositionGeometry) -> DualMesh:
    """Build the dual mesh, closing boundary vertices with edge midpoints."""
    mesh = geometry.mesh
    n_faces = mesh.n_faces()
    exterior = list(mesh.exterior_halfedges())

    halfedge_vertex = {he: n_faces + k for k, he in enumerate(exterior)}
    boundary_vertex = {
        mesh.tail(he): n_faces + len(exterior) + k for k, he in enumerate(exterior)
    }

    polygons: list[list[int]] = []
    for v in range(mesh.n_vertices()):
        poly: list[int] = []
        if mesh.is_boundary_vertex(v):
            for he in mesh.outgoing_halfedges(v):
                if not mesh.is_interior(mesh.twin(he)):
                    poly += [mesh.face(he), halfedge_vertex[mesh.twin(he)], boundary_vertex[v]]
                elif not mesh.is_interior(he):
                    poly.append(halfedge_vertex[he])
                else:
                    poly.append(mesh.face(he))
        else:
            poly.extend(mesh.adjacent_faces(v))
        polygons.append(poly)

    dual_mesh = SurfaceMesh(polygons)
    positions = np.zeros((dual_mesh.n_vertices(), 3))
    for f in range(n_faces):
        positions[f] = circumcenter(geometry, f)
    for he in exterior:
        positions[halfedge_vertex[he]] = midpoint(geometry, he)
        positions[boundary_vertex[mesh.tail(he)]] = geometry.positions[mesh.tail(he)]

    return DualMesh(
        mesh=dual_mesh,
        geometry=VertexPositionGeometry(dual_mesh, positions),
        halfedge_vertex=halfedge_vertex,
        boundary_vertex=boundary_vertex,
    )


def is_planar(geometry: VertexPositionGeometry) -> bool:
    """True if every vertex lies in the plane z = 0."""
    return bool(np.all(np.abs(geometry.positions[:, 2]) <= _PLANAR_TOLERANCE))