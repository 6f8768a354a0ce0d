"""Discrete differential geometry on a surface mesh with vertex positions."""

from __future__ import annotations

import math
from collections.abc import Sequence
from enum import Enum

import numpy as np
from scipy import sparse

from .mesh import SurfaceMesh

_LAPLACE_SHIFT = 1e-8


def _unit(vector: np.ndarray) -> np.ndarray:
    """Divide by the norm; a zero vector gives NaN components."""
    with np.errstate(invalid="ignore", divide="ignore"):
        return vector / np.linalg.norm(vector)


class NormalMethod(Enum):
    """Ways of averaging face data into a vertex normal."""

    EQUALLY_WEIGHTED = "Equally weighted"
    TIP_ANGLE_WEIGHTED = "Tip angle weighted"
    SPHERE_INSCRIBED = "Sphere inscribed"
    AREA_WEIGHTED = "Area weighted (AN)"
    MEAN_CURVATURE = "Mean curvature (HN)"
    GAUSS_CURVATURE = "Gauss curvature (KN)"


class VertexPositionGeometry:
    """A surface mesh together with one 3D position per vertex.

    Cotangent-based quantities assume triangular faces. Corners are given by the
    interior halfedge leaving the corner's vertex.
    """

    def __init__(self, mesh: SurfaceMesh, positions: Sequence[Sequence[float]] | np.ndarray) -> None:
        array = np.array(positions, dtype=float)
        if array.shape != (mesh.n_vertices(), 3):
            raise ValueError(
                f"expected positions of shape ({mesh.n_vertices()}, 3), got {array.shape}"
            )
        self.mesh = mesh
        self.positions = array

    # -- basic quantities ----------------------------------------------------

    def halfedge_vector(self, he: int) -> np.ndarray:
        return self.positions[self.mesh.tip(he)] - self.positions[self.mesh.tail(he)]

    def edge_length(self, e: int) -> float:
        return float(np.linalg.norm(self.halfedge_vector(self.mesh.edge_halfedge(e))))

    def _vector_area(self, f: int) -> np.ndarray:
        points = self.positions[self.mesh.face_vertices(f)]
        origin = points[0]
        total = np.zeros(3)
        for a, b in zip(points[1:-1], points[2:]):
            total += np.cross(a - origin, b - origin)
        return 0.5 * total

    def face_area(self, f: int) -> float:
        return float(np.linalg.norm(self._vector_area(f)))

    def face_normal(self, f: int) -> np.ndarray:
        return _unit(self._vector_area(f))

    def halfedge_cotan_weight(self, he: int) -> float:
        """Half the cotangent of the angle opposite ``he``; zero for exterior halfedges."""
        mesh = self.mesh
        if not mesh.is_interior(he):
            return 0.0
        opposite = self.positions[mesh.tip(mesh.next(he))]
        u = self.positions[mesh.tail(he)] - opposite
        w = self.positions[mesh.tip(he)] - opposite
        return 0.5 * float(np.dot(u, w)) / float(np.linalg.norm(np.cross(u, w)))

    def edge_cotan_weight(self, e: int) -> float:
        he = self.mesh.edge_halfedge(e)
        return self.halfedge_cotan_weight(he) + self.halfedge_cotan_weight(self.mesh.twin(he))

    # -- global quantities ---------------------------------------------------

    def euler_characteristic(self) -> int:
        return self.mesh.euler_characteristic()

    def mean_edge_length(self) -> float:
        n = self.mesh.n_edges()
        return sum(self.edge_length(e) for e in range(n)) / n

    def total_area(self) -> float:
        return sum(self.face_area(f) for f in range(self.mesh.n_faces()))

    # -- local quantities ----------------------------------------------------

    def cotan(self, he: int) -> float:
        """Cotangent of the angle opposite a halfedge."""
        mesh = self.mesh
        opposite = self.positions[mesh.tip(mesh.next(he))]
        u = self.positions[mesh.tip(he)] - opposite
        v = self.positions[mesh.tail(he)] - opposite
        return float(np.dot(u, v)) / float(np.linalg.norm(np.cross(u, v)))

    def barycentric_dual_area(self, v: int) -> float:
        """One third of the area of the faces touching ``v``."""
        return sum(self.face_area(f) for f in self.mesh.adjacent_faces(v)) / 3

    def angle(self, corner: int) -> float:
        """Interior angle at a corner, in radians within [0, pi]."""
        mesh = self.mesh
        origin = self.positions[mesh.tail(corner)]
        v = self.positions[mesh.tip(corner)] - origin
        w = self.positions[mesh.tip(mesh.next(corner))] - origin
        cosine = float(np.dot(v, w)) / float(np.linalg.norm(v) * np.linalg.norm(w))
        return math.acos(min(1.0, max(-1.0, cosine)))

    def dihedral_angle(self, he: int) -> float:
        """Signed angle between the faces on either side of ``he``; zero on the boundary."""
        mesh = self.mesh
        twin = mesh.twin(he)
        f1, f2 = mesh.face(he), mesh.face(twin)
        if f1 is None or f2 is None:
            return 0.0
        n1 = self.face_normal(f1)
        n2 = self.face_normal(f2)
        direction = _unit(self.halfedge_vector(he))
        return math.atan2(float(np.dot(direction, np.cross(n1, n2))), float(np.dot(n1, n2)))

    # -- vertex normals ------------------------------------------------------

    def vertex_normal_equally_weighted(self, v: int) -> np.ndarray:
        total = sum((self.face_normal(f) for f in self.mesh.adjacent_faces(v)), np.zeros(3))
        return _unit(total)

    def vertex_normal_angle_weighted(self, v: int) -> np.ndarray:
        mesh = self.mesh
        total = np.zeros(3)
        for corner in mesh.adjacent_corners(v):
            total += self.angle(corner) * self.face_normal(mesh.face(corner))
        return _unit(total)

    def _wedges(self, v: int):
        """Consecutive pairs (left, right) of outgoing halfedges around ``v``."""
        mesh = self.mesh
        first = mesh.vertex_halfedge(v)
        left = first
        right = mesh.next(mesh.twin(left))
        while True:
            yield left, right
            left = right
            right = mesh.next(mesh.twin(right))
            if left == first:
                return

    def vertex_normal_sphere_inscribed(self, v: int) -> np.ndarray:
        total = np.zeros(3)
        for left, right in self._wedges(v):
            a = self.halfedge_vector(right)
            b = self.halfedge_vector(left)
            total += np.cross(a, b) / (float(np.dot(a, a)) * float(np.dot(b, b)))
        return _unit(total)

    def vertex_normal_area_weighted(self, v: int) -> np.ndarray:
        total = np.zeros(3)
        for f in self.mesh.adjacent_faces(v):
            total += self.face_area(f) * self.face_normal(f)
        return _unit(total)

    def vertex_normal_gaussian_curvature(self, v: int) -> np.ndarray:
        total = np.zeros(3)
        for he in self.mesh.outgoing_halfedges(v):
            total += self.dihedral_angle(he) * _unit(self.halfedge_vector(he))
        return _unit(total)

    def vertex_normal_mean_curvature(self, v: int) -> np.ndarray:
        mesh = self.mesh
        total = np.zeros(3)
        for he in mesh.outgoing_halfedges(v):
            total += self.edge_cotan_weight(mesh.edge(he)) * self.halfedge_vector(he)
        return _unit(total)

    def vertex_normals(self, method: NormalMethod) -> np.ndarray:
        """Normals of every vertex by the given method, as an (n, 3) array."""
        compute = {
            NormalMethod.EQUALLY_WEIGHTED: self.vertex_normal_equally_weighted,
            NormalMethod.TIP_ANGLE_WEIGHTED: self.vertex_normal_angle_weighted,
            NormalMethod.SPHERE_INSCRIBED: self.vertex_normal_sphere_inscribed,
            NormalMethod.AREA_WEIGHTED: self.vertex_normal_area_weighted,
            NormalMethod.MEAN_CURVATURE: self.vertex_normal_mean_curvature,
            NormalMethod.GAUSS_CURVATURE: self.vertex_normal_gaussian_curvature,
        }[NormalMethod(method)]
        return np.array([compute(v) for v in range(self.mesh.n_vertices())]).reshape(-1, 3)

    # -- curvature -----------------------------------------------------------

    def angle_defect(self, v: int) -> float:
        return 2 * math.pi - sum(self.angle(c) for c in self.mesh.adjacent_corners(v))

    def total_angle_defect(self) -> float:
        return sum(self.angle_defect(v) for v in range(self.mesh.n_vertices()))

    def scalar_mean_curvature(self, v: int) -> float:
        """Integrated mean curvature at ``v``."""
        total = 0.0
        for he in self.mesh.outgoing_halfedges(v):
            total += self.dihedral_angle(he) * float(np.linalg.norm(self.halfedge_vector(he)))
        return total / 2

    def circumcentric_dual_area(self, v: int) -> float:
        mesh = self.mesh
        area = 0.0
        for left, right in self._wedges(v):
            a = self.halfedge_vector(right)
            b = self.halfedge_vector(left)
            area += self.halfedge_cotan_weight(mesh.twin(left)) * float(np.dot(b, b))
            area += self.halfedge_cotan_weight(right) * float(np.dot(a, a))
        return area / 4

    def principal_curvatures(self, v: int) -> tuple[float, float]:
        """Minimum and maximum pointwise principal curvature at ``v``.

        Both are NaN where the mean curvature squared is below the Gauss curvature.
        """
        area = self.circumcentric_dual_area(v)
        gauss = self.angle_defect(v) / area
        mean = self.scalar_mean_curvature(v) / area
        discriminant = mean * mean - gauss
        root = math.sqrt(discriminant) if discriminant >= 0 else math.nan
        k1, k2 = mean - root, mean + root
        if k1 > k2:
            k1, k2 = k2, k1
        return k1, k2

    # -- matrices ------------------------------------------------------------

    def _laplace(self, dtype: type) -> sparse.csr_matrix:
        mesh = self.mesh
        rows: list[int] = []
        cols: list[int] = []
        values: list[float] = []
        for v in range(mesh.n_vertices()):
            diagonal = 0.0
            for he in mesh.outgoing_halfedges(v):
                weight = self.edge_cotan_weight(mesh.edge(he))
                diagonal += weight
                rows.append(v)
                cols.append(mesh.tip(he))
                values.append(-weight)
            rows.append(v)
            cols.append(v)
            values.append(diagonal + _LAPLACE_SHIFT)
        n = mesh.n_vertices()
        return sparse.coo_matrix(
            (np.array(values, dtype=dtype), (rows, cols)), shape=(n, n)
        ).tocsr()

    def laplace_matrix(self) -> sparse.csr_matrix:
        """Positive definite cotan Laplacian, with a 1e-8 diagonal shift."""
        return self._laplace(float)

    def mass_matrix(self) -> sparse.csr_matrix:
        """Diagonal matrix of barycentric dual areas."""
        areas = [self.barycentric_dual_area(v) for v in range(self.mesh.n_vertices())]
        return sparse.diags(areas, format="csr")

    def complex_laplace_matrix(self) -> sparse.csr_matrix:
        """The positive definite cotan Laplacian with complex entries."""
        return self._laplace(complex)

    # -- placement -----------------------------------------------------------

    def center_of_mass(self) -> np.ndarray:
        return self.positions.mean(axis=0)

    def normalize(self, origin: Sequence[float] = (0.0, 0.0, 0.0), rescale: bool = False) -> None:
        """Centre the mesh on ``origin``, scaling it to unit radius if ``rescale``."""
        self.positions -= self.center_of_mass()
        if rescale:
            radius = float(np.linalg.norm(self.positions, axis=1).max(initial=0.0))
            self.positions /= radius
        self.positions += np.asarray(origin, dtype=float)