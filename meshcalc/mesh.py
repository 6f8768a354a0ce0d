"""Halfedge surface mesh connectivity and OBJ loading."""

from __future__ import annotations

import os
from collections.abc import Iterable, Iterator, Sequence

import numpy as np


class SurfaceMesh:
    """Manifold polygon mesh stored as a halfedge structure.

    Interior halfedges come first, in face order and in the vertex order of each
    polygon; exterior (boundary) halfedges follow. Edge ``e`` is numbered in order
    of first appearance, and its canonical halfedge is always interior. Corners are
    identified with the interior halfedge leaving their vertex.
    """

    def __init__(self, polygons: Iterable[Sequence[int]]) -> None:
        faces = [[int(v) for v in poly] for poly in polygons]
        if not faces:
            raise ValueError("mesh has no faces")

        self._tail: list[int] = []
        self._tip: list[int] = []
        self._next: list[int] = []
        self._face: list[int | None] = []
        self._face_he: list[int] = []
        directed: dict[tuple[int, int], int] = {}

        for f, poly in enumerate(faces):
            k = len(poly)
            if k < 3:
                raise ValueError(f"face {f} has fewer than 3 vertices")
            if len(set(poly)) != k:
                raise ValueError(f"face {f} repeats a vertex")
            if min(poly) < 0:
                raise ValueError(f"face {f} has a negative vertex index")
            first = len(self._tail)
            self._face_he.append(first)
            for i, (a, b) in enumerate(zip(poly, poly[1:] + poly[:1])):
                if (a, b) in directed:
                    raise ValueError(f"directed edge {a}->{b} appears twice")
                he = first + i
                directed[(a, b)] = he
                self._tail.append(a)
                self._tip.append(b)
                self._next.append(first + (i + 1) % k)
                self._face.append(f)

        self._n_interior = len(self._tail)
        self._nv = max(self._tail) + 1
        self._twin: list[int] = [-1] * self._n_interior
        self._edge: list[int] = [-1] * self._n_interior
        self._edge_he: list[int] = []

        for he in range(self._n_interior):
            opposite = directed.get((self._tip[he], self._tail[he]))
            if opposite is not None:
                self._twin[he] = opposite
            if self._edge[he] == -1:
                e = len(self._edge_he)
                self._edge_he.append(he)
                self._edge[he] = e
                if opposite is not None:
                    self._edge[opposite] = e

        ext_by_tail: dict[int, int] = {}
        ext_by_tip: dict[int, int] = {}
        for he in range(self._n_interior):
            if self._twin[he] != -1:
                continue
            ext = len(self._tail)
            self._tail.append(self._tip[he])
            self._tip.append(self._tail[he])
            self._face.append(None)
            self._next.append(-1)
            self._twin.append(he)
            self._edge.append(self._edge[he])
            self._twin[he] = ext
            if self._tail[ext] in ext_by_tail:
                raise ValueError(f"vertex {self._tail[ext]} is not manifold")
            ext_by_tail[self._tail[ext]] = ext
            ext_by_tip[self._tip[ext]] = ext
        for ext in ext_by_tail.values():
            self._next[ext] = ext_by_tail[self._tip[ext]]

        self._vertex_he: list[int] = [-1] * self._nv
        for he in range(self._n_interior):
            if self._vertex_he[self._tail[he]] == -1:
                self._vertex_he[self._tail[he]] = he
        for v, ext in ext_by_tip.items():
            self._vertex_he[v] = self._twin[ext]
        missing = [v for v, he in enumerate(self._vertex_he) if he == -1]
        if missing:
            raise ValueError(f"vertex {missing[0]} is not used by any face")

        outgoing_count = [0] * self._nv
        for t in self._tail:
            outgoing_count[t] += 1
        for v in range(self._nv):
            if sum(1 for _ in self.outgoing_halfedges(v)) != outgoing_count[v]:
                raise ValueError(f"vertex {v} is not manifold")

    # -- sizes ---------------------------------------------------------------

    def n_vertices(self) -> int:
        return self._nv

    def n_edges(self) -> int:
        return len(self._edge_he)

    def n_faces(self) -> int:
        return len(self._face_he)

    def n_halfedges(self) -> int:
        return len(self._tail)

    # -- halfedge navigation -------------------------------------------------

    def tail(self, he: int) -> int:
        return self._tail[he]

    def tip(self, he: int) -> int:
        return self._tip[he]

    def next(self, he: int) -> int:
        return self._next[he]

    def twin(self, he: int) -> int:
        return self._twin[he]

    def face(self, he: int) -> int | None:
        """Face of the halfedge, or None for an exterior halfedge."""
        return self._face[he]

    def edge(self, he: int) -> int:
        return self._edge[he]

    def is_interior(self, he: int) -> bool:
        return self._face[he] is not None

    # -- element accessors ---------------------------------------------------

    def edge_halfedge(self, e: int) -> int:
        return self._edge_he[e]

    def edge_vertices(self, e: int) -> tuple[int, int]:
        """First and second vertex of an edge, following its canonical halfedge."""
        he = self._edge_he[e]
        return self._tail[he], self._tip[he]

    def vertex_halfedge(self, v: int) -> int:
        """Outgoing interior halfedge; on the boundary, the one whose twin is exterior."""
        return self._vertex_he[v]

    def face_halfedge(self, f: int) -> int:
        return self._face_he[f]

    def face_halfedges(self, f: int) -> Iterator[int]:
        start = self._face_he[f]
        he = start
        while True:
            yield he
            he = self._next[he]
            if he == start:
                return

    def face_vertices(self, f: int) -> list[int]:
        return [self._tail[he] for he in self.face_halfedges(f)]

    def outgoing_halfedges(self, v: int) -> Iterator[int]:
        """All halfedges leaving ``v``, interior and exterior."""
        start = self._vertex_he[v]
        he = start
        while True:
            yield he
            he = self._next[self._twin[he]]
            if he == start:
                return

    def adjacent_faces(self, v: int) -> Iterator[int]:
        for he in self.outgoing_halfedges(v):
            f = self._face[he]
            if f is not None:
                yield f

    def adjacent_corners(self, v: int) -> Iterator[int]:
        """Corners at ``v``, each given by its interior outgoing halfedge."""
        return (he for he in self.outgoing_halfedges(v) if self.is_interior(he))

    def is_boundary_vertex(self, v: int) -> bool:
        return not self.is_interior(self._twin[self._vertex_he[v]])

    def exterior_halfedges(self) -> Iterator[int]:
        return iter(range(self._n_interior, len(self._tail)))

    def n_boundary_loops(self) -> int:
        seen: set[int] = set()
        loops = 0
        for start in self.exterior_halfedges():
            if start in seen:
                continue
            loops += 1
            he = start
            while he not in seen:
                seen.add(he)
                he = self._next[he]
        return loops

    def euler_characteristic(self) -> int:
        return self.n_vertices() - self.n_edges() + self.n_faces()


def read_obj(path: str | os.PathLike[str]) -> tuple[SurfaceMesh, np.ndarray]:
    """Load an OBJ file, returning the mesh and an (n, 3) array of positions."""
    positions: list[tuple[float, float, float]] = []
    polygons: list[list[int]] = []
    with open(path, encoding="utf-8") as stream:
        for lineno, line in enumerate(stream, 1):
            tokens = line.split()
            if not tokens:
                continue
            if tokens[0] == "v":
                if len(tokens) < 4:
                    raise ValueError(f"line {lineno}: vertex needs three coordinates")
                x, y, z = (float(t) for t in tokens[1:4])
                positions.append((x, y, z))
            elif tokens[0] == "f":
                poly = []
                for token in tokens[1:]:
                    index = int(token.split("/")[0])
                    if index == 0:
                        raise ValueError(f"line {lineno}: vertex index 0 is invalid")
                    index = len(positions) + index if index < 0 else index - 1
                    if not 0 <= index < len(positions):
                        raise ValueError(f"line {lineno}: vertex index out of range")
                    poly.append(index)
                polygons.append(poly)
    mesh = SurfaceMesh(polygons)
    if mesh.n_vertices() != len(positions):
        raise ValueError("file contains vertices not used by any face")
    return mesh, np.array(positions, dtype=float)