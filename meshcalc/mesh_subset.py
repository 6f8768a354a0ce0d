"""Sets of vertex, edge and face indices selected on a mesh."""

from __future__ import annotations

import sys
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import TextIO


@dataclass
class MeshSubset:
    """A selection of mesh elements, stored as sets of indices."""

    vertices: set[int] = field(default_factory=set)
    edges: set[int] = field(default_factory=set)
    faces: set[int] = field(default_factory=set)

    def __post_init__(self) -> None:
        self.vertices = set(self.vertices)
        self.edges = set(self.edges)
        self.faces = set(self.faces)

    def copy(self) -> MeshSubset:
        """Return an independent copy of this subset."""
        return MeshSubset(set(self.vertices), set(self.edges), set(self.faces))

    def add_vertex(self, index: int) -> None:
        self.vertices.add(index)

    def add_vertices(self, indices: Iterable[int]) -> None:
        self.vertices.update(indices)

    def delete_vertex(self, index: int) -> None:
        self.vertices.discard(index)

    def delete_vertices(self, indices: Iterable[int]) -> None:
        self.vertices.difference_update(indices)

    def add_edge(self, index: int) -> None:
        self.edges.add(index)

    def add_edges(self, indices: Iterable[int]) -> None:
        self.edges.update(indices)

    def delete_edge(self, index: int) -> None:
        self.edges.discard(index)

    def delete_edges(self, indices: Iterable[int]) -> None:
        self.edges.difference_update(indices)

    def add_face(self, index: int) -> None:
        self.faces.add(index)

    def add_faces(self, indices: Iterable[int]) -> None:
        self.faces.update(indices)

    def delete_face(self, index: int) -> None:
        self.faces.discard(index)

    def delete_faces(self, indices: Iterable[int]) -> None:
        self.faces.difference_update(indices)

    def add_subset(self, other: MeshSubset) -> None:
        """Add every element of ``other`` to this subset."""
        self.add_vertices(other.vertices)
        self.add_edges(other.edges)
        self.add_faces(other.faces)

    def delete_subset(self, other: MeshSubset) -> None:
        """Remove every element of ``other`` from this subset."""
        self.delete_vertices(other.vertices)
        self.delete_edges(other.edges)
        self.delete_faces(other.faces)

    @staticmethod
    def _print(label: str, indices: set[int], file: TextIO | None) -> None:
        out = sys.stdout if file is None else file
        print(label + ": " + "".join(f"{i}, " for i in sorted(indices)), file=out)

    def print_vertices(self, file: TextIO | None = None) -> None:
        self._print("Vertices", self.vertices, file)

    def print_edges(self, file: TextIO | None = None) -> None:
        self._print("Edges", self.edges, file)

    def print_faces(self, file: TextIO | None = None) -> None:
        self._print("Faces", self.faces, file)