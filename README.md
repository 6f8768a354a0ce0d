# meshcalc

Discrete differential geometry on surface meshes, built on NumPy and SciPy.
Everything is computed from a halfedge mesh plus one 3D position per vertex,
and results come back as NumPy arrays and SciPy sparse matrices.

## What is in the package

- `meshcalc.mesh`
  - `SurfaceMesh(polygons)`: a manifold polygon mesh stored as halfedges. It is
    built from a list of vertex-index polygons and raises `ValueError` for
    empty, degenerate or non-manifold input. Elements are plain integers, and
    there are navigation methods (`tail`, `tip`, `next`, `twin`, `face`,
    `edge`, `outgoing_halfedges`, `adjacent_faces`, `adjacent_corners`,
    `exterior_halfedges`, ...), counts (`n_vertices`, `n_edges`, `n_faces`,
    `n_halfedges`, `n_boundary_loops`) and `euler_characteristic()`.
    `face(he)` returns `None` for an exterior (boundary) halfedge. A corner is
    named by the interior halfedge that leaves its vertex.
  - `read_obj(path)`: reads `v` and `f` lines from a Wavefront OBJ file and
    returns `(mesh, positions)`, where `positions` is an `(n, 3)` array.
- `meshcalc.geometry`
  - `VertexPositionGeometry(mesh, positions)`: halfedge vectors, edge lengths,
    face areas and normals, cotan weights, `cotan`, corner `angle`,
    `dihedral_angle`, `angle_defect`, `total_angle_defect`,
    `scalar_mean_curvature`, `principal_curvatures`,
    `barycentric_dual_area`, `circumcentric_dual_area`, `mean_edge_length`,
    `total_area`, `center_of_mass` and `normalize`. `laplace_matrix()` and
    `complex_laplace_matrix()` build the positive definite cotan Laplacian
    (diagonal shifted by 1e-8), and `mass_matrix()` the diagonal of
    barycentric dual areas.
  - Vertex normals by six methods: `vertex_normal_equally_weighted`,
    `vertex_normal_angle_weighted`, `vertex_normal_sphere_inscribed`,
    `vertex_normal_area_weighted`, `vertex_normal_mean_curvature` and
    `vertex_normal_gaussian_curvature`. `vertex_normals(method)` takes a
    `NormalMethod` and returns one normal per vertex.
- `meshcalc.dec`: sparse discrete exterior calculus operators:
  `hodge_star_0_form`, `hodge_star_1_form`, `hodge_star_2_form`,
  `exterior_derivative_0_form`, `exterior_derivative_1_form`, and
  `inverse_diagonal` for inverting a diagonal Hodge star.
- `meshcalc.heat_method`
  - `HeatMethod(geometry)`: geodesic distance by the heat method.
    `compute(delta)` takes one heat-source value per vertex and returns
    distances shifted so that the smallest is zero. The intermediate steps are
    available as `compute_vector_field(u)` and `compute_divergence(field)`.
  - `isolines(geometry, distances, count=20)`: evenly spaced level-set
    segments, as a `(k, 2, 3)` array of endpoints.
- `meshcalc.dual`: `build_dual_mesh(geometry)` returns a `DualMesh` whose
  vertices sit at face circumcenters, with extra vertices at the midpoints of
  boundary halfedges and at boundary vertices. Also `circumcenter`,
  `midpoint` and `is_planar`.
- `meshcalc.forms`: `FormKind` names primal and dual 0-, 1- and 2-forms.
  `DECOperators(geometry)` applies `exterior_derivative(kind, form)` and
  `hodge_star(kind, form)` and returns the new kind together with the values.
  Also random test forms (`random_vertex_form`, `random_face_form`,
  `random_edge_form`, all taking an optional `numpy.random.Generator`),
  `interpolate_whitney` and `interpolate_wachspress_whitney`, which turn
  1-forms into one vector per face or dual face, `form_value_range` for a
  colour-map range, `gaussian` and `point_to_segment_distance`.
- `meshcalc.mesh_subset`: `MeshSubset`, a selection of vertex, edge and face
  indices with add, delete, `copy`, `add_subset`, `delete_subset` and
  `print_vertices` / `print_edges` / `print_faces`.

## Installation

```
pip install .
```

With the test dependencies:

```
pip install ".[test]"
```

## Example

```python
import numpy as np

from meshcalc import dec
from meshcalc.geometry import NormalMethod, VertexPositionGeometry
from meshcalc.heat_method import HeatMethod, isolines
from meshcalc.mesh import read_obj

mesh, positions = read_obj("bunny.obj")
geometry = VertexPositionGeometry(mesh, positions)

print("Euler characteristic:", geometry.euler_characteristic())
print("Total angle defect:", geometry.total_angle_defect())

k_min, k_max = geometry.principal_curvatures(0)
normals = geometry.vertex_normals(NormalMethod.AREA_WEIGHTED)

d0 = dec.exterior_derivative_0_form(geometry)
d1 = dec.exterior_derivative_1_form(geometry)
assert abs(d1 @ d0).max() < 1e-12  # d applied twice is zero

delta = np.zeros(mesh.n_vertices())
delta[0] = 1.0
distances = HeatMethod(geometry).compute(delta)
segments = isolines(geometry, distances)
```

## What it does not do

meshcalc is a library only. It has no command-line program and no viewer:
it does not display meshes, pick vertices on screen or turn values into
colours. `form_value_range` and the interpolation functions return numbers
and vectors, and drawing them is left to the caller. Meshes can be read from
OBJ files but not written back.

## Running the tests

```
pytest
```