"""Discrete differential geometry on surface meshes: halfedge meshes, curvatures, normals, exterior calculus, dual meshes and heat-method geodesic distance."""

__version__ = "0.1.0"

__all__ = ["dec", "dual", "forms", "geometry", "heat_method", "mesh", "mesh_subset"]