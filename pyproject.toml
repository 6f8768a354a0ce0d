[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "meshcalc"
version = "0.1.0"
description = "Discrete differential geometry on triangle meshes: curvatures, normals, exterior calculus and geodesic distance"
requires-python = ">=3.10"
dependencies = [
    "numpy",
    "scipy",
]
keywords = [
    "mesh",
    "halfedge",
    "geometry",
    "discrete differential geometry",
    "exterior calculus",
    "curvature",
    "geodesic",
    "heat method",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Mathematics",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["meshcalc"]

[tool.pytest.ini_options]
addopts = "-ra"
