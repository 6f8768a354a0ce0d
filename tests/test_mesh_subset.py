import io

from meshcalc.mesh_subset import MeshSubset


def test_default_is_empty():
    s = MeshSubset()
    assert s.vertices == set() and s.edges == set() and s.faces == set()


def test_init_converts_iterables():
    s = MeshSubset([1, 2, 2], (3,), {4})
    assert s.vertices == {1, 2}
    assert s.edges == {3}
    assert s.faces == {4}


def test_copy_is_independent():
    s = MeshSubset({1}, {2}, {3})
    c = s.copy()
    assert c == s
    c.add_vertex(9)
    assert 9 not in s.vertices


def test_vertex_operations():
    s = MeshSubset()
    s.add_vertex(5)
    s.add_vertices([1, 2, 3])
    assert s.vertices == {1, 2, 3, 5}
    s.delete_vertex(2)
    s.delete_vertex(42)
    s.delete_vertices([1, 7])
    assert s.vertices == {3, 5}


def test_edge_operations():
    s = MeshSubset()
    s.add_edge(0)
    s.add_edges({4, 6})
    s.delete_edge(4)
    s.delete_edges([0])
    assert s.edges == {6}


def test_face_operations():
    s = MeshSubset()
    s.add_face(2)
    s.add_faces([8, 9])
    s.delete_face(9)
    s.delete_faces({2})
    assert s.faces == {8}


def test_equality():
    assert MeshSubset({1, 2}, {3}, set()) == MeshSubset({2, 1}, {3}, set())
    assert not (MeshSubset({1}, set(), set()) == MeshSubset(set(), {1}, set()))


def test_add_and_delete_subset_round_trip():
    base = MeshSubset({1}, {2}, {3})
    other = MeshSubset({10}, {20}, {30})
    s = base.copy()
    s.add_subset(other)
    assert s.vertices == {1, 10} and s.edges == {2, 20} and s.faces == {3, 30}
    s.delete_subset(other)
    assert s == base


def test_print_formats():
    s = MeshSubset({3, 1}, {7}, set())
    buf = io.StringIO()
    s.print_vertices(buf)
    s.print_edges(buf)
    s.print_faces(buf)
    assert buf.getvalue() == "Vertices: 1, 3, \nEdges: 7, \nFaces: \n"


def test_print_defaults_to_stdout(capsys):
    MeshSubset({2}, set(), set()).print_vertices()
    assert capsys.readouterr().out == "Vertices: 2, \n"