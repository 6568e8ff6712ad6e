# tests/test_ast_nodes.py
"""
Tests for the document tree helpers: struct-like ordering and the
include-aware depth-first traversal.
"""

from thriftcheck import ast_nodes as A
from tests.conftest import link, make_doc, make_function, make_struct


def _names(root):
    return [d.filename for d in root.depth_first_search()]


class TestStructLikes:

    def test_order_is_structs_unions_exceptions(self):
        doc = make_doc(struct_likes=[
            make_struct("exception", "E"),
            make_struct("union", "U"),
            make_struct("struct", "S"),
        ])
        assert [s.name for s in doc.get_struct_likes()] == ["S", "U", "E"]

    def test_add_struct_like_routes_by_category(self):
        doc = A.Thrift()
        doc.add_struct_like(make_struct("union", "U"))
        doc.add_struct_like(make_struct("exception", "E"))
        doc.add_struct_like(make_struct("struct", "S"))
        assert [u.name for u in doc.unions] == ["U"]
        assert [e.name for e in doc.exceptions] == ["E"]
        assert [s.name for s in doc.structs] == ["S"]


class TestFunction:

    def test_void(self):
        assert make_function("f").void
        assert not make_function("g", returns="i32").void


class TestDepthFirstSearch:

    def test_single_document(self):
        assert _names(make_doc("a.thrift")) == ["a.thrift"]

    def test_pre_order(self):
        a, b, c, d = (make_doc(n) for n in ("a", "b", "c", "d"))
        link(a, b, d)
        link(b, c)
        assert _names(a) == ["a", "b", "c", "d"]

    def test_diamond_visits_shared_once(self):
        root, left, right, shared = (make_doc(n) for n in ("root", "left", "right", "shared"))
        link(root, left, right)
        link(left, shared)
        link(right, shared)
        assert _names(root) == ["root", "left", "shared", "right"]

    def test_cycle(self):
        a, b = make_doc("a"), make_doc("b")
        link(a, b)
        link(b, a)
        assert _names(a) == ["a", "b"]

    def test_self_include(self):
        a = make_doc("a")
        link(a, a)
        assert _names(a) == ["a"]

    def test_unresolved_include_skipped(self):
        a = make_doc("a")
        a.includes.append(A.Include(path="missing.thrift"))
        assert _names(a) == ["a"]

    def test_equal_content_is_distinct(self):
        root = make_doc("root")
        x1, x2 = make_doc("x"), make_doc("x")
        link(root, x1, x2)
        assert _names(root) == ["root", "x", "x"]


class TestFieldType:

    def test_str(self):
        t = A.FieldType("map", key_type=A.FieldType("string"),
                        value_type=A.FieldType("list", value_type=A.FieldType("i32")))
        assert str(t) == "map<string, list<i32>>"
