# tests/conftest.py
"""
Shared fixtures: IDL source snippets and helpers that build AST nodes
directly, without going through the reader.
"""

from typing import List, Optional

import pytest

from thriftcheck import ast_nodes as A
from thriftcheck.ast_nodes import FieldRequiredness as R


# ── IDL sources ──────────────────────────────────────────────────

CLEAN_THRIFT = '''
namespace go example.clean
namespace py example.clean

typedef i64 UserId

const i32 MAX_USERS = 100;
const list<string> ADMINS = ["root", "admin"]

enum Color {
    RED = 1,
    GREEN = 2,
    BLUE
}

struct User {
    1: required UserId id,
    2: optional string name = "anonymous",
    3: map<string, list<i32>> scores,
}

union Payload {
    1: string text
    2: binary blob
}

exception NotFound {
    1: string message
}

service UserService {
    User get(1: UserId id) throws (1: NotFound nf),
    oneway void ping(),
}
'''

COLOR_CONFLICT_THRIFT = '''
enum Color {
    RED = 1,
    BLUE = 1
}
'''

DUP_FIELD_ID_THRIFT = '''
struct S {
    1: required string a;
    1: required string b;
}
'''

REQUIRED_UNION_THRIFT = '''
union U {
    1: required string a;
}
'''

ONEWAY_THROWS_THRIFT = '''
exception MyError {
    1: string msg
}

service S {
    oneway void f() throws (1: MyError e)
}
'''

OPTIONAL_ARG_THRIFT = '''
service S {
    void f(1: optional string a)
}
'''

ANNOTATED_THRIFT = '''
include "shared.thrift"
cpp_include "<vector>"

/* block
   comment */
struct Tagged {
    1: string name (go.tag = 'json:"name"'),  # trailing comment
    2: shared.Other other
} (deprecated = "true")

enum E { A = 0x10; B } (cpp.type = "int")
'''


# ── AST builders ─────────────────────────────────────────────────

def make_field(
    fid: int,
    name: str,
    requiredness: R = R.DEFAULT,
    default: Optional[A.ConstValue] = None,
    type_name: str = "string",
) -> A.Field:
    return A.Field(
        id=fid,
        name=name,
        type=A.FieldType(type_name),
        requiredness=requiredness,
        default=default,
    )


def make_enum(name: str, *values) -> A.Enum:
    return A.Enum(name=name, values=[A.EnumValue(n, v) for n, v in values])


def make_function(
    name: str,
    arguments: Optional[List[A.Field]] = None,
    throws: Optional[List[A.Field]] = None,
    oneway: bool = False,
    returns: str = "void",
) -> A.Function:
    return A.Function(
        name=name,
        function_type=A.FieldType(returns),
        oneway=oneway,
        arguments=arguments or [],
        throws=throws or [],
    )


def make_service(name: str, *functions: A.Function) -> A.Service:
    return A.Service(name=name, functions=list(functions))


def make_struct(category: str, name: str, *fields: A.Field) -> A.StructLike:
    return A.StructLike(category=category, name=name, fields=list(fields))


def make_doc(filename: str = "main.thrift", **kwargs) -> A.Thrift:
    """Build a document; struct-likes passed as ``struct_likes`` are sorted
    into structs, unions and exceptions by category."""
    struct_likes = kwargs.pop("struct_likes", [])
    doc = A.Thrift(filename=filename, **kwargs)
    for s in struct_likes:
        doc.add_struct_like(s)
    return doc


def link(includer: A.Thrift, *included: A.Thrift) -> None:
    for doc in included:
        includer.includes.append(A.Include(path=doc.filename, reference=doc))


@pytest.fixture
def int_default():
    return A.ConstValue(kind="int", value=1)
