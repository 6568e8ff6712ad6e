"""
parser.py — Thrift IDL reader
=============================

Turns IDL source text into the ``thriftcheck.ast_nodes`` tree and loads
included documents so the semantic checker receives a fully linked graph.

Usage::

    from thriftcheck.parser import parse, parse_file

    doc = parse('struct S { 1: required string a }')
    root = parse_file("service.thrift", include_dirs=["idl/"])

Depends on:
    - parsimonious (PEG parser)
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any, Dict, List, Sequence, Union

from parsimonious.exceptions import ParseError
from parsimonious.grammar import Grammar
from parsimonious.nodes import Node, NodeVisitor

from thriftcheck import ast_nodes as A
from thriftcheck.errors import IncludeError, SourceReadError, ThriftSyntaxError
from thriftcheck.grammar import THRIFT_GRAMMAR

logger = logging.getLogger(__name__)

GRAMMAR = Grammar(THRIFT_GRAMMAR)

_CONST_KINDS = {
    "double_constant": "double",
    "int_constant": "int",
    "literal": "literal",
    "const_list": "list",
    "const_map": "map",
    "dotted_name": "identifier",
}

_ESCAPES = {"n": "\n", "r": "\r", "t": "\t"}
_ESCAPE_RE = re.compile(r"\\(.)", re.S)


def _unescape(match: re.Match) -> str:
    ch = match.group(1)
    return _ESCAPES.get(ch, ch)


# ═══════════════════════════════════════════════════════════════════
#  PARSE TREE → AST
# ═══════════════════════════════════════════════════════════════════

class ThriftASTBuilder(NodeVisitor):
    """Transforms a Parsimonious parse tree into a ``Thrift`` document."""

    def __init__(self, filename: str = "<string>"):
        self.filename = filename

    def generic_visit(self, node, visited_children):
        return visited_children or node

    # ─────────────────────────────────────────────────────────────
    # Helpers
    # ─────────────────────────────────────────────────────────────

    @staticmethod
    def _opt(value: Any) -> Any:
        """Unwrap the result of an ``x?`` expression."""
        if isinstance(value, list):
            return value[0] if value else None
        if isinstance(value, Node):
            return None
        return value

    @staticmethod
    def _many(value: Any) -> list:
        """Unwrap the result of an ``x*`` expression."""
        return value if isinstance(value, list) else []

    @staticmethod
    def _number_fields(fields: List[A.Field]) -> List[A.Field]:
        # Fields without an explicit id count down from -1.
        next_id = -1
        for f in fields:
            if f.id is None:
                f.id = next_id
                next_id -= 1
        return fields

    # ─────────────────────────────────────────────────────────────
    # Document
    # ─────────────────────────────────────────────────────────────

    def visit_document(self, node, visited_children):
        _, headers, definitions, _ = visited_children
        doc = A.Thrift(filename=self.filename)
        for h in self._many(headers):
            if isinstance(h, A.Include):
                doc.includes.append(h)
            elif isinstance(h, A.Namespace):
                doc.namespaces.append(h)
            else:
                doc.cpp_includes.append(h)
        for d in self._many(definitions):
            if isinstance(d, A.Constant):
                doc.constants.append(d)
            elif isinstance(d, A.Typedef):
                doc.typedefs.append(d)
            elif isinstance(d, A.Enum):
                doc.enums.append(d)
            elif isinstance(d, A.StructLike):
                doc.add_struct_like(d)
            elif isinstance(d, A.Service):
                doc.services.append(d)
        return doc

    def visit_header(self, node, visited_children):
        return visited_children[0]

    def visit_include(self, node, visited_children):
        return A.Include(path=visited_children[2])

    def visit_cpp_include(self, node, visited_children):
        return visited_children[2]

    def visit_namespace(self, node, visited_children):
        _, _, scope, _, name, *_ = visited_children
        return A.Namespace(language=scope, name=name)

    def visit_namespace_scope(self, node, visited_children):
        return node.text

    # ─────────────────────────────────────────────────────────────
    # Definitions
    # ─────────────────────────────────────────────────────────────

    def visit_definition(self, node, visited_children):
        return visited_children[0]

    def visit_const(self, node, visited_children):
        _, _, ftype, _, name, _, _, _, value, *_ = visited_children
        return A.Constant(type=ftype, name=name, value=value)

    def visit_typedef(self, node, visited_children):
        _, _, ftype, _, alias, *_ = visited_children
        return A.Typedef(type=ftype, alias=alias)

    def visit_enum(self, node, visited_children):
        _, _, name, _, _, _, values, *_ = visited_children
        enum = A.Enum(name=name)
        next_value = 0
        for value_name, value in self._many(values):
            if value is None:
                value = next_value
            enum.values.append(A.EnumValue(name=value_name, value=value))
            next_value = value + 1
        return enum

    def visit_enum_value(self, node, visited_children):
        name, _, assign, *_ = visited_children
        return (name, self._opt(assign))

    def visit_enum_assign(self, node, visited_children):
        return visited_children[2]

    def visit_struct_like(self, node, visited_children):
        kind, _, name, _, _, _, fields, *_ = visited_children
        return A.StructLike(
            category=kind,
            name=name,
            fields=self._number_fields(self._many(fields)),
        )

    def visit_struct_kind(self, node, visited_children):
        return node.text

    def visit_service(self, node, visited_children):
        _, _, name, _, extends, _, _, functions, *_ = visited_children
        return A.Service(
            name=name,
            functions=self._many(functions),
            extends=self._opt(extends),
        )

    def visit_extends(self, node, visited_children):
        return visited_children[2]

    # ─────────────────────────────────────────────────────────────
    # Functions and fields
    # ─────────────────────────────────────────────────────────────

    def visit_function(self, node, visited_children):
        oneway, ftype, _, name, _, _, _, args, _, _, throws, *_ = visited_children
        return A.Function(
            name=name,
            function_type=ftype,
            oneway=bool(self._opt(oneway)),
            arguments=self._number_fields(self._many(args)),
            throws=self._number_fields(self._opt(throws) or []),
        )

    def visit_oneway(self, node, visited_children):
        return True

    def visit_function_type(self, node, visited_children):
        return visited_children[0]

    def visit_void(self, node, visited_children):
        return A.FieldType("void")

    def visit_throws(self, node, visited_children):
        return self._many(visited_children[4])

    def visit_field(self, node, visited_children):
        fid, req, ftype, _, name, _, default, *_ = visited_children
        return A.Field(
            id=self._opt(fid),
            name=name,
            type=ftype,
            requiredness=self._opt(req) or A.FieldRequiredness.DEFAULT,
            default=self._opt(default),
        )

    def visit_field_id(self, node, visited_children):
        return visited_children[0]

    def visit_requiredness(self, node, visited_children):
        return A.FieldRequiredness(node.children[0].text)

    def visit_field_default(self, node, visited_children):
        return visited_children[2]

    # ─────────────────────────────────────────────────────────────
    # Types
    # ─────────────────────────────────────────────────────────────

    def visit_field_type(self, node, visited_children):
        return visited_children[0]

    def visit_container_type(self, node, visited_children):
        return visited_children[0]

    def visit_map_type(self, node, visited_children):
        return A.FieldType("map", key_type=visited_children[4], value_type=visited_children[8])

    def visit_set_type(self, node, visited_children):
        return A.FieldType("set", value_type=visited_children[4])

    def visit_list_type(self, node, visited_children):
        return A.FieldType("list", value_type=visited_children[4])

    def visit_base_type(self, node, visited_children):
        return A.FieldType(node.text)

    def visit_type_ref(self, node, visited_children):
        return A.FieldType(node.text)

    # ─────────────────────────────────────────────────────────────
    # Constants
    # ─────────────────────────────────────────────────────────────

    def visit_const_value(self, node, visited_children):
        kind = _CONST_KINDS[node.children[0].expr_name]
        return A.ConstValue(kind=kind, value=visited_children[0])

    def visit_const_list(self, node, visited_children):
        return [item[0] for item in self._many(visited_children[2])]

    def visit_const_map(self, node, visited_children):
        return [(item[0], item[4]) for item in self._many(visited_children[2])]

    def visit_double_constant(self, node, visited_children):
        return float(node.text)

    def visit_int_constant(self, node, visited_children):
        text = node.text
        if "x" in text or "X" in text:
            return int(text, 16)
        return int(text, 10)

    # ─────────────────────────────────────────────────────────────
    # Lexical
    # ─────────────────────────────────────────────────────────────

    def visit_annotations(self, node, visited_children):
        return None

    def visit_literal(self, node, visited_children):
        return _ESCAPE_RE.sub(_unescape, node.text[1:-1])

    def visit_dotted_name(self, node, visited_children):
        return node.text

    def visit_identifier(self, node, visited_children):
        return node.text


# ═══════════════════════════════════════════════════════════════════
#  PUBLIC API
# ═══════════════════════════════════════════════════════════════════

def parse(source: str, filename: str = "<string>") -> A.Thrift:
    """Parse one IDL document. Includes are recorded but not loaded."""
    try:
        tree = GRAMMAR.parse(source)
    except ParseError as exc:
        raise ThriftSyntaxError(
            filename, exc.line(), exc.column(), detail=str(exc)
        ) from exc
    return ThriftASTBuilder(filename).visit(tree)


class _Loader:
    """Loads a document and its includes, each file exactly once."""

    def __init__(self, include_dirs: Sequence[Union[str, Path]] = ()):
        self.include_dirs = [Path(d) for d in include_dirs]
        self.cache: Dict[Path, A.Thrift] = {}

    def load(self, path: Path) -> A.Thrift:
        key = path.resolve()
        if key in self.cache:
            return self.cache[key]
        logger.debug("loading %s", path)
        try:
            source = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise SourceReadError(str(path), str(exc)) from exc
        doc = parse(source, filename=str(path))
        # Cached before includes are followed so cycles link back here.
        self.cache[key] = doc
        for inc in doc.includes:
            inc.reference = self.load(self._locate(inc.path, path))
        return doc

    def _locate(self, include: str, includer: Path) -> Path:
        candidates = [includer.parent / include]
        candidates += [d / include for d in self.include_dirs]
        for c in candidates:
            if c.is_file():
                return c
        raise IncludeError(include, str(includer), tuple(candidates))


def parse_file(
    path: Union[str, Path],
    include_dirs: Sequence[Union[str, Path]] = (),
) -> A.Thrift:
    """
    Parse an IDL file and every file it includes.

    Include paths are resolved relative to the including file first,
    then against each of ``include_dirs`` in order.
    """
    loader = _Loader(include_dirs)
    root = loader.load(Path(path))
    logger.info("loaded %d document(s) from %s", len(loader.cache), path)
    return root


__all__ = ["GRAMMAR", "ThriftASTBuilder", "parse", "parse_file"]
