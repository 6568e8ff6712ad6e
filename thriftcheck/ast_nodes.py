# thriftcheck/ast_nodes.py
"""
Thrift IDL abstract syntax tree node definitions.

One ``Thrift`` node holds the parsed content of a single IDL document.
Included documents are linked through ``Include.reference`` so the whole
program is a graph of ``Thrift`` nodes rooted at the main file.
"""

from __future__ import annotations
import enum
from dataclasses import dataclass, field
from typing import Any, Iterator, List, Optional


# ── Enums ────────────────────────────────────────────────────────

class FieldRequiredness(enum.Enum):
    DEFAULT = "default"
    REQUIRED = "required"
    OPTIONAL = "optional"


class StructCategory:
    STRUCT = "struct"
    UNION = "union"
    EXCEPTION = "exception"


# ── Types and constants ──────────────────────────────────────────

@dataclass
class FieldType:
    name: str
    key_type: Optional[FieldType] = None
    value_type: Optional[FieldType] = None

    def __str__(self):
        if self.name == "map":
            return f"map<{self.key_type}, {self.value_type}>"
        if self.name in ("set", "list"):
            return f"{self.name}<{self.value_type}>"
        return self.name


@dataclass
class ConstValue:
    kind: str
    value: Any = None


# ── Declarations ─────────────────────────────────────────────────

@dataclass
class Field:
    id: int
    name: str
    type: FieldType = field(default_factory=lambda: FieldType("void"))
    requiredness: FieldRequiredness = FieldRequiredness.DEFAULT
    default: Optional[ConstValue] = None


@dataclass
class StructLike:
    category: str
    name: str
    fields: List[Field] = field(default_factory=list)


@dataclass
class EnumValue:
    name: str
    value: int


@dataclass
class Enum:
    name: str
    values: List[EnumValue] = field(default_factory=list)


@dataclass
class Function:
    name: str
    function_type: FieldType = field(default_factory=lambda: FieldType("void"))
    oneway: bool = False
    arguments: List[Field] = field(default_factory=list)
    throws: List[Field] = field(default_factory=list)

    @property
    def void(self) -> bool:
        return self.function_type.name == "void"


@dataclass
class Service:
    name: str
    functions: List[Function] = field(default_factory=list)
    extends: Optional[str] = None


@dataclass
class Typedef:
    type: FieldType
    alias: str


@dataclass
class Constant:
    type: FieldType
    name: str
    value: ConstValue


@dataclass
class Namespace:
    language: str
    name: str


@dataclass
class Include:
    path: str
    reference: Optional[Thrift] = None


# ── Document ─────────────────────────────────────────────────────

@dataclass(eq=False)
class Thrift:
    """Parsed content of one IDL file.

    Identity-compared: two documents with equal content loaded from
    different files are still distinct nodes of the include graph.
    """
    filename: str = "<unknown>"
    includes: List[Include] = field(default_factory=list)
    cpp_includes: List[str] = field(default_factory=list)
    namespaces: List[Namespace] = field(default_factory=list)
    typedefs: List[Typedef] = field(default_factory=list)
    constants: List[Constant] = field(default_factory=list)
    enums: List[Enum] = field(default_factory=list)
    structs: List[StructLike] = field(default_factory=list)
    unions: List[StructLike] = field(default_factory=list)
    exceptions: List[StructLike] = field(default_factory=list)
    services: List[Service] = field(default_factory=list)

    def get_struct_likes(self) -> List[StructLike]:
        """Structs, then unions, then exceptions."""
        return [*self.structs, *self.unions, *self.exceptions]

    def add_struct_like(self, s: StructLike) -> None:
        if s.category == StructCategory.UNION:
            self.unions.append(s)
        elif s.category == StructCategory.EXCEPTION:
            self.exceptions.append(s)
        else:
            self.structs.append(s)

    def depth_first_search(self) -> Iterator[Thrift]:
        """Yield every reachable document once, the root first.

        Includes are followed in declaration order. Documents shared by
        several includers, and include cycles, are visited a single time.
        """
        visited: set[int] = set()
        stack: List[Thrift] = [self]
        while stack:
            t = stack.pop()
            if id(t) in visited:
                continue
            visited.add(id(t))
            yield t
            refs = [inc.reference for inc in t.includes if inc.reference is not None]
            stack.extend(reversed(refs))
