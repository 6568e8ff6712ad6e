"""
Thrift IDL Semantic Checker

Validates rules the grammar cannot enforce on every document reachable
from a root ``Thrift`` node:

1. Global scope - typedef, constant, struct-like and service names are unique
2. Enums - value names unique, numbers not shared by different names
3. Struct-likes - field ids and names unique, ids positive
4. Unions - members optional, at most one default value
5. Functions - names unique per service, oneway functions void and throw-free,
   argument and throws requiredness

Rules run per document in that order. Non-fatal findings are returned as
warning strings; the first fatal finding aborts the pass and is returned
alongside the warnings gathered so far.

When ``Options.fix_warnings`` is set the union and function rules rewrite
``Field.requiredness`` in place. The tree is mutated without locking, so
two passes must never run over the same tree at once.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, List, NamedTuple, Optional, Set

from thriftcheck import ast_nodes as A
from thriftcheck.errors import (
    ConflictingEnumValueError,
    DuplicateEnumValueNameError,
    DuplicateFieldIDError,
    DuplicateFieldNameError,
    DuplicateFunctionNameError,
    DuplicateGlobalNameError,
    InvalidOnewayFunctionError,
    MultipleUnionDefaultsError,
    SemanticError,
)

logger = logging.getLogger(__name__)

INT32_MIN = -(2 ** 31)
INT32_MAX = 2 ** 31 - 1


@dataclass
class Options:
    """Checker configuration."""
    fix_warnings: bool = False


class CheckResult(NamedTuple):
    """Outcome of one checking pass.

    Unpacks as ``warnings, error``. ``error`` is the fatal violation that
    stopped the pass, or ``None``.
    """
    warnings: List[str]
    error: Optional[SemanticError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def raise_for_error(self) -> None:
        if self.error is not None:
            raise self.error


Rule = Callable[[A.Thrift, Optional[List[str]]], List[str]]


def _first_duplicate(names: Iterable[str]) -> Optional[str]:
    seen: Set[str] = set()
    for name in names:
        if name in seen:
            return name
        seen.add(name)
    return None


class Checker:
    """
    Runs the rule set over a document graph.

    Each ``check_*`` rule appends its warnings to ``warns`` (a fresh list
    when omitted), returns that list and raises a ``SemanticError``
    subclass on a fatal violation. Warnings appended before the raise
    stay in the list.
    """

    def __init__(self, options: Optional[Options] = None) -> None:
        self.options = options or Options()

    @property
    def rules(self) -> List[Rule]:
        return [
            self.check_globals,
            self.check_enums,
            self.check_struct_likes,
            self.check_unions,
            self.check_functions,
        ]

    def check_all(self, tree: A.Thrift) -> CheckResult:
        """Check ``tree`` and every document it includes."""
        warns: List[str] = []
        count = 0
        for doc in tree.depth_first_search():
            logger.debug("checking %s", doc.filename)
            count += 1
            for rule in self.rules:
                try:
                    rule(doc, warns)
                except SemanticError as exc:
                    logger.info(
                        "semantic check of %s stopped at %s: %s",
                        tree.filename, exc.code, exc,
                    )
                    return CheckResult(warns, exc)
        logger.info(
            "checked %d document(s) from %s: %d warning(s)",
            count, tree.filename, len(warns),
        )
        return CheckResult(warns)

    # ------------------------------------------------------------------
    # Rules
    # ------------------------------------------------------------------

    def check_globals(self, t: A.Thrift, warns: Optional[List[str]] = None) -> List[str]:
        """Typedef, constant, struct-like and service names share one scope."""
        warns = [] if warns is None else warns

        def names() -> Iterable[str]:
            for td in t.typedefs:
                yield td.alias
            for c in t.constants:
                yield c.name
            for s in t.get_struct_likes():
                yield s.name
            for svc in t.services:
                yield svc.name

        dup = _first_duplicate(names())
        if dup is not None:
            raise DuplicateGlobalNameError(dup, t.filename)
        return warns

    def check_enums(self, t: A.Thrift, warns: Optional[List[str]] = None) -> List[str]:
        warns = [] if warns is None else warns
        for e in t.enums:
            n2v: dict[str, int] = {}
            v2n: dict[int, str] = {}
            for v in e.values:
                err: Optional[SemanticError] = None
                # Repeating a name with its own value is tolerated.
                if v.name in n2v and n2v[v.name] != v.value:
                    err = DuplicateEnumValueNameError(e.name, v.name, t.filename)
                n2v.setdefault(v.name, v.value)
                first = v2n.get(v.value)
                if first is not None and first != v.name:
                    err = ConflictingEnumValueError(
                        e.name, v.value, first, v.name, t.filename
                    )
                v2n[v.value] = v.name
                if err is not None:
                    raise err
                # Logged only; never part of the returned warnings.
                if v.value < INT32_MIN or v.value > INT32_MAX:
                    logger.warning(
                        "the value of enum %s is %d, which exceeds the range of "
                        "int32. Please adjust its value to fit within the int32 "
                        "range to avoid data errors during serialization!",
                        v.name, v.value,
                    )
        return warns

    def check_struct_likes(
        self, t: A.Thrift, warns: Optional[List[str]] = None
    ) -> List[str]:
        warns = [] if warns is None else warns
        for s in t.get_struct_likes():
            field_ids: Set[int] = set()
            names: Set[str] = set()
            for f in s.fields:
                if f.id in field_ids:
                    raise DuplicateFieldIDError(f.id, s.category, s.name, t.filename)
                if f.name in names:
                    raise DuplicateFieldNameError(f.name, s.category, s.name, t.filename)
                field_ids.add(f.id)
                names.add(f.name)
                if f.id <= 0:
                    warns.append(
                        f'non-positive ID {f.id} of field "{f.name}" in "{s.name}"  '
                        f"from file {t.filename}"
                    )
        return warns

    def check_unions(self, t: A.Thrift, warns: Optional[List[str]] = None) -> List[str]:
        """Union members must be optional and at most one may have a default."""
        warns = [] if warns is None else warns
        for u in t.unions:
            has_default = False
            for f in u.fields:
                if f.requiredness is A.FieldRequiredness.REQUIRED:
                    warns.append(
                        f"union {u.name} field {f.name}: union members must be "
                        f"optional, ignoring specified requiredness."
                    )
                if f.default is not None:
                    if has_default:
                        raise MultipleUnionDefaultsError(f.name, u.name, t.filename)
                    has_default = True
                if self.options.fix_warnings:
                    f.requiredness = A.FieldRequiredness.OPTIONAL
        return warns

    def check_functions(
        self, t: A.Thrift, warns: Optional[List[str]] = None
    ) -> List[str]:
        """Service function rules.

        The "optional keyword is ignored" advisory is reported once per
        document, after every service was scanned.
        """
        warns = [] if warns is None else warns
        fix = self.options.fix_warnings
        arg_opt = ""
        for svc in t.services:
            defined: Set[str] = set()
            for f in svc.functions:
                if f.name in defined:
                    raise DuplicateFunctionNameError(svc.name, f.name, t.filename)
                defined.add(f.name)

                if f.oneway and not f.void:
                    raise InvalidOnewayFunctionError(
                        svc.name, f.name, "oneway function must be void type", t.filename
                    )
                if f.oneway and f.throws:
                    raise InvalidOnewayFunctionError(
                        svc.name, f.name, "oneway methods can't throw exceptions", t.filename
                    )

                for a in f.arguments:
                    if a.requiredness is A.FieldRequiredness.OPTIONAL:
                        arg_opt = f"{t.filename}: optional keyword is ignored in argument lists."
                        if fix:
                            a.requiredness = A.FieldRequiredness.DEFAULT
                    if a.id <= 0:
                        warns.append(
                            f'non-positive ID {a.id} of argument "{a.name}" in '
                            f'"{svc.name}"."{f.name}"'
                        )

                for e in f.throws:
                    if e.requiredness is A.FieldRequiredness.REQUIRED:
                        warns.append(
                            f'exception "{e.name}" in "{svc.name}"."{f.name}": throw '
                            f"field must be optional, ignoring specified requiredness."
                        )
                        if not fix:
                            continue
                        e.requiredness = A.FieldRequiredness.OPTIONAL
                    elif e.requiredness is A.FieldRequiredness.DEFAULT:
                        e.requiredness = A.FieldRequiredness.OPTIONAL
        if arg_opt:
            warns.append(arg_opt)
        return warns


def check_all(tree: A.Thrift, *, fix_warnings: bool = False) -> CheckResult:
    """
    Check ``tree`` and all documents it includes.

    This is the main entry point for semantic checking.

    Args:
        tree: Root document, with includes already linked
        fix_warnings: Normalize recoverable requiredness violations in place

    Returns:
        CheckResult with the warnings and the first fatal error, if any
    """
    return Checker(Options(fix_warnings=fix_warnings)).check_all(tree)


__all__ = ["Options", "CheckResult", "Checker", "check_all"]
