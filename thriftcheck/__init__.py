"""thriftcheck — semantic validation for Thrift IDL documents.

Submodules
----------
ast_nodes
    Dataclasses for one parsed IDL document (``Thrift``) and its
    declarations, plus the include-aware depth-first traversal.

errors
    Error codes (``THRIFT-NNNN``) and the exception hierarchy:
    ``ThriftSyntaxError``, ``IncludeError`` and the ``SemanticError``
    family raised by the checker rules.

semantic
    The rule set and the ``Checker`` that runs it over a document graph,
    returning warnings and the first fatal error. ``Options.fix_warnings``
    enables in-place requiredness normalization.

grammar, parser
    Parsimonious PEG grammar and the reader producing ``Thrift`` trees,
    with include loading.

main
    CLI entry-point with subcommands: ``check``, ``parse``.

Usage
-----
Command-line::

    python -m thriftcheck check service.thrift -I idl/ --fix

Programmatic::

    from thriftcheck.parser import parse_file
    from thriftcheck.semantic import Checker, Options

    tree = parse_file("service.thrift")
    warnings, error = Checker(Options(fix_warnings=True)).check_all(tree)

"""

from __future__ import annotations

__version__: str = "0.1.0"
__all__: list[str] = [
    "__version__",
    "ast_nodes",
    "errors",
    "semantic",
    "parser",
    "main",
]
