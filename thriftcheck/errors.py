# thriftcheck/errors.py
"""
Thrift IDL Error Types

Error handling infrastructure for the thriftcheck front end: structured
error codes and the exception hierarchy raised by the reader and by the
semantic checker.

Error Hierarchy:
────────────────
┌─────────────────────────────────────────────────────────────────────────────┐
│  ThriftError (base)                                                         │
│  ├── ThriftSyntaxError           - Grammar violations found by the reader   │
│  ├── IncludeError                - Included file cannot be located          │
│  ├── SourceReadError             - File cannot be read or decoded           │
│  └── SemanticError               - Rules the grammar cannot enforce         │
│      ├── DuplicateGlobalNameError                                           │
│      ├── DuplicateEnumValueNameError                                        │
│      ├── ConflictingEnumValueError                                          │
│      ├── DuplicateFieldIDError                                              │
│      ├── DuplicateFieldNameError                                            │
│      ├── MultipleUnionDefaultsError                                         │
│      ├── DuplicateFunctionNameError                                         │
│      └── InvalidOnewayFunctionError                                         │
└─────────────────────────────────────────────────────────────────────────────┘

Error Codes:
────────────
Each error carries a code ``THRIFT-NNNN``:
  - 1000-1999: Syntax / loading errors
  - 3000-3999: Semantic errors

Semantic errors are fatal: the checker stops at the first one. Non-fatal
findings are plain warning strings and never become exceptions.
"""

from __future__ import annotations

from enum import Enum, auto, unique
from typing import Any, Optional


# ═══════════════════════════════════════════════════════════════════════════════
# ERROR CLASSIFICATION
# ═══════════════════════════════════════════════════════════════════════════════

@unique
class ErrorPhase(Enum):
    """Front-end phase where the error occurred."""

    SYNTAX = "syntax"          # Parsing
    LOADING = "loading"        # Include resolution
    SEMANTIC = "semantic"      # Checker rules


@unique
class ErrorCategory(Enum):
    """Fine-grained error categories for filtering and statistics."""

    # Syntax / loading
    UNEXPECTED_TOKEN = auto()
    MISSING_INCLUDE = auto()
    UNREADABLE_SOURCE = auto()

    # Semantic
    DUPLICATE_GLOBAL_NAME = auto()
    DUPLICATE_ENUM_VALUE_NAME = auto()
    CONFLICTING_ENUM_VALUE = auto()
    DUPLICATE_FIELD_ID = auto()
    DUPLICATE_FIELD_NAME = auto()
    MULTIPLE_UNION_DEFAULTS = auto()
    DUPLICATE_FUNCTION_NAME = auto()
    INVALID_ONEWAY_FUNCTION = auto()


# ═══════════════════════════════════════════════════════════════════════════════
# ERROR CODES
# ═══════════════════════════════════════════════════════════════════════════════

class ErrorCode:
    """
    Structured error code of the form PREFIX-NNNN.
    """

    __slots__ = ("prefix", "number", "category", "phase")

    def __init__(
        self,
        prefix: str,
        number: int,
        category: ErrorCategory,
        phase: ErrorPhase,
    ) -> None:
        self.prefix = prefix
        self.number = number
        self.category = category
        self.phase = phase

    @property
    def code(self) -> str:
        """Get the full error code string."""
        return f"{self.prefix}-{self.number:04d}"

    def __str__(self) -> str:
        return self.code

    def __repr__(self) -> str:
        return f"ErrorCode({self.code!r}, {self.category.name})"

    def __hash__(self) -> int:
        return hash((self.prefix, self.number))

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ErrorCode):
            return self.prefix == other.prefix and self.number == other.number
        if isinstance(other, str):
            return self.code == other
        return False


class ThriftErrorCodes:
    """Predefined error codes."""

    # SYNTAX / LOADING (1000-1999)
    UNEXPECTED_TOKEN = ErrorCode(
        "THRIFT", 1000, ErrorCategory.UNEXPECTED_TOKEN, ErrorPhase.SYNTAX
    )
    MISSING_INCLUDE = ErrorCode(
        "THRIFT", 1100, ErrorCategory.MISSING_INCLUDE, ErrorPhase.LOADING
    )
    UNREADABLE_SOURCE = ErrorCode(
        "THRIFT", 1200, ErrorCategory.UNREADABLE_SOURCE, ErrorPhase.LOADING
    )

    # SEMANTIC (3000-3999)
    DUPLICATE_GLOBAL_NAME = ErrorCode(
        "THRIFT", 3000, ErrorCategory.DUPLICATE_GLOBAL_NAME, ErrorPhase.SEMANTIC
    )
    DUPLICATE_ENUM_VALUE_NAME = ErrorCode(
        "THRIFT", 3001, ErrorCategory.DUPLICATE_ENUM_VALUE_NAME, ErrorPhase.SEMANTIC
    )
    CONFLICTING_ENUM_VALUE = ErrorCode(
        "THRIFT", 3002, ErrorCategory.CONFLICTING_ENUM_VALUE, ErrorPhase.SEMANTIC
    )
    DUPLICATE_FIELD_ID = ErrorCode(
        "THRIFT", 3003, ErrorCategory.DUPLICATE_FIELD_ID, ErrorPhase.SEMANTIC
    )
    DUPLICATE_FIELD_NAME = ErrorCode(
        "THRIFT", 3004, ErrorCategory.DUPLICATE_FIELD_NAME, ErrorPhase.SEMANTIC
    )
    MULTIPLE_UNION_DEFAULTS = ErrorCode(
        "THRIFT", 3005, ErrorCategory.MULTIPLE_UNION_DEFAULTS, ErrorPhase.SEMANTIC
    )
    DUPLICATE_FUNCTION_NAME = ErrorCode(
        "THRIFT", 3006, ErrorCategory.DUPLICATE_FUNCTION_NAME, ErrorPhase.SEMANTIC
    )
    INVALID_ONEWAY_FUNCTION = ErrorCode(
        "THRIFT", 3007, ErrorCategory.INVALID_ONEWAY_FUNCTION, ErrorPhase.SEMANTIC
    )


E = ThriftErrorCodes

GRAMMAR_ERROR_PREFIX = "[IDL grammar error]"


# ═══════════════════════════════════════════════════════════════════════════════
# EXCEPTION HIERARCHY
# ═══════════════════════════════════════════════════════════════════════════════

class ThriftError(Exception):
    """
    Base exception for all thriftcheck errors.

    Carries the error code and the file the error originates from so
    callers can report it without parsing the message.
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode,
        filename: str = "",
        hint: str = "",
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.filename = filename
        self.hint = hint

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "code": self.code.code,
            "category": self.code.category.name.lower(),
            "message": self.message,
        }
        if self.filename:
            result["file"] = self.filename
        if self.hint:
            result["hint"] = self.hint
        return result

    def __str__(self) -> str:
        return self.message


# ───────────────────────────────────────────────────────────────────────────────
# Reader errors
# ───────────────────────────────────────────────────────────────────────────────

class ThriftSyntaxError(ThriftError):
    """Source text does not match the IDL grammar."""

    def __init__(
        self,
        filename: str,
        line: int = 0,
        column: int = 0,
        detail: str = "",
    ) -> None:
        msg = f"syntax error at {filename}:{line}:{column}"
        if detail:
            msg += f": {detail}"
        super().__init__(msg, E.UNEXPECTED_TOKEN, filename=filename)
        self.line = line
        self.column = column


class IncludeError(ThriftError):
    """An include directive names a file that cannot be found."""

    def __init__(self, path: str, filename: str, searched: tuple = ()) -> None:
        super().__init__(
            f"cannot find include {path!r} from file {filename}",
            E.MISSING_INCLUDE,
            filename=filename,
            hint="searched: " + ", ".join(str(s) for s in searched) if searched else "",
        )
        self.path = path


class SourceReadError(ThriftError):
    """An IDL file exists but cannot be read or decoded as UTF-8."""

    def __init__(self, filename: str, detail: str) -> None:
        super().__init__(
            f"cannot read file {filename}: {detail}",
            E.UNREADABLE_SOURCE,
            filename=filename,
        )


# ───────────────────────────────────────────────────────────────────────────────
# Semantic errors
# ───────────────────────────────────────────────────────────────────────────────

class SemanticError(ThriftError):
    """A fatal violation of an IDL semantic rule."""

    def __init__(self, message: str, code: ErrorCode, filename: str = "") -> None:
        super().__init__(f"{GRAMMAR_ERROR_PREFIX} {message}", code, filename=filename)


class DuplicateGlobalNameError(SemanticError):
    """Two top-level declarations of one document share a name."""

    def __init__(self, name: str, filename: str) -> None:
        super().__init__(
            f"duplicated names in global scope: {name} from file {filename}",
            E.DUPLICATE_GLOBAL_NAME,
            filename,
        )
        self.name = name


class DuplicateEnumValueNameError(SemanticError):
    def __init__(self, enum: str, value_name: str, filename: str) -> None:
        super().__init__(
            f"enum {enum} has duplicated value: {value_name} from file {filename}",
            E.DUPLICATE_ENUM_VALUE_NAME,
            filename,
        )
        self.enum = enum
        self.value_name = value_name


class ConflictingEnumValueError(SemanticError):
    """Two different names of one enum map to the same number."""

    def __init__(
        self, enum: str, value: int, first: str, second: str, filename: str
    ) -> None:
        super().__init__(
            f"enum {enum}: duplicate value {value} between '{first}' and "
            f"'{second}' from file {filename}",
            E.CONFLICTING_ENUM_VALUE,
            filename,
        )
        self.enum = enum
        self.value = value
        self.names = (first, second)


class DuplicateFieldIDError(SemanticError):
    def __init__(self, field_id: int, category: str, owner: str, filename: str) -> None:
        super().__init__(
            f'duplicated field ID {field_id} in {category} "{owner}" from file {filename}',
            E.DUPLICATE_FIELD_ID,
            filename,
        )
        self.field_id = field_id
        self.owner = owner


class DuplicateFieldNameError(SemanticError):
    def __init__(self, field_name: str, category: str, owner: str, filename: str) -> None:
        super().__init__(
            f'duplicated field name "{field_name}" in {category} "{owner}" '
            f"from file {filename}",
            E.DUPLICATE_FIELD_NAME,
            filename,
        )
        self.field_name = field_name
        self.owner = owner


class MultipleUnionDefaultsError(SemanticError):
    """A union declares a default value on more than one member."""

    def __init__(self, field_name: str, union: str, filename: str) -> None:
        super().__init__(
            f"field {field_name} provides another default value for union "
            f"{union} from file {filename}",
            E.MULTIPLE_UNION_DEFAULTS,
            filename,
        )
        self.field_name = field_name
        self.union = union


class DuplicateFunctionNameError(SemanticError):
    def __init__(self, service: str, function: str, filename: str) -> None:
        super().__init__(
            f'duplicated function name in "{service}": "{function}" from file {filename}',
            E.DUPLICATE_FUNCTION_NAME,
            filename,
        )
        self.service = service
        self.function = function


class InvalidOnewayFunctionError(SemanticError):
    """A oneway function returns a value or declares exceptions."""

    def __init__(self, service: str, function: str, reason: str, filename: str) -> None:
        super().__init__(
            f"{service}.{function}: {reason} from file {filename}",
            E.INVALID_ONEWAY_FUNCTION,
            filename,
        )
        self.service = service
        self.function = function
        self.reason = reason


__all__ = [
    "ErrorPhase",
    "ErrorCategory",
    "ErrorCode",
    "ThriftErrorCodes",
    "ThriftError",
    "ThriftSyntaxError",
    "IncludeError",
    "SourceReadError",
    "SemanticError",
    "DuplicateGlobalNameError",
    "DuplicateEnumValueNameError",
    "ConflictingEnumValueError",
    "DuplicateFieldIDError",
    "DuplicateFieldNameError",
    "MultipleUnionDefaultsError",
    "DuplicateFunctionNameError",
    "InvalidOnewayFunctionError",
]
