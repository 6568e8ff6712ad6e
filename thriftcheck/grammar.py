# thriftcheck/grammar.py
"""
Parsimonious PEG grammar for the Thrift IDL.

Kept as a plain string so tests can compile individual rules;
``thriftcheck.parser`` compiles it once at import time.
"""

THRIFT_GRAMMAR = r'''
    # ─────────────────────────────────────────────────────────────
    # Document
    # ─────────────────────────────────────────────────────────────

    document        = _ header* definition* _

    header          = include / cpp_include / namespace
    include         = ~r"include\b" _ literal _ list_sep? _
    cpp_include     = ~r"cpp_include\b" _ literal _ list_sep? _
    namespace       = ~r"namespace\b" _ namespace_scope _ dotted_name _ annotations? _

    namespace_scope = "*" / identifier

    # ─────────────────────────────────────────────────────────────
    # Definitions
    # ─────────────────────────────────────────────────────────────

    definition      = const / typedef / enum / struct_like / service

    const           = ~r"const\b" _ field_type _ identifier _ "=" _ const_value _ list_sep? _
    typedef         = ~r"typedef\b" _ field_type _ identifier _ annotations? _ list_sep? _

    enum            = ~r"enum\b" _ identifier _ "{" _ enum_value* "}" _ annotations? _
    enum_value      = identifier _ enum_assign? annotations? _ list_sep? _
    enum_assign     = "=" _ int_constant _

    struct_like     = struct_kind _ identifier _ "{" _ field* "}" _ annotations? _
    struct_kind     = ~r"(struct|union|exception)\b"

    service         = ~r"service\b" _ identifier _ extends? "{" _ function* "}" _ annotations? _
    extends         = ~r"extends\b" _ dotted_name _

    # ─────────────────────────────────────────────────────────────
    # Functions and fields
    # ─────────────────────────────────────────────────────────────

    function        = oneway? function_type _ identifier _ "(" _ field* ")" _ throws? annotations? _ list_sep? _
    oneway          = ~r"oneway\b" _
    function_type   = void / field_type
    void            = ~r"void\b"
    throws          = ~r"throws\b" _ "(" _ field* ")" _

    field           = field_id? requiredness? field_type _ identifier _ field_default? annotations? _ list_sep? _
    field_id        = int_constant _ ":" _
    requiredness    = ~r"(required|optional)\b" _
    field_default   = "=" _ const_value _

    # ─────────────────────────────────────────────────────────────
    # Types
    # ─────────────────────────────────────────────────────────────

    field_type      = container_type / base_type / type_ref
    container_type  = map_type / set_type / list_type
    map_type        = "map" _ "<" _ field_type _ "," _ field_type _ ">"
    set_type        = "set" _ "<" _ field_type _ ">"
    list_type       = "list" _ "<" _ field_type _ ">"
    base_type       = ~r"(bool|byte|i8|i16|i32|i64|double|string|binary)\b"
    type_ref        = ~r"[a-zA-Z_][a-zA-Z0-9_.]*"

    # ─────────────────────────────────────────────────────────────
    # Constants
    # ─────────────────────────────────────────────────────────────

    const_value     = double_constant / int_constant / literal / const_list / const_map / dotted_name
    const_list      = "[" _ (const_value _ list_sep? _)* "]"
    const_map       = "{" _ (const_value _ ":" _ const_value _ list_sep? _)* "}"

    double_constant = ~r"[+-]?([0-9]+\.[0-9]*([eE][+-]?[0-9]+)?|\.[0-9]+([eE][+-]?[0-9]+)?|[0-9]+[eE][+-]?[0-9]+)"
    int_constant    = ~r"[+-]?(0[xX][0-9a-fA-F]+|[0-9]+)"

    # ─────────────────────────────────────────────────────────────
    # Annotations (accepted, not kept)
    # ─────────────────────────────────────────────────────────────

    annotations     = "(" _ annotation* ")" _
    annotation      = dotted_name _ ("=" _ literal _)? list_sep? _

    # ─────────────────────────────────────────────────────────────
    # Lexical
    # ─────────────────────────────────────────────────────────────

    literal         = ~r'"(\\.|[^"\\])*"' / ~r"'(\\.|[^'\\])*'"
    list_sep        = ~r"[,;]"
    dotted_name     = ~r"[a-zA-Z_][a-zA-Z0-9_.]*"
    identifier      = ~r"[a-zA-Z_][a-zA-Z0-9_]*"
    _               = ~r"(\s|//[^\n]*|\#[^\n]*|/\*.*?\*/)*"s
'''
