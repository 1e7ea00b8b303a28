"""Graph builder constants — primitive names and system namespace defaults."""

# Built-in types that never correspond to a declared type node.
# Compared case-insensitively, so "String" and "string" both match.
PRIMITIVE_TYPES = frozenset({
    # C# keywords
    "bool", "byte", "sbyte", "char", "decimal", "double", "float",
    "int", "uint", "nint", "nuint", "long", "ulong", "short", "ushort",
    "object", "string", "void", "dynamic", "var",
    # CLR names for the same types
    "boolean", "int16", "int32", "int64", "uint16", "uint32", "uint64",
    "intptr", "uintptr", "single",
})

DEFAULT_SYSTEM_NAMESPACES = ("System", "Microsoft")
