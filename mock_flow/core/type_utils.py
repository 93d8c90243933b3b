"""
Type-name helpers shared by the model builder and the renderer.

This module contains pure functions that turn Swift type names into
identifier-safe display tokens and map them to default return literals.
"""

import re
from enum import Enum
from typing import Dict, List, Optional

UNKNOWN_TYPE = "<<unknown>>"

# Punctuation that carries meaning in a type name and must survive as a word,
# otherwise `Int` and `Int?` (or `[Int]`) would collapse to the same token.
# Closers become `End` so that grouping is kept: `(Int) -> Int?` and
# `((Int) -> Int)?` differ. Order matters: `->` before `>`, `...` before `.`.
_SYMBOL_WORDS = [
    ("->", " To "),
    ("...", " Variadic "),
    ("?", " Optional "),
    ("!", " Unwrapped "),
    ("&", " And "),
    (",", " Comma "),
    (".", " Dot "),
    ("(", " Paren "),
    ("<", " Of "),
    (")", " End "),
    (">", " End "),
    ("]", " End "),
]

_INTEGER_TYPES = {
    "Int", "Int8", "Int16", "Int32", "Int64",
    "UInt", "UInt8", "UInt16", "UInt32", "UInt64",
}
_FLOATING_TYPES = {"Double", "Float", "Float32", "Float64", "Float80", "CGFloat", "TimeInterval"}
_STRING_TYPES = {"String", "Substring", "Character"}


def capitalize_first(text: str) -> str:
    """Upper-case the first character only, leaving the rest untouched."""
    if not text:
        return text
    return text[0].upper() + text[1:]


def _mark_brackets(type_name: str) -> str:
    """Replace `[` with an Array or Dictionary word depending on its contents."""
    kinds: Dict[int, str] = {}
    stack: List[int] = []
    for index, char in enumerate(type_name):
        if char == "[":
            stack.append(index)
            kinds[index] = " Array "
        elif char == "]" and stack:
            stack.pop()
        elif char == ":" and stack:
            kinds[stack[-1]] = " Dictionary "
    return "".join(kinds.get(index, char) for index, char in enumerate(type_name))


def display_for_type(type_name: str) -> str:
    """
    Render a type name as an identifier-safe token.

    Optional, array, dictionary, function, generic, member and variadic
    decoration becomes a word so that distinct types keep distinct tokens,
    e.g.::

        Int              -> Int
        [String: Int]?   -> DictionaryStringIntEndOptional
        (Int) -> Void    -> ParenIntEndToVoid
        ((Int) -> Int)?  -> ParenParenIntEndToIntEndOptional
        Foo.Bar          -> FooDotBar

    Closers at the very end are dropped: brackets are balanced, so they
    carry no information there.

    Returns an empty string for an empty name or the unknown sentinel.
    """
    if not type_name or type_name == UNKNOWN_TYPE:
        return ""
    text = _mark_brackets(type_name.strip().rstrip(")]> "))
    for symbol, word in _SYMBOL_WORDS:
        text = text.replace(symbol, word)
    components = [c for c in re.split(r"[^A-Za-z0-9_]+", text) if c]
    return "".join(capitalize_first(c) for c in components)


class TypeCategory(Enum):
    INTEGER = "integer"
    FLOATING = "floating"
    BOOLEAN = "boolean"
    STRING = "string"
    OPTIONAL = "optional"
    ARRAY = "array"
    DICTIONARY = "dictionary"
    SET = "set"
    VOID = "void"
    OTHER = "other"


FALLBACK_DEFAULT_VALUE = 'fatalError("handler must be set to produce a return value")'

DEFAULT_VALUES: Dict[TypeCategory, str] = {
    TypeCategory.INTEGER: "0",
    TypeCategory.FLOATING: "0.0",
    TypeCategory.BOOLEAN: "false",
    TypeCategory.STRING: '""',
    TypeCategory.OPTIONAL: "nil",
    TypeCategory.ARRAY: "[]",
    TypeCategory.DICTIONARY: "[:]",
    TypeCategory.SET: "[]",
    TypeCategory.VOID: "()",
    TypeCategory.OTHER: FALLBACK_DEFAULT_VALUE,
}


def categorize_type(type_name: str) -> TypeCategory:
    """Classify a return type name into one of the closed categories."""
    name = (type_name or "").strip()
    if not name or name == UNKNOWN_TYPE or name in ("Void", "()"):
        return TypeCategory.VOID
    if name.endswith("?") or name.endswith("!") or name.startswith("Optional<"):
        return TypeCategory.OPTIONAL
    if name.startswith("[") and name.endswith("]"):
        if _mark_brackets(name).startswith(" Dictionary "):
            return TypeCategory.DICTIONARY
        return TypeCategory.ARRAY
    if name.startswith("Array<"):
        return TypeCategory.ARRAY
    if name.startswith("Dictionary<"):
        return TypeCategory.DICTIONARY
    if name.startswith("Set<"):
        return TypeCategory.SET
    if name == "Bool":
        return TypeCategory.BOOLEAN
    if name in _INTEGER_TYPES:
        return TypeCategory.INTEGER
    if name in _FLOATING_TYPES:
        return TypeCategory.FLOATING
    if name in _STRING_TYPES:
        return TypeCategory.STRING
    return TypeCategory.OTHER


def default_value(type_name: str, declared: Optional[str] = None) -> str:
    """
    Zero-value literal for a return type.

    `declared` is an explicit default expression from the declaration; it is
    only used in place of the fallback placeholder for uncategorized types.
    """
    category = categorize_type(type_name)
    if category is TypeCategory.OTHER and declared:
        return declared
    return DEFAULT_VALUES[category]
