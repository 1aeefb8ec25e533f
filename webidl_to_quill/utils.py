"""
Utility functions for the WebIDL to Quill binding generator.
"""

import re

# Regex pattern to split text into words, handling camelCase boundaries
_WORD_PATTERN = re.compile(r"[a-z]+|[A-Z][a-z]*|[0-9]+")

_IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

# Words that cannot be used as Quill variable names
QUILL_RESERVED_KEYWORDS = {
    "as",
    "break",
    "continue",
    "else",
    "enum",
    "ext",
    "false",
    "for",
    "fun",
    "if",
    "match",
    "mod",
    "mut",
    "pub",
    "return",
    "self",
    "struct",
    "true",
    "use",
    "val",
    "while",
}


def _normalize_separators(text: str) -> str:
    """Normalize separators (underscores, hyphens) to spaces."""
    return text.replace("_", " ").replace("-", " ")


def _split_into_words(text: str) -> list[str]:
    """Split text into words, handling camelCase boundaries."""
    return _WORD_PATTERN.findall(text)


def _capitalize_and_join(words: list[str]) -> str:
    """Capitalize each word and join them together."""
    return "".join(word.capitalize() for word in words if word)


def snake_to_pascal_case(text: str) -> str:
    """Convert snake_case, kebab-case, camelCase or space-separated text to PascalCase.

    Examples:
        "north" -> "North"
        "south-east" -> "SouthEast"
        "first_name" -> "FirstName"
        "actionTemplate" -> "ActionTemplate"
        "first 3 rows" -> "First3Rows"

    Args:
        text: The text to convert

    Returns:
        PascalCase string
    """
    if not text:
        return ""
    normalized = _normalize_separators(text)
    words = _split_into_words(normalized)
    return _capitalize_and_join(words)


def _is_upper(c: str) -> bool:
    # Digits and underscores count as upper case, they have no lower form
    return c == c.upper()


def to_snake_case(name: str) -> str:
    """Convert a WebIDL camelCase identifier to snake_case.

    Acronyms are kept together:
        "getElementById" -> "get_element_by_id"
        "HTMLElement" -> "html_element"
        "innerHTML" -> "inner_html"
    """
    result = []
    for i, c in enumerate(name):
        if not _is_upper(c):
            result.append(c)
            continue
        is_first_upper = i > 0 and not _is_upper(name[i - 1])
        is_in_acronym = i > 0 and _is_upper(name[i - 1])
        end_of_acronym = i + 1 < len(name) and not _is_upper(name[i + 1])
        if is_first_upper or (is_in_acronym and end_of_acronym):
            result.append("_")
        result.append(c.lower())
    return "".join(result)


def is_identifier(name: str) -> bool:
    """Check whether a name is usable as a Quill identifier."""
    return bool(_IDENTIFIER_PATTERN.match(name))


def escape_keyword(name: str) -> str:
    """Append an underscore to names that collide with Quill keywords."""
    if name in QUILL_RESERVED_KEYWORDS:
        return f"{name}_"
    return name


def variable_name(name: str) -> str:
    """Quill variable name for a WebIDL argument or dictionary member."""
    return escape_keyword(to_snake_case(name))
