"""
Regex helpers for file_contexts path patterns
"""

# Characters with special meaning in file_contexts path regexes
REGEX_METACHARACTERS = frozenset('[].^$*+?{}|()')

def escape_regex(text: str) -> str:
    """
    Escape regex metacharacters in a path.

    Backslashes already present are left alone, so the result can be compared
    verbatim against keys read from an existing file_contexts.

    Args:
        text: Path relative to the partition root

    Returns:
        Path with every metacharacter prefixed by a backslash
    """
    return ''.join('\\' + c if c in REGEX_METACHARACTERS else c for c in text)
