"""ECMA 262 regular expressions on top of Python's re module.

JSON Schema mandates the ECMA 262 regex dialect. Patterns are
translated to the closest Python equivalent before compilation: \\d and
\\w only match ASCII, $ only matches at the very end of the input, named
groups use the (?<name>...) spelling, and Python-only constructs such as
inline flags are rejected. Matching has search semantics, patterns are
not implicitly anchored.
"""

import functools
import re

from schemacheck.errors import RegexError

# Escapes which ECMA 262 gives a meaning; other escaped ASCII letters stand for themselves
_KNOWN_ESCAPES = frozenset('bBdDfnrsStvwWcxuk0123456789')


def translate(pattern: str) -> str:
    """
    Translate an ECMA 262 regex into a Python regex.

    Raises:
        RegexError: For constructs ECMA 262 does not allow.
    """
    out = []
    i = 0
    n = len(pattern)
    in_class = False
    while i < n:
        c = pattern[i]
        if c == '\\':
            if i + 1 >= n:
                raise RegexError("invalid regular expression: trailing backslash", pattern)
            e = pattern[i + 1]
            i += 2
            if e == 'd':
                out.append('0-9' if in_class else '[0-9]')
            elif e == 'D':
                out.append('\\D' if in_class else '[^0-9]')
            elif e == 'w':
                out.append('a-zA-Z0-9_' if in_class else '[a-zA-Z0-9_]')
            elif e == 'W':
                out.append('\\W' if in_class else '[^a-zA-Z0-9_]')
            elif e == 'c' and i < n and pattern[i].isascii() and pattern[i].isalpha():
                out.append('\\x%02x' % (ord(pattern[i]) % 32))
                i += 1
            elif e == 'k' and i < n and pattern[i] == '<':
                end = pattern.find('>', i)
                if end < 0:
                    raise RegexError("invalid regular expression: unterminated group name", pattern)
                out.append(f"(?P={pattern[i + 1:end]})")
                i = end + 1
            elif e == '0' and not (i < n and pattern[i].isdigit()):
                out.append('\\x00')
            elif e.isascii() and e.isalpha() and e not in _KNOWN_ESCAPES:
                out.append(e)
            else:
                out.append('\\' + e)
            continue
        if in_class:
            if c == ']':
                in_class = False
                out.append(c)
            elif c == '[':
                out.append('\\[')
            else:
                out.append(c)
            i += 1
            continue
        if c == '[':
            if pattern.startswith('[]', i):
                out.append('(?!)')
                i += 2
                continue
            if pattern.startswith('[^]', i):
                out.append('[\\s\\S]')
                i += 3
                continue
            in_class = True
            out.append('[')
            i += 1
            if i < n and pattern[i] == '^':
                out.append('^')
                i += 1
            continue
        if c == '(' and pattern.startswith('(?', i):
            marker = pattern[i + 2:i + 3]
            if marker == '<' and pattern[i + 3:i + 4] not in ('=', '!'):
                out.append('(?P<')
                i += 3
                continue
            if marker not in (':', '=', '!', '<'):
                raise RegexError("invalid regular expression: unsupported group construct", pattern)
        if c == '$':
            out.append('\\Z')
            i += 1
            continue
        out.append(c)
        i += 1
    if in_class:
        raise RegexError("invalid regular expression: unterminated character class", pattern)
    return ''.join(out)


@functools.lru_cache(maxsize=1024)
def compile_ecma(pattern: str) -> re.Pattern:
    """
    Compile an ECMA 262 regex.

    Raises:
        RegexError: If the pattern is not a valid regex.
    """
    try:
        return re.compile(translate(pattern))
    except re.error as e:
        raise RegexError(f"invalid regular expression: {e}", pattern) from e


def is_valid(pattern: str) -> bool:
    try:
        compile_ecma(pattern)
    except RegexError:
        return False
    return True


def matches(pattern: str, string: str) -> bool:
    """ True if the regex matches anywhere in the string. """
    return compile_ecma(pattern).search(string) is not None
