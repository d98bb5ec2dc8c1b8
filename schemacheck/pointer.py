"""JSON Pointer helpers on top of the jsonpointer library."""

from typing import Any, List
from urllib.parse import unquote

import jsonpointer
from jsonpointer import JsonPointer, JsonPointerException

ROOT = ''


def append(pointer: str, *tokens: Any) -> str:
    """
    Append reference tokens to a JSON pointer.

    Args:
        pointer (str): The pointer to extend.
        *tokens: Raw (unescaped) tokens, object member names or array indices.

    Returns:
        str: The extended pointer.
    """
    parts = JsonPointer(pointer).parts + [str(token) for token in tokens]
    return JsonPointer.from_parts(parts).path


def parts(pointer: str) -> List[str]:
    """ Get the unescaped reference tokens of a pointer. """
    return JsonPointer(pointer).parts


def from_fragment(fragment: str) -> str:
    """ Convert a URI fragment holding a JSON pointer into a pointer. """
    return unquote(fragment or '')


def is_pointer_fragment(fragment: str) -> bool:
    """ True if a URI fragment is a JSON pointer rather than a plain name. """
    return not fragment or fragment.startswith('/')


def resolve(document: Any, pointer: str) -> Any:
    """
    Resolve a pointer in a document.

    Raises:
        JsonPointerException: If the pointer does not resolve.
    """
    return jsonpointer.resolve_pointer(document, pointer)


def exists(document: Any, pointer: str) -> bool:
    """ True if the pointer resolves in the document. """
    try:
        resolve(document, pointer)
    except JsonPointerException:
        return False
    return True
