"""JSON Pointer (RFC 6901) utilities."""

from __future__ import annotations

from typing import Any, List, Sequence
from urllib.parse import quote, unquote

from schemagraph.core.exceptions import DanglingPointerSegmentError
from schemagraph.core.models import Resolved

# Characters allowed unescaped in a URI fragment (RFC 3986 section 3.5)
_FRAGMENT_SAFE = "/?:@!$&'()*+,;=~-._"


def escape_token(token: str) -> str:
    """Escape a reference token: `~` becomes `~0`, `/` becomes `~1`."""
    return token.replace("~", "~0").replace("/", "~1")


def unescape_token(token: str) -> str:
    """Unescape a reference token: `~1` becomes `/`, then `~0` becomes `~`."""
    return token.replace("~1", "/").replace("~0", "~")


def parse_pointer(pointer: str) -> List[str]:
    """
    Split a JSON Pointer into unescaped reference tokens.

    The leading `/` is optional so that pointers split off a `#/` fragment
    can be passed directly. The empty pointer addresses the whole document.
    """
    if not pointer:
        return []
    if pointer.startswith("/"):
        pointer = pointer[1:]
    return [unescape_token(token) for token in pointer.split("/")]


def join_pointer(tokens: Sequence[str]) -> str:
    """Build a JSON Pointer from unescaped reference tokens."""
    return "".join("/" + escape_token(str(token)) for token in tokens)


def pointer_to_fragment(pointer: str) -> str:
    """Percent-encode a JSON Pointer for use as a URI fragment."""
    return quote(pointer, safe=_FRAGMENT_SAFE)


def fragment_to_pointer(fragment: str) -> str:
    """Decode a URI fragment into a JSON Pointer."""
    return unquote(fragment)


def normalize_fragment(fragment: str) -> str:
    """Bring a fragment to the percent-encoding used for canonical URIs."""
    return pointer_to_fragment(fragment_to_pointer(fragment))


def is_pointer_fragment(fragment: str) -> bool:
    """Whether a fragment is a JSON Pointer, as opposed to a plain-name anchor."""
    return not fragment or fragment.startswith("/")


def _is_array_index(token: str, length: int) -> bool:
    if not token.isdigit() or (len(token) > 1 and token.startswith("0")):
        return False
    return int(token) < length


def evaluate_pointer(document: Any, tokens: Sequence[str]) -> Resolved:
    """
    Evaluate reference tokens against a JSON value.

    Args:
        document: JSON value to index into
        tokens: Unescaped reference tokens

    Returns:
        Resolved pair; on a missing segment the value is the last object
        reached and the error is a DanglingPointerSegmentError.
    """
    current = document
    for index, token in enumerate(tokens):
        if isinstance(current, dict) and token in current:
            current = current[token]
        elif isinstance(current, list) and _is_array_index(token, len(current)):
            current = current[int(token)]
        else:
            return Resolved(
                current,
                DanglingPointerSegmentError(token, join_pointer(tokens[: index + 1])),
            )
    return Resolved(current)
