"""
Name resolution for prefixed names.

Maps (prefix, local name, prefix table) to an absolute identifier, and
splits an absolute identifier back into (namespace, local name). Import
and export both go through these two functions so a name written by the
serializer resolves to exactly the identifier it came from.
"""

import re
from typing import Mapping, Optional, Tuple

from triples.errors import InvalidIdentifier, UnresolvedPrefix


RDF_NS = "http://www.w3.org/1999/02/22-rdf-syntax-ns#"
RDF_TYPE = f"{RDF_NS}type"

_ILLEGAL_IDENTIFIER_CHARS = re.compile(r'[\s<>"{}|^`]')

# scheme://... with nothing that would break a bracketed reference
_ABSOLUTE_IDENTIFIER = re.compile(r'^[A-Za-z][A-Za-z0-9+.\-]*://[^\s<>"{}|^`\\]+$')


def validate_identifier(identifier: str) -> str:
    """Return identifier unchanged, or raise InvalidIdentifier."""
    if not identifier:
        raise InvalidIdentifier(identifier, "empty identifier")
    if _ILLEGAL_IDENTIFIER_CHARS.search(identifier):
        raise InvalidIdentifier(identifier)
    return identifier


def is_absolute_identifier(text: str) -> bool:
    """True if text reads as an absolute identifier such as http://x/y."""
    return bool(_ABSOLUTE_IDENTIFIER.match(text))


def join(namespace: str, local: str) -> str:
    """
    Join a namespace and a local name.

    A namespace ending in '#' is concatenated directly. Any other namespace
    loses its trailing '/' characters and is joined with a single '/'.
    """
    if namespace.endswith("#"):
        return f"{namespace}{local}"
    return f"{namespace.rstrip('/')}/{local}"


def resolve(
    prefix: Optional[str],
    local: str,
    table: Mapping[str, str],
) -> str:
    """
    Resolve a possibly-prefixed name to an absolute identifier.

    Args:
        prefix: The mnemonic, or None for a name that is already absolute
            (or intentionally bare)
        local: The local part of the name
        table: Prefix table mapping mnemonic to namespace

    Returns:
        The identifier string

    Raises:
        UnresolvedPrefix: If prefix is not bound in table
        InvalidIdentifier: If the result is not a well-formed identifier
    """
    if prefix is None:
        return validate_identifier(local)
    namespace = table.get(prefix)
    if namespace is None:
        raise UnresolvedPrefix(prefix)
    return validate_identifier(join(namespace, local))


def split(identifier: str) -> Tuple[str, str]:
    """
    Split an identifier into (namespace, local name).

    The last '#' wins when the text after it holds no '/'; otherwise the
    last '/' is used. The namespace keeps its trailing separator.

    Raises:
        InvalidIdentifier: If the identifier has neither separator
    """
    hash_pos = identifier.rfind("#")
    if hash_pos >= 0 and "/" not in identifier[hash_pos + 1:]:
        return identifier[:hash_pos + 1], identifier[hash_pos + 1:]
    slash_pos = identifier.rfind("/")
    if slash_pos >= 0:
        return identifier[:slash_pos + 1], identifier[slash_pos + 1:]
    raise InvalidIdentifier(identifier, "unsplittable identifier")
