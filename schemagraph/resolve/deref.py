"""Document-level `$ref` dereferencing."""

from __future__ import annotations

import logging
import re
from typing import Any, Awaitable, Callable, Dict, Optional

from schemagraph.core.config import ResolutionConfig
from schemagraph.core.exceptions import BadReferenceError
from schemagraph.core.interfaces import DocumentFetcher
from schemagraph.core.models import Resolved
from schemagraph.pointer import evaluate_pointer, fragment_to_pointer, parse_pointer
from schemagraph.resolve.fetcher import HttpDocumentFetcher

logger = logging.getLogger(__name__)

_ADDRESS_SEPARATOR = re.compile(r"/?#/?")

Dereferencer = Callable[[Optional[str]], Awaitable[Resolved]]


async def deref(
    options: ResolutionConfig,
    id_dict: Dict[str, Any],
    root_schema: Any,
    ref: Optional[str] = None,
    fetcher: Optional[DocumentFetcher] = None,
) -> Resolved:
    """
    Resolve a `$ref` string to the value it designates.

    Args:
        options: Resolution options; remote addresses are only fetched when
            `allow_remote_resolution` is set
        id_dict: Already-known `$id` URI -> subschema pairs (see `prepare_schema`)
        root_schema: Schema to evaluate the pointer against when the reference
            has no address, or remote resolution is disabled
        ref: The [JSON pointer](https://datatracker.ietf.org/doc/html/rfc6901)
            reference, optionally prefixed by an address
        fetcher: Fetcher for remote addresses; defaults to HTTP

    Returns:
        Resolved pair of the dereferenced value and the error, if any
    """
    if ref is None:
        return Resolved({})
    if ref in id_dict:
        return Resolved(id_dict[ref])

    parts = _ADDRESS_SEPARATOR.split(ref, maxsplit=1)
    address = parts[0]
    pointer = fragment_to_pointer(parts[1]) if len(parts) > 1 else ""

    if address and options.allow_remote_resolution:
        document, error = await _fetch(address, options, fetcher)
        if error is not None:
            return Resolved({}, error)
        root_schema = document

    value, error = evaluate_pointer(root_schema, parse_pointer(pointer))
    if error is not None:
        logger.debug(f"Could not dereference {ref}: {error}")
    return Resolved(value, error)


async def deref_schema(resolver: Dereferencer, schema: Dict[str, Any]) -> Resolved:
    """
    Dereference a schema's `$ref` and merge the target over it.

    Args:
        resolver: Callable resolving a `$ref` string, e.g. a `deref` partial
        schema: Schema holding a `$ref`

    Returns:
        Resolved pair of the merged schema (or the input schema on failure)
        and the error, if any
    """
    target, error = await resolver(schema.get("$ref"))
    if error is not None:
        return Resolved(schema, error)
    if not isinstance(target, dict):
        return Resolved(schema, BadReferenceError(str(schema.get("$ref")), target))
    return Resolved({**schema, **target})


async def _fetch(
    address: str, options: ResolutionConfig, fetcher: Optional[DocumentFetcher]
) -> Resolved:
    if fetcher is not None:
        return await fetcher.fetch(address)

    async with HttpDocumentFetcher(options.fetch) as http_fetcher:
        return await http_fetcher.fetch(address)
