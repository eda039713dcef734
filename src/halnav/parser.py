from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Dict, List, Optional, Union

from .errors import HalParseError
from .link import LinkRecord
from .resource import ParseContext, Resource, url_prefix
from .tokens import Token, TokenStream

if TYPE_CHECKING:
    from .client import HalClient

LINKS = "_links"
EMBEDDED = "_embedded"

log = logging.getLogger("halnav.parser")


class HalDocumentParser:
    """
    Single-pass HAL+JSON parser.

    `_links` and `_embedded` are handled as reserved sections; every other key
    becomes a resource property. Embedded resources are parsed recursively
    with the same ParseContext as their document. Resources are bound to
    `client` so they can follow their links.
    """

    def __init__(self, client: Optional["HalClient"] = None):
        self.client = client

    def parse(self, tokens: TokenStream, context: ParseContext) -> Resource:
        resource = Resource(context, client=self.client)
        tokens.begin_object()
        while tokens.peek() is Token.NAME:
            name = tokens.next_name()
            if name == LINKS:
                self._parse_links(tokens, resource)
            elif name == EMBEDDED:
                self._parse_embedded(tokens, resource, context)
            else:
                self._parse_property(tokens, resource, name)
        tokens.end_object()
        return resource

    def _parse_links(self, tokens: TokenStream, resource: Resource) -> None:
        value = tokens.decode_generic()
        if value is None:
            return
        if not isinstance(value, dict):
            raise HalParseError(
                f"{LINKS} value is a {type(value).__name__} and must be an object"
            )
        links: Dict[str, LinkRecord] = {}
        for relation, entry in value.items():
            if entry is None:
                continue
            links[relation] = LinkRecord.from_json(relation, entry)
        resource._put_links(links)

    def _parse_embedded(
        self, tokens: TokenStream, resource: Resource, context: ParseContext
    ) -> None:
        tokens.begin_object()
        while tokens.has_next():
            relation = tokens.next_name()
            token = tokens.peek()
            if token is Token.BEGIN_OBJECT:
                resource._put_embedded(relation, [self.parse(tokens, context)])
            elif token is Token.BEGIN_ARRAY:
                tokens.begin_array()
                entries: List[Resource] = []
                while tokens.peek() is Token.BEGIN_OBJECT:
                    entries.append(self.parse(tokens, context))
                tokens.end_array()
                # An empty array leaves the relation absent.
                if entries:
                    resource._put_embedded(relation, entries)
            else:
                raise HalParseError(
                    f"{EMBEDDED} value for {relation!r} is a {token.name} "
                    f"and must be an array or object"
                )
        tokens.end_object()

    def _parse_property(
        self, tokens: TokenStream, resource: Resource, name: str
    ) -> None:
        token = tokens.peek()
        if token is Token.BEGIN_OBJECT:
            resource._set_property(name, tokens.decode_generic())
        elif token is Token.STRING:
            resource._set_property(name, tokens.next_string())
        elif token is Token.NUMBER:
            resource._set_property(name, tokens.next_number())
        elif token is Token.NULL:
            tokens.next_null()
            resource._set_property(name, None)
        elif token is Token.BOOLEAN:
            resource._set_property(name, tokens.next_boolean())
        else:
            raise HalParseError(
                f"Unrecognized value token {token.name} for property {name!r}"
            )


def parse_tokens(
    tokens: TokenStream,
    context: ParseContext,
    *,
    client: Optional["HalClient"] = None,
) -> Resource:
    """Parse a whole document and always release the token stream."""
    try:
        resource = HalDocumentParser(client).parse(tokens, context)
    except HalParseError as exc:
        log.debug("hal.parse_failed", extra={"error_type": type(exc).__name__})
        raise
    finally:
        tokens.close()
    return resource


def parse_document(
    data: Union[bytes, str],
    *,
    status_code: int = 200,
    url: Optional[str] = None,
    client: Optional["HalClient"] = None,
) -> Resource:
    """
    Parse an in-memory HAL+JSON body.
    `url` is the address the body came from; root-relative hrefs resolve
    against its scheme and host.
    """
    context = ParseContext(
        status_code=status_code,
        url_prefix=url_prefix(url) if url else None,
    )
    return parse_tokens(TokenStream.from_bytes(data), context, client=client)


__all__ = [
    "HalDocumentParser",
    "parse_tokens",
    "parse_document",
    "LINKS",
    "EMBEDDED",
]
