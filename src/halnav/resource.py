from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Dict, Iterator, List, Mapping, Optional, Tuple

import httpx

from .errors import HalPreconditionError
from .iterator import PaginationIterator
from .link import LinkRecord
from .properties import JsonValue, PropertyAccessors, PropertyBag

if TYPE_CHECKING:
    from .client import HalClient

SELF = "self"
NEXT = "next"
FIND = "find"


def url_prefix(url: Any) -> str:
    """
    Scheme, host and explicit port of a URL.
    Example: 'https://api.example.com:8443/orders?page=2' -> 'https://api.example.com:8443'
    """
    parsed = httpx.URL(str(url))
    host = f"[{parsed.host}]" if ":" in parsed.host else parsed.host
    prefix = f"{parsed.scheme}://{host}"
    if parsed.port is not None:
        return f"{prefix}:{parsed.port}"
    return prefix


@dataclass(frozen=True)
class ParseContext:
    """Transport details shared by a document and every resource embedded in it."""

    status_code: int = 200
    url_prefix: Optional[str] = None


class Resource(PropertyAccessors):
    """
    A parsed HAL resource.
    - links: relation -> LinkRecord, in document order
    - embedded: relation -> non-empty list of child Resources
    - properties: every other top-level key of the JSON object

    Resources are filled by HalDocumentParser and read-only afterwards.
    Embedded children share the status code and URL prefix of their document.
    """

    def __init__(
        self,
        context: Optional[ParseContext] = None,
        *,
        client: Optional["HalClient"] = None,
    ):
        self._context = context or ParseContext()
        self._client = client
        self._properties: Dict[str, JsonValue] = {}
        self._property_bag = PropertyBag(self._properties)
        self._links: Dict[str, LinkRecord] = {}
        self._embedded: Dict[str, List[Resource]] = {}

    # --- construction hooks used by the parser ---

    def _set_property(self, name: str, value: JsonValue) -> None:
        self._properties[name] = value

    def _put_links(self, links: Mapping[str, LinkRecord]) -> None:
        self._links.update(links)

    def _put_embedded(self, relation: str, resources: List["Resource"]) -> None:
        self._embedded[relation] = resources

    # --- state ---

    @property
    def status_code(self) -> int:
        return self._context.status_code

    @property
    def context(self) -> ParseContext:
        return self._context

    @property
    def client(self) -> Optional["HalClient"]:
        return self._client

    @property
    def properties(self) -> PropertyBag:
        return self._property_bag

    @property
    def links(self) -> Mapping[str, LinkRecord]:
        return MappingProxyType(self._links)

    @property
    def embedded(self) -> Mapping[str, List["Resource"]]:
        return MappingProxyType(self._embedded)

    # --- links ---

    def get_link(self, name: str) -> Optional[LinkRecord]:
        return self._links.get(name)

    def get_link_uri(self, name: str) -> Optional[str]:
        link = self.get_link(name)
        return link.href if link else None

    def get_self_uri(self) -> Optional[str]:
        return self.get_link_uri(SELF)

    def get_next_uri(self) -> Optional[str]:
        return self.get_link_uri(NEXT)

    def get_find_uri(self) -> Optional[str]:
        return self.get_link_uri(FIND)

    def has_next(self) -> bool:
        return bool(self.get_next_uri())

    # --- embedded resources ---

    def has_resources(self) -> bool:
        return bool(self._embedded)

    def has_resource(self, name: str) -> bool:
        return bool(self._embedded.get(name))

    def get_resource(self, name: str) -> Optional["Resource"]:
        resources = self._embedded.get(name)
        return resources[0] if resources else None

    def get_resources(self, name: str) -> Optional[List["Resource"]]:
        resources = self._embedded.get(name)
        return list(resources) if resources is not None else None

    def embedded_items(self) -> Iterator[Tuple[str, List["Resource"]]]:
        for relation, resources in self._embedded.items():
            yield relation, list(resources)

    # --- traversal ---

    def resolve_uri(self, href: str) -> str:
        """Make a root-relative href absolute using the originating host."""
        if href.startswith("/") and self._context.url_prefix:
            return self._context.url_prefix + href
        return href

    def _request(self, href: str) -> "Resource":
        if self._client is None:
            raise HalPreconditionError(
                "Resource is not bound to a client; fetch it with HalClient.get()"
            )
        return self._client.get(self.resolve_uri(href))

    def _require_uri(self, relation: str) -> str:
        href = self.get_link_uri(relation)
        if not href:
            raise HalPreconditionError(f"Resource does not have a {relation!r} link")
        return href

    def next(self) -> "Resource":
        """Request and parse the resource at the 'next' link."""
        return self._request(self._require_uri(NEXT))

    def load(self) -> "Resource":
        """
        Request and parse this resource's 'self' link.
        Useful to hydrate an embedded resource that only carries a subset of
        its properties.
        """
        return self._request(self._require_uri(SELF))

    def follow(self, relation: str, *values: Any, **kwargs: Any) -> "Resource":
        """Expand the link for `relation` with the given values and fetch it."""
        self._require_uri(relation)
        return self._request(self._links[relation].expand(*values, **kwargs))

    def __iter__(self) -> PaginationIterator:
        return PaginationIterator(self)

    def __repr__(self) -> str:
        return (
            f"<Resource status={self.status_code} self={self.get_self_uri()!r} "
            f"links={list(self._links)} embedded={list(self._embedded)}>"
        )


__all__ = ["Resource", "ParseContext", "url_prefix", "SELF", "NEXT", "FIND"]
