"""halnav: navigate HAL+JSON resources, their links and embedded resources."""

from .client import FetchedDocument, HalClient
from .config import ClientConfig, create_client_from_env, load_env_config
from .errors import (
    HalError,
    HalParseError,
    HalPreconditionError,
    HalTransportError,
)
from .iterator import IteratorState, PaginationIterator
from .link import LinkRecord
from .parser import HalDocumentParser, parse_document, parse_tokens
from .properties import JsonValue, PropertyBag
from .resource import ParseContext, Resource, url_prefix
from .tokens import Token, TokenStream

__all__ = [
    # Client
    "HalClient",
    "FetchedDocument",
    # Model
    "Resource",
    "LinkRecord",
    "PropertyBag",
    "JsonValue",
    "ParseContext",
    "url_prefix",
    # Parsing
    "HalDocumentParser",
    "parse_document",
    "parse_tokens",
    "Token",
    "TokenStream",
    # Traversal
    "PaginationIterator",
    "IteratorState",
    # Exceptions
    "HalError",
    "HalTransportError",
    "HalParseError",
    "HalPreconditionError",
    # Config helpers
    "ClientConfig",
    "load_env_config",
    "create_client_from_env",
]
