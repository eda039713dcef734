from __future__ import annotations

import contextlib
import io
from enum import Enum
from typing import Any, BinaryIO, Dict, Iterable, Iterator, List, Optional, Tuple

import ijson

from .errors import HalParseError


class Token(str, Enum):
    BEGIN_OBJECT = "begin_object"
    END_OBJECT = "end_object"
    BEGIN_ARRAY = "begin_array"
    END_ARRAY = "end_array"
    NAME = "name"
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    NULL = "null"
    END_DOCUMENT = "end_document"


# ijson backends differ on number events; all map to NUMBER.
_EVENT_TOKENS = {
    "start_map": Token.BEGIN_OBJECT,
    "end_map": Token.END_OBJECT,
    "start_array": Token.BEGIN_ARRAY,
    "end_array": Token.END_ARRAY,
    "map_key": Token.NAME,
    "string": Token.STRING,
    "number": Token.NUMBER,
    "integer": Token.NUMBER,
    "double": Token.NUMBER,
    "boolean": Token.BOOLEAN,
    "null": Token.NULL,
}


class ChunkReader:
    """File-like `read(size)` over an iterator of byte chunks."""

    def __init__(self, chunks: Iterable[bytes]):
        self._chunks = iter(chunks)
        self._buffer = b""

    def read(self, size: int = -1) -> bytes:
        while size < 0 or len(self._buffer) < size:
            try:
                self._buffer += next(self._chunks)
            except StopIteration:
                break
        if size < 0:
            data, self._buffer = self._buffer, b""
        else:
            data, self._buffer = self._buffer[:size], self._buffer[size:]
        return data


class TokenStream:
    """
    Cursor over the JSON tokens of a byte stream with one token of lookahead.

    Built on ijson.basic_parse so a document is consumed incrementally.
    Numbers are decoded as floats. Invalid JSON, premature end of input and
    unexpected token kinds all raise HalParseError.
    """

    def __init__(self, source: BinaryIO):
        self._source = source
        self._events: Iterator[Tuple[str, Any]] = ijson.basic_parse(
            source, use_float=True
        )
        self._pending: Optional[Tuple[Token, Any]] = None
        self._closed = False

    @classmethod
    def from_bytes(cls, data: bytes | str) -> "TokenStream":
        if isinstance(data, str):
            data = data.encode("utf-8")
        return cls(io.BytesIO(data))

    def _fill(self) -> Tuple[Token, Any]:
        if self._pending is None:
            if self._closed:
                raise HalParseError("Token stream is closed")
            try:
                event, value = next(self._events)
            except StopIteration:
                self._pending = (Token.END_DOCUMENT, None)
            except ijson.JSONError as exc:
                raise HalParseError(f"Invalid JSON: {exc}") from exc
            else:
                self._pending = (_EVENT_TOKENS[event], value)
        return self._pending

    def peek(self) -> Token:
        return self._fill()[0]

    def has_next(self) -> bool:
        return self.peek() not in (Token.END_OBJECT, Token.END_ARRAY, Token.END_DOCUMENT)

    def _expect(self, expected: Token) -> Any:
        token, value = self._fill()
        if token is not expected:
            raise HalParseError(
                f"Expected {expected.name} but was {token.name}"
            )
        self._pending = None
        return value

    def begin_object(self) -> None:
        self._expect(Token.BEGIN_OBJECT)

    def end_object(self) -> None:
        self._expect(Token.END_OBJECT)

    def begin_array(self) -> None:
        self._expect(Token.BEGIN_ARRAY)

    def end_array(self) -> None:
        self._expect(Token.END_ARRAY)

    def next_name(self) -> str:
        return self._expect(Token.NAME)

    def next_string(self) -> str:
        return self._expect(Token.STRING)

    def next_number(self) -> float:
        return float(self._expect(Token.NUMBER))

    def next_boolean(self) -> bool:
        return self._expect(Token.BOOLEAN)

    def next_null(self) -> None:
        self._expect(Token.NULL)

    def decode_generic(self) -> Any:
        """Consume the next value, whatever its shape, as plain Python data."""
        token = self.peek()
        if token is Token.BEGIN_OBJECT:
            self.begin_object()
            obj: Dict[str, Any] = {}
            while self.peek() is Token.NAME:
                key = self.next_name()
                obj[key] = self.decode_generic()
            self.end_object()
            return obj
        if token is Token.BEGIN_ARRAY:
            self.begin_array()
            items: List[Any] = []
            while self.has_next():
                items.append(self.decode_generic())
            self.end_array()
            return items
        if token is Token.STRING:
            return self.next_string()
        if token is Token.NUMBER:
            return self.next_number()
        if token is Token.BOOLEAN:
            return self.next_boolean()
        if token is Token.NULL:
            self.next_null()
            return None
        raise HalParseError(f"Expected a JSON value but was {token.name}")

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._pending = None
        close = getattr(self._events, "close", None)
        if close is not None:
            close()
        source_close = getattr(self._source, "close", None)
        if source_close is not None:
            # A failed release must not mask the error that ended the parse.
            with contextlib.suppress(OSError):
                source_close()

    def __enter__(self) -> "TokenStream":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


__all__ = ["Token", "TokenStream", "ChunkReader"]
