import logging
import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Dict, Iterator, Optional

import httpx

from .config import ClientConfig, load_env_config
from .errors import HalTransportError
from .logging import log_event
from .parser import parse_tokens
from .resource import ParseContext, Resource, url_prefix
from .tokens import ChunkReader, TokenStream

HAL_JSON = "application/hal+json"


@dataclass(frozen=True)
class FetchedDocument:
    status_code: int
    tokens: TokenStream
    url: httpx.URL


class HalClient:
    """
    Synchronous HTTP client that turns HAL+JSON responses into Resources.
    - Sends Accept: application/hal+json and follows redirects
    - Streams the body straight into the parser
    - Raises HalTransportError on network/protocol failures, never retries
    - Any status code is accepted; it is recorded on the Resource
    """

    def __init__(
        self,
        *,
        base_url: str = "",
        timeout_seconds: float = 10.0,
        accept: str = HAL_JSON,
        follow_redirects: bool = True,
        headers: Optional[Dict[str, str]] = None,
        logger: Optional[logging.Logger] = None,
        http: Optional[httpx.Client] = None,
    ):
        self.base_url = (base_url or "").rstrip("/")
        self.timeout_seconds = timeout_seconds
        self.log = logger or logging.getLogger("halnav.client")

        self._owns_http = http is None
        self.http = http or httpx.Client(
            base_url=self.base_url,
            headers={"Accept": accept, **(headers or {})},
            timeout=timeout_seconds,
            follow_redirects=follow_redirects,
        )

    @classmethod
    def from_config(cls, config: ClientConfig, **kwargs) -> "HalClient":
        return cls(
            base_url=config.base_url,
            timeout_seconds=config.timeout_seconds,
            accept=config.accept,
            follow_redirects=config.follow_redirects,
            **kwargs,
        )

    @classmethod
    def from_env(cls, **kwargs) -> "HalClient":
        return cls.from_config(load_env_config(), **kwargs)

    def close(self) -> None:
        if self._owns_http:
            self.http.close()

    def __enter__(self) -> "HalClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @contextmanager
    def fetch(self, url: str) -> Iterator[FetchedDocument]:
        """
        Open a streamed GET for `url` and yield its status, token stream and
        effective (post-redirect) URL. The response is released on exit and
        a single hal_fetch event is logged once the body is done with.
        """
        start = time.perf_counter()
        fields: Dict[str, Any] = {"url": url, "status": "exception"}
        try:
            with self.http.stream("GET", url) as resp:
                fields.update(url=str(resp.url), status=resp.status_code)
                tokens = TokenStream(ChunkReader(resp.iter_bytes()))
                try:
                    yield FetchedDocument(resp.status_code, tokens, resp.url)
                finally:
                    tokens.close()
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            fields.update(status="exception", error_type=type(exc).__name__)
            raise HalTransportError(
                f"Network/transport error calling GET {url}: {exc}", url=url
            ) from exc
        finally:
            log_event(
                "hal_fetch",
                logger=self.log,
                method="GET",
                duration_ms=int((time.perf_counter() - start) * 1000),
                **fields,
            )

    def get(self, url: str) -> Resource:
        """Fetch and parse the HAL document at `url`."""
        with self.fetch(url) as doc:
            context = ParseContext(
                status_code=doc.status_code, url_prefix=url_prefix(doc.url)
            )
            return parse_tokens(doc.tokens, context, client=self)


__all__ = ["HalClient", "FetchedDocument", "HAL_JSON"]
