import logging

import httpx
import pytest
import respx
from halnav import (
    HalClient,
    HalParseError,
    HalPreconditionError,
    HalTransportError,
)
from httpx import Response

from conftest import BASE_URL, fixture_bytes


def _json(name):
    return Response(
        200,
        content=fixture_bytes(name),
        headers={"Content-Type": "application/hal+json"},
    )


@respx.mock
def test_get_parses_resource(client):
    route = respx.get(f"{BASE_URL}/orders").mock(return_value=_json("response.json"))

    resource = client.get("/orders")

    assert route.called
    assert route.calls[0].request.headers["Accept"] == "application/hal+json"
    assert resource.status_code == 200
    assert resource.get_self_uri() == "/orders"
    assert resource.context.url_prefix == BASE_URL
    assert resource.client is client
    for child in resource.get_resources("orders"):
        assert child.status_code == 200


@respx.mock
def test_status_code_is_recorded(client):
    respx.get(f"{BASE_URL}/orders/999").mock(
        return_value=Response(404, json={"message": "Not found"})
    )

    resource = client.get("/orders/999")

    assert resource.status_code == 404
    assert resource.get_string("message") == "Not found"


@respx.mock
def test_next_follows_link(client):
    route = respx.route(method="GET", host="api.example.com", path="/orders").mock(
        side_effect=[_json("response.json"), _json("response_next.json")]
    )

    first = client.get("/orders")
    assert first.has_next()
    second = first.next()

    assert route.call_count == 2
    assert str(route.calls[1].request.url) == f"{BASE_URL}/orders?page=2"
    assert not second.has_next()
    assert second.get_self_uri() == first.get_next_uri()
    assert second.get_int("currentlyProcessing") == 0
    assert second.get_int("shippedToday") == 350


@respx.mock
def test_next_without_link_is_precondition_error(client):
    respx.get(f"{BASE_URL}/orders").mock(return_value=_json("response_next.json"))

    resource = client.get("/orders")

    with pytest.raises(HalPreconditionError):
        resource.next()


@respx.mock
def test_load_hydrates_embedded_resource(client):
    respx.get(f"{BASE_URL}/orders").mock(return_value=_json("response.json"))
    respx.get(f"{BASE_URL}/orders/123").mock(return_value=_json("response_self.json"))

    partial = client.get("/orders").get_resource("orders")
    assert partial is not None
    assert not partial.has_property("itemCount")
    assert not partial.has_property("coupon")

    full = partial.load()

    assert full.get_self_uri() == partial.get_self_uri()
    assert full.get_int("itemCount") == 10
    assert full.get_boolean("coupon") is True


@respx.mock
def test_follow_expands_templated_link(client):
    route = respx.route(method="GET", host="api.example.com", path="/orders").mock(
        side_effect=[_json("response.json"), _json("response_self.json")]
    )
    root = client.get("/orders")

    found = root.follow("find", id=123)

    assert str(route.calls.last.request.url) == f"{BASE_URL}/orders?id=123"
    assert found.get_self_uri() == "/orders/123"
    with pytest.raises(HalPreconditionError):
        root.follow("missing")


@respx.mock
def test_redirect_sets_prefix_for_relative_links(client):
    respx.get(f"{BASE_URL}/start").mock(
        return_value=Response(
            302, headers={"Location": "https://mirror.example.com:8443/orders"}
        )
    )
    mirror = respx.route(method="GET", host="mirror.example.com", path="/orders").mock(
        side_effect=[_json("response.json"), _json("response_next.json")]
    )

    resource = client.get("/start")
    assert resource.context.url_prefix == "https://mirror.example.com:8443"

    resource.next()
    assert str(mirror.calls[1].request.url) == (
        "https://mirror.example.com:8443/orders?page=2"
    )


@respx.mock
def test_transport_error_is_wrapped(client):
    respx.get(f"{BASE_URL}/orders").mock(side_effect=httpx.ConnectError("boom"))

    with pytest.raises(HalTransportError) as exc:
        client.get("/orders")

    assert isinstance(exc.value.__cause__, httpx.ConnectError)
    assert exc.value.url == "/orders"


@respx.mock
def test_non_json_body_raises_parse_error(client):
    respx.get(f"{BASE_URL}/orders").mock(
        return_value=Response(200, text="<html>Not JSON</html>")
    )

    with pytest.raises(HalParseError):
        client.get("/orders")


@respx.mock
def test_malformed_embedded_raises_parse_error(client):
    respx.get(f"{BASE_URL}/orders").mock(
        return_value=Response(200, json={"_embedded": {"orders": "nope"}})
    )

    with pytest.raises(HalParseError):
        client.get("/orders")


@respx.mock
def test_fetch_yields_status_tokens_and_url(client):
    respx.get(f"{BASE_URL}/orders").mock(return_value=Response(201, json={"a": 1}))

    with client.fetch("/orders") as doc:
        assert doc.status_code == 201
        assert str(doc.url) == f"{BASE_URL}/orders"
        assert doc.tokens.decode_generic() == {"a": 1.0}


@respx.mock
def test_fetch_logs_success(client, caplog):
    caplog.set_level(logging.INFO, logger="halnav.client")
    respx.get(f"{BASE_URL}/orders").mock(return_value=_json("response.json"))

    client.get("/orders")

    record = next(r for r in caplog.records if r.getMessage() == "hal_fetch")
    assert record.method == "GET"
    assert record.status == 200
    assert record.url == f"{BASE_URL}/orders"
    assert record.duration_ms >= 0


@respx.mock
def test_fetch_logs_exception(client, caplog):
    caplog.set_level(logging.INFO, logger="halnav.client")
    respx.get(f"{BASE_URL}/orders").mock(side_effect=httpx.ReadTimeout("slow"))

    with pytest.raises(HalTransportError):
        client.get("/orders")

    record = next(r for r in caplog.records if r.getMessage() == "hal_fetch")
    assert record.status == "exception"
    assert record.error_type == "ReadTimeout"


def test_injected_http_client_is_not_closed():
    http = httpx.Client(base_url=BASE_URL)
    with HalClient(http=http):
        pass
    assert not http.is_closed
    http.close()


class _BrokenBody(httpx.SyncByteStream):
    def __iter__(self):
        yield b'{"a": '
        raise httpx.ReadError("connection reset")


@respx.mock
def test_body_failure_is_logged_once(client, caplog):
    caplog.set_level(logging.INFO, logger="halnav.client")
    respx.get(f"{BASE_URL}/orders").mock(
        return_value=Response(200, stream=_BrokenBody())
    )

    with pytest.raises(HalTransportError) as exc:
        client.get("/orders")

    assert isinstance(exc.value.__cause__, httpx.ReadError)
    events = [r for r in caplog.records if r.getMessage() == "hal_fetch"]
    assert len(events) == 1
    assert events[0].status == "exception"
    assert events[0].error_type == "ReadError"


@respx.mock
def test_parse_failure_is_logged_once(client, caplog):
    caplog.set_level(logging.INFO, logger="halnav.client")
    respx.get(f"{BASE_URL}/orders").mock(
        return_value=Response(200, json={"_embedded": {"orders": "nope"}})
    )

    with pytest.raises(HalParseError):
        client.get("/orders")

    events = [r for r in caplog.records if r.getMessage() == "hal_fetch"]
    assert [e.status for e in events] == [200]
