from pathlib import Path

import pytest

FIXTURES = Path(__file__).parent / "fixtures"
BASE_URL = "https://api.example.com"


def fixture_bytes(name: str) -> bytes:
    return (FIXTURES / name).read_bytes()


@pytest.fixture
def orders_document() -> bytes:
    return fixture_bytes("response.json")


@pytest.fixture
def client():
    from halnav import HalClient

    with HalClient(base_url=BASE_URL) as c:
        yield c
