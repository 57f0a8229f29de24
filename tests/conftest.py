# tests/conftest.py
import pytest
import httpx
from httpx import AsyncClient, ASGITransport
from typing import AsyncGenerator, Generator, List

from octogrbl.main import app
from octogrbl.dependencies import get_driver, get_http_client
from octogrbl.driver import OctoPrintGrblDriver


class FakePrintHost:
    """
    Records every request it receives and answers with ``status_code``.
    Setting ``error`` makes the transport raise it instead.
    """

    def __init__(self, status_code: int = 201):
        self.status_code = status_code
        self.error = None
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return httpx.Response(self.status_code, json={"done": True})


@pytest.fixture
def print_host() -> FakePrintHost:
    return FakePrintHost()

@pytest.fixture
async def host_client(print_host: FakePrintHost) -> AsyncGenerator[AsyncClient, None]:
    """
    AsyncClient whose requests land in the fake print host.
    """
    async with AsyncClient(transport=httpx.MockTransport(print_host)) as hc:
        yield hc

@pytest.fixture
def driver() -> Generator[OctoPrintGrblDriver, None, None]:
    """
    Fresh driver, installed as the application's driver.
    """
    drv = OctoPrintGrblDriver()
    drv.set_property("Laserbed width", 300)
    drv.set_property("Laserbed height", 200)
    app.dependency_overrides[get_driver] = lambda: drv
    yield drv
    app.dependency_overrides.pop(get_driver, None)

@pytest.fixture
async def client(host_client: AsyncClient) -> AsyncGenerator[AsyncClient, None]:
    """
    Test client for the API, wired to the fake print host.
    """
    app.dependency_overrides[get_http_client] = lambda: host_client
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.pop(get_http_client, None)
