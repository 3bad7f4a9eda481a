import asyncio
import inspect
import sys
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import MagicMock

import httpx
import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = PROJECT_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from hostgeo.constants import ASN_DB_FILENAME, CITY_DB_FILENAME
from hostgeo.provisioner import DatabaseProvisioner


def pytest_configure(config):
    """Register compatibility markers and defaults."""

    config.addinivalue_line("markers", "asyncio: mark a test as requiring the event loop")


@pytest.hookimpl(tryfirst=True)
def pytest_pyfunc_call(pyfuncitem):
    """Execute ``async`` tests using a minimal event loop implementation."""

    testfunction = pyfuncitem.obj
    if not inspect.iscoroutinefunction(testfunction):
        return None

    signature = inspect.signature(testfunction)
    call_args = {
        name: value for name, value in pyfuncitem.funcargs.items() if name in signature.parameters
    }

    loop = asyncio.new_event_loop()
    try:
        asyncio.set_event_loop(loop)
        loop.run_until_complete(testfunction(**call_args))
        loop.run_until_complete(loop.shutdown_asyncgens())
        loop.run_until_complete(loop.shutdown_default_executor())
    finally:
        asyncio.set_event_loop(None)
        loop.close()

    return True


@pytest.fixture
def fs(tmp_path, monkeypatch):
    """Lightweight stand-in for the pyfakefs fixture."""

    class SimpleFS:
        def __init__(self, base_path: Path):
            self.base_path = base_path

        def create_file(self, relative_path: str, contents: str | bytes = "") -> Path:
            target = self.base_path / relative_path
            target.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(contents, bytes):
                target.write_bytes(contents)
            else:
                target.write_text(contents)
            return target

    monkeypatch.chdir(tmp_path)
    return SimpleFS(tmp_path)


@pytest.fixture
def db_dir(fs):
    """A database directory that already holds both database files."""
    fs.create_file(f"geoip/{CITY_DB_FILENAME}", contents=b"city_data")
    fs.create_file(f"geoip/{ASN_DB_FILENAME}", contents=b"asn_data")
    return fs.base_path / "geoip"


@pytest.fixture
def offline_provisioner():
    """A provisioner that fails the test if it ever opens an HTTP client."""

    def client_factory():
        raise AssertionError("unexpected network access")

    return DatabaseProvisioner(client_factory=client_factory)


@pytest.fixture
def mock_transport_factory():
    """Build client factories backed by ``httpx.MockTransport``.

    ``routes`` maps a URL to ``(status_code, body)``; every request is
    recorded on ``factory.requests``.
    """

    def make(routes):
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(str(request.url))
            status, body = routes[str(request.url)]
            return httpx.Response(status, content=body)

        def factory():
            return httpx.Client(transport=httpx.MockTransport(handler))

        factory.requests = requests
        return factory

    return make


def make_city_response(
    *,
    country=("US", {"en": "United States", "de": "Vereinigte Staaten"}),
    city_names=None,
    subdivisions=(),
    latitude=37.751,
    longitude=-97.822,
    time_zone="America/Chicago",
    accuracy_radius=1000,
    postal_code=None,
):
    """Shape-compatible stand-in for ``geoip2.models.City``."""
    return SimpleNamespace(
        continent=SimpleNamespace(code="NA", names={"en": "North America"}),
        country=SimpleNamespace(iso_code=country[0], names=country[1]),
        city=SimpleNamespace(names=city_names or {}),
        subdivisions=[
            SimpleNamespace(iso_code=code, names=names) for code, names in subdivisions
        ],
        location=SimpleNamespace(
            latitude=latitude,
            longitude=longitude,
            time_zone=time_zone,
            accuracy_radius=accuracy_radius,
        ),
        postal=SimpleNamespace(code=postal_code),
    )


def make_asn_response(number=15169, organization="GOOGLE"):
    return SimpleNamespace(
        autonomous_system_number=number,
        autonomous_system_organization=organization,
    )


@pytest.fixture
def fake_readers():
    """Reader mocks keyed by database file name, installed by patching ``Reader``."""
    readers = {CITY_DB_FILENAME: MagicMock(name="city_reader"), ASN_DB_FILENAME: MagicMock(name="asn_reader")}
    readers[CITY_DB_FILENAME].city.return_value = make_city_response(
        city_names={"en": "Mountain View"},
        subdivisions=[("CA", {"en": "California"})],
        latitude=37.386,
        longitude=-122.0838,
        time_zone="America/Los_Angeles",
        postal_code="94035",
    )
    readers[ASN_DB_FILENAME].asn.return_value = make_asn_response()

    def reader_for(path, *args, **kwargs):
        return readers[Path(path).name]

    readers["factory"] = reader_for
    return readers


@pytest.fixture
def city_response():
    """Factory for city responses; see ``make_city_response``."""
    return make_city_response


@pytest.fixture
def asn_response():
    return make_asn_response
